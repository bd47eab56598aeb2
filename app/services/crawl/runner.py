from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict, Optional

from app.config import CrawlSettings, get_crawl_settings
from app.services.graph.lectures import save_or_update_lectures

from .base import Spider
from .catalog import CrawlReport, crawl_catalog
from .errors import CategoryFetchError
from .importer_adapter import import_lectures_jsonl
from .pipeline import write_jsonl
from .spiders.coloso_spider import ColosoSpider

logger = logging.getLogger(__name__)

SPIDERS: Dict[str, Callable[[CrawlSettings], Spider]] = {
    ColosoSpider.name: ColosoSpider.from_settings,
}


def make_spider(source: str, settings: Optional[CrawlSettings] = None) -> Spider:
    try:
        factory = SPIDERS[source]
    except KeyError:
        raise ValueError(f"Unknown source: {source}")
    return factory(settings or get_crawl_settings())


def run_crawl(source: str, *, settings: Optional[CrawlSettings] = None, workers: Optional[int] = None, save: bool = False) -> CrawlReport:
    settings = settings or get_crawl_settings()
    save_fn = save_or_update_lectures if save else None
    spider = make_spider(source, settings)
    try:
        return crawl_catalog(spider, workers=workers or settings.workers, save_fn=save_fn)
    finally:
        spider.close()


def main(argv: Optional[list] = None) -> int:
    settings = get_crawl_settings()
    parser = argparse.ArgumentParser(description="Run course catalog crawler tasks")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (DEBUG, INFO, WARNING, ...)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    crawl = sub.add_parser("crawl", help="Crawl a source catalog and stage lectures as JSONL")
    crawl.add_argument("source", choices=sorted(SPIDERS), help="Source to crawl")
    crawl.add_argument("--workers", type=int, default=settings.workers, help="Parallel course extractions (1 = sequential)")
    crawl.add_argument("--out-dir", default=settings.out_dir, help="Output directory for JSONL files")
    crawl.add_argument("--save", action="store_true", help="Also upsert lectures into Neo4j")

    imp = sub.add_parser("import", help="Upsert a staged lectures JSONL into Neo4j")
    imp.add_argument("jsonl", help="Path to a staged JSONL file")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "crawl":
        try:
            report = run_crawl(args.source, settings=settings, workers=args.workers, save=args.save)
        except CategoryFetchError as exc:
            logger.error("Crawl aborted: %s", exc)
            return 1
        records = Spider.normalize_records(report.lectures)
        path = write_jsonl(records, out_dir=args.out_dir, filename_prefix=f"lectures-{args.source}")
        print(path)
        return 0

    if args.cmd == "import":
        summary = import_lectures_jsonl(args.jsonl)
        print(summary)
        return 0

    parser.error("unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
