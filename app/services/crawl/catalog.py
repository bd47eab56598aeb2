"""Catalog crawl orchestration.

category tree -> (leaf, course url) work list -> per-url extraction ->
fold into raw courses -> dedupe + taxonomy mapping -> one batch handed to the
persistence callback.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from .base import CanonicalLecture, CategoryNode, CourseResult, RawCourse, Spider, TaxonomyEntry, WorkItem, iter_leaves
from .errors import CategoryListFetchError
from .pipeline import assemble_lectures

logger = logging.getLogger(__name__)

SaveFn = Callable[[str, List[CanonicalLecture]], object]

_RULE = "=" * 50


@dataclass
class CrawlReport:
    source: str
    leaves: int = 0
    failed_leaves: int = 0
    urls: int = 0
    raw_courses: int = 0
    skipped: int = 0
    duplicates: int = 0
    unmapped: int = 0
    lectures: List[CanonicalLecture] = field(default_factory=list)

    def summary(self) -> dict:
        return {
            "source": self.source,
            "leaves": self.leaves,
            "failed_leaves": self.failed_leaves,
            "urls": self.urls,
            "raw_courses": self.raw_courses,
            "skipped": self.skipped,
            "duplicates": self.duplicates,
            "unmapped": self.unmapped,
            "lectures": len(self.lectures),
        }


def build_work_list(spider: Spider, roots: Sequence[CategoryNode], report: Optional[CrawlReport] = None) -> List[WorkItem]:
    """Flatten leaves x listing URLs into an ordered work list.

    A leaf whose listing page cannot be fetched is logged and contributes nothing.
    """
    work: List[WorkItem] = []
    for leaf in iter_leaves(roots):
        if report is not None:
            report.leaves += 1
        logger.info("Get %s courses from %s, %s", spider.name, leaf.main_title, leaf.sub_title)
        try:
            urls = spider.fetch_course_urls(leaf)
        except CategoryListFetchError as exc:
            logger.error("Category courses read failed, %s, %s: %s", leaf.main_title, leaf.sub_title, exc)
            if report is not None:
                report.failed_leaves += 1
            continue
        work.extend(WorkItem(leaf=leaf, url=u) for u in urls)
    return work


def extract_all(spider: Spider, work: Sequence[WorkItem], *, workers: int = 1) -> List[CourseResult]:
    """Run the extractor over every work item.

    Results always come back in work-list order, whatever the worker count,
    so downstream first-seen-wins dedupe follows traversal order.
    """
    if workers <= 1 or len(work) <= 1:
        return [spider.extract(w.leaf, w.url) for w in work]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda w: spider.extract(w.leaf, w.url), work))


def collect_courses(results: Iterable[CourseResult]) -> List[RawCourse]:
    return [r.course for r in results if r.course is not None]


def crawl_catalog(
    spider: Spider,
    *,
    workers: int = 1,
    table: Optional[Sequence[TaxonomyEntry]] = None,
    save_fn: Optional[SaveFn] = None,
) -> CrawlReport:
    """Crawl one source end to end.

    CategoryFetchError from the category tree is the only failure that escapes.
    """
    report = CrawlReport(source=spider.name)

    logger.info(_RULE)
    logger.info("Get %s categories", spider.name)
    logger.info(_RULE)
    roots = spider.fetch_categories()

    logger.info(_RULE)
    logger.info("Get %s courses", spider.name)
    logger.info(_RULE)
    work = build_work_list(spider, roots, report)
    report.urls = len(work)
    results = extract_all(spider, work, workers=workers)
    courses = collect_courses(results)
    report.raw_courses = len(courses)
    report.skipped = len(results) - len(courses)

    logger.info(_RULE)
    logger.info("Convert %s courses to lectures", spider.name)
    lectures, report.duplicates, report.unmapped = assemble_lectures(courses, spider.name, table)
    report.lectures = lectures

    if save_fn is not None:
        save_fn(spider.name, lectures)
    logger.info("Crawl finished: %s", report.summary())
    return report
