"""Course catalog crawling subsystem.

Structure:
- base.py: record types and the Spider contract
- errors.py: failure taxonomy (only CategoryFetchError is fatal)
- text.py: whitespace normalization
- taxonomy.py: source -> canonical category table
- pipeline.py: dedupe, canonical assembly and JSONL staging writer
- catalog.py: crawl orchestration (work list, extraction, fold)
- spiders/: individual source implementations
- importer_adapter.py: read staging and upsert lectures into the graph
- runner.py: tiny CLI entrypoint for manual runs
"""

__all__ = [
    "base",
    "catalog",
    "pipeline",
]
