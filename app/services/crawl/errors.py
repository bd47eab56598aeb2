"""Crawl failure taxonomy.

Only CategoryFetchError is fatal for a run. Everything else is absorbed at
the smallest unit it concerns (one category, one list item, one course URL,
one raw course) and logged.
"""

from __future__ import annotations


class CrawlError(Exception):
    """Base class for all crawler failures."""


class CategoryFetchError(CrawlError):
    pass


class CategoryListFetchError(CrawlError):
    pass


class MissingAnchorError(CrawlError):
    pass


class CourseFetchError(CrawlError):
    pass


class MissingStructuredDataError(CrawlError):
    pass


class StructuredDataParseError(CrawlError):
    pass


class EmptyOfferError(CrawlError):
    pass


class EmptyPriceSpecError(CrawlError):
    pass


class SupplementaryFetchError(CrawlError):
    pass


class EmptyCourseRecordError(CrawlError):
    pass


class IncompleteCourseError(CrawlError):
    """Course record lacks an id, title or price."""


class NoMappingError(CrawlError):
    def __init__(self, main_category: str, sub_category: str) -> None:
        super().__init__(f"No canonical category for ({main_category!r}, {sub_category!r})")
        self.main_category = main_category
        self.sub_category = sub_category
