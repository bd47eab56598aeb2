from __future__ import annotations

import time
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .errors import CrawlError


def now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


@dataclass
class SourceMeta:
    source_site: str
    source_url: Optional[str]
    fetched_at: str  # ISO8601
    parser: str


@dataclass
class CategoryNode:
    id: int
    title: str
    children: List["CategoryNode"] = field(default_factory=list)


@dataclass(frozen=True)
class LeafCategory:
    """A subcategory together with the title of the main category that owns it."""

    id: int
    main_title: str
    sub_title: str


def iter_leaves(roots: Iterable[CategoryNode]) -> Iterator[LeafCategory]:
    """Yield (main, sub) leaves in tree order. Deeper nesting is ignored."""
    for main in roots:
        for child in main.children:
            yield LeafCategory(id=child.id, main_title=main.title, sub_title=child.title)


@dataclass(frozen=True)
class RawCourse:
    source_id: int
    title: str
    price: int
    description: str
    keywords: str
    instructor: Optional[str]
    main_category: str
    sub_category: str
    url: str
    image_url: Optional[str]
    fetched_at: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return "\t".join(
            str(v)
            for v in (
                self.source_id,
                self.title,
                self.instructor,
                self.price,
                self.main_category,
                self.sub_category,
                self.description,
                self.keywords,
                self.url,
                self.image_url,
            )
        )


@dataclass(frozen=True)
class TaxonomyEntry:
    source_main_category: str
    source_sub_category: str
    canonical_main_category: str
    canonical_sub_category: str


@dataclass
class CanonicalLecture:
    title: str
    source: str
    source_id: str
    url: str
    price: str
    instructor: Optional[str]
    image_url: Optional[str]
    source_main_category: str
    source_sub_category: str
    canonical_main_category: str
    canonical_sub_category: str
    keywords: str
    description: str
    meta: Optional[SourceMeta] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        # Flatten meta for easier downstream processing
        meta = d.pop("meta", None)
        for k, v in (meta or {}).items():
            d[f"meta_{k}"] = v
        return d


@dataclass
class CourseResult:
    """Outcome of one extraction unit: zero or one RawCourse."""

    url: str
    course: Optional[RawCourse] = None
    error: Optional[CrawlError] = None

    @property
    def ok(self) -> bool:
        return self.course is not None


@dataclass(frozen=True)
class WorkItem:
    leaf: LeafCategory
    url: str


class Spider:
    """Catalog spider contract.

    A spider knows how to read one source's category tree, list the course
    URLs of a leaf category and turn a single course URL into a CourseResult.
    """

    name: str = "base"

    def fetch_categories(self) -> List[CategoryNode]:
        raise NotImplementedError

    def fetch_course_urls(self, leaf: LeafCategory) -> List[str]:
        raise NotImplementedError

    def extract(self, leaf: LeafCategory, url: str) -> CourseResult:
        raise NotImplementedError

    def close(self) -> None:
        pass

    @staticmethod
    def normalize_records(items: Iterable[Any]) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for x in items:
            if hasattr(x, "to_dict"):
                out.append(x.to_dict())
            elif isinstance(x, dict):
                out.append(x)
            else:
                raise TypeError(f"Unsupported record type: {type(x)}")
        return out
