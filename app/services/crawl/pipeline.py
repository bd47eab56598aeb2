from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .base import CanonicalLecture, RawCourse, SourceMeta, TaxonomyEntry, now_iso
from .errors import NoMappingError
from .taxonomy import COLOSO_TAXONOMY, map_category

logger = logging.getLogger(__name__)


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def dedupe_courses(courses: Iterable[RawCourse]) -> Tuple[List[RawCourse], int]:
    """Keep the first course seen for each source_id, in input order.

    Returns (kept, number_of_discarded_duplicates).
    """
    seen: Set[int] = set()
    kept: List[RawCourse] = []
    duplicates = 0
    for course in courses:
        if course.source_id in seen:
            duplicates += 1
            continue
        seen.add(course.source_id)
        kept.append(course)
    return kept, duplicates


def to_lecture(course: RawCourse, source: str, entry: TaxonomyEntry) -> CanonicalLecture:
    return CanonicalLecture(
        title=course.title,
        source=source,
        source_id=str(course.source_id),
        url=course.url,
        price=str(course.price),
        instructor=course.instructor,
        image_url=course.image_url,
        source_main_category=course.main_category,
        source_sub_category=course.sub_category,
        canonical_main_category=entry.canonical_main_category,
        canonical_sub_category=entry.canonical_sub_category,
        keywords=course.keywords,
        description=course.description,
        meta=SourceMeta(source_site=source, source_url=course.url, fetched_at=course.fetched_at or now_iso(), parser=source),
    )


def assemble_lectures(
    courses: Iterable[RawCourse],
    source: str,
    table: Optional[Sequence[TaxonomyEntry]] = None,
) -> Tuple[List[CanonicalLecture], int, int]:
    """Dedupe raw courses and map each survivor onto the canonical taxonomy.

    Courses whose category pair has no mapping are logged and dropped.
    Returns (lectures, duplicates, unmapped).
    """
    kept, duplicates = dedupe_courses(courses)
    rows = COLOSO_TAXONOMY if table is None else table
    lectures: List[CanonicalLecture] = []
    unmapped = 0
    for course in kept:
        try:
            entry = map_category(course.main_category, course.sub_category, rows)
        except NoMappingError:
            logger.error(
                "Category conversion failed! Main Category: %s, Sub Category: %s (id=%s)",
                course.main_category,
                course.sub_category,
                course.source_id,
            )
            unmapped += 1
            continue
        lectures.append(to_lecture(course, source, entry))
    return lectures, duplicates, unmapped


def _record_dedupe_key(rec: Dict) -> Tuple[str, str]:
    return str(rec.get("source") or ""), str(rec.get("source_id") or "")


def write_jsonl(records: Iterable[Dict], out_dir: str, filename_prefix: str) -> str:
    """Write records to a JSONL staging file, one line per (source, source_id).

    Returns the path to the written file. Existing file will be appended.
    """
    ensure_dir(out_dir)
    dt = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    path = os.path.join(out_dir, f"{filename_prefix}-{dt}.jsonl")

    seen: set = set()
    with open(path, "a", encoding="utf-8") as f:
        for rec in records:
            key = _record_dedupe_key(rec)
            if key in seen:
                continue
            seen.add(key)
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")
    return path
