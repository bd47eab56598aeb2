from typing import Any, Callable, Dict, Iterable, List, Optional

from app.db.neo4j_connector import run_cypher

_UPSERT = (
    "UNWIND $rows AS row "
    "MERGE (l:Lecture {source: $source, source_id: row.source_id}) "
    "SET l.title = row.title, l.url = row.url, l.price = row.price, "
    "    l.instructor = row.instructor, l.image_url = row.image_url, "
    "    l.source_main_category = row.source_main_category, "
    "    l.source_sub_category = row.source_sub_category, "
    "    l.main_category = row.canonical_main_category, "
    "    l.sub_category = row.canonical_sub_category, "
    "    l.keywords = row.keywords, l.description = row.description, "
    "    l.updated_at = datetime() "
    "RETURN count(l) AS count"
)

LECTURE_FIELDS = (
    "title",
    "source_id",
    "url",
    "price",
    "instructor",
    "image_url",
    "source_main_category",
    "source_sub_category",
    "canonical_main_category",
    "canonical_sub_category",
    "keywords",
    "description",
)


def _row(lecture: Any) -> Dict[str, Any]:
    d = lecture.to_dict() if hasattr(lecture, "to_dict") else dict(lecture)
    return {k: d.get(k) for k in LECTURE_FIELDS}


def save_or_update_lectures(
    source: str,
    lectures: Iterable[Any],
    *,
    run: Optional[Callable[[str, Optional[dict]], List[Dict[str, Any]]]] = None,
) -> int:
    """Upsert lectures of one source keyed by (source, source_id) in a single statement.

    Accepts CanonicalLecture objects or their dict form. Returns the number of rows written.
    """
    rows = [_row(x) for x in lectures]
    if not source or not rows:
        return 0
    res = (run or run_cypher)(_UPSERT, {"source": source, "rows": rows})
    return int(res[0]["count"]) if res else 0


def get_lectures(source: Optional[str] = None, limit: int = 100) -> List[Dict[str, Any]]:
    """Return stored lectures, optionally restricted to a single source."""
    limit = max(1, min(int(limit or 100), 1000))
    query = (
        "MATCH (l:Lecture) "
        "WHERE $source IS NULL OR l.source = $source "
        "RETURN l.source AS source, l.source_id AS source_id, l.title AS title, l.url AS url, "
        "l.price AS price, l.instructor AS instructor, l.image_url AS image_url, "
        "l.main_category AS main_category, l.sub_category AS sub_category, "
        "l.keywords AS keywords, l.description AS description "
        "ORDER BY l.source, l.source_id LIMIT $limit"
    )
    return run_cypher(query, {"source": source, "limit": limit})
