from __future__ import annotations

import json
import logging
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from app.services.graph.lectures import save_or_update_lectures

logger = logging.getLogger(__name__)


def import_lectures_jsonl(
    jsonl_path: str,
    *,
    save_fn: Optional[Callable[[str, List[Dict]], int]] = None,
) -> Dict[str, int]:
    """Read staged lecture records from a JSONL file and upsert them per source.

    Blank lines, undecodable or non-object lines and records without source/source_id
    are skipped.
    Returns summary counts.
    """
    save = save_fn or save_or_update_lectures
    processed = 0
    skipped = 0
    by_source: "OrderedDict[str, List[Dict]]" = OrderedDict()
    with open(jsonl_path, "r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s:
                continue
            processed += 1
            try:
                rec = json.loads(s)
            except json.JSONDecodeError:
                logger.warning("Skipping undecodable line %d in %s", processed, jsonl_path)
                skipped += 1
                continue
            if not isinstance(rec, dict):
                logger.warning("Skipping non-object line %d in %s", processed, jsonl_path)
                skipped += 1
                continue
            source = str(rec.get("source") or "").strip()
            source_id = str(rec.get("source_id") or "").strip()
            if not source or not source_id:
                skipped += 1
                continue
            by_source.setdefault(source, []).append(rec)

    imported = 0
    for source, records in by_source.items():
        save(source, records)
        imported += len(records)
    return {"processed": processed, "imported": imported, "skipped": skipped}
