from typing import Optional

from fastapi import APIRouter, HTTPException

from app.models.lecture import CrawlSummary, LectureListResponse
from app.services.crawl.errors import CategoryFetchError
from app.services.crawl.runner import SPIDERS, run_crawl
from app.services.graph.lectures import get_lectures

router = APIRouter(tags=["lectures"])


@router.get("/lectures", response_model=LectureListResponse)
def api_list_lectures(source: Optional[str] = None, limit: int = 100):
    items = get_lectures(source=source, limit=limit)
    return {"count": len(items), "items": items}


@router.post("/crawl/{source}", response_model=CrawlSummary)
def api_crawl_source(source: str, save: bool = True, workers: Optional[int] = None):
    if source not in SPIDERS:
        raise HTTPException(status_code=404, detail=f"Unknown source: {source}")
    try:
        report = run_crawl(source, workers=workers, save=save)
    except CategoryFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return {**report.summary(), "saved": save}
