from pydantic import BaseModel, Field
from typing import Optional, List


class LectureOut(BaseModel):
    source: str
    source_id: str
    title: Optional[str] = None
    url: Optional[str] = None
    price: Optional[str] = Field(None, description="Price as text, in the source currency")
    instructor: Optional[str] = None
    image_url: Optional[str] = None
    main_category: Optional[str] = Field(None, description="Canonical main category")
    sub_category: Optional[str] = Field(None, description="Canonical sub category")
    keywords: Optional[str] = None
    description: Optional[str] = None


class LectureListResponse(BaseModel):
    count: int
    items: List[LectureOut]


class CrawlSummary(BaseModel):
    """Counts reported by a finished crawl run."""
    source: str
    leaves: int
    failed_leaves: int
    urls: int
    raw_courses: int
    skipped: int
    duplicates: int
    unmapped: int
    lectures: int
    saved: bool = False
