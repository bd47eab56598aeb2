"""Coloso (coloso.co.kr) catalog spider.

Two sources are combined for every course:
- the course page itself, whose <script type="application/ld+json"> Product
  block carries the product id and price;
- the catalog API (/api/catalogs/courses?id=<productId>), which supplies the
  title, instructor, keywords, card image and the extra description texts.

The parse_* helpers are pure functions over HTML / decoded JSON so they can be
tested against local snapshots; ColosoSpider only adds the HTTP calls.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError
from selectolax.parser import HTMLParser, Node

from app.config import DEFAULT_BASE_URL, DEFAULT_USER_AGENT, CrawlSettings
from app.models.coloso import (
    ColosoCategory,
    ColosoCategoryListResponse,
    ColosoCourseListResponse,
    ColosoCourseRecord,
    Product,
)

from ..base import CategoryNode, CourseResult, LeafCategory, RawCourse, Spider, now_iso
from ..errors import (
    CategoryFetchError,
    CategoryListFetchError,
    CourseFetchError,
    CrawlError,
    EmptyCourseRecordError,
    EmptyOfferError,
    EmptyPriceSpecError,
    IncompleteCourseError,
    MissingAnchorError,
    MissingStructuredDataError,
    StructuredDataParseError,
    SupplementaryFetchError,
)
from ..text import join_non_empty, normalize_whitespace

logger = logging.getLogger(__name__)

COURSE_LIST_SEL = "section > h3 ~ ul > li"
LD_JSON_SEL = 'script[type="application/ld+json"]'


# --- Parsing (no I/O) ---

def _to_node(cat: ColosoCategory, depth: int = 0) -> CategoryNode:
    # main -> sub only; anything below a subcategory is dropped
    children = [_to_node(c, depth + 1) for c in cat.children] if depth == 0 else []
    return CategoryNode(id=cat.id, title=cat.title, children=children)


def parse_categories(payload: Any) -> List[CategoryNode]:
    if not payload:
        raise CategoryFetchError("Empty category response")
    try:
        response = ColosoCategoryListResponse.model_validate(payload)
    except ValidationError as exc:
        raise CategoryFetchError(f"Malformed category response: {exc}") from exc
    return [_to_node(c) for c in response.categories]


def _anchor_url(item: Node, page_url: str) -> str:
    anchor = next((child for child in item.iter() if child.tag == "a"), None)
    href = (anchor.attributes.get("href") or "").strip() if anchor is not None else ""
    if not href:
        raise MissingAnchorError("anchor tag does not exist")
    try:
        return urljoin(page_url, href)
    except ValueError as exc:
        raise MissingAnchorError(f"unusable href {href!r}: {exc}") from exc


def parse_course_list(html: str, *, page_url: str) -> List[str]:
    """Return absolute course URLs from a category listing page, in page order."""
    doc = HTMLParser(html)
    urls: List[str] = []
    for item in doc.css(COURSE_LIST_SEL):
        try:
            url = _anchor_url(item, page_url)
        except MissingAnchorError as exc:
            logger.error("Course url read failed, %s, %s", exc, page_url)
            continue
        urls.append(url)
    return urls


def parse_product_ld(html: str) -> Tuple[int, Optional[int]]:
    """Extract (productId, price of first offer's first price specification)."""
    doc = HTMLParser(html)
    script = doc.css_first(LD_JSON_SEL)
    if script is None:
        raise MissingStructuredDataError('<script type="application/ld+json"> does not exist')
    raw = script.text(deep=True, strip=True)
    try:
        product = Product.model_validate_json(raw)
    except ValidationError as exc:
        raise StructuredDataParseError(f"application/ld+json parsing failed: {exc.error_count()} error(s)") from exc
    if not product.offers:
        raise EmptyOfferError("Product offer is empty")
    specs = product.offers[0].price_specifications
    if not specs:
        raise EmptyPriceSpecError("Price specification is empty")
    return product.product_id, specs[0].price


def parse_course_record(payload: Any) -> ColosoCourseRecord:
    """First course of a catalog API response ({"courses": [...]} or a bare list)."""
    if not payload:
        raise EmptyCourseRecordError("Course response is empty")
    if isinstance(payload, list):
        payload = {"courses": payload}
    try:
        response = ColosoCourseListResponse.model_validate(payload)
    except ValidationError as exc:
        raise SupplementaryFetchError(f"Malformed course response: {exc.error_count()} error(s)") from exc
    if not response.courses:
        raise EmptyCourseRecordError("Course list is empty")
    return response.courses[0]


def build_raw_course(
    *,
    product_id: int,
    price: Optional[int],
    record: ColosoCourseRecord,
    leaf: LeafCategory,
    url: str,
    fetched_at: Optional[str] = None,
) -> RawCourse:
    title = (record.public_title or "").strip()
    if not product_id or not title or price is None:
        raise IncompleteCourseError(f"id={product_id!r} title={title!r} price={price!r}")
    extras = record.extras.texts() if record.extras else []
    return RawCourse(
        source_id=product_id,
        title=title,
        price=price,
        description=normalize_whitespace(join_non_empty(extras)),
        keywords=normalize_whitespace(record.keywords),
        instructor=record.instructor,
        main_category=leaf.main_title,
        sub_category=leaf.sub_title,
        url=url,
        image_url=record.desktop_card_asset,
        fetched_at=fetched_at,
    )


# --- Spider ---

class ColosoSpider(Spider):
    name = "coloso"

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 12.0,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self.headers = headers or {"User-Agent": DEFAULT_USER_AGENT}
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: CrawlSettings) -> "ColosoSpider":
        return cls(
            base_url=settings.base_url,
            timeout=settings.timeout,
            headers={"User-Agent": settings.user_agent},
        )

    # --- Endpoints ---
    @property
    def categories_url(self) -> str:
        return f"{self.base_url}/api/displays"

    def category_url(self, category_id: int) -> str:
        return f"{self.base_url}/category/{category_id}"

    @property
    def course_record_url(self) -> str:
        return f"{self.base_url}/api/catalogs/courses"

    # --- Public API ---
    def fetch_categories(self) -> List[CategoryNode]:
        try:
            payload = self._get_json(self.categories_url)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Coloso course categories read failed, %s: %s", self.categories_url, exc)
            raise CategoryFetchError("Coloso course categories read failed") from exc
        roots = parse_categories(payload)
        for main in roots:
            for child in main.children:
                logger.info("%s, %s", main.title, child.title)
        return roots

    def fetch_course_urls(self, leaf: LeafCategory) -> List[str]:
        url = self.category_url(leaf.id)
        try:
            html = self._get_text(url)
        except httpx.HTTPError as exc:
            raise CategoryListFetchError(f"Category courses read failed, {url}: {exc}") from exc
        try:
            return parse_course_list(html, page_url=url)
        except Exception as exc:
            raise CategoryListFetchError(f"Category courses parse failed, {url}: {exc}") from exc

    def fetch_course_record(self, product_id: int) -> ColosoCourseRecord:
        try:
            payload = self._get_json(self.course_record_url, params={"id": str(product_id)})
        except (httpx.HTTPError, ValueError) as exc:
            raise SupplementaryFetchError(f"Course read failed, id={product_id}: {exc}") from exc
        return parse_course_record(payload)

    def extract(self, leaf: LeafCategory, url: str) -> CourseResult:
        """Turn one course URL into a CourseResult. Never raises."""
        try:
            course = self._extract(leaf, url)
        except CrawlError as exc:
            logger.error(
                "Course skipped (%s), %s, %s, %s: %s",
                type(exc).__name__, leaf.main_title, leaf.sub_title, url, exc,
            )
            return CourseResult(url=url, error=exc)
        except Exception as exc:
            logger.exception("Course extraction crashed, %s", url)
            return CourseResult(url=url, error=CrawlError(str(exc)))
        logger.info("%s", course)
        return CourseResult(url=url, course=course)

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "ColosoSpider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- Internals ---
    def _extract(self, leaf: LeafCategory, url: str) -> RawCourse:
        fetched_at = now_iso()
        try:
            html = self._get_text(url)
        except httpx.HTTPError as exc:
            raise CourseFetchError(f"Course read failed: {exc}") from exc
        product_id, price = parse_product_ld(html)
        record = self.fetch_course_record(product_id)
        return build_raw_course(product_id=product_id, price=price, record=record, leaf=leaf, url=url, fetched_at=fetched_at)

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, headers=self.headers, follow_redirects=True)
        return self._client

    def _get_text(self, url: str) -> str:
        r = self.client.get(url)
        r.raise_for_status()
        return r.text

    def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        r = self.client.get(url, params=params)
        r.raise_for_status()
        return r.json()
