"""In-memory Coloso site used by the crawler tests (served through httpx.MockTransport)."""

import json

import httpx

from app.services.crawl.base import LeafCategory
from app.services.crawl.spiders.coloso_spider import ColosoSpider


BASE = "https://coloso.test"

LEAF = LeafCategory(id=7, main_title="Design", sub_title="Illustration")

CATEGORIES = {
    "categories": [
        {"id": 1, "title": "Design", "children": [{"id": 7, "title": "Illustration", "children": []}]},
    ]
}

COURSE_42 = {
    "courses": [
        {
            "publicTitle": "Intro to Illustration",
            "instructor": "Jane Doe",
            "keywords": "  draw   illustration ",
            "desktopCardAsset": "img.jpg",
            "extras": {
                "additionalText1": "Learn the basics",
                "additionalText2": "",
                "additionalText3": "of digital art",
            },
        }
    ]
}


def listing(*hrefs: str) -> str:
    items = "".join(f'<li><a href="{h}">course</a></li>' for h in hrefs)
    return f"<html><body><section><h3>Courses</h3><ul>{items}</ul></section></body></html>"


def product_page(product_id=42, price=99000, offers=None) -> str:
    if offers is None:
        offers = [{"priceSpecifications": [{"price": price}]}]
    ld = {"@context": "https://schema.org", "@type": "Product", "productId": product_id, "offers": offers}
    return (
        "<html><head><title>course</title>"
        f'<script type="application/ld+json">{json.dumps(ld)}</script>'
        "</head><body><h1>course</h1></body></html>"
    )


def make_spider(routes):
    """Spider over an in-memory site. routes: path (or path?id=N) -> str | dict | int status."""

    def handler(request: httpx.Request) -> httpx.Response:
        key = request.url.path
        if request.url.params.get("id"):
            key = f"{key}?id={request.url.params['id']}"
        body = routes.get(key, 404)
        if isinstance(body, int):
            return httpx.Response(body)
        if isinstance(body, str):
            return httpx.Response(200, text=body)
        return httpx.Response(200, json=body)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ColosoSpider(base_url=BASE, client=client)
