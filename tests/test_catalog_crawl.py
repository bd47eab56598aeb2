from app.services.crawl.base import TaxonomyEntry
from app.services.crawl.catalog import build_work_list, crawl_catalog, extract_all
from app.services.crawl.errors import CategoryFetchError

import logging

import pytest

from tests.coloso_site import BASE, CATEGORIES, COURSE_42, listing, make_spider, product_page


TABLE = (TaxonomyEntry("Design", "Illustration", "Art & Design", "Illustration"),)


def scenario_routes(**extra):
    routes = {
        "/api/displays": CATEGORIES,
        "/category/7": listing("/courses/42"),
        "/courses/42": product_page(42, 99000),
        "/api/catalogs/courses?id=42": COURSE_42,
    }
    routes.update(extra)
    return routes


def test_end_to_end_single_course_becomes_lecture():
    saved = []
    spider = make_spider(scenario_routes())
    report = crawl_catalog(spider, table=TABLE, save_fn=lambda source, lectures: saved.append((source, lectures)))

    assert report.raw_courses == 1
    assert len(report.lectures) == 1
    lecture = report.lectures[0]
    assert lecture.source == "coloso"
    assert lecture.source_id == "42"
    assert lecture.price == "99000"
    assert lecture.title == "Intro to Illustration"
    assert lecture.keywords == "draw illustration"
    assert lecture.description == "Learn the basics of digital art"
    assert (lecture.canonical_main_category, lecture.canonical_sub_category) == ("Art & Design", "Illustration")
    assert (lecture.source_main_category, lecture.source_sub_category) == ("Design", "Illustration")
    # handed over once, as one batch
    assert len(saved) == 1 and saved[0][0] == "coloso" and saved[0][1] == report.lectures


def test_end_to_end_unmapped_category_yields_nothing(caplog):
    spider = make_spider(scenario_routes())
    with caplog.at_level(logging.ERROR):
        report = crawl_catalog(spider, table=())
    assert report.raw_courses == 1
    assert report.unmapped == 1
    assert report.lectures == []
    assert "Category conversion failed" in caplog.text


@pytest.mark.parametrize("workers", [1, 4])
def test_end_to_end_duplicate_source_ids_collapse_to_first(workers):
    routes = scenario_routes(
        **{
            "/category/7": listing("/courses/42", "/courses/intro-illustration"),
            "/courses/intro-illustration": product_page(42, 10),
        }
    )
    report = crawl_catalog(make_spider(routes), table=TABLE, workers=workers)
    assert report.raw_courses == 2
    assert report.duplicates == 1
    assert len(report.lectures) == 1
    assert report.lectures[0].url == f"{BASE}/courses/42"
    assert report.lectures[0].price == "99000"


def test_empty_price_specification_is_skipped_everywhere():
    routes = scenario_routes(**{"/courses/42": product_page(offers=[{"priceSpecifications": []}])})
    report = crawl_catalog(make_spider(routes), table=TABLE)
    assert report.urls == 1
    assert report.skipped == 1
    assert report.raw_courses == 0
    assert report.lectures == []


def test_category_tree_failure_aborts_crawl():
    saved = []
    spider = make_spider(scenario_routes(**{"/api/displays": 503}))
    with pytest.raises(CategoryFetchError):
        crawl_catalog(spider, table=TABLE, save_fn=lambda s, l: saved.append(l))
    assert saved == []


def test_listing_failure_skips_only_that_category():
    categories = {
        "categories": [
            {
                "id": 1,
                "title": "Design",
                "children": [{"id": 6, "title": "Branding"}, {"id": 7, "title": "Illustration"}],
            }
        ]
    }
    routes = scenario_routes(**{"/api/displays": categories, "/category/6": 500})
    report = crawl_catalog(make_spider(routes), table=TABLE)
    assert report.leaves == 2
    assert report.failed_leaves == 1
    assert [l.source_id for l in report.lectures] == ["42"]


def test_extract_all_keeps_work_list_order_with_workers():
    hrefs = [f"/courses/{n}" for n in range(1, 9)]
    routes = {"/api/displays": CATEGORIES, "/category/7": listing(*hrefs)}
    for n in range(1, 9):
        routes[f"/courses/{n}"] = product_page(n, n * 1000)
        routes[f"/api/catalogs/courses?id={n}"] = {"courses": [{"publicTitle": f"Course {n}"}]}
    spider = make_spider(routes)
    work = build_work_list(spider, spider.fetch_categories())
    results = extract_all(spider, work, workers=4)
    assert [r.url for r in results] == [w.url for w in work]
    assert [r.course.source_id for r in results] == list(range(1, 9))


def test_unusable_href_skips_only_that_item():
    categories = {
        "categories": [
            {
                "id": 1,
                "title": "Design",
                "children": [{"id": 6, "title": "Branding"}, {"id": 7, "title": "Illustration"}],
            }
        ]
    }
    routes = scenario_routes(**{"/api/displays": categories, "/category/6": listing("http://[broken/c")})
    report = crawl_catalog(make_spider(routes), table=TABLE)
    assert report.leaves == 2
    assert report.failed_leaves == 0
    assert report.urls == 1
    assert [l.source_id for l in report.lectures] == ["42"]


def test_lecture_meta_carries_extraction_time():
    report = crawl_catalog(make_spider(scenario_routes()), table=TABLE)
    d = report.lectures[0].to_dict()
    assert d["meta_fetched_at"].endswith("Z")
    assert d["meta_source_url"] == f"{BASE}/courses/42"
