from __future__ import annotations

from sources.linkedin_search import (
    APPLY_FILTER,
    FILTER_OPENER,
    LOCATION_INPUT,
    NEXT_PAGE,
    PEOPLE_TAB,
    SEARCH_INPUT,
    SearchCrawler,
)
from tests.fakes import ScriptedPage


SEARCH_UI = (SEARCH_INPUT[0], PEOPLE_TAB[0], FILTER_OPENER[0], LOCATION_INPUT[0], APPLY_FILTER[0])


def _links(*slugs):
    return [f"https://www.linkedin.com/in/{s}?miniProfileUrn=x" for s in slugs]


def _page(result_pages, next_visible=True, disabled=()):
    visible = set(SEARCH_UI)
    if next_visible:
        visible.add(NEXT_PAGE[0])
    return ScriptedPage(visible=visible, disabled=disabled, result_pages=result_pages, advance_on=NEXT_PAGE)


def test_discover_submits_query_and_location_filter(settings):
    page = _page([_links("a")], next_visible=False)
    urls = SearchCrawler(page, settings).discover("CTO", "Poland")

    assert urls == ["https://www.linkedin.com/in/a"]
    assert page.visited()[0] == settings.home_url
    assert ("fill", SEARCH_INPUT[0], "CTO") in page.actions
    assert ("fill", LOCATION_INPUT[0], "Poland") in page.actions
    assert ("press", "Enter") in page.actions
    assert PEOPLE_TAB[0] in page.clicks()
    assert APPLY_FILTER[0] in page.clicks()


def test_pagination_is_bounded_by_max_pages(settings):
    pages = [_links(f"p{i}a", f"p{i}b") for i in range(10)]
    page = _page(pages)
    crawler = SearchCrawler(page, settings)
    urls = crawler.discover("CTO", "Poland", max_pages=3)

    assert crawler.pages_visited == 3
    assert crawler.advances == 2
    assert len(urls) == 6


def test_urls_are_unique_and_in_render_order(settings):
    page = _page([_links("b", "a", "b"), _links("a", "c")])
    urls = SearchCrawler(page, settings).discover("CTO", "Poland", max_pages=5)
    assert urls == [
        "https://www.linkedin.com/in/b",
        "https://www.linkedin.com/in/a",
        "https://www.linkedin.com/in/c",
    ]


def test_page_without_new_links_ends_crawl(settings):
    page = _page([_links("a"), _links("a"), _links("z")])
    crawler = SearchCrawler(page, settings)
    urls = crawler.discover("CTO", "Poland", max_pages=5)

    assert urls == ["https://www.linkedin.com/in/a"]
    assert crawler.pages_visited == 2
    assert crawler.advances == 1


def test_missing_or_disabled_next_ends_crawl(settings):
    hidden = _page([_links("a"), _links("b")], next_visible=False)
    crawler = SearchCrawler(hidden, settings)
    assert crawler.discover("CTO", "Poland") == ["https://www.linkedin.com/in/a"]
    assert crawler.advances == 0

    disabled = _page([_links("a"), _links("b")], disabled=set(NEXT_PAGE))
    crawler = SearchCrawler(disabled, settings)
    assert crawler.discover("CTO", "Poland") == ["https://www.linkedin.com/in/a"]
    assert crawler.advances == 0


def test_on_page_receives_only_new_links(settings):
    seen = []
    page = _page([_links("a", "b"), _links("b", "c")], next_visible=True)
    SearchCrawler(page, settings).discover("CTO", "Poland", max_pages=2, on_page=lambda urls: seen.append(list(urls)))
    assert seen == [
        ["https://www.linkedin.com/in/a", "https://www.linkedin.com/in/b"],
        ["https://www.linkedin.com/in/c"],
    ]


def test_non_profile_links_are_ignored(settings):
    page = _page([["https://www.linkedin.com/company/acme/", "/in/jane/"]], next_visible=False)
    assert SearchCrawler(page, settings).discover("CTO", "Poland") == ["https://www.linkedin.com/in/jane"]
