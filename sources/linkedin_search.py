from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from config.settings import Settings
from ports.page import PageDriver, first_visible
from services.url_utils import normalize_profile_url


logger = logging.getLogger(__name__)


SEARCH_INPUT = (
    'input[placeholder="Search"]',
    "input.search-global-typeahead__input",
)
PEOPLE_TAB = (
    'button[aria-label="People"]',
    'button:has-text("People")',
)
FILTER_OPENER = (
    'button:has-text("All filters")',
    'button:has-text("Locations")',
)
LOCATION_INPUT = (
    'input[placeholder="Add a location"]',
    'input[aria-label="Add a location"]',
)
APPLY_FILTER = (
    'button:has-text("Show results")',
    'button:has-text("Show")',
)
PROFILE_LINKS = 'a[href*="/in/"]'
NEXT_PAGE = (
    'button[aria-label="Next"]',
    "button.artdeco-pagination__button--next",
)


class SearchCrawler:
    """People search for one role in one country, paginated and de-duplicated."""

    def __init__(self, page: PageDriver, settings: Settings):
        self.page = page
        self.settings = settings
        self.pages_visited = 0
        self.advances = 0

    def discover(
        self,
        role: str,
        country: str,
        max_pages: Optional[int] = None,
        on_page: Optional[Callable[[List[str]], None]] = None,
    ) -> List[str]:
        """Return unique profile URLs in render order.

        ``on_page`` receives each page's newly seen links before the crawler moves on
        (used by the fused discover-and-persist job).
        """
        limit = max_pages if max_pages is not None else self.settings.max_pages
        self.pages_visited = 0
        self.advances = 0
        collected: Dict[str, None] = {}

        self._submit_query(role)
        self._select_people_scope()
        self._apply_location_filter(country)

        while self.pages_visited < limit:
            self.page.wait_for_load()
            self._load_lazy_results()
            self.pages_visited += 1

            new_links = []
            for href in self.page.hrefs(PROFILE_LINKS):
                url = normalize_profile_url(href, self.settings.base_url)
                if url and url not in collected:
                    collected[url] = None
                    new_links.append(url)
            logger.info(
                "Search page %d: %d new profiles (%d total)", self.pages_visited, len(new_links), len(collected),
                extra={"step": "discover", "status": f"{role}/{country}"},
            )
            if on_page and new_links:
                on_page(new_links)

            if not new_links:
                # Duplicate-only or empty page ends the crawl
                break
            if self.pages_visited >= limit:
                break
            next_button = self._enabled_next()
            if not next_button:
                break
            self.page.click(next_button)
            self.advances += 1
            self.page.pause(self.settings.action_delay_ms)

        return list(collected)

    def _submit_query(self, role: str) -> None:
        self.page.goto(self.settings.home_url)
        self.page.wait_for_load()
        search_input = first_visible(self.page, SEARCH_INPUT) or SEARCH_INPUT[0]
        self.page.click(search_input)
        self.page.fill(search_input, role)
        self.page.press("Enter")
        self.page.wait_for_load()

    def _select_people_scope(self) -> None:
        tab = first_visible(self.page, PEOPLE_TAB)
        if tab:
            self.page.click(tab)
            self.page.wait_for_load()
        else:
            logger.warning("People tab not found; results may not be scoped to people", extra={"step": "discover"})

    def _apply_location_filter(self, country: str) -> None:
        opener = first_visible(self.page, FILTER_OPENER)
        if not opener:
            logger.warning("Location filter unavailable; searching without country=%s", country, extra={"step": "discover"})
            return
        self.page.click(opener)
        location_input = first_visible(self.page, LOCATION_INPUT)
        if location_input:
            self.page.fill(location_input, country)
            self.page.pause(500)
            # First suggestion wins; a fuzzy match may pick a different place
            self.page.press("ArrowDown")
            self.page.press("Enter")
        apply_button = first_visible(self.page, APPLY_FILTER)
        if apply_button:
            self.page.click(apply_button)
            self.page.wait_for_load()

    def _load_lazy_results(self) -> None:
        previous = self.page.scroll_height()
        for _ in range(self.settings.max_scroll_attempts):
            self.page.scroll_to_bottom()
            self.page.pause(self.settings.scroll_pause_ms)
            height = self.page.scroll_height()
            if height == previous:
                break
            previous = height

    def _enabled_next(self) -> Optional[str]:
        for selector in NEXT_PAGE:
            if self.page.is_visible(selector) and self.page.is_enabled(selector):
                return selector
        return None
