from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Dict, List, Optional, Sequence

from config.settings import Settings
from pipelines.runner import Candidate, RunContext, log_progress, process_item
from ports.page import PageDriver
from services.reconciler import EntityReconciler
from sources.linkedin_profile import ProfileExtractor
from sources.linkedin_search import SearchCrawler
from utils.exceptions import ExtractionSkip


logger = logging.getLogger(__name__)


def _searches(countries: Sequence[str], roles: Sequence[str]):
    for country in countries:
        for role in roles:
            yield role, country


class _ProfileProcessor:
    """Extract one candidate and reconcile it into the store."""

    def __init__(self, page: PageDriver, conn: sqlite3.Connection, settings: Settings) -> None:
        self.settings = settings
        self.extractor = ProfileExtractor(page, settings)
        self.reconciler = EntityReconciler(conn)

    def __call__(self, candidate: Candidate) -> str:
        profile = self.extractor.extract_profile(candidate.profile_url)
        if not profile.full_name:
            raise ExtractionSkip(candidate.profile_url, "empty full name")
        outcome = self.reconciler.reconcile_profile(
            candidate.profile_url, profile, candidate.role, candidate.country
        )
        self.extractor.page.pause(self.settings.action_delay_ms // 2)
        if outcome.company is None:
            return f"person={outcome.person.id}"
        return (
            f"person={outcome.person.id} company={outcome.company.company_id} "
            f"resolved_by={outcome.company.resolved_by.value}"
        )


class DiscoverPeople:
    """Run every country x role search and collect candidates, first search wins per URL."""

    def __init__(
        self,
        page: PageDriver,
        settings: Settings,
        roles: Optional[Sequence[str]] = None,
        countries: Optional[Sequence[str]] = None,
        max_pages: Optional[int] = None,
    ) -> None:
        self.crawler = SearchCrawler(page, settings)
        self.roles = list(roles or settings.search_roles)
        self.countries = list(countries or settings.search_countries)
        self.max_pages = max_pages or settings.max_pages

    def run(self, ctx: RunContext) -> RunContext:
        seen: Dict[str, Candidate] = {c.profile_url: c for c in ctx.candidates}
        for role, country in _searches(self.countries, self.roles):
            logger.info("Searching: role=%s, country=%s", role, country, extra={"step": "discover"})

            def _search(role=role, country=country) -> str:
                urls = self.crawler.discover(role, country, self.max_pages)
                added = 0
                for url in urls:
                    if url not in seen:
                        seen[url] = Candidate(url, role, country)
                        added += 1
                return f"found={len(urls)} new={added} pages={self.crawler.pages_visited}"

            process_item(ctx, "discover", f"search:{role}/{country}", _search)
        ctx.candidates = list(seen.values())
        ctx.meta["candidates_total"] = len(ctx.candidates)
        return ctx


class ExtractAndReconcilePeople:
    def __init__(
        self,
        page: PageDriver,
        conn: sqlite3.Connection,
        settings: Settings,
        on_processed: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.process = _ProfileProcessor(page, conn, settings)
        self.on_processed = on_processed

    def run(self, ctx: RunContext) -> RunContext:
        total = len(ctx.candidates)
        processed = 0
        for idx, candidate in enumerate(ctx.candidates, start=1):
            result = process_item(
                ctx, "extract_profile", candidate.profile_url, lambda c=candidate: self.process(c)
            )
            if result.status == "success":
                processed += 1
                if self.on_processed:
                    self.on_processed(processed)
            log_progress("extract_profile", idx, total)
        ctx.meta["processed_people"] = processed
        return ctx


class DiscoverAndReconcilePeople:
    """Fused variant: each search page's new profiles are reconciled before paging on.

    Profiles are opened on ``detail_page`` so the search results stay loaded on
    ``search_page``.
    """

    def __init__(
        self,
        search_page: PageDriver,
        detail_page: PageDriver,
        conn: sqlite3.Connection,
        settings: Settings,
        roles: Optional[Sequence[str]] = None,
        countries: Optional[Sequence[str]] = None,
        max_pages: Optional[int] = None,
    ) -> None:
        self.crawler = SearchCrawler(search_page, settings)
        self.process = _ProfileProcessor(detail_page, conn, settings)
        self.roles = list(roles or settings.search_roles)
        self.countries = list(countries or settings.search_countries)
        self.max_pages = max_pages or settings.max_pages

    def run(self, ctx: RunContext) -> RunContext:
        seen: Dict[str, Candidate] = {c.profile_url: c for c in ctx.candidates}
        processed = 0

        for role, country in _searches(self.countries, self.roles):
            logger.info("Searching: role=%s, country=%s", role, country, extra={"step": "discover"})

            def _reconcile_page(urls: List[str], role=role, country=country) -> None:
                nonlocal processed
                for url in urls:
                    if url in seen:
                        continue
                    candidate = Candidate(url, role, country)
                    seen[url] = candidate
                    result = process_item(ctx, "extract_profile", url, lambda c=candidate: self.process(c))
                    if result.status == "success":
                        processed += 1
                        log_progress("extract_profile", processed)

            def _search(role=role, country=country) -> str:
                urls = self.crawler.discover(role, country, self.max_pages, on_page=_reconcile_page)
                return f"found={len(urls)} pages={self.crawler.pages_visited}"

            process_item(ctx, "discover", f"search:{role}/{country}", _search)

        ctx.candidates = list(seen.values())
        ctx.meta["candidates_total"] = len(ctx.candidates)
        ctx.meta["processed_people"] = processed
        return ctx
