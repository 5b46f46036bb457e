from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Optional

from config.settings import Settings
from db.repos.companies_repo import CompaniesRepo
from models.company_record import Company
from pipelines.runner import RunContext, log_progress, process_item
from ports.page import PageDriver
from services.mapping import map_size_label
from sources.linkedin_company import CompanyExtractor


logger = logging.getLogger(__name__)


class LoadPendingCompanies:
    def __init__(self, conn: sqlite3.Connection, limit: int = 200) -> None:
        self.conn = conn
        self.limit = limit

    def run(self, ctx: RunContext) -> RunContext:
        repo = CompaniesRepo(self.conn)
        ctx.companies = repo.select_pending_refresh(limit=self.limit)
        ctx.meta["pending_companies_total"] = len(ctx.companies)
        logger.info("Companies to fetch: %d", len(ctx.companies), extra={"step": "refresh_companies"})
        return ctx


class RefreshCompanyProfiles:
    """Scrape each pending company's about page and store name, description and size."""

    def __init__(
        self,
        page: PageDriver,
        conn: sqlite3.Connection,
        settings: Settings,
        on_progress: Optional[Callable[[int, int, int, str], None]] = None,
    ) -> None:
        self.extractor = CompanyExtractor(page, settings)
        self.repo = CompaniesRepo(conn)
        self.on_progress = on_progress

    def _refresh(self, company: Company) -> str:
        data = self.extractor.extract_company(company.linkedin_url or "")
        size = map_size_label(data.size_label)
        self.repo.update_profile(
            company.id,
            name=data.title or company.name,
            description=data.description,
            size=size,
            size_label=data.size_label,
        )
        return f"{company.name} ({data.size_label or 'UNKNOWN'}) -> {size.value}"

    def run(self, ctx: RunContext) -> RunContext:
        companies = [c for c in (ctx.companies or []) if c.linkedin_url]
        total = len(companies)
        updated = 0
        for idx, company in enumerate(companies, start=1):
            if self.on_progress:
                self.on_progress(idx, total, company.id, company.name)
            result = process_item(
                ctx, "refresh_companies", company.linkedin_url, lambda c=company: self._refresh(c)
            )
            if result.status == "success":
                updated += 1
                logger.info("Updated company: %s", result.detail, extra={"step": "refresh_companies"})
            log_progress("refresh_companies", idx, total)
        ctx.meta["companies_refreshed"] = updated
        return ctx
