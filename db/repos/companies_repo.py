from __future__ import annotations

import sqlite3
from typing import List, Optional

from models.company_record import Company, CompanyResolution, CompanySize, ResolvedBy


class CompaniesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def find_by_url(self, linkedin_url: str) -> Optional[Company]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM companies WHERE linkedin_url = ?", (linkedin_url,))
        row = cur.fetchone()
        return Company(**dict(row)) if row else None

    def find_by_name(self, name: str) -> Optional[Company]:
        """First company whose display name matches exactly (oldest row wins)."""
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM companies WHERE name = ? ORDER BY id LIMIT 1", (name,))
        row = cur.fetchone()
        return Company(**dict(row)) if row else None

    def get(self, company_id: int) -> Optional[Company]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM companies WHERE id = ?", (company_id,))
        row = cur.fetchone()
        return Company(**dict(row)) if row else None

    def create(self, name: str, linkedin_url: Optional[str] = None) -> int:
        cur = self.conn.cursor()
        cur.execute(
            "INSERT INTO companies (name, linkedin_url) VALUES (?, ?)",
            (name, linkedin_url),
        )
        self.conn.commit()
        return int(cur.lastrowid)

    def rename(self, company_id: int, name: str) -> None:
        self.conn.execute(
            "UPDATE companies SET name = ?, updated_at = datetime('now') WHERE id = ?",
            (name, company_id),
        )
        self.conn.commit()

    def upsert_company(self, name: str, linkedin_url: Optional[str] = None) -> CompanyResolution:
        """Resolve a company by URL (strong key) or by exact name (weak key), creating it if absent.

        With a URL the stored name is refreshed on every hit (last writer wins).
        Without one, two distinct companies sharing a display name collapse into one row.
        """
        if linkedin_url:
            existing = self.find_by_url(linkedin_url)
            if existing:
                self.rename(existing.id, name)
                return CompanyResolution(company_id=existing.id, resolved_by=ResolvedBy.URL)
            return CompanyResolution(company_id=self.create(name, linkedin_url), resolved_by=ResolvedBy.CREATED)

        existing = self.find_by_name(name)
        if existing:
            return CompanyResolution(company_id=existing.id, resolved_by=ResolvedBy.NAME)
        return CompanyResolution(company_id=self.create(name), resolved_by=ResolvedBy.CREATED)

    def update_profile(
        self,
        company_id: int,
        name: str,
        description: Optional[str],
        size: CompanySize,
        size_label: Optional[str],
    ) -> None:
        """Overwrite the scraped "about" fields of a company."""
        sql = (
            "UPDATE companies SET name = ?, description = ?, size = ?, size_label = ?, "
            " updated_at = datetime('now') WHERE id = ?;"
        )
        self.conn.execute(sql, (name, description, CompanySize(size).value, size_label, company_id))
        self.conn.commit()

    def select_pending_refresh(self, limit: int = 200) -> List[Company]:
        """Companies with a known URL whose size has not been scraped yet."""
        sql = (
            "SELECT * FROM companies "
            "WHERE size = 'UNKNOWN' AND linkedin_url IS NOT NULL "
            "ORDER BY id LIMIT ?;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (limit,))
        return [Company(**dict(r)) for r in cur.fetchall()]
