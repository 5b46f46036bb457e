from __future__ import annotations

import sqlite3
from typing import Iterable, List, Optional

from models.person_record import ConnectionStatus, Person


class PeopleRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def upsert_person(
        self,
        profile_url: str,
        full_name: str,
        headline: Optional[str] = None,
        country: Optional[str] = None,
        searching_role: Optional[str] = None,
        searching_country: Optional[str] = None,
    ) -> int:
        """Insert or update a person by profile_url; returns person id.

        Optional fields passed as None keep whatever is already stored.
        """
        sql = (
            "INSERT INTO people (profile_url, full_name, headline, country, searching_role, searching_country) "
            "VALUES (?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(profile_url) DO UPDATE SET "
            " full_name = COALESCE(excluded.full_name, people.full_name), "
            " headline = COALESCE(excluded.headline, people.headline), "
            " country = COALESCE(excluded.country, people.country), "
            " searching_role = COALESCE(excluded.searching_role, people.searching_role), "
            " searching_country = COALESCE(excluded.searching_country, people.searching_country), "
            " updated_at = datetime('now') "
            "RETURNING id;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (profile_url, full_name, headline, country, searching_role, searching_country))
        row = cur.fetchone()
        self.conn.commit()
        return int(row[0])

    def get(self, person_id: int) -> Optional[Person]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM people WHERE id = ?", (person_id,))
        row = cur.fetchone()
        return Person(**dict(row)) if row else None

    def get_by_profile_url(self, profile_url: str) -> Optional[Person]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM people WHERE profile_url = ?", (profile_url,))
        row = cur.fetchone()
        return Person(**dict(row)) if row else None

    def select_outreach_candidates(self, size_band: Iterable[str], limit: int = 50) -> List[Person]:
        """People never contacted who currently work at a company inside the size band."""
        band = [str(getattr(s, "value", s)) for s in size_band]
        if not band:
            return []
        placeholders = ", ".join("?" for _ in band)
        sql = (
            "SELECT p.* FROM people p "
            "WHERE p.connection_status = 'NONE' "
            "  AND p.id IN ("
            f"    SELECT v.person_id FROM v_people_current_company v WHERE v.company_size IN ({placeholders})"
            "  ) "
            "ORDER BY p.id LIMIT ?;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (*band, limit))
        return [Person(**dict(r)) for r in cur.fetchall()]

    def update_connection_status(
        self,
        person_id: int,
        status: ConnectionStatus,
        connected_at: Optional[str] = None,
    ) -> None:
        sql = (
            "UPDATE people SET connection_status = ?, "
            " connected_at = COALESCE(?, connected_at), "
            " updated_at = datetime('now') "
            "WHERE id = ?;"
        )
        self.conn.execute(sql, (ConnectionStatus(status).value, connected_at, person_id))
        self.conn.commit()
