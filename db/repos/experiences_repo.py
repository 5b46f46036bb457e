from __future__ import annotations

import sqlite3
from typing import List, Optional

from models.experience_record import Experience


class ExperiencesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def insert(
        self,
        person_id: int,
        company_name: str,
        company_id: Optional[int] = None,
        company_url: Optional[str] = None,
        title: Optional[str] = None,
        is_current: bool = True,
        description: Optional[str] = None,
        duration: Optional[str] = None,
    ) -> int:
        """Append an experience row. Never matched against earlier rows for the person."""
        sql = (
            "INSERT INTO experiences (person_id, company_id, company_name, company_url, title, is_current, description, duration) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?) RETURNING id;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (
            person_id, company_id, company_name, company_url, title, 1 if is_current else 0, description, duration
        ))
        row = cur.fetchone()
        self.conn.commit()
        return int(row[0])

    def list_for_person(self, person_id: int) -> List[Experience]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM experiences WHERE person_id = ? ORDER BY id", (person_id,))
        return [Experience(**dict(r)) for r in cur.fetchall()]
