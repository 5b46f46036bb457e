from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create normalized schema, indexes, and views (idempotent)."""
    cur = conn.cursor()

    # Companies table
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS companies (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  name TEXT NOT NULL,\n"
            "  linkedin_url TEXT UNIQUE,\n"
            "  description TEXT,\n"
            "  size TEXT NOT NULL DEFAULT 'UNKNOWN' CHECK (size IN (\n"
            "    'RANGE_1_10','RANGE_11_50','RANGE_51_200','RANGE_201_500','RANGE_501_1000',\n"
            "    'RANGE_1001_5000','RANGE_5001_10000','RANGE_10001_PLUS','UNKNOWN')),\n"
            "  size_label TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    # Name is the fallback identity key when no URL was scraped
    cur.execute("CREATE INDEX IF NOT EXISTS idx_companies_name ON companies(name);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_companies_size ON companies(size);")

    # People table
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS people (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  full_name TEXT NOT NULL,\n"
            "  headline TEXT,\n"
            "  country TEXT,\n"
            "  profile_url TEXT NOT NULL UNIQUE,\n"
            "  connection_status TEXT NOT NULL DEFAULT 'NONE' CHECK (connection_status IN (\n"
            "    'NONE','PENDING','CONNECTED','FAILED')),\n"
            "  connected_at TEXT,\n"
            "  searching_role TEXT,\n"
            "  searching_country TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_people_connection_status ON people(connection_status);")

    # Experiences table (append-only)
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS experiences (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  person_id INTEGER NOT NULL,\n"
            "  company_id INTEGER,\n"
            "  company_name TEXT NOT NULL,\n"
            "  company_url TEXT,\n"
            "  title TEXT,\n"
            "  is_current INTEGER NOT NULL DEFAULT 1,\n"
            "  description TEXT,\n"
            "  duration TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  FOREIGN KEY(person_id) REFERENCES people(id) ON DELETE CASCADE,\n"
            "  FOREIGN KEY(company_id) REFERENCES companies(id) ON DELETE SET NULL\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_experiences_person_id ON experiences(person_id);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_experiences_company_id ON experiences(company_id);")

    # View for joined reads: one row per current experience
    cur.execute("DROP VIEW IF EXISTS v_people_current_company;")
    cur.execute(
        (
            "CREATE VIEW v_people_current_company AS\n"
            "SELECT\n"
            "  p.id AS person_id,\n"
            "  p.full_name,\n"
            "  p.headline,\n"
            "  p.country,\n"
            "  p.profile_url,\n"
            "  p.connection_status,\n"
            "  p.connected_at,\n"
            "  e.id AS experience_id,\n"
            "  e.title,\n"
            "  e.company_name AS experience_company_name,\n"
            "  c.id AS company_id,\n"
            "  c.name AS company_name,\n"
            "  c.linkedin_url AS company_url,\n"
            "  c.size AS company_size,\n"
            "  c.size_label AS company_size_label\n"
            "FROM people p\n"
            "JOIN experiences e ON e.person_id = p.id AND e.is_current = 1\n"
            "LEFT JOIN companies c ON e.company_id = c.id;"
        )
    )

    conn.commit()
