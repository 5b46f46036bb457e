from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from models.company_record import CompanySize
from utils.exceptions import ConfigurationError


SIZE_BUCKETS = tuple(size.value for size in CompanySize)


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _split_csv(raw: str | None, default: str) -> tuple[str, ...]:
    text = raw if raw is not None and raw.strip() else default
    return tuple(part.strip() for part in text.split(",") if part.strip())


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _int_option(name: str, default: str, minimum: int = 1) -> int:
    raw = os.getenv(name, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    # Store
    database_url: str

    # Session inputs
    linkedin_email: str
    linkedin_password: str
    cookies_json: str

    # Search
    search_roles: tuple[str, ...]
    search_countries: tuple[str, ...]
    max_pages: int

    # Read but unused: every job runs strictly sequentially on one page
    scrape_concurrency: int

    # Browser
    headless: bool
    reuse_browser_profile: bool
    browser_profile_dir: str
    base_url: str
    user_agent: str
    viewport_width: int
    viewport_height: int
    nav_timeout_ms: int

    # Pacing
    action_delay_ms: int
    scroll_pause_ms: int
    max_scroll_attempts: int

    # Jobs
    outreach_size_band: tuple[str, ...]
    outreach_limit: int
    company_refresh_limit: int
    connection_note: str
    fused_discovery: bool

    log_level: str = "INFO"

    # Reuse of an installed Chrome or Edge and one of its profile folders
    browser_channel: str = ""
    chrome_executable_path: str = ""
    browser_profile_directory: str = ""

    @property
    def has_credentials(self) -> bool:
        return bool(self.linkedin_email and self.linkedin_password)

    @property
    def home_url(self) -> str:
        return f"{self.base_url}/feed/"

    def require_session_source(self) -> None:
        """Fail before launching a browser when nothing can authenticate the session."""
        if self.cookies_json.strip() or self.has_credentials or self.reuse_browser_profile:
            return
        raise ConfigurationError(
            "No session source configured: set COOKIES_JSON, LINKEDIN_EMAIL/LINKEDIN_PASSWORD "
            "or REUSE_BROWSER_PROFILE=true"
        )


def load_settings(database_url: str | None = None) -> Settings:
    """Build settings from the environment, validating required fields eagerly.

    ``database_url`` takes precedence over DATABASE_URL when given.
    """
    _load_env()
    database_url = (database_url or os.getenv("DATABASE_URL", "")).strip()
    if not database_url:
        raise ConfigurationError("Missing required env var: DATABASE_URL")

    size_band = _split_csv(os.getenv("OUTREACH_SIZE_BAND"), "RANGE_1_10,RANGE_11_50")
    unknown = [b for b in size_band if b not in SIZE_BUCKETS]
    if unknown:
        raise ConfigurationError(f"Unknown company size bucket(s) in OUTREACH_SIZE_BAND: {', '.join(unknown)}")

    return Settings(
        database_url=database_url,
        linkedin_email=os.getenv("LINKEDIN_EMAIL", ""),
        linkedin_password=os.getenv("LINKEDIN_PASSWORD", ""),
        cookies_json=os.getenv("COOKIES_JSON", ""),
        search_roles=_split_csv(os.getenv("SEARCH_ROLES"), "CTO,Founder,Tech Lead"),
        search_countries=_split_csv(
            os.getenv("SEARCH_COUNTRIES"), "Malaysia,Poland,Thailand,Ireland,Netherlands"
        ),
        max_pages=_int_option("MAX_PAGES", "5"),
        scrape_concurrency=_int_option("SCRAPE_CONCURRENCY", "3"),
        headless=_flag("HEADLESS", "true"),
        reuse_browser_profile=_flag("REUSE_BROWSER_PROFILE", "false"),
        browser_profile_dir=os.getenv("BROWSER_PROFILE_DIR", ".browser-profile"),
        base_url=os.getenv("LINKEDIN_BASE_URL", "https://www.linkedin.com").rstrip("/"),
        user_agent=os.getenv(
            "BROWSER_USER_AGENT",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
        ),
        viewport_width=_int_option("VIEWPORT_WIDTH", "1366"),
        viewport_height=_int_option("VIEWPORT_HEIGHT", "768"),
        nav_timeout_ms=_int_option("NAV_TIMEOUT_MS", "30000"),
        action_delay_ms=_int_option("ACTION_DELAY_MS", "1000", minimum=0),
        scroll_pause_ms=_int_option("SCROLL_PAUSE_MS", "800", minimum=0),
        max_scroll_attempts=_int_option("MAX_SCROLL_ATTEMPTS", "10"),
        outreach_size_band=size_band,
        outreach_limit=_int_option("OUTREACH_LIMIT", "50"),
        company_refresh_limit=_int_option("COMPANY_REFRESH_LIMIT", "200"),
        connection_note=os.getenv("CONNECTION_NOTE", "Hi! Would love to connect."),
        fused_discovery=_flag("FUSED_DISCOVERY", "false"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        browser_channel=os.getenv("BROWSER_CHANNEL", "").strip(),
        chrome_executable_path=os.getenv("CHROME_EXECUTABLE_PATH", "").strip(),
        browser_profile_directory=os.getenv("BROWSER_PROFILE_DIRECTORY", "").strip(),
    )
