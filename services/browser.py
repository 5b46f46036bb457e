from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from playwright.sync_api import Browser, BrowserContext, Error as PlaywrightError, Page, Playwright, sync_playwright

from config.settings import Settings
from services.chrome_locator import SYSTEM_PROFILE, chrome_user_data_dir
from services.cookie_bridge import load_session_cookies
from utils.exceptions import ConfigurationError, CookieParseError


logger = logging.getLogger(__name__)

# Minimal stealth: hide navigator.webdriver
STEALTH_INIT_SCRIPT = "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"


class PlaywrightPage:
    """PageDriver over a playwright sync ``Page``."""

    def __init__(self, page: Page, settings: Settings):
        self._page = page
        self.settings = settings
        page.set_default_timeout(settings.nav_timeout_ms)

    def goto(self, url: str) -> None:
        self._page.goto(url, wait_until="domcontentloaded")

    def wait_for_load(self) -> None:
        self._page.wait_for_load_state("domcontentloaded")

    def pause(self, ms: int) -> None:
        if ms > 0:
            self._page.wait_for_timeout(ms)

    def is_visible(self, selector: str) -> bool:
        try:
            return self._page.locator(selector).first.is_visible()
        except PlaywrightError:
            return False

    def is_enabled(self, selector: str) -> bool:
        try:
            return self._page.locator(selector).first.is_enabled(timeout=1000)
        except PlaywrightError:
            return False

    def click(self, selector: str) -> None:
        self._page.locator(selector).first.click()

    def fill(self, selector: str, text: str) -> None:
        self._page.locator(selector).first.fill(text)

    def press(self, key: str) -> None:
        self._page.keyboard.press(key)

    def content(self) -> str:
        return self._page.content()

    def hrefs(self, selector: str) -> List[str]:
        return self._page.locator(selector).evaluate_all("els => els.map(el => el.href)")

    def scroll_height(self) -> int:
        return int(self._page.evaluate("() => document.body.scrollHeight"))

    def scroll_to_bottom(self) -> None:
        self._page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")


def _release(label: str, close: Callable[[], None]) -> None:
    try:
        close()
    except Exception as exc:
        logger.debug("Releasing %s failed: %s", label, exc, extra={"step": "teardown"})


class BrowserSession:
    """Owns the browser context and every page opened from it."""

    def __init__(self, context: BrowserContext, settings: Settings):
        self.context = context
        self.settings = settings
        self._pages: List[Page] = []
        existing = context.pages[0] if context.pages else None
        self.page = self._wrap(existing or context.new_page())

    def _wrap(self, page: Page) -> PlaywrightPage:
        self._pages.append(page)
        return PlaywrightPage(page, self.settings)

    def open_page(self) -> PlaywrightPage:
        """Secondary page in the same context (shares cookies with the primary one)."""
        return self._wrap(self.context.new_page())

    def close_pages(self) -> None:
        for page in reversed(self._pages):
            _release("page", page.close)
        self._pages.clear()


def _inject_cookies(context: BrowserContext, settings: Settings) -> None:
    if not settings.cookies_json.strip():
        return
    try:
        cookies = load_session_cookies(settings.cookies_json, settings.base_url)
    except CookieParseError as exc:
        logger.warning("Failed to parse COOKIES_JSON, proceeding without cookies: %s", exc, extra={"step": "cookies"})
        return
    if cookies:
        context.add_cookies([c.to_playwright() for c in cookies])


def _launch_options(settings: Settings) -> Dict[str, Any]:
    """Keyword arguments shared by ``launch`` and ``launch_persistent_context``."""
    options: Dict[str, Any] = {"headless": settings.headless}
    if settings.chrome_executable_path:
        options["executable_path"] = settings.chrome_executable_path
    elif settings.browser_channel:
        options["channel"] = settings.browser_channel
    return options


def _user_data_dir(settings: Settings, options: Dict[str, Any]) -> str:
    """Profile folder for the persistent context; ``system`` means the installed Chrome's own."""
    if settings.browser_profile_dir != SYSTEM_PROFILE:
        return settings.browser_profile_dir
    user_data = chrome_user_data_dir()
    if not user_data.is_dir():
        raise ConfigurationError(f"BROWSER_PROFILE_DIR=system but no Chrome user data directory at {user_data}")
    if "executable_path" not in options and "channel" not in options:
        options["channel"] = "chrome"
    return str(user_data)


def _launch(pw: Playwright, settings: Settings) -> tuple[Optional[Browser], BrowserContext]:
    viewport = {"width": settings.viewport_width, "height": settings.viewport_height}
    options = _launch_options(settings)
    if settings.reuse_browser_profile:
        args = []
        if settings.browser_profile_directory:
            args.append(f"--profile-directory={settings.browser_profile_directory}")
        user_data_dir = _user_data_dir(settings, options)
        logger.info("Using persistent profile %s", user_data_dir, extra={"step": "browser"})
        # Fails while another running Chrome holds the same user data dir
        context = pw.chromium.launch_persistent_context(
            user_data_dir=user_data_dir,
            viewport=viewport,
            user_agent=settings.user_agent,
            args=args,
            **options,
        )
        return None, context
    browser = pw.chromium.launch(**options)
    context = browser.new_context(viewport=viewport, user_agent=settings.user_agent)
    return browser, context


@contextmanager
def browser_session(settings: Settings) -> Iterator[BrowserSession]:
    """Launch chromium, seed the session cookies and release everything on exit."""
    pw = sync_playwright().start()
    browser: Optional[Browser] = None
    context: Optional[BrowserContext] = None
    session: Optional[BrowserSession] = None
    try:
        browser, context = _launch(pw, settings)
        context.add_init_script(STEALTH_INIT_SCRIPT)
        _inject_cookies(context, settings)
        session = BrowserSession(context, settings)
        logger.info(
            "Browser ready (headless=%s, persistent=%s)", settings.headless, settings.reuse_browser_profile,
            extra={"step": "browser"},
        )
        yield session
    finally:
        if session is not None:
            session.close_pages()
        if context is not None:
            _release("context", context.close)
        if browser is not None:
            _release("browser", browser.close)
        _release("playwright", pw.stop)
