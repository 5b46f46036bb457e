from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from services.url_utils import extract_root_domain
from utils.exceptions import CookieParseError


logger = logging.getLogger(__name__)

# Epoch values above this are milliseconds (1e12 s is ~33,000 years ahead)
MILLISECONDS_THRESHOLD = 1_000_000_000_000

SESSION_COOKIE_EXPIRES = -1

_SAME_SITE = {
    "strict": "Strict",
    "lax": "Lax",
    "none": "None",
    "no_restriction": "None",
}

# "value": "<anything>" up to the quote that closes the field (followed by , or })
_VALUE_FIELD = re.compile(r'("value"\s*:\s*")(.*?)("(?=\s*[,}]))', re.DOTALL)
_ESCAPED_QUOTE = re.compile(r'\\+"')


class BrowserCookie(BaseModel):
    """Cookie shape accepted by ``BrowserContext.add_cookies``."""

    name: str
    value: str
    domain: str
    path: str = "/"
    expires: int = SESSION_COOKIE_EXPIRES
    http_only: bool = Field(default=True, alias="httpOnly")
    secure: bool = False
    same_site: Literal["Strict", "Lax", "None"] = Field(default="Lax", alias="sameSite")

    model_config = ConfigDict(populate_by_name=True)

    def to_playwright(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _is_json_string_body(text: str) -> bool:
    try:
        json.loads(f'"{text}"')
        return True
    except ValueError:
        return False


def _unwrap_backslashes(raw: str) -> str:
    """``\\ajax:123\\`` (value wrapped in a stray backslash pair) -> ``ajax:123``."""
    if len(raw) >= 2 and raw[0] == "\\" and raw[-1] == "\\" and raw[1] not in '"\\' and raw[-2] != "\\":
        return raw[1:-1]
    return raw


def _reencode_value(raw: str) -> str:
    """Collapse escaped or bare embedded quotes to plain quotes, then JSON-escape once."""
    if _is_json_string_body(raw):
        return raw
    return json.dumps(_ESCAPED_QUOTE.sub('"', _unwrap_backslashes(raw)))[1:-1]


def _drop_value_quotes(raw: str) -> str:
    if _is_json_string_body(raw):
        return raw
    return json.dumps(_ESCAPED_QUOTE.sub('"', _unwrap_backslashes(raw)).replace('"', ""))[1:-1]


def _repair_values(text: str, fix: Callable[[str], str]) -> str:
    return _VALUE_FIELD.sub(lambda m: m.group(1) + fix(m.group(2)) + m.group(3), text)


def parse_cookies_json(payload: str) -> List[Dict[str, Any]]:
    """Parse a cookie export, repairing badly escaped quotes inside ``value`` fields.

    Passes, most faithful first: strict JSON; values re-encoded with their embedded
    quotes kept; values with embedded quotes dropped. Raises CookieParseError when
    none of them yields a JSON array.
    """
    attempts: List[Callable[[str], str]] = [
        lambda t: t,
        lambda t: _repair_values(t, _reencode_value),
        lambda t: _repair_values(t, _drop_value_quotes),
    ]
    last_error: Optional[Exception] = None
    for idx, attempt in enumerate(attempts):
        try:
            data = json.loads(attempt(payload))
        except ValueError as exc:
            last_error = exc
            continue
        if isinstance(data, dict):
            data = data.get("cookies", [data])
        if not isinstance(data, list):
            raise CookieParseError(f"Cookie payload must be a JSON array, got {type(data).__name__}")
        if idx:
            logger.info("Cookie payload parsed after repair pass %d", idx, extra={"step": "cookies"})
        return data
    raise CookieParseError(f"Failed to parse cookies JSON: {last_error}")


def validate_cookies(cookies: List[Any]) -> List[Dict[str, Any]]:
    """Drop records without a usable name, value or domain."""
    valid: List[Dict[str, Any]] = []
    for cookie in cookies:
        if not isinstance(cookie, dict):
            continue
        name = cookie.get("name")
        value = cookie.get("value")
        domain = cookie.get("domain")
        if not (isinstance(name, str) and name):
            continue
        if not (isinstance(value, str) and value):
            continue
        if not (isinstance(domain, str) and domain):
            continue
        valid.append(cookie)
    return valid


def normalize_expires(expires: Any) -> int:
    """Epoch seconds; -1 for session cookies. Millisecond values are scaled down."""
    if expires is None or isinstance(expires, bool):
        return SESSION_COOKIE_EXPIRES
    try:
        value = int(float(expires))
    except (TypeError, ValueError):
        return SESSION_COOKIE_EXPIRES
    if value > MILLISECONDS_THRESHOLD:
        return value // 1000
    return value


def map_same_site(same_site: Any) -> str:
    return _SAME_SITE.get(str(same_site or "").strip().lower(), "Lax")


def convert_cookies(cookies: List[Dict[str, Any]]) -> List[BrowserCookie]:
    converted: List[BrowserCookie] = []
    for cookie in cookies:
        if not cookie.get("domain"):
            continue
        converted.append(
            BrowserCookie(
                name=cookie["name"],
                value=cookie["value"],
                domain=cookie["domain"],
                path=cookie.get("path") or "/",
                expires=normalize_expires(cookie.get("expires")),
                http_only=True,  # absent from browser-extension exports
                secure=bool(cookie.get("secure")),
                same_site=map_same_site(cookie.get("sameSite")),
            )
        )
    return converted


def filter_for_domain(cookies: List[BrowserCookie], root_domain: str) -> List[BrowserCookie]:
    return [c for c in cookies if root_domain in c.domain]


def load_session_cookies(payload: str, base_url: str) -> List[BrowserCookie]:
    """parse -> validate -> convert -> keep only cookies of the target site."""
    if not payload or not payload.strip():
        return []
    root_domain = extract_root_domain(base_url) or "linkedin.com"
    raw = parse_cookies_json(payload)
    valid = validate_cookies(raw)
    cookies = filter_for_domain(convert_cookies(valid), root_domain)
    logger.info(
        "Loaded %d of %d cookies for %s", len(cookies), len(raw), root_domain, extra={"step": "cookies"}
    )
    return cookies
