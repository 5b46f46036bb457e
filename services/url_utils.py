from __future__ import annotations

import unicodedata
from typing import Optional
from urllib.parse import unquote, urljoin, urlparse

import tldextract


# Bundled public-suffix snapshot only; never fetch the list over the network
_TLD_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())

_INVISIBLE = ("\u200b", "\u200c", "\u200d", "\ufeff")


def extract_root_domain(url_or_domain: Optional[str]) -> Optional[str]:
    """Registrable domain of a URL or host, e.g. ``https://www.linkedin.com/feed`` -> ``linkedin.com``."""
    if not url_or_domain:
        return None
    text = str(url_or_domain).strip().lower()
    if not text.startswith("http://") and not text.startswith("https://"):
        text = f"http://{text.lstrip('.')}"
    ext = _TLD_EXTRACT(text)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return None


def strip_query(url: str) -> str:
    return url.split("#", 1)[0].split("?", 1)[0]


def _clean_slug(slug: str) -> str:
    slug = unicodedata.normalize("NFKC", unquote(slug)).strip()
    for ch in _INVISIBLE:
        slug = slug.replace(ch, "")
    return slug


def _section_slug(url: Optional[str], base_url: str, section: str) -> Optional[tuple[str, str]]:
    if not url:
        return None
    absolute = urljoin(base_url.rstrip("/") + "/", strip_query(url.strip()))
    parsed = urlparse(absolute)
    host = (parsed.netloc or "").lower()
    if not host or "linkedin." not in host:
        return None
    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2 or parts[0] != section:
        return None
    slug = _clean_slug(parts[1])
    if not slug:
        return None
    # Regional hosts (de.linkedin.com, pl.linkedin.com) share one identity with base_url
    base = urlparse(base_url)
    return f"{base.scheme or 'https'}://{base.netloc.lower()}", slug


def normalize_profile_url(url: Optional[str], base_url: str = "https://www.linkedin.com") -> Optional[str]:
    """Canonical ``/in/{slug}`` profile URL used as the de-duplication and identity key.

    Query strings, fragments and trailing sub-paths (``/overlay/...``, ``/details/...``)
    are dropped; non-profile links yield None.
    """
    found = _section_slug(url, base_url, "in")
    if not found:
        return None
    origin, slug = found
    return f"{origin}/in/{slug.lower()}"


def normalize_company_url(url: Optional[str], base_url: str = "https://www.linkedin.com") -> Optional[str]:
    """Canonical ``/company/{slug}/`` URL, made absolute against base_url."""
    found = _section_slug(url, base_url, "company")
    if not found:
        return None
    origin, slug = found
    return f"{origin}/company/{slug}/"


def company_about_url(url: str) -> str:
    """Point a company URL at its "about" sub-page."""
    base = strip_query(url.strip())
    if "/about" in base:
        return base
    return base.rstrip("/") + "/about/"
