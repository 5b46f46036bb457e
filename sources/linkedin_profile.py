from __future__ import annotations

import logging
from typing import Optional

from config.settings import Settings
from models.profile_extraction_result import ProfileData
from ports.page import PageDriver
from services.url_utils import normalize_company_url
from sources.strategies import (
    SelectorAttr,
    SelectorText,
    first_node,
    first_non_empty,
    parse_html,
)


logger = logging.getLogger(__name__)


FULL_NAME = (
    SelectorText("h1.text-heading-xlarge"),
    SelectorText("main section h1"),
)
HEADLINE = (
    SelectorText("div.text-body-medium.break-words"),
    SelectorText("div.pv-text-details__left-panel div.text-body-medium"),
)
COUNTRY = (
    SelectorText("span.text-body-small.inline.t-black--light.break-words"),
    SelectorText("div.pv-text-details__left-panel span.text-body-small"),
)

# First (latest) entry of the experience section
EXPERIENCE_ITEM = (
    "section[id*=experience] li.artdeco-list__item",
    "section:has(> div#experience) li.artdeco-list__item",
    "div#experience ~ div li",
)
COMPANY_URL = (
    SelectorAttr('a[href*="/company/"]', "href"),
)
COMPANY_NAME = (
    SelectorText('span.t-14.t-normal > span[aria-hidden="true"]'),
    SelectorText("span.t-14.t-normal"),
    SelectorText('a[href*="/company/"]'),
)
TITLE = (
    SelectorText('div.t-bold > span[aria-hidden="true"]'),
    SelectorText('span[aria-hidden="true"]'),
)
DURATION = (
    SelectorText("span.pvs-entity__caption-wrapper"),
    SelectorText('span.t-14.t-normal.t-black--light > span[aria-hidden="true"]'),
)
DESCRIPTION = (
    SelectorText('div.inline-show-more-text span[aria-hidden="true"]'),
    SelectorText('div.pvs-list__outer-container div.t-14 span[aria-hidden="true"]'),
)


def _company_name(raw: Optional[str]) -> Optional[str]:
    # "Acme Corp · Full-time" -> "Acme Corp"
    if not raw:
        return None
    return raw.split(" · ")[0].strip() or None


def parse_profile(html: str, base_url: str = "https://www.linkedin.com") -> ProfileData:
    """Build a ProfileData from rendered profile markup; missing fields stay None."""
    soup = parse_html(html)
    item = first_node(soup, EXPERIENCE_ITEM)
    raw_company_url = first_non_empty(item, COMPANY_URL)
    return ProfileData(
        full_name=first_non_empty(soup, FULL_NAME) or "",
        headline=first_non_empty(soup, HEADLINE),
        country=first_non_empty(soup, COUNTRY),
        latest_company_name=_company_name(first_non_empty(item, COMPANY_NAME)),
        latest_company_url=normalize_company_url(raw_company_url, base_url),
        title=first_non_empty(item, TITLE),
        duration=first_non_empty(item, DURATION),
        description=first_non_empty(item, DESCRIPTION),
    )


class ProfileExtractor:
    def __init__(self, page: PageDriver, settings: Settings):
        self.page = page
        self.settings = settings

    def extract_profile(self, url: str) -> ProfileData:
        self.page.goto(url)
        self.page.pause(self.settings.action_delay_ms)
        data = parse_profile(self.page.content(), self.settings.base_url)
        logger.debug(
            "Extracted profile name=%r company=%r", data.full_name, data.latest_company_name,
            extra={"step": "extract_profile", "url": url},
        )
        return data
