from __future__ import annotations

import logging

from config.settings import Settings
from models.profile_extraction_result import CompanyData
from ports.page import PageDriver
from services.url_utils import company_about_url
from sources.strategies import (
    DefinitionValue,
    MatchingText,
    SelectorAttr,
    SelectorText,
    first_non_empty,
    parse_html,
)


logger = logging.getLogger(__name__)


TITLE = (
    SelectorText("h1"),
    SelectorAttr('meta[property="og:title"]', "content"),
)
DESCRIPTION = (
    SelectorText("p.break-words.white-space-pre-wrap"),
    SelectorText("div.org-grid__core-rail--no-margin-left p"),
)
SIZE_LABEL = (
    DefinitionValue("Company size"),
    MatchingText("dd", r"\bemployees?\b"),
)


def parse_company(html: str) -> CompanyData:
    soup = parse_html(html)
    return CompanyData(
        title=first_non_empty(soup, TITLE),
        description=first_non_empty(soup, DESCRIPTION),
        size_label=first_non_empty(soup, SIZE_LABEL),
    )


class CompanyExtractor:
    def __init__(self, page: PageDriver, settings: Settings):
        self.page = page
        self.settings = settings

    def extract_company(self, url: str) -> CompanyData:
        about = company_about_url(url)
        self.page.goto(about)
        self.page.pause(self.settings.action_delay_ms)
        data = parse_company(self.page.content())
        logger.debug(
            "Extracted company title=%r size=%r", data.title, data.size_label,
            extra={"step": "extract_company", "url": about},
        )
        return data
