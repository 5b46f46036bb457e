"""
Field extraction strategies over rendered page markup.

Each field of a scraped record is described by an ordered list of strategies;
the first one that yields a non-empty string wins. Strategies are plain
callables over a BeautifulSoup node, so each one can be exercised against a
fixture snippet without a browser.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from bs4 import BeautifulSoup, Tag


def clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace; empty strings become None."""
    if text is None:
        return None
    collapsed = re.sub(r"\s+", " ", text).strip()
    return collapsed or None


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


class FieldStrategy(Protocol):
    def __call__(self, root: Tag) -> Optional[str]:
        ...


@dataclass(frozen=True)
class SelectorText:
    """Text of the first element matching a CSS selector."""

    selector: str

    def __call__(self, root: Tag) -> Optional[str]:
        node = root.select_one(self.selector)
        return clean_text(node.get_text(" ")) if node else None


@dataclass(frozen=True)
class SelectorAttr:
    """Attribute value of the first matching element that carries it."""

    selector: str
    attr: str

    def __call__(self, root: Tag) -> Optional[str]:
        for node in root.select(self.selector):
            value = node.get(self.attr)
            if isinstance(value, list):
                value = " ".join(value)
            value = clean_text(value)
            if value:
                return value
        return None


@dataclass(frozen=True)
class MatchingText:
    """Text of the first element matching a selector whose text matches a pattern."""

    selector: str
    pattern: str

    def __call__(self, root: Tag) -> Optional[str]:
        regex = re.compile(self.pattern, re.IGNORECASE)
        for node in root.select(self.selector):
            text = clean_text(node.get_text(" "))
            if text and regex.search(text):
                return text
        return None


@dataclass(frozen=True)
class DefinitionValue:
    """``<dd>`` following the ``<dt>`` whose text contains ``term`` (case-insensitive)."""

    term: str

    def __call__(self, root: Tag) -> Optional[str]:
        needle = self.term.lower()
        for dt in root.find_all("dt"):
            if needle in dt.get_text(" ").lower():
                dd = dt.find_next_sibling("dd")
                if dd is not None:
                    return clean_text(dd.get_text(" "))
        return None


def first_non_empty(root: Optional[Tag], strategies: Sequence[FieldStrategy]) -> Optional[str]:
    """Run strategies in order and return the first non-empty result."""
    if root is None:
        return None
    for strategy in strategies:
        value = strategy(root)
        if value:
            return value
    return None


def first_node(root: Optional[Tag], selectors: Sequence[str]) -> Optional[Tag]:
    """First element matched by the first selector that matches anything."""
    if root is None:
        return None
    for selector in selectors:
        node = root.select_one(selector)
        if node is not None:
            return node
    return None
