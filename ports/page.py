from __future__ import annotations

from typing import List, Optional, Protocol, Sequence


class PageDriver(Protocol):
    """Page-automation capability used by crawlers, extractors and the outreach engine.

    Probes (``is_visible``/``is_enabled``) never raise: an affordance that cannot be
    inspected counts as absent. Actions raise on failure.
    """

    def goto(self, url: str) -> None:
        ...

    def wait_for_load(self) -> None:
        ...

    def pause(self, ms: int) -> None:
        ...

    def is_visible(self, selector: str) -> bool:
        ...

    def is_enabled(self, selector: str) -> bool:
        ...

    def click(self, selector: str) -> None:
        ...

    def fill(self, selector: str, text: str) -> None:
        ...

    def press(self, key: str) -> None:
        ...

    def content(self) -> str:
        ...

    def hrefs(self, selector: str) -> List[str]:
        ...

    def scroll_height(self) -> int:
        ...

    def scroll_to_bottom(self) -> None:
        ...


def first_visible(page: PageDriver, selectors: Sequence[str]) -> Optional[str]:
    """First selector whose element is currently visible, if any."""
    for selector in selectors:
        if page.is_visible(selector):
            return selector
    return None
