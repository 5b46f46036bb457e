from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol

from models.item_result import ItemResult
from utils.exceptions import AuthenticationError, ConfigurationError, ExtractionSkip
from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A profile URL found by search, with the search that found it."""

    profile_url: str
    role: Optional[str] = None
    country: Optional[str] = None


@dataclass
class RunContext:
    candidates: List[Candidate] = field(default_factory=list)
    companies: list = field(default_factory=list)
    people: list = field(default_factory=list)
    results: List[ItemResult] = field(default_factory=list)
    meta: dict = field(default_factory=dict)

    def counts(self) -> Dict[str, int]:
        tally = Counter(r.status for r in self.results)
        return {status: tally.get(status, 0) for status in ("success", "skip", "failure")}


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            ctx = step.run(ctx)
        return ctx


def process_item(
    ctx: RunContext,
    step: str,
    key: str,
    func: Callable[[], Optional[str]],
) -> ItemResult:
    """Run one item of a loop and record a uniform result.

    ``func`` returns an optional detail string on success. ExtractionSkip becomes a
    skip; any other exception becomes a failure and the loop goes on. Configuration
    and authentication errors are fatal and propagate.
    """
    try:
        detail = func()
        result = ItemResult(key=key, status="success", detail=detail)
    except (ConfigurationError, AuthenticationError):
        raise
    except ExtractionSkip as skip:
        logger.info("Skipped: %s", skip.reason, extra={"step": step, "status": "skip", "url": key})
        result = ItemResult(key=key, status="skip", detail=skip.reason)
    except Exception as exc:
        logger.warning(
            "Failed processing %s: %s", key, exc, extra={"step": step, "status": "failure", "url": key}
        )
        result = ItemResult(key=key, status="failure", error=f"{type(exc).__name__}: {exc}")
    ctx.results.append(result)
    return result


def log_progress(step: str, done: int, total: Optional[int] = None, every: int = 5) -> None:
    if total is None:
        if done % every == 0:
            logger.info("Processed %d...", done, extra={"step": step})
        return
    if done % every == 0 or done == total:
        logger.info("Processed %d/%d...", done, total, extra={"step": step})
