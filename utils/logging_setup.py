from __future__ import annotations

import logging
import os
import sys
from typing import Any


_INITIALIZED: bool = False

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s "
    "step=%(step)s status=%(status)s url=%(url)s run_id=%(run_id)s"
)

# Third-party loggers that chatter at INFO (suffix-list cache, its file locks)
_QUIET_LOGGERS = ("tldextract", "filelock")


class SafeExtraFormatter(logging.Formatter):
    """Fills the step/status/url/run_id fields for records logged without them."""

    DEFAULTS: dict[str, Any] = {
        "step": "-",
        "status": "-",
        "url": "-",
        "run_id": "-",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        if record.run_id == "-":
            record.run_id = os.getenv("RUN_ID", "-")
        return super().format(record)


def init_logging(level: str | None = None) -> None:
    """Route all logs to stdout once per process; later calls are no-ops."""
    global _INITIALIZED
    if _INITIALIZED:
        return

    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_level = getattr(logging, name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(SafeExtraFormatter(fmt=LOG_FORMAT))
        root_logger.addHandler(handler)

    for noisy in _QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    _INITIALIZED = True
