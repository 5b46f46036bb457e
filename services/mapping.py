from __future__ import annotations

import re
from typing import Optional

from models.company_record import CompanySize


# Ordered: first matching bucket wins. Each text matches only between digit boundaries
# so that e.g. "501-1000" is never read as "1-10".
_SIZE_BUCKET_TEXTS: list[tuple[CompanySize, tuple[str, ...]]] = [
    (CompanySize.RANGE_1_10, ("0-1", "1-10", "2-10")),
    (CompanySize.RANGE_11_50, ("11-50",)),
    (CompanySize.RANGE_51_200, ("51-200",)),
    (CompanySize.RANGE_201_500, ("201-500",)),
    (CompanySize.RANGE_501_1000, ("501-1,000", "501-1000")),
    (CompanySize.RANGE_1001_5000, ("1,001-5,000", "1001-5000")),
    (CompanySize.RANGE_5001_10000, ("5,001-10,000", "5001-10000")),
    (CompanySize.RANGE_10001_PLUS, ("10,001+", "10001+")),
]

_SIZE_PATTERNS: list[tuple[CompanySize, re.Pattern[str]]] = [
    (
        size,
        re.compile(
            "|".join(r"(?<![\d,])" + re.escape(text) + (r"(?![\d,])" if not text.endswith("+") else "") for text in texts)
        ),
    )
    for size, texts in _SIZE_BUCKET_TEXTS
]


def _normalize_label(label: str) -> str:
    text = label.lower().replace("\u2013", "-").replace("\u2014", "-")
    # "1 - 10" -> "1-10", "10,001 +" -> "10,001+"
    text = re.sub(r"\s*-\s*", "-", text)
    text = re.sub(r"\s*\+", "+", text)
    return text


def map_size_label(size_label: Optional[str]) -> CompanySize:
    """Classify a raw company-size text into a size bucket. Never raises."""
    if not size_label or not isinstance(size_label, str):
        return CompanySize.UNKNOWN
    label = _normalize_label(size_label)
    for size, pattern in _SIZE_PATTERNS:
        if pattern.search(label):
            return size
    return CompanySize.UNKNOWN
