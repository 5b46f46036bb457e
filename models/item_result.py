from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


ItemStatus = Literal["success", "skip", "failure"]


class ItemResult(BaseModel):
    """Outcome of processing one candidate, company or outreach target."""

    key: str
    status: ItemStatus
    detail: str | None = None
    error: str | None = None
