from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Experience(BaseModel):
    """App/DB record shape: one append-only row of the experiences table."""

    id: int
    person_id: int
    company_id: int | None = None
    company_name: str
    company_url: str | None = None
    title: str | None = None
    is_current: bool = True
    description: str | None = None
    duration: str | None = None

    model_config = ConfigDict(extra="ignore")
