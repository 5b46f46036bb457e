from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ProfileData(BaseModel):
    """Fields scraped from one rendered profile page; any of them may be missing."""

    full_name: str = ""
    headline: str | None = None
    country: str | None = None
    latest_company_name: str | None = None
    latest_company_url: str | None = None
    title: str | None = None
    duration: str | None = None
    description: str | None = None

    model_config = ConfigDict(extra="forbid")


class CompanyData(BaseModel):
    """Fields scraped from one company "about" page."""

    title: str | None = None
    description: str | None = None
    size_label: str | None = None

    model_config = ConfigDict(extra="forbid")
