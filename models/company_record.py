from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class CompanySize(str, Enum):
    RANGE_1_10 = "RANGE_1_10"
    RANGE_11_50 = "RANGE_11_50"
    RANGE_51_200 = "RANGE_51_200"
    RANGE_201_500 = "RANGE_201_500"
    RANGE_501_1000 = "RANGE_501_1000"
    RANGE_1001_5000 = "RANGE_1001_5000"
    RANGE_5001_10000 = "RANGE_5001_10000"
    RANGE_10001_PLUS = "RANGE_10001_PLUS"
    UNKNOWN = "UNKNOWN"


class ResolvedBy(str, Enum):
    """Which identity path matched (or created) a company row."""

    URL = "url"
    NAME = "name"
    CREATED = "created"


class Company(BaseModel):
    """App/DB record shape: one row of the companies table."""

    id: int
    name: str
    linkedin_url: str | None = None
    description: str | None = None
    size: CompanySize = CompanySize.UNKNOWN
    size_label: str | None = None

    model_config = ConfigDict(extra="ignore")


class CompanyResolution(BaseModel):
    company_id: int
    resolved_by: ResolvedBy

    @property
    def is_heuristic(self) -> bool:
        return self.resolved_by is ResolvedBy.NAME
