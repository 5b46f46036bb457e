from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ConnectionStatus(str, Enum):
    NONE = "NONE"
    PENDING = "PENDING"
    CONNECTED = "CONNECTED"
    FAILED = "FAILED"


class Person(BaseModel):
    """App/DB record shape: one row of the people table."""

    id: int
    full_name: str
    headline: str | None = None
    country: str | None = None
    profile_url: str
    connection_status: ConnectionStatus = ConnectionStatus.NONE
    connected_at: str | None = None
    searching_role: str | None = None
    searching_country: str | None = None

    model_config = ConfigDict(extra="ignore")
