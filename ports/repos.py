from __future__ import annotations

from typing import Iterable, List, Optional, Protocol

from models.person_record import ConnectionStatus, Person


class PeopleRepoPort(Protocol):
    """People store as seen by the outreach engine."""

    def select_outreach_candidates(self, size_band: Iterable[str], limit: int = 50) -> List[Person]:
        ...

    def update_connection_status(
        self, person_id: int, status: ConnectionStatus, connected_at: Optional[str] = None
    ) -> None:
        ...
