from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import List

from config.settings import Settings
from models.person_record import ConnectionStatus, Person
from ports.page import PageDriver, first_visible
from ports.repos import PeopleRepoPort


logger = logging.getLogger(__name__)


CONNECT_BUTTON = (
    'main button[aria-label^="Invite"][aria-label$="to connect"]',
    'main button:has-text("Connect")',
)
MORE_BUTTON = (
    'main button[aria-label="More actions"]',
    'main button:has-text("More")',
)
MENU_CONNECT = (
    'div[role="menu"] div[aria-label$="to connect"]',
    'div[role="menu"] div:has-text("Connect")',
)
ADD_NOTE_BUTTON = ('button:has-text("Add a note")',)
NOTE_TEXTAREA = ("textarea#custom-message", "textarea")
SEND_BUTTON = (
    'button[aria-label="Send invitation"]',
    'button[aria-label="Send now"]',
    'button:has-text("Send")',
)
MESSAGE_BUTTON = (
    'main a:has-text("Message")',
    'main button:has-text("Message")',
)


class ConnectOutcome(str, Enum):
    SENT = "SENT"
    ALREADY = "ALREADY"
    FAILED = "FAILED"


OUTCOME_STATUS = {
    ConnectOutcome.SENT: ConnectionStatus.PENDING,
    ConnectOutcome.ALREADY: ConnectionStatus.CONNECTED,
    ConnectOutcome.FAILED: ConnectionStatus.FAILED,
}


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class OutreachEngine:
    """Sends connection requests to people discovered earlier and records the outcome."""

    def __init__(self, page: PageDriver, people_repo: PeopleRepoPort, settings: Settings):
        self.page = page
        self.people_repo = people_repo
        self.settings = settings

    def select_candidates(self) -> List[Person]:
        return self.people_repo.select_outreach_candidates(
            self.settings.outreach_size_band, self.settings.outreach_limit
        )

    def request_connection(self) -> ConnectOutcome:
        """Drive the connect dialog on the currently open profile.

        The outcome is read from which affordances are visible; nothing is
        confirmed with the server.
        """
        connect = first_visible(self.page, CONNECT_BUTTON)
        if connect:
            self.page.click(connect)
        else:
            more = first_visible(self.page, MORE_BUTTON)
            if more:
                self.page.click(more)
                menu_connect = first_visible(self.page, MENU_CONNECT)
                if menu_connect:
                    self.page.click(menu_connect)

        add_note = first_visible(self.page, ADD_NOTE_BUTTON)
        if add_note:
            self.page.click(add_note)
            note = self.settings.connection_note.strip()
            textarea = first_visible(self.page, NOTE_TEXTAREA)
            if note and textarea:
                self.page.fill(textarea, note)

        send = first_visible(self.page, SEND_BUTTON)
        if send:
            self.page.click(send)
            self.page.pause(800)
            return ConnectOutcome.SENT

        if first_visible(self.page, MESSAGE_BUTTON):
            return ConnectOutcome.ALREADY

        return ConnectOutcome.FAILED

    def connect(self, person: Person) -> ConnectOutcome:
        """Open the profile, request the connection and persist the new status.

        Navigation errors propagate and leave the stored status untouched.
        """
        self.page.goto(person.profile_url)
        self.page.pause(self.settings.action_delay_ms)
        outcome = self.request_connection()
        status = OUTCOME_STATUS[outcome]
        connected_at = _utc_now() if outcome is not ConnectOutcome.FAILED else None
        self.people_repo.update_connection_status(person.id, status, connected_at)
        return outcome
