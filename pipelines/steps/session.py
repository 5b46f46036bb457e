from __future__ import annotations

from config.settings import Settings
from pipelines.runner import RunContext
from ports.page import PageDriver
from services.session_guard import SessionGuard


class EnsureSession:
    def __init__(self, page: PageDriver, settings: Settings) -> None:
        self.guard = SessionGuard(page, settings)

    def run(self, ctx: RunContext) -> RunContext:
        self.guard.ensure_authenticated()
        ctx.meta["authenticated"] = True
        return ctx
