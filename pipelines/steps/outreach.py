from __future__ import annotations

import logging

from pipelines.runner import RunContext, log_progress, process_item
from services.outreach import ConnectOutcome, OutreachEngine


logger = logging.getLogger(__name__)


class LoadOutreachCandidates:
    def __init__(self, engine: OutreachEngine) -> None:
        self.engine = engine

    def run(self, ctx: RunContext) -> RunContext:
        ctx.people = self.engine.select_candidates()
        ctx.meta["outreach_candidates_total"] = len(ctx.people)
        logger.info("Candidates to connect: %d", len(ctx.people), extra={"step": "outreach"})
        return ctx


class SendConnectionRequests:
    def __init__(self, engine: OutreachEngine) -> None:
        self.engine = engine

    def run(self, ctx: RunContext) -> RunContext:
        people = ctx.people or []
        tally = {outcome.value: 0 for outcome in ConnectOutcome}

        def _connect(person) -> str:
            outcome = self.engine.connect(person)
            tally[outcome.value] += 1
            if outcome is ConnectOutcome.FAILED:
                logger.warning(
                    "Failed to send connection to %s", person.full_name,
                    extra={"step": "outreach", "status": outcome.value, "url": person.profile_url},
                )
            else:
                logger.info(
                    "Connection %s for %s", outcome.value.lower(), person.full_name,
                    extra={"step": "outreach", "status": outcome.value, "url": person.profile_url},
                )
            return outcome.value

        for idx, person in enumerate(people, start=1):
            process_item(ctx, "outreach", person.profile_url, lambda p=person: _connect(p))
            log_progress("outreach", idx, len(people))
        ctx.meta["outreach_outcomes"] = tally
        return ctx
