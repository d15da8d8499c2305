from __future__ import annotations

import logging
from typing import Protocol

from travel_agents.schemas import AgentDecision

log = logging.getLogger("travel_agents.audit")


class AuditSink(Protocol):
    async def record(self, decision: AgentDecision) -> None: ...


class InMemoryAuditSink:
    """Keeps decisions in arrival order. Useful for tests and single-process runs."""

    def __init__(self):
        self.decisions: list[AgentDecision] = []

    async def record(self, decision: AgentDecision) -> None:
        self.decisions.append(decision)
        log.debug("Recorded %s decision for trip %s on %s", decision.agent_type, decision.trip_id, decision.date)

    def for_day(self, trip_id: str, date: str | None = None) -> list[AgentDecision]:
        return [d for d in self.decisions if d.trip_id == trip_id and (date is None or d.date == date)]

    def pending_approval(self) -> list[AgentDecision]:
        return [d for d in self.decisions if d.approval_required and d.approved is None]
