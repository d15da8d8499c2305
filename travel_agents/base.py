"""Shared agent contract.

Every agent is a stateless rule evaluator exposing ``analyze(context)``. The
context may be the agent's own context model or a plain mapping using either
snake_case or camelCase keys; mappings are checked for required fields before
the model is built so that failures name the agent and the missing fields.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from travel_agents.errors import InvalidContextError, MissingContextError
from travel_agents.schemas import AgentContext, AgentDecision, AgentRecommendation, Priority

log = logging.getLogger("travel_agents.base")


class BaseAgent:
    agent_type: ClassVar[str] = "base"
    name: ClassVar[str] = "Base Agent"
    context_model: ClassVar[type[AgentContext]] = AgentContext
    required_fields: ClassVar[tuple[str, ...]] = ("trip_id", "user_id", "date")

    async def analyze(self, context: AgentContext | Mapping[str, Any]) -> AgentRecommendation:
        ctx = self.validate_context(context)
        return self.evaluate(ctx)

    def evaluate(self, ctx: Any) -> AgentRecommendation:
        raise NotImplementedError

    # ── Context handling ──────────────────────────────────────
    def validate_context(self, context: AgentContext | Mapping[str, Any]) -> Any:
        if isinstance(context, self.context_model):
            return context
        if isinstance(context, AgentContext):
            context = context.model_dump(exclude_unset=True)
        if not isinstance(context, Mapping):
            raise InvalidContextError(self.name, ["context"], f"expected a mapping, got {type(context).__name__}")

        missing = [f for f in self.required_fields if _lookup(context, f) is None]
        if missing:
            log.error("%s rejected context: missing %s", self.name, ", ".join(missing))
            raise MissingContextError(self.name, missing)

        try:
            return self.context_model.model_validate(dict(context))
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) or "context" for err in e.errors()})
            raise InvalidContextError(self.name, fields, e.errors()[0]["msg"]) from e

    # ── Output helpers ────────────────────────────────────────
    def recommend(
        self,
        decision: str,
        rationale: str,
        signals: dict[str, Any],
        actions: list[str],
        *,
        approval_required: bool = False,
        priority: Priority = "medium",
    ) -> AgentRecommendation:
        return AgentRecommendation(
            decision=decision,
            rationale=rationale,
            input_signals=signals,
            output_actions=actions,
            approval_required=approval_required,
            priority=priority,
        )

    def to_decision(self, rec: AgentRecommendation, trip_id: str, date: str) -> AgentDecision:
        return AgentDecision(
            trip_id=trip_id,
            date=date,
            agent_type=self.agent_type,
            decision=rec.decision,
            rationale=rec.rationale,
            input_signals=rec.input_signals,
            output_actions=list(rec.output_actions),
            timestamp=datetime.now(timezone.utc),
            approval_required=rec.approval_required,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(agent_type={self.agent_type!r})"


def _lookup(context: Mapping[str, Any], field: str) -> Any:
    if field in context:
        return context[field]
    return context.get(to_camel(field))
