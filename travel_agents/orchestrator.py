"""Travel Experience Agent (TXA): coordinates the four specialist agents.

- Derives one sub-context per specialist from the day's context
- Runs the specialists concurrently and waits for all of them
- Fails the whole turn if any specialist fails
- Resolves conflicts with a fixed ladder: health > logistics > budget > activity
- Optionally records every recommendation to an audit sink
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import Any

from travel_agents.audit import AuditSink
from travel_agents.base import BaseAgent
from travel_agents.budget import BudgetControlAgent
from travel_agents.errors import AggregationError
from travel_agents.golf import GolfOperationsAgent
from travel_agents.health import HealthRecoveryAgent
from travel_agents.history import ActivityHistory, IntentHeuristicHistory, SpendLedger, ZeroSpendLedger
from travel_agents.schemas import (
    AgentRecommendation,
    CoordinationResult,
    DailyItinerary,
    PlannedActivity,
    TravelExperienceContext,
)
from travel_agents.transport import TransportLogisticsAgent

log = logging.getLogger("travel_agents.orchestrator")

_URGENT = ("critical", "high")

# primary intent -> (physical load, estimated steps)
_ACTIVITY_LOAD = {
    "golf": ("high", 10000),
    "culture": ("medium", 6000),
}
_DEFAULT_LOAD = ("low", 3000)


def estimate_planned_activity(itinerary: DailyItinerary) -> PlannedActivity | None:
    schedule = itinerary.schedule
    activities = [
        block.activity for block in (schedule.morning, schedule.afternoon) if block is not None and block.activity
    ]
    if not activities:
        return None
    load, steps = _ACTIVITY_LOAD.get(itinerary.primary_intent, _DEFAULT_LOAD)
    return PlannedActivity(type=itinerary.primary_intent, physical_load=load, estimated_steps=steps)


class TravelExperienceAgent(BaseAgent):
    agent_type = "travel_experience"
    name = "Travel Experience Agent (TXA)"
    context_model = TravelExperienceContext
    required_fields = ("trip_id", "user_id", "date", "trip", "current_itinerary")

    def __init__(
        self,
        *,
        health: HealthRecoveryAgent | None = None,
        golf: GolfOperationsAgent | None = None,
        budget: BudgetControlAgent | None = None,
        transport: TransportLogisticsAgent | None = None,
        history: ActivityHistory | None = None,
        spend: SpendLedger | None = None,
        audit_sink: AuditSink | None = None,
    ):
        self.health = health or HealthRecoveryAgent()
        self.golf = golf or GolfOperationsAgent()
        self.budget = budget or BudgetControlAgent()
        self.transport = transport or TransportLogisticsAgent()
        self.history = history or IntentHeuristicHistory()
        self.spend = spend or ZeroSpendLedger()
        self.audit_sink = audit_sink

    @property
    def specialists(self) -> dict[str, BaseAgent]:
        return {
            "health": self.health,
            "golf": self.golf,
            "budget": self.budget,
            "transport": self.transport,
        }

    async def analyze(self, context: TravelExperienceContext | Mapping[str, Any]) -> AgentRecommendation:
        result = await self.coordinate(context)
        return result.final

    async def coordinate(self, context: TravelExperienceContext | Mapping[str, Any]) -> CoordinationResult:
        t_start = time.perf_counter()
        ctx: TravelExperienceContext = self.validate_context(context)
        itinerary = ctx.current_itinerary
        log.info(
            "TXA beginning daily analysis for %s in %s (intent=%s)",
            ctx.date, itinerary.location, itinerary.primary_intent,
            extra={"agent": self.name},
        )

        # ── Stage 1: history lookups ─────────────────────────────
        active_days, golf_days, actual_spend = await self._lookup_history(ctx)

        # ── Stage 2: sub-contexts ────────────────────────────────
        sub_contexts = {
            "health": self._health_context(ctx, active_days),
            "golf": self._golf_context(ctx, golf_days),
            "budget": self._budget_context(ctx, actual_spend),
            "transport": self._transport_context(ctx),
        }

        # ── Stage 3: fan out, all complete or fail ───────────────
        recommendations = await self._fan_out(sub_contexts)

        # ── Stage 4: coordination ────────────────────────────────
        deciding_agent, final = self.apply_coordination_rules(recommendations, ctx)
        log.info(
            "TXA final decision: %s (priority=%s, decided by %s) in %.0fms",
            final.decision, final.priority, deciding_agent or "consensus",
            (time.perf_counter() - t_start) * 1000,
            extra={"agent": self.name},
        )

        if self.audit_sink is not None:
            await self._record(ctx, recommendations, final)

        return CoordinationResult(final=final, recommendations=recommendations, deciding_agent=deciding_agent)

    async def _lookup_history(self, ctx: TravelExperienceContext) -> tuple[int, int, dict[str, float]]:
        itinerary = ctx.current_itinerary
        lookups = {
            "consecutive_active_days": self.history.consecutive_active_days(ctx.user_id, ctx.date, itinerary),
            "consecutive_golf_days": self.history.consecutive_golf_days(ctx.user_id, ctx.date, itinerary),
            "actual_spend": self._actual_spend(ctx),
        }
        done = await asyncio.gather(*lookups.values(), return_exceptions=True)

        failures = {name: result for name, result in zip(lookups, done) if isinstance(result, BaseException)}
        if failures:
            for name, exc in failures.items():
                log.error("History lookup %s failed: %s", name, exc, extra={"agent": self.name})
            raise AggregationError(self.name, failures, "history lookups") from next(iter(failures.values()))
        active_days, golf_days, actual_spend = done
        return active_days, golf_days, actual_spend

    async def _fan_out(self, sub_contexts: dict[str, dict[str, Any]]) -> dict[str, AgentRecommendation]:
        agents = self.specialists
        t0 = time.perf_counter()
        tasks: dict[str, asyncio.Task] = {
            name: asyncio.create_task(agents[name].analyze(sub_ctx)) for name, sub_ctx in sub_contexts.items()
        }
        done = await asyncio.gather(*tasks.values(), return_exceptions=True)

        results: dict[str, AgentRecommendation] = {}
        failures: dict[str, BaseException] = {}
        for name, result in zip(tasks.keys(), done):
            if isinstance(result, BaseException):
                log.error("%s failed: %s", agents[name].name, result, extra={"agent": self.name})
                failures[agents[name].agent_type] = result
            else:
                results[name] = result
        elapsed = (time.perf_counter() - t0) * 1000
        log.info("Specialists done in %.0fms", elapsed, extra={"agent": self.name})

        if failures:
            raise AggregationError(self.name, failures) from next(iter(failures.values()))
        return results

    # ── Sub-context builders ──────────────────────────────────
    def _health_context(self, ctx: TravelExperienceContext, active_days: int) -> dict[str, Any]:
        feedback = ctx.traveler_feedback
        return {
            **_envelope(ctx),
            "sleep_quality": feedback.sleep_quality if feedback else None,
            "energy_rating": feedback.energy_rating if feedback else None,
            "consecutive_active_days": active_days,
            "wellness_profile": ctx.wellness_profile,
            "planned_activity": estimate_planned_activity(ctx.current_itinerary),
        }

    def _golf_context(self, ctx: TravelExperienceContext, golf_days: int) -> dict[str, Any]:
        feedback = ctx.traveler_feedback
        return {
            **_envelope(ctx),
            "location": ctx.current_itinerary.location,
            "energy_level": feedback.energy_rating if feedback else None,
            "weather_forecast": ctx.weather,
            "consecutive_golf_days": golf_days,
            "available_courses": ctx.available_courses,
        }

    def _budget_context(self, ctx: TravelExperienceContext, actual_spend: dict[str, float]) -> dict[str, Any]:
        category_spend = {
            category: {"planned": planned or 0, "actual": actual_spend.get(category, 0.0)}
            for category, planned in ctx.trip.budget.categories.items()
        }
        return {
            **_envelope(ctx),
            "trip": ctx.trip,
            "category_spend": category_spend,
            "upcoming_expenses": ctx.upcoming_expenses,
            "unused_prepaid": ctx.unused_prepaid,
        }

    def _transport_context(self, ctx: TravelExperienceContext) -> dict[str, Any]:
        sub = {**_envelope(ctx), "current_location": ctx.current_itinerary.location}
        if ctx.transport_plan is not None:
            sub.update(ctx.transport_plan.model_dump())
        return sub

    async def _actual_spend(self, ctx: TravelExperienceContext) -> dict[str, float]:
        categories = list(ctx.trip.budget.categories)
        amounts = await asyncio.gather(*(self.spend.actual_spend(ctx.trip_id, c) for c in categories))
        return dict(zip(categories, amounts))

    # ── Coordination ──────────────────────────────────────────
    def apply_coordination_rules(
        self, recs: dict[str, AgentRecommendation], ctx: TravelExperienceContext
    ) -> tuple[str | None, AgentRecommendation]:
        """Pick exactly one specialist's decision, in fixed priority order.

        Returns the agent type that decided (``None`` when every assessment was
        favorable) and the final recommendation. Recommendations are never blended.
        """
        health, golf, budget, transport = recs["health"], recs["golf"], recs["budget"], recs["transport"]

        if health.priority in _URGENT:
            return self.health.agent_type, self._adopt(
                "health", recs, "Other agent recommendations deferred to prioritize well-being."
            )

        if transport.priority in _URGENT:
            return self.transport.agent_type, self._adopt(
                "transport", recs, "Schedule adjusted to ensure reliable transport."
            )

        if budget.priority == "critical":
            return self.budget.agent_type, self._adopt(
                "budget", recs, "Spending adjustments required before proceeding.", approval_required=True
            )

        if golf.approval_required:
            return self.golf.agent_type, self._adopt("golf", recs)

        return None, self.recommend(
            "Proceed with planned itinerary",
            _nominal_summary(ctx),
            {"deciding_agent": None, "recommendations": {k: v.model_dump() for k, v in recs.items()}},
            [
                "All agent assessments favorable",
                f"Health: {health.decision}",
                f"Transport: {transport.decision}",
                f"Budget: {budget.decision}",
                f"Golf: {golf.decision}",
            ],
            approval_required=False,
            priority="low",
        )

    def _adopt(
        self,
        name: str,
        recs: dict[str, AgentRecommendation],
        note: str | None = None,
        *,
        approval_required: bool | None = None,
    ) -> AgentRecommendation:
        chosen = recs[name]
        actions = list(chosen.output_actions)
        if note:
            actions += ["", note]
        return self.recommend(
            chosen.decision,
            chosen.rationale,
            {
                "deciding_agent": self.specialists[name].agent_type,
                "adopted_recommendation": chosen.model_dump(),
                "other_recommendations": {k: v.model_dump() for k, v in recs.items() if k != name},
            },
            actions,
            approval_required=chosen.approval_required if approval_required is None else approval_required,
            priority=chosen.priority,
        )

    async def _record(
        self, ctx: TravelExperienceContext, recs: dict[str, AgentRecommendation], final: AgentRecommendation
    ) -> None:
        for name, rec in recs.items():
            await self.audit_sink.record(self.specialists[name].to_decision(rec, ctx.trip_id, ctx.date))
        await self.audit_sink.record(self.to_decision(final, ctx.trip_id, ctx.date))


def _envelope(ctx: TravelExperienceContext) -> dict[str, Any]:
    return {"trip_id": ctx.trip_id, "user_id": ctx.user_id, "date": ctx.date}


def _nominal_summary(ctx: TravelExperienceContext) -> str:
    itinerary = ctx.current_itinerary
    parts = [
        f"Day proceeding as planned in {itinerary.location}.",
        f"Primary focus: {itinerary.primary_intent}.",
    ]
    if ctx.traveler_feedback and ctx.traveler_feedback.energy_rating is not None:
        parts.append(f"Energy level: {ctx.traveler_feedback.energy_rating}/5.")
    parts.append("All systems green.")
    return " ".join(parts)
