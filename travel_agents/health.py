"""Health & Recovery Agent: guards sleep, energy and recovery across the trip."""
from __future__ import annotations

import logging
from typing import Any

from travel_agents.base import BaseAgent
from travel_agents.schemas import AgentRecommendation, HealthRecoveryContext

log = logging.getLogger("travel_agents.health")

DEFAULT_STEPS_TARGET = 8000
_CULTURAL_TYPES = {"cultural", "culture"}


class HealthRecoveryAgent(BaseAgent):
    agent_type = "health_recovery"
    name = "Health & Recovery Agent"
    context_model = HealthRecoveryContext
    required_fields = ("trip_id", "user_id", "date", "consecutive_active_days")

    def evaluate(self, ctx: HealthRecoveryContext) -> AgentRecommendation:
        signals = collect_signals(ctx)
        log.info(
            "Analyzing health & recovery needs (risk=%s)", assess_risk_level(signals),
            extra={"agent": self.name, "data": signals},
        )

        rest_reasons = _full_rest_reasons(signals)
        if rest_reasons:
            return self._full_rest_day(signals, rest_reasons)

        moderation_reasons = _moderation_reasons(signals, ctx)
        if moderation_reasons:
            return self._moderate_activity(signals, ctx, moderation_reasons)

        wellness_reasons = _wellness_reasons(signals)
        if wellness_reasons:
            return self._wellness_activity(signals, wellness_reasons)

        return self.recommend(
            "Proceed with planned activities",
            "Health indicators are within acceptable ranges. No intervention required.",
            signals,
            [],
            priority="low",
        )

    def _full_rest_day(self, signals: dict[str, Any], reasons: list[str]) -> AgentRecommendation:
        return self.recommend(
            "Cancel all planned activities - full rest day required",
            f"Recovery day needed due to: {', '.join(reasons)}. "
            "Traveler well-being requires complete rest to prevent burnout and maintain trip enjoyment.",
            signals,
            [
                "Cancel all scheduled activities for the day",
                "Schedule spa or massage treatment",
                "Allow sleeping in without alarm",
                "Light pool or lounge time only",
                "Early dinner and bedtime",
            ],
            approval_required=True,
            priority="critical",
        )

    def _moderate_activity(
        self, signals: dict[str, Any], ctx: HealthRecoveryContext, reasons: list[str]
    ) -> AgentRecommendation:
        actions = [
            f"Reduce walking to <{signals['steps_target']} steps",
            "Consider private car for longer distances",
            "Schedule midday rest break",
        ]
        if ctx.planned_activity and ctx.planned_activity.type.lower() in _CULTURAL_TYPES:
            actions += [
                "Select seated cultural experience (theater, tea ceremony)",
                "Avoid walking tours",
                "Choose venue with climate control",
            ]

        return self.recommend(
            "Moderate planned activity to reduce physical load",
            f"Planned {ctx.planned_activity.type} activity exceeds recommended load: {', '.join(reasons)}.",
            signals,
            actions,
            approval_required=True,
            priority="high",
        )

    def _wellness_activity(self, signals: dict[str, Any], reasons: list[str]) -> AgentRecommendation:
        return self.recommend(
            "Insert wellness activity into schedule",
            f"Proactive recovery recommended due to: {', '.join(reasons)}. "
            "Maintains energy levels and prevents fatigue accumulation.",
            signals,
            [
                "Schedule 60-90 minute spa treatment",
                "Afternoon pool or relaxation time",
                "Early evening with no commitments",
                "Light, digestible dinner",
                "Ensure 8+ hours sleep opportunity",
            ],
            approval_required=False,
            priority="medium",
        )


def collect_signals(ctx: HealthRecoveryContext) -> dict[str, Any]:
    profile = ctx.wellness_profile
    activity = ctx.planned_activity
    return {
        "sleep_quality": ctx.sleep_quality,
        "energy_rating": ctx.energy_rating,
        "consecutive_active_days": ctx.consecutive_active_days,
        "environmental_stress": ctx.environmental_stress.model_dump() if ctx.environmental_stress else None,
        "mobility_level": profile.mobility_level if profile else None,
        "steps_target": profile.steps_target if profile else DEFAULT_STEPS_TARGET,
        "planned_steps": activity.estimated_steps if activity else None,
        "physical_load": activity.physical_load if activity else None,
    }


def assess_risk_level(signals: dict[str, Any]) -> str:
    """Composite risk score, logged for diagnostics only."""
    score = 0
    sleep, energy = signals["sleep_quality"], signals["energy_rating"]
    days = signals["consecutive_active_days"]

    if sleep is not None and sleep < 3:
        score += 2
    if energy is not None and energy < 3:
        score += 2
    if days >= 3:
        score += 1
    if days >= 5:
        score += 2
    if signals["environmental_stress"]:
        score += sum(1 for v in signals["environmental_stress"].values() if v)
    if signals["physical_load"] == "high":
        score += 1
    if _over_steps_target(signals):
        score += 1

    if score >= 6:
        return "critical"
    if score >= 4:
        return "high"
    if score >= 2:
        return "medium"
    return "low"


def _over_steps_target(signals: dict[str, Any]) -> bool:
    return signals["planned_steps"] is not None and signals["planned_steps"] > signals["steps_target"]


def _full_rest_reasons(signals: dict[str, Any]) -> list[str]:
    reasons = []
    sleep, energy = signals["sleep_quality"], signals["energy_rating"]
    if sleep is not None and sleep < 3:
        reasons.append(f"poor sleep quality ({sleep}/5)")
    if energy is not None and energy < 2:
        reasons.append(f"critically low energy ({energy}/5)")
    if signals["consecutive_active_days"] >= 5:
        reasons.append(f"{signals['consecutive_active_days']} consecutive active days")
    return reasons


def _moderation_reasons(signals: dict[str, Any], ctx: HealthRecoveryContext) -> list[str]:
    if ctx.planned_activity is None:
        return []

    reasons = []
    energy = signals["energy_rating"]
    high_load = signals["physical_load"] == "high"
    if _over_steps_target(signals):
        reasons.append(f"{signals['planned_steps']} planned steps exceeds target of {signals['steps_target']}")
    if high_load and energy is not None and energy < 4:
        reasons.append(f"high physical load with energy level {energy}/5")
    if high_load and signals["consecutive_active_days"] >= 3:
        reasons.append(f"high physical load after {signals['consecutive_active_days']} consecutive active days")
    return reasons


def _wellness_reasons(signals: dict[str, Any]) -> list[str]:
    reasons = []
    if signals["consecutive_active_days"] >= 3:
        reasons.append(f"{signals['consecutive_active_days']} consecutive active days")
    if signals["energy_rating"] == 3:
        reasons.append("moderate energy (3/5)")
    if signals["sleep_quality"] == 3:
        reasons.append("average sleep quality (3/5)")
    return reasons
