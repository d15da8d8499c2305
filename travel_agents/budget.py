"""Budget Control Agent.

Compares actual spend against plan per category and escalates by variance:
above 20% is critical, above 10% is an alert, otherwise the agent looks for
unused prepaid value before reporting the budget as on track. Both thresholds
are strict and fixed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from travel_agents.base import BaseAgent
from travel_agents.schemas import AgentRecommendation, BudgetControlContext, PrepaidItem

log = logging.getLogger("travel_agents.budget")

ALERT_THRESHOLD = 0.10
CRITICAL_THRESHOLD = 0.20


@dataclass(frozen=True)
class Variance:
    category: str
    planned: float
    actual: float
    variance: float
    variance_percent: float


@dataclass
class Surplus:
    category: str
    available: float


def fmt_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def _signed(value: float) -> str:
    return ("+" if value > 0 else "") + fmt_amount(value)


def calculate_variances(ctx: BudgetControlContext) -> list[Variance]:
    out = []
    for category, spend in ctx.category_spend.items():
        variance = spend.actual - spend.planned
        # Rounded so that float noise on an exact boundary never crosses it.
        pct = round(variance / spend.planned, 9) if spend.planned > 0 else 0.0
        out.append(Variance(category, spend.planned, spend.actual, variance, pct))
    return out


def find_underbudget(ctx: BudgetControlContext) -> list[Surplus]:
    sources = [
        Surplus(category, spend.planned - spend.actual)
        for category, spend in ctx.category_spend.items()
        if spend.actual < spend.planned
    ]
    return sorted(sources, key=lambda s: s.available, reverse=True)


class BudgetControlAgent(BaseAgent):
    agent_type = "budget_control"
    name = "Budget & Spend Control Agent"
    context_model = BudgetControlContext
    required_fields = ("trip_id", "user_id", "date", "trip", "category_spend")

    def evaluate(self, ctx: BudgetControlContext) -> AgentRecommendation:
        signals = _collect_signals(ctx)
        variances = calculate_variances(ctx)
        log.info(
            "Analyzing budget control across %d categories", len(variances),
            extra={"agent": self.name, "data": signals},
        )

        critical = [v for v in variances if v.variance_percent > CRITICAL_THRESHOLD]
        if critical:
            return self._critical_overrun(critical, signals, ctx)

        overruns = [v for v in variances if v.variance_percent > ALERT_THRESHOLD]
        if overruns:
            return self._budget_adjustment(overruns, signals, ctx)

        if ctx.unused_prepaid:
            return self._prepaid_utilization(ctx.unused_prepaid, signals)

        return self.recommend(
            "Budget on track - no adjustments needed",
            _summary(signals, variances),
            signals,
            [],
            priority="low",
        )

    def _critical_overrun(
        self, critical: list[Variance], signals: dict[str, Any], ctx: BudgetControlContext
    ) -> AgentRecommendation:
        details = "; ".join(f"{v.category}: {v.variance_percent * 100:.1f}% over budget" for v in critical)
        actions = [
            "URGENT: Review and approve continued spending",
            *(
                f"{v.category}: planned {fmt_amount(v.planned)}, actual {fmt_amount(v.actual)} ({_signed(v.variance)})"
                for v in critical
            ),
            "Consider reallocating from other categories",
            "Evaluate whether to adjust remaining trip plans",
        ]

        sources = find_underbudget(ctx)
        if sources:
            actions += ["", "Potential reallocation sources:"]
            actions += [f"- {s.category}: {fmt_amount(s.available)} available" for s in sources]

        return self.recommend(
            "CRITICAL: Budget overrun detected",
            f"Critical variance detected: {details}. "
            f"Total budget at {signals['percent_spent']:.1f}% utilized.",
            signals,
            actions,
            approval_required=True,
            priority="critical",
        )

    def _budget_adjustment(
        self, overruns: list[Variance], signals: dict[str, Any], ctx: BudgetControlContext
    ) -> AgentRecommendation:
        details = "; ".join(f"{v.category}: {v.variance_percent * 100:.1f}% over" for v in overruns)
        actions = [
            "Review category spending patterns",
            *(
                f"{v.category}: variance of {fmt_amount(v.variance)} ({v.variance_percent * 100:.1f}%)"
                for v in overruns
            ),
        ]

        sources = find_underbudget(ctx)
        transfers, unmatched = [], []
        for over in overruns:
            need = abs(over.variance)
            candidates = [s for s in sources if s.available >= need]
            if not candidates:
                unmatched.append(over)
                continue
            source = max(candidates, key=lambda s: s.available)
            source.available -= need
            transfers.append(f"- Reallocate {fmt_amount(need)} from {source.category} to {over.category}")

        if transfers:
            actions += ["", "Recommended reallocations:", *transfers]
        if unmatched:
            if not transfers:
                actions.append("")
            for over in unmatched:
                actions.append(
                    f"- No underbudget category can cover {fmt_amount(abs(over.variance))} for {over.category}"
                )
            actions.append("Consider reducing upcoming discretionary expenses")
            if ctx.upcoming_expenses:
                upcoming = sum(e.amount for e in ctx.upcoming_expenses)
                actions.append(f"Upcoming expenses to review: {fmt_amount(upcoming)}")

        return self.recommend(
            "Budget variance detected - adjustment recommended",
            f"Category overruns detected: {details}. Reallocation recommended to maintain overall budget.",
            signals,
            actions,
            approval_required=True,
            priority="high",
        )

    def _prepaid_utilization(self, items: list[PrepaidItem], signals: dict[str, Any]) -> AgentRecommendation:
        total_unused = sum(item.amount for item in items)
        actions = [
            f"Total unused prepaid value: {fmt_amount(total_unused)}",
            "",
            "Unutilized items:",
            *(f"- {item.item} ({item.category}): {fmt_amount(item.amount)}" for item in items),
            "",
            "Recommended actions:",
            "Review whether these items can still be used",
            "Consider booking alternative experiences of equal value",
            "Document items that cannot be recovered",
        ]
        return self.recommend(
            "Unused prepaid value detected",
            f"{fmt_amount(total_unused)} in prepaid expenses not yet utilized. "
            "Review opportunities to use or reallocate this value.",
            signals,
            actions,
            approval_required=False,
            priority="medium",
        )


def _collect_signals(ctx: BudgetControlContext) -> dict[str, Any]:
    budget = ctx.trip.budget
    return {
        "total_budget": budget.total,
        "total_spent": budget.spent,
        "remaining_budget": budget.total - budget.spent,
        "percent_spent": (budget.spent / budget.total) * 100 if budget.total else 0.0,
        "category_count": len(ctx.category_spend),
        "upcoming_expenses_count": len(ctx.upcoming_expenses or []),
        "unused_prepaid_count": len(ctx.unused_prepaid or []),
    }


def _summary(signals: dict[str, Any], variances: list[Variance]) -> str:
    lines = [
        f"Total budget: {fmt_amount(signals['total_budget'])}, "
        f"Spent: {fmt_amount(signals['total_spent'])} ({signals['percent_spent']:.1f}%)",
        f"Remaining: {fmt_amount(signals['remaining_budget'])}",
    ]
    on_track = [v for v in variances if abs(v.variance_percent) <= ALERT_THRESHOLD]
    lines.append(f"{len(on_track)} categories on track")
    return ". ".join(lines)
