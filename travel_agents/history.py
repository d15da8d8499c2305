"""History and spend lookups the orchestrator needs before building sub-contexts.

Both are injected collaborators. The defaults reproduce the fallback figures the
orchestrator used before real history was available: one active day unless the
day is a recovery day, no consecutive golf days and zero actual spend.
"""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import date, timedelta
from typing import Protocol

from travel_agents.schemas import DailyItinerary

REST_INTENT = "recovery"


class ActivityHistory(Protocol):
    async def consecutive_active_days(self, user_id: str, as_of: str, itinerary: DailyItinerary) -> int: ...

    async def consecutive_golf_days(self, user_id: str, as_of: str, itinerary: DailyItinerary) -> int: ...


class SpendLedger(Protocol):
    async def actual_spend(self, trip_id: str, category: str) -> float: ...


class IntentHeuristicHistory:
    """Estimates streaks from today's intent alone."""

    async def consecutive_active_days(self, user_id: str, as_of: str, itinerary: DailyItinerary) -> int:
        return 0 if itinerary.primary_intent == REST_INTENT else 1

    async def consecutive_golf_days(self, user_id: str, as_of: str, itinerary: DailyItinerary) -> int:
        return 0


class ItineraryHistory:
    """Counts streaks over the calendar days immediately preceding ``as_of``.

    Any day that is not a recovery day counts as active, and a golf-intent day
    counts as a golf day. A missing day breaks the streak.
    """

    def __init__(self, past_days: Iterable[DailyItinerary] = ()):
        self._by_user: dict[str, dict[date, DailyItinerary]] = defaultdict(dict)
        self._shared: dict[date, DailyItinerary] = {}
        for day in past_days:
            self._shared[date.fromisoformat(day.date)] = day

    def add(self, day: DailyItinerary, user_id: str | None = None) -> None:
        target = self._by_user[user_id] if user_id else self._shared
        target[date.fromisoformat(day.date)] = day

    async def consecutive_active_days(self, user_id: str, as_of: str, itinerary: DailyItinerary) -> int:
        return self._streak(user_id, as_of, lambda day: day.primary_intent != REST_INTENT)

    async def consecutive_golf_days(self, user_id: str, as_of: str, itinerary: DailyItinerary) -> int:
        return self._streak(user_id, as_of, lambda day: day.primary_intent == "golf")

    def _streak(self, user_id: str, as_of: str, counts: Callable[[DailyItinerary], bool]) -> int:
        days = {**self._shared, **self._by_user.get(user_id, {})}
        cursor = date.fromisoformat(as_of) - timedelta(days=1)
        count = 0
        while cursor in days and counts(days[cursor]):
            count += 1
            cursor -= timedelta(days=1)
        return count


class ZeroSpendLedger:
    async def actual_spend(self, trip_id: str, category: str) -> float:
        return 0.0


class InMemorySpendLedger:
    def __init__(self):
        self._totals: dict[tuple[str, str], float] = defaultdict(float)

    def record(self, trip_id: str, category: str, amount: float) -> None:
        self._totals[(trip_id, category)] += amount

    async def actual_spend(self, trip_id: str, category: str) -> float:
        return self._totals.get((trip_id, category), 0.0)
