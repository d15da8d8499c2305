"""Golf Operations Agent: course choice and round scheduling for Vietnam legs of the trip.

Golf is only planned in Vietnam; any other location short-circuits to a
low-priority no-op.
"""
from __future__ import annotations

import logging
from typing import Any

from travel_agents.base import BaseAgent
from travel_agents.schemas import AgentRecommendation, GolfCourse, GolfOperationsContext

log = logging.getLogger("travel_agents.golf")

VIETNAM_CITIES = ("hanoi", "da nang", "hoi an", "ho chi minh", "saigon")
PREFERRED_REPEAT_COURSES = ("Ba Na Hills Golf Club", "Montgomerie Links Vietnam")

HEAVY_RAIN_MM = 10
EXTREME_HEAT_C = 35
HUMID_HEAT_C = 32
HIGH_HUMIDITY_PCT = 80


def is_vietnam_location(location: str) -> bool:
    loc = location.lower()
    return any(city in loc for city in VIETNAM_CITIES)


class GolfOperationsAgent(BaseAgent):
    agent_type = "golf_operations"
    name = "Vietnam Golf Operations Agent"
    context_model = GolfOperationsContext
    required_fields = ("trip_id", "user_id", "date", "location", "consecutive_golf_days")

    def evaluate(self, ctx: GolfOperationsContext) -> AgentRecommendation:
        if not is_vietnam_location(ctx.location):
            return self.recommend(
                "No golf operations - outside Vietnam",
                "Golf activities are only scheduled in Vietnam (Hanoi, Da Nang, Hoi An, Ho Chi Minh City).",
                {"location": ctx.location},
                [],
                priority="low",
            )

        signals = _collect_signals(ctx)
        log.info("Analyzing golf operations", extra={"agent": self.name, "data": signals})

        if _should_skip(ctx):
            return self._skip_golf(ctx, signals)
        if _weather_requires_substitution(ctx):
            return self._substitute_for_weather(ctx, signals)
        return self._recommend_course(ctx, signals)

    def _skip_golf(self, ctx: GolfOperationsContext, signals: dict[str, Any]) -> AgentRecommendation:
        actions = ["Cancel planned golf round", "Insert recovery day"]
        if ctx.consecutive_golf_days >= 2:
            rationale = (
                f"{ctx.consecutive_golf_days} consecutive golf days exceeds safe physical load. "
                "Recovery day needed to prevent joint strain and fatigue from back-to-back rounds."
            )
            actions.append("Schedule spa or massage treatment")
        else:
            rationale = (
                f"Energy level {ctx.energy_level}/5 is too low for golf after playing yesterday. "
                "Risk of poor performance and reduced enjoyment."
            )
            actions.append("Consider practice range or short game only (optional)")

        return self.recommend(
            "Skip golf - force recovery day",
            rationale,
            signals,
            actions,
            approval_required=True,
            priority="high",
        )

    def _substitute_for_weather(self, ctx: GolfOperationsContext, signals: dict[str, Any]) -> AgentRecommendation:
        weather = ctx.weather_forecast
        if weather.rainfall is not None and weather.rainfall > HEAVY_RAIN_MM:
            actions = ["Convert to spa day or cultural activity", "Reschedule golf to later in week"]
            rationale = f"Heavy rain forecast ({weather.rainfall:g}mm) - course conditions will be poor"
        else:
            mountain = _find_mountain_course(ctx.available_courses)
            heat = f"{weather.temperature:g}°C, {weather.humidity:g}% humidity"
            if mountain:
                actions = [
                    f"Substitute to {mountain.name} (cooler mountain climate)",
                    "Earlier tee time (before 8am)",
                ]
                rationale = f"High heat forecast ({heat}) - mountain course preferred"
            else:
                actions = ["Very early tee time (before 7am)", "Extended midpoint break for hydration"]
                rationale = f"High heat forecast ({heat}) - adjust timing"

        return self.recommend(
            "Substitute golf course due to weather",
            rationale,
            signals,
            actions,
            approval_required=True,
            priority="high",
        )

    def _recommend_course(self, ctx: GolfOperationsContext, signals: dict[str, Any]) -> AgentRecommendation:
        if not ctx.available_courses:
            return self.recommend(
                "No course recommendation - insufficient data",
                "No available courses provided in context.",
                signals,
                [],
                priority="low",
            )

        course = _preferred_course(ctx.available_courses) or _select_by_travel_time(
            ctx.available_courses, ctx.energy_level
        )
        return self.recommend(
            f"Proceed with golf at {course.name}",
            _course_rationale(course, ctx.energy_level),
            signals,
            [
                f"Book tee time at {course.name}",
                "Morning tee time only (before 10am)",
                "Confirm caddie and cart included",
                f"Travel time: {course.travel_time} minutes",
            ],
            approval_required=False,
            priority="medium",
        )


def _collect_signals(ctx: GolfOperationsContext) -> dict[str, Any]:
    return {
        "location": ctx.location,
        "consecutive_golf_days": ctx.consecutive_golf_days,
        "energy_level": ctx.energy_level,
        "weather": ctx.weather_forecast.model_dump() if ctx.weather_forecast else None,
        "recent_rounds": ctx.recent_rounds,
        "available_courses": [c.name for c in ctx.available_courses],
    }


def _should_skip(ctx: GolfOperationsContext) -> bool:
    low_energy = ctx.energy_level is not None and ctx.energy_level < 4
    return (ctx.consecutive_golf_days >= 1 and low_energy) or ctx.consecutive_golf_days >= 2


def _weather_requires_substitution(ctx: GolfOperationsContext) -> bool:
    weather = ctx.weather_forecast
    if weather is None:
        return False
    if weather.rainfall is not None and weather.rainfall > HEAVY_RAIN_MM:
        return True
    return weather.temperature > EXTREME_HEAT_C or (
        weather.temperature > HUMID_HEAT_C and weather.humidity > HIGH_HUMIDITY_PCT
    )


def _find_mountain_course(courses: list[GolfCourse]) -> GolfCourse | None:
    for course in courses:
        if course.climate == "mountain" or "Ba Na Hills" in course.name:
            return course
    return None


def _is_preferred(course: GolfCourse) -> bool:
    return any(pref in course.name for pref in PREFERRED_REPEAT_COURSES)


def _preferred_course(courses: list[GolfCourse]) -> GolfCourse | None:
    return next((c for c in courses if _is_preferred(c)), None)


def _select_by_travel_time(courses: list[GolfCourse], energy_level: int | None) -> GolfCourse:
    # Low energy favours the shortest drive; otherwise keep the caller's ordering.
    if energy_level is not None and energy_level < 4:
        return min(courses, key=lambda c: c.travel_time)
    return courses[0]


def _course_rationale(course: GolfCourse, energy_level: int | None) -> str:
    reasons = []
    if _is_preferred(course):
        reasons.append("preferred course for repeat play")
    if course.climate in ("cool", "mountain"):
        reasons.append("cooler climate reduces physical stress")
    if course.travel_time < 30:
        reasons.append("minimal travel time preserves energy")
    if energy_level is not None and energy_level >= 4:
        reasons.append(f"energy level {energy_level}/5 supports full round")

    if reasons:
        return f"Selected based on: {', '.join(reasons)}."
    return "Course selected based on availability and schedule."
