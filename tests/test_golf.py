"""Golf Operations Agent tests."""
import pytest

from travel_agents.errors import MissingContextError
from travel_agents.golf import GolfOperationsAgent, is_vietnam_location

BA_NA = {"name": "Ba Na Hills Golf Club", "travel_time": 45, "difficulty": "challenging", "climate": "mountain"}
MONTGOMERIE = {"name": "Montgomerie Links Vietnam", "travel_time": 40, "difficulty": "moderate", "climate": "hot"}
LAGUNA = {"name": "Laguna Lang Co", "travel_time": 75, "difficulty": "moderate", "climate": "hot"}
HOIANA = {"name": "Hoiana Shores", "travel_time": 25, "difficulty": "moderate", "climate": "hot"}


def _ctx(**overrides) -> dict:
    ctx = {
        "trip_id": "t1",
        "user_id": "u1",
        "date": "2026-03-12",
        "location": "Da Nang, Vietnam",
        "consecutive_golf_days": 0,
        "energy_level": 5,
    }
    ctx.update(overrides)
    return ctx


# ════════════════════════════════════════════════════════════════
# Location gate
# ════════════════════════════════════════════════════════════════
class TestLocationGate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("location", ["Osaka, Japan", "Seoul, Korea", "Bangkok", ""])
    async def test_outside_vietnam_is_noop(self, location):
        rec = await GolfOperationsAgent().analyze(
            _ctx(location=location, consecutive_golf_days=3, energy_level=1,
                 weather_forecast={"condition": "storm", "temperature": 40, "humidity": 95, "rainfall": 50},
                 available_courses=[BA_NA])
        )
        assert rec.priority == "low"
        assert rec.output_actions == []
        assert rec.approval_required is False
        assert rec.input_signals == {"location": location}

    @pytest.mark.parametrize("location", ["HANOI", "Hoi An old town", "Ho Chi Minh City", "saigon riverside", "da nang"])
    def test_recognized_cities_case_insensitive(self, location):
        assert is_vietnam_location(location)


# ════════════════════════════════════════════════════════════════
# Skip / substitute / recommend
# ════════════════════════════════════════════════════════════════
class TestSkipGolf:
    @pytest.mark.asyncio
    async def test_back_to_back_rounds(self):
        rec = await GolfOperationsAgent().analyze(_ctx(consecutive_golf_days=2, available_courses=[BA_NA]))
        assert rec.decision == "Skip golf - force recovery day"
        assert rec.priority == "high"
        assert rec.approval_required is True
        assert "back-to-back" in rec.rationale
        assert "Schedule spa or massage treatment" in rec.output_actions

    @pytest.mark.asyncio
    async def test_low_energy_after_yesterday(self):
        rec = await GolfOperationsAgent().analyze(_ctx(consecutive_golf_days=1, energy_level=3))
        assert rec.priority == "high"
        assert "Energy level 3/5" in rec.rationale
        assert "yesterday" in rec.rationale
        assert "Consider practice range or short game only (optional)" in rec.output_actions

    @pytest.mark.asyncio
    async def test_one_day_with_good_energy_plays(self):
        rec = await GolfOperationsAgent().analyze(_ctx(consecutive_golf_days=1, energy_level=4, available_courses=[LAGUNA]))
        assert rec.priority == "medium"


class TestWeatherSubstitution:
    @pytest.mark.asyncio
    async def test_heavy_rain(self):
        rec = await GolfOperationsAgent().analyze(
            _ctx(weather_forecast={"condition": "rain", "temperature": 28, "humidity": 90, "rainfall": 15},
                 available_courses=[BA_NA])
        )
        assert rec.decision == "Substitute golf course due to weather"
        assert rec.priority == "high"
        assert rec.approval_required is True
        assert rec.output_actions == ["Convert to spa day or cultural activity", "Reschedule golf to later in week"]

    @pytest.mark.asyncio
    async def test_extreme_heat_moves_to_mountain_course(self):
        rec = await GolfOperationsAgent().analyze(
            _ctx(weather_forecast={"condition": "sunny", "temperature": 37, "humidity": 60},
                 available_courses=[LAGUNA, BA_NA])
        )
        assert rec.priority == "high"
        assert "Substitute to Ba Na Hills Golf Club (cooler mountain climate)" in rec.output_actions
        assert "Earlier tee time (before 8am)" in rec.output_actions

    @pytest.mark.asyncio
    async def test_humid_heat_without_mountain_course(self):
        rec = await GolfOperationsAgent().analyze(
            _ctx(weather_forecast={"condition": "humid", "temperature": 33, "humidity": 85},
                 available_courses=[LAGUNA, HOIANA])
        )
        assert rec.priority == "high"
        assert rec.output_actions == ["Very early tee time (before 7am)", "Extended midpoint break for hydration"]
        assert "33°C" in rec.rationale

    @pytest.mark.asyncio
    async def test_humid_heat_with_no_courses_still_adjusts_timing(self):
        rec = await GolfOperationsAgent().analyze(
            _ctx(weather_forecast={"condition": "humid", "temperature": 34, "humidity": 81})
        )
        assert rec.priority == "high"
        assert "Very early tee time (before 7am)" in rec.output_actions

    @pytest.mark.asyncio
    async def test_warm_day_below_thresholds_keeps_preferred_course(self):
        rec = await GolfOperationsAgent().analyze(
            _ctx(weather_forecast={"condition": "sunny", "temperature": 34, "humidity": 78},
                 available_courses=[LAGUNA, BA_NA])
        )
        assert rec.priority == "medium"
        assert rec.decision == "Proceed with golf at Ba Na Hills Golf Club"

    @pytest.mark.asyncio
    async def test_skip_takes_precedence_over_weather(self):
        rec = await GolfOperationsAgent().analyze(
            _ctx(consecutive_golf_days=2, weather_forecast={"temperature": 38, "humidity": 90, "rainfall": 30})
        )
        assert rec.decision == "Skip golf - force recovery day"


class TestCourseRecommendation:
    @pytest.mark.asyncio
    async def test_preferred_course_first(self):
        rec = await GolfOperationsAgent().analyze(_ctx(available_courses=[HOIANA, MONTGOMERIE]))
        assert rec.decision == "Proceed with golf at Montgomerie Links Vietnam"
        assert rec.priority == "medium"
        assert rec.approval_required is False
        assert rec.output_actions == [
            "Book tee time at Montgomerie Links Vietnam",
            "Morning tee time only (before 10am)",
            "Confirm caddie and cart included",
            "Travel time: 40 minutes",
        ]
        assert "preferred course for repeat play" in rec.rationale

    @pytest.mark.asyncio
    async def test_low_energy_picks_shortest_travel(self):
        rec = await GolfOperationsAgent().analyze(_ctx(energy_level=3, available_courses=[LAGUNA, HOIANA]))
        assert rec.decision == "Proceed with golf at Hoiana Shores"
        assert "minimal travel time preserves energy" in rec.rationale

    @pytest.mark.asyncio
    async def test_good_energy_keeps_first_listed(self):
        rec = await GolfOperationsAgent().analyze(_ctx(energy_level=5, available_courses=[LAGUNA, HOIANA]))
        assert rec.decision == "Proceed with golf at Laguna Lang Co"
        assert "energy level 5/5 supports full round" in rec.rationale

    @pytest.mark.asyncio
    async def test_no_courses_is_insufficient_data(self):
        rec = await GolfOperationsAgent().analyze(_ctx())
        assert rec.decision == "No course recommendation - insufficient data"
        assert rec.priority == "low"
        assert rec.output_actions == []

    @pytest.mark.asyncio
    async def test_missing_location(self):
        ctx = _ctx()
        del ctx["location"]
        with pytest.raises(MissingContextError, match="location"):
            await GolfOperationsAgent().analyze(ctx)
