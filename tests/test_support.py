"""Schemas, history lookups, audit sink and the generic runner."""
import pytest
from pydantic import ValidationError

from travel_agents.audit import InMemoryAuditSink
from travel_agents.errors import InvalidContextError, MissingContextError
from travel_agents.golf import GolfOperationsAgent
from travel_agents.health import HealthRecoveryAgent
from travel_agents.history import InMemorySpendLedger, IntentHeuristicHistory, ItineraryHistory, ZeroSpendLedger
from travel_agents.runner import AGENTS, get_agent, run_agent
from travel_agents.schemas import AgentContext, AgentRecommendation, DailyItinerary, priority_rank


def _day(date: str, intent: str) -> DailyItinerary:
    return DailyItinerary(date=date, location="Da Nang, Vietnam", primary_intent=intent)


# ════════════════════════════════════════════════════════════════
# Recommendation contract
# ════════════════════════════════════════════════════════════════
class TestRecommendationContract:
    @pytest.mark.parametrize("priority", ["high", "critical"])
    def test_urgent_priority_requires_approval(self, priority):
        with pytest.raises(ValidationError, match="requires approval_required"):
            AgentRecommendation(decision="x", rationale="y", priority=priority)

    def test_low_priority_may_request_approval(self):
        rec = AgentRecommendation(decision="x", rationale="y", priority="low", approval_required=True)
        assert rec.approval_required is True

    def test_defaults(self):
        rec = AgentRecommendation(decision="x", rationale="y")
        assert rec.priority == "medium"
        assert rec.output_actions == []
        assert rec.input_signals == {}

    def test_blank_action_lines_are_preserved(self):
        rec = AgentRecommendation(decision="x", rationale="y", output_actions=["a", "", "b"])
        assert rec.output_actions == ["a", "", "b"]

    def test_camel_case_round_trip(self):
        rec = AgentRecommendation.model_validate(
            {"decision": "x", "rationale": "y", "approvalRequired": True, "priority": "high", "outputActions": ["a"]}
        )
        dumped = rec.model_dump(by_alias=True)
        assert dumped["approvalRequired"] is True
        assert dumped["inputSignals"] == {}

    def test_recommendations_are_immutable(self):
        rec = AgentRecommendation(decision="x", rationale="y")
        with pytest.raises(ValidationError):
            rec.decision = "z"

    def test_priority_order(self):
        assert priority_rank("low") < priority_rank("medium") < priority_rank("high") < priority_rank("critical")


class TestContextHandling:
    @pytest.mark.asyncio
    async def test_non_mapping_context_is_invalid(self):
        with pytest.raises(InvalidContextError, match="expected a mapping"):
            await HealthRecoveryAgent().analyze(["not", "a", "context"])

    @pytest.mark.asyncio
    async def test_foreign_context_model_is_rechecked(self):
        with pytest.raises(MissingContextError) as exc:
            await GolfOperationsAgent().analyze(AgentContext(trip_id="t1", user_id="u1", date="2026-03-12"))
        assert exc.value.fields == ["location", "consecutive_golf_days"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["15/03/2026", "2026-13-01", "tomorrow"])
    async def test_non_iso_date_is_invalid(self, value):
        with pytest.raises(InvalidContextError) as exc:
            await HealthRecoveryAgent().analyze(
                {"trip_id": "t1", "user_id": "u1", "date": value, "consecutive_active_days": 0}
            )
        assert exc.value.fields == ["date"]
        assert "Health & Recovery Agent" in str(exc.value)

    def test_itinerary_date_must_be_iso(self):
        with pytest.raises(ValidationError):
            DailyItinerary(date="March 12", location="Hanoi", primary_intent="golf")

    @pytest.mark.asyncio
    async def test_null_required_field_counts_as_missing(self):
        with pytest.raises(MissingContextError):
            await HealthRecoveryAgent().analyze(
                {"trip_id": "t1", "user_id": None, "date": "2026-03-10", "consecutive_active_days": 0}
            )


# ════════════════════════════════════════════════════════════════
# History and spend lookups
# ════════════════════════════════════════════════════════════════
class TestHistory:
    @pytest.mark.asyncio
    async def test_intent_heuristic(self):
        history = IntentHeuristicHistory()
        assert await history.consecutive_active_days("u1", "2026-03-12", _day("2026-03-12", "golf")) == 1
        assert await history.consecutive_active_days("u1", "2026-03-12", _day("2026-03-12", "recovery")) == 0
        assert await history.consecutive_golf_days("u1", "2026-03-12", _day("2026-03-12", "golf")) == 0

    @pytest.mark.asyncio
    async def test_itinerary_streaks(self):
        history = ItineraryHistory([
            _day("2026-03-08", "golf"),
            _day("2026-03-09", "recovery"),
            _day("2026-03-10", "culture"),
            _day("2026-03-11", "golf"),
            _day("2026-03-12", "golf"),
        ])
        today = _day("2026-03-13", "free")
        assert await history.consecutive_active_days("u1", "2026-03-13", today) == 3
        assert await history.consecutive_golf_days("u1", "2026-03-13", today) == 2

    @pytest.mark.asyncio
    async def test_free_days_count_as_active(self):
        history = ItineraryHistory([_day(f"2026-03-{d}", "free") for d in (10, 11, 12)])
        today = _day("2026-03-13", "free")
        assert await history.consecutive_active_days("u1", "2026-03-13", today) == 3
        assert await history.consecutive_golf_days("u1", "2026-03-13", today) == 0

    @pytest.mark.asyncio
    async def test_missing_day_breaks_streak(self):
        history = ItineraryHistory([_day("2026-03-10", "golf"), _day("2026-03-12", "golf")])
        assert await history.consecutive_golf_days("u1", "2026-03-13", _day("2026-03-13", "golf")) == 1

    @pytest.mark.asyncio
    async def test_per_user_days_override_shared(self):
        history = ItineraryHistory([_day("2026-03-12", "golf")])
        history.add(_day("2026-03-12", "recovery"), user_id="u2")
        today = _day("2026-03-13", "golf")
        assert await history.consecutive_golf_days("u1", "2026-03-13", today) == 1
        assert await history.consecutive_golf_days("u2", "2026-03-13", today) == 0

    @pytest.mark.asyncio
    async def test_spend_ledgers(self):
        assert await ZeroSpendLedger().actual_spend("t1", "golf") == 0.0
        ledger = InMemorySpendLedger()
        ledger.record("t1", "golf", 1200)
        ledger.record("t1", "golf", 300.5)
        ledger.record("t2", "golf", 99)
        assert await ledger.actual_spend("t1", "golf") == 1500.5
        assert await ledger.actual_spend("t1", "food") == 0.0


# ════════════════════════════════════════════════════════════════
# Audit sink
# ════════════════════════════════════════════════════════════════
class TestAuditSink:
    @pytest.mark.asyncio
    async def test_filters_and_pending_approval(self):
        sink = InMemoryAuditSink()
        agent = GolfOperationsAgent()
        skip = AgentRecommendation(decision="Skip golf", rationale="r", approval_required=True, priority="high")
        play = AgentRecommendation(decision="Play", rationale="r")
        await sink.record(agent.to_decision(skip, "t1", "2026-03-12"))
        await sink.record(agent.to_decision(play, "t1", "2026-03-13"))
        await sink.record(agent.to_decision(play, "t2", "2026-03-12"))

        assert len(sink.for_day("t1")) == 2
        assert [d.decision for d in sink.for_day("t1", "2026-03-12")] == ["Skip golf"]
        pending = sink.pending_approval()
        assert [d.decision for d in pending] == ["Skip golf"]
        assert pending[0].agent_type == "golf_operations"
        assert pending[0].timestamp.tzinfo is not None

        pending[0].approved = True
        assert sink.pending_approval() == []


# ════════════════════════════════════════════════════════════════
# Runner
# ════════════════════════════════════════════════════════════════
class TestRunner:
    def test_registry_covers_every_agent(self):
        assert set(AGENTS) == {
            "health_recovery", "golf_operations", "budget_control", "transport_logistics", "travel_experience",
        }

    def test_fresh_instance_per_call(self):
        assert get_agent("health_recovery") is not get_agent("health_recovery")

    def test_unknown_agent(self):
        with pytest.raises(KeyError):
            get_agent("concierge")

    @pytest.mark.asyncio
    async def test_run_agent_by_type(self):
        rec = await run_agent(
            "golf_operations",
            {"trip_id": "t1", "user_id": "u1", "date": "2026-03-12", "location": "Osaka", "consecutive_golf_days": 0},
        )
        assert rec.decision == "No golf operations - outside Vietnam"
