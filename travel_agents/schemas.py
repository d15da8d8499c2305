from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high", "critical"]
PhysicalLoad = Literal["low", "medium", "high"]
TransportType = Literal["flight", "train", "private_car", "taxi"]
PrimaryIntent = Literal["golf", "recovery", "culture", "transit", "free"]

PRIORITY_ORDER: dict[str, int] = {"low": 0, "medium": 1, "high": 2, "critical": 3}


def priority_rank(priority: str) -> int:
    return PRIORITY_ORDER[priority]


def _check_iso_date(value: str) -> str:
    date.fromisoformat(value)
    return value


# Calendar day as YYYY-MM-DD, kept as a string.
IsoDate = Annotated[str, AfterValidator(_check_iso_date)]


class _Model(BaseModel):
    # Accepts both snake_case and camelCase keys.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class _Context(_Model):
    model_config = ConfigDict(extra="forbid")


# ── Recommendation contract ───────────────────────────────────
class AgentRecommendation(_Model):
    decision: str
    rationale: str
    input_signals: dict[str, Any] = Field(default_factory=dict)
    output_actions: list[str] = Field(default_factory=list)
    approval_required: bool = False
    priority: Priority = "medium"

    @model_validator(mode="after")
    def _high_priority_needs_approval(self) -> "AgentRecommendation":
        if priority_rank(self.priority) >= PRIORITY_ORDER["high"] and not self.approval_required:
            raise ValueError(f"priority {self.priority!r} requires approval_required=True")
        return self


class AgentDecision(_Model):
    """Audit record for one recommendation, keyed by trip/date/agent type."""

    model_config = ConfigDict(frozen=False)

    trip_id: str
    date: str
    agent_type: str
    decision: str
    rationale: str
    input_signals: dict[str, Any] = Field(default_factory=dict)
    output_actions: list[str] = Field(default_factory=list)
    timestamp: datetime
    approval_required: bool = False
    approved: bool | None = None


class CoordinationResult(_Model):
    final: AgentRecommendation
    recommendations: dict[str, AgentRecommendation]
    deciding_agent: str | None = None


# ── External entities (owned by collaborators, only consumed) ─
class WellnessProfile(_Model):
    model_config = ConfigDict(extra="allow")

    user_id: str | None = None
    who5_score: float | None = Field(default=None, ge=0, le=100)
    sleep_quality: int | None = Field(default=None, ge=1, le=5)
    energy_level: Literal["low", "medium", "high"] | None = None
    steps_target: int = 8000
    dietary_restrictions: list[str] = Field(default_factory=list)
    medical_conditions: list[str] = Field(default_factory=list)
    mobility_level: Literal["full", "moderate", "limited"] = "full"


class TripBudget(_Model):
    currency: str = "USD"
    total: float
    spent: float = 0
    categories: dict[str, float | None] = Field(default_factory=dict)


class Traveler(_Model):
    id: str
    name: str
    email: str | None = None
    wellness_profile_id: str | None = None


class Trip(_Model):
    id: str | None = None
    user_id: str | None = None
    name: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    status: Literal["planning", "confirmed", "in_progress", "completed", "cancelled"] = "planning"
    budget: TripBudget
    travelers: list[Traveler] = Field(default_factory=list)


class ScheduleBlock(_Model):
    activity: str | None = None
    transport: str | None = None
    start_time: str | None = None
    duration: int | None = None
    rest_window: bool = False
    dining: str | None = None
    notes: str | None = None


class DailySchedule(_Model):
    morning: ScheduleBlock | None = None
    midday: ScheduleBlock | None = None
    afternoon: ScheduleBlock | None = None
    evening: ScheduleBlock | None = None


class ItineraryHealth(_Model):
    steps_target: int = 8000
    hydration_focus: bool = True
    body_notes: str | None = None


class DaySpend(_Model):
    planned: float = 0
    actual: float = 0


class DailyItinerary(_Model):
    date: IsoDate
    trip_id: str | None = None
    location: str
    primary_intent: PrimaryIntent
    energy_level: Literal["low", "medium", "high"] | None = None
    sleep_quality: int | None = Field(default=None, ge=1, le=5)
    schedule: DailySchedule = Field(default_factory=DailySchedule)
    health: ItineraryHealth = Field(default_factory=ItineraryHealth)
    spend: DaySpend = Field(default_factory=DaySpend)
    agent_notes: str | None = None


class TravelerFeedback(_Model):
    energy_rating: int | None = Field(default=None, ge=1, le=5)
    sleep_quality: int | None = Field(default=None, ge=1, le=5)
    satisfaction_score: int | None = Field(default=None, ge=1, le=5)
    notes: str | None = None


class WeatherForecast(_Model):
    condition: str | None = None
    temperature: float
    humidity: float
    rainfall: float | None = None


class BudgetStatus(_Model):
    total_spent: float
    remaining_budget: float


class GolfCourse(_Model):
    name: str
    travel_time: int
    difficulty: Literal["easy", "moderate", "challenging"] | None = None
    climate: Literal["hot", "cool", "mountain"] | None = None


class CategorySpend(_Model):
    planned: float = 0
    actual: float = 0


class UpcomingExpense(_Model):
    category: str
    amount: float
    description: str = ""


class PrepaidItem(_Model):
    category: str
    amount: float
    item: str


class TransportSegment(_Model):
    type: TransportType | None = None
    origin: str | None = None
    destination: str | None = None
    departure: str | None = None
    arrival: str | None = None


class EnvironmentalStress(_Model):
    heat: bool = False
    humidity: bool = False
    travel: bool = False


class PlannedActivity(_Model):
    type: str
    physical_load: PhysicalLoad
    estimated_steps: int | None = None


class TransportPlan(_Model):
    next_destination: str | None = None
    transport_type: TransportType | None = None
    departure_time: str | None = None
    arrival_time: str | None = None
    luggage_count: int | None = Field(default=None, ge=0)
    mobility_considerations: list[str] = Field(default_factory=list)
    planned_segments: list[TransportSegment] = Field(default_factory=list)


# ── Agent contexts (closed, read-only) ────────────────────────
class AgentContext(_Context):
    trip_id: str
    user_id: str
    date: IsoDate


class HealthRecoveryContext(AgentContext):
    sleep_quality: int | None = Field(default=None, ge=1, le=5)
    energy_rating: int | None = Field(default=None, ge=1, le=5)
    consecutive_active_days: int = Field(ge=0)
    environmental_stress: EnvironmentalStress | None = None
    wellness_profile: WellnessProfile | None = None
    planned_activity: PlannedActivity | None = None


class GolfOperationsContext(AgentContext):
    location: str
    energy_level: int | None = Field(default=None, ge=1, le=5)
    consecutive_golf_days: int = Field(ge=0)
    weather_forecast: WeatherForecast | None = None
    available_courses: list[GolfCourse] = Field(default_factory=list)
    recent_rounds: int = 0


class BudgetControlContext(AgentContext):
    trip: Trip
    category_spend: dict[str, CategorySpend]
    upcoming_expenses: list[UpcomingExpense] | None = None
    unused_prepaid: list[PrepaidItem] | None = None


class TransportLogisticsContext(AgentContext):
    current_location: str
    next_destination: str | None = None
    transport_type: TransportType | None = None
    departure_time: str | None = None
    arrival_time: str | None = None
    luggage_count: int | None = Field(default=None, ge=0)
    mobility_considerations: list[str] = Field(default_factory=list)
    planned_segments: list[TransportSegment] = Field(default_factory=list)


class TravelExperienceContext(AgentContext):
    trip: Trip
    current_itinerary: DailyItinerary
    traveler_feedback: TravelerFeedback | None = None
    weather: WeatherForecast | None = None
    wellness_profile: WellnessProfile | None = None
    budget_status: BudgetStatus | None = None
    available_courses: list[GolfCourse] = Field(default_factory=list)
    transport_plan: TransportPlan | None = None
    upcoming_expenses: list[UpcomingExpense] | None = None
    unused_prepaid: list[PrepaidItem] | None = None
