"""Travel Experience Agents: rule-based specialists coordinated by the TXA orchestrator."""

from travel_agents.audit import AuditSink, InMemoryAuditSink
from travel_agents.base import BaseAgent
from travel_agents.budget import BudgetControlAgent
from travel_agents.config import Settings, configure_logging, load_settings
from travel_agents.errors import AgentError, AggregationError, InvalidContextError, MissingContextError
from travel_agents.golf import GolfOperationsAgent
from travel_agents.health import HealthRecoveryAgent
from travel_agents.history import (
    ActivityHistory,
    InMemorySpendLedger,
    IntentHeuristicHistory,
    ItineraryHistory,
    SpendLedger,
    ZeroSpendLedger,
)
from travel_agents.orchestrator import TravelExperienceAgent
from travel_agents.runner import run_agent
from travel_agents.schemas import AgentDecision, AgentRecommendation, CoordinationResult, TravelExperienceContext
from travel_agents.transport import TransportLogisticsAgent

__all__ = [
    "ActivityHistory",
    "AgentDecision",
    "AgentError",
    "AgentRecommendation",
    "AggregationError",
    "AuditSink",
    "BaseAgent",
    "BudgetControlAgent",
    "CoordinationResult",
    "GolfOperationsAgent",
    "HealthRecoveryAgent",
    "InMemoryAuditSink",
    "InMemorySpendLedger",
    "IntentHeuristicHistory",
    "InvalidContextError",
    "ItineraryHistory",
    "MissingContextError",
    "Settings",
    "SpendLedger",
    "TransportLogisticsAgent",
    "TravelExperienceAgent",
    "TravelExperienceContext",
    "ZeroSpendLedger",
    "configure_logging",
    "load_settings",
    "run_agent",
]
