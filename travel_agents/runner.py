"""Single generic entry point for running any agent by its type name."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from travel_agents.base import BaseAgent
from travel_agents.budget import BudgetControlAgent
from travel_agents.golf import GolfOperationsAgent
from travel_agents.health import HealthRecoveryAgent
from travel_agents.orchestrator import TravelExperienceAgent
from travel_agents.schemas import AgentRecommendation
from travel_agents.transport import TransportLogisticsAgent

AGENTS: dict[str, type[BaseAgent]] = {
    cls.agent_type: cls
    for cls in (
        HealthRecoveryAgent,
        GolfOperationsAgent,
        BudgetControlAgent,
        TransportLogisticsAgent,
        TravelExperienceAgent,
    )
}


def get_agent(agent_type: str) -> BaseAgent:
    return AGENTS[agent_type]()


async def run_agent(agent_type: str, context: Mapping[str, Any]) -> AgentRecommendation:
    return await get_agent(agent_type).analyze(context)
