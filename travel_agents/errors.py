from __future__ import annotations


class AgentError(RuntimeError):
    """Base class for failures attributable to a single agent."""

    def __init__(self, agent: str, message: str):
        super().__init__(message)
        self.agent = agent


class MissingContextError(AgentError):
    def __init__(self, agent: str, fields: list[str]):
        super().__init__(agent, f"{agent} missing required context fields: {', '.join(fields)}")
        self.fields = fields


class InvalidContextError(AgentError):
    def __init__(self, agent: str, fields: list[str], detail: str = ""):
        message = f"{agent} received invalid context fields: {', '.join(fields)}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(agent, message)
        self.fields = fields


class AggregationError(AgentError):
    """Raised by the orchestrator when a history lookup or a specialist fails."""

    def __init__(
        self, agent: str, failures: dict[str, BaseException], stage: str = "specialist recommendations"
    ):
        details = "; ".join(f"{name}: {exc}" for name, exc in failures.items())
        super().__init__(agent, f"{agent} could not aggregate {stage}: {details}")
        self.failures = failures
