"""Exception types shared by agents and services."""


class AgentError(Exception):
    """Base class for agent catalog errors."""


class AgentInputError(AgentError):
    """Required input is missing or unusable. The message is shown to the caller as-is."""


class AgentNotFoundError(AgentError, KeyError):
    """No agent is registered under the requested slug."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Agent not found"


class LLMError(AgentError):
    """The LLM provider failed or returned no content."""


class ServiceError(AgentError):
    """An external service (speech, images, market data, email, video search) failed."""
