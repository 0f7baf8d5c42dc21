"""Core models for the agent catalog."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AgentResult(BaseModel):
    """Result from an agent execution."""
    agent_name: str
    success: bool
    data: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())
    elapsed_ms: Optional[int] = None

    def to_envelope(self) -> Dict[str, Any]:
        """Flatten into the `{success, error?, <payload>}` shape callers consume."""
        envelope: Dict[str, Any] = {"success": self.success}
        if self.error is not None:
            envelope["error"] = self.error
        envelope.update(self.data)
        return envelope


class AgentInfo(BaseModel):
    """Catalog entry describing an agent."""
    slug: str
    name: str
    description: str
    provider: str
    model_name: str
