"""LangSmith tracing utilities for monitoring and debugging."""
import asyncio
import functools
import os
from typing import Callable, Optional

from langsmith import Client
from langsmith.run_helpers import traceable


def setup_langsmith_tracing() -> Client:
    """Initialize LangSmith client with proper configuration."""
    # Ensure environment variables are set
    required_vars = ["LANGSMITH_API_KEY", "LANGSMITH_PROJECT"]
    for var in required_vars:
        if not os.getenv(var):
            raise ValueError(f"Environment variable {var} is not set")

    # Enable tracing
    os.environ["LANGCHAIN_TRACING_V2"] = "true"
    os.environ["LANGSMITH_TRACING"] = "true"

    client = Client()
    return client


def trace_agent(agent_name: Optional[str] = None):
    """Decorator to trace agent execution with metadata.

    Without an explicit name the span is named after the `slug` of the agent
    instance the method is bound to.
    """
    def decorator(func: Callable) -> Callable:
        def _traced(args):
            name = agent_name or getattr(args[0] if args else None, "slug", None) or func.__name__
            return traceable(name=f"agent_{name}", metadata={"agent_type": name})(func)

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            return await _traced(args)(*args, **kwargs)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            return _traced(args)(*args, **kwargs)

        # Return appropriate wrapper based on function type
        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator
