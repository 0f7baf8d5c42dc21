import pytest

from core import registry


@pytest.fixture(autouse=True)
def isolated_catalog(monkeypatch):
    """No tracing, and a fresh agent cache per test."""
    monkeypatch.delenv("LANGSMITH_TRACING", raising=False)
    monkeypatch.delenv("LANGCHAIN_TRACING_V2", raising=False)
    registry.reset()
    yield
    registry.reset()
