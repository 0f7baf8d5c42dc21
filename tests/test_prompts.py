"""Tests for the prompt templates."""
import pytest

from core.prompt_manager import PromptManager
from core.prompts import PROMPTS


@pytest.mark.parametrize("name", sorted(PROMPTS))
def test_prompt_formats_with_its_variables(name: str) -> None:
    prompt = PromptManager(use_langsmith=False).get_prompt(name)
    assert prompt.input_variables
    messages = prompt.format_messages(**{variable: "VALUE" for variable in prompt.input_variables})
    assert messages
    assert any("VALUE" in str(message.content) for message in messages)


def test_system_and_human_messages() -> None:
    prompt = PromptManager(use_langsmith=False).get_prompt("crypto_sentiment")
    assert set(prompt.input_variables) == {"coin_symbol", "market_context"}
    messages = prompt.format_messages(coin_symbol="BTC", market_context="flat")
    assert [message.type for message in messages] == ["system", "human"]


def test_unknown_prompt() -> None:
    with pytest.raises(ValueError, match="No prompt found for agent: missing"):
        PromptManager(use_langsmith=False).get_prompt("missing")


def test_prompts_are_cached() -> None:
    manager = PromptManager(use_langsmith=False)
    assert manager.get_prompt("translator") is manager.get_prompt("translator")
    manager.clear_cache()
    assert manager._cache == {}
