"""Prompt manager for the agent prompt templates."""
import logging
from typing import Dict

from langchain_core.prompts import ChatPromptTemplate
from langsmith import Client

from core.config import config
from core.prompts import LANGSMITH_PREFIX, PROMPTS

logger = logging.getLogger(__name__)


class PromptManager:
    """Builds ChatPromptTemplates from local definitions, optionally from LangSmith."""

    def __init__(self, use_langsmith: bool = None):
        """Initialize the prompt manager."""
        self._cache: Dict[str, ChatPromptTemplate] = {}
        self.use_langsmith = config.prompts.use_langsmith if use_langsmith is None else use_langsmith
        self._langsmith_client = None

    def get_prompt(self, agent_name: str) -> ChatPromptTemplate:
        """Get a prompt for an agent.

        Args:
            agent_name: Name of the agent

        Returns:
            ChatPromptTemplate for the agent
        """
        # Check cache
        if config.prompts.cache_prompts and agent_name in self._cache:
            return self._cache[agent_name]

        prompt = None
        if self.use_langsmith:
            prompt = self._load_langsmith_prompt(agent_name)
        if prompt is None:
            prompt = self._load_local_prompt(agent_name)

        # Cache if enabled
        if config.prompts.cache_prompts:
            self._cache[agent_name] = prompt

        return prompt

    def _load_local_prompt(self, agent_name: str) -> ChatPromptTemplate:
        definition = PROMPTS.get(agent_name)
        if definition is None:
            raise ValueError(f"No prompt found for agent: {agent_name}")
        if isinstance(definition, str):
            return ChatPromptTemplate.from_messages([("human", definition)])
        return ChatPromptTemplate.from_messages(list(definition))

    def _load_langsmith_prompt(self, agent_name: str):
        """Pull a prompt from LangSmith, returning None when it is unavailable."""
        try:
            if self._langsmith_client is None:
                self._langsmith_client = Client()
            return self._langsmith_client.pull_prompt(f"{LANGSMITH_PREFIX}{agent_name}")
        except Exception as e:
            logger.warning("LangSmith prompt %s unavailable, using local template: %s", agent_name, e)
            return None

    def clear_cache(self):
        """Clear the prompt cache."""
        self._cache.clear()


# Global instance
prompt_manager = PromptManager()
