"""Thin wrapper over the LangChain chat models for Groq, Gemini and OpenAI."""
import logging
from typing import Any, Callable, Dict, List, Sequence, Tuple

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI

from core.config import ModelConfig, config
from core.exceptions import LLMError

logger = logging.getLogger(__name__)


def create_chat_model(model: ModelConfig) -> BaseChatModel:
    """Build the chat model for a provider.

    API keys come from the global config; when a key is empty the provider
    SDK falls back to its own environment lookup and fails on first use.
    """
    provider = model.provider.lower()
    kwargs: Dict[str, Any] = {"model": model.model_name, "temperature": model.temperature}

    if provider == "groq":
        if config.providers.groq_api_key:
            kwargs["api_key"] = config.providers.groq_api_key
        return ChatGroq(max_tokens=model.max_tokens, **kwargs)

    if provider == "gemini":
        if config.providers.gemini_api_key:
            kwargs["google_api_key"] = config.providers.gemini_api_key
        return ChatGoogleGenerativeAI(max_output_tokens=model.max_tokens, **kwargs)

    if provider == "openai":
        if config.providers.openai_api_key:
            kwargs["api_key"] = config.providers.openai_api_key
        return ChatOpenAI(max_tokens=model.max_tokens, **kwargs)

    raise LLMError(f"Unsupported LLM provider: {model.provider}")


def message_text(message: Any) -> str:
    """Return the text of a chat response, joining content parts when needed."""
    content = getattr(message, "content", message)
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content)


class LLMClient:
    """Issues single-turn completions; one request per call, no retries."""

    def __init__(self, model_factory: Callable[[ModelConfig], BaseChatModel] = create_chat_model):
        self._model_factory = model_factory
        self._models: Dict[Tuple[str, str, float, int], BaseChatModel] = {}

    def _get_model(self, model: ModelConfig) -> BaseChatModel:
        key = (model.provider, model.model_name, model.temperature, model.max_tokens)
        if key not in self._models:
            self._models[key] = self._model_factory(model)
        return self._models[key]

    async def complete(self, messages: Sequence[BaseMessage], model: ModelConfig) -> str:
        """Send the messages and return the completion text.

        Raises:
            LLMError: provider failure or empty completion
        """
        logger.debug("Calling %s model %s", model.provider, model.model_name)
        try:
            chat_model = self._get_model(model)
            response = await chat_model.ainvoke(list(messages))
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(f"{model.provider} request failed: {e}") from e

        text = message_text(response)
        if not text.strip():
            raise LLMError("No response from AI model")
        return text
