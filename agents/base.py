"""Base class shared by every agent in the catalog."""
import logging
import time
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from langchain_core.messages import BaseMessage

from core.config import ModelConfig
from core.exceptions import AgentInputError
from core.llm import LLMClient
from core.models import AgentInfo, AgentResult
from core.prompt_manager import prompt_manager
from utils.tracing import trace_agent

logger = logging.getLogger(__name__)

GROQ_MODEL = "openai/gpt-oss-120b"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def require(input_data: Mapping[str, Any], field: str, message: Optional[str] = None) -> Any:
    """Return `input_data[field]`, raising AgentInputError when it is missing or empty."""
    value = input_data.get(field)
    if is_blank(value):
        raise AgentInputError(message or f"{field} is required")
    return value


def require_any(input_data: Mapping[str, Any], fields: Iterable[str], message: str) -> Tuple[str, Any]:
    """Return the first non-empty `(field, value)` among `fields`."""
    for field in fields:
        value = input_data.get(field)
        if not is_blank(value):
            return field, value
    raise AgentInputError(message)


def bounded_count(input_data: Mapping[str, Any], field: str, default: int, maximum: int) -> int:
    """An optional whole-number field in `1..maximum`, `default` when absent."""
    value = input_data.get(field)
    if is_blank(value):
        return default
    try:
        count = int(value)
    except (TypeError, ValueError):
        count = 0
    if isinstance(value, bool) or not 1 <= count <= maximum:
        raise AgentInputError(f"{field} must be a whole number between 1 and {maximum}")
    return count


class BaseAgent:
    """validate -> prompt -> one LLM call -> parse, wrapped in a result envelope.

    Subclasses set the class attributes and implement `execute`, which returns
    the payload dict. `run` never raises.
    """

    slug: str = "agent"
    name: str = "Agent"
    description: str = ""
    model: ModelConfig = ModelConfig()
    failure_context: str = "Agent failed"
    payload_keys: Tuple[str, ...] = ()
    # field -> message; checked before anything else
    required_fields: Dict[str, str] = {}

    def __init__(self, llm: Optional[LLMClient] = None):
        self.llm = llm or LLMClient()

    @classmethod
    def info(cls) -> AgentInfo:
        return AgentInfo(
            slug=cls.slug,
            name=cls.name,
            description=cls.description,
            provider=cls.model.provider,
            model_name=cls.model.model_name,
        )

    def validate(self, input_data: Mapping[str, Any]) -> None:
        for field, message in self.required_fields.items():
            require(input_data, field, message)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @trace_agent()
    async def run(self, input_data: Optional[Dict[str, Any]] = None) -> AgentResult:
        """Run the agent and return its result envelope."""
        input_data = dict(input_data or {})
        started = time.perf_counter()
        logger.debug("Running %s", self.slug)

        try:
            self.validate(input_data)
            data = await self.execute(input_data)
        except AgentInputError as e:
            logger.warning("%s rejected input: %s", self.slug, e)
            return self._failure(str(e), started)
        except Exception as e:
            logger.error("%s failed: %s", self.slug, e)
            return self._failure(f"{self.failure_context}: {e}", started)

        return AgentResult(
            agent_name=self.slug,
            success=True,
            data=data,
            elapsed_ms=self._elapsed_ms(started),
        )

    async def complete(self, prompt_name: str, model: Optional[ModelConfig] = None, **variables: Any) -> str:
        """Format a prompt template and send it to the LLM."""
        messages = self.format_prompt(prompt_name, **variables)
        return await self.llm.complete(messages, model or self.model)

    @staticmethod
    def format_prompt(prompt_name: str, **variables: Any) -> Iterable[BaseMessage]:
        prompt = prompt_manager.get_prompt(prompt_name)
        return prompt.format_messages(**variables)

    def _failure(self, error: str, started: float) -> AgentResult:
        return AgentResult(
            agent_name=self.slug,
            success=False,
            data={key: None for key in self.payload_keys},
            error=error,
            elapsed_ms=self._elapsed_ms(started),
        )

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)


class ReportAgent(BaseAgent):
    """Agents whose answer is a markdown document.

    The payload is the document (`output`), the sections parsed out of it and
    the time spent waiting on the model.
    """

    payload_keys = ("output", "sections")
    prompt_name: str = ""

    def prepare(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        """Context shared by the hooks below; the input itself unless a subclass derives more."""
        return input_data

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def render(self, response: str, sections: Dict[str, Any], context: Dict[str, Any]) -> str:
        return response

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        context = self.prepare(input_data)
        variables = self.prompt_variables(context)
        started = time.perf_counter()
        response = (await self.complete(self.prompt_name or self.slug, **variables)).strip()
        time_ms = self._elapsed_ms(started)

        sections = self.parse_sections(response, context)
        return {
            "output": self.render(response, sections, context),
            "sections": sections,
            "time_ms": time_ms,
        }
