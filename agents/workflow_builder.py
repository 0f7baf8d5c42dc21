"""Workflow builder agent: design a workflow from a trigger, or run a given definition."""
import json
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, is_blank, require_any
from core.config import ModelConfig
from core.llm import LLMClient
from tools.json_extraction import extract_json
from tools.section_parser import Section, SectionParser
from tools.step_executor import DryRunStepExecutor, StepExecutor, WorkflowStep, coerce_steps, run_steps

WORKFLOW_SECTIONS = SectionParser([
    Section("steps", ("step", "action", "sequence"), kind="list", min_item_length=5),
    Section("conditions", ("condition", "logic"), kind="list", min_item_length=5),
    Section("error_handling", ("error", "handling"), kind="list", min_item_length=5),
    Section("notifications", ("notification",), kind="list", min_item_length=5),
])

DEFAULT_STEPS = [
    WorkflowStep(id="step_1", action="Process trigger event", type="processing"),
    WorkflowStep(id="step_2", action="Execute main action", type="execution"),
    WorkflowStep(id="step_3", action="Send completion notification", type="notification"),
]
STEP_SECONDS = {"notification": 5, "api_call": 10, "data_operation": 5, "conditional": 1}


class Workflow(BaseModel):
    id: str = ""
    name: str
    trigger: str
    steps: List[WorkflowStep] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)
    error_handling: List[str] = Field(default_factory=list)
    notifications: List[str] = Field(default_factory=list)
    estimated_duration: str = ""


def _strings(value: Any) -> List[str]:
    if isinstance(value, dict):
        return [f"{key}: {item}" for key, item in value.items()]
    if isinstance(value, list):
        return [item if isinstance(item, str) else json.dumps(item) for item in value]
    return [str(value)] if value else []


def estimate_duration(steps: List[WorkflowStep]) -> str:
    seconds = sum(STEP_SECONDS.get(step.type, 5) for step in steps)
    return f"{seconds} seconds" if seconds < 120 else f"{round(seconds / 60)} minutes"


def parse_workflow(response: str, trigger: str) -> Workflow:
    """JSON first; bullet lists under step/condition/error/notification headings otherwise."""
    workflow = Workflow(name=f"Workflow for: {trigger}", trigger=trigger)

    data = extract_json(response)
    if isinstance(data, dict) and isinstance(data.get("steps"), list):
        workflow.name = str(data.get("name") or workflow.name)
        workflow.steps = coerce_steps(data["steps"])
        workflow.conditions = _strings(data.get("conditions"))
        workflow.error_handling = _strings(data.get("error_handling"))
        workflow.notifications = _strings(data.get("notifications"))
        workflow.estimated_duration = str(data.get("estimated_duration") or "")
    else:
        parsed = WORKFLOW_SECTIONS.parse(response)
        workflow.steps = coerce_steps(parsed.items("steps"))
        workflow.conditions = parsed.items("conditions")
        workflow.error_handling = parsed.items("error_handling")
        workflow.notifications = parsed.items("notifications")

    if not workflow.steps:
        workflow.steps = [step.model_copy() for step in DEFAULT_STEPS]
    if not workflow.estimated_duration:
        workflow.estimated_duration = estimate_duration(workflow.steps)
    return workflow


def load_definition(definition: Any) -> Dict[str, Any]:
    """A dict, a JSON string, or one step per line of plain text."""
    if isinstance(definition, dict):
        return definition
    if isinstance(definition, list):
        return {"steps": definition}
    data = extract_json(str(definition))
    if isinstance(data, dict):
        return data
    if isinstance(data, list):
        return {"steps": data}
    return {"steps": [line.strip() for line in str(definition).splitlines() if line.strip()]}


class WorkflowBuilderAgent(BaseAgent):
    """Generates workflows from a trigger and executes supplied definitions step by step."""

    slug = "workflow_builder"
    name = "Workflow Builder"
    description = "Design an automation workflow from a trigger, or execute a workflow definition"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.4, max_tokens=1000)
    failure_context = "Workflow processing failed"
    payload_keys = ("workflow", "execution")

    def __init__(self, llm: Optional[LLMClient] = None, executor: Optional[StepExecutor] = None):
        super().__init__(llm)
        self.executor = executor or DryRunStepExecutor()

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(
            input_data, ("workflow_definition", "trigger"), "Either a trigger or workflow definition is required"
        )

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        definition = input_data.get("workflow_definition")
        if not is_blank(definition):
            data = load_definition(definition)
            steps = coerce_steps(data.get("steps"))
            workflow_id = data.get("id")
            execution = await run_steps(steps, self.executor, workflow_id=str(workflow_id) if workflow_id else None)
            return {
                "operation": "execution",
                "execution": execution.model_dump(),
                "processed_at": datetime.now().isoformat(),
            }

        trigger = input_data["trigger"]
        response = await self.complete("workflow_builder", trigger=trigger)
        workflow = parse_workflow(response, trigger)
        workflow.id = f"workflow_{uuid.uuid4().hex[:8]}"
        return {
            "operation": "generation",
            "workflow": workflow.model_dump(),
            "processed_at": datetime.now().isoformat(),
        }
