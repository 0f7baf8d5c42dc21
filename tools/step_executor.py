"""Workflow steps and the executors that run them."""
import json
import logging
import time
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class WorkflowStep(BaseModel):
    id: str
    action: str
    type: str = "processing"
    params: Dict[str, Any] = Field(default_factory=dict)


class StepResult(BaseModel):
    success: bool
    duration_ms: int = 0
    output: str = ""


class StepLog(BaseModel):
    step_id: str
    action: str
    status: str
    duration_ms: int
    output: str


class WorkflowExecution(BaseModel):
    workflow_id: str
    status: str
    total_steps: int
    completed_steps: int
    steps: List[StepLog] = Field(default_factory=list)
    summary: str


class StepExecutor(Protocol):
    async def execute(self, step: WorkflowStep) -> StepResult:
        ...


def infer_action_type(action: str) -> str:
    lowered = action.lower()
    if "email" in lowered or "notify" in lowered or "notification" in lowered:
        return "notification"
    if "api" in lowered or "call" in lowered or "webhook" in lowered:
        return "api_call"
    if "database" in lowered or "save" in lowered or "store" in lowered:
        return "data_operation"
    if "condition" in lowered or "check" in lowered or lowered.startswith("if "):
        return "conditional"
    return "processing"


def coerce_step(raw: Any, index: int) -> WorkflowStep:
    """Accept a bare action string or a step mapping; anything else becomes its text."""
    if not isinstance(raw, (str, dict)):
        raw = json.dumps(raw, default=str) if isinstance(raw, (list, tuple)) else str(raw)
    if isinstance(raw, str):
        return WorkflowStep(id=f"step_{index}", action=raw.strip(), type=infer_action_type(raw))
    action = str(raw.get("action") or raw.get("name") or raw.get("description") or f"Step {index}")
    return WorkflowStep(
        id=str(raw.get("id") or f"step_{index}"),
        action=action,
        type=str(raw.get("type") or infer_action_type(action)),
        params={str(key): value for key, value in raw.items() if key not in ("id", "action", "type")},
    )


def coerce_steps(raw_steps: Any) -> List[WorkflowStep]:
    """Steps from a definition's step list, numbered in order; null and blank entries are skipped."""
    if raw_steps is None:
        return []
    if not isinstance(raw_steps, (list, tuple)):
        raw_steps = [raw_steps]
    steps: List[WorkflowStep] = []
    for raw in raw_steps:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            continue
        steps.append(coerce_step(raw, len(steps) + 1))
    return steps


class DryRunStepExecutor:
    """Records each step without side effects; every step succeeds."""

    def __init__(self):
        self.history: List[WorkflowStep] = []

    async def execute(self, step: WorkflowStep) -> StepResult:
        started = time.perf_counter()
        self.history.append(step)
        logger.debug("Dry run of %s (%s): %s", step.id, step.type, step.action)
        return StepResult(
            success=True,
            duration_ms=int((time.perf_counter() - started) * 1000),
            output=f'Step "{step.action}" recorded (dry run)',
        )


async def run_steps(
    steps: List[WorkflowStep],
    executor: StepExecutor,
    workflow_id: Optional[str] = None,
) -> WorkflowExecution:
    """Execute steps in order, stopping at the first failure."""
    logs: List[StepLog] = []
    succeeded = True
    for step in steps:
        result = await executor.execute(step)
        logs.append(StepLog(
            step_id=step.id,
            action=step.action,
            status="completed" if result.success else "failed",
            duration_ms=result.duration_ms,
            output=result.output,
        ))
        if not result.success:
            succeeded = False
            break

    return WorkflowExecution(
        workflow_id=workflow_id or "executed_workflow",
        status="completed" if succeeded else "failed",
        total_steps=len(steps),
        completed_steps=sum(1 for log in logs if log.status == "completed"),
        steps=logs,
        summary="Workflow completed successfully" if succeeded else "Workflow failed during execution",
    )
