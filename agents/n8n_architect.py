"""n8n architect agent.

Unlike the rest of the catalog this agent makes several calls: it plans the
workflow, generates the n8n JSON, and then validates it locally, asking the
model to repair syntax errors (two repair calls, so three parses in all)
and validation errors (up to three repair calls).
"""
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from agents.base import BaseAgent, require_any
from core.config import ModelConfig
from core.exceptions import AgentError
from tools.json_extraction import strip_code_fences

logger = logging.getLogger(__name__)

MAX_JSON_FIXES = 2
MAX_VALIDATION_FIXES = 3

VALID_NODE_TYPES = [
    "n8n-nodes-base.scheduleTrigger",
    "n8n-nodes-base.webhook",
    "n8n-nodes-base.httpRequest",
    "n8n-nodes-base.emailSend",
    "n8n-nodes-base.gmail",
    "n8n-nodes-base.googleDrive",
    "n8n-nodes-base.slack",
    "n8n-nodes-base.discord",
    "n8n-nodes-base.telegram",
    "n8n-nodes-base.twilio",
    "n8n-nodes-base.airtable",
    "n8n-nodes-base.notion",
    "n8n-nodes-base.jira",
    "n8n-nodes-base.trello",
    "n8n-nodes-base.github",
    "n8n-nodes-base.git",
    "n8n-nodes-base.mysql",
    "n8n-nodes-base.postgres",
    "n8n-nodes-base.mongodb",
    "n8n-nodes-base.redis",
    "n8n-nodes-base.spreadsheetFile",
    "n8n-nodes-base.csv",
    "n8n-nodes-base.json",
    "n8n-nodes-base.set",
    "n8n-nodes-base.switch",
    "n8n-nodes-base.if",
    "n8n-nodes-base.loopOverItems",
    "n8n-nodes-base.splitInBatches",
    "n8n-nodes-base.aggregate",
    "n8n-nodes-base.merge",
    "n8n-nodes-base.filter",
    "n8n-nodes-base.sort",
    "n8n-nodes-base.limit",
    "n8n-nodes-base.removeDuplicates",
    "n8n-nodes-base.htmlExtract",
    "n8n-nodes-base.rssFeedRead",
    "n8n-nodes-base.cron",
    "n8n-nodes-base.wait",
    "n8n-nodes-base.errorTrigger",
    "n8n-nodes-base.manualTrigger",
]


def is_trigger(node_type: str) -> bool:
    """Trigger nodes, plus webhook and cron nodes, which also start a workflow."""
    return "trigger" in node_type.lower() or node_type in ("n8n-nodes-base.webhook", "n8n-nodes-base.cron")


def _targets(connections: Dict[str, Any]) -> List[Tuple[str, int, int, str]]:
    """(source, output index, position, target) for every `main` connection."""
    edges = []
    for source, outputs in connections.items():
        if not isinstance(outputs, dict):
            continue
        for output_index, targets in enumerate(outputs.get("main") or []):
            for position, target in enumerate(targets or []):
                if isinstance(target, dict) and target.get("node"):
                    edges.append((source, output_index, position, target["node"]))
    return edges


def validate_workflow(workflow: Any) -> Optional[str]:
    """The first problem with an n8n workflow, or None when it is valid."""
    if not isinstance(workflow, dict):
        return "Workflow must be a JSON object"
    nodes = workflow.get("nodes")
    connections = workflow.get("connections")
    if not isinstance(nodes, list) or not nodes:
        return "Missing or invalid 'nodes' array"
    if not isinstance(connections, dict):
        return "Missing or invalid 'connections' object"

    names = []
    for node in nodes:
        if not isinstance(node, dict) or not node.get("name"):
            return "Every node needs a name"
        if node.get("type") not in VALID_NODE_TYPES:
            return f"Invalid node type: {node.get('type')}. Must be one of: {', '.join(VALID_NODE_TYPES[:5])}..."
        names.append(node["name"])
    if len(set(names)) != len(names):
        return "Node names must be unique"

    connected = set(connections)
    for _, _, _, target in _targets(connections):
        if target not in names:
            return f"Connection points to unknown node: {target}"
        connected.add(target)

    orphans = [node["name"] for node in nodes if not is_trigger(node["type"]) and node["name"] not in connected]
    if orphans:
        return f"Orphan nodes found (not connected): {', '.join(orphans)}"
    return None


def to_react_flow(workflow: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    """Nodes and edges in the shape React Flow renders."""
    nodes = []
    for index, node in enumerate(workflow["nodes"]):
        position = node.get("position")
        if not isinstance(position, (list, tuple)) or len(position) < 2:
            position = [index * 200, 100]
        nodes.append({
            "id": node["name"],
            "type": "input" if is_trigger(node["type"]) else "default",
            "position": {"x": position[0], "y": position[1]},
            "data": {"label": node["name"], "nodeType": node["type"], "parameters": node.get("parameters", {})},
        })
    edges = [
        {
            "id": f"{source}-{target}-{output_index}-{position}",
            "source": source,
            "target": target,
            "type": "smoothstep",
        }
        for source, output_index, position, target in _targets(workflow["connections"])
    ]
    return {"nodes": nodes, "edges": edges}


def parse_workflow_json(response: str) -> Any:
    """Parse a completion that should be bare JSON.

    Raises:
        json.JSONDecodeError: the completion is not valid JSON
    """
    return json.loads(strip_code_fences(response))


class N8NArchitectAgent(BaseAgent):
    slug = "n8n_architect"
    name = "n8n Architect"
    description = "Design, generate and validate an importable n8n workflow from a goal"
    model = ModelConfig(provider="gemini", model_name="gemini-1.5-flash", temperature=0.2, max_tokens=4096)
    failure_context = "Failed to generate n8n workflow"
    payload_keys = ("output",)

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(input_data, ("goal", "description"), "Please provide a valid workflow goal")

    async def fix(self, workflow_text: str, error: str, goal: str, plan: str) -> str:
        return await self.complete(
            "n8n_fix",
            error=error,
            goal=goal,
            plan=plan,
            workflow=workflow_text,
            node_types=", ".join(VALID_NODE_TYPES[:20]),
        )

    async def generate(self, goal: str, plan: str) -> Tuple[Any, int]:
        """Workflow JSON and the number of syntax repair passes it took."""
        text = await self.complete(
            "n8n_generate",
            goal=goal,
            plan=plan,
            node_types="\n".join(f"- {node_type}" for node_type in VALID_NODE_TYPES[:20]),
        )
        attempts = 0
        while True:
            try:
                return parse_workflow_json(text), attempts
            except json.JSONDecodeError as e:
                if attempts >= MAX_JSON_FIXES:
                    raise AgentError(f"Failed to generate valid JSON after {attempts + 1} attempts: {e}") from e
                attempts += 1
                logger.info("Repairing workflow JSON (attempt %d): %s", attempts, e)
                text = await self.fix(strip_code_fences(text), f"invalid JSON ({e})", goal, plan)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, goal = require_any(input_data, ("goal", "description"), "Please provide a valid workflow goal")
        goal = goal.strip()

        logger.info("Planning n8n workflow")
        plan = (await self.complete("n8n_plan", goal=goal)).strip()

        logger.info("Generating n8n workflow JSON")
        workflow, json_fixes = await self.generate(goal, plan)

        error = validate_workflow(workflow)
        fixes = 0
        while error and fixes < MAX_VALIDATION_FIXES:
            fixes += 1
            logger.info("Fixing validation error (attempt %d): %s", fixes, error)
            response = await self.fix(json.dumps(workflow, indent=2), error, goal, plan)
            try:
                workflow = parse_workflow_json(response)
            except json.JSONDecodeError as e:
                raise AgentError(f"Failed to fix workflow: {e}") from e
            error = validate_workflow(workflow)

        if error:
            raise AgentError(f"Workflow still invalid after {fixes} fix attempts: {error}")

        return {
            "output": {
                "workflow": workflow,
                "react_flow": to_react_flow(workflow),
                "plan": plan,
                "validation": {"valid": True, "errors": []},
                "fix_attempts": {"json": json_fixes, "validation": fixes},
            },
        }
