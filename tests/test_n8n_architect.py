"""Tests for n8n workflow validation, conversion and the repair loop."""
import copy
import json

import pytest

from agents.n8n_architect import (
    MAX_VALIDATION_FIXES,
    N8NArchitectAgent,
    is_trigger,
    parse_workflow_json,
    to_react_flow,
    validate_workflow,
)
from fakes import FakeLLM

PLAN = "1. Schedule trigger at 7am\n2. Fetch the forecast\n3. Post it to Slack"

WORKFLOW = {
    "name": "Morning weather",
    "nodes": [
        {"name": "Every Morning", "type": "n8n-nodes-base.scheduleTrigger", "position": [0, 0], "parameters": {}},
        {"name": "Fetch Weather", "type": "n8n-nodes-base.httpRequest", "position": [200, 0]},
        {"name": "Post to Slack", "type": "n8n-nodes-base.slack"},
    ],
    "connections": {
        "Every Morning": {"main": [[{"node": "Fetch Weather", "type": "main", "index": 0}]]},
        "Fetch Weather": {"main": [[{"node": "Post to Slack", "type": "main", "index": 0}]]},
    },
}


def orphaned_workflow():
    workflow = copy.deepcopy(WORKFLOW)
    del workflow["connections"]["Fetch Weather"]
    return workflow


def test_valid_workflow():
    assert validate_workflow(WORKFLOW) is None


def test_is_trigger():
    assert is_trigger("n8n-nodes-base.scheduleTrigger")
    assert is_trigger("n8n-nodes-base.webhook")
    assert not is_trigger("n8n-nodes-base.slack")


def test_webhook_and_cron_start_a_workflow():
    workflow = copy.deepcopy(WORKFLOW)
    workflow["nodes"][0]["type"] = "n8n-nodes-base.webhook"
    workflow["nodes"].append({"name": "Nightly", "type": "n8n-nodes-base.cron"})

    assert is_trigger("n8n-nodes-base.cron")
    assert validate_workflow(workflow) is None
    assert [node["type"] for node in to_react_flow(workflow)["nodes"]] == ["input", "default", "default", "input"]


def _with(**changes):
    workflow = copy.deepcopy(WORKFLOW)
    workflow.update(changes)
    return workflow


def _renamed(index, **fields):
    workflow = copy.deepcopy(WORKFLOW)
    workflow["nodes"][index].update(fields)
    return workflow


@pytest.mark.parametrize("workflow, error", [
    ([], "Workflow must be a JSON object"),
    (_with(nodes=[]), "Missing or invalid 'nodes' array"),
    (_with(connections=[]), "Missing or invalid 'connections' object"),
    (_renamed(1, name=""), "Every node needs a name"),
    (_renamed(2, name="Fetch Weather"), "Node names must be unique"),
    (orphaned_workflow(), "Orphan nodes found (not connected): Post to Slack"),
])
def test_validate_workflow_errors(workflow, error):
    assert validate_workflow(workflow) == error


def test_validate_workflow_rejects_unknown_node_type():
    error = validate_workflow(_renamed(2, type="n8n-nodes-base.fake"))

    assert error.startswith("Invalid node type: n8n-nodes-base.fake. Must be one of: n8n-nodes-base.scheduleTrigger")


def test_validate_workflow_rejects_dangling_connection():
    workflow = copy.deepcopy(WORKFLOW)
    workflow["connections"]["Fetch Weather"]["main"][0].append({"node": "Ghost", "type": "main", "index": 0})

    assert validate_workflow(workflow) == "Connection points to unknown node: Ghost"


def test_to_react_flow():
    flow = to_react_flow(WORKFLOW)

    assert [node["type"] for node in flow["nodes"]] == ["input", "default", "default"]
    assert flow["nodes"][0]["position"] == {"x": 0, "y": 0}
    assert flow["nodes"][2]["position"] == {"x": 400, "y": 100}
    assert flow["nodes"][1]["data"]["nodeType"] == "n8n-nodes-base.httpRequest"
    assert flow["edges"] == [
        {
            "id": "Every Morning-Fetch Weather-0-0",
            "source": "Every Morning",
            "target": "Fetch Weather",
            "type": "smoothstep",
        },
        {
            "id": "Fetch Weather-Post to Slack-0-0",
            "source": "Fetch Weather",
            "target": "Post to Slack",
            "type": "smoothstep",
        },
    ]


def test_parse_workflow_json():
    assert parse_workflow_json('```json\n{"a": 1}\n```') == {"a": 1}
    with pytest.raises(json.JSONDecodeError):
        parse_workflow_json("not json")


async def test_generates_valid_workflow_in_two_calls():
    llm = FakeLLM(PLAN, json.dumps(WORKFLOW))

    envelope = (await N8NArchitectAgent(llm=llm).run({"goal": " Post the weather to Slack every morning "})).to_envelope()

    output = envelope["output"]
    assert envelope["success"] is True
    assert len(llm.calls) == 2
    assert output["workflow"] == WORKFLOW
    assert output["plan"] == PLAN
    assert output["validation"] == {"valid": True, "errors": []}
    assert output["fix_attempts"] == {"json": 0, "validation": 0}
    assert len(output["react_flow"]["edges"]) == 2


async def test_repairs_invalid_json():
    llm = FakeLLM(PLAN, "```json\n{nodes: oops}\n```", json.dumps(WORKFLOW))

    envelope = (await N8NArchitectAgent(llm=llm).run({"description": "weather to Slack"})).to_envelope()

    assert envelope["success"] is True
    assert envelope["output"]["fix_attempts"] == {"json": 1, "validation": 0}
    assert "invalid JSON" in llm.prompt


async def test_gives_up_on_json_after_three_attempts():
    llm = FakeLLM(PLAN, "nope", "nope", "nope")

    envelope = (await N8NArchitectAgent(llm=llm).run({"goal": "weather"})).to_envelope()

    assert envelope["success"] is False
    assert envelope["error"].startswith(
        "Failed to generate n8n workflow: Failed to generate valid JSON after 3 attempts"
    )
    assert envelope["output"] is None
    assert len(llm.calls) == 4


async def test_repairs_validation_errors():
    llm = FakeLLM(PLAN, json.dumps(orphaned_workflow()), json.dumps(WORKFLOW))

    envelope = (await N8NArchitectAgent(llm=llm).run({"goal": "weather"})).to_envelope()

    assert envelope["success"] is True
    assert envelope["output"]["fix_attempts"] == {"json": 0, "validation": 1}
    assert "Orphan nodes found (not connected): Post to Slack" in llm.prompt


async def test_gives_up_after_validation_fix_limit():
    broken = json.dumps(orphaned_workflow())
    llm = FakeLLM(PLAN, *([broken] * (MAX_VALIDATION_FIXES + 1)))

    envelope = (await N8NArchitectAgent(llm=llm).run({"goal": "weather"})).to_envelope()

    assert envelope["error"] == (
        "Failed to generate n8n workflow: Workflow still invalid after 3 fix attempts: "
        "Orphan nodes found (not connected): Post to Slack"
    )
    assert len(llm.calls) == 5


async def test_unparseable_fix_fails():
    llm = FakeLLM(PLAN, json.dumps(orphaned_workflow()), "garbage")

    envelope = (await N8NArchitectAgent(llm=llm).run({"goal": "weather"})).to_envelope()

    assert envelope["error"].startswith("Failed to generate n8n workflow: Failed to fix workflow:")


async def test_requires_goal():
    envelope = (await N8NArchitectAgent(llm=FakeLLM()).run({"goal": "   "})).to_envelope()

    assert envelope == {"success": False, "error": "Please provide a valid workflow goal", "output": None}
