"""CI/CD agent: a GitHub Actions workflow for a described project."""
import re
from typing import Any, Dict, List

from agents.base import ReportAgent
from core.config import ModelConfig
from tools.json_extraction import fenced_blocks, strip_code_fences
from tools.section_parser import Section, SectionParser

WORKFLOW_PATH = ".github/workflows/deploy.yml"
SECRET_REF_RE = re.compile(r"\$\{\{\s*secrets\.([A-Za-z0-9_]+)\s*\}\}")
SECRETS_HEADING_RE = re.compile(r"^\W*required secrets\W*$", re.I | re.M)

SECRETS_SECTION = SectionParser([Section("secrets", ("secret",), kind="list")], track_code=False)

SETUP_STEPS = [
    "Create the directory structure: mkdir -p .github/workflows",
    f"Save the workflow as {WORKFLOW_PATH}",
    "Add the required secrets under Settings > Secrets and variables > Actions",
    "Push to your repository; the workflow triggers on pushes to the main branch",
]


def extract_workflow_yaml(response: str) -> str:
    """First yaml fence; otherwise the text before the secrets list with fences removed."""
    blocks = fenced_blocks(response, "yaml") or fenced_blocks(response, "yml")
    if blocks:
        return blocks[0]
    heading = SECRETS_HEADING_RE.search(response)
    body = response[:heading.start()] if heading else response
    return strip_code_fences(body.replace("```yaml", "```"))


def required_secrets(response: str, workflow_yaml: str) -> List[str]:
    """Secrets referenced by the workflow, then any the model listed."""
    secrets: List[str] = []
    for name in SECRET_REF_RE.findall(workflow_yaml):
        if name not in secrets:
            secrets.append(name)
    heading = SECRETS_HEADING_RE.search(response)
    listed = SECRETS_SECTION.parse(response[heading.start():]).items("secrets") if heading else []
    for item in listed:
        name = item.split(":", 1)[0].strip("` ")
        if name and name not in secrets:
            secrets.append(name)
    return secrets


class CICDAgent(ReportAgent):
    slug = "cicd_agent"
    name = "CI/CD Pipeline Generator"
    description = "Generate a GitHub Actions deployment workflow from a project description"
    model = ModelConfig(provider="gemini", model_name="gemini-1.5-flash", temperature=0.2, max_tokens=3000)
    failure_context = "Failed to generate CI/CD pipeline"
    prompt_name = "cicd"
    required_fields = {"project_description": "Please provide a project description"}

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"project_description": str(context["project_description"]).strip()}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        workflow_yaml = extract_workflow_yaml(response)
        return {
            "workflow_path": WORKFLOW_PATH,
            "workflow_yaml": workflow_yaml,
            "setup_steps": list(SETUP_STEPS),
            "secrets": required_secrets(response, workflow_yaml),
        }

    def render(self, response: str, sections: Dict[str, Any], context: Dict[str, Any]) -> str:
        steps = "\n".join(f"{index}. {step}" for index, step in enumerate(sections["setup_steps"], start=1))
        secrets = "\n".join(f"- `{name}`" for name in sections["secrets"]) or "- None referenced"
        return (
            "# CI/CD Pipeline Generated\n\n"
            f"## Workflow File: `{WORKFLOW_PATH}`\n\n"
            f"```yaml\n{sections['workflow_yaml']}\n```\n\n"
            f"## How to Use\n\n{steps}\n\n"
            f"## Required Secrets\n\n{secrets}\n"
        )
