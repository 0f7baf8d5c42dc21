"""Terraform agent: infrastructure as code from a plain description."""
from typing import Any, Dict, Optional

from agents.base import ReportAgent
from core.config import ModelConfig
from tools.json_extraction import strip_code_fences
from tools.section_parser import ParsedSections, Section, SectionParser

TERRAFORM_SECTIONS = SectionParser([
    Section("main_tf", ("main.tf",), kind="block"),
    Section("variables_tf", ("variables.tf",), kind="block"),
    Section("tfvars", ("tfvars",), kind="block"),
    Section("outputs_tf", ("outputs.tf",), kind="block"),
    Section("notes", ("note", "security", "consideration"), kind="list"),
])
HCL_TAGS = ("hcl", "terraform", "tf")

DEPLOY_STEPS = """## How to Deploy

1. **Initialize Terraform:** `terraform init`
2. **Plan the deployment:** `terraform plan`
3. **Apply the changes:** `terraform apply`

To destroy the infrastructure: `terraform destroy`
"""


def _section_code(parsed: ParsedSections, key: str) -> Optional[str]:
    return parsed.code(section=key) or (parsed.text(key) or None)


def parse_terraform(response: str) -> Dict[str, Any]:
    """Files by heading; otherwise every HCL block is main.tf."""
    parsed = TERRAFORM_SECTIONS.parse(response)
    main_tf = _section_code(parsed, "main_tf")
    if main_tf is None:
        hcl = [block.content for block in parsed.code_blocks if block.language in HCL_TAGS]
        main_tf = "\n\n".join(hcl) if hcl else strip_code_fences(response)
    return {
        "main_tf": main_tf,
        "variables_tf": _section_code(parsed, "variables_tf"),
        "tfvars": _section_code(parsed, "tfvars"),
        "outputs_tf": _section_code(parsed, "outputs_tf"),
        "notes": parsed.items("notes"),
    }


class TerraformAgent(ReportAgent):
    slug = "terraform_agent"
    name = "Terraform Architect"
    description = "Generate Terraform code for an infrastructure requirement"
    model = ModelConfig(provider="gemini", model_name="gemini-2.5-flash", temperature=0.2, max_tokens=4096)
    failure_context = "Failed to generate Terraform code"
    prompt_name = "terraform"
    required_fields = {"infrastructure_description": "Please provide an infrastructure description"}

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"infrastructure_description": str(context["infrastructure_description"]).strip()}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return parse_terraform(response)

    def render(self, response: str, sections: Dict[str, Any], context: Dict[str, Any]) -> str:
        files = [
            ("main.tf", sections["main_tf"]),
            ("variables.tf", sections["variables_tf"]),
            ("terraform.tfvars", sections["tfvars"]),
            ("outputs.tf", sections["outputs_tf"]),
        ]
        body = "\n\n".join(f"## {name}\n\n```hcl\n{code}\n```" for name, code in files if code)
        return f"# Terraform Infrastructure Code\n\n{body}\n\n{DEPLOY_STEPS}"
