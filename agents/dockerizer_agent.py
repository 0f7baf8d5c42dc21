"""Dockerizer agent: Dockerfile, compose file and .dockerignore for a project."""
from typing import Any, Dict, Optional

from agents.base import ReportAgent, require_any
from core.config import ModelConfig
from tools.section_parser import ParsedSections, Section, SectionParser

DOCKER_SECTIONS = SectionParser([
    Section("dockerignore", ("dockerignore",), kind="block"),
    Section("compose", ("compose",), kind="block"),
    Section("dockerfile", ("dockerfile",), kind="block"),
    Section("notes", ("note", "security", "best practice"), kind="list"),
])

QUICK_START = """## Quick Start

1. **Build the image:**
   ```bash
   docker build -t my-app .
   ```

2. **Run with docker-compose:**
   ```bash
   docker-compose up -d
   ```

3. **Check logs:**
   ```bash
   docker-compose logs -f
   ```
"""


def _file(parsed: ParsedSections, section: str, *languages: str) -> Optional[str]:
    """Code under the file's heading, else the first block tagged with one of `languages`."""
    content = parsed.code(section=section)
    if content is None:
        for language in languages:
            content = parsed.code(language=language)
            if content is not None:
                break
    if content is None and parsed.has(section):
        content = parsed.text(section)
    return content


def parse_docker_config(response: str) -> Dict[str, Any]:
    parsed = DOCKER_SECTIONS.parse(response)
    dockerfile = _file(parsed, "dockerfile", "dockerfile", "docker")
    if dockerfile is None:
        dockerfile = next(
            (block.content for block in parsed.code_blocks if block.content.lstrip().upper().startswith("FROM ")),
            None,
        )
    return {
        "dockerfile": dockerfile,
        "compose": _file(parsed, "compose", "yaml", "yml"),
        "dockerignore": _file(parsed, "dockerignore", "dockerignore", "gitignore"),
        "notes": parsed.items("notes"),
    }


class DockerizerAgent(ReportAgent):
    slug = "dockerizer_agent"
    name = "Dockerizer"
    description = "Generate production Docker configuration from a repository URL or code snippet"
    model = ModelConfig(provider="gemini", model_name="gemini-1.5-flash", temperature=0.2, max_tokens=3000)
    failure_context = "Failed to generate Docker configuration"
    prompt_name = "dockerizer"

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(
            input_data, ("repo_url", "code_snippet"), "Please provide either a GitHub repository URL or code snippet"
        )

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        field, value = require_any(
            context, ("repo_url", "code_snippet"), "Please provide either a GitHub repository URL or code snippet"
        )
        if field == "repo_url":
            return {"context": f"GitHub Repository: {value}"}
        return {"context": f"Code Snippet:\n{value}"}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return parse_docker_config(response)

    def render(self, response: str, sections: Dict[str, Any], context: Dict[str, Any]) -> str:
        return f"# Docker Configuration Generated\n\n{response}\n\n{QUICK_START}"
