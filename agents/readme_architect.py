"""README architect agent."""
import re
from typing import Any, Dict, List
from urllib.parse import urlparse

from agents.base import ReportAgent
from core.config import ModelConfig
from tools.json_extraction import strip_code_fences

BADGE_RE = re.compile(r"!\[[^\]]*\]\([^)]+\)")
TITLE_RE = re.compile(r"^#\s+(.+)$", re.M)
SECTION_RE = re.compile(r"^##\s+(.+)$", re.M)


def repo_name(repo_url: str) -> str:
    """`https://github.com/owner/repo.git` -> `repo`."""
    path = urlparse(repo_url).path if "//" in repo_url else repo_url
    parts = [part for part in path.strip("/").split("/") if part]
    name = parts[-1] if parts else repo_url
    return name[:-4] if name.endswith(".git") else name


def unwrap_markdown(response: str) -> str:
    """Drop a ```markdown fence wrapped around the whole README."""
    stripped = response.strip()
    if stripped.startswith("```") and stripped.endswith("```"):
        return strip_code_fences(stripped)
    return stripped


def parse_readme(readme: str, repo_url: str) -> Dict[str, Any]:
    title = TITLE_RE.search(readme)
    badges: List[str] = BADGE_RE.findall(readme)
    return {
        "title": title.group(1).strip() if title else repo_name(repo_url),
        "badges": badges,
        "table_of_contents": [heading.strip() for heading in SECTION_RE.findall(readme)],
    }


class ReadmeArchitectAgent(ReportAgent):
    slug = "readme_architect"
    name = "README Architect"
    description = "Generate a professional README.md for a repository"
    model = ModelConfig(provider="gemini", model_name="gemini-2.5-flash", temperature=0.4, max_tokens=4096)
    failure_context = "Failed to generate README"
    prompt_name = "readme_architect"
    required_fields = {"repo_url": "Please provide a repository URL"}

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"repo_url": context["repo_url"].strip()}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return parse_readme(unwrap_markdown(response), context["repo_url"].strip())

    def render(self, response: str, sections: Dict[str, Any], context: Dict[str, Any]) -> str:
        return unwrap_markdown(response)
