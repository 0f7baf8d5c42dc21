"""API documentation agent: OpenAPI spec plus readable docs for a code file."""
import re
from typing import Any, Dict, List, Optional

from agents.base import ReportAgent, require
from core.config import ModelConfig
from tools.json_extraction import extract_json, fenced_blocks
from tools.section_parser import Section, SectionParser
from tools.text_input import detect_code_language, read_text_input

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")
ENDPOINT_RE = re.compile(r"\b(GET|POST|PUT|PATCH|DELETE|HEAD|OPTIONS)\s+(/[\w/{}:.\-]*)")

DOC_SECTIONS = SectionParser([
    Section("summary", ("summary", "overview")),
    Section("authentication", ("authentication", "auth")),
    Section("error_codes", (("error", "code"), "error response"), kind="list"),
])


def find_openapi(response: str) -> Optional[Dict[str, Any]]:
    for block in fenced_blocks(response, "json") + fenced_blocks(response):
        data = extract_json(block)
        if isinstance(data, dict) and ("openapi" in data or "swagger" in data or "paths" in data):
            return data
    data = extract_json(response)
    if isinstance(data, dict) and "paths" in data:
        return data
    return None


def list_endpoints(response: str, spec: Optional[Dict[str, Any]]) -> List[str]:
    """`METHOD /path` strings from the spec's paths, else from the prose."""
    endpoints: List[str] = []
    if spec and isinstance(spec.get("paths"), dict):
        for path, operations in spec["paths"].items():
            if not isinstance(operations, dict):
                continue
            for method in operations:
                if method.lower() in HTTP_METHODS:
                    endpoints.append(f"{method.upper()} {path}")
    if not endpoints:
        for method, path in ENDPOINT_RE.findall(response):
            endpoint = f"{method} {path}"
            if endpoint not in endpoints:
                endpoints.append(endpoint)
    return endpoints


def parse_api_docs(response: str) -> Dict[str, Any]:
    spec = find_openapi(response)
    parsed = DOC_SECTIONS.parse(response)
    summary = parsed.text("summary")
    if not summary and spec:
        summary = str((spec.get("info") or {}).get("description") or "")
    return {
        "openapi": spec,
        "summary": summary,
        "endpoints": list_endpoints(response, spec),
        "authentication": parsed.text("authentication"),
        "error_codes": parsed.items("error_codes"),
    }


class APIDocsAgent(ReportAgent):
    slug = "api_docs_agent"
    name = "API Docs Generator"
    description = "Generate OpenAPI and markdown documentation from a code file"
    model = ModelConfig(provider="gemini", model_name="gemini-1.5-flash", temperature=0.2, max_tokens=4096)
    failure_context = "Failed to generate API documentation"
    prompt_name = "api_docs"
    required_fields = {"code_file": "Please provide code file content to analyze"}

    def prepare(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        code, path = read_text_input(require(input_data, "code_file"))
        return {"code": code, "language": detect_code_language(code, path.name if path else None)}

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"code_file": context["code"]}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return {**parse_api_docs(response), "language": context["language"]}
