"""Code-to-diagram agent."""
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser
from tools.text_input import detect_code_language

DIAGRAM_GUIDANCE = {
    "uml": "- Include classes, interfaces, inheritance, associations",
    "flowchart": "- Show decision points, loops, function calls",
    "sequence": "- Show interaction between objects over time",
}

DEFAULT_EXPLANATION = "This diagram represents the structure and relationships found in the provided code."

FALLBACK_DIAGRAMS = {
    "mermaid": """graph TD
    A[Code Component] --> B[Function/Method]
    A --> C[Class/Module]
    B --> D[Logic Flow]
    C --> D""",
    "plantuml": """@startuml
component "Code Component" as A
component "Function/Method" as B
component "Class/Module" as C
A --> B
A --> C
@enduml""",
}

DIAGRAM_SECTIONS = SectionParser([
    Section("explanation", ("explanation",)),
    Section("relationships", ("relationship",), kind="list", min_item_length=3),
    Section("key_components", (("key", "component"), ("key", "class"), ("key", "function")), kind="list", min_item_length=3),
    Section("flow_structure", ("flow", "structure")),
])


class Diagram(BaseModel):
    diagram_code: str = ""
    explanation: str = DEFAULT_EXPLANATION
    relationships: List[str] = Field(default_factory=list)
    key_components: List[str] = Field(default_factory=list)
    flow_structure: str = ""


def fallback_diagram(output_format: str) -> str:
    return FALLBACK_DIAGRAMS.get(output_format, "Diagram syntax not generated")


def parse_diagram_response(response: str, output_format: str) -> Diagram:
    parsed = DIAGRAM_SECTIONS.parse(response)
    code = parsed.code(output_format) or parsed.code("mermaid")
    if code is None and parsed.code_blocks:
        code = parsed.code_blocks[0].content
    return Diagram(
        diagram_code=(code or "").strip() or fallback_diagram(output_format),
        explanation=parsed.text("explanation", DEFAULT_EXPLANATION),
        relationships=parsed.items("relationships"),
        key_components=parsed.items("key_components"),
        flow_structure=parsed.text("flow_structure"),
    )


class CodeDiagramAgent(BaseAgent):
    """Produces UML, flowchart or sequence diagrams from source code."""

    slug = "code_diagram"
    name = "Code to Diagram"
    description = "Generate a Mermaid or PlantUML diagram from source code"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.2, max_tokens=1200)
    failure_context = "Diagram generation failed"
    payload_keys = ("diagram",)
    required_fields = {"code": "Code is required"}

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        code = input_data["code"]
        diagram_type = input_data.get("diagram_type") or "uml"
        output_format = input_data.get("output_format") or "mermaid"

        response = await self.complete(
            "code_diagram",
            code=code,
            diagram_type=diagram_type,
            output_format=output_format,
            diagram_guidance=DIAGRAM_GUIDANCE.get(
                diagram_type, "- Create appropriate diagram type for the code structure"
            ),
        )
        diagram = parse_diagram_response(response, output_format)

        return {
            "diagram": diagram.model_dump(),
            "code_language": detect_code_language(code),
            "diagram_type": diagram_type,
            "output_format": output_format,
            "generated_at": datetime.now().isoformat(),
        }
