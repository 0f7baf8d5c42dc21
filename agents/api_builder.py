"""API boilerplate generator."""
import json
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig

FRAMEWORK_GUIDANCE = {
    "express": "- Use Express.js with middleware, routes, controllers",
    "fastapi": "- Use FastAPI with Pydantic models, dependency injection",
    "django": "- Use Django REST framework with serializers, viewsets",
}

FILE_LANGUAGES = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "json": "json",
    "md": "markdown",
    "txt": "text",
    "yml": "yaml",
    "yaml": "yaml",
    "env": "text",
    "toml": "toml",
}

LANGUAGE_EXTENSIONS = {"javascript": "js", "js": "js", "typescript": "ts", "ts": "ts", "python": "py", "py": "py", "json": "json"}

FILE_NAME_RE = re.compile(r"^[`*#\s]*(?:file|create file)?\s*:?\s*[`*]*([\w./-]+\.(?:js|ts|py|json|txt|md|ya?ml|env|toml))[`*]*\s*:?$", re.I)
JS_ROUTE_RE = re.compile(r"(?:app|router)\.(get|post|put|delete|patch)\s*\(\s*['\"]([^'\"]*)['\"]", re.I)
PY_ROUTE_RE = re.compile(r"@(?:app|router)\.(get|post|put|delete|patch)\s*\(\s*['\"]([^'\"]*)['\"]", re.I)

EXPRESS_SERVER = """const express = require('express');
const mongoose = require('mongoose');

const app = express();
app.use(express.json());

// Connect to MongoDB
mongoose.connect(process.env.MONGODB_URI || 'mongodb://localhost:27017/api');

// Basic route
app.get('/api/health', (req, res) => {
  res.json({ status: 'OK', message: 'API is running' });
});

const PORT = process.env.PORT || 3000;
app.listen(PORT, () => {
  console.log(`Server running on port ${PORT}`);
});"""

EXPRESS_PACKAGE = """{
  "name": "api-boilerplate",
  "version": "1.0.0",
  "dependencies": {
    "express": "^4.18.0",
    "mongoose": "^7.0.0"
  }
}"""

FASTAPI_MAIN = """from fastapi import FastAPI

app = FastAPI()


@app.get("/api/health")
async def health():
    return {"status": "OK", "message": "API is running"}
"""


class GeneratedFile(BaseModel):
    name: str
    content: str
    language: str


class Endpoint(BaseModel):
    method: str
    path: str
    file: str


class APICode(BaseModel):
    files: List[GeneratedFile] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    setup_instructions: str = ""
    api_endpoints: List[Endpoint] = Field(default_factory=list)


def detect_file_language(filename: str) -> str:
    return FILE_LANGUAGES.get(filename.rsplit(".", 1)[-1].lower(), "text")


def parse_dependencies(text: str) -> List[str]:
    """Package names from a package.json, a requirements file or install commands."""
    try:
        manifest = json.loads(text)
    except ValueError:
        manifest = None
    if isinstance(manifest, dict):
        names: List[str] = []
        for key in ("dependencies", "devDependencies"):
            declared = manifest.get(key)
            if isinstance(declared, dict):
                names.extend(str(name) for name in declared)
            elif isinstance(declared, list):
                names.extend(name for name in declared if isinstance(name, str))
        return names

    dependencies = []
    for line in text.splitlines():
        stripped = line.strip().lstrip("-•* ").strip()
        if not stripped or stripped.startswith(("#", "//", "{", "}")):
            continue
        install = re.match(r"^(?:npm|yarn|pnpm|pip3?)\s+(?:install|add|i)\s+(.*)$", stripped)
        candidates = install.group(1).split() if install else [stripped]
        for candidate in candidates:
            if candidate.startswith("-"):
                continue
            name = re.split(r"[<>=^~:,\s]", candidate.replace('"', "").replace("'", ""), maxsplit=1)[0]
            # strip an npm version suffix but keep a scope prefix
            if "@" in name[1:]:
                name = name[:name.index("@", 1)]
            if name and name not in dependencies:
                dependencies.append(name)
    return dependencies


def fallback_files(framework: str, language: str) -> List[GeneratedFile]:
    if framework == "fastapi" or language == "python":
        return [
            GeneratedFile(name="main.py", content=FASTAPI_MAIN, language="python"),
            GeneratedFile(name="requirements.txt", content="fastapi\nuvicorn", language="text"),
        ]
    return [
        GeneratedFile(name="server.js", content=EXPRESS_SERVER, language="javascript"),
        GeneratedFile(name="package.json", content=EXPRESS_PACKAGE, language="json"),
    ]


def extract_endpoints(files: List[GeneratedFile]) -> List[Endpoint]:
    endpoints = []
    for generated in files:
        if generated.language in ("javascript", "typescript"):
            pattern = JS_ROUTE_RE
        elif generated.language == "python":
            pattern = PY_ROUTE_RE
        else:
            continue
        for method, path in pattern.findall(generated.content):
            endpoints.append(Endpoint(method=method.upper(), path=path, file=generated.name))
    return endpoints


def _file_header(line: str) -> Optional[str]:
    match = FILE_NAME_RE.match(line)
    return match.group(1) if match else None


def parse_api_code(response: str, framework: str, language: str) -> APICode:
    """Split a generated answer into files, dependencies and setup text."""
    api_code = APICode()
    mode: Optional[str] = None
    current_file: Optional[str] = None
    in_code = False
    code_language = ""
    code: List[str] = []
    dependency_text: List[str] = []
    setup: List[str] = []
    unnamed = 0

    for raw in response.splitlines():
        line = raw.strip()

        if line.startswith("```"):
            if not in_code:
                in_code, code, code_language = True, [], line[3:].strip().lower()
                continue
            in_code = False
            content = "\n".join(code).strip()
            if not content:
                continue
            if mode == "dependencies":
                dependency_text.append(content)
            elif mode == "setup":
                setup.append(content)
            else:
                name = current_file
                if name is None:
                    unnamed += 1
                    name = f"snippet_{unnamed}.{LANGUAGE_EXTENSIONS.get(code_language, 'txt')}"
                api_code.files.append(GeneratedFile(name=name, content=content, language=detect_file_language(name)))
                current_file = None
            continue

        if in_code:
            code.append(raw.rstrip())
            continue

        header = _file_header(line)
        if header:
            current_file, mode = header, "file"
            continue

        lowered = line.lower()
        is_heading = len(line.split()) <= 8 and (line.startswith(("#", "**")) or line.endswith(":") or len(line.split()) <= 3)
        if is_heading and ("dependencies" in lowered or "requirements" in lowered):
            mode = "dependencies"
            continue
        if is_heading and ("setup" in lowered or "instructions" in lowered):
            mode = "setup"
            continue
        if is_heading and line.startswith(("#", "**")):
            mode = None
            continue

        if line and mode == "dependencies":
            dependency_text.append(line)
        elif line and mode == "setup":
            setup.append(line)

    for generated in api_code.files:
        if generated.name.endswith(("package.json", "requirements.txt")):
            dependency_text.append(generated.content)

    for block in dependency_text:
        for name in parse_dependencies(block):
            if name not in api_code.dependencies:
                api_code.dependencies.append(name)
    api_code.setup_instructions = "\n".join(setup).strip()

    if not api_code.files:
        api_code.files = fallback_files(framework, language)
    api_code.api_endpoints = extract_endpoints(api_code.files)
    return api_code


class APIBuilderAgent(BaseAgent):
    """Generates API boilerplate for a described service."""

    slug = "api_builder"
    name = "API Builder"
    description = "Generate REST API boilerplate (server, routes, models, dependencies)"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.3, max_tokens=2000)
    failure_context = "API generation failed"
    payload_keys = ("api_code",)
    required_fields = {"description": "API description is required"}

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        description = input_data["description"]
        framework = input_data.get("framework") or "express"
        language = input_data.get("language") or "javascript"
        database = input_data.get("database") or "mongodb"

        response = await self.complete(
            "api_builder",
            description=description,
            framework=framework,
            language=language,
            database=database,
            framework_guidance=FRAMEWORK_GUIDANCE.get(framework, "- Use appropriate framework patterns"),
        )
        api_code = parse_api_code(response, framework, language)

        return {
            "api_code": api_code.model_dump(),
            "framework": framework,
            "language": language,
            "database": database,
            "description": description,
            "generated_at": datetime.now().isoformat(),
            "files_generated": len(api_code.files),
        }
