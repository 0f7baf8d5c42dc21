"""Helpers for inputs that may be a file path or inline content."""
import os
import re
from pathlib import Path
from typing import Optional, Tuple

TEXT_EXTENSIONS = {".txt", ".md", ".markdown", ".csv", ".json", ".log", ".html", ".htm", ".yaml", ".yml"}

EXTENSION_LANGUAGES = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".java": "java",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".c": "c",
    ".cs": "csharp",
    ".php": "php",
    ".rb": "ruby",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".sql": "sql",
    ".html": "html",
    ".css": "css",
    ".json": "json",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".md": "markdown",
}

# Ordered: the first matching signature wins.
CONTENT_SIGNATURES = [
    ("python", re.compile(r"^\s*(def |class \w+.*:|import \w+|from \w+ import)", re.M)),
    ("java", re.compile(r"public\s+(static\s+)?(class|void)|System\.out\.println")),
    ("typescript", re.compile(r"\binterface\s+\w+\s*\{|:\s*(string|number|boolean)\b")),
    ("javascript", re.compile(r"\bfunction\b|\bconst\b|\blet\b|=>|console\.log|require\(")),
    ("go", re.compile(r"^\s*package\s+\w+|\bfunc\s+\w+\(", re.M)),
    ("rust", re.compile(r"\bfn\s+\w+\(|\blet\s+mut\b")),
    ("cpp", re.compile(r"#include\s*<|std::")),
    ("csharp", re.compile(r"\busing\s+System|\bnamespace\s+\w+")),
    ("php", re.compile(r"<\?php")),
    ("ruby", re.compile(r"^\s*(def \w+|end)\s*$", re.M)),
    ("sql", re.compile(r"\b(SELECT|INSERT|UPDATE|DELETE|CREATE TABLE)\b", re.I)),
]


def looks_like_file(value: object) -> bool:
    """True when `value` names an existing regular file."""
    if not isinstance(value, (str, os.PathLike)):
        return False
    text = str(value)
    if not text.strip() or "\n" in text or len(text) > 4096:
        return False
    try:
        return Path(text).is_file()
    except OSError:
        return False


def read_text_input(value: str, encoding: str = "utf-8") -> Tuple[str, Optional[Path]]:
    """Return `(text, path)`: file contents when `value` is an existing file, else `value` itself."""
    if looks_like_file(value):
        path = Path(value)
        return path.read_text(encoding=encoding, errors="replace"), path
    return value, None


def file_size(path: str) -> int:
    return os.path.getsize(path)


def detect_code_language(code: str, filename: Optional[str] = None) -> str:
    """Best-effort language detection from the extension, then from content."""
    if filename:
        language = EXTENSION_LANGUAGES.get(Path(filename).suffix.lower())
        if language:
            return language
    for language, pattern in CONTENT_SIGNATURES:
        if pattern.search(code or ""):
            return language
    return "unknown"
