"""Pull JSON out of LLM completions."""
import json
import re
from typing import Any, List, Optional

FENCED_BLOCK_RE = re.compile(r"```[ \t]*([a-zA-Z0-9_+-]*)[ \t]*\n?([\s\S]*?)```")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ``` fence (with optional language tag) from a completion."""
    content = (text or "").strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def fenced_blocks(text: str, language: Optional[str] = None) -> List[str]:
    """Contents of every fenced block, optionally restricted to one language tag."""
    blocks = []
    for match in FENCED_BLOCK_RE.finditer(text or ""):
        tag = match.group(1).lower()
        if language is None or tag == language:
            blocks.append(match.group(2).strip())
    return blocks


def _outermost(text: str, opener: str, closer: str) -> Optional[str]:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def extract_json(text: Optional[str]) -> Optional[Any]:
    """Parse the JSON object or array embedded in a completion.

    Tries, in order: fenced ```json blocks, any fenced block, the outermost
    `{...}`, the outermost `[...]`, and finally the whole text. Returns None
    when nothing parses.
    """
    if not text:
        return None

    candidates = fenced_blocks(text, "json") + fenced_blocks(text)
    for opener, closer in (("{", "}"), ("[", "]")):
        bare = _outermost(text, opener, closer)
        if bare:
            candidates.append(bare)
    candidates.append(text.strip())

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
    return None
