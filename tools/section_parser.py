"""Keyword-driven section scanner for free-text LLM completions.

Each agent declares a table of sections (heading keywords -> section key and
kind). The scanner walks the completion line by line, switches the current
section whenever a heading line matches, routes fenced code verbatim into
code blocks, and collects list items or prose into the current section.

Parsing never raises: text with no recognisable structure simply yields
empty sections, which callers replace with their own defaults.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

Keyword = Union[str, Tuple[str, ...]]

BULLET_RE = re.compile(r"^(?:[-•*+]\s+|\d+[.)]\s+)")
NUMBERED_RE = re.compile(r"^\d+[.)]")
FENCE = "```"


def strip_markdown(text: str) -> str:
    """Remove emphasis markers and surrounding quotes from a fragment."""
    cleaned = text.strip()
    cleaned = re.sub(r"\*\*(.+?)\*\*", r"\1", cleaned)
    cleaned = re.sub(r"__(.+?)__", r"\1", cleaned)
    cleaned = cleaned.strip("*_` ").strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned


def strip_heading(line: str) -> str:
    """Drop a leading markdown heading marker (`## `), leaving hashtags alone."""
    return re.sub(r"^#+\s+", "", line.strip())


def strip_bullet(line: str) -> Optional[str]:
    """Return the text after a bullet or number marker, or None if there is no marker."""
    match = BULLET_RE.match(line.strip())
    if not match:
        return None
    return line.strip()[match.end():].strip()


def parse_list_items(text: str, min_length: int = 0) -> List[str]:
    """Collect bullet and numbered items from a block of text."""
    items = []
    for line in (text or "").splitlines():
        item = strip_bullet(line)
        if item is None:
            continue
        item = strip_markdown(item)
        if len(item) > min_length:
            items.append(item)
    return items


@dataclass(frozen=True)
class Section:
    """One named section of a completion.

    `kind` is "list" (bullet items), "text" (prose joined with spaces) or
    "block" (lines kept with their line breaks). A keyword given as a tuple
    matches only when every part appears in the heading.
    """
    key: str
    keywords: Tuple[Keyword, ...]
    kind: str = "text"
    min_item_length: int = 0
    bullets_only: bool = True

    def matches(self, label: str) -> bool:
        for keyword in self.keywords:
            if isinstance(keyword, tuple):
                if all(part in label for part in keyword):
                    return True
            elif keyword in label:
                return True
        return False


@dataclass
class CodeBlock:
    language: str
    content: str
    section: Optional[str] = None


@dataclass
class ParsedSections:
    """Result of a scan: raw section contents, code blocks and unclaimed lines."""
    values: Dict[str, List[str]]
    kinds: Dict[str, str]
    code_blocks: List[CodeBlock] = field(default_factory=list)
    preamble: List[str] = field(default_factory=list)

    def text(self, key: str, default: str = "") -> str:
        lines = self.values.get(key) or []
        if not lines:
            return default
        joiner = "\n" if self.kinds.get(key) == "block" else " "
        return joiner.join(lines).strip() or default

    def items(self, key: str, default: Optional[Sequence[str]] = None) -> List[str]:
        values = list(self.values.get(key) or [])
        if values:
            return values
        return list(default) if default is not None else []

    def has(self, key: str) -> bool:
        return bool(self.values.get(key))

    def code(self, language: Optional[str] = None, section: Optional[str] = None) -> Optional[str]:
        """First code block matching the optional language and section filters."""
        for block in self.code_blocks:
            if language is not None and block.language != language:
                continue
            if section is not None and block.section != section:
                continue
            return block.content
        return None

    def as_dict(self) -> Dict[str, Union[str, List[str]]]:
        return {
            key: (self.items(key) if kind == "list" else self.text(key))
            for key, kind in self.kinds.items()
        }


class SectionParser:
    """Scans completion text using a table of sections."""

    def __init__(
        self,
        sections: Iterable[Section],
        heading_max_words: int = 8,
        plain_heading_max_words: int = 4,
        track_code: bool = True,
    ):
        self.sections = list(sections)
        self.heading_max_words = heading_max_words
        self.plain_heading_max_words = plain_heading_max_words
        self.track_code = track_code

    def parse(self, text: Optional[str]) -> ParsedSections:
        result = ParsedSections(
            values={section.key: [] for section in self.sections},
            kinds={section.key: section.kind for section in self.sections},
        )
        current: Optional[Section] = None
        in_code = False
        code_language = ""
        code_section: Optional[str] = None
        code_lines: List[str] = []

        for raw in (text or "").splitlines():
            line = raw.strip()

            if self.track_code and line.startswith(FENCE):
                if in_code:
                    result.code_blocks.append(CodeBlock(code_language, "\n".join(code_lines), code_section))
                    code_lines = []
                    in_code = False
                else:
                    in_code = True
                    code_language = line[len(FENCE):].strip().lower()
                    code_section = current.key if current else None
                continue

            if in_code:
                code_lines.append(raw.rstrip())
                continue

            if not line:
                continue

            heading = self._match_heading(line)
            if heading is not None:
                current, inline = heading
                if inline:
                    self._accumulate(result, current, inline, inline=True)
                continue

            if current is None:
                result.preamble.append(line)
                continue

            if line.startswith("#"):
                continue

            self._accumulate(result, current, line)

        # An unterminated fence still yields its content.
        if in_code and code_lines:
            result.code_blocks.append(CodeBlock(code_language, "\n".join(code_lines), code_section))

        return result

    def _match_heading(self, line: str) -> Optional[Tuple[Section, str]]:
        is_markdown_heading = line.startswith("#")
        bare = line.lstrip("#").strip()
        bullet = BULLET_RE.match(bare)
        numbered = bool(bullet and NUMBERED_RE.match(bare))
        if bullet:
            bare = bare[bullet.end():].strip()
        is_bold = bare.startswith("**") or bare.startswith("__")

        if ":" in bare:
            label, inline = bare.split(":", 1)
            inline = strip_markdown(inline)
            has_colon = True
        else:
            label, inline = bare, ""
            has_colon = False

        label = strip_markdown(label).lower()
        words = len(label.split())
        if not label or words > self.heading_max_words:
            return None

        decorated = is_markdown_heading or is_bold or has_colon
        if bullet and not numbered and not is_markdown_heading:
            # "- Label: value" and "- plain item" are list content.
            if inline or not is_bold:
                return None
        elif numbered and not decorated and words > min(3, self.plain_heading_max_words):
            return None
        elif not bullet and not decorated and words > self.plain_heading_max_words:
            return None

        for section in self.sections:
            if section.matches(label):
                return section, inline
        return None

    def _accumulate(self, result: ParsedSections, section: Section, line: str, inline: bool = False):
        if section.kind == "list":
            item = strip_bullet(line)
            if item is None:
                if section.bullets_only and not inline:
                    return
                item = line
            item = strip_markdown(item)
            if len(item) > section.min_item_length:
                result.values[section.key].append(item)
        elif section.kind == "block":
            result.values[section.key].append(line)
        else:
            result.values[section.key].append(strip_markdown(line) if inline else line)


def find_labeled_value(text: Optional[str], *labels: str) -> Optional[str]:
    """Value of the first `Label: value` line whose label contains one of `labels`."""
    for raw in (text or "").splitlines():
        line = raw.strip().lstrip("#").strip()
        bullet = BULLET_RE.match(line)
        if bullet:
            line = line[bullet.end():]
        if ":" not in line:
            continue
        label, value = line.split(":", 1)
        label = strip_markdown(label).lower()
        if len(label.split()) > 6:
            continue
        if any(candidate in label for candidate in labels):
            value = strip_markdown(value)
            if value:
                return value
    return None
