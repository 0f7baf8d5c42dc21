"""Tests for file-or-inline inputs and document reading."""
import pytest

from core.exceptions import AgentInputError
from tools.documents import read_document
from tools.text_input import detect_code_language, looks_like_file, read_text_input


def test_looks_like_file(tmp_path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    assert looks_like_file(str(path))
    assert looks_like_file(path)
    assert not looks_like_file(str(tmp_path / "missing.txt"))
    assert not looks_like_file("two\nlines")
    assert not looks_like_file(123)


def test_read_text_input(tmp_path) -> None:
    path = tmp_path / "app.log"
    path.write_text("ERROR boom")
    assert read_text_input(str(path)) == ("ERROR boom", path)
    assert read_text_input("inline text") == ("inline text", None)


@pytest.mark.parametrize("code, filename, expected", [
    ("x = 1", "main.go", "go"),
    ("def handler(event):\n    return event", None, "python"),
    ("public class Main { }", None, "java"),
    ("const add = (a, b) => a + b;", None, "javascript"),
    ("SELECT * FROM users", None, "sql"),
    ("hello world", None, "unknown"),
])
def test_detect_code_language(code: str, filename, expected: str) -> None:
    assert detect_code_language(code, filename) == expected


def test_read_document_inline_and_text_file(tmp_path) -> None:
    assert read_document("Just some text").model_dump() == {
        "text": "Just some text",
        "file_name": None,
        "page_count": None,
        "is_file": False,
    }

    path = tmp_path / "article.md"
    path.write_text("# Title\nBody")
    document = read_document(str(path))
    assert document.text == "# Title\nBody"
    assert document.file_name == "article.md"
    assert document.is_file


def test_read_document_rejects_pdf_when_disabled(tmp_path) -> None:
    path = tmp_path / "paper.pdf"
    path.write_bytes(b"%PDF-1.4")
    with pytest.raises(AgentInputError, match="PDF files are not supported here"):
        read_document(str(path), allow_pdf=False)


def test_read_document_rejects_unknown_extensions(tmp_path) -> None:
    path = tmp_path / "image.xyz"
    path.write_bytes(b"\x00")
    with pytest.raises(AgentInputError, match=r"Unsupported file type: \.xyz"):
        read_document(str(path))
