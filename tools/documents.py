"""Reading document inputs (PDF files, text files or inline text)."""
from pathlib import Path
from typing import Optional

from pydantic import BaseModel
from pypdf import PdfReader

from core.exceptions import AgentInputError
from tools.text_input import TEXT_EXTENSIONS, looks_like_file, read_text_input


class DocumentText(BaseModel):
    text: str
    file_name: Optional[str] = None
    page_count: Optional[int] = None
    is_file: bool = False


def read_pdf(path: Path) -> DocumentText:
    reader = PdfReader(str(path))
    pages = [page.extract_text() or "" for page in reader.pages]
    return DocumentText(
        text="\n\n".join(page.strip() for page in pages if page.strip()),
        file_name=path.name,
        page_count=len(reader.pages),
        is_file=True,
    )


def read_document(value: str, allow_pdf: bool = True) -> DocumentText:
    """Load `value` as a document: a PDF or text file when it exists, inline text otherwise."""
    if not looks_like_file(value):
        return DocumentText(text=value)

    path = Path(value)
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        if not allow_pdf:
            raise AgentInputError("PDF files are not supported here; provide the text content instead")
        return read_pdf(path)
    if suffix in TEXT_EXTENSIONS or not suffix:
        text, _ = read_text_input(value)
        return DocumentText(text=text, file_name=path.name, is_file=True)
    raise AgentInputError(f"Unsupported file type: {suffix}")
