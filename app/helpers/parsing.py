import io
import re
from pathlib import Path
from typing import Optional
from pdfminer.high_level import extract_text as pdf_extract
from docx import Document

from app.utils.exceptions import DocumentConversionError, UnsupportedDocumentError
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_TYPE = "text/plain"

_EXTENSION_TYPES = {
    ".pdf": PDF_TYPE,
    ".docx": DOCX_TYPE,
    ".txt": TEXT_TYPE,
}


def read_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


def read_docx(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join([p.text for p in doc.paragraphs])


def read_pdf(data: bytes) -> str:
    return pdf_extract(io.BytesIO(data))


def clean_text(x: str) -> str:
    # Line breaks are kept: the name heuristic reads the first lines.
    x = x.replace("\r\n", "\n").replace("\r", "\n")
    return "\n".join(line.rstrip() for line in x.split("\n")).strip()


def resolve_document_type(filename: Optional[str], content_type: Optional[str]) -> Optional[str]:
    base_type = (content_type or "").split(";")[0].strip().lower()
    if base_type in (PDF_TYPE, DOCX_TYPE, TEXT_TYPE):
        return base_type
    ext = Path(filename or "").suffix.lower()
    return _EXTENSION_TYPES.get(ext)


def extract_text_from_upload(filename: Optional[str], content_type: Optional[str], data: bytes) -> str:
    """Convert an uploaded PDF, DOCX or text file to plain text."""
    doc_type = resolve_document_type(filename, content_type)
    if doc_type is None:
        raise UnsupportedDocumentError(filename=filename, content_type=content_type)

    readers = {
        PDF_TYPE: read_pdf,
        DOCX_TYPE: read_docx,
        TEXT_TYPE: read_txt,
    }

    try:
        text = readers[doc_type](data)
    except Exception as e:
        label = "PDF" if doc_type == PDF_TYPE else "DOCX" if doc_type == DOCX_TYPE else "text"
        logger.error(f"{label} parsing error for {filename}: {e}")
        raise DocumentConversionError(
            f"Failed to parse {label} file",
            filename=filename,
            content_type=content_type,
            cause=e
        ) from e

    text = clean_text(text or "")
    logger.debug(f"Converted {filename} ({doc_type}) to {len(text)} characters of text")
    return text
