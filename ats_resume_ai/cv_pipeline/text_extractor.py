"""Extract raw text from uploaded résumé files (TXT, PDF, DOCX). In-memory only."""

from io import BytesIO
from typing import Callable, Dict

import pdfplumber
from docx import Document

from config import KNOWN_FILE_TYPES, MIME_DOC, MIME_DOCX, MIME_PDF, MIME_TEXT, PipelineConfig
from cv_pipeline.errors import ExtractionFailed, UnsupportedFormat
from cv_pipeline.pdf_fallback import extract_pdf_text_heuristic
from schemas.document import UploadedDocument
from utils.helpers import collapse_whitespace, normalize_unicode, strip_control_chars
from utils.logger import get_logger

logger = get_logger(__name__)

GENERIC_MIME_TYPES = ("", "application/octet-stream", "binary/octet-stream")

_EXTENSION_TO_MIME: Dict[str, str] = {
    ext: mime for mime, info in KNOWN_FILE_TYPES.items() for ext in info["extensions"]
}


def _clean_text(text: str) -> str:
    """Normalize unicode, drop control characters, collapse whitespace."""
    return collapse_whitespace(strip_control_chars(normalize_unicode(text)))


def _extract_plain_text(content: bytes, config: PipelineConfig) -> str:
    """Decode plain text; UTF-8 (with or without BOM) first, then legacy code pages."""
    for encoding in ("utf-8-sig", "cp1252"):
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode("latin-1")


def _extract_pdf(content: bytes, config: PipelineConfig) -> str:
    """Extract text from PDF: pdfplumber page walk, or the byte-scan reader when flagged."""
    if config.pdf_heuristic_fallback:
        logger.warning("Using heuristic PDF reader; text may be incomplete or garbled")
        return extract_pdf_text_heuristic(content)
    try:
        with pdfplumber.open(BytesIO(content)) as pdf:
            pages = []
            for page in pdf.pages:
                ptext = page.extract_text()
                if ptext and ptext.strip():
                    pages.append(ptext)
            return "\n\n".join(pages)
    except Exception as e:
        logger.warning("PDF extraction failed: %s", e)
        raise ExtractionFailed(
            "PDF processing failed. The file may be corrupted, encrypted or password-protected."
        ) from e


def _extract_docx(content: bytes, config: PipelineConfig) -> str:
    """Extract text from DOCX using python-docx (paragraphs, then table cells)."""
    try:
        doc = Document(BytesIO(content))
    except Exception as e:
        logger.warning("DOCX extraction failed: %s", e)
        raise ExtractionFailed(
            "Word document could not be opened. Legacy .doc files must be saved as .docx."
        ) from e
    parts = [p.text for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [c.text.strip() for c in row.cells if c.text.strip()]
            if cells:
                parts.append(" | ".join(dict.fromkeys(cells)))
    return "\n".join(parts)


# MIME type -> reader; extend here and in config.KNOWN_FILE_TYPES together
EXTRACTORS: Dict[str, Callable[[bytes, PipelineConfig], str]] = {
    MIME_TEXT: _extract_plain_text,
    MIME_PDF: _extract_pdf,
    MIME_DOCX: _extract_docx,
    MIME_DOC: _extract_docx,  # only mis-labelled DOCX succeeds; binary .doc fails cleanly
}


def resolve_mime_type(document: UploadedDocument) -> str:
    """
    Decide the effective MIME type from the declared type and file name.
    Generic declared types fall back to the extension; a known declared type must not
    contradict the extension (e.g. "resume.exe" declared as application/pdf).
    Returns "" when the type cannot be resolved.
    """
    declared = (document.mime_type or "").split(";")[0].strip().lower()
    ext = document.extension
    if declared in GENERIC_MIME_TYPES:
        return _EXTENSION_TO_MIME.get(ext, "")
    info = KNOWN_FILE_TYPES.get(declared)
    if info is None:
        return ""
    if ext and ext not in info["extensions"]:
        return ""
    return declared


def check_supported(document: UploadedDocument, config: PipelineConfig) -> str:
    """Return the effective MIME type or raise UnsupportedFormat."""
    mime = resolve_mime_type(document)
    if not mime or mime not in config.accepted_mime_types or mime not in EXTRACTORS:
        labels = ", ".join(
            KNOWN_FILE_TYPES[m]["label"] for m in KNOWN_FILE_TYPES if m in config.accepted_mime_types
        )
        logger.info("Rejected file type: declared=%s ext=%s", document.mime_type, document.extension)
        raise UnsupportedFormat(f"Unsupported file type. Supported formats: {labels}")
    return mime


def extract_text(document: UploadedDocument, config: PipelineConfig) -> str:
    """
    Extract and clean text from an uploaded résumé.
    Raises UnsupportedFormat for types outside the accepted set and ExtractionFailed
    when the reader fails. Empty output is returned as-is for the validator to reject.
    """
    mime = check_supported(document, config)
    raw = EXTRACTORS[mime](document.content, config)
    text = _clean_text(raw or "")
    logger.info("Extracted %s characters from %s document", len(text), KNOWN_FILE_TYPES[mime]["label"])
    return text
