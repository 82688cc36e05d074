"""Tests for text extraction and file-type dispatch."""

import pytest

from config import MIME_DOC, MIME_DOCX, MIME_PDF, MIME_TEXT
from cv_pipeline import text_extractor
from cv_pipeline.errors import ExtractionFailed, UnsupportedFormat
from cv_pipeline.text_extractor import extract_text, resolve_mime_type
from schemas.document import UploadedDocument

from fakes import RESUME_TEXT, make_config, make_docx, make_pdf


def _doc(content: bytes, mime: str, filename: str) -> UploadedDocument:
    return UploadedDocument(content=content, mime_type=mime, filename=filename)


def test_plain_text_utf8_with_bom():
    doc = _doc(b"\xef\xbb\xbfJane Doe\njane@x.com", MIME_TEXT, "cv.txt")
    assert extract_text(doc, make_config()) == "Jane Doe\njane@x.com"


def test_plain_text_falls_back_to_cp1252():
    doc = _doc(b"Ren\xe9 Dupont", MIME_TEXT, "cv.txt")
    assert extract_text(doc, make_config()) == "René Dupont"


def test_text_is_normalized():
    raw = "Jane Doe\x07\n\n\n\nSkills:   Go,\tRust  "
    doc = _doc(raw.encode("utf-8"), MIME_TEXT, "cv.txt")
    assert extract_text(doc, make_config()) == "Jane Doe\n\nSkills: Go, Rust"


def test_docx_paragraphs_and_tables():
    content = make_docx(["Jane Doe", "", "jane@x.com"], table_rows=[["Skills", "Go, Rust"]])
    doc = _doc(content, MIME_DOCX, "cv.docx")
    text = extract_text(doc, make_config())
    assert text.splitlines() == ["Jane Doe", "jane@x.com", "Skills | Go, Rust"]


def test_corrupt_docx_raises_extraction_failed():
    doc = _doc(b"this is not a zip archive", MIME_DOCX, "cv.docx")
    with pytest.raises(ExtractionFailed):
        extract_text(doc, make_config())


def test_pdf_text_layer():
    content = make_pdf(RESUME_TEXT.splitlines())
    text = extract_text(_doc(content, MIME_PDF, "cv.pdf"), make_config())
    assert "Jane Doe" in text
    assert "jane@x.com" in text
    assert "Skills: Go, Rust" in text


def test_pdf_without_text_layer_yields_empty_text():
    content = make_pdf([])
    assert extract_text(_doc(content, MIME_PDF, "scan.pdf"), make_config()) == ""


def test_pdf_reader_error_raises_extraction_failed(monkeypatch):
    def broken_open(*args, **kwargs):
        raise ValueError("encrypted")

    monkeypatch.setattr(text_extractor.pdfplumber, "open", broken_open)
    doc = _doc(b"%PDF-1.4 ...", MIME_PDF, "cv.pdf")
    with pytest.raises(ExtractionFailed) as exc_info:
        extract_text(doc, make_config())
    assert "password-protected" in exc_info.value.message


def test_heuristic_fallback_replaces_pdfplumber(monkeypatch):
    def unexpected_open(*args, **kwargs):
        raise AssertionError("pdfplumber must not be used when the fallback is enabled")

    monkeypatch.setattr(text_extractor.pdfplumber, "open", unexpected_open)
    content = make_pdf(["Jane Doe", "Backend engineer"])
    text = extract_text(_doc(content, MIME_PDF, "cv.pdf"), make_config(pdf_heuristic_fallback=True))
    assert "Jane Doe" in text
    assert "Backend engineer" in text


def test_disguised_executable_rejected_before_reading(monkeypatch):
    def unexpected_reader(content, config):
        raise AssertionError("reader must not run for rejected files")

    monkeypatch.setitem(text_extractor.EXTRACTORS, MIME_PDF, unexpected_reader)
    doc = _doc(b"MZ\x90\x00", MIME_PDF, "resume.exe")
    with pytest.raises(UnsupportedFormat) as exc_info:
        extract_text(doc, make_config())
    assert "PDF" in exc_info.value.message


def test_unknown_mime_type_rejected():
    doc = _doc(b"\x89PNG\r\n", "image/png", "cv.png")
    with pytest.raises(UnsupportedFormat):
        extract_text(doc, make_config())


def test_legacy_doc_not_accepted_by_default():
    doc = _doc(b"\xd0\xcf\x11\xe0", MIME_DOC, "cv.doc")
    with pytest.raises(UnsupportedFormat):
        extract_text(doc, make_config())


def test_mislabelled_docx_read_when_doc_accepted():
    config = make_config(accepted_mime_types=frozenset({MIME_DOC, MIME_DOCX}))
    doc = _doc(make_docx(["Jane Doe"]), MIME_DOC, "cv.doc")
    assert extract_text(doc, config) == "Jane Doe"


@pytest.mark.parametrize(
    "mime, filename, expected",
    [
        ("application/octet-stream", "cv.pdf", MIME_PDF),
        ("", "CV.DOCX", MIME_DOCX),
        ("text/plain; charset=utf-8", "cv.txt", MIME_TEXT),
        (MIME_PDF, "", MIME_PDF),
        (MIME_PDF, "cv.txt", ""),
        ("application/octet-stream", "cv", ""),
    ],
)
def test_resolve_mime_type(mime, filename, expected):
    assert resolve_mime_type(_doc(b"x", mime, filename)) == expected
