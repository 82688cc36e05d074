"""Résumé pipeline: text extraction (TXT/PDF/DOCX), validation, LLM structuring, sanitizing."""

from cv_pipeline.cv_extractor import CandidateStructurer
from cv_pipeline.cv_parser import ResumeParsingPipeline, check_upload, run_resume_pipeline
from cv_pipeline.retry import CancellationToken, RetryPolicy, run_with_retry
from cv_pipeline.sanitizer import sanitize_candidate
from cv_pipeline.text_extractor import extract_text, resolve_mime_type
from cv_pipeline.text_validator import validate_extracted_text

__all__ = [
    "CandidateStructurer",
    "ResumeParsingPipeline",
    "check_upload",
    "run_resume_pipeline",
    "CancellationToken",
    "RetryPolicy",
    "run_with_retry",
    "sanitize_candidate",
    "extract_text",
    "resolve_mime_type",
    "validate_extracted_text",
]
