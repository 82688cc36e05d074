"""Résumé parsing pipeline: size/type gate, extract, validate, structure (with retry), sanitize."""

import asyncio
from typing import Optional

from config import PipelineConfig
from cv_pipeline.cv_extractor import CandidateStructurer
from cv_pipeline.errors import FileTooLarge, ResumeParseError
from cv_pipeline.retry import CancellationToken, RetryPolicy, SleepFn, run_with_retry
from cv_pipeline.sanitizer import sanitize_candidate
from cv_pipeline.text_extractor import check_supported, extract_text
from cv_pipeline.text_validator import validate_extracted_text
from schemas.candidate import StructuredCandidate
from schemas.document import UploadedDocument
from schemas.outcome import ErrorKind, ParseFailure, ParseOutcome, ParseSuccess
from utils.logger import get_logger

logger = get_logger(__name__)


def check_upload(document: UploadedDocument, config: PipelineConfig) -> str:
    """Size and type checks that run before any extraction. Returns the effective MIME type."""
    if document.size > config.max_upload_bytes:
        limit_mb = config.max_upload_bytes // (1024 * 1024)
        raise FileTooLarge(f"File size exceeds {limit_mb}MB limit")
    return check_supported(document, config)


class ResumeParsingPipeline:
    """One sequential extract → validate → structure → sanitize chain per call; no shared state."""

    def __init__(
        self,
        config: PipelineConfig,
        structurer: Optional[CandidateStructurer] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.config = config
        self.structurer = structurer or CandidateStructurer(config)
        self.retry_policy = RetryPolicy.from_config(config)
        self._sleep = sleep

    async def _extract_and_structure(self, document: UploadedDocument) -> StructuredCandidate:
        # Readers are blocking and CPU-bound; keep them off the event loop
        text = await asyncio.to_thread(extract_text, document, self.config)
        return await self.structurer.structure(validate_extracted_text(text, self.config))

    async def parse(
        self,
        document: UploadedDocument,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ParseOutcome:
        """Run the full pipeline; every failure is returned as ParseFailure."""
        logger.info("Processing upload: %s, size: %s bytes", document.filename, document.size)
        try:
            check_upload(document, self.config)
            raw = await run_with_retry(
                lambda: self._extract_and_structure(document),
                self.retry_policy,
                sleep=self._sleep,
                cancel_token=cancel_token,
            )
            candidate, found_fields = sanitize_candidate(raw, self.config.missing_name_policy)
        except ResumeParseError as e:
            logger.info("Resume parsing failed: %s", e.kind.value)
            return ParseFailure(reason=e.kind, message=e.message)
        except Exception:
            logger.exception("Unexpected error while parsing %s", document.filename)
            return ParseFailure(
                reason=ErrorKind.UNEXPECTED,
                message="An unexpected error occurred during processing",
            )

        logger.info("Successfully parsed candidate with %s fields: %s", len(found_fields), found_fields)
        return ParseSuccess(
            candidate=candidate,
            found_fields=found_fields,
            message=f"Successfully extracted {len(found_fields)} fields from resume",
        )


def run_resume_pipeline(
    file_bytes: bytes,
    filename: str,
    mime_type: str,
    config: Optional[PipelineConfig] = None,
) -> ParseOutcome:
    """
    Run the pipeline from a synchronous context (e.g. Streamlit).
    Uses a private event loop per call.
    """
    pipeline = ResumeParsingPipeline(config or PipelineConfig.from_env())
    document = UploadedDocument(content=file_bytes, filename=filename, mime_type=mime_type)
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(pipeline.parse(document))
    finally:
        loop.close()
