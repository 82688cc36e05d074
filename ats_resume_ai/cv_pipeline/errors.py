"""Exception hierarchy for the résumé parsing pipeline."""

from typing import Optional

from schemas.outcome import ErrorKind


class ResumeParseError(Exception):
    """Base pipeline error. `retryable` marks transient failures for the retry controller."""

    kind: ErrorKind = ErrorKind.UNEXPECTED
    http_status: int = 500
    default_message: str = "An unexpected error occurred during processing"

    def __init__(self, message: Optional[str] = None, retryable: bool = False) -> None:
        self.message = message or self.default_message
        self.retryable = retryable
        super().__init__(self.message)


class UnsupportedFormat(ResumeParseError):
    kind = ErrorKind.UNSUPPORTED_FORMAT
    http_status = 400
    default_message = "Unsupported file type"


class FileTooLarge(ResumeParseError):
    kind = ErrorKind.FILE_TOO_LARGE
    http_status = 400
    default_message = "File size exceeds 10MB limit"


class ExtractionFailed(ResumeParseError):
    kind = ErrorKind.EXTRACTION_FAILED
    http_status = 400
    default_message = "Could not read text from the document"


class InsufficientText(ResumeParseError):
    kind = ErrorKind.INSUFFICIENT_TEXT
    http_status = 400
    default_message = (
        "Document contains insufficient text. Please ensure the file is text-based "
        "(not a scanned image)."
    )


class ModelUnavailable(ResumeParseError):
    kind = ErrorKind.MODEL_UNAVAILABLE
    http_status = 500
    default_message = "Resume analysis service is unavailable"


class MalformedModelOutput(ResumeParseError):
    kind = ErrorKind.MALFORMED_MODEL_OUTPUT
    http_status = 500
    default_message = "Resume analysis returned an invalid response"


class NoCandidateFound(ResumeParseError):
    kind = ErrorKind.NO_CANDIDATE_FOUND
    http_status = 400
    default_message = "No candidate information found in the resume"


class MissingName(ResumeParseError):
    kind = ErrorKind.MISSING_NAME
    http_status = 400
    default_message = "Could not find the candidate's name in the resume"


class ParseCancelled(ResumeParseError):
    kind = ErrorKind.CANCELLED
    http_status = 499
    default_message = "Resume parsing was cancelled"
