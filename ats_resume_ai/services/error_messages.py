"""User-facing messages for parse failures. No internal detail is ever shown."""

from dataclasses import dataclass, field
from typing import Dict, List

from schemas.outcome import ErrorKind


@dataclass(frozen=True)
class UserMessage:
    title: str
    text: str
    checklist: List[str] = field(default_factory=list)


TROUBLESHOOTING_CHECKLIST: List[str] = [
    "Make sure the document has selectable text (you can highlight words in a PDF viewer).",
    "Scanned résumés are images; run them through OCR first.",
    "Try exporting the résumé again as PDF or DOCX.",
    "Try a different file.",
]

GENERIC_MESSAGE = UserMessage(
    title="Something went wrong",
    text="An unexpected error occurred while processing the résumé. Please try again.",
)

USER_MESSAGES: Dict[ErrorKind, UserMessage] = {
    ErrorKind.FILE_TOO_LARGE: UserMessage(
        title="File too large",
        text="The file is larger than 10MB. Please upload a smaller file.",
    ),
    ErrorKind.UNSUPPORTED_FORMAT: UserMessage(
        title="Unsupported file type",
        text="Only PDF, DOCX and TXT résumés are supported.",
    ),
    ErrorKind.INSUFFICIENT_TEXT: UserMessage(
        title="No readable text",
        text=(
            "This document looks like a scanned image. "
            "Please upload a résumé with selectable text."
        ),
        checklist=TROUBLESHOOTING_CHECKLIST,
    ),
    ErrorKind.EXTRACTION_FAILED: UserMessage(
        title="Could not read the file",
        text=(
            "The file could not be read. It may be corrupted, password-protected, "
            "or a scanned image without selectable text."
        ),
        checklist=TROUBLESHOOTING_CHECKLIST,
    ),
    ErrorKind.MODEL_UNAVAILABLE: UserMessage(
        title="Analysis service unavailable",
        text="The résumé analysis service is not responding. Please try again in a few minutes.",
    ),
    ErrorKind.MALFORMED_MODEL_OUTPUT: UserMessage(
        title="Analysis failed",
        text="The résumé could not be analysed. Please try again.",
    ),
    ErrorKind.NO_CANDIDATE_FOUND: UserMessage(
        title="No candidate information",
        text="No candidate information was found in this document.",
        checklist=TROUBLESHOOTING_CHECKLIST,
    ),
    ErrorKind.MISSING_NAME: UserMessage(
        title="Name not found",
        text="The candidate's name could not be found. Please check the résumé or add the candidate manually.",
    ),
    ErrorKind.CANCELLED: UserMessage(
        title="Cancelled",
        text="Parsing was cancelled.",
    ),
}


def user_message_for(kind: ErrorKind) -> UserMessage:
    return USER_MESSAGES.get(kind, GENERIC_MESSAGE)
