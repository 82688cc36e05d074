"""Schema exports."""

from .candidate import CANDIDATE_FIELDS, StructuredCandidate
from .candidate_record import CandidateRecord
from .document import UploadedDocument
from .outcome import ErrorKind, ParseFailure, ParseOutcome, ParseResponse, ParseSuccess

__all__ = [
    "CANDIDATE_FIELDS",
    "StructuredCandidate",
    "CandidateRecord",
    "UploadedDocument",
    "ErrorKind",
    "ParseSuccess",
    "ParseFailure",
    "ParseOutcome",
    "ParseResponse",
]
