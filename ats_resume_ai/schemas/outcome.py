"""Parse outcomes and the JSON response envelope."""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from schemas.candidate import StructuredCandidate


class ErrorKind(str, Enum):
    """Failure taxonomy of the parsing pipeline."""

    UNSUPPORTED_FORMAT = "unsupported_format"
    FILE_TOO_LARGE = "file_too_large"
    EXTRACTION_FAILED = "extraction_failed"
    INSUFFICIENT_TEXT = "insufficient_text"
    MODEL_UNAVAILABLE = "model_unavailable"
    MALFORMED_MODEL_OUTPUT = "malformed_model_output"
    NO_CANDIDATE_FOUND = "no_candidate_found"
    MISSING_NAME = "missing_name"
    CANCELLED = "cancelled"
    UNEXPECTED = "unexpected"


class ParseSuccess(BaseModel):
    candidate: StructuredCandidate
    found_fields: List[str] = Field(default_factory=list)
    message: str = ""

    @property
    def success(self) -> bool:
        return True


class ParseFailure(BaseModel):
    reason: ErrorKind
    message: str = ""

    @property
    def success(self) -> bool:
        return False


ParseOutcome = Union[ParseSuccess, ParseFailure]


class ParseResponse(BaseModel):
    """Wire envelope returned by the HTTP boundary."""

    success: bool
    candidate: Optional[dict] = None
    found_fields: Optional[List[str]] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: ParseOutcome) -> "ParseResponse":
        if isinstance(outcome, ParseSuccess):
            return cls(
                success=True,
                candidate=outcome.candidate.to_wire(),
                found_fields=list(outcome.found_fields),
                message=outcome.message,
            )
        return cls(success=False, error=outcome.message)

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True)
