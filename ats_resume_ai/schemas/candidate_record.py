"""Candidate-creation record handed to the candidate store on commit."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from schemas.candidate import StructuredCandidate

CandidateStatus = Literal["sourced", "contacted", "interview", "offer", "hired", "rejected"]


class CandidateRecord(BaseModel):
    """Row shape of the candidates table (user-owned columns are set by the store)."""

    first_name: str = Field(..., description="Given name")
    last_name: str = Field(..., description="Family name")
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    resume_url: Optional[str] = None
    skills: Optional[List[str]] = None
    notes: Optional[str] = None
    status: CandidateStatus = "sourced"

    @classmethod
    def from_candidate(cls, candidate: StructuredCandidate) -> "CandidateRecord":
        """Map a sanitized candidate onto the table columns; extra parsed fields go unused."""
        return cls(
            first_name=candidate.first_name or "",
            last_name=candidate.last_name or "",
            email=candidate.email,
            phone=candidate.phone,
            linkedin_url=candidate.linkedin_url,
            skills=candidate.skills,
            notes=candidate.notes,
        )
