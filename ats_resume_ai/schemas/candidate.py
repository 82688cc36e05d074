"""Structured candidate schema extracted from an uploaded résumé."""

import math
from typing import Any, List, Optional

from pydantic import BaseModel, Field

# Wire/manifest order; the manifest always lists fields in this order.
CANDIDATE_FIELDS: List[str] = [
    "first_name",
    "last_name",
    "email",
    "phone",
    "linkedin_url",
    "skills",
    "current_role",
    "education",
    "location",
    "notes",
    "experience_years",
]

# Model-side property name -> candidate field name
MODEL_FIELD_ALIASES: dict = {"summary": "notes"}


def _clean_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _clean_skills(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    skills = [s.strip() for s in value if isinstance(s, str) and s.strip()]
    return skills or None


def _clean_years(value: Any) -> Optional[float]:
    # bool is an int subclass; "true years of experience" is not a number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        years = float(value)
    except OverflowError:  # int beyond float range
        return None
    if not math.isfinite(years) or years < 0:
        return None
    return years


class StructuredCandidate(BaseModel):
    """Sparse candidate record; every field is optional."""

    first_name: Optional[str] = Field(default=None, description="Given name")
    last_name: Optional[str] = Field(default=None, description="Family name")
    email: Optional[str] = Field(default=None, description="Email address")
    phone: Optional[str] = Field(default=None, description="Phone number, any format")
    linkedin_url: Optional[str] = Field(default=None, description="LinkedIn profile URL")
    skills: Optional[List[str]] = Field(default=None, description="Technical skills, in résumé order")
    current_role: Optional[str] = Field(default=None, description="Most recent job title")
    education: Optional[str] = Field(default=None, description="Degree / school details")
    location: Optional[str] = Field(default=None, description="Current location")
    notes: Optional[str] = Field(default=None, description="Short professional summary")
    experience_years: Optional[float] = Field(default=None, ge=0, description="Years of experience")

    @classmethod
    def from_model_output(cls, data: Any) -> "StructuredCandidate":
        """
        Build a candidate from a raw LLM object, dropping invalid values field by field
        instead of rejecting the whole record.
        """
        if not isinstance(data, dict):
            return cls()
        renamed = {MODEL_FIELD_ALIASES.get(k, k): v for k, v in data.items()}
        values = {}
        for name in CANDIDATE_FIELDS:
            raw = renamed.get(name)
            if name == "skills":
                values[name] = _clean_skills(raw)
            elif name == "experience_years":
                values[name] = _clean_years(raw)
            else:
                values[name] = _clean_str(raw)
        return cls(**values)

    def present_fields(self) -> List[str]:
        """Field names that are populated (non-empty), in wire order."""
        found = []
        for name in CANDIDATE_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, (str, list)) and not value:
                continue
            found.append(name)
        return found

    def to_wire(self) -> dict:
        """Serialize for the response envelope, omitting absent fields."""
        return self.model_dump(exclude_none=True)
