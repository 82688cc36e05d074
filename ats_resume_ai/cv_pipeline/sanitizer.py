"""Trim, filter and whitelist structured fields; build the found-field manifest."""

from typing import List, Tuple, Union

from cv_pipeline.errors import MissingName
from schemas.candidate import StructuredCandidate
from utils.logger import get_logger

logger = get_logger(__name__)

POLICY_FAIL = "fail"
POLICY_PLACEHOLDER = "placeholder"
NAME_PLACEHOLDER = "Unknown"


def sanitize_candidate(
    raw: Union[StructuredCandidate, dict],
    missing_name_policy: str = POLICY_FAIL,
) -> Tuple[StructuredCandidate, List[str]]:
    """
    Keep only recognized, non-empty fields and list them in the manifest.
    "fail" raises MissingName when both name parts are absent; "placeholder" fills each
    absent name part with "Unknown" and leaves it out of the manifest.

    Under "placeholder" the manifest is therefore a strict subset of the populated
    fields, and sanitizing the result again lists the filled-in name parts as found.
    Only the candidate (not the manifest) is stable across repeated calls there.
    """
    if isinstance(raw, StructuredCandidate):
        raw = raw.model_dump()
    candidate = StructuredCandidate.from_model_output(raw)
    found_fields = candidate.present_fields()

    if missing_name_policy == POLICY_PLACEHOLDER:
        missing = {
            name: NAME_PLACEHOLDER for name in ("first_name", "last_name") if not getattr(candidate, name)
        }
        if missing:
            logger.info("Name parts missing %s; substituting placeholder", sorted(missing))
            candidate = candidate.model_copy(update=missing)
    elif not candidate.first_name and not candidate.last_name:
        raise MissingName()
    return candidate, found_fields
