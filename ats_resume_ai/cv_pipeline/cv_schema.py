"""Prompt and JSON schema sent to the LLM for candidate extraction."""

from typing import Tuple

SCHEMA_NAME = "candidate_extraction"

# (model property, JSON type, description). "summary" is stored as the candidate's notes.
MODEL_CANDIDATE_PROPERTIES: Tuple[Tuple[str, str, str], ...] = (
    ("first_name", "string", "First name if found"),
    ("last_name", "string", "Last name if found"),
    ("email", "string", "Email address if found"),
    ("phone", "string", "Phone number if found"),
    ("linkedin_url", "string", "LinkedIn URL if found"),
    ("skills", "array", "Technical skills if found"),
    ("experience_years", "number", "Years of experience if determinable"),
    ("current_role", "string", "Current job title if found"),
    ("education", "string", "Education details if found"),
    ("location", "string", "Location if found"),
    ("summary", "string", "Professional summary if creatable from content"),
)


def _nullable(json_type: str, description: str) -> dict:
    if json_type == "array":
        return {"type": ["array", "null"], "items": {"type": "string"}, "description": description}
    return {"type": [json_type, "null"], "description": description}


def build_candidate_schema() -> dict:
    """
    JSON schema for strict structured output. Strict mode requires every property to be
    required, so "absent" is expressed as null.
    """
    candidate_props = {name: _nullable(t, desc) for name, t, desc in MODEL_CANDIDATE_PROPERTIES}
    return {
        "type": "object",
        "properties": {
            "success": {"type": "boolean", "description": "Whether candidate information was found"},
            "candidate": {
                "type": "object",
                "properties": candidate_props,
                "required": [name for name, _, _ in MODEL_CANDIDATE_PROPERTIES],
                "additionalProperties": False,
            },
            "error": {"type": ["string", "null"], "description": "Error message if parsing failed"},
        },
        "required": ["success", "candidate", "error"],
        "additionalProperties": False,
    }


CANDIDATE_EXTRACTION_SYSTEM_PROMPT = """You are a resume parser that extracts candidate information from resume text.

RULES:
- Extract ONLY information that is clearly present in the text
- If a field is not found or unclear, set it to null; never guess or fabricate values
- Return success=true if you find at least some candidate information (name, email, or clear professional content)
- Return success=false only if the text contains no candidate information at all

FIELD GUIDELINES:
- first_name/last_name: Extract if name is clearly visible
- email: Extract if valid email format found
- phone: Extract if phone number found (any format)
- linkedin_url: Extract if LinkedIn profile URL found
- skills: Extract technical skills, programming languages, tools mentioned
- experience_years: Calculate from work history dates if available
- current_role: Extract most recent job title if found
- education: Extract degree/school information if present
- location: Extract current location if mentioned
- summary: Create brief 1-2 sentence summary if sufficient information available"""

JSON_OBJECT_INSTRUCTIONS = """
Return only valid JSON matching this schema (no markdown, no code block):
{
  "success": true or false,
  "candidate": {
    "first_name": "string or null",
    "last_name": "string or null",
    "email": "string or null",
    "phone": "string or null",
    "linkedin_url": "string or null",
    "skills": ["string"],
    "experience_years": number or null,
    "current_role": "string or null",
    "education": "string or null",
    "location": "string or null",
    "summary": "string or null"
  },
  "error": "string or null"
}"""


def system_prompt(structured_output_mode: str) -> str:
    """Prompt-only JSON mode also needs the schema spelled out in the instructions."""
    if structured_output_mode == "json_object":
        return CANDIDATE_EXTRACTION_SYSTEM_PROMPT + "\n" + JSON_OBJECT_INSTRUCTIONS
    return CANDIDATE_EXTRACTION_SYSTEM_PROMPT


def response_format(structured_output_mode: str) -> dict:
    if structured_output_mode == "json_object":
        return {"type": "json_object"}
    return {
        "type": "json_schema",
        "json_schema": {"name": SCHEMA_NAME, "schema": build_candidate_schema(), "strict": True},
    }
