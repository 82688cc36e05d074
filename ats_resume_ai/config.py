"""Configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


# API keys – never hardcode
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
MODEL_NAME: str = os.getenv("MODEL_NAME", "gpt-4o-mini")
# "json_schema" (strict structured output) or "json_object" (prompt-described JSON)
STRUCTURED_OUTPUT_MODE: str = os.getenv("STRUCTURED_OUTPUT_MODE", "json_schema")

# LLM call / retry settings
LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
LLM_MAX_ATTEMPTS: int = int(os.getenv("LLM_MAX_ATTEMPTS", "3"))
LLM_RETRY_BASE_DELAY: float = float(os.getenv("LLM_RETRY_BASE_DELAY", "1.0"))
MAX_INPUT_CHARS: int = 12000

# Upload limits
MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# Extraction gate: below either threshold the document is treated as scanned/image-only
MIN_TEXT_LENGTH: int = 50
MIN_LETTER_COUNT: int = 20

# Lossy byte-scan PDF reader; replaces pdfplumber when enabled
PDF_HEURISTIC_FALLBACK: bool = _env_bool("PDF_HEURISTIC_FALLBACK", False)

# "fail" rejects résumés without a name; "placeholder" substitutes "Unknown"
MISSING_NAME_POLICY: str = os.getenv("MISSING_NAME_POLICY", "fail")

MIME_TEXT = "text/plain"
MIME_PDF = "application/pdf"
MIME_DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MIME_DOC = "application/msword"

# Centralized file types (extensible: add extension + reader in text_extractor)
KNOWN_FILE_TYPES: dict = {
    MIME_TEXT: {"label": "TXT", "extensions": (".txt",)},
    MIME_PDF: {"label": "PDF", "extensions": (".pdf",)},
    MIME_DOCX: {"label": "DOCX", "extensions": (".docx",)},
    MIME_DOC: {"label": "DOC", "extensions": (".doc",)},
}

ACCEPTED_MIME_TYPES: List[str] = _env_list(
    "ACCEPTED_MIME_TYPES", ",".join([MIME_TEXT, MIME_PDF, MIME_DOCX])
)

# Candidate store (Supabase REST)
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
CANDIDATES_TABLE: str = os.getenv("CANDIDATES_TABLE", "candidates")
HTTP_TIMEOUT_SECONDS: float = 30.0

# HTTP API
CORS_ORIGINS: List[str] = _env_list("CORS_ORIGINS", "*")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class PipelineConfig:
    """Settings injected into the parsing pipeline; business logic never reads os.environ."""

    openai_api_key: str = ""
    model_name: str = "gpt-4o-mini"
    structured_output_mode: str = "json_schema"
    llm_timeout_seconds: float = 60.0
    max_attempts: int = 3
    retry_base_delay: float = 1.0
    max_input_chars: int = 12000
    max_upload_bytes: int = 10 * 1024 * 1024
    min_text_length: int = 50
    min_letter_count: int = 20
    pdf_heuristic_fallback: bool = False
    missing_name_policy: str = "fail"
    accepted_mime_types: FrozenSet[str] = field(
        default_factory=lambda: frozenset({MIME_TEXT, MIME_PDF, MIME_DOCX})
    )

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        return cls(
            openai_api_key=OPENAI_API_KEY,
            model_name=MODEL_NAME,
            structured_output_mode=STRUCTURED_OUTPUT_MODE,
            llm_timeout_seconds=LLM_TIMEOUT_SECONDS,
            max_attempts=LLM_MAX_ATTEMPTS,
            retry_base_delay=LLM_RETRY_BASE_DELAY,
            max_input_chars=MAX_INPUT_CHARS,
            max_upload_bytes=MAX_UPLOAD_BYTES,
            min_text_length=MIN_TEXT_LENGTH,
            min_letter_count=MIN_LETTER_COUNT,
            pdf_heuristic_fallback=PDF_HEURISTIC_FALLBACK,
            missing_name_policy=MISSING_NAME_POLICY,
            accepted_mime_types=frozenset(ACCEPTED_MIME_TYPES),
        )
