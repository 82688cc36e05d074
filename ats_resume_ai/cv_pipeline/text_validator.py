"""Reject extracted text that is too thin to be a real text layer."""

from config import PipelineConfig
from cv_pipeline.errors import InsufficientText
from utils.helpers import count_letters
from utils.logger import get_logger

logger = get_logger(__name__)

SCANNED_DOCUMENT_MESSAGE = (
    "The document contains insufficient text. It looks like a scanned image; "
    "please upload a file with selectable text."
)


def validate_extracted_text(text: str, config: PipelineConfig) -> str:
    """Return text unchanged if it passes the length and letter-count gate."""
    length = len((text or "").strip())
    letters = count_letters(text)
    if length < config.min_text_length or letters < config.min_letter_count:
        logger.info("Extracted text rejected: length=%s letters=%s", length, letters)
        raise InsufficientText(SCANNED_DOCUMENT_MESSAGE)
    return text
