"""Tests for the extracted-text gate."""

import pytest

from cv_pipeline.errors import InsufficientText
from cv_pipeline.text_validator import validate_extracted_text

from fakes import RESUME_TEXT, make_config


def test_accepts_real_resume_text():
    assert validate_extracted_text(RESUME_TEXT, make_config()) == RESUME_TEXT


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   \n  ",
        "Jane Doe, jane@x.com",  # too short
        "1234567890 " * 10 + "abc",  # long enough but too few letters
    ],
)
def test_rejects_thin_text(text):
    with pytest.raises(InsufficientText) as exc_info:
        validate_extracted_text(text, make_config())
    assert "scanned image" in exc_info.value.message
    assert "selectable text" in exc_info.value.message


def test_thresholds_come_from_config():
    config = make_config(min_text_length=5, min_letter_count=3)
    assert validate_extracted_text("Jane Doe", config) == "Jane Doe"


def test_boundary_is_inclusive():
    text = "a" * 20 + " " * 10 + "b" * 20
    assert len(text) == 50
    assert validate_extracted_text(text, make_config()) == text
