"""
Heuristic PDF text reader that scans raw bytes for text-show operators.

Approximate by nature: it cannot decode compressed content streams or embedded
font encodings, so text from such PDFs is dropped or garbled. Only used when
PDF_HEURISTIC_FALLBACK is enabled.
"""

import re
from typing import List

# PDF literal string: balanced on unescaped parens is enough for résumé text
_LITERAL = r"\((?:\\.|[^\\()])*\)"
_LITERAL_RE = re.compile(_LITERAL, re.DOTALL)
_TJ_RE = re.compile(_LITERAL + r"\s*Tj", re.DOTALL)
# Numbers must end at a non-digit so a digit run cannot be split into several elements
_TJ_ARRAY_RE = re.compile(
    r"\[((?:\s*(?:" + _LITERAL + r"|-?\d+(?:\.\d+)?(?![\d.])))*)\s*\]\s*TJ", re.DOTALL
)
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "(": "(", ")": ")", "\\": "\\"}
_OCTAL_RE = re.compile(r"\\([0-7]{1,3})")
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7e\n\r\t]")
_HAS_LETTER_RE = re.compile(r"[A-Za-z]")

MIN_STRUCTURED_CHARS = 100


def _unescape(literal: str) -> str:
    """Decode PDF literal-string escapes (\\n, \\(, octal)."""
    body = literal[1:-1]
    body = _OCTAL_RE.sub(lambda m: chr(int(m.group(1), 8) & 0xFF), body)
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def _text_show_strings(pdf: str) -> List[str]:
    """Strings passed to Tj and TJ, in stream order."""
    found = []
    for match in re.finditer(_TJ_RE.pattern + "|" + _TJ_ARRAY_RE.pattern, pdf, re.DOTALL):
        chunk = match.group(0)
        pieces = [_unescape(lit) for lit in _LITERAL_RE.findall(chunk)]
        text = "".join(pieces)
        if text.strip():
            found.append(text)
    return found


def _all_literals(pdf: str) -> List[str]:
    literals = (_unescape(lit) for lit in _LITERAL_RE.findall(pdf))
    return [lit for lit in literals if lit and _HAS_LETTER_RE.search(lit)]


def _ascii_sweep(data: bytes) -> str:
    """Last resort: printable ASCII runs that look like words."""
    chars = "".join(chr(b) if 32 <= b <= 126 else " " for b in data)
    words = [w for w in chars.split() if len(w) > 2 and _HAS_LETTER_RE.search(w)]
    return " ".join(words)


def extract_pdf_text_heuristic(data: bytes) -> str:
    """
    Best-effort text from raw PDF bytes.
    Picks the longest of: text-show operator strings, all literal strings, and
    (when both are short) a printable-ASCII sweep.
    """
    pdf = data.decode("latin-1")
    candidates = [" ".join(_text_show_strings(pdf)), " ".join(_all_literals(pdf))]
    best = max(candidates, key=len)
    if len(best) < MIN_STRUCTURED_CHARS:
        sweep = _ascii_sweep(data)
        if len(sweep) > len(best):
            best = sweep
    best = _NON_PRINTABLE_RE.sub(" ", best)
    return re.sub(r"\s+", " ", best).strip()
