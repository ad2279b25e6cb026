from __future__ import annotations

import re

_ARABIC_INDIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"
_EASTERN_ARABIC_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
_DIGIT_TABLE = str.maketrans(
    {**{d: str(i) for i, d in enumerate(_ARABIC_INDIC_DIGITS)}, **{d: str(i) for i, d in enumerate(_EASTERN_ARABIC_DIGITS)}}
)

_SPACE_RUN_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
# Whitespace plus the Latin and Arabic punctuation that authors sprinkle inconsistently.
_COMPARE_STRIP_RE = re.compile(r"[\s.,،:؛!?؟\"'`]")
_TATWEEL_RE = re.compile("\u0640")
_LEADING_INT_RE = re.compile(r"^[+-]?\d+")

_OPTION_IDS = {
    "A": "A",
    "أ": "A",
    "إ": "A",
    "ا": "A",
    "B": "B",
    "ب": "B",
    "C": "C",
    "ج": "C",
    "D": "D",
    "د": "D",
}


def normalize_digits(text: str) -> str:
    return text.translate(_DIGIT_TABLE)


def normalize_whitespace(text: str) -> str:
    text = normalize_digits(text or "")
    text = text.replace("\r", "").replace("\u00a0", " ")
    text = _SPACE_RUN_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def normalize_compare_text(text: str) -> str:
    """Folding used only to decide whether two answer texts are the same."""
    text = _COMPARE_STRIP_RE.sub("", text or "")
    text = _TATWEEL_RE.sub("", text)
    return text.lower().strip()


def normalize_option_id(raw: str) -> str | None:
    return _OPTION_IDS.get((raw or "").strip().upper())


def parse_leading_int(raw: str) -> int | None:
    m = _LEADING_INT_RE.match(normalize_digits((raw or "").strip()))
    if not m:
        return None
    return int(m.group(0))
