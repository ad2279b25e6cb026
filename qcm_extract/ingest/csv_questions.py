from __future__ import annotations

import logging
import re
from typing import Callable

from rapidfuzz import fuzz

from qcm_extract.ingest.csv_reader import CsvRecord, first_value, read_csv_records
from qcm_extract.ingest.text_normalize import normalize_compare_text, parse_leading_int
from qcm_extract.models.entities import Choice, CsvExtractionReport, Question, QuestionSet

logger = logging.getLogger(__name__)

PROMPT_COLUMNS = ("Question Text (نص السؤال)", "Question Text")
# The source sheets sometimes repeat the category code in the Type column.
RESERVED_CATEGORY_CODES = frozenset({"A", "BC", "C", "G"})
_OPTION_COLUMN_RE = re.compile(r"option\s+\d+", re.IGNORECASE)
_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_SIGN_PREFIXES = (
    re.compile(r"^\.?/"),
    re.compile(r"^public/assets/signs/", re.IGNORECASE),
    re.compile(r"^assets/signs/", re.IGNORECASE),
    re.compile(r"^signs/", re.IGNORECASE),
)


def option_id_by_index(index: int) -> str:
    return "ABCD"[index] if index < 4 else f"OPT{index + 1}"


def normalize_category(value: str) -> str | None:
    value = (value or "").strip().upper()
    return value or None


def normalize_question_type(value: str, category: str | None) -> str | None:
    value = (value or "").strip()
    if not value:
        return None
    lower = value.lower()
    formatted = lower[:1].upper() + lower[1:]
    upper = formatted.upper()
    if upper in RESERVED_CATEGORY_CODES:
        return None
    if category and upper == category.upper():
        return None
    return formatted


def normalize_sign_path(value: str) -> str | None:
    value = (value or "").strip()
    if not value:
        return None
    path = value.replace("\\", "/")
    if _URL_RE.match(path) or path.startswith("/"):
        return path
    for prefix in _SIGN_PREFIXES:
        path = prefix.sub("", path)
    return f"/assets/signs/{path}"


def _option_number(column: str) -> int:
    return int(re.sub(r"\D", "", column))


def extract_choices(record: CsvRecord) -> list[Choice]:
    columns = sorted((c for c in record if _OPTION_COLUMN_RE.fullmatch(c)), key=_option_number)
    choices = [Choice(id=option_id_by_index(i), text=(record.get(c) or "").strip()) for i, c in enumerate(columns)]
    return [c for c in choices if c.text]


def _by_index(record: CsvRecord, choices: list[Choice]) -> str | None:
    idx = parse_leading_int(record.get("Correct Answer Index", ""))
    if idx is not None and 1 <= idx <= len(choices):
        return choices[idx - 1].id
    return None


def _by_answer_text(record: CsvRecord, choices: list[Choice]) -> str | None:
    answer = (record.get("Correct Answer") or "").strip()
    if not answer:
        return None
    target = normalize_compare_text(answer)
    for c in choices:
        if normalize_compare_text(c.text) == target:
            return c.id
    if choices and logger.isEnabledFor(logging.DEBUG):
        # Near misses are only reported; equality of compare keys is the rule.
        score, best_id = max((fuzz.ratio(target, normalize_compare_text(c.text)), c.id) for c in choices)
        logger.debug("answer text matched no choice", extra={"answer": answer, "closest_choice": best_id, "score": score})
    return None


RESOLVERS: tuple[Callable[[CsvRecord, list[Choice]], str | None], ...] = (_by_index, _by_answer_text)


def resolve_correct_choice_id(record: CsvRecord, choices: list[Choice]) -> str | None:
    for resolver in RESOLVERS:
        found = resolver(record, choices)
        if found is not None:
            return found
    return None


def needs_review(prompt: str, choices: list[Choice], correct_choice_id: str | None, question_type: str | None, sign_path: str | None) -> bool:
    if len(prompt) < 6 or len(choices) < 2 or not correct_choice_id:
        return True
    return (question_type or "").lower() == "signs" and not sign_path


def map_record(record: CsvRecord, index: int) -> Question | None:
    prompt = first_value(record, *PROMPT_COLUMNS)
    if not prompt:
        return None
    choices = extract_choices(record)
    correct = resolve_correct_choice_id(record, choices)
    category = normalize_category(record.get("Cat", ""))
    question_type = normalize_question_type(record.get("Type", ""), category)
    sign_path = normalize_sign_path(record.get("Sign Path", ""))
    return Question(
        id=f"q-{index + 1:04d}",
        prompt=prompt,
        choices=choices,
        correct_choice_id=correct,
        source_page=0,
        source_number=parse_leading_int(record.get("ID", "")),
        needs_review=needs_review(prompt, choices, correct, question_type, sign_path),
        category=category,
        question_type=question_type,
        sign_path=sign_path,
    )


def build_csv_report(total_rows: int, questions: list[Question]) -> CsvExtractionReport:
    signs = [q for q in questions if q.is_signs]
    return CsvExtractionReport(
        total_rows=total_rows,
        questions_extracted=len(questions),
        needs_review_count=sum(1 for q in questions if q.needs_review),
        missing_answer_key_count=sum(1 for q in questions if not q.correct_choice_id),
        signs_with_image_count=sum(1 for q in signs if q.sign_path),
        signs_missing_image_count=sum(1 for q in signs if not q.sign_path),
        rows_skipped=total_rows - len(questions),
    )


def map_csv_to_question_set(csv_text: str) -> tuple[QuestionSet, CsvExtractionReport]:
    records = read_csv_records(csv_text)
    questions: list[Question] = []
    for i, record in enumerate(records):
        q = map_record(record, i)
        if q is None:
            logger.debug("row dropped: empty prompt", extra={"row": i + 2})
            continue
        questions.append(q)

    report = build_csv_report(len(records), questions)
    logger.info(
        "csv questions mapped",
        extra={
            "rows": report.total_rows,
            "extracted": report.questions_extracted,
            "needs_review": report.needs_review_count,
            "skipped": report.rows_skipped,
        },
    )
    return QuestionSet(questions=questions), report
