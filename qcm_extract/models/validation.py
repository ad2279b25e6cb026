from __future__ import annotations

from typing import Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _optional_str(value: Any) -> bool:
    return value is None or isinstance(value, str)


def is_choice(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("id"), str) and isinstance(value.get("textAr"), str)


def is_question(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    choices = value.get("choices")
    return (
        isinstance(value.get("id"), str)
        and isinstance(value.get("promptAr"), str)
        and isinstance(choices, list)
        and all(is_choice(c) for c in choices)
        and "correctChoiceId" in value
        and _optional_str(value["correctChoiceId"])
        and _is_int(value.get("sourcePage"))
        and "sourceNumber" in value
        and (value["sourceNumber"] is None or _is_int(value["sourceNumber"]))
        and isinstance(value.get("needsReview"), bool)
        and _optional_str(value.get("category"))
        and _optional_str(value.get("questionType"))
        and _optional_str(value.get("signPath"))
    )


def is_question_set(value: Any) -> bool:
    """Shape check for a question-set document as the quiz app imports it."""
    if not isinstance(value, dict):
        return False
    questions = value.get("questions")
    return (
        isinstance(value.get("id"), str)
        and isinstance(value.get("titleAr"), str)
        and value.get("language") == "ar"
        and value.get("direction") == "rtl"
        and isinstance(questions, list)
        and all(is_question(q) for q in questions)
        and isinstance(value.get("importedAt"), str)
    )
