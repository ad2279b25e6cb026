from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from qcm_extract.core.config import settings
from qcm_extract.ingest.csv_reader import CsvRecord, read_csv_records
from qcm_extract.ingest.text_normalize import normalize_compare_text, parse_leading_int
from qcm_extract.models.entities import (
    FlashcardsReport,
    SignFlashcard,
    SignFlashcardSet,
    SignQuizQuestion,
    SignQuizReport,
    SignQuizSet,
)

logger = logging.getLogger(__name__)

SUPPORTED_SIGN_EXTENSIONS = (".png", ".svg", ".jpg", ".jpeg", ".webp")
PUBLIC_IMAGE_PREFIX = "/assets/sign_images_by_id"
QUIZ_OPTION_COLUMNS = ("Option 1", "Option 2", "Option 3")
QUIZ_INDEX_COLUMNS = ("Index of Correct Answer", "Correct Answer Index")

ExistsAt = Callable[[Path], bool]


def _exists(path: Path) -> bool:
    return path.is_file()


def format_source_id(value: str) -> int | None:
    parsed = parse_leading_int(value)
    if parsed is None or parsed <= 0:
        return None
    return parsed


def build_placeholder_image_path(source_id: int) -> str:
    return f"{PUBLIC_IMAGE_PREFIX}/{source_id:03d}.svg"


def resolve_image_path_for_source_id(
    source_id: int,
    exists_at: ExistsAt | None = None,
    images_dir: str | Path | None = None,
) -> str | None:
    exists_at = exists_at or _exists
    base = Path(images_dir if images_dir is not None else settings.SIGN_IMAGES_DIR)
    for ext in SUPPORTED_SIGN_EXTENSIONS:
        name = f"{source_id:03d}{ext}"
        if exists_at(base / name):
            return f"{PUBLIC_IMAGE_PREFIX}/{name}"
    return None


def resolve_correct_option_index(record: CsvRecord, options: list[str]) -> int | None:
    for column in QUIZ_INDEX_COLUMNS:
        idx = parse_leading_int(record.get(column) or "")
        if idx is not None and 1 <= idx <= len(options):
            return idx - 1

    answer = (record.get("Correct Answer") or "").strip()
    if not answer:
        return None
    target = normalize_compare_text(answer)
    for i, option in enumerate(options):
        if normalize_compare_text(option) == target:
            return i
    return None


def map_flashcards_csv(
    csv_text: str,
    exists_at: ExistsAt | None = None,
    images_dir: str | Path | None = None,
) -> tuple[SignFlashcardSet, FlashcardsReport]:
    records = read_csv_records(csv_text)
    cards: list[SignFlashcard] = []
    skipped = 0
    missing_images = 0

    for i, record in enumerate(records):
        source_id = format_source_id(record.get("ID", ""))
        sign_type = (record.get("Type") or "").strip()
        name_ar = (record.get("Name in Arabic") or "").strip()
        if not source_id or not sign_type or not name_ar:
            skipped += 1
            logger.debug("flashcard row skipped", extra={"row": i + 2})
            continue

        image_path = resolve_image_path_for_source_id(source_id, exists_at, images_dir)
        if image_path is None:
            missing_images += 1
            image_path = build_placeholder_image_path(source_id)

        cards.append(
            SignFlashcard(
                id=f"sf-{i + 1:04d}",
                source_id=source_id,
                type=sign_type,
                name_ar=name_ar,
                image_path=image_path,
            )
        )

    report = FlashcardsReport(
        total_rows=len(records),
        extracted=len(cards),
        skipped=skipped,
        missing_image_count=missing_images,
    )
    logger.info("sign flashcards mapped", extra={"extracted": report.extracted, "skipped": skipped, "missing_images": missing_images})
    return SignFlashcardSet(cards=cards), report


def map_quiz_csv(
    csv_text: str,
    exists_at: ExistsAt | None = None,
    images_dir: str | Path | None = None,
) -> tuple[SignQuizSet, SignQuizReport]:
    records = read_csv_records(csv_text)
    questions: list[SignQuizQuestion] = []
    skipped = 0
    unresolved = 0
    missing_images = 0

    for i, record in enumerate(records):
        source_id = format_source_id(record.get("ID", ""))
        sign_type = (record.get("Type") or "").strip()
        options = [v for v in ((record.get(c) or "").strip() for c in QUIZ_OPTION_COLUMNS) if v]

        if not source_id or not sign_type or len(options) < 2:
            skipped += 1
            logger.debug("sign quiz row skipped", extra={"row": i + 2})
            continue

        correct_index = resolve_correct_option_index(record, options)
        if correct_index is None:
            # Bad answer key rather than bad row data.
            unresolved += 1
            logger.debug("sign quiz answer unresolved", extra={"row": i + 2, "source_id": source_id})
            continue

        image_path = resolve_image_path_for_source_id(source_id, exists_at, images_dir)
        if image_path is None:
            missing_images += 1
            image_path = build_placeholder_image_path(source_id)

        questions.append(
            SignQuizQuestion(
                id=f"sq-{i + 1:04d}",
                source_id=source_id,
                type=sign_type,
                image_path=image_path,
                options=options,
                correct_option_index=correct_index,
                correct_answer_text=(record.get("Correct Answer") or "").strip() or options[correct_index],
            )
        )

    report = SignQuizReport(
        total_rows=len(records),
        extracted=len(questions),
        skipped=skipped,
        unresolved_answers=unresolved,
        missing_image_count=missing_images,
    )
    logger.info(
        "sign quiz mapped",
        extra={"extracted": report.extracted, "skipped": skipped, "unresolved": unresolved, "missing_images": missing_images},
    )
    return SignQuizSet(questions=questions), report
