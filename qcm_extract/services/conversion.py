from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from qcm_extract.core.config import Settings, settings as default_settings
from qcm_extract.ingest.csv_questions import map_csv_to_question_set
from qcm_extract.ingest.ocr_fallback import OcrBackend
from qcm_extract.ingest.pdf_questions import build_question_set_from_pdf
from qcm_extract.ingest.signs_csv import map_flashcards_csv, map_quiz_csv
from qcm_extract.models.entities import (
    CsvExtractionReport,
    PdfExtractionReport,
    QuestionSet,
    SignFlashcardSet,
    SignQuizSet,
    SignsExtractionReport,
)
from qcm_extract.models.validation import is_question_set
from qcm_extract.services.writer import sync_directory, write_json

logger = logging.getLogger(__name__)

QUESTIONS_JSON = "questions.ar.generated.json"
QUESTIONS_REPORT_JSON = "extraction-report.json"
FLASHCARDS_JSON = "signs.flashcards.ar.generated.json"
SIGNS_QUIZ_JSON = "signs.quiz.ar.generated.json"
SIGNS_REPORT_JSON = "signs-extraction-report.json"


def _read_input(path: str | Path, label: str) -> str:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"{label} not found: {p}")
    return p.read_text(encoding="utf-8")


def _write_question_set(question_set: QuestionSet, settings: Settings) -> None:
    payload = question_set.to_dict()
    if not is_question_set(payload):
        raise ValueError("generated question set failed validation")
    write_json(Path(settings.DATA_DIR) / QUESTIONS_JSON, payload)
    write_json(Path(settings.PUBLIC_DATA_DIR) / QUESTIONS_JSON, payload)


def convert_csv_file(csv_path: str | Path, settings: Settings | None = None) -> tuple[QuestionSet, CsvExtractionReport]:
    settings = settings or default_settings
    content = _read_input(csv_path, "CSV file")
    question_set, report = map_csv_to_question_set(content)

    synced = sync_directory(settings.SIGNS_ASSETS_DIR, settings.PUBLIC_SIGNS_ASSETS_DIR)
    report = replace(report, source_csv_path=str(csv_path), signs_assets_synced=synced)

    _write_question_set(question_set, settings)
    write_json(Path(settings.DATA_DIR) / QUESTIONS_REPORT_JSON, report.to_dict())

    logger.info(
        "csv conversion written",
        extra={
            "questions": report.questions_extracted,
            "needs_review": report.needs_review_count,
            "signs_with_image": report.signs_with_image_count,
            "signs_missing_image": report.signs_missing_image_count,
            "assets_synced": synced,
            "output": str(Path(settings.DATA_DIR) / QUESTIONS_JSON),
        },
    )
    return question_set, report


def convert_signs_files(
    flashcards_csv_path: str | Path,
    quiz_csv_path: str | Path,
    settings: Settings | None = None,
) -> tuple[SignFlashcardSet, SignQuizSet, SignsExtractionReport]:
    settings = settings or default_settings
    flashcards_csv = _read_input(flashcards_csv_path, "Flashcards CSV file")
    quiz_csv = _read_input(quiz_csv_path, "Quiz CSV file")

    flashcard_set, flashcards_report = map_flashcards_csv(flashcards_csv, images_dir=settings.SIGN_IMAGES_DIR)
    quiz_set, quiz_report = map_quiz_csv(quiz_csv, images_dir=settings.SIGN_IMAGES_DIR)

    synced = sync_directory(settings.SIGN_IMAGES_DIR, settings.PUBLIC_SIGN_IMAGES_DIR)
    report = SignsExtractionReport(
        flashcards=flashcards_report,
        quiz=quiz_report,
        flashcards_csv_path=str(flashcards_csv_path),
        quiz_csv_path=str(quiz_csv_path),
        images_synced=synced,
    )

    flashcards_payload = flashcard_set.to_dict()
    quiz_payload = quiz_set.to_dict()
    for base in (settings.DATA_DIR, settings.PUBLIC_DATA_DIR):
        write_json(Path(base) / FLASHCARDS_JSON, flashcards_payload)
        write_json(Path(base) / SIGNS_QUIZ_JSON, quiz_payload)
    write_json(Path(settings.DATA_DIR) / SIGNS_REPORT_JSON, report.to_dict())

    logger.info(
        "signs conversion written",
        extra={
            "flashcards": f"{flashcards_report.extracted}/{flashcards_report.total_rows}",
            "quiz": f"{quiz_report.extracted}/{quiz_report.total_rows}",
            "unresolved_quiz_answers": quiz_report.unresolved_answers,
            "missing_images": report.missing_image_count,
            "images_synced": synced,
        },
    )
    return flashcard_set, quiz_set, report


def extract_pdf_file(
    pdf_path: str | Path,
    settings: Settings | None = None,
    backend: OcrBackend | None = None,
) -> tuple[QuestionSet, PdfExtractionReport]:
    settings = settings or default_settings
    question_set, report = build_question_set_from_pdf(pdf_path, backend=backend, settings=settings)

    _write_question_set(question_set, settings)
    write_json(Path(settings.DATA_DIR) / QUESTIONS_REPORT_JSON, report.to_dict())

    logger.info(
        "pdf extraction written",
        extra={
            "questions": report.questions_extracted,
            "needs_review": report.needs_review_count,
            "ocr_used_pages": list(report.ocr_used_pages),
            "ocr_failed_pages": list(report.ocr_failed_pages),
        },
    )
    return question_set, report
