from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

QUESTION_SET_ID = "exam-questions-ar-v1"
QUESTION_SET_TITLE = "أسئلة امتحان السياقة"
FLASHCARD_SET_ID = "road-signs-flashcards-ar-v1"
FLASHCARD_SET_TITLE = "بطاقات إشارات السير"
SIGN_QUIZ_SET_ID = "road-signs-quiz-ar-v1"
SIGN_QUIZ_SET_TITLE = "اختبار إشارات السير"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Choice:
    id: str
    text: str

    def to_dict(self) -> dict:
        return {"id": self.id, "textAr": self.text}


@dataclass
class Question:
    id: str
    prompt: str
    choices: list[Choice]
    correct_choice_id: str | None
    source_page: int
    source_number: int | None
    needs_review: bool
    category: str | None = None
    question_type: str | None = None
    sign_path: str | None = None

    @property
    def is_signs(self) -> bool:
        return (self.question_type or "").lower() == "signs"

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "promptAr": self.prompt,
            "choices": [c.to_dict() for c in self.choices],
            "correctChoiceId": self.correct_choice_id,
            "sourcePage": self.source_page,
            "sourceNumber": self.source_number,
            "needsReview": self.needs_review,
            "category": self.category,
            "questionType": self.question_type,
        }
        if self.sign_path:
            out["signPath"] = self.sign_path
        return out


@dataclass
class QuestionSet:
    questions: list[Question]
    id: str = QUESTION_SET_ID
    title: str = QUESTION_SET_TITLE
    language: str = "ar"
    direction: str = "rtl"
    imported_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "titleAr": self.title,
            "language": self.language,
            "direction": self.direction,
            "questions": [q.to_dict() for q in self.questions],
            "importedAt": self.imported_at,
        }


@dataclass
class SignFlashcard:
    id: str
    source_id: int
    type: str
    name_ar: str
    image_path: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "type": self.type,
            "nameAr": self.name_ar,
            "imagePath": self.image_path,
        }


@dataclass
class SignFlashcardSet:
    cards: list[SignFlashcard]
    id: str = FLASHCARD_SET_ID
    title: str = FLASHCARD_SET_TITLE
    language: str = "ar"
    direction: str = "rtl"
    imported_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "titleAr": self.title,
            "language": self.language,
            "direction": self.direction,
            "cards": [c.to_dict() for c in self.cards],
            "importedAt": self.imported_at,
        }


@dataclass
class SignQuizQuestion:
    id: str
    source_id: int
    type: str
    image_path: str
    options: list[str]
    correct_option_index: int
    correct_answer_text: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "type": self.type,
            "imagePath": self.image_path,
            "optionsAr": list(self.options),
            "correctOptionIndex": self.correct_option_index,
            "correctAnswerAr": self.correct_answer_text,
        }


@dataclass
class SignQuizSet:
    questions: list[SignQuizQuestion]
    id: str = SIGN_QUIZ_SET_ID
    title: str = SIGN_QUIZ_SET_TITLE
    language: str = "ar"
    direction: str = "rtl"
    imported_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "titleAr": self.title,
            "language": self.language,
            "direction": self.direction,
            "questions": [q.to_dict() for q in self.questions],
            "importedAt": self.imported_at,
        }


# Reports are produced once per run; run metadata (paths, sync flags) is added
# with dataclasses.replace by the conversion services.


@dataclass(frozen=True)
class CsvExtractionReport:
    total_rows: int
    questions_extracted: int
    needs_review_count: int
    missing_answer_key_count: int
    signs_with_image_count: int
    signs_missing_image_count: int
    rows_skipped: int
    source_csv_path: str = ""
    signs_assets_synced: bool = False
    generated_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict:
        return {
            "sourceCsvPath": self.source_csv_path,
            "generatedAt": self.generated_at,
            "totalRows": self.total_rows,
            "questionsExtracted": self.questions_extracted,
            "needsReviewCount": self.needs_review_count,
            "missingAnswerKeyCount": self.missing_answer_key_count,
            "signsWithImageCount": self.signs_with_image_count,
            "signsMissingImageCount": self.signs_missing_image_count,
            "rowsSkipped": self.rows_skipped,
            "signsAssetsSynced": self.signs_assets_synced,
        }


@dataclass(frozen=True)
class FlashcardsReport:
    total_rows: int
    extracted: int
    skipped: int
    missing_image_count: int


@dataclass(frozen=True)
class SignQuizReport:
    total_rows: int
    extracted: int
    skipped: int
    unresolved_answers: int
    missing_image_count: int


@dataclass(frozen=True)
class SignsExtractionReport:
    flashcards: FlashcardsReport
    quiz: SignQuizReport
    flashcards_csv_path: str = ""
    quiz_csv_path: str = ""
    images_synced: bool = False
    generated_at: str = field(default_factory=utc_now_iso)

    @property
    def missing_image_count(self) -> int:
        return self.flashcards.missing_image_count + self.quiz.missing_image_count

    def to_dict(self) -> dict:
        return {
            "flashcardsCsvPath": self.flashcards_csv_path,
            "quizCsvPath": self.quiz_csv_path,
            "generatedAt": self.generated_at,
            "flashcardsTotalRows": self.flashcards.total_rows,
            "flashcardsExtracted": self.flashcards.extracted,
            "flashcardsSkipped": self.flashcards.skipped,
            "quizTotalRows": self.quiz.total_rows,
            "quizExtracted": self.quiz.extracted,
            "quizSkipped": self.quiz.skipped,
            "unresolvedQuizAnswers": self.quiz.unresolved_answers,
            "missingImageCount": self.missing_image_count,
            "imagesSynced": self.images_synced,
        }


@dataclass(frozen=True)
class PdfExtractionReport:
    total_pages: int
    questions_extracted: int
    needs_review_count: int
    missing_answer_key_count: int
    sparse_text_pages: tuple[int, ...] = ()
    ocr_used_pages: tuple[int, ...] = ()
    ocr_failed_pages: tuple[int, ...] = ()
    ocr_skipped_pages: tuple[int, ...] = ()
    blocks_skipped: int = 0
    orphan_lines_skipped: int = 0
    pdf_path: str = ""
    generated_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict:
        return {
            "pdfPath": self.pdf_path,
            "generatedAt": self.generated_at,
            "totalPages": self.total_pages,
            "questionsExtracted": self.questions_extracted,
            "needsReviewCount": self.needs_review_count,
            "missingAnswerKeyCount": self.missing_answer_key_count,
            "sparseTextPages": list(self.sparse_text_pages),
            "ocrUsedPages": list(self.ocr_used_pages),
            "ocrFailedPages": list(self.ocr_failed_pages),
            "ocrSkippedPages": list(self.ocr_skipped_pages),
            "blocksSkipped": self.blocks_skipped,
            "orphanLinesSkipped": self.orphan_lines_skipped,
        }
