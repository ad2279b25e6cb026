"""Question extraction from the text of Arabic exam-sheet PDFs.

Layout handled: numbered question lines (``12)`` / ``12.`` / ``12 -``),
option lines marked with a Latin (A-D) or Arabic (أ ب ج د) letter, and an
answer section after a header such as ``الإجابات`` listing ``<number> <letter>``
pairs. Each page is segmented on its own; a question split across two pages
becomes two blocks.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from qcm_extract.core.config import Settings, settings as default_settings
from qcm_extract.ingest.ocr_fallback import OcrBackend, PageText, TesseractOcrBackend, apply_ocr_fallback
from qcm_extract.ingest.pdf_text_utils import read_text_layer
from qcm_extract.ingest.text_normalize import normalize_option_id, normalize_whitespace
from qcm_extract.models.entities import Choice, PdfExtractionReport, Question, QuestionSet

logger = logging.getLogger(__name__)

_ANSWER_SECTION_RE = re.compile(r"(الإجابات|التصحيح|answer key|answers)", re.IGNORECASE)
_ANSWER_PAIR_RE = re.compile(r"(\d{1,4})\s*[).\-:،]?\s*([A-Dأإابجد])")
_QUESTION_START_RE = re.compile(r"^\s*(\d{1,4})\s*(?:[).\-:،]|$)\s*(.*)$")
_OPTION_MARKER_RE = re.compile(r"(?:^|\n)\s*([A-Da-dأإابجد])\s*[).\-:،]\s*")


@dataclass
class QuestionBlock:
    source_number: int | None
    text: str


@dataclass
class _Marker:
    start: int
    end: int
    id: str


def parse_answer_key(text: str) -> dict[int, str]:
    normalized = normalize_whitespace(text)
    m = _ANSWER_SECTION_RE.search(normalized)
    scope = normalized[m.start():] if m else normalized

    answers: dict[int, str] = {}
    for match in _ANSWER_PAIR_RE.finditer(scope):
        option = normalize_option_id(match.group(2))
        if option:
            answers[int(match.group(1))] = option
    return answers


@dataclass
class PageSegments:
    blocks: list[QuestionBlock]
    empty_blocks: int = 0
    orphan_lines: int = 0


def segment_page(text: str) -> PageSegments:
    segments = PageSegments(blocks=[])
    current: QuestionBlock | None = None

    def close(block: QuestionBlock | None) -> None:
        if block is None:
            return
        body = block.text.strip()
        if body:
            segments.blocks.append(QuestionBlock(block.source_number, body))
        else:
            segments.empty_blocks += 1

    for line in normalize_whitespace(text).split("\n"):
        m = _QUESTION_START_RE.match(line)
        if m:
            close(current)
            current = QuestionBlock(source_number=int(m.group(1)), text=m.group(2).strip())
            continue
        # Lines before the first numbered line: page furniture, answer pairs, carried-over options.
        if current is None:
            if line.strip():
                segments.orphan_lines += 1
            continue
        current.text += f"\n{line.strip()}"

    close(current)
    return segments


def split_question_blocks(text: str) -> list[QuestionBlock]:
    return segment_page(text).blocks


def parse_choices(block_text: str) -> tuple[str, list[Choice]]:
    markers: list[_Marker] = []
    for m in _OPTION_MARKER_RE.finditer(block_text):
        option = normalize_option_id(m.group(1))
        if option:
            markers.append(_Marker(start=m.start(), end=m.end(), id=option))

    if len(markers) < 2:
        return block_text.strip(), []

    prompt = block_text[: markers[0].start].strip()
    choices: list[Choice] = []
    seen: set[str] = set()
    for i, marker in enumerate(markers):
        end = markers[i + 1].start if i + 1 < len(markers) else len(block_text)
        # First occurrence wins so a stray repeated letter cannot shift the answer key.
        if marker.id in seen:
            continue
        seen.add(marker.id)
        choices.append(Choice(id=marker.id, text=block_text[marker.end:end].strip()))
    return prompt, choices


def parse_question_block(block: QuestionBlock, page_number: int, answer_map: dict[int, str], sequence: int) -> Question:
    prompt, choices = parse_choices(block.text)
    correct = answer_map.get(block.source_number) if block.source_number else None

    review = len(prompt) < 6 or len(choices) < 2
    if correct and correct not in {c.id for c in choices}:
        logger.debug("answer key option not among choices", extra={"source_number": block.source_number, "option": correct})
        correct = None
    if not correct:
        review = True

    return Question(
        id=f"q-{sequence:04d}",
        prompt=prompt,
        choices=choices,
        correct_choice_id=correct,
        source_page=page_number,
        source_number=block.source_number,
        needs_review=review,
    )


def build_question_set_from_pages(
    pages: list[PageText],
    sparse_pages: list[int] | None = None,
    ocr_used_pages: list[int] | None = None,
    ocr_failed_pages: list[int] | None = None,
    pdf_path: str = "",
    ocr_skipped_pages: list[int] | None = None,
) -> tuple[QuestionSet, PdfExtractionReport]:
    answer_map = parse_answer_key("\n\n".join(p.text for p in pages))

    questions: list[Question] = []
    sequence = 1
    blocks_skipped = 0
    orphan_lines_skipped = 0
    for page in pages:
        segments = segment_page(page.text)
        blocks_skipped += segments.empty_blocks
        orphan_lines_skipped += segments.orphan_lines
        for block in segments.blocks:
            questions.append(parse_question_block(block, page.page_number, answer_map, sequence))
            sequence += 1

    report = PdfExtractionReport(
        total_pages=len(pages),
        questions_extracted=len(questions),
        needs_review_count=sum(1 for q in questions if q.needs_review),
        missing_answer_key_count=sum(1 for q in questions if not q.correct_choice_id),
        sparse_text_pages=tuple(sparse_pages or ()),
        ocr_used_pages=tuple(ocr_used_pages or ()),
        ocr_failed_pages=tuple(ocr_failed_pages or ()),
        ocr_skipped_pages=tuple(ocr_skipped_pages or ()),
        blocks_skipped=blocks_skipped,
        orphan_lines_skipped=orphan_lines_skipped,
        pdf_path=pdf_path,
    )
    logger.info(
        "pdf questions extracted",
        extra={
            "pages": report.total_pages,
            "extracted": report.questions_extracted,
            "needs_review": report.needs_review_count,
            "answer_keys": len(answer_map),
            "blocks_skipped": blocks_skipped,
            "orphan_lines_skipped": orphan_lines_skipped,
        },
    )
    return QuestionSet(questions=questions), report


def build_question_set_from_pdf(
    pdf_path: str | Path,
    backend: OcrBackend | None = None,
    settings: Settings | None = None,
) -> tuple[QuestionSet, PdfExtractionReport]:
    settings = settings or default_settings
    path = Path(pdf_path)
    if not path.exists():
        raise FileNotFoundError(f"PDF not found: {path}")

    texts = read_text_layer(path)
    if backend is None and settings.PDF_USE_OCR:
        backend = TesseractOcrBackend(path, dpi=settings.OCR_DPI, psm=settings.OCR_PSM)
    outcome = apply_ocr_fallback(texts, backend, lang=settings.OCR_LANG, min_text_length=settings.OCR_MIN_TEXT_LENGTH)
    return build_question_set_from_pages(
        outcome.pages,
        sparse_pages=outcome.sparse_pages,
        ocr_used_pages=outcome.ocr_used_pages,
        ocr_failed_pages=outcome.ocr_failed_pages,
        pdf_path=str(path),
        ocr_skipped_pages=outcome.ocr_skipped_pages,
    )
