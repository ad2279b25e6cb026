"""OCR fallback for PDF pages whose text layer is too thin to trust.

Rendering and recognition go through an ``OcrBackend`` so the page selection
and merge rules can run against a fake in tests. Pages are processed one at a
time; a failing page keeps its text-layer output and is recorded, the batch
carries on.
"""
from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import pytesseract
from PIL import Image

from qcm_extract.ingest.pdf_text_utils import non_space_length, render_page_png
from qcm_extract.ingest.text_normalize import normalize_whitespace

logger = logging.getLogger(__name__)


class OcrBackend(Protocol):
    def has_language_pack(self, lang: str) -> bool: ...

    def render_page_to_image(self, page_index: int, out_dir: Path) -> Path: ...

    def run_ocr(self, image_path: Path, lang: str) -> str: ...


class TesseractOcrBackend:
    def __init__(self, pdf_path: str | Path, dpi: int = 200, psm: int = 6):
        self.pdf_path = Path(pdf_path)
        self.dpi = dpi
        self.psm = psm

    def has_language_pack(self, lang: str) -> bool:
        try:
            return lang in pytesseract.get_languages(config="")
        except (pytesseract.TesseractError, OSError):
            logger.warning("tesseract unavailable", exc_info=True)
            return False

    def render_page_to_image(self, page_index: int, out_dir: Path) -> Path:
        return render_page_png(self.pdf_path, page_index, out_dir / f"page-{page_index + 1}.png", dpi=self.dpi)

    def run_ocr(self, image_path: Path, lang: str) -> str:
        with Image.open(image_path) as img:
            return pytesseract.image_to_string(img, lang=lang, config=f"--psm {self.psm}") or ""


@dataclass
class PageText:
    page_number: int
    text: str
    used_ocr: bool = False


@dataclass
class OcrOutcome:
    pages: list[PageText]
    sparse_pages: list[int] = field(default_factory=list)
    ocr_used_pages: list[int] = field(default_factory=list)
    ocr_failed_pages: list[int] = field(default_factory=list)
    ocr_skipped_pages: list[int] = field(default_factory=list)


def find_sparse_pages(texts: list[str], min_text_length: int = 120) -> list[int]:
    return [i + 1 for i, t in enumerate(texts) if non_space_length(t) < min_text_length]


def apply_ocr_fallback(
    texts: list[str],
    backend: OcrBackend | None,
    lang: str = "ara",
    min_text_length: int = 120,
) -> OcrOutcome:
    pages = [PageText(page_number=i + 1, text=t) for i, t in enumerate(texts)]
    outcome = OcrOutcome(pages=pages, sparse_pages=find_sparse_pages(texts, min_text_length))
    if not outcome.sparse_pages or backend is None:
        return outcome
    if not backend.has_language_pack(lang):
        logger.warning("OCR language pack missing, keeping text layer", extra={"lang": lang, "sparse_pages": outcome.sparse_pages})
        outcome.ocr_skipped_pages = list(outcome.sparse_pages)
        return outcome

    with tempfile.TemporaryDirectory(prefix="qcm-ocr-") as scratch:
        scratch_dir = Path(scratch)
        for page_number in outcome.sparse_pages:
            try:
                image_path = backend.render_page_to_image(page_number - 1, scratch_dir)
                ocr_text = normalize_whitespace(backend.run_ocr(image_path, lang))
            except Exception:
                logger.warning("OCR failed for page", extra={"page": page_number}, exc_info=True)
                outcome.ocr_failed_pages.append(page_number)
                continue
            if not ocr_text:
                logger.warning("OCR returned no text", extra={"page": page_number})
                outcome.ocr_failed_pages.append(page_number)
                continue
            pages[page_number - 1] = PageText(page_number=page_number, text=ocr_text, used_ocr=True)
            outcome.ocr_used_pages.append(page_number)

    logger.info(
        "OCR fallback done",
        extra={"sparse": outcome.sparse_pages, "used": outcome.ocr_used_pages, "failed": outcome.ocr_failed_pages},
    )
    return outcome
