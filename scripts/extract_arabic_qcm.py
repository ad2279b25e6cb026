from __future__ import annotations

import argparse

from qcm_extract.core.config import settings
from qcm_extract.core.logging import setup_logging
from qcm_extract.services.conversion import extract_pdf_file


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Extract questions from an Arabic exam PDF (OCR for sparse pages).")
    ap.add_argument("pdf", nargs="?", default=settings.EXAM_PDF_PATH)
    ap.add_argument("--no-ocr", action="store_true", help="use the PDF text layer only")
    args = ap.parse_args(argv)

    setup_logging(settings.LOG_LEVEL)
    run_settings = settings.model_copy(update={"PDF_USE_OCR": False}) if args.no_ocr else settings
    question_set, report = extract_pdf_file(args.pdf, run_settings)
    print(f"Generated {len(question_set.questions)} questions")
    print(f"Needs review: {report.needs_review_count} | Empty blocks skipped: {report.blocks_skipped} | Orphan lines skipped: {report.orphan_lines_skipped}")
    print(f"Sparse pages: {list(report.sparse_text_pages)} | OCR used: {list(report.ocr_used_pages)} | OCR failed: {list(report.ocr_failed_pages)} | OCR skipped: {list(report.ocr_skipped_pages)}")


if __name__ == "__main__":
    main()
