from __future__ import annotations

import argparse

from qcm_extract.core.config import settings
from qcm_extract.core.logging import setup_logging
from qcm_extract.services.conversion import convert_signs_files


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Convert the road-sign flashcard and quiz CSVs.")
    ap.add_argument("flashcards_csv", nargs="?", default=settings.FLASHCARDS_CSV_PATH)
    ap.add_argument("quiz_csv", nargs="?", default=settings.SIGNS_QUIZ_CSV_PATH)
    args = ap.parse_args(argv)

    setup_logging(settings.LOG_LEVEL)
    _, _, report = convert_signs_files(args.flashcards_csv, args.quiz_csv, settings)
    print(f"Flashcards extracted: {report.flashcards.extracted}/{report.flashcards.total_rows}")
    print(f"Quiz extracted: {report.quiz.extracted}/{report.quiz.total_rows}")
    print(f"Unresolved quiz answers: {report.quiz.unresolved_answers}")
    print(f"Missing images: {report.missing_image_count}")
    print(f"Images synced: {'yes' if report.images_synced else 'no'}")


if __name__ == "__main__":
    main()
