from __future__ import annotations

import argparse

from qcm_extract.core.config import settings
from qcm_extract.core.logging import setup_logging
from qcm_extract.services.conversion import convert_csv_file


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Convert the driving-exam CSV export to the quiz question set.")
    ap.add_argument("csv", nargs="?", default=settings.QUESTIONS_CSV_PATH)
    args = ap.parse_args(argv)

    setup_logging(settings.LOG_LEVEL)
    question_set, report = convert_csv_file(args.csv, settings)
    print(f"Generated {len(question_set.questions)} questions from CSV")
    print(f"Needs review: {report.needs_review_count}")
    print(f"Signs with image: {report.signs_with_image_count} | missing image: {report.signs_missing_image_count}")
    print(f"Signs assets synced: {'yes' if report.signs_assets_synced else 'no'}")


if __name__ == "__main__":
    main()
