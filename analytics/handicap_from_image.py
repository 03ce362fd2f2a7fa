from __future__ import annotations

import argparse
import datetime
from pathlib import Path

from pydantic import ValidationError

from models import Round
from ocr.engines import open_engine
from ocr.scorecard_reader import read_scorecard


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="OCR a scorecard photo and show the differential it would record."
    )
    parser.add_argument("image", type=Path, help="Scorecard photo (jpg, png, webp)")
    parser.add_argument(
        "--engine",
        default=None,
        help="OCR engine: tesseract, gemini or null (default: $OCR_ENGINE or tesseract)",
    )
    parser.add_argument(
        "--date",
        type=datetime.date.fromisoformat,
        default=datetime.date.today(),
        help="Date the round was played (YYYY-MM-DD, default today)",
    )
    parser.add_argument(
        "--show-raw",
        action="store_true",
        help="Print the raw OCR text as well",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()

    with open_engine(args.engine) as engine:
        extraction = read_scorecard(args.image, engine=engine)

    form = extraction.with_defaults()
    print("Field, Value, Found")
    for name in ("course", "rating", "slope", "gross"):
        found = "no (default)" if name in extraction.missing_fields else "yes"
        print(f"{name},{getattr(form, name)},{found}")

    if args.show_raw:
        print("\n--- OCR text ---")
        print(extraction.ocr_raw)

    try:
        round_ = Round.from_extraction(extraction, date=args.date)
    except ValidationError as e:
        err = e.errors()[0]
        print(f"\nNot a valid round as read ({err['loc'][0]}: {err['msg']}).")
        return

    print(f"\nDifferential: {round_.display_differential()}")


if __name__ == "__main__":
    main()
