import logging
from pathlib import Path

from PIL import Image

from ocr.engines import OcrEngine
from ocr.preprocess import preprocess_image
from ocr.text_parser import ScorecardExtraction, parse_ocr_text

log = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".jpg", ".jpeg", ".png", ".webp")


def check_suffix(filename: str) -> str:
    """Return the lower-cased suffix of ``filename`` if it is a supported image type."""
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported file type: {suffix or '(none)'}. "
            f"Supported: {', '.join(SUPPORTED_SUFFIXES)}"
        )
    return suffix


def read_scorecard_image(image: Image.Image, engine: OcrEngine) -> ScorecardExtraction:
    """Preprocess ``image``, run it through ``engine`` and parse the text.

    Engine errors are not caught here.
    """
    prepared = preprocess_image(image)
    text = engine.recognize(prepared)
    extraction = parse_ocr_text(text)
    log.info(
        "Scorecard read: %d chars of text, missing fields: %s",
        len(text), ", ".join(extraction.missing_fields) or "none",
    )
    return extraction


def read_scorecard(file_path: str | Path, *, engine: OcrEngine) -> ScorecardExtraction:
    """Extract scorecard fields from an image file.

    Args:
        file_path: Path to a JPG, PNG or WEBP photo of the card.
        engine: An acquired OCR engine, e.g. from ``open_engine()``.

    Returns:
        ScorecardExtraction with whatever fields were found and the raw text.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file type is unsupported.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    check_suffix(path.name)

    with Image.open(path) as image:
        return read_scorecard_image(image, engine)
