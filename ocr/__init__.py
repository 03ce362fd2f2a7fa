from .engines import (
    GeminiEngine,
    NullOcrEngine,
    OcrEngine,
    TesseractEngine,
    create_engine,
    open_engine,
)
from .preprocess import binarize, preprocess_image, to_grayscale
from .rules import DEFAULT_RULES, ExtractionRule
from .scorecard_reader import read_scorecard, read_scorecard_image
from .text_parser import ScorecardExtraction, ScorecardForm, parse_ocr_text

__all__ = [
    "OcrEngine",
    "NullOcrEngine",
    "TesseractEngine",
    "GeminiEngine",
    "create_engine",
    "open_engine",
    "to_grayscale",
    "binarize",
    "preprocess_image",
    "ExtractionRule",
    "DEFAULT_RULES",
    "parse_ocr_text",
    "ScorecardExtraction",
    "ScorecardForm",
    "read_scorecard",
    "read_scorecard_image",
]
