"""OCR engine handles.

An engine is acquired for a unit of work and released afterwards; nothing
here keeps a process-wide worker around. Use ``open_engine`` so release
always happens:

    with open_engine("tesseract") as engine:
        text = engine.recognize(image)
"""

import io
import logging
import os
import shlex
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol

import pytesseract
from dotenv import load_dotenv
from google import genai
from google.genai import types
from PIL import Image

load_dotenv()

log = logging.getLogger(__name__)

DEFAULT_ENGINE = "tesseract"
GEMINI_OCR_MODEL = "gemini-2.5-flash"

# Characters a scorecard is expected to carry.
CHAR_WHITELIST = (
    "0123456789.-/ "
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
)

TRANSCRIBE_PROMPT = """\
Transcribe all printed and handwritten text on this golf scorecard.
Return plain text only, one line per row of the card, in reading order.
Do not summarise, correct, or add anything that is not on the card.
"""


class OcrEngine(Protocol):
    """Anything that turns a (preprocessed) image into plain text."""

    def recognize(self, image: Image.Image) -> str:
        """Return the recognised text; may be empty. Failures raise."""
        ...

    def close(self) -> None:
        """Release whatever the engine holds."""
        ...


class NullOcrEngine:
    """Engine that recognises nothing. Useful before an engine is wired up."""

    def recognize(self, image: Image.Image) -> str:
        return ""

    def close(self) -> None:
        return None


class TesseractEngine:
    """Local Tesseract through pytesseract.

    pytesseract keeps the binary path in a module global, so ``tesseract_cmd``
    (or $TESSERACT_CMD) changes it for every engine in the process. Leave both
    unset to use ``tesseract`` from PATH.
    """

    def __init__(
        self,
        lang: str = "eng",
        tesseract_cmd: Optional[str] = None,
        char_whitelist: str = CHAR_WHITELIST,
    ):
        cmd = tesseract_cmd or os.environ.get("TESSERACT_CMD")
        if cmd:
            pytesseract.pytesseract.tesseract_cmd = cmd
        self.lang = lang
        # quoted: pytesseract shlex-splits the config and the whitelist holds a space
        self.config = (
            f"-c {shlex.quote('tessedit_char_whitelist=' + char_whitelist)}"
            if char_whitelist else ""
        )
        self._closed = False

    def recognize(self, image: Image.Image) -> str:
        if self._closed:
            raise RuntimeError("TesseractEngine used after close()")
        return pytesseract.image_to_string(image, lang=self.lang, config=self.config)

    def close(self) -> None:
        self._closed = True


class GeminiEngine:
    """Gemini vision model asked for a verbatim transcription."""

    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None):
        api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            raise EnvironmentError(
                "GOOGLE_API_KEY environment variable is not set. "
                "Get an API key at https://aistudio.google.com/apikey"
            )
        self.model = model or os.environ.get("GEMINI_OCR_MODEL", GEMINI_OCR_MODEL)
        self._client = genai.Client(api_key=api_key)

    def recognize(self, image: Image.Image) -> str:
        if self._client is None:
            raise RuntimeError("GeminiEngine used after close()")
        buf = io.BytesIO()
        image.save(buf, format="PNG")
        part = types.Part.from_bytes(data=buf.getvalue(), mime_type="image/png")
        response = self._client.models.generate_content(
            model=self.model,
            contents=[part, TRANSCRIBE_PROMPT],
        )
        return response.text or ""

    def close(self) -> None:
        self._client = None


ENGINES = {
    "tesseract": TesseractEngine,
    "gemini": GeminiEngine,
    "null": NullOcrEngine,
}


def create_engine(name: Optional[str] = None, **options) -> OcrEngine:
    """Build an engine by name; defaults to $OCR_ENGINE, then tesseract."""
    key = (name or os.environ.get("OCR_ENGINE") or DEFAULT_ENGINE).strip().lower()
    if key not in ENGINES:
        raise ValueError(
            f"Unknown OCR engine: {key}. "
            f"Supported: {', '.join(sorted(ENGINES))}"
        )
    return ENGINES[key](**options)


@contextmanager
def open_engine(name: Optional[str] = None, **options) -> Iterator[OcrEngine]:
    """Acquire an engine for the duration of a ``with`` block."""
    engine = create_engine(name, **options)
    log.debug("Acquired OCR engine %s", type(engine).__name__)
    try:
        yield engine
    finally:
        engine.close()
        log.debug("Released OCR engine %s", type(engine).__name__)
