"""Scorecard scan/upload API endpoints."""

import asyncio
import io
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from api.dependencies import get_current_user_id, get_ocr_engine
from api.schemas import ScanResponse
from ocr.engines import OcrEngine
from ocr.scorecard_reader import check_suffix, read_scorecard_image

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/extract", response_model=ScanResponse)
async def extract_scan(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    engine: OcrEngine = Depends(get_ocr_engine),
):
    """Upload a scorecard photo, run OCR, return a guess for the user to review."""
    try:
        check_suffix(file.filename or "upload.jpg")
    except ValueError as e:
        raise HTTPException(400, str(e))

    data = await file.read()
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError):
        raise HTTPException(400, "Uploaded file is not a readable image")

    # OCR is blocking; keep it off the event loop
    loop = asyncio.get_running_loop()
    try:
        extraction = await loop.run_in_executor(None, read_scorecard_image, image, engine)
    except Exception as e:
        log.exception("Scorecard OCR failed for user %s", user_id)
        raise HTTPException(
            502,
            f"OCR failed ({type(e).__name__}). Please try again or enter the round manually.",
        )

    return ScanResponse(
        extraction=extraction,
        form=extraction.with_defaults(),
        missing_fields=extraction.missing_fields,
    )
