import os
from typing import Iterator, Optional

from fastapi import Header, HTTPException, Request

from database.db_manager import DatabaseManager
from ocr.engines import OcrEngine, open_engine


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """The authenticated owner. Every round operation requires one."""
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(401, "Not authenticated")
    return x_user_id.strip()


def get_ocr_engine() -> Iterator[OcrEngine]:
    """An OCR engine acquired for one request and released after it."""
    with open_engine(os.environ.get("OCR_ENGINE")) as engine:
        yield engine
