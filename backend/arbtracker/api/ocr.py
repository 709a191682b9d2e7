from __future__ import annotations

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from arbtracker.config import get_settings
from arbtracker.errors import ExtractionError
from arbtracker.services import ocr

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ocr"])


@router.post("/ocr/process")
async def process_image(image: UploadFile | None = File(None)) -> dict[str, object]:
    if image is None:
        raise HTTPException(status_code=400, detail="No image file provided")
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")

    settings = get_settings()
    payload = await image.read()
    if len(payload) > settings.ocr_max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"image exceeds {settings.ocr_max_upload_bytes} bytes",
        )

    try:
        # Tesseract runs as a subprocess; keep it off the event loop.
        data = await run_in_threadpool(ocr.extract, payload, settings.ocr_language)
    except ExtractionError as exc:
        logger.warning("OCR failed for %s: %s", image.filename, exc)
        raise HTTPException(status_code=500, detail="Failed to process image") from exc
    return data.as_dict()
