from __future__ import annotations

import asyncio
import io
from datetime import datetime, timezone

import pytest
import pytesseract
from fastapi import HTTPException, UploadFile
from PIL import Image
from starlette.datastructures import Headers

from arbtracker.api.ocr import process_image
from arbtracker.config import get_settings
from arbtracker.errors import ExtractionError
from arbtracker.services import ocr

SLIP_TEXT = """Tênis / ATP - Hangzhou, China
Giulio Zeppieri — Learner Tien
04/10/2025 18:30
Betfast
Acima 8.5 1º set
Odd: 1.270
Aposta: R$ 979,47
Retorno potencial: R$ 1.243,67
Pinnacle
Abaixo 8.5 1º set
Odd: 5.270
Aposta: R$ 236,04
Retorno potencial: R$ 1.243,67
"""


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buffer, format="PNG")
    return buffer.getvalue()


def _upload(data: bytes, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename="slip.png",
        headers=Headers({"content-type": content_type}),
    )


def test_parse_ocr_text_extracts_both_legs() -> None:
    data = ocr.parse_ocr_text(SLIP_TEXT)

    assert data.bet_a.betting_house == "Betfast"
    assert data.bet_b.betting_house == "Pinnacle"
    assert (data.bet_a.team_a, data.bet_a.team_b) == ("Giulio Zeppieri", "Learner Tien")
    assert data.bet_a.sport == "Tênis"
    assert data.bet_a.league == "ATP - Hangzhou, China"
    assert data.bet_a.bet_type == "Acima 8.5 1º set"
    assert data.bet_b.bet_type == "Abaixo 8.5 1º set"
    assert (data.bet_a.odds, data.bet_b.odds) == ("1.270", "5.270")
    assert (data.bet_a.stake, data.bet_b.stake) == ("979.47", "236.04")
    assert (data.bet_a.payout, data.bet_b.payout) == ("1243.67", "1243.67")
    assert (data.bet_a.selected_side, data.bet_b.selected_side) == ("A", "B")
    assert data.game_date == datetime(2025, 10, 4, 18, 30, tzinfo=timezone.utc)


def test_parse_ocr_text_leaves_unknown_fields_empty() -> None:
    data = ocr.parse_ocr_text("nothing useful here")

    assert data.bet_a.betting_house == ""
    assert data.bet_a.team_a == ""
    assert data.bet_b.stake == ""
    assert data.game_date is None
    assert data.as_dict()["bet_b"]["selected_side"] == "B"


def test_extract_runs_tesseract_with_configured_language(monkeypatch) -> None:
    calls: list[str] = []

    def fake_image_to_string(image, lang=None):
        calls.append(lang)
        return SLIP_TEXT

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)

    data = ocr.extract(_png_bytes(), language="eng")

    assert calls == ["eng"]
    assert data.bet_b.betting_house == "Pinnacle"
    assert data.raw_text == SLIP_TEXT


def test_extract_wraps_failures() -> None:
    with pytest.raises(ExtractionError):
        ocr.extract(b"not an image", language="por")


def test_extract_wraps_recognition_errors(monkeypatch) -> None:
    def broken(image, lang=None):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "image_to_string", broken)

    with pytest.raises(ExtractionError, match="recognition"):
        ocr.extract(_png_bytes(), language="por")


def test_process_image_route(monkeypatch) -> None:
    monkeypatch.setenv("OCR_MAX_UPLOAD_BYTES", "100000")
    get_settings.cache_clear()
    monkeypatch.setattr(ocr, "extract", lambda payload, language: ocr.parse_ocr_text(SLIP_TEXT))

    result = asyncio.run(process_image(image=_upload(_png_bytes(), "image/png")))

    assert result["bet_a"]["betting_house"] == "Betfast"
    assert result["game_date"] == "2025-10-04T18:30:00+00:00"


def test_process_image_route_errors(monkeypatch) -> None:
    monkeypatch.setenv("OCR_MAX_UPLOAD_BYTES", "10")
    get_settings.cache_clear()

    def failing(payload, language):
        raise ExtractionError("text recognition failed")

    monkeypatch.setattr(ocr, "extract", failing)

    cases = [
        (None, 400),
        (_upload(b"hello", "text/plain"), 400),
        (_upload(_png_bytes(), "image/png"), 413),
    ]
    for upload, expected in cases:
        with pytest.raises(HTTPException) as excinfo:
            asyncio.run(process_image(image=upload))
        assert excinfo.value.status_code == expected

    monkeypatch.setenv("OCR_MAX_UPLOAD_BYTES", "100000")
    get_settings.cache_clear()
    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(process_image(image=_upload(_png_bytes(), "image/png")))
    assert excinfo.value.status_code == 500
    assert excinfo.value.detail == "Failed to process image"
    get_settings.cache_clear()
