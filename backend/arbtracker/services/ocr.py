"""Best-effort extraction of a bet pair from a betting-slip screenshot.

Recognition is delegated to Tesseract through pytesseract. The text parsing
below is heuristic: anything it cannot find is left empty and the pair
validator reports it to the client for correction.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

import pytesseract
from PIL import Image, UnidentifiedImageError

from arbtracker.config import get_settings
from arbtracker.core.metrics import normalize_amount
from arbtracker.domain.enums import Side
from arbtracker.domain.types import LegInput
from arbtracker.errors import ExtractionError

logger = logging.getLogger(__name__)

KNOWN_BOOKMAKERS = (
    "Bet365",
    "Betano",
    "Betfair",
    "Betfast",
    "Betway",
    "KTO",
    "Novibet",
    "Pinnacle",
    "Sportingbet",
    "Superbet",
)
BET_TYPE_MARKERS = ("acima", "abaixo", "over", "under", "vencedor", "handicap", "resultado")
TEAM_SEPARATORS = (" — ", " – ", " vs ", " x ", " - ")

_AMOUNT = r"(\d{1,3}(?:\.\d{3})*,\d{2}|\d+[.,]\d{1,3})"
ODDS_RE = re.compile(r"(?:odds?|cota[çc][ãa]o|@)\s*:?\s*" + _AMOUNT, re.IGNORECASE)
STAKE_RE = re.compile(r"(?:aposta|valor|stake)\s*:?\s*(?:R\$)?\s*" + _AMOUNT, re.IGNORECASE)
PAYOUT_RE = re.compile(r"(?:retorno|ganhos?|payout)[^\d]{0,20}(?:R\$)?\s*" + _AMOUNT, re.IGNORECASE)
DATE_RE = re.compile(r"(\d{2})/(\d{2})/(\d{4})(?:\D+(\d{2}):(\d{2}))?")


@dataclass(frozen=True, slots=True)
class OCRData:
    bet_a: LegInput
    bet_b: LegInput
    game_date: datetime | None
    raw_text: str

    def as_dict(self) -> dict[str, object]:
        return {
            "bet_a": asdict(self.bet_a),
            "bet_b": asdict(self.bet_b),
            "game_date": self.game_date.isoformat() if self.game_date is not None else None,
            "raw_text": self.raw_text,
        }


def _nth(values: list[str], idx: int) -> str:
    return normalize_amount(values[idx]) if len(values) > idx else ""


def _find_teams(lines: list[str]) -> tuple[str, str]:
    for line in lines:
        if "/" in line:
            continue
        for separator in TEAM_SEPARATORS:
            if separator in line:
                left, _, right = line.partition(separator)
                if left.strip() and right.strip() and not any(ch.isdigit() for ch in left + right):
                    return left.strip(), right.strip()
    return "", ""


def _find_sport_league(lines: list[str]) -> tuple[str | None, str | None]:
    for line in lines:
        if "/" in line and not DATE_RE.search(line):
            sport, _, league = line.partition("/")
            return sport.strip() or None, league.strip() or None
    return None, None


def _find_game_date(text: str) -> datetime | None:
    match = DATE_RE.search(text)
    if match is None:
        return None
    day, month, year, hour, minute = match.groups()
    try:
        return datetime(
            int(year), int(month), int(day), int(hour or 0), int(minute or 0), tzinfo=timezone.utc
        )
    except ValueError:
        return None


def parse_ocr_text(text: str) -> OCRData:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    lowered = text.lower()

    bookmakers = sorted(
        (name for name in KNOWN_BOOKMAKERS if name.lower() in lowered),
        key=lambda name: lowered.index(name.lower()),
    )
    bet_types = [line for line in lines if any(marker in line.lower() for marker in BET_TYPE_MARKERS)]
    team_a, team_b = _find_teams(lines)
    sport, league = _find_sport_league(lines)

    odds = ODDS_RE.findall(text)
    stakes = STAKE_RE.findall(text)
    payouts = PAYOUT_RE.findall(text)

    legs = []
    for idx, side in enumerate((Side.A, Side.B)):
        legs.append(
            LegInput(
                betting_house=bookmakers[idx] if len(bookmakers) > idx else "",
                sport=sport,
                league=league,
                team_a=team_a,
                team_b=team_b,
                bet_type=bet_types[idx] if len(bet_types) > idx else "",
                selected_side=side.value,
                odds=_nth(odds, idx),
                stake=_nth(stakes, idx),
                payout=_nth(payouts, idx),
            )
        )
    return OCRData(bet_a=legs[0], bet_b=legs[1], game_date=_find_game_date(text), raw_text=text)


def extract(image_bytes: bytes, language: str | None = None) -> OCRData:
    """Run OCR on an uploaded image and parse whatever pair data it yields."""
    language = language or get_settings().ocr_language
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.load()
            text = pytesseract.image_to_string(image, lang=language)
    # TesseractNotFoundError is an OSError, so it has to be matched first.
    except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError, RuntimeError) as exc:
        logger.exception("Text recognition failed")
        raise ExtractionError("text recognition failed") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ExtractionError("image could not be read") from exc

    logger.info("Recognized %d characters of slip text", len(text))
    return parse_ocr_text(text)
