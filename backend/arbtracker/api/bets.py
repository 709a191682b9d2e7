from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from arbtracker.api.schemas import CreatePairRequest, StatusUpdateRequest, format_money, serialize_bet
from arbtracker.db import get_db
from arbtracker.domain.enums import BetStatus
from arbtracker.errors import (
    BetNotFoundError,
    InvalidStatusError,
    PairNotFoundError,
    PairValidationError,
    SettlementConflictError,
    StaleStatusError,
)
from arbtracker.services import bets as store
from arbtracker.services.pairs import create_pair, get_pair, settle_bet
from arbtracker.services.stats import summarize_bets

router = APIRouter(tags=["bets"])


@router.get("/bets")
def list_bets(
    status: BetStatus | None = Query(None),
    search: str | None = Query(None, description="Matches bookmaker or bet type"),
    sort: Literal["created", "date", "stake", "odds"] = Query("created"),
    db: Session = Depends(get_db),
) -> list[dict[str, object]]:
    return [serialize_bet(bet) for bet in store.list_bets(db, status=status, search=search, sort=sort)]


@router.get("/bets/summary")
def bets_summary(db: Session = Depends(get_db)) -> dict[str, object]:
    summary = summarize_bets(db)
    return {key: value if isinstance(value, int) else format_money(value) for key, value in summary.items()}


@router.post("/bets")
def create_bets(payload: CreatePairRequest, db: Session = Depends(get_db)) -> dict[str, object]:
    try:
        pair_id, bets = create_pair(db, payload.bet_a.to_leg(), payload.bet_b.to_leg(), payload.game_date)
    except PairValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "bet pair is invalid",
                "violations": [violation.as_dict() for violation in exc.violations],
            },
        ) from exc
    return {"success": True, "bets": [serialize_bet(bet) for bet in bets], "pair_id": pair_id}


@router.patch("/bets/{bet_id}/status")
def update_bet_status(
    bet_id: str,
    payload: StatusUpdateRequest,
    db: Session = Depends(get_db),
) -> dict[str, object]:
    try:
        bet = settle_bet(db, bet_id, payload.status)
    except InvalidStatusError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except BetNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Bet not found") from exc
    except (SettlementConflictError, StaleStatusError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return serialize_bet(bet)


@router.get("/pairs/{pair_id}")
def pair_detail(pair_id: str, db: Session = Depends(get_db)) -> dict[str, object]:
    try:
        pair = get_pair(db, pair_id)
    except PairNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Pair not found") from exc

    metrics = pair["metrics"]
    return {
        "pair_id": pair_id,
        "bets": [serialize_bet(bet) for bet in pair["bets"]],
        "total_stake": format_money(metrics.total_stake) if metrics is not None else None,
        "profit_percentage_a": format_money(metrics.profit_percentage_a) if metrics is not None else None,
        "profit_percentage_b": format_money(metrics.profit_percentage_b) if metrics is not None else None,
        "guaranteed_profit": format_money(pair["guaranteed_profit"]),
        "violations": [violation.as_dict() for violation in pair["violations"]],
    }
