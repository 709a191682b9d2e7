from fastapi import APIRouter

from arbtracker.api.bets import router as bets_router
from arbtracker.api.ocr import router as ocr_router

api_router = APIRouter(prefix="/api")
api_router.include_router(bets_router)
api_router.include_router(ocr_router)
