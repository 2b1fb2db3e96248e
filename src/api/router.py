from __future__ import annotations

from fastapi import APIRouter

from src.api.analysis import router as analysis_router
from src.api.bd_dashboard import router as bd_dashboard_router
from src.api.bd_targets import router as bd_targets_router
from src.api.calculator import router as calculator_router
from src.api.health import router as health_router
from src.api.leaderboard import router as leaderboard_router
from src.api.mastersheet import router as mastersheet_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(analysis_router)
api_router.include_router(mastersheet_router)
api_router.include_router(bd_targets_router)
api_router.include_router(bd_dashboard_router)
api_router.include_router(leaderboard_router)
api_router.include_router(calculator_router)
