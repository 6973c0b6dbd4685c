# src/api/routers.py

from fastapi import FastAPI
from src.modules.leaderboard.leaderboard_controller import router as leaderboard_router

def include_routers(app: FastAPI) -> None:
    app.include_router(leaderboard_router)
