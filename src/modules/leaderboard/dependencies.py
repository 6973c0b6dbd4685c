# src/modules/leaderboard/dependencies.py

from fastapi import HTTPException, Request, status

from src.common.utils.global_messages import GlobalMessages
from src.modules.leaderboard.leaderboard_service import LeaderboardStore

def get_leaderboard_store(request: Request) -> LeaderboardStore:
    """
    Dependency returning the store built during application startup.
    """
    store = getattr(request.app.state, "leaderboard_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=GlobalMessages.STORE_NOT_INITIALISED
        )
    return store
