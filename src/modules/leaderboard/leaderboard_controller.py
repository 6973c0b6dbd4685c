# src/leaderboard/leaderboard_controller.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.common.utils.global_messages import GlobalMessages
from src.modules.leaderboard import schemas
from src.modules.leaderboard.dependencies import get_leaderboard_store
from src.modules.leaderboard.errors import BackingStoreError, NotFound
from src.modules.leaderboard.leaderboard_service import LeaderboardStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["leaderboard"])

def _backing_store_failure(e: BackingStoreError) -> HTTPException:
    logger.error(f"Leaderboard backing store failure: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=GlobalMessages.BACKING_STORE_UNAVAILABLE
    )

@router.post("/points", response_model=schemas.UserResponse)
async def submit_points(
    payload: schemas.SubmitPointsRequest,
    store: LeaderboardStore = Depends(get_leaderboard_store)
):
    """
    Create or overwrite a user's points and return the user with its current rank.
    """
    user = schemas.User(username=payload.username, points=payload.points)
    try:
        user = await store.save_user(user)
    except BackingStoreError as e:
        raise _backing_store_failure(e)
    return {"user": user}

@router.get("/points/{username}", response_model=schemas.UserResponse)
async def get_user_points(
    username: str,
    store: LeaderboardStore = Depends(get_leaderboard_store)
):
    """
    Retrieve one user's points and rank.
    """
    try:
        user = await store.get_user(username)
    except NotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=GlobalMessages.NO_RECORD_FOUND.format(username=username)
        )
    except BackingStoreError as e:
        raise _backing_store_failure(e)
    return {"user": user}

@router.get("/leaderboard", response_model=schemas.LeaderboardResponse)
async def get_leaderboard(store: LeaderboardStore = Depends(get_leaderboard_store)):
    """
    Retrieve every user ordered by ascending points (rank 0 first).
    """
    try:
        leaderboard = await store.get_leaderboard()
    except BackingStoreError as e:
        raise _backing_store_failure(e)
    return {"leaderboard": leaderboard}
