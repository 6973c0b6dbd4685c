# src/leaderboard/schemas.py

from typing import List
from pydantic import BaseModel, Field, StrictInt

# Points are stored as a float sorted-set score; beyond 2**53 they stop round-tripping
MAX_EXACT_POINTS = 2**53

class User(BaseModel):
    username: str
    points: int
    # Derived from the ordered set on every read, never stored
    rank: int = 0

class Leaderboard(BaseModel):
    count: int
    users: List[User] = []

class SubmitPointsRequest(BaseModel):
    username: str = Field(..., min_length=1)
    points: StrictInt = Field(..., ge=-MAX_EXACT_POINTS, le=MAX_EXACT_POINTS)

class UserResponse(BaseModel):
    user: User

class LeaderboardResponse(BaseModel):
    leaderboard: Leaderboard
