# src/leaderboard/leaderboard_service.py

import logging

from src.modules.leaderboard.errors import NotFound
from src.modules.leaderboard.ordered_set import OrderedScoreSet
from src.modules.leaderboard.schemas import Leaderboard, User

logger = logging.getLogger(__name__)

class LeaderboardStore:
    """
    User and leaderboard operations on top of an OrderedScoreSet.

    save_user and get_user run their reads and writes as one atomic batch, so
    a rank returned next to a score belongs to the same snapshot.
    get_leaderboard is a single plain read and may observe concurrent writes.
    """

    def __init__(self, scores: OrderedScoreSet):
        self.scores = scores

    async def save_user(self, user: User) -> User:
        """
        Upsert the user's points and fill in the rank the write produced.
        """
        async with self.scores.batch() as batch:
            batch.upsert(user.username, user.points)
            rank = batch.rank(user.username)
            await batch.commit()

        user.rank = rank.value
        logger.debug(f"Saved '{user.username}' with {user.points} points at rank {user.rank}")
        return user

    async def get_user(self, username: str) -> User:
        async with self.scores.batch() as batch:
            score = batch.score(username)
            rank = batch.rank(username)
            await batch.commit()

        # Rank is meaningless without a score, so only the score is checked
        if score.value is None:
            raise NotFound(username)
        return User(username=username, points=int(score.value), rank=rank.value)

    async def get_leaderboard(self) -> Leaderboard:
        entries = await self.scores.get_all_ordered()
        users = [
            User(username=entry.member, points=int(entry.score), rank=idx)
            for idx, entry in enumerate(entries)
        ]
        return Leaderboard(count=len(users), users=users)
