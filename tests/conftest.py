"""
Shared fixtures for the leaderboard test suite.

Unit and gateway tests run against fakeredis, an in-process Redis with real
sorted-set and MULTI/EXEC semantics. Transport failures are injected with
unittest.mock clients.
"""

import os

# Keep the in-memory rate limiter out of the way of the gateway tests
os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000/minute")
os.environ.setdefault("LOG_LEVEL", "debug")

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.modules.leaderboard.dependencies import get_leaderboard_store
from src.modules.leaderboard.leaderboard_service import LeaderboardStore
from src.modules.leaderboard.ordered_set import RedisOrderedScoreSet

LEADERBOARD_KEY = "leaderboard"


@pytest_asyncio.fixture
async def redis_client():
    client = FakeAsyncRedis(decode_responses=True)
    await client.flushall()
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def scores(redis_client) -> RedisOrderedScoreSet:
    return RedisOrderedScoreSet(redis_client, key=LEADERBOARD_KEY)


@pytest.fixture
def store(scores) -> LeaderboardStore:
    return LeaderboardStore(scores)


def _failing_client(exc: Exception) -> MagicMock:
    pipe = MagicMock()
    pipe.__aenter__.return_value = pipe
    pipe.__aexit__.return_value = False
    pipe.execute = AsyncMock(side_effect=exc)

    client = MagicMock()
    client.pipeline.return_value = pipe
    for command in ("zadd", "zscore", "zrank", "zrange", "ping"):
        setattr(client, command, AsyncMock(side_effect=exc))
    return client


@pytest.fixture
def make_failing_client():
    """Factory for Redis client stand-ins whose every command and transaction raises."""
    return _failing_client


@pytest_asyncio.fixture
async def api_client():
    """HTTP client bound to the app, with the store dependency pointing at the given store."""
    clients = []

    async def _make(target_store: LeaderboardStore) -> AsyncClient:
        app.dependency_overrides[get_leaderboard_store] = lambda: target_store
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()
    app.dependency_overrides.clear()
