# src/modules/leaderboard/ordered_set.py

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from typing import Any, AsyncContextManager, AsyncIterator, Callable, Generic, List, Optional, Tuple, TypeVar

from redis.asyncio import Redis
from redis.asyncio.client import Pipeline
from redis.exceptions import RedisError

from src.modules.leaderboard.errors import BackingStoreError, NotFound

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


@dataclass(frozen=True)
class ScoreEntry:
    member: str
    score: float


class BatchResult(Generic[T]):
    """
    Result slot for one command queued on a ScoreSetBatch.

    The value only exists once the batch has been committed successfully.
    """

    def __init__(self, command: str):
        self.command = command
        self._value: Any = _UNSET

    @property
    def ready(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T:
        if not self.ready:
            raise RuntimeError(f"Result of {self.command} read before the batch was committed")
        return self._value

    def _set(self, value: T) -> None:
        self._value = value

    def __repr__(self) -> str:
        shown = repr(self._value) if self.ready else "<pending>"
        return f"BatchResult({self.command}={shown})"


class ScoreSetBatch(ABC):
    """
    A group of ordered-set commands executed as one atomic transaction.

    Commands are queued with upsert/score/rank, each returning a BatchResult.
    commit() runs them together: either every slot gets its value or a single
    BackingStoreError is raised and no slot is filled. A batch commits once.
    """

    def __init__(self):
        self._pending: List[Tuple[BatchResult, Callable[[Any], Any]]] = []
        self._committed = False

    def upsert(self, member: str, score: float) -> BatchResult[None]:
        self._ensure_open()
        self._queue_upsert(member, score)
        return self._track(f"upsert({member!r})", lambda raw: None)

    def score(self, member: str) -> BatchResult[Optional[float]]:
        """Queue a score read; the result is None when the member is absent."""
        self._ensure_open()
        self._queue_score(member)
        return self._track(f"score({member!r})", lambda raw: None if raw is None else float(raw))

    def rank(self, member: str) -> BatchResult[Optional[int]]:
        """Queue a rank read; the result is None when the member is absent."""
        self._ensure_open()
        self._queue_rank(member)
        return self._track(f"rank({member!r})", lambda raw: None if raw is None else int(raw))

    async def commit(self) -> List[Any]:
        self._ensure_open()
        self._committed = True
        if not self._pending:
            return []

        raw_results = await self._execute()
        values = [convert(raw) for (_, convert), raw in zip(self._pending, raw_results)]
        # Fill slots only after every conversion succeeded
        for (slot, _), value in zip(self._pending, values):
            slot._set(value)
        return values

    @property
    def committed(self) -> bool:
        return self._committed

    def __len__(self) -> int:
        return len(self._pending)

    def _ensure_open(self) -> None:
        if self._committed:
            raise RuntimeError("Batch has already been committed")

    def _track(self, command: str, convert: Callable[[Any], Any]) -> BatchResult:
        slot = BatchResult(command)
        self._pending.append((slot, convert))
        return slot

    @abstractmethod
    def _queue_upsert(self, member: str, score: float) -> None: ...

    @abstractmethod
    def _queue_score(self, member: str) -> None: ...

    @abstractmethod
    def _queue_rank(self, member: str) -> None: ...

    @abstractmethod
    async def _execute(self) -> List[Any]:
        """Run the queued commands atomically and return their raw results in order."""


class OrderedScoreSet(ABC):
    """
    Keyed collection of unique members, each with a numeric score,
    ordered ascending by (score, member).
    """

    @abstractmethod
    async def upsert(self, member: str, score: float) -> None: ...

    @abstractmethod
    async def get_score(self, member: str) -> float:
        """Raises NotFound if the member was never upserted."""

    @abstractmethod
    async def get_rank(self, member: str) -> int:
        """Zero-based ascending position. Raises NotFound if the member is absent."""

    @abstractmethod
    async def get_all_ordered(self) -> List[ScoreEntry]:
        """All entries ascending by score; an empty list when the set is empty."""

    @abstractmethod
    def batch(self) -> AsyncContextManager[ScoreSetBatch]:
        """Async context manager yielding a fresh ScoreSetBatch."""


@contextmanager
def _backing_store_errors(operation: str):
    try:
        yield
    except RedisError as exc:
        logger.error(f"Redis {operation} failed: {type(exc).__name__}: {exc}")
        raise BackingStoreError(f"Backing store {operation} failed: {exc}", cause=exc) from exc


def _member_str(member: Any) -> str:
    # Clients created without decode_responses hand back bytes
    if isinstance(member, bytes):
        return member.decode("utf-8")
    return str(member)


class RedisScoreSetBatch(ScoreSetBatch):
    """ScoreSetBatch over a MULTI/EXEC pipeline on a single sorted-set key."""

    def __init__(self, pipe: Pipeline, key: str):
        super().__init__()
        self._pipe = pipe
        self._key = key

    def _queue_upsert(self, member: str, score: float) -> None:
        self._pipe.zadd(self._key, {member: score})

    def _queue_score(self, member: str) -> None:
        self._pipe.zscore(self._key, member)

    def _queue_rank(self, member: str) -> None:
        self._pipe.zrank(self._key, member)

    async def _execute(self) -> List[Any]:
        with _backing_store_errors(f"transaction on '{self._key}'"):
            return await self._pipe.execute()


class RedisOrderedScoreSet(OrderedScoreSet):
    """OrderedScoreSet stored as one Redis sorted set."""

    def __init__(self, client: Redis, key: str = "leaderboard"):
        self._client = client
        self.key = key

    async def upsert(self, member: str, score: float) -> None:
        with _backing_store_errors(f"ZADD on '{self.key}'"):
            await self._client.zadd(self.key, {member: score})
        logger.debug(f"Upserted '{member}' with score {score} into '{self.key}'")

    async def get_score(self, member: str) -> float:
        with _backing_store_errors(f"ZSCORE on '{self.key}'"):
            score = await self._client.zscore(self.key, member)
        if score is None:
            raise NotFound(member)
        return float(score)

    async def get_rank(self, member: str) -> int:
        with _backing_store_errors(f"ZRANK on '{self.key}'"):
            rank = await self._client.zrank(self.key, member)
        if rank is None:
            raise NotFound(member)
        return int(rank)

    async def get_all_ordered(self) -> List[ScoreEntry]:
        with _backing_store_errors(f"ZRANGE on '{self.key}'"):
            rows = await self._client.zrange(self.key, 0, -1, withscores=True)
        return [ScoreEntry(member=_member_str(member), score=float(score)) for member, score in rows]

    @asynccontextmanager
    async def batch(self) -> AsyncIterator[RedisScoreSetBatch]:
        async with self._client.pipeline(transaction=True) as pipe:
            yield RedisScoreSetBatch(pipe, self.key)
