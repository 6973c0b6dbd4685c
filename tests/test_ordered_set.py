import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.modules.leaderboard.errors import BackingStoreError, NotFound
from src.modules.leaderboard.ordered_set import RedisOrderedScoreSet, ScoreEntry


@pytest.mark.asyncio
async def test_get_all_ordered_on_empty_set_is_empty(scores):
    assert await scores.get_all_ordered() == []


@pytest.mark.parametrize(
    "submitted",
    [
        {"alice": 3, "bob": 1, "cara": 2},
        {"m1": -5, "m2": 0, "m3": 42, "m4": -100, "m5": 7},
        {"solo": 0},
    ],
)
@pytest.mark.asyncio
async def test_ordering_and_rank_agree(scores, submitted):
    for member, score in submitted.items():
        await scores.upsert(member, score)

    entries = await scores.get_all_ordered()
    assert [entry.score for entry in entries] == sorted(submitted.values())
    for idx, entry in enumerate(entries):
        assert await scores.get_rank(entry.member) == idx
        assert await scores.get_score(entry.member) == submitted[entry.member]


@pytest.mark.asyncio
async def test_ties_are_ordered_by_member(scores):
    await scores.upsert("zed", 10)
    await scores.upsert("amy", 10)
    await scores.upsert("bo", 5)

    assert await scores.get_all_ordered() == [
        ScoreEntry("bo", 5.0),
        ScoreEntry("amy", 10.0),
        ScoreEntry("zed", 10.0),
    ]


@pytest.mark.asyncio
async def test_upsert_overwrites_score(scores, redis_client):
    await scores.upsert("d", 5)
    await scores.upsert("d", 50)

    assert await scores.get_score("d") == 50.0
    assert await redis_client.zcard("leaderboard") == 1


@pytest.mark.asyncio
async def test_missing_member_raises_not_found(scores):
    with pytest.raises(NotFound) as score_exc:
        await scores.get_score("ghost")
    with pytest.raises(NotFound):
        await scores.get_rank("ghost")
    assert score_exc.value.member == "ghost"


@pytest.mark.asyncio
async def test_batch_commits_writes_and_reads_together(scores):
    await scores.upsert("low", 1)

    async with scores.batch() as batch:
        write = batch.upsert("mid", 2)
        score = batch.score("mid")
        rank = batch.rank("mid")
        assert len(batch) == 3
        results = await batch.commit()

    assert results == [None, 2.0, 1]
    assert write.value is None
    assert score.value == 2.0
    assert rank.value == 1


@pytest.mark.asyncio
async def test_batch_reads_of_absent_member_are_none(scores):
    async with scores.batch() as batch:
        score = batch.score("ghost")
        rank = batch.rank("ghost")
        await batch.commit()

    assert score.value is None
    assert rank.value is None


@pytest.mark.asyncio
async def test_batch_result_unreadable_before_commit(scores):
    async with scores.batch() as batch:
        rank = batch.rank("x")
        assert not rank.ready
        with pytest.raises(RuntimeError):
            rank.value


@pytest.mark.asyncio
async def test_batch_commits_only_once(scores):
    async with scores.batch() as batch:
        batch.upsert("a", 1)
        await batch.commit()
        assert batch.committed
        with pytest.raises(RuntimeError):
            await batch.commit()
        with pytest.raises(RuntimeError):
            batch.rank("a")


@pytest.mark.asyncio
async def test_empty_batch_commit_returns_nothing(scores):
    async with scores.batch() as batch:
        assert await batch.commit() == []


@pytest.mark.asyncio
async def test_uncommitted_batch_is_discarded(scores):
    async with scores.batch() as batch:
        batch.upsert("never", 1)

    assert await scores.get_all_ordered() == []


@pytest.mark.asyncio
async def test_failed_commit_raises_backing_store_error_and_fills_nothing(make_failing_client):
    scores = RedisOrderedScoreSet(make_failing_client(RedisConnectionError("connection refused")))

    async with scores.batch() as batch:
        batch.upsert("a", 1)
        rank = batch.rank("a")
        with pytest.raises(BackingStoreError) as exc_info:
            await batch.commit()

    assert exc_info.value.retryable is True
    assert isinstance(exc_info.value.cause, RedisConnectionError)
    assert not rank.ready


@pytest.mark.asyncio
async def test_single_commands_wrap_transport_failures(make_failing_client):
    scores = RedisOrderedScoreSet(make_failing_client(RedisConnectionError("timeout")))

    with pytest.raises(BackingStoreError):
        await scores.upsert("a", 1)
    with pytest.raises(BackingStoreError):
        await scores.get_score("a")
    with pytest.raises(BackingStoreError):
        await scores.get_rank("a")
    with pytest.raises(BackingStoreError):
        await scores.get_all_ordered()
