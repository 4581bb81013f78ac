"""Tests for ordered concurrent profile fetching."""

import asyncio
import random

import pytest

from conftest import make_profile, make_submission
from core.fetcher import attach_profiles, fetch_ordered
from utils.error_handler import APIError, MissingUserIdError


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, 1, 7, 60])
async def test_results_follow_input_order_under_random_latency(count: int) -> None:
    rng = random.Random(count)
    delays = {i: rng.uniform(0, 0.02) for i in range(count)}
    completed = []

    async def fetch(key: int) -> str:
        await asyncio.sleep(delays[key])
        completed.append(key)
        return f"profile-{key}"

    keys = list(range(count))
    results = await fetch_ordered(fetch, keys)

    assert results == [f"profile-{k}" for k in keys]
    assert sorted(completed) == keys


@pytest.mark.asyncio
async def test_reversed_completion_order_still_ordered() -> None:
    async def fetch(key: int) -> int:
        await asyncio.sleep(0.001 * (10 - key))
        return key * 10

    assert await fetch_ordered(fetch, list(range(10))) == [k * 10 for k in range(10)]


@pytest.mark.asyncio
async def test_first_failure_propagates() -> None:
    async def fetch(key: int) -> int:
        await asyncio.sleep(0.001)
        if key == 3:
            raise APIError("profile lookup failed", status_code=404, service="canvas")
        return key

    with pytest.raises(APIError, match="profile lookup failed"):
        await fetch_ordered(fetch, list(range(6)))


@pytest.mark.asyncio
async def test_concurrency_limit_is_respected() -> None:
    in_flight = 0
    peak = 0

    async def fetch(key: int) -> int:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.002)
        in_flight -= 1
        return key

    results = await fetch_ordered(fetch, list(range(20)), max_concurrency=3)

    assert results == list(range(20))
    assert peak <= 3


@pytest.mark.asyncio
async def test_unbounded_fetch_runs_all_at_once() -> None:
    in_flight = 0
    peak = 0

    async def fetch(key: int) -> int:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.002)
        in_flight -= 1
        return key

    await fetch_ordered(fetch, list(range(8)))
    assert peak == 8


@pytest.mark.asyncio
async def test_attach_profiles_pairs_by_position() -> None:
    names = {7: "Zeta, Ann", 3: "Alpha, Bob", 5: "Mid, Cy"}
    submissions = [make_submission(1, 7), make_submission(2, 3), make_submission(3, 5)]

    async def resolve(user_id: int):
        await asyncio.sleep(0.001 * user_id)
        return make_profile(user_id, names[user_id])

    roster = await attach_profiles(submissions, resolve)

    assert [e.submission.id for e in roster] == [1, 2, 3]
    assert [e.user_profile.id for e in roster] == [7, 3, 5]
    assert all(e.submission.user_id == e.user_profile.id for e in roster)


@pytest.mark.asyncio
async def test_missing_user_id_rejected_before_any_request() -> None:
    calls = []

    async def resolve(user_id: int):
        calls.append(user_id)
        return make_profile(user_id, "Doe, Jane")

    submissions = [make_submission(1, 4), make_submission(2, None)]

    with pytest.raises(MissingUserIdError) as excinfo:
        await attach_profiles(submissions, resolve)

    assert excinfo.value.submission_id == 2
    assert calls == []
