"""Concurrent profile resolution that keeps results in submission order."""

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

import config
from core.models import Submission, UserProfile, UserSubmission
from utils.error_handler import MissingUserIdError
from utils.logger import get_logger

logger = get_logger()

K = TypeVar('K')
R = TypeVar('R')


async def fetch_ordered(
    fetch: Callable[[K], Awaitable[R]],
    keys: Sequence[K],
    max_concurrency: Optional[int] = None,
) -> List[R]:
    """Runs ``fetch`` for every key concurrently and returns results in key order.

    Each task writes into the buffer slot of its key's position, so the
    completion order of the requests does not matter. The first failure is
    re-raised and no partial list is returned.

    Args:
        fetch: Coroutine function called once per key.
        keys: Keys in the order the results should come back in.
        max_concurrency: Maximum number of in-flight calls. None or 0 means unbounded.

    Returns:
        A list where element i is the result for keys[i].
    """
    results: List[Optional[R]] = [None] * len(keys)
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def run(index: int, key: K) -> None:
        if semaphore is None:
            results[index] = await fetch(key)
            return
        async with semaphore:
            results[index] = await fetch(key)

    await asyncio.gather(*(run(i, key) for i, key in enumerate(keys)))
    return results  # type: ignore[return-value]


async def attach_profiles(
    submissions: Sequence[Submission],
    resolve_profile: Callable[[int], Awaitable[UserProfile]],
    max_concurrency: Optional[int] = None,
) -> List[UserSubmission]:
    """Pairs every submission with the profile of the user who owns it.

    Raises:
        MissingUserIdError: If any submission lacks a user id. Checked before any request is sent.
        APIError: The first profile request that failed.
    """
    for submission in submissions:
        if submission.user_id is None:
            raise MissingUserIdError(
                f"Submission {submission.id} has no owning user id.",
                submission_id=submission.id,
            )

    if max_concurrency is None:
        max_concurrency = config.MAX_CONCURRENCY

    logger.info(f"Resolving {len(submissions)} user profiles (max concurrency: {max_concurrency or 'unbounded'})...")
    profiles = await fetch_ordered(resolve_profile, [s.user_id for s in submissions], max_concurrency)
    logger.info(f"Resolved {len(profiles)} user profiles.")

    return [
        UserSubmission(submission=submission, user_profile=profile)
        for submission, profile in zip(submissions, profiles)
    ]
