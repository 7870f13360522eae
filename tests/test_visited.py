import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from site_mirror.crawler.limiter import AdmissionLimiter
from site_mirror.crawler.visited import VisitedSet


def test_claim_once():
    visited = VisitedSet()
    assert visited.try_claim("http://site/a") is True
    assert visited.try_claim("http://site/a") is False
    assert "http://site/a" in visited
    assert len(visited) == 1


def test_two_concurrent_claims_yield_one_winner():
    visited = VisitedSet()
    barrier = threading.Barrier(2)

    def claim():
        barrier.wait()
        return visited.try_claim("http://site/a")

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: claim(), range(2)))
    assert sorted(results) == [False, True]


def test_many_threads_many_urls():
    visited = VisitedSet()
    urls = [f"http://site/{i % 10}" for i in range(200)]
    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(visited.try_claim, urls))
    assert results.count(True) == 10
    assert list(visited) == sorted(set(urls))


@pytest.mark.asyncio()
async def test_limiter_bounds_outstanding_tokens():
    limiter = AdmissionLimiter(2)
    running = 0
    peak = 0

    async def job():
        nonlocal running, peak
        await limiter.acquire()
        try:
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
        finally:
            limiter.release()

    await asyncio.gather(*(job() for _ in range(10)))
    assert peak == 2
    assert limiter.peak == 2
    assert limiter.outstanding == 0


@pytest.mark.asyncio()
async def test_limiter_blocks_until_release():
    limiter = AdmissionLimiter(1)
    await limiter.acquire()
    waiter = asyncio.create_task(limiter.acquire())
    await asyncio.sleep(0)
    assert not waiter.done()
    limiter.release()
    await asyncio.wait_for(waiter, timeout=1)
    assert limiter.outstanding == 1
    limiter.release()


def test_limiter_release_without_acquire():
    with pytest.raises(RuntimeError):
        AdmissionLimiter(3).release()


def test_limiter_rejects_zero_capacity():
    with pytest.raises(ValueError):
        AdmissionLimiter(0)
