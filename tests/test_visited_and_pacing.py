from __future__ import annotations

import asyncio

from product_crawler.engines.pacing import RequestPacer
from product_crawler.engines.visited import VisitedRegistry


def test_try_mark_claims_each_url_once():
    registry = VisitedRegistry()

    assert registry.try_mark("https://shop.test/a") is True
    assert registry.try_mark("https://shop.test/a") is False
    assert registry.try_mark("https://shop.test/b") is True

    assert len(registry) == 2
    assert "https://shop.test/a" in registry
    assert set(registry) == {"https://shop.test/a", "https://shop.test/b"}


def test_concurrent_claims_admit_a_single_winner():
    registry = VisitedRegistry()

    async def claim():
        await asyncio.sleep(0)
        return registry.try_mark("https://shop.test/a")

    async def run():
        return await asyncio.gather(*(claim() for _ in range(20)))

    assert sum(asyncio.run(run())) == 1


def test_pacer_spaces_request_starts():
    now = [100.0]
    slept = []

    async def sleep(seconds):
        slept.append(seconds)
        now[0] += seconds

    pacer = RequestPacer(1.0, sleep=sleep, clock=lambda: now[0])

    async def run():
        await pacer.wait()
        await pacer.wait()
        now[0] += 0.25
        await pacer.wait()
        now[0] += 5.0
        await pacer.wait()

    asyncio.run(run())

    assert slept == [1.0, 0.75]


def test_zero_interval_never_sleeps():
    slept = []

    async def sleep(seconds):
        slept.append(seconds)

    pacer = RequestPacer(0.0, sleep=sleep)

    async def run():
        for _ in range(3):
            await pacer.wait()

    asyncio.run(run())
    assert slept == []


def test_sequential_pacer_waits_the_full_interval_every_time():
    now = [100.0]
    slept = []

    async def sleep(seconds):
        slept.append(seconds)
        now[0] += seconds

    pacer = RequestPacer(0.5, sequential=True, sleep=sleep, clock=lambda: now[0])

    async def run():
        await pacer.wait()
        now[0] += 3.0  # a slow fetch
        await pacer.wait()
        await pacer.wait()

    asyncio.run(run())

    assert slept == [0.5, 0.5]
