"""
Unit tests for the single-flight helper.
"""

import asyncio

import pytest

from archefc.services.fff import SingleFlight


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_call():
    flight = SingleFlight()
    calls = []
    release = asyncio.Event()

    async def fetch():
        calls.append(1)
        await release.wait()
        return {"teams": 4}

    waiters = [asyncio.ensure_future(flight.do("teams_config", fetch)) for _ in range(3)]
    await asyncio.sleep(0)
    assert "teams_config" in flight

    release.set()
    results = await asyncio.gather(*waiters)

    assert results == [{"teams": 4}] * 3
    assert len(calls) == 1
    assert "teams_config" not in flight


@pytest.mark.asyncio
async def test_distinct_keys_run_separately():
    flight = SingleFlight()
    calls = []

    async def fetch(key):
        calls.append(key)
        await asyncio.sleep(0)
        return key

    results = await asyncio.gather(
        flight.do("club_info_1", lambda: fetch("club_info_1")),
        flight.do("club_info_2", lambda: fetch("club_info_2")),
    )

    assert results == ["club_info_1", "club_info_2"]
    assert sorted(calls) == ["club_info_1", "club_info_2"]


@pytest.mark.asyncio
async def test_settled_key_starts_fresh():
    flight = SingleFlight()
    calls = []

    async def fetch():
        calls.append(1)
        return len(calls)

    assert await flight.do("k", fetch) == 1
    assert await flight.do("k", fetch) == 2


@pytest.mark.asyncio
async def test_error_reaches_every_waiter():
    flight = SingleFlight()
    calls = []

    async def fetch():
        calls.append(1)
        await asyncio.sleep(0)
        raise RuntimeError("boom")

    results = await asyncio.gather(
        flight.do("k", fetch), flight.do("k", fetch), return_exceptions=True
    )

    assert len(calls) == 1
    assert all(isinstance(r, RuntimeError) for r in results)
    assert "k" not in flight


@pytest.mark.asyncio
async def test_clear_detaches_running_call():
    flight = SingleFlight()
    release = asyncio.Event()
    calls = []

    async def fetch():
        calls.append(1)
        await release.wait()
        return "standings"

    first = asyncio.ensure_future(flight.do("k", fetch))
    await asyncio.sleep(0)
    assert "k" in flight

    flight.clear()
    assert "k" not in flight

    second = asyncio.ensure_future(flight.do("k", fetch))
    await asyncio.sleep(0)
    release.set()

    assert await asyncio.gather(first, second) == ["standings", "standings"]
    assert len(calls) == 2
    assert "k" not in flight
