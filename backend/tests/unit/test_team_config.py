"""
Unit tests for team configuration loading, caching and phases.
"""

import asyncio

import httpx
import pytest

from archefc.schemas import TeamConfig
from archefc.services.fff import (
    Phase,
    TeamConfigProvider,
    backend_team_config_loader,
    phase_for_category,
)

from tests.conftest import make_team_configs


class CountingLoader:
    def __init__(self, configs=None, error=None) -> None:
        self.configs = configs if configs is not None else make_team_configs(4)
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.configs


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestPhaseLookup:
    """Tests for phase_for_category."""

    @pytest.mark.parametrize("category", ["jeune", "Jeune", " JEUNE "])
    def test_youth(self, category):
        assert phase_for_category(category) == Phase.YOUTH

    @pytest.mark.parametrize("category", ["SENIOR", "senior", "veteran", "", None])
    def test_senior_default(self, category):
        assert phase_for_category(category) == Phase.SENIOR

    def test_phase_values(self):
        assert int(Phase.SENIOR) == 1
        assert int(Phase.YOUTH) == 2


class TestTeamConfigProvider:
    """Tests for TeamConfigProvider."""

    @pytest.mark.asyncio
    async def test_cached_within_ttl(self):
        loader = CountingLoader()
        clock = FakeClock()
        provider = TeamConfigProvider(loader, ttl_seconds=300, clock=clock)

        await provider.get_all()
        clock.now = 299
        await provider.get_all()
        assert loader.calls == 1

        clock.now = 300
        await provider.get_all()
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_load(self):
        loader = CountingLoader()
        provider = TeamConfigProvider(loader)

        results = await asyncio.gather(*(provider.get_all() for _ in range(5)))

        assert loader.calls == 1
        assert all(len(r) == 4 for r in results)

    @pytest.mark.asyncio
    async def test_failure_returns_empty_and_is_not_cached(self):
        loader = CountingLoader(error=RuntimeError("backend down"))
        provider = TeamConfigProvider(loader)

        assert await provider.get_all() == []

        loader.error = None
        assert len(await provider.get_all()) == 4
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_get_by_one_based_index(self):
        provider = TeamConfigProvider(CountingLoader())

        assert (await provider.get(1)).id == "team-1"
        assert (await provider.get(4)).id == "team-4"
        assert await provider.get(5) is None
        assert await provider.get(0) is None

    @pytest.mark.asyncio
    async def test_clear_forces_reload(self):
        loader = CountingLoader()
        provider = TeamConfigProvider(loader)

        await provider.get_all()
        provider.clear()
        await provider.get_all()
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_load_running_during_clear_is_not_kept(self):
        started = asyncio.Event()
        release = asyncio.Event()
        pending = [make_team_configs(2), make_team_configs(3)]

        async def loader():
            configs = pending.pop(0)
            if len(configs) == 2:
                started.set()
                await release.wait()
            return configs

        provider = TeamConfigProvider(loader)
        in_flight = asyncio.ensure_future(provider.get_all())
        await started.wait()

        provider.clear()
        assert len(await provider.get_all()) == 3

        release.set()
        assert len(await in_flight) == 2
        assert len(await provider.get_all()) == 3


class TestBackendLoader:
    """Tests for loading configurations from the REST API."""

    @pytest.mark.asyncio
    async def test_reads_camel_case_payload(self):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json=[
                {"id": "a1", "competId": "436121", "pouleId": "4", "category": "SENIOR"},
                {"id": "b2", "competId": "500001", "pouleId": "1"},
            ])

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            load = backend_team_config_loader("http://backend.test/api/", client=client)
            configs = await load()

        assert requested == ["http://backend.test/api/teams/fff-config"]
        assert configs == [
            TeamConfig(id="a1", competition_id="436121", poule_id="4", category="SENIOR"),
            TeamConfig(id="b2", competition_id="500001", poule_id="1", category=""),
        ]

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            load = backend_team_config_loader("http://backend.test/api", client=client)
            with pytest.raises(httpx.HTTPStatusError):
                await load()
