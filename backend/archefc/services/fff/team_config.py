"""
Team configuration provider.
Resolves the FFF coordinates of the club's teams, with its own TTL cache and
a single shared fetch for concurrent callers.
"""
import asyncio
import time
from typing import Awaitable, Callable, List, Optional
import logging

import httpx
from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from archefc.schemas import TeamConfig
from archefc.services.repository import TeamRepository
from .single_flight import SingleFlight

logger = logging.getLogger(__name__)

TeamConfigLoader = Callable[[], Awaitable[List[TeamConfig]]]

_TEAM_CONFIG_LIST = TypeAdapter(List[TeamConfig])


class TeamConfigProvider:
    """
    Cached access to the ordered TeamConfig list.

    Team indexes used by the FFF accessors are 1-based positions in this
    list. A failed load is logged and returns an empty list; the failure is
    not cached, so the next call tries again.
    """

    CACHE_KEY = "teams_config"
    DEFAULT_TTL_SECONDS = 5 * 60  # 5 minutes

    def __init__(
        self,
        loader: TeamConfigLoader,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._configs: Optional[List[TeamConfig]] = None
        self._loaded_at = 0.0
        self._single_flight = SingleFlight()
        self._generation = 0

    async def get_all(self) -> List[TeamConfig]:
        """Return every team configuration, loading it when the cache is stale."""
        if self._configs is not None and self._clock() - self._loaded_at < self.ttl_seconds:
            return self._configs
        return await self._single_flight.do(self.CACHE_KEY, self._load)

    async def get(self, team_index: int) -> Optional[TeamConfig]:
        """Return the configuration at a 1-based index, or None."""
        configs = await self.get_all()
        if team_index < 1 or team_index > len(configs):
            return None
        return configs[team_index - 1]

    def clear(self) -> None:
        """Forget the cached list; the next call reloads it, even if a load is running."""
        self._generation += 1
        self._single_flight.clear()
        self._configs = None
        self._loaded_at = 0.0

    async def _load(self) -> List[TeamConfig]:
        generation = self._generation
        try:
            configs = list(await self._loader())
        except Exception as e:
            logger.error(f"Failed to load team configuration: {str(e)}")
            return []
        if generation == self._generation:
            self._configs = configs
            self._loaded_at = self._clock()
        logger.info(f"Loaded {len(configs)} team configuration(s)")
        return configs


def backend_team_config_loader(
    backend_url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 10.0,
) -> TeamConfigLoader:
    """
    Build a loader reading `/teams/fff-config` from the club REST API.

    Args:
        backend_url: API root for the current environment (settings.backend_url)
        client: Optional httpx client (tests pass one with a mock transport)
        timeout: Request timeout in seconds
    """
    url = f"{backend_url.rstrip('/')}/teams/fff-config"

    async def load() -> List[TeamConfig]:
        if client is not None:
            response = await client.get(url, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.get(url)
        response.raise_for_status()
        return _TEAM_CONFIG_LIST.validate_python(response.json())

    return load


def database_team_config_loader(session_factory: Callable[[], Session]) -> TeamConfigLoader:
    """
    Build a loader reading team configurations straight from the database.

    The query runs in a worker thread so the event loop is not blocked.
    """
    def query() -> List[TeamConfig]:
        db = session_factory()
        try:
            return TeamRepository(db).list_fff_configs()
        finally:
            db.close()

    async def load() -> List[TeamConfig]:
        return await asyncio.to_thread(query)

    return load
