"""
FFF API Service
Main orchestrator for the federation API: standings, matches and club data.
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional
import logging

import httpx

from archefc.exceptions import ConfigurationNotFoundError, ExternalAPIError, NotFoundError
from archefc.schemas import TeamConfig
from .cache import InMemoryCache
from .client import FFFHTTPClient
from .queue import RequestQueue
from .phases import Phase, phase_for_category
from .single_flight import SingleFlight
from .team_config import TeamConfigLoader, TeamConfigProvider

logger = logging.getLogger(__name__)

SCHEDULED_STATUS = "A"


def normalize_match(match: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of an upstream match with missing scores as 0 and missing status as scheduled."""
    return {
        **match,
        "home_score": match.get("home_score") or 0,
        "away_score": match.get("away_score") or 0,
        "status": match.get("status") or SCHEDULED_STATUS,
    }


def has_next_page(payload: Dict[str, Any]) -> bool:
    view = payload.get("hydra:view") or {}
    return bool(view.get("hydra:next"))


class FFFAPIService:
    """
    FFF API Service with caching and single-flight de-duplication.

    Orchestrates data fetching using modular components:
    - FFFHTTPClient: HTTP requests with queuing and retry
    - InMemoryCache: TTL-based response caching
    - SingleFlight: one upstream call per key for concurrent callers
    - TeamConfigProvider: FFF coordinates of the club's teams

    Every accessor reads the cache before touching the network; a hit
    skips the request entirely, retries included.
    """

    def __init__(
        self,
        client: FFFHTTPClient,
        cache: InMemoryCache,
        team_configs: TeamConfigProvider,
        matches_timeout: float = 100.0,
        default_timeout: float = 10.0,
        max_match_pages: int = 50,
    ) -> None:
        """
        Initialize FFF API service.

        Args:
            client: HTTP client for the FFF API
            cache: Response cache shared by all accessors
            team_configs: Team configuration provider
            matches_timeout: Timeout for each competition matches page
            default_timeout: Timeout for standings and club calls
            max_match_pages: Upper bound on pages followed for one poule
        """
        self.client = client
        self.cache = cache
        self.team_configs = team_configs
        self.matches_timeout = matches_timeout
        self.default_timeout = default_timeout
        self.max_match_pages = max_match_pages
        self._single_flight = SingleFlight()
        # Bumped by clear_cache(); fetches started earlier must not repopulate the cache
        self._generation = 0

    async def _cached(self, cache_key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        cached_data = await self.cache.get(cache_key)
        if cached_data is not None:
            logger.debug(f"Cache hit: {cache_key}")
            return cached_data

        generation = self._generation

        async def fetch_and_store() -> Any:
            data = await fetch()
            if generation == self._generation:
                await self.cache.set(cache_key, data)
            else:
                logger.debug(f"Discarding result fetched before cache clear: {cache_key}")
            return data

        return await self._single_flight.do(cache_key, fetch_and_store)

    async def _require_team_config(self, team_index: int) -> TeamConfig:
        team_config = await self.team_configs.get(team_index)
        if team_config is None:
            raise ConfigurationNotFoundError(team_index)
        return team_config

    # ==================== Competition ====================

    async def get_competition_matches(
        self, competition_id: str, poule_id: str, category: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch every match of a competition poule, following pagination.

        Args:
            competition_id: FFF competition number
            poule_id: Poule (group) number within the competition
            category: Team category; "jeune" selects the youth phase

        Returns:
            Matches of all pages in page order, normalized
        """
        phase = phase_for_category(category)
        cache_key = f"competition_matches_{competition_id}_{poule_id}_{int(phase)}"

        async def fetch() -> List[Dict[str, Any]]:
            endpoint = (
                f"compets/{competition_id}/phases/{int(phase)}/poules/{poule_id}/matchs"
            )
            all_matches: List[Dict[str, Any]] = []
            page = 1
            while True:
                payload = await self.client.get(
                    endpoint, params={"page": page}, timeout=self.matches_timeout
                )
                all_matches.extend(
                    normalize_match(match) for match in payload.get("hydra:member", [])
                )
                if not has_next_page(payload):
                    break
                if page >= self.max_match_pages:
                    raise ExternalAPIError(
                        FFFHTTPClient.SERVICE_NAME,
                        f"{endpoint} still reports a next page after {page} pages",
                        details={"endpoint": endpoint, "pages": page},
                    )
                page += 1

            logger.info(
                f"Fetched {len(all_matches)} matches for competition {competition_id} "
                f"poule {poule_id} phase {int(phase)} ({page} page(s))"
            )
            return all_matches

        return await self._cached(cache_key, fetch)

    # ==================== Standings ====================

    async def get_team_classement(self, team_index: int) -> List[Dict[str, Any]]:
        """
        Fetch the standings of the poule a club team plays in.

        Args:
            team_index: 1-based position of the team in the team configuration

        Returns:
            Standing rows (rank, team, points, wins/draws/losses, goal difference)

        Raises:
            ConfigurationNotFoundError: If no team is configured at that index
        """
        team_config = await self._require_team_config(team_index)
        phase: Phase = phase_for_category(team_config.category)
        cache_key = f"classement_{team_index}_{int(phase)}"

        async def fetch() -> List[Dict[str, Any]]:
            payload = await self.client.get(
                f"compets/{team_config.competition_id}/phases/{int(phase)}"
                f"/poules/{team_config.poule_id}/classement_journees",
                params={"page": 1},
                timeout=self.default_timeout,
            )
            return payload.get("hydra:member", [])

        return await self._cached(cache_key, fetch)

    async def get_all_teams_classement(self) -> Dict[int, List[Dict[str, Any]]]:
        """
        Fetch standings for every configured team.

        A team whose fetch fails gets an empty list; the others are unaffected.

        Returns:
            Mapping of 1-based team index to standing rows
        """
        team_configs = await self.team_configs.get_all()
        indexes = list(range(1, len(team_configs) + 1))

        results = await asyncio.gather(
            *(self.get_team_classement(index) for index in indexes),
            return_exceptions=True,
        )

        classements: Dict[int, List[Dict[str, Any]]] = {}
        for index, result in zip(indexes, results):
            if isinstance(result, BaseException):
                logger.error(f"Failed to fetch standings for team {index}: {str(result)}")
                classements[index] = []
            else:
                classements[index] = result
        return classements

    # ==================== Clubs ====================

    async def get_club_info(self, club_id: int) -> Dict[str, Any]:
        """Fetch a club's general information."""
        return await self._cached(
            f"club_info_{club_id}",
            lambda: self.client.get(f"clubs/{club_id}", timeout=self.default_timeout),
        )

    async def get_club_results(self, club_id: int) -> Dict[str, Any]:
        """Fetch the first page of a club's latest results."""
        return await self._cached(
            f"club_results_{club_id}",
            lambda: self.client.get(
                f"clubs/{club_id}/resultat", params={"page": 1}, timeout=self.default_timeout
            ),
        )

    async def get_club_calendar(self, club_id: int) -> Dict[str, Any]:
        """Fetch the first page of a club's upcoming matches."""
        return await self._cached(
            f"club_calendar_{club_id}",
            lambda: self.client.get(
                f"clubs/{club_id}/calendrier", params={"page": 1}, timeout=self.default_timeout
            ),
        )

    async def get_team_details(self, team_index: int) -> Dict[str, Any]:
        """
        Fetch club info, results and calendar for a configured team.

        The club number is read from the first row of the team's standings.

        Args:
            team_index: 1-based position of the team in the team configuration

        Returns:
            Dictionary with keys clubInfo, results and calendar

        Raises:
            ConfigurationNotFoundError: If no team is configured at that index
            NotFoundError: If the team's standings are empty
        """
        await self._require_team_config(team_index)

        classement = await self.get_team_classement(team_index)
        if not classement:
            raise NotFoundError("Standings", f"team {team_index}")

        try:
            club_id = classement[0]["equipe"]["club"]["cl_no"]
        except (KeyError, TypeError):
            raise NotFoundError("Club number", f"team {team_index}")

        club_info, results, calendar = await asyncio.gather(
            self.get_club_info(club_id),
            self.get_club_results(club_id),
            self.get_club_calendar(club_id),
        )

        return {
            "clubInfo": club_info,
            "results": results,
            "calendar": calendar,
        }

    # ==================== Maintenance ====================

    async def clear_cache(self) -> None:
        """
        Drop cached responses and the cached team configuration.

        Requests already in flight still answer their current callers, but
        their results are not cached and new callers do not join them.
        """
        self._generation += 1
        self._single_flight.clear()
        await self.cache.clear()
        self.team_configs.clear()

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.close()


def build_fff_service(
    config,
    team_config_loader: TeamConfigLoader,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FFFAPIService:
    """
    Wire an FFFAPIService from application settings.

    Args:
        config: Settings instance (archefc.core.config.settings)
        team_config_loader: Source of the team configurations
        http_client: Optional pre-built httpx client
    """
    queue = None
    if config.FFF_USE_REQUEST_QUEUE:
        queue = RequestQueue(
            max_concurrent=config.FFF_MAX_CONCURRENT_REQUESTS,
            delay_seconds=config.FFF_REQUEST_DELAY_SECONDS,
        )

    client = FFFHTTPClient(
        base_url=config.FFF_API_URL,
        queue=queue,
        max_attempts=config.FFF_MAX_ATTEMPTS,
        retry_delay=config.FFF_RETRY_DELAY_SECONDS,
        default_timeout=config.FFF_DEFAULT_TIMEOUT,
        client=http_client,
    )

    return FFFAPIService(
        client=client,
        cache=InMemoryCache(ttl_seconds=config.FFF_CACHE_TTL_SECONDS),
        team_configs=TeamConfigProvider(
            team_config_loader, ttl_seconds=config.TEAM_CONFIG_CACHE_TTL_SECONDS
        ),
        matches_timeout=config.FFF_MATCHES_TIMEOUT,
        max_match_pages=config.FFF_MAX_MATCH_PAGES,
        default_timeout=config.FFF_DEFAULT_TIMEOUT,
    )
