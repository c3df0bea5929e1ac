"""
Pytest configuration and fixtures for the Arche FC backend.

This module provides:
- Function-scoped database sessions on an in-memory SQLite database
- A fake FFF upstream served through httpx.MockTransport
- An FFF service factory wired to the fake upstream
- Async client fixture for FastAPI endpoint testing
"""

import os
import asyncio
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

# Set test mode before importing app modules
os.environ["MODE"] = "TEST"
os.environ["TEST_DATABASE_URL"] = "sqlite://"

from archefc.core.config import settings  # noqa: E402
from archefc.core.security import create_access_token, hash_password  # noqa: E402
from archefc.database import Base, SessionLocal, engine  # noqa: E402
from archefc.models import User  # noqa: E402
from archefc.schemas import TeamConfig  # noqa: E402
from archefc.services.fff import (  # noqa: E402
    FFFAPIService,
    FFFHTTPClient,
    InMemoryCache,
    RequestQueue,
    TeamConfigProvider,
)

FFF_BASE_URL = "https://fff.test/api"
CONNECT_ERROR = "connect-error"


# ============================================================================
# Fake upstream
# ============================================================================


class FakeUpstream:
    """
    Scripted FFF API for httpx.MockTransport.

    Responses are registered per path relative to the API root, optionally
    per page ("path?page=2"). Each registered response is used once, the
    last one repeats. Every request is recorded as (path, page).
    """

    def __init__(self) -> None:
        self.routes: Dict[str, List[Any]] = {}
        self.calls: List[Tuple[str, Optional[str]]] = []

    def add(self, key: str, *responses: Any) -> "FakeUpstream":
        """Register responses: (status, body) tuples or CONNECT_ERROR."""
        self.routes[key] = list(responses)
        return self

    def count(self, path: str) -> int:
        return sum(1 for called_path, _ in self.calls if called_path == path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/")
        page = request.url.params.get("page")
        self.calls.append((path, page))

        key = f"{path}?page={page}"
        if key not in self.routes:
            key = path
        if key not in self.routes:
            return httpx.Response(404, json={"detail": "Not found"})

        responses = self.routes[key]
        item = responses.pop(0) if len(responses) > 1 else responses[0]
        if item == CONNECT_ERROR:
            raise httpx.ConnectError("connection refused", request=request)
        status, body = item
        return httpx.Response(status, json=body)


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays without waiting."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


def hydra(members: List[Any], next_page: Optional[str] = None) -> Dict[str, Any]:
    """Build a Hydra collection envelope as returned by the FFF API."""
    view = {"@id": "/current", "@type": "hydra:PartialCollectionView"}
    if next_page:
        view["hydra:next"] = next_page
    return {"hydra:member": members, "hydra:totalItems": len(members), "hydra:view": view}


def standing_row(rank: int, name: str, club_no: int, points: int = 0) -> Dict[str, Any]:
    return {
        "rank": rank,
        "equipe": {"short_name": name, "club": {"cl_no": club_no}},
        "point_count": points,
        "won_games_count": 0,
        "draw_games_count": 0,
        "lost_games_count": 0,
        "goals_diff": 0,
    }


def make_team_configs(count: int, category: str = "SENIOR") -> List[TeamConfig]:
    return [
        TeamConfig(
            id=f"team-{i}",
            competition_id=str(436120 + i),
            poule_id=str(i),
            category=category,
        )
        for i in range(1, count + 1)
    ]


# ============================================================================
# FFF fixtures
# ============================================================================


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
async def make_fff_client(upstream, sleep_recorder):
    """Factory for FFFHTTPClient instances talking to the fake upstream."""
    clients: List[FFFHTTPClient] = []

    def factory(queue: Optional[RequestQueue] = None, max_attempts: int = 3) -> FFFHTTPClient:
        client = FFFHTTPClient(
            base_url=FFF_BASE_URL,
            queue=queue,
            max_attempts=max_attempts,
            retry_delay=2.0,
            client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
            sleep=sleep_recorder,
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.close()


@pytest.fixture
def make_fff_service(make_fff_client):
    """Factory for FFFAPIService instances with a fixed team configuration."""

    def factory(team_configs: Optional[List[TeamConfig]] = None, **client_kwargs) -> FFFAPIService:
        configs = list(team_configs or [])

        async def loader() -> List[TeamConfig]:
            return configs

        return FFFAPIService(
            client=make_fff_client(**client_kwargs),
            cache=InMemoryCache(),
            team_configs=TeamConfigProvider(loader),
        )

    return factory


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def db_session():
    """
    Provide a database session on fresh tables.

    Tables are dropped after each test so nothing leaks between tests.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _create_user(db, username: str, role: str) -> User:
    user = User(username=username, password=hash_password("secret123"), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_headers(db_session) -> Dict[str, str]:
    admin = _create_user(db_session, "coach", "ADMIN")
    return {"Authorization": f"Bearer {create_access_token(admin.id, admin.role)}"}


@pytest.fixture
def user_headers(db_session) -> Dict[str, str]:
    user = _create_user(db_session, "supporter", "USER")
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


# ============================================================================
# FastAPI Test Client
# ============================================================================


@pytest.fixture
async def async_client(db_session, make_fff_client):
    """
    Provide an async HTTP client for testing FastAPI endpoints.

    The application lifespan is not run; the FFF service is wired to the
    fake upstream and reads team configurations from the test database.
    """
    from archefc.main import app
    from archefc.services.fff import database_team_config_loader

    app.state.fff_service = FFFAPIService(
        client=make_fff_client(),
        cache=InMemoryCache(),
        team_configs=TeamConfigProvider(database_team_config_loader(SessionLocal)),
    )

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    del app.state.fff_service


@pytest.fixture
def test_settings():
    """Provide test settings configuration."""
    return settings
