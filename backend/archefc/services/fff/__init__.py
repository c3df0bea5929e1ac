"""
FFF API Service Module
Modular components for the federation API integration.
"""

from .cache import InMemoryCache
from .client import FFFHTTPClient
from .phases import Phase, phase_for_category
from .queue import RequestQueue
from .service import FFFAPIService, build_fff_service
from .single_flight import SingleFlight
from .team_config import (
    TeamConfigProvider,
    backend_team_config_loader,
    database_team_config_loader,
)

__all__ = [
    "InMemoryCache",
    "FFFHTTPClient",
    "Phase",
    "phase_for_category",
    "RequestQueue",
    "FFFAPIService",
    "SingleFlight",
    "TeamConfigProvider",
    "backend_team_config_loader",
    "database_team_config_loader",
    "build_fff_service",
]
