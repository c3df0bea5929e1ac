"""Federation (FFF) data: standings, matches and club information"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from archefc.api.deps import get_fff_service, require_admin
from archefc.schemas import CacheClearResponse, StandingsByTeam, TeamDetails
from archefc.services.fff import FFFAPIService

router = APIRouter(prefix="/fff", tags=["FFF"])


@router.get("/competitions/{competition_id}/poules/{poule_id}/matches")
async def get_competition_matches(
    competition_id: str,
    poule_id: str,
    category: Optional[str] = Query(None, description="Team category, 'jeune' for youth"),
    service: FFFAPIService = Depends(get_fff_service),
) -> List[Dict[str, Any]]:
    return await service.get_competition_matches(competition_id, poule_id, category)


@router.get("/classements", response_model=StandingsByTeam)
async def get_all_classements(service: FFFAPIService = Depends(get_fff_service)):
    """Standings of every configured team; failing teams come back empty."""
    return await service.get_all_teams_classement()


@router.get("/teams/{team_index}/classement")
async def get_team_classement(
    team_index: int = Path(..., description="1-based team index"),
    service: FFFAPIService = Depends(get_fff_service),
) -> List[Dict[str, Any]]:
    return await service.get_team_classement(team_index)


@router.get("/teams/{team_index}/details", response_model=TeamDetails)
async def get_team_details(
    team_index: int = Path(..., description="1-based team index"),
    service: FFFAPIService = Depends(get_fff_service),
):
    return await service.get_team_details(team_index)


@router.get("/clubs/{club_id}")
async def get_club_info(
    club_id: int, service: FFFAPIService = Depends(get_fff_service)
) -> Dict[str, Any]:
    return await service.get_club_info(club_id)


@router.get("/clubs/{club_id}/results")
async def get_club_results(
    club_id: int, service: FFFAPIService = Depends(get_fff_service)
) -> Dict[str, Any]:
    return await service.get_club_results(club_id)


@router.get("/clubs/{club_id}/calendar")
async def get_club_calendar(
    club_id: int, service: FFFAPIService = Depends(get_fff_service)
) -> Dict[str, Any]:
    return await service.get_club_calendar(club_id)


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    dependencies=[Depends(require_admin)],
)
async def clear_cache(service: FFFAPIService = Depends(get_fff_service)):
    await service.clear_cache()
    return CacheClearResponse(status="success", message="FFF cache cleared")
