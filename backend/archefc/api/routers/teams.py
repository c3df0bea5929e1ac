"""Team endpoints and the FFF team configuration"""
from typing import List
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from archefc.api.deps import get_fff_service, require_admin
from archefc.database import get_db
from archefc.exceptions import NotFoundError
from archefc.models import Team
from archefc.schemas import PlayerOut, TeamConfig, TeamCreate, TeamOut
from archefc.services.fff import FFFAPIService
from archefc.services.repository import PlayerRepository, TeamRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["Teams"])


def _get_team_or_404(repository: TeamRepository, team_id: str) -> Team:
    team = repository.get(team_id)
    if team is None:
        raise NotFoundError("Team", team_id)
    return team


@router.get("", response_model=List[TeamOut])
def list_teams(db: Session = Depends(get_db)):
    return TeamRepository(db).list()


@router.get("/fff-config", response_model=List[TeamConfig])
def get_fff_config(db: Session = Depends(get_db)):
    """Teams registered in an FFF competition, sorted by name."""
    return TeamRepository(db).list_fff_configs()


@router.get("/{team_id}", response_model=TeamOut)
def get_team(team_id: str, db: Session = Depends(get_db)):
    return _get_team_or_404(TeamRepository(db), team_id)


@router.get("/{team_id}/players", response_model=List[PlayerOut])
def list_team_players(team_id: str, db: Session = Depends(get_db)):
    _get_team_or_404(TeamRepository(db), team_id)
    return PlayerRepository(db).list_by_team(team_id)


# Team writes change the team indexes and competitions, so cached FFF data is dropped

@router.post(
    "",
    response_model=TeamOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_team(
    data: TeamCreate,
    db: Session = Depends(get_db),
    fff_service: FFFAPIService = Depends(get_fff_service),
):
    team = TeamRepository(db).create(data.model_dump())
    await fff_service.clear_cache()
    logger.info(f"Created team {team.name}")
    return team


@router.put("/{team_id}", response_model=TeamOut, dependencies=[Depends(require_admin)])
async def update_team(
    team_id: str,
    data: TeamCreate,
    db: Session = Depends(get_db),
    fff_service: FFFAPIService = Depends(get_fff_service),
):
    repository = TeamRepository(db)
    team = repository.update(_get_team_or_404(repository, team_id), data.model_dump())
    await fff_service.clear_cache()
    return team


@router.delete(
    "/{team_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_team(
    team_id: str,
    db: Session = Depends(get_db),
    fff_service: FFFAPIService = Depends(get_fff_service),
):
    repository = TeamRepository(db)
    repository.delete(_get_team_or_404(repository, team_id))
    await fff_service.clear_cache()
    logger.info(f"Deleted team {team_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
