"""Squad management endpoints; reads are public, writes need an admin token"""
from typing import List
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from archefc.api.deps import require_admin
from archefc.database import get_db
from archefc.exceptions import NotFoundError, ValidationError
from archefc.models import Player
from archefc.schemas import PlayerCreate, PlayerOut
from archefc.services.repository import PlayerRepository, TeamRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["Players"])


def _check_team(db: Session, team_id) -> None:
    if team_id is not None and TeamRepository(db).get(team_id) is None:
        raise ValidationError("The given team does not exist", details={"team_id": team_id})


def _get_player_or_404(repository: PlayerRepository, player_id: int) -> Player:
    player = repository.get(player_id)
    if player is None:
        raise NotFoundError("Player", str(player_id))
    return player


@router.get("", response_model=List[PlayerOut])
def list_players(db: Session = Depends(get_db)):
    return PlayerRepository(db).list()


@router.get("/all", response_model=List[PlayerOut])
def list_all_players(db: Session = Depends(get_db)):
    return PlayerRepository(db).list()


@router.get("/{player_id}", response_model=PlayerOut)
def get_player(player_id: int, db: Session = Depends(get_db)):
    return _get_player_or_404(PlayerRepository(db), player_id)


@router.post(
    "",
    response_model=PlayerOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_player(data: PlayerCreate, db: Session = Depends(get_db)):
    _check_team(db, data.team_id)
    player = PlayerRepository(db).create(data.model_dump())
    logger.info(f"Created player {player.id} ({player.first_name} {player.last_name})")
    return player


@router.put("/{player_id}", response_model=PlayerOut, dependencies=[Depends(require_admin)])
def update_player(player_id: int, data: PlayerCreate, db: Session = Depends(get_db)):
    repository = PlayerRepository(db)
    player = _get_player_or_404(repository, player_id)
    _check_team(db, data.team_id)
    return repository.update(player, data.model_dump())


@router.delete(
    "/{player_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_player(player_id: int, db: Session = Depends(get_db)):
    repository = PlayerRepository(db)
    repository.delete(_get_player_or_404(repository, player_id))
    logger.info(f"Deleted player {player_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
