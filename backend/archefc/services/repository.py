"""
Club Repository Pattern
Database operations for users, teams and players.
"""
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from archefc.exceptions import DatabaseError
from archefc.models import Player, Team, User
from archefc.schemas import TeamConfig

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    """
    Create/read/update/delete/list for one entity.

    All database operations go through repositories so that services
    never touch the session directly.
    """

    model: Type[ModelT]

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, entity_id: Any) -> Optional[ModelT]:
        return self.db.get(self.model, entity_id)

    def list(self) -> List[ModelT]:
        return list(self.db.scalars(select(self.model)))

    def create(self, data: Dict[str, Any]) -> ModelT:
        entity = self.model(**data)
        self.db.add(entity)
        self._commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelT, data: Dict[str, Any]) -> ModelT:
        for field, value in data.items():
            setattr(entity, field, value)
        self._commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error on {self.model.__name__}: {str(e)}")
            raise DatabaseError(
                f"Failed to save {self.model.__name__.lower()}",
                details={"error": type(e).__name__},
            ) from e


class UserRepository(BaseRepository[User]):
    model = User

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.username == username)).first()

    def delete_by_username(self, username: str) -> int:
        users = self.db.scalars(select(User).where(User.username == username)).all()
        for user in users:
            self.db.delete(user)
        self._commit()
        return len(users)


class TeamRepository(BaseRepository[Team]):
    model = Team

    def list(self) -> List[Team]:
        return list(self.db.scalars(select(Team).order_by(Team.name)))

    def list_fff_configs(self) -> List[TeamConfig]:
        """
        FFF coordinates of every team registered in a competition.

        Teams missing a competition or poule number are skipped; the
        result is ordered by team name, which defines the team indexes.
        """
        teams = self.db.scalars(
            select(Team)
            .where(Team.compet_id.is_not(None), Team.poule_id.is_not(None))
            .order_by(Team.name)
        )
        return [
            TeamConfig(
                id=team.id,
                competition_id=team.compet_id,
                poule_id=team.poule_id,
                category=team.category or "",
            )
            for team in teams
        ]


class PlayerRepository(BaseRepository[Player]):
    model = Player

    def list(self) -> List[Player]:
        return list(
            self.db.scalars(select(Player).order_by(Player.last_name, Player.first_name))
        )

    def list_by_team(self, team_id: str) -> List[Player]:
        return list(
            self.db.scalars(
                select(Player).where(Player.team_id == team_id).order_by(Player.last_name)
            )
        )
