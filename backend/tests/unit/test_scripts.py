"""
Unit tests for the seeding and admin reset scripts.
"""

import sys
from pathlib import Path

from sqlalchemy import func, select

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from scripts.reset_admin import reset_admin  # noqa: E402
from scripts.seed_database import TEAMS, seed_database  # noqa: E402
from archefc.core.security import verify_password  # noqa: E402
from archefc.models import Player, Team, User  # noqa: E402
from archefc.services.repository import TeamRepository  # noqa: E402


def _count(db, model):
    return db.scalar(select(func.count()).select_from(model))


class TestSeedDatabase:
    def test_creates_club_data(self, db_session):
        counts = seed_database(db_session, admin_password="changeme")

        assert counts == {"teams": 4, "users": 1, "players": 2}
        assert _count(db_session, Team) == len(TEAMS)
        admin = db_session.scalars(select(User)).one()
        assert admin.role == "ADMIN"
        assert verify_password("changeme", admin.password)

    def test_players_attached_to_teams(self, db_session):
        seed_database(db_session)

        doe = db_session.scalars(select(Player).where(Player.last_name == "Doe")).one()
        assert doe.team.name == "Senior A"

    def test_is_repeatable(self, db_session):
        seed_database(db_session)
        seed_database(db_session)

        assert _count(db_session, Team) == 4
        assert _count(db_session, Player) == 2
        assert _count(db_session, User) == 1

    def test_configuration_order(self, db_session):
        seed_database(db_session)

        configs = TeamRepository(db_session).list_fff_configs()
        assert [c.competition_id for c in configs] == ["436121", "436122", "436123", "436124"]


class TestResetAdmin:
    def test_replaces_existing_admin(self, db_session):
        seed_database(db_session, admin_password="old-password")

        admin = reset_admin(db_session, password="new-password")

        users = db_session.scalars(select(User)).all()
        assert [u.id for u in users] == [admin.id]
        assert verify_password("new-password", admin.password)

    def test_creates_when_missing(self, db_session):
        admin = reset_admin(db_session, username="boss", password="pw123456")
        assert admin.username == "boss"
        assert admin.role == "ADMIN"
