"""
Database Seeding Script
Replaces teams, users and players with the club's starting data.

This script:
1. Deletes existing players, teams and users
2. Creates the four senior teams with their FFF competition and poule numbers
3. Creates the default admin account and two sample players

Usage:
    python backend/scripts/seed_database.py [--admin-password PASSWORD]
"""
import argparse
import os
import sys
import logging
from typing import Dict, List

from sqlalchemy import delete
from sqlalchemy.orm import Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from archefc.core.security import hash_password  # noqa: E402
from archefc.database import SessionLocal, init_db  # noqa: E402
from archefc.models import Player, Team, User  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

TEAMS: List[Dict[str, str]] = [
    {"name": "Senior A", "category": "SENIOR", "compet_id": "436121", "poule_id": "4"},
    {"name": "Senior B", "category": "SENIOR", "compet_id": "436122", "poule_id": "2"},
    {"name": "Senior C", "category": "SENIOR", "compet_id": "436123", "poule_id": "9"},
    {"name": "Senior D", "category": "SENIOR", "compet_id": "436124", "poule_id": "9"},
]

PLAYERS = [
    {"first_name": "John", "last_name": "Doe", "phone_number": "0612345678", "goals": 5, "team": "Senior A"},
    {"first_name": "Jane", "last_name": "Smith", "phone_number": "0623456789", "goals": 3, "team": "Senior B"},
]

DEFAULT_ADMIN_PASSWORD = "admin123"


def seed_database(db: Session, admin_password: str = DEFAULT_ADMIN_PASSWORD) -> Dict[str, int]:
    """
    Wipe and seed the club tables.

    Args:
        db: Open database session
        admin_password: Password of the `admin` account

    Returns:
        Number of rows created per table
    """
    db.execute(delete(Player))
    db.execute(delete(Team))
    db.execute(delete(User))
    logger.info("Previous players, teams and users deleted")

    teams_by_name = {}
    for team_data in TEAMS:
        team = Team(**team_data)
        db.add(team)
        teams_by_name[team.name] = team
    db.flush()
    for team in teams_by_name.values():
        logger.info(f"Team created: {team.name} (ID: {team.id})")

    db.add(User(username="admin", password=hash_password(admin_password), role="ADMIN"))
    logger.info("Admin user created: admin")

    for player_data in PLAYERS:
        data = dict(player_data)
        team = teams_by_name.get(data.pop("team"))
        db.add(Player(**data, team_id=team.id if team else None))
        logger.info(f"Player created: {data['first_name']} {data['last_name']}")

    db.commit()
    return {"teams": len(TEAMS), "users": 1, "players": len(PLAYERS)}


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the Arche FC database")
    parser.add_argument(
        "--admin-password",
        type=str,
        default=DEFAULT_ADMIN_PASSWORD,
        help="Password for the admin account",
    )
    args = parser.parse_args()

    init_db()
    db = SessionLocal()
    try:
        counts = seed_database(db, args.admin_password)
        logger.info(f"✓ Seeding finished: {counts}")
        return 0
    except Exception as e:
        db.rollback()
        logger.error(f"✗ Seeding failed: {str(e)}", exc_info=True)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
