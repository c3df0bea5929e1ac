"""
Admin Reset Script
Deletes the `admin` account if present and creates a fresh one.

Usage:
    python backend/scripts/reset_admin.py [--username admin] [--password admin123]
"""
import argparse
import os
import sys
import logging

from sqlalchemy.orm import Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from archefc.core.security import hash_password  # noqa: E402
from archefc.database import SessionLocal, init_db  # noqa: E402
from archefc.models import User  # noqa: E402
from archefc.services.repository import UserRepository  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def reset_admin(db: Session, username: str = "admin", password: str = "admin123") -> User:
    """Replace the admin account and return the new one."""
    users = UserRepository(db)
    removed = users.delete_by_username(username)
    if removed:
        logger.info(f"Removed previous account {username}")

    admin = users.create({
        "username": username,
        "password": hash_password(password),
        "role": "ADMIN",
    })
    logger.info(f"Admin account created: {admin.username} (ID: {admin.id})")
    return admin


def main() -> int:
    parser = argparse.ArgumentParser(description="Recreate the admin account")
    parser.add_argument("--username", type=str, default="admin", help="Admin username")
    parser.add_argument("--password", type=str, default="admin123", help="Admin password")
    args = parser.parse_args()

    init_db()
    db = SessionLocal()
    try:
        reset_admin(db, args.username, args.password)
        return 0
    except Exception as e:
        logger.error(f"✗ Admin reset failed: {str(e)}", exc_info=True)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
