import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from archefc.database import Base

# ============================================================================
# CLUB TABLES
# ============================================================================


def _new_team_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Club staff account used to authenticate against the API"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    email = Column(String(255))
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(10), nullable=False, default="USER")
    first_name = Column(String(100))
    last_name = Column(String(100))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("role IN ('ADMIN', 'STAFF', 'USER')", name='check_role'),
    )


class Team(Base):
    """
    Club team with its FFF competition coordinates.
    compet_id and poule_id are only set for teams registered in a federation
    competition; only those appear in the FFF configuration.
    """
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=_new_team_id)
    name = Column(String(255), nullable=False)
    category = Column(String(50))
    compet_id = Column(String(50))
    poule_id = Column(String(50))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    players = relationship("Player", back_populates="team")


class Player(Base):
    """Squad member, optionally attached to a team"""
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    phone_number = Column(String(30))
    goals = Column(Integer, nullable=False, default=0)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    team = relationship("Team", back_populates="players")

    __table_args__ = (
        CheckConstraint("goals >= 0", name='check_goals_non_negative'),
    )
