from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, Dict, List, Any, Literal
from datetime import datetime


Role = Literal["ADMIN", "STAFF", "USER"]


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON with the web client."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Auth Schemas
class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)
    email: Optional[str] = Field(None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserOut(CamelModel):
    id: int
    username: str
    email: Optional[str] = None
    role: Role
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    token: str
    user: UserOut


# Team Schemas
class TeamBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = None
    compet_id: Optional[str] = None
    poule_id: Optional[str] = None


class TeamCreate(TeamBase):
    pass


class TeamOut(TeamBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TeamConfig(BaseModel):
    """FFF coordinates of one club team (technical id, competition, poule, category)."""
    id: str
    competition_id: str = Field(..., alias="competId")
    poule_id: str = Field(..., alias="pouleId")
    category: str = ""

    class Config:
        populate_by_name = True


# Player Schemas
class PlayerBase(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: Optional[str] = None
    goals: int = Field(0, ge=0)
    team_id: Optional[str] = None

    @field_validator('phone_number', 'team_id', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        # Forms send "" for "no team" / "no phone"
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PlayerCreate(PlayerBase):
    pass


class PlayerOut(PlayerBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# FFF Schemas
class TeamDetails(CamelModel):
    club_info: Dict[str, Any]
    results: Dict[str, Any]
    calendar: Dict[str, Any]


class CacheClearResponse(BaseModel):
    status: str
    message: str


StandingsByTeam = Dict[int, List[Dict[str, Any]]]
