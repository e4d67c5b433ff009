# player_model.py
from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field, Relationship

from schoolsports_backend.core.timeutils import utc_now

from .team_model import Team
from .school_class_model import SchoolClass


class Player(SQLModel, table=True):
    """A student playing for (at most) one team. Always belongs to a school class."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    age: int
    class_id: int = Field(foreign_key="school_class.id", index=True)
    team_id: Optional[int] = Field(default=None, foreign_key="team.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)

    team: Optional[Team] = Relationship()
    school_class: Optional[SchoolClass] = Relationship()


class PlayerCreate(SQLModel):
    name: str = Field(min_length=2, max_length=100)
    age: int = Field(ge=16, le=50)
    class_id: int
    team_id: Optional[int] = None


class PlayerUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    age: Optional[int] = Field(default=None, ge=16, le=50)
    class_id: Optional[int] = None
    team_id: Optional[int] = None
