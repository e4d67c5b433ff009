# team_model.py
# Defines the Team model and its request schemas.

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from schoolsports_backend.core.timeutils import utc_now


class Team(SQLModel, table=True):
    """A school team. The modality is a free tag (e.g. "Football", "Futsal")."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    modality: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)


class TeamCreate(SQLModel):
    name: str = Field(min_length=2, max_length=100)
    modality: Optional[str] = Field(default=None, max_length=50)


class TeamUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    modality: Optional[str] = Field(default=None, max_length=50)
