# championship_model.py
# Defines the Championship model, its enumerations and the request schemas for it.

from enum import Enum
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from schoolsports_backend.core.timeutils import utc_now

if TYPE_CHECKING:
    from .match_model import Match


class Modality(str, Enum):
    """Sport played in a championship. Governs the scoring rules."""
    FOOTBALL = "Football"
    VOLLEYBALL = "Volleyball"


class ChampionshipFormat(str, Enum):
    ROUND_ROBIN = "round_robin"
    KNOCKOUT = "knockout"


class Championship(SQLModel, table=True):
    """
    A school championship (e.g. "School Cup 2025").
    The format starts as round-robin and flips to knockout once a bracket round is created.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    year: int
    modality: Modality = Field(default=Modality.FOOTBALL)
    format: ChampionshipFormat = Field(default=ChampionshipFormat.ROUND_ROBIN)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Deleting a championship removes its matches (and their participations)
    matches: List["Match"] = Relationship(
        back_populates="championship",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class ChampionshipTeam(SQLModel, table=True):
    """Enrollment of a team in a championship. One row per (championship, team)."""
    __tablename__ = "championship_team"

    id: Optional[int] = Field(default=None, primary_key=True)
    championship_id: int = Field(foreign_key="championship.id", index=True)
    team_id: int = Field(foreign_key="team.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)

    __table_args__ = (UniqueConstraint("championship_id", "team_id", name="uq_championship_team"),)


# -------------------------------
# Request schemas
# -------------------------------
class ChampionshipCreate(SQLModel):
    name: str = Field(min_length=2, max_length=100)
    year: int = Field(ge=2020, le=2030)
    modality: Modality = Modality.FOOTBALL


class ChampionshipUpdate(SQLModel):
    """Partial update. The format is driven by bracket creation and is not writable."""
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    year: Optional[int] = Field(default=None, ge=2020, le=2030)
    modality: Optional[Modality] = None


class GenerateMatchesRequest(SQLModel):
    # Validated by the round-robin service (coercion, dedupe, minimum of two)
    team_ids: Optional[list] = None


class KnockoutRoundRequest(SQLModel):
    round: int = 1
    pairs: list = []
