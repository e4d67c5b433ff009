# match_model.py
# Defines the Match model (fixtures and results) and MatchTeam (one side of a match).

from enum import IntEnum, Enum
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlmodel import SQLModel, Field, Relationship

from schoolsports_backend.core.timeutils import utc_now

from .team_model import Team

if TYPE_CHECKING:
    from .championship_model import Championship


class MatchStatus(IntEnum):
    SCHEDULED = 0
    IN_PROGRESS = 1
    FINISHED = 2


STATUS_LABELS = {
    MatchStatus.SCHEDULED: "Scheduled",
    MatchStatus.IN_PROGRESS: "In progress",
    MatchStatus.FINISHED: "Finished",
}


class MatchOutcome(str, Enum):
    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"


class Match(SQLModel, table=True):
    """
    A match between exactly two teams of a championship.
    Knockout matches carry a round number and their position (bracket_order) within the round.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    championship_id: int = Field(foreign_key="championship.id", index=True)

    play_day: Optional[datetime] = None                      # Filled when the result is registered
    status: int = Field(default=MatchStatus.SCHEDULED, index=True)

    # Knockout bracket
    round_number: Optional[int] = Field(default=None, index=True)
    bracket_order: Optional[int] = None
    is_knockout: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now)

    championship: Optional["Championship"] = Relationship(back_populates="matches")
    participations: List["MatchTeam"] = Relationship(
        back_populates="match",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "MatchTeam.id"},
    )


class MatchTeam(SQLModel, table=True):
    """One side of a match: the team, its goals (or sets) and the points awarded."""
    __tablename__ = "match_team"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    team_id: int = Field(foreign_key="team.id", index=True)

    goals: int = Field(default=0)
    points: int = Field(default=0)
    # Stored by the scoring policy; None for rows never scored through it
    outcome: Optional[MatchOutcome] = Field(default=None)

    match: Optional[Match] = Relationship(back_populates="participations")
    team: Optional[Team] = Relationship()


# -------------------------------
# Request schemas
# -------------------------------
class MatchCreate(SQLModel):
    championship_id: int
    home_team_id: int
    away_team_id: int
    play_day: Optional[datetime] = None


class MatchUpdate(SQLModel):
    play_day: Optional[datetime] = None
    status: Optional[MatchStatus] = None


class TeamScore(SQLModel):
    team_id: int
    goals: int = Field(ge=0)


class MatchResultRequest(SQLModel):
    scores: List[TeamScore]
    play_day: Optional[datetime] = None
