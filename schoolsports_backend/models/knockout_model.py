# knockout_model.py
# Defines KnockoutState, which caches the bracket progress of each championship.

from enum import Enum
from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from schoolsports_backend.core.timeutils import utc_now


class KnockoutStatus(str, Enum):
    NOT_STARTED = "not_started"
    ROUND_IN_PROGRESS = "round_in_progress"
    ROUND_COMPLETE = "round_complete"
    FINISHED = "finished"


class KnockoutState(SQLModel, table=True):
    """
    Bracket progress of one championship.
    Recomputed from the knockout matches whenever a round is created, advanced or scored.
    """
    __tablename__ = "knockout_state"

    id: Optional[int] = Field(default=None, primary_key=True)
    championship_id: int = Field(foreign_key="championship.id", unique=True, index=True)
    status: KnockoutStatus = Field(default=KnockoutStatus.NOT_STARTED)
    current_round: Optional[int] = None
    champion_team_id: Optional[int] = Field(default=None, foreign_key="team.id")
    updated_at: datetime = Field(default_factory=utc_now)
