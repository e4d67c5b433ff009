# schoolsports_backend/routes/match_routes.py
# Admin-only match management and result registration.

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from schoolsports_backend.core.auth import require_admin
from schoolsports_backend.core.database import get_session
from schoolsports_backend.core.errors import to_response
from schoolsports_backend.models.championship_model import Championship
from schoolsports_backend.models.match_model import (
    Match, MatchTeam, MatchStatus, MatchCreate, MatchUpdate, MatchResultRequest, STATUS_LABELS,
)
from schoolsports_backend.models.team_model import Team
from schoolsports_backend.routes.helpers import get_or_404
from schoolsports_backend.services.enrollment import enroll_teams
from schoolsports_backend.services.scoring import register_match_result, update_match_details

logger = logging.getLogger(__name__)

# Every match route requires an administrator
router = APIRouter(dependencies=[Depends(require_admin)])


def serialize_match(match: Match) -> dict:
    return {
        "id": match.id,
        "championship_id": match.championship_id,
        "play_day": match.play_day,
        "status": match.status,
        "status_label": STATUS_LABELS.get(MatchStatus(match.status), "Unknown"),
        "round": match.round_number,
        "bracket_order": match.bracket_order,
        "is_knockout": match.is_knockout,
        "teams": [
            {
                "team_id": p.team_id,
                "team_name": p.team.name if p.team else None,
                "goals": p.goals,
                "points": p.points,
                "outcome": p.outcome,
            }
            for p in match.participations
        ],
    }


@router.get("/")
def list_matches(championship_id: Optional[int] = None, session: Session = Depends(get_session)):
    query = select(Match)
    if championship_id is not None:
        query = query.where(Match.championship_id == championship_id)
    matches = session.exec(query.order_by(Match.round_number, Match.bracket_order, Match.id)).all()
    return [serialize_match(m) for m in matches]


@router.post("/", status_code=201)
def create_match(data: MatchCreate, session: Session = Depends(get_session)):
    """Schedule a single match between two teams; both teams get enrolled in the championship."""
    get_or_404(session, Championship, data.championship_id, "Championship")
    if data.home_team_id == data.away_team_id:
        raise HTTPException(status_code=400, detail="A team cannot play against itself.")
    get_or_404(session, Team, data.home_team_id, "Team")
    get_or_404(session, Team, data.away_team_id, "Team")

    match = Match(championship_id=data.championship_id, play_day=data.play_day, status=MatchStatus.SCHEDULED)
    session.add(match)
    session.flush()
    session.add(MatchTeam(match_id=match.id, team_id=data.home_team_id))
    session.add(MatchTeam(match_id=match.id, team_id=data.away_team_id))
    enroll_teams(session, data.championship_id, [data.home_team_id, data.away_team_id])
    session.commit()
    session.refresh(match)
    return serialize_match(match)


@router.get("/{match_id}")
def get_match(match_id: int, session: Session = Depends(get_session)):
    return serialize_match(get_or_404(session, Match, match_id, "Match"))


@router.put("/{match_id}")
@router.patch("/{match_id}")
def update_match(match_id: int, data: MatchUpdate, session: Session = Depends(get_session)):
    """Update the play day and/or status. Results go through POST /{match_id}/result."""
    match = get_or_404(session, Match, match_id, "Match")
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    to_response(update_match_details(session, match, changes))
    session.refresh(match)
    return serialize_match(match)


@router.delete("/{match_id}")
def delete_match(match_id: int, session: Session = Depends(get_session)):
    match = get_or_404(session, Match, match_id, "Match")
    if match.is_knockout:
        raise HTTPException(status_code=409, detail="Knockout matches are part of a bracket and cannot be deleted.")
    session.delete(match)  # cascades to participations
    session.commit()
    return {"message": "Match deleted successfully."}


@router.post("/{match_id}/result")
def register_result(match_id: int, data: MatchResultRequest, session: Session = Depends(get_session)):
    """Register the final score; points follow the championship's modality."""
    match = get_or_404(session, Match, match_id, "Match")
    scores = {score.team_id: score.goals for score in data.scores}
    if len(scores) != len(data.scores):
        raise HTTPException(status_code=400, detail="Each team can only be scored once.")
    return to_response(register_match_result(session, match, scores, play_day=data.play_day))
