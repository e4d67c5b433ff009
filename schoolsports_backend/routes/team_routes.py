# schoolsports_backend/routes/team_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from schoolsports_backend.core.auth import require_admin
from schoolsports_backend.core.database import get_session
from schoolsports_backend.models.championship_model import ChampionshipTeam
from schoolsports_backend.models.match_model import MatchTeam
from schoolsports_backend.models.team_model import Team, TeamCreate, TeamUpdate
from schoolsports_backend.routes.helpers import get_or_404

router = APIRouter()


@router.get("/")
def list_teams(session: Session = Depends(get_session)):
    return session.exec(select(Team).order_by(Team.name)).all()


@router.post("/", status_code=201)
def create_team(data: TeamCreate, session: Session = Depends(get_session), _admin: str = Depends(require_admin)):
    team = Team(name=data.name, modality=data.modality)
    session.add(team)
    session.commit()
    session.refresh(team)
    return team


@router.get("/{team_id}")
def get_team(team_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, Team, team_id, "Team")


@router.put("/{team_id}")
@router.patch("/{team_id}")
def update_team(
    team_id: int,
    data: TeamUpdate,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    team = get_or_404(session, Team, team_id, "Team")
    for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(team, key, value)
    session.add(team)
    session.commit()
    session.refresh(team)
    return team


@router.delete("/{team_id}")
def delete_team(team_id: int, session: Session = Depends(get_session), _admin: str = Depends(require_admin)):
    """A team that already played or is scheduled in a match cannot be deleted."""
    team = get_or_404(session, Team, team_id, "Team")

    in_matches = session.exec(select(MatchTeam.id).where(MatchTeam.team_id == team_id)).first()
    if in_matches is not None:
        raise HTTPException(status_code=409, detail="Team has matches and cannot be deleted.")

    for enrollment in session.exec(select(ChampionshipTeam).where(ChampionshipTeam.team_id == team_id)).all():
        session.delete(enrollment)
    session.delete(team)
    session.commit()
    return {"message": "Team deleted successfully."}
