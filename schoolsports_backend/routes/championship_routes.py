# schoolsports_backend/routes/championship_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError

from schoolsports_backend.core.auth import require_admin
from schoolsports_backend.core.database import get_session
from schoolsports_backend.core.errors import to_response
from schoolsports_backend.core.locks import ChampionshipBusyError, championship_lock, forget_championship_lock
from schoolsports_backend.core.timeutils import utc_now
from schoolsports_backend.models.championship_model import (
    Championship, ChampionshipTeam, ChampionshipCreate, ChampionshipUpdate, Modality,
    GenerateMatchesRequest, KnockoutRoundRequest,
)
from schoolsports_backend.models.knockout_model import KnockoutState
from schoolsports_backend.models.match_model import Match, MatchStatus
from schoolsports_backend.models.team_model import Team
from schoolsports_backend.routes.helpers import get_or_404
from schoolsports_backend.services.enrollment import enroll_team
from schoolsports_backend.services.knockout import create_knockout_round, advance_knockout_round
from schoolsports_backend.services.knockout_state import get_knockout_state
from schoolsports_backend.services.round_robin import generate_round_robin
from schoolsports_backend.services.standings import get_championship_standings

logger = logging.getLogger(__name__)

router = APIRouter()


# =========================================
# CRUD
# =========================================
@router.get("/")
def list_championships(session: Session = Depends(get_session)):
    return session.exec(select(Championship).order_by(Championship.year.desc(), Championship.name)).all()


@router.post("/", status_code=201)
def create_championship(
    data: ChampionshipCreate,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    championship = Championship(name=data.name, year=data.year, modality=data.modality)
    session.add(championship)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="A championship with this name already exists.")
    session.refresh(championship)
    logger.info("Championship %s (%s) created", championship.id, championship.name)
    return championship


@router.get("/{championship_id}")
def get_championship(championship_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, Championship, championship_id, "Championship")


@router.put("/{championship_id}")
@router.patch("/{championship_id}")
def update_championship(
    championship_id: int,
    data: ChampionshipUpdate,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    """Update only the provided fields (name, year, modality). The modality is fixed once a result exists."""
    championship = get_or_404(session, Championship, championship_id, "Championship")
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    try:
        with championship_lock(championship_id):
            if "modality" in changes and Modality(changes["modality"]) != Modality(championship.modality):
                finished = session.exec(
                    select(Match.id).where(
                        Match.championship_id == championship_id,
                        Match.status == MatchStatus.FINISHED,
                    )
                ).first()
                if finished is not None:
                    raise HTTPException(
                        status_code=409,
                        detail="The modality cannot change once a match has a registered result.",
                    )

            for key, value in changes.items():
                setattr(championship, key, value)
            championship.updated_at = utc_now()
            session.add(championship)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise HTTPException(status_code=409, detail="A championship with this name already exists.")
    except ChampionshipBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    session.refresh(championship)
    return championship


@router.delete("/{championship_id}")
def delete_championship(
    championship_id: int,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    """Delete a championship with its matches, participations, enrollments and bracket state."""
    championship = get_or_404(session, Championship, championship_id, "Championship")

    try:
        with championship_lock(championship_id):
            for enrollment in session.exec(select(ChampionshipTeam).where(ChampionshipTeam.championship_id == championship_id)).all():
                session.delete(enrollment)
            state = session.exec(select(KnockoutState).where(KnockoutState.championship_id == championship_id)).first()
            if state:
                session.delete(state)
            session.delete(championship)  # cascades to matches and their participations
            session.commit()
    except ChampionshipBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    forget_championship_lock(championship_id)
    logger.info("Championship %s deleted", championship_id)
    return {"message": "Championship deleted successfully."}


# =========================================
# ENROLLMENT
# =========================================
@router.get("/{championship_id}/teams")
def list_enrolled_teams(championship_id: int, session: Session = Depends(get_session)):
    get_or_404(session, Championship, championship_id, "Championship")
    return session.exec(
        select(Team)
        .join(ChampionshipTeam, ChampionshipTeam.team_id == Team.id)
        .where(ChampionshipTeam.championship_id == championship_id)
        .order_by(Team.name)
    ).all()


@router.post("/{championship_id}/teams/{team_id}")
def enroll_team_route(
    championship_id: int,
    team_id: int,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    """Enroll a team. Enrolling it again is a no-op."""
    get_or_404(session, Championship, championship_id, "Championship")
    get_or_404(session, Team, team_id, "Team")

    added = enroll_team(session, championship_id, team_id)
    session.commit()
    return {"championship_id": championship_id, "team_id": team_id, "enrolled": True, "already_enrolled": not added}


# =========================================
# ROUND-ROBIN & STANDINGS
# =========================================
@router.post("/{championship_id}/generate-matches", status_code=201)
def generate_matches(
    championship_id: int,
    data: GenerateMatchesRequest,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    """Create one match for every pair of the given teams (single round-robin)."""
    championship = get_or_404(session, Championship, championship_id, "Championship")
    return to_response(generate_round_robin(session, championship, data.team_ids))


@router.get("/{championship_id}/standings")
def get_standings(championship_id: int, extended: bool = False, session: Session = Depends(get_session)):
    """Ranking from all finished matches: points, goal difference, goals for (+ wins/losses when extended)."""
    get_or_404(session, Championship, championship_id, "Championship")
    return get_championship_standings(session, championship_id, extended=extended)


# =========================================
# KNOCKOUT
# =========================================
@router.get("/{championship_id}/knockout")
def get_knockout(championship_id: int, session: Session = Depends(get_session)):
    get_or_404(session, Championship, championship_id, "Championship")
    return get_knockout_state(session, championship_id)


@router.post("/{championship_id}/knockout/rounds", status_code=201)
def create_round(
    championship_id: int,
    data: KnockoutRoundRequest,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    """Create a knockout round from explicit (home, away) pairs."""
    championship = get_or_404(session, Championship, championship_id, "Championship")
    return to_response(create_knockout_round(session, championship, data.round, data.pairs))


@router.post("/{championship_id}/knockout/rounds/{round_number}/advance", status_code=201)
def advance_round(
    championship_id: int,
    round_number: int,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    """Pair the winners of a finished round into round + 1."""
    championship = get_or_404(session, Championship, championship_id, "Championship")
    return to_response(advance_knockout_round(session, championship, round_number))
