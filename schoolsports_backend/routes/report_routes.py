# schoolsports_backend/routes/report_routes.py
# Admin reports (JSON).

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from schoolsports_backend.core.auth import require_admin
from schoolsports_backend.core.database import get_session
from schoolsports_backend.models.championship_model import Championship
from schoolsports_backend.routes.helpers import get_or_404
from schoolsports_backend.services.reports import (
    match_results_report, champions_report, players_by_modality_report, top_teams_report,
)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/matches/{championship_id}")
def match_results(championship_id: int, session: Session = Depends(get_session)):
    championship = get_or_404(session, Championship, championship_id, "Championship")
    return match_results_report(session, championship)


@router.get("/champions/{championship_id}")
def champions(championship_id: int, session: Session = Depends(get_session)):
    championship = get_or_404(session, Championship, championship_id, "Championship")
    return champions_report(session, championship)


@router.get("/players-by-modality")
def players_by_modality(session: Session = Depends(get_session)):
    return players_by_modality_report(session)


@router.get("/top-teams/{championship_id}")
def top_teams(
    championship_id: int,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    session: Session = Depends(get_session),
):
    championship = get_or_404(session, Championship, championship_id, "Championship")
    return top_teams_report(session, championship, limit)
