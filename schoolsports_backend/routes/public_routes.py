# schoolsports_backend/routes/public_routes.py
# Public, read-only endpoints (no authentication). Async sessions only, no lazy loading.

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolsports_backend.core.database import get_db
from schoolsports_backend.models.championship_model import Championship
from schoolsports_backend.models.knockout_model import KnockoutState, KnockoutStatus
from schoolsports_backend.models.match_model import Match, MatchTeam, MatchStatus, STATUS_LABELS
from schoolsports_backend.models.team_model import Team
from schoolsports_backend.services.standings import load_finished_matches_async, compute_standings

router = APIRouter()


async def _get_championship(db: AsyncSession, championship_id: int) -> Championship:
    championship = await db.get(Championship, championship_id)
    if not championship:
        raise HTTPException(status_code=404, detail=f"Championship {championship_id} not found.")
    return championship


async def _teams_by_match(db: AsyncSession, match_ids: list) -> dict:
    """match_id -> [{team_id, team_name, goals, points}] in participation order."""
    if not match_ids:
        return {}
    result = await db.execute(
        select(MatchTeam.match_id, MatchTeam.team_id, Team.name, MatchTeam.goals, MatchTeam.points)
        .join(Team, Team.id == MatchTeam.team_id)
        .where(MatchTeam.match_id.in_(match_ids))
        .order_by(MatchTeam.match_id, MatchTeam.id)
    )
    teams = {}
    for match_id, team_id, team_name, goals, points in result.all():
        teams.setdefault(match_id, []).append(
            {"team_id": team_id, "team_name": team_name, "goals": goals or 0, "points": points or 0}
        )
    return teams


# =========================================
# CHAMPIONSHIPS
# =========================================
@router.get("/championships")
async def list_championships(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Championship).order_by(Championship.year.desc(), Championship.name))
    return [
        {
            "id": c.id,
            "name": c.name,
            "year": c.year,
            "modality": c.modality,
            "format": c.format,
            "created_at": c.created_at,
            "updated_at": c.updated_at,
        }
        for c in result.scalars().all()
    ]


# =========================================
# MATCH CALENDAR
# =========================================
@router.get("/matches")
async def list_matches(championship_id: Optional[int] = None, db: AsyncSession = Depends(get_db)):
    """Scheduled and played matches, most recent first. Optionally filtered by championship."""
    query = select(Match, Championship.name, Championship.modality).join(
        Championship, Championship.id == Match.championship_id
    )
    if championship_id is not None:
        query = query.where(Match.championship_id == championship_id)
    query = query.order_by(Match.play_day.desc(), Match.created_at.desc(), Match.id.desc())

    rows = (await db.execute(query)).all()
    teams = await _teams_by_match(db, [match.id for match, _name, _modality in rows])

    calendar = []
    for match, championship_name, modality in rows:
        sides = teams.get(match.id, []) + [None, None]
        team_a, team_b = sides[0], sides[1]
        calendar.append({
            "id": match.id,
            "championship_id": match.championship_id,
            "championship": championship_name,
            "modality": modality,
            "team1": team_a["team_name"] if team_a else "N/A",
            "team2": team_b["team_name"] if team_b else "N/A",
            "score1": team_a["goals"] if team_a else 0,
            "score2": team_b["goals"] if team_b else 0,
            "status": match.status,
            "status_label": STATUS_LABELS.get(MatchStatus(match.status), "Unknown"),
            "round": match.round_number,
            "date": match.play_day or match.created_at,
        })
    return calendar


# =========================================
# RANKING
# =========================================
@router.get("/championships/{championship_id}/ranking")
async def get_ranking(championship_id: int, db: AsyncSession = Depends(get_db)):
    await _get_championship(db, championship_id)
    matches = await load_finished_matches_async(db, championship_id)
    return compute_standings(matches)


# =========================================
# KNOCKOUT BRACKET
# =========================================
@router.get("/championships/{championship_id}/bracket")
async def get_bracket(championship_id: int, db: AsyncSession = Depends(get_db)):
    """Knockout rounds with their matches in bracket order, plus the cached bracket state."""
    await _get_championship(db, championship_id)

    result = await db.execute(
        select(Match)
        .where(Match.championship_id == championship_id, Match.is_knockout == True)  # noqa: E712
        .order_by(Match.round_number, Match.bracket_order, Match.id)
    )
    matches = result.scalars().all()
    teams = await _teams_by_match(db, [m.id for m in matches])

    rounds = {}
    for match in matches:
        rounds.setdefault(match.round_number, []).append({
            "match_id": match.id,
            "bracket_order": match.bracket_order,
            "status": match.status,
            "status_label": STATUS_LABELS.get(MatchStatus(match.status), "Unknown"),
            "teams": teams.get(match.id, []),
        })

    state_result = await db.execute(select(KnockoutState).where(KnockoutState.championship_id == championship_id))
    state = state_result.scalar_one_or_none()

    return {
        "championship_id": championship_id,
        "status": state.status if state else KnockoutStatus.NOT_STARTED,
        "current_round": state.current_round if state else None,
        "champion_team_id": state.champion_team_id if state else None,
        "rounds": [{"round": number, "matches": rounds[number]} for number in sorted(rounds)],
    }
