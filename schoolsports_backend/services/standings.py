# standings.py
# Standings engine: aggregates finished match results into a ranked table per championship.

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlmodel import Session, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolsports_backend.core.scoring_config import WIN_POINTS, DRAW_POINTS
from schoolsports_backend.models.match_model import Match, MatchTeam, MatchStatus, MatchOutcome
from schoolsports_backend.models.team_model import Team

logger = logging.getLogger(__name__)


@dataclass
class Participation:
    team_id: int
    team_name: Optional[str]
    goals: int = 0
    points: int = 0
    outcome: Optional[str] = None


@dataclass
class FinishedMatch:
    match_id: int
    participations: List[Participation] = field(default_factory=list)


# =========================================
# DATA LOADING
# =========================================
def finished_participations_query(championship_id: int):
    """One row per participation of every finished match in the championship."""
    return (
        select(MatchTeam.match_id, MatchTeam.team_id, Team.name, MatchTeam.goals, MatchTeam.points, MatchTeam.outcome)
        .join(Match, Match.id == MatchTeam.match_id)
        .join(Team, Team.id == MatchTeam.team_id)
        .where(Match.championship_id == championship_id, Match.status == MatchStatus.FINISHED)
        .order_by(MatchTeam.match_id, MatchTeam.id)
    )


def group_finished_matches(rows) -> List[FinishedMatch]:
    """Group flat participation rows (as returned by finished_participations_query) by match."""
    matches = {}
    for match_id, team_id, team_name, goals, points, outcome in rows:
        match = matches.setdefault(match_id, FinishedMatch(match_id=match_id))
        match.participations.append(
            Participation(
                team_id=team_id,
                team_name=team_name,
                goals=goals or 0,
                points=points or 0,
                outcome=outcome.value if isinstance(outcome, MatchOutcome) else outcome,
            )
        )
    return list(matches.values())


def load_finished_matches(session: Session, championship_id: int) -> List[FinishedMatch]:
    rows = session.exec(finished_participations_query(championship_id)).all()
    return group_finished_matches(rows)


async def load_finished_matches_async(db: AsyncSession, championship_id: int) -> List[FinishedMatch]:
    result = await db.execute(finished_participations_query(championship_id))
    return group_finished_matches(result.all())


# =========================================
# AGGREGATION
# =========================================
def classify_outcome(participation: Participation) -> str:
    """
    Stored outcome wins. Rows scored before outcomes were stored fall back to the
    points convention: 3 points = win, 1 point = draw, anything else = loss.
    """
    if participation.outcome:
        return participation.outcome
    if participation.points == WIN_POINTS:
        return MatchOutcome.WIN.value
    if participation.points == DRAW_POINTS:
        return MatchOutcome.DRAW.value
    return MatchOutcome.LOSS.value


def format_win_rate(wins: int, matches_played: int) -> str:
    if matches_played == 0:
        return "0.00"
    return f"{wins / matches_played * 100:.2f}"


def compute_standings(matches: Iterable[FinishedMatch], extended: bool = False) -> List[dict]:
    """
    Build the ranked table for a set of finished matches.

    Sort keys (descending unless noted):
    1. points
    2. goal difference
    3. goals for
    4. (extended) wins
    5. (extended) losses, ascending

    Entries start in ascending team id order and the sort is stable, so any
    tie left after every key is broken by team id, whatever order the matches
    were loaded in. Each entry gets its 1-based position.
    """
    table = {}

    for match in matches:
        for participation in match.participations:
            stats = table.setdefault(participation.team_id, {
                "team_id": participation.team_id,
                "team_name": participation.team_name,
                "points": 0,
                "wins": 0,
                "draws": 0,
                "losses": 0,
                "goals_for": 0,
                "goals_against": 0,
            })

            stats["points"] += participation.points
            stats["goals_for"] += participation.goals

            # Opponent's goals in this match
            for other in match.participations:
                if other.team_id != participation.team_id:
                    stats["goals_against"] += other.goals
                    break

            outcome = classify_outcome(participation)
            if outcome == MatchOutcome.WIN.value:
                stats["wins"] += 1
            elif outcome == MatchOutcome.DRAW.value:
                stats["draws"] += 1
            else:
                stats["losses"] += 1

    entries = []
    for team_id in sorted(table):
        stats = table[team_id]
        stats["goal_difference"] = stats["goals_for"] - stats["goals_against"]
        stats["matches_played"] = stats["wins"] + stats["draws"] + stats["losses"]
        if extended:
            stats["win_rate"] = format_win_rate(stats["wins"], stats["matches_played"])
        entries.append(stats)

    if extended:
        sort_key = lambda s: (-s["points"], -s["goal_difference"], -s["goals_for"], -s["wins"], s["losses"])
    else:
        sort_key = lambda s: (-s["points"], -s["goal_difference"], -s["goals_for"])

    ranking = sorted(entries, key=sort_key)
    return [{"position": index + 1, **stats} for index, stats in enumerate(ranking)]


def get_championship_standings(session: Session, championship_id: int, extended: bool = False) -> List[dict]:
    """Load the finished matches of a championship and rank its teams."""
    matches = load_finished_matches(session, championship_id)
    logger.debug("Ranking championship %s from %d finished matches", championship_id, len(matches))
    return compute_standings(matches, extended=extended)
