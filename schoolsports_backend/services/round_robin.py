# round_robin.py
# Service for generating round-robin matches: every team plays every other team exactly once.

import logging
import random
from itertools import combinations
from typing import Any, List, Optional, Tuple

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from schoolsports_backend.core.errors import ErrorKind, ServiceResult
from schoolsports_backend.core.locks import championship_lock, ChampionshipBusyError
from schoolsports_backend.models.championship_model import Championship
from schoolsports_backend.models.match_model import Match, MatchTeam, MatchStatus
from schoolsports_backend.services.enrollment import enroll_teams
from schoolsports_backend.services.team_ids import coerce_team_id, missing_team_ids

logger = logging.getLogger(__name__)


def normalize_team_ids(team_ids: Any) -> List[int]:
    """Coerce every entry to a positive int, drop invalid ones and duplicates (first occurrence wins)."""
    normalized = []
    for raw in team_ids:
        team_id = coerce_team_id(raw)
        if team_id is not None and team_id not in normalized:
            normalized.append(team_id)
    return normalized


def round_robin_pairs(team_ids: List[int], rng: Optional[random.Random] = None) -> List[Tuple[int, int]]:
    """
    Every unordered pair of distinct teams, exactly once.
    With an rng, both the team list and the resulting pair list are shuffled
    so fixtures come out in a different order each time.
    """
    teams = list(team_ids)
    if rng is not None:
        rng.shuffle(teams)

    pairs = list(combinations(teams, 2))

    if rng is not None:
        rng.shuffle(pairs)
    return pairs


def existing_round_robin_pairs(session: Session, championship_id: int) -> set:
    """Unordered pairs that already have a (non-knockout) match in the championship."""
    rows = session.exec(
        select(MatchTeam.match_id, MatchTeam.team_id)
        .join(Match, Match.id == MatchTeam.match_id)
        .where(Match.championship_id == championship_id, Match.is_knockout == False)  # noqa: E712
        .order_by(MatchTeam.match_id, MatchTeam.id)
    ).all()

    teams_by_match = {}
    for match_id, team_id in rows:
        teams_by_match.setdefault(match_id, []).append(team_id)
    return {frozenset(teams) for teams in teams_by_match.values() if len(teams) == 2}


def generate_round_robin(
    session: Session,
    championship: Championship,
    team_ids: Any,
    rng: Optional[random.Random] = None,
) -> ServiceResult:
    """
    Create one scheduled match for every pair of the given teams.

    - team_ids must hold at least two valid, positive ids after deduplication (400)
    - every team must exist (404)
    - a pair that already has a round-robin match in this championship is rejected (409)
    - all matches, participations and enrollments are committed together or not at all
    """
    if championship is None:
        return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Championship not provided.")

    if not isinstance(team_ids, (list, tuple)) or len(team_ids) < 2:
        return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Provide at least two teams to generate matches.")

    normalized = normalize_team_ids(team_ids)
    if len(normalized) < 2:
        return ServiceResult.fail(
            ErrorKind.INVALID_INPUT,
            "Not enough teams left after validating the given ids.",
            details={"valid_team_ids": normalized},
        )

    missing = missing_team_ids(session, normalized)
    if missing:
        return ServiceResult.fail(
            ErrorKind.NOT_FOUND,
            "Some of the given teams were not found. No matches were generated.",
            details={"missing_team_ids": missing},
        )

    pairs = round_robin_pairs(normalized, rng if rng is not None else random.Random())

    try:
        with championship_lock(championship.id):
            already_played = existing_round_robin_pairs(session, championship.id)
            duplicated = sorted(sorted(pair) for pair in pairs if frozenset(pair) in already_played)
            if duplicated:
                logger.warning(
                    "Round-robin generation for championship %s rejected: %d pairs already scheduled",
                    championship.id, len(duplicated),
                )
                return ServiceResult.fail(
                    ErrorKind.CONFLICT,
                    "Some pairs already have a match in this championship.",
                    details={"duplicated_pairs": duplicated},
                )

            return _persist_round_robin(session, championship, normalized, pairs)
    except ChampionshipBusyError as exc:
        return ServiceResult.fail(ErrorKind.CONFLICT, str(exc))


def _persist_round_robin(session: Session, championship: Championship, team_ids: List[int], pairs) -> ServiceResult:
    championship_id = championship.id
    try:
        match_ids = []
        for home_team_id, away_team_id in pairs:
            match = Match(championship_id=championship_id, status=MatchStatus.SCHEDULED)
            session.add(match)
            session.flush()  # assigns match.id

            session.add(MatchTeam(match_id=match.id, team_id=home_team_id))
            session.add(MatchTeam(match_id=match.id, team_id=away_team_id))
            match_ids.append(match.id)

        enroll_teams(session, championship_id, team_ids)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Round-robin generation for championship %s rolled back", championship_id)
        return ServiceResult.fail(ErrorKind.INTERNAL, "Failed to generate matches.", details=str(exc))

    logger.info(
        "✅ Generated %d round-robin matches for championship %s (%d teams)",
        len(match_ids), championship_id, len(team_ids),
    )
    return ServiceResult.ok(
        "Matches generated successfully.",
        data={"matches_created": len(match_ids), "match_ids": match_ids},
        status_code=201,
    )
