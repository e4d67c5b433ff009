# scoring.py
# Scoring policy (scores -> points per modality) and match result registration.

import logging
from datetime import datetime
from typing import Any, Optional

from sqlmodel import Session
from sqlalchemy.exc import SQLAlchemyError

from schoolsports_backend.core.errors import ErrorKind, ServiceResult
from schoolsports_backend.core.locks import championship_lock, ChampionshipBusyError
from schoolsports_backend.core.scoring_config import POINTS_TABLE
from schoolsports_backend.core.timeutils import utc_now
from schoolsports_backend.models.championship_model import Championship, Modality
from schoolsports_backend.models.match_model import Match, MatchStatus, MatchOutcome
from schoolsports_backend.services.knockout_state import refresh_knockout_state, superseded_by_later_round

logger = logging.getLogger(__name__)


def calculate_points(modality: Any, score_a: int, score_b: int) -> ServiceResult:
    """
    Convert two final scores into points for each side.

    Football: 3/0 for a win, 1/1 for a draw.
    Volleyball: 3/0 for a win; a tied score is not a valid result and is rejected.

    data = {"points": (a, b), "outcomes": (a, b)}
    """
    try:
        modality = Modality(modality)
    except ValueError:
        return ServiceResult.fail(ErrorKind.INVALID_INPUT, f"Unknown modality: {modality}.")

    if score_a < 0 or score_b < 0:
        return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Scores cannot be negative.")

    table = POINTS_TABLE[modality]

    if score_a > score_b:
        points = (table["win"], table["loss"])
        outcomes = (MatchOutcome.WIN, MatchOutcome.LOSS)
    elif score_b > score_a:
        points = (table["loss"], table["win"])
        outcomes = (MatchOutcome.LOSS, MatchOutcome.WIN)
    else:
        if table["draw"] is None:
            return ServiceResult.fail(
                ErrorKind.INVALID_INPUT,
                f"{modality.value} matches cannot end in a draw.",
                details={"scores": [score_a, score_b]},
            )
        points = (table["draw"], table["draw"])
        outcomes = (MatchOutcome.DRAW, MatchOutcome.DRAW)

    return ServiceResult.ok("Points calculated.", data={"points": points, "outcomes": outcomes})


def register_match_result(
    session: Session,
    match: Match,
    scores: dict,
    play_day: Optional[datetime] = None,
) -> ServiceResult:
    """
    Store the final score of a match and award points.

    scores maps team_id -> goals and must name exactly the two teams of the match.
    The match becomes Finished and its play day is filled (given value, existing
    value, or now). Knockout matches cannot end in a draw and cannot change once
    a later round exists.
    """
    participations = list(match.participations)
    if len(participations) != 2:
        return ServiceResult.fail(
            ErrorKind.INVALID_INPUT,
            "The match must have exactly two teams.",
            details={"match_id": match.id},
        )

    expected = {p.team_id for p in participations}
    if set(scores) != expected or len(scores) != 2:
        return ServiceResult.fail(
            ErrorKind.INVALID_INPUT,
            "Scores must be given for exactly the two teams of the match.",
            details={"expected_team_ids": sorted(expected)},
        )

    championship = session.get(Championship, match.championship_id)
    if championship is None:
        return ServiceResult.fail(ErrorKind.NOT_FOUND, "Championship not found.")

    first, second = participations
    policy = calculate_points(championship.modality, scores[first.team_id], scores[second.team_id])
    if not policy.success:
        return policy

    if match.is_knockout and policy.data["outcomes"][0] == MatchOutcome.DRAW:
        return ServiceResult.fail(
            ErrorKind.INVALID_INPUT,
            "Knockout matches cannot end in a draw.",
            details={"match_id": match.id},
        )

    try:
        with championship_lock(championship.id):
            if superseded_by_later_round(session, match):
                return _superseded(match)

            goals = (scores[first.team_id], scores[second.team_id])
            return _persist_result(session, match, championship.id, (first, second), goals, policy.data, play_day)
    except ChampionshipBusyError as exc:
        return ServiceResult.fail(ErrorKind.CONFLICT, str(exc))


def _persist_result(session: Session, match: Match, championship_id: int, sides, goals, policy: dict, play_day) -> ServiceResult:
    match_id = match.id
    teams = []
    try:
        for participation, team_goals, points, outcome in zip(sides, goals, policy["points"], policy["outcomes"]):
            participation.goals = team_goals
            participation.points = points
            participation.outcome = outcome
            session.add(participation)
            teams.append({"team_id": participation.team_id, "goals": team_goals, "points": points, "outcome": outcome.value})

        match.status = MatchStatus.FINISHED
        match.play_day = play_day or match.play_day or utc_now()
        session.add(match)

        if match.is_knockout:
            refresh_knockout_state(session, championship_id)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Result registration for match %s rolled back", match_id)
        return ServiceResult.fail(ErrorKind.INTERNAL, "Failed to register the result.", details=str(exc))

    logger.info("✅ Result registered for match %s", match_id)
    return ServiceResult.ok("Result registered successfully.", data={"match_id": match_id, "teams": teams})


def _superseded(match: Match) -> ServiceResult:
    return ServiceResult.fail(
        ErrorKind.CONFLICT,
        "This match was superseded by a later round and can no longer change.",
        details={"match_id": match.id},
    )


def update_match_details(session: Session, match: Match, changes: dict) -> ServiceResult:
    """
    Change the play day and/or status of a match.

    Finishing a match requires a result, and a finished match keeps its status.
    Knockout matches follow the same rules as results: they are frozen once a
    later round exists and the cached bracket state is refreshed on every change.
    """
    status = changes.get("status")
    if status is not None:
        status = MatchStatus(int(status))
        if status == MatchStatus.FINISHED and match.status != MatchStatus.FINISHED:
            return ServiceResult.fail(
                ErrorKind.INVALID_INPUT,
                "Register the result to finish a match.",
                details={"match_id": match.id},
            )
        if match.status == MatchStatus.FINISHED and status != MatchStatus.FINISHED:
            return ServiceResult.fail(
                ErrorKind.CONFLICT,
                "A finished match cannot go back to another status.",
                details={"match_id": match.id},
            )

    try:
        with championship_lock(match.championship_id):
            if superseded_by_later_round(session, match):
                return _superseded(match)
            return _persist_match_changes(session, match, changes)
    except ChampionshipBusyError as exc:
        return ServiceResult.fail(ErrorKind.CONFLICT, str(exc))


def _persist_match_changes(session: Session, match: Match, changes: dict) -> ServiceResult:
    match_id = match.id
    try:
        for key, value in changes.items():
            setattr(match, key, int(value) if key == "status" else value)
        session.add(match)

        if match.is_knockout:
            refresh_knockout_state(session, match.championship_id)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Update of match %s rolled back", match_id)
        return ServiceResult.fail(ErrorKind.INTERNAL, "Failed to update the match.", details=str(exc))

    logger.info("Match %s updated: %s", match_id, sorted(changes))
    return ServiceResult.ok("Match updated successfully.", data={"match_id": match_id})
