# knockout.py
# Knockout bracket manager: creates rounds from explicit pairs and advances winners into the next round.

import logging
from typing import Any, List, Optional, Tuple

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from schoolsports_backend.core.errors import ErrorKind, ServiceResult
from schoolsports_backend.core.locks import championship_lock, ChampionshipBusyError
from schoolsports_backend.models.championship_model import Championship, ChampionshipFormat
from schoolsports_backend.models.match_model import Match, MatchTeam, MatchStatus
from schoolsports_backend.services.enrollment import enroll_teams
from schoolsports_backend.services.knockout_state import refresh_knockout_state
from schoolsports_backend.services.team_ids import coerce_team_id, missing_team_ids

logger = logging.getLogger(__name__)


def _valid_round(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def bracket_sort_key(match: Match):
    """Bracket order ascending (unordered matches last), then id ascending."""
    return (match.bracket_order is None, match.bracket_order or 0, match.id)


def validate_pairs(pairs: Any) -> Tuple[Optional[List[Tuple[int, int]]], Optional[ServiceResult]]:
    """
    Check the (home, away) pairs of a round.
    Returns (normalized_pairs, None) or (None, failure).
    """
    if not isinstance(pairs, (list, tuple)) or not pairs:
        return None, ServiceResult.fail(ErrorKind.INVALID_INPUT, "Provide at least one pair of teams.")

    normalized = []
    seen = set()
    for position, pair in enumerate(pairs, start=1):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            return None, ServiceResult.fail(
                ErrorKind.INVALID_INPUT,
                "Each pair must contain exactly two team ids.",
                details={"pair_position": position},
            )

        home = coerce_team_id(pair[0])
        away = coerce_team_id(pair[1])
        if home is None or away is None:
            return None, ServiceResult.fail(
                ErrorKind.INVALID_INPUT,
                "Team ids must be positive integers.",
                details={"pair_position": position},
            )
        if home == away:
            return None, ServiceResult.fail(
                ErrorKind.INVALID_INPUT,
                "A team cannot play against itself.",
                details={"pair_position": position, "team_id": home},
            )

        for team_id in (home, away):
            if team_id in seen:
                return None, ServiceResult.fail(
                    ErrorKind.INVALID_INPUT,
                    "A team can only appear in one pair per round.",
                    details={"pair_position": position, "team_id": team_id},
                )
            seen.add(team_id)

        normalized.append((home, away))

    return normalized, None


# =========================================
# CREATE ROUND
# =========================================
def create_knockout_round(session: Session, championship: Championship, round_number: Any, pairs: Any) -> ServiceResult:
    """
    Create one knockout match per (home, away) pair for the given round.

    bracket_order is the pair's 1-based position. Every involved team is
    enrolled, and the championship switches to the knockout format.
    Everything is committed in one transaction.
    """
    if not _valid_round(round_number):
        return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Round must be an integer greater than or equal to 1.")

    normalized, failure = validate_pairs(pairs)
    if failure:
        return failure

    missing = missing_team_ids(session, [team_id for pair in normalized for team_id in pair])
    if missing:
        return ServiceResult.fail(
            ErrorKind.NOT_FOUND,
            "Some of the given teams were not found. No matches were created.",
            details={"missing_team_ids": missing},
        )

    try:
        with championship_lock(championship.id):
            return _persist_round(session, championship, round_number, normalized)
    except ChampionshipBusyError as exc:
        return ServiceResult.fail(ErrorKind.CONFLICT, str(exc))


# =========================================
# ADVANCE ROUND
# =========================================
def advance_knockout_round(session: Session, championship: Championship, round_number: Any) -> ServiceResult:
    """
    Pair the winners of a finished round into the next round.

    Fails when:
    - the next round already has matches (409)
    - the round has no knockout matches, or any of them is unfinished (400)
    - a match does not have exactly two participations (400)
    - a match ended in a draw (409, reports the match id)
    - the number of winners is odd (400)
    Winners are taken in bracket order; 1st plays 2nd, 3rd plays 4th, and so on.
    """
    if not _valid_round(round_number):
        return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Round must be an integer greater than or equal to 1.")

    next_round = round_number + 1

    try:
        with championship_lock(championship.id):
            already_created = session.exec(
                select(Match.id).where(Match.championship_id == championship.id, Match.round_number == next_round)
            ).first()
            if already_created is not None:
                logger.warning("Championship %s: round %s already exists, advance rejected", championship.id, next_round)
                return ServiceResult.fail(
                    ErrorKind.CONFLICT,
                    f"Round {next_round} already has matches.",
                    details={"round": next_round},
                )

            round_matches = session.exec(
                select(Match).where(
                    Match.championship_id == championship.id,
                    Match.is_knockout == True,  # noqa: E712
                    Match.round_number == round_number,
                )
            ).all()
            if not round_matches:
                return ServiceResult.fail(
                    ErrorKind.INVALID_INPUT,
                    f"No knockout matches found for round {round_number}.",
                    details={"round": round_number},
                )

            pending = sorted(m.id for m in round_matches if m.status != MatchStatus.FINISHED)
            if pending:
                return ServiceResult.fail(
                    ErrorKind.INVALID_INPUT,
                    f"Round {round_number} still has unfinished matches.",
                    details={"pending_match_ids": pending},
                )

            winners = []
            for match in sorted(round_matches, key=bracket_sort_key):
                participations = match.participations
                if len(participations) != 2:
                    return ServiceResult.fail(
                        ErrorKind.INVALID_INPUT,
                        "Knockout match does not have exactly two teams.",
                        details={"match_id": match.id},
                    )

                first, second = participations
                if first.goals == second.goals:
                    logger.warning("Championship %s: knockout match %s ended in a draw", championship.id, match.id)
                    return ServiceResult.fail(
                        ErrorKind.CONFLICT,
                        "Knockout match ended in a draw; register a decisive result first.",
                        details={"match_id": match.id},
                    )

                winners.append(first.team_id if first.goals > second.goals else second.team_id)

            if len(winners) == 1:
                return ServiceResult.fail(
                    ErrorKind.INVALID_INPUT,
                    f"Round {round_number} was the final; the bracket is complete.",
                    details={"champion_team_id": winners[0]},
                )
            if len(winners) % 2 != 0:
                return ServiceResult.fail(
                    ErrorKind.INVALID_INPUT,
                    "Cannot pair an odd number of winners.",
                    details={"winners": winners},
                )

            pairs = [(winners[i], winners[i + 1]) for i in range(0, len(winners), 2)]
            return _persist_round(session, championship, next_round, pairs)
    except ChampionshipBusyError as exc:
        return ServiceResult.fail(ErrorKind.CONFLICT, str(exc))


def _persist_round(session: Session, championship: Championship, round_number: int, pairs) -> ServiceResult:
    championship_id = championship.id
    try:
        match_ids = []
        for index, (home_team_id, away_team_id) in enumerate(pairs):
            match = Match(
                championship_id=championship_id,
                status=MatchStatus.SCHEDULED,
                round_number=round_number,
                bracket_order=index + 1,
                is_knockout=True,
            )
            session.add(match)
            session.flush()  # assigns match.id

            session.add(MatchTeam(match_id=match.id, team_id=home_team_id))
            session.add(MatchTeam(match_id=match.id, team_id=away_team_id))
            match_ids.append(match.id)

        enroll_teams(session, championship_id, [team_id for pair in pairs for team_id in pair])

        if championship.format != ChampionshipFormat.KNOCKOUT:
            championship.format = ChampionshipFormat.KNOCKOUT
            session.add(championship)

        refresh_knockout_state(session, championship_id)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Knockout round %s for championship %s rolled back", round_number, championship_id)
        return ServiceResult.fail(ErrorKind.INTERNAL, "Failed to create knockout matches.", details=str(exc))

    logger.info("✅ Created knockout round %s for championship %s (%d matches)", round_number, championship_id, len(match_ids))
    return ServiceResult.ok(
        f"Round {round_number} created successfully.",
        data={"round": round_number, "matches_created": len(match_ids), "match_ids": match_ids},
        status_code=201,
    )
