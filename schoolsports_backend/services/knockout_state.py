# knockout_state.py
# Derives and caches the bracket progress of a championship.

from typing import Iterable, Optional, Tuple

from sqlmodel import Session, select

from schoolsports_backend.core.timeutils import utc_now
from schoolsports_backend.models.knockout_model import KnockoutState, KnockoutStatus
from schoolsports_backend.models.match_model import Match, MatchStatus


def match_winner(match: Match) -> Optional[int]:
    """Team id of the higher-scoring side of a finished two-team match, None for anything else."""
    if match.status != MatchStatus.FINISHED or len(match.participations) != 2:
        return None
    first, second = match.participations
    if first.goals == second.goals:
        return None
    return first.team_id if first.goals > second.goals else second.team_id


def superseded_by_later_round(session: Session, match: Match) -> bool:
    """True when a knockout match already has a later round built on top of it."""
    if not match.is_knockout or match.round_number is None:
        return False
    later_round = session.exec(
        select(Match.id).where(
            Match.championship_id == match.championship_id,
            Match.is_knockout == True,  # noqa: E712
            Match.round_number > match.round_number,
        )
    ).first()
    return later_round is not None


def derive_knockout_state(matches: Iterable[Match]) -> Tuple[KnockoutStatus, Optional[int], Optional[int]]:
    """
    Compute (status, current_round, champion_team_id) from a championship's knockout matches.

    - no knockout match: NOT_STARTED
    - latest round has an unfinished match: ROUND_IN_PROGRESS(latest)
    - latest round fully finished with a single match: FINISHED, champion = its winner
    - latest round fully finished otherwise: ROUND_COMPLETE(latest)
    """
    rounds = {}
    for match in matches:
        if match.is_knockout and match.round_number is not None:
            rounds.setdefault(match.round_number, []).append(match)

    if not rounds:
        return KnockoutStatus.NOT_STARTED, None, None

    latest = max(rounds)
    latest_matches = rounds[latest]

    if any(m.status != MatchStatus.FINISHED for m in latest_matches):
        return KnockoutStatus.ROUND_IN_PROGRESS, latest, None

    if len(latest_matches) == 1:
        return KnockoutStatus.FINISHED, latest, match_winner(latest_matches[0])

    return KnockoutStatus.ROUND_COMPLETE, latest, None


def refresh_knockout_state(session: Session, championship_id: int) -> KnockoutState:
    """
    Recompute the cached state inside the caller's transaction (no commit).
    Pending matches must already be flushed.
    """
    session.flush()
    matches = session.exec(
        select(Match).where(Match.championship_id == championship_id, Match.is_knockout == True)  # noqa: E712
    ).all()
    status, current_round, champion = derive_knockout_state(matches)

    state = session.exec(select(KnockoutState).where(KnockoutState.championship_id == championship_id)).first()
    if state is None:
        state = KnockoutState(championship_id=championship_id)

    state.status = status
    state.current_round = current_round
    state.champion_team_id = champion
    state.updated_at = utc_now()
    session.add(state)
    return state


def get_knockout_state(session: Session, championship_id: int) -> dict:
    """Cached state of the bracket, computed on the fly when nothing was cached yet."""
    state = session.exec(select(KnockoutState).where(KnockoutState.championship_id == championship_id)).first()
    if state is None:
        matches = session.exec(
            select(Match).where(Match.championship_id == championship_id, Match.is_knockout == True)  # noqa: E712
        ).all()
        status, current_round, champion = derive_knockout_state(matches)
        return {
            "championship_id": championship_id,
            "status": status.value,
            "current_round": current_round,
            "champion_team_id": champion,
            "updated_at": None,
        }

    return {
        "championship_id": championship_id,
        "status": state.status.value if isinstance(state.status, KnockoutStatus) else state.status,
        "current_round": state.current_round,
        "champion_team_id": state.champion_team_id,
        "updated_at": state.updated_at,
    }
