# team_ids.py
# Helpers for validating team ids coming from request bodies.

from typing import Any, Iterable, List, Optional

from sqlmodel import Session, select

from schoolsports_backend.models.team_model import Team


def coerce_team_id(value: Any) -> Optional[int]:
    """
    Convert a raw team id to a positive integer.
    Accepts ints, integral floats and numeric strings; returns None otherwise.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text.startswith("+") else text
        # str.isdigit also accepts superscripts and other non-decimal digits
        if not (digits.isascii() and digits.isdigit()):
            return None
        number = int(digits)
    else:
        return None
    return number if number > 0 else None


def missing_team_ids(session: Session, team_ids: Iterable[int]) -> List[int]:
    """Return the ids (in input order) that do not resolve to an existing Team."""
    wanted = list(dict.fromkeys(team_ids))
    if not wanted:
        return []
    found = set(session.exec(select(Team.id).where(Team.id.in_(wanted))).all())
    return [team_id for team_id in wanted if team_id not in found]
