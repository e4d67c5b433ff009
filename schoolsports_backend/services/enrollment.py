# enrollment.py
# Registers teams into championships. Enrolling an already enrolled team is a no-op.

from typing import Iterable, List

from sqlmodel import Session, select

from schoolsports_backend.models.championship_model import ChampionshipTeam


def enroll_team(session: Session, championship_id: int, team_id: int) -> bool:
    """
    Add the (championship, team) enrollment inside the caller's transaction.
    Returns True when a row was added, False when the team was already enrolled.
    Does not commit.
    """
    existing = session.exec(
        select(ChampionshipTeam).where(
            ChampionshipTeam.championship_id == championship_id,
            ChampionshipTeam.team_id == team_id,
        )
    ).first()
    if existing:
        return False

    session.add(ChampionshipTeam(championship_id=championship_id, team_id=team_id))
    return True


def enroll_teams(session: Session, championship_id: int, team_ids: Iterable[int]) -> int:
    """Enroll every distinct team id. Returns how many new enrollments were added."""
    added = 0
    for team_id in dict.fromkeys(team_ids):
        if enroll_team(session, championship_id, team_id):
            added += 1
    # Make the new rows visible to later lookups in the same transaction
    session.flush()
    return added


def enrolled_team_ids(session: Session, championship_id: int) -> List[int]:
    return list(session.exec(
        select(ChampionshipTeam.team_id)
        .where(ChampionshipTeam.championship_id == championship_id)
        .order_by(ChampionshipTeam.team_id)
    ).all())
