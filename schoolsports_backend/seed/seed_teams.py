# seed_teams.py
# Seeds the sample teams (find-or-create by name). The modality is a free tag.

import logging

from sqlmodel import Session, select

from schoolsports_backend.core.database import sync_engine
from schoolsports_backend.models.team_model import Team

logger = logging.getLogger(__name__)

TEAMS = [
    ("Blue Wolves", "Football"),
    ("Golden Phoenix", "Football"),
    ("Green Tigers", "Football"),
    ("Black Lions", "Football"),
    ("White Owls", "Futsal"),
    ("Red Panthers", "Futsal"),
    ("Striped Jaguars", "Basketball"),
    ("Swift Foxes", "Basketball"),
]


def seed_teams():
    with Session(sync_engine) as session:
        added = 0
        for name, modality in TEAMS:
            if session.exec(select(Team).where(Team.name == name)).first():
                continue
            session.add(Team(name=name, modality=modality))
            added += 1
        session.commit()
        logger.info("✅ Teams seeded (%d new, %d total in sample)", added, len(TEAMS))
