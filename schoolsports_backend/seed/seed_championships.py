"""
seed_championships.py
---------------------
Seeds the sample championships.

Delta seeding: only championships missing by name are inserted, so it is safe
to run multiple times.
"""

import logging

from sqlmodel import Session, select

from schoolsports_backend.core.database import sync_engine
from schoolsports_backend.models.championship_model import Championship, Modality

logger = logging.getLogger(__name__)

CHAMPIONSHIPS = [
    {"name": "School Cup", "year": 2025, "modality": Modality.FOOTBALL},
    {"name": "Winter Tournament", "year": 2025, "modality": Modality.VOLLEYBALL},
    {"name": "University League", "year": 2026, "modality": Modality.FOOTBALL},
]


def seed_championships():
    with Session(sync_engine) as session:
        for data in CHAMPIONSHIPS:
            existing = session.exec(select(Championship).where(Championship.name == data["name"])).first()
            if existing:
                logger.info("🔁 Championship already exists: %s", data["name"])
                continue

            logger.info("➕ Adding championship: %s (%s, %s)", data["name"], data["year"], data["modality"].value)
            session.add(Championship(**data))
        session.commit()
