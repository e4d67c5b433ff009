# seed_classes.py
# Seeds the sample school classes (find-or-create by name).

import logging

from sqlmodel import Session, select

from schoolsports_backend.core.database import sync_engine
from schoolsports_backend.models.school_class_model import SchoolClass, Semester

logger = logging.getLogger(__name__)

CLASSES = [
    {
        "name": "Computing A",
        "description": "Computing class focused on web development",
        "year": 2025,
        "semester": Semester.FIRST,
        "course": "Computing",
    },
    {
        "name": "Computing B",
        "description": "Computing class focused on networks",
        "year": 2025,
        "semester": Semester.SECOND,
        "course": "Computing",
    },
    {
        "name": "Administration A",
        "description": "Administration class focused on sports management",
        "year": 2025,
        "semester": Semester.FIRST,
        "course": "Administration",
    },
]


def seed_classes():
    with Session(sync_engine) as session:
        for data in CLASSES:
            if session.exec(select(SchoolClass).where(SchoolClass.name == data["name"])).first():
                logger.info("🔁 Class already exists: %s", data["name"])
                continue
            logger.info("➕ Adding class: %s", data["name"])
            session.add(SchoolClass(**data))
        session.commit()
