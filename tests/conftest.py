"""
tests/conftest.py
Shared fixtures: a temporary SQLite database per test, reachable through a sync
engine (services, seeding) and an aiosqlite engine (public routes), plus small
factories for championships, teams and results.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, Session, create_engine

from schoolsports_backend import models  # noqa: F401  (registers every table)
from schoolsports_backend.core.config import ADMIN_API_TOKEN
from schoolsports_backend.core.database import get_db, get_session
from schoolsports_backend.main import app
from schoolsports_backend.models.championship_model import Championship, Modality
from schoolsports_backend.models.match_model import Match
from schoolsports_backend.models.team_model import Team
from schoolsports_backend.services.scoring import register_match_result


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "championships.db"


@pytest.fixture
def sync_engine(db_path):
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(sync_engine):
    with Session(sync_engine) as session:
        yield session


@pytest.fixture
def client(sync_engine, db_path):
    """TestClient bound to the temporary database. Startup (auto-seed) is not triggered."""
    async_engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    async_session_maker = sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)

    def override_get_session():
        with Session(sync_engine) as session:
            yield session

    async def override_get_db():
        async with async_session_maker() as db:
            yield db

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_API_TOKEN}"}


@pytest.fixture
def make_championship(session):
    def _make(name="School Cup", year=2025, modality=Modality.FOOTBALL):
        championship = Championship(name=name, year=year, modality=modality)
        session.add(championship)
        session.commit()
        session.refresh(championship)
        return championship
    return _make


@pytest.fixture
def make_teams(session):
    def _make(*names):
        teams = [Team(name=name, modality="Football") for name in names]
        session.add_all(teams)
        session.commit()
        for team in teams:
            session.refresh(team)
        return teams
    return _make


@pytest.fixture
def score_match(session):
    """Register a result through the service; fails the test if it is rejected."""
    def _score(match_id, scores):
        match = session.get(Match, match_id)
        result = register_match_result(session, match, scores)
        assert result.success, result.message
        return result
    return _score


@pytest.fixture
def fail_second_match_flush(monkeypatch, session):
    """Once armed, the session fails while flushing the second new Match of a batch."""
    def _arm():
        real_flush = session.flush
        seen = {"match_flushes": 0}

        def flush(*args, **kwargs):
            if any(isinstance(obj, Match) for obj in session.new):
                seen["match_flushes"] += 1
                if seen["match_flushes"] == 2:
                    raise SQLAlchemyError("simulated write failure")
            return real_flush(*args, **kwargs)

        monkeypatch.setattr(session, "flush", flush)
        return seen
    return _arm
