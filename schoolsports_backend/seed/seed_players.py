# seed_players.py
# Seeds the sample players. Each player is looked up by (name, class); classes and
# teams must be seeded first, players pointing at an unknown class or team are skipped.

import logging

from sqlmodel import Session, select

from schoolsports_backend.core.database import sync_engine
from schoolsports_backend.models.player_model import Player
from schoolsports_backend.models.school_class_model import SchoolClass
from schoolsports_backend.models.team_model import Team

logger = logging.getLogger(__name__)

# (name, age, class name, team name)
PLAYERS = [
    ("Alex Costa", 18, "Computing A", "Blue Wolves"),
    ("Bianca Souza", 17, "Computing A", "Golden Phoenix"),
    ("Carlos Lima", 19, "Computing B", "Green Tigers"),
    ("Daniela Santos", 18, "Computing B", "Black Lions"),
    ("Eduardo Fernandes", 20, "Administration A", "White Owls"),
    ("Fernanda Ribeiro", 19, "Administration A", "Red Panthers"),
    ("Gabriel Alves", 21, "Computing A", "Striped Jaguars"),
    ("Helena Martins", 18, "Computing B", "Swift Foxes"),
    ("Igor Pereira", 20, "Computing A", "Blue Wolves"),
    ("Júlia Carvalho", 21, "Administration A", "Golden Phoenix"),
    ("Lucas Mendes", 22, "Computing B", "Green Tigers"),
    ("Mariana Rocha", 18, "Computing A", "Black Lions"),
    ("Nicolas Prado", 19, "Computing B", "White Owls"),
    ("Olívia Farias", 17, "Administration A", "Red Panthers"),
    ("Paulo Henrique", 22, "Computing A", "Striped Jaguars"),
    ("Queila Dias", 20, "Computing B", "Swift Foxes"),
]


def seed_players():
    with Session(sync_engine) as session:
        classes = {c.name: c.id for c in session.exec(select(SchoolClass)).all()}
        teams = {t.name: t.id for t in session.exec(select(Team)).all()}

        added = 0
        for name, age, class_name, team_name in PLAYERS:
            class_id = classes.get(class_name)
            team_id = teams.get(team_name)
            if class_id is None or team_id is None:
                logger.warning("⚠️ Skipping %s: class or team missing", name)
                continue

            existing = session.exec(
                select(Player).where(Player.name == name, Player.class_id == class_id)
            ).first()
            if existing:
                continue

            session.add(Player(name=name, age=age, class_id=class_id, team_id=team_id))
            added += 1

        session.commit()
        logger.info("✅ Players seeded (%d new)", added)
