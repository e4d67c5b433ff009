# seed_all.py
# Orchestrates all seed scripts to populate the database in the correct order.

import logging

from schoolsports_backend.seed.seed_championships import seed_championships
from schoolsports_backend.seed.seed_classes import seed_classes
from schoolsports_backend.seed.seed_teams import seed_teams
from schoolsports_backend.seed.seed_players import seed_players

logger = logging.getLogger(__name__)


def seed_all():
    logger.info("🌱 Starting full database seeding...")

    logger.info("➡️  Step 1: Seeding championships...")
    seed_championships()

    logger.info("➡️  Step 2: Seeding school classes...")
    seed_classes()

    logger.info("➡️  Step 3: Seeding teams...")
    seed_teams()

    logger.info("➡️  Step 4: Seeding players...")
    seed_players()

    logger.info("✅ Database seeding complete.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_all()
