# __init__.py
# Imports all seed functions for easy batch seeding.

from .seed_championships import seed_championships
from .seed_classes import seed_classes
from .seed_teams import seed_teams
from .seed_players import seed_players
