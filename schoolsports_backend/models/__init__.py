# schoolsports_backend/models/__init__.py
# Centralized imports for all database models and schemas

# Championship and enrollment
from .championship_model import (
    Championship, ChampionshipTeam, ChampionshipFormat, Modality,
    ChampionshipCreate, ChampionshipUpdate, GenerateMatchesRequest, KnockoutRoundRequest
)

# Team
from .team_model import Team, TeamCreate, TeamUpdate

# School class
from .school_class_model import SchoolClass, SchoolClassCreate, SchoolClassUpdate, Semester

# Player
from .player_model import Player, PlayerCreate, PlayerUpdate

# Match and participations
from .match_model import (
    Match, MatchTeam, MatchStatus, MatchOutcome, STATUS_LABELS,
    MatchCreate, MatchUpdate, MatchResultRequest, TeamScore
)

# Knockout bracket progress
from .knockout_model import KnockoutState, KnockoutStatus
