# schoolsports_backend/core/scoring_config.py
"""
scoring_config.py
-----------------
Points awarded per match outcome for each modality.

A draw value of None means the modality has no draws: a tied score is not a
valid final result and is rejected when registering it.
"""

from schoolsports_backend.models.championship_model import Modality

POINTS_TABLE = {
    # ==========================================
    # ⚽ FOOTBALL - win 3 / draw 1 / loss 0
    # ==========================================
    Modality.FOOTBALL: {
        "win": 3,
        "draw": 1,
        "loss": 0,
    },

    # ==========================================
    # 🏐 VOLLEYBALL - win 3 / loss 0, no draws
    # ==========================================
    Modality.VOLLEYBALL: {
        "win": 3,
        "draw": None,
        "loss": 0,
    },
}

# Points values used to classify legacy participations that carry no stored
# outcome (3 = win, 1 = draw, anything else = loss).
WIN_POINTS = 3
DRAW_POINTS = 1
