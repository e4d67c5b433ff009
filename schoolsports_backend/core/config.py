import os

# =====================================
# Global configuration for the championship backend
# =====================================

def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# TEST_MODE:
# When True, testing features are enabled.
# Example uses:
#   - Expose diagnostic details of internal failures in API responses
#   - Echo SQL unless SQL_ECHO says otherwise
TEST_MODE = _env_flag("TEST_MODE", "false")

# --- Database ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATABASE_PATH = os.getenv("DATABASE_PATH", os.path.join(BASE_DIR, "schoolsports.db"))
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{DATABASE_PATH}")    # Async engine (public reads)
SYNC_DATABASE_URL = os.getenv("SYNC_DATABASE_URL", f"sqlite:///{DATABASE_PATH}")   # Sync engine (services/seeding)
SQL_ECHO = _env_flag("SQL_ECHO", "false")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- Startup ---
# Seed sample championships, classes, teams and players into an empty database.
AUTO_SEED = _env_flag("AUTO_SEED", "true")

# --- Access control ---
# Bearer tokens accepted by the API. Admins may mutate data and read reports,
# viewers may only read.
ADMIN_API_TOKEN = os.getenv("ADMIN_API_TOKEN", "change-me-admin")
VIEWER_API_TOKEN = os.getenv("VIEWER_API_TOKEN", "")

# --- Championship operations ---
# Seconds to wait for another operation on the same championship to finish.
LOCK_TIMEOUT_SECONDS = float(os.getenv("LOCK_TIMEOUT_SECONDS", "10"))

# Default size of the top-teams report.
TOP_TEAMS_DEFAULT_LIMIT = 5
