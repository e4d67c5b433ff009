# timeutils.py
# Timezone-aware timestamps for model defaults and result registration.

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
