# school_admin/models/common.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp for created_at columns."""
    return datetime.now(timezone.utc)
