"""UTC datetime utilities.

Returns **naive** UTC datetimes (no tzinfo) so values line up with the
``DateTime`` column on ``votes.created_at`` under SQLite and PostgreSQL.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)
