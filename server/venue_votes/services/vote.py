"""Vote service: casting, retracting and aggregating venue votes."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from venue_votes.core.time import utcnow
from venue_votes.core.validation import MAX_NAME_LENGTH, normalize_single_line, validate_length
from venue_votes.models.vote import Vote
from venue_votes.schemas.vote import VenueAggregate

logger = logging.getLogger(__name__)

ACTION_VOTED = "voted"
ACTION_UNVOTED = "unvoted"


class ValidationError(Exception):
    """Raised when a vote request is missing a required field."""


class StorageError(Exception):
    """Raised when the underlying database fails."""


def _require(value: str | None, field: str) -> str:
    normalized = normalize_single_line(value)
    if not normalized:
        raise ValidationError("Missing required fields")
    if not validate_length(normalized, min_len=1, max_len=MAX_NAME_LENGTH):
        raise ValidationError(f"{field} must be at most {MAX_NAME_LENGTH} characters")
    return normalized


def _storage_failure(db: Session, operation: str) -> StorageError:
    db.rollback()
    logger.exception("Vote store %s failed", operation)
    return StorageError(f"Vote store {operation} failed")


def _find_vote(db: Session, voter_name: str, venue_name: str) -> Vote | None:
    return db.scalars(
        select(Vote).where(Vote.voter_name == voter_name, Vote.venue_name == venue_name)
    ).first()


def cast_vote(db: Session, voter_name: str, venue_name: str, category: str) -> bool:
    """
    Record a vote for a venue.
    Returns True if a vote was inserted. Idempotent: a voter already counted
    for the venue is a no-op, whatever the category.
    Uses the (voter_name, venue_name) unique constraint for concurrency safety.
    """
    try:
        if _find_vote(db, voter_name, venue_name) is not None:
            return False

        db.add(
            Vote(
                voter_name=voter_name,
                venue_name=venue_name,
                category=category,
                created_at=utcnow(),
            )
        )
        db.flush()  # Force unique constraint check
        db.commit()
        return True
    except IntegrityError as exc:
        db.rollback()
        # Only a concurrent vote for the same pair is a no-op
        try:
            if _find_vote(db, voter_name, venue_name) is not None:
                return False
        except SQLAlchemyError as read_exc:
            raise _storage_failure(db, "insert") from read_exc
        logger.error("Vote insert violated a constraint other than uq_vote_voter_venue")
        raise StorageError("Vote store insert failed") from exc
    except SQLAlchemyError as exc:
        raise _storage_failure(db, "insert") from exc


def retract_vote(db: Session, voter_name: str, venue_name: str) -> bool:
    """
    Remove a voter's vote for a venue, regardless of category.
    Returns True if a vote was removed. Idempotent.
    """
    try:
        result = db.execute(
            delete(Vote).where(Vote.voter_name == voter_name, Vote.venue_name == venue_name)
        )
        db.commit()
        return result.rowcount > 0
    except SQLAlchemyError as exc:
        raise _storage_failure(db, "delete") from exc


def cast_or_retract_vote(
    db: Session,
    voter_name: str | None,
    venue_name: str | None,
    category: str | None,
    is_voting: bool,
) -> str:
    """Validate the request, then cast or retract. Returns the action taken."""
    voter_name = _require(voter_name, "voterName")
    venue_name = _require(venue_name, "venueName")
    category = _require(category, "category")

    if is_voting:
        cast_vote(db, voter_name, venue_name, category)
        return ACTION_VOTED

    retract_vote(db, voter_name, venue_name)
    return ACTION_UNVOTED


def list_aggregates(db: Session) -> dict[str, VenueAggregate]:
    """
    Group current votes by venue.

    Voters are listed in insertion order. A venue's category is taken from
    its earliest vote; venues without votes are absent.
    """
    try:
        rows = db.execute(
            select(Vote.venue_name, Vote.voter_name, Vote.category).order_by(Vote.id)
        ).all()
    except SQLAlchemyError as exc:
        raise _storage_failure(db, "read") from exc

    aggregates: dict[str, VenueAggregate] = {}
    for venue_name, voter_name, category in rows:
        aggregate = aggregates.get(venue_name)
        if aggregate is None:
            aggregate = aggregates[venue_name] = VenueAggregate(
                count=0, voters=[], category=category
            )
        aggregate.voters.append(voter_name)
        aggregate.count += 1
    return aggregates


def list_distinct_voters(db: Session) -> list[str]:
    """Names of everyone with at least one active vote, in order of first vote."""
    try:
        names = db.scalars(select(Vote.voter_name).order_by(Vote.id)).all()
    except SQLAlchemyError as exc:
        raise _storage_failure(db, "read") from exc
    return list(dict.fromkeys(names))
