"""Public API endpoints for venue voting."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from venue_votes.api.deps import get_db
from venue_votes.core.rate_limit import limiter, vote_rate_limit
from venue_votes.schemas.vote import (
    ErrorResponse,
    VenueAggregate,
    VoteActionResponse,
    VoteRequest,
)
from venue_votes.services.vote import cast_or_retract_vote, list_aggregates, list_distinct_voters

router = APIRouter()


@router.get("/votes", response_model=dict[str, VenueAggregate])
def get_votes(db: Session = Depends(get_db)) -> dict[str, VenueAggregate]:
    """Per-venue vote counts, voter lists and categories."""
    return list_aggregates(db)


@router.post(
    "/vote",
    response_model=VoteActionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(vote_rate_limit)
def post_vote(
    payload: VoteRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> VoteActionResponse:
    """Cast or retract a vote. Idempotent in both directions."""
    action = cast_or_retract_vote(
        db,
        payload.voter_name,
        payload.venue_name,
        payload.category,
        bool(payload.is_voting),
    )
    return VoteActionResponse(success=True, action=action)


@router.get("/voters", response_model=list[str])
def get_voters(db: Session = Depends(get_db)) -> list[str]:
    """Everyone who currently has at least one vote."""
    return list_distinct_voters(db)
