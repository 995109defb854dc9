from venue_votes.schemas.vote import ErrorResponse, VenueAggregate, VoteActionResponse, VoteRequest

__all__ = [
    "VoteRequest",
    "VoteActionResponse",
    "VenueAggregate",
    "ErrorResponse",
]
