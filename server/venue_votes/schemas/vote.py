"""Pydantic schemas for voting.

Field names match the JSON the frontend sends and reads (camelCase).
"""

from pydantic import BaseModel, ConfigDict, Field


class VoteRequest(BaseModel):
    # Required-ness is enforced by the vote service so that a missing field
    # answers 400 {error} rather than FastAPI's 422.
    model_config = ConfigDict(populate_by_name=True)

    voter_name: str | None = Field(default=None, alias="voterName")
    venue_name: str | None = Field(default=None, alias="venueName")
    category: str | None = None
    is_voting: bool | None = Field(default=False, alias="isVoting")


class VoteActionResponse(BaseModel):
    success: bool
    action: str


class VenueAggregate(BaseModel):
    count: int
    voters: list[str]
    category: str


class ErrorResponse(BaseModel):
    error: str
