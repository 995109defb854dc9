from venue_votes.models.base import Base
from venue_votes.models.vote import Vote

__all__ = [
    "Base",
    "Vote",
]
