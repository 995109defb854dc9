from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from venue_votes.core.time import utcnow
from venue_votes.models.base import Base


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("voter_name", "venue_name", name="uq_vote_voter_venue"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    voter_name: Mapped[str] = mapped_column(String(255), index=True)
    venue_name: Mapped[str] = mapped_column(String(255), index=True)
    category: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
