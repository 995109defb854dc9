"""Create votes table

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Stores created before migrations were tracked already hold a ``votes``
table with an unnamed UNIQUE(voter_name, venue_name); those are adopted
in place and only the missing indexes are added.

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

INDEXES = {
    "ix_votes_voter_name": ["voter_name"],
    "ix_votes_venue_name": ["venue_name"],
}


def upgrade() -> None:
    inspector = sa.inspect(op.get_bind())

    if not inspector.has_table("votes"):
        op.create_table(
            "votes",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("voter_name", sa.String(255), nullable=False),
            sa.Column("venue_name", sa.String(255), nullable=False),
            sa.Column("category", sa.String(255), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.UniqueConstraint("voter_name", "venue_name", name="uq_vote_voter_venue"),
        )
        existing_indexes = set()
    else:
        unique_columns = [
            set(c["column_names"]) for c in inspector.get_unique_constraints("votes")
        ]
        if {"voter_name", "venue_name"} not in unique_columns:
            with op.batch_alter_table("votes") as batch_op:
                batch_op.create_unique_constraint(
                    "uq_vote_voter_venue", ["voter_name", "venue_name"]
                )
        existing_indexes = {index["name"] for index in inspector.get_indexes("votes")}

    for name, columns in INDEXES.items():
        if name not in existing_indexes:
            op.create_index(name, "votes", columns)


def downgrade() -> None:
    op.drop_index("ix_votes_venue_name", table_name="votes")
    op.drop_index("ix_votes_voter_name", table_name="votes")
    op.drop_table("votes")
