"""initial moderation schema

Revision ID: 3c1f9a2b7d40
Revises:
Create Date: 2026-10-18 09:12:40.518231

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create platform, request, vote, reputation, expertise and appeal tables."""
    op.create_table(
        "platform",
        sa.Column("identity", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("request_count", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("identity"),
    )
    op.create_table(
        "moderation_request",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("platform_id", sa.Text(), nullable=False),
        sa.Column("content_digest", sa.LargeBinary(length=32), nullable=False),
        sa.Column("submitter", sa.Text(), nullable=False),
        sa.Column("status", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("final_classification", sa.SmallInteger(), nullable=False),
        sa.Column("total_stake_for", sa.BigInteger(), nullable=False),
        sa.Column("total_stake_against", sa.BigInteger(), nullable=False),
        sa.Column("appeal_deadline", sa.BigInteger(), nullable=False),
        sa.Column("finalized_at", sa.BigInteger(), nullable=True),
        sa.ForeignKeyConstraint(["platform_id"], ["platform.identity"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "moderator_vote",
        sa.Column("request_id", sa.BigInteger(), nullable=False),
        sa.Column("moderator", sa.Text(), nullable=False),
        sa.Column("classification", sa.SmallInteger(), nullable=False),
        sa.Column("stake_amount", sa.BigInteger(), nullable=False),
        sa.Column("voted_at", sa.BigInteger(), nullable=False),
        sa.Column("is_appeal", sa.Boolean(), nullable=False),
        sa.CheckConstraint(
            "classification BETWEEN 0 AND 5",
            name="ck_moderator_vote_classification",
        ),
        sa.ForeignKeyConstraint(["request_id"], ["moderation_request.id"]),
        sa.PrimaryKeyConstraint("request_id", "moderator"),
    )
    op.create_index("ix_moderator_vote_request_id", "moderator_vote", ["request_id"])
    op.create_table(
        "moderator_reputation",
        sa.Column("moderator", sa.Text(), nullable=False),
        sa.Column("total_decisions", sa.BigInteger(), nullable=False),
        sa.Column("correct_decisions", sa.BigInteger(), nullable=False),
        sa.Column("total_stake", sa.BigInteger(), nullable=False),
        sa.Column("regional_weight", sa.SmallInteger(), nullable=False),
        sa.PrimaryKeyConstraint("moderator"),
    )
    op.create_table(
        "regional_expertise",
        sa.Column("moderator", sa.Text(), nullable=False),
        sa.Column("region", sa.Text(), nullable=False),
        sa.Column("weight", sa.SmallInteger(), nullable=False),
        sa.CheckConstraint("weight BETWEEN 1 AND 100", name="ck_regional_expertise_weight"),
        sa.PrimaryKeyConstraint("moderator", "region"),
    )
    op.create_table(
        "appeal",
        sa.Column("request_id", sa.BigInteger(), nullable=False),
        sa.Column("appellant", sa.Text(), nullable=False),
        sa.Column("appeal_stake", sa.BigInteger(), nullable=False),
        sa.Column("appealed_at", sa.BigInteger(), nullable=False),
        sa.Column("original_classification", sa.SmallInteger(), nullable=False),
        sa.Column("new_classification", sa.SmallInteger(), nullable=False),
        sa.ForeignKeyConstraint(["request_id"], ["moderation_request.id"]),
        sa.PrimaryKeyConstraint("request_id"),
    )
    op.create_table(
        "system_clock",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("block_height", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "ledger_counter",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("next_request_id", sa.BigInteger(), nullable=False),
        sa.Column("platform_count", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop every moderation table."""
    op.drop_table("ledger_counter")
    op.drop_table("system_clock")
    op.drop_table("appeal")
    op.drop_table("regional_expertise")
    op.drop_table("moderator_reputation")
    op.drop_index("ix_moderator_vote_request_id", table_name="moderator_vote")
    op.drop_table("moderator_vote")
    op.drop_table("moderation_request")
    op.drop_table("platform")
