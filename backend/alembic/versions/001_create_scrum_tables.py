"""Create teams, members, meetings and meeting_members tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Initial schema: teams, their members, meetings and per-member talk time.
How:   Integer autoincrement keys; members are soft-deleted through the
       `deleted` flag, so the uniqueness of an active name inside a team is
       checked by the application rather than by a unique constraint.

Rollback: downgrade() drops all four tables.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "name",
            sa.String(255),
            nullable=False,
            comment="Display name of the team, unique across the installation",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        # 255 entered characters plus the 22-character " (deleted: YYYY-MM-DD)" marker
        sa.Column(
            "name",
            sa.String(277),
            nullable=False,
            comment="Member name; carries a '(deleted: <date>)' suffix once deleted",
        ),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column(
            "deleted",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
            comment="Soft-delete flag; deleted members keep their meeting history",
        ),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Serves the per-keystroke uniqueness count (team_id, name, deleted)
    op.create_index("idx_members_team_name", "members", ["team_id", "name"])

    op.create_table(
        "meetings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column(
            "meeting_date",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When the meeting took place (UTC)",
        ),
        sa.Column(
            "duration",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Total meeting duration in seconds",
        ),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_meetings_team_id", "meetings", ["team_id"])

    op.create_table(
        "meeting_members",
        sa.Column("meeting_id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column(
            "duration",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Seconds this member talked during the meeting",
        ),
        sa.ForeignKeyConstraint(["meeting_id"], ["meetings.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("meeting_id", "member_id"),
    )


def downgrade() -> None:
    op.drop_table("meeting_members")
    op.drop_index("ix_meetings_team_id", table_name="meetings")
    op.drop_table("meetings")
    op.drop_index("idx_members_team_name", table_name="members")
    op.drop_table("members")
    op.drop_table("teams")
