"""
Scrum Chatter Backend: Member SQLAlchemy Model
===============================================

What:  ORM model representing the `members` table.
How:   Members are never physically removed. Deleting a member sets
       `deleted` and rewrites the name to "<name> (deleted: YYYY-MM-DD)",
       which frees the original name for reuse inside the team while
       meeting history still shows who spoke.
Who:   Used by MemberService for CRUD operations and by Alembic.

Query Patterns:
    - Uniqueness check: SELECT count(*) ... WHERE team_id = :team
      AND name = :name AND deleted = false
      → Uses idx_members_team_name
    - Team roster: SELECT ... WHERE team_id = :team AND deleted = false
"""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from scrumchatter.database import Base

# Longest name a user may enter
MEMBER_NAME_MAX_LENGTH = 255

# Room for the " (deleted: YYYY-MM-DD)" marker appended on soft delete
DELETED_MARKER_LENGTH = len(" (deleted: 0000-00-00)")

MEMBER_NAME_COLUMN_LENGTH = MEMBER_NAME_MAX_LENGTH + DELETED_MARKER_LENGTH


class Member(Base):
    """
    A team participant tracked for meeting-duration statistics.

    Lifecycle:
        1. Created from the "new member" dialog (deleted = False)
        2. Optionally renamed any number of times
        3. Soft-deleted: deleted = True, name gets the deletion marker
    """

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(MEMBER_NAME_COLUMN_LENGTH),
        nullable=False,
        comment="Member name; carries a '(deleted: <date>)' suffix once deleted",
    )

    team_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )

    deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="Soft-delete flag; deleted members keep their meeting history",
    )

    __table_args__ = (
        Index("idx_members_team_name", "team_id", "name"),
    )

    def __repr__(self) -> str:
        return (
            f"<Member(id={self.id}, name='{self.name}', "
            f"team_id={self.team_id}, deleted={self.deleted})>"
        )
