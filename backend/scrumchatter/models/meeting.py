"""
Scrum Chatter Backend: Meeting SQLAlchemy Models
=================================================

What:  ORM models for the `meetings` and `meeting_members` tables.
How:   A meeting belongs to a team; each meeting_members row records how
       long one member talked during that meeting. Member statistics
       (total and average talk time) are aggregated from meeting_members.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from scrumchatter.database import Base


class Meeting(Base):
    """One scrum meeting of a team."""

    __tablename__ = "meetings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    team_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    meeting_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When the meeting took place (UTC)",
    )

    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Total meeting duration in seconds",
    )

    def __repr__(self) -> str:
        return (
            f"<Meeting(id={self.id}, team_id={self.team_id}, "
            f"duration={self.duration})>"
        )


class MeetingMember(Base):
    """Talk time of one member in one meeting."""

    __tablename__ = "meeting_members"

    meeting_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        primary_key=True,
    )

    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        primary_key=True,
    )

    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Seconds this member talked during the meeting",
    )

    def __repr__(self) -> str:
        return (
            f"<MeetingMember(meeting_id={self.meeting_id}, "
            f"member_id={self.member_id}, duration={self.duration})>"
        )
