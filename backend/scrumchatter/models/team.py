"""
Scrum Chatter Backend: Team SQLAlchemy Model
=============================================

What:  ORM model representing the `teams` table.
Who:   Used by TeamService; referenced by members and meetings.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from scrumchatter.database import Base


class Team(Base):
    """A team whose members meet for scrums."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Display name of the team, unique across the installation",
    )

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.name}')>"
