"""
Scrum Chatter Backend: Team & Meeting Service
==============================================

What:  Creates and lists teams, and records meetings with the talk time of
       each member, which feed the member statistics.
Who:   Team routes; member routes look teams up here before touching members.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scrumchatter.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from scrumchatter.models.meeting import Meeting, MeetingMember
from scrumchatter.models.member import Member
from scrumchatter.models.team import Team
from scrumchatter.schemas.member import MemberDuration

logger = logging.getLogger(__name__)


class TeamService:

    async def create_team(self, db: AsyncSession, name: str) -> Team:
        """
        Raises:
            ValidationError: The trimmed name is blank.
            ConflictError: Another team already has this name.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError(message="A team needs a name", field="name")

        existing = await db.execute(select(Team.id).where(Team.name == name))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(
                message=f"A team named '{name}' already exists",
                context={"name": name},
            )

        team = Team(name=name)
        db.add(team)
        try:
            await db.flush()
        except IntegrityError as e:
            raise ConflictError(
                message=f"A team named '{name}' already exists",
                context={"name": name},
            ) from e
        logger.info("Team %s created: %r", team.id, name)
        return team

    async def get_team(self, db: AsyncSession, team_id: int) -> Team:
        team = await db.get(Team, team_id)
        if team is None:
            raise NotFoundError(resource="team", resource_id=str(team_id))
        return team

    async def list_teams(self, db: AsyncSession) -> List[Team]:
        try:
            result = await db.execute(select(Team).order_by(Team.name))
        except SQLAlchemyError as e:
            logger.error("Database error listing teams: %s", str(e))
            raise DatabaseError(message="Could not retrieve teams. Please try again.") from e
        return list(result.scalars().all())

    async def record_meeting(
        self,
        db: AsyncSession,
        team_id: int,
        duration: int,
        member_durations: Sequence[MemberDuration],
        meeting_date: Optional[datetime] = None,
    ) -> Meeting:
        """
        Store a meeting of the team and how long each member talked.

        Raises:
            NotFoundError: Unknown team.
            ValidationError: A member id does not belong to the team.
        """
        await self.get_team(db, team_id)

        member_ids = {item.member_id for item in member_durations}
        if member_ids:
            result = await db.execute(
                select(Member.id).where(Member.team_id == team_id, Member.id.in_(member_ids))
            )
            unknown = member_ids - set(result.scalars().all())
            if unknown:
                raise ValidationError(
                    message="Some members do not belong to this team",
                    field="member_durations",
                    context={"member_ids": sorted(unknown)},
                )

        meeting = Meeting(
            team_id=team_id,
            duration=duration,
            meeting_date=meeting_date or datetime.now(timezone.utc),
        )
        db.add(meeting)
        await db.flush()
        for item in member_durations:
            db.add(MeetingMember(
                meeting_id=meeting.id,
                member_id=item.member_id,
                duration=item.duration,
            ))
        await db.flush()
        logger.info(
            "Meeting %s recorded for team %s: %ds, %d member(s)",
            meeting.id, team_id, duration, len(member_durations),
        )
        return meeting


team_service = TeamService()
