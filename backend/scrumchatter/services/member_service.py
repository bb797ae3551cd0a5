"""
Scrum Chatter Backend: Member Service (Member Record Store)
============================================================

What:  Create, rename, soft-delete, count and list team members.
How:   Stateless service; every method receives the AsyncSession to work in.
       Request handlers pass the per-request session, background jobs and
       validators pass one from session_scope().
Who:   Member routes, MemberDialogs background jobs, MemberNameValidator.

Soft Delete:
    A deleted member keeps its row (meeting history still points at it).
    Its name is rewritten to "<name> (deleted: YYYY-MM-DD)" so the original
    name can be used again for a new member of the same team.

Error Handling:
    Blank names are ignored, not rejected: create/rename return None and
    write nothing. Missing members raise NotFoundError. SQLAlchemy errors
    are wrapped in DatabaseError with the original as __cause__.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scrumchatter.exceptions import DatabaseError, NotFoundError
from scrumchatter.models.meeting import MeetingMember
from scrumchatter.models.member import Member
from scrumchatter.schemas.member import (
    MemberListResponse,
    MemberSortField,
    MemberStatsItem,
)

logger = logging.getLogger(__name__)


def deleted_member_name(name: str, deleted_on: date) -> str:
    """Name given to a member when it is soft-deleted."""
    return f"{name} (deleted: {deleted_on.isoformat()})"


class MemberService:
    """
    Business logic layer for member records.

    Responsibilities:
        - create_member() / rename_member() / delete_member(): mutations
        - get_member(): lookup with not-found handling
        - count_active_members(): uniqueness query for name validation
        - list_members(): team roster with talk-time statistics, sortable
    """

    async def create_member(
        self, db: AsyncSession, team_id: int, name: str
    ) -> Optional[Member]:
        """
        Add a member named `name` to the team.

        Returns:
            The new Member, or None when the trimmed name is blank.
        """
        name = (name or "").strip()
        if not name:
            logger.debug("Ignoring blank member name for team %s", team_id)
            return None

        member = Member(name=name, team_id=team_id, deleted=False)
        db.add(member)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Could not create member %r in team %s: %s", name, team_id, str(e))
            raise DatabaseError(
                message="Could not create the member. Please try again.",
                context={"team_id": team_id},
            ) from e
        logger.info("Member %s created: %r in team %s", member.id, name, team_id)
        return member

    async def get_member(
        self, db: AsyncSession, member_id: int, include_deleted: bool = True
    ) -> Member:
        """
        Fetch a member by id.

        Raises:
            NotFoundError: No such member, or it is deleted and
                include_deleted is False.
        """
        query = select(Member).where(Member.id == member_id)
        if not include_deleted:
            query = query.where(Member.deleted.is_(False))
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error fetching member %s: %s", member_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the member. Please try again.",
                context={"member_id": member_id},
            ) from e

        member = result.scalar_one_or_none()
        if member is None:
            raise NotFoundError(resource="member", resource_id=str(member_id))
        return member

    async def rename_member(
        self, db: AsyncSession, member_id: int, name: str
    ) -> Optional[Member]:
        """
        Give a member a new name. Renaming to the current name is a no-op.

        Returns:
            The updated Member, or None when the trimmed name is blank.

        Raises:
            NotFoundError: No active member with this id.
        """
        name = (name or "").strip()
        if not name:
            logger.debug("Ignoring blank name for member %s", member_id)
            return None

        member = await self.get_member(db, member_id, include_deleted=False)
        if member.name == name:
            return member

        old_name = member.name
        member.name = name
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Could not rename member %s: %s", member_id, str(e))
            raise DatabaseError(
                message="Could not rename the member. Please try again.",
                context={"member_id": member_id},
            ) from e
        logger.info("Member %s renamed from %r to %r", member_id, old_name, name)
        return member

    async def delete_member(
        self,
        db: AsyncSession,
        member_id: int,
        deleted_on: Optional[date] = None,
    ) -> Member:
        """
        Soft-delete a member.

        Raises:
            NotFoundError: No active member with this id.
        """
        member = await self.get_member(db, member_id, include_deleted=False)
        member.name = deleted_member_name(member.name, deleted_on or date.today())
        member.deleted = True
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Could not delete member %s: %s", member_id, str(e))
            raise DatabaseError(
                message="Could not delete the member. Please try again.",
                context={"member_id": member_id},
            ) from e
        logger.info("Member %s deleted, stored as %r", member_id, member.name)
        return member

    async def count_active_members(
        self, db: AsyncSession, team_id: int, name: str
    ) -> Optional[int]:
        """
        Number of non-deleted members of the team named exactly `name`.

        May return None when the database yields no row.
        """
        query = select(func.count(Member.id)).where(
            Member.team_id == team_id,
            Member.name == name,
            Member.deleted.is_(False),
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error counting members named %r: %s", name, str(e))
            raise DatabaseError(
                message="Could not check the member name. Please try again.",
                context={"team_id": team_id},
            ) from e
        return result.scalar()

    async def list_members(
        self,
        db: AsyncSession,
        team_id: int,
        sort: MemberSortField = MemberSortField.NAME,
    ) -> MemberListResponse:
        """
        Non-deleted members of a team with their talk-time statistics.

        Query plan:
            stats = SELECT member_id, SUM(duration), AVG(duration)
                    FROM meeting_members GROUP BY member_id
            SELECT members.*, stats.* FROM members LEFT JOIN stats
            WHERE team_id = :team AND deleted = false ORDER BY <sort>

        Members who never talked report 0 for both statistics.
        """
        stats = (
            select(
                MeetingMember.member_id.label("member_id"),
                func.sum(MeetingMember.duration).label("sum_duration"),
                func.avg(MeetingMember.duration).label("avg_duration"),
            )
            .group_by(MeetingMember.member_id)
            .subquery()
        )
        sum_col = func.coalesce(stats.c.sum_duration, 0).label("sum_duration")
        avg_col = func.coalesce(stats.c.avg_duration, 0).label("avg_duration")

        query = (
            select(Member.id, Member.name, sum_col, avg_col)
            .outerjoin(stats, stats.c.member_id == Member.id)
            .where(Member.team_id == team_id, Member.deleted.is_(False))
        )
        if sort == MemberSortField.AVG_DURATION:
            query = query.order_by(desc(avg_col), asc(Member.name))
        elif sort == MemberSortField.SUM_DURATION:
            query = query.order_by(desc(sum_col), asc(Member.name))
        else:
            query = query.order_by(asc(Member.name))

        try:
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing members of team %s: %s", team_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve members. Please try again.",
                context={"team_id": team_id},
            ) from e

        members = [
            MemberStatsItem(
                id=row.id,
                name=row.name,
                sum_duration=int(row.sum_duration or 0),
                avg_duration=float(row.avg_duration or 0),
            )
            for row in rows
        ]
        return MemberListResponse(members=members, total_count=len(members), sort=sort)


# ── Singleton Instance ────────────────────────────────────────────────────
member_service = MemberService()
