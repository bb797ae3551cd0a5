"""
Scrum Chatter Backend: Team Route Handlers
===========================================

What:  Teams, the member roster of a team, and meeting records.
How:   Thin handlers; TeamService and MemberService hold the logic.

Routes:
    POST /api/teams                          create a team
    GET  /api/teams                          list teams
    GET  /api/teams/{team_id}/members        roster with talk-time stats
    POST /api/teams/{team_id}/members        add a member
    POST /api/teams/{team_id}/meetings       record a meeting
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from scrumchatter.database import get_db_session
from scrumchatter.exceptions import ConflictError
from scrumchatter.schemas.member import (
    ErrorResponse,
    MeetingCreate,
    MeetingResponse,
    MemberCreate,
    MemberListResponse,
    MemberResponse,
    MemberSortField,
    TeamCreate,
    TeamResponse,
)
from scrumchatter.services.member_name_validator import ERROR_MEMBER_EXISTS
from scrumchatter.services.member_service import member_service
from scrumchatter.services.team_service import team_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/teams", tags=["Teams"])


@router.post(
    "",
    status_code=201,
    response_model=TeamResponse,
    responses={
        400: {"description": "Blank team name", "model": ErrorResponse},
        409: {"description": "Team name already used", "model": ErrorResponse},
    },
    summary="Create a team",
)
async def create_team(
    body: TeamCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TeamResponse:
    team = await team_service.create_team(db, body.name)
    return TeamResponse.model_validate(team)


@router.get("", response_model=List[TeamResponse], summary="List teams")
async def list_teams(db: AsyncSession = Depends(get_db_session)) -> List[TeamResponse]:
    teams = await team_service.list_teams(db)
    return [TeamResponse.model_validate(team) for team in teams]


@router.get(
    "/{team_id}/members",
    response_model=MemberListResponse,
    responses={404: {"description": "Team not found", "model": ErrorResponse}},
    summary="List the members of a team with their talk-time statistics",
)
async def list_members(
    team_id: int,
    response: Response,
    sort: MemberSortField = Query(
        default=MemberSortField.NAME,
        description="'name', 'avg_duration' (longest first) or 'sum_duration' (longest first)",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> MemberListResponse:
    await team_service.get_team(db, team_id)
    result = await member_service.list_members(db, team_id, sort)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.post(
    "/{team_id}/members",
    status_code=201,
    response_model=MemberResponse,
    responses={
        204: {"description": "Blank name, nothing created"},
        404: {"description": "Team not found", "model": ErrorResponse},
        409: {"description": "Name already used in the team", "model": ErrorResponse},
    },
    summary="Add a member to a team",
)
async def create_member(
    team_id: int,
    body: MemberCreate,
    db: AsyncSession = Depends(get_db_session),
):
    await team_service.get_team(db, team_id)

    name = body.name.strip()
    if not name:
        return Response(status_code=204)

    if await member_service.count_active_members(db, team_id, name):
        raise ConflictError(
            message=ERROR_MEMBER_EXISTS.format(name=name),
            context={"team_id": team_id},
        )

    member = await member_service.create_member(db, team_id, name)
    return MemberResponse.model_validate(member)


@router.post(
    "/{team_id}/meetings",
    status_code=201,
    response_model=MeetingResponse,
    responses={
        400: {"description": "Member of another team", "model": ErrorResponse},
        404: {"description": "Team not found", "model": ErrorResponse},
    },
    summary="Record a meeting and the talk time of each member",
)
async def record_meeting(
    team_id: int,
    body: MeetingCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MeetingResponse:
    meeting = await team_service.record_meeting(
        db,
        team_id=team_id,
        duration=body.duration,
        member_durations=body.member_durations,
        meeting_date=body.meeting_date,
    )
    return MeetingResponse.model_validate(meeting)
