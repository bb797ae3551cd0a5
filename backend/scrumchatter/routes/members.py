"""
Scrum Chatter Backend: Member Route Handlers
=============================================

Routes:
    GET    /api/members/{member_id}   fetch a member (deleted ones included)
    PATCH  /api/members/{member_id}   rename (204 for a blank name)
    DELETE /api/members/{member_id}   soft delete

DELETE runs in the request's own session and answers with the renamed row,
or 404 when the member is gone. Front ends that delete without waiting use
POST /api/dialogs/members/{member_id}/delete, which schedules the same soft
delete on the background executor.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from scrumchatter.database import get_db_session
from scrumchatter.exceptions import ConflictError
from scrumchatter.schemas.member import ErrorResponse, MemberRename, MemberResponse
from scrumchatter.services.member_name_validator import ERROR_MEMBER_EXISTS
from scrumchatter.services.member_service import member_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/members", tags=["Members"])


@router.get(
    "/{member_id}",
    response_model=MemberResponse,
    responses={404: {"description": "Member not found", "model": ErrorResponse}},
    summary="Get a member",
)
async def get_member(
    member_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MemberResponse:
    member = await member_service.get_member(db, member_id)
    return MemberResponse.model_validate(member)


@router.patch(
    "/{member_id}",
    response_model=MemberResponse,
    responses={
        204: {"description": "Blank name, nothing changed"},
        404: {"description": "Member not found or deleted", "model": ErrorResponse},
        409: {"description": "Name already used in the team", "model": ErrorResponse},
    },
    summary="Rename a member",
)
async def rename_member(
    member_id: int,
    body: MemberRename,
    db: AsyncSession = Depends(get_db_session),
):
    name = body.name.strip()
    member = await member_service.get_member(db, member_id, include_deleted=False)
    if not name:
        return Response(status_code=204)

    if name != member.name and await member_service.count_active_members(db, member.team_id, name):
        raise ConflictError(
            message=ERROR_MEMBER_EXISTS.format(name=name),
            context={"team_id": member.team_id, "member_id": member_id},
        )

    member = await member_service.rename_member(db, member_id, name)
    return MemberResponse.model_validate(member)


@router.delete(
    "/{member_id}",
    response_model=MemberResponse,
    responses={404: {"description": "Member not found or already deleted", "model": ErrorResponse}},
    summary="Soft-delete a member",
)
async def delete_member(
    member_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MemberResponse:
    member = await member_service.delete_member(db, member_id)
    return MemberResponse.model_validate(member)
