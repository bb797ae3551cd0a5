"""
Scrum Chatter Backend: Input Dialog Route Handlers
===================================================

What:  Drives headless member dialogs over HTTP, so a thin front end can
       validate as the user types.
How:   Opening a dialog registers an InputDialog session; the client sends
       the full text field content on every change and reads back the
       error / submit-enabled state.

Client loop:
    POST /api/dialogs/teams/1/members            → {dialog_id, validating: true}
    PUT  /api/dialogs/{id}/text {"text": "Al"}   → {validating: true, submit_enabled: false}
    PUT  /api/dialogs/{id}/text {"text": "Ali"}  → {validating: true, submit_enabled: false}
    GET  /api/dialogs/{id}?wait=true             → {validating: false, submit_enabled: true}
    POST /api/dialogs/{id}/submit                → {status: "submitted"}

Only the result for the latest text ever shows up in the state; the
answer for "Al" above is discarded even if it arrives after "Ali" was sent.

Deleting from the member list goes through the same background executor:
    POST /api/dialogs/members/{id}/delete        → 202, soft delete scheduled
"""

import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from scrumchatter.database import get_db_session
from scrumchatter.dialogs.input_dialog import InputDialog
from scrumchatter.dialogs.member_dialogs import member_dialogs
from scrumchatter.dialogs.registry import dialog_registry
from scrumchatter.schemas.dialog import DialogStateResponse, DialogTextUpdate
from scrumchatter.schemas.member import ErrorResponse
from scrumchatter.services.member_service import member_service
from scrumchatter.services.team_service import team_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dialogs", tags=["Dialogs"])

NOT_FOUND = {404: {"description": "Dialog not found or already closed", "model": ErrorResponse}}


def dialog_state(dialog: InputDialog) -> DialogStateResponse:
    return DialogStateResponse(
        dialog_id=dialog.dialog_id,
        title=dialog.config.title,
        input_hint=dialog.config.input_hint,
        action_id=dialog.config.action_id,
        text=dialog.text,
        error=dialog.error,
        validating=dialog.validating,
        submit_enabled=dialog.submit_enabled,
        status=dialog.status.value,
    )


@router.post(
    "/teams/{team_id}/members",
    status_code=201,
    response_model=DialogStateResponse,
    responses={404: {"description": "Team not found", "model": ErrorResponse}},
    summary="Open a new-member dialog",
)
async def open_create_member_dialog(
    team_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DialogStateResponse:
    await team_service.get_team(db, team_id)
    dialog = dialog_registry.add(member_dialogs.prompt_create_member(team_id))
    return dialog_state(dialog)


@router.post(
    "/members/{member_id}/rename",
    status_code=201,
    response_model=DialogStateResponse,
    responses={404: {"description": "Member not found or deleted", "model": ErrorResponse}},
    summary="Open a rename-member dialog",
)
async def open_rename_member_dialog(
    member_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DialogStateResponse:
    member = await member_service.get_member(db, member_id, include_deleted=False)
    dialog = dialog_registry.add(
        member_dialogs.prompt_rename_member(member.team_id, member.id, member.name)
    )
    return dialog_state(dialog)


@router.post(
    "/members/{member_id}/delete",
    status_code=202,
    responses={
        202: {"description": "Soft delete scheduled"},
        404: {"description": "Member not found or already deleted", "model": ErrorResponse},
    },
    summary="Schedule the soft delete of a member",
)
async def schedule_member_delete(
    member_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await member_service.get_member(db, member_id, include_deleted=False)
    member_dialogs.delete_member(member_id)
    return Response(status_code=202)


@router.get(
    "/{dialog_id}",
    response_model=DialogStateResponse,
    responses=NOT_FOUND,
    summary="Current state of a dialog",
)
async def get_dialog(
    dialog_id: str,
    wait: bool = Query(default=False, description="Wait for in-flight validations first"),
) -> DialogStateResponse:
    dialog = dialog_registry.get(dialog_id)
    if wait:
        await dialog.wait_until_idle()
    return dialog_state(dialog)


@router.put(
    "/{dialog_id}/text",
    response_model=DialogStateResponse,
    responses=NOT_FOUND,
    summary="Replace the text of a dialog (one keystroke)",
)
async def set_dialog_text(dialog_id: str, body: DialogTextUpdate) -> DialogStateResponse:
    dialog = dialog_registry.get(dialog_id)
    dialog.set_text(body.text)
    return dialog_state(dialog)


@router.post(
    "/{dialog_id}/submit",
    response_model=DialogStateResponse,
    responses={
        **NOT_FOUND,
        409: {"description": "Submit disabled: text invalid or not validated yet", "model": ErrorResponse},
    },
    summary="Submit a dialog",
)
async def submit_dialog(dialog_id: str) -> DialogStateResponse:
    dialog = dialog_registry.get(dialog_id)
    try:
        await dialog.submit()
    finally:
        dialog_registry.release(dialog)
    return dialog_state(dialog)


@router.post(
    "/{dialog_id}/cancel",
    response_model=DialogStateResponse,
    responses=NOT_FOUND,
    summary="Cancel a dialog",
)
async def cancel_dialog(dialog_id: str) -> DialogStateResponse:
    dialog = dialog_registry.get(dialog_id)
    dialog.cancel()
    dialog_registry.release(dialog)
    return dialog_state(dialog)
