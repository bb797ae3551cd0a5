"""
Scrum Chatter Backend: Member Dialogs
======================================

What:  The user-facing member flows: prompt for a new member name, prompt
       for a new name of an existing member, delete a member.
How:   Opens input dialogs wired to MemberNameValidator. When a dialog is
       submitted, on_input_entered() dispatches on the action id and
       schedules the store mutation on the background executor; the caller
       gets the scheduled task back but never has to wait for it.
Who:   Dialog routes and member delete route.

Flow (create):
    prompt_create_member(team) → dialog shown, "" validated
    → user types → validated per keystroke → submit
    → on_input_entered(CREATE_MEMBER, "Bob", extras)
    → background: member_service.create_member(db, team, "Bob")
"""

import asyncio
import logging
from datetime import date
from enum import Enum
from typing import Optional

from scrumchatter.database import session_scope
from scrumchatter.dialogs.input_dialog import DialogConfig, InputDialog, open_input_dialog
from scrumchatter.dialogs.validation import DialogContext, InputValidator
from scrumchatter.schemas.dialog import MemberDialogExtras
from scrumchatter.services.background import BackgroundExecutor, background_executor
from scrumchatter.services.member_name_validator import MemberNameValidator
from scrumchatter.services.member_service import MemberService, member_service

logger = logging.getLogger(__name__)

NEW_MEMBER_TITLE = "New member"
RENAME_MEMBER_TITLE = "Rename member"
MEMBER_NAME_HINT = "Member name"


class MemberAction(str, Enum):
    """Action ids of the member dialogs."""
    CREATE_MEMBER = "create_member"
    RENAME_MEMBER = "rename_member"


class MemberDialogs:
    """
    Opens member dialogs and carries out what they submit.

    Collaborators are injectable for tests; defaults are the application
    singletons.
    """

    def __init__(
        self,
        context: Optional[DialogContext] = None,
        executor: Optional[BackgroundExecutor] = None,
        validator: Optional[InputValidator] = None,
        service: Optional[MemberService] = None,
    ):
        self.context = context or DialogContext()
        self.executor = executor or background_executor
        self.validator = validator
        self.service = service or member_service

    # ── Prompts ───────────────────────────────────────────────────────────

    def prompt_create_member(self, team_id: int) -> InputDialog:
        """Ask for the name of a new member of the team."""
        logger.debug("prompt_create_member: team_id=%s", team_id)
        config = DialogConfig(
            title=NEW_MEMBER_TITLE,
            input_hint=MEMBER_NAME_HINT,
            prefilled_text=None,
            action_id=MemberAction.CREATE_MEMBER.value,
            extras=MemberDialogExtras(team_id=team_id),
        )
        return self._open(config)

    def prompt_rename_member(self, team_id: int, member_id: int, member_name: str) -> InputDialog:
        """Ask for a new name for an existing member, prefilled with the current one."""
        logger.debug(
            "prompt_rename_member: team_id=%s, member_id=%s, name=%r",
            team_id, member_id, member_name,
        )
        config = DialogConfig(
            title=RENAME_MEMBER_TITLE,
            input_hint=MEMBER_NAME_HINT,
            prefilled_text=member_name,
            action_id=MemberAction.RENAME_MEMBER.value,
            extras=MemberDialogExtras(
                team_id=team_id,
                member_id=member_id,
                member_name=member_name,
            ),
        )
        return self._open(config)

    def _open(self, config: DialogConfig) -> InputDialog:
        return open_input_dialog(
            config,
            self.validator or MemberNameValidator,
            listener=self.on_input_entered,
            context=self.context,
        )

    # ── Submit Listener ───────────────────────────────────────────────────

    def on_input_entered(self, action_id: str, text: str, extras: MemberDialogExtras) -> None:
        """
        Dispatch a submitted member dialog to the matching mutation.

        Fire-and-forget: the mutation is scheduled, not awaited.
        """
        if action_id == MemberAction.CREATE_MEMBER.value:
            self.create_member(extras.team_id, text)
        elif action_id == MemberAction.RENAME_MEMBER.value:
            if extras.member_id is None:
                raise ValueError("A rename dialog needs a member_id in its extras")
            self.rename_member(extras.member_id, text)
        else:
            logger.warning("Ignoring input for unknown action %r", action_id)

    # ── Background Mutations ──────────────────────────────────────────────

    def create_member(self, team_id: int, name: str) -> Optional[asyncio.Task]:
        name = (name or "").strip()
        if not name:
            return None

        async def job():
            async with session_scope(self.context.session_factory) as db:
                return await self.service.create_member(db, team_id, name)

        return self.executor.submit(job, f"create member {name!r} in team {team_id}")

    def rename_member(self, member_id: int, name: str) -> Optional[asyncio.Task]:
        name = (name or "").strip()
        if not name:
            return None

        async def job():
            async with session_scope(self.context.session_factory) as db:
                return await self.service.rename_member(db, member_id, name)

        return self.executor.submit(job, f"rename member {member_id} to {name!r}")

    def delete_member(self, member_id: int, deleted_on: Optional[date] = None) -> asyncio.Task:
        async def job():
            async with session_scope(self.context.session_factory) as db:
                return await self.service.delete_member(db, member_id, deleted_on)

        return self.executor.submit(job, f"delete member {member_id}")


member_dialogs = MemberDialogs()
