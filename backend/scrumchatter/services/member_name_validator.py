"""
Scrum Chatter Backend: Member Name Validator
=============================================

What:  Rejects a member name that another active member of the same team
       already uses, so a team never has two members with the same name.
How:   Counts non-deleted members with that name in the team from the
       dialog extras. Deleted members carry a "(deleted: ...)" suffix and
       are excluded by the query, so their old names are free again.
Who:   MemberDialogs passes the class as the validator factory of the
       create-member and rename-member dialogs; the member routes reuse
       ERROR_MEMBER_EXISTS for their 409 responses.
"""

import logging
from typing import Optional

from scrumchatter.database import session_scope
from scrumchatter.dialogs.validation import DialogContext, InputValidator
from scrumchatter.schemas.dialog import MemberDialogExtras
from scrumchatter.services.member_service import member_service

logger = logging.getLogger(__name__)

ERROR_MEMBER_EXISTS = "A member named '{name}' already exists in this team"


class MemberNameValidator(InputValidator):
    """Returns an error if the input names another member of the team."""

    async def get_error(
        self,
        context: DialogContext,
        action_id: str,
        text: str,
        extras: MemberDialogExtras,
    ) -> Optional[str]:
        if not isinstance(extras, MemberDialogExtras):
            raise TypeError(
                f"MemberNameValidator needs MemberDialogExtras, got {type(extras).__name__}"
            )

        # Keeping the current name while renaming is always fine
        if extras.member_name and extras.member_name == text:
            return None

        async with session_scope(context.session_factory) as db:
            count = await member_service.count_active_members(db, extras.team_id, text)

        if count:
            logger.debug(
                "Member name %r already used %d time(s) in team %s",
                text, count, extras.team_id,
            )
            return ERROR_MEMBER_EXISTS.format(name=text)
        return None
