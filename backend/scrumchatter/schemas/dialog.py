"""
Scrum Chatter Backend: Input Dialog Schemas
============================================

What:  Typed dialog extras and the API contract of headless dialog sessions.
How:   Extras are immutable pydantic models, one per validator use case. The
       dialog controller passes them through untouched to the validator and
       to the submit listener.
"""

from typing import Optional

from pydantic import BaseModel, Field

from scrumchatter.models.member import MEMBER_NAME_MAX_LENGTH


class MemberDialogExtras(BaseModel):
    """
    Extras of the create-member and rename-member dialogs.

    team_id:      team in which the name must be unique
    member_id:    member being renamed (None when creating)
    member_name:  current name of the member being renamed; entering it
                  again is always valid
    """
    team_id: int
    member_id: Optional[int] = None
    member_name: Optional[str] = None

    model_config = {"frozen": True}


class DialogTextUpdate(BaseModel):
    """Body of PUT /api/dialogs/{dialog_id}/text: the full current text."""
    text: str = Field(max_length=MEMBER_NAME_MAX_LENGTH, description="Entire content of the text field")


class DialogStateResponse(BaseModel):
    """
    Snapshot of one input dialog session.

    `submit_enabled` is true only once the latest text has been validated
    successfully; while `validating` is true it is always false.
    """
    dialog_id: str = Field(description="Dialog session identifier")
    title: str = Field(description="Dialog title")
    input_hint: str = Field(description="Placeholder of the text field")
    action_id: str = Field(description="Action fired on submit")
    text: str = Field(description="Current content of the text field")
    error: Optional[str] = Field(default=None, description="Validation error shown under the field")
    validating: bool = Field(description="Whether a validation for the current text is in flight")
    submit_enabled: bool = Field(description="Whether the submit action is available")
    status: str = Field(description="open, submitted or cancelled")
