"""
Scrum Chatter Backend: Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the API contract for teams, members and meetings.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI documentation.
Who:   Route handlers (request/response types) and services (return types).

Schemas are kept separate from the SQLAlchemy models so the API can expose
derived values (member statistics) and hide storage details.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from scrumchatter.models.member import MEMBER_NAME_MAX_LENGTH


# ══════════════════════════════════════════════════════════════════════════
# Teams
# ══════════════════════════════════════════════════════════════════════════


class TeamCreate(BaseModel):
    """Body of POST /api/teams."""
    name: str = Field(max_length=255, description="Team name (unique)")


class TeamResponse(BaseModel):
    id: int = Field(description="Team identifier")
    name: str = Field(description="Team name")

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Members
# ══════════════════════════════════════════════════════════════════════════


class MemberSortField(str, Enum):
    """
    Sort orders of the member list.

    name:          alphabetical
    avg_duration:  longest average talk time first, ties by name
    sum_duration:  longest total talk time first, ties by name
    """
    NAME = "name"
    AVG_DURATION = "avg_duration"
    SUM_DURATION = "sum_duration"


class MemberCreate(BaseModel):
    """
    Body of POST /api/teams/{team_id}/members.

    A blank name is accepted and silently ignored by the service.
    """
    name: str = Field(max_length=MEMBER_NAME_MAX_LENGTH, description="Name of the new member")


class MemberRename(BaseModel):
    """Body of PATCH /api/members/{member_id}."""
    name: str = Field(max_length=MEMBER_NAME_MAX_LENGTH, description="New name of the member")


class MemberResponse(BaseModel):
    """Full representation of a stored member row."""
    id: int = Field(description="Member identifier")
    name: str = Field(description="Member name (with deletion marker if deleted)")
    team_id: int = Field(description="Team the member belongs to")
    deleted: bool = Field(description="Whether the member has been soft-deleted")

    model_config = {"from_attributes": True}


class MemberStatsItem(BaseModel):
    """One row of the sortable member list."""
    id: int = Field(description="Member identifier")
    name: str = Field(description="Member name")
    sum_duration: int = Field(description="Total talk time over all meetings, in seconds")
    avg_duration: float = Field(description="Average talk time per meeting attended, in seconds")


class MemberListResponse(BaseModel):
    members: List[MemberStatsItem] = Field(description="Non-deleted members of the team")
    total_count: int = Field(description="Number of members returned")
    sort: MemberSortField = Field(description="Sort order applied to the list")


# ══════════════════════════════════════════════════════════════════════════
# Meetings
# ══════════════════════════════════════════════════════════════════════════


class MemberDuration(BaseModel):
    member_id: int = Field(description="Member who talked")
    duration: int = Field(ge=0, description="Talk time in seconds")


class MeetingCreate(BaseModel):
    """Body of POST /api/teams/{team_id}/meetings."""
    duration: int = Field(ge=0, description="Total meeting duration in seconds")
    meeting_date: Optional[datetime] = Field(
        default=None,
        description="When the meeting took place (defaults to now, UTC)",
    )
    member_durations: List[MemberDuration] = Field(default_factory=list)

    @field_validator("member_durations")
    @classmethod
    def validate_unique_members(cls, v: List[MemberDuration]) -> List[MemberDuration]:
        """A member appears at most once per meeting."""
        ids = [item.member_id for item in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Each member may appear only once in member_durations")
        return v


class MeetingResponse(BaseModel):
    id: int = Field(description="Meeting identifier")
    team_id: int = Field(description="Team that held the meeting")
    meeting_date: datetime = Field(description="When the meeting took place")
    duration: int = Field(description="Total meeting duration in seconds")

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Error & Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "A member named 'Bob' already exists in this team",
            "details": {"team_id": 1},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    open_dialogs: int = Field(description="Input dialog sessions currently open")
    pending_jobs: int = Field(description="Background store jobs not finished yet")
    uptime_seconds: float = Field(description="Seconds since service started")
