"""
Scrum Chatter Backend: Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the error scenarios of the service.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) map them to HTTP status
       codes and structured JSON bodies.
Who:   Raised by services, dialogs and routes; caught by global handlers.

Exception Hierarchy:
    ScrumChatterError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    │   └── DialogStateError     → 409 Conflict (dialog action not allowed now)
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ScrumChatterError(Exception):
    """
    Base exception for all Scrum Chatter application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the
                  handler chooses to)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ScrumChatterError):
    """
    Raised when client input fails a business rule.

    When:    Blank team name, meeting durations for members of another team.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ScrumChatterError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown team, member, or dialog id; a member that was already
             soft-deleted.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(ScrumChatterError):
    """
    Raised when a request conflicts with the current state of a resource.

    When:    Creating a member or team whose name is already taken.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The request conflicts with the current state",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DialogStateError(ConflictError):
    """
    Raised when a dialog action is not allowed in the dialog's current state.

    When:    Submitting while the submit action is disabled (validation in
             flight or failed), or acting on a closed dialog.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "This dialog action is not available right now",
        dialog_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if dialog_id:
            ctx["dialog_id"] = dialog_id
        super().__init__(message=message, context=ctx)


class DatabaseError(ScrumChatterError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; detailed error
    info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
