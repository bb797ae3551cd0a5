"""
Scrum Chatter Backend: Input Validator Interface
=================================================

What:  Abstract base class for validators plugged into an input dialog, the
       context they receive, and the per-call ValidationResult.
How:   Concrete validators inherit from InputValidator and implement
       get_error(). The dialog controller calls it with every text change
       and turns the returned message into a ValidationResult.
Who:   Implemented by MemberNameValidator; called by InputDialog.

Contract:
    get_error() returns None (or an empty string) when the input is valid,
    and a user-facing message otherwise. Validators may query the store;
    the dialog always runs them off the interactive path, and a validator
    whose get_error is a plain function is executed in a worker thread.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from scrumchatter.config import settings


@dataclass(frozen=True)
class DialogContext:
    """
    Environment handed to validators.

    Attributes:
        session_factory:     Session factory used for store queries; None
                             means the application's default factory.
        validation_timeout:  Seconds a single get_error() call may take.
    """
    session_factory: Optional[async_sessionmaker] = None
    validation_timeout: float = field(default_factory=lambda: settings.validation_timeout)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation call: Valid, or Invalid(message)."""
    message: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return not self.message

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(None)

    @classmethod
    def invalid(cls, message: str) -> "ValidationResult":
        if not message:
            raise ValueError("An invalid result needs a message")
        return cls(message)

    @classmethod
    def from_error(cls, error: Optional[str]) -> "ValidationResult":
        return cls.invalid(error) if error else cls.valid()


class InputValidator(ABC):
    """
    Pluggable check run against the text of an input dialog.

    Implementations:
        - MemberNameValidator: member names must be unique inside a team
    """

    @abstractmethod
    async def get_error(
        self,
        context: DialogContext,
        action_id: str,
        text: str,
        extras: Any,
    ) -> Optional[str]:
        """
        Inspect candidate input.

        Args:
            context:    Store access and limits for this dialog.
            action_id:  Action the dialog will fire on submit.
            text:       Text entered by the user, already trimmed.
            extras:     Typed extras the dialog was opened with.

        Returns:
            An error message if the input has a problem, None if it is valid.
        """
        ...

    async def validate(
        self,
        context: DialogContext,
        action_id: str,
        text: str,
        extras: Any,
    ) -> ValidationResult:
        """get_error() wrapped into a ValidationResult."""
        return ValidationResult.from_error(
            await self.get_error(context, action_id, text, extras)
        )
