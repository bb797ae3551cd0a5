"""
Scrum Chatter Backend: Input Dialog Controller
===============================================

What:  Headless controller of a dialog with one text field that validates
       as the user types and only lets the user submit valid text.
How:   Every text change bumps a generation counter, disables submission,
       clears the error, and schedules the validator as an asyncio task.
       When the task finishes, its result is applied only if its generation
       is still the current one; results for superseded text are dropped.
Who:   Opened by MemberDialogs; driven by the dialog routes (or any other
       front end running on the event loop).

State Machine:
    Open(validating=False, submit_enabled=True)
        → text change / show → Open(validating=True, submit_enabled=False)
        → latest result      → Open(validating=False, submit_enabled=valid)
        → submit (enabled)   → Submitted
        → cancel             → Cancelled

Example:
    dialog = open_input_dialog(config, MemberNameValidator(), listener=on_input)
    dialog.set_text("Ali")
    await dialog.wait_until_idle()
    if dialog.submit_enabled:
        await dialog.submit()
"""

import asyncio
import inspect
import logging
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Set, Union

from pydantic import BaseModel, Field

from scrumchatter.dialogs.validation import DialogContext, InputValidator, ValidationResult
from scrumchatter.exceptions import DialogStateError

logger = logging.getLogger(__name__)

# Listener fired on submit with (action_id, final_text, extras)
SubmitListener = Callable[[str, str, Any], Union[None, Awaitable[None]]]

# A ready validator, or a factory that builds one when the dialog opens
ValidatorSpec = Union[InputValidator, Callable[[], InputValidator], None]

VALIDATION_FAILED_MESSAGE = "Could not validate the input. Please try again."


class DialogStatus(str, Enum):
    OPEN = "open"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


class DialogConfig(BaseModel):
    """
    Everything a dialog is opened with.

    action_id tells the submit listener which handler should run; extras
    are passed through untouched to the validator and to the listener.
    """
    title: str
    input_hint: str = ""
    prefilled_text: Optional[str] = None
    action_id: str
    extras: Any = Field(default=None)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


def _resolve_validator(spec: ValidatorSpec, dialog_id: str) -> Optional[InputValidator]:
    """
    Turn a validator spec into a validator instance.

    A factory that raises disables validation for the dialog: the failure
    is logged and the dialog behaves as if it had no validator.
    """
    if spec is None or isinstance(spec, InputValidator):
        return spec
    try:
        validator = spec()
    except Exception as e:
        logger.error(
            "[%s] Could not instantiate validator %r: %s",
            dialog_id, spec, str(e), exc_info=True,
        )
        return None
    if not isinstance(validator, InputValidator):
        logger.error(
            "[%s] Validator factory %r returned %r, not an InputValidator",
            dialog_id, spec, type(validator).__name__,
        )
        return None
    logger.debug("[%s] Input validator = %r", dialog_id, validator)
    return validator


class InputDialog:
    """
    One input dialog session.

    Attributes (read by front ends):
        text:            Current content of the text field
        error:           Validation error to display, or None
        validating:      A validation for the current text is in flight
        submit_enabled:  Submit is available
        status:          DialogStatus
    """

    def __init__(
        self,
        config: DialogConfig,
        validator: ValidatorSpec = None,
        listener: Optional[SubmitListener] = None,
        context: Optional[DialogContext] = None,
        dialog_id: Optional[str] = None,
    ):
        self.dialog_id = dialog_id or uuid.uuid4().hex[:12]
        self.config = config
        self.context = context or DialogContext()
        self._listener = listener
        self._validator = _resolve_validator(validator, self.dialog_id)

        self.status = DialogStatus.OPEN
        self.text = config.prefilled_text or ""
        self.error: Optional[str] = None
        self.validating = False
        self.submit_enabled = True

        self._generation = 0
        self._shown = False
        self._pending: Set[asyncio.Task] = set()

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def is_open(self) -> bool:
        return self.status == DialogStatus.OPEN

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_validator(self) -> bool:
        return self._validator is not None

    # ── Events ────────────────────────────────────────────────────────────

    def show(self) -> None:
        """
        Dialog became visible: validate the prefilled text once, so the
        submit action reflects it before the user types anything.
        """
        self._ensure_open()
        if self._shown:
            return
        self._shown = True
        logger.debug(
            "[%s] Showing dialog '%s' (action=%s, text=%r)",
            self.dialog_id, self.config.title, self.config.action_id, self.text,
        )
        self._schedule_validation()

    def set_text(self, text: str) -> None:
        """The user changed the text field; `text` is its full new content."""
        self._ensure_open()
        self.text = text
        self._schedule_validation()

    async def submit(self) -> str:
        """
        Fire the listener with (action_id, trimmed text, extras) and close.

        Raises:
            DialogStateError: The dialog is closed, or submit is disabled
                because the latest text is invalid or still being validated.
        """
        self._ensure_open()
        if not self.submit_enabled:
            raise DialogStateError(
                message="The entered text has not been validated successfully yet",
                dialog_id=self.dialog_id,
                context={"validating": self.validating, "error": self.error},
            )

        final_text = self.text.strip()
        self.status = DialogStatus.SUBMITTED
        logger.info(
            "[%s] Dialog submitted: action=%s, text=%r",
            self.dialog_id, self.config.action_id, final_text,
        )

        if self._listener is not None:
            result = self._listener(self.config.action_id, final_text, self.config.extras)
            if inspect.isawaitable(result):
                await result
        return final_text

    def cancel(self) -> None:
        """Close without firing the listener. In-flight results are ignored."""
        self._ensure_open()
        self.status = DialogStatus.CANCELLED
        logger.info("[%s] Dialog cancelled", self.dialog_id)

    async def wait_until_idle(self) -> None:
        """Wait for every validation scheduled so far to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ── Validation ────────────────────────────────────────────────────────

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise DialogStateError(
                message=f"The dialog is already {self.status.value}",
                dialog_id=self.dialog_id,
            )

    def _schedule_validation(self) -> None:
        self._generation += 1
        generation = self._generation
        self.error = None

        if self._validator is None:
            self.validating = False
            self.submit_enabled = True
            return

        self.validating = True
        self.submit_enabled = False
        task = asyncio.get_running_loop().create_task(
            self._run_validation(generation, self.text.strip()),
            name=f"validate-{self.dialog_id}-{generation}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_validation(self, generation: int, text: str) -> None:
        logger.debug(
            "[%s] Validating generation %d: %r", self.dialog_id, generation, text,
        )
        try:
            error = await asyncio.wait_for(
                self._call_validator(text),
                timeout=self.context.validation_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "[%s] Validation of %r timed out after %.1fs",
                self.dialog_id, text, self.context.validation_timeout,
            )
            error = VALIDATION_FAILED_MESSAGE
        except Exception as e:
            logger.error(
                "[%s] Validator failed for %r: %s",
                self.dialog_id, text, str(e), exc_info=True,
            )
            error = VALIDATION_FAILED_MESSAGE

        self._apply_result(generation, ValidationResult.from_error(error))

    async def _call_validator(self, text: str) -> Optional[str]:
        args = (self.context, self.config.action_id, text, self.config.extras)
        if inspect.iscoroutinefunction(self._validator.get_error):
            return await self._validator.get_error(*args)
        # Blocking validator: keep it off the event loop
        return await asyncio.to_thread(self._validator.get_error, *args)

    def _apply_result(self, generation: int, result: ValidationResult) -> None:
        if generation != self._generation or not self.is_open:
            logger.debug(
                "[%s] Discarding stale validation result (generation %d, current %d)",
                self.dialog_id, generation, self._generation,
            )
            return
        self.validating = False
        self.error = result.message
        self.submit_enabled = result.is_valid

    def __repr__(self) -> str:
        return (
            f"<InputDialog(id={self.dialog_id}, action={self.config.action_id}, "
            f"status={self.status.value}, submit_enabled={self.submit_enabled})>"
        )


def open_input_dialog(
    config: DialogConfig,
    validator: ValidatorSpec = None,
    *,
    listener: Optional[SubmitListener] = None,
    context: Optional[DialogContext] = None,
) -> InputDialog:
    """
    Open and show an input dialog seeded with config.prefilled_text.

    Must be called from a running event loop: showing the dialog schedules
    the first validation pass.
    """
    logger.debug(
        "Opening input dialog: title=%r, prefilled=%r, action=%s, extras=%r",
        config.title, config.prefilled_text, config.action_id, config.extras,
    )
    dialog = InputDialog(config, validator=validator, listener=listener, context=context)
    dialog.show()
    return dialog
