"""
Scrum Chatter Backend: Input Dialog Controller Tests
=====================================================

What:  Tests for InputDialog: validate-as-you-type, stale result handling,
       submit gating, validator failures, and the submit listener.
How:   Fake validators whose answers are released by asyncio.Events, so a
       test decides in which order validations finish. No database.

What we test:
    ✅ Only the latest text's result reaches the dialog
    ✅ Submit is disabled while a validation is in flight
    ✅ The prefilled text is validated when the dialog is shown
    ✅ Factory failure → dialog runs without validation
    ✅ Validator error / timeout → submit stays disabled
    ✅ Submit fires the listener once with the trimmed text
"""

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock

import pytest

from scrumchatter.dialogs.input_dialog import (
    VALIDATION_FAILED_MESSAGE,
    DialogConfig,
    DialogStatus,
    InputDialog,
    open_input_dialog,
)
from scrumchatter.dialogs.validation import DialogContext, InputValidator, ValidationResult
from scrumchatter.exceptions import DialogStateError


class GatedValidator(InputValidator):
    """Answers from `errors`, but only once the gate of the text is opened."""

    def __init__(self, errors=None):
        self.errors = errors or {}
        self.gates = {}
        self.calls = []

    def gate(self, text: str) -> asyncio.Event:
        return self.gates.setdefault(text, asyncio.Event())

    async def get_error(self, context, action_id, text, extras):
        self.calls.append(text)
        await self.gate(text).wait()
        return self.errors.get(text)


class InstantValidator(InputValidator):
    def __init__(self, errors=None):
        self.errors = errors or {}

    async def get_error(self, context, action_id, text, extras):
        return self.errors.get(text)


class BlockingValidator(InputValidator):
    """Plain-function validator, run in a worker thread."""

    def get_error(self, context, action_id, text, extras):
        time.sleep(0.01)
        return "too short" if len(text) < 3 else None


class FailingValidator(InputValidator):
    async def get_error(self, context, action_id, text, extras):
        raise RuntimeError("store unavailable")


def make_config(prefilled_text=None, extras=None) -> DialogConfig:
    return DialogConfig(
        title="New member",
        input_hint="Member name",
        prefilled_text=prefilled_text,
        action_id="create_member",
        extras=extras,
    )


async def wait_until(predicate, timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("Condition not reached in time")
        await asyncio.sleep(0.001)


class TestValidationResult:

    def test_valid(self):
        assert ValidationResult.valid().is_valid
        assert ValidationResult.from_error(None).is_valid
        assert ValidationResult.from_error("").is_valid

    def test_invalid_carries_message(self):
        result = ValidationResult.from_error("taken")
        assert not result.is_valid
        assert result.message == "taken"

    def test_invalid_requires_message(self):
        with pytest.raises(ValueError):
            ValidationResult.invalid("")


class TestLatestResultWins:
    """Results for superseded text must never reach the dialog."""

    @pytest.mark.asyncio
    async def test_stale_error_arriving_late_is_discarded(self):
        """'Al' is taken, 'Ali' is free; 'Al' answers last and is ignored."""
        validator = GatedValidator(errors={"Al": "A member named 'Al' already exists"})
        dialog = open_input_dialog(make_config(), validator)
        validator.gate("").set()
        await dialog.wait_until_idle()

        dialog.set_text("Al")
        dialog.set_text("Ali")

        validator.gate("Ali").set()
        await wait_until(lambda: not dialog.validating)
        assert dialog.error is None
        assert dialog.submit_enabled is True

        validator.gate("Al").set()
        await dialog.wait_until_idle()
        assert dialog.error is None
        assert dialog.submit_enabled is True
        assert validator.calls == ["", "Al", "Ali"]

    @pytest.mark.asyncio
    async def test_stale_success_cannot_enable_submit(self):
        """A free name answered late must not enable submit for a taken one."""
        validator = GatedValidator(errors={"Bob": "taken"})
        dialog = open_input_dialog(make_config(), validator)
        validator.gate("").set()
        await dialog.wait_until_idle()

        dialog.set_text("Bo")
        dialog.set_text("Bob")
        validator.gate("Bob").set()
        await wait_until(lambda: not dialog.validating)
        validator.gate("Bo").set()
        await dialog.wait_until_idle()

        assert dialog.error == "taken"
        assert dialog.submit_enabled is False

    @pytest.mark.asyncio
    async def test_generation_increments_on_each_change(self):
        dialog = open_input_dialog(make_config(), InstantValidator())
        assert dialog.generation == 1
        dialog.set_text("A")
        dialog.set_text("Ab")
        assert dialog.generation == 3
        await dialog.wait_until_idle()


class TestSubmitGating:

    @pytest.mark.asyncio
    async def test_submit_disabled_while_validating(self):
        validator = GatedValidator()
        dialog = open_input_dialog(make_config(), validator)
        validator.gate("").set()
        await dialog.wait_until_idle()
        assert dialog.submit_enabled is True

        dialog.set_text("Bob")
        assert dialog.validating is True
        assert dialog.submit_enabled is False
        assert dialog.error is None

        with pytest.raises(DialogStateError):
            await dialog.submit()

        validator.gate("Bob").set()
        await dialog.wait_until_idle()
        assert dialog.submit_enabled is True

    @pytest.mark.asyncio
    async def test_text_change_clears_previous_error(self):
        validator = GatedValidator(errors={"Bob": "taken"})
        dialog = open_input_dialog(make_config("Bob"), validator)
        validator.gate("Bob").set()
        await dialog.wait_until_idle()
        assert dialog.error == "taken"

        dialog.set_text("Bobby")
        assert dialog.error is None
        assert dialog.submit_enabled is False
        validator.gate("Bobby").set()
        await dialog.wait_until_idle()

    @pytest.mark.asyncio
    async def test_invalid_text_cannot_be_submitted(self):
        listener = MagicMock()
        dialog = open_input_dialog(
            make_config(), InstantValidator(errors={"Bob": "taken"}), listener=listener,
        )
        dialog.set_text("Bob")
        await dialog.wait_until_idle()

        with pytest.raises(DialogStateError):
            await dialog.submit()
        listener.assert_not_called()
        assert dialog.status == DialogStatus.OPEN


class TestShow:

    @pytest.mark.asyncio
    async def test_prefilled_text_is_validated_on_show(self):
        validator = InstantValidator(errors={"Bob": "taken"})
        dialog = open_input_dialog(make_config(prefilled_text="Bob"), validator)
        assert dialog.text == "Bob"
        assert dialog.validating is True
        assert dialog.submit_enabled is False

        await dialog.wait_until_idle()
        assert dialog.error == "taken"
        assert dialog.submit_enabled is False

    @pytest.mark.asyncio
    async def test_show_runs_once(self):
        validator = GatedValidator()
        dialog = InputDialog(make_config(), validator)
        dialog.show()
        dialog.show()
        validator.gate("").set()
        await dialog.wait_until_idle()
        assert validator.calls == [""]

    @pytest.mark.asyncio
    async def test_without_validator_submit_is_enabled(self):
        dialog = open_input_dialog(make_config())
        assert dialog.has_validator is False
        assert dialog.validating is False
        assert dialog.submit_enabled is True

        dialog.set_text("anything")
        assert dialog.submit_enabled is True


class TestValidatorFailures:

    @pytest.mark.asyncio
    async def test_factory_failure_disables_validation(self):
        """A validator that cannot be built leaves the dialog usable."""
        def broken_factory():
            raise RuntimeError("no database configured")

        listener = MagicMock()
        dialog = open_input_dialog(make_config(), broken_factory, listener=listener)
        assert dialog.has_validator is False
        assert dialog.submit_enabled is True

        dialog.set_text("Bob")
        await dialog.submit()
        listener.assert_called_once_with("create_member", "Bob", None)

    @pytest.mark.asyncio
    async def test_factory_returning_wrong_type_disables_validation(self):
        dialog = open_input_dialog(make_config(), lambda: object())
        assert dialog.has_validator is False

    @pytest.mark.asyncio
    async def test_validator_class_is_used_as_factory(self):
        dialog = open_input_dialog(make_config(), BlockingValidator)
        assert dialog.has_validator is True
        await dialog.wait_until_idle()
        assert dialog.error == "too short"

    @pytest.mark.asyncio
    async def test_blocking_validator_runs_off_loop(self):
        dialog = open_input_dialog(make_config(), BlockingValidator())
        dialog.set_text("Alice")
        await dialog.wait_until_idle()
        assert dialog.error is None
        assert dialog.submit_enabled is True

    @pytest.mark.asyncio
    async def test_validator_exception_keeps_submit_disabled(self):
        dialog = open_input_dialog(make_config(), FailingValidator())
        dialog.set_text("Bob")
        await dialog.wait_until_idle()
        assert dialog.error == VALIDATION_FAILED_MESSAGE
        assert dialog.submit_enabled is False
        assert dialog.validating is False

    @pytest.mark.asyncio
    async def test_validator_timeout_keeps_submit_disabled(self):
        validator = GatedValidator()
        context = DialogContext(validation_timeout=0.05)
        dialog = open_input_dialog(make_config(), validator, context=context)
        await dialog.wait_until_idle()
        assert dialog.error == VALIDATION_FAILED_MESSAGE
        assert dialog.submit_enabled is False


class TestSubmitAndCancel:

    @pytest.mark.asyncio
    async def test_submit_fires_listener_with_trimmed_text(self):
        listener = MagicMock()
        extras = {"team_id": 1}
        dialog = open_input_dialog(
            make_config(extras=extras), InstantValidator(), listener=listener,
        )
        dialog.set_text("  Bob ")
        await dialog.wait_until_idle()

        result = await dialog.submit()

        assert result == "Bob"
        assert dialog.status == DialogStatus.SUBMITTED
        listener.assert_called_once_with("create_member", "Bob", extras)

    @pytest.mark.asyncio
    async def test_async_listener_is_awaited(self):
        listener = AsyncMock()
        dialog = open_input_dialog(make_config(), listener=listener)
        dialog.set_text("Bob")
        await dialog.submit()
        listener.assert_awaited_once_with("create_member", "Bob", None)

    @pytest.mark.asyncio
    async def test_second_submit_is_rejected(self):
        listener = MagicMock()
        dialog = open_input_dialog(make_config(), listener=listener)
        await dialog.submit()
        with pytest.raises(DialogStateError):
            await dialog.submit()
        assert listener.call_count == 1

    @pytest.mark.asyncio
    async def test_cancel_does_not_fire_listener(self):
        listener = MagicMock()
        validator = GatedValidator()
        dialog = open_input_dialog(make_config(), validator, listener=listener)

        dialog.cancel()
        validator.gate("").set()
        await dialog.wait_until_idle()

        assert dialog.status == DialogStatus.CANCELLED
        listener.assert_not_called()
        with pytest.raises(DialogStateError):
            dialog.set_text("Bob")
