"""
Scrum Chatter Backend: Member Name Validator Tests
====================================================

What:  Tests for MemberNameValidator.
How:   Store-less cases use a mock session factory; the rest run against
       the SQLite test database.

What we test:
    ✅ Keeping the current name while renaming never queries the store
    ✅ A name used by an active member of the team is rejected by name
    ✅ Names of deleted members and of other teams are free
    ✅ A count query yielding no row means no conflict
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from scrumchatter.database import session_scope
from scrumchatter.dialogs.validation import DialogContext
from scrumchatter.schemas.dialog import MemberDialogExtras
from scrumchatter.services.member_name_validator import ERROR_MEMBER_EXISTS, MemberNameValidator
from scrumchatter.services.member_service import member_service
from scrumchatter.services.team_service import team_service


class TestWithoutStore:

    def setup_method(self):
        self.validator = MemberNameValidator()

    @pytest.mark.asyncio
    async def test_current_name_skips_query(self, mock_session_factory):
        context = DialogContext(session_factory=mock_session_factory)
        extras = MemberDialogExtras(team_id=1, member_id=7, member_name="Bob")

        error = await self.validator.get_error(context, "rename_member", "Bob", extras)

        assert error is None
        mock_session_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_count_is_no_conflict(self, mock_session_factory):
        context = DialogContext(session_factory=mock_session_factory)
        with patch(
            "scrumchatter.services.member_name_validator.member_service.count_active_members",
            new=AsyncMock(return_value=None),
        ):
            error = await self.validator.get_error(
                context, "create_member", "Bob", MemberDialogExtras(team_id=1),
            )
        assert error is None
        mock_session_factory.assert_called_once()

    @pytest.mark.asyncio
    async def test_positive_count_is_conflict(self, mock_session_factory, mock_db_session):
        result = MagicMock()
        result.scalar.return_value = 2
        mock_db_session.execute.return_value = result
        context = DialogContext(session_factory=mock_session_factory)

        error = await self.validator.get_error(
            context, "create_member", "Bob", MemberDialogExtras(team_id=1),
        )

        assert error == ERROR_MEMBER_EXISTS.format(name="Bob")

    @pytest.mark.asyncio
    async def test_wrong_extras_type(self, mock_session_factory):
        context = DialogContext(session_factory=mock_session_factory)
        with pytest.raises(TypeError):
            await self.validator.get_error(context, "create_member", "Bob", {"team_id": 1})

    @pytest.mark.asyncio
    async def test_validate_wraps_result(self, mock_session_factory):
        context = DialogContext(session_factory=mock_session_factory)
        extras = MemberDialogExtras(team_id=1, member_id=7, member_name="Bob")

        result = await self.validator.validate(context, "rename_member", "Bob", extras)

        assert result.is_valid


class TestWithStore:

    def setup_method(self):
        self.validator = MemberNameValidator()
        self.context = DialogContext()

    @pytest.mark.asyncio
    async def test_existing_name_is_rejected(self, team_id):
        async with session_scope() as db:
            await member_service.create_member(db, team_id, "Bob")

        error = await self.validator.get_error(
            self.context, "create_member", "Bob", MemberDialogExtras(team_id=team_id),
        )

        assert error is not None
        assert "Bob" in error

    @pytest.mark.asyncio
    async def test_new_name_is_accepted(self, team_id):
        async with session_scope() as db:
            await member_service.create_member(db, team_id, "Bob")

        error = await self.validator.get_error(
            self.context, "create_member", "Bobby", MemberDialogExtras(team_id=team_id),
        )
        assert error is None

    @pytest.mark.asyncio
    async def test_deleted_members_name_is_free(self, team_id):
        async with session_scope() as db:
            member = await member_service.create_member(db, team_id, "Bob")
            await member_service.delete_member(db, member.id)

        error = await self.validator.get_error(
            self.context, "create_member", "Bob", MemberDialogExtras(team_id=team_id),
        )
        assert error is None

    @pytest.mark.asyncio
    async def test_same_name_in_other_team_is_free(self, team_id):
        async with session_scope() as db:
            other = await team_service.create_team(db, "Platform")
            await member_service.create_member(db, other.id, "Bob")

        error = await self.validator.get_error(
            self.context, "create_member", "Bob", MemberDialogExtras(team_id=team_id),
        )
        assert error is None

    @pytest.mark.asyncio
    async def test_rename_onto_another_member_is_rejected(self, team_id):
        async with session_scope() as db:
            await member_service.create_member(db, team_id, "Alice")
            bob = await member_service.create_member(db, team_id, "Bob")

        extras = MemberDialogExtras(team_id=team_id, member_id=bob.id, member_name="Bob")
        error = await self.validator.get_error(self.context, "rename_member", "Alice", extras)

        assert error == ERROR_MEMBER_EXISTS.format(name="Alice")
