"""
Scrum Chatter Backend: Dialog Session Registry
===============================================

What:  In-memory map of open input dialog sessions, keyed by dialog id.
How:   Dialogs are added when opened and removed once submitted or
       cancelled. When the registry is full, the oldest open dialog is
       cancelled and evicted.
Who:   The dialog routes; the health check reports the open count.

Thread Safety:
    Only touched from the event loop; no locking needed for a single
    process. Sessions do not survive a restart.
"""

import logging
from collections import OrderedDict
from typing import Dict, Optional

from scrumchatter.config import settings
from scrumchatter.dialogs.input_dialog import InputDialog
from scrumchatter.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class DialogRegistry:
    """Open dialog sessions, oldest first."""

    def __init__(self, max_open: Optional[int] = None):
        self.max_open = max_open or settings.max_open_dialogs
        self._dialogs: Dict[str, InputDialog] = OrderedDict()

    def add(self, dialog: InputDialog) -> InputDialog:
        while len(self._dialogs) >= self.max_open:
            dialog_id, oldest = self._dialogs.popitem(last=False)
            if oldest.is_open:
                oldest.cancel()
            logger.warning("Evicted dialog %s: %d dialogs open", dialog_id, self.max_open)
        self._dialogs[dialog.dialog_id] = dialog
        return dialog

    def get(self, dialog_id: str) -> InputDialog:
        dialog = self._dialogs.get(dialog_id)
        if dialog is None:
            raise NotFoundError(resource="dialog", resource_id=dialog_id)
        return dialog

    def release(self, dialog: InputDialog) -> None:
        """Forget a dialog once it is closed."""
        if not dialog.is_open:
            self._dialogs.pop(dialog.dialog_id, None)

    def clear(self) -> None:
        for dialog in self._dialogs.values():
            if dialog.is_open:
                dialog.cancel()
        self._dialogs.clear()

    def __len__(self) -> int:
        return len(self._dialogs)

    def __contains__(self, dialog_id: str) -> bool:
        return dialog_id in self._dialogs


# ── Singleton Instance ────────────────────────────────────────────────────
dialog_registry = DialogRegistry()
