"""
Capacity guard for upload batches.
"""
from design_intake.models.notification import DESTRUCTIVE, Notification
from design_intake.services.notification_service import Notifier


class CapacityGuard:
    """Rejects selections that would push a batch past its file limit."""

    def __init__(self, notifier: Notifier, max_files: int = 10):
        if max_files < 1:
            raise ValueError(f"max_files must be a positive integer, got: {max_files}")
        self.notifier = notifier
        self.max_files = max_files

    def rejection_message(self) -> str:
        return f"You can only upload a maximum of {self.max_files} files."

    def check(self, current_count: int, new_count: int) -> bool:
        """
        Decide whether a new selection fits the batch.

        Selections are accepted or rejected as a whole. A rejection raises
        one destructive toast and leaves the batch untouched.

        Args:
            current_count: Entries currently tracked by the batch
            new_count: Files in the new selection

        Returns:
            True if the whole selection fits
        """
        if current_count + new_count > self.max_files:
            self.notifier.notify(Notification(
                variant=DESTRUCTIVE,
                title="Cannot add files",
                description=self.rejection_message()
            ))
            return False
        return True
