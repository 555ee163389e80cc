"""Notification channel interface."""

from typing import Protocol


class NotificationChannel(Protocol):
    """Interface for showing a notification to the user."""

    def request_permission(self) -> None:
        """Ask for permission to notify. Best-effort, never raises."""
        ...

    def is_granted(self) -> bool:
        """Whether notifications can currently be shown."""
        ...

    def show(self, title: str, body: str) -> None:
        """Display a notification."""
        ...
