"""Port for user-facing notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from contentport.domain.model import Severity


@dataclass(frozen=True, slots=True)
class NotificationEvent:
    """Structured event delivered alongside a notification."""

    name: str
    data: Mapping[str, Any] = field(default_factory=dict[str, Any])


@runtime_checkable
class Notifier(Protocol):
    def notify(
        self,
        recipient: str,
        message_key: str,
        *,
        severity: Severity,
        interpolate: Mapping[str, Any] | None = None,
        event: NotificationEvent | None = None,
        job_id: str | None = None,
        dismissible: bool = False,
    ) -> str:
        """Deliver a notification and return its id."""
        ...

    def dismiss(self, recipient: str, notification_id: str) -> None: ...
