"""
Status-change message templates.
"""

from dataclasses import dataclass
from typing import Optional, Union

from portal.models.base.enums import NotificationLevel, ReservationKind, ReservationStatus


@dataclass(frozen=True)
class NotificationTemplate:
    """Rendered title, body and level of a status-change message."""

    title: str
    message: str
    level: NotificationLevel


def render_status_template(
    kind: Union[ReservationKind, str],
    status: Union[ReservationStatus, str],
    comment: Optional[str] = None,
) -> Optional[NotificationTemplate]:
    """
    Render the message for a reservation that moved to ``status``.

    Returns None for statuses that have no message (pending, cancelled).
    """
    kind_label = ReservationKind(kind).label.lower()
    status = ReservationStatus(status)

    if status is ReservationStatus.APPROVED:
        return NotificationTemplate(
            title="Reservation approved",
            message=f"Your {kind_label} reservation was approved. Comment: {comment or ''}".rstrip(),
            level=NotificationLevel.SUCCESS,
        )

    if status is ReservationStatus.REJECTED:
        if comment:
            message = f"Your {kind_label} reservation was not approved. Reason: {comment}"
        else:
            message = (
                f"Your {kind_label} reservation was not approved. "
                "Please get in touch for more information."
            )
        return NotificationTemplate(
            title="Reservation not approved",
            message=message,
            level=NotificationLevel.WARNING,
        )

    return None


__all__ = ["NotificationTemplate", "render_status_template"]
