"""
Notification dispatcher for reservation status changes.
"""

from typing import Optional, Union

from portal.core.logging import get_logger
from portal.models.base.enums import ReservationKind, ReservationStatus
from portal.services.notification.channels import NotificationChannel
from portal.services.notification.templates import render_status_template


class NotificationDispatcher:
    """
    Sends a status-change message to a resolved recipient.

    Delivery is best-effort: ``dispatch`` never raises and reports the
    outcome as a boolean. Exactly one attempt is made per call.
    """

    def __init__(self, channel: NotificationChannel):
        self.channel = channel
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Dispatching
    # -------------------------------------------------------------------------

    def dispatch(
        self,
        recipient: str,
        reservation_kind: Union[ReservationKind, str],
        new_status: Union[ReservationStatus, str],
        reservation_id: str,
        comment: Optional[str] = None,
    ) -> bool:
        """
        Deliver the message for ``new_status``.

        Returns:
            True when the channel accepted the message, False otherwise
        """
        context = {
            "recipient": recipient,
            "reservation_id": reservation_id,
            "new_status": str(getattr(new_status, "value", new_status)),
            "channel": self.channel.channel_type.value,
        }

        try:
            template = render_status_template(reservation_kind, new_status, comment)
            if template is None:
                self._logger.warning("No notification template for status", extra=context)
                return False

            self.channel.deliver(recipient, template, reservation_id=reservation_id)

        except Exception as e:
            self._logger.warning(
                f"Notification dispatch failed: {e}",
                extra={**context, "exception_type": type(e).__name__},
            )
            return False

        self._logger.info("Notification dispatched", extra=context)
        return True


__all__ = ["NotificationDispatcher"]
