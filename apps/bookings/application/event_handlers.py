"""Default subscribers for booking domain events."""

from __future__ import annotations

import logging

from apps.bookings.domain.events import BookingStatusChanged

logger = logging.getLogger(__name__)


def log_status_change(event: BookingStatusChanged) -> None:
    """Audit trail line for every committed transition."""

    logger.info(
        f"Booking {event.booking_id} {event.previous_status or 'new'} -> {event.status} "
        f"by {event.actor} at {event.timestamp}",
        extra={"booking_event": event.to_dict()},
    )


def register_event_handlers(bus) -> None:
    bus.register_event_handler(BookingStatusChanged, log_status_change)
