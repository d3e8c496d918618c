"""In-memory booking store: records, property index and transition log."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from apps.bookings.domain.entities import Booking
from apps.bookings.domain.errors import BookingError, ErrorKind
from apps.bookings.domain.events import BookingCreated, BookingStatusChanged
from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusUpdate:
    """One recorded status transition."""

    status: str
    timestamp: int
    actor: str


class BookingStore:
    """Authoritative in-memory state for the booking engine.

    Holds the booking records, an insertion-ordered property -> ids index,
    the latest transition per booking and the full ordered history.
    The engine is the only writer; writes arrive through a unit of work.
    """

    def __init__(self) -> None:
        self._bookings: Dict[int, Booking] = {}
        self._by_property: Dict[int, List[int]] = {}
        self._latest: Dict[int, StatusUpdate] = {}
        self._history: Dict[int, List[StatusUpdate]] = {}

    def get(self, booking_id: int) -> Booking | None:
        return self._bookings.get(booking_id)

    def exists(self, booking_id: int) -> bool:
        return booking_id in self._bookings

    def add(self, booking: Booking) -> None:
        if booking.id in self._bookings:
            raise BookingError(ErrorKind.BOOKING_ALREADY_EXISTS, f"Booking {booking.id} already stored")
        self._bookings[booking.id] = booking
        self._by_property.setdefault(booking.property_id, []).append(booking.id)
        logger.debug(f"Stored booking {booking.id} under property {booking.property_id}")

    def record(self, event: DomainEvent) -> None:
        """Append a status change to the history of its booking.

        Creation only opens the history; the latest-update map tracks
        transitions that happen after creation.
        """
        if not isinstance(event, BookingStatusChanged):
            return
        update = StatusUpdate(status=event.status, timestamp=event.timestamp, actor=event.actor)
        self._history.setdefault(event.booking_id, []).append(update)
        if not isinstance(event, BookingCreated):
            self._latest[event.booking_id] = update

    def property_booking_ids(self, property_id: int) -> Tuple[int, ...]:
        return tuple(self._by_property.get(property_id, ()))

    def bookings_for(self, property_id: int) -> Iterator[Booking]:
        for booking_id in self._by_property.get(property_id, ()):
            yield self._bookings[booking_id]

    def latest_update(self, booking_id: int) -> StatusUpdate | None:
        return self._latest.get(booking_id)

    def history(self, booking_id: int) -> Tuple[StatusUpdate, ...]:
        return tuple(self._history.get(booking_id, ()))

    def clear(self) -> None:
        self._bookings.clear()
        self._by_property.clear()
        self._latest.clear()
        self._history.clear()

    def __len__(self) -> int:
        return len(self._bookings)

    def __contains__(self, booking_id: object) -> bool:
        return booking_id in self._bookings
