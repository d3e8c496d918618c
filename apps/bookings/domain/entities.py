"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Main aggregate representing a rental reservation
- BookingStatus: FSM states for booking lifecycle
- CancellationPolicy: Policy chosen by the tenant at request time
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from shared.domain.base import Aggregate
from shared.domain.value_objects import LocationHash, StayPeriod
from apps.bookings.domain.errors import BookingError, ErrorKind
from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCheckedIn,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
    BookingDisputed,
)


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (landlord accepted)
    - PENDING -> CANCELLED (tenant or landlord, lead time respected)
    - CONFIRMED -> CANCELLED (tenant or landlord, lead time respected)
    - CONFIRMED -> ACTIVE (tenant checked in)
    - ACTIVE -> COMPLETED (tenant or landlord checked out)
    - ACTIVE -> DISPUTED (tenant or landlord opened a dispute)
    """
    PENDING = 'pending'        # Requested, funds held in escrow
    CONFIRMED = 'confirmed'    # Accepted by landlord, blocks the period
    ACTIVE = 'active'          # Tenant is in the property
    COMPLETED = 'completed'    # Stay finished, deposit returned
    CANCELLED = 'cancelled'    # Cancelled before the stay, refunded
    DISPUTED = 'disputed'      # Handed over to dispute resolution


class CancellationPolicy(Enum):
    """Informational at this layer; only the lead-time rule is enforced"""
    FLEXIBLE = 'flexible'
    MODERATE = 'moderate'
    STRICT = 'strict'

    @classmethod
    def parse(cls, value) -> 'CancellationPolicy | None':
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a tenant's reservation of a property for a stay period.
    Every status change goes through one of the transition methods below,
    which check authorization, current status and timing in that order and
    emit exactly one domain event.

    Key invariants:
    - start_date < end_date
    - landlord, property and dates never change after creation
    - checkin_time / checkout_time are set exactly once
    - Only CONFIRMED bookings block property dates
    """

    property_id: int
    tenant: str
    landlord: str
    start_date: int
    end_date: int
    rental_amount: int
    deposit_amount: int
    guest_count: int
    location_hash: LocationHash
    cancellation_policy: CancellationPolicy

    status: BookingStatus = BookingStatus.PENDING
    checkin_time: int | None = None
    checkout_time: int | None = None

    @classmethod
    def request(
        cls,
        *,
        booking_id: int,
        property_id: int,
        tenant: str,
        landlord: str,
        period: StayPeriod,
        rental_amount: int,
        deposit_amount: int,
        guest_count: int,
        location_hash: LocationHash,
        cancellation_policy: CancellationPolicy,
        now: int,
    ) -> 'Booking':
        """
        Create a PENDING booking

        Input validation happens before this call; the aggregate only
        records the request and emits BookingCreated.
        """
        booking = cls(
            id=booking_id,
            created_at=now,
            updated_at=now,
            property_id=property_id,
            tenant=tenant,
            landlord=landlord,
            start_date=period.start,
            end_date=period.end,
            rental_amount=rental_amount,
            deposit_amount=deposit_amount,
            guest_count=guest_count,
            location_hash=location_hash,
            cancellation_policy=cancellation_policy,
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking_id,
            booking_id=booking_id,
            property_id=property_id,
            status=BookingStatus.PENDING.value,
            previous_status=None,
            actor=tenant,
            timestamp=now,
            tenant=tenant,
            landlord=landlord,
            amount_held=booking.total_held,
        ))
        return booking

    def confirm(self, actor: str, now: int, conflicts: Sequence[int] = ()):
        """
        Confirm booking (PENDING -> CONFIRMED)

        Only the landlord may confirm. `conflicts` holds the ids of
        confirmed bookings whose period intersects this one; any conflict
        keeps the booking pending.
        Events: BookingConfirmed
        """
        self._authorize(actor, self.landlord)
        self._require_status(BookingStatus.PENDING)
        if conflicts:
            raise BookingError(
                ErrorKind.PROPERTY_NOT_AVAILABLE,
                f"Property {self.property_id} is booked during {self.period} (bookings {list(conflicts)})"
            )

        self._transition(BookingStatus.CONFIRMED, actor, now, BookingConfirmed)

    def check_in(self, actor: str, now: int):
        """
        Check in tenant (CONFIRMED -> ACTIVE)

        Only the tenant, and not before the stay starts.
        Events: BookingCheckedIn
        """
        self._authorize(actor, self.tenant)
        self._require_status(BookingStatus.CONFIRMED)
        if now < self.start_date:
            raise BookingError(
                ErrorKind.INVALID_CHECKIN_TIME,
                f"Check-in opens at {self.start_date}, clock is at {now}"
            )

        self.checkin_time = now
        self._transition(
            BookingStatus.ACTIVE, actor, now, BookingCheckedIn,
            released_amount=self.rental_amount,
        )

    def check_out(self, actor: str, now: int):
        """
        Check out (ACTIVE -> COMPLETED)

        Tenant or landlord, not before the stay ends.
        Events: BookingCompleted
        """
        self._authorize(actor)
        self._require_status(BookingStatus.ACTIVE)
        if now < self.end_date:
            raise BookingError(
                ErrorKind.INVALID_CHECKOUT_TIME,
                f"Check-out opens at {self.end_date}, clock is at {now}"
            )

        self.checkout_time = now
        self._transition(BookingStatus.COMPLETED, actor, now, BookingCompleted)

    def cancel(self, actor: str, now: int, lead_time: int):
        """
        Cancel booking (PENDING|CONFIRMED -> CANCELLED)

        The stay must start strictly more than `lead_time` units from now.
        Events: BookingCancelled
        """
        self._authorize(actor)
        self._require_status(BookingStatus.PENDING, BookingStatus.CONFIRMED)
        if not self.start_date > now + lead_time:
            raise BookingError(
                ErrorKind.INVALID_CANCELLATION_POLICY,
                f"Cancellation requires {lead_time} units of notice before {self.start_date}"
            )

        self._transition(BookingStatus.CANCELLED, actor, now, BookingCancelled)

    def dispute(self, actor: str, now: int):
        """
        Open a dispute (ACTIVE -> DISPUTED)

        Events: BookingDisputed
        """
        self._authorize(actor)
        self._require_status(BookingStatus.ACTIVE)

        self._transition(BookingStatus.DISPUTED, actor, now, BookingDisputed)

    def _authorize(self, actor: str, *allowed: str):
        """Without explicit identities, either party may act"""
        permitted = actor in allowed if allowed else self.is_party(actor)
        if not permitted:
            raise BookingError(
                ErrorKind.NOT_AUTHORIZED,
                f"{actor} may not act on booking {self.id}"
            )

    def _require_status(self, *allowed: BookingStatus):
        if self.status not in allowed:
            raise BookingError(
                ErrorKind.INVALID_STATUS,
                f"Booking {self.id} is {self.status.value}, "
                f"expected {' or '.join(s.value for s in allowed)}"
            )

    def _transition(self, new_status: BookingStatus, actor: str, now: int, event_class, **payload):
        previous = self.status
        self.status = new_status
        self.updated_at = now
        self.add_event(event_class(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            status=new_status.value,
            previous_status=previous.value,
            actor=actor,
            timestamp=now,
            **payload,
        ))

    def blocks_dates(self) -> bool:
        """Only CONFIRMED bookings block the property period"""
        return self.status == BookingStatus.CONFIRMED

    def is_party(self, actor: str) -> bool:
        return actor in (self.tenant, self.landlord)

    @property
    def period(self) -> StayPeriod:
        return StayPeriod(self.start_date, self.end_date)

    @property
    def total_held(self) -> int:
        """Amount charged to escrow at creation"""
        return self.rental_amount + self.deposit_amount

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, property_id={self.property_id}, "
            f"status={self.status.value}, period={self.period})"
        )
