"""
Booking Domain Events

Events that represent status transitions in the booking domain.
They are recorded in the booking store and published after commit.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingStatusChanged(DomainEvent):
    """
    Base event: a booking entered a new status

    `timestamp` is the logical clock reading of the transition and
    `actor` the identity that caused it.
    """
    booking_id: int
    property_id: int
    status: str
    previous_status: str | None
    actor: str
    timestamp: int

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': self.booking_id,
            'property_id': self.property_id,
            'status': self.status,
            'previous_status': self.previous_status,
            'actor': self.actor,
            'timestamp': self.timestamp,
        })
        return data


@dataclass(kw_only=True)
class BookingCreated(BookingStatusChanged):
    """
    Event: A new booking was requested (-> PENDING)

    Escrow already holds rental plus deposit when this is published.
    """
    tenant: str
    landlord: str
    amount_held: int


@dataclass(kw_only=True)
class BookingConfirmed(BookingStatusChanged):
    """Event: Landlord accepted the request (PENDING -> CONFIRMED)"""


@dataclass(kw_only=True)
class BookingCheckedIn(BookingStatusChanged):
    """
    Event: Tenant has checked in (CONFIRMED -> ACTIVE)

    Rental amount was released to the landlord.
    """
    released_amount: int


@dataclass(kw_only=True)
class BookingCompleted(BookingStatusChanged):
    """
    Event: Stay finished (ACTIVE -> COMPLETED)

    Deposit was released back to the tenant.
    """


@dataclass(kw_only=True)
class BookingCancelled(BookingStatusChanged):
    """Event: Booking was cancelled before the stay; tenant refunded"""


@dataclass(kw_only=True)
class BookingDisputed(BookingStatusChanged):
    """Event: Tenant or landlord opened a dispute during the stay"""
