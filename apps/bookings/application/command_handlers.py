"""
Booking Commands

Message-bus entry points for the booking lifecycle. Each command maps
1:1 onto a BookingEngine operation and returns the same Result.

Commands:
- CreateBookingCommand: Request a new booking
- ConfirmBookingCommand: Landlord accepts a pending booking
- CheckInCommand: Tenant starts the stay
- CheckOutCommand: Stay ends
- CancelBookingCommand: Cancel before the stay
- InitiateDisputeCommand: Open a dispute during the stay
"""

from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass(frozen=True)
class CreateBookingCommand:
    """
    Command to request a new booking

    `actor` is the tenant; `now` defaults to the engine clock.
    """
    property_id: int
    start_date: int
    end_date: int
    rental_amount: int
    deposit_amount: int
    guest_count: int
    location_hash: bytes
    cancellation_policy: str
    actor: str
    now: int | None = None


@dataclass(frozen=True)
class ConfirmBookingCommand:
    booking_id: int
    actor: str
    now: int | None = None


@dataclass(frozen=True)
class CheckInCommand:
    booking_id: int
    actor: str
    now: int | None = None


@dataclass(frozen=True)
class CheckOutCommand:
    booking_id: int
    actor: str
    now: int | None = None


@dataclass(frozen=True)
class CancelBookingCommand:
    booking_id: int
    actor: str
    now: int | None = None


@dataclass(frozen=True)
class InitiateDisputeCommand:
    booking_id: int
    actor: str
    now: int | None = None


# ===== Registration =====

def register_command_handlers(bus, engine):
    """
    Route every booking command to the engine

    Raises ValueError if a booking command already has a handler on the bus.
    """
    bus.register_command_handler(
        CreateBookingCommand,
        lambda c: engine.create_booking(
            c.property_id, c.start_date, c.end_date, c.rental_amount, c.deposit_amount,
            c.guest_count, c.location_hash, c.cancellation_policy, c.actor, c.now,
        ),
    )
    bus.register_command_handler(
        ConfirmBookingCommand, lambda c: engine.confirm_booking(c.booking_id, c.actor, c.now)
    )
    bus.register_command_handler(
        CheckInCommand, lambda c: engine.check_in(c.booking_id, c.actor, c.now)
    )
    bus.register_command_handler(
        CheckOutCommand, lambda c: engine.check_out(c.booking_id, c.actor, c.now)
    )
    bus.register_command_handler(
        CancelBookingCommand, lambda c: engine.cancel_booking(c.booking_id, c.actor, c.now)
    )
    bus.register_command_handler(
        InitiateDisputeCommand, lambda c: engine.initiate_dispute(c.booking_id, c.actor, c.now)
    )
    logger.debug("Registered booking command handlers")
