"""
Booking request validation

Field-level admission checks for a new booking request. The order of
the checks is part of the contract: the first failing rule decides the
error kind reported to the caller.
"""

from dataclasses import dataclass

from shared.domain.value_objects import LocationHash, StayPeriod
from apps.bookings.domain.entities import CancellationPolicy
from apps.bookings.domain.errors import BookingError, ErrorKind

MIN_GUESTS = 1


@dataclass(frozen=True)
class ValidatedRequest:
    """Typed values produced by a request that passed field validation"""
    period: StayPeriod
    location_hash: LocationHash
    cancellation_policy: CancellationPolicy


def validate_request(
    *,
    property_id: int,
    start_date: int,
    end_date: int,
    rental_amount: int,
    deposit_amount: int,
    guest_count: int,
    location_hash,
    cancellation_policy,
    now: int,
    max_guests: int = 20,
) -> ValidatedRequest:
    """
    Validate request fields in contract order

    Raises:
        BookingError: with the kind of the first rule that fails
    """
    if property_id <= 0:
        raise BookingError(ErrorKind.INVALID_PROPERTY_ID, f"Property id must be positive, got {property_id}")

    if start_date <= now:
        raise BookingError(ErrorKind.INVALID_START_DATE, f"Start {start_date} is not after {now}")

    if end_date <= start_date:
        raise BookingError(ErrorKind.INVALID_END_DATE, f"End {end_date} is not after start {start_date}")

    if rental_amount <= 0:
        raise BookingError(ErrorKind.INVALID_RENTAL_AMOUNT)

    # Exact half: an odd rent of 1001 needs a deposit of 501
    if deposit_amount * 2 < rental_amount:
        raise BookingError(
            ErrorKind.INSUFFICIENT_DEPOSIT,
            f"Deposit {deposit_amount} is below half of rent {rental_amount}"
        )

    if not MIN_GUESTS <= guest_count <= max_guests:
        raise BookingError(ErrorKind.INVALID_GUEST_COUNT, f"Guest count {guest_count} out of range")

    if not LocationHash.is_valid(location_hash):
        raise BookingError(ErrorKind.INVALID_LOCATION_HASH)

    policy = CancellationPolicy.parse(cancellation_policy)
    if policy is None:
        raise BookingError(
            ErrorKind.INVALID_CANCELLATION_POLICY,
            f"Unknown cancellation policy {cancellation_policy!r}"
        )

    return ValidatedRequest(
        period=StayPeriod(start_date, end_date),
        location_hash=LocationHash(location_hash),
        cancellation_policy=policy,
    )
