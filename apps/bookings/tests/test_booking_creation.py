"""Admission checks and side effects of create_booking."""

from __future__ import annotations

import pytest

from apps.bookings.domain.entities import Booking, BookingStatus, CancellationPolicy
from apps.bookings.domain.errors import ErrorKind, GatewayError
from apps.bookings.infrastructure.gateways import EscrowMovement
from apps.bookings.tests.factories import AUTHORITY, HASH, LANDLORD, STRANGER, TENANT
from shared.domain.value_objects import LocationHash, StayPeriod


def test_creates_pending_booking_and_charges_escrow(engine, create, escrow):
    result = create()

    assert result.ok
    assert result.value == 0
    booking = engine.get_booking(0).unwrap()
    assert booking.property_id == 1
    assert booking.tenant == TENANT
    assert booking.landlord == LANDLORD
    assert (booking.start_date, booking.end_date) == (100, 200)
    assert booking.rental_amount == 1000
    assert booking.deposit_amount == 600
    assert booking.status is BookingStatus.PENDING
    assert booking.guest_count == 4
    assert booking.cancellation_policy is CancellationPolicy.MODERATE
    assert booking.location_hash == LocationHash(HASH)
    assert booking.checkin_time is None
    assert booking.checkout_time is None
    assert booking.created_at == 0
    assert escrow.held[0] == 1600
    assert escrow.movements == [EscrowMovement("deposit", 0, amount=1600)]


def test_created_booking_is_indexed_under_property(engine, create):
    create()
    create(start_date=300, end_date=400)
    create(property_id=2)

    assert engine.get_property_bookings(1).unwrap() == (0, 1)
    assert engine.get_property_bookings(2).unwrap() == (2,)
    assert engine.get_property_bookings(99).unwrap() == ()


def test_ids_are_monotonic_and_count_tracks_successes(engine, create):
    assert engine.get_booking_count().unwrap() == 0

    assert create().value == 0
    assert create(rental_amount=0).error is ErrorKind.INVALID_RENTAL_AMOUNT
    assert create(start_date=300, end_date=400).value == 1
    assert create(guest_count=21).error is ErrorKind.INVALID_GUEST_COUNT
    assert create(start_date=500, end_date=600, cancellation_policy="strict").value == 2

    assert engine.get_booking_count().unwrap() == 3


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"property_id": 0}, ErrorKind.INVALID_PROPERTY_ID),
        ({"property_id": -5}, ErrorKind.INVALID_PROPERTY_ID),
        ({"start_date": 0}, ErrorKind.INVALID_START_DATE),
        ({"start_date": 200, "end_date": 100}, ErrorKind.INVALID_END_DATE),
        ({"end_date": 100}, ErrorKind.INVALID_END_DATE),
        ({"rental_amount": 0}, ErrorKind.INVALID_RENTAL_AMOUNT),
        ({"deposit_amount": 400}, ErrorKind.INSUFFICIENT_DEPOSIT),
        ({"guest_count": 0}, ErrorKind.INVALID_GUEST_COUNT),
        ({"guest_count": 21}, ErrorKind.INVALID_GUEST_COUNT),
        ({"location_hash": bytes(31)}, ErrorKind.INVALID_LOCATION_HASH),
        ({"location_hash": bytes(33)}, ErrorKind.INVALID_LOCATION_HASH),
        ({"location_hash": "0" * 32}, ErrorKind.INVALID_LOCATION_HASH),
        ({"cancellation_policy": "invalid"}, ErrorKind.INVALID_CANCELLATION_POLICY),
        ({"property_id": 7}, ErrorKind.INVALID_PROPERTY_ID),
    ],
)
def test_rejects_invalid_request(engine, create, escrow, overrides, error):
    result = create(**overrides)

    assert not result.ok
    assert result.error is error
    assert engine.get_booking_count().unwrap() == 0
    assert len(engine.store) == 0
    assert escrow.movements == []


def test_rejects_start_date_in_the_past(create, clock):
    clock.set(150)

    assert create().error is ErrorKind.INVALID_START_DATE


def test_start_date_equal_to_now_is_rejected(create, clock):
    clock.set(100)

    assert create().error is ErrorKind.INVALID_START_DATE


def test_rejects_unverified_tenant(create, identity):
    identity.verified.clear()

    assert create().error is ErrorKind.NOT_VERIFIED_TENANT


def test_rejects_low_reputation(create, identity):
    identity.scores[TENANT] = 40

    assert create().error is ErrorKind.REPUTATION_CHECK_FAILED


def test_reputation_threshold_is_inclusive(create, identity):
    identity.scores[TENANT] = 50

    assert create().ok


def test_unknown_identity_has_zero_reputation(create, identity):
    identity.verified.add(STRANGER)

    assert create(actor=STRANGER).error is ErrorKind.REPUTATION_CHECK_FAILED


def test_first_failing_rule_decides_error(create, identity):
    identity.verified.clear()

    # Bad policy and unverified tenant: field checks run before identity checks
    assert create(cancellation_policy="nope").error is ErrorKind.INVALID_CANCELLATION_POLICY
    # Bad property id and past start: property id is checked first
    assert create(property_id=0, start_date=0).error is ErrorKind.INVALID_PROPERTY_ID
    # Short deposit and bad guest count: deposit floor comes first
    assert create(deposit_amount=1, guest_count=0).error is ErrorKind.INSUFFICIENT_DEPOSIT


def test_capacity_is_checked_before_anything_else(engine, create):
    engine.set_max_bookings(0, AUTHORITY).unwrap()

    assert create(property_id=0).error is ErrorKind.MAX_BOOKINGS_EXCEEDED


def test_rejects_when_max_bookings_exceeded(engine, create):
    engine.set_max_bookings(1, AUTHORITY).unwrap()

    assert create().ok
    result = create(start_date=300, end_date=400, rental_amount=1500, deposit_amount=800)

    assert result.error is ErrorKind.MAX_BOOKINGS_EXCEEDED
    assert engine.get_booking_count().unwrap() == 1


class TestDepositFloor:
    def test_exact_half_is_accepted(self, create):
        assert create(rental_amount=1000, deposit_amount=500).ok

    def test_one_below_half_is_rejected(self, create):
        assert create(rental_amount=1000, deposit_amount=499).error is ErrorKind.INSUFFICIENT_DEPOSIT

    def test_odd_rent_needs_at_least_half(self, create):
        assert create(rental_amount=1001, deposit_amount=500).error is ErrorKind.INSUFFICIENT_DEPOSIT
        assert create(rental_amount=1001, deposit_amount=501).ok


def test_bytearray_location_hash_is_accepted(engine, create):
    assert create(location_hash=bytearray(32)).ok
    assert engine.get_booking(0).unwrap().location_hash.digest == bytes(32)


def test_existing_record_under_next_id_is_rejected(engine, create, escrow):
    squatter = Booking.request(
        booking_id=0,
        property_id=2,
        tenant=TENANT,
        landlord=LANDLORD,
        period=StayPeriod(10, 20),
        rental_amount=10,
        deposit_amount=5,
        guest_count=1,
        location_hash=LocationHash(HASH),
        cancellation_policy=CancellationPolicy.FLEXIBLE,
        now=0,
    )
    engine.store.add(squatter)

    result = create()

    assert result.error is ErrorKind.BOOKING_ALREADY_EXISTS
    assert escrow.movements == []
    assert engine.get_booking_count().unwrap() == 0


def test_failed_escrow_deposit_leaves_no_trace(engine, create, escrow):
    escrow.fail_on = "deposit"

    with pytest.raises(GatewayError) as excinfo:
        create()

    assert excinfo.value.operation == "deposit"
    assert engine.get_booking_count().unwrap() == 0
    assert engine.get_property_bookings(1).unwrap() == ()
    assert engine.get_booking(0).error is ErrorKind.BOOKING_NOT_FOUND

    escrow.fail_on = None
    assert create().value == 0


def test_explicit_now_overrides_clock(engine, clock):
    clock.set(500)

    result = engine.create_booking(1, 100, 200, 1000, 600, 4, HASH, "flexible", TENANT, now=10)

    assert result.value == 0
    assert engine.get_booking(0).unwrap().created_at == 10
