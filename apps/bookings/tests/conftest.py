"""Shared fixtures: an engine wired to in-memory collaborators."""

from __future__ import annotations

import pytest

from apps.bookings.application.config import EngineConfig
from apps.bookings.application.engine import BookingEngine
from apps.bookings.infrastructure.gateways import (
    InMemoryIdentityGateway,
    InMemoryPropertyRegistry,
    ManualClock,
    RecordingDisputeGateway,
    RecordingEscrowGateway,
)

from apps.bookings.tests.factories import AUTHORITY, LANDLORD, TENANT, booking_request


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def registry() -> InMemoryPropertyRegistry:
    return InMemoryPropertyRegistry({1: LANDLORD, 2: LANDLORD})


@pytest.fixture
def identity() -> InMemoryIdentityGateway:
    return InMemoryIdentityGateway(verified=[TENANT], scores={TENANT: 80})


@pytest.fixture
def escrow() -> RecordingEscrowGateway:
    return RecordingEscrowGateway()


@pytest.fixture
def disputes() -> RecordingDisputeGateway:
    return RecordingDisputeGateway()


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(authority=AUTHORITY)


@pytest.fixture
def engine(registry, identity, escrow, disputes, clock, engine_config) -> BookingEngine:
    return BookingEngine(
        registry=registry,
        identity=identity,
        reputation=identity,
        escrow=escrow,
        disputes=disputes,
        clock=clock,
        config=engine_config,
    )


@pytest.fixture
def create(engine):
    def _create(**overrides):
        return engine.create_booking(**booking_request(**overrides))

    return _create


@pytest.fixture
def confirmed(engine, create):
    """Booking 0 confirmed by the landlord, clock still at 0."""
    booking_id = create().unwrap()
    engine.confirm_booking(booking_id, LANDLORD).unwrap()
    return booking_id


@pytest.fixture
def active(engine, confirmed, clock):
    """Booking 0 checked in at clock 100."""
    clock.set(100)
    engine.check_in(confirmed, TENANT).unwrap()
    return confirmed
