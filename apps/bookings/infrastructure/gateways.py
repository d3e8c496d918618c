"""In-memory adapters for the booking engine's external collaborators.

These keep everything in dictionaries and lists so the engine can run
without the real registry, identity, escrow and dispute services.
Recording adapters keep a call log that callers can inspect.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Set

from apps.bookings.domain.gateways import (
    Clock,
    DisputeGateway,
    EscrowGateway,
    IdentityGateway,
    PropertyRegistry,
    ReputationGateway,
)

logger = logging.getLogger(__name__)


class ManualClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: int = 0) -> None:
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, value: int) -> None:
        if value < self._now:
            raise ValueError(f"Clock cannot go backwards from {self._now} to {value}")
        self._now = value

    def advance(self, units: int = 1) -> int:
        self.set(self._now + units)
        return self._now


class InMemoryPropertyRegistry(PropertyRegistry):
    def __init__(self, owners: Mapping[int, str] | None = None) -> None:
        self.owners: Dict[int, str] = dict(owners or {})

    def owner_of(self, property_id: int) -> str | None:
        return self.owners.get(property_id)


class InMemoryIdentityGateway(IdentityGateway, ReputationGateway):
    """Verification flags and reputation scores in one place."""

    def __init__(
        self,
        verified: Iterable[str] = (),
        scores: Mapping[str, int] | None = None,
    ) -> None:
        self.verified: Set[str] = set(verified)
        self.scores: Dict[str, int] = dict(scores or {})

    def is_verified(self, identity: str) -> bool:
        return identity in self.verified

    def score(self, identity: str) -> int:
        return self.scores.get(identity, 0)


@dataclass(frozen=True)
class EscrowMovement:
    """One escrow call: `amount` is None when the ledger decides it."""

    operation: str
    booking_id: int
    amount: int | None = None
    recipient: str | None = None


class RecordingEscrowGateway(EscrowGateway):
    """Escrow adapter that records every movement.

    Set `fail_on` to an operation name to make that call report failure.
    """

    def __init__(self) -> None:
        self.movements: List[EscrowMovement] = []
        self.held: Dict[int, int] = {}
        self.fail_on: str | None = None

    def _apply(self, movement: EscrowMovement) -> bool:
        if self.fail_on == movement.operation:
            logger.warning(f"Escrow {movement.operation} refused for booking {movement.booking_id}")
            return False
        self.movements.append(movement)
        return True

    def deposit(self, booking_id: int, amount: int) -> bool:
        if not self._apply(EscrowMovement('deposit', booking_id, amount=amount)):
            return False
        self.held[booking_id] = amount
        return True

    def release_to_landlord(self, booking_id: int, amount: int) -> bool:
        if not self._apply(EscrowMovement('release_to_landlord', booking_id, amount=amount)):
            return False
        self.held[booking_id] = self.held.get(booking_id, 0) - amount
        return True

    def release_to_party(self, booking_id: int, recipient: str) -> bool:
        if not self._apply(EscrowMovement('release_to_party', booking_id, recipient=recipient)):
            return False
        self.held[booking_id] = 0
        return True

    def refund(self, booking_id: int, recipient: str) -> bool:
        if not self._apply(EscrowMovement('refund', booking_id, recipient=recipient)):
            return False
        self.held[booking_id] = 0
        return True


class RecordingDisputeGateway(DisputeGateway):
    def __init__(self) -> None:
        self.disputes: Dict[int, str] = {}
        self.accepting = True

    def start_dispute(self, booking_id: int, initiator: str) -> bool:
        if not self.accepting:
            return False
        self.disputes[booking_id] = initiator
        return True
