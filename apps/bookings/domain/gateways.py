"""
External Collaborator Contracts

The booking engine talks to the outside world only through these
interfaces. Implementations are injected into the engine; in-memory
adapters live in apps.bookings.infrastructure.gateways.

Every call is synchronous. Boolean results report success; the engine
turns a False into a GatewayError and rolls the operation back.
"""

from abc import ABC, abstractmethod


class Clock(ABC):
    """Monotonic logical time source"""

    @abstractmethod
    def now(self) -> int:
        pass


class PropertyRegistry(ABC):

    @abstractmethod
    def owner_of(self, property_id: int) -> str | None:
        """Landlord identity owning the property, or None if unknown"""
        pass


class IdentityGateway(ABC):

    @abstractmethod
    def is_verified(self, identity: str) -> bool:
        pass


class ReputationGateway(ABC):

    @abstractmethod
    def score(self, identity: str) -> int:
        """Reputation score, 0 for unknown identities"""
        pass


class EscrowGateway(ABC):
    """Custodial ledger holding rent and deposit for each booking"""

    @abstractmethod
    def deposit(self, booking_id: int, amount: int) -> bool:
        pass

    @abstractmethod
    def release_to_landlord(self, booking_id: int, amount: int) -> bool:
        pass

    @abstractmethod
    def release_to_party(self, booking_id: int, recipient: str) -> bool:
        """Release the held deposit to the given party"""
        pass

    @abstractmethod
    def refund(self, booking_id: int, recipient: str) -> bool:
        """Return everything still held for the booking"""
        pass


class DisputeGateway(ABC):

    @abstractmethod
    def start_dispute(self, booking_id: int, initiator: str) -> bool:
        pass
