"""
Booking Error Taxonomy

Every rejected booking operation maps to exactly one ErrorKind.
Numeric codes are stable and shared with external callers.
"""

from enum import Enum


class ErrorKind(Enum):
    NOT_AUTHORIZED = 100
    INVALID_PROPERTY_ID = 101
    INVALID_START_DATE = 103
    INVALID_END_DATE = 104
    INVALID_RENTAL_AMOUNT = 105
    BOOKING_ALREADY_EXISTS = 106
    BOOKING_NOT_FOUND = 107
    INVALID_STATUS = 108
    PROPERTY_NOT_AVAILABLE = 109
    INSUFFICIENT_DEPOSIT = 110
    INVALID_CHECKIN_TIME = 112
    INVALID_CHECKOUT_TIME = 113
    NOT_VERIFIED_TENANT = 114
    REPUTATION_CHECK_FAILED = 116
    INVALID_CANCELLATION_POLICY = 117
    INVALID_GUEST_COUNT = 118
    INVALID_LOCATION_HASH = 119
    MAX_BOOKINGS_EXCEEDED = 120

    @property
    def code(self) -> int:
        return self.value


class BookingError(Exception):
    """Raised when a booking rule rejects an operation."""

    def __init__(self, kind: ErrorKind, message: str = ''):
        self.kind = kind
        super().__init__(message or kind.name)

    def __repr__(self):
        return f"BookingError({self.kind.name}, {str(self)!r})"


class GatewayError(Exception):
    """Raised when an external collaborator reports failure."""

    def __init__(self, gateway: str, operation: str, booking_id: int):
        self.gateway = gateway
        self.operation = operation
        self.booking_id = booking_id
        super().__init__(f"{gateway}.{operation} failed for booking {booking_id}")
