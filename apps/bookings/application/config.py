"""
Booking Engine Configuration

Tunables and mutable counters of the engine, held explicitly by each
engine instance instead of living in module globals.

Defaults come from the BOOKING_ENGINE dict in Django settings.
"""

from dataclasses import dataclass, field, replace
import logging

logger = logging.getLogger(__name__)

DEFAULTS = {
    'MAX_BOOKINGS': 10000,
    'BOOKING_FEE': 500,
    'CANCELLATION_LEAD_TIME': 48,
    'MIN_REPUTATION_SCORE': 50,
    'MAX_GUESTS': 20,
    'AUTHORITY': None,
}


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine tunables

    booking_fee is informational: it is tracked and can be changed by the
    authority, but no operation charges it.
    """
    max_bookings: int = DEFAULTS['MAX_BOOKINGS']
    booking_fee: int = DEFAULTS['BOOKING_FEE']
    cancellation_lead_time: int = DEFAULTS['CANCELLATION_LEAD_TIME']
    min_reputation_score: int = DEFAULTS['MIN_REPUTATION_SCORE']
    max_guests: int = DEFAULTS['MAX_GUESTS']
    authority: str | None = DEFAULTS['AUTHORITY']

    def __post_init__(self):
        for name in ('max_bookings', 'booking_fee', 'cancellation_lead_time', 'min_reputation_score'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if self.max_guests < 1:
            raise ValueError("max_guests must be at least 1")

    @classmethod
    def from_settings(cls) -> 'EngineConfig':
        """Build from settings.BOOKING_ENGINE, falling back to DEFAULTS"""
        from django.conf import settings

        options = {**DEFAULTS, **getattr(settings, 'BOOKING_ENGINE', {})}
        logger.debug(f"Loading booking engine config from settings: {options}")
        return cls(
            max_bookings=options['MAX_BOOKINGS'],
            booking_fee=options['BOOKING_FEE'],
            cancellation_lead_time=options['CANCELLATION_LEAD_TIME'],
            min_reputation_score=options['MIN_REPUTATION_SCORE'],
            max_guests=options['MAX_GUESTS'],
            authority=options['AUTHORITY'],
        )

    def with_changes(self, **changes) -> 'EngineConfig':
        return replace(self, **changes)


@dataclass
class EngineState:
    """Mutable engine state: current config and the id counter"""
    config: EngineConfig = field(default_factory=EngineConfig)
    next_booking_id: int = 0

    @property
    def capacity_exhausted(self) -> bool:
        return self.next_booking_id >= self.config.max_bookings
