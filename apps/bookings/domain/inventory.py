"""
Property Schedule

This is the check that prevents double bookings. Every new request and
every confirmation for a property is tested against the schedule built
from the bookings indexed under that property.

Only CONFIRMED bookings occupy the schedule: pending requests for the
same dates may coexist until a landlord confirms one of them.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from shared.domain.value_objects import StayPeriod
from apps.bookings.domain.entities import Booking


@dataclass
class PropertySchedule:
    """
    Occupied periods of a single property

    Usage:
        schedule = PropertySchedule.from_bookings(property_id, store.bookings_for(property_id))
        if not schedule.can_allocate(period):
            raise BookingError(ErrorKind.PROPERTY_NOT_AVAILABLE)
    """

    property_id: int
    bookings: List[Booking] = field(default_factory=list)

    @classmethod
    def from_bookings(cls, property_id: int, bookings: Iterable[Booking]) -> 'PropertySchedule':
        return cls(
            property_id=property_id,
            bookings=[b for b in bookings if b.blocks_dates()],
        )

    def conflicts(self, period: StayPeriod) -> List[Booking]:
        """Blocking bookings whose period intersects the given one, in index order"""
        return [b for b in self.bookings if b.period.overlaps_with(period)]

    def can_allocate(self, period: StayPeriod) -> bool:
        """True when no blocking booking intersects the period"""
        return not any(b.period.overlaps_with(period) for b in self.bookings)

    @property
    def occupied(self) -> List[StayPeriod]:
        return [b.period for b in self.bookings]

    def __str__(self):
        return f"PropertySchedule(property={self.property_id}, occupied={len(self.bookings)})"
