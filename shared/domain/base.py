"""
Base Domain Classes

Entity, ValueObject, Aggregate and DomainEvent for the booking context.

Time inside the domain is logical: `created_at` / `updated_at` hold readings
of the clock source, not wall-clock datetimes.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4


@dataclass(kw_only=True)
class Entity(ABC):
    """Identified by an integer id; equality and hashing use the id only"""
    id: int
    created_at: int = 0
    updated_at: int = 0

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable, compared by value"""


@dataclass(kw_only=True, eq=False)
class Aggregate(Entity):
    """
    Aggregate root

    Buffers the domain events raised by its methods until a unit of work
    collects them on commit.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        return list(self._events)


@dataclass(kw_only=True)
class DomainEvent:
    """
    Something that happened to an aggregate

    `occurred_at` is wall-clock time for log correlation; domain time
    travels in the event payload.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)
    aggregate_id: int | None = None

    def to_dict(self) -> dict:
        return {
            'event_id': str(self.event_id),
            'event_type': type(self).__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': self.aggregate_id,
        }
