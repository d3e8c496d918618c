"""
Unit of Work Pattern

Stages changes to aggregates and ensures that domain events
are recorded and published only after a successful commit.
"""

from abc import ABC, abstractmethod
from typing import Dict, List
import copy
import logging

from shared.domain.base import Aggregate, DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the changes"""
        pass

    @abstractmethod
    def rollback(self):
        """Discard the changes"""
        pass

    @abstractmethod
    def collect_events(self, aggregate):
        """Collect events from aggregate root"""
        pass


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """
    In-memory implementation of Unit of Work

    The repository must provide `get(id)`, `add(aggregate)` and
    `record(event)`. Aggregates loaded through the unit of work are
    snapshotted; on rollback they are restored in place, so a failure
    anywhere inside the block leaves no trace.

    Usage:
        with InMemoryUnitOfWork(store, bus) as uow:
            booking = uow.get(booking_id)

            # Execute domain logic
            booking.confirm(actor, now)

            # Collect events
            uow.collect_events(booking)

            # Changes are applied here (__exit__)
        # Events are recorded, then published after commit
    """

    def __init__(self, repository, bus=None):
        self.repository = repository
        self.bus = bus
        self._events: List[DomainEvent] = []
        self._new: List[Aggregate] = []
        self._snapshots: Dict[int, tuple] = {}

    def __enter__(self):
        self._events = []
        self._new = []
        self._snapshots = {}
        return self

    def get(self, aggregate_id: int):
        """Load an aggregate and track it for rollback"""
        aggregate = self.repository.get(aggregate_id)
        if aggregate is not None and aggregate_id not in self._snapshots:
            self._snapshots[aggregate_id] = (aggregate, copy.deepcopy(vars(aggregate)))
        return aggregate

    def add(self, aggregate: Aggregate):
        """Stage a new aggregate, inserted on commit"""
        self._new.append(aggregate)

    def commit(self):
        """
        Apply staged changes, record and publish events

        The repository records events before any handler sees them, so
        subscribers observe a store that already reflects the transition.
        """
        logger.debug(
            f"Committing unit of work: {len(self._new)} new aggregate(s), "
            f"{len(self._events)} event(s)"
        )

        for aggregate in self._new:
            self.repository.add(aggregate)

        events = self._events.copy()
        self._events.clear()
        self._new.clear()
        self._snapshots.clear()

        for event in events:
            self.repository.record(event)

        if events and self.bus is not None:
            self.bus.publish_events(events)

    def rollback(self):
        """Restore tracked aggregates and discard events"""
        logger.debug(
            f"Rolling back unit of work, discarding {len(self._events)} event(s) "
            f"and {len(self._new)} staged aggregate(s)"
        )
        for aggregate, state in self._snapshots.values():
            aggregate.__dict__.clear()
            aggregate.__dict__.update(state)
        self._events.clear()
        self._new.clear()
        self._snapshots.clear()

    def collect_events(self, aggregate):
        """
        Collect events from aggregate root

        Extracts all domain events from the aggregate and
        clears them from the aggregate.
        """
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
            )
