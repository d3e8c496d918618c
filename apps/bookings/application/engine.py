"""
Booking Engine

Application service that runs the booking lifecycle:
validates requests, checks the property schedule, drives the Booking
aggregate through its state machine and triggers escrow side effects.

Each operation runs inside a unit of work: it either validates and
commits completely, or leaves the store untouched. Rule violations come
back as Result.failure(ErrorKind); collaborator failures raise
GatewayError after rolling back.

The engine is single-writer and performs no locking. Callers must
serialize operations.
"""

from typing import Any, Callable
import copy
import logging

from shared.application.message_bus import MessageBus
from shared.application.uow import InMemoryUnitOfWork
from shared.domain.result import Result
from apps.bookings.application.command_handlers import register_command_handlers
from apps.bookings.application.config import EngineConfig, EngineState
from apps.bookings.application.event_handlers import register_event_handlers
from apps.bookings.domain.entities import Booking
from apps.bookings.domain.errors import BookingError, ErrorKind, GatewayError
from apps.bookings.domain.gateways import (
    Clock,
    DisputeGateway,
    EscrowGateway,
    IdentityGateway,
    PropertyRegistry,
    ReputationGateway,
)
from apps.bookings.domain.inventory import PropertySchedule
from apps.bookings.domain.validation import validate_request
from apps.bookings.infrastructure.store import BookingStore

logger = logging.getLogger(__name__)


class BookingEngine:
    """
    Booking lifecycle engine

    Usage:
        engine = BookingEngine(
            registry=registry, identity=identity, reputation=identity,
            escrow=escrow, disputes=disputes, clock=clock,
        )
        result = engine.create_booking(1, 100, 200, 1000, 600, 4, bytes(32), 'moderate', 'tenant')
        if result.ok:
            engine.confirm_booking(result.value, 'landlord')
    """

    def __init__(
        self,
        *,
        registry: PropertyRegistry,
        identity: IdentityGateway,
        reputation: ReputationGateway,
        escrow: EscrowGateway,
        disputes: DisputeGateway,
        clock: Clock | None = None,
        store: BookingStore | None = None,
        config: EngineConfig | None = None,
        bus: MessageBus | None = None,
    ):
        self.registry = registry
        self.identity = identity
        self.reputation = reputation
        self.escrow = escrow
        self.disputes = disputes
        self.clock = clock
        self.store = store if store is not None else BookingStore()
        self.bus = bus if bus is not None else MessageBus()

        self._initial_config = config if config is not None else EngineConfig.from_settings()
        self.state = EngineState(config=self._initial_config)

        register_event_handlers(self.bus)

    @property
    def config(self) -> EngineConfig:
        return self.state.config

    def register_command_handlers(self):
        """Expose lifecycle operations as commands on this engine's bus"""
        register_command_handlers(self.bus, self)

    # ===== Lifecycle operations =====

    def create_booking(
        self,
        property_id: int,
        start_date: int,
        end_date: int,
        rental_amount: int,
        deposit_amount: int,
        guest_count: int,
        location_hash: bytes,
        cancellation_policy: str,
        actor: str,
        now: int | None = None,
    ) -> Result[int]:
        """
        Request a booking; on success returns the new booking id

        Escrow is charged rental + deposit before the booking is stored.
        """
        now = self._now(now)
        return self._execute('create_booking', lambda: self._create(
            property_id, start_date, end_date, rental_amount, deposit_amount,
            guest_count, location_hash, cancellation_policy, actor, now,
        ))

    def confirm_booking(self, booking_id: int, actor: str, now: int | None = None) -> Result[bool]:
        now = self._now(now)
        return self._execute('confirm_booking', lambda: self._transition(
            booking_id,
            lambda booking: booking.confirm(actor, now, self._conflicts_with(booking)),
        ))

    def check_in(self, booking_id: int, actor: str, now: int | None = None) -> Result[bool]:
        """Start the stay and release the rent to the landlord"""
        now = self._now(now)
        return self._execute('check_in', lambda: self._transition(
            booking_id,
            lambda booking: booking.check_in(actor, now),
            lambda booking: self._call_gateway(
                'escrow', 'release_to_landlord', booking.id,
                self.escrow.release_to_landlord, booking.id, booking.rental_amount,
            ),
        ))

    def check_out(self, booking_id: int, actor: str, now: int | None = None) -> Result[bool]:
        """Finish the stay and release the deposit back to the tenant"""
        now = self._now(now)
        return self._execute('check_out', lambda: self._transition(
            booking_id,
            lambda booking: booking.check_out(actor, now),
            lambda booking: self._call_gateway(
                'escrow', 'release_to_party', booking.id,
                self.escrow.release_to_party, booking.id, booking.tenant,
            ),
        ))

    def cancel_booking(self, booking_id: int, actor: str, now: int | None = None) -> Result[bool]:
        """Cancel ahead of the lead time and refund the tenant in full"""
        now = self._now(now)
        lead_time = self.config.cancellation_lead_time
        return self._execute('cancel_booking', lambda: self._transition(
            booking_id,
            lambda booking: booking.cancel(actor, now, lead_time),
            lambda booking: self._call_gateway(
                'escrow', 'refund', booking.id,
                self.escrow.refund, booking.id, booking.tenant,
            ),
        ))

    def initiate_dispute(self, booking_id: int, actor: str, now: int | None = None) -> Result[bool]:
        now = self._now(now)
        return self._execute('initiate_dispute', lambda: self._transition(
            booking_id,
            lambda booking: booking.dispute(actor, now),
            lambda booking: self._call_gateway(
                'disputes', 'start_dispute', booking.id,
                self.disputes.start_dispute, booking.id, actor,
            ),
        ))

    # ===== Queries =====

    def get_booking_count(self) -> Result[int]:
        """Bookings ever created, terminal ones included"""
        return Result.success(self.state.next_booking_id)

    def get_booking(self, booking_id: int) -> Result[Booking]:
        """Detached copy of the booking"""
        booking = self.store.get(booking_id)
        if booking is None:
            return Result.failure(ErrorKind.BOOKING_NOT_FOUND)
        return Result.success(copy.deepcopy(booking))

    def get_booking_update(self, booking_id: int) -> Result:
        """Latest transition after creation, or None"""
        if not self.store.exists(booking_id):
            return Result.failure(ErrorKind.BOOKING_NOT_FOUND)
        return Result.success(self.store.latest_update(booking_id))

    def get_booking_history(self, booking_id: int) -> Result:
        if not self.store.exists(booking_id):
            return Result.failure(ErrorKind.BOOKING_NOT_FOUND)
        return Result.success(self.store.history(booking_id))

    def get_property_bookings(self, property_id: int) -> Result:
        return Result.success(self.store.property_booking_ids(property_id))

    # ===== Administration =====

    def set_max_bookings(self, value: int, actor: str) -> Result[bool]:
        return self._execute('set_max_bookings', lambda: self._update_config(actor, max_bookings=value))

    def set_booking_fee(self, value: int, actor: str) -> Result[bool]:
        return self._execute('set_booking_fee', lambda: self._update_config(actor, booking_fee=value))

    def reset(self):
        """Back to the initial config, counter at zero, empty store"""
        self.state = EngineState(config=self._initial_config)
        self.store.clear()
        logger.info("Booking engine reset")

    # ===== Internals =====

    def _create(
        self, property_id, start_date, end_date, rental_amount, deposit_amount,
        guest_count, location_hash, cancellation_policy, actor, now,
    ) -> int:
        if self.state.capacity_exhausted:
            raise BookingError(
                ErrorKind.MAX_BOOKINGS_EXCEEDED,
                f"Booking limit of {self.config.max_bookings} reached"
            )

        request = validate_request(
            property_id=property_id,
            start_date=start_date,
            end_date=end_date,
            rental_amount=rental_amount,
            deposit_amount=deposit_amount,
            guest_count=guest_count,
            location_hash=location_hash,
            cancellation_policy=cancellation_policy,
            now=now,
            max_guests=self.config.max_guests,
        )

        if not self.identity.is_verified(actor):
            raise BookingError(ErrorKind.NOT_VERIFIED_TENANT, f"{actor} is not verified")

        if self.reputation.score(actor) < self.config.min_reputation_score:
            raise BookingError(ErrorKind.REPUTATION_CHECK_FAILED, f"{actor} reputation too low")

        schedule = PropertySchedule.from_bookings(property_id, self.store.bookings_for(property_id))
        if not schedule.can_allocate(request.period):
            overlapping = [b.id for b in schedule.conflicts(request.period)]
            raise BookingError(
                ErrorKind.PROPERTY_NOT_AVAILABLE,
                f"Property {property_id} is booked during {request.period} (bookings {overlapping})"
            )

        landlord = self.registry.owner_of(property_id)
        if not landlord:
            raise BookingError(ErrorKind.INVALID_PROPERTY_ID, f"Property {property_id} not found")

        booking_id = self.state.next_booking_id
        if self.store.exists(booking_id):
            raise BookingError(ErrorKind.BOOKING_ALREADY_EXISTS, f"Booking {booking_id} already stored")

        with InMemoryUnitOfWork(self.store, self.bus) as uow:
            booking = Booking.request(
                booking_id=booking_id,
                property_id=property_id,
                tenant=actor,
                landlord=landlord,
                period=request.period,
                rental_amount=rental_amount,
                deposit_amount=deposit_amount,
                guest_count=guest_count,
                location_hash=request.location_hash,
                cancellation_policy=request.cancellation_policy,
                now=now,
            )
            self._call_gateway(
                'escrow', 'deposit', booking_id,
                self.escrow.deposit, booking_id, booking.total_held,
            )
            uow.add(booking)
            uow.collect_events(booking)
            self.state.next_booking_id += 1

        return booking_id

    def _conflicts_with(self, booking: Booking) -> list:
        """Ids of other confirmed bookings on the property that intersect `booking`"""
        schedule = PropertySchedule.from_bookings(
            booking.property_id,
            (b for b in self.store.bookings_for(booking.property_id) if b.id != booking.id),
        )
        return [b.id for b in schedule.conflicts(booking.period)]

    def _transition(
        self,
        booking_id: int,
        mutate: Callable[[Booking], None],
        side_effect: Callable[[Booking], None] | None = None,
    ) -> bool:
        with InMemoryUnitOfWork(self.store, self.bus) as uow:
            booking = uow.get(booking_id)
            if booking is None:
                raise BookingError(ErrorKind.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")

            mutate(booking)
            if side_effect is not None:
                side_effect(booking)

            uow.collect_events(booking)
        return True

    def _update_config(self, actor: str, **changes) -> bool:
        authority = self.config.authority
        if authority is None or actor != authority:
            raise BookingError(ErrorKind.NOT_AUTHORIZED, f"{actor} may not change engine config")
        self.state.config = self.config.with_changes(**changes)
        logger.info(f"Engine config changed by {actor}: {changes}")
        return True

    def _call_gateway(self, gateway: str, operation: str, booking_id: int, call, *args):
        if not call(*args):
            logger.error(f"{gateway}.{operation} failed for booking {booking_id}, rolling back")
            raise GatewayError(gateway, operation, booking_id)

    def _execute(self, operation: str, action: Callable[[], Any]) -> Result:
        try:
            value = action()
        except BookingError as e:
            logger.info(f"{operation} rejected: {e.kind.name} ({e})")
            return Result.failure(e.kind)
        logger.debug(f"{operation} succeeded: {value!r}")
        return Result.success(value)

    def _now(self, now: int | None) -> int:
        if now is not None:
            return now
        if self.clock is None:
            raise ValueError("No clock configured; pass `now` explicitly")
        return self.clock.now()
