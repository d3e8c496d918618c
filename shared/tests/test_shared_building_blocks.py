"""Value objects, Result, message bus and unit of work."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from shared.application.message_bus import MessageBus
from shared.application.uow import InMemoryUnitOfWork
from shared.domain.base import Aggregate, DomainEvent
from shared.domain.result import Result
from shared.domain.value_objects import LocationHash, StayPeriod


class TestStayPeriod:
    def test_requires_start_before_end(self):
        with pytest.raises(ValueError):
            StayPeriod(5, 5)
        with pytest.raises(ValueError):
            StayPeriod(6, 5)

    def test_overlap_is_half_open(self):
        assert StayPeriod(25, 28).overlaps_with(StayPeriod(27, 30))
        assert not StayPeriod(25, 28).overlaps_with(StayPeriod(28, 31))
        assert StayPeriod(0, 100).overlaps_with(StayPeriod(10, 20))

    def test_overlap_needs_a_period(self):
        with pytest.raises(TypeError):
            StayPeriod(1, 2).overlaps_with((1, 2))

    def test_contains_and_length(self):
        period = StayPeriod(10, 20)

        assert period.contains(10)
        assert not period.contains(20)
        assert len(period) == 10
        assert str(period) == "[10, 20)"


class TestLocationHash:
    def test_accepts_exactly_32_bytes(self):
        assert LocationHash(bytes(range(32))).hex().startswith("000102")

    @pytest.mark.parametrize("digest", [bytes(31), bytes(33), b""])
    def test_rejects_wrong_length(self, digest):
        with pytest.raises(ValueError):
            LocationHash(digest)

    def test_rejects_text(self):
        with pytest.raises(TypeError):
            LocationHash("a" * 32)

    def test_bytearray_is_normalized(self):
        value = LocationHash(bytearray(32))

        assert isinstance(value.digest, bytes)
        assert hash(value) == hash(LocationHash(bytes(32)))


class TestResult:
    def test_success(self):
        result = Result.success(0)

        assert result.ok
        assert result.unwrap() == 0
        assert result.error is None

    def test_failure(self):
        result = Result.failure("nope")

        assert not result
        assert result.error == "nope"
        with pytest.raises(ValueError):
            result.unwrap()

    def test_failure_requires_error(self):
        with pytest.raises(ValueError):
            Result.failure(None)


@dataclass(kw_only=True)
class ThingHappened(DomainEvent):
    name: str = ""


@dataclass(kw_only=True)
class SpecialThingHappened(ThingHappened):
    pass


class TestMessageBus:
    def test_base_class_handlers_receive_subclass_events(self):
        bus = MessageBus()
        seen = []
        bus.register_event_handler(ThingHappened, seen.append)

        bus.publish_events([ThingHappened(name="a"), SpecialThingHappened(name="b")])

        assert [e.name for e in seen] == ["a", "b"]

    def test_same_handler_is_called_once(self):
        bus = MessageBus()
        seen = []
        bus.register_event_handler(ThingHappened, seen.append)
        bus.register_event_handler(SpecialThingHappened, seen.append)

        bus.publish_events([SpecialThingHappened()])

        assert len(seen) == 1

    def test_failing_handler_does_not_stop_others(self):
        bus = MessageBus()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        bus.register_event_handler(ThingHappened, broken)
        bus.register_event_handler(ThingHappened, seen.append)

        bus.publish_events([ThingHappened()])

        assert len(seen) == 1

    def test_one_handler_per_command(self):
        bus = MessageBus()
        bus.register_command_handler(str, len)

        assert bus.handle_command("four") == 4
        with pytest.raises(ValueError):
            bus.register_command_handler(str, len)

    def test_command_handler_errors_propagate(self):
        bus = MessageBus()
        bus.register_command_handler(int, lambda n: 1 // n)

        with pytest.raises(ZeroDivisionError):
            bus.handle_command(0)


@dataclass(kw_only=True, eq=False)
class Counter(Aggregate):
    value: int = 0
    tags: list = field(default_factory=list)

    def bump(self):
        self.value += 1
        self.tags.append(self.value)
        self.add_event(ThingHappened(aggregate_id=self.id, name=f"bump-{self.value}"))


class FakeRepository:
    def __init__(self):
        self.items = {}
        self.recorded = []

    def get(self, item_id):
        return self.items.get(item_id)

    def add(self, item):
        self.items[item.id] = item

    def record(self, event):
        self.recorded.append(event)


class TestInMemoryUnitOfWork:
    def test_commit_adds_records_and_publishes(self):
        repo, bus, seen = FakeRepository(), MessageBus(), []
        bus.register_event_handler(ThingHappened, seen.append)

        with InMemoryUnitOfWork(repo, bus) as uow:
            counter = Counter(id=1)
            counter.bump()
            uow.add(counter)
            uow.collect_events(counter)

        assert repo.get(1) is counter
        assert [e.name for e in repo.recorded] == ["bump-1"]
        assert [e.name for e in seen] == ["bump-1"]
        assert counter.events == []

    def test_rollback_restores_tracked_aggregates(self):
        repo = FakeRepository()
        repo.add(Counter(id=1, value=5))

        with pytest.raises(RuntimeError):
            with InMemoryUnitOfWork(repo) as uow:
                counter = uow.get(1)
                counter.bump()
                uow.collect_events(counter)
                raise RuntimeError("escrow offline")

        restored = repo.get(1)
        assert restored.value == 5
        assert restored.tags == []
        assert restored.events == []
        assert repo.recorded == []

    def test_rollback_discards_staged_aggregates(self):
        repo = FakeRepository()

        with pytest.raises(RuntimeError):
            with InMemoryUnitOfWork(repo) as uow:
                uow.add(Counter(id=2))
                raise RuntimeError

        assert repo.get(2) is None

    def test_entities_compare_by_id(self):
        assert Counter(id=1, value=1) == Counter(id=1, value=2)
        assert Counter(id=1) != Counter(id=2)
        assert len({Counter(id=1), Counter(id=1)}) == 1
