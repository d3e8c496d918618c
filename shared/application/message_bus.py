"""
Message Bus

Routes commands to exactly one handler and domain events to every
subscriber. Each engine owns its bus instance; there is no module-level bus.
"""

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    Commands: 1:1, unknown or duplicate registrations raise ValueError.
    Events: 1:N, dispatched along the event's MRO so a subscriber of
    BookingStatusChanged hears every concrete transition event.
    """

    def __init__(self):
        self._subscribers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)
        self._command_handlers: Dict[Type, Callable[[Any], Any]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        subscribers = self._subscribers[event_type]
        if handler not in subscribers:
            subscribers.append(handler)
        logger.debug(f"Subscribed {_name_of(handler)} to {event_type.__name__}")

    def register_command_handler(self, command_type: Type, handler: Callable[[Any], Any]):
        if command_type in self._command_handlers:
            raise ValueError(f"{command_type.__name__} already has a handler")
        self._command_handlers[command_type] = handler
        logger.debug(f"Registered command handler for {command_type.__name__}")

    def handle_command(self, command: Any) -> Any:
        """Run the command's handler and return its result; handler errors propagate"""
        try:
            handler = self._command_handlers[type(command)]
        except KeyError:
            raise ValueError(f"No handler registered for command {type(command).__name__}") from None

        logger.debug(f"Handling command: {type(command).__name__}")
        return handler(command)

    def handlers_for(self, event: DomainEvent) -> List[EventHandler]:
        """Subscribers of the event's class or any of its bases, each once"""
        found: List[EventHandler] = []
        for klass in type(event).__mro__:
            found.extend(h for h in self._subscribers.get(klass, ()) if h not in found)
        return found

    def publish_events(self, events: List[DomainEvent]):
        """
        Deliver events in order

        A failing subscriber is logged and skipped; the transition that
        produced the event is already committed.
        """
        for event in events:
            for handler in self.handlers_for(event):
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Event handler {_name_of(handler)} failed on "
                        f"{type(event).__name__}: {e}",
                        exc_info=True
                    )


def _name_of(handler) -> str:
    return getattr(handler, '__name__', repr(handler))
