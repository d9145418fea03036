"""
Event publisher adapters.
Publishing is fire-and-forget: a publisher failure is logged and never
undoes the mutation that produced the event.
"""

import logging
from typing import List, Optional, Type, TypeVar

from domain.events import DomainEvent
from domain.ports import EventPublisher


logger = logging.getLogger(__name__)

E = TypeVar("E", bound=DomainEvent)


class LoggingEventPublisher:
    """Publishes events as structured log records."""

    def __init__(self, logger_name: str = "restaurant.events"):
        self.logger = logging.getLogger(logger_name)

    def publish(self, event: DomainEvent) -> None:
        payload = event.to_log_dict()
        if event.event_type == "CapacityThresholdReached":
            self.logger.warning(
                f"Capacity threshold reached for restaurant {event.aggregate_id}",
                extra={"event": payload},
            )
        else:
            self.logger.info(f"Domain event: {event.event_type}", extra={"event": payload})


class InMemoryEventPublisher:
    """Collects published events in memory."""

    def __init__(self):
        self.events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_type(self, event_class: Type[E]) -> List[E]:
        return [event for event in self.events if isinstance(event, event_class)]

    def clear(self) -> None:
        self.events.clear()


def safe_publish(publisher: Optional[EventPublisher], event: DomainEvent) -> bool:
    """
    Publish an event, logging instead of raising on failure.

    Returns:
        True if the publisher accepted the event
    """
    if publisher is None:
        return False
    try:
        publisher.publish(event)
        return True
    except Exception as e:
        logger.error(
            f"Failed to publish {event.event_type} for restaurant {event.aggregate_id}: {e}",
            exc_info=True,
        )
        return False
