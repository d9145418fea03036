"""Outbound ports the use-case layer depends on."""

from typing import List, Protocol

from .events import DomainEvent
from .models import Restaurant


class RestaurantRepository(Protocol):
    """Loads and stores fully hydrated Restaurant aggregates."""

    def get(self, restaurant_id: int) -> Restaurant:
        """Raises RestaurantNotFoundError if the id is unknown."""
        ...

    def save(self, restaurant: Restaurant) -> Restaurant:
        """Create or update depending on whether ``restaurant.id`` is set."""
        ...

    def find_all(self) -> List[Restaurant]:
        ...

    def find_by_name(self, fragment: str) -> List[Restaurant]:
        ...

    def find_by_table_id(self, table_id: int) -> Restaurant:
        """Raises TableNotFoundError if no restaurant owns the table."""
        ...

    def find_by_slot_id(self, slot_id: int) -> Restaurant:
        """Raises TimeSlotNotFoundError if no restaurant owns the slot."""
        ...

    def delete(self, restaurant_id: int) -> None:
        ...


class EventPublisher(Protocol):
    """Fire-and-forget delivery of domain events."""

    def publish(self, event: DomainEvent) -> None:
        ...
