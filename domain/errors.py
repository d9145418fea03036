"""Domain error taxonomy.

Every error carries a human-readable message plus an optional machine
``code`` and ``details`` mapping, so adapters can map them to responses
without parsing messages.
"""

from datetime import date, time
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all domain errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError, ValueError):
    """Malformed or out-of-range input. Raised before any mutation."""


class StateTransitionError(DomainError):
    """A status transition the slot lifecycle does not allow."""


class CapacityError(DomainError):
    """Reserved seats exceed a table's capacity."""


class NoTablesAvailableError(CapacityError):
    """No table fits the requested party and time range."""

    def __init__(self, restaurant_id: Optional[int], day: date, start_time: time, end_time: time):
        super().__init__(
            f"No tables available at restaurant {restaurant_id} for {day} from {start_time} to {end_time}",
            code="NO_TABLES_AVAILABLE",
            details={
                "restaurant_id": restaurant_id,
                "date": day.isoformat(),
                "start_time": start_time.isoformat(),
                "end_time": end_time.isoformat(),
            },
        )


class OverlapError(DomainError):
    """A slot conflicts with an existing reservation on the same table."""


class OpeningHoursError(OverlapError):
    """A slot falls outside the restaurant's operating hours."""


class NotFoundError(DomainError, LookupError):
    """A referenced entity does not exist."""

    entity = "Entity"

    def __init__(self, entity_id: Any):
        super().__init__(
            f"{self.entity} not found with ID: {entity_id}",
            code="NOT_FOUND",
            details={"entity": self.entity, "id": entity_id},
        )
        self.entity_id = entity_id


class RestaurantNotFoundError(NotFoundError):
    entity = "Restaurant"


class TableNotFoundError(NotFoundError):
    entity = "Table"


class TimeSlotNotFoundError(NotFoundError):
    entity = "Time slot"


class ConcurrentModificationError(DomainError):
    """The aggregate changed in storage since it was loaded."""
