"""Domain layer for the restaurant availability engine."""

from .enums import (
    ReservationStatus,
    TableLocation,
    READ_BLOCKING_STATUSES,
    WRITE_BLOCKING_STATUSES,
)
from .errors import (
    DomainError,
    ValidationError,
    StateTransitionError,
    CapacityError,
    NoTablesAvailableError,
    OverlapError,
    OpeningHoursError,
    NotFoundError,
    RestaurantNotFoundError,
    TableNotFoundError,
    TimeSlotNotFoundError,
    ConcurrentModificationError,
)
from .models import (
    TimeRange,
    OpeningHours,
    ReservationSlot,
    Table,
    Restaurant,
    ranges_overlap,
)

__all__ = [
    # Enums
    "ReservationStatus",
    "TableLocation",
    "READ_BLOCKING_STATUSES",
    "WRITE_BLOCKING_STATUSES",
    # Errors
    "DomainError",
    "ValidationError",
    "StateTransitionError",
    "CapacityError",
    "NoTablesAvailableError",
    "OverlapError",
    "OpeningHoursError",
    "NotFoundError",
    "RestaurantNotFoundError",
    "TableNotFoundError",
    "TimeSlotNotFoundError",
    "ConcurrentModificationError",
    # Models
    "TimeRange",
    "OpeningHours",
    "ReservationSlot",
    "Table",
    "Restaurant",
    "ranges_overlap",
]
