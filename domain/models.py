"""Domain entities and value objects for the restaurant availability engine.

The aggregate graph is stored arena-style: a Restaurant owns its Tables keyed
by table number, a Table owns its ReservationSlots, and children only hold the
identifiers of their parent (``restaurant_id``, ``table_number``/``table_id``)
rather than live object references.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, time
from typing import Dict, Iterator, List, Optional, Tuple

from core.utils_datetime import Clock, add_minutes, format_time, get_clock, minutes_between

from .enums import (
    READ_BLOCKING_STATUSES,
    WRITE_BLOCKING_STATUSES,
    ReservationStatus,
    TableLocation,
)
from .errors import (
    CapacityError,
    OpeningHoursError,
    OverlapError,
    StateTransitionError,
    TableNotFoundError,
    TimeSlotNotFoundError,
    ValidationError,
)


logger = logging.getLogger(__name__)

MIN_DURATION_MINUTES = 30
MAX_DURATION_MINUTES = 240

DEFAULT_OPENING_TIME = time(11, 0)
DEFAULT_CLOSING_TIME = time(23, 59)

EMAIL_PATTERN = re.compile(r'^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$')


def ranges_overlap(
    date1: date, start1: time, end1: time,
    date2: date, start2: time, end2: time,
) -> bool:
    """Half-open interval intersection on the same date; touching ends do not overlap."""
    if date1 != date2:
        return False
    return start1 < end2 and start2 < end1


def _validate_times(start_time: Optional[time], end_time: Optional[time]) -> None:
    if start_time is None:
        raise ValidationError("Start time cannot be null", code="START_TIME_REQUIRED")
    if end_time is None:
        raise ValidationError("End time cannot be null", code="END_TIME_REQUIRED")
    if end_time <= start_time:
        raise ValidationError("End time must be after start time", code="END_BEFORE_START")


def _validate_duration(start_time: time, end_time: time) -> None:
    duration = minutes_between(start_time, end_time)
    if duration < MIN_DURATION_MINUTES:
        raise ValidationError(
            f"Time slot duration must be at least {MIN_DURATION_MINUTES} minutes",
            code="DURATION_TOO_SHORT",
            details={"duration_minutes": duration},
        )
    if duration > MAX_DURATION_MINUTES:
        raise ValidationError(
            f"Time slot duration cannot exceed {MAX_DURATION_MINUTES // 60} hours",
            code="DURATION_TOO_LONG",
            details={"duration_minutes": duration},
        )


# ============================================================================
# Value Objects
# ============================================================================

@dataclass(frozen=True)
class TimeRange:
    """A validated [start, end) time range of 30 minutes to 4 hours."""
    start_time: time
    end_time: time

    def __post_init__(self):
        _validate_times(self.start_time, self.end_time)
        _validate_duration(self.start_time, self.end_time)

    @classmethod
    def of_duration(cls, start_time: time, duration_minutes: int) -> "TimeRange":
        """Create a range starting at ``start_time`` lasting ``duration_minutes``."""
        if start_time is None:
            raise ValidationError("Start time cannot be null", code="START_TIME_REQUIRED")
        if not MIN_DURATION_MINUTES <= duration_minutes <= MAX_DURATION_MINUTES:
            raise ValidationError(
                f"Duration must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES} minutes",
                code="INVALID_DURATION",
            )
        end_time = add_minutes(start_time, duration_minutes)
        if end_time is None:
            raise ValidationError("Time range cannot cross midnight", code="CROSSES_MIDNIGHT")
        return cls(start_time, end_time)

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeRange":
        """Create a range from two HH:MM strings."""
        try:
            start_time = time.fromisoformat(start)
            end_time = time.fromisoformat(end)
        except (TypeError, ValueError) as e:
            raise ValidationError("Invalid time format. Use HH:MM format", code="INVALID_TIME_FORMAT") from e
        return cls(start_time, end_time)

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start_time, self.end_time)

    @property
    def formatted_duration(self) -> str:
        """Duration as "X hours Y minutes"."""
        hours, minutes = divmod(self.duration_minutes, 60)
        if hours == 0:
            return f"{minutes} minutes"
        hours_part = f"{hours} hour" if hours == 1 else f"{hours} hours"
        if minutes == 0:
            return hours_part
        minutes_part = f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
        return f"{hours_part} {minutes_part}"

    def overlaps_with(self, other: Optional["TimeRange"]) -> bool:
        if other is None:
            return False
        return self.start_time < other.end_time and other.start_time < self.end_time

    def contains(self, t: Optional[time]) -> bool:
        """True if ``t`` falls in [start, end)."""
        if t is None:
            return False
        return self.start_time <= t < self.end_time

    def is_within(self, opening_time: time, closing_time: time) -> bool:
        return self.start_time >= opening_time and self.end_time <= closing_time

    def __str__(self) -> str:
        return f"{format_time(self.start_time)}-{format_time(self.end_time)}"


@dataclass(frozen=True)
class OpeningHours:
    """Daily operating window of a restaurant. Closing must be after opening."""
    opening_time: time = DEFAULT_OPENING_TIME
    closing_time: time = DEFAULT_CLOSING_TIME

    def __post_init__(self):
        if self.opening_time is None:
            raise ValidationError("Opening time cannot be null", code="OPENING_TIME_REQUIRED")
        if self.closing_time is None:
            raise ValidationError("Closing time cannot be null", code="CLOSING_TIME_REQUIRED")
        if self.closing_time <= self.opening_time:
            raise ValidationError(
                "Closing time must be after opening time",
                code="INVALID_OPENING_HOURS",
                details={
                    "opening_time": format_time(self.opening_time),
                    "closing_time": format_time(self.closing_time),
                },
            )

    def contains(self, start_time: time, end_time: time) -> bool:
        return start_time >= self.opening_time and end_time <= self.closing_time

    def __str__(self) -> str:
        return f"{format_time(self.opening_time)}-{format_time(self.closing_time)}"


# ============================================================================
# Reservation Slot
# ============================================================================

class ReservationSlot:
    """A date + time range + party size booking attached to one table."""

    def __init__(
        self,
        date: date,
        start_time: time,
        end_time: time,
        reserved_seats: int,
        *,
        party_size: Optional[int] = None,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        customer_email: Optional[str] = None,
        special_requests: Optional[str] = None,
        clock: Optional[Clock] = None,
    ):
        self._validate_date(date, clock)
        _validate_times(start_time, end_time)
        _validate_duration(start_time, end_time)
        self._validate_seats(reserved_seats, "Reserved seats")
        if party_size is not None:
            self._validate_seats(party_size, "Party size")

        self.id: Optional[int] = None
        self.version: Optional[int] = None
        self.date = date
        self.start_time = start_time
        self.end_time = end_time
        self.reserved_seats = reserved_seats
        self.party_size = party_size if party_size is not None else reserved_seats
        self.status = ReservationStatus.AVAILABLE
        self.customer_name = customer_name
        self.customer_phone = customer_phone
        self.customer_email = customer_email
        self.special_requests = special_requests
        self.table_id: Optional[int] = None
        self.table_number: Optional[int] = None

    @classmethod
    def restore(
        cls,
        *,
        id: Optional[int],
        date: date,
        start_time: time,
        end_time: time,
        reserved_seats: int,
        party_size: Optional[int] = None,
        status: ReservationStatus = ReservationStatus.AVAILABLE,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        customer_email: Optional[str] = None,
        special_requests: Optional[str] = None,
        version: Optional[int] = None,
    ) -> "ReservationSlot":
        """
        Rehydrate a stored slot.

        Construction-time checks (date not in the past, duration bounds) are
        not re-run, so slots from past days load unchanged.
        """
        slot = cls.__new__(cls)
        slot.id = id
        slot.version = version
        slot.date = date
        slot.start_time = start_time
        slot.end_time = end_time
        slot.reserved_seats = reserved_seats
        slot.party_size = party_size if party_size is not None else reserved_seats
        slot.status = ReservationStatus(status)
        slot.customer_name = customer_name
        slot.customer_phone = customer_phone
        slot.customer_email = customer_email
        slot.special_requests = special_requests
        slot.table_id = None
        slot.table_number = None
        return slot

    # Lifecycle

    def confirm(self) -> None:
        """AVAILABLE -> CONFIRMED."""
        if not self.status.allows_confirmation:
            raise StateTransitionError(
                "Cannot confirm a slot that is not available",
                code="INVALID_TRANSITION",
                details={"from": self.status.value, "to": ReservationStatus.CONFIRMED.value},
            )
        self.status = ReservationStatus.CONFIRMED

    def cancel(self) -> None:
        """CONFIRMED -> CANCELLED."""
        if not self.status.allows_cancellation:
            if self.status is ReservationStatus.AVAILABLE:
                message = "Cannot cancel a slot that is not confirmed"
            elif self.status is ReservationStatus.COMPLETED:
                message = "Cannot cancel a completed slot"
            else:
                message = "Cannot cancel a cancelled slot"
            raise StateTransitionError(
                message,
                code="INVALID_TRANSITION",
                details={"from": self.status.value, "to": ReservationStatus.CANCELLED.value},
            )
        self.status = ReservationStatus.CANCELLED

    def complete(self) -> None:
        """CONFIRMED -> COMPLETED (service finished)."""
        details = {"from": self.status.value, "to": ReservationStatus.COMPLETED.value}
        if self.status is ReservationStatus.CANCELLED:
            raise StateTransitionError("Cannot complete a cancelled slot", code="INVALID_TRANSITION", details=details)
        if self.status is ReservationStatus.AVAILABLE:
            raise StateTransitionError("Cannot complete an unconfirmed slot", code="INVALID_TRANSITION", details=details)
        if self.status is ReservationStatus.COMPLETED:
            raise StateTransitionError("Cannot complete a completed slot", code="INVALID_TRANSITION", details=details)
        self.status = ReservationStatus.COMPLETED

    # Queries

    @property
    def time_range(self) -> Tuple[time, time]:
        return self.start_time, self.end_time

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start_time, self.end_time)

    def overlaps_with(self, other: Optional["ReservationSlot"]) -> bool:
        if other is None:
            return False
        return self.overlaps_with_range(other.date, other.start_time, other.end_time)

    def overlaps_with_range(self, other_date: date, other_start: time, other_end: time) -> bool:
        return ranges_overlap(self.date, self.start_time, self.end_time, other_date, other_start, other_end)

    def contains_time(self, day: date, t: time) -> bool:
        """True if the slot is on ``day`` and ``start <= t < end``."""
        return self.date == day and self.start_time <= t < self.end_time

    def is_within_opening_hours(self, hours: OpeningHours) -> bool:
        return hours.contains(self.start_time, self.end_time)

    # Validation

    @staticmethod
    def _validate_date(day: Optional[date], clock: Optional[Clock]) -> None:
        if day is None:
            raise ValidationError("Date cannot be null", code="DATE_REQUIRED")
        if day < get_clock(clock).today():
            raise ValidationError(
                "Cannot create time slot for past dates",
                code="PAST_DATE",
                details={"date": day.isoformat()},
            )

    @staticmethod
    def _validate_seats(value: Optional[int], label: str) -> None:
        if value is None or value <= 0:
            raise ValidationError(f"{label} must be positive", code="NON_POSITIVE_SEATS")

    # Equality

    def _business_key(self) -> Tuple[date, time, time]:
        return self.date, self.start_time, self.end_time

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ReservationSlot):
            return NotImplemented
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return self._business_key() == other._business_key()

    def __hash__(self) -> int:
        if self.id is not None:
            return hash(self.id)
        return hash(self._business_key())

    def __repr__(self) -> str:
        return (
            f"<ReservationSlot(id={self.id}, date={self.date}, "
            f"start_time={self.start_time}, end_time={self.end_time}, "
            f"reserved_seats={self.reserved_seats}, status='{self.status.value}', "
            f"duration_minutes={self.duration_minutes})>"
        )


# ============================================================================
# Table
# ============================================================================

class Table:
    """A seating resource owning its reservation slots."""

    MIN_SEATS = 1
    MAX_SEATS = 8

    def __init__(
        self,
        seats: int,
        location: TableLocation,
        *,
        table_number: Optional[int] = None,
        available: bool = True,
    ):
        self._validate_seats(seats)
        self._validate_location(location)

        self.id: Optional[int] = None
        self.version: Optional[int] = None
        self.table_number = table_number
        self.seats = seats
        self.location = TableLocation(location)
        self.available = available
        self.restaurant_id: Optional[int] = None
        # Hours of the owning restaurant; None while the table is detached.
        self.opening_hours: Optional[OpeningHours] = None
        self._slots: List[ReservationSlot] = []

    # Availability flag

    def make_available(self) -> None:
        self.available = True

    def make_unavailable(self) -> None:
        self.available = False

    # Slots

    @property
    def time_slots(self) -> Tuple[ReservationSlot, ...]:
        """Read-only snapshot of the owned slots."""
        return tuple(self._slots)

    def __iter__(self) -> Iterator[ReservationSlot]:
        return iter(self.time_slots)

    @property
    def is_attached(self) -> bool:
        return self.opening_hours is not None

    def slot(self, slot_id: int) -> ReservationSlot:
        for existing in self._slots:
            if existing.id == slot_id:
                return existing
        raise TimeSlotNotFoundError(slot_id)

    def is_available_at(self, day: date, start_time: time, end_time: time) -> bool:
        """
        Check whether the table can take a booking for the given range.

        Only AVAILABLE and CONFIRMED slots block; CANCELLED and COMPLETED do not.
        """
        if not self.available:
            return False
        return not any(
            slot.overlaps_with_range(day, start_time, end_time)
            for slot in self._slots
            if slot.status in READ_BLOCKING_STATUSES
        )

    def add_time_slot(self, slot: ReservationSlot) -> None:
        """
        Attach a slot to this table.

        Raises:
            ValidationError: slot is None
            CapacityError: reserved seats exceed the table's seats
            OverlapError: slot overlaps a non-cancelled slot
            OpeningHoursError: slot falls outside the owning restaurant's hours
        """
        if slot is None:
            raise ValidationError("TimeSlot cannot be null", code="SLOT_REQUIRED")

        if self._index_of(slot) is not None:
            return

        self._validate_capacity(slot)
        self._validate_no_overlap(slot)
        if self.opening_hours is not None:
            self._validate_opening_hours(slot)

        self._slots.append(slot)
        slot.table_number = self.table_number
        slot.table_id = self.id

    def remove_time_slot(self, slot: Optional[ReservationSlot]) -> None:
        index = self._index_of(slot) if slot is not None else None
        if index is None:
            return
        removed = self._slots.pop(index)
        removed.table_number = None
        removed.table_id = None

    def _index_of(self, slot: ReservationSlot) -> Optional[int]:
        # Match on identity or on persisted id; a new slot that merely shares
        # a business key with an owned one is a different booking.
        for index, existing in enumerate(self._slots):
            if existing is slot or (existing.id is not None and existing.id == slot.id):
                return index
        return None

    def occupied_seats_at(self, day: date, at: time) -> int:
        """Seats held by AVAILABLE/CONFIRMED slots covering ``at`` on ``day``."""
        return sum(
            slot.reserved_seats
            for slot in self._slots
            if slot.status in READ_BLOCKING_STATUSES and slot.contains_time(day, at)
        )

    # Mutation with validation

    def resize(self, seats: int) -> None:
        self._validate_seats(seats)
        largest = max((slot.reserved_seats for slot in self._slots), default=0)
        if seats < largest:
            raise CapacityError(
                "Table seats cannot drop below seats reserved by existing slots",
                code="CAPACITY_EXCEEDED",
                details={"seats": seats, "reserved_seats": largest},
            )
        self.seats = seats

    def relocate(self, location: TableLocation) -> None:
        self._validate_location(location)
        self.location = TableLocation(location)

    # Parent link, managed by Restaurant

    def _attach(self, restaurant_id: Optional[int], hours: OpeningHours) -> None:
        self.restaurant_id = restaurant_id
        self.opening_hours = hours

    def _detach(self) -> None:
        self.restaurant_id = None
        self.opening_hours = None

    def _restore_slot(self, slot: ReservationSlot) -> None:
        """Append a stored slot without re-running write checks."""
        self._slots.append(slot)
        slot.table_number = self.table_number
        slot.table_id = self.id

    # Validation

    @classmethod
    def _validate_seats(cls, seats: Optional[int]) -> None:
        if seats is None or seats < cls.MIN_SEATS:
            raise ValidationError("Table seats must be positive", code="NON_POSITIVE_SEATS")
        if seats > cls.MAX_SEATS:
            raise ValidationError(
                f"Table seats cannot exceed {cls.MAX_SEATS} seats",
                code="TOO_MANY_SEATS",
                details={"seats": seats},
            )

    @staticmethod
    def _validate_location(location: Optional[TableLocation]) -> None:
        if location is None:
            raise ValidationError("Table location cannot be null", code="LOCATION_REQUIRED")

    def _validate_capacity(self, slot: ReservationSlot) -> None:
        if slot.reserved_seats > self.seats:
            logger.warning(
                f"Rejected slot for table {self.table_number}: "
                f"{slot.reserved_seats} seats requested, {self.seats} available"
            )
            raise CapacityError(
                "Reserved seats cannot exceed table capacity",
                code="CAPACITY_EXCEEDED",
                details={"reserved_seats": slot.reserved_seats, "seats": self.seats},
            )

    def _validate_no_overlap(self, new_slot: ReservationSlot) -> None:
        # Everything except CANCELLED blocks a write, including COMPLETED.
        conflict = next(
            (
                existing for existing in self._slots
                if existing.status in WRITE_BLOCKING_STATUSES and existing.overlaps_with(new_slot)
            ),
            None,
        )
        if conflict is not None:
            logger.warning(f"Rejected overlapping slot for table {self.table_number}: {conflict!r}")
            raise OverlapError(
                "Time slot overlaps with existing reservation",
                code="TIME_SLOT_OVERLAP",
                details={"conflicting_slot_id": conflict.id},
            )

    def _validate_opening_hours(self, slot: ReservationSlot) -> None:
        if not slot.is_within_opening_hours(self.opening_hours):
            raise OpeningHoursError(
                f"Time slot must be within restaurant opening hours ({self.opening_hours})",
                code="OUTSIDE_OPENING_HOURS",
                details={
                    "opening_time": format_time(self.opening_hours.opening_time),
                    "closing_time": format_time(self.opening_hours.closing_time),
                },
            )

    # Equality

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Table):
            return NotImplemented
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return False

    def __hash__(self) -> int:
        if self.id is not None:
            return hash(self.id)
        return id(self)

    def __repr__(self) -> str:
        return (
            f"<Table(id={self.id}, table_number={self.table_number}, seats={self.seats}, "
            f"location='{self.location.value}', available={self.available}, "
            f"time_slots={len(self._slots)})>"
        )


# ============================================================================
# Restaurant (aggregate root)
# ============================================================================

class Restaurant:
    """Aggregate root owning the tables of one restaurant."""

    def __init__(
        self,
        name: str,
        address: str,
        capacity: int,
        phone_number: Optional[str] = None,
        email: Optional[str] = None,
        opening_time: time = DEFAULT_OPENING_TIME,
        closing_time: time = DEFAULT_CLOSING_TIME,
    ):
        self._validate_name(name)
        self._validate_address(address)
        self._validate_email(email)
        self._validate_capacity(capacity)

        self.id: Optional[int] = None
        self.version: Optional[int] = None
        self.name = name.strip()
        self.address = address.strip()
        self.phone_number = phone_number.strip() if phone_number is not None else None
        self.email = email.strip() if email is not None else None
        self.capacity = capacity
        self.active = True
        self._hours = OpeningHours(opening_time, closing_time)
        self._tables: Dict[int, Table] = {}

    # Status

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    # Hours

    @property
    def opening_hours(self) -> OpeningHours:
        return self._hours

    @property
    def opening_time(self) -> time:
        return self._hours.opening_time

    @property
    def closing_time(self) -> time:
        return self._hours.closing_time

    def set_opening_hours(self, opening_time: time, closing_time: time) -> None:
        """Replace the operating window and push it to every owned table."""
        self._hours = OpeningHours(opening_time, closing_time)
        for table in self._tables.values():
            table._attach(self.id, self._hours)

    def is_within_opening_hours(self, start_time: time, end_time: time) -> bool:
        return self._hours.contains(start_time, end_time)

    # Tables

    @property
    def tables(self) -> Tuple[Table, ...]:
        """Read-only snapshot of the owned tables in insertion order."""
        return tuple(self._tables.values())

    def table(self, table_number: int) -> Table:
        try:
            return self._tables[table_number]
        except KeyError:
            raise TableNotFoundError(table_number) from None

    def table_by_id(self, table_id: int) -> Table:
        for table in self._tables.values():
            if table.id == table_id:
                return table
        raise TableNotFoundError(table_id)

    def next_table_number(self) -> int:
        return max(self._tables, default=0) + 1

    def add_table(self, table: Table) -> Table:
        """
        Take ownership of a table, numbering it if needed.

        Adding a table already owned by this restaurant is a no-op.
        """
        if table is None:
            raise ValidationError("Table cannot be null", code="TABLE_REQUIRED")

        if table in self._tables.values():
            return table
        if table.is_attached:
            raise ValidationError("Table already belongs to a restaurant", code="TABLE_ALREADY_ATTACHED")

        if table.table_number is None:
            table.table_number = self.next_table_number()
        elif table.table_number in self._tables:
            raise ValidationError(
                f"Table number {table.table_number} is already in use",
                code="DUPLICATE_TABLE_NUMBER",
            )

        self._tables[table.table_number] = table
        table._attach(self.id, self._hours)
        for slot in table.time_slots:
            slot.table_number = table.table_number
        return table

    def remove_table(self, table: Optional[Table]) -> None:
        if table is None or table not in self._tables.values():
            return
        del self._tables[table.table_number]
        table._detach()

    @property
    def total_seats(self) -> int:
        return sum(table.seats for table in self._tables.values())

    @property
    def total_available_seats(self) -> int:
        return sum(table.seats for table in self._tables.values() if table.available)

    def iter_slots(self) -> Iterator[Tuple[Table, ReservationSlot]]:
        for table in self._tables.values():
            for slot in table.time_slots:
                yield table, slot

    def find_slot(self, slot_id: int) -> Tuple[Table, ReservationSlot]:
        for table, slot in self.iter_slots():
            if slot.id == slot_id:
                return table, slot
        raise TimeSlotNotFoundError(slot_id)

    # Updates

    def update_details(
        self,
        name: str,
        address: str,
        phone_number: Optional[str],
        email: Optional[str],
        capacity: int,
    ) -> None:
        """Validate every field first, then apply them together."""
        self._validate_name(name)
        self._validate_address(address)
        self._validate_email(email)
        self._validate_capacity(capacity)
        self.name = name.strip()
        self.address = address.strip()
        self.phone_number = phone_number.strip() if phone_number is not None else None
        self.email = email.strip() if email is not None else None
        self.capacity = capacity

    def rename(self, name: str) -> None:
        self._validate_name(name)
        self.name = name.strip()

    def _set_id(self, restaurant_id: int) -> None:
        self.id = restaurant_id
        for table in self._tables.values():
            table.restaurant_id = restaurant_id

    # Validation

    @staticmethod
    def _validate_name(name: Optional[str]) -> None:
        if name is None or not name.strip():
            raise ValidationError("Restaurant name cannot be null or empty", code="NAME_REQUIRED")

    @staticmethod
    def _validate_address(address: Optional[str]) -> None:
        if address is None or not address.strip():
            raise ValidationError("Restaurant address cannot be null or empty", code="ADDRESS_REQUIRED")

    @staticmethod
    def _validate_email(email: Optional[str]) -> None:
        if email is not None and email.strip() and not EMAIL_PATTERN.match(email.strip()):
            raise ValidationError("Invalid email format", code="INVALID_EMAIL")

    @staticmethod
    def _validate_capacity(capacity: Optional[int]) -> None:
        if capacity is None or capacity <= 0:
            raise ValidationError("Restaurant capacity must be positive", code="NON_POSITIVE_CAPACITY")

    # Equality

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Restaurant):
            return NotImplemented
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return (self.name, self.address) == (other.name, other.address)

    def __hash__(self) -> int:
        if self.id is not None:
            return hash(self.id)
        return hash((self.name, self.address))

    def __repr__(self) -> str:
        return (
            f"<Restaurant(id={self.id}, name='{self.name}', address='{self.address}', "
            f"capacity={self.capacity}, active={self.active}, tables={len(self._tables)})>"
        )
