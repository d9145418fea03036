"""
Availability engine.
Stateless queries and validation across a restaurant's tables and slots:
candidate search, best-fit selection, rate calculations and constraint checks.
"""

import logging
from datetime import date, time
from typing import List, Optional

from core.config import settings
from core.utils_datetime import Clock, add_minutes, get_clock
from domain.errors import ValidationError
from domain.models import OpeningHours, Restaurant, Table, TimeRange
from domain.schemas import CapacityStats


logger = logging.getLogger(__name__)


# ============================================================================
# Input Validation
# ============================================================================

def _validate_restaurant(restaurant: Optional[Restaurant]) -> None:
    if restaurant is None:
        raise ValidationError("Restaurant cannot be null", code="RESTAURANT_REQUIRED")


def _validate_table(table: Optional[Table]) -> None:
    if table is None:
        raise ValidationError("Table cannot be null", code="TABLE_REQUIRED")


def validate_inputs(
    restaurant: Optional[Restaurant],
    party_size: int,
    day: Optional[date],
    start_time: Optional[time],
    end_time: Optional[time],
    *,
    clock: Optional[Clock] = None,
) -> None:
    """
    Base validation shared by every availability query.

    Raises:
        ValidationError: on a missing restaurant, non-positive party size,
            missing or past date, missing times, or end not after start
    """
    _validate_restaurant(restaurant)

    if party_size is None or party_size <= 0:
        raise ValidationError("Party size must be positive", code="NON_POSITIVE_PARTY_SIZE")

    if day is None:
        raise ValidationError("Date cannot be null", code="DATE_REQUIRED")

    if day < get_clock(clock).today():
        raise ValidationError("Cannot book for past dates", code="PAST_DATE", details={"date": day.isoformat()})

    if start_time is None or end_time is None:
        raise ValidationError("Start and end times cannot be null", code="TIME_REQUIRED")

    if end_time <= start_time:
        raise ValidationError("End time must be after start time", code="END_BEFORE_START")


# ============================================================================
# Table Search
# ============================================================================

def find_available_tables(
    restaurant: Restaurant,
    party_size: int,
    day: date,
    start_time: time,
    end_time: time,
    *,
    clock: Optional[Clock] = None,
) -> List[Table]:
    """
    Find tables that can seat the party for the whole range.

    Returns:
        Matching tables in the restaurant's insertion order
    """
    validate_inputs(restaurant, party_size, day, start_time, end_time, clock=clock)

    return [
        table for table in restaurant.tables
        if table.available
        and table.seats >= party_size
        and table.is_available_at(day, start_time, end_time)
    ]


def find_best_table(
    restaurant: Restaurant,
    party_size: int,
    day: date,
    start_time: time,
    end_time: time,
    *,
    clock: Optional[Clock] = None,
) -> Optional[Table]:
    """
    Pick the smallest table that still fits the party.

    Ties go to the first table in insertion order. Returns None when no
    table qualifies.
    """
    candidates = find_available_tables(restaurant, party_size, day, start_time, end_time, clock=clock)
    if not candidates:
        logger.info(
            f"No table for party of {party_size} at restaurant {restaurant.id} "
            f"on {day} {start_time}-{end_time}"
        )
        return None
    # min() keeps the first of equal keys
    return min(candidates, key=lambda table: table.seats)


def can_accommodate_on_date(restaurant: Restaurant, party_size: int, day: date) -> bool:
    """Capacity-only check: does any available table have enough seats?"""
    _validate_restaurant(restaurant)
    return any(table.available and table.seats >= party_size for table in restaurant.tables)


def get_available_time_ranges(
    table: Table,
    day: date,
    interval_minutes: int = settings.slot_interval_minutes,
    opening_hours: Optional[OpeningHours] = None,
) -> List[TimeRange]:
    """
    List the fixed-length ranges during opening hours when the table is free.

    Ranges step by ``interval_minutes`` from opening time and must end at
    or before closing time. Without explicit hours, the table's restaurant
    hours are used, then the configured defaults.
    """
    _validate_table(table)
    if not 30 <= interval_minutes <= 240:
        raise ValidationError("Interval must be between 30 and 240 minutes", code="INVALID_INTERVAL")

    hours = opening_hours or table.opening_hours or OpeningHours(*settings.default_opening_hours)

    ranges: List[TimeRange] = []
    current = hours.opening_time
    while True:
        slot_end = add_minutes(current, interval_minutes)
        if slot_end is None or slot_end > hours.closing_time:
            break
        if table.is_available_at(day, current, slot_end):
            ranges.append(TimeRange(current, slot_end))
        current = slot_end
    return ranges


# ============================================================================
# Rates & Statistics
# ============================================================================

def calculate_availability_rate(restaurant: Restaurant, day: Optional[date] = None) -> float:
    """
    Fraction of tables flagged available.

    ``day`` is accepted for interface stability but does not affect the
    result: the rate reflects table flags, not bookings.
    """
    _validate_restaurant(restaurant)

    tables = restaurant.tables
    if not tables:
        return 0.0
    available = sum(1 for table in tables if table.available)
    return available / len(tables)


def calculate_utilization_rate(restaurant: Restaurant, day: date, at: time) -> float:
    """
    Fraction of available-table seats held by AVAILABLE/CONFIRMED slots at ``at``.

    A slot covers ``at`` when ``start <= at < end``.
    """
    _validate_restaurant(restaurant)

    total_seats = restaurant.total_available_seats
    if total_seats == 0:
        return 0.0

    occupied = sum(
        table.occupied_seats_at(day, at)
        for table in restaurant.tables
        if table.available
    )
    return min(occupied / total_seats, 1.0)


def get_capacity_stats(restaurant: Restaurant) -> CapacityStats:
    _validate_restaurant(restaurant)
    tables = restaurant.tables
    available_tables = sum(1 for table in tables if table.available)
    return CapacityStats(
        restaurant_id=restaurant.id,
        total_seats=restaurant.capacity,
        available_seats=restaurant.total_available_seats,
        total_tables=len(tables),
        available_tables=available_tables,
        availability_rate=calculate_availability_rate(restaurant),
    )


# ============================================================================
# Reservation Constraints
# ============================================================================

def validate_reservation_constraints(
    restaurant: Restaurant,
    table: Table,
    party_size: int,
    day: date,
    start_time: time,
    end_time: time,
    *,
    clock: Optional[Clock] = None,
) -> None:
    """
    Check that booking ``table`` for the party and range is allowed.

    Raises:
        ValidationError: with a distinct ``code`` per failed rule
    """
    validate_inputs(restaurant, party_size, day, start_time, end_time, clock=clock)
    _validate_table(table)

    if not restaurant.active:
        raise ValidationError("Restaurant is not active", code="RESTAURANT_INACTIVE")

    if not table.available:
        raise ValidationError("Table is not available", code="TABLE_UNAVAILABLE")

    if table.seats < party_size:
        raise ValidationError(
            "Table capacity insufficient for party size",
            code="INSUFFICIENT_CAPACITY",
            details={"seats": table.seats, "party_size": party_size},
        )

    if not table.is_available_at(day, start_time, end_time):
        raise ValidationError("Table is not available at requested time", code="TIME_CONFLICT")

    location = table.location
    if location.requires_minimum_party and party_size < location.minimum_party_size:
        raise ValidationError(
            f"{location.description} requires minimum {location.minimum_party_size} guests",
            code="MINIMUM_PARTY_REQUIRED",
            details={"minimum_party_size": location.minimum_party_size, "party_size": party_size},
        )

    if location.is_weather_dependent:
        logger.warning(
            f"Table {table.table_number} at {location.value} is weather dependent "
            f"(restaurant {restaurant.id}, {day} {start_time}-{end_time})"
        )
