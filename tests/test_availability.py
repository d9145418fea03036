"""Unit tests for the availability engine."""
import logging
import pytest
from datetime import time

from conftest import TOMORROW, YESTERDAY
from domain.enums import ReservationStatus, TableLocation
from domain.errors import ValidationError
from domain.models import OpeningHours, Table, TimeRange
from services import availability


EVENING = (time(19, 0), time(21, 0))


@pytest.mark.unit
class TestInputValidation:
    """Test the base validation shared by availability queries."""

    def test_restaurant_required(self, clock):
        """Test a missing restaurant."""
        with pytest.raises(ValidationError, match="Restaurant cannot be null"):
            availability.find_available_tables(None, 2, TOMORROW, *EVENING, clock=clock)

    @pytest.mark.parametrize("party_size", [0, -1])
    def test_party_size_positive(self, make_restaurant, clock, party_size):
        """Test non-positive party sizes."""
        with pytest.raises(ValidationError, match="Party size must be positive"):
            availability.find_available_tables(make_restaurant(4), party_size, TOMORROW, *EVENING, clock=clock)

    def test_date_required(self, make_restaurant, clock):
        """Test a missing date."""
        with pytest.raises(ValidationError, match="Date cannot be null"):
            availability.find_available_tables(make_restaurant(4), 2, None, *EVENING, clock=clock)

    def test_past_date(self, make_restaurant, clock):
        """Test a date before today."""
        with pytest.raises(ValidationError, match="Cannot book for past dates"):
            availability.find_available_tables(make_restaurant(4), 2, YESTERDAY, *EVENING, clock=clock)

    def test_times_required(self, make_restaurant, clock):
        """Test missing times."""
        with pytest.raises(ValidationError, match="Start and end times cannot be null"):
            availability.find_available_tables(make_restaurant(4), 2, TOMORROW, None, time(21, 0), clock=clock)

    def test_end_after_start(self, make_restaurant, clock):
        """Test reversed times."""
        with pytest.raises(ValidationError, match="End time must be after start time"):
            availability.find_available_tables(make_restaurant(4), 2, TOMORROW, time(21, 0), time(19, 0), clock=clock)


@pytest.mark.unit
class TestFindTables:
    """Test candidate search and best-fit selection."""

    def test_candidates_in_insertion_order(self, make_restaurant, clock):
        """Test filtering by seats keeps restaurant order."""
        restaurant = make_restaurant(6, 2, 4)
        tables = availability.find_available_tables(restaurant, 3, TOMORROW, *EVENING, clock=clock)
        assert [table.seats for table in tables] == [6, 4]

    def test_unavailable_and_booked_tables_excluded(self, make_restaurant, make_slot, clock):
        """Test flag and bookings both remove candidates."""
        restaurant = make_restaurant(4, 4, 4)
        restaurant.table(1).make_unavailable()
        restaurant.table(2).add_time_slot(make_slot(seats=2))

        tables = availability.find_available_tables(restaurant, 2, TOMORROW, *EVENING, clock=clock)
        assert [table.table_number for table in tables] == [3]

    def test_best_table_exact_fit(self, make_restaurant, clock):
        """Test tables of 2, 4 and 6 seats for a party of 4."""
        restaurant = make_restaurant(2, 4, 6)
        best = availability.find_best_table(restaurant, 4, TOMORROW, *EVENING, clock=clock)
        assert best.seats == 4

    def test_best_table_smallest_that_fits(self, make_restaurant, clock):
        """Test tables of 2 and 6 seats for a party of 4."""
        restaurant = make_restaurant(2, 6)
        best = availability.find_best_table(restaurant, 4, TOMORROW, *EVENING, clock=clock)
        assert best.seats == 6

    def test_best_table_tie_goes_to_first(self, make_restaurant, clock):
        """Test equal sizes resolve to insertion order."""
        restaurant = make_restaurant(6, 4, 4)
        best = availability.find_best_table(restaurant, 3, TOMORROW, *EVENING, clock=clock)
        assert best.table_number == 2

    def test_best_table_none(self, make_restaurant, clock):
        """Test no candidate."""
        restaurant = make_restaurant(2, 2)
        assert availability.find_best_table(restaurant, 5, TOMORROW, *EVENING, clock=clock) is None

    def test_best_fit_is_minimal(self, make_restaurant, make_slot, clock):
        """Test no available candidate has fewer seats than the chosen table."""
        restaurant = make_restaurant(8, 3, 5, 4, 6)
        restaurant.table(4).add_time_slot(make_slot(seats=2))

        best = availability.find_best_table(restaurant, 3, TOMORROW, *EVENING, clock=clock)
        candidates = availability.find_available_tables(restaurant, 3, TOMORROW, *EVENING, clock=clock)
        assert best.seats == 3
        assert all(best.seats <= table.seats for table in candidates)

    def test_can_accommodate_on_date(self, make_restaurant):
        """Test the capacity-only check ignores bookings but honours the flag."""
        restaurant = make_restaurant(2, 6)
        assert availability.can_accommodate_on_date(restaurant, 6, TOMORROW)
        restaurant.table(2).make_unavailable()
        assert not availability.can_accommodate_on_date(restaurant, 6, TOMORROW)


@pytest.mark.unit
class TestRates:
    """Test availability and utilization rates."""

    def test_availability_rate(self, make_restaurant):
        """Test available table share."""
        restaurant = make_restaurant(2, 4, 6)
        restaurant.table(1).make_unavailable()
        assert availability.calculate_availability_rate(restaurant, TOMORROW) == pytest.approx(2 / 3)

    def test_availability_rate_ignores_date(self, make_restaurant, make_slot):
        """Test bookings on the date do not change the rate."""
        restaurant = make_restaurant(4)
        restaurant.table(1).add_time_slot(make_slot())
        assert availability.calculate_availability_rate(restaurant, TOMORROW) == 1.0
        assert availability.calculate_availability_rate(restaurant) == 1.0

    def test_rates_with_no_tables(self, make_restaurant):
        """Test zero tables and zero seats."""
        restaurant = make_restaurant()
        assert availability.calculate_availability_rate(restaurant, TOMORROW) == 0.0
        assert availability.calculate_utilization_rate(restaurant, TOMORROW, time(19, 0)) == 0.0

    def test_utilization_rate(self, make_restaurant, make_slot):
        """Test occupied seat share at an instant."""
        restaurant = make_restaurant(2, 4, 6)
        restaurant.table(2).add_time_slot(make_slot(seats=4))

        assert availability.calculate_utilization_rate(restaurant, TOMORROW, time(19, 30)) == pytest.approx(4 / 12)
        assert availability.calculate_utilization_rate(restaurant, TOMORROW, time(21, 0)) == 0.0

    def test_utilization_ignores_unavailable_tables(self, make_restaurant, make_slot):
        """Test unavailable tables leave both numerator and denominator."""
        restaurant = make_restaurant(2, 4, 6)
        restaurant.table(2).add_time_slot(make_slot(seats=4))
        restaurant.table(2).make_unavailable()

        assert availability.calculate_utilization_rate(restaurant, TOMORROW, time(19, 30)) == 0.0

    def test_utilization_ignores_cancelled(self, make_restaurant, make_slot):
        """Test cancelled slots do not occupy seats."""
        restaurant = make_restaurant(4)
        slot = make_slot(seats=4)
        restaurant.table(1).add_time_slot(slot)
        slot.confirm()
        slot.cancel()
        assert slot.status is ReservationStatus.CANCELLED
        assert availability.calculate_utilization_rate(restaurant, TOMORROW, time(19, 30)) == 0.0

    def test_rates_are_bounded(self, make_restaurant, make_slot):
        """Test rates stay within [0, 1]."""
        restaurant = make_restaurant(2, 2)
        restaurant.table(1).add_time_slot(make_slot(seats=2))
        restaurant.table(2).add_time_slot(make_slot(seats=2))

        utilization = availability.calculate_utilization_rate(restaurant, TOMORROW, time(20, 0))
        rate = availability.calculate_availability_rate(restaurant, TOMORROW)
        assert 0.0 <= utilization <= 1.0
        assert utilization == 1.0
        assert 0.0 <= rate <= 1.0

    def test_capacity_stats(self, make_restaurant):
        """Test the capacity summary."""
        restaurant = make_restaurant(2, 4, 6, capacity=50)
        restaurant.table(3).make_unavailable()

        stats = availability.get_capacity_stats(restaurant)
        assert stats.total_seats == 50
        assert stats.available_seats == 6
        assert stats.total_tables == 3
        assert stats.available_tables == 2
        assert stats.availability_rate == pytest.approx(2 / 3)


@pytest.mark.unit
class TestAvailableTimeRanges:
    """Test free range generation over opening hours."""

    def test_ranges_skip_bookings(self, make_slot):
        """Test hourly ranges around a booking."""
        table = Table(4, TableLocation.INDOOR)
        table.add_time_slot(make_slot())

        ranges = availability.get_available_time_ranges(
            table, TOMORROW, 60, opening_hours=OpeningHours(time(18, 0), time(22, 0))
        )
        assert ranges == [TimeRange(time(18, 0), time(19, 0)), TimeRange(time(21, 0), time(22, 0))]

    def test_uses_restaurant_hours(self, make_restaurant):
        """Test attached tables use their restaurant's hours."""
        restaurant = make_restaurant(4, opening_time=time(18, 0), closing_time=time(20, 0))
        ranges = availability.get_available_time_ranges(restaurant.table(1), TOMORROW, 30)
        assert [str(r) for r in ranges] == ["18:00-18:30", "18:30-19:00", "19:00-19:30", "19:30-20:00"]

    def test_default_hours_stop_before_midnight(self):
        """Test the last range ends before closing at 23:59."""
        ranges = availability.get_available_time_ranges(Table(4, TableLocation.INDOOR), TOMORROW, 30)
        assert ranges[0] == TimeRange(time(11, 0), time(11, 30))
        assert ranges[-1] == TimeRange(time(23, 0), time(23, 30))
        assert len(ranges) == 25

    @pytest.mark.parametrize("interval", [15, 300])
    def test_interval_bounds(self, interval):
        """Test interval limits."""
        with pytest.raises(ValidationError, match="Interval must be between 30 and 240 minutes"):
            availability.get_available_time_ranges(Table(4, TableLocation.INDOOR), TOMORROW, interval)


@pytest.mark.unit
class TestReservationConstraints:
    """Test reservation rule checks."""

    def test_private_room_minimum_party(self, make_restaurant, clock):
        """Test party of 2 rejected and party of 4 accepted in a private room."""
        restaurant = make_restaurant(6, location=TableLocation.PRIVATE_ROOM)
        table = restaurant.table(1)

        with pytest.raises(ValidationError, match="Private room table requires minimum 4 guests") as exc_info:
            availability.validate_reservation_constraints(restaurant, table, 2, TOMORROW, *EVENING, clock=clock)
        assert exc_info.value.code == "MINIMUM_PARTY_REQUIRED"

        availability.validate_reservation_constraints(restaurant, table, 4, TOMORROW, *EVENING, clock=clock)

    def test_inactive_restaurant(self, make_restaurant, clock):
        """Test bookings at an inactive restaurant."""
        restaurant = make_restaurant(4)
        restaurant.deactivate()
        with pytest.raises(ValidationError) as exc_info:
            availability.validate_reservation_constraints(
                restaurant, restaurant.table(1), 2, TOMORROW, *EVENING, clock=clock
            )
        assert exc_info.value.code == "RESTAURANT_INACTIVE"

    def test_unavailable_table(self, make_restaurant, clock):
        """Test bookings on a table flagged unavailable."""
        restaurant = make_restaurant(4)
        restaurant.table(1).make_unavailable()
        with pytest.raises(ValidationError) as exc_info:
            availability.validate_reservation_constraints(
                restaurant, restaurant.table(1), 2, TOMORROW, *EVENING, clock=clock
            )
        assert exc_info.value.code == "TABLE_UNAVAILABLE"

    def test_insufficient_capacity(self, make_restaurant, clock):
        """Test a party larger than the table."""
        restaurant = make_restaurant(2)
        with pytest.raises(ValidationError) as exc_info:
            availability.validate_reservation_constraints(
                restaurant, restaurant.table(1), 4, TOMORROW, *EVENING, clock=clock
            )
        assert exc_info.value.code == "INSUFFICIENT_CAPACITY"

    def test_time_conflict(self, make_restaurant, make_slot, clock):
        """Test an overlapping active booking."""
        restaurant = make_restaurant(4)
        restaurant.table(1).add_time_slot(make_slot(seats=2))
        with pytest.raises(ValidationError) as exc_info:
            availability.validate_reservation_constraints(
                restaurant, restaurant.table(1), 2, TOMORROW, time(20, 0), time(22, 0), clock=clock
            )
        assert exc_info.value.code == "TIME_CONFLICT"

    def test_table_required(self, make_restaurant, clock):
        """Test a missing table."""
        with pytest.raises(ValidationError, match="Table cannot be null"):
            availability.validate_reservation_constraints(make_restaurant(4), None, 2, TOMORROW, *EVENING, clock=clock)

    def test_terrace_only_warns(self, make_restaurant, clock, caplog):
        """Test weather-dependent tables log a warning and pass."""
        restaurant = make_restaurant(4, location=TableLocation.TERRACE)

        with caplog.at_level(logging.WARNING, logger="services.availability"):
            availability.validate_reservation_constraints(
                restaurant, restaurant.table(1), 2, TOMORROW, *EVENING, clock=clock
            )
        assert "weather dependent" in caplog.text
