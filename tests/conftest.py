"""Pytest configuration and fixtures for restaurant availability tests."""
import pytest
from datetime import date, time, timedelta
from sqlalchemy.orm import sessionmaker

from core.utils_datetime import FixedClock
from db.repository import SqlAlchemyRestaurantRepository
from db.session import create_test_engine, init_db
from domain.enums import TableLocation
from domain.models import ReservationSlot, Restaurant, Table
from services.events import InMemoryEventPublisher
from services.reservation_service import (
    AvailabilityManagementService,
    RestaurantManagementService,
    TableManagementService,
)


TODAY = date(2030, 1, 15)
TOMORROW = TODAY + timedelta(days=1)
YESTERDAY = TODAY - timedelta(days=1)


@pytest.fixture(scope="function")
def clock():
    """Clock frozen at noon on TODAY."""
    return FixedClock.on(TODAY)


@pytest.fixture(scope="function")
def tomorrow():
    return TOMORROW


@pytest.fixture(scope="function")
def make_restaurant():
    """Factory fixture to build a restaurant with optional table sizes."""
    def _create(*seat_counts, location=TableLocation.INDOOR, **kwargs):
        data = {
            "name": "Chez Test",
            "address": "1 Rue de Test, Paris",
            "capacity": 40,
        }
        data.update(kwargs)
        restaurant = Restaurant(**data)
        for seats in seat_counts:
            restaurant.add_table(Table(seats, location))
        return restaurant
    return _create


@pytest.fixture(scope="function")
def make_slot(clock):
    """Factory fixture to build a slot for tomorrow evening."""
    def _create(day=TOMORROW, start=time(19, 0), end=time(21, 0), seats=4, **kwargs):
        return ReservationSlot(day, start, end, seats, clock=clock, **kwargs)
    return _create


@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_test_engine()
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=db_engine, expire_on_commit=False)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def repository(db_session):
    return SqlAlchemyRestaurantRepository(db_session)


@pytest.fixture(scope="function")
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture(scope="function")
def restaurant_service(repository, publisher, clock):
    return RestaurantManagementService(repository, publisher, clock=clock)


@pytest.fixture(scope="function")
def table_service(repository, publisher, clock):
    return TableManagementService(repository, publisher, clock=clock)


@pytest.fixture(scope="function")
def availability_service(repository, publisher, clock):
    return AvailabilityManagementService(repository, publisher, clock=clock)


@pytest.fixture(scope="function")
def stored_restaurant(repository, make_restaurant, publisher):
    """A persisted restaurant with 2-, 4- and 6-seat tables."""
    restaurant = repository.save(make_restaurant(2, 4, 6))
    publisher.clear()
    return restaurant
