"""Database layer for the restaurant availability engine."""

from .base import Base, TimestampMixin
from .models_sqlalchemy import RestaurantRow, TableRow, TimeSlotRow
from .repository import SqlAlchemyRestaurantRepository
from .session import (
    engine,
    SessionLocal,
    create_db_engine,
    create_test_engine,
    get_session_context,
    init_db,
    drop_db,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Models
    "RestaurantRow",
    "TableRow",
    "TimeSlotRow",
    # Repository
    "SqlAlchemyRestaurantRepository",
    # Session
    "engine",
    "SessionLocal",
    "create_db_engine",
    "create_test_engine",
    "get_session_context",
    "init_db",
    "drop_db",
]
