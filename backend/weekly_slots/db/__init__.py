from weekly_slots.db.base import Base
from weekly_slots.db.session import SESSION_OPTIONS, get_db, engine, SessionLocal, transaction
from weekly_slots.db.tables import ALL_TABLE_NAMES

__all__ = ["SESSION_OPTIONS", "get_db", "engine", "SessionLocal", "transaction", "Base", "ALL_TABLE_NAMES"]
