from .database import DATABASE_URL, Base, init_db, make_engine, make_session_factory
from .models import VoteDB, DeviceStateDB

__all__ = [
    "DATABASE_URL", "Base", "init_db",
    "make_engine", "make_session_factory",
    "VoteDB", "DeviceStateDB"
]
