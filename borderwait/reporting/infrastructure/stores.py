import threading
from typing import Dict, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..domain import KeyValueStore
from ...common.database.models import DeviceStateDB
from ...common.exceptions import RepositoryError

class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str):
        with self._lock:
            self._data[key] = value

class SqlAlchemyKeyValueStore(KeyValueStore):
    """
    Key-value pairs in the `device_state` table.
    """
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as session:
            row = session.get(DeviceStateDB, key)
            return row.value if row else None

    def set(self, key: str, value: str):
        with self.session_factory() as session:
            try:
                session.merge(DeviceStateDB(key=key, value=value))
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise RepositoryError(f"Could not store {key}: {e}") from e
