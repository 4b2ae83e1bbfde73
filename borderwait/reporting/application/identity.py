"""
Anonymous device identity: a random id created once and kept in a KeyValueStore.
"""
import secrets

from ..domain import KeyValueStore

DEVICE_KEY = "borderwait_device_id"
DEVICE_ID_BYTES = 16

def generate_device_id() -> str:
    return secrets.token_hex(DEVICE_ID_BYTES)

def get_or_create_device_id(store: KeyValueStore) -> str:
    existing = store.get(DEVICE_KEY)
    if existing:
        return existing
    device_id = generate_device_id()
    store.set(DEVICE_KEY, device_id)
    return device_id
