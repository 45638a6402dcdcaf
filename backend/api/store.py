from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, TypeVar
from uuid import uuid4

from django.conf import settings

STORE_LOCK = threading.Lock()
T = TypeVar("T")

# Collections seeded on first load, keyed by collection name.
_SEEDERS: Dict[str, Callable[[], Dict[str, object]]] = {}


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid4())


def register_seed(collection: str, seeder: Callable[[], Dict[str, object]]) -> None:
    _SEEDERS[collection] = seeder


def _store_enabled() -> bool:
    return bool(getattr(settings, "ORDER_STORE_ENABLED", False))


def store_enabled_or_raise() -> None:
    if not _store_enabled():
        raise RuntimeError("order_store_disabled")


def _store_path() -> Path:
    return Path(settings.ORDER_STORE_PATH)


def _load_store() -> Dict[str, Dict[str, object]]:
    path = _store_path()
    if path.exists():
        with path.open("r", encoding="utf-8") as handle:
            store = json.load(handle)
    else:
        store = {}
    for collection, seeder in _SEEDERS.items():
        if collection not in store:
            store[collection] = seeder()
    return store


def _save_store(store: Dict[str, Dict[str, object]]) -> None:
    path = _store_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(store, handle, indent=2, sort_keys=True)


def get_record(collection: str, key: str) -> Dict[str, object] | None:
    store_enabled_or_raise()
    with STORE_LOCK:
        store = _load_store()
        record = store.get(collection, {}).get(str(key))
        return dict(record) if isinstance(record, dict) else record


def list_records(collection: str) -> List[Dict[str, object]]:
    store_enabled_or_raise()
    with STORE_LOCK:
        store = _load_store()
        return list(store.get(collection, {}).values())


def put_record(collection: str, key: str, record: Dict[str, object]) -> Dict[str, object]:
    store_enabled_or_raise()
    with STORE_LOCK:
        store = _load_store()
        store.setdefault(collection, {})[str(key)] = record
        _save_store(store)
    return record


def insert_record(
    collection: str,
    build: Callable[[List[Dict[str, object]]], Dict[str, object]],
    key_field: str = "id",
) -> Dict[str, object]:
    """
    Build and store a record while holding the lock, so sequence numbers
    derived from existing records cannot collide.
    """
    store_enabled_or_raise()
    with STORE_LOCK:
        store = _load_store()
        records = store.setdefault(collection, {})
        record = build(list(records.values()))
        records[str(record[key_field])] = record
        _save_store(store)
    return record


def update_record(
    collection: str,
    key: str,
    mutate: Callable[[Dict[str, object]], Dict[str, object]],
) -> Dict[str, object] | None:
    """
    Read, change and write one record under the lock. Returns None when the
    record does not exist. An exception from ``mutate`` leaves the store
    untouched.
    """
    store_enabled_or_raise()
    with STORE_LOCK:
        store = _load_store()
        records = store.setdefault(collection, {})
        current = records.get(str(key))
        if current is None:
            return None
        record = mutate(dict(current))
        records[str(key)] = record
        _save_store(store)
    return record


def transact(mutate: Callable[[Dict[str, Dict[str, Dict[str, object]]]], T]) -> T:
    """
    Apply ``mutate`` to every collection at once and write the result in a
    single save. ``mutate`` must not call other store functions.
    """
    store_enabled_or_raise()
    with STORE_LOCK:
        store = _load_store()
        result = mutate(store)
        _save_store(store)
    return result


def delete_record(collection: str, key: str) -> bool:
    store_enabled_or_raise()
    with STORE_LOCK:
        store = _load_store()
        records = store.get(collection, {})
        if str(key) not in records:
            return False
        del records[str(key)]
        _save_store(store)
    return True


def reset_store() -> None:
    with STORE_LOCK:
        path = _store_path()
        if path.exists():
            path.unlink()
