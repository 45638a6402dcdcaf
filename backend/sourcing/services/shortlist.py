"""
Per-user supplier shortlist kept in the dev store.

Records are stored under one key per user as ``{"user_id", "items": [...]}``.
"""
from __future__ import annotations

from typing import Dict, List
from urllib.parse import quote

from api import store
from sourcing import catalog

COLLECTION = "shortlists"


class ShortlistError(Exception):
    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


def list_shortlist(user_id: str) -> List[Dict[str, object]]:
    record = store.get_record(COLLECTION, user_id) or {}
    return list(record.get("items", []))


def add_to_shortlist(user_id: str, supplier_id: str, notes: str = "") -> Dict[str, object]:
    supplier_id = str(supplier_id or "").strip()
    if catalog.get_supplier(supplier_id) is None:
        raise ShortlistError("Supplier not found.", "supplier_not_found")

    entry = {
        "supplier_id": supplier_id,
        "notes": str(notes or "").strip(),
        "date_added": store.utc_now(),
    }

    def build(existing):
        current = next((record for record in existing if record.get("user_id") == user_id), {})
        items = list(current.get("items", []))
        if any(item.get("supplier_id") == supplier_id for item in items):
            raise ShortlistError("Supplier is already shortlisted.", "duplicate")
        items.append(entry)
        return {"user_id": user_id, "items": items}

    store.insert_record(COLLECTION, build, key_field="user_id")
    return entry


def remove_from_shortlist(user_id: str, supplier_id: str) -> bool:
    removed = False

    def mutate(record):
        nonlocal removed
        items = list(record.get("items", []))
        remaining = [entry for entry in items if entry.get("supplier_id") != str(supplier_id)]
        removed = len(remaining) != len(items)
        return {"user_id": user_id, "items": remaining}

    store.update_record(COLLECTION, user_id, mutate)
    return removed


def contact_mailto(supplier: catalog.Supplier) -> str:
    subject = quote("Procurement Inquiry")
    body = quote(f"Hello {supplier.name}, I'm interested in your products for our procurement needs.")
    return f"mailto:{supplier.contact_email}?subject={subject}&body={body}"
