"""
Purchase order creation, handoff and ERP list operations.

Orders live in the dev store under the ``purchase_orders`` collection, keyed
by PO number. Status transitions:

    Draft -> Sent | Cancelled
    Sent -> Confirmed | Cancelled
    Confirmed -> In Transit | Cancelled
    In Transit -> Delivered
"""
from __future__ import annotations

import base64
import binascii
import copy
import json
import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Sequence

from django.conf import settings

from api import store
from sourcing import catalog, rules
from sourcing.services.matching import round_half_up

logger = logging.getLogger(__name__)

COLLECTION = "purchase_orders"
HANDOFF_SCHEMA = "baskit.purchase_order"
HANDOFF_VERSION = 1

_VALID_TRANSITIONS = {
    "Draft": {"Sent", "Cancelled"},
    "Sent": {"Confirmed", "Cancelled"},
    "Confirmed": {"In Transit", "Cancelled"},
    "In Transit": {"Delivered"},
    "Delivered": set(),
    "Cancelled": set(),
}

_DATE_FIELDS = {"order_date", "delivery_date", "last_updated"}
_PO_NUMBER_RE = re.compile(r"^PO-(\d{4})-(\d+)$")


class PurchaseOrderError(Exception):
    """Raised when a purchase order operation fails."""

    def __init__(self, message: str, code: str = "purchase_order_error"):
        self.message = message
        self.code = code
        super().__init__(message)


def _seed_orders() -> Dict[str, object]:
    return {order["po_number"]: copy.deepcopy(order) for order in catalog.SEED_PURCHASE_ORDERS}


store.register_seed(COLLECTION, _seed_orders)


def generate_po_number(existing: Sequence[Mapping[str, object]], today: date) -> str:
    """Next sequential number for the year: PO-{YYYY}-{SEQ:03d}."""
    year = str(today.year)
    highest = 0
    for order in existing:
        match = _PO_NUMBER_RE.match(str(order.get("po_number") or ""))
        if match and match.group(1) == year:
            highest = max(highest, int(match.group(2)))
    return f"PO-{year}-{highest + 1:03d}"


def _product_code(supplier_id: str, index: int) -> str:
    try:
        prefix = f"{int(supplier_id):03d}"
    except (TypeError, ValueError):
        prefix = str(supplier_id)
    return f"{prefix}-{1000 + index + 1}"


def _build_items(supplier: catalog.Supplier, items: Sequence[Mapping[str, object]]) -> List[Dict[str, object]]:
    built = []
    for index, item in enumerate(items):
        quantity = int(item.get("quantity") or 0)
        unit_price = item.get("target_price") or 0
        built.append(
            {
                "id": str(item.get("id") or index + 1),
                "product_code": _product_code(supplier.id, index),
                "product_name": str(item.get("product_name") or ""),
                "quantity": quantity,
                "available_qty": quantity,
                "operating_qty": quantity,
                "unit_price": unit_price,
                "sell_price": unit_price,
                "purchase_price": round(unit_price * rules.PO_PURCHASE_PRICE_RATIO, 2),
                "total_price": unit_price * quantity,
                "unit": item.get("unit") or rules.PO_DEFAULT_UNIT,
                "po_account": rules.PO_ACCOUNT,
                "tax": rules.PO_TAX_LABEL,
            }
        )
    return built


def _notes(supplier: catalog.Supplier, sales_order_id: str | None) -> str:
    prefix = f"PO dibuat melalui Baskit untuk supplier {supplier.name}."
    if sales_order_id:
        return f"{prefix} Berdasarkan Sales Order: {sales_order_id}"
    return f"{prefix} Procurement langsung dari Baskit."


def build_purchase_order(
    supplier: catalog.Supplier,
    items: Sequence[Mapping[str, object]],
    user: Mapping[str, object],
    sales_order_id: str | None = None,
    today: date | None = None,
    po_number: str | None = None,
) -> Dict[str, object]:
    today = today or date.today()
    order_items = _build_items(supplier, items)
    sub_total = sum(item["total_price"] for item in order_items)
    return {
        "id": store.new_id(),
        "po_number": po_number or generate_po_number([], today),
        "sales_order_id": sales_order_id or "",
        "supplier_id": supplier.id,
        "supplier_name": supplier.name,
        "supplier_email": supplier.contact_email,
        "supplier_phone": supplier.phone,
        "supplier_address": supplier.detailed_address,
        "supplier_rating": supplier.rating,
        "supplier_location": supplier.location,
        "order_date": today.isoformat(),
        "delivery_date": (today + timedelta(days=settings.PO_DELIVERY_DAYS)).isoformat(),
        "status": rules.PO_DEFAULT_STATUS,
        "items": order_items,
        "total_amount": sub_total,
        "sub_total": sub_total,
        "shipping_cost": 0,
        "rounding": 0,
        "tax_amount": round_half_up(sub_total * settings.PO_TAX_RATE),
        "created_by": user.get("name") or "",
        "created_by_email": user.get("email") or "",
        "seller_category": rules.PO_SELLER_CATEGORY,
        "shipping_type": rules.PO_SHIPPING_TYPE,
        "estimated_delivery": supplier.lead_time or rules.PO_DEFAULT_LEAD_TIME,
        "notes": _notes(supplier, sales_order_id),
        "delivery_address": dict(rules.PO_DEFAULT_DELIVERY_ADDRESS),
        "last_updated": store.utc_now(),
    }


def create_purchase_order(
    supplier: catalog.Supplier,
    items: Sequence[Mapping[str, object]],
    user: Mapping[str, object],
    sales_order_id: str | None = None,
    today: date | None = None,
) -> Dict[str, object]:
    today = today or date.today()
    order = store.insert_record(
        COLLECTION,
        lambda existing: build_purchase_order(
            supplier,
            items,
            user,
            sales_order_id=sales_order_id,
            today=today,
            po_number=generate_po_number(existing, today),
        ),
        key_field="po_number",
    )
    logger.info("Created purchase order %s for supplier %s", order["po_number"], supplier.id)
    return order


def get_purchase_order(po_number: str) -> Dict[str, object] | None:
    return store.get_record(COLLECTION, po_number)


def list_purchase_orders() -> List[Dict[str, object]]:
    return store.list_records(COLLECTION)


def encode_handoff(order: Mapping[str, object]) -> str:
    envelope = {"schema": HANDOFF_SCHEMA, "version": HANDOFF_VERSION, "order": dict(order)}
    raw = json.dumps(envelope, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _invalid_handoff(message: str) -> PurchaseOrderError:
    return PurchaseOrderError(message, code="invalid_handoff")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_handoff_order(order: object) -> Dict[str, Any]:
    if not isinstance(order, dict):
        raise _invalid_handoff("Handoff order must be an object.")

    for field in ("po_number", "supplier_name", "order_date", "status"):
        if not isinstance(order.get(field), str) or not order.get(field):
            raise _invalid_handoff(f"Handoff field '{field}' must be a non-empty string.")
    if not _PO_NUMBER_RE.match(order["po_number"]):
        raise _invalid_handoff("Handoff PO number is malformed.")
    try:
        date.fromisoformat(order["order_date"])
    except ValueError:
        raise _invalid_handoff("Handoff order_date must be an ISO date.")
    if order["status"] not in rules.PO_STATUSES:
        raise _invalid_handoff(f"Handoff status must be one of: {', '.join(rules.PO_STATUSES)}.")
    if not _is_number(order.get("total_amount")):
        raise _invalid_handoff("Handoff field 'total_amount' must be a number.")

    items = order.get("items")
    if not isinstance(items, list) or not items:
        raise _invalid_handoff("Handoff order must carry at least one item.")
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get("product_name"), str):
            raise _invalid_handoff("Handoff items need a product_name.")
        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise _invalid_handoff("Handoff item quantity must be a positive integer.")
    return order


def decode_handoff(raw: object) -> Dict[str, Any]:
    if not isinstance(raw, str) or not raw.strip():
        raise _invalid_handoff("Handoff payload is empty.")
    encoded = raw.strip()
    padded = encoded + "=" * (-len(encoded) % 4)
    try:
        envelope = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError):
        raise _invalid_handoff("Handoff payload could not be decoded.")

    if not isinstance(envelope, dict) or envelope.get("schema") != HANDOFF_SCHEMA:
        raise _invalid_handoff("Unknown handoff schema.")
    if envelope.get("version") != HANDOFF_VERSION:
        raise _invalid_handoff(f"Unsupported handoff version: {envelope.get('version')!r}.")
    return _validate_handoff_order(envelope.get("order"))


def import_handoff(raw: object) -> Dict[str, object]:
    order = decode_handoff(raw)

    def build(existing):
        if any(record.get("po_number") == order["po_number"] for record in existing):
            raise PurchaseOrderError(f"Purchase order {order['po_number']} already exists.", code="duplicate")
        order.setdefault("id", store.new_id())
        order["last_updated"] = store.utc_now()
        return order

    return store.insert_record(COLLECTION, build, key_field="po_number")


def _parse_date(value: object) -> date | None:
    text = str(value or "")
    if not text:
        return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None


def _matches_date_filter(order: Mapping[str, object], date_filter: str, today: date) -> bool:
    if date_filter in ("", "All"):
        return True
    order_date = _parse_date(order.get("order_date"))
    if order_date is None:
        return False
    if date_filter == "Today":
        return order_date == today
    if date_filter == "This Week":
        return order_date >= today - timedelta(days=7)
    if date_filter == "This Month":
        return order_date.month == today.month and order_date.year == today.year
    raise ValueError(f"invalid date filter, expected one of: {list(rules.PO_DATE_FILTERS)}")


def _sort_value(order: Mapping[str, object], field: str):
    value = order.get(field)
    if field in _DATE_FIELDS:
        return _parse_date(value) or date.min
    if value is None:
        return ""
    return value


def filter_orders(
    orders: Sequence[Mapping[str, object]],
    search: str = "",
    status: str = "All",
    date_filter: str = "All",
    sort_by: str = "order_date",
    sort_order: str = "desc",
    today: date | None = None,
) -> List[Mapping[str, object]]:
    today = today or date.today()
    term = str(search or "").strip().lower()
    status = status or "All"
    if status != "All" and status not in rules.PO_STATUSES:
        raise ValueError(f"invalid status, expected one of: {['All', *rules.PO_STATUSES]}")
    if sort_order not in ("asc", "desc"):
        raise ValueError("invalid sort order, expected asc or desc")

    filtered = []
    for order in orders:
        if term:
            haystack = (
                str(order.get("po_number") or "").lower(),
                str(order.get("supplier_name") or "").lower(),
                str(order.get("sales_order_id") or "").lower(),
            )
            if not any(term in value for value in haystack):
                continue
        if status != "All" and order.get("status") != status:
            continue
        if not _matches_date_filter(order, date_filter, today):
            continue
        filtered.append(order)

    try:
        return sorted(filtered, key=lambda order: _sort_value(order, sort_by), reverse=sort_order == "desc")
    except TypeError:
        # Mixed value types in the sort column fall back to string comparison.
        return sorted(
            filtered, key=lambda order: str(_sort_value(order, sort_by)), reverse=sort_order == "desc"
        )


def order_stats(orders: Sequence[Mapping[str, object]]) -> Dict[str, object]:
    by_status = {status: 0 for status in rules.PO_STATUSES}
    for order in orders:
        status = str(order.get("status") or "")
        if status in by_status:
            by_status[status] += 1
    return {
        "total_orders": len(orders),
        "total_value": sum(order.get("total_amount") or 0 for order in orders),
        "by_status": by_status,
    }


def _validate_transition(current: str, target: str) -> None:
    allowed = _VALID_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise PurchaseOrderError(
            f"Cannot transition from {current} to {target}.",
            code="invalid_transition",
        )


def transition_status(po_number: str, target: str) -> Dict[str, object]:
    def mutate(order):
        _validate_transition(str(order.get("status")), target)
        order["status"] = target
        order["last_updated"] = store.utc_now()
        return order

    order = store.update_record(COLLECTION, po_number, mutate)
    if order is None:
        raise PurchaseOrderError("Purchase order not found.", code="not_found")
    return order
