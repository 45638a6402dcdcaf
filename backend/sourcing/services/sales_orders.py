from __future__ import annotations

import copy
from typing import Dict, List

from sourcing import catalog


class SalesOrderError(Exception):
    """Raised when a sales order cannot be imported."""

    def __init__(self, message: str, code: str = "sales_order_not_found") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


def normalize_sales_order_id(so_id: object) -> str:
    return str(so_id or "").strip().upper()


def load_sales_order(so_id: object) -> Dict[str, object]:
    normalized = normalize_sales_order_id(so_id)
    items = catalog.SALES_ORDERS.get(normalized)
    if items is None:
        known = list(catalog.SALES_ORDERS)
        raise SalesOrderError(
            f"Sales Order ID not found. Try: {', '.join(known[:-1])}, or {known[-1]}"
        )
    return {"sales_order_id": normalized, "items": copy.deepcopy(items)}


def known_sales_order_ids() -> List[str]:
    return list(catalog.SALES_ORDERS)
