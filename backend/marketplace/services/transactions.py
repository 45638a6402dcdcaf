"""
Real-supplier matching and the B2B transaction simulator.

A simulated transaction is built in one call and never stored: the order
lines, payment terms, delivery estimate, risk assessment and cash-flow
effect are returned together with the static simulation steps.
"""
from __future__ import annotations

import logging
import random
from datetime import date, datetime, timedelta
from typing import Dict, List, Mapping, Sequence

from api import store
from marketplace import catalog, rules
from sourcing.services.matching import round_half_up

logger = logging.getLogger(__name__)


class TransactionError(Exception):
    """Raised when a transaction cannot be simulated."""

    def __init__(self, message: str, code: str = "transaction_error"):
        self.message = message
        self.code = code
        super().__init__(message)


def find_product(
    supplier: Mapping[str, object],
    requested: Mapping[str, object],
) -> Dict[str, object] | None:
    """
    Supplier product for a requested item: the product SKU contains the
    requested SKU, or either name contains the other. Out-of-stock products
    never match.
    """
    sku = str(requested.get("sku") or "").strip().upper()
    name = str(requested.get("product_name") or "").strip().lower()
    for product in supplier.get("products") or []:
        if product.get("availability") == "out-of-stock":
            continue
        product_name = str(product["name"]).lower()
        if sku and sku in str(product["sku"]).upper():
            return product
        if name and (name in product_name or product_name in name):
            return product
    return None


def supplier_match(
    supplier: Mapping[str, object],
    requested_items: Sequence[Mapping[str, object]],
) -> Dict[str, object]:
    matched_items = []
    estimated_cost = 0
    for requested in requested_items:
        product = find_product(supplier, requested)
        quantity = int(requested.get("quantity") or 0)
        cost = int(product["unit_price"]) * quantity if product else 0
        estimated_cost += cost
        matched_items.append(
            {
                "requested": dict(requested),
                "product": dict(product) if product else None,
                "available": product is not None,
                "estimated_cost": cost,
            }
        )
    matched = sum(1 for item in matched_items if item["available"])
    percentage = round_half_up(matched / len(requested_items) * 100) if requested_items else 0
    return {
        "matched_items": matched_items,
        "match_percentage": percentage,
        "estimated_cost": estimated_cost,
    }


def list_real_suppliers(
    requested_items: Sequence[Mapping[str, object]] | None = None,
    search: str = "",
    region: str = "",
) -> List[Dict[str, object]]:
    requested_items = catalog.DEMO_REQUESTED_ITEMS if requested_items is None else requested_items
    term = str(search or "").strip().lower()
    results = []
    for supplier in catalog.REAL_SUPPLIERS:
        if term and term not in str(supplier["name"]).lower() and not any(
            term in str(product["name"]).lower() for product in supplier["products"]
        ):
            continue
        if region and region not in supplier["region"]:
            continue
        results.append({**supplier, **supplier_match(supplier, requested_items)})
    return results


def _amount_penalty(amount: float) -> int:
    for threshold, penalty in rules.RISK_AMOUNT_PENALTIES:
        if amount > threshold:
            return penalty
    return 0


def risk_score(supplier: Mapping[str, object], amount: float, rng: random.Random | None = None) -> int:
    rng = rng or random.Random()
    integrations = sum(1 for enabled in (supplier.get("integrations") or {}).values() if enabled)
    score = rules.RISK_BASE_SCORE
    score -= (5 - float(supplier.get("rating") or 0)) * rules.RISK_RATING_WEIGHT
    score -= _amount_penalty(amount)
    score += integrations * rules.RISK_INTEGRATION_BONUS
    score -= rng.random() * rules.RISK_BUYER_FACTOR
    return max(0, min(100, round_half_up(score)))


def risk_level(score: int) -> str:
    if score >= rules.RISK_LOW_THRESHOLD:
        return "low"
    if score >= rules.RISK_MEDIUM_THRESHOLD:
        return "medium"
    return "high"


def _transaction_id() -> str:
    millis = int(datetime.now().timestamp() * 1000)
    return f"TXN-{millis}-{store.new_id().replace('-', '')[:9]}"


def simulate_transaction(
    supplier_id: str,
    items: Sequence[Mapping[str, object]],
    buyer: Mapping[str, object],
    rng: random.Random | None = None,
    today: date | None = None,
) -> Dict[str, object]:
    supplier = catalog.get_real_supplier(supplier_id)
    if supplier is None:
        raise TransactionError("Supplier not found", code="supplier_not_found")

    products = {product["sku"]: product for product in supplier["products"]}
    lines = []
    for item in items:
        sku = str(item.get("sku") or "")
        product = products.get(sku)
        if product is None:
            raise TransactionError(f"Product {sku} not found", code="product_not_found")
        quantity = int(item.get("quantity") or 0)
        lines.append(
            {
                "sku": sku,
                "name": product["name"],
                "quantity": quantity,
                "unit": product["unit"],
                "unit_price": product["unit_price"],
                "total_price": int(product["unit_price"]) * quantity,
            }
        )

    today = today or date.today()
    total = sum(line["total_price"] for line in lines)
    score = risk_score(supplier, total, rng)
    transaction = {
        "id": _transaction_id(),
        "type": "purchase_order",
        "status": "pending",
        "buyer": {
            "id": buyer.get("id"),
            "name": buyer.get("name"),
            "address": buyer.get("address") or rules.DEFAULT_BUYER_ADDRESS,
        },
        "supplier": {"id": supplier["id"], "name": supplier["name"]},
        "items": lines,
        "total_amount": total,
        "currency": rules.TRANSACTION_CURRENCY,
        "payment": {
            "method": rules.TRANSACTION_PAYMENT_METHOD,
            "terms": supplier["payment_terms"][0],
            "status": "pending",
        },
        "delivery": {
            "address": buyer.get("address") or rules.DEFAULT_BUYER_ADDRESS,
            "estimated_date": (today + timedelta(days=rules.TRANSACTION_DELIVERY_DAYS)).isoformat(),
            "carrier": rules.TRANSACTION_CARRIER,
        },
        "integrations": dict(supplier["integrations"]),
        "risk_assessment": {"score": score, "level": risk_level(score)},
        "cash_flow_impact": {"payable": total, "receivable": 0, "net_impact": -total},
        "steps": [dict(step) for step in rules.SIMULATION_STEPS],
        "ecosystem_urls": dict(catalog.ECOSYSTEM_URLS),
        "created_at": store.utc_now(),
    }
    logger.info("Simulated transaction %s with supplier %s", transaction["id"], supplier_id)
    return transaction
