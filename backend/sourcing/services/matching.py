from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Sequence

from sourcing import catalog, rules

NOT_AVAILABLE = "Not Available"
NOT_CARRIED_NOTE = "This supplier does not carry this item"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_product_name(name: object) -> str:
    return str(name or "").strip().lower()


def classify_item(name: object) -> Dict[str, object] | None:
    """
    Return the first category rule whose trigger keyword appears in the
    requested product name, or None when no rule triggers.
    """
    normalized = normalize_product_name(name)
    for rule in rules.CATEGORY_RULES:
        if any(trigger in normalized for trigger in rule["triggers"]):
            return rule
    return None


def supplier_covers_item(name: object, coverage_items: Iterable[str]) -> bool:
    normalized = normalize_product_name(name)
    coverage = [str(item).lower() for item in coverage_items]

    rule = classify_item(normalized)
    if rule is not None:
        # Once a rule triggers, later rules are not consulted.
        return any(accept in entry for entry in coverage for accept in rule["accepts"])

    return any(normalized in entry or entry in normalized for entry in coverage)


def find_suppliers(
    items: Sequence[Mapping[str, object]],
    suppliers: Sequence[catalog.Supplier] | None = None,
) -> List[catalog.Supplier]:
    pool = list(catalog.SUPPLIERS if suppliers is None else suppliers)
    if items:
        pool = [
            supplier
            for supplier in pool
            if any(supplier_covers_item(item.get("product_name"), supplier.coverage_items) for item in items)
        ]
    return sorted(pool, key=lambda supplier: (not supplier.is_ai_recommended, -supplier.rating))


def find_matching_product(name: object, capabilities: Mapping[str, object]) -> str | None:
    normalized = normalize_product_name(name)
    if not normalized:
        return None

    for key in capabilities:
        if key.lower() == normalized:
            return key

    lowered_keys = {key.lower(): key for key in capabilities}
    for mapping in rules.PRODUCT_KEYWORD_MAPPINGS:
        if any(keyword in normalized for keyword in mapping["keywords"]):
            for product in mapping["products"]:
                if product.lower() in lowered_keys:
                    return lowered_keys[product.lower()]

    for key in capabilities:
        lowered = key.lower()
        if normalized in lowered or lowered in normalized:
            return key
    return None


def _coerce_quantity(value: object) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def item_availability(items: Sequence[Mapping[str, object]], supplier_id: str) -> List[Dict[str, object]]:
    capabilities = catalog.get_capabilities(supplier_id)
    results: List[Dict[str, object]] = []
    for item in items:
        product_name = str(item.get("product_name") or "")
        quantity = _coerce_quantity(item.get("quantity"))
        key = find_matching_product(product_name, capabilities)
        capability = capabilities.get(key) if key else None
        if capability is None or not capability.available:
            results.append(
                {
                    "product_name": product_name,
                    "quantity": quantity,
                    "available": False,
                    "price": None,
                    "stock": None,
                    "availability": NOT_AVAILABLE,
                    "note": NOT_CARRIED_NOTE,
                }
            )
            continue

        stock = capability.stock or 0
        if stock < quantity:
            note = f"Only {stock} available (need {quantity})"
        else:
            note = f"{stock} units available"
        results.append(
            {
                "product_name": product_name,
                "matched_product": key,
                "quantity": quantity,
                "available": True,
                "price": capability.price,
                "stock": stock,
                "availability": capability.availability,
                "note": note,
            }
        )
    return results


def match_percentage(availability: Sequence[Mapping[str, object]]) -> int:
    if not availability:
        return 0
    available = sum(1 for entry in availability if entry.get("available"))
    return round_half_up(available / len(availability) * 100)


def estimated_total(availability: Sequence[Mapping[str, object]]) -> int:
    total = 0
    for entry in availability:
        if not entry.get("available"):
            continue
        total += int(entry.get("price") or 0) * min(int(entry.get("stock") or 0), int(entry.get("quantity") or 0))
    return total
