"""
Supplier-facing demand board.

A supplier profile is ``{"capabilities": [...], "service_areas": [...],
"order_size": "..."}`` where each capability carries ``product_name``,
``min_quantity``, ``max_quantity`` and an optional ``unit_price``.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Mapping, Sequence

from sourcing import catalog, rules
from sourcing.services.matching import round_half_up


def _names_overlap(left: str, right: str) -> bool:
    left, right = left.lower(), right.lower()
    return left in right or right in left


def capability_matches_item(capability: Mapping[str, object], item: Mapping[str, object]) -> bool:
    if not _names_overlap(str(capability.get("product_name") or ""), str(item.get("product_name") or "")):
        return False

    quantity = item.get("quantity") or 0
    min_quantity = capability.get("min_quantity") or 0
    max_quantity = capability.get("max_quantity")
    if quantity < min_quantity or (max_quantity is not None and quantity > max_quantity):
        return False

    target_price = item.get("target_price")
    unit_price = capability.get("unit_price")
    if not target_price or not unit_price:
        return True
    return unit_price <= target_price * rules.DEMAND_PRICE_TOLERANCE


def service_area_matches(location: str, service_areas: Sequence[str]) -> bool:
    # Substring checks here are case-sensitive.
    if not service_areas:
        return True
    return any(area in location or location in area for area in service_areas)


def order_size_matches(budget: float, order_size: str | None) -> bool:
    band = rules.ORDER_SIZE_BANDS.get(order_size or "")
    if band is None:
        return True
    if "min" in band:
        if band.get("min_inclusive", True):
            if budget < band["min"]:
                return False
        elif budget <= band["min"]:
            return False
    if "max" in band:
        if band.get("max_inclusive", True):
            if budget > band["max"]:
                return False
        elif budget >= band["max"]:
            return False
    return True


def demand_matches_profile(demand: Mapping[str, object], profile: Mapping[str, object]) -> bool:
    capabilities = profile.get("capabilities") or []
    can_fulfil = any(
        capability_matches_item(capability, item) for item in demand["items"] for capability in capabilities
    )
    location = demand["delivery_preferences"]["location"]
    return (
        can_fulfil
        and service_area_matches(location, profile.get("service_areas") or [])
        and order_size_matches(demand["budget"], profile.get("order_size"))
    )


def match_score(demand: Mapping[str, object], profile: Mapping[str, object]) -> int:
    """
    Weighted fit of a demand for a supplier profile: products 40, service area
    30, order size 20 and urgency up to 10.
    """
    capabilities = profile.get("capabilities") or []
    score = 0.0
    items = demand["items"]
    if items:
        matched = [
            item
            for item in items
            if any(
                _names_overlap(str(capability.get("product_name") or ""), item["product_name"])
                for capability in capabilities
            )
        ]
        score += len(matched) / len(items) * 40
    factors = (40 if items else 0) + 30 + 20 + 10

    location = demand["delivery_preferences"]["location"]
    areas = profile.get("service_areas") or []
    if any(area in location or location in area for area in areas):
        score += 30
    if order_size_matches(demand["budget"], profile.get("order_size")):
        score += 20
    score += {"urgent": 10, "high": 7, "medium": 5}.get(demand["urgency"], 0)
    return round_half_up(score / factors * 100)


def _matches_search(demand: Mapping[str, object], term: str) -> bool:
    if not term:
        return True
    if term in demand["distributor_name"].lower():
        return True
    if any(term in item["product_name"].lower() for item in demand["items"]):
        return True
    return term in demand["delivery_preferences"]["location"].lower()


def _timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


_SORT_KEYS = {
    "budget": (lambda demand: demand["budget"], True),
    "urgency": (lambda demand: rules.URGENCY_ORDER.get(demand["urgency"], 0), True),
    "expires": (lambda demand: _timestamp(demand["expires_at"]), False),
    "requested": (lambda demand: _timestamp(demand["requested_at"]), True),
}


def list_demands(
    profile: Mapping[str, object] | None = None,
    search: str = "",
    urgency: str = "all",
    status: str = "all",
    sort_by: str | None = None,
    demands: Sequence[Mapping[str, object]] | None = None,
) -> List[Dict[str, object]]:
    pool = list(catalog.DISTRIBUTOR_DEMANDS if demands is None else demands)
    if profile and profile.get("capabilities"):
        pool = [demand for demand in pool if demand_matches_profile(demand, profile)]

    term = str(search or "").strip().lower()
    urgency = urgency or "all"
    status = status or "all"
    pool = [
        demand
        for demand in pool
        if _matches_search(demand, term)
        and (urgency == "all" or demand["urgency"] == urgency)
        and (status == "all" or demand["status"] == status)
    ]

    if sort_by:
        if sort_by not in _SORT_KEYS:
            raise ValueError(f"invalid sort mode, expected one of: {list(rules.DEMAND_SORT_MODES)}")
        key, reverse = _SORT_KEYS[sort_by]
        pool = sorted(pool, key=key, reverse=reverse)

    results = []
    for demand in pool:
        entry = dict(demand)
        if profile and profile.get("capabilities"):
            entry["match_score"] = match_score(demand, profile)
        results.append(entry)
    return results


def demand_stats(demands: Sequence[Mapping[str, object]]) -> Dict[str, object]:
    total_budget = sum(demand["budget"] for demand in demands)
    return {
        "total_demands": len(catalog.DISTRIBUTOR_DEMANDS),
        "matching_demands": len(demands),
        "open_demands": sum(1 for demand in demands if demand["status"] == "open"),
        "total_budget": total_budget,
        "average_budget": total_budget / (len(demands) or 1),
    }


def quotes_for_demand(demand_id: str) -> List[Dict[str, object]]:
    return [dict(quote) for quote in catalog.SUPPLIER_QUOTES if quote["demand_id"] == demand_id]


def get_demand(demand_id: str) -> Dict[str, object] | None:
    for demand in catalog.DISTRIBUTOR_DEMANDS:
        if demand["id"] == demand_id:
            return dict(demand)
    return None
