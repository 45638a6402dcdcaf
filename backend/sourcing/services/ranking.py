from __future__ import annotations

import re
from typing import Dict, List, Mapping, Sequence

from sourcing import catalog, rules
from sourcing.services import matching

_FIRST_NUMBER_RE = re.compile(r"(\d+)")
_DURATION_RANGE_RE = re.compile(r"(\d+)-(\d+)")


def distance_info(location: str) -> Dict[str, object]:
    entry = rules.DISTANCE_TABLE.get(location) or rules.DEFAULT_DISTANCE
    return dict(entry)


def lead_time_days(lead_time: object) -> int:
    match = _FIRST_NUMBER_RE.search(str(lead_time or ""))
    if not match:
        return rules.UNKNOWN_LEAD_TIME_DAYS
    return int(match.group(1))


def shipping_price(base_price: float, price_per_km: float, distance: float) -> int:
    return matching.round_half_up(base_price + (price_per_km or 0) * distance)


def adjust_delivery_time(duration: str, distance: float) -> str:
    """
    Widen carrier durations for long hauls and shorten the lower bound for
    local deliveries. Only the first "N-M" range in the text is touched.
    """
    if distance > rules.LONG_DISTANCE_KM:
        return _DURATION_RANGE_RE.sub(
            lambda match: f"{int(match.group(1)) + 1}-{int(match.group(2)) + 1}",
            duration,
            count=1,
        )
    if distance < rules.LOCAL_DISTANCE_KM:
        return _DURATION_RANGE_RE.sub(
            lambda match: f"{max(1, int(match.group(1)) - 1)}-{int(match.group(2))}",
            duration,
            count=1,
        )
    return duration


def shipping_quotes(distance: float, limit: int | None = None) -> List[Dict[str, object]]:
    options = rules.SHIPPING_OPTIONS if limit is None else rules.SHIPPING_OPTIONS[:limit]
    quotes = []
    for option in options:
        quotes.append(
            {
                "name": option["name"],
                "price": shipping_price(option["base_price"], option["price_per_km"], distance),
                "distance_fee": matching.round_half_up(option["price_per_km"] * distance),
                "duration": adjust_delivery_time(option["duration"], distance),
                "base_duration": option["duration"],
            }
        )
    return quotes


def supplier_summary(supplier: catalog.Supplier, items: Sequence[Mapping[str, object]]) -> Dict[str, object]:
    availability = matching.item_availability(items, supplier.id)
    distance = distance_info(supplier.location)
    summary = supplier.to_dict()
    summary.update(
        {
            "item_availability": availability,
            "match_percentage": matching.match_percentage(availability),
            "estimated_total": matching.estimated_total(availability),
            "distance_info": distance,
            "lead_time_days": lead_time_days(supplier.lead_time),
            "shipping_options": shipping_quotes(distance["distance"]),
        }
    )
    return summary


def _cheapest_key(summary: Mapping[str, object]):
    total = summary["estimated_total"]
    # Suppliers with nothing available always trail the priced ones.
    return (total == 0, total)


_SORT_KEYS = {
    rules.SORT_AI_RECOMMENDATION: lambda s: (not s["is_ai_recommended"], -s["match_percentage"], -s["rating"]),
    rules.SORT_CHEAPEST: _cheapest_key,
    rules.SORT_CLOSEST: lambda s: s["distance_info"]["distance"],
    rules.SORT_FASTEST_DELIVERY: lambda s: s["lead_time_days"],
    rules.SORT_HIGHEST_RATING: lambda s: -s["rating"],
    rules.SORT_BEST_MATCH: lambda s: (-s["match_percentage"], -s["rating"]),
}


def rank_suppliers(
    suppliers: Sequence[catalog.Supplier],
    items: Sequence[Mapping[str, object]],
    sort_by: str | None = None,
) -> List[Dict[str, object]]:
    mode = (sort_by or rules.get_default_sort_mode()).strip().lower()
    if mode not in _SORT_KEYS:
        raise ValueError(f"invalid sort mode, expected one of: {list(rules.SORT_MODES)}")
    summaries = [supplier_summary(supplier, items) for supplier in suppliers]
    return sorted(summaries, key=_SORT_KEYS[mode])
