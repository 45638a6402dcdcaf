from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from marketplace import catalog, rules

_CATEGORY_FIELDS = {
    "overall": "score",
    "fulfillment": "fulfillments",
    "receipts": "receipts",
    "campaigns": "campaigns",
}


def campaign_participation(
    distributor_id: str,
    campaigns: Sequence[Mapping[str, object]] | None = None,
) -> int:
    """Number of campaign fixtures listing the distributor as a participant."""
    source = catalog.SEED_CAMPAIGNS if campaigns is None else campaigns
    return sum(1 for c in source if str(distributor_id) in (c.get("participating_distributors") or []))


def distributor_score(fulfillments: int, receipts: int, campaigns: int) -> int:
    weights = rules.LEADERBOARD_WEIGHTS
    return fulfillments * weights["fulfillment"] + receipts * weights["receipts"] + campaigns * weights["campaigns"]


def leaderboard(category: str = "overall") -> List[Dict[str, object]]:
    if category not in _CATEGORY_FIELDS:
        raise ValueError(f"invalid category, expected one of: {list(rules.LEADERBOARD_CATEGORIES)}")

    entries = []
    for distributor in catalog.DISTRIBUTORS:
        fulfillments = int(distributor["total_fulfillments"])
        receipts = int(distributor["total_receipt_uploads"])
        campaigns = campaign_participation(str(distributor["id"]))
        entries.append(
            {
                "distributor_id": distributor["id"],
                "name": distributor["name"],
                "region": distributor["region"],
                "rating": distributor["rating"],
                "loyalty_points": distributor["loyalty_points"],
                "fulfillments": fulfillments,
                "receipts": receipts,
                "campaigns": campaigns,
                "score": distributor_score(fulfillments, receipts, campaigns),
            }
        )

    field = _CATEGORY_FIELDS[category]
    ranked = sorted(entries, key=lambda entry: entry[field], reverse=True)
    for rank, entry in enumerate(ranked, start=1):
        entry["rank"] = rank
    return ranked
