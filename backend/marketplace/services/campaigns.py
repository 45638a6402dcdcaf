"""
Brand loyalty campaigns. Stored under the ``campaigns`` collection.

    draft -> active
    active -> paused | completed
    paused -> active | completed
"""
from __future__ import annotations

import copy
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Sequence

from api import store
from marketplace import catalog, rules

logger = logging.getLogger(__name__)

COLLECTION = "campaigns"

_VALID_TRANSITIONS = {
    "draft": {"active"},
    "active": {"paused", "completed"},
    "paused": {"active", "completed"},
    "completed": set(),
}

_TOGGLE_TARGETS = {
    "draft": "active",
    "active": "paused",
    "paused": "active",
}


class CampaignError(Exception):
    """Raised when a campaign operation fails."""

    def __init__(self, message: str, code: str = "campaign_error"):
        self.message = message
        self.code = code
        super().__init__(message)


def _seed_campaigns() -> Dict[str, object]:
    return {campaign["id"]: copy.deepcopy(campaign) for campaign in catalog.SEED_CAMPAIGNS}


store.register_seed(COLLECTION, _seed_campaigns)


def list_campaigns(brand_id: str | None = None, status: str | None = None) -> List[Dict[str, object]]:
    campaigns = store.list_records(COLLECTION)
    if brand_id is not None:
        campaigns = [c for c in campaigns if c.get("brand_id") == str(brand_id)]
    if status:
        campaigns = [c for c in campaigns if c.get("status") == status]
    return sorted(campaigns, key=lambda c: int(c["id"]) if str(c["id"]).isdigit() else 0)


def get_campaign(campaign_id: str) -> Dict[str, object] | None:
    return store.get_record(COLLECTION, campaign_id)


def campaign_for_sku(sku: str, campaigns: Sequence[Mapping[str, object]]) -> Mapping[str, object] | None:
    """First campaign whose SKU list names ``sku``."""
    for campaign in campaigns:
        if sku in (campaign.get("skus") or []):
            return campaign
    return None


def validate_campaign_payload(payload: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if catalog.get_brand(payload.get("brand_id")) is None:
        errors["brand_id"] = "Unknown brand."
    if not str(payload.get("name") or "").strip():
        errors["name"] = "Name is required."
    skus = payload.get("skus")
    if not isinstance(skus, list) or not skus or not all(isinstance(sku, str) and sku for sku in skus):
        errors["skus"] = "Expected a non-empty list of SKUs."
    budget = payload.get("budget")
    if isinstance(budget, bool) or not isinstance(budget, (int, float)) or budget <= 0:
        errors["budget"] = "Must be a positive number."
    for field in ("points_per_receipt", "bonus_multiplier"):
        value = payload.get(field)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            errors[field] = "Must be a positive number."
    start_date = str(payload.get("start_date") or "")
    end_date = str(payload.get("end_date") or "")
    if not start_date:
        errors["start_date"] = "Start date is required."
    if not end_date:
        errors["end_date"] = "End date is required."
    elif start_date and end_date < start_date:
        errors["end_date"] = "End date must not be before the start date."
    return errors


def _next_id(existing: Sequence[Mapping[str, object]]) -> str:
    highest = 0
    for record in existing:
        if re.fullmatch(r"\d+", str(record.get("id") or "")):
            highest = max(highest, int(record["id"]))
    return str(highest + 1)


def create_campaign(payload: Mapping[str, Any]) -> Dict[str, object]:
    errors = validate_campaign_payload(payload)
    if errors:
        field, message = next(iter(errors.items()))
        code = "brand_not_found" if field == "brand_id" else "invalid"
        raise CampaignError(message, code=code)

    def build(existing):
        return {
            "id": _next_id(existing),
            "brand_id": str(payload["brand_id"]),
            "name": str(payload["name"]).strip(),
            "description": str(payload.get("description") or ""),
            "skus": list(payload["skus"]),
            "target_region": str(payload.get("target_region") or ""),
            "budget": payload["budget"],
            "spent_budget": 0,
            "points_per_receipt": payload.get("points_per_receipt")
            or rules.CAMPAIGN_DEFAULT_POINTS_PER_RECEIPT,
            "bonus_multiplier": payload.get("bonus_multiplier") or rules.CAMPAIGN_DEFAULT_BONUS_MULTIPLIER,
            "start_date": str(payload["start_date"]),
            "end_date": str(payload["end_date"]),
            "status": "draft",
            "participating_distributors": [],
            "total_receipts": 0,
            "created_at": store.utc_now(),
        }

    campaign = store.insert_record(COLLECTION, build)
    logger.info("Created campaign %s for brand %s", campaign["id"], campaign["brand_id"])
    return campaign


def _validate_transition(current: str, target: str) -> None:
    if target not in _VALID_TRANSITIONS.get(current, set()):
        raise CampaignError(
            f"Cannot transition campaign from {current} to {target}.",
            code="invalid_transition",
        )


def _update_status(campaign_id: str, choose_target: Callable[[str], str]) -> Dict[str, object]:
    def mutate(campaign):
        target = choose_target(str(campaign.get("status")))
        _validate_transition(str(campaign.get("status")), target)
        campaign["status"] = target
        return campaign

    campaign = store.update_record(COLLECTION, campaign_id, mutate)
    if campaign is None:
        raise CampaignError("Campaign not found.", code="not_found")
    return campaign


def transition_campaign(campaign_id: str, target: str) -> Dict[str, object]:
    return _update_status(campaign_id, lambda current: target)


def toggle_campaign(campaign_id: str) -> Dict[str, object]:
    """Pause an active campaign, or activate a draft or paused one."""

    def choose_target(current: str) -> str:
        target = _TOGGLE_TARGETS.get(current)
        if target is None:
            raise CampaignError(f"Campaign is {current} and cannot be toggled.", code="invalid_transition")
        return target

    return _update_status(campaign_id, choose_target)


def campaign_stats(campaigns: Sequence[Mapping[str, object]]) -> Dict[str, object]:
    participants = set()
    for campaign in campaigns:
        participants.update(campaign.get("participating_distributors") or [])
    return {
        "total_campaigns": len(campaigns),
        "active_campaigns": sum(1 for c in campaigns if c.get("status") == "active"),
        "total_budget": sum(c.get("budget") or 0 for c in campaigns),
        "spent_budget": sum(c.get("spent_budget") or 0 for c in campaigns),
        "total_receipts": sum(c.get("total_receipts") or 0 for c in campaigns),
        "participating_distributors": len(participants),
    }
