"""
Brand listings and the distributor applications made against them.

Listings are static reference data. Applications live in the dev store
under the ``applications`` collection:

    pending -> approved | rejected
"""
from __future__ import annotations

import copy
import logging
import re
from typing import Dict, List, Mapping, Sequence

from api import store
from marketplace import catalog

logger = logging.getLogger(__name__)

COLLECTION = "applications"

_VALID_TRANSITIONS = {
    "pending": {"approved", "rejected"},
    "approved": set(),
    "rejected": set(),
}


class ApplicationError(Exception):
    """Raised when a listing application cannot be created or reviewed."""

    def __init__(self, message: str, code: str = "application_error"):
        self.message = message
        self.code = code
        super().__init__(message)


def _seed_applications() -> Dict[str, object]:
    return {app["id"]: copy.deepcopy(app) for app in catalog.SEED_APPLICATIONS}


store.register_seed(COLLECTION, _seed_applications)


def _campaign_lookup(campaigns: Sequence[Mapping[str, object]] | None) -> Dict[str, Mapping[str, object]]:
    source = catalog.SEED_CAMPAIGNS if campaigns is None else campaigns
    return {str(campaign["id"]): campaign for campaign in source}


def expand_listing(
    listing: Mapping[str, object],
    campaigns: Sequence[Mapping[str, object]] | None = None,
) -> Dict[str, object]:
    expanded = dict(listing)
    expanded["brand"] = catalog.get_brand(listing["brand_id"])
    expanded["product"] = catalog.get_product(listing["product_id"])
    campaign_id = listing.get("campaign_id")
    expanded["campaign"] = _campaign_lookup(campaigns).get(str(campaign_id)) if campaign_id else None
    return expanded


def list_listings(
    search: str = "",
    region: str = "",
    category: str = "",
    campaigns: Sequence[Mapping[str, object]] | None = None,
) -> List[Dict[str, object]]:
    """
    Active listings, optionally narrowed by a product/brand name search and
    exact region and category filters.
    """
    term = str(search or "").strip().lower()
    results = []
    for listing in catalog.LISTINGS:
        if listing.get("status") != "active":
            continue
        expanded = expand_listing(listing, campaigns)
        product = expanded["product"] or {}
        brand = expanded["brand"] or {}
        if term and term not in str(product.get("name", "")).lower() and term not in str(
            brand.get("name", "")
        ).lower():
            continue
        if region and listing.get("target_region") != region:
            continue
        if category and product.get("category") != category:
            continue
        results.append(expanded)
    return results


def listing_regions() -> List[str]:
    return sorted({str(listing["target_region"]) for listing in catalog.LISTINGS})


def listing_categories() -> List[str]:
    return sorted({str(product["category"]) for product in catalog.PRODUCTS})


def _next_id(existing: Sequence[Mapping[str, object]]) -> str:
    highest = 0
    for record in existing:
        if re.fullmatch(r"\d+", str(record.get("id") or "")):
            highest = max(highest, int(record["id"]))
    return str(highest + 1)


def list_applications(listing_id: str | None = None, distributor_id: str | None = None) -> List[Dict[str, object]]:
    applications = store.list_records(COLLECTION)
    if listing_id is not None:
        applications = [app for app in applications if app.get("listing_id") == str(listing_id)]
    if distributor_id is not None:
        applications = [app for app in applications if app.get("distributor_id") == str(distributor_id)]
    return sorted(applications, key=lambda app: str(app.get("applied_at") or ""), reverse=True)


def apply_to_listing(
    listing_id: str,
    distributor_id: str,
    proposed_quantity: int,
    proposed_price: float,
    message: str = "",
) -> Dict[str, object]:
    listing = catalog.get_listing(listing_id)
    if listing is None or listing.get("status") != "active":
        raise ApplicationError("Listing not found.", code="listing_not_found")
    if catalog.get_distributor(distributor_id) is None:
        raise ApplicationError("Distributor not found.", code="distributor_not_found")

    def build(existing):
        return {
            "id": _next_id(existing),
            "listing_id": str(listing_id),
            "distributor_id": str(distributor_id),
            "proposed_quantity": proposed_quantity,
            "proposed_price": proposed_price,
            "message": message,
            "status": "pending",
            "applied_at": store.utc_now(),
            "responded_at": None,
        }

    application = store.insert_record(COLLECTION, build)
    logger.info("Distributor %s applied to listing %s", distributor_id, listing_id)
    return application


def review_application(application_id: str, decision: str) -> Dict[str, object]:
    def mutate(application):
        current = str(application.get("status"))
        if decision not in _VALID_TRANSITIONS.get(current, set()):
            raise ApplicationError(
                f"Cannot move application from {current} to {decision}.",
                code="invalid_transition",
            )
        application["status"] = decision
        application["responded_at"] = store.utc_now()
        return application

    application = store.update_record(COLLECTION, application_id, mutate)
    if application is None:
        raise ApplicationError("Application not found.", code="not_found")
    return application
