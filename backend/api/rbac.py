from __future__ import annotations

from typing import Iterable, Tuple

from api.authentication import Principal

ROLE_DISTRIBUTOR = "DISTRIBUTOR"
ROLE_SUPPLIER = "SUPPLIER"
ROLE_BRAND = "BRAND"
ROLE_PARTNER = "PARTNER"

# Sourcing permissions
PERM_SHORTLIST_MANAGE = "sourcing.shortlist.manage"
PERM_PURCHASE_ORDER_CREATE = "sourcing.purchase_order.create"
PERM_PURCHASE_ORDER_VIEW = "sourcing.purchase_order.view"
PERM_PURCHASE_ORDER_UPDATE = "sourcing.purchase_order.update"
PERM_PURCHASE_ORDER_IMPORT = "sourcing.purchase_order.import"
PERM_DEMAND_VIEW = "sourcing.demand.view"

# Marketplace permissions
PERM_LISTING_APPLY = "marketplace.listing.apply"
PERM_APPLICATION_REVIEW = "marketplace.application.review"
PERM_RECEIPT_SUBMIT = "marketplace.receipt.submit"
PERM_WALLET_VIEW = "marketplace.wallet.view"
PERM_REWARD_REDEEM = "marketplace.reward.redeem"
PERM_CAMPAIGN_VIEW = "marketplace.campaign.view"
PERM_CAMPAIGN_MANAGE = "marketplace.campaign.manage"
PERM_TRANSACTION_SIMULATE = "marketplace.transaction.simulate"
PERM_MESSAGE_SEND = "marketplace.message.send"

# Partner permissions
PERM_PARTNER_PORTAL_VIEW = "partner.portal.view"

_ROLE_PERMISSION_MAP = {
    ROLE_DISTRIBUTOR: {
        PERM_SHORTLIST_MANAGE,
        PERM_PURCHASE_ORDER_CREATE,
        PERM_PURCHASE_ORDER_VIEW,
        PERM_PURCHASE_ORDER_UPDATE,
        PERM_PURCHASE_ORDER_IMPORT,
        PERM_LISTING_APPLY,
        PERM_RECEIPT_SUBMIT,
        PERM_WALLET_VIEW,
        PERM_REWARD_REDEEM,
        PERM_CAMPAIGN_VIEW,
        PERM_TRANSACTION_SIMULATE,
        PERM_MESSAGE_SEND,
    },
    ROLE_SUPPLIER: {
        PERM_DEMAND_VIEW,
        PERM_PURCHASE_ORDER_VIEW,
        PERM_PURCHASE_ORDER_UPDATE,
        PERM_MESSAGE_SEND,
    },
    ROLE_BRAND: {
        PERM_CAMPAIGN_VIEW,
        PERM_CAMPAIGN_MANAGE,
        PERM_APPLICATION_REVIEW,
        PERM_MESSAGE_SEND,
    },
    ROLE_PARTNER: {
        PERM_PARTNER_PORTAL_VIEW,
        PERM_CAMPAIGN_VIEW,
        PERM_RECEIPT_SUBMIT,
        PERM_WALLET_VIEW,
        PERM_REWARD_REDEEM,
    },
}

# Roles a user can pick at login.
SELECTABLE_ROLES = [
    {
        "code": "distributor",
        "label": "Distributor",
        "description": "Find suppliers, shortlist them and raise purchase orders.",
    },
    {
        "code": "supplier",
        "label": "Supplier",
        "description": "Browse distributor demand and match it against your capabilities.",
    },
    {
        "code": "brand",
        "label": "Brand",
        "description": "Run loyalty campaigns and review distributor applications.",
    },
    {
        "code": "partner",
        "label": "Partner",
        "description": "Manage GT accounts, performance and risk.",
    },
]


def _dedupe_preserve_order(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


def resolve_roles_and_permissions(
    request, principal: Principal
) -> Tuple[list[str], list[str]]:
    if hasattr(request, "_rbac_cache"):
        cached = request._rbac_cache
        return cached["roles"], cached["permissions"]

    roles: list[str] = [str(role).upper() for role in (principal.roles or [])]
    permissions: list[str] = list(getattr(principal, "permissions", []) or [])
    permissions = _dedupe_preserve_order(
        permissions + sorted(_permissions_for_roles(roles))
    )

    request._rbac_cache = {"roles": roles, "permissions": permissions}
    return roles, permissions


def _permissions_for_roles(roles: Iterable[str]) -> set[str]:
    permissions: set[str] = set()
    for role in roles:
        permissions |= _ROLE_PERMISSION_MAP.get(role.upper(), set())
    return permissions
