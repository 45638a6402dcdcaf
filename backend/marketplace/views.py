import logging
from typing import Any, Dict, List

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from api import store
from api.authentication import BaskitTokenAuthentication
from api.permissions import BaskitPermission
from api.rbac import (
    PERM_APPLICATION_REVIEW,
    PERM_CAMPAIGN_MANAGE,
    PERM_CAMPAIGN_VIEW,
    PERM_LISTING_APPLY,
    PERM_MESSAGE_SEND,
    PERM_RECEIPT_SUBMIT,
    PERM_REWARD_REDEEM,
    PERM_TRANSACTION_SIMULATE,
    PERM_WALLET_VIEW,
)
from marketplace import catalog, rules
from marketplace.services import campaigns, leaderboard, listings, loyalty, transactions, whatsapp
from marketplace.services.campaigns import CampaignError
from marketplace.services.listings import ApplicationError
from marketplace.services.loyalty import LoyaltyError
from marketplace.services.transactions import TransactionError

logger = logging.getLogger("baskit.audit")


def _store_disabled_response() -> Response:
    return Response(
        {"errors": {"store": "Order store is disabled."}},
        status=501,
    )


def _actor(request) -> Dict[str, Any]:
    return {
        "user_id": getattr(request.user, "user_id", None),
        "username": getattr(request.user, "username", None),
    }


def _parse_positive_number(value: Any, field_name: str, errors: Dict[str, str], integer: bool = False):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors[field_name] = "Must be a positive number."
        return None
    if integer and not isinstance(value, int):
        errors[field_name] = "Must be an integer."
        return None
    if value <= 0:
        errors[field_name] = "Must be a positive number."
        return None
    return value


def _parse_requested_items(raw_items: Any, errors: Dict[str, str]) -> List[Dict[str, Any]]:
    if not isinstance(raw_items, list) or not raw_items:
        errors["items"] = "Expected a non-empty list of items."
        return []
    items = []
    for index, raw in enumerate(raw_items):
        prefix = f"items[{index}]"
        if not isinstance(raw, dict):
            errors[prefix] = "Expected an object."
            continue
        if not str(raw.get("sku") or "").strip() and not str(raw.get("product_name") or "").strip():
            errors[f"{prefix}.sku"] = "An SKU or product name is required."
        quantity = _parse_positive_number(raw.get("quantity"), f"{prefix}.quantity", errors, integer=True)
        items.append(
            {
                "sku": str(raw.get("sku") or "").strip(),
                "product_name": str(raw.get("product_name") or "").strip(),
                "quantity": quantity,
            }
        )
    return items


def _live_campaigns():
    try:
        return campaigns.list_campaigns()
    except RuntimeError:
        return None


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def listing_list(request):
    params = request.query_params
    results = listings.list_listings(
        search=params.get("search", ""),
        region=params.get("region", ""),
        category=params.get("category", ""),
        campaigns=_live_campaigns(),
    )
    return Response(
        {
            "listings": results,
            "count": len(results),
            "regions": listings.listing_regions(),
            "categories": listings.listing_categories(),
        }
    )


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def leaderboard_view(request):
    category = request.query_params.get("category", "overall")
    try:
        entries = leaderboard.leaderboard(category)
    except ValueError:
        return Response(
            {"errors": {"category": f"Must be one of: {', '.join(rules.LEADERBOARD_CATEGORIES)}."}},
            status=400,
        )
    return Response({"category": category, "entries": entries})


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def reward_list(request):
    return Response({"rewards": catalog.REWARDS, "count": len(catalog.REWARDS)})


@api_view(["GET", "POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def real_supplier_list(request):
    """
    GET scores suppliers against the demo request; POST scores them against
    {"items": [{"sku", "product_name", "quantity"}]}.
    """
    requested_items = None
    if request.method == "POST":
        errors: Dict[str, str] = {}
        requested_items = _parse_requested_items((request.data or {}).get("items"), errors)
        if errors:
            return Response({"errors": errors}, status=400)
    params = request.query_params
    suppliers = transactions.list_real_suppliers(
        requested_items,
        search=params.get("search", ""),
        region=params.get("region", ""),
    )
    return Response(
        {
            "suppliers": suppliers,
            "count": len(suppliers),
            "requested_items": requested_items or catalog.DEMO_REQUESTED_ITEMS,
            "ecosystem_urls": catalog.ECOSYSTEM_URLS,
        }
    )


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def real_supplier_detail(request, supplier_id: str):
    supplier = catalog.get_real_supplier(supplier_id)
    if supplier is None:
        return Response({"errors": {"supplier_id": "Not found."}}, status=404)
    whatsapp_link = whatsapp.wa_link(
        supplier["contact_info"]["whatsapp"], catalog.WHATSAPP_TEMPLATES["order"][0]
    )
    return Response({**supplier, "whatsapp_link": whatsapp_link})


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def whatsapp_templates(request):
    try:
        result = whatsapp.templates(request.query_params.get("type") or None)
    except ValueError:
        return Response(
            {"errors": {"type": f"Must be one of: {', '.join(sorted(catalog.WHATSAPP_TEMPLATES))}."}},
            status=400,
        )
    return Response({"templates": result})


@api_view(["GET", "POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def listing_applications(request, listing_id: str):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    if catalog.get_listing(listing_id) is None:
        return Response({"errors": {"listing_id": "Not found."}}, status=404)

    if request.method == "GET":
        applications = listings.list_applications(listing_id=listing_id)
        return Response({"applications": applications, "count": len(applications)})

    payload = request.data or {}
    errors: Dict[str, str] = {}
    quantity = _parse_positive_number(payload.get("proposed_quantity"), "proposed_quantity", errors, integer=True)
    price = _parse_positive_number(payload.get("proposed_price"), "proposed_price", errors)
    distributor_id = str(payload.get("distributor_id") or "")
    if catalog.get_distributor(distributor_id) is None:
        errors["distributor_id"] = "Unknown distributor."
    if errors:
        return Response({"errors": errors}, status=400)

    try:
        application = listings.apply_to_listing(
            listing_id, distributor_id, quantity, price, str(payload.get("message") or "")
        )
    except ApplicationError as exc:
        return Response({"errors": {"listing_id": exc.message}}, status=404)

    logger.info(
        "listing_apply",
        extra={
            "event_type": "CREATE",
            "listing_id": listing_id,
            "application_id": application["id"],
            **_actor(request),
        },
    )
    return Response(application, status=201)


@api_view(["PATCH"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def application_review(request, application_id: str):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    decision = str((request.data or {}).get("decision") or "").strip().lower()
    if decision not in ("approved", "rejected"):
        return Response({"errors": {"decision": "Must be approved or rejected."}}, status=400)

    try:
        application = listings.review_application(application_id, decision)
    except ApplicationError as exc:
        if exc.code == "not_found":
            return Response({"errors": {"application_id": "Not found."}}, status=404)
        return Response({"errors": {"decision": exc.message}}, status=409)

    logger.info(
        "application_review",
        extra={"event_type": "UPDATE", "application_id": application_id, "decision": decision, **_actor(request)},
    )
    return Response(application)


@api_view(["GET", "POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def receipt_collection(request):
    """
    GET lists the caller's receipts. POST uploads one:
    {"photo", "phone_number", "brand_id", "sku", "amount"}.
    """
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    user_id = request.user.user_id
    if request.method == "GET":
        receipts = loyalty.list_receipts(uploader_id=user_id)
        return Response({"receipts": receipts, "count": len(receipts)})

    payload = request.data or {}
    errors = loyalty.validate_receipt(payload)
    if errors:
        return Response({"errors": errors}, status=400)

    roles = getattr(request.user, "roles", None) or ["distributor"]
    result = loyalty.submit_receipt(user_id, str(roles[0]).lower(), payload)
    logger.info(
        "receipt_upload",
        extra={
            "event_type": "CREATE",
            "receipt_id": result["receipt"]["id"],
            "points": result["receipt"]["points_earned"],
            **_actor(request),
        },
    )
    return Response(result, status=201)


@api_view(["GET"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def wallet_view(request):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    summary = loyalty.wallet_summary(loyalty.get_wallet(request.user.user_id))
    return Response({**summary, "rewards": loyalty.rewards_for_balance(summary["balance"])})


@api_view(["POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def wallet_redeem(request):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    reward_id = str((request.data or {}).get("reward_id") or "")
    try:
        wallet = loyalty.redeem_reward(request.user.user_id, reward_id)
    except LoyaltyError as exc:
        if exc.code == "not_found":
            return Response({"errors": {"reward_id": exc.message}}, status=404)
        return Response({"errors": {"points": exc.message}}, status=409)

    logger.info(
        "reward_redeem",
        extra={"event_type": "UPDATE", "reward_id": reward_id, **_actor(request)},
    )
    return Response(loyalty.wallet_summary(wallet))


@api_view(["GET", "POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def campaign_collection(request):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    if request.method == "GET":
        params = request.query_params
        items = campaigns.list_campaigns(brand_id=params.get("brand_id"), status=params.get("status"))
        return Response({"campaigns": items, "count": len(items), "stats": campaigns.campaign_stats(items)})

    payload = request.data or {}
    errors = campaigns.validate_campaign_payload(payload)
    if errors:
        return Response({"errors": errors}, status=400)
    campaign = campaigns.create_campaign(payload)
    logger.info(
        "campaign_create",
        extra={"event_type": "CREATE", "campaign_id": campaign["id"], "brand_id": campaign["brand_id"], **_actor(request)},
    )
    return Response(campaign, status=201)


def _campaign_error_response(exc: CampaignError) -> Response:
    if exc.code == "not_found":
        return Response({"errors": {"campaign_id": "Not found."}}, status=404)
    return Response({"errors": {"status": exc.message}}, status=409)


@api_view(["POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def campaign_toggle(request, campaign_id: str):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    try:
        campaign = campaigns.toggle_campaign(campaign_id)
    except CampaignError as exc:
        return _campaign_error_response(exc)

    logger.info(
        "campaign_toggle",
        extra={"event_type": "UPDATE", "campaign_id": campaign_id, "status": campaign["status"], **_actor(request)},
    )
    return Response(campaign)


@api_view(["PATCH"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def campaign_status(request, campaign_id: str):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    target = str((request.data or {}).get("status") or "").strip().lower()
    if target not in rules.CAMPAIGN_STATUSES:
        return Response(
            {"errors": {"status": f"Must be one of: {', '.join(rules.CAMPAIGN_STATUSES)}."}},
            status=400,
        )
    try:
        campaign = campaigns.transition_campaign(campaign_id, target)
    except CampaignError as exc:
        return _campaign_error_response(exc)

    logger.info(
        "campaign_status",
        extra={"event_type": "UPDATE", "campaign_id": campaign_id, "status": target, **_actor(request)},
    )
    return Response(campaign)


@api_view(["POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def transaction_simulate(request):
    """
    Simulate a purchase from a real supplier.
    Body: {"supplier_id": "IDF-001", "items": [{"sku", "quantity"}], "address": "..."}
    """
    payload = request.data or {}
    errors: Dict[str, str] = {}
    items = _parse_requested_items(payload.get("items"), errors)
    if errors:
        return Response({"errors": errors}, status=400)

    buyer = {
        "id": request.user.user_id,
        "name": getattr(request.user, "username", None),
        "address": payload.get("address") or None,
    }
    try:
        transaction = transactions.simulate_transaction(str(payload.get("supplier_id") or ""), items, buyer)
    except TransactionError as exc:
        field = "supplier_id" if exc.code == "supplier_not_found" else "items"
        return Response({"errors": {field: exc.message}}, status=404)

    logger.info(
        "transaction_simulate",
        extra={
            "event_type": "CREATE",
            "transaction_id": transaction["id"],
            "supplier_id": transaction["supplier"]["id"],
            **_actor(request),
        },
    )
    return Response(transaction, status=201)


@api_view(["GET", "POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def message_collection(request):
    """
    GET lists recorded messages (?type=). POST records an outgoing order or
    promo message: {"phone", "message", "type"}. Instead of "message", an
    order may pass {"product_name", "quantity"} and a promo {"campaign_id"}.
    """
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    if request.method == "GET":
        message_type = request.query_params.get("type", "all")
        if message_type != "all" and message_type not in rules.MESSAGE_TYPES:
            return Response({"errors": {"type": "Unknown message type."}}, status=400)
        messages = whatsapp.list_messages(message_type)
        return Response({"messages": messages, "count": len(messages), "stats": whatsapp.message_stats(messages)})

    payload = request.data or {}
    errors: Dict[str, str] = {}
    phone = str(payload.get("phone") or "").strip()
    text = str(payload.get("message") or "").strip()
    message_type = str(payload.get("type") or "")
    if not phone:
        errors["phone"] = "Phone is required."
    if message_type not in rules.OUTGOING_MESSAGE_TYPES:
        errors["type"] = f"Must be one of: {', '.join(rules.OUTGOING_MESSAGE_TYPES)}."
    elif not text:
        # Without explicit text, build it from the order or campaign.
        if message_type == "order" and payload.get("product_name"):
            quantity = _parse_positive_number(payload.get("quantity"), "quantity", errors, integer=True)
            if quantity is not None:
                text = whatsapp.order_message(str(payload["product_name"]), quantity)
        elif message_type == "promo" and payload.get("campaign_id"):
            campaign = campaigns.get_campaign(str(payload["campaign_id"]))
            if campaign is None:
                errors["campaign_id"] = "Unknown campaign."
            else:
                text = whatsapp.promo_message(campaign)
        else:
            errors["message"] = "Message is required."
    if errors:
        return Response({"errors": errors}, status=400)

    result = whatsapp.send_message(phone, text, message_type)
    logger.info(
        "message_send",
        extra={"event_type": "CREATE", "message_id": result["message"]["id"], "type": message_type, **_actor(request)},
    )
    return Response(result, status=201)


listing_applications.required_permission = {
    "GET": PERM_APPLICATION_REVIEW,
    "POST": PERM_LISTING_APPLY,
}
application_review.required_permission = PERM_APPLICATION_REVIEW
receipt_collection.required_permission = {
    "GET": PERM_WALLET_VIEW,
    "POST": PERM_RECEIPT_SUBMIT,
}
wallet_view.required_permission = PERM_WALLET_VIEW
wallet_redeem.required_permission = PERM_REWARD_REDEEM
campaign_collection.required_permission = {
    "GET": PERM_CAMPAIGN_VIEW,
    "POST": PERM_CAMPAIGN_MANAGE,
}
campaign_toggle.required_permission = PERM_CAMPAIGN_MANAGE
campaign_status.required_permission = PERM_CAMPAIGN_MANAGE
transaction_simulate.required_permission = PERM_TRANSACTION_SIMULATE
message_collection.required_permission = PERM_MESSAGE_SEND

for view_func in (
    listing_applications,
    application_review,
    receipt_collection,
    wallet_view,
    wallet_redeem,
    campaign_collection,
    campaign_toggle,
    campaign_status,
    transaction_simulate,
    message_collection,
):
    if hasattr(view_func, "cls"):
        view_func.cls.required_permission = view_func.required_permission
