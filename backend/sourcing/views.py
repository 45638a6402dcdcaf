import logging
import re
from datetime import date
from typing import Any, Dict, List

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from api import store
from api.authentication import BaskitTokenAuthentication
from api.permissions import BaskitPermission
from api.rbac import (
    PERM_DEMAND_VIEW,
    PERM_PURCHASE_ORDER_CREATE,
    PERM_PURCHASE_ORDER_IMPORT,
    PERM_PURCHASE_ORDER_UPDATE,
    PERM_PURCHASE_ORDER_VIEW,
    PERM_SHORTLIST_MANAGE,
)
from sourcing import catalog, rules
from sourcing.services import demand_board, matching, ranking, shortlist
from sourcing.services import purchase_orders
from sourcing.services.purchase_orders import PurchaseOrderError
from sourcing.services.sales_orders import SalesOrderError, load_sales_order
from sourcing.services.shortlist import ShortlistError

logger = logging.getLogger("baskit.audit")


def _store_disabled_response() -> Response:
    return Response(
        {"errors": {"store": "Order store is disabled."}},
        status=501,
    )


def _parse_positive_int(value: Any, field_name: str, errors: Dict[str, str]) -> int | None:
    if isinstance(value, (bool, float)):
        errors[field_name] = "Must be an integer."
        return None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or not re.fullmatch(r"[+-]?\d+", stripped):
            errors[field_name] = "Must be an integer."
            return None
        value = stripped
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        errors[field_name] = "Must be an integer."
        return None
    if parsed <= 0:
        errors[field_name] = "Must be a positive integer."
        return None
    return parsed


def _parse_items(raw_items: Any, errors: Dict[str, str], required: bool = False) -> List[Dict[str, Any]]:
    if raw_items in (None, "") and not required:
        return []
    if not isinstance(raw_items, list):
        errors["items"] = "Expected a list of items."
        return []
    if required and not raw_items:
        errors["items"] = "At least one item is required."
        return []

    items = []
    for index, raw in enumerate(raw_items):
        prefix = f"items[{index}]"
        if not isinstance(raw, dict):
            errors[prefix] = "Expected an object."
            continue
        product_name = str(raw.get("product_name") or "").strip()
        if not product_name:
            errors[f"{prefix}.product_name"] = "Product name is required."
        quantity = _parse_positive_int(raw.get("quantity"), f"{prefix}.quantity", errors)
        target_price = raw.get("target_price")
        if target_price not in (None, ""):
            if isinstance(target_price, bool) or not isinstance(target_price, (int, float)) or target_price < 0:
                errors[f"{prefix}.target_price"] = "Must be a non-negative number."
                target_price = None
        else:
            target_price = None
        items.append(
            {
                "id": str(raw.get("id") or index + 1),
                "product_name": product_name,
                "quantity": quantity,
                "target_price": target_price,
                "unit": raw.get("unit") or None,
            }
        )
    return items


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _parse_profile(raw: Any, errors: Dict[str, str]) -> Dict[str, Any] | None:
    """Validate a supplier profile posted to the demand board."""
    if raw in (None, ""):
        raw = {}
    if not isinstance(raw, dict):
        errors["profile"] = "Expected an object."
        return None

    raw_capabilities = raw.get("capabilities") or []
    if not isinstance(raw_capabilities, list):
        errors["profile.capabilities"] = "Expected a list of capabilities."
        raw_capabilities = []
    capabilities = []
    for index, capability in enumerate(raw_capabilities):
        prefix = f"profile.capabilities[{index}]"
        if not isinstance(capability, dict):
            errors[prefix] = "Expected an object."
            continue
        product_name = capability.get("product_name")
        if not isinstance(product_name, str) or not product_name.strip():
            errors[f"{prefix}.product_name"] = "Product name is required."
        min_quantity = capability.get("min_quantity")
        if min_quantity is None:
            min_quantity = 0
        elif not _is_count(min_quantity):
            errors[f"{prefix}.min_quantity"] = "Must be a non-negative integer."
        max_quantity = capability.get("max_quantity")
        if max_quantity is not None:
            if not _is_count(max_quantity):
                errors[f"{prefix}.max_quantity"] = "Must be a non-negative integer."
            elif _is_count(min_quantity) and max_quantity < min_quantity:
                errors[f"{prefix}.max_quantity"] = "Must not be below min_quantity."
        unit_price = capability.get("unit_price")
        if unit_price is not None and (
            isinstance(unit_price, bool) or not isinstance(unit_price, (int, float)) or unit_price < 0
        ):
            errors[f"{prefix}.unit_price"] = "Must be a non-negative number."
        capabilities.append(
            {
                "product_name": str(product_name or "").strip(),
                "min_quantity": min_quantity,
                "max_quantity": max_quantity,
                "unit_price": unit_price,
            }
        )

    service_areas = raw.get("service_areas") or []
    if not isinstance(service_areas, list) or not all(isinstance(area, str) for area in service_areas):
        errors["profile.service_areas"] = "Expected a list of strings."
        service_areas = []

    order_size = raw.get("order_size") or None
    if order_size is not None and not isinstance(order_size, str):
        errors["profile.order_size"] = "Expected a string."
        order_size = None

    return {"capabilities": capabilities, "service_areas": service_areas, "order_size": order_size}


def _actor(request) -> Dict[str, Any]:
    return {
        "user_id": getattr(request.user, "user_id", None),
        "username": getattr(request.user, "username", None),
    }


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def supplier_list(request):
    suppliers = [supplier.to_dict() for supplier in catalog.SUPPLIERS]
    return Response({"suppliers": suppliers, "count": len(suppliers)})


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def supplier_search(request):
    """
    Find suppliers covering at least one requested item and rank them.
    Body: {"items": [...], "sort_by": "ai-recommendation"}
    """
    payload = request.data or {}
    errors: Dict[str, str] = {}
    items = _parse_items(payload.get("items"), errors)
    sort_by = payload.get("sort_by") or request.query_params.get("sort_by")
    if sort_by is not None and str(sort_by).strip().lower() not in rules.SORT_MODES:
        errors["sort_by"] = f"Must be one of: {', '.join(rules.SORT_MODES)}."
    if errors:
        return Response({"errors": errors}, status=400)

    suppliers = matching.find_suppliers(items)
    ranked = ranking.rank_suppliers(suppliers, items, sort_by)
    return Response(
        {
            "suppliers": ranked,
            "count": len(ranked),
            "sort_by": str(sort_by or rules.get_default_sort_mode()).strip().lower(),
        }
    )


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def supplier_detail(request, supplier_id: str):
    supplier = catalog.get_supplier(supplier_id)
    if supplier is None:
        return Response({"errors": {"supplier_id": "Not found."}}, status=404)
    summary = ranking.supplier_summary(supplier, [])
    summary["shipping_preview"] = summary["shipping_options"][: rules.SHIPPING_PREVIEW_COUNT]
    return Response(summary)


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def supplier_contact(request, supplier_id: str):
    supplier = catalog.get_supplier(supplier_id)
    if supplier is None:
        return Response({"errors": {"supplier_id": "Not found."}}, status=404)
    return Response(
        {
            "supplier_id": supplier.id,
            "email": supplier.contact_email,
            "phone": supplier.phone,
            "mailto": shortlist.contact_mailto(supplier),
        }
    )


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def sales_order_import(request, so_id: str):
    try:
        sales_order = load_sales_order(so_id)
    except SalesOrderError as exc:
        return Response({"errors": {"sales_order_id": exc.message}}, status=404)
    return Response(sales_order)


@api_view(["GET", "POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def shortlist_collection(request):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    user_id = request.user.user_id
    if request.method == "GET":
        items = shortlist.list_shortlist(user_id)
        return Response({"items": items, "count": len(items)})

    payload = request.data or {}
    try:
        entry = shortlist.add_to_shortlist(user_id, payload.get("supplier_id"), payload.get("notes") or "")
    except ShortlistError as exc:
        status = 404 if exc.code == "supplier_not_found" else 409
        return Response({"errors": {"supplier_id": exc.message}}, status=status)

    logger.info(
        "shortlist_add",
        extra={"event_type": "CREATE", "supplier_id": entry["supplier_id"], **_actor(request)},
    )
    return Response(entry, status=201)


@api_view(["DELETE"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def shortlist_remove(request, supplier_id: str):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    if not shortlist.remove_from_shortlist(request.user.user_id, supplier_id):
        return Response({"errors": {"supplier_id": "Not in shortlist."}}, status=404)
    logger.info(
        "shortlist_remove",
        extra={"event_type": "UPDATE", "supplier_id": supplier_id, **_actor(request)},
    )
    return Response(status=204)


def _parse_order_request(payload: Dict[str, Any]) -> tuple[catalog.Supplier | None, List[Dict[str, Any]], str | None, Dict[str, str]]:
    errors: Dict[str, str] = {}
    supplier = catalog.get_supplier(str(payload.get("supplier_id") or ""))
    if supplier is None:
        errors["supplier_id"] = "Unknown supplier."
    items = _parse_items(payload.get("items"), errors, required=True)

    sales_order_id = payload.get("sales_order_id")
    if sales_order_id:
        try:
            sales_order_id = load_sales_order(sales_order_id)["sales_order_id"]
        except SalesOrderError as exc:
            errors["sales_order_id"] = exc.message
    else:
        sales_order_id = None
    return supplier, items, sales_order_id, errors


def _order_user(request) -> Dict[str, Any]:
    return {
        "name": getattr(request.user, "username", None) or "",
        "email": getattr(request.user, "email", None) or "",
    }


@api_view(["GET", "POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def purchase_order_collection(request):
    """
    GET lists stored orders. Query params: search, status, date_filter,
    sort_by, sort_order.
    POST creates an order from {"supplier_id", "items", "sales_order_id"}.
    """
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    if request.method == "GET":
        params = request.query_params
        date_filter = params.get("date_filter", "All")
        if date_filter not in rules.PO_DATE_FILTERS:
            return Response(
                {"errors": {"date_filter": f"Must be one of: {', '.join(rules.PO_DATE_FILTERS)}."}},
                status=400,
            )
        orders = purchase_orders.list_purchase_orders()
        try:
            filtered = purchase_orders.filter_orders(
                orders,
                search=params.get("search", ""),
                status=params.get("status", "All"),
                date_filter=date_filter,
                sort_by=params.get("sort_by", "order_date"),
                sort_order=params.get("sort_order", "desc"),
            )
        except ValueError as exc:
            return Response({"errors": {"query": str(exc)}}, status=400)
        return Response(
            {
                "orders": filtered,
                "count": len(filtered),
                "stats": purchase_orders.order_stats(orders),
            }
        )

    supplier, items, sales_order_id, errors = _parse_order_request(request.data or {})
    if errors:
        return Response({"errors": errors}, status=400)

    order = purchase_orders.create_purchase_order(supplier, items, _order_user(request), sales_order_id)
    logger.info(
        "purchase_order_create",
        extra={
            "event_type": "CREATE",
            "po_number": order["po_number"],
            "supplier_id": supplier.id,
            "sales_order_id": sales_order_id,
            **_actor(request),
        },
    )
    return Response(order, status=201)


@api_view(["POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def purchase_order_handoff(request):
    """Build an unsaved order and return it with its handoff string."""
    supplier, items, sales_order_id, errors = _parse_order_request(request.data or {})
    if errors:
        return Response({"errors": errors}, status=400)

    try:
        existing = purchase_orders.list_purchase_orders()
    except RuntimeError:
        existing = []
    today = date.today()
    order = purchase_orders.build_purchase_order(
        supplier,
        items,
        _order_user(request),
        sales_order_id=sales_order_id,
        today=today,
        po_number=purchase_orders.generate_po_number(existing, today),
    )
    return Response({"order": order, "handoff": purchase_orders.encode_handoff(order)})


@api_view(["POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def purchase_order_import(request):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    try:
        order = purchase_orders.import_handoff((request.data or {}).get("handoff"))
    except PurchaseOrderError as exc:
        status = 409 if exc.code == "duplicate" else 400
        return Response({"errors": {"handoff": exc.message}}, status=status)

    logger.info(
        "purchase_order_import",
        extra={"event_type": "CREATE", "po_number": order["po_number"], **_actor(request)},
    )
    return Response(order, status=201)


@api_view(["GET"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def purchase_order_get(request, po_number: str):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    order = purchase_orders.get_purchase_order(po_number)
    if order is None:
        return Response({"errors": {"po_number": "Not found."}}, status=404)
    return Response(order)


@api_view(["PATCH"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def purchase_order_status(request, po_number: str):
    try:
        store.store_enabled_or_raise()
    except RuntimeError:
        return _store_disabled_response()

    target = str((request.data or {}).get("status") or "").strip()
    if target not in rules.PO_STATUSES:
        return Response(
            {"errors": {"status": f"Must be one of: {', '.join(rules.PO_STATUSES)}."}},
            status=400,
        )

    try:
        order = purchase_orders.transition_status(po_number, target)
    except PurchaseOrderError as exc:
        if exc.code == "not_found":
            return Response({"errors": {"po_number": "Not found."}}, status=404)
        return Response({"errors": {"status": exc.message}}, status=409)

    logger.info(
        "purchase_order_status",
        extra={"event_type": "UPDATE", "po_number": po_number, "status": target, **_actor(request)},
    )
    return Response(order)


@api_view(["GET", "POST"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def demand_list(request):
    """
    Demand board. GET filters with query params; POST additionally accepts a
    supplier profile {"capabilities", "service_areas", "order_size"}.
    """
    source = request.query_params if request.method == "GET" else (request.data or {})
    profile = None
    if request.method == "POST":
        errors: Dict[str, str] = {}
        profile = _parse_profile(source.get("profile"), errors)
        if errors:
            return Response({"errors": errors}, status=400)

    sort_by = source.get("sort_by") or None
    if sort_by is not None and sort_by not in rules.DEMAND_SORT_MODES:
        return Response(
            {"errors": {"sort_by": f"Must be one of: {', '.join(rules.DEMAND_SORT_MODES)}."}},
            status=400,
        )
    urgency = source.get("urgency") or "all"
    if urgency != "all" and urgency not in rules.URGENCY_ORDER:
        return Response({"errors": {"urgency": "Unknown urgency."}}, status=400)

    demands = demand_board.list_demands(
        profile=profile,
        search=source.get("search") or "",
        urgency=urgency,
        status=source.get("status") or "all",
        sort_by=sort_by,
    )
    return Response({"demands": demands, "count": len(demands), "stats": demand_board.demand_stats(demands)})


@api_view(["GET"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def demand_quotes(request, demand_id: str):
    if demand_board.get_demand(demand_id) is None:
        return Response({"errors": {"demand_id": "Not found."}}, status=404)
    quotes = demand_board.quotes_for_demand(demand_id)
    return Response({"quotes": quotes, "count": len(quotes)})


shortlist_collection.required_permission = PERM_SHORTLIST_MANAGE
shortlist_remove.required_permission = PERM_SHORTLIST_MANAGE
purchase_order_collection.required_permission = {
    "GET": PERM_PURCHASE_ORDER_VIEW,
    "POST": PERM_PURCHASE_ORDER_CREATE,
}
purchase_order_handoff.required_permission = PERM_PURCHASE_ORDER_CREATE
purchase_order_import.required_permission = PERM_PURCHASE_ORDER_IMPORT
purchase_order_get.required_permission = PERM_PURCHASE_ORDER_VIEW
purchase_order_status.required_permission = PERM_PURCHASE_ORDER_UPDATE
demand_list.required_permission = PERM_DEMAND_VIEW
demand_quotes.required_permission = PERM_DEMAND_VIEW

for view_func in (
    shortlist_collection,
    shortlist_remove,
    purchase_order_collection,
    purchase_order_handoff,
    purchase_order_import,
    purchase_order_get,
    purchase_order_status,
    demand_list,
    demand_quotes,
):
    if hasattr(view_func, "cls"):
        view_func.cls.required_permission = view_func.required_permission
