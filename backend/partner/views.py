from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response

from api.authentication import BaskitTokenAuthentication
from api.permissions import BaskitPermission
from api.rbac import PERM_PARTNER_PORTAL_VIEW
from partner import catalog
from partner.services import portal


@api_view(["GET"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def partner_overview(request):
    return Response(portal.overview())


@api_view(["GET"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def gt_account_list(request):
    """GT accounts. Query params: search (name, address, region), status."""
    status = request.query_params.get("status", "all")
    try:
        accounts = portal.list_gt_accounts(request.query_params.get("search", ""), status)
    except ValueError:
        return Response(
            {"errors": {"status": f"Must be one of: all, {', '.join(catalog.GT_STATUSES)}."}},
            status=400,
        )
    return Response({"accounts": accounts, "count": len(accounts)})


@api_view(["GET"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def partner_campaigns(request):
    items = portal.campaigns(request.query_params.get("status") or None)
    return Response({"campaigns": items, "count": len(items)})


@api_view(["GET"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([BaskitPermission])
def partner_risk_watch(request):
    return Response(portal.risk_watch())


partner_overview.required_permission = PERM_PARTNER_PORTAL_VIEW
gt_account_list.required_permission = PERM_PARTNER_PORTAL_VIEW
partner_campaigns.required_permission = PERM_PARTNER_PORTAL_VIEW
partner_risk_watch.required_permission = PERM_PARTNER_PORTAL_VIEW

for view_func in (partner_overview, gt_account_list, partner_campaigns, partner_risk_watch):
    if hasattr(view_func, "cls"):
        view_func.cls.required_permission = view_func.required_permission
