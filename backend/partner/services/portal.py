"""Partner portal read models: overview metrics, GT accounts and risk watch."""
from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from marketplace.services.transactions import risk_level
from partner import catalog


def format_currency(amount: float) -> str:
    if amount >= 1_000_000_000:
        return f"Rp{amount / 1_000_000_000:.1f}B"
    if amount >= 1_000_000:
        return f"Rp{amount / 1_000_000:.1f}M"
    return f"Rp{amount:,}"


def overview() -> Dict[str, object]:
    metrics = dict(catalog.PARTNER_METRICS)
    metrics["active_campaigns"] = sum(1 for c in catalog.PARTNER_CAMPAIGNS if c["status"] == "active")
    metrics["total_revenue_display"] = format_currency(metrics["total_revenue"])
    metrics["risk_level"] = risk_level(int(metrics["risk_score"]))
    return metrics


def list_gt_accounts(search: str = "", status: str = "all") -> List[Dict[str, object]]:
    if status != "all" and status not in catalog.GT_STATUSES:
        raise ValueError(f"invalid status, expected one of: {['all', *catalog.GT_STATUSES]}")
    term = str(search or "").strip().lower()
    results = []
    for account in catalog.GT_ACCOUNTS:
        if term and not any(term in str(account[field]).lower() for field in ("name", "address", "region")):
            continue
        if status != "all" and account["status"] != status:
            continue
        results.append({**account, "monthly_volume_display": format_currency(account["monthly_volume"])})
    return results


def campaigns(status: str | None = None) -> List[Dict[str, object]]:
    items = [dict(c) for c in catalog.PARTNER_CAMPAIGNS]
    if status:
        items = [c for c in items if c["status"] == status]
    for campaign in items:
        campaign["earnings_display"] = format_currency(campaign["earnings"])
    return items


def risk_watch(accounts: Sequence[Mapping[str, object]] | None = None) -> Dict[str, object]:
    accounts = catalog.GT_ACCOUNTS if accounts is None else accounts
    groups: Dict[str, List[Dict[str, object]]] = {level: [] for level in catalog.GT_RISK_LEVELS}
    for account in accounts:
        groups.setdefault(str(account["risk_level"]), []).append(
            {"id": account["id"], "name": account["name"], "region": account["region"]}
        )
    score = int(catalog.PARTNER_METRICS["risk_score"])
    return {
        "risk_score": score,
        "risk_level": risk_level(score),
        "counts": {level: len(members) for level, members in groups.items()},
        "accounts_by_level": groups,
    }
