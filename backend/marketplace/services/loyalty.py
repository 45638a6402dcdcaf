"""
Receipt uploads, loyalty wallets and reward redemption.

Receipts are stored under ``receipts`` (keyed by ``RCP-NNN``), wallets under
``wallets`` keyed by user id. A wallet holds the running balance plus a
transaction log; earned entries are positive, redemptions negative.
"""
from __future__ import annotations

import copy
import logging
import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Sequence

from django.conf import settings

from api import store
from marketplace import catalog, rules
from marketplace.services import campaigns as campaign_service
from marketplace.services import whatsapp

logger = logging.getLogger(__name__)

RECEIPT_COLLECTION = "receipts"
WALLET_COLLECTION = "wallets"

_RECEIPT_ID_RE = re.compile(r"^RCP-(\d+)$")


class LoyaltyError(Exception):
    """Raised when a receipt or wallet operation fails."""

    def __init__(self, message: str, code: str = "loyalty_error"):
        self.message = message
        self.code = code
        super().__init__(message)


def _seed_receipts() -> Dict[str, object]:
    return {receipt["id"]: copy.deepcopy(receipt) for receipt in catalog.SEED_RECEIPTS}


store.register_seed(RECEIPT_COLLECTION, _seed_receipts)


def calculate_points(amount: float, sku: str | None = None) -> int:
    base = math.floor(amount / rules.RUPIAH_PER_POINT)
    bonus = math.floor(base * rules.CAMPAIGN_BONUS_RATE) if sku else 0
    return base + bonus


def validate_receipt(payload: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for field, label in (("photo", "Photo"), ("phone_number", "Phone number"), ("sku", "SKU")):
        if not str(payload.get(field) or "").strip():
            errors[field] = f"{label} is required."
    if catalog.get_brand(payload.get("brand_id")) is None:
        errors["brand_id"] = "Unknown brand."
    amount = payload.get("amount")
    if isinstance(amount, str):
        try:
            amount = float(amount)
        except ValueError:
            amount = None
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
        errors["amount"] = "Must be a positive number."
    return errors


def generate_receipt_id(existing: Sequence[Mapping[str, object]]) -> str:
    highest = 0
    for receipt in existing:
        match = _RECEIPT_ID_RE.match(str(receipt.get("id") or ""))
        if match:
            highest = max(highest, int(match.group(1)))
    return f"RCP-{highest + 1:03d}"


def list_receipts(uploader_id: str | None = None) -> List[Dict[str, object]]:
    receipts = store.list_records(RECEIPT_COLLECTION)
    if uploader_id is not None:
        receipts = [r for r in receipts if r.get("uploader_id") == str(uploader_id)]
    return sorted(receipts, key=lambda r: str(r.get("uploaded_at") or ""), reverse=True)


def _empty_wallet(user_id: str) -> Dict[str, object]:
    return {"user_id": user_id, "points": settings.LOYALTY_STARTING_POINTS, "transactions": []}


def get_wallet(user_id: str) -> Dict[str, object]:
    return store.get_record(WALLET_COLLECTION, user_id) or _empty_wallet(user_id)


def _find_wallet(existing: Sequence[Mapping[str, object]], user_id: str) -> Dict[str, object]:
    for wallet in existing:
        if wallet.get("user_id") == user_id:
            return copy.deepcopy(dict(wallet))
    return _empty_wallet(user_id)


def _ledger_entry(wallet: Mapping[str, object], kind: str, points: int, description: str, reference: str) -> Dict[str, object]:
    return {
        "id": f"TX-{len(wallet['transactions']) + 1:04d}",
        "type": kind,
        "points": points,
        "description": description,
        "reference": reference,
        "date": store.utc_now(),
    }


def _apply_credit(wallet: Dict[str, object], points: int, description: str, reference: str) -> Dict[str, object]:
    wallet["transactions"].append(_ledger_entry(wallet, "earned", points, description, reference))
    wallet["points"] += points
    return wallet


def credit_points(user_id: str, points: int, description: str, reference: str = "") -> Dict[str, object]:
    def build(existing):
        return _apply_credit(_find_wallet(existing, user_id), points, description, reference)

    return store.insert_record(WALLET_COLLECTION, build, key_field="user_id")


def redeem_reward(user_id: str, reward_id: str) -> Dict[str, object]:
    reward = catalog.get_reward(reward_id)
    if reward is None:
        raise LoyaltyError("Reward not found.", code="not_found")
    cost = int(reward["points_cost"])

    def build(existing):
        wallet = _find_wallet(existing, user_id)
        if wallet["points"] < cost:
            raise LoyaltyError(f"Need {cost - wallet['points']} more points", code="insufficient_points")
        wallet["transactions"].append(
            _ledger_entry(wallet, "redeemed", -cost, f"Redeemed {reward['name']}", str(reward["id"]))
        )
        wallet["points"] -= cost
        return wallet

    wallet = store.insert_record(WALLET_COLLECTION, build, key_field="user_id")
    logger.info("User %s redeemed reward %s", user_id, reward_id)
    return wallet


def _entry_date(entry: Mapping[str, object]) -> date | None:
    try:
        return datetime.fromisoformat(str(entry.get("date") or "")).date()
    except ValueError:
        return None


def wallet_summary(wallet: Mapping[str, object], today: date | None = None) -> Dict[str, object]:
    today = today or date.today()
    transactions = list(wallet.get("transactions") or [])
    earned = [t for t in transactions if t.get("type") == "earned"]
    redeemed = [t for t in transactions if t.get("type") == "redeemed"]
    this_month = 0
    for entry in earned:
        entry_date = _entry_date(entry)
        if entry_date and entry_date.year == today.year and entry_date.month == today.month:
            this_month += int(entry.get("points") or 0)
    return {
        "balance": wallet.get("points", 0),
        "total_earned": sum(int(t.get("points") or 0) for t in earned),
        "total_redeemed": abs(sum(int(t.get("points") or 0) for t in redeemed)),
        "earned_this_month": this_month,
        "transactions": sorted(transactions, key=lambda t: str(t.get("date") or ""), reverse=True),
    }


def rewards_for_balance(balance: int) -> List[Dict[str, object]]:
    rewards = []
    for reward in catalog.REWARDS:
        cost = int(reward["points_cost"])
        rewards.append({**reward, "can_redeem": balance >= cost, "points_needed": max(0, cost - balance)})
    return rewards


def submit_receipt(uploader_id: str, uploader_type: str, payload: Mapping[str, Any]) -> Dict[str, object]:
    """
    Store a verified receipt, credit the uploader's wallet and record the
    WhatsApp confirmation. All three are written in one store transaction,
    so a failure in any step persists none of them. Returns the receipt,
    wallet and message.
    """
    errors = validate_receipt(payload)
    if errors:
        field, message = next(iter(errors.items()))
        raise LoyaltyError(f"{field}: {message}", code="invalid")

    amount = float(payload["amount"])
    sku = str(payload["sku"]).strip()
    points = calculate_points(amount, sku)
    campaign = campaign_service.campaign_for_sku(sku, campaign_service.list_campaigns())

    def build_receipt(existing):
        now = store.utc_now()
        return {
            "id": generate_receipt_id(existing),
            "uploader_id": str(uploader_id),
            "uploader_type": uploader_type,
            "photo": str(payload["photo"]),
            "phone_number": str(payload["phone_number"]).strip(),
            "sku": sku,
            "brand_id": str(payload["brand_id"]),
            "amount": amount,
            "points_earned": points,
            "campaign_id": campaign["id"] if campaign else None,
            "status": "verified",
            "uploaded_at": now,
            "verified_at": now,
        }

    def apply(data):
        receipts = data.setdefault(RECEIPT_COLLECTION, {})
        wallets = data.setdefault(WALLET_COLLECTION, {})
        messages = data.setdefault(whatsapp.COLLECTION, {})

        receipt = build_receipt(list(receipts.values()))
        wallet = _apply_credit(
            _find_wallet(list(wallets.values()), str(uploader_id)),
            points,
            f"Receipt upload {receipt['id']}",
            receipt["id"],
        )
        message = whatsapp.build_message(
            list(messages.values()),
            receipt["phone_number"],
            whatsapp.receipt_confirmation(receipt["id"], points),
            "confirmation",
            related_receipt_id=receipt["id"],
            related_campaign_id=receipt["campaign_id"],
        )
        receipts[receipt["id"]] = receipt
        wallets[wallet["user_id"]] = wallet
        messages[message["id"]] = message
        return receipt, wallet, message

    receipt, wallet, message = store.transact(apply)
    logger.info("Receipt %s credited %s points to %s", receipt["id"], points, uploader_id)
    return {"receipt": receipt, "wallet": wallet_summary(wallet), "message": message}
