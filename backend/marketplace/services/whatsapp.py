from __future__ import annotations

import copy
import logging
import re
from typing import Dict, List, Mapping, Sequence
from urllib.parse import quote

from api import store
from marketplace import catalog, rules

logger = logging.getLogger(__name__)

COLLECTION = "messages"


def _seed_messages() -> Dict[str, object]:
    return {message["id"]: copy.deepcopy(message) for message in catalog.SEED_MESSAGES}


store.register_seed(COLLECTION, _seed_messages)


def wa_link(phone: str, message: str) -> str:
    digits = re.sub(r"\D", "", str(phone or ""))
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"


def templates(kind: str | None = None) -> Dict[str, List[str]]:
    if kind is None:
        return copy.deepcopy(catalog.WHATSAPP_TEMPLATES)
    if kind not in catalog.WHATSAPP_TEMPLATES:
        raise ValueError(f"unknown template type, expected one of: {sorted(catalog.WHATSAPP_TEMPLATES)}")
    return {kind: list(catalog.WHATSAPP_TEMPLATES[kind])}


def order_message(product_name: str, quantity: int, unit: str = "cartons") -> str:
    return (
        f"Hi! I'd like to order {quantity} {unit} of {product_name}. "
        "Please confirm availability and delivery schedule."
    )


def promo_message(campaign: Mapping[str, object]) -> str:
    return (
        f"\U0001f389 {campaign.get('name')} is live! Upload receipts for featured products "
        f"and earn {campaign.get('points_per_receipt')} points per receipt until {campaign.get('end_date')}."
    )


def receipt_confirmation(receipt_id: str, points: int) -> str:
    return (
        f"Thank you for uploading your receipt! You earned {points} loyalty points. "
        f"Receipt ID: {receipt_id}"
    )


def _next_id(existing: Sequence[Mapping[str, object]]) -> str:
    highest = 0
    for record in existing:
        if re.fullmatch(r"\d+", str(record.get("id") or "")):
            highest = max(highest, int(record["id"]))
    return str(highest + 1)


def build_message(
    existing: Sequence[Mapping[str, object]],
    phone: str,
    message: str,
    message_type: str,
    status: str = "sent",
    related_receipt_id: str | None = None,
    related_campaign_id: str | None = None,
) -> Dict[str, object]:
    """Validate and build a message record numbered after ``existing``."""
    if message_type not in rules.MESSAGE_TYPES:
        raise ValueError(f"invalid message type, expected one of: {list(rules.MESSAGE_TYPES)}")
    if status not in rules.MESSAGE_STATUSES:
        raise ValueError(f"invalid message status, expected one of: {list(rules.MESSAGE_STATUSES)}")
    return {
        "id": _next_id(existing),
        "phone": phone,
        "message": message,
        "type": message_type,
        "status": status,
        "sent_at": store.utc_now(),
        "related_receipt_id": related_receipt_id,
        "related_campaign_id": related_campaign_id,
    }


def record_message(
    phone: str,
    message: str,
    message_type: str,
    status: str = "sent",
    related_receipt_id: str | None = None,
    related_campaign_id: str | None = None,
) -> Dict[str, object]:
    return store.insert_record(
        COLLECTION,
        lambda existing: build_message(
            existing, phone, message, message_type, status, related_receipt_id, related_campaign_id
        ),
    )


def send_message(phone: str, message: str, message_type: str) -> Dict[str, object]:
    """Record an outgoing order or promo message and return it with its wa.me link."""
    if message_type not in rules.OUTGOING_MESSAGE_TYPES:
        raise ValueError(f"invalid message type, expected one of: {list(rules.OUTGOING_MESSAGE_TYPES)}")
    record = record_message(phone, message, message_type)
    logger.info("Queued %s message %s", message_type, record["id"])
    return {"message": record, "link": wa_link(phone, message)}


def list_messages(message_type: str = "all") -> List[Dict[str, object]]:
    messages = store.list_records(COLLECTION)
    if message_type != "all":
        messages = [m for m in messages if m.get("type") == message_type]
    return sorted(messages, key=lambda m: str(m.get("sent_at") or ""), reverse=True)


def message_stats(messages: Sequence[Mapping[str, object]]) -> Dict[str, int]:
    return {
        "total": len(messages),
        "delivered": sum(1 for m in messages if m.get("status") in ("delivered", "read")),
        "read": sum(1 for m in messages if m.get("status") == "read"),
        "failed": sum(1 for m in messages if m.get("status") == "failed"),
    }
