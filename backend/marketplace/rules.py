import os
from typing import Dict


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer for {name}: {raw!r}") from exc


# Receipts: one point per RUPIAH_PER_POINT spent, plus a campaign bonus.
RUPIAH_PER_POINT = _env_int("LOYALTY_RUPIAH_PER_POINT", 1000)
CAMPAIGN_BONUS_RATE = 0.5

CAMPAIGN_STATUSES = ("draft", "active", "paused", "completed")

CAMPAIGN_DEFAULT_POINTS_PER_RECEIPT = 100
CAMPAIGN_DEFAULT_BONUS_MULTIPLIER = 1

# Leaderboard score weights.
LEADERBOARD_WEIGHTS: Dict[str, int] = {
    "fulfillment": 10,
    "receipts": 5,
    "campaigns": 15,
}
LEADERBOARD_CATEGORIES = ("overall", "fulfillment", "receipts", "campaigns")

# Transaction risk scoring.
RISK_BASE_SCORE = 100
RISK_RATING_WEIGHT = 10
RISK_AMOUNT_PENALTIES = (
    (50_000_000, 20),
    (10_000_000, 10),
    (1_000_000, 5),
)
RISK_INTEGRATION_BONUS = 5
RISK_BUYER_FACTOR = 10
RISK_LOW_THRESHOLD = 80
RISK_MEDIUM_THRESHOLD = 60

TRANSACTION_CARRIER = "JNE Express"
TRANSACTION_CURRENCY = "IDR"
TRANSACTION_PAYMENT_METHOD = "transfer"
TRANSACTION_DELIVERY_DAYS = 3
DEFAULT_BUYER_ADDRESS = "Jl. Sudirman Kav. 25, Jakarta Selatan 12920"

SIMULATION_STEPS = (
    {"status": "pending", "label": "Order Created"},
    {"status": "processing", "label": "Supplier Confirmation"},
    {"status": "processing", "label": "Payment Processing"},
    {"status": "completed", "label": "Order Confirmed"},
)

MESSAGE_TYPES = ("order", "promo", "confirmation", "notification")
OUTGOING_MESSAGE_TYPES = ("order", "promo")
MESSAGE_STATUSES = ("sent", "delivered", "read", "failed")
