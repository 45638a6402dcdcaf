import os
from typing import Dict, List, Tuple

# Ordered category rules for coverage matching. Evaluation stops at the first
# rule whose trigger keywords hit the requested product name.
CATEGORY_RULES: List[Dict[str, object]] = [
    {
        "category": "noodle",
        "triggers": (
            "indomie",
            "mie instan",
            "instant noodle",
            "instant noodles",
            "mie goreng",
            "soto ayam",
            "ayam bawang",
            "mie kuah",
            "noodle",
            "noodles",
            "mie",
        ),
        "accepts": ("instant noodles", "noodles", "mie", "snacks"),
    },
    {
        "category": "dairy",
        "triggers": ("bear brand", "susu bear", "susu steril", "white tea", "bear", "brand"),
        "accepts": ("dairy", "beverages", "susu", "dairy products"),
    },
    {
        "category": "motorcycle",
        "triggers": (
            "motor",
            "sepeda motor",
            "yamaha",
            "honda",
            "nmax",
            "vario",
            "motorcycle",
            "bike",
            "scooter",
        ),
        "accepts": ("motorcycles", "automotive", "motor"),
    },
    {
        "category": "snack",
        "triggers": ("chitato", "keripik", "snack", "makanan ringan", "chips"),
        "accepts": ("snacks", "makanan ringan"),
    },
    {
        "category": "beverage",
        "triggers": (
            "teh botol",
            "aqua",
            "minuman",
            "air mineral",
            "sosro",
            "dancow",
            "beverage",
            "drink",
            "tea",
            "water",
        ),
        "accepts": ("beverages", "minuman", "dairy products"),
    },
]

# Keyword groups that resolve a free-text request to a catalog product name.
# Within a group, the first product present in the supplier's table wins.
PRODUCT_KEYWORD_MAPPINGS: List[Dict[str, Tuple[str, ...]]] = [
    {
        "keywords": ("indomie", "mie instan", "instant noodle", "instant noodles", "noodle", "noodles", "mie"),
        "products": ("Indomie Goreng", "Indomie Soto Ayam", "Indomie Ayam Bawang"),
    },
    {
        "keywords": ("bear brand", "susu bear", "susu steril", "bear", "brand"),
        "products": ("Bear Brand Susu Steril", "Bear Brand Gold White Tea"),
    },
    {
        "keywords": ("yamaha", "nmax", "motor", "sepeda motor", "motorcycle"),
        "products": ("Yamaha NMAX 155",),
    },
    {
        "keywords": ("teh botol", "sosro", "teh"),
        "products": ("Teh Botol Sosro",),
    },
    {
        "keywords": ("aqua", "air mineral", "water"),
        "products": ("Aqua Botol 600ml",),
    },
    {
        "keywords": ("dancow", "susu bubuk"),
        "products": ("Dancow Fortigro",),
    },
    {
        "keywords": ("chitato", "keripik", "snack", "makanan ringan", "chips"),
        "products": ("Chitato Sapi Panggang",),
    },
]

DISTANCE_TABLE: Dict[str, Dict[str, object]] = {
    "Jakarta Selatan, DKI Jakarta": {
        "distance": 15,
        "estimated_time": "25-35 mins",
        "route": "Via Jl. Sudirman - Jl. Gatot Subroto",
    },
    "Jakarta Pusat, DKI Jakarta": {
        "distance": 8,
        "estimated_time": "15-25 mins",
        "route": "Via Jl. MH Thamrin - Jl. Sudirman",
    },
    "Jakarta Timur, DKI Jakarta": {
        "distance": 22,
        "estimated_time": "35-50 mins",
        "route": "Via Jl. Casablanca - Jl. MT Haryono",
    },
    "Bandung, Jawa Barat": {
        "distance": 150,
        "estimated_time": "3-4 hours",
        "route": "Via Tol Cipularang - Jl. Pasteur",
    },
    "Surabaya, Jawa Timur": {
        "distance": 800,
        "estimated_time": "12-14 hours",
        "route": "Via Tol Trans Jawa - Jl. Ahmad Yani",
    },
    "Tangerang, Banten": {
        "distance": 25,
        "estimated_time": "45-60 mins",
        "route": "Via Jl. Daan Mogot - Jl. MH Thamrin",
    },
}

DEFAULT_DISTANCE: Dict[str, object] = {
    "distance": 50,
    "estimated_time": "1-2 hours",
    "route": "Via main roads",
}

SHIPPING_OPTIONS: List[Dict[str, object]] = [
    {"name": "JNE Regular", "base_price": 25000, "price_per_km": 500, "duration": "2-3 days"},
    {"name": "JNE Express", "base_price": 45000, "price_per_km": 800, "duration": "1-2 days"},
    {"name": "J&T Express", "base_price": 22000, "price_per_km": 450, "duration": "2-4 days"},
    {"name": "SiCepat", "base_price": 28000, "price_per_km": 600, "duration": "1-3 days"},
    {"name": "AnterAja", "base_price": 20000, "price_per_km": 400, "duration": "3-5 days"},
    {"name": "Pos Indonesia", "base_price": 18000, "price_per_km": 300, "duration": "4-6 days"},
    {"name": "Ninja Express", "base_price": 24000, "price_per_km": 550, "duration": "2-4 days"},
]

# Carriers shown before the "see more" expansion.
SHIPPING_PREVIEW_COUNT = 3

LONG_DISTANCE_KM = 500
LOCAL_DISTANCE_KM = 50
UNKNOWN_LEAD_TIME_DAYS = 999

SORT_AI_RECOMMENDATION = "ai-recommendation"
SORT_CHEAPEST = "cheapest"
SORT_CLOSEST = "closest"
SORT_FASTEST_DELIVERY = "fastest-delivery"
SORT_HIGHEST_RATING = "highest-rating"
SORT_BEST_MATCH = "best-match"
SORT_MODES = (
    SORT_AI_RECOMMENDATION,
    SORT_CHEAPEST,
    SORT_CLOSEST,
    SORT_FASTEST_DELIVERY,
    SORT_HIGHEST_RATING,
    SORT_BEST_MATCH,
)
DEFAULT_SORT_MODE = SORT_AI_RECOMMENDATION

# Purchase order constants.
PO_STATUSES = ("Draft", "Sent", "Confirmed", "In Transit", "Delivered", "Cancelled")
PO_DEFAULT_STATUS = "Sent"
PO_DEFAULT_UNIT = "Pieces (Pcs)"
PO_ACCOUNT = "313 - Cost of Sales"
PO_TAX_LABEL = "PPN 11%"
PO_PURCHASE_PRICE_RATIO = 0.8
PO_SELLER_CATEGORY = "FMCG"
PO_SHIPPING_TYPE = "Kirim Ke Gudang"
PO_DEFAULT_LEAD_TIME = "2-3 days"
PO_DEFAULT_DELIVERY_ADDRESS: Dict[str, str] = {
    "address": "Jl. Sudirman Kav. 25, Jakarta Selatan",
    "province": "DKI Jakarta",
    "city": "Jakarta Selatan",
    "district": "Setiabudi",
    "postal_code": "12920",
}
PO_DATE_FILTERS = ("All", "Today", "This Week", "This Month")

# Demand board constants.
DEMAND_PRICE_TOLERANCE = 1.1
URGENCY_ORDER: Dict[str, int] = {"urgent": 4, "high": 3, "medium": 2, "low": 1}
ORDER_SIZE_BANDS: Dict[str, Dict[str, object]] = {
    "Small (< Rp 10M)": {"max": 10_000_000, "max_inclusive": False},
    "Medium (Rp 10M - 50M)": {"min": 10_000_000, "max": 50_000_000},
    "Large (Rp 50M - 200M)": {"min": 50_000_000, "max": 200_000_000},
    "Enterprise (> Rp 200M)": {"min": 200_000_000, "min_inclusive": False},
}
DEMAND_SORT_MODES = ("budget", "urgency", "expires", "requested")


def get_default_sort_mode() -> str:
    mode = os.getenv("SOURCING_DEFAULT_SORT", DEFAULT_SORT_MODE).lower()
    return mode if mode in SORT_MODES else DEFAULT_SORT_MODE


def get_category_rule(category: str) -> Dict[str, object]:
    for rule in CATEGORY_RULES:
        if rule["category"] == category:
            return rule
    raise ValueError(f"invalid category, expected one of: {[r['category'] for r in CATEGORY_RULES]}")
