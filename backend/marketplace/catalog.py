"""
Marketplace reference data: brands, products, listings, distributors,
rewards, real suppliers and message templates. Mutable records (campaigns,
applications, receipts, messages) are seeded into the dev store from here.
"""
from __future__ import annotations

from typing import Dict, List

BRANDS: List[Dict[str, object]] = [
    {
        "id": "1",
        "name": "Indofood",
        "email": "partnerships@indofood.com",
        "phone": "+62-21-555-1001",
        "description": "Leading Indonesian food and beverage manufacturer",
        "is_verified": True,
    },
    {
        "id": "2",
        "name": "Nestle Indonesia",
        "email": "trade@nestle.co.id",
        "phone": "+62-21-555-2002",
        "description": "Global nutrition, health and wellness company",
        "is_verified": True,
    },
    {
        "id": "3",
        "name": "Unilever Indonesia",
        "email": "business@unilever.co.id",
        "phone": "+62-21-555-3003",
        "description": "Consumer goods company with sustainable living brands",
        "is_verified": True,
    },
]

PRODUCTS: List[Dict[str, object]] = [
    {
        "id": "1",
        "brand_id": "1",
        "name": "Indomie Goreng",
        "sku": "IDM-GRG-001",
        "category": "Instant Noodles",
        "description": "Original fried instant noodles",
        "target_price": 3200,
        "unit": "Carton",
    },
    {
        "id": "2",
        "brand_id": "2",
        "name": "Bear Brand Susu Steril",
        "sku": "BB-SUSU-001",
        "category": "Dairy",
        "description": "Sterilized milk drink",
        "target_price": 42000,
        "unit": "Carton",
    },
    {
        "id": "3",
        "brand_id": "3",
        "name": "Pepsodent Toothpaste",
        "sku": "PPS-TP-001",
        "category": "Personal Care",
        "description": "Complete protection toothpaste",
        "target_price": 85000,
        "unit": "Carton",
    },
]

DISTRIBUTORS: List[Dict[str, object]] = [
    {
        "id": "1",
        "name": "PT Jakarta Distribution Center",
        "email": "ops@jakartadist.co.id",
        "phone": "+62-21-555-4001",
        "address": "Jl. Sudirman Kav. 25, Jakarta Selatan",
        "region": "DKI Jakarta",
        "coverage_areas": ["Jakarta Selatan", "Jakarta Pusat", "Jakarta Timur"],
        "rating": 4.8,
        "total_fulfillments": 156,
        "total_receipt_uploads": 89,
        "loyalty_points": 12450,
        "is_verified": True,
    },
    {
        "id": "2",
        "name": "CV Bandung Supply Chain",
        "email": "contact@bandungsupply.co.id",
        "phone": "+62-22-555-4002",
        "address": "Jl. Asia Afrika No. 133, Bandung",
        "region": "Jawa Barat",
        "coverage_areas": ["Bandung", "Cimahi", "Sumedang"],
        "rating": 4.6,
        "total_fulfillments": 134,
        "total_receipt_uploads": 67,
        "loyalty_points": 9870,
        "is_verified": True,
    },
    {
        "id": "3",
        "name": "PT Surabaya Logistics Hub",
        "email": "business@surabayahub.co.id",
        "phone": "+62-31-555-4003",
        "address": "Jl. Raya Darmo No. 68, Surabaya",
        "region": "Jawa Timur",
        "coverage_areas": ["Surabaya", "Sidoarjo", "Gresik"],
        "rating": 4.7,
        "total_fulfillments": 98,
        "total_receipt_uploads": 45,
        "loyalty_points": 7650,
        "is_verified": True,
    },
]

SEED_CAMPAIGNS: List[Dict[str, object]] = [
    {
        "id": "1",
        "brand_id": "1",
        "name": "Indomie Ramadan Campaign",
        "description": "Special promotion for Ramadan season with bonus points",
        "skus": ["IDM-GRG-001", "IDM-SA-001"],
        "target_region": "DKI Jakarta",
        "budget": 50_000_000,
        "spent_budget": 12_500_000,
        "points_per_receipt": 100,
        "bonus_multiplier": 2,
        "start_date": "2024-03-01",
        "end_date": "2024-04-30",
        "status": "active",
        "participating_distributors": ["1", "2"],
        "total_receipts": 125,
        "created_at": "2024-02-15T00:00:00",
    },
    {
        "id": "2",
        "brand_id": "2",
        "name": "Bear Brand Health Campaign",
        "description": "Promote healthy lifestyle with Bear Brand products",
        "skus": ["BB-SUSU-001"],
        "target_region": "Jawa Barat",
        "budget": 30_000_000,
        "spent_budget": 8_500_000,
        "points_per_receipt": 150,
        "bonus_multiplier": 1,
        "start_date": "2024-02-01",
        "end_date": "2024-03-31",
        "status": "active",
        "participating_distributors": ["2", "3"],
        "total_receipts": 67,
        "created_at": "2024-01-20T00:00:00",
    },
]

LISTINGS: List[Dict[str, object]] = [
    {
        "id": "1",
        "brand_id": "1",
        "product_id": "1",
        "target_region": "DKI Jakarta",
        "quantity": 1000,
        "price_per_unit": 3200,
        "total_budget": 3_200_000,
        "campaign_id": "1",
        "status": "active",
        "created_at": "2024-03-01",
        "expires_at": "2024-04-30",
    },
    {
        "id": "2",
        "brand_id": "2",
        "product_id": "2",
        "target_region": "Jawa Barat",
        "quantity": 500,
        "price_per_unit": 42000,
        "total_budget": 21_000_000,
        "campaign_id": "2",
        "status": "active",
        "created_at": "2024-02-15",
        "expires_at": "2024-03-31",
    },
    {
        "id": "3",
        "brand_id": "3",
        "product_id": "3",
        "target_region": "Jawa Timur",
        "quantity": 300,
        "price_per_unit": 85000,
        "total_budget": 25_500_000,
        "campaign_id": None,
        "status": "active",
        "created_at": "2024-03-10",
        "expires_at": "2024-05-10",
    },
]

SEED_APPLICATIONS: List[Dict[str, object]] = [
    {
        "id": "1",
        "listing_id": "1",
        "distributor_id": "1",
        "proposed_quantity": 500,
        "proposed_price": 3000,
        "message": "We have extensive coverage in Jakarta and can guarantee fast delivery.",
        "status": "pending",
        "applied_at": "2024-03-10T00:00:00",
        "responded_at": None,
    },
    {
        "id": "2",
        "listing_id": "1",
        "distributor_id": "2",
        "proposed_quantity": 300,
        "proposed_price": 3100,
        "message": "Specialized in FMCG distribution with cold chain capabilities.",
        "status": "approved",
        "applied_at": "2024-03-08T00:00:00",
        "responded_at": "2024-03-09T00:00:00",
    },
]

SEED_RECEIPTS: List[Dict[str, object]] = [
    {
        "id": "RCP-001",
        "uploader_id": "1",
        "uploader_type": "distributor",
        "photo": "receipts/rcp-001.jpg",
        "phone_number": "+62812345678",
        "sku": "IDM-GRG-001",
        "brand_id": "1",
        "amount": 32000,
        "points_earned": 200,
        "campaign_id": "1",
        "status": "verified",
        "uploaded_at": "2024-03-15T00:00:00",
        "verified_at": "2024-03-15T00:00:00",
    },
    {
        "id": "RCP-002",
        "uploader_id": "2",
        "uploader_type": "distributor",
        "photo": "receipts/rcp-002.jpg",
        "phone_number": "+62823456789",
        "sku": "BB-SUSU-001",
        "brand_id": "2",
        "amount": 84000,
        "points_earned": 150,
        "campaign_id": "2",
        "status": "verified",
        "uploaded_at": "2024-03-12T00:00:00",
        "verified_at": "2024-03-12T00:00:00",
    },
]

REWARDS: List[Dict[str, object]] = [
    {
        "id": "1",
        "name": "10% Discount Voucher",
        "description": "Get 10% off your next purchase",
        "points_cost": 500,
        "category": "Discount",
    },
    {
        "id": "2",
        "name": "Free Product Sample",
        "description": "Get a free sample of new products",
        "points_cost": 1000,
        "category": "Product",
    },
    {
        "id": "3",
        "name": "Premium Membership",
        "description": "3 months of premium benefits",
        "points_cost": 2000,
        "category": "Membership",
    },
]


def _product(
    sku: str,
    name: str,
    brand: str,
    category: str,
    unit_price: int,
    min_order: int,
    unit: str,
    availability: str,
    stock_level: int,
) -> Dict[str, object]:
    return {
        "sku": sku,
        "name": name,
        "brand": brand,
        "category": category,
        "unit_price": unit_price,
        "min_order": min_order,
        "unit": unit,
        "availability": availability,
        "stock_level": stock_level,
    }


REAL_SUPPLIERS: List[Dict[str, object]] = [
    {
        "id": "IDF-001",
        "name": "PT Indofood CBP Sukses Makmur Tbk",
        "type": "manufacturer",
        "region": ["Jakarta", "Jawa Barat", "Jawa Tengah", "Jawa Timur"],
        "headquarters": "Jakarta Selatan, DKI Jakarta",
        "coverage": {
            "provinces": ["DKI Jakarta", "Jawa Barat", "Jawa Tengah", "Jawa Timur", "Banten"],
            "cities": ["Jakarta", "Bandung", "Semarang", "Surabaya", "Tangerang", "Bekasi", "Depok", "Bogor"],
            "delivery_radius": 500,
        },
        "products": [
            _product("IDM-GRG-85G-24", "Indomie Goreng 85g (24 pcs/carton)", "Indomie", "Instant Noodles",
                     76800, 10, "Carton", "in-stock", 5000),
            _product("IDM-SA-75G-24", "Indomie Soto Ayam 75g (24 pcs/carton)", "Indomie", "Instant Noodles",
                     72000, 10, "Carton", "in-stock", 3500),
            _product("IDM-AB-80G-24", "Indomie Ayam Bawang 80g (24 pcs/carton)", "Indomie", "Instant Noodles",
                     74400, 10, "Carton", "in-stock", 4200),
            _product("POP-MIE-75G-24", "Pop Mie Ayam Bawang 75g (24 pcs/carton)", "Pop Mie", "Cup Noodles",
                     86400, 5, "Carton", "in-stock", 2800),
        ],
        "certifications": ["HACCP", "ISO 22000", "Halal MUI", "BPOM", "ISO 9001"],
        "rating": 4.9,
        "total_orders": 15420,
        "response_time": "< 2 hours",
        "payment_terms": ["Cash", "Transfer", "Credit 30 days", "Credit 45 days"],
        "contact_info": {
            "email": "b2b@indofood.com",
            "phone": "+62-21-5795-8822",
            "whatsapp": "+62-811-1234-5678",
            "address": "Sudirman Plaza, Jl. Jend. Sudirman Kav. 76-78, Jakarta 12910",
        },
        "business_hours": {"weekdays": "08:00 - 17:00", "saturday": "08:00 - 12:00", "sunday": "Closed"},
        "integrations": {"basket_app": True, "business_suite": True, "cash_flow": True, "risk_watch": True},
    },
    {
        "id": "NST-002",
        "name": "PT Nestle Indonesia",
        "type": "manufacturer",
        "region": ["Jakarta", "Jawa Barat", "Jawa Tengah", "Sumatera Utara"],
        "headquarters": "Jakarta Pusat, DKI Jakarta",
        "coverage": {
            "provinces": ["DKI Jakarta", "Jawa Barat", "Jawa Tengah", "Sumatera Utara", "Banten"],
            "cities": ["Jakarta", "Bandung", "Semarang", "Medan", "Tangerang", "Bekasi"],
            "delivery_radius": 600,
        },
        "products": [
            _product("BB-SUSU-189ML-48", "Bear Brand Susu Steril 189ml (48 pcs/carton)", "Bear Brand",
                     "Dairy Products", 201600, 5, "Carton", "in-stock", 1200),
            _product("BB-WT-189ML-48", "Bear Brand Gold White Tea 189ml (48 pcs/carton)", "Bear Brand",
                     "Dairy Products", 216000, 5, "Carton", "limited", 800),
            _product("DAN-FG-800G-12", "Dancow Fortigro 800g (12 pcs/carton)", "Dancow", "Milk Powder",
                     1440000, 2, "Carton", "in-stock", 500),
            _product("MIL-UHT-1L-12", "Milo UHT 1L (12 pcs/carton)", "Milo", "Beverages",
                     180000, 3, "Carton", "in-stock", 900),
        ],
        "certifications": ["HACCP", "ISO 22000", "Halal MUI", "BPOM", "ISO 14001"],
        "rating": 4.8,
        "total_orders": 12850,
        "response_time": "< 3 hours",
        "payment_terms": ["Cash", "Transfer", "Credit 30 days", "Credit 60 days"],
        "contact_info": {
            "email": "trade@id.nestle.com",
            "phone": "+62-21-2856-8888",
            "whatsapp": "+62-812-3456-7890",
            "address": "Perkantoran Hijau Arkadia, Tower C Lt. 20, Jl. TB Simatupang Kav. 88, Jakarta 12520",
        },
        "business_hours": {"weekdays": "08:30 - 17:30", "saturday": "09:00 - 13:00", "sunday": "Closed"},
        "integrations": {"basket_app": True, "business_suite": True, "cash_flow": True, "risk_watch": True},
    },
    {
        "id": "UNI-003",
        "name": "PT Unilever Indonesia Tbk",
        "type": "manufacturer",
        "region": ["Jakarta", "Jawa Barat", "Jawa Timur", "Sumatera Utara"],
        "headquarters": "Tangerang, Banten",
        "coverage": {
            "provinces": ["DKI Jakarta", "Jawa Barat", "Jawa Timur", "Sumatera Utara", "Banten", "Jawa Tengah"],
            "cities": ["Jakarta", "Tangerang", "Surabaya", "Medan", "Bandung", "Semarang"],
            "delivery_radius": 550,
        },
        "products": [
            _product("TEH-BOT-450ML-24", "Teh Botol Sosro 450ml (24 pcs/carton)", "Sosro", "Beverages",
                     129600, 5, "Carton", "in-stock", 2500),
            _product("AQU-600ML-24", "Aqua Botol 600ml (24 pcs/carton)", "Aqua", "Water",
                     158400, 10, "Carton", "in-stock", 8000),
            _product("CHI-SP-68G-20", "Chitato Sapi Panggang 68g (20 pcs/carton)", "Chitato", "Snacks",
                     396000, 3, "Carton", "in-stock", 1500),
            _product("PEP-TP-190G-12", "Pepsodent Complete Protection 190g (12 pcs/carton)", "Pepsodent",
                     "Personal Care", 408000, 2, "Carton", "in-stock", 800),
        ],
        "certifications": ["HACCP", "ISO 22000", "Halal MUI", "BPOM", "ISO 9001", "ISO 14001"],
        "rating": 4.7,
        "total_orders": 11200,
        "response_time": "< 4 hours",
        "payment_terms": ["Cash", "Transfer", "Credit 30 days"],
        "contact_info": {
            "email": "customer.service@unilever.com",
            "phone": "+62-21-2995-1000",
            "whatsapp": "+62-813-5678-9012",
            "address": "Grha Unilever, Jl. BSD Boulevard Barat, Green Office Park Kav. 3, BSD City, Tangerang 15345",
        },
        "business_hours": {"weekdays": "08:00 - 17:00", "saturday": "08:00 - 12:00", "sunday": "Closed"},
        "integrations": {"basket_app": True, "business_suite": True, "cash_flow": True, "risk_watch": False},
    },
    {
        "id": "YMH-004",
        "name": "PT Yamaha Motor Kencana Indonesia",
        "type": "distributor",
        "region": ["Jakarta", "Jawa Barat", "Banten"],
        "headquarters": "Jakarta Timur, DKI Jakarta",
        "coverage": {
            "provinces": ["DKI Jakarta", "Jawa Barat", "Banten"],
            "cities": ["Jakarta", "Bekasi", "Tangerang", "Depok", "Bogor", "Bandung"],
            "delivery_radius": 200,
        },
        "products": [
            _product("YMH-NMAX155-2024", "Yamaha NMAX 155 Connected ABS 2024", "Yamaha", "Motorcycles",
                     31_500_000, 1, "Unit", "in-stock", 25),
            _product("YMH-AEROX155-2024", "Yamaha Aerox 155 Connected ABS 2024", "Yamaha", "Motorcycles",
                     29_800_000, 1, "Unit", "limited", 12),
            _product("YMH-VIXION-2024", "Yamaha Vixion R 155 2024", "Yamaha", "Motorcycles",
                     26_500_000, 1, "Unit", "pre-order", 0),
        ],
        "certifications": ["ISO 9001", "IATF 16949", "Authorized Dealer"],
        "rating": 4.6,
        "total_orders": 2850,
        "response_time": "< 6 hours",
        "payment_terms": ["Cash", "Transfer", "Kredit Motor", "Leasing"],
        "contact_info": {
            "email": "sales@yamaha-motor.co.id",
            "phone": "+62-21-4786-1234",
            "whatsapp": "+62-814-7890-1234",
            "address": "Jl. Raya Bekasi KM 25, Cakung, Jakarta Timur 13910",
        },
        "business_hours": {"weekdays": "08:00 - 17:00", "saturday": "08:00 - 16:00", "sunday": "09:00 - 15:00"},
        "integrations": {"basket_app": True, "business_suite": True, "cash_flow": True, "risk_watch": True},
    },
    {
        "id": "MFG-005",
        "name": "PT Multi Food Global",
        "type": "wholesaler",
        "region": ["Jakarta", "Jawa Barat", "Jawa Tengah", "Jawa Timur"],
        "headquarters": "Surabaya, Jawa Timur",
        "coverage": {
            "provinces": ["DKI Jakarta", "Jawa Barat", "Jawa Tengah", "Jawa Timur", "Banten"],
            "cities": ["Surabaya", "Jakarta", "Bandung", "Semarang", "Malang", "Yogyakarta"],
            "delivery_radius": 400,
        },
        "products": [
            _product("MFG-IDM-MIX-240", "Indomie Mixed Variants (240 pcs/carton)", "Indomie", "Instant Noodles",
                     768000, 5, "Carton", "in-stock", 1000),
            _product("MFG-BB-MIX-96", "Bear Brand Mixed Products (96 pcs/carton)", "Bear Brand", "Dairy Products",
                     403200, 3, "Carton", "in-stock", 600),
            _product("MFG-SNK-MIX-100", "Snack Mix Assorted (100 pcs/carton)", "Various", "Snacks",
                     500000, 2, "Carton", "in-stock", 800),
        ],
        "certifications": ["HACCP", "Halal MUI", "BPOM"],
        "rating": 4.4,
        "total_orders": 8500,
        "response_time": "< 8 hours",
        "payment_terms": ["Cash", "Transfer", "Credit 15 days", "Credit 30 days"],
        "contact_info": {
            "email": "orders@multifoodglobal.co.id",
            "phone": "+62-31-7345-6789",
            "whatsapp": "+62-815-9012-3456",
            "address": "Jl. Raya Darmo No. 68-70, Wonokromo, Surabaya 60241",
        },
        "business_hours": {"weekdays": "07:00 - 18:00", "saturday": "07:00 - 15:00", "sunday": "08:00 - 12:00"},
        "integrations": {"basket_app": True, "business_suite": False, "cash_flow": True, "risk_watch": False},
    },
]

# Requested items used when a supplier card is shown without a request.
DEMO_REQUESTED_ITEMS: List[Dict[str, object]] = [
    {"sku": "IDM-GRG", "quantity": 100, "product_name": "Indomie Goreng"},
    {"sku": "BB-SUSU", "quantity": 50, "product_name": "Bear Brand Susu Steril"},
    {"sku": "TEH-BOT", "quantity": 30, "product_name": "Teh Botol Sosro"},
]

ECOSYSTEM_URLS: Dict[str, str] = {
    "main": "https://baskit.app",
    "business_suite": "https://baskit.app/business-suite",
    "cash_flow": "https://baskit.app/cash-flow",
    "risk_watch": "https://baskit.app/riskwatch",
    "procurement": "https://baskit.app/procurement",
    "marketplace": "https://baskit.app/marketplace",
}

WHATSAPP_TEMPLATES: Dict[str, List[str]] = {
    "order": [
        "Hi! I'd like to place an order for the products listed in your marketplace. Can we discuss the details?",
        "Hello, I'm interested in your bulk pricing for the items in your current campaign. Please share more details.",
        "Good day! I'd like to participate in your current promotion. How can I get started?",
    ],
    "promo": [
        "\U0001f389 New campaign alert! Upload receipts for featured products and earn bonus points!",
        "\U0001f4f1 Don't miss out! Special promotion ending soon. Upload your receipts now for extra rewards.",
        "\U0001f3c6 Congratulations! You're eligible for our premium distributor program. Contact us for details.",
    ],
}

SEED_MESSAGES: List[Dict[str, object]] = [
    {
        "id": "1",
        "phone": "+62812345678",
        "message": "Thank you for uploading your receipt! You earned 200 loyalty points. Receipt ID: RCP-001",
        "type": "confirmation",
        "status": "delivered",
        "sent_at": "2024-03-15T10:30:00",
        "related_receipt_id": "RCP-001",
        "related_campaign_id": None,
    },
    {
        "id": "2",
        "phone": "+62823456789",
        "message": (
            "New Ramadan campaign is live! Upload receipts for Indomie products and get 2x bonus points "
            "until April 30th."
        ),
        "type": "promo",
        "status": "read",
        "sent_at": "2024-03-14T09:15:00",
        "related_receipt_id": None,
        "related_campaign_id": "1",
    },
    {
        "id": "3",
        "phone": "+62834567890",
        "message": "Your order for 100 cartons of Indomie Goreng has been confirmed. Delivery expected in 2-3 days.",
        "type": "order",
        "status": "delivered",
        "sent_at": "2024-03-13T14:20:00",
        "related_receipt_id": None,
        "related_campaign_id": None,
    },
]


def _find(records: List[Dict[str, object]], record_id: object) -> Dict[str, object] | None:
    for record in records:
        if record["id"] == str(record_id):
            return record
    return None


def get_brand(brand_id: object) -> Dict[str, object] | None:
    return _find(BRANDS, brand_id)


def get_product(product_id: object) -> Dict[str, object] | None:
    return _find(PRODUCTS, product_id)


def get_listing(listing_id: object) -> Dict[str, object] | None:
    return _find(LISTINGS, listing_id)


def get_reward(reward_id: object) -> Dict[str, object] | None:
    return _find(REWARDS, reward_id)


def get_real_supplier(supplier_id: object) -> Dict[str, object] | None:
    return _find(REAL_SUPPLIERS, supplier_id)


def get_distributor(distributor_id: object) -> Dict[str, object] | None:
    return _find(DISTRIBUTORS, distributor_id)
