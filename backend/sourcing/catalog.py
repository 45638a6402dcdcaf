"""
Static supplier catalog and reference fixtures for sourcing.

Suppliers and their per-product capabilities never change at runtime; the
demand board and sales orders are read-only fixtures as well.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Supplier:
    id: str
    name: str
    rating: float
    is_ai_recommended: bool
    coverage_items: tuple
    estimated_price: int
    lead_time: str
    location: str
    detailed_address: str
    certifications: tuple
    contact_email: str
    phone: str
    ai_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["coverage_items"] = list(self.coverage_items)
        data["certifications"] = list(self.certifications)
        return data


@dataclass(frozen=True)
class ProductCapability:
    available: bool
    price: Optional[int] = None
    stock: Optional[int] = None
    availability: Optional[str] = None


SUPPLIERS: List[Supplier] = [
    Supplier(
        id="1",
        name="PT Indofood Distributor Jakarta",
        rating=4.8,
        is_ai_recommended=True,
        ai_reason=(
            "Perfect match for instant noodles with fastest delivery (1-2 days), best pricing, "
            "and 100% item availability. Specialized Indomie distributor with excellent track record."
        ),
        coverage_items=("Instant Noodles", "Snacks", "Beverages"),
        estimated_price=2_850_000,
        lead_time="1-2 days",
        location="Jakarta Selatan, DKI Jakarta",
        detailed_address="Jl. Sudirman Kav. 25, Karet Semanggi, Setiabudi, Jakarta Selatan 12920",
        certifications=("HACCP", "ISO 22000", "Halal MUI"),
        contact_email="orders@indofooddist.co.id",
        phone="+62-21-555-1001",
    ),
    Supplier(
        id="2",
        name="CV Nestle Partner Indonesia",
        rating=4.7,
        is_ai_recommended=True,
        ai_reason=(
            "Top choice for dairy products with authorized Bear Brand distribution, premium cold "
            "chain logistics, and competitive bulk pricing. Excellent for mixed FMCG orders."
        ),
        coverage_items=("Dairy Products", "Beverages", "Instant Noodles"),
        estimated_price=3_200_000,
        lead_time="2-3 days",
        location="Bandung, Jawa Barat",
        detailed_address="Jl. Asia Afrika No. 133-137, Babakan Ciamis, Sumur Bandung, Bandung 40117",
        certifications=("HACCP", "ISO 22000", "Halal MUI", "BPOM"),
        contact_email="sales@nestlepartner.co.id",
        phone="+62-22-555-2002",
    ),
    Supplier(
        id="3",
        name="PT Multi FMCG Supplies",
        rating=4.5,
        is_ai_recommended=False,
        coverage_items=("Instant Noodles", "Dairy Products", "Snacks", "Personal Care"),
        estimated_price=3_100_000,
        lead_time="2-4 days",
        location="Surabaya, Jawa Timur",
        detailed_address="Jl. Raya Darmo No. 68-70, Wonokromo, Surabaya, Jawa Timur 60241",
        certifications=("HACCP", "ISO 22000", "Halal MUI"),
        contact_email="procurement@multifmcg.co.id",
        phone="+62-31-555-3003",
    ),
    Supplier(
        id="4",
        name="PT Yamaha Motor Distributor",
        rating=4.6,
        is_ai_recommended=False,
        coverage_items=("Motorcycles", "Automotive Parts", "Accessories"),
        estimated_price=18_500_000,
        lead_time="7-14 days",
        location="Tangerang, Banten",
        detailed_address="Jl. Raya Serpong KM 8, Pakulonan, Serpong Utara, Tangerang Selatan 15325",
        certifications=("ISO 9001", "IATF 16949"),
        contact_email="sales@yamahamotor.co.id",
        phone="+62-21-555-4004",
    ),
    Supplier(
        id="5",
        name="PT Honda Motor Indonesia",
        rating=4.4,
        is_ai_recommended=False,
        coverage_items=("Motorcycles", "Automotive Parts", "Service Equipment"),
        estimated_price=19_200_000,
        lead_time="10-21 days",
        location="Jakarta Timur, DKI Jakarta",
        detailed_address="Jl. Laksda Yos Sudarso, Sunter I, Tanjung Priok, Jakarta Utara 14350",
        certifications=("ISO 9001", "IATF 16949", "ISO 14001"),
        contact_email="dealer@hondamotor.co.id",
        phone="+62-21-555-5005",
    ),
    Supplier(
        id="6",
        name="CV Indomie Specialist",
        rating=4.9,
        is_ai_recommended=False,
        coverage_items=("Instant Noodles",),
        estimated_price=1_200_000,
        lead_time="1 day",
        location="Jakarta Pusat, DKI Jakarta",
        detailed_address="Jl. MH Thamrin No. 1, Menteng, Jakarta Pusat 10310",
        certifications=("HACCP", "Halal MUI"),
        contact_email="express@indomiespec.co.id",
        phone="+62-21-555-6006",
    ),
]

PRODUCT_NAMES = (
    "Indomie Goreng",
    "Indomie Soto Ayam",
    "Indomie Ayam Bawang",
    "Bear Brand Susu Steril",
    "Bear Brand Gold White Tea",
    "Yamaha NMAX 155",
    "Teh Botol Sosro",
    "Aqua Botol 600ml",
    "Dancow Fortigro",
    "Chitato Sapi Panggang",
)


def _in_stock(price: int, stock: int) -> ProductCapability:
    return ProductCapability(available=True, price=price, stock=stock, availability="In Stock")


def _limited(price: int, stock: int) -> ProductCapability:
    return ProductCapability(available=True, price=price, stock=stock, availability="Limited")


def _capabilities(**available: ProductCapability) -> Dict[str, ProductCapability]:
    # Every catalog product is listed; the ones not passed in are unavailable.
    by_key = {name.lower().replace(" ", "_"): name for name in PRODUCT_NAMES}
    table = {name: ProductCapability(available=False) for name in PRODUCT_NAMES}
    for key, capability in available.items():
        table[by_key[key]] = capability
    return table


CAPABILITIES: Dict[str, Dict[str, ProductCapability]] = {
    "1": _capabilities(
        indomie_goreng=_in_stock(3200, 500),
        indomie_soto_ayam=_in_stock(3200, 300),
        indomie_ayam_bawang=_in_stock(3200, 400),
        teh_botol_sosro=_limited(26000, 100),
    ),
    "2": _capabilities(
        bear_brand_susu_steril=_in_stock(42000, 200),
        bear_brand_gold_white_tea=_in_stock(45000, 150),
        indomie_goreng=_limited(3400, 100),
        indomie_soto_ayam=_limited(3400, 80),
        indomie_ayam_bawang=_limited(3400, 90),
        dancow_fortigro=_in_stock(120000, 50),
    ),
    "3": _capabilities(
        indomie_goreng=_in_stock(3300, 250),
        indomie_soto_ayam=_in_stock(3300, 200),
        indomie_ayam_bawang=_in_stock(3300, 180),
        bear_brand_susu_steril=_in_stock(44000, 120),
        bear_brand_gold_white_tea=_limited(47000, 80),
        teh_botol_sosro=_in_stock(27000, 150),
        chitato_sapi_panggang=_in_stock(82000, 60),
        aqua_botol_600ml=_in_stock(33000, 100),
        dancow_fortigro=_limited(122000, 40),
    ),
    "4": _capabilities(
        yamaha_nmax_155=_in_stock(31_500_000, 8),
    ),
    "5": _capabilities(),
    "6": _capabilities(
        indomie_goreng=_in_stock(3000, 1000),
        indomie_soto_ayam=_in_stock(3000, 800),
        indomie_ayam_bawang=_in_stock(3000, 900),
    ),
}

SALES_ORDERS: Dict[str, List[Dict[str, object]]] = {
    "SO-2024-001": [
        {"id": "1", "product_name": "Indomie Goreng", "quantity": 100, "target_price": 3500, "unit": "Carton"},
        {"id": "2", "product_name": "Bear Brand Susu Steril", "quantity": 50, "target_price": 45000, "unit": "Carton"},
        {"id": "3", "product_name": "Teh Botol Sosro", "quantity": 30, "target_price": 28000, "unit": "Carton"},
    ],
    "SO-2024-002": [
        {"id": "4", "product_name": "Aqua Botol 600ml", "quantity": 80, "target_price": 35000, "unit": "Carton"},
        {"id": "5", "product_name": "Indomie Soto Ayam", "quantity": 60, "target_price": 3500, "unit": "Carton"},
        {"id": "6", "product_name": "Dancow Fortigro", "quantity": 25, "target_price": 125000, "unit": "Carton"},
        {"id": "7", "product_name": "Chitato Sapi Panggang", "quantity": 40, "target_price": 85000, "unit": "Carton"},
    ],
    "SO-2024-003": [
        {"id": "8", "product_name": "Yamaha NMAX 155", "quantity": 2, "target_price": 32_500_000, "unit": "Pieces (Pcs)"},
        {"id": "9", "product_name": "Indomie Ayam Bawang", "quantity": 200, "target_price": 3500, "unit": "Carton"},
        {"id": "10", "product_name": "Bear Brand Gold White Tea", "quantity": 30, "target_price": 48000, "unit": "Carton"},
    ],
}


def _demand(
    demand_id: str,
    distributor: Dict[str, object],
    items: List[Dict[str, object]],
    location: str,
    lead_time: str,
    urgency: str,
    budget: int,
    requested_at: str,
    expires_at: str,
    status: str,
    quotes_received: int,
    description: str,
    supplier_types: List[str],
) -> Dict[str, object]:
    return {
        "id": demand_id,
        **distributor,
        "items": items,
        "delivery_preferences": {"location": location, "preferred_lead_time": lead_time},
        "urgency": urgency,
        "budget": budget,
        "requested_at": requested_at,
        "expires_at": expires_at,
        "status": status,
        "quotes_received": quotes_received,
        "description": description,
        "preferred_supplier_types": supplier_types,
    }


DISTRIBUTOR_DEMANDS: List[Dict[str, object]] = [
    _demand(
        "DEM-001",
        {
            "distributor_id": "DIST-001",
            "distributor_name": "PT Jakarta Distribution Center",
            "distributor_email": "procurement@jakartadist.co.id",
            "distributor_phone": "+62-21-555-4001",
            "distributor_region": "DKI Jakarta",
            "distributor_rating": 4.8,
        },
        [
            {"id": "1", "product_name": "Indomie Goreng", "quantity": 500, "target_price": 3200, "unit": "Carton"},
            {"id": "2", "product_name": "Indomie Soto Ayam", "quantity": 300, "target_price": 3200, "unit": "Carton"},
        ],
        "Jakarta Selatan, DKI Jakarta",
        "1-3 days",
        "high",
        2_560_000,
        "2024-03-15T09:30:00",
        "2024-03-20T17:00:00",
        "open",
        3,
        "Urgent restock needed for retail chain. Prefer suppliers with HACCP certification.",
        ["manufacturer", "authorized distributor"],
    ),
    _demand(
        "DEM-002",
        {
            "distributor_id": "DIST-002",
            "distributor_name": "CV Bandung Supply Chain",
            "distributor_email": "ops@bandungsupply.co.id",
            "distributor_phone": "+62-22-555-4002",
            "distributor_region": "Jawa Barat",
            "distributor_rating": 4.6,
        },
        [
            {"id": "3", "product_name": "Bear Brand Susu Steril", "quantity": 200, "target_price": 42000, "unit": "Carton"},
            {"id": "4", "product_name": "Bear Brand Gold White Tea", "quantity": 100, "target_price": 45000, "unit": "Carton"},
        ],
        "Bandung, Jawa Barat",
        "2-4 days",
        "medium",
        12_900_000,
        "2024-03-14T14:20:00",
        "2024-03-25T17:00:00",
        "open",
        1,
        "Regular monthly order for dairy products. Looking for competitive pricing and reliable delivery.",
        ["manufacturer", "wholesaler"],
    ),
    _demand(
        "DEM-003",
        {
            "distributor_id": "DIST-003",
            "distributor_name": "PT Surabaya Logistics Hub",
            "distributor_email": "purchasing@surabayahub.co.id",
            "distributor_phone": "+62-31-555-4003",
            "distributor_region": "Jawa Timur",
            "distributor_rating": 4.7,
        },
        [
            {"id": "5", "product_name": "Yamaha NMAX 155", "quantity": 5, "target_price": 31_500_000, "unit": "Unit"},
        ],
        "Surabaya, Jawa Timur",
        "7-14 days",
        "low",
        157_500_000,
        "2024-03-12T11:15:00",
        "2024-04-12T17:00:00",
        "quoted",
        2,
        "Bulk order for motorcycle dealership expansion. Need authorized dealer pricing.",
        ["authorized dealer", "manufacturer"],
    ),
    _demand(
        "DEM-004",
        {
            "distributor_id": "DIST-004",
            "distributor_name": "CV Multi Product Jaya",
            "distributor_email": "procurement@multiprod.co.id",
            "distributor_phone": "+62-21-555-5004",
            "distributor_region": "DKI Jakarta",
            "distributor_rating": 4.4,
        },
        [
            {"id": "6", "product_name": "Teh Botol Sosro", "quantity": 150, "target_price": 26000, "unit": "Carton"},
            {"id": "7", "product_name": "Aqua Botol 600ml", "quantity": 200, "target_price": 33000, "unit": "Carton"},
            {"id": "8", "product_name": "Chitato Sapi Panggang", "quantity": 80, "target_price": 82000, "unit": "Carton"},
        ],
        "Jakarta Timur, DKI Jakarta",
        "2-5 days",
        "medium",
        16_460_000,
        "2024-03-13T16:45:00",
        "2024-03-28T17:00:00",
        "open",
        4,
        "Mixed FMCG order for convenience store chain. Prefer bundled pricing.",
        ["wholesaler", "distributor"],
    ),
    _demand(
        "DEM-005",
        {
            "distributor_id": "DIST-005",
            "distributor_name": "PT Medan Food Distribution",
            "distributor_email": "orders@medanfood.co.id",
            "distributor_phone": "+62-61-555-6005",
            "distributor_region": "Sumatera Utara",
            "distributor_rating": 4.5,
        },
        [
            {"id": "9", "product_name": "Indomie Ayam Bawang", "quantity": 400, "target_price": 3300, "unit": "Carton"},
            {"id": "10", "product_name": "Dancow Fortigro", "quantity": 50, "target_price": 120000, "unit": "Carton"},
        ],
        "Medan, Sumatera Utara",
        "3-7 days",
        "urgent",
        7_320_000,
        "2024-03-16T08:00:00",
        "2024-03-18T17:00:00",
        "open",
        1,
        "Emergency restock due to unexpected demand surge. Need immediate response.",
        ["manufacturer", "regional distributor"],
    ),
]

SUPPLIER_QUOTES: List[Dict[str, object]] = [
    {
        "id": "QUO-001",
        "demand_id": "DEM-001",
        "supplier_id": "IDF-001",
        "supplier_name": "PT Indofood CBP Sukses Makmur Tbk",
        "items": [
            {
                "product_name": "Indomie Goreng",
                "quantity": 500,
                "unit_price": 3000,
                "total_price": 1_500_000,
                "availability": "In Stock",
                "lead_time": "1-2 days",
            },
            {
                "product_name": "Indomie Soto Ayam",
                "quantity": 300,
                "unit_price": 3000,
                "total_price": 900_000,
                "availability": "In Stock",
                "lead_time": "1-2 days",
            },
        ],
        "total_amount": 2_400_000,
        "delivery_terms": "FOB Jakarta, Free delivery within 50km",
        "payment_terms": "Net 30 days",
        "valid_until": "2024-03-22T17:00:00",
        "notes": "Bulk discount applied. HACCP certified facility.",
        "status": "pending",
        "submitted_at": "2024-03-15T11:30:00",
    }
]

# ERP order list seed.
SEED_PURCHASE_ORDERS: List[Dict[str, object]] = [
    {
        "id": "1",
        "po_number": "PO-2024-001",
        "sales_order_id": "SO-2024-001",
        "supplier_id": "1",
        "supplier_name": "PT Indofood Distributor Jakarta",
        "supplier_email": "orders@indofooddist.co.id",
        "supplier_phone": "+62-21-555-1001",
        "supplier_address": "Jl. Sudirman Kav. 25, Jakarta Selatan",
        "supplier_rating": 4.8,
        "supplier_location": "Jakarta Selatan, DKI Jakarta",
        "order_date": "2024-01-15",
        "delivery_date": "2024-01-17",
        "status": "Delivered",
        "total_amount": 350_000,
        "sub_total": 320_000,
        "shipping_cost": 25_000,
        "rounding": 0,
        "tax_amount": 35_200,
        "items": [
            {
                "id": "1",
                "product_code": "001-1001",
                "product_name": "Indomie Goreng",
                "quantity": 100,
                "available_qty": 100,
                "operating_qty": 100,
                "unit_price": 3200,
                "sell_price": 3200,
                "purchase_price": 2560,
                "total_price": 320_000,
                "unit": "Carton",
                "po_account": "313 - Cost of Sales",
                "tax": "PPN 11%",
            }
        ],
        "notes": (
            "PO dibuat melalui Baskit untuk supplier PT Indofood Distributor Jakarta. "
            "Berdasarkan Sales Order: SO-2024-001"
        ),
        "created_by": "John Doe",
        "created_by_email": "john@company.com",
        "last_updated": "2024-01-17T14:30:00",
        "seller_category": "FMCG",
        "shipping_type": "Kirim Ke Gudang",
        "estimated_delivery": "1-2 days",
        "delivery_address": {
            "address": "Jl. Sudirman Kav. 25, Jakarta Selatan",
            "province": "DKI Jakarta",
            "city": "Jakarta Selatan",
            "district": "Setiabudi",
            "postal_code": "12920",
        },
    }
]


def get_supplier(supplier_id: str) -> Supplier | None:
    for supplier in SUPPLIERS:
        if supplier.id == str(supplier_id):
            return supplier
    return None


def get_capabilities(supplier_id: str) -> Dict[str, ProductCapability]:
    return CAPABILITIES.get(str(supplier_id), {})
