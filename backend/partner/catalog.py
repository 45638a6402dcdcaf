from typing import Dict, List

PARTNER_METRICS: Dict[str, object] = {
    "total_gts": 156,
    "active_gts": 142,
    "monthly_performance": 87,
    "risk_score": 92,
    "total_revenue": 2_850_000_000,
    "campaigns_participated": 12,
    "average_rating": 4.7,
    "territory_ownership": 8,
}

GT_ACCOUNTS: List[Dict[str, object]] = [
    {
        "id": "1",
        "name": "Toko Sari Rasa",
        "phone": "+62-812-3456-7890",
        "address": "Jl. Sudirman No. 123, Jakarta Selatan",
        "region": "DKI Jakarta",
        "tier": "gold",
        "status": "active",
        "last_order": "2024-03-15",
        "total_orders": 45,
        "monthly_volume": 12_500_000,
        "loyalty_points": 2450,
        "risk_level": "low",
    },
    {
        "id": "2",
        "name": "Warung Berkah Jaya",
        "phone": "+62-813-5678-9012",
        "address": "Jl. Raya Bogor KM 25, Depok",
        "region": "Jawa Barat",
        "tier": "silver",
        "status": "active",
        "last_order": "2024-03-14",
        "total_orders": 28,
        "monthly_volume": 8_500_000,
        "loyalty_points": 1680,
        "risk_level": "low",
    },
    {
        "id": "3",
        "name": "Toko Maju Mundur",
        "phone": "+62-814-9012-3456",
        "address": "Jl. Malioboro No. 45, Yogyakarta",
        "region": "DI Yogyakarta",
        "tier": "bronze",
        "status": "pending",
        "last_order": "2024-03-10",
        "total_orders": 12,
        "monthly_volume": 3_200_000,
        "loyalty_points": 890,
        "risk_level": "medium",
    },
]

PARTNER_CAMPAIGNS: List[Dict[str, object]] = [
    {
        "id": "1",
        "brand_name": "Indofood",
        "name": "Ramadan Indomie Campaign",
        "status": "active",
        "participation": 78,
        "earnings": 15_600_000,
        "points_earned": 1560,
        "start_date": "2024-03-01",
        "end_date": "2024-04-30",
    },
    {
        "id": "2",
        "brand_name": "Nestle",
        "name": "Bear Brand Health Drive",
        "status": "completed",
        "participation": 92,
        "earnings": 8_900_000,
        "points_earned": 890,
        "start_date": "2024-02-01",
        "end_date": "2024-02-29",
    },
]

GT_STATUSES = ("active", "inactive", "pending")
GT_RISK_LEVELS = ("low", "medium", "high")
