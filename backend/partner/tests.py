from django.test import SimpleTestCase, override_settings
from rest_framework.test import APIClient

from partner.services import portal

PARTNER_SETTINGS = dict(
    AUTH_ENABLED=False,
    DEV_AUTH_ENABLED=True,
    DEV_AUTH_USER_ID="dev-user",
    DEV_AUTH_ROLES=["PARTNER"],
    DEV_AUTH_PERMISSIONS=[],
    DEBUG=True,
)


class CurrencyFormatTests(SimpleTestCase):
    def test_billions_and_millions(self) -> None:
        self.assertEqual(portal.format_currency(2_850_000_000), "Rp2.9B")
        self.assertEqual(portal.format_currency(1_000_000_000), "Rp1.0B")
        self.assertEqual(portal.format_currency(12_500_000), "Rp12.5M")
        self.assertEqual(portal.format_currency(1_000_000), "Rp1.0M")

    def test_small_amounts_use_grouping(self) -> None:
        self.assertEqual(portal.format_currency(999_999), "Rp999,999")
        self.assertEqual(portal.format_currency(0), "Rp0")


class PortalTests(SimpleTestCase):
    def test_overview_counts_active_campaigns(self) -> None:
        metrics = portal.overview()
        self.assertEqual(metrics["active_campaigns"], 1)
        self.assertEqual(metrics["total_revenue_display"], "Rp2.9B")
        self.assertEqual(metrics["risk_level"], "low")

    def test_search_covers_name_address_and_region(self) -> None:
        self.assertEqual([a["id"] for a in portal.list_gt_accounts("warung")], ["2"])
        self.assertEqual([a["id"] for a in portal.list_gt_accounts("malioboro")], ["3"])
        self.assertEqual([a["id"] for a in portal.list_gt_accounts("dki")], ["1"])

    def test_status_filter(self) -> None:
        self.assertEqual([a["id"] for a in portal.list_gt_accounts(status="active")], ["1", "2"])
        self.assertEqual(portal.list_gt_accounts(status="inactive"), [])
        with self.assertRaises(ValueError):
            portal.list_gt_accounts(status="closed")

    def test_risk_watch_groups_accounts(self) -> None:
        watch = portal.risk_watch()
        self.assertEqual(watch["counts"], {"low": 2, "medium": 1, "high": 0})
        self.assertEqual(watch["risk_score"], 92)
        self.assertEqual(watch["accounts_by_level"]["medium"][0]["name"], "Toko Maju Mundur")


class PartnerApiTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    @override_settings(**PARTNER_SETTINGS)
    def test_portal_endpoints(self) -> None:
        self.assertEqual(self.client.get("/api/v1/partner/overview/").json()["total_gts"], 156)
        accounts = self.client.get("/api/v1/partner/gt-accounts/", {"status": "pending"})
        self.assertEqual(accounts.json()["count"], 1)
        campaigns = self.client.get("/api/v1/partner/campaigns/", {"status": "completed"})
        self.assertEqual(campaigns.json()["campaigns"][0]["earnings_display"], "Rp8.9M")
        self.assertEqual(self.client.get("/api/v1/partner/risk-watch/").json()["risk_level"], "low")

    @override_settings(**PARTNER_SETTINGS)
    def test_bad_status(self) -> None:
        response = self.client.get("/api/v1/partner/gt-accounts/", {"status": "closed"})
        self.assertEqual(response.status_code, 400)

    @override_settings(**dict(PARTNER_SETTINGS, DEV_AUTH_ROLES=["DISTRIBUTOR"]))
    def test_other_roles_are_forbidden(self) -> None:
        self.assertEqual(self.client.get("/api/v1/partner/overview/").status_code, 403)
