import shutil
import tempfile
import threading
from datetime import date
from pathlib import Path
from unittest.mock import patch

from django.test import SimpleTestCase, override_settings
from rest_framework.test import APIClient

from api import store
from marketplace import catalog
from marketplace.services import campaigns, leaderboard, listings, loyalty, transactions, whatsapp
from marketplace.services.campaigns import CampaignError
from marketplace.services.listings import ApplicationError
from marketplace.services.loyalty import LoyaltyError
from marketplace.services.transactions import TransactionError

DISTRIBUTOR_SETTINGS = dict(
    AUTH_ENABLED=False,
    DEV_AUTH_ENABLED=True,
    DEV_AUTH_USER_ID="dev-user",
    DEV_AUTH_ROLES=["DISTRIBUTOR"],
    DEV_AUTH_PERMISSIONS=[],
    DEBUG=True,
)
BRAND_SETTINGS = dict(DISTRIBUTOR_SETTINGS, DEV_AUTH_ROLES=["BRAND"])
SUPPLIER_SETTINGS = dict(DISTRIBUTOR_SETTINGS, DEV_AUTH_ROLES=["SUPPLIER"])

VALID_RECEIPT = {
    "photo": "receipts/new.jpg",
    "phone_number": "+62811000111",
    "brand_id": "1",
    "sku": "IDM-GRG-001",
    "amount": 32000,
}

VALID_CAMPAIGN = {
    "brand_id": "1",
    "name": "Indomie Lebaran Push",
    "skus": ["IDM-AB-001"],
    "budget": 10_000_000,
    "start_date": "2024-04-01",
    "end_date": "2024-05-01",
}


class _FixedRandom:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


class TempStoreMixin:
    def setUp(self) -> None:
        super().setUp()
        self._store_dir = tempfile.mkdtemp()
        self._store_override = override_settings(
            ORDER_STORE_ENABLED=True,
            ORDER_STORE_PATH=str(Path(self._store_dir) / "store.json"),
        )
        self._store_override.enable()

    def tearDown(self) -> None:
        self._store_override.disable()
        shutil.rmtree(self._store_dir, ignore_errors=True)
        super().tearDown()


class ListingTests(SimpleTestCase):
    def test_all_active_listings_are_returned(self) -> None:
        self.assertEqual([item["id"] for item in listings.list_listings()], ["1", "2", "3"])

    def test_search_covers_product_and_brand_names(self) -> None:
        self.assertEqual([item["id"] for item in listings.list_listings(search="indomie")], ["1"])
        self.assertEqual([item["id"] for item in listings.list_listings(search="NESTLE")], ["2"])

    def test_region_and_category_filters_are_exact(self) -> None:
        self.assertEqual([item["id"] for item in listings.list_listings(region="Jawa Timur")], ["3"])
        self.assertEqual([item["id"] for item in listings.list_listings(category="Dairy")], ["2"])
        self.assertEqual(listings.list_listings(region="Jawa"), [])

    def test_listing_is_expanded(self) -> None:
        first, _, third = listings.list_listings()
        self.assertEqual(first["brand"]["name"], "Indofood")
        self.assertEqual(first["product"]["sku"], "IDM-GRG-001")
        self.assertEqual(first["campaign"]["name"], "Indomie Ramadan Campaign")
        self.assertIsNone(third["campaign"])


class ApplicationTests(TempStoreMixin, SimpleTestCase):
    def test_seeded_applications(self) -> None:
        statuses = {app["id"]: app["status"] for app in listings.list_applications(listing_id="1")}
        self.assertEqual(statuses, {"1": "pending", "2": "approved"})

    def test_apply_then_approve(self) -> None:
        application = listings.apply_to_listing("1", "3", 200, 3050, "Surabaya coverage")
        self.assertEqual(application["id"], "3")
        self.assertEqual(application["status"], "pending")

        approved = listings.review_application("3", "approved")
        self.assertEqual(approved["status"], "approved")
        self.assertIsNotNone(approved["responded_at"])

    def test_only_pending_applications_can_be_reviewed(self) -> None:
        with self.assertRaises(ApplicationError) as ctx:
            listings.review_application("2", "rejected")
        self.assertEqual(ctx.exception.code, "invalid_transition")

    def test_concurrent_reviews_decide_once(self) -> None:
        barrier = threading.Barrier(2)
        outcomes = {}

        def review(decision):
            barrier.wait()
            try:
                listings.review_application("1", decision)
                outcomes[decision] = "ok"
            except ApplicationError as exc:
                outcomes[decision] = exc.code

        threads = [threading.Thread(target=review, args=(decision,)) for decision in ("approved", "rejected")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(sorted(outcomes.values()), ["invalid_transition", "ok"])
        winner = next(decision for decision, outcome in outcomes.items() if outcome == "ok")
        stored = {app["id"]: app["status"] for app in listings.list_applications(listing_id="1")}
        self.assertEqual(stored["1"], winner)

    def test_unknown_application(self) -> None:
        with self.assertRaises(ApplicationError) as ctx:
            listings.review_application("99", "approved")
        self.assertEqual(ctx.exception.code, "not_found")

    def test_unknown_listing_or_distributor(self) -> None:
        with self.assertRaises(ApplicationError) as ctx:
            listings.apply_to_listing("99", "1", 10, 100)
        self.assertEqual(ctx.exception.code, "listing_not_found")
        with self.assertRaises(ApplicationError) as ctx:
            listings.apply_to_listing("1", "99", 10, 100)
        self.assertEqual(ctx.exception.code, "distributor_not_found")


class PointsTests(SimpleTestCase):
    def test_base_points_and_campaign_bonus(self) -> None:
        self.assertEqual(loyalty.calculate_points(32000), 32)
        self.assertEqual(loyalty.calculate_points(32000, "IDM-GRG-001"), 48)
        self.assertEqual(loyalty.calculate_points(999, "IDM-GRG-001"), 0)
        self.assertEqual(loyalty.calculate_points(33500, "SKU"), 49)

    def test_receipt_validation(self) -> None:
        self.assertEqual(loyalty.validate_receipt(VALID_RECEIPT), {})
        errors = loyalty.validate_receipt({"brand_id": "9", "amount": 0})
        self.assertEqual(set(errors), {"photo", "phone_number", "sku", "brand_id", "amount"})

    def test_receipt_ids_are_sequential(self) -> None:
        self.assertEqual(loyalty.generate_receipt_id(catalog.SEED_RECEIPTS), "RCP-003")
        self.assertEqual(loyalty.generate_receipt_id([]), "RCP-001")

    def test_wallet_summary(self) -> None:
        wallet = {
            "points": 700,
            "transactions": [
                {"type": "earned", "points": 1000, "date": "2024-03-02T08:00:00+00:00"},
                {"type": "earned", "points": 200, "date": "2024-02-20T08:00:00+00:00"},
                {"type": "redeemed", "points": -500, "date": "2024-03-05T08:00:00+00:00"},
            ],
        }
        summary = loyalty.wallet_summary(wallet, today=date(2024, 3, 20))
        self.assertEqual(summary["balance"], 700)
        self.assertEqual(summary["total_earned"], 1200)
        self.assertEqual(summary["total_redeemed"], 500)
        self.assertEqual(summary["earned_this_month"], 1000)

    def test_rewards_for_balance(self) -> None:
        rewards = {reward["id"]: reward for reward in loyalty.rewards_for_balance(1200)}
        self.assertTrue(rewards["1"]["can_redeem"])
        self.assertTrue(rewards["2"]["can_redeem"])
        self.assertFalse(rewards["3"]["can_redeem"])
        self.assertEqual(rewards["3"]["points_needed"], 800)


class LoyaltyStoreTests(TempStoreMixin, SimpleTestCase):
    def test_submit_receipt_credits_wallet_and_records_message(self) -> None:
        result = loyalty.submit_receipt("dev-user", "distributor", VALID_RECEIPT)
        receipt = result["receipt"]
        self.assertEqual(receipt["id"], "RCP-003")
        self.assertEqual(receipt["points_earned"], 48)
        self.assertEqual(receipt["campaign_id"], "1")
        self.assertEqual(receipt["status"], "verified")
        self.assertEqual(result["wallet"]["balance"], 48)
        self.assertEqual(
            result["message"]["message"],
            "Thank you for uploading your receipt! You earned 48 loyalty points. Receipt ID: RCP-003",
        )
        self.assertEqual(result["message"]["type"], "confirmation")

    def test_failed_credit_leaves_no_receipt_behind(self) -> None:
        receipts_before = len(loyalty.list_receipts())
        messages_before = len(whatsapp.list_messages())

        with patch("marketplace.services.loyalty._apply_credit", side_effect=RuntimeError("wallet offline")):
            with self.assertRaises(RuntimeError):
                loyalty.submit_receipt("dev-user", "distributor", VALID_RECEIPT)

        self.assertEqual(len(loyalty.list_receipts()), receipts_before)
        self.assertEqual(len(whatsapp.list_messages()), messages_before)
        self.assertEqual(loyalty.get_wallet("dev-user")["transactions"], [])

    def test_failed_confirmation_leaves_wallet_untouched(self) -> None:
        with patch("marketplace.services.whatsapp.build_message", side_effect=ValueError("bad message")):
            with self.assertRaises(ValueError):
                loyalty.submit_receipt("dev-user", "distributor", VALID_RECEIPT)

        self.assertEqual(loyalty.list_receipts(uploader_id="dev-user"), [])
        self.assertEqual(loyalty.get_wallet("dev-user")["transactions"], [])

    def test_receipt_without_matching_campaign(self) -> None:
        result = loyalty.submit_receipt("dev-user", "distributor", dict(VALID_RECEIPT, sku="PPS-TP-001"))
        self.assertIsNone(result["receipt"]["campaign_id"])

    def test_redeem_requires_enough_points(self) -> None:
        loyalty.credit_points("dev-user", 48, "Receipt upload")
        with self.assertRaises(LoyaltyError) as ctx:
            loyalty.redeem_reward("dev-user", "1")
        self.assertEqual(ctx.exception.message, "Need 452 more points")
        self.assertEqual(loyalty.get_wallet("dev-user")["points"], 48)

    def test_redeem_debits_wallet(self) -> None:
        loyalty.credit_points("dev-user", 1048, "Receipt upload")
        wallet = loyalty.redeem_reward("dev-user", "1")
        summary = loyalty.wallet_summary(wallet)
        self.assertEqual(summary["balance"], 548)
        self.assertEqual(summary["total_earned"], 1048)
        self.assertEqual(summary["total_redeemed"], 500)

    def test_unknown_reward(self) -> None:
        with self.assertRaises(LoyaltyError) as ctx:
            loyalty.redeem_reward("dev-user", "99")
        self.assertEqual(ctx.exception.code, "not_found")

    @override_settings(LOYALTY_STARTING_POINTS=250)
    def test_new_wallet_starts_with_configured_points(self) -> None:
        self.assertEqual(loyalty.get_wallet("someone")["points"], 250)


class LeaderboardTests(SimpleTestCase):
    def test_participation_comes_from_campaigns(self) -> None:
        self.assertEqual(leaderboard.campaign_participation("1"), 1)
        self.assertEqual(leaderboard.campaign_participation("2"), 2)
        self.assertEqual(leaderboard.campaign_participation("3"), 1)

    def test_overall_scores(self) -> None:
        entries = leaderboard.leaderboard()
        self.assertEqual([(e["distributor_id"], e["score"]) for e in entries], [("1", 2020), ("2", 1705), ("3", 1220)])
        self.assertEqual([e["rank"] for e in entries], [1, 2, 3])

    def test_campaign_category_reranks(self) -> None:
        entries = leaderboard.leaderboard("campaigns")
        self.assertEqual([e["distributor_id"] for e in entries], ["2", "1", "3"])
        self.assertEqual(entries[0]["rank"], 1)

    def test_unknown_category(self) -> None:
        with self.assertRaises(ValueError):
            leaderboard.leaderboard("volume")


class CampaignTests(TempStoreMixin, SimpleTestCase):
    def test_create_starts_as_draft_with_defaults(self) -> None:
        campaign = campaigns.create_campaign(VALID_CAMPAIGN)
        self.assertEqual(campaign["id"], "3")
        self.assertEqual(campaign["status"], "draft")
        self.assertEqual(campaign["spent_budget"], 0)
        self.assertEqual(campaign["participating_distributors"], [])
        self.assertEqual(campaign["total_receipts"], 0)
        self.assertEqual(campaign["points_per_receipt"], 100)
        self.assertEqual(campaign["bonus_multiplier"], 1)
        self.assertEqual(len(campaigns.list_campaigns(brand_id="1")), 2)

    def test_unknown_brand_is_rejected(self) -> None:
        with self.assertRaises(CampaignError) as ctx:
            campaigns.create_campaign(dict(VALID_CAMPAIGN, brand_id="9"))
        self.assertEqual(ctx.exception.code, "brand_not_found")

    def test_toggle_cycle(self) -> None:
        created = campaigns.create_campaign(VALID_CAMPAIGN)
        self.assertEqual(campaigns.toggle_campaign(created["id"])["status"], "active")
        self.assertEqual(campaigns.toggle_campaign(created["id"])["status"], "paused")
        self.assertEqual(campaigns.toggle_campaign(created["id"])["status"], "active")

    def test_toggle_reads_status_while_store_is_locked(self) -> None:
        lock_states = []
        validate = campaigns._validate_transition

        def recording_validate(current, target):
            lock_states.append(store.STORE_LOCK.locked())
            validate(current, target)

        with patch("marketplace.services.campaigns._validate_transition", side_effect=recording_validate):
            self.assertEqual(campaigns.toggle_campaign("1")["status"], "paused")
        self.assertEqual(lock_states, [True])

    def test_completed_is_terminal(self) -> None:
        campaigns.transition_campaign("1", "completed")
        with self.assertRaises(CampaignError) as ctx:
            campaigns.toggle_campaign("1")
        self.assertEqual(ctx.exception.code, "invalid_transition")

    def test_draft_cannot_pause(self) -> None:
        created = campaigns.create_campaign(VALID_CAMPAIGN)
        with self.assertRaises(CampaignError):
            campaigns.transition_campaign(created["id"], "paused")

    def test_campaign_for_sku(self) -> None:
        self.assertEqual(campaigns.campaign_for_sku("BB-SUSU-001", catalog.SEED_CAMPAIGNS)["id"], "2")
        self.assertIsNone(campaigns.campaign_for_sku("PPS-TP-001", catalog.SEED_CAMPAIGNS))

    def test_stats(self) -> None:
        stats = campaigns.campaign_stats(campaigns.list_campaigns())
        self.assertEqual(stats["active_campaigns"], 2)
        self.assertEqual(stats["total_budget"], 80_000_000)
        self.assertEqual(stats["participating_distributors"], 3)


class RealSupplierTests(SimpleTestCase):
    def test_demo_request_scores(self) -> None:
        scores = {
            s["id"]: (s["match_percentage"], s["estimated_cost"]) for s in transactions.list_real_suppliers()
        }
        self.assertEqual(scores["IDF-001"], (33, 7_680_000))
        self.assertEqual(scores["NST-002"], (33, 10_080_000))
        self.assertEqual(scores["UNI-003"], (33, 3_888_000))
        self.assertEqual(scores["MFG-005"], (0, 0))

    def test_name_containment_matches(self) -> None:
        supplier = catalog.get_real_supplier("UNI-003")
        result = transactions.supplier_match(supplier, [{"product_name": "Aqua", "quantity": 10}])
        self.assertEqual(result["match_percentage"], 100)
        self.assertEqual(result["estimated_cost"], 1_584_000)

    def test_out_of_stock_never_matches(self) -> None:
        supplier = {
            "products": [
                {"sku": "X-1", "name": "Widget", "unit_price": 10, "availability": "out-of-stock"},
            ]
        }
        self.assertIsNone(transactions.find_product(supplier, {"sku": "X-1"}))

    def test_search_and_region(self) -> None:
        ids = [s["id"] for s in transactions.list_real_suppliers(search="yamaha")]
        self.assertEqual(ids, ["YMH-004"])
        ids = [s["id"] for s in transactions.list_real_suppliers(region="Sumatera Utara")]
        self.assertEqual(ids, ["NST-002", "UNI-003"])


class RiskTests(SimpleTestCase):
    def test_large_order_penalty(self) -> None:
        supplier = catalog.get_real_supplier("YMH-004")
        self.assertEqual(transactions.risk_score(supplier, 63_000_000, _FixedRandom(0.5)), 91)
        self.assertEqual(transactions.risk_score(supplier, 63_000_000, _FixedRandom(0.9)), 87)

    def test_score_is_clamped(self) -> None:
        supplier = catalog.get_real_supplier("IDF-001")
        self.assertEqual(transactions.risk_score(supplier, 100_000, _FixedRandom(0.0)), 100)

    def test_levels(self) -> None:
        weak = {"rating": 1.0, "integrations": {}}
        self.assertEqual(transactions.risk_score(weak, 60_000_000, _FixedRandom(0.99)), 30)
        average = {"rating": 3.0, "integrations": {}}
        self.assertEqual(transactions.risk_score(average, 20_000_000, _FixedRandom(0.0)), 70)
        self.assertEqual(transactions.risk_level(80), "low")
        self.assertEqual(transactions.risk_level(79), "medium")
        self.assertEqual(transactions.risk_level(60), "medium")
        self.assertEqual(transactions.risk_level(59), "high")


class SimulationTests(SimpleTestCase):
    buyer = {"id": "dev-user", "name": "Dev", "address": None}

    def test_simulated_transaction(self) -> None:
        transaction = transactions.simulate_transaction(
            "NST-002",
            [{"sku": "BB-SUSU-189ML-48", "quantity": 10}],
            self.buyer,
            rng=_FixedRandom(0.5),
            today=date(2024, 3, 15),
        )
        self.assertTrue(transaction["id"].startswith("TXN-"))
        self.assertEqual(transaction["status"], "pending")
        self.assertEqual(transaction["total_amount"], 2_016_000)
        self.assertEqual(transaction["currency"], "IDR")
        self.assertEqual(transaction["payment"], {"method": "transfer", "terms": "Cash", "status": "pending"})
        self.assertEqual(transaction["delivery"]["estimated_date"], "2024-03-18")
        self.assertEqual(transaction["delivery"]["carrier"], "JNE Express")
        self.assertEqual(
            transaction["cash_flow_impact"],
            {"payable": 2_016_000, "receivable": 0, "net_impact": -2_016_000},
        )
        self.assertEqual(
            [step["label"] for step in transaction["steps"]],
            ["Order Created", "Supplier Confirmation", "Payment Processing", "Order Confirmed"],
        )
        self.assertEqual(transaction["ecosystem_urls"]["risk_watch"], "https://baskit.app/riskwatch")

    def test_unknown_supplier(self) -> None:
        with self.assertRaises(TransactionError) as ctx:
            transactions.simulate_transaction("XXX", [], self.buyer)
        self.assertEqual(ctx.exception.message, "Supplier not found")

    def test_sku_must_match_exactly(self) -> None:
        with self.assertRaises(TransactionError) as ctx:
            transactions.simulate_transaction("NST-002", [{"sku": "BB-SUSU", "quantity": 1}], self.buyer)
        self.assertEqual(ctx.exception.message, "Product BB-SUSU not found")


class WhatsAppTests(SimpleTestCase):
    def test_link_keeps_digits_and_encodes_text(self) -> None:
        self.assertEqual(
            whatsapp.wa_link("+62-811-1234-5678", "Hi there & welcome"),
            "https://wa.me/6281112345678?text=Hi%20there%20%26%20welcome",
        )

    def test_templates(self) -> None:
        self.assertEqual(set(whatsapp.templates()), {"order", "promo"})
        self.assertEqual(len(whatsapp.templates("order")["order"]), 3)
        with self.assertRaises(ValueError):
            whatsapp.templates("spam")


class WhatsAppStoreTests(TempStoreMixin, SimpleTestCase):
    def test_send_records_outgoing_message(self) -> None:
        result = whatsapp.send_message("+62812345678", "Order please", "order")
        self.assertEqual(result["message"]["id"], "4")
        self.assertEqual(result["message"]["status"], "sent")
        self.assertEqual(result["link"], "https://wa.me/62812345678?text=Order%20please")

    def test_only_order_and_promo_can_be_sent(self) -> None:
        with self.assertRaises(ValueError):
            whatsapp.send_message("+62812345678", "Thanks", "confirmation")

    def test_list_by_type(self) -> None:
        self.assertEqual(len(whatsapp.list_messages()), 3)
        self.assertEqual([m["id"] for m in whatsapp.list_messages("promo")], ["2"])


class PublicMarketplaceApiTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    def test_listings(self) -> None:
        response = self.client.get("/api/v1/marketplace/listings/", {"search": "bear"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["id"] for item in response.json()["listings"]], ["2"])

    def test_leaderboard(self) -> None:
        response = self.client.get("/api/v1/marketplace/leaderboard/", {"category": "campaigns"})
        self.assertEqual(response.json()["entries"][0]["distributor_id"], "2")
        bad = self.client.get("/api/v1/marketplace/leaderboard/", {"category": "volume"})
        self.assertEqual(bad.status_code, 400)

    def test_real_suppliers(self) -> None:
        response = self.client.get("/api/v1/marketplace/real-suppliers/")
        self.assertEqual(response.json()["count"], 5)
        bad = self.client.post("/api/v1/marketplace/real-suppliers/", {"items": []}, format="json")
        self.assertEqual(bad.status_code, 400)

    def test_real_supplier_detail(self) -> None:
        response = self.client.get("/api/v1/marketplace/real-suppliers/IDF-001/")
        self.assertTrue(response.json()["whatsapp_link"].startswith("https://wa.me/6281112345678?text="))
        self.assertEqual(self.client.get("/api/v1/marketplace/real-suppliers/NOPE/").status_code, 404)

    def test_templates(self) -> None:
        response = self.client.get("/api/v1/marketplace/whatsapp/templates/", {"type": "promo"})
        self.assertEqual(list(response.json()["templates"]), ["promo"])
        bad = self.client.get("/api/v1/marketplace/whatsapp/templates/", {"type": "spam"})
        self.assertEqual(bad.status_code, 400)


class LoyaltyApiTests(TempStoreMixin, SimpleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_upload_receipt_then_check_wallet(self) -> None:
        created = self.client.post("/api/v1/marketplace/receipts/", VALID_RECEIPT, format="json")
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["receipt"]["uploader_type"], "distributor")

        receipts = self.client.get("/api/v1/marketplace/receipts/")
        self.assertEqual([r["id"] for r in receipts.json()["receipts"]], ["RCP-003"])

        wallet = self.client.get("/api/v1/marketplace/wallet/")
        self.assertEqual(wallet.json()["balance"], 48)
        self.assertFalse(wallet.json()["rewards"][0]["can_redeem"])

        redeem = self.client.post("/api/v1/marketplace/wallet/redeem/", {"reward_id": "1"}, format="json")
        self.assertEqual(redeem.status_code, 409)
        self.assertEqual(redeem.json()["errors"]["points"], "Need 452 more points")

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_invalid_receipt(self) -> None:
        response = self.client.post(
            "/api/v1/marketplace/receipts/", dict(VALID_RECEIPT, amount=0), format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("amount", response.json()["errors"])

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_unknown_reward(self) -> None:
        response = self.client.post("/api/v1/marketplace/wallet/redeem/", {"reward_id": "99"}, format="json")
        self.assertEqual(response.status_code, 404)

    @override_settings(**SUPPLIER_SETTINGS)
    def test_supplier_has_no_wallet(self) -> None:
        self.assertEqual(self.client.get("/api/v1/marketplace/wallet/").status_code, 403)

    @override_settings(ORDER_STORE_ENABLED=False, **DISTRIBUTOR_SETTINGS)
    def test_disabled_store(self) -> None:
        self.assertEqual(self.client.get("/api/v1/marketplace/wallet/").status_code, 501)


class CampaignApiTests(TempStoreMixin, SimpleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()

    @override_settings(**BRAND_SETTINGS)
    def test_create_and_toggle(self) -> None:
        created = self.client.post("/api/v1/marketplace/campaigns/", VALID_CAMPAIGN, format="json")
        self.assertEqual(created.status_code, 201)
        campaign_id = created.json()["id"]

        toggled = self.client.post(f"/api/v1/marketplace/campaigns/{campaign_id}/toggle/")
        self.assertEqual(toggled.json()["status"], "active")

        listing = self.client.get("/api/v1/marketplace/campaigns/", {"brand_id": "1"})
        self.assertEqual(listing.json()["count"], 2)

        completed = self.client.patch(
            f"/api/v1/marketplace/campaigns/{campaign_id}/status/", {"status": "completed"}, format="json"
        )
        self.assertEqual(completed.status_code, 200)
        again = self.client.post(f"/api/v1/marketplace/campaigns/{campaign_id}/toggle/")
        self.assertEqual(again.status_code, 409)

    @override_settings(**BRAND_SETTINGS)
    def test_create_validates_payload(self) -> None:
        response = self.client.post(
            "/api/v1/marketplace/campaigns/", dict(VALID_CAMPAIGN, skus=[], budget=-1), format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.json()["errors"]), {"skus", "budget"})

    @override_settings(**BRAND_SETTINGS)
    def test_unknown_campaign(self) -> None:
        self.assertEqual(self.client.post("/api/v1/marketplace/campaigns/99/toggle/").status_code, 404)

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_distributor_can_view_but_not_manage(self) -> None:
        self.assertEqual(self.client.get("/api/v1/marketplace/campaigns/").status_code, 200)
        response = self.client.post("/api/v1/marketplace/campaigns/", VALID_CAMPAIGN, format="json")
        self.assertEqual(response.status_code, 403)


class ApplicationApiTests(TempStoreMixin, SimpleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()

    def _apply(self):
        with self.settings(**DISTRIBUTOR_SETTINGS):
            return self.client.post(
                "/api/v1/marketplace/listings/1/applications/",
                {"distributor_id": "3", "proposed_quantity": 200, "proposed_price": 3050},
                format="json",
            )

    def test_apply_and_review(self) -> None:
        self.assertEqual(self._apply().status_code, 201)
        with self.settings(**BRAND_SETTINGS):
            listing = self.client.get("/api/v1/marketplace/listings/1/applications/")
            self.assertEqual(listing.json()["count"], 3)

            approved = self.client.patch(
                "/api/v1/marketplace/applications/3/", {"decision": "approved"}, format="json"
            )
            self.assertEqual(approved.json()["status"], "approved")
            again = self.client.patch(
                "/api/v1/marketplace/applications/3/", {"decision": "rejected"}, format="json"
            )
            self.assertEqual(again.status_code, 409)

    @override_settings(**BRAND_SETTINGS)
    def test_bad_decision(self) -> None:
        response = self.client.patch("/api/v1/marketplace/applications/1/", {"decision": "maybe"}, format="json")
        self.assertEqual(response.status_code, 400)

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_apply_validates_payload(self) -> None:
        response = self.client.post(
            "/api/v1/marketplace/listings/1/applications/",
            {"distributor_id": "9", "proposed_quantity": 0},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.json()["errors"]), {"distributor_id", "proposed_quantity", "proposed_price"})

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_distributor_cannot_review(self) -> None:
        response = self.client.patch("/api/v1/marketplace/applications/1/", {"decision": "approved"}, format="json")
        self.assertEqual(response.status_code, 403)


class TransactionApiTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_simulate(self) -> None:
        response = self.client.post(
            "/api/v1/marketplace/transactions/simulate/",
            {"supplier_id": "UNI-003", "items": [{"sku": "AQU-600ML-24", "quantity": 10}]},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["total_amount"], 1_584_000)
        self.assertEqual(response.json()["buyer"]["id"], "dev-user")

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_unknown_supplier(self) -> None:
        response = self.client.post(
            "/api/v1/marketplace/transactions/simulate/",
            {"supplier_id": "NOPE", "items": [{"sku": "AQU-600ML-24", "quantity": 1}]},
            format="json",
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["errors"]["supplier_id"], "Supplier not found")

    @override_settings(**SUPPLIER_SETTINGS)
    def test_supplier_cannot_simulate(self) -> None:
        response = self.client.post("/api/v1/marketplace/transactions/simulate/", {}, format="json")
        self.assertEqual(response.status_code, 403)


class MessageApiTests(TempStoreMixin, SimpleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_send_and_list(self) -> None:
        sent = self.client.post(
            "/api/v1/marketplace/whatsapp/messages/",
            {"phone": "+62812345678", "message": "Promo time", "type": "promo"},
            format="json",
        )
        self.assertEqual(sent.status_code, 201)
        listing = self.client.get("/api/v1/marketplace/whatsapp/messages/", {"type": "promo"})
        self.assertEqual(listing.json()["count"], 2)

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_confirmation_cannot_be_sent(self) -> None:
        response = self.client.post(
            "/api/v1/marketplace/whatsapp/messages/",
            {"phone": "+62812345678", "message": "Thanks", "type": "confirmation"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_text_built_from_order_or_campaign(self) -> None:
        order = self.client.post(
            "/api/v1/marketplace/whatsapp/messages/",
            {"phone": "+62812345678", "type": "order", "product_name": "Indomie Goreng", "quantity": 100},
            format="json",
        )
        self.assertEqual(order.status_code, 201)
        self.assertIn("order 100 cartons of Indomie Goreng", order.json()["message"]["message"])

        promo = self.client.post(
            "/api/v1/marketplace/whatsapp/messages/",
            {"phone": "+62812345678", "type": "promo", "campaign_id": "1"},
            format="json",
        )
        self.assertIn("Indomie Ramadan Campaign is live!", promo.json()["message"]["message"])

        missing = self.client.post(
            "/api/v1/marketplace/whatsapp/messages/",
            {"phone": "+62812345678", "type": "promo", "campaign_id": "99"},
            format="json",
        )
        self.assertEqual(missing.status_code, 400)
        self.assertIn("campaign_id", missing.json()["errors"])
