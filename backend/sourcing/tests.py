import base64
import json
import shutil
import tempfile
import threading
from datetime import date
from pathlib import Path
from unittest.mock import patch

from django.test import SimpleTestCase, override_settings
from rest_framework.test import APIClient

from api import store
from sourcing import catalog, rules
from sourcing.services import demand_board, matching, ranking, shortlist
from sourcing.services import purchase_orders
from sourcing.services.purchase_orders import PurchaseOrderError
from sourcing.services.sales_orders import SalesOrderError, load_sales_order

SO_001_ITEMS = catalog.SALES_ORDERS["SO-2024-001"]

DISTRIBUTOR_SETTINGS = dict(
    AUTH_ENABLED=False,
    DEV_AUTH_ENABLED=True,
    DEV_AUTH_USER_ID="dev-user",
    DEV_AUTH_ROLES=["DISTRIBUTOR"],
    DEV_AUTH_PERMISSIONS=[],
    DEBUG=True,
)
SUPPLIER_SETTINGS = dict(DISTRIBUTOR_SETTINGS, DEV_AUTH_ROLES=["SUPPLIER"])


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


class CoverageMatchingTests(SimpleTestCase):
    def test_noodle_request_matches_noodle_coverage(self) -> None:
        self.assertTrue(matching.supplier_covers_item("Indomie Goreng", ["Instant Noodles"]))

    def test_matching_ignores_case_and_whitespace(self) -> None:
        self.assertTrue(matching.supplier_covers_item("  INDOMIE goreng ", ["Instant Noodles"]))
        self.assertEqual(matching.normalize_product_name("  Bear BRAND "), "bear brand")

    def test_first_triggered_rule_wins(self) -> None:
        rule = matching.classify_item("mie keripik")
        self.assertEqual(rule["category"], "noodle")
        # Snack coverage would accept "keripik", but the noodle rule already triggered.
        self.assertFalse(matching.supplier_covers_item("mie keripik", ["Makanan Ringan"]))

    def test_unclassified_names_fall_back_to_substring(self) -> None:
        self.assertIsNone(matching.classify_item("Personal Care"))
        self.assertTrue(matching.supplier_covers_item("Personal Care", ["Personal Care"]))
        self.assertFalse(matching.supplier_covers_item("Pepsodent", ["Personal Care"]))

    def test_empty_name_falls_through_to_substring(self) -> None:
        self.assertIsNone(matching.classify_item("   "))
        # An empty name is contained in every coverage entry.
        self.assertTrue(matching.supplier_covers_item("", ["Instant Noodles"]))
        self.assertTrue(matching.supplier_covers_item("   ", ["Personal Care"]))
        self.assertFalse(matching.supplier_covers_item("", []))

    def test_matcher_is_idempotent(self) -> None:
        first = matching.supplier_covers_item("Teh Botol Sosro", ["Beverages"])
        second = matching.supplier_covers_item("Teh Botol Sosro", ["Beverages"])
        self.assertEqual(first, second)
        self.assertTrue(first)

    def test_find_suppliers_without_items_returns_catalog_ordered(self) -> None:
        ids = [supplier.id for supplier in matching.find_suppliers([])]
        self.assertEqual(ids, ["1", "2", "6", "4", "3", "5"])

    def test_find_suppliers_filters_by_coverage(self) -> None:
        ids = [supplier.id for supplier in matching.find_suppliers([{"product_name": "Yamaha NMAX 155"}])]
        self.assertEqual(ids, ["4", "5"])

    def test_find_suppliers_for_mixed_sales_order(self) -> None:
        ids = [supplier.id for supplier in matching.find_suppliers(SO_001_ITEMS)]
        self.assertEqual(ids, ["1", "2", "6", "3"])


class ProductMatchingTests(SimpleTestCase):
    def test_exact_key_match(self) -> None:
        capabilities = catalog.get_capabilities("1")
        self.assertEqual(matching.find_matching_product("indomie goreng", capabilities), "Indomie Goreng")

    def test_keyword_mapping_picks_first_present_product(self) -> None:
        capabilities = catalog.get_capabilities("6")
        self.assertEqual(matching.find_matching_product("mie instan", capabilities), "Indomie Goreng")

    def test_unknown_product_returns_none(self) -> None:
        self.assertIsNone(matching.find_matching_product("xyz", catalog.get_capabilities("1")))

    def test_present_but_unavailable_product_reports_not_available(self) -> None:
        result = matching.item_availability([{"product_name": "Yamaha NMAX 155", "quantity": 1}], "5")
        self.assertFalse(result[0]["available"])
        self.assertEqual(result[0]["availability"], "Not Available")
        self.assertEqual(result[0]["note"], "This supplier does not carry this item")

    def test_short_stock_note(self) -> None:
        result = matching.item_availability([{"product_name": "Indomie Goreng", "quantity": 600}], "1")
        self.assertEqual(result[0]["note"], "Only 500 available (need 600)")
        self.assertEqual(result[0]["availability"], "In Stock")

    def test_sufficient_stock_note(self) -> None:
        result = matching.item_availability([{"product_name": "Teh Botol Sosro", "quantity": 30}], "1")
        self.assertEqual(result[0]["note"], "100 units available")
        self.assertEqual(result[0]["availability"], "Limited")

    def test_match_percentage_and_estimated_total(self) -> None:
        availability = matching.item_availability(SO_001_ITEMS, "1")
        self.assertEqual(matching.match_percentage(availability), 67)
        self.assertEqual(matching.estimated_total(availability), 1_100_000)

    def test_match_percentage_of_empty_request_is_zero(self) -> None:
        self.assertEqual(matching.match_percentage([]), 0)

    def test_round_half_up(self) -> None:
        self.assertEqual(matching.round_half_up(2.5), 3)
        self.assertEqual(matching.round_half_up(66.666), 67)


class RankingTests(SimpleTestCase):
    def _ids(self, sort_by: str, suppliers=None) -> list:
        pool = matching.find_suppliers(SO_001_ITEMS) if suppliers is None else suppliers
        return [entry["id"] for entry in ranking.rank_suppliers(pool, SO_001_ITEMS, sort_by)]

    def test_distance_lookup_and_default(self) -> None:
        self.assertEqual(ranking.distance_info("Bandung, Jawa Barat")["distance"], 150)
        unknown = ranking.distance_info("Medan, Sumatera Utara")
        self.assertEqual(unknown["distance"], 50)
        self.assertEqual(unknown["route"], "Via main roads")

    def test_lead_time_days(self) -> None:
        self.assertEqual(ranking.lead_time_days("10-21 days"), 10)
        self.assertEqual(ranking.lead_time_days("1 day"), 1)
        self.assertEqual(ranking.lead_time_days("soon"), 999)

    def test_shipping_price(self) -> None:
        self.assertEqual(ranking.shipping_price(25000, 500, 15), 32500)

    def test_adjust_delivery_time(self) -> None:
        self.assertEqual(ranking.adjust_delivery_time("2-3 days", 800), "3-4 days")
        self.assertEqual(ranking.adjust_delivery_time("2-3 days", 15), "1-3 days")
        self.assertEqual(ranking.adjust_delivery_time("1-2 days", 15), "1-2 days")
        self.assertEqual(ranking.adjust_delivery_time("2-3 days", 150), "2-3 days")

    def test_shipping_quotes(self) -> None:
        quotes = ranking.shipping_quotes(15)
        self.assertEqual(len(quotes), 7)
        self.assertEqual(quotes[1]["name"], "JNE Express")
        self.assertEqual(quotes[1]["price"], 57000)
        self.assertEqual(quotes[1]["distance_fee"], 12000)
        self.assertEqual(len(ranking.shipping_quotes(15, limit=rules.SHIPPING_PREVIEW_COUNT)), 3)

    def test_ai_recommendation(self) -> None:
        self.assertEqual(self._ids("ai-recommendation"), ["1", "2", "3", "6"])

    def test_best_match(self) -> None:
        self.assertEqual(self._ids("best-match"), ["3", "1", "2", "6"])

    def test_cheapest_puts_zero_totals_last(self) -> None:
        self.assertEqual(self._ids("cheapest", catalog.SUPPLIERS), ["6", "1", "2", "3", "4", "5"])

    def test_closest_is_non_decreasing(self) -> None:
        ranked = ranking.rank_suppliers(catalog.SUPPLIERS, [], "closest")
        distances = [entry["distance_info"]["distance"] for entry in ranked]
        self.assertEqual(distances, sorted(distances))
        self.assertEqual(ranked[0]["id"], "6")

    def test_fastest_delivery_keeps_catalog_order_on_ties(self) -> None:
        self.assertEqual(self._ids("fastest-delivery", catalog.SUPPLIERS), ["1", "6", "2", "3", "4", "5"])

    def test_highest_rating(self) -> None:
        self.assertEqual(self._ids("highest-rating"), ["6", "1", "2", "3"])

    def test_unknown_sort_mode_raises(self) -> None:
        with self.assertRaises(ValueError):
            ranking.rank_suppliers(catalog.SUPPLIERS, [], "random")


class SalesOrderTests(SimpleTestCase):
    def test_lookup_normalizes_id(self) -> None:
        sales_order = load_sales_order("  so-2024-002 ")
        self.assertEqual(sales_order["sales_order_id"], "SO-2024-002")
        self.assertEqual(len(sales_order["items"]), 4)

    def test_unknown_id_message(self) -> None:
        with self.assertRaises(SalesOrderError) as ctx:
            load_sales_order("SO-1999-001")
        self.assertEqual(
            ctx.exception.message,
            "Sales Order ID not found. Try: SO-2024-001, SO-2024-002, or SO-2024-003",
        )

    def test_returned_items_are_copies(self) -> None:
        load_sales_order("SO-2024-001")["items"][0]["quantity"] = 1
        self.assertEqual(catalog.SALES_ORDERS["SO-2024-001"][0]["quantity"], 100)


class ContactTests(SimpleTestCase):
    def test_mailto_is_url_encoded(self) -> None:
        link = shortlist.contact_mailto(catalog.get_supplier("1"))
        self.assertTrue(link.startswith("mailto:orders@indofooddist.co.id?subject=Procurement%20Inquiry&body="))
        self.assertIn("Hello%20PT%20Indofood%20Distributor%20Jakarta%2C", link)


class PurchaseOrderBuildTests(SimpleTestCase):
    def _order(self, sales_order_id="SO-2024-001", items=SO_001_ITEMS):
        return purchase_orders.build_purchase_order(
            catalog.get_supplier("1"),
            items,
            {"name": "john", "email": "john@company.com"},
            sales_order_id=sales_order_id,
            today=date(2024, 3, 1),
            po_number="PO-2024-002",
        )

    def test_header_and_totals(self) -> None:
        order = self._order()
        self.assertEqual(order["po_number"], "PO-2024-002")
        self.assertEqual(order["status"], "Sent")
        self.assertEqual(order["order_date"], "2024-03-01")
        self.assertEqual(order["delivery_date"], "2024-03-04")
        self.assertEqual(order["sub_total"], 3_440_000)
        self.assertEqual(order["total_amount"], 3_440_000)
        self.assertEqual(order["tax_amount"], 378_400)
        self.assertEqual(order["shipping_cost"], 0)
        self.assertEqual(order["estimated_delivery"], "1-2 days")
        self.assertEqual(order["delivery_address"]["postal_code"], "12920")
        self.assertEqual(
            order["notes"],
            "PO dibuat melalui Baskit untuk supplier PT Indofood Distributor Jakarta. "
            "Berdasarkan Sales Order: SO-2024-001",
        )

    def test_line_items(self) -> None:
        items = self._order()["items"]
        self.assertEqual([item["product_code"] for item in items], ["001-1001", "001-1002", "001-1003"])
        self.assertEqual(items[0]["purchase_price"], 2800)
        self.assertEqual(items[0]["total_price"], 350_000)
        self.assertEqual(items[0]["unit"], "Carton")
        self.assertEqual(items[0]["po_account"], "313 - Cost of Sales")
        self.assertEqual(items[0]["tax"], "PPN 11%")

    def test_direct_procurement_defaults(self) -> None:
        order = self._order(sales_order_id=None, items=[{"product_name": "Indomie Goreng", "quantity": 5}])
        self.assertTrue(order["notes"].endswith("Procurement langsung dari Baskit."))
        self.assertEqual(order["items"][0]["unit"], "Pieces (Pcs)")
        self.assertEqual(order["items"][0]["unit_price"], 0)
        self.assertEqual(order["sales_order_id"], "")

    def test_po_number_sequence_is_per_year(self) -> None:
        existing = catalog.SEED_PURCHASE_ORDERS
        self.assertEqual(purchase_orders.generate_po_number(existing, date(2024, 5, 1)), "PO-2024-002")
        self.assertEqual(purchase_orders.generate_po_number(existing, date(2025, 1, 1)), "PO-2025-001")


class HandoffTests(SimpleTestCase):
    def _encode(self, envelope: dict) -> str:
        return base64.urlsafe_b64encode(json.dumps(envelope).encode("utf-8")).decode("ascii")

    def test_handoff_roundtrip(self) -> None:
        order = dict(catalog.SEED_PURCHASE_ORDERS[0])
        self.assertEqual(purchase_orders.decode_handoff(purchase_orders.encode_handoff(order)), order)

    def test_garbage_is_rejected(self) -> None:
        with self.assertRaises(PurchaseOrderError) as ctx:
            purchase_orders.decode_handoff("not-a-handoff!!")
        self.assertEqual(ctx.exception.code, "invalid_handoff")

    def test_wrong_version_is_rejected(self) -> None:
        raw = self._encode(
            {"schema": "baskit.purchase_order", "version": 2, "order": catalog.SEED_PURCHASE_ORDERS[0]}
        )
        with self.assertRaises(PurchaseOrderError) as ctx:
            purchase_orders.decode_handoff(raw)
        self.assertEqual(ctx.exception.code, "invalid_handoff")

    def test_unknown_status_is_rejected(self) -> None:
        order = dict(catalog.SEED_PURCHASE_ORDERS[0], status="Lost")
        with self.assertRaises(PurchaseOrderError):
            purchase_orders.decode_handoff(self._encode({"schema": "baskit.purchase_order", "version": 1, "order": order}))

    def test_missing_items_are_rejected(self) -> None:
        order = dict(catalog.SEED_PURCHASE_ORDERS[0], items=[])
        with self.assertRaises(PurchaseOrderError):
            purchase_orders.decode_handoff(self._encode({"schema": "baskit.purchase_order", "version": 1, "order": order}))

    def test_boolean_quantity_is_rejected(self) -> None:
        seed = catalog.SEED_PURCHASE_ORDERS[0]
        order = dict(seed, items=[dict(seed["items"][0], quantity=True)])
        with self.assertRaises(PurchaseOrderError) as ctx:
            purchase_orders.decode_handoff(self._encode({"schema": "baskit.purchase_order", "version": 1, "order": order}))
        self.assertEqual(ctx.exception.code, "invalid_handoff")


class OrderListFilterTests(SimpleTestCase):
    orders = [
        {"po_number": "PO-2024-001", "supplier_name": "PT Indofood", "sales_order_id": "SO-2024-001",
         "order_date": "2024-01-15", "status": "Delivered", "total_amount": 350_000},
        {"po_number": "PO-2025-001", "supplier_name": "CV Nestle Partner", "sales_order_id": "",
         "order_date": "2025-01-18", "status": "Sent", "total_amount": 900_000},
        {"po_number": "PO-2025-002", "supplier_name": "PT Multi FMCG", "sales_order_id": "SO-2024-003",
         "order_date": "2025-01-20", "status": "Confirmed", "total_amount": 100_000},
    ]
    today = date(2025, 1, 20)

    def _numbers(self, **kwargs) -> list:
        return [order["po_number"] for order in purchase_orders.filter_orders(self.orders, today=self.today, **kwargs)]

    def test_default_sort_is_order_date_desc(self) -> None:
        self.assertEqual(self._numbers(), ["PO-2025-002", "PO-2025-001", "PO-2024-001"])

    def test_search_covers_sales_order_id(self) -> None:
        self.assertEqual(self._numbers(search="so-2024-003"), ["PO-2025-002"])

    def test_status_filter(self) -> None:
        self.assertEqual(self._numbers(status="Sent"), ["PO-2025-001"])

    def test_date_filters(self) -> None:
        self.assertEqual(self._numbers(date_filter="Today"), ["PO-2025-002"])
        self.assertEqual(self._numbers(date_filter="This Week"), ["PO-2025-002", "PO-2025-001"])
        # Same month in a previous year does not count.
        self.assertEqual(self._numbers(date_filter="This Month"), ["PO-2025-002", "PO-2025-001"])

    def test_sort_by_amount_ascending(self) -> None:
        self.assertEqual(
            self._numbers(sort_by="total_amount", sort_order="asc"),
            ["PO-2025-002", "PO-2024-001", "PO-2025-001"],
        )

    def test_order_stats(self) -> None:
        stats = purchase_orders.order_stats(self.orders)
        self.assertEqual(stats["total_orders"], 3)
        self.assertEqual(stats["total_value"], 1_350_000)
        self.assertEqual(stats["by_status"]["Delivered"], 1)


class PurchaseOrderStoreTests(TempStoreMixin, SimpleTestCase):
    def test_seed_order_is_present(self) -> None:
        order = purchase_orders.get_purchase_order("PO-2024-001")
        self.assertEqual(order["status"], "Delivered")

    def test_create_assigns_next_sequence(self) -> None:
        supplier = catalog.get_supplier("6")
        first = purchase_orders.create_purchase_order(supplier, SO_001_ITEMS[:1], {"name": "a"}, today=date(2024, 6, 1))
        second = purchase_orders.create_purchase_order(supplier, SO_001_ITEMS[:1], {"name": "a"}, today=date(2024, 6, 2))
        self.assertEqual(first["po_number"], "PO-2024-002")
        self.assertEqual(second["po_number"], "PO-2024-003")
        self.assertEqual(len(purchase_orders.list_purchase_orders()), 3)

    def test_status_transitions(self) -> None:
        order = purchase_orders.create_purchase_order(
            catalog.get_supplier("1"), SO_001_ITEMS, {"name": "a"}, today=date(2024, 6, 1)
        )
        updated = purchase_orders.transition_status(order["po_number"], "Confirmed")
        self.assertEqual(updated["status"], "Confirmed")
        with self.assertRaises(PurchaseOrderError) as ctx:
            purchase_orders.transition_status(order["po_number"], "Sent")
        self.assertEqual(ctx.exception.code, "invalid_transition")

    def test_terminal_status_cannot_move(self) -> None:
        with self.assertRaises(PurchaseOrderError):
            purchase_orders.transition_status("PO-2024-001", "Cancelled")

    def test_import_rejects_duplicates(self) -> None:
        handoff = purchase_orders.encode_handoff(catalog.SEED_PURCHASE_ORDERS[0])
        with self.assertRaises(PurchaseOrderError) as ctx:
            purchase_orders.import_handoff(handoff)
        self.assertEqual(ctx.exception.code, "duplicate")

    def test_transition_is_validated_while_store_is_locked(self) -> None:
        order = purchase_orders.create_purchase_order(
            catalog.get_supplier("1"), SO_001_ITEMS, {"name": "a"}, today=date(2024, 6, 1)
        )
        lock_states = []
        validate = purchase_orders._validate_transition

        def recording_validate(current, target):
            lock_states.append(store.STORE_LOCK.locked())
            validate(current, target)

        with patch("sourcing.services.purchase_orders._validate_transition", side_effect=recording_validate):
            purchase_orders.transition_status(order["po_number"], "Confirmed")
        self.assertEqual(lock_states, [True])

    def test_concurrent_transitions_apply_once(self) -> None:
        order = purchase_orders.create_purchase_order(
            catalog.get_supplier("1"), SO_001_ITEMS, {"name": "a"}, today=date(2024, 6, 1)
        )
        barrier = threading.Barrier(2)
        outcomes = []

        def confirm():
            barrier.wait()
            try:
                purchase_orders.transition_status(order["po_number"], "Confirmed")
                outcomes.append("ok")
            except PurchaseOrderError as exc:
                outcomes.append(exc.code)

        threads = [threading.Thread(target=confirm) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(sorted(outcomes), ["invalid_transition", "ok"])
        self.assertEqual(purchase_orders.get_purchase_order(order["po_number"])["status"], "Confirmed")

    def test_missing_order_is_not_created_by_transition(self) -> None:
        with self.assertRaises(PurchaseOrderError) as ctx:
            purchase_orders.transition_status("PO-2024-999", "Confirmed")
        self.assertEqual(ctx.exception.code, "not_found")
        self.assertIsNone(purchase_orders.get_purchase_order("PO-2024-999"))


class DemandBoardTests(SimpleTestCase):
    noodle_profile = {
        "capabilities": [
            {"product_name": "Indomie", "min_quantity": 100, "max_quantity": 1000, "unit_price": 3300},
        ],
        "service_areas": [],
    }

    def _ids(self, **kwargs) -> list:
        return [demand["id"] for demand in demand_board.list_demands(**kwargs)]

    def test_without_capabilities_all_demands_show(self) -> None:
        self.assertEqual(len(self._ids()), 5)
        self.assertEqual(len(self._ids(profile={"capabilities": []})), 5)

    def test_capability_match(self) -> None:
        self.assertEqual(self._ids(profile=self.noodle_profile), ["DEM-001", "DEM-005"])

    def test_price_tolerance(self) -> None:
        profile = {"capabilities": [dict(self.noodle_profile["capabilities"][0], unit_price=3600)]}
        self.assertEqual(self._ids(profile=profile), ["DEM-005"])

    def test_quantity_bounds(self) -> None:
        profile = {"capabilities": [dict(self.noodle_profile["capabilities"][0], min_quantity=450)]}
        self.assertEqual(self._ids(profile=profile), ["DEM-005"])

    def test_service_area(self) -> None:
        profile = dict(self.noodle_profile, service_areas=["Jakarta"])
        self.assertEqual(self._ids(profile=profile), ["DEM-001"])

    def test_order_size_bands(self) -> None:
        self.assertTrue(demand_board.order_size_matches(10_000_000, "Medium (Rp 10M - 50M)"))
        self.assertFalse(demand_board.order_size_matches(10_000_000, "Small (< Rp 10M)"))
        self.assertTrue(demand_board.order_size_matches(200_000_000, "Large (Rp 50M - 200M)"))
        self.assertFalse(demand_board.order_size_matches(200_000_000, "Enterprise (> Rp 200M)"))
        self.assertTrue(demand_board.order_size_matches(1, "anything"))

    def test_sort_by_urgency(self) -> None:
        self.assertEqual(self._ids(sort_by="urgency"), ["DEM-005", "DEM-001", "DEM-002", "DEM-004", "DEM-003"])

    def test_sort_by_budget(self) -> None:
        self.assertEqual(self._ids(sort_by="budget"), ["DEM-003", "DEM-004", "DEM-002", "DEM-005", "DEM-001"])

    def test_sort_by_expiry(self) -> None:
        self.assertEqual(self._ids(sort_by="expires")[0], "DEM-005")

    def test_search_and_filters(self) -> None:
        self.assertEqual(self._ids(search="bandung"), ["DEM-002"])
        self.assertEqual(self._ids(urgency="urgent"), ["DEM-005"])
        self.assertEqual(self._ids(status="quoted"), ["DEM-003"])

    def test_match_score(self) -> None:
        demand = demand_board.get_demand("DEM-001")
        profile = dict(self.noodle_profile, service_areas=["Jakarta Selatan"])
        self.assertEqual(demand_board.match_score(demand, profile), 97)

    def test_quotes_for_demand(self) -> None:
        self.assertEqual(len(demand_board.quotes_for_demand("DEM-001")), 1)
        self.assertEqual(demand_board.quotes_for_demand("DEM-002"), [])


class SupplierApiTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    def test_search_ranks_cheapest(self) -> None:
        response = self.client.post(
            "/api/v1/sourcing/suppliers/search/",
            {"items": SO_001_ITEMS, "sort_by": "cheapest"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([entry["id"] for entry in response.json()["suppliers"]], ["6", "1", "2", "3"])

    def test_search_rejects_unknown_sort(self) -> None:
        response = self.client.post("/api/v1/sourcing/suppliers/search/", {"sort_by": "random"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("sort_by", response.json()["errors"])

    def test_search_rejects_bad_quantity(self) -> None:
        response = self.client.post(
            "/api/v1/sourcing/suppliers/search/",
            {"items": [{"product_name": "Indomie Goreng", "quantity": 0}]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"]["items[0].quantity"], "Must be a positive integer.")

    def test_supplier_detail(self) -> None:
        response = self.client.get("/api/v1/sourcing/suppliers/4/")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["distance_info"]["distance"], 25)
        self.assertEqual(len(body["shipping_preview"]), 3)
        self.assertEqual(self.client.get("/api/v1/sourcing/suppliers/99/").status_code, 404)

    def test_contact(self) -> None:
        response = self.client.get("/api/v1/sourcing/suppliers/2/contact/")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["mailto"].startswith("mailto:sales@nestlepartner.co.id?"))

    def test_sales_order_import(self) -> None:
        response = self.client.get("/api/v1/sourcing/sales-orders/so-2024-003/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["sales_order_id"], "SO-2024-003")

        missing = self.client.get("/api/v1/sourcing/sales-orders/SO-9/")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(
            missing.json()["errors"]["sales_order_id"],
            "Sales Order ID not found. Try: SO-2024-001, SO-2024-002, or SO-2024-003",
        )


class ShortlistApiTests(TempStoreMixin, SimpleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_add_list_remove(self) -> None:
        created = self.client.post(
            "/api/v1/sourcing/shortlist/", {"supplier_id": "1", "notes": "fast"}, format="json"
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["notes"], "fast")

        duplicate = self.client.post("/api/v1/sourcing/shortlist/", {"supplier_id": "1"}, format="json")
        self.assertEqual(duplicate.status_code, 409)

        unknown = self.client.post("/api/v1/sourcing/shortlist/", {"supplier_id": "99"}, format="json")
        self.assertEqual(unknown.status_code, 404)

        listing = self.client.get("/api/v1/sourcing/shortlist/")
        self.assertEqual(listing.json()["count"], 1)

        self.assertEqual(self.client.delete("/api/v1/sourcing/shortlist/1/").status_code, 204)
        self.assertEqual(self.client.delete("/api/v1/sourcing/shortlist/1/").status_code, 404)

    @override_settings(**SUPPLIER_SETTINGS)
    def test_supplier_role_is_forbidden(self) -> None:
        response = self.client.get("/api/v1/sourcing/shortlist/")
        self.assertEqual(response.status_code, 403)

    @override_settings(AUTH_ENABLED=True, DEV_AUTH_ENABLED=False)
    def test_missing_token_is_unauthorized(self) -> None:
        response = self.client.get("/api/v1/sourcing/shortlist/")
        self.assertEqual(response.status_code, 401)

    @override_settings(ORDER_STORE_ENABLED=False, **DISTRIBUTOR_SETTINGS)
    def test_disabled_store(self) -> None:
        response = self.client.get("/api/v1/sourcing/shortlist/")
        self.assertEqual(response.status_code, 501)
        self.assertEqual(response.json()["errors"]["store"], "Order store is disabled.")


class PurchaseOrderApiTests(TempStoreMixin, SimpleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()

    def _create_payload(self) -> dict:
        return {"supplier_id": "1", "items": SO_001_ITEMS, "sales_order_id": "so-2024-001"}

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_create_list_and_transition(self) -> None:
        created = self.client.post("/api/v1/sourcing/purchase-orders/", self._create_payload(), format="json")
        self.assertEqual(created.status_code, 201)
        order = created.json()
        self.assertRegex(order["po_number"], r"^PO-\d{4}-\d{3}$")
        self.assertEqual(order["sales_order_id"], "SO-2024-001")
        self.assertEqual(order["created_by"], "dev-user")

        listing = self.client.get("/api/v1/sourcing/purchase-orders/", {"search": order["po_number"]})
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(listing.json()["count"], 1)
        self.assertEqual(listing.json()["stats"]["total_orders"], 2)

        url = f"/api/v1/sourcing/purchase-orders/{order['po_number']}/status/"
        confirmed = self.client.patch(url, {"status": "Confirmed"}, format="json")
        self.assertEqual(confirmed.status_code, 200)
        self.assertEqual(confirmed.json()["status"], "Confirmed")

        backwards = self.client.patch(url, {"status": "Sent"}, format="json")
        self.assertEqual(backwards.status_code, 409)

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_create_validates_payload(self) -> None:
        response = self.client.post(
            "/api/v1/sourcing/purchase-orders/",
            {"supplier_id": "99", "items": [], "sales_order_id": "SO-0"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        errors = response.json()["errors"]
        self.assertIn("supplier_id", errors)
        self.assertIn("items", errors)
        self.assertIn("sales_order_id", errors)

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_handoff_then_import(self) -> None:
        handoff = self.client.post(
            "/api/v1/sourcing/purchase-orders/handoff/", self._create_payload(), format="json"
        )
        self.assertEqual(handoff.status_code, 200)
        token = handoff.json()["handoff"]

        imported = self.client.post("/api/v1/sourcing/purchase-orders/import/", {"handoff": token}, format="json")
        self.assertEqual(imported.status_code, 201)
        po_number = imported.json()["po_number"]
        self.assertEqual(self.client.get(f"/api/v1/sourcing/purchase-orders/{po_number}/").status_code, 200)

        again = self.client.post("/api/v1/sourcing/purchase-orders/import/", {"handoff": token}, format="json")
        self.assertEqual(again.status_code, 409)

        broken = self.client.post("/api/v1/sourcing/purchase-orders/import/", {"handoff": "%%%"}, format="json")
        self.assertEqual(broken.status_code, 400)

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_unknown_order_is_404(self) -> None:
        self.assertEqual(self.client.get("/api/v1/sourcing/purchase-orders/PO-1999-001/").status_code, 404)

    @override_settings(**SUPPLIER_SETTINGS)
    def test_supplier_cannot_create(self) -> None:
        response = self.client.post("/api/v1/sourcing/purchase-orders/", self._create_payload(), format="json")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.client.get("/api/v1/sourcing/purchase-orders/").status_code, 200)


class DemandApiTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    @override_settings(**SUPPLIER_SETTINGS)
    def test_demand_board_filters(self) -> None:
        response = self.client.get("/api/v1/sourcing/demands/", {"sort_by": "budget"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["demands"][0]["id"], "DEM-003")

        matched = self.client.post(
            "/api/v1/sourcing/demands/",
            {"profile": DemandBoardTests.noodle_profile},
            format="json",
        )
        self.assertEqual(matched.status_code, 200)
        self.assertEqual([demand["id"] for demand in matched.json()["demands"]], ["DEM-001", "DEM-005"])
        self.assertIn("match_score", matched.json()["demands"][0])

    @override_settings(**SUPPLIER_SETTINGS)
    def test_malformed_profiles_are_rejected(self) -> None:
        cases = [
            ({"capabilities": [{"product_name": "Indomie", "min_quantity": "10"}]},
             "profile.capabilities[0].min_quantity"),
            ({"capabilities": ["Indomie"]}, "profile.capabilities[0]"),
            ({"capabilities": [{"product_name": "Indomie", "unit_price": "cheap"}]},
             "profile.capabilities[0].unit_price"),
            ({"capabilities": [{"product_name": "Indomie", "min_quantity": 50, "max_quantity": 10}]},
             "profile.capabilities[0].max_quantity"),
            ({"capabilities": [{"min_quantity": 1}]}, "profile.capabilities[0].product_name"),
            ({"capabilities": [], "service_areas": [1]}, "profile.service_areas"),
            ({"capabilities": [], "service_areas": "Jakarta"}, "profile.service_areas"),
            ({"capabilities": "Indomie"}, "profile.capabilities"),
            ("Indomie", "profile"),
        ]
        for profile, field in cases:
            with self.subTest(field=field):
                response = self.client.post("/api/v1/sourcing/demands/", {"profile": profile}, format="json")
                self.assertEqual(response.status_code, 400)
                self.assertIn(field, response.json()["errors"])

    @override_settings(**SUPPLIER_SETTINGS)
    def test_post_without_profile_lists_every_demand(self) -> None:
        response = self.client.post("/api/v1/sourcing/demands/", {}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["count"], 5)

    @override_settings(**SUPPLIER_SETTINGS)
    def test_bad_sort_is_rejected(self) -> None:
        response = self.client.get("/api/v1/sourcing/demands/", {"sort_by": "random"})
        self.assertEqual(response.status_code, 400)

    @override_settings(**SUPPLIER_SETTINGS)
    def test_quotes(self) -> None:
        response = self.client.get("/api/v1/sourcing/demands/DEM-001/quotes/")
        self.assertEqual(response.json()["count"], 1)
        self.assertEqual(self.client.get("/api/v1/sourcing/demands/DEM-404/quotes/").status_code, 404)

    @override_settings(**DISTRIBUTOR_SETTINGS)
    def test_distributor_cannot_view_board(self) -> None:
        self.assertEqual(self.client.get("/api/v1/sourcing/demands/").status_code, 403)
