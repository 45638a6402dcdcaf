import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import jwt
from django.test import SimpleTestCase, override_settings
from rest_framework.test import APIClient

from api import rbac, store
from api.authentication import Principal, issue_token
from api.views import build_login_user

TOKEN_SETTINGS = dict(
    AUTH_ENABLED=True,
    DEV_AUTH_ENABLED=False,
    AUTH_ISSUER="baskit-test",
    AUTH_SIGNING_KEY="test-signing-key-with-enough-length",
    AUTH_ALGORITHMS=["HS256"],
    AUTH_TOKEN_TTL_MINUTES=60,
)


class HealthEndpointTests(SimpleTestCase):
    def test_health(self) -> None:
        client = APIClient()
        response = client.get("/api/v1/health/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})


class LoginTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    def test_email_login_uses_local_part_as_name(self) -> None:
        user, errors = build_login_user({"email": "budi@toko.id", "password": "secret", "role": "distributor"})
        self.assertEqual(errors, {})
        self.assertEqual(user["name"], "budi")
        self.assertEqual(user["role"], "distributor")
        self.assertTrue(user["is_logged_in"])

    def test_phone_login_builds_synthetic_identity(self) -> None:
        user, errors = build_login_user({"method": "phone", "phone": "+62 812 3456 7890", "role": "supplier"})
        self.assertEqual(errors, {})
        self.assertEqual(user["name"], "User-7890")
        self.assertEqual(user["email"], "+62 812 3456 7890@phone.baskit.com")

    def test_validation_errors(self) -> None:
        _, errors = build_login_user({"email": "not-an-email", "role": "admin"})
        self.assertEqual(set(errors), {"email", "password", "role"})
        _, errors = build_login_user({"method": "phone", "phone": "12"})
        self.assertEqual(errors["phone"], "Enter a valid phone number.")
        _, errors = build_login_user({"method": "fax"})
        self.assertEqual(errors, {"method": "Must be email or phone."})

    @override_settings(**TOKEN_SETTINGS)
    def test_login_endpoint_returns_token(self) -> None:
        response = self.client.post(
            "/api/v1/auth/login/",
            {"email": "budi@toko.id", "password": "secret", "role": "brand"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user"]["email"], "budi@toko.id")
        payload = jwt.decode(
            body["token"], "test-signing-key-with-enough-length", algorithms=["HS256"], issuer="baskit-test"
        )
        self.assertEqual(payload["roles"], ["BRAND"])

    def test_login_endpoint_rejects_bad_payload(self) -> None:
        response = self.client.post("/api/v1/auth/login/", {"email": ""}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", response.json()["errors"])

    def test_roles_endpoint(self) -> None:
        response = self.client.get("/api/v1/auth/roles/")
        codes = [role["code"] for role in response.json()["roles"]]
        self.assertEqual(codes, ["distributor", "supplier", "brand", "partner"])


class AuthWhoAmITests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    @override_settings(**TOKEN_SETTINGS)
    def test_whoami_requires_auth(self) -> None:
        response = self.client.get("/api/v1/auth/whoami/")

        self.assertEqual(response.status_code, 401)

    @override_settings(**TOKEN_SETTINGS)
    def test_whoami_with_login_token(self) -> None:
        token = issue_token({"id": "u-1", "name": "sari", "email": "sari@toko.id", "role": "partner"})
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get("/api/v1/auth/whoami/")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user_id"], "u-1")
        self.assertEqual(body["email"], "sari@toko.id")
        self.assertEqual(body["roles"], ["PARTNER"])
        self.assertIn(rbac.PERM_PARTNER_PORTAL_VIEW, body["permissions"])

    @override_settings(**TOKEN_SETTINGS)
    def test_login_token_authenticates_follow_up_requests(self) -> None:
        login = self.client.post(
            "/api/v1/auth/login/",
            {"email": "budi@toko.id", "password": "secret", "role": "distributor"},
            format="json",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.json()['token']}")
        response = self.client.get("/api/v1/auth/whoami/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["roles"], ["DISTRIBUTOR"])

    @override_settings(AUTH_ENABLED=False, DEV_AUTH_ENABLED=False)
    def test_tokens_are_ignored_while_auth_is_off(self) -> None:
        token = issue_token({"id": "u-1", "name": "sari", "email": "sari@toko.id", "role": "partner"})
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get("/api/v1/auth/whoami/")

        self.assertEqual(response.status_code, 401)

    @override_settings(**TOKEN_SETTINGS)
    def test_expired_token_is_rejected(self) -> None:
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"iss": "baskit-test", "sub": "u-1", "iat": past, "exp": past + timedelta(minutes=5)},
            "test-signing-key-with-enough-length",
            algorithm="HS256",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        with self.assertLogs("api.authentication", level="WARNING"):
            response = self.client.get("/api/v1/auth/whoami/")
        self.assertEqual(response.status_code, 401)

    @override_settings(
        AUTH_ENABLED=False,
        DEV_AUTH_ENABLED=True,
        DEV_AUTH_USER_ID="dev-user",
        DEV_AUTH_ROLES=["SUPPLIER"],
        DEV_AUTH_PERMISSIONS=["marketplace.listing.apply"],
        DEBUG=True,
    )
    def test_whoami_with_dev_principal(self) -> None:
        response = self.client.get("/api/v1/auth/whoami/")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user_id"], "dev-user")
        self.assertEqual(body["roles"], ["SUPPLIER"])
        self.assertIn(rbac.PERM_DEMAND_VIEW, body["permissions"])
        self.assertIn("marketplace.listing.apply", body["permissions"])
        self.assertNotIn(rbac.PERM_SHORTLIST_MANAGE, body["permissions"])


class RbacResolutionTests(SimpleTestCase):
    def test_roles_expand_to_permissions(self) -> None:
        request = type("Request", (), {})()
        principal = Principal(user_id="u-1", username="budi", roles=["distributor"], permissions=[])

        roles, permissions = rbac.resolve_roles_and_permissions(request, principal)

        self.assertEqual(roles, ["DISTRIBUTOR"])
        self.assertIn(rbac.PERM_PURCHASE_ORDER_CREATE, permissions)
        self.assertNotIn(rbac.PERM_CAMPAIGN_MANAGE, permissions)

    def test_resolution_is_cached_per_request(self) -> None:
        request = type("Request", (), {})()
        first = Principal(user_id="u-1", username="budi", roles=["BRAND"])
        second = Principal(user_id="u-1", username="budi", roles=["PARTNER"])

        rbac.resolve_roles_and_permissions(request, first)
        roles, _ = rbac.resolve_roles_and_permissions(request, second)

        self.assertEqual(roles, ["BRAND"])

    def test_unknown_role_grants_nothing(self) -> None:
        request = type("Request", (), {})()
        principal = Principal(user_id="u-1", username="x", roles=["VIEWER"], permissions=["custom.perm"])

        _, permissions = rbac.resolve_roles_and_permissions(request, principal)

        self.assertEqual(permissions, ["custom.perm"])


class StoreTests(SimpleTestCase):
    def setUp(self) -> None:
        self._store_dir = tempfile.mkdtemp()
        self._override = override_settings(
            ORDER_STORE_ENABLED=True,
            ORDER_STORE_PATH=str(Path(self._store_dir) / "nested" / "store.json"),
        )
        self._override.enable()

    def tearDown(self) -> None:
        self._override.disable()
        shutil.rmtree(self._store_dir, ignore_errors=True)

    def test_put_get_delete(self) -> None:
        store.put_record("things", "a", {"id": "a", "value": 1})
        self.assertEqual(store.get_record("things", "a"), {"id": "a", "value": 1})
        self.assertEqual(len(store.list_records("things")), 1)
        self.assertTrue(store.delete_record("things", "a"))
        self.assertFalse(store.delete_record("things", "a"))
        self.assertIsNone(store.get_record("things", "a"))

    def test_insert_sees_existing_records(self) -> None:
        store.insert_record("things", lambda existing: {"id": str(len(existing) + 1)})
        second = store.insert_record("things", lambda existing: {"id": str(len(existing) + 1)})
        self.assertEqual(second["id"], "2")

    def test_failed_build_leaves_store_untouched(self) -> None:
        def build(existing):
            raise ValueError("nope")

        with self.assertRaises(ValueError):
            store.insert_record("things", build)
        self.assertEqual(store.list_records("things"), [])

    def test_update_changes_existing_record(self) -> None:
        store.put_record("things", "a", {"id": "a", "value": 1})
        updated = store.update_record("things", "a", lambda record: dict(record, value=record["value"] + 1))
        self.assertEqual(updated["value"], 2)
        self.assertEqual(store.get_record("things", "a")["value"], 2)

    def test_update_of_missing_record_returns_none(self) -> None:
        calls = []
        self.assertIsNone(store.update_record("things", "missing", calls.append))
        self.assertEqual(calls, [])
        self.assertIsNone(store.get_record("things", "missing"))

    def test_failed_update_leaves_record_untouched(self) -> None:
        store.put_record("things", "a", {"id": "a", "value": 1})

        def mutate(record):
            record["value"] = 99
            raise ValueError("nope")

        with self.assertRaises(ValueError):
            store.update_record("things", "a", mutate)
        self.assertEqual(store.get_record("things", "a")["value"], 1)

    def test_transact_writes_all_collections_or_none(self) -> None:
        def both(data):
            data.setdefault("left", {})["1"] = {"id": "1"}
            data.setdefault("right", {})["1"] = {"id": "1"}
            return "done"

        self.assertEqual(store.transact(both), "done")
        self.assertEqual(len(store.list_records("left")), 1)
        self.assertEqual(len(store.list_records("right")), 1)

        def half(data):
            data["left"]["2"] = {"id": "2"}
            raise RuntimeError("stop")

        with self.assertRaises(RuntimeError):
            store.transact(half)
        self.assertEqual(len(store.list_records("left")), 1)

    def test_reset_removes_file(self) -> None:
        store.put_record("things", "a", {"id": "a"})
        store.reset_store()
        self.assertFalse(Path(self._store_dir, "nested", "store.json").exists())

    @override_settings(ORDER_STORE_ENABLED=False)
    def test_disabled_store_raises(self) -> None:
        with self.assertRaises(RuntimeError):
            store.list_records("things")
