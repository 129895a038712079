"""Registration, login and status tests."""

from __future__ import annotations

import inspect
import tempfile
import unittest

from fastapi.testclient import TestClient

from postfeed.adapters.passwords import BcryptPasswordHasher
from postfeed.context import build_context
from postfeed.core.config import Settings
from postfeed.errors import ApiError
from postfeed.main import create_app
from postfeed.repositories.memory import DuplicateEmailError, InMemoryStore, PrincipalRecord
from postfeed.routes import auth as auth_routes
from postfeed.services.accounts import AccountService

_TEST_SECRET = "accounts-test-secret-0123456789abcdef"


class _StaleLookupStore(InMemoryStore):
    """Email lookups miss, as when a concurrent signup has not landed yet."""

    def find_principal_by_email(self, email: str) -> PrincipalRecord | None:
        return None


class _CountingHasher(BcryptPasswordHasher):
    def __init__(self, rounds: int) -> None:
        super().__init__(rounds)
        self.compare_calls = 0

    def compare(self, plain: str, digest: str) -> bool:
        self.compare_calls += 1
        return super().compare(plain, digest)


class _ApiCase(unittest.TestCase):
    def setUp(self) -> None:
        self._image_dir = tempfile.TemporaryDirectory()
        self.app = create_app(
            Settings(token_secret=_TEST_SECRET, bcrypt_rounds=4, image_dir=self._image_dir.name)
        )
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self._image_dir.cleanup()

    def _register(self, email: str, password: str = "secret-pass", name: str = "Tester"):
        return self.client.post(
            "/api/v1/auth/signup",
            json={"email": email, "name": name, "password": password},
        )

    def _login(self, email: str, password: str = "secret-pass"):
        return self.client.post("/api/v1/auth/login", json={"email": email, "password": password})

    def _auth_headers(self, email: str) -> dict[str, str]:
        self.assertEqual(self._register(email).status_code, 201)
        response = self._login(email)
        self.assertEqual(response.status_code, 200)
        return {"Authorization": f"Bearer {response.json()['token']}"}


class RegistrationApiTests(_ApiCase):
    def test_register_returns_public_projection_without_password(self) -> None:
        response = self._register("ada@example.com", name="Ada")

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(set(body.keys()), {"id", "email", "name", "status", "posts"})
        self.assertEqual(body["email"], "ada@example.com")
        self.assertEqual(body["name"], "Ada")
        self.assertEqual(body["status"], "I am new!")
        self.assertEqual(body["posts"], [])

        stored = self.app.state.context.store.get_principal(body["id"])
        assert stored is not None
        self.assertNotEqual(stored.password_hash, "secret-pass")

    def test_invalid_email_and_short_password_report_every_field_message(self) -> None:
        response = self._register("not-an-email", password="abc")

        self.assertEqual(response.status_code, 422)
        self.assertEqual(
            response.json(),
            {
                "code": "VALIDATION_FAILED",
                "message": "Invalid input.",
                "data": [{"message": "Email is invalid"}, {"message": "Password too short!"}],
            },
        )
        self.assertEqual(self.app.state.context.store.principal_write_count, 0)

    def test_empty_password_is_too_short(self) -> None:
        response = self._register("ada@example.com", password="")

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["data"], [{"message": "Password too short!"}])

    def test_duplicate_email_is_a_conflict(self) -> None:
        self.assertEqual(self._register("ada@example.com").status_code, 201)

        response = self._register("ada@example.com", password="other-pass")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {"code": "EMAIL_ALREADY_REGISTERED", "message": "User already exists"})
        self.assertEqual(len(self.app.state.context.store.principals), 1)

    def test_missing_field_on_public_route_is_a_validation_error(self) -> None:
        response = self.client.post("/api/v1/auth/signup", json={"email": "ada@example.com"})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["code"], "VALIDATION_FAILED")
        self.assertTrue(response.json()["data"])


class LoginApiTests(_ApiCase):
    def test_register_then_login_issues_token_for_same_principal(self) -> None:
        registered = self._register("ada@example.com").json()

        response = self._login("ada@example.com")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user_id"], registered["id"])
        principal = self.app.state.context.credentials.verify(body["token"])
        assert principal is not None
        self.assertEqual(principal.principal_id, registered["id"])
        self.assertEqual(principal.email, "ada@example.com")

    def test_wrong_password_and_unknown_email_are_indistinguishable(self) -> None:
        self._register("ada@example.com")

        wrong_password = self._login("ada@example.com", password="not-the-password")
        unknown_email = self._login("nobody@example.com")

        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_email.status_code, 401)
        self.assertEqual(wrong_password.json(), unknown_email.json())
        self.assertEqual(
            wrong_password.json(),
            {"code": "UNAUTHENTICATED", "message": "Email or password is incorrect."},
        )


class StatusApiTests(_ApiCase):
    def test_get_and_set_status_address_only_the_caller(self) -> None:
        ada_headers = self._auth_headers("ada@example.com")
        bob_headers = self._auth_headers("bob@example.com")

        updated = self.client.put("/api/v1/status", headers=ada_headers, json={"status": "Writing"})
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["status"], "Writing")
        self.assertEqual(updated.json()["email"], "ada@example.com")

        self.assertEqual(self.client.get("/api/v1/status", headers=ada_headers).json()["status"], "Writing")
        self.assertEqual(self.client.get("/api/v1/status", headers=bob_headers).json()["status"], "I am new!")

    def test_status_requires_authentication(self) -> None:
        get_response = self.client.get("/api/v1/status")
        put_response = self.client.put("/api/v1/status", json={"status": "Hello"})

        self.assertEqual(get_response.status_code, 401)
        self.assertEqual(get_response.json(), {"code": "UNAUTHENTICATED", "message": "Not authorized."})
        self.assertEqual(put_response.status_code, 401)

    def test_status_for_principal_that_no_longer_exists_is_404(self) -> None:
        headers = self._auth_headers("ada@example.com")
        self.app.state.context.store.principals.clear()

        response = self.client.get("/api/v1/status", headers=headers)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"code": "RESOURCE_NOT_FOUND", "message": "User not found!"})


class AccountServiceUnitTests(unittest.TestCase):
    def setUp(self) -> None:
        context = build_context(Settings(token_secret=_TEST_SECRET, bcrypt_rounds=4))
        self.store = context.store
        self.credentials = context.credentials
        self.hasher = context.hasher
        self.service = AccountService(context.store, context.credentials, context.hasher)

    def test_register_rejects_passwords_beyond_bcrypt_limit(self) -> None:
        with self.assertRaises(ApiError) as context:
            self.service.register(email="ada@example.com", name="Ada", password="x" * 73)

        self.assertEqual(context.exception.status_code, 422)
        assert context.exception.payload.data is not None
        self.assertEqual(context.exception.payload.data[0].message, "Password too long!")
        self.assertEqual(self.store.principal_write_count, 0)

    def test_login_with_over_long_password_is_plain_401(self) -> None:
        self.service.register(email="ada@example.com", name="Ada", password="secret-pass")

        with self.assertRaises(ApiError) as context:
            self.service.login(email="ada@example.com", password="y" * 100)
        self.assertEqual(context.exception.status_code, 401)

    def test_store_failure_propagates_unchanged(self) -> None:
        self.store.principal_write_failure_message = "store unavailable"

        with self.assertRaises(RuntimeError) as context:
            self.service.register(email="ada@example.com", name="Ada", password="secret-pass")
        self.assertEqual(str(context.exception), "store unavailable")

    def test_register_loses_insert_race_as_conflict(self) -> None:
        store = _StaleLookupStore()
        service = AccountService(store, self.credentials, self.hasher)
        service.register(email="ada@example.com", name="Ada", password="secret-pass")

        with self.assertRaises(ApiError) as raised:
            service.register(email="ada@example.com", name="Other Ada", password="other-pass")

        self.assertEqual(raised.exception.status_code, 409)
        self.assertEqual(raised.exception.payload.code, "EMAIL_ALREADY_REGISTERED")
        self.assertEqual(len(store.principals), 1)

    def test_unknown_email_still_runs_a_password_comparison(self) -> None:
        hasher = _CountingHasher(rounds=4)
        service = AccountService(self.store, self.credentials, hasher)

        with self.assertRaises(ApiError) as raised:
            service.login(email="nobody@example.com", password="secret-pass")
        self.assertEqual(raised.exception.status_code, 401)
        self.assertEqual(hasher.compare_calls, 1)

        with self.assertRaises(ApiError):
            service.login(email="not-an-email", password="secret-pass")
        self.assertEqual(hasher.compare_calls, 2)


class EmailNormalizationTests(_ApiCase):
    def test_addresses_differing_only_in_case_are_one_principal(self) -> None:
        first = self._register("Ada@Example.com")
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["email"], "ada@example.com")

        second = self._register("ada@example.com")

        self.assertEqual(second.status_code, 409)
        self.assertEqual(len(self.app.state.context.store.principals), 1)

    def test_login_matches_regardless_of_case(self) -> None:
        registered = self._register("ada@example.com").json()

        response = self._login("ADA@EXAMPLE.COM")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user_id"], registered["id"])


class AuthRouteExecutionTests(unittest.TestCase):
    def test_hashing_routes_run_outside_the_event_loop(self) -> None:
        # Plain functions are dispatched to the threadpool by FastAPI.
        self.assertFalse(inspect.iscoroutinefunction(auth_routes.register))
        self.assertFalse(inspect.iscoroutinefunction(auth_routes.login))


class PrincipalUniquenessStoreTests(unittest.TestCase):
    def test_create_principal_rejects_a_registered_email(self) -> None:
        store = InMemoryStore()
        store.create_principal(email="ada@example.com", name="Ada", password_hash="digest")

        with self.assertRaises(DuplicateEmailError):
            store.create_principal(email="ada@example.com", name="Ada Again", password_hash="digest")

        self.assertEqual(len(store.principals), 1)
        self.assertEqual(store.principal_write_count, 1)
