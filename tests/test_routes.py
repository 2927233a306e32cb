"""HTTP-level tests: status mapping, auth gating and response shapes."""

import unittest

from fakes import InMemoryStore
from fastapi.testclient import TestClient

from auth import security
from core import db
from main import app

POST = {"title": "Hello world", "content": "Long enough content.", "author": "alice"}


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        app.dependency_overrides[db.get_store] = lambda: self.store
        # No `with`: lifespan (and the real pool) is never started.
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def auth_headers(self, user_id: int = 1) -> dict[str, str]:
        return {"Authorization": f"Bearer {security.build_access_token(user_id=user_id)}"}

    def register(self, **overrides) -> dict:
        body = {"username": "alice", "email": "alice@example.com", "password": "secret1"}
        body.update(overrides)
        return self.client.post("/api/auth/register", json=body)


class TestAuthRoutes(ApiTestCase):
    def test_register_login_me(self) -> None:
        resp = self.register()
        self.assertEqual(resp.status_code, 201)
        self.assertNotIn("password_hash", resp.json()["user"])

        resp = self.client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret1"})
        self.assertEqual(resp.status_code, 200)
        token = resp.json()["access_token"]

        resp = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["username"], "alice")
        self.assertNotIn("password_hash", resp.json())

    def test_register_errors(self) -> None:
        resp = self.register(password="12345")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "invalid_input")

        self.assertEqual(self.register().status_code, 201)
        resp = self.register()
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"], "conflict")

    def test_login_failures_have_identical_bodies(self) -> None:
        self.register()
        wrong = self.client.post("/api/auth/login", json={"email": "alice@example.com", "password": "bad123"})
        unknown = self.client.post("/api/auth/login", json={"email": "eve@example.com", "password": "secret1"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())

    def test_long_password_registers_and_logs_in(self) -> None:
        resp = self.register(password="p" * 80)
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post("/api/auth/login", json={"email": "alice@example.com", "password": "p" * 80})
        self.assertEqual(resp.status_code, 200)

    def test_me_requires_token(self) -> None:
        self.assertEqual(self.client.get("/api/auth/me").status_code, 401)
        resp = self.client.get("/api/auth/me", headers={"Authorization": "Token abc"})
        self.assertEqual(resp.status_code, 401)
        resp = self.client.get("/api/auth/me", headers={"Authorization": "Bearer abc"})
        self.assertEqual(resp.json(), {"error": "unauthorized", "detail": "Invalid or expired token."})

    def test_logout_and_refresh(self) -> None:
        self.assertEqual(self.client.post("/api/auth/logout").status_code, 200)
        resp = self.client.post("/api/auth/refresh")
        self.assertEqual(resp.status_code, 501)
        self.assertEqual(resp.json()["error"], "not_implemented")


class TestPostRoutes(ApiTestCase):
    def test_list_requires_token(self) -> None:
        self.assertEqual(self.client.get("/api/post").status_code, 401)
        resp = self.client.get("/api/post", headers=self.auth_headers())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])

    def test_crud(self) -> None:
        headers = self.auth_headers()
        resp = self.client.post("/api/post", json=POST, headers=headers)
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["id"], 1)
        self.assertEqual(body["data"], {**POST, "status": "draft", "id": 1})

        resp = self.client.put("/api/post/1", json={**POST, "status": "published"}, headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["affected_rows"], 1)
        self.assertEqual(self.client.get("/api/post/1").json()["status"], "published")

        self.assertEqual(self.client.delete("/api/post/1", headers=headers).status_code, 200)
        resp = self.client.get("/api/post/1")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"], "not_found")
        self.assertEqual(self.client.delete("/api/post/1", headers=headers).status_code, 404)

    def test_validation_is_400(self) -> None:
        resp = self.client.post("/api/post", json={**POST, "title": "Hi"}, headers=self.auth_headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "invalid_input")
        self.assertIn("title", resp.json()["detail"])

    def test_mutations_require_token(self) -> None:
        self.assertEqual(self.client.post("/api/post", json=POST).status_code, 401)
        self.assertEqual(self.client.delete("/api/post/1").status_code, 401)
        self.assertEqual(self.store.calls, [])

    def test_unknown_body_fields_never_become_columns(self) -> None:
        body = {**POST, "id = 1; DROP TABLE posts; --": "x"}
        resp = self.client.post("/api/post", json=body, headers=self.auth_headers())
        self.assertEqual(resp.status_code, 201)
        sql, _ = self.store.calls[-1]
        self.assertNotIn("DROP", sql)

    def test_store_failure_is_500(self) -> None:
        from core.db import StoreError

        self.store.fail_with = StoreError("connection reset")
        resp = self.client.get("/api/post/1")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "query_failed", "detail": "Error fetching from posts."})


class TestUserRoutes(ApiTestCase):
    def test_list_and_get_hide_hash(self) -> None:
        self.register()
        rows = self.client.get("/api/users").json()
        self.assertEqual(len(rows), 1)
        self.assertNotIn("password_hash", rows[0])
        self.assertNotIn("password_hash", self.client.get("/api/users/1").json())

    def test_admin_create_and_password_change(self) -> None:
        headers = self.auth_headers()
        resp = self.client.post(
            "/api/users",
            json={"username": "bob", "email": "bob@example.com", "password": "secret1", "role": "admin"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["data"]["role"], "admin")
        self.assertNotIn("password_hash", resp.json()["data"])

        resp = self.client.put(
            "/api/users/1/password",
            json={"current_password": "secret1", "new_password": "secret2"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.post("/api/auth/login", json={"email": "bob@example.com", "password": "secret2"})
        self.assertEqual(resp.status_code, 200)

    def test_partial_update(self) -> None:
        self.register()
        resp = self.client.put("/api/users/1", json={"first_name": "Al"}, headers=self.auth_headers())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.store.calls[-1][0], "UPDATE users SET first_name = $1 WHERE id = $2")

    def test_empty_update_is_400(self) -> None:
        self.register()
        resp = self.client.put("/api/users/1", json={}, headers=self.auth_headers())
        self.assertEqual(resp.status_code, 400)

    def test_null_fields_are_not_written(self) -> None:
        self.register()
        headers = self.auth_headers()
        calls_before = len(self.store.calls)
        resp = self.client.put("/api/users/1", json={"username": None, "is_active": None}, headers=headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(len(self.store.calls), calls_before)

        resp = self.client.put("/api/users/1", json={"username": None, "first_name": "Al"}, headers=headers)
        self.assertEqual(resp.status_code, 200)
        sql, args = self.store.calls[-1]
        self.assertEqual(sql, "UPDATE users SET first_name = $1 WHERE id = $2")
        self.assertEqual(args, ("Al", 1))
        self.assertEqual(self.store.rows("users")[0]["username"], "alice")

    def test_email_update_is_normalized_and_login_still_works(self) -> None:
        self.register()
        resp = self.client.put("/api/users/1", json={"email": " New@X.com "}, headers=self.auth_headers())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.store.rows("users")[0]["email"], "new@x.com")

        resp = self.client.post("/api/auth/login", json={"email": "New@X.com", "password": "secret1"})
        self.assertEqual(resp.status_code, 200)

    def test_password_change_accepts_camel_case_keys(self) -> None:
        self.register()
        resp = self.client.put(
            "/api/users/1/password",
            json={"currentPassword": "secret1", "newPassword": "secret2"},
            headers=self.auth_headers(),
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret2"})
        self.assertEqual(resp.status_code, 200)


class TestOtherResources(ApiTestCase):
    def test_customer_duplicate_email_is_conflict(self) -> None:
        headers = self.auth_headers()
        body = {"name": "Acme", "email": "sales@acme.com"}
        self.assertEqual(self.client.post("/api/customers", json=body, headers=headers).status_code, 201)
        resp = self.client.post("/api/customers", json=body, headers=headers)
        self.assertEqual(resp.status_code, 409)

    def test_customer_email_is_normalized(self) -> None:
        headers = self.auth_headers()
        body = {"name": "Acme", "email": "Sales@Acme.com"}
        self.assertEqual(self.client.post("/api/customers", json=body, headers=headers).status_code, 201)
        self.assertEqual(self.store.rows("customers")[0]["email"], "sales@acme.com")
        resp = self.client.post("/api/customers", json={**body, "email": "sales@acme.com"}, headers=headers)
        self.assertEqual(resp.status_code, 409)

    def test_tag_slug_is_validated(self) -> None:
        headers = self.auth_headers()
        resp = self.client.post("/api/tags", json={"name": "Python", "slug": "Not A Slug"}, headers=headers)
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post("/api/tags", json={"name": "Python", "slug": "python"}, headers=headers)
        self.assertEqual(resp.status_code, 201)

    def test_comment_and_category_round_trip(self) -> None:
        headers = self.auth_headers()
        resp = self.client.post("/api/comments", json={"post_id": 1, "content": "Nice"}, headers=headers)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["data"]["status"], "pending")

        resp = self.client.post("/api/categories", json={"name": "News", "slug": "news"}, headers=headers)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.client.get("/api/categories/1").json()["slug"], "news")
