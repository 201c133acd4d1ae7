"""Tests for login routes and token verification."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from jose import jwt

from api import security
from api.tests.route_helpers import RouteTestCase


class TestAdminLogin(RouteTestCase):

    def test_correct_password_returns_admin_token(self):
        response = self.client.post("/api/admin/login", json={"password": security.ADMIN_PASSWORD})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["user"], {"name": "Admin", "role": "admin"})
        claims = security.decode_token(body["token"])
        self.assertTrue(claims["isAdmin"])

    def test_wrong_password(self):
        response = self.client.post("/api/admin/login", json={"password": "wrong"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"success": False, "message": "Invalid credentials"})

    def test_unconfigured_secret_rejects_everything(self):
        with patch.object(security, "ADMIN_PASSWORD", None):
            response = self.client.post("/api/admin/login", json={"password": ""})
        self.assertEqual(response.status_code, 401)

    def test_token_expires_in_24_hours(self):
        token = self.client.post("/api/admin/login", json={"password": security.ADMIN_PASSWORD}).json()["token"]
        claims = security.decode_token(token)
        self.assertEqual(claims["exp"] - claims["iat"], 24 * 3600)


class TestUserLogin(RouteTestCase):

    def test_login_returns_public_profile(self):
        user = self.create_user()

        response = self.client.post("/api/user/login", json={"userId": user["userId"]})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            body["user"],
            {"id": user["userId"], "name": "A", "email": "a@x.com", "contact": "1", "image": user["image"]},
        )
        claims = security.decode_token(body["token"])
        self.assertEqual(claims["userId"], user["userId"])
        self.assertTrue(claims["isUser"])
        self.assertNotIn("isAdmin", claims)

    def test_unknown_user_id(self):
        response = self.client.post("/api/user/login", json={"userId": "000000"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid user ID")

    def test_deleted_user_cannot_log_in(self):
        user = self.create_user()
        self.client.delete(f"/api/users/{user['userId']}", headers=self.admin_headers)

        response = self.client.post("/api/user/login", json={"userId": user["userId"]})

        self.assertEqual(response.status_code, 401)


class TestAdminGate(RouteTestCase):

    def test_no_header(self):
        response = self.client.get("/api/stats")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Access denied. No token provided.")

    def test_non_bearer_scheme_is_treated_as_missing(self):
        response = self.client.get("/api/stats", headers={"Authorization": "Basic abc"})
        self.assertEqual(response.status_code, 401)

    def test_expired_token(self):
        past = datetime.now(timezone.utc) - timedelta(hours=25)
        token = jwt.encode(
            {"isAdmin": True, "iat": past, "exp": past + timedelta(hours=24)},
            security.JWT_SECRET_KEY,
            algorithm=security.JWT_ALGORITHM,
        )

        response = self.client.get("/api/stats", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 400)

    def test_wrong_signature(self):
        token = jwt.encode({"isAdmin": True}, "other-secret", algorithm="HS256")
        response = self.client.get("/api/stats", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 400)
