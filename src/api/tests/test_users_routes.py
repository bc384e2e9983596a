"""Unit tests for user routes."""

import unittest
from unittest.mock import patch
import sys
from pathlib import Path
from datetime import datetime, timedelta, timezone

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi.testclient import TestClient
from api.main import app
from api.dependencies import get_user_repo
from adapter.fake.user_repository import FakeUserRepository
from services.user_service import verify_password

MISSING_ID = '507f1f77bcf86cd799439011'
VALID_PAYLOAD = {"email": "a@b.com", "password": "pw", "firstName": "A", "lastName": "B"}


class UserRoutesTestCase(unittest.TestCase):
    """Shared setup: fake repository injected, fast bcrypt cost."""

    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeUserRepository()
        app.dependency_overrides[get_user_repo] = lambda: self.repo
        rounds_patcher = patch('services.user_service.BCRYPT_ROUNDS', 4)
        rounds_patcher.start()
        self.addCleanup(rounds_patcher.stop)

    def tearDown(self):
        """Clean up dependency overrides."""
        app.dependency_overrides.clear()

    def _create(self, payload=None) -> dict:
        response = self.client.post("/api/users", json=payload or VALID_PAYLOAD)
        self.assertEqual(response.status_code, 201)
        return response.json()["data"]


class TestCreateUserRoute(UserRoutesTestCase):
    """Test cases for POST /api/users."""

    def test_create_user_success(self):
        before = datetime.now(timezone.utc) - timedelta(seconds=1)

        response = self.client.post("/api/users", json=VALID_PAYLOAD)

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["status"], 201)
        data = body["data"]
        self.assertEqual(body["message"], f"User created successfully with ID: {data['id']}")
        self.assertEqual(len(data["id"]), 24)
        self.assertEqual(data["email"], "a@b.com")
        self.assertEqual(data["firstName"], "A")
        self.assertEqual(data["lastName"], "B")
        join_date = datetime.fromisoformat(data["joinDate"].replace("Z", "+00:00"))
        self.assertGreaterEqual(join_date, before)
        self.assertLessEqual(join_date, datetime.now(timezone.utc))

    def test_returned_password_is_hash(self):
        data = self._create()

        self.assertNotEqual(data["password"], "pw")
        self.assertTrue(verify_password("pw", data["password"]))

    def test_client_id_and_join_date_ignored(self):
        payload = dict(VALID_PAYLOAD, id=MISSING_ID, joinDate="2000-01-01T00:00:00Z")

        data = self._create(payload)

        self.assertNotEqual(data["id"], MISSING_ID)
        self.assertFalse(data["joinDate"].startswith("2000"))

    def test_empty_field_returns_400(self):
        for field in ("email", "password", "firstName", "lastName"):
            with self.subTest(field=field):
                response = self.client.post("/api/users", json=dict(VALID_PAYLOAD, **{field: ""}))
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {
                    "status": 400,
                    "message": "All fields except ID and JoinDate are required",
                })
        self.assertEqual(self.repo.store, {})

    def test_missing_field_returns_400(self):
        payload = {k: v for k, v in VALID_PAYLOAD.items() if k != "lastName"}

        response = self.client.post("/api/users", json=payload)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.repo.store, {})

    def test_malformed_json_returns_400(self):
        response = self.client.post(
            "/api/users",
            content=b'{"email": ',
            headers={"Content-Type": "application/json"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": 400, "message": "Invalid input"})

    def test_store_failure_returns_500(self):
        self.repo.fail_writes = True

        response = self.client.post("/api/users", json=VALID_PAYLOAD)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"status": 500, "message": "Failed to create user"})

    @patch('services.user_service.bcrypt.hashpw')
    def test_hash_failure_returns_500(self, mock_hashpw):
        mock_hashpw.side_effect = ValueError("password cannot be longer than 72 bytes")

        response = self.client.post("/api/users", json=VALID_PAYLOAD)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"status": 500, "message": "Error hashing password"})


class TestGetUserRoute(UserRoutesTestCase):
    """Test cases for GET /api/users/{id}."""

    def test_create_then_get(self):
        created = self._create()

        response = self.client.get(f"/api/users/{created['id']}")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], 200)
        self.assertEqual(body["message"], "User retrieved successfully")
        for key in ("id", "email", "firstName", "lastName", "joinDate", "password"):
            self.assertEqual(body["data"][key], created[key])

    def test_invalid_id_returns_400(self):
        response = self.client.get("/api/users/not-an-object-id")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": 400, "message": "Invalid ID"})

    def test_missing_user_returns_404(self):
        response = self.client.get(f"/api/users/{MISSING_ID}")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"status": 404, "message": "User not found"})


class TestUpdateUserRoute(UserRoutesTestCase):
    """Test cases for PUT /api/users/{id}."""

    def test_update_user_success(self):
        created = self._create()

        response = self.client.put(
            f"/api/users/{created['id']}",
            json={"firstName": "Changed", "joinDate": "2000-01-01T00:00:00Z"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": 200, "message": "User updated successfully"})
        data = self.client.get(f"/api/users/{created['id']}").json()["data"]
        self.assertEqual(data["firstName"], "Changed")
        self.assertEqual(data["lastName"], "B")
        self.assertEqual(data["joinDate"], created["joinDate"])

    def test_password_update_rehashes(self):
        created = self._create()

        self.client.put(f"/api/users/{created['id']}", json={"password": "newpass"})

        stored = self.repo.get_by_id(created["id"])
        self.assertFalse(verify_password("pw", stored.password))
        self.assertTrue(verify_password("newpass", stored.password))

    def test_only_disallowed_keys_returns_400(self):
        created = self._create()
        before = self.repo.get_by_id(created["id"])

        response = self.client.put(f"/api/users/{created['id']}", json={"id": "x"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": 400, "message": "No valid fields to update"})
        self.assertEqual(self.repo.get_by_id(created["id"]), before)

    def test_bad_id_returns_400_before_store_access(self):
        with patch.object(self.repo, 'update_fields') as mock_update:
            response = self.client.put("/api/users/bad-id", json={"email": "x@y.com"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": 400, "message": "Invalid ID"})
        mock_update.assert_not_called()

    def test_non_object_body_returns_400(self):
        created = self._create()

        response = self.client.put(f"/api/users/{created['id']}", json=["email"])

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": 400, "message": "Invalid input"})

    def test_bad_id_checked_before_body(self):
        """A malformed body on a malformed id still reports the id."""
        response = self.client.put(
            "/api/users/bad-id",
            content=b'{"email": ',
            headers={"Content-Type": "application/json"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": 400, "message": "Invalid ID"})

    def test_malformed_body_returns_400(self):
        created = self._create()

        response = self.client.put(
            f"/api/users/{created['id']}",
            content=b'{"email": ',
            headers={"Content-Type": "application/json"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": 400, "message": "Invalid input"})

    def test_null_field_reads_back_as_empty(self):
        created = self._create()

        self.client.put(f"/api/users/{created['id']}", json={"email": None})
        response = self.client.get(f"/api/users/{created['id']}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["email"], "")

    def test_non_string_field_reads_back_as_not_found(self):
        """A user whose stored fields no longer decode is reported missing, not as a server error."""
        for value in (123, {"x": 1}, ["a"], True):
            with self.subTest(value=value):
                created = self._create()

                put = self.client.put(f"/api/users/{created['id']}", json={"email": value})
                response = self.client.get(f"/api/users/{created['id']}")

                self.assertEqual(put.status_code, 200)
                self.assertEqual(response.status_code, 404)
                self.assertEqual(response.json(), {"status": 404, "message": "User not found"})

    def test_missing_user_returns_200(self):
        response = self.client.put(f"/api/users/{MISSING_ID}", json={"email": "x@y.com"})

        self.assertEqual(response.status_code, 200)

    def test_store_failure_returns_500(self):
        created = self._create()
        self.repo.fail_writes = True

        response = self.client.put(f"/api/users/{created['id']}", json={"email": "x@y.com"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"status": 500, "message": "Failed to update user"})


class TestDeleteUserRoute(UserRoutesTestCase):
    """Test cases for DELETE /api/users/{id}."""

    def test_delete_then_get_returns_404(self):
        created = self._create()

        response = self.client.delete(f"/api/users/{created['id']}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": 200, "message": "User deleted successfully"})
        self.assertEqual(self.client.get(f"/api/users/{created['id']}").status_code, 404)

    def test_delete_missing_user_returns_200(self):
        response = self.client.delete(f"/api/users/{MISSING_ID}")

        self.assertEqual(response.status_code, 200)

    def test_invalid_id_returns_400(self):
        response = self.client.delete("/api/users/123")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"status": 400, "message": "Invalid ID"})

    def test_store_failure_returns_500(self):
        created = self._create()
        self.repo.fail_writes = True

        response = self.client.delete(f"/api/users/{created['id']}")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"status": 500, "message": "Failed to delete user"})


if __name__ == '__main__':
    unittest.main()
