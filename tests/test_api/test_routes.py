"""Tests for the JSON API routes over in-memory stores."""

import pytest
from fastapi.testclient import TestClient

from bopp.api.app import create_app
from bopp.auth.store import UserStore
from bopp.config import AuthSettings, RateSettings
from bopp.rates.store import RateStore
from bopp.storage.memory import MemoryBackend


@pytest.fixture
def client(clock) -> TestClient:
    backend = MemoryBackend()
    rate_store = RateStore(backend, RateSettings(), clock=clock)
    user_store = UserStore(
        backend,
        AuthSettings(response_delay_seconds=0, password_hash_iterations=1_000),
        clock=clock,
        otp_generator=lambda: "424242",
    )
    return TestClient(create_app(rate_store, user_store))


class TestRateRoutes:
    def test_get_rates(self, client: TestClient) -> None:
        response = client.get("/api/rates")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 16
        assert body[12] == {"id": 13, "key": "profit", "value": "10.0000"}

    def test_update_then_history(self, client: TestClient) -> None:
        response = client.put(
            "/api/rates",
            json={
                "rates": [{"key": "profit", "value": "15"}],
                "actor_id": "admin",
                "actor_name": "Administrator",
            },
        )

        assert response.status_code == 200
        profit = next(r for r in response.json()["rates"] if r["key"] == "profit")
        assert profit["value"] == "15"

        history = client.get("/api/rates/history", params={"limit": 1}).json()
        assert len(history) == 1
        assert history[0]["changed_by_id"] == "admin"
        old_profit = next(r for r in history[0]["rates_snapshot"] if r["key"] == "profit")
        assert old_profit["value"] == "10.0000"

    def test_update_requires_actor(self, client: TestClient) -> None:
        response = client.put("/api/rates", json={"rates": []})

        assert response.status_code == 422


class TestUserAndAuthRoutes:
    def test_admin_login(self, client: TestClient) -> None:
        body = client.post("/api/auth/login", json={"user_id": "admin", "password": "admin"}).json()

        assert body["success"] is True
        assert body["user"] == {"id": "admin", "name": "Administrator", "role": "admin"}

    def test_failed_login_is_a_result_not_an_http_error(self, client: TestClient) -> None:
        response = client.post("/api/auth/login", json={"user_id": "employee"})

        assert response.status_code == 200
        assert response.json()["code"] == "unsupported_login_method"

    def test_otp_flow(self, client: TestClient) -> None:
        issued = client.post("/api/auth/otp/emp001").json()
        assert issued["success"] is True
        assert issued["otp"] == "424242"

        verified = client.post("/api/auth/otp/emp001/verify", json={"otp": "424242"}).json()
        assert verified["success"] is True

        revoked = client.delete("/api/auth/otp/emp001").json()
        assert revoked["success"] is True

        again = client.post("/api/auth/otp/emp001/verify", json={"otp": "424242"}).json()
        assert again["code"] == "no_active_otp"

    def test_user_listing_hides_password_hashes(self, client: TestClient) -> None:
        client.post(
            "/api/users",
            json={"id": "adm002", "name": "Carol", "role": "admin", "password": "pw"},
        )

        users = client.get("/api/users").json()

        carol = next(u for u in users if u["id"] == "adm002")
        assert carol == {"id": "adm002", "name": "Carol", "role": "admin", "has_password": True}
        employee = next(u for u in users if u["id"] == "emp001")
        assert employee["otp"] is None

    def test_fetch_delete_and_update_admin(self, client: TestClient) -> None:
        assert client.get("/api/users/EMP001").json()["user"]["id"] == "emp001"

        assert client.delete("/api/users/admin").json()["code"] == "protected_user"
        assert client.delete("/api/users/emp001").json()["success"] is True
        assert client.delete("/api/users/emp001").json()["code"] == "user_not_found"

        updated = client.patch("/api/admins/adm001", json={"new_password": "pw2"}).json()
        assert updated["success"] is True
        login = client.post("/api/auth/login", json={"user_id": "adm001", "password": "pw2"}).json()
        assert login["success"] is True
