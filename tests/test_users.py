"""
tests.test_users

User service endpoints: registration, login, profile, addresses and the role gate.
"""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from conftest import TEST_PASSWORD, bearer, register_and_login
from storefront.auth.jwt import JwtConfig, issue_token
from storefront.settings import Settings

ADDRESS = {
    "line1": "123 Test St",
    "city": "Springfield",
    "state": "IL",
    "zip": "62701",
    "country": "US",
}


@pytest.mark.asyncio
async def test_register(user_client: httpx.AsyncClient) -> None:
    r = await user_client.post(
        "/auth/register",
        json={"email": "TestUser@Example.com", "password": TEST_PASSWORD, "name": "Test User"},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    data = body["data"]
    assert data["email"] == "testuser@example.com"
    assert data["name"] == "Test User"
    assert data["role"] == "customer"
    assert "password" not in data
    assert "passwordHash" not in data


@pytest.mark.asyncio
async def test_register_duplicate_email(user_client: httpx.AsyncClient) -> None:
    await register_and_login(user_client)
    r = await user_client.post(
        "/auth/register",
        json={"email": "TESTUSER@example.com", "password": TEST_PASSWORD, "name": "Someone Else"},
    )
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Email already registered"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"email": "invalid-email", "password": "password123", "name": "Test User"},
        {"email": "a@example.com", "password": "123", "name": "Test User"},
        {"email": "a@example.com", "password": "password123", "name": "T"},
        {"email": "a@example.com", "password": "password123", "name": "Test User", "role": "root"},
        {"email": "a@example.com", "password": "password123"},
    ],
)
async def test_register_validation(user_client: httpx.AsyncClient, body: dict[str, str]) -> None:
    r = await user_client.post("/auth/register", json=body)
    assert r.status_code == 400
    payload = r.json()
    assert payload["success"] is False
    assert isinstance(payload["error"], list)


@pytest.mark.asyncio
async def test_login_returns_token(user_client: httpx.AsyncClient) -> None:
    token = await register_and_login(user_client)
    assert token.count(".") == 2


@pytest.mark.asyncio
async def test_login_is_case_insensitive_on_email(user_client: httpx.AsyncClient) -> None:
    await register_and_login(user_client)
    r = await user_client.post(
        "/auth/login", json={"email": "TestUser@EXAMPLE.com", "password": TEST_PASSWORD}
    )
    assert r.status_code == 200
    assert r.json()["success"] is True


@pytest.mark.asyncio
async def test_login_rejects_bad_credentials(user_client: httpx.AsyncClient) -> None:
    await register_and_login(user_client)

    r = await user_client.post(
        "/auth/login", json={"email": "testuser@example.com", "password": "wrongpassword"}
    )
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Invalid credentials"}

    r = await user_client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": TEST_PASSWORD}
    )
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_get_profile(user_client: httpx.AsyncClient) -> None:
    token = await register_and_login(user_client)

    r = await user_client.get("/profile", headers=bearer(token))
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["email"] == "testuser@example.com"
    assert data["name"] == "Test User"
    assert data["role"] == "customer"
    assert data["isVerified"] is False
    assert data["addresses"] == []


@pytest.mark.asyncio
async def test_profile_requires_token(user_client: httpx.AsyncClient) -> None:
    r = await user_client.get("/profile")
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "No token provided"}


@pytest.mark.asyncio
async def test_profile_rejects_invalid_token(user_client: httpx.AsyncClient) -> None:
    r = await user_client.get("/profile", headers=bearer("invalidtoken"))
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Invalid token"}


@pytest.mark.asyncio
async def test_profile_rejects_expired_token(
    user_client: httpx.AsyncClient, settings: Settings
) -> None:
    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject="1",
        email="testuser@example.com",
        role="customer",
        ttl=timedelta(seconds=-10),
    )
    r = await user_client.get("/profile", headers=bearer(token))
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid token"


@pytest.mark.asyncio
async def test_profile_for_deleted_user(user_client: httpx.AsyncClient, settings: Settings) -> None:
    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject="4242",
        email="ghost@example.com",
        role="customer",
    )
    r = await user_client.get("/profile", headers=bearer(token))
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "User not found"}


@pytest.mark.asyncio
async def test_update_profile_name(user_client: httpx.AsyncClient) -> None:
    token = await register_and_login(user_client)

    r = await user_client.put("/profile", json={"name": "Renamed User"}, headers=bearer(token))
    assert r.status_code == 200, r.text
    assert r.json()["data"]["name"] == "Renamed User"

    r = await user_client.get("/profile", headers=bearer(token))
    assert r.json()["data"]["name"] == "Renamed User"


@pytest.mark.asyncio
async def test_customer_cannot_change_own_role(user_client: httpx.AsyncClient) -> None:
    token = await register_and_login(user_client)

    r = await user_client.put("/profile", json={"role": "admin"}, headers=bearer(token))
    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Forbidden"}

    r = await user_client.get("/profile", headers=bearer(token))
    assert r.json()["data"]["role"] == "customer"


@pytest.mark.asyncio
async def test_admin_can_change_own_role(user_client: httpx.AsyncClient) -> None:
    token = await register_and_login(user_client, email="boss@example.com", role="admin")

    r = await user_client.put("/profile", json={"role": "designer"}, headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["data"]["role"] == "designer"


@pytest.mark.asyncio
async def test_addresses(user_client: httpx.AsyncClient) -> None:
    token = await register_and_login(user_client)
    other = await register_and_login(user_client, email="other@example.com", name="Other User")

    r = await user_client.post("/profile/addresses", json=ADDRESS, headers=bearer(token))
    assert r.status_code == 201, r.text
    address = r.json()["data"]
    assert address["line1"] == "123 Test St"
    assert address["line2"] is None
    assert address["zip"] == "62701"

    r = await user_client.get("/profile/addresses", headers=bearer(token))
    assert [a["id"] for a in r.json()["data"]] == [address["id"]]

    r = await user_client.get("/profile", headers=bearer(token))
    assert [a["city"] for a in r.json()["data"]["addresses"]] == ["Springfield"]

    r = await user_client.get("/profile/addresses", headers=bearer(other))
    assert r.json()["data"] == []


@pytest.mark.asyncio
async def test_address_validation(user_client: httpx.AsyncClient) -> None:
    token = await register_and_login(user_client)
    r = await user_client.post(
        "/profile/addresses", json={"line1": "123 Test St"}, headers=bearer(token)
    )
    assert r.status_code == 400
    assert r.json()["success"] is False


@pytest.mark.asyncio
async def test_admin_route_requires_admin_role(user_client: httpx.AsyncClient) -> None:
    customer = await register_and_login(user_client)
    admin = await register_and_login(user_client, email="admin@example.com", role="admin")

    r = await user_client.get("/profile/admin", headers=bearer(customer))
    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Forbidden"}

    r = await user_client.get("/profile/admin", headers=bearer(admin))
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Admin access granted"}

    r = await user_client.get("/profile/admin")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_demoted_admin_cannot_promote_back_with_old_token(
    user_client: httpx.AsyncClient,
) -> None:
    token = await register_and_login(user_client, email="boss@example.com", role="admin")

    r = await user_client.put("/profile", json={"role": "customer"}, headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["data"]["role"] == "customer"

    # The token still carries role=admin; the stored role decides.
    r = await user_client.put("/profile", json={"role": "admin"}, headers=bearer(token))
    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Forbidden"}

    r = await user_client.get("/profile", headers=bearer(token))
    assert r.json()["data"]["role"] == "customer"
