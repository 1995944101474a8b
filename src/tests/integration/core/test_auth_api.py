import pytest

pytestmark = pytest.mark.django_db

LOGIN_URL = "/api/v1/auth/token/"
REFRESH_URL = "/api/v1/auth/token/refresh/"
VERIFY_URL = "/api/v1/auth/token/verify/"


def _login(api_client, username="fleet_manager", password="password123"):
    return api_client.post(
        LOGIN_URL,
        {"username": username, "password": password},
        format="json",
    )


def test_login_returns_token_pair(api_client, user_factory):
    user_factory(username="fleet_manager", password="password123")

    resp = _login(api_client)

    assert resp.status_code == 200
    assert resp.data["success"] is True
    assert set(resp.data["data"]) >= {"access", "refresh"}


def test_login_rejects_wrong_password(api_client, user_factory):
    user_factory(username="fleet_manager", password="password123")

    resp = _login(api_client, password="wrong")

    assert resp.status_code == 401
    assert resp.data["success"] is False


def test_access_token_opens_protected_endpoints(api_client, user_factory):
    user_factory(username="fleet_manager", password="password123")
    access = _login(api_client).data["data"]["access"]

    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    resp = api_client.get("/api/v1/bikes/")

    assert resp.status_code == 200


def test_refresh_and_verify(api_client, user_factory):
    user_factory(username="fleet_manager", password="password123")
    tokens = _login(api_client).data["data"]

    refresh_resp = api_client.post(
        REFRESH_URL, {"refresh": tokens["refresh"]}, format="json"
    )
    assert refresh_resp.status_code == 200
    assert refresh_resp.data["data"]["access"]

    verify_resp = api_client.post(
        VERIFY_URL, {"token": tokens["access"]}, format="json"
    )
    assert verify_resp.status_code == 200
    assert verify_resp.data["data"] == {"detail": "Token is valid"}


def test_protected_endpoint_requires_token(api_client):
    resp = api_client.get("/api/v1/bookings/")
    assert resp.status_code == 401
