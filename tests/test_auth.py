"""Tests for API JWT registration, login and role checks."""

from fastapi.testclient import TestClient


def test_register_login_and_me(client: TestClient) -> None:
    register_response = client.post(
        "/api/v1/auth/register",
        json={"email": "retailer@example.com", "password": "secret123", "role": "retailer"},
    )
    assert register_response.status_code == 201
    assert register_response.json()["role"] == "RETAILER"

    login_response = client.post(
        "/api/v1/auth/login",
        json={"email": "retailer@example.com", "password": "secret123"},
    )
    assert login_response.status_code == 200
    token = login_response.json()["access_token"]

    me_response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me_response.status_code == 200
    assert me_response.json()["email"] == "retailer@example.com"


def test_delivery_partner_role_accepts_dashes(client: TestClient) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "courier@example.com", "password": "secret123", "role": "delivery-partner"},
    )

    assert response.status_code == 201
    assert response.json()["role"] == "DELIVERY_PARTNER"


def test_admin_cannot_self_register(client: TestClient) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "sneaky@example.com", "password": "secret123", "role": "ADMIN"},
    )

    assert response.status_code == 400


def test_unknown_role_rejected(client: TestClient) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "pirate@example.com", "password": "secret123", "role": "captain"},
    )

    assert response.status_code == 400


def test_duplicate_email_rejected(client: TestClient) -> None:
    payload = {"email": "twice@example.com", "password": "secret123", "role": "CUSTOMER"}
    assert client.post("/api/v1/auth/register", json=payload).status_code == 201

    assert client.post("/api/v1/auth/register", json=payload).status_code == 400


def test_wrong_password_rejected(client: TestClient) -> None:
    client.post(
        "/api/v1/auth/register",
        json={"email": "wrongpw@example.com", "password": "secret123", "role": "CUSTOMER"},
    )

    response = client.post("/api/v1/auth/login", json={"email": "wrongpw@example.com", "password": "nope123"})

    assert response.status_code == 401


def test_bad_token_rejected(client: TestClient) -> None:
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
