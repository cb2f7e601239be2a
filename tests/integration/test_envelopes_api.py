"""Integration tests for envelope endpoints"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def envelope_id(client: TestClient, auth_user, auth_headers) -> str:
    response = client.post(
        "/v1/envelopes",
        json={
            "user_id": auth_user["id"],
            "name": "Vacation",
            "total_target": 1200,
            "installment_count_total": 12,
            "start_date": "2024-01-01",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_list_envelopes(client: TestClient, auth_user, auth_headers, envelope_id):
    response = client.get(f"/v1/envelopes/user/{auth_user['id']}", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == envelope_id
    assert data[0]["amount_paid"] == 0
    assert data[0]["installments_paid"] == 0


def test_pay_installment_twice(client: TestClient, auth_headers, envelope_id):
    """Test two payments of 50 add exactly 100 and 2 installments"""
    first = client.put(f"/v1/envelopes/{envelope_id}/pay", json={"amount": 50}, headers=auth_headers)
    second = client.put(f"/v1/envelopes/{envelope_id}/pay", json={"amount": 50}, headers=auth_headers)

    assert first.status_code == 200
    assert first.json()["amount_paid"] == 50.0
    assert second.json()["amount_paid"] == 100.0
    assert second.json()["installments_paid"] == 2


def test_pay_requires_positive_amount(client: TestClient, auth_headers, envelope_id):
    response = client.put(f"/v1/envelopes/{envelope_id}/pay", json={"amount": 0}, headers=auth_headers)
    assert response.status_code == 422


def test_pay_unknown_envelope(client: TestClient, auth_headers):
    response = client.put(
        "/v1/envelopes/00000000-0000-0000-0000-000000000000/pay",
        json={"amount": 10},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_pay_other_users_envelope_not_found(client: TestClient, other_user_headers, envelope_id):
    response = client.put(f"/v1/envelopes/{envelope_id}/pay", json={"amount": 10}, headers=other_user_headers)
    assert response.status_code == 404


def test_update_cannot_touch_paid_totals(client: TestClient, auth_user, auth_headers, envelope_id):
    client.put(f"/v1/envelopes/{envelope_id}/pay", json={"amount": 100}, headers=auth_headers)

    response = client.put(
        f"/v1/envelopes/{envelope_id}",
        json={"name": "Japan trip", "amount_paid": 0, "installments_paid": 0},
        headers=auth_headers,
    )
    assert response.status_code == 200

    data = client.get(f"/v1/envelopes/user/{auth_user['id']}", headers=auth_headers).json()[0]
    assert data["name"] == "Japan trip"
    assert data["amount_paid"] == 100.0
    assert data["installments_paid"] == 1


def test_delete_envelope(client: TestClient, auth_user, auth_headers, envelope_id):
    assert client.delete(f"/v1/envelopes/{envelope_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/v1/envelopes/user/{auth_user['id']}", headers=auth_headers).json() == []


@pytest.mark.parametrize("name", ["", "   "])
def test_create_envelope_blank_name_rejected(client: TestClient, auth_user, auth_headers, name):
    response = client.post(
        "/v1/envelopes",
        json={
            "user_id": auth_user["id"],
            "name": name,
            "total_target": 300,
            "installment_count_total": 3,
            "start_date": "2024-01-01",
        },
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_rename_envelope_to_blank_rejected(client: TestClient, auth_headers, envelope_id):
    response = client.put(f"/v1/envelopes/{envelope_id}", json={"name": " \t "}, headers=auth_headers)
    assert response.status_code == 422
