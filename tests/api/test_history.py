from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def _verify_people(client: TestClient, count: int) -> None:
    for i in range(count):
        client.post(
            "/api/verify",
            json={"name": f"Person {i}", "email": f"p{i}@example.com", "course": "Go"},
        )


def test_history_empty(verification_client: TestClient) -> None:
    resp = verification_client.get("/api/history")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "history": []}


def test_history_limit_most_recent_first(verification_client: TestClient) -> None:
    _verify_people(verification_client, 5)

    resp = verification_client.get("/api/history", params={"limit": 3})
    assert resp.status_code == 200
    history = resp.json()["history"]
    assert len(history) == 3
    assert [h["credential_data"] for h in history] == [
        '{"name":"Person 4","email":"p4@example.com","course":"Go"}',
        '{"name":"Person 3","email":"p3@example.com","course":"Go"}',
        '{"name":"Person 2","email":"p2@example.com","course":"Go"}',
    ]
    verified_at = [h["verified_at"] for h in history]
    assert verified_at == sorted(verified_at, reverse=True)


def test_history_record_shape(verification_client: TestClient) -> None:
    _verify_people(verification_client, 1)
    (record,) = verification_client.get("/api/history").json()["history"]
    assert set(record) == {
        "id",
        "credential_data",
        "verified_by",
        "verified_at",
        "is_valid",
        "issued_by",
        "issued_at",
    }
    assert record["is_valid"] == 0
    assert record["verified_by"] == "test-worker"
    assert record["issued_by"] is None


def test_history_defaults_to_ten(verification_client: TestClient) -> None:
    _verify_people(verification_client, 12)
    assert len(verification_client.get("/api/history").json()["history"]) == 10


@pytest.mark.parametrize("limit", ["abc", "0", "-5"])
def test_history_bad_limit_falls_back_to_default(
    verification_client: TestClient, limit: str
) -> None:
    _verify_people(verification_client, 12)
    resp = verification_client.get("/api/history", params={"limit": limit})
    assert resp.status_code == 200
    assert len(resp.json()["history"]) == 10


@pytest.mark.parametrize("limit", ["5000", "99999999999999999999"])
def test_history_large_limit_is_capped(
    verification_client: TestClient, limit: str
) -> None:
    _verify_people(verification_client, 12)
    resp = verification_client.get("/api/history", params={"limit": limit})
    assert resp.status_code == 200
    assert len(resp.json()["history"]) == 12
