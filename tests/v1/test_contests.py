"""Tests for contest and category endpoints."""

from fastapi import status


def test_active_contest_is_null_without_contests(client) -> None:
    response = client.get("/api/v1/contest/active")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() is None


def test_create_contest_endpoint(client, admin_headers) -> None:
    response = client.post(
        "/api/v1/admin/contests",
        json={
            "name": "Fall Jam",
            "categories": [{"name": "Best Vehicle", "emoji": "🚗"}, {"name": "Scenic"}],
            "rules": "# One photo each",
        },
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["is_active"] is True
    assert [(c["name"], c["emoji"]) for c in body["categories"]] == [("Best Vehicle", "🚗"), ("Scenic", "✨")]
    assert client.get("/api/v1/rules/markdown").json() == {"content": "# One photo each"}


def test_create_contest_needs_a_category(client, admin_headers) -> None:
    response = client.post(
        "/api/v1/admin/contests",
        json={"name": "Empty", "categories": []},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["kind"] == "ValidationError"


def test_update_contest_endpoint(client, admin_headers, active_contest) -> None:
    scenic = active_contest.categories[1]
    response = client.put(
        f"/api/v1/admin/contests/{active_contest.id}",
        json={
            "name": "Fall Jam Remix",
            "categories": [{"id": scenic.id, "name": "Scenic"}, {"name": "Action Shot"}],
        },
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["name"] == "Fall Jam Remix"
    assert [c["name"] for c in body["categories"]] == ["Scenic", "Action Shot"]
    assert body["categories"][0]["id"] == scenic.id


def test_get_missing_contest(client) -> None:
    response = client.get("/api/v1/contests/999")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["kind"] == "NotFoundError"


def test_archive_without_active_contest(client, admin_headers) -> None:
    response = client.post("/api/v1/admin/contest/archive", headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["kind"] == "ConflictError"


def test_archive_without_successor(client, admin_headers, active_contest) -> None:
    response = client.post("/api/v1/admin/contest/archive", json={}, headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "success": True,
        "archived_contest_id": active_contest.id,
        "active_contest": None,
    }
    assert client.get("/api/v1/contest/active").json() is None
    assert client.get("/api/v1/categories").json() == []


def test_list_categories_defaults_to_active_contest(client, contest_factory) -> None:
    old = contest_factory("Summer Jam", ("Drift",))
    contest_factory("Fall Jam")

    assert [c["name"] for c in client.get("/api/v1/categories").json()] == ["Best Vehicle", "Scenic"]
    response = client.get("/api/v1/categories", params={"contestId": old.id})
    assert [c["name"] for c in response.json()] == ["Drift"]


def test_create_category_endpoint(client, admin_headers, active_contest) -> None:
    response = client.post("/api/v1/categories", json={"name": "Action Shot"}, headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["contest_id"] == active_contest.id
    assert response.json()["display_order"] == 2


def test_create_category_duplicate_name(client, admin_headers, active_contest) -> None:
    response = client.post("/api/v1/categories", json={"name": "Scenic"}, headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["kind"] == "ConflictError"


def test_create_category_without_active_contest(client, admin_headers) -> None:
    response = client.post("/api/v1/categories", json={"name": "Scenic"}, headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "No active contest"


def test_update_contest_swaps_category_names(client, admin_headers, active_contest) -> None:
    vehicle, scenic = active_contest.categories
    response = client.put(
        f"/api/v1/admin/contests/{active_contest.id}",
        json={
            "categories": [
                {"id": vehicle.id, "name": "Scenic"},
                {"id": scenic.id, "name": "Best Vehicle"},
            ],
        },
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert [(c["id"], c["name"]) for c in response.json()["categories"]] == [
        (vehicle.id, "Scenic"),
        (scenic.id, "Best Vehicle"),
    ]


def test_create_contest_with_blank_name(client, admin_headers) -> None:
    response = client.post(
        "/api/v1/admin/contests",
        json={"name": "   ", "categories": [{"name": "Scenic"}]},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["kind"] == "ValidationError"
    assert client.get("/api/v1/contest/active").json() is None
