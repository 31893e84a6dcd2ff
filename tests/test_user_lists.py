"""HTTP tests for admin user lists and the random winner draw."""

import pytest

from models.user_lists import UserList, UserListItem
from routes import user_lists


@pytest.fixture
def admin(make_user):
    return make_user(first_name="Root", last_name="Admin", role="admin")


def test_lists_require_admin(client, make_user, auth_headers):
    user = make_user()
    assert client.get("/api/admin/lists", headers=auth_headers(user)).status_code == 403


def test_create_list_from_ids_and_emails(client, admin, make_user, auth_headers):
    first = make_user(email="first@example.com")
    second = make_user(email="second@example.com")
    headers = auth_headers(admin)

    response = client.post("/api/admin/lists", json={
        "list_name": "Spring giveaway",
        "user_ids": [first.id],
        "emails": ["first@example.com", "second@example.com", "ghost@example.com", "not-an-email"]
    }, headers=headers)

    body = response.get_json()
    assert response.status_code == 201
    assert [u["id"] for u in body["list"]["users"]] == [first.id, second.id]
    assert body["list"]["users_count"] == 2
    assert "Invalid email format(s): not-an-email" in body["warnings"]
    assert "User(s) not found with email(s): ghost@example.com" in body["warnings"]

    response = client.get("/api/admin/lists", headers=headers)
    assert response.get_json()["lists"]["total"] == 1


def test_create_list_validation(client, admin, auth_headers):
    headers = auth_headers(admin)
    client.post("/api/admin/lists", json={"list_name": "Taken"}, headers=headers)

    response = client.post("/api/admin/lists", json={"list_name": "Taken"}, headers=headers)
    assert response.status_code == 422
    assert "list_name" in response.get_json()["errors"]

    response = client.post("/api/admin/lists", json={"list_name": "X", "user_ids": [9999]}, headers=headers)
    errors = response.get_json()["errors"]
    assert response.status_code == 422
    assert {"list_name", "user_ids"} <= set(errors)


def test_rename_and_delete_list(client, admin, make_user, auth_headers):
    headers = auth_headers(admin)
    member = make_user()
    list_id = client.post("/api/admin/lists", json={"list_name": "Old", "user_ids": [member.id]}, headers=headers).get_json()["list"]["id"]
    client.post("/api/admin/lists", json={"list_name": "Other"}, headers=headers)

    response = client.put(f"/api/admin/lists/{list_id}", json={"list_name": "Other"}, headers=headers)
    assert response.status_code == 422

    # keeping its own name is allowed
    response = client.put(f"/api/admin/lists/{list_id}", json={"list_name": "Old"}, headers=headers)
    assert response.status_code == 200

    response = client.put(f"/api/admin/lists/{list_id}", json={"list_name": "New"}, headers=headers)
    assert response.get_json()["list"]["list_name"] == "New"

    response = client.delete(f"/api/admin/lists/{list_id}", headers=headers)
    assert response.status_code == 200
    assert UserList.query.filter_by(id=list_id).first() is None
    assert UserListItem.query.filter_by(list_id=list_id).count() == 0

    assert client.delete(f"/api/admin/lists/{list_id}", headers=headers).status_code == 404


def test_add_and_remove_members(client, admin, make_user, auth_headers):
    headers = auth_headers(admin)
    member = make_user()
    list_id = client.post("/api/admin/lists", json={"list_name": "Team"}, headers=headers).get_json()["list"]["id"]

    response = client.get(f"/api/admin/lists/{list_id}/available-users", headers=headers)
    assert member.id in [u["id"] for u in response.get_json()["available_users"]]

    response = client.post(f"/api/admin/lists/{list_id}/users", json={"user_id": member.id}, headers=headers)
    assert response.status_code == 200

    response = client.post(f"/api/admin/lists/{list_id}/users", json={"user_id": member.id}, headers=headers)
    assert response.status_code == 409

    response = client.get(f"/api/admin/lists/{list_id}/users", headers=headers)
    assert [u["id"] for u in response.get_json()["users_list"]["users"]] == [member.id]

    response = client.get(f"/api/admin/lists/{list_id}/available-users", headers=headers)
    assert member.id not in [u["id"] for u in response.get_json()["available_users"]]

    response = client.delete(f"/api/admin/lists/{list_id}/users", json={"user_id": member.id}, headers=headers)
    assert response.status_code == 200

    response = client.delete(f"/api/admin/lists/{list_id}/users", json={"user_id": member.id}, headers=headers)
    assert response.status_code == 409

    response = client.post(f"/api/admin/lists/{list_id}/users", json={"user_id": 9999}, headers=headers)
    assert response.status_code == 404


def test_pick_winner_needs_two_participants(client, admin, make_user, auth_headers):
    headers = auth_headers(admin)
    member = make_user()
    list_id = client.post("/api/admin/lists", json={"list_name": "Solo"}, headers=headers).get_json()["list"]["id"]

    response = client.post(f"/api/admin/lists/{list_id}/pick-winner", json={}, headers=headers)
    assert response.status_code == 422
    assert response.get_json()["message"] == "No users in this list to pick a winner from"

    client.post(f"/api/admin/lists/{list_id}/users", json={"user_id": member.id}, headers=headers)
    response = client.post(f"/api/admin/lists/{list_id}/pick-winner", json={
        "additional_emails": [member.email, "bad-email"]
    }, headers=headers)
    body = response.get_json()
    assert response.status_code == 422
    assert "only 1 user" in body["message"]
    assert body["warnings"] == ["Invalid email format(s): bad-email"]


def test_pick_winner_includes_unregistered_emails(client, admin, make_user, auth_headers, monkeypatch):
    headers = auth_headers(admin)
    member = make_user()
    list_id = client.post("/api/admin/lists", json={"list_name": "Draw", "user_ids": [member.id]}, headers=headers).get_json()["list"]["id"]

    pools = []

    def pick_last(participants):
        pools.append(participants)
        return participants[-1]

    monkeypatch.setattr(user_lists.random, "choice", pick_last)

    response = client.post(f"/api/admin/lists/{list_id}/pick-winner", json={
        "additional_emails": ["walk-in@example.com"]
    }, headers=headers)

    body = response.get_json()
    assert response.status_code == 200
    assert body["winner_user"] == {"id": None, "first_name": "", "last_name": "", "email": "walk-in@example.com"}
    assert [p["email"] for p in pools[0]] == [member.email, "walk-in@example.com"]


def test_unknown_list_returns_404(client, admin, auth_headers):
    headers = auth_headers(admin)
    assert client.get("/api/admin/lists/9999/users", headers=headers).status_code == 404
    assert client.post("/api/admin/lists/9999/pick-winner", json={}, headers=headers).status_code == 404
