import pytest
from fastapi.testclient import TestClient

from bookmyticket.db.session import get_store
from bookmyticket.db.store import USERS
from bookmyticket.main import app

from conftest import run

API = "/api/v1"


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _register(client, email="carol@example.com", name="Carol"):
    response = client.post(f"{API}/auth/register", json={"email": email, "password": "secret1", "name": name})
    assert response.status_code == 201, response.text
    return response.json()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def _admin_headers(client, store):
    body = _register(client, email="admin@example.com", name="Admin")
    run(store.update(USERS, body["user"]["id"], {"admin": True}))
    return _auth(body["access_token"])


def test_root(client):
    assert client.get("/").status_code == 200


def test_public_catalog(client):
    movies = client.get(f"{API}/movies/").json()
    assert len(movies) == 5

    featured = client.get(f"{API}/movies/featured").json()
    assert [m["id"] for m in featured] == ["m5", "m4", "m3", "m2"]

    dune = client.get(f"{API}/movies/m1").json()
    assert dune["title"] == "Dune"
    assert dune["genre"] == ["Sci-Fi", "Adventure"]

    related = client.get(f"{API}/movies/m1/related").json()
    assert [m["id"] for m in related] == ["m2", "m4", "m5"]

    assert client.get(f"{API}/movies/nope").status_code == 404


def test_register_and_login(client):
    body = _register(client)
    assert body["token_type"] == "bearer"
    assert body["user"]["admin"] is False

    response = client.post(f"{API}/auth/register", json={"email": "carol@example.com", "password": "secret1", "name": "C"})
    assert response.status_code == 400

    response = client.post(f"{API}/auth/login", data={"username": "carol@example.com", "password": "secret1"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get(f"{API}/me/", headers=_auth(token)).json()
    assert me["name"] == "Carol"

    response = client.post(f"{API}/auth/login", data={"username": "carol@example.com", "password": "nope"})
    assert response.status_code == 401


def test_bookings_require_authentication(client):
    assert client.get(f"{API}/bookings/").status_code == 401
    assert client.get(f"{API}/bookings/", headers=_auth("garbage")).status_code == 401


def test_book_list_and_export(client):
    token = _register(client)["access_token"]

    response = client.post(
        f"{API}/bookings/",
        json={"movieId": "m1", "date": "2025-03-10", "time": "6:00 PM", "seats": "A1, A2"},
        headers=_auth(token),
    )
    assert response.status_code == 201, response.text
    created = response.json()
    assert created["seats"] == ["A1", "A2"]
    assert float(created["totalPrice"]) == 25.0
    assert created["movie"]["title"] == "Dune"
    assert created["formattedDate"] == "Monday, March 10, 2025"

    bad = client.post(
        f"{API}/bookings/",
        json={"movieId": "m1", "date": "2025-03-10", "time": "1:00 AM", "seats": ["A1"]},
        headers=_auth(token),
    )
    assert bad.status_code == 400

    missing = client.post(
        f"{API}/bookings/",
        json={"movieId": "nope", "date": "2025-03-10", "time": "6:00 PM", "seats": ["A1"]},
        headers=_auth(token),
    )
    assert missing.status_code == 404

    listing = client.get(f"{API}/bookings/", headers=_auth(token)).json()
    assert [b["id"] for b in listing] == [created["id"]]

    export = client.get(f"{API}/bookings/export", headers=_auth(token))
    assert export.status_code == 200
    assert export.headers["content-type"] == "application/pdf"
    assert 'filename="bookings.pdf"' in export.headers["content-disposition"]
    assert export.content.startswith(b"%PDF")


def test_admin_routes_are_forbidden_to_users(client):
    token = _register(client)["access_token"]
    assert client.get(f"{API}/admin/dashboard/", headers=_auth(token)).status_code == 403
    assert client.get(f"{API}/admin/bookings/", headers=_auth(token)).status_code == 403


def test_admin_dashboard_and_bookings(client, store):
    headers = _admin_headers(client, store)

    stats = client.get(f"{API}/admin/dashboard/", headers=headers).json()
    assert stats["userCount"] == 3
    assert stats["movieCount"] == 5
    assert stats["bookingCount"] == 4
    assert float(stats["totalRevenue"]) == 80.0
    assert stats["bookingsByStatus"] == {"confirmed": 2, "cancelled": 1, "completed": 1}

    bookings = client.get(f"{API}/admin/bookings/", headers=headers).json()
    assert [b["id"] for b in bookings] == ["b3", "b1"]
    assert bookings[0]["user"]["name"] == "Root"

    response = client.patch(f"{API}/admin/bookings/b1/status", json={"status": "cancelled"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"

    response = client.patch(f"{API}/admin/bookings/nope/status", json={"status": "cancelled"}, headers=headers)
    assert response.status_code == 404

    export = client.get(f"{API}/admin/bookings/export", headers=headers)
    assert export.content.startswith(b"%PDF")


def test_admin_movie_management(client, store):
    headers = _admin_headers(client, store)

    response = client.post(
        f"{API}/admin/movies/",
        json={"title": "Alien", "genre": ["Horror", " horror ", "Horror"], "ticketPrice": 9.5},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    movie = response.json()
    assert movie["genre"] == ["Horror", "horror"]

    response = client.patch(f"{API}/admin/movies/{movie['id']}", json={"rating": "R"}, headers=headers)
    assert response.json()["rating"] == "R"
    assert response.json()["title"] == "Alien"

    assert client.patch(f"{API}/admin/movies/nope", json={"rating": "R"}, headers=headers).status_code == 404

    assert client.delete(f"{API}/admin/movies/{movie['id']}", headers=headers).status_code == 200
    assert client.get(f"{API}/movies/{movie['id']}").status_code == 404

    users = client.get(f"{API}/admin/users/", headers=headers).json()
    assert users[0]["name"] == "Admin"


def test_profile_update_cannot_grant_admin(client, store):
    token = _register(client)["access_token"]

    response = client.patch(f"{API}/me/", json={"bio": "Film fan", "admin": True}, headers=_auth(token))
    assert response.status_code == 200
    assert response.json()["bio"] == "Film fan"
    assert response.json()["admin"] is False
