from photoshare.models.user import User
from photoshare.tests.helpers import add_photo, login, register
from photoshare.utils.security import validate_token


def test_register_login_update_happy_path(client):
    r = register(client)
    assert r.status_code == 200
    assert "message" in r.json()

    r = login(client)
    assert r.status_code == 200
    token = r.json()["token"]
    assert validate_token(token) == "alice"

    r = client.put("/users/1", headers={"Authorization": token},
                   json={"username": "alice2", "email": "a@x.com"})
    assert r.status_code == 200

    r = client.get("/users/1")
    assert r.status_code == 200
    assert r.json()["username"] == "alice2"
    assert r.json()["email"] == "a@x.com"


def test_login_also_accepts_post(client):
    register(client)
    r = client.post("/users/login", json={"email": "a@x.com", "password": "secret1"})
    assert r.status_code == 200
    assert r.json()["token"]


def test_register_rejects_short_password(client):
    r = register(client, password="12345")
    assert r.status_code == 400
    assert "at least 6" in r.json()["error"]


def test_register_accepts_six_character_password(client):
    assert register(client, password="123456").status_code == 200


def test_register_requires_all_fields(client):
    for missing in ("id", "username", "email", "password"):
        body = {"id": 7, "username": "bob", "email": "b@x.com", "password": "secret1"}
        del body[missing]
        r = client.post("/users/register", json=body)
        assert r.status_code == 400, missing
        assert "error" in r.json()


def test_register_rejects_zero_id(client):
    r = register(client, user_id=0)
    assert r.status_code == 400


def test_register_rejects_duplicate_email(client):
    assert register(client).status_code == 200
    r = register(client, user_id=2)
    assert r.status_code == 400
    assert r.json() == {"error": "email already registered"}


def test_register_duplicate_id_is_persistence_error(client):
    assert register(client).status_code == 200
    r = register(client, email="other@x.com")
    assert r.status_code == 500
    assert r.json() == {"error": "failed to save user"}


def test_register_malformed_json(client):
    r = client.post("/users/register", content="{not json",
                    headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["error"]


def test_register_wrong_type(client):
    r = client.post("/users/register", json={
        "id": "abc", "username": "bob", "email": "b@x.com", "password": "secret1"})
    assert r.status_code == 400


def test_password_is_stored_hashed(client, database):
    register(client)
    with database.session() as db:
        user = db.query(User).filter(User.id == 1).first()
        assert user.password_hash != "secret1"
        assert "secret1" not in user.password_hash


def test_login_failures_are_indistinguishable(client):
    register(client)
    wrong_password = login(client, password="wrong-pass")
    unknown_email = login(client, email="nobody@x.com")
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "invalid email or password"}


def test_login_malformed_json(client):
    r = client.request("GET", "/users/login", content="{",
                       headers={"Content-Type": "application/json"})
    assert r.status_code == 400


def test_get_user_hides_password(client):
    register(client)
    body = client.get("/users/1").json()
    assert set(body) == {"id", "username", "email", "createdAt", "updatedAt"}


def test_get_missing_user(client):
    assert client.get("/users/42").status_code == 404


def test_update_requires_token(client):
    register(client)
    r = client.put("/users/1", json={"username": "x", "email": "a@x.com"})
    assert r.status_code == 401
    assert r.json() == {"error": "token not found"}


def test_update_rejects_invalid_token(client):
    register(client)
    r = client.put("/users/1", headers={"Authorization": "not-a-token"},
                   json={"username": "x", "email": "a@x.com"})
    assert r.status_code == 401
    assert r.json() == {"error": "invalid token"}


def test_update_accepts_bearer_prefix(client, token):
    r = client.put("/users/1", headers={"Authorization": f"Bearer {token}"},
                   json={"username": "alice3", "email": "a@x.com"})
    assert r.status_code == 200


def test_update_requires_username_and_email(client, auth):
    r = client.put("/users/1", headers=auth, json={"username": "alice2"})
    assert r.status_code == 400
    r = client.put("/users/1", headers=auth, json={"username": "", "email": "z@x.com"})
    assert r.status_code == 400

    # Nothing was applied
    body = client.get("/users/1").json()
    assert body["username"] == "alice"
    assert body["email"] == "a@x.com"


def test_update_rejects_email_of_another_user(client, auth):
    register(client, user_id=2, username="bob", email="b@x.com")
    r = client.put("/users/1", headers=auth, json={"username": "alice", "email": "b@x.com"})
    assert r.status_code == 400


def test_update_missing_user(client, auth):
    r = client.put("/users/99", headers=auth, json={"username": "x", "email": "x@x.com"})
    assert r.status_code == 404
    assert r.json() == {"error": "user not found"}


def test_update_non_integer_id(client, auth):
    r = client.put("/users/abc", headers=auth, json={"username": "x", "email": "x@x.com"})
    assert r.status_code == 400


def test_delete_user(client, auth):
    r = client.delete("/users/1", headers=auth)
    assert r.status_code == 200
    assert client.get("/users/1").status_code == 404


def test_delete_missing_user(client, auth):
    assert client.delete("/users/99", headers=auth).status_code == 404


def test_delete_requires_token(client):
    register(client)
    assert client.delete("/users/1").status_code == 401


def test_delete_user_cascades_to_photos(client, auth):
    register(client, user_id=2, username="bob", email="b@x.com")
    for i in range(3):
        assert add_photo(client, auth, user_id=1, title=f"a{i}").status_code == 200
    assert add_photo(client, auth, user_id=2, title="b0").status_code == 200

    assert client.delete("/users/1", headers=auth).status_code == 200

    photos = client.get("/photos").json()
    assert [p["title"] for p in photos] == ["b0"]
    assert all(p["userId"] == 2 for p in photos)


def test_login_with_mixed_case_email_as_registered(client):
    assert register(client, email="Alice@Example.COM").status_code == 200
    r = login(client, email="Alice@Example.COM")
    assert r.status_code == 200
    assert client.get("/users/1").json()["email"] == "Alice@Example.COM"


def test_register_accepts_any_non_empty_email(client):
    assert register(client, email="alice@localhost").status_code == 200
    assert login(client, email="alice@localhost").status_code == 200


def test_update_keeps_email_as_sent(client, auth):
    r = client.put("/users/1", headers=auth, json={"username": "alice", "email": "Alice@Example.COM"})
    assert r.status_code == 200
    assert login(client, email="Alice@Example.COM").status_code == 200


def test_password_length_counts_bytes(client):
    # 3 characters, 6 bytes in UTF-8
    assert register(client, password="ééé").status_code == 200
    assert login(client, password="ééé").status_code == 200


def test_malformed_body_is_rejected_before_lookup(client, auth):
    # The body is parsed before the handler looks the user up
    r = client.put("/users/99", content="{oops",
                   headers={**auth, "Content-Type": "application/json"})
    assert r.status_code == 400
