from unittest.mock import MagicMock

from wctips.core.dependencies import get_auth_service
from wctips.main import app
from wctips.modules.auth.service import AuthService

API = "/api/v1"


def create_group(api, name="Friends"):
    response = api.client.post(f"{API}/groups", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()["group"]


def test_health(api):
    response = api.client.get("/health")

    assert response.status_code == 200
    assert response.headers["X-Frame-Options"] == "DENY"


def test_create_group_requires_login(api):
    response = api.client.post(f"{API}/groups", json={"name": "Friends"})

    assert response.status_code == 401
    assert response.json()["ok"] is False


def test_create_group_blank_name(api):
    api.login_as("alice")

    response = api.client.post(f"{API}/groups", json={"name": "   "})

    assert response.status_code == 422
    assert response.json() == {"ok": False, "error": "Group name is required."}


def test_group_lifecycle(api):
    api.login_as("alice")
    group = create_group(api)

    listed = api.client.get(f"{API}/groups").json()
    assert listed["ok"] is True
    assert [g["id"] for g in listed["groups"]] == [group["id"]]
    assert listed["groups"][0]["membership_role"] == "owner"

    detail = api.client.get(f"{API}/groups/{group['id']}").json()
    assert detail["members"] == [{"user_id": "alice", "role": "owner", "profile": None}]


def test_list_groups_empty(api):
    api.login_as("nobody")

    assert api.client.get(f"{API}/groups").json() == {"ok": True, "groups": []}


def test_group_detail_hidden_from_non_members(api):
    api.login_as("alice")
    group = create_group(api)

    api.login_as("mallory")
    assert api.client.get(f"{API}/groups/{group['id']}").status_code == 403
    assert api.client.get(f"{API}/groups/{group['id']}/members").status_code == 403
    assert api.client.get(f"{API}/groups/does-not-exist").status_code == 404


def test_invite_flow(api):
    api.login_as("alice")
    group = create_group(api)
    created = api.client.post(
        f"{API}/groups/{group['id']}/invites",
        json={"max_uses": 1},
        headers={"x-forwarded-proto": "https", "x-forwarded-host": "tips.example.com"},
    )
    assert created.status_code == 201
    token = created.json()["token"]
    assert created.json()["url"] == f"https://tips.example.com/join/{token}"

    api.logout()
    preview = api.client.get(f"{API}/invites/{token}").json()
    assert preview["group_name"] == "Friends"
    assert preview["state"] == "active"
    assert api.client.post(f"{API}/invites/{token}/accept").status_code == 401

    api.login_as("bob")
    joined = api.client.post(f"{API}/invites/{token}/accept")
    assert joined.json() == {"ok": True, "group_id": group["id"], "already_member": False}
    again = api.client.post(f"{API}/invites/{token}/accept")
    assert again.json()["already_member"] is True

    api.login_as("carol")
    refused = api.client.post(f"{API}/invites/{token}/accept")
    assert refused.status_code == 410
    assert refused.json() == {"ok": False, "error": "This invite cannot be used any more."}

    members = api.client.get(f"{API}/groups/{group['id']}/members")
    assert members.status_code == 403


def test_invite_without_body_uses_host_header(api):
    api.login_as("alice")
    group = create_group(api)

    created = api.client.post(f"{API}/groups/{group['id']}/invites")

    assert created.status_code == 201
    assert created.json()["url"].startswith("http://testserver/join/")


def test_invite_rejects_zero_max_uses(api):
    api.login_as("alice")
    group = create_group(api)

    response = api.client.post(f"{API}/groups/{group['id']}/invites", json={"max_uses": 0})

    assert response.status_code == 422


def test_expired_invite(api):
    api.login_as("alice")
    group = create_group(api)
    token = api.client.post(
        f"{API}/groups/{group['id']}/invites", json={"expires_at": "2020-01-01T00:00:00Z"}
    ).json()["token"]

    api.login_as("bob")
    response = api.client.post(f"{API}/invites/{token}/accept")

    assert response.status_code == 410
    assert response.json()["error"] == "This invite has expired."
    assert api.client.get(f"{API}/invites/{token}").json()["state"] == "expired"


def test_unknown_invite(api):
    api.login_as("bob")

    assert api.client.get(f"{API}/invites/nope").status_code == 404
    assert api.client.post(f"{API}/invites/nope/accept").json() == {"ok": False, "error": "Invalid invite."}


def test_profile_roundtrip(api):
    api.login_as("alice")

    assert api.client.get(f"{API}/profile").json() == {"id": "alice", "display_name": None, "avatar_url": None}

    saved = api.client.put(f"{API}/profile", json={"display_name": " Alice "})
    assert saved.json()["ok"] is True
    assert saved.json()["profile"]["display_name"] == "Alice"

    cleared = api.client.put(f"{API}/profile", json={"display_name": ""})
    assert cleared.json()["profile"]["display_name"] is None


def test_search_short_query_skips_auth_and_store(api, monkeypatch):
    store_calls = []
    monkeypatch.setattr(api.store, "select", lambda *a, **k: store_calls.append(a) or [])

    response = api.client.get(f"{API}/users/search", params={"q": "a"})

    assert response.status_code == 200
    assert response.json() == {"results": []}
    assert store_calls == []


def test_search_requires_login(api):
    response = api.client.get(f"{API}/users/search", params={"q": "an"})

    assert response.status_code == 401


def test_search_matches_display_names(api):
    for i, name in enumerate(["Anna", "Johan", "Bertil", None]):
        api.store.insert("profiles", {"id": f"u{i}", "display_name": name, "avatar_url": None})
    for i in range(15):
        api.store.insert("profiles", {"id": f"x{i}", "display_name": f"Stefan {i}"})
    api.login_as("alice")

    names = [r["display_name"] for r in api.client.get(f"{API}/users/search", params={"q": " AN "}).json()["results"]]

    assert names[:2] == ["Anna", "Johan"]
    assert len(names) == 10
    assert "Bertil" not in names


def test_search_store_error_is_500(api, monkeypatch):
    from wctips.core.errors import StoreError

    def broken(*args, **kwargs):
        raise StoreError("relation \"profiles\" does not exist")

    monkeypatch.setattr(api.store, "select", broken)
    api.login_as("alice")

    response = api.client.get(f"{API}/users/search", params={"q": "an"})

    assert response.status_code == 500
    assert response.json()["error"] == "relation \"profiles\" does not exist"


def test_login_bad_credentials(api):
    supabase = MagicMock()
    supabase.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
    fake_auth = app.dependency_overrides[get_auth_service]
    app.dependency_overrides[get_auth_service] = lambda: AuthService(supabase)
    try:
        response = api.client.post(f"{API}/auth/login", json={"email": "alice@gmail.com", "password": "x"})
    finally:
        app.dependency_overrides[get_auth_service] = fake_auth

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


def test_me(api):
    api.login_as("alice")

    assert api.client.get(f"{API}/auth/me").json()["id"] == "alice"


def test_search_short_query_ignores_stale_token(api):
    api.use_token("stale")

    response = api.client.get(f"{API}/users/search", params={"q": "a"})

    assert response.status_code == 200
    assert response.json() == {"results": []}
    assert api.auth.lookups == []


def test_search_with_stale_token_is_401(api):
    api.use_token("stale")

    response = api.client.get(f"{API}/users/search", params={"q": "an"})

    assert response.status_code == 401
    assert response.json() == {"ok": False, "error": "Invalid or expired token"}


def test_list_groups_signed_out_is_empty(api):
    api.login_as("alice")
    create_group(api)
    api.logout()

    response = api.client.get(f"{API}/groups")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "groups": []}


def test_logout(api):
    api.login_as("alice")

    assert api.client.post(f"{API}/auth/logout").json() == {"message": "Logged out successfully"}
    assert api.client.get(f"{API}/auth/me").status_code == 401
