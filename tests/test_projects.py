"""
Project create/update/delete and the listings.
"""

from conftest import API, signup_and_signin


def _create(client, headers, **fields):
    fields.setdefault("title", "T")
    response = client.post(f"{API}/projects", headers=headers, json=fields)
    assert response.status_code == 200, response.get_json()
    return response.get_json()["project"]


def test_create_project_stamps_server_fields(client, owner):
    user, headers = owner
    project = _create(client, headers, title="T", description="D", tags=["x", "y"])

    assert project["id"]
    assert project["ownerId"] == user["id"]
    assert project["createdAt"] == project["updatedAt"]
    assert project["tags"] == ["x", "y"]
    assert project["image"] is None
    assert project["externalLink"] is None


def test_create_project_ids_are_unique(client, owner):
    _, headers = owner
    ids = {_create(client, headers, title=f"P{i}")["id"] for i in range(5)}
    assert len(ids) == 5


def test_create_project_ignores_server_fields_from_caller(client, owner):
    user, headers = owner
    project = _create(client, headers, title="T", id="mine", ownerId="other", createdAt="1999")
    assert project["id"] != "mine"
    assert project["ownerId"] == user["id"]
    assert project["createdAt"] != "1999"


def test_create_project_tags_deduplicated_in_order(client, owner):
    _, headers = owner
    project = _create(client, headers, tags=["Lua", " Combat ", "Lua", "", "UI"])
    assert project["tags"] == ["Lua", "Combat", "UI"]


def test_create_project_requires_title(client, owner):
    _, headers = owner
    response = client.post(f"{API}/projects", headers=headers, json={"title": "  ", "description": "D"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Title is required"}


def test_create_project_requires_token(client):
    response = client.post(f"{API}/projects", json={"title": "T"})
    assert response.status_code == 401


def test_update_project_partial_merge(client, owner):
    _, headers = owner
    project = _create(client, headers, title="T", description="D", tags=["x", "y"])

    response = client.put(f"{API}/projects/{project['id']}", headers=headers, json={"tags": ["x"]})
    assert response.status_code == 200
    updated = response.get_json()["project"]

    assert updated["tags"] == ["x"]
    assert updated["title"] == "T"
    assert updated["description"] == "D"
    assert updated["id"] == project["id"]
    assert updated["ownerId"] == project["ownerId"]
    assert updated["createdAt"] == project["createdAt"]
    assert updated["updatedAt"] > project["updatedAt"]


def test_update_project_updated_at_strictly_increases(client, owner):
    _, headers = owner
    project = _create(client, headers)

    stamps = [project["updatedAt"]]
    for i in range(5):
        resp = client.put(f"{API}/projects/{project['id']}", headers=headers, json={"description": str(i)})
        stamps.append(resp.get_json()["project"]["updatedAt"])

    assert all(a < b for a, b in zip(stamps, stamps[1:]))


def test_update_project_cannot_change_identity(client, owner):
    _, headers = owner
    project = _create(client, headers)
    updated = client.put(
        f"{API}/projects/{project['id']}", headers=headers,
        json={"id": "x", "ownerId": "y", "title": "New"},
    ).get_json()["project"]

    assert updated["id"] == project["id"]
    assert updated["ownerId"] == project["ownerId"]
    assert updated["title"] == "New"


def test_update_missing_project_is_404(client, owner):
    _, headers = owner
    response = client.put(f"{API}/projects/does-not-exist", headers=headers, json={"title": "T"})
    assert response.status_code == 404
    assert response.get_json() == {"error": "Project not found"}


def test_update_other_owners_project_is_404(client):
    _, ann = signup_and_signin(client, "a@x.com", "pw1234", "Ann")
    _, bob = signup_and_signin(client, "b@x.com", "pw1234", "Bob")
    project = _create(client, ann)

    response = client.put(f"{API}/projects/{project['id']}", headers=bob, json={"title": "Hijack"})
    assert response.status_code == 404


def test_delete_project(client, owner):
    _, headers = owner
    project = _create(client, headers)

    response = client.delete(f"{API}/projects/{project['id']}", headers=headers)
    assert response.get_json() == {"success": True}
    assert client.get(f"{API}/projects", headers=headers).get_json()["projects"] == []


def test_delete_is_idempotent(client, owner):
    _, headers = owner
    response = client.delete(f"{API}/projects/never-existed", headers=headers)
    assert response.status_code == 200
    assert response.get_json() == {"success": True}


def test_list_own_projects_only_returns_callers(client):
    _, ann = signup_and_signin(client, "a@x.com", "pw1234", "Ann")
    _, bob = signup_and_signin(client, "b@x.com", "pw1234", "Bob")
    _create(client, ann, title="Ann's")
    _create(client, bob, title="Bob's")

    titles = [p["title"] for p in client.get(f"{API}/projects", headers=ann).get_json()["projects"]]
    assert titles == ["Ann's"]


def test_list_projects_newest_first(client, owner):
    _, headers = owner
    for title in ["first", "second", "third"]:
        _create(client, headers, title=title)

    titles = [p["title"] for p in client.get(f"{API}/projects", headers=headers).get_json()["projects"]]
    assert titles == ["third", "second", "first"]


def test_public_projects_need_no_token(client, owner):
    _, headers = owner
    _create(client, headers, title="Shown")

    response = client.get(f"{API}/projects/public")
    assert response.status_code == 200
    assert [p["title"] for p in response.get_json()["projects"]] == ["Shown"]


def test_public_projects_include_every_owner(client):
    """The public listing scans all owners. A second account's projects are
    exposed too; this pins that behaviour so a change to it is deliberate."""
    ann_user, ann = signup_and_signin(client, "a@x.com", "pw1234", "Ann")
    bob_user, bob = signup_and_signin(client, "b@x.com", "pw1234", "Bob")
    _create(client, ann, title="Ann's")
    _create(client, bob, title="Bob's")

    projects = client.get(f"{API}/projects/public").get_json()["projects"]
    assert {p["ownerId"] for p in projects} == {ann_user["id"], bob_user["id"]}


def test_public_projects_ignore_other_key_namespaces(client, owner):
    """Profiles, accounts and tokens share the store but are never listed."""
    _, headers = owner
    assert client.get(f"{API}/projects/public").get_json()["projects"] == []
