from datetime import timedelta

from app.models.entities import utcnow


def test_member_crud_and_relations(client, admin_headers, add_member):
    add_member(id=1, name="Grandpa", gender="male")
    add_member(id=2, name="Grandma", gender="female", spouse_id=1)
    add_member(id=3, name="Child", parent_id=2, generation=1, birth_date="1980-01-01")
    auto = add_member(name="Later", parent_id=1, generation=1)
    assert auto["id"] == 4

    grandpa = client.get("/v1/members/1", headers=admin_headers)
    assert grandpa.status_code == 200
    body = grandpa.json()
    assert body["spouse_id"] == 2
    assert body["spouse"]["id"] == 2
    assert [item["id"] for item in body["children"]] == [3, 4]

    child = client.get("/v1/members/3", headers=admin_headers).json()
    assert [item["id"] for item in child["parents"]] == [2, 1]
    assert [item["id"] for item in child["siblings"]] == []

    listed = client.get("/v1/members", headers=admin_headers)
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()["items"]] == [1, 2, 3, 4]

    by_generation = client.get("/v1/members/generation/1", headers=admin_headers)
    assert [item["id"] for item in by_generation.json()["items"]] == [3, 4]

    search = client.get("/v1/members", params={"search": "grand"}, headers=admin_headers)
    assert {item["name"] for item in search.json()["items"]} == {"Grandpa", "Grandma"}

    updated = client.patch("/v1/members/3", json={"occupation": "Engineer"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["occupation"] == "Engineer"

    missing = client.get("/v1/members/404", headers=admin_headers)
    assert missing.status_code == 404


def test_reads_require_authentication(client):
    assert client.get("/v1/members").status_code == 401


def test_writes_require_admin(client, add_member):
    add_member(id=1, name="Plain", email="plain@example.com")
    response = client.post(
        "/v1/members",
        json={"name": "Sneaky", "gender": "other"},
        headers={"X-Forwarded-User": "plain@example.com"},
    )
    assert response.status_code == 403


def test_relational_key_validation(client, admin_headers, add_member):
    add_member(id=1, name="Root", generation=0)

    self_parent = client.post(
        "/v1/members", json={"id": 5, "name": "Loop", "gender": "other", "parent_id": 5, "generation": 1}, headers=admin_headers
    )
    assert self_parent.status_code == 400

    missing_parent = client.post(
        "/v1/members", json={"name": "Lost", "gender": "other", "parent_id": 99, "generation": 1}, headers=admin_headers
    )
    assert missing_parent.status_code == 400

    same_generation = client.post(
        "/v1/members", json={"name": "Flat", "gender": "other", "parent_id": 1, "generation": 0}, headers=admin_headers
    )
    assert same_generation.status_code == 400

    died_first = client.post(
        "/v1/members",
        json={"name": "Odd", "gender": "other", "birth_date": "2000-01-01", "death_date": "1999-01-01"},
        headers=admin_headers,
    )
    assert died_first.status_code == 400

    duplicate_id = client.post("/v1/members", json={"id": 1, "name": "Twin", "gender": "other"}, headers=admin_headers)
    assert duplicate_id.status_code == 409


def test_duplicate_email_is_conflict(client, admin_headers, add_member):
    add_member(id=1, name="One", email="same@example.com")
    response = client.post(
        "/v1/members", json={"name": "Two", "gender": "other", "email": "SAME@example.com"}, headers=admin_headers
    )
    assert response.status_code == 409


def test_null_for_required_fields_is_rejected(client, admin_headers, add_member):
    add_member(id=1, name="Keep", email="keep@example.com", generation=2)

    for field in ("name", "gender", "generation", "nickname"):
        response = client.patch("/v1/members/1", json={field: None}, headers=admin_headers)
        assert response.status_code == 400, field
        assert response.json()["detail"] == f"{field} cannot be null"

    own = client.patch("/v1/members/1", json={"name": None}, headers={"X-Forwarded-User": "keep@example.com"})
    assert own.status_code == 400

    member = client.get("/v1/members/1", headers=admin_headers).json()
    assert member["name"] == "Keep"
    assert member["generation"] == 2


def test_parent_generation_stays_below_children(client, admin_headers, add_member):
    add_member(id=1, name="Parent", generation=0)
    add_member(id=2, name="Child", parent_id=1, generation=2)

    for generation in (2, 5):
        response = client.patch("/v1/members/1", json={"generation": generation}, headers=admin_headers)
        assert response.status_code == 400
    assert client.get("/v1/members/1", headers=admin_headers).json()["generation"] == 0

    moved = client.patch("/v1/members/1", json={"generation": 1}, headers=admin_headers)
    assert moved.status_code == 200
    assert moved.json()["generation"] == 1


def test_spouse_links_stay_symmetric(client, admin_headers, add_member):
    add_member(id=10, name="A")
    add_member(id=11, name="B", spouse_id=10)
    add_member(id=12, name="C")

    taken = client.patch("/v1/members/12", json={"spouse_id": 10}, headers=admin_headers)
    assert taken.status_code == 409

    divorce = client.patch("/v1/members/10", json={"spouse_id": None}, headers=admin_headers)
    assert divorce.status_code == 200
    assert client.get("/v1/members/11", headers=admin_headers).json()["spouse_id"] is None

    remarry = client.patch("/v1/members/12", json={"spouse_id": 10}, headers=admin_headers)
    assert remarry.status_code == 200
    assert client.get("/v1/members/10", headers=admin_headers).json()["spouse_id"] == 12


def test_delete_leaves_dangling_parent_reference(client, admin_headers, add_member):
    add_member(id=1, name="Dad", spouse_id=None)
    add_member(id=2, name="Mum", spouse_id=1)
    add_member(id=3, name="Kid", parent_id=2, generation=1)

    assert client.delete("/v1/members/2", headers=admin_headers).status_code == 204

    kid = client.get("/v1/members/3", headers=admin_headers).json()
    assert kid["parent_id"] == 2
    assert kid["parents"] == []
    assert client.get("/v1/members/1", headers=admin_headers).json()["spouse_id"] is None


def test_members_edit_only_their_own_profile(client, add_member):
    add_member(id=1, name="Self", email="self@example.com", generation=0)
    add_member(id=2, name="Other", email="other@example.com")
    headers = {"X-Forwarded-User": "self@example.com"}

    own = client.patch("/v1/members/1", json={"bio": "Hello", "generation": 4}, headers=headers)
    assert own.status_code == 200
    assert own.json()["bio"] == "Hello"
    assert own.json()["generation"] == 0

    other = client.patch("/v1/members/2", json={"bio": "Hacked"}, headers=headers)
    assert other.status_code == 403


def test_dashboard_stats(client, admin_headers, add_member):
    today = utcnow().date()
    soon = today + timedelta(days=3)
    add_member(id=1, name="Soon", birth_date=soon.replace(year=1992).isoformat(), generation=0)
    add_member(id=2, name="Later", birth_date=(today + timedelta(days=90)).replace(year=1992).isoformat(), generation=1)

    response = client.get("/v1/members/stats", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total_members"] == 2
    assert body["total_generations"] == 2
    assert [item["member"]["id"] for item in body["upcoming_birthdays"]] == [1]
    assert body["upcoming_birthdays"][0]["days_until"] == 3
