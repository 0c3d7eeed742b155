"""User Routes — HTTP surface of the user repository.

Invariants:
    - POST /users?username= → 201 with {id, displayName}; missing/blank username → 400
    - GET /users/{id} → 200 or 404 USER_NOT_FOUND
    - PATCH /users?id=&username= → 200; unknown id or bad name → 400
    - DELETE /users/{id} → 200, then 404
"""


async def _create(client, name="alice"):
    res = await client.post("/users", params={"username": name})
    assert res.status_code == 201
    return res.json()


async def test_create_user(client):
    body = await _create(client)
    assert body["displayName"] == "alice"
    assert len(body["id"]) == 32


async def test_create_user_missing_username(client):
    res = await client.post("/users")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_user_blank_username(client):
    res = await client.post("/users", params={"username": ""})
    assert res.status_code == 400
    assert res.json()["error"]["category"] == "validation"


async def test_list_users(client):
    await _create(client, "alice")
    await _create(client, "bob")
    res = await client.get("/users")
    assert res.status_code == 200
    assert sorted(u["displayName"] for u in res.json()) == ["alice", "bob"]


async def test_list_users_empty(client):
    res = await client.get("/users")
    assert res.status_code == 200
    assert res.json() == []


async def test_get_user(client):
    created = await _create(client)
    res = await client.get(f"/users/{created['id']}")
    assert res.status_code == 200
    assert res.json() == created


async def test_get_unknown_user(client):
    res = await client.get("/users/nope")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "USER_NOT_FOUND"


async def test_rename_user(client):
    created = await _create(client)
    res = await client.patch(
        "/users", params={"id": created["id"], "username": "alicia"},
    )
    assert res.status_code == 200
    fetched = await client.get(f"/users/{created['id']}")
    assert fetched.json()["displayName"] == "alicia"


async def test_rename_unknown_user_is_bad_request(client):
    res = await client.patch("/users", params={"id": "nope", "username": "x"})
    assert res.status_code == 400
    body = res.json()
    assert "detail" not in body
    assert body["error"]["code"] == "USER_NOT_FOUND"
    assert body["error"]["context"]["user_id"] == "nope"


async def test_rename_missing_params(client):
    res = await client.patch("/users", params={"username": "x"})
    assert res.status_code == 400
    res = await client.patch("/users", params={"id": "x"})
    assert res.status_code == 400


async def test_rename_blank_name(client):
    created = await _create(client)
    res = await client.patch("/users", params={"id": created["id"], "username": " "})
    assert res.status_code == 400


async def test_delete_user(client):
    created = await _create(client)
    res = await client.delete(f"/users/{created['id']}")
    assert res.status_code == 200
    res = await client.delete(f"/users/{created['id']}")
    assert res.status_code == 404
