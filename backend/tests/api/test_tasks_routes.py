"""Task Routes — HTTP surface of the membership service.

Invariants:
    - POST /tasks → 201 with members []; blank or missing name → 400
    - POST /tasks/{id}/{member} → 200 + task; idempotent; 404 for unknown task/user
    - DELETE /tasks/{id}/{member} → 200 + task without the member
    - Conflict → 409, timeout → 504, store failure → 503; the app keeps serving afterwards
"""

from taskboard.core.domain_types import Collection
from taskboard.core.errors import DatabaseError


async def _user(client, name="alice"):
    res = await client.post("/users", params={"username": name})
    return res.json()["id"]


async def _task(client, name="launch"):
    res = await client.post("/tasks", json={"name": name})
    assert res.status_code == 201
    return res.json()


async def test_create_task(client):
    task = await _task(client)
    assert task["name"] == "launch"
    assert task["members"] == []


async def test_create_task_blank_name(client):
    res = await client.post("/tasks", json={"name": ""})
    assert res.status_code == 400


async def test_create_task_missing_body(client):
    res = await client.post("/tasks", json={})
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"] == "body.name"


async def test_list_and_get_tasks(client):
    created = await _task(client)
    listed = await client.get("/tasks")
    assert listed.status_code == 200
    assert listed.json() == [created]
    fetched = await client.get(f"/tasks/{created['id']}")
    assert fetched.json() == created


async def test_get_unknown_task(client):
    res = await client.get("/tasks/nope")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "TASK_NOT_FOUND"


async def test_membership_scenario(client):
    u1 = await _user(client, "alice")
    t1 = (await _task(client, "launch"))["id"]

    res = await client.post(f"/tasks/{t1}/{u1}")
    assert res.status_code == 200
    assert res.json()["members"] == [u1]

    res = await client.post(f"/tasks/{t1}/{u1}")
    assert res.status_code == 200
    assert res.json()["members"] == [u1]

    res = await client.post(f"/tasks/{t1}/bogus")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "USER_NOT_FOUND"

    fetched = await client.get(f"/tasks/{t1}")
    assert fetched.json()["members"] == [u1]


async def test_add_member_unknown_task(client):
    u1 = await _user(client)
    res = await client.post(f"/tasks/nonexistent-task/{u1}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "TASK_NOT_FOUND"


async def test_remove_member(client):
    u1 = await _user(client, "alice")
    u2 = await _user(client, "bob")
    t1 = (await _task(client))["id"]
    await client.post(f"/tasks/{t1}/{u1}")
    await client.post(f"/tasks/{t1}/{u2}")

    res = await client.delete(f"/tasks/{t1}/{u1}")
    assert res.status_code == 200
    assert res.json()["members"] == [u2]


async def test_deleted_user_stays_listed_until_removed(client):
    u1 = await _user(client)
    t1 = (await _task(client))["id"]
    await client.post(f"/tasks/{t1}/{u1}")
    await client.delete(f"/users/{u1}")

    assert (await client.get(f"/tasks/{t1}")).json()["members"] == [u1]
    res = await client.delete(f"/tasks/{t1}/{u1}")
    assert res.json()["members"] == []


# ─── failure mapping (scriptable store) ──────────────────────────

async def test_conflict_maps_to_409(fake_client, fake_store):
    fake_store.seed(Collection.USERS, "U1", {"display_name": "alice"})
    fake_store.seed(Collection.TASKS, "T1", {"name": "launch", "members": []})

    async def rival_always(doc_id, expected_version):
        await fake_store.update(Collection.TASKS, doc_id, {})

    fake_store.before_conditional_write = rival_always

    res = await fake_client.post("/tasks/T1/U1")
    assert res.status_code == 409
    body = res.json()["error"]
    assert body["code"] == "CONCURRENT_UPDATE_CONFLICT"
    assert body["retryable"] is True


async def test_timeout_maps_to_504(fake_client, fake_store):
    fake_store.seed(Collection.USERS, "U1", {"display_name": "alice"})
    fake_store.seed(Collection.TASKS, "T1", {"name": "launch", "members": []})
    fake_store.read_delay = 0.5

    res = await fake_client.post("/tasks/T1/U1")
    assert res.status_code == 504
    assert res.json()["error"]["code"] == "TIMEOUT"


async def test_store_failure_maps_to_503_and_app_keeps_serving(fake_client, fake_store):
    fake_store.fail_with = DatabaseError("connection refused", "execute")
    res = await fake_client.get("/tasks")
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "DATABASE_ERROR"

    fake_store.fail_with = None
    res = await fake_client.get("/tasks")
    assert res.status_code == 200
