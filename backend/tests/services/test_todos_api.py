"""Todo routes — HTTP contract for todo CRUD and per-todo assignments.

Invariants:
    - POST → 201 with users; PUT/PATCH → 200; DELETE → 200 with the deleted todo
    - Validation failures → 400 with field-level details
    - Unknown todo → 404; unknown assignee → 400; duplicate assignment → 409
"""

from uuid import uuid4

from sqlalchemy import func, select

from househub.models.assignment import Assignment


async def _create_user(client, first_name, **fields):
    res = await client.post("/api/v1/users", json={"first_name": first_name, **fields})
    assert res.status_code == 201
    return res.json()


async def _create_todo(client, **fields):
    res = await client.post("/api/v1/todos", json={"title": "Buy milk", **fields})
    assert res.status_code == 201
    return res.json()


async def test_create_todo_defaults(client):
    todo = await _create_todo(client)
    assert todo["is_completed"] is False
    assert todo["completed_at"] is None
    assert todo["priority"] == 3
    assert todo["users"] == []
    assert todo["created_at"] == todo["updated_at"]


async def test_create_todo_validation_error(client):
    res = await client.post("/api/v1/todos", json={"title": "", "priority": 9})
    assert res.status_code == 400
    body = res.json()["error"]
    assert body["code"] == "VALIDATION_ERROR"
    fields = {d["field"] for d in body["details"]}
    assert "body.title" in fields
    assert "body.priority" in fields


async def test_create_todo_with_unknown_assignee(client):
    res = await client.post(
        "/api/v1/todos", json={"title": "x", "assigned_user_ids": [str(uuid4())]},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_REFERENCE"
    assert (await client.get("/api/v1/todos")).json() == []


async def test_get_todo_not_found(client):
    res = await client.get(f"/api/v1/todos/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_get_todo_bad_id_is_400(client):
    res = await client.get("/api/v1/todos/not-a-uuid")
    assert res.status_code == 400


async def test_patch_completion_lifecycle(client):
    todo = await _create_todo(client)
    url = f"/api/v1/todos/{todo['id']}"

    done = (await client.patch(url, json={"is_completed": True})).json()
    assert done["completed_at"] is not None

    renamed = (await client.patch(url, json={"title": "Buy oat milk"})).json()
    assert renamed["completed_at"] == done["completed_at"]

    reopened = (await client.patch(url, json={"is_completed": False})).json()
    assert reopened["completed_at"] is None


async def test_put_requires_title(client):
    todo = await _create_todo(client)
    res = await client.put(f"/api/v1/todos/{todo['id']}", json={"priority": 1})
    assert res.status_code == 400


async def test_put_keeps_omitted_fields(client):
    todo = await _create_todo(client, description="2L", category="Groceries")
    res = await client.put(f"/api/v1/todos/{todo['id']}", json={"title": "Buy bread"})
    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "Buy bread"
    assert body["description"] == "2L"
    assert body["category"] == "Groceries"


async def test_patch_missing_todo(client):
    res = await client.patch(f"/api/v1/todos/{uuid4()}", json={"title": "x"})
    assert res.status_code == 404


async def test_delete_returns_snapshot(client):
    amy = await _create_user(client, "Amy")
    todo = await _create_todo(client, assigned_user_ids=[amy["id"]])

    res = await client.delete(f"/api/v1/todos/{todo['id']}")
    assert res.status_code == 200
    assert res.json()["title"] == "Buy milk"
    assert [u["id"] for u in res.json()["users"]] == [amy["id"]]
    assert (await client.get(f"/api/v1/todos/{todo['id']}")).status_code == 404
    assert (await client.delete(f"/api/v1/todos/{todo['id']}")).status_code == 404


async def test_list_todos_with_filters(client):
    amy = await _create_user(client, "Amy")
    await _create_todo(client, title="Buy milk", assigned_user_ids=[amy["id"]])
    await _create_todo(client, title="Walk dog", priority=1)

    all_todos = (await client.get("/api/v1/todos")).json()
    assert [t["title"] for t in all_todos] == ["Buy milk", "Walk dog"]

    amys = (await client.get("/api/v1/todos", params={"assigned_user_id": amy["id"]})).json()
    assert [t["title"] for t in amys] == ["Buy milk"]

    sorted_desc = (await client.get("/api/v1/todos", params={"sort": "-title"})).json()
    assert [t["title"] for t in sorted_desc] == ["Walk dog", "Buy milk"]

    page = (await client.get("/api/v1/todos", params={"limit": 1, "offset": 1})).json()
    assert [t["title"] for t in page] == ["Walk dog"]


async def test_list_todos_rejects_bad_limit(client):
    assert (await client.get("/api/v1/todos", params={"limit": 0})).status_code == 400


# --- Assignments --------------------------------------------------------------

async def test_assign_and_unassign(client):
    amy = await _create_user(client, "Amy")
    todo = await _create_todo(client)
    url = f"/api/v1/todos/{todo['id']}/users/{amy['id']}"

    res = await client.post(url)
    assert res.status_code == 201
    assert res.json()["user"]["first_name"] == "Amy"
    assert res.json()["todo"]["title"] == "Buy milk"

    dup = await client.post(url)
    assert dup.status_code == 409
    assert dup.json()["error"]["code"] == "ALREADY_ASSIGNED"

    users = (await client.get(f"/api/v1/todos/{todo['id']}/users")).json()
    assert [u["id"] for u in users] == [amy["id"]]
    assert (await client.get(url)).status_code == 200

    assert (await client.delete(url)).json() == {"removed": True}
    assert (await client.delete(url)).json() == {"removed": False}
    assert (await client.get(url)).status_code == 404


async def test_assign_unknown_user_is_400(client):
    todo = await _create_todo(client)
    res = await client.post(f"/api/v1/todos/{todo['id']}/users/{uuid4()}")
    assert res.status_code == 400
    assert res.json()["error"]["context"]["field"] == "user_id"


async def test_list_users_of_missing_todo_is_404(client):
    assert (await client.get(f"/api/v1/todos/{uuid4()}/users")).status_code == 404


async def test_reconcile_through_patch(client):
    a, b, c, d = [await _create_user(client, n) for n in ("A", "B", "C", "D")]
    todo = await _create_todo(client, assigned_user_ids=[a["id"], b["id"], c["id"]])

    res = await client.patch(
        f"/api/v1/todos/{todo['id']}",
        json={"assigned_user_ids": [b["id"], c["id"], d["id"]]},
    )
    assert res.status_code == 200
    assert {u["id"] for u in res.json()["users"]} == {b["id"], c["id"], d["id"]}


async def test_buy_milk_end_to_end(client, test_db):
    amy = await _create_user(client, "Amy")
    todo = await _create_todo(client, assigned_user_ids=[amy["id"]])
    assert [u["first_name"] for u in todo["users"]] == ["Amy"]

    res = await client.patch(f"/api/v1/todos/{todo['id']}", json={"assigned_user_ids": []})
    assert res.status_code == 200
    assert res.json()["users"] == []

    count = await test_db.scalar(select(func.count()).select_from(Assignment))
    assert count == 0
