"""Event routes — calendar CRUD and range validation."""

from uuid import uuid4

EVENT = {
    "title": "Family dinner",
    "start_date": "2026-12-24T18:00:00Z",
    "end_date": "2026-12-24T23:00:00Z",
    "color": "#FF8800",
}


async def test_create_and_get_event(client):
    res = await client.post("/api/v1/events", json=EVENT)
    assert res.status_code == 201
    event = res.json()
    assert event["priority"] == 3
    assert event["color"] == "#FF8800"

    fetched = await client.get(f"/api/v1/events/{event['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["title"] == "Family dinner"


async def test_create_event_end_before_start(client):
    res = await client.post(
        "/api/v1/events", json={**EVENT, "end_date": "2026-12-24T17:00:00Z"},
    )
    assert res.status_code == 400


async def test_recurring_event_stores_pattern(client):
    res = await client.post(
        "/api/v1/events",
        json={**EVENT, "is_recurring": True, "recurrence_pattern": "Yearly"},
    )
    assert res.status_code == 201
    assert res.json()["recurrence_pattern"] == "Yearly"


async def test_partial_update_checks_merged_range(client):
    event = (await client.post("/api/v1/events", json=EVENT)).json()
    url = f"/api/v1/events/{event['id']}"

    ok = await client.patch(url, json={"location": "Home"})
    assert ok.status_code == 200
    assert ok.json()["location"] == "Home"
    assert ok.json()["title"] == "Family dinner"

    bad = await client.patch(url, json={"end_date": "2026-12-24T10:00:00Z"})
    assert bad.status_code == 400
    assert bad.json()["error"]["context"]["field"] == "end_date"


async def test_recurring_without_pattern_on_update(client):
    event = (await client.post("/api/v1/events", json=EVENT)).json()
    res = await client.patch(f"/api/v1/events/{event['id']}", json={"is_recurring": True})
    assert res.status_code == 400


async def test_list_events_ordered_and_filtered(client):
    await client.post("/api/v1/events", json={
        **EVENT, "title": "Later", "category": "Family",
        "start_date": "2027-01-01T10:00:00Z", "end_date": "2027-01-01T11:00:00Z",
    })
    await client.post("/api/v1/events", json=EVENT)

    titles = [e["title"] for e in (await client.get("/api/v1/events")).json()]
    assert titles == ["Family dinner", "Later"]

    res = await client.get("/api/v1/events", params={"starts_after": "2026-12-31T00:00:00Z"})
    assert [e["title"] for e in res.json()] == ["Later"]

    res = await client.get("/api/v1/events", params={"category": "Family"})
    assert [e["title"] for e in res.json()] == ["Later"]


async def test_delete_event(client):
    event = (await client.post("/api/v1/events", json=EVENT)).json()
    res = await client.delete(f"/api/v1/events/{event['id']}")
    assert res.status_code == 200
    assert res.json()["id"] == event["id"]
    assert (await client.get(f"/api/v1/events/{event['id']}")).status_code == 404


async def test_missing_event_is_404(client):
    assert (await client.patch(f"/api/v1/events/{uuid4()}", json={"title": "x"})).status_code == 404
