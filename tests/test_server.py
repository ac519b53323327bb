import pytest
from fastapi.testclient import TestClient

from tasktimetracker.server import create_app


@pytest.fixture
def api(store_config):
    """HTTP client over a freshly migrated pair of stores."""
    with TestClient(create_app(store_config)) as api:
        yield api


def test_health(api):
    res = api.get("/health")

    assert res.status_code == 200
    assert res.json() == {"bookings": "ok", "tasks": "ok"}


def test_booking_crud(api):
    # --- create ---
    res = api.post("/api/bookings", params={"description": "focus time", "enddate": 9_999_999_999_999})
    assert res.status_code == 201
    booking = res.json()
    assert booking["des"] == "focus time"
    assert booking["startdate"] > 0

    # --- patch ---
    res = api.patch("/api/bookings", params={"id": booking["id"], "description": "deep work"})
    assert res.status_code == 200
    assert res.json()["des"] == "deep work"
    assert res.json()["enddate"] == 9_999_999_999_999

    res = api.patch("/api/bookings", params={"id": booking["id"]})
    assert res.status_code == 204

    res = api.patch("/api/bookings", params={"id": 999, "startdate": 1})
    assert res.status_code == 404

    # --- list ---
    res = api.get("/api/bookings", params={"description_contains": "deep"})
    assert [b["id"] for b in res.json()] == [booking["id"]]

    # --- delete ---
    res = api.delete("/api/bookings", params={"id": booking["id"]})
    assert res.status_code == 200
    assert api.get("/api/bookings").json() == []
    assert api.delete("/api/bookings", params={"id": booking["id"]}).status_code == 404


def test_tags_and_assignments(api):
    res = api.post("/api/tags", params={"name": "work"})
    assert res.status_code == 201
    tag = res.json()

    assert api.post("/api/tags", params={"name": "work"}).status_code == 409
    assert api.post("/api/tags", params={"name": "x" * 31}).status_code == 422

    booking = api.post("/api/bookings").json()
    api.post("/api/bookings")

    res = api.post("/api/tagassignments", params={"tag_id": tag["id"], "booking_id": booking["id"]})
    assert res.status_code == 201
    assert res.json() == {"bid": booking["id"], "tgid": tag["id"]}

    res = api.post("/api/tagassignments", params={"tag_id": tag["id"], "booking_id": booking["id"]})
    assert res.status_code == 409
    res = api.post("/api/tagassignments", params={"tag_id": 999, "booking_id": booking["id"]})
    assert res.status_code == 422

    res = api.get("/api/bookings", params=[("tag", "work"), ("tag", "other")])
    assert [b["id"] for b in res.json()] == [booking["id"]]

    res = api.get("/api/tagassignments", params={"tag_id": tag["id"]})
    assert res.json() == [{"bid": booking["id"], "tgid": tag["id"]}]

    # Assigned tags cannot be deleted.
    assert api.delete("/api/tags", params={"id": tag["id"]}).status_code == 422

    res = api.delete("/api/tagassignments", params={"tag_id": tag["id"], "booking_id": booking["id"]})
    assert res.status_code == 200

    res = api.patch("/api/tags", params={"id": tag["id"], "name": "office"})
    assert res.json() == {"id": tag["id"], "name": "office"}
    assert api.patch("/api/tags", params={"id": tag["id"]}).status_code == 204
    assert api.get("/api/tags", params={"name": "office"}).json() == [{"id": tag["id"], "name": "office"}]

    assert api.delete("/api/tags", params={"id": tag["id"]}).status_code == 200
    assert api.get("/api/tags").json() == []
