import asyncio
from datetime import datetime

import pytest
from httpx import AsyncClient


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.mark.asyncio
async def test_admin_routes_require_admin(client: AsyncClient, student_headers):
    for path in ("/api/admin/incidents", "/api/admin/analytics"):
        assert (await client.get(path)).status_code == 401
        assert (await client.get(path, headers=student_headers)).status_code == 403


@pytest.mark.asyncio
async def test_list_incidents_filtered_by_status(client: AsyncClient, report_incident, admin_headers):
    pending = await report_incident(title="Still pending")
    reviewed = await report_incident(title="Being reviewed")
    await client.patch(
        f"/api/admin/incidents/{reviewed['_id']}", json={"status": "In Review"}, headers=admin_headers
    )

    response = await client.get("/api/admin/incidents", params={"status": "Pending"}, headers=admin_headers)

    assert response.status_code == 200
    incidents = response.json()
    assert [i["_id"] for i in incidents] == [pending["_id"]]
    assert all(i["status"] == "Pending" for i in incidents)


@pytest.mark.asyncio
async def test_list_incidents_combined_filters(client: AsyncClient, report_incident, admin_headers):
    theft = await report_incident(category="Theft")
    await report_incident(category="Bullying")
    await client.patch(f"/api/admin/incidents/{theft['_id']}", json={"priority": "High"}, headers=admin_headers)

    response = await client.get(
        "/api/admin/incidents", params={"category": "Theft", "priority": "High"}, headers=admin_headers
    )

    assert [i["_id"] for i in response.json()] == [theft["_id"]]


@pytest.mark.asyncio
async def test_list_incidents_newest_first_with_reporter(
    client: AsyncClient, report_incident, student, student_headers, admin_headers
):
    first = await report_incident(headers=student_headers)
    second = await report_incident()

    response = await client.get("/api/admin/incidents", headers=admin_headers)

    incidents = response.json()
    assert [i["_id"] for i in incidents] == [second["_id"], first["_id"]]
    assert incidents[1]["reportedBy"]["name"] == student.name
    assert incidents[0]["reportedBy"] is None


@pytest.mark.asyncio
async def test_list_incidents_rejects_unknown_status(client: AsyncClient, admin_headers):
    response = await client.get("/api/admin/incidents", params={"status": "Lost"}, headers=admin_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_resolving_sets_resolved_at(client: AsyncClient, report_incident, admin_headers):
    created = await report_incident()
    assert created["resolvedAt"] is None

    response = await client.patch(
        f"/api/admin/incidents/{created['_id']}",
        json={"status": "Resolved", "resolution": "Laptop recovered and returned."},
        headers=admin_headers,
    )

    assert response.status_code == 200
    incident = response.json()
    assert incident["status"] == "Resolved"
    assert incident["resolvedAt"] is not None
    assert incident["resolution"] == "Laptop recovered and returned."
    assert incident["referenceId"] == created["referenceId"]


@pytest.mark.asyncio
async def test_other_status_leaves_resolved_at_empty(client: AsyncClient, report_incident, admin_headers):
    created = await report_incident()

    response = await client.patch(
        f"/api/admin/incidents/{created['_id']}", json={"status": "Closed"}, headers=admin_headers
    )

    assert response.json()["resolvedAt"] is None


@pytest.mark.asyncio
async def test_notes_are_appended(client: AsyncClient, report_incident, admin_user, admin_headers):
    created = await report_incident()
    url = f"/api/admin/incidents/{created['_id']}"

    await client.patch(url, json={"note": "Contacted campus security"}, headers=admin_headers)
    response = await client.patch(url, json={"note": "CCTV footage requested"}, headers=admin_headers)

    notes = response.json()["adminNotes"]
    assert [n["note"] for n in notes] == ["Contacted campus security", "CCTV footage requested"]
    assert all(n["addedBy"] == admin_user.id for n in notes)
    assert response.json()["status"] == "Pending"


@pytest.mark.asyncio
async def test_empty_fields_are_ignored(client: AsyncClient, report_incident, admin_headers):
    created = await report_incident()

    response = await client.patch(
        f"/api/admin/incidents/{created['_id']}",
        json={"status": "", "priority": "Critical", "note": "", "resolution": ""},
        headers=admin_headers,
    )

    incident = response.json()
    assert incident["status"] == "Pending"
    assert incident["priority"] == "Critical"
    assert incident["adminNotes"] == []


@pytest.mark.asyncio
async def test_assign_incident(client: AsyncClient, report_incident, admin_user, admin_headers):
    created = await report_incident()
    url = f"/api/admin/incidents/{created['_id']}"

    response = await client.patch(url, json={"assignedTo": admin_user.id}, headers=admin_headers)
    assert response.json()["assignedTo"] == admin_user.id

    response = await client.patch(url, json={"assignedTo": 9999}, headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_with_proof_files(client: AsyncClient, storage, report_incident, admin_headers):
    created = await report_incident()

    response = await client.patch(
        f"/api/admin/incidents/{created['_id']}",
        data={"status": "Resolved", "note": "Lock replaced"},
        files=[("adminProof", ("new-lock.jpg", b"jpeg bytes", "image/jpeg"))],
        headers=admin_headers,
    )

    assert response.status_code == 200
    incident = response.json()
    assert incident["status"] == "Resolved"
    assert [p["filename"] for p in incident["adminProof"]] == ["new-lock.jpg"]
    assert incident["adminProof"][0]["path"].startswith("https://files.test/")
    assert incident["attachments"] == []
    assert incident["adminNotes"][0]["note"] == "Lock replaced"


@pytest.mark.asyncio
async def test_proof_removed_when_update_not_saved(
    client: AsyncClient, storage, report_incident, admin_headers, monkeypatch
):
    created = await report_incident()

    async def failing_update(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr("sentra.routers.admin.update_incident", failing_update)

    with pytest.raises(RuntimeError, match="database unavailable"):
        await client.patch(
            f"/api/admin/incidents/{created['_id']}",
            data={"status": "Resolved"},
            files=[("adminProof", ("new-lock.jpg", b"jpeg bytes", "image/jpeg"))],
            headers=admin_headers,
        )

    assert storage.deleted == ["https://files.test/1/new-lock.jpg"]


@pytest.mark.asyncio
async def test_update_rejects_bad_proof(client: AsyncClient, storage, report_incident, admin_headers):
    created = await report_incident()

    response = await client.patch(
        f"/api/admin/incidents/{created['_id']}",
        data={"status": "Resolved"},
        files=[("adminProof", ("script.sh", b"#!/bin/sh", "application/x-sh"))],
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert storage.saved == []


@pytest.mark.asyncio
async def test_update_rejects_invalid_status(client: AsyncClient, report_incident, admin_headers):
    created = await report_incident()

    response = await client.patch(
        f"/api/admin/incidents/{created['_id']}", json={"status": "Done"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert "status" in [error["field"] for error in response.json()["errors"]]


@pytest.mark.asyncio
async def test_update_missing_incident(client: AsyncClient, admin_headers):
    response = await client.patch("/api/admin/incidents/9999", json={"status": "Closed"}, headers=admin_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_refreshes_updated_at(client: AsyncClient, report_incident, admin_headers):
    created = await report_incident()
    await asyncio.sleep(0.01)

    response = await client.patch(
        f"/api/admin/incidents/{created['_id']}", json={"note": "Seen"}, headers=admin_headers
    )

    updated = response.json()
    assert parse_timestamp(updated["updatedAt"]) > parse_timestamp(created["updatedAt"])
    assert updated["createdAt"] == created["createdAt"]


@pytest.mark.asyncio
async def test_timestamps_are_utc(client: AsyncClient, report_incident, admin_headers):
    created = await report_incident()

    response = await client.patch(
        f"/api/admin/incidents/{created['_id']}",
        json={"status": "Resolved", "note": "Returned to owner"},
        headers=admin_headers,
    )

    incident = response.json()
    for value in (incident["resolvedAt"], incident["updatedAt"], incident["adminNotes"][0]["addedAt"]):
        assert value.endswith(("Z", "+00:00")), value


@pytest.mark.asyncio
async def test_analytics(client: AsyncClient, report_incident, admin_headers):
    incidents = [
        await report_incident(category="Theft"),
        await report_incident(category="Theft"),
        await report_incident(category="Bullying"),
        await report_incident(category="Harassment"),
    ]
    await client.patch(f"/api/admin/incidents/{incidents[0]['_id']}", json={"status": "Resolved"}, headers=admin_headers)
    await client.patch(f"/api/admin/incidents/{incidents[1]['_id']}", json={"status": "In Review"}, headers=admin_headers)
    await client.patch(
        f"/api/admin/incidents/{incidents[2]['_id']}",
        json={"status": "Closed", "priority": "High"},
        headers=admin_headers,
    )

    response = await client.get("/api/admin/analytics", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    summary = data["summary"]
    assert summary == {"total": 4, "pending": 1, "inReview": 1, "resolved": 1, "closed": 1}
    assert summary["total"] == summary["pending"] + summary["inReview"] + summary["resolved"] + summary["closed"]

    assert data["categoryStats"][0] == {"_id": "Theft", "count": 2}
    assert sorted(s["_id"] for s in data["categoryStats"]) == ["Bullying", "Harassment", "Theft"]
    assert {s["_id"]: s["count"] for s in data["priorityStats"]} == {"Medium": 3, "High": 1}

    recent = data["recentIncidents"]
    assert [r["_id"] for r in recent] == [i["_id"] for i in reversed(incidents)]
    assert set(recent[0]) == {"_id", "title", "referenceId", "category", "status", "createdAt"}


@pytest.mark.asyncio
async def test_analytics_recent_limited_to_five(client: AsyncClient, report_incident, admin_headers):
    for _ in range(7):
        await report_incident()

    data = (await client.get("/api/admin/analytics", headers=admin_headers)).json()

    assert data["summary"]["total"] == 7
    assert len(data["recentIncidents"]) == 5


@pytest.mark.asyncio
async def test_analytics_has_no_monthly_trend(client: AsyncClient, admin_headers):
    """The dashboard reads monthlyTrend, but the API has never produced it."""
    data = (await client.get("/api/admin/analytics", headers=admin_headers)).json()

    assert "monthlyTrend" not in data
    assert data["summary"]["total"] == 0
    assert data["categoryStats"] == []
