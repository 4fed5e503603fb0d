"""API tests for the notification routes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def _payload(**overrides):
    payload = {
        "recipient": {"type": "phone", "value": "11987654321"},
        "channel": "sms",
        "content": {"text": "Your code is 1234"},
    }
    payload.update(overrides)
    return payload


def test_send_notification_returns_dispatch_acknowledgement(client):
    response = client.post("/notifications", json=_payload())

    assert response.status_code == 202
    body = response.json()
    assert body["status"] == "sent"
    assert body["provider"] == "twilio"
    assert body["recipient"] == "+5511987654321"
    assert body["message_id"] == "twilio-1"
    assert body["is_fallback"] is False
    assert body["status_url"] == f"/notifications/{body['notification_id']}/status"

    detail = client.get(f"/notifications/{body['notification_id']}")
    assert detail.status_code == 200
    assert [entry["status"] for entry in detail.json()["status_history"]] == [
        "queued",
        "processing",
        "sent",
    ]


def test_send_notification_reports_fallback(client, providers):
    providers["twilio"].fail = True

    response = client.post(
        "/notifications",
        json=_payload(options={"fallback_channels": ["whatsapp"]}),
    )

    assert response.status_code == 202
    body = response.json()
    assert body["channel"] == "whatsapp"
    assert body["is_fallback"] is True


def test_delivery_failure_maps_to_bad_gateway(client, providers):
    providers["twilio"].fail = True

    response = client.post("/notifications", json=_payload())

    assert response.status_code == 502
    assert client.get("/notifications", params={"status": "failed"}).json()["total"] == 1


def test_invalid_request_maps_to_bad_request(client):
    response = client.post("/notifications", json=_payload(channel="fax"))

    assert response.status_code == 400


def test_unknown_notification_maps_to_not_found(client):
    assert client.get("/notifications/missing").status_code == 404
    assert client.delete("/notifications/missing").status_code == 404


def test_schedule_cancel_and_dispatch(client, providers):
    scheduled_for = (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat()

    first = client.post("/notifications", json=_payload(options={"scheduled_for": scheduled_for}))
    second = client.post("/notifications", json=_payload(options={"scheduled_for": scheduled_for}))

    assert first.json()["status"] == "scheduled"
    assert providers["twilio"].sent == []

    cancelled = client.delete(f"/notifications/{first.json()['notification_id']}")
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert client.delete(f"/notifications/{first.json()['notification_id']}").status_code == 400

    dispatched = client.post(f"/notifications/{second.json()['notification_id']}/dispatch")
    assert dispatched.status_code == 200
    assert dispatched.json()["status"] == "sent"


def test_list_notifications_pagination(client):
    for _ in range(3):
        client.post("/notifications", json=_payload())

    response = client.get("/notifications", params={"page": 2, "limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["pages"] == 2
    assert len(body["items"]) == 1
    assert client.get("/notifications", params={"limit": 500}).status_code == 400


def test_status_update_and_refresh(client):
    notification_id = client.post("/notifications", json=_payload()).json()["notification_id"]

    updated = client.patch(
        f"/notifications/{notification_id}/status",
        json={"status": "delivered", "provider_response": {"raw_response": {"event": "ok"}}},
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "delivered"
    assert updated.json()["provider_response"]["message_id"] == "twilio-1"

    refreshed = client.get(f"/notifications/{notification_id}/status", params={"refresh": True})
    assert refreshed.status_code == 200
    assert refreshed.json()["provider_status"]["status"] == "delivered"

    invalid = client.patch(f"/notifications/{notification_id}/status", json={"status": "bounced"})
    assert invalid.status_code == 400
