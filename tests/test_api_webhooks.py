"""
Tests for hooklog/api/webhooks.py - the app-facing webhook procedures.
"""
import uuid
from unittest.mock import patch

from hooklog import store
from hooklog.api.auth import create_access_token


async def _seed(db, timestamps, source="github", user_id=None):
    return [
        await store.insert(db, payload='{"n":%d}' % ts, source=source, received_at=ts, user_id=user_id)
        for ts in timestamps
    ]


class TestListEndpoint:
    async def test_camel_case_fields_newest_first(self, client, db, auth_headers):
        await _seed(db, [100, 300, 200])

        resp = await client.get("/api/v1/webhooks", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert [w["receivedAt"] for w in body] == [300, 200, 100]
        assert set(body[0]) == {
            "id", "payload", "source", "status", "errorMessage",
            "userId", "receivedAt", "processedAt",
        }
        assert body[0]["status"] == "pending"

    async def test_query_filters_and_limit(self, client, db, auth_headers):
        await _seed(db, [1, 2, 3], source="github")
        await _seed(db, [4], source="stripe")

        resp = await client.get(
            "/api/v1/webhooks", params={"source": "github", "limit": 2}, headers=auth_headers
        )
        assert [w["receivedAt"] for w in resp.json()] == [3, 2]

    async def test_status_filter(self, client, db, auth_headers):
        a, _ = await _seed(db, [1, 2])
        await store.patch(db, a.id, status="failed")

        resp = await client.get("/api/v1/webhooks", params={"status": "failed"}, headers=auth_headers)
        assert [w["id"] for w in resp.json()] == [str(a.id)]

    async def test_invalid_status_rejected(self, client, auth_headers):
        resp = await client.get("/api/v1/webhooks", params={"status": "archived"}, headers=auth_headers)
        assert resp.status_code == 422

    async def test_anonymous_gets_empty_list(self, client, db):
        await _seed(db, [1])
        resp = await client.get("/api/v1/webhooks")
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_bad_token_treated_as_anonymous(self, client, db):
        await _seed(db, [1])
        resp = await client.get("/api/v1/webhooks", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_token_for_unknown_user_treated_as_anonymous(self, client, db):
        await _seed(db, [1])
        token = create_access_token(uuid.uuid4())
        resp = await client.get("/api/v1/webhooks", headers={"Authorization": f"Bearer {token}"})
        assert resp.json() == []


class TestMineAndStats:
    async def test_mine_returns_callers_records(self, client, db, user, other_user, auth_headers):
        await _seed(db, [1, 2], user_id=user.id)
        await _seed(db, [3], user_id=other_user.id)

        resp = await client.get("/api/v1/webhooks/mine", headers=auth_headers)
        assert [w["receivedAt"] for w in resp.json()] == [2, 1]
        assert all(w["userId"] == str(user.id) for w in resp.json())

    async def test_stats(self, client, db, auth_headers):
        a, _, _ = await _seed(db, [1, 2, 3])
        await store.patch(db, a.id, status="processed")

        resp = await client.get("/api/v1/webhooks/stats", headers=auth_headers)
        assert resp.json() == {"total": 3, "pending": 2, "processed": 1, "failed": 0}

    async def test_stats_anonymous_is_null(self, client):
        resp = await client.get("/api/v1/webhooks/stats")
        assert resp.status_code == 200
        assert resp.json() is None


class TestGetEndpoint:
    async def test_get_existing(self, client, db, auth_headers):
        record, = await _seed(db, [7])
        resp = await client.get(f"/api/v1/webhooks/{record.id}", headers=auth_headers)
        assert resp.json()["id"] == str(record.id)
        assert resp.json()["payload"] == '{"n":7}'

    async def test_get_missing_is_null(self, client, auth_headers):
        resp = await client.get(f"/api/v1/webhooks/{uuid.uuid4()}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() is None

    async def test_get_anonymous_is_null(self, client, db):
        record, = await _seed(db, [7])
        resp = await client.get(f"/api/v1/webhooks/{record.id}")
        assert resp.json() is None


class TestCreateEndpoint:
    async def test_create_owned_by_caller(self, client, db, user, auth_headers):
        resp = await client.post(
            "/api/v1/webhooks",
            json={"payload": '{"x":1}', "source": "manual"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        record = await store.get(db, uuid.UUID(resp.json()["id"]))
        assert record.user_id == user.id
        assert record.status == "pending"

    async def test_create_with_user_id(self, client, db, other_user, auth_headers):
        resp = await client.post(
            "/api/v1/webhooks",
            json={"payload": "{}", "source": "manual", "userId": str(other_user.id)},
            headers=auth_headers,
        )
        record = await store.get(db, uuid.UUID(resp.json()["id"]))
        assert record.user_id == other_user.id

    async def test_create_anonymous(self, client, db):
        resp = await client.post("/api/v1/webhooks", json={"payload": "{}", "source": "manual"})
        assert resp.status_code == 200
        record = await store.get(db, uuid.UUID(resp.json()["id"]))
        assert record.user_id is None

    async def test_create_with_unknown_user_id_is_400(self, client, db, auth_headers):
        resp = await client.post(
            "/api/v1/webhooks",
            json={"payload": "{}", "source": "manual", "userId": str(uuid.uuid4())},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Unknown user", "code": "validation_error"}
        assert await store.scan(db, "by_received_at") == []


class TestUpdateStatusEndpoint:
    async def test_failed_with_reason(self, client, db, auth_headers):
        record, = await _seed(db, [1])
        with patch("hooklog.services.webhooks.now_ms", return_value=9_999):
            resp = await client.patch(
                f"/api/v1/webhooks/{record.id}/status",
                json={"status": "failed", "errorMessage": "timeout"},
                headers=auth_headers,
            )

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "failed"
        assert body["errorMessage"] == "timeout"
        assert body["processedAt"] == 9_999

    async def test_anonymous_is_401(self, client, db):
        record, = await _seed(db, [1])
        resp = await client.patch(f"/api/v1/webhooks/{record.id}/status", json={"status": "processed"})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Not authenticated", "code": "unauthenticated"}

    async def test_unknown_id_is_404(self, client, auth_headers):
        resp = await client.patch(
            f"/api/v1/webhooks/{uuid.uuid4()}/status",
            json={"status": "processed"},
            headers=auth_headers,
        )
        assert resp.status_code == 404
        assert resp.json()["error"] == "Webhook not found"

    async def test_invalid_status_is_422(self, client, db, auth_headers):
        record, = await _seed(db, [1])
        resp = await client.patch(
            f"/api/v1/webhooks/{record.id}/status", json={"status": "done"}, headers=auth_headers
        )
        assert resp.status_code == 422


class TestRemoveEndpoint:
    async def test_remove(self, client, db, auth_headers):
        record, = await _seed(db, [1])
        resp = await client.delete(f"/api/v1/webhooks/{record.id}", headers=auth_headers)
        assert resp.status_code == 200
        assert await store.get(db, record.id) is None

    async def test_remove_unknown_is_404(self, client, db, auth_headers):
        await _seed(db, [1])
        resp = await client.delete(f"/api/v1/webhooks/{uuid.uuid4()}", headers=auth_headers)
        assert resp.status_code == 404
        assert len(await store.scan(db, "by_received_at")) == 1

    async def test_remove_anonymous_is_401(self, client, db):
        record, = await _seed(db, [1])
        resp = await client.delete(f"/api/v1/webhooks/{record.id}")
        assert resp.status_code == 401
        assert await store.get(db, record.id) is not None
