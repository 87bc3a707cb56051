"""
Tests for hooklog/api/ingest.py - the public POST /webhook endpoint.

Covers:
- valid JSON stored as pending with header/default source
- invalid JSON -> 400, nothing stored
- non-POST -> 405 with Allow: POST, nothing stored
- store failure -> 500 with opaque body, nothing stored
"""
import json
import uuid
from unittest.mock import AsyncMock, patch

import pytest

from hooklog import store
from hooklog.api.ingest import is_valid_json


async def _all_records(db):
    return await store.scan(db, "by_received_at")


class TestIsValidJson:
    @pytest.mark.parametrize("body", [b'{"a":1}', b"[]", b"1", b'"text"', b"null", b" true "])
    def test_accepts_json_values(self, body):
        assert is_valid_json(body) is True

    @pytest.mark.parametrize(
        "body",
        [b"{a:1", b"", b"\xef\xbb\xbf", b"{'a': 1}", b"NaN", b'{"x": Infinity}', b"\xff\xfe"],
    )
    def test_rejects_invalid(self, body):
        assert is_valid_json(body) is False

    def test_accepts_leading_bom(self):
        assert is_valid_json(b'\xef\xbb\xbf{"a":1}') is True


class TestReceiveWebhook:
    async def test_stores_payload_with_source_header(self, client, db):
        resp = await client.post(
            "/webhook", content='{"a":1}', headers={"X-Webhook-Source": "github"}
        )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/json")
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Webhook received successfully"

        record = await store.get(db, uuid.UUID(body["webhookId"]))
        assert record.source == "github"
        assert record.status == "pending"
        assert record.payload == '{"a":1}'
        assert record.user_id is None
        assert record.received_at > 0

    async def test_source_defaults_to_unknown(self, client, db):
        resp = await client.post("/webhook", content="[1, 2, 3]")
        assert resp.status_code == 200

        records = await _all_records(db)
        assert len(records) == 1
        assert records[0].source == "unknown"

    async def test_empty_source_header_defaults_to_unknown(self, client, db):
        resp = await client.post("/webhook", content="{}", headers={"X-Webhook-Source": ""})
        assert resp.status_code == 200
        assert (await _all_records(db))[0].source == "unknown"

    async def test_ignores_bearer_token(self, client, db, auth_headers):
        resp = await client.post("/webhook", content="{}", headers=auth_headers)
        assert resp.status_code == 200
        assert (await _all_records(db))[0].user_id is None

    async def test_duplicate_deliveries_create_duplicate_records(self, client, db):
        for _ in range(2):
            resp = await client.post("/webhook", content='{"id": "evt_1"}')
            assert resp.status_code == 200
        assert len(await _all_records(db)) == 2

    async def test_payload_not_reformatted(self, client, db):
        raw = '{\n  "z": 1,   "a": [true, null]\n}'
        resp = await client.post("/webhook", content=raw)
        record = await store.get(db, uuid.UUID(resp.json()["webhookId"]))
        assert record.payload == raw

    @pytest.mark.parametrize("body", ["{a:1", "", "not json", '{"a": NaN}'])
    async def test_invalid_json_returns_400(self, client, db, body):
        resp = await client.post("/webhook", content=body, headers={"X-Webhook-Source": "github"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON payload"}
        assert resp.headers["content-type"].startswith("application/json")
        assert await _all_records(db) == []

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    async def test_non_post_returns_405(self, client, db, method):
        resp = await client.request(method, "/webhook", content='{"a":1}')

        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed. Use POST."}
        assert resp.headers["allow"] == "POST"
        assert await _all_records(db) == []

    async def test_store_failure_returns_500(self, client, db):
        with patch(
            "hooklog.api.ingest.record_inbound_webhook",
            new_callable=AsyncMock,
            side_effect=RuntimeError("disk full"),
        ):
            resp = await client.post("/webhook", content='{"a":1}')

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}
        assert "disk full" not in resp.text
        assert await _all_records(db) == []

    async def test_response_echoes_correlation_id(self, client):
        resp = await client.post(
            "/webhook", content="{}", headers={"X-Correlation-ID": "abc123"}
        )
        assert resp.headers["x-correlation-id"] == "abc123"

    async def test_body_round_trips_as_json(self, client, db):
        payload = {"nested": {"list": [1, 2.5, "x"]}, "unicode": "héllo"}
        resp = await client.post(
            "/webhook", content=json.dumps(payload).encode(), headers={"X-Webhook-Source": "custom"}
        )
        record = await store.get(db, uuid.UUID(resp.json()["webhookId"]))
        assert json.loads(record.payload) == payload

    async def test_leading_bom_is_stripped(self, client, db):
        resp = await client.post("/webhook", content=b'\xef\xbb\xbf{"a":1}')

        assert resp.status_code == 200
        record = await store.get(db, uuid.UUID(resp.json()["webhookId"]))
        assert record.payload == '{"a":1}'
