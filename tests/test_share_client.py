from __future__ import annotations

import httpx
import orjson
import pytest

from schedule_builder.core.store import default_schedule
from schedule_builder.errors import ShareError
from schedule_builder.remote.client import ShareClient


def _client(handler) -> ShareClient:
    return ShareClient(base_url="http://share.test/", transport=httpx.MockTransport(handler))


def test_share_posts_document_and_builds_links():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = orjson.loads(request.content)
        return httpx.Response(
            201,
            json={
                "success": True,
                "id": "abc123XYZ0",
                "url": "/s/abc123XYZ0",
                "embedUrl": "/embed/abc123XYZ0",
                "createdAt": "2026-01-01T00:00:00+00:00",
            },
        )

    schedule = default_schedule()
    with _client(handler) as client:
        receipt = client.share(schedule)

    assert captured["method"] == "POST"
    assert captured["path"] == "/api/share"
    assert captured["body"] == schedule.to_record()
    assert receipt.id == "abc123XYZ0"
    assert receipt.url == "http://share.test/s/abc123XYZ0"
    assert receipt.embed_url == "http://share.test/embed/abc123XYZ0"
    assert receipt.created_at == "2026-01-01T00:00:00+00:00"


def test_load_unwraps_envelope():
    document = default_schedule().to_record()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["id"] == "abc123XYZ0"
        return httpx.Response(200, json={"success": True, "id": "abc123XYZ0", "payload": document})

    assert _client(handler).load("abc123XYZ0") == document


def test_load_accepts_bare_document():
    document = default_schedule().to_record()
    client = _client(lambda request: httpx.Response(200, json=document))
    assert client.load("abc123XYZ0") == document


def test_load_rejects_non_schedule_payload():
    client = _client(lambda request: httpx.Response(200, json={"success": True, "payload": {"meta": {}}}))
    with pytest.raises(ShareError) as excinfo:
        client.load("abc123XYZ0")
    assert excinfo.value.code == "BAD_RESPONSE"


def test_http_errors_carry_code_and_status():
    client = _client(lambda request: httpx.Response(404, json={"success": False, "error": "NOT_FOUND"}))
    with pytest.raises(ShareError) as excinfo:
        client.load("abc123XYZ0")
    assert excinfo.value.code == "NOT_FOUND"
    assert excinfo.value.status_code == 404


def test_error_without_json_body():
    client = _client(lambda request: httpx.Response(502, content=b"Bad gateway"))
    with pytest.raises(ShareError) as excinfo:
        client.share(default_schedule())
    assert excinfo.value.code == "HTTP_ERROR"
    assert excinfo.value.status_code == 502


def test_malformed_success_body():
    client = _client(lambda request: httpx.Response(200, content=b"<html></html>"))
    with pytest.raises(ShareError) as excinfo:
        client.load("abc123XYZ0")
    assert excinfo.value.code == "BAD_RESPONSE"


def test_share_response_without_id():
    client = _client(lambda request: httpx.Response(201, json={"success": True}))
    with pytest.raises(ShareError):
        client.share(default_schedule())


def test_network_failure_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ShareError) as excinfo:
        _client(handler).load("abc123XYZ0")
    assert excinfo.value.code == "NETWORK_ERROR"
    assert excinfo.value.status_code is None


def test_defaults_come_from_settings(monkeypatch):
    from schedule_builder.config import get_settings

    monkeypatch.setenv("SCHEDULE_SHARE_URL", "http://configured.test")
    get_settings.cache_clear()
    client = ShareClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
    assert client.base_url == "http://configured.test"
    assert client.view_url("abc") == "http://configured.test/s/abc"
