"""
test_http_client.py - HttpResourceClient 테스트

httpx.MockTransport로 원격 API 응답을 흉내냄.

검증 포인트:
1. 상태 코드 → ErrorKind 매핑 (404 / 4xx validation / 5xx transport)
2. timeout, 연결 실패 → transport
3. export: JSON {"data": ...} 또는 원문 바이트 그대로
4. 요청 경로/메서드/payload, Bearer 토큰
"""

import json

import httpx
import pytest

from src.client.http import HttpResourceClient
from src.domain.errors import ErrorCodes, ErrorKind
from src.domain.schemas import AppInfoPatch, AppMode, DuplicateParams, SiteConfigParams

BASE_URL = "http://console.test/api"

APP_PAYLOAD = {
    "id": "app-a",
    "name": "Support Bot",
    "mode": "chat",
    "icon": "🤖",
    "icon_background": "#FFEAD5",
    "description": None,
}


def make_client(handler, **kwargs) -> HttpResourceClient:
    return HttpResourceClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestStatusMapping:
    """HTTP 상태 → 실패 분류."""

    @pytest.mark.asyncio
    async def test_fetch_detail_success(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json=APP_PAYLOAD)

        client = make_client(handler)
        result = await client.fetch_detail("app-a")
        await client.aclose()

        assert result.success
        assert result.data.mode == AppMode.CHAT
        assert seen == [("GET", "/api/apps/app-a")]

    @pytest.mark.asyncio
    async def test_404_is_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"message": "App not found"})

        client = make_client(handler)
        result = await client.delete("gone")

        assert not result.success
        assert result.failure.kind == ErrorKind.NOT_FOUND
        assert result.failure.code == ErrorCodes.REMOTE_NOT_FOUND
        assert result.failure.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 409, 413, 422])
    async def test_client_errors_are_validation(self, status):
        def handler(request):
            return httpx.Response(status, json={"message": "name too long"})

        client = make_client(handler)
        result = await client.update_info("app-a", AppInfoPatch(name="x" * 500))

        assert result.failure.kind == ErrorKind.VALIDATION
        assert result.failure.message == "name too long"

    @pytest.mark.asyncio
    async def test_detail_key_used_as_message(self):
        def handler(request):
            return httpx.Response(400, json={"detail": "invalid icon"})

        client = make_client(handler)
        result = await client.update_info("app-a", AppInfoPatch(name="Bot"))

        assert result.failure.message == "invalid icon"

    @pytest.mark.asyncio
    async def test_server_error_is_transport(self):
        def handler(request):
            return httpx.Response(503, text="upstream down")

        client = make_client(handler)
        result = await client.fetch_detail("app-a")

        assert result.failure.kind == ErrorKind.TRANSPORT
        assert result.failure.message is None
        assert result.failure.status_code == 503

    @pytest.mark.asyncio
    async def test_timeout_is_transport(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        client = make_client(handler)
        result = await client.fetch_detail("app-a")

        assert result.failure.kind == ErrorKind.TRANSPORT
        assert result.failure.message == "timeout"
        assert result.failure.status_code is None

    @pytest.mark.asyncio
    async def test_connect_error_is_transport(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        result = await client.delete("app-a")

        assert result.failure.kind == ErrorKind.TRANSPORT
        assert result.failure.code == ErrorCodes.REMOTE_TRANSPORT

    @pytest.mark.asyncio
    async def test_unparseable_application_is_bad_response(self):
        def handler(request):
            return httpx.Response(200, json={"id": "app-a", "name": "Bot", "mode": "???"})

        client = make_client(handler)
        result = await client.fetch_detail("app-a")

        assert result.failure.kind == ErrorKind.TRANSPORT
        assert result.failure.code == ErrorCodes.REMOTE_BAD_RESPONSE


class TestRequests:
    """요청 경로/payload."""

    @pytest.mark.asyncio
    async def test_duplicate_sends_source_mode(self):
        captured = {}

        def handler(request):
            captured["path"] = request.url.path
            captured["method"] = request.method
            captured["body"] = json.loads(request.content)
            return httpx.Response(201, json={**APP_PAYLOAD, "id": "app-new", "name": "Copy"})

        client = make_client(handler)
        result = await client.duplicate(
            "app-a", DuplicateParams(name="Copy"), AppMode.WORKFLOW
        )

        assert result.data.id == "app-new"
        assert captured["method"] == "POST"
        assert captured["path"] == "/api/apps/app-a/copy"
        assert captured["body"]["mode"] == "workflow"

    @pytest.mark.asyncio
    async def test_site_config_sends_only_set_fields(self):
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"result": "success"})

        client = make_client(handler)
        result = await client.update_site_config("app-a", SiteConfigParams(title="New"))

        assert result.success
        assert result.data is None
        assert captured["body"] == {"title": "New"}

    @pytest.mark.asyncio
    async def test_bearer_token_from_env(self, monkeypatch):
        monkeypatch.setenv("TEST_CONSOLE_TOKEN", "secret")
        captured = {}

        def handler(request):
            captured["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json=APP_PAYLOAD)

        client = make_client(handler, token_env="TEST_CONSOLE_TOKEN")
        await client.fetch_detail("app-a")

        assert captured["auth"] == "Bearer secret"


class TestExport:
    """export 응답 처리."""

    @pytest.mark.asyncio
    async def test_json_data_envelope(self):
        def handler(request):
            return httpx.Response(200, json={"data": "app:\n  name: 한글\n"})

        client = make_client(handler)
        result = await client.export("app-a")

        assert result.data == "app:\n  name: 한글\n".encode("utf-8")

    @pytest.mark.asyncio
    async def test_raw_bytes_untouched(self):
        raw = b"app:\r\n  name: Bot\r\n# trailing"

        def handler(request):
            return httpx.Response(
                200, content=raw, headers={"content-type": "application/yaml"}
            )

        client = make_client(handler)
        result = await client.export("app-a")

        assert result.data == raw

    @pytest.mark.asyncio
    async def test_json_without_data_is_bad_response(self):
        def handler(request):
            return httpx.Response(200, json={"result": "ok"})

        client = make_client(handler)
        result = await client.export("app-a")

        assert result.failure.code == ErrorCodes.REMOTE_BAD_RESPONSE

    @pytest.mark.asyncio
    async def test_export_not_found(self):
        def handler(request):
            return httpx.Response(404)

        client = make_client(handler)
        result = await client.export("gone")

        assert result.failure.kind == ErrorKind.NOT_FOUND
        assert result.failure.message is None
