"""
HTTP Resource Client (httpx).

원격 콘솔 API:
- GET    /apps/{id}          → 상세
- PUT    /apps/{id}          → 이름/아이콘/설명 수정
- POST   /apps/{id}/site     → 사이트 설정 수정
- POST   /apps/{id}/copy     → 복제
- GET    /apps/{id}/export   → {"data": "<yaml>"} 또는 원문 바이트
- DELETE /apps/{id}          → 삭제

상태 코드 매핑:
- 400/409/413/422 → validation (원격 message 그대로)
- 404 → not_found
- 그 외, httpx.HTTPError, timeout → transport
"""

import logging
import os
from typing import Any

import httpx

from src.domain.errors import ErrorCodes, ErrorKind
from src.domain.schemas import (
    AppInfoPatch,
    AppMode,
    Application,
    DuplicateParams,
    SiteConfigParams,
)

from .base import ClientResult, ResourceClient

logger = logging.getLogger(__name__)

VALIDATION_STATUS_CODES = frozenset({400, 409, 413, 422})
NOT_FOUND_STATUS_CODES = frozenset({404})


class HttpResourceClient(ResourceClient):
    """
    httpx 기반 Resource Client.

    Usage:
        client = HttpResourceClient(base_url="http://localhost:5001/console/api")
        result = await client.fetch_detail("app-123")
    """

    def __init__(
        self,
        base_url: str,
        api_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        token_env: str = "CONSOLE_API_TOKEN",
    ):
        """
        Args:
            base_url: 콘솔 API 루트 (config에서 주입)
            api_token: Bearer 토큰 (없으면 token_env 환경변수)
            timeout: 요청 timeout(초)
            transport: 테스트용 transport (httpx.MockTransport 등)
            token_env: 토큰 환경변수 이름
        """
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token or os.environ.get(token_env)
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """AsyncClient (lazy init)."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.api_token:
                headers["Authorization"] = f"Bearer {self.api_token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # Operations
    # =========================================================================

    async def fetch_detail(self, app_id: str) -> ClientResult[Application]:
        result = await self._request("GET", f"/apps/{app_id}")
        return self._to_application(result)

    async def update_info(
        self,
        app_id: str,
        patch: AppInfoPatch,
    ) -> ClientResult[Application]:
        result = await self._request("PUT", f"/apps/{app_id}", json=patch.to_dict())
        return self._to_application(result)

    async def update_site_config(
        self,
        app_id: str,
        params: SiteConfigParams,
    ) -> ClientResult[None]:
        result = await self._request(
            "POST", f"/apps/{app_id}/site", json=params.to_dict()
        )
        if not result.success:
            return ClientResult(success=False, failure=result.failure)
        return ClientResult.ok()

    async def duplicate(
        self,
        app_id: str,
        params: DuplicateParams,
        mode: AppMode,
    ) -> ClientResult[Application]:
        result = await self._request(
            "POST", f"/apps/{app_id}/copy", json=params.to_dict(mode)
        )
        return self._to_application(result)

    async def export(self, app_id: str) -> ClientResult[bytes]:
        result = await self._request("GET", f"/apps/{app_id}/export")
        if not result.success or result.data is None:
            return ClientResult(success=False, failure=result.failure)

        response = result.data
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                body = response.json()
            except ValueError:
                return ClientResult.fail(
                    ErrorKind.TRANSPORT,
                    code=ErrorCodes.REMOTE_BAD_RESPONSE,
                    status_code=response.status_code,
                )
            data = body.get("data") if isinstance(body, dict) else None
            if not isinstance(data, str):
                return ClientResult.fail(
                    ErrorKind.TRANSPORT,
                    code=ErrorCodes.REMOTE_BAD_RESPONSE,
                    status_code=response.status_code,
                )
            return ClientResult.ok(data.encode("utf-8"))

        return ClientResult.ok(response.content)

    async def delete(self, app_id: str) -> ClientResult[None]:
        result = await self._request("DELETE", f"/apps/{app_id}")
        if not result.success:
            return ClientResult(success=False, failure=result.failure)
        return ClientResult.ok()

    # =========================================================================
    # Internals
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> ClientResult[httpx.Response]:
        """
        요청 실행 + 실패 분류.

        재시도 없음: 사용자가 다시 트리거해야 함.
        """
        try:
            response = await self._get_client().request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out: {e}")
            return ClientResult.fail(ErrorKind.TRANSPORT, message="timeout")
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            return ClientResult.fail(ErrorKind.TRANSPORT)

        if response.is_success:
            return ClientResult.ok(response)

        message = _extract_message(response)
        status = response.status_code
        logger.info(f"{method} {path} -> {status}: {message}")

        if status in NOT_FOUND_STATUS_CODES:
            return ClientResult.fail(
                ErrorKind.NOT_FOUND, message=message, status_code=status
            )
        if status in VALIDATION_STATUS_CODES:
            return ClientResult.fail(
                ErrorKind.VALIDATION, message=message, status_code=status
            )
        return ClientResult.fail(
            ErrorKind.TRANSPORT, message=message, status_code=status
        )

    def _to_application(
        self,
        result: ClientResult[httpx.Response],
    ) -> ClientResult[Application]:
        """성공 응답 본문 → Application. 파싱 실패는 transport로 분류."""
        if not result.success or result.data is None:
            return ClientResult(success=False, failure=result.failure)

        response = result.data
        try:
            return ClientResult.ok(Application.from_dict(response.json()))
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Unparseable application payload: {e}")
            return ClientResult.fail(
                ErrorKind.TRANSPORT,
                code=ErrorCodes.REMOTE_BAD_RESPONSE,
                status_code=response.status_code,
            )


def _extract_message(response: httpx.Response) -> str | None:
    """에러 응답에서 message 추출 (JSON 아니면 None)."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str):
            return message
    return None
