"""
In-memory Resource Client.

로컬 개발/테스트용. 원격 서비스와 같은 계약(ClientResult)을 따름.

- export는 yaml.safe_dump(sort_keys=True)로 결정론적 바이트 생성
- fail_next()로 다음 호출 실패 주입
- calls에 호출 기록 (op, app_id)
"""

import asyncio
import logging
import uuid
from collections import defaultdict, deque
from dataclasses import replace

import yaml

from src.domain.errors import ErrorKind
from src.domain.schemas import (
    AppInfoPatch,
    AppMode,
    Application,
    DuplicateParams,
    SiteConfig,
    SiteConfigParams,
)

from .base import ClientFailure, ClientResult, ResourceClient

logger = logging.getLogger(__name__)

OPERATIONS = (
    "fetch_detail",
    "update_info",
    "update_site_config",
    "duplicate",
    "export",
    "delete",
)


class InMemoryResourceClient(ResourceClient):
    """
    dict 기반 Resource Client.

    Usage:
        client = InMemoryResourceClient([app_a, app_b])
        client.fail_next("update_info", ErrorKind.VALIDATION, "name too long")
    """

    def __init__(
        self,
        apps: list[Application] | None = None,
        latency: float = 0.0,
    ):
        """
        Args:
            apps: 초기 앱 목록
            latency: 호출마다 대기할 시간(초). 동시성 테스트용
        """
        self._apps: dict[str, Application] = {app.id: app for app in apps or []}
        self.latency = latency
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[str, deque[ClientFailure]] = defaultdict(deque)

    # =========================================================================
    # Test helpers
    # =========================================================================

    def fail_next(
        self,
        operation: str,
        kind: ErrorKind,
        message: str | None = None,
    ) -> None:
        """다음 operation 호출을 실패시킴."""
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown operation: {operation}")
        self._failures[operation].append(ClientFailure(kind=kind, message=message))

    def calls_for(self, operation: str) -> list[str]:
        """operation별 호출된 app_id 목록."""
        return [app_id for op, app_id in self.calls if op == operation]

    def get(self, app_id: str) -> Application | None:
        return self._apps.get(app_id)

    async def _enter(self, operation: str, app_id: str) -> ClientFailure | None:
        self.calls.append((operation, app_id))
        if self.latency:
            await asyncio.sleep(self.latency)
        queue = self._failures.get(operation)
        if queue:
            return queue.popleft()
        return None

    @staticmethod
    def _failed(failure: ClientFailure) -> ClientResult:
        return ClientResult.fail(failure.kind, message=failure.message)

    # =========================================================================
    # Operations
    # =========================================================================

    async def fetch_detail(self, app_id: str) -> ClientResult[Application]:
        failure = await self._enter("fetch_detail", app_id)
        if failure:
            return self._failed(failure)
        app = self._apps.get(app_id)
        if app is None:
            return ClientResult.fail(ErrorKind.NOT_FOUND, message="App not found")
        return ClientResult.ok(app)

    async def update_info(
        self,
        app_id: str,
        patch: AppInfoPatch,
    ) -> ClientResult[Application]:
        failure = await self._enter("update_info", app_id)
        if failure:
            return self._failed(failure)
        app = self._apps.get(app_id)
        if app is None:
            return ClientResult.fail(ErrorKind.NOT_FOUND, message="App not found")
        if not patch.name.strip():
            return ClientResult.fail(ErrorKind.VALIDATION, message="name is required")

        updated = replace(
            app,
            name=patch.name,
            icon=patch.icon,
            icon_background=patch.icon_background,
            description=patch.description,
        )
        self._apps[app_id] = updated
        return ClientResult.ok(updated)

    async def update_site_config(
        self,
        app_id: str,
        params: SiteConfigParams,
    ) -> ClientResult[None]:
        failure = await self._enter("update_site_config", app_id)
        if failure:
            return self._failed(failure)
        app = self._apps.get(app_id)
        if app is None:
            return ClientResult.fail(ErrorKind.NOT_FOUND, message="App not found")

        site = app.site.to_dict() if app.site else {}
        site.update(params.to_dict())
        self._apps[app_id] = replace(app, site=SiteConfig.from_dict(site))
        return ClientResult.ok()

    async def duplicate(
        self,
        app_id: str,
        params: DuplicateParams,
        mode: AppMode,
    ) -> ClientResult[Application]:
        failure = await self._enter("duplicate", app_id)
        if failure:
            return self._failed(failure)
        source = self._apps.get(app_id)
        if source is None:
            return ClientResult.fail(ErrorKind.NOT_FOUND, message="App not found")
        if not params.name.strip():
            return ClientResult.fail(ErrorKind.VALIDATION, message="name is required")

        created = Application(
            id=uuid.uuid4().hex,
            name=params.name,
            mode=mode,
            description=source.description,
            icon=params.icon,
            icon_background=params.icon_background,
            site=source.site,
        )
        self._apps[created.id] = created
        logger.debug(f"Duplicated {app_id} -> {created.id}")
        return ClientResult.ok(created)

    async def export(self, app_id: str) -> ClientResult[bytes]:
        failure = await self._enter("export", app_id)
        if failure:
            return self._failed(failure)
        app = self._apps.get(app_id)
        if app is None:
            return ClientResult.fail(ErrorKind.NOT_FOUND, message="App not found")

        snapshot = {
            "app": {
                "name": app.name,
                "mode": app.mode.value,
                "icon": app.icon,
                "icon_background": app.icon_background,
                "description": app.description,
            },
            "site": app.site.to_dict() if app.site else None,
        }
        text = yaml.safe_dump(snapshot, allow_unicode=True, sort_keys=True)
        return ClientResult.ok(text.encode("utf-8"))

    async def delete(self, app_id: str) -> ClientResult[None]:
        failure = await self._enter("delete", app_id)
        if failure:
            return self._failed(failure)
        if self._apps.pop(app_id, None) is None:
            return ClientResult.fail(ErrorKind.NOT_FOUND, message="App not found")
        return ClientResult.ok()
