"""
Detail Loader: 상세 정보 지연 로드 + 세션 캐시.

규칙:
- id당 in-flight 요청 하나: 동시 호출은 첫 요청을 함께 기다림
- 실패 시 캐시에 아무것도 남기지 않음 (fail closed)
- 캐시는 coordinator만 갱신/무효화
- fetch 도중 캐시가 갱신/무효화되면 fetch 결과는 캐시에 남기지 않음
"""

import asyncio
import logging

from src.client.base import ClientResult, ResourceClient
from src.domain.schemas import Application

logger = logging.getLogger(__name__)


class DetailCache:
    """
    세션 단위 상세 캐시 (app_id → 마지막으로 가져온 상세).

    put/invalidate마다 id별 generation, clear마다 epoch 증가.
    진행 중이던 fetch는 시작 시점 generation이 그대로일 때만 기록.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Application] = {}
        self._generations: dict[str, int] = {}
        self._epoch = 0

    def generation(self, app_id: str) -> tuple[int, int]:
        """현재 generation (clear epoch, id별 카운터)."""
        return self._epoch, self._generations.get(app_id, 0)

    def _bump(self, app_id: str) -> None:
        self._generations[app_id] = self._generations.get(app_id, 0) + 1

    def get(self, app_id: str) -> Application | None:
        return self._entries.get(app_id)

    def put(self, app: Application) -> None:
        self._entries[app.id] = app
        self._bump(app.id)

    def put_if_current(self, app: Application, generation: tuple[int, int]) -> bool:
        """
        generation이 바뀌지 않았을 때만 기록.

        Returns:
            기록했으면 True (중간에 수정/무효화가 있었으면 False)
        """
        if self.generation(app.id) != generation:
            return False
        self.put(app)
        return True

    def invalidate(self, app_id: str) -> bool:
        """
        항목 제거. 항목이 없어도 generation은 증가 (진행 중 fetch 무효화).

        Returns:
            제거된 항목이 있었으면 True
        """
        self._bump(app_id)
        return self._entries.pop(app_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self._epoch += 1

    def __contains__(self, app_id: object) -> bool:
        return app_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class DetailLoader:
    """
    fetch-detail 호출 중복 제거 로더.

    Usage:
        loader = DetailLoader(client, cache)
        result = await loader.load("app-1")
    """

    def __init__(self, client: ResourceClient, cache: DetailCache):
        self.client = client
        self.cache = cache
        self._in_flight: dict[str, asyncio.Task[ClientResult[Application]]] = {}

    def is_loading(self, app_id: str) -> bool:
        return app_id in self._in_flight

    @property
    def has_in_flight(self) -> bool:
        return bool(self._in_flight)

    async def load(
        self,
        app_id: str,
        refresh: bool = False,
    ) -> ClientResult[Application]:
        """
        상세 로드.

        Args:
            app_id: 앱 ID
            refresh: True면 캐시를 무시하고 원격 조회

        Returns:
            ClientResult[Application]
        """
        if not refresh:
            cached = self.cache.get(app_id)
            if cached is not None:
                return ClientResult.ok(cached)

        task = self._in_flight.get(app_id)
        if task is None:
            task = asyncio.ensure_future(
                self._fetch(app_id, self.cache.generation(app_id))
            )
            self._in_flight[app_id] = task
            task.add_done_callback(lambda _: self._in_flight.pop(app_id, None))
        else:
            logger.debug(f"Joining in-flight detail fetch for {app_id}")

        # 한 호출자가 취소되어도 공유 요청은 계속
        return await asyncio.shield(task)

    async def _fetch(
        self,
        app_id: str,
        generation: tuple[int, int],
    ) -> ClientResult[Application]:
        result = await self.client.fetch_detail(app_id)
        if result.success and result.data is not None:
            # fetch 중 수정/삭제가 끝났으면 오래된 상세를 기록하지 않음
            if not self.cache.put_if_current(result.data, generation):
                logger.debug(f"Discarded stale detail fetch for {app_id}")
        else:
            logger.info(
                f"Detail fetch failed for {app_id}: "
                f"{result.failure.kind.value if result.failure else 'unknown'}"
            )
        return result
