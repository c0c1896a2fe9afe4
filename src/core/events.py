"""
Pub/Sub 채널: 목록 캐시 무효화, quota 갱신.

규칙:
- fire-and-forget: 구독자 수 0이어도 에러 아님
- 구독자 예외는 로그만 남기고 다른 구독자 전달은 계속
- 동기 전달: publish가 반환되면 모든 구독자가 호출된 상태
  (coordinator가 idle로 돌아가기 전에 부수효과 완료 보장)
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from src.domain.constants import APPS_TOPIC, QUOTA_TOPIC
from src.domain.schemas import ActionKind, InvalidationEvent, QuotaRefreshEvent

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventBus:
    """
    topic 단위 pub/sub.

    Usage:
        bus = EventBus()
        unsubscribe = bus.subscribe("apps", list_view.on_invalidated)
        bus.publish("apps", event)
        unsubscribe()
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """
        구독 등록.

        Returns:
            구독 해제 함수 (여러 번 호출해도 안전)
        """
        self._subscribers[topic].append(handler)

        def unsubscribe() -> None:
            handlers = self._subscribers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))

    def publish(self, topic: str, event: Any) -> int:
        """
        이벤트 전달.

        Returns:
            정상 전달된 구독자 수
        """
        delivered = 0
        # 전달 중 구독 해제에 대비해 복사본 순회
        for handler in list(self._subscribers.get(topic, [])):
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Subscriber {handler!r} failed on topic '{topic}': {e}",
                    exc_info=True,
                )
        return delivered


class CacheInvalidationPublisher:
    """mutation 성공 후 목록 캐시 보유자에게 무효화 통지."""

    def __init__(self, bus: EventBus, resource_type: str = APPS_TOPIC):
        self.bus = bus
        self.resource_type = resource_type

    def publish(self, app_id: str, action: ActionKind) -> InvalidationEvent:
        event = InvalidationEvent(
            resource_type=self.resource_type,
            app_id=app_id,
            action=action,
            occurred_at=datetime.now(UTC).isoformat(),
        )
        delivered = self.bus.publish(self.resource_type, event)
        logger.debug(
            f"Invalidation published for {app_id} ({action.value}) "
            f"to {delivered} subscriber(s)"
        )
        return event


class QuotaRefreshTrigger:
    """생성/삭제 후 plan/usage 카운터 갱신 요청."""

    def __init__(self, bus: EventBus):
        self.bus = bus

    def fire(self, app_id: str, action: ActionKind) -> QuotaRefreshEvent:
        event = QuotaRefreshEvent(
            app_id=app_id,
            action=action,
            occurred_at=datetime.now(UTC).isoformat(),
        )
        self.bus.publish(QUOTA_TOPIC, event)
        return event
