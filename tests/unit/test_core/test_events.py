"""
test_events.py - EventBus / 무효화 / quota 채널 테스트
"""

from src.core.events import CacheInvalidationPublisher, EventBus, QuotaRefreshTrigger
from src.domain.schemas import ActionKind, InvalidationEvent, QuotaRefreshEvent


class TestEventBus:

    def test_publish_without_subscribers(self):
        """구독자 0 → 에러 없음."""
        bus = EventBus()

        assert bus.publish("apps", object()) == 0

    def test_subscribe_and_unsubscribe(self):
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe("apps", received.append)

        bus.publish("apps", "e1")
        unsubscribe()
        unsubscribe()  # 두 번 호출해도 안전
        bus.publish("apps", "e2")

        assert received == ["e1"]
        assert bus.subscriber_count("apps") == 0

    def test_failing_subscriber_does_not_block_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe("apps", broken)
        bus.subscribe("apps", received.append)

        delivered = bus.publish("apps", "e")

        assert delivered == 1
        assert received == ["e"]

    def test_topics_are_isolated(self):
        bus = EventBus()
        apps, quota = [], []
        bus.subscribe("apps", apps.append)
        bus.subscribe("quota", quota.append)

        bus.publish("quota", "q")

        assert apps == []
        assert quota == ["q"]


class TestPublishers:

    def test_invalidation_event(self):
        bus = EventBus()
        received = []
        bus.subscribe("apps", received.append)

        event = CacheInvalidationPublisher(bus).publish("app-a", ActionKind.EDIT)

        assert received == [event]
        assert isinstance(event, InvalidationEvent)
        assert event.resource_type == "apps"
        assert event.action == ActionKind.EDIT

    def test_quota_refresh_event(self):
        bus = EventBus()
        received = []
        bus.subscribe("quota", received.append)

        event = QuotaRefreshTrigger(bus).fire("app-a", ActionKind.DELETE)

        assert received == [event]
        assert isinstance(event, QuotaRefreshEvent)
        assert event.app_id == "app-a"
