"""
test_coordinator.py - ActionCoordinator 테스트

검증 포인트:
1. 액션별 성공 부수효과 (feedback, 무효화, flag, quota, 이동)
2. 실패 분류별 feedback (validation 원문 / not_found / transport 일반 안내)
3. 삭제 확인 게이트: 확인 전 원격 호출 없음, 취소 시 0회
4. 동일 (app_id, kind) 재진입 → ignored, 원격 호출 1회
5. 상태 전이 idle → loading → success/failure → idle, 부수효과는 idle 이전
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from src.client.base import ClientResult
from src.client.memory import InMemoryResourceClient
from src.core.coordinator import ActionCoordinator
from src.core.events import EventBus
from src.domain.errors import ErrorCodes, ErrorKind, LifecycleError
from src.domain.schemas import (
    ActionKind,
    ActionState,
    AppInfoPatch,
    DeleteRequest,
    DuplicateParams,
    DuplicateRequest,
    EditRequest,
    ExportRequest,
    FeedbackLevel,
    OutcomeStatus,
    SettingsUpdateRequest,
    SiteConfigParams,
)

# =============================================================================
# Helpers
# =============================================================================


def subscribe(bus: EventBus, topic: str) -> list:
    received: list = []
    bus.subscribe(topic, received.append)
    return received


class SnapshotThenWaitClient(InMemoryResourceClient):
    """상세를 읽은 뒤 응답 전까지 대기 (응답 도중 다른 액션이 끼어드는 상황)."""

    async def fetch_detail(self, app_id):
        self.calls.append(("fetch_detail", app_id))
        snapshot = self.get(app_id)
        await asyncio.sleep(0.05)
        return ClientResult.ok(snapshot)


# =============================================================================
# Edit / Settings
# =============================================================================


class TestEdit:

    @pytest.mark.asyncio
    async def test_success_updates_cache_and_invalidates(
        self, coordinator, memory_client, bus, feedback
    ):
        invalidations = subscribe(bus, "apps")
        await coordinator.load_detail("app-a")

        outcome = await coordinator.request_edit("app-a", AppInfoPatch(name="Helper"))

        assert outcome.status == OutcomeStatus.SUCCESS
        assert outcome.application.name == "Helper"
        assert coordinator.cache.get("app-a").name == "Helper"
        assert [f.message for f in feedback] == ["Application updated"]
        assert len(invalidations) == 1
        assert invalidations[0].app_id == "app-a"

    @pytest.mark.asyncio
    async def test_validation_failure_keeps_cached_detail(
        self, coordinator, memory_client, bus, feedback
    ):
        invalidations = subscribe(bus, "apps")
        await coordinator.load_detail("app-a")
        memory_client.fail_next("update_info", ErrorKind.VALIDATION, "name too long")

        outcome = await coordinator.request_edit("app-a", AppInfoPatch(name="x" * 300))

        assert outcome.status == OutcomeStatus.FAILURE
        assert outcome.error_kind == ErrorKind.VALIDATION
        assert outcome.message == "Failed to update application: name too long"
        assert coordinator.cache.get("app-a").name == "Support Bot"
        assert feedback[-1].level == FeedbackLevel.ERROR
        assert invalidations == []

    @pytest.mark.asyncio
    async def test_transport_failure_generic_message(self, coordinator, memory_client):
        memory_client.fail_next("update_info", ErrorKind.TRANSPORT, "socket reset by peer")

        outcome = await coordinator.request_edit("app-a", AppInfoPatch(name="Helper"))

        assert outcome.error_kind == ErrorKind.TRANSPORT
        assert "socket" not in outcome.message
        assert outcome.message == (
            "Failed to update application. Network error. Please try again."
        )

    @pytest.mark.asyncio
    async def test_client_exception_becomes_transport(self, bus, feedback):
        client = MagicMock(spec=InMemoryResourceClient)
        client.update_info.side_effect = RuntimeError("contract broken")
        coordinator = ActionCoordinator(client, bus=bus, notify=feedback.append)

        outcome = await coordinator.request_edit("app-a", AppInfoPatch(name="Helper"))

        assert outcome.error_kind == ErrorKind.TRANSPORT
        assert outcome.error_code == ErrorCodes.REMOTE_TRANSPORT
        assert coordinator.state_of("app-a", ActionKind.EDIT) == ActionState.IDLE


class TestSettingsUpdate:

    @pytest.mark.asyncio
    async def test_success(self, coordinator, memory_client, bus, feedback):
        invalidations = subscribe(bus, "apps")
        await coordinator.load_detail("app-a")

        outcome = await coordinator.request_settings_update(
            "app-a", SiteConfigParams(title="Help Center")
        )

        assert outcome.ok
        assert feedback[-1].message == "Modified successfully"
        assert len(invalidations) == 1
        assert memory_client.get("app-a").site.title == "Help Center"
        # 캐시된 핵심 메타데이터는 그대로
        assert coordinator.cache.get("app-a").name == "Support Bot"

    @pytest.mark.asyncio
    async def test_failure(self, coordinator, memory_client, feedback):
        memory_client.fail_next("update_site_config", ErrorKind.VALIDATION, "bad domain")

        outcome = await coordinator.request_settings_update(
            "app-a", SiteConfigParams(customize_domain="??")
        )

        assert outcome.message == "Modification failed: bad domain"
        assert feedback[-1].level == FeedbackLevel.ERROR


# =============================================================================
# Duplicate
# =============================================================================


class TestDuplicate:

    @pytest.mark.asyncio
    async def test_success_side_effects(
        self, coordinator, memory_client, bus, flags, feedback, navigations
    ):
        invalidations = subscribe(bus, "apps")
        quota = subscribe(bus, "quota")

        outcome = await coordinator.request_duplicate(
            "app-a", DuplicateParams(name="Support Bot (copy)")
        )

        created = outcome.application
        assert outcome.ok
        assert created.id != "app-a"
        assert created.mode == memory_client.get("app-a").mode
        assert flags.get("needRefreshAppList") == "1"
        assert [e.app_id for e in invalidations] == [created.id]
        assert len(quota) == 1
        assert navigations == [f"/app/{created.id}/configuration"]
        assert outcome.destination == navigations[0]
        assert feedback[-1].message == "Application created"

    @pytest.mark.asyncio
    async def test_effects_recorded_in_order(self, coordinator):
        await coordinator.request_duplicate("app-a", DuplicateParams(name="Copy"))

        record = coordinator.history[-1]
        assert record.result == "success"
        assert record.effects[:3] == ["flag_set", "invalidated", "quota_refreshed"]
        assert record.effects[3].startswith("navigated:/app/")

    @pytest.mark.asyncio
    async def test_workflow_redirects_to_editor(self, coordinator, navigations):
        outcome = await coordinator.request_duplicate(
            "app-b", DuplicateParams(name="Invoice Flow (copy)")
        )

        assert navigations == [f"/app/{outcome.application.id}/workflow"]

    @pytest.mark.asyncio
    async def test_non_manager_redirects_to_overview(self, memory_client, flags):
        navigations: list[str] = []
        coordinator = ActionCoordinator(
            memory_client, flags=flags, navigator=navigations.append, is_manager=False
        )

        outcome = await coordinator.request_duplicate("app-b", DuplicateParams(name="Copy"))

        assert navigations == [f"/app/{outcome.application.id}/overview"]

    @pytest.mark.asyncio
    async def test_failure_sets_no_flag_and_no_navigation(
        self, coordinator, memory_client, bus, flags, navigations
    ):
        quota = subscribe(bus, "quota")
        memory_client.fail_next("duplicate", ErrorKind.VALIDATION, "quota exceeded")

        outcome = await coordinator.request_duplicate("app-a", DuplicateParams(name="Copy"))

        assert outcome.message == "Failed to create application: quota exceeded"
        assert flags.get("needRefreshAppList") is None
        assert navigations == []
        assert quota == []

    @pytest.mark.asyncio
    async def test_completion_mode_not_available(self, coordinator, memory_client):
        outcome = await coordinator.request_duplicate("app-c", DuplicateParams(name="Copy"))

        assert outcome.status == OutcomeStatus.FAILURE
        assert outcome.error_code == ErrorCodes.ACTION_NOT_AVAILABLE
        assert memory_client.calls_for("duplicate") == []

    @pytest.mark.asyncio
    async def test_source_missing(self, coordinator, memory_client):
        outcome = await coordinator.request_duplicate("ghost", DuplicateParams(name="Copy"))

        assert outcome.error_kind == ErrorKind.NOT_FOUND
        assert outcome.error_code == ErrorCodes.DETAIL_UNAVAILABLE
        assert memory_client.calls_for("duplicate") == []

    @pytest.mark.asyncio
    async def test_flag_store_failure_does_not_roll_back(self, memory_client, navigations):
        flags = MagicMock()
        flags.set.side_effect = LifecycleError(ErrorCodes.FLAG_STORE_LOCK_TIMEOUT)
        coordinator = ActionCoordinator(
            memory_client, flags=flags, navigator=navigations.append
        )

        outcome = await coordinator.request_duplicate("app-a", DuplicateParams(name="Copy"))

        assert outcome.ok
        assert len(navigations) == 1
        assert "flag_set" not in coordinator.history[-1].effects


# =============================================================================
# Export
# =============================================================================


class TestExport:

    @pytest.mark.asyncio
    async def test_twice_byte_identical(self, coordinator, bus):
        invalidations = subscribe(bus, "apps")

        first = await coordinator.request_export("app-a")
        second = await coordinator.request_export("app-a")

        assert first.artifact.filename == "Support Bot.yml"
        assert first.artifact.content == second.artifact.content
        assert first.artifact.digest == second.artifact.digest
        assert invalidations == []

    @pytest.mark.asyncio
    async def test_bytes_passed_through(self, coordinator, memory_client):
        expected = await memory_client.export("app-b")

        outcome = await coordinator.request_export("app-b")

        assert outcome.artifact.content == expected.data
        assert outcome.artifact.media_type == "application/yaml"

    @pytest.mark.asyncio
    async def test_failure_no_artifact(self, coordinator, memory_client, feedback):
        memory_client.fail_next("export", ErrorKind.TRANSPORT)

        outcome = await coordinator.request_export("app-a")

        assert outcome.artifact is None
        assert feedback[-1].message == (
            "Failed to export application. Network error. Please try again."
        )

    @pytest.mark.asyncio
    async def test_completion_mode_not_available(self, coordinator, memory_client):
        outcome = await coordinator.request_export("app-c")

        assert outcome.error_code == ErrorCodes.ACTION_NOT_AVAILABLE
        assert memory_client.calls_for("export") == []


# =============================================================================
# Delete
# =============================================================================


class TestDelete:

    @pytest.mark.asyncio
    async def test_request_only_pends(self, coordinator, memory_client):
        outcome = coordinator.request_delete("app-a")

        assert outcome.status == OutcomeStatus.PENDING
        assert coordinator.gate.is_pending
        assert memory_client.calls_for("delete") == []

    @pytest.mark.asyncio
    async def test_cancel_makes_no_remote_call(self, coordinator, memory_client, bus):
        invalidations = subscribe(bus, "apps")
        coordinator.request_delete("app-a")

        outcome = coordinator.cancel_delete()

        assert outcome.status == OutcomeStatus.CANCELLED
        assert memory_client.calls == []
        assert invalidations == []
        assert memory_client.get("app-a") is not None
        assert coordinator.history[-1].result == "cancelled"

    def test_dismiss_equals_cancel(self, coordinator, memory_client):
        coordinator.request_delete("app-a")

        outcome = coordinator.dismiss_delete()

        assert outcome.status == OutcomeStatus.CANCELLED
        assert not coordinator.gate.is_pending

    def test_cancel_without_pending_is_ignored(self, coordinator):
        assert coordinator.cancel_delete().status == OutcomeStatus.IGNORED

    @pytest.mark.asyncio
    async def test_confirm_from_detail(
        self, coordinator, memory_client, bus, feedback, navigations
    ):
        invalidations = subscribe(bus, "apps")
        quota = subscribe(bus, "quota")
        await coordinator.load_detail("app-a")
        coordinator.request_delete("app-a", from_detail=True)

        outcome = await coordinator.confirm_delete()

        assert outcome.ok
        assert memory_client.calls_for("delete") == ["app-a"]
        assert "app-a" not in coordinator.cache
        assert len(invalidations) == 1
        assert len(quota) == 1
        assert navigations == ["/apps"]
        assert outcome.destination == "/apps"
        assert feedback[-1].message == "Application deleted"

        after = await memory_client.fetch_detail("app-a")
        assert after.failure.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_confirm_from_list_stays(self, coordinator, navigations):
        coordinator.request_delete("app-a")

        outcome = await coordinator.confirm_delete()

        assert outcome.ok
        assert outcome.destination is None
        assert navigations == []

    @pytest.mark.asyncio
    async def test_delete_again_is_not_found(self, coordinator, bus, feedback):
        coordinator.request_delete("app-a")
        await coordinator.confirm_delete()
        invalidations = subscribe(bus, "apps")

        coordinator.request_delete("app-a")
        outcome = await coordinator.confirm_delete()

        assert outcome.error_kind == ErrorKind.NOT_FOUND
        assert outcome.message == (
            "Failed to delete application: The application no longer exists."
        )
        assert len(invalidations) == 1
        assert feedback[-1].level == FeedbackLevel.ERROR

    @pytest.mark.asyncio
    async def test_concurrent_confirms_delete_once(self, coordinator, memory_client):
        coordinator.request_delete("app-a")

        results = await asyncio.gather(
            coordinator.confirm_delete(),
            coordinator.confirm_delete(),
        )

        statuses = sorted(r.status.value for r in results)
        assert statuses == ["ignored", "success"]
        assert memory_client.calls_for("delete") == ["app-a"]

    @pytest.mark.asyncio
    async def test_confirm_without_pending(self, coordinator, memory_client):
        outcome = await coordinator.confirm_delete()

        assert outcome.status == OutcomeStatus.IGNORED
        assert memory_client.calls == []

    def test_second_request_replaces_first(self, coordinator):
        coordinator.request_delete("app-a")
        coordinator.request_delete("app-b")

        assert coordinator.gate.pending_target.app_id == "app-b"
        cancelled = coordinator.history[-1]
        assert cancelled.app_id == "app-a"
        assert cancelled.result == "cancelled"

    @pytest.mark.asyncio
    async def test_failure_closes_gate(self, coordinator, memory_client, navigations):
        memory_client.fail_next("delete", ErrorKind.TRANSPORT)
        coordinator.request_delete("app-a", from_detail=True)

        outcome = await coordinator.confirm_delete()

        assert outcome.error_kind == ErrorKind.TRANSPORT
        assert not coordinator.gate.is_pending
        assert navigations == []
        assert memory_client.get("app-a") is not None


# =============================================================================
# Detail
# =============================================================================


class TestDetail:

    @pytest.mark.asyncio
    async def test_concurrent_loads_one_fetch(self, chat_app):
        client = InMemoryResourceClient([chat_app], latency=0.01)
        coordinator = ActionCoordinator(client)

        results = await asyncio.gather(
            coordinator.load_detail("app-a"),
            coordinator.load_detail("app-a"),
            coordinator.load_detail("app-a"),
        )

        assert all(r.application == chat_app for r in results)
        assert client.calls_for("fetch_detail") == ["app-a"]

    @pytest.mark.asyncio
    async def test_detail_state_loading(self, chat_app):
        client = InMemoryResourceClient([chat_app], latency=0.01)
        coordinator = ActionCoordinator(client)

        task = asyncio.ensure_future(coordinator.load_detail("app-a"))
        await asyncio.sleep(0)
        assert coordinator.state_of("app-a", ActionKind.DETAIL) == ActionState.LOADING

        await task
        assert coordinator.state_of("app-a", ActionKind.DETAIL) == ActionState.IDLE

    @pytest.mark.asyncio
    async def test_open_settings_refetches(self, coordinator, memory_client):
        await coordinator.load_detail("app-a")

        outcome = await coordinator.open_settings("app-a")

        assert outcome.ok
        assert memory_client.calls_for("fetch_detail") == ["app-a", "app-a"]

    @pytest.mark.asyncio
    async def test_open_settings_fails_closed(self, coordinator, memory_client, feedback):
        memory_client.fail_next("fetch_detail", ErrorKind.TRANSPORT)

        outcome = await coordinator.open_settings("app-a")

        assert outcome.status == OutcomeStatus.FAILURE
        assert outcome.application is None
        assert feedback[-1].message.startswith("Failed to load application detail")

    @pytest.mark.asyncio
    async def test_release_detail(self, coordinator, memory_client):
        await coordinator.load_detail("app-a")

        coordinator.release_detail("app-a")
        await coordinator.load_detail("app-a")

        assert memory_client.calls_for("fetch_detail") == ["app-a", "app-a"]

    @pytest.mark.asyncio
    async def test_not_found_purges_and_invalidates(self, coordinator, memory_client, bus):
        await coordinator.load_detail("app-a")
        invalidations = subscribe(bus, "apps")
        await memory_client.delete("app-a")

        outcome = await coordinator.load_detail("app-a", refresh=True)

        assert outcome.error_kind == ErrorKind.NOT_FOUND
        assert "app-a" not in coordinator.cache
        assert len(invalidations) == 1

    @pytest.mark.asyncio
    async def test_edit_during_load_keeps_edited_detail(self, chat_app):
        client = SnapshotThenWaitClient([chat_app])
        coordinator = ActionCoordinator(client)

        task = asyncio.ensure_future(coordinator.load_detail("app-a", refresh=True))
        await asyncio.sleep(0.01)
        edited = await coordinator.request_edit("app-a", AppInfoPatch(name="Helper"))
        await task

        assert edited.ok
        assert coordinator.cache.get("app-a").name == "Helper"

    @pytest.mark.asyncio
    async def test_delete_during_load_not_resurrected(self, chat_app):
        client = SnapshotThenWaitClient([chat_app])
        coordinator = ActionCoordinator(client)

        task = asyncio.ensure_future(coordinator.load_detail("app-a", refresh=True))
        await asyncio.sleep(0.01)
        coordinator.request_delete("app-a", from_detail=True)
        deleted = await coordinator.confirm_delete()
        await task

        assert deleted.ok
        assert client.get("app-a") is None
        assert "app-a" not in coordinator.cache

    @pytest.mark.asyncio
    async def test_release_during_load_not_cached(self, chat_app):
        client = SnapshotThenWaitClient([chat_app])
        coordinator = ActionCoordinator(client)

        task = asyncio.ensure_future(coordinator.load_detail("app-a"))
        await asyncio.sleep(0.01)
        coordinator.release_detail("app-a")
        outcome = await task

        assert outcome.ok
        assert "app-a" not in coordinator.cache


# =============================================================================
# Coordination rules
# =============================================================================


class TestCoordination:

    @pytest.mark.asyncio
    async def test_reentrant_same_kind_ignored(self, chat_app):
        client = InMemoryResourceClient([chat_app], latency=0.01)
        coordinator = ActionCoordinator(client)

        first, second = await asyncio.gather(
            coordinator.request_edit("app-a", AppInfoPatch(name="One")),
            coordinator.request_edit("app-a", AppInfoPatch(name="Two")),
        )

        assert first.status == OutcomeStatus.SUCCESS
        assert second.status == OutcomeStatus.IGNORED
        assert client.calls_for("update_info") == ["app-a"]

    @pytest.mark.asyncio
    async def test_different_kinds_run_independently(self, chat_app):
        client = InMemoryResourceClient([chat_app], latency=0.01)
        coordinator = ActionCoordinator(client)

        edit, settings = await asyncio.gather(
            coordinator.request_edit("app-a", AppInfoPatch(name="One")),
            coordinator.request_settings_update("app-a", SiteConfigParams(title="T")),
        )

        assert edit.ok
        assert settings.ok

    @pytest.mark.asyncio
    async def test_state_transitions_and_effect_order(self, coordinator, bus):
        events: list[tuple[str, object]] = []
        bus.subscribe("apps", lambda e: events.append(("invalidated", e.app_id)))
        coordinator.watch_state(
            lambda app_id, kind, state: events.append(("state", state))
        )

        await coordinator.request_edit("app-a", AppInfoPatch(name="Helper"))

        assert events == [
            ("state", ActionState.LOADING),
            ("invalidated", "app-a"),
            ("state", ActionState.SUCCESS),
            ("state", ActionState.IDLE),
        ]

    @pytest.mark.asyncio
    async def test_failure_state(self, coordinator, memory_client):
        states: list[ActionState] = []
        unwatch = coordinator.watch_state(lambda app_id, kind, state: states.append(state))
        memory_client.fail_next("export", ErrorKind.TRANSPORT)

        await coordinator.request_export("app-a")
        unwatch()
        await coordinator.request_export("app-a")

        assert states == [ActionState.LOADING, ActionState.FAILURE, ActionState.IDLE]

    @pytest.mark.asyncio
    async def test_navigator_error_does_not_fail_action(self, memory_client):
        navigator = MagicMock(side_effect=RuntimeError("router gone"))
        coordinator = ActionCoordinator(memory_client, navigator=navigator)

        outcome = await coordinator.request_duplicate("app-a", DuplicateParams(name="Copy"))

        assert outcome.ok
        navigator.assert_called_once()

    @pytest.mark.asyncio
    async def test_action_records_saved(self, memory_client, tmp_path):
        logs_dir = tmp_path / "logs"
        coordinator = ActionCoordinator(memory_client, logs_dir=logs_dir)

        await coordinator.request_edit("app-a", AppInfoPatch(name="Helper"))

        saved = list(logs_dir.glob("action_*.json"))
        assert len(saved) == 1

    @pytest.mark.asyncio
    async def test_history_keeps_latest_records(self, memory_client):
        coordinator = ActionCoordinator(memory_client, history_limit=2)

        await coordinator.request_edit("app-a", AppInfoPatch(name="One"))
        await coordinator.request_settings_update("app-a", SiteConfigParams(title="T"))
        await coordinator.request_export("app-a")

        assert [r.kind for r in coordinator.history] == ["settings", "export"]

    def test_history_default_limit(self, coordinator):
        assert coordinator.history.maxlen == ActionCoordinator.HISTORY_LIMIT

    @pytest.mark.asyncio
    async def test_feedback_tagged_with_action_id(self, coordinator, memory_client, feedback):
        memory_client.fail_next("export", ErrorKind.TRANSPORT)

        edited = await coordinator.request_edit("app-a", AppInfoPatch(name="Helper"))
        exported = await coordinator.request_export("app-a")

        assert edited.action_id == coordinator.history[0].action_id
        assert [f.action_id for f in feedback] == [edited.action_id, exported.action_id]
        assert edited.action_id != exported.action_id

    @pytest.mark.asyncio
    async def test_is_idle(self, chat_app):
        client = InMemoryResourceClient([chat_app], latency=0.01)
        coordinator = ActionCoordinator(client)
        assert coordinator.is_idle

        task = asyncio.ensure_future(
            coordinator.request_edit("app-a", AppInfoPatch(name="Helper"))
        )
        await asyncio.sleep(0)
        assert not coordinator.is_idle
        await task
        assert coordinator.is_idle

        coordinator.request_delete("app-a")
        assert not coordinator.is_idle
        coordinator.cancel_delete()
        assert coordinator.is_idle

    def test_available_actions(self, coordinator, chat_app, completion_app):
        assert coordinator.available_actions(chat_app) == [
            ActionKind.EDIT,
            ActionKind.SETTINGS,
            ActionKind.DUPLICATE,
            ActionKind.EXPORT,
            ActionKind.DELETE,
        ]
        assert coordinator.available_actions(completion_app) == [
            ActionKind.EDIT,
            ActionKind.SETTINGS,
            ActionKind.DELETE,
        ]


class TestSubmit:
    """tagged request dispatch."""

    @pytest.mark.asyncio
    async def test_dispatch(self, coordinator):
        edit = await coordinator.submit(EditRequest("app-a", AppInfoPatch(name="Helper")))
        settings = await coordinator.submit(
            SettingsUpdateRequest("app-a", SiteConfigParams(title="T"))
        )
        duplicate = await coordinator.submit(
            DuplicateRequest("app-a", DuplicateParams(name="Copy"))
        )
        export = await coordinator.submit(ExportRequest("app-a"))
        delete = await coordinator.submit(DeleteRequest("app-a", from_detail=True))

        assert [o.kind for o in (edit, settings, duplicate, export, delete)] == [
            ActionKind.EDIT,
            ActionKind.SETTINGS,
            ActionKind.DUPLICATE,
            ActionKind.EXPORT,
            ActionKind.DELETE,
        ]
        assert delete.status == OutcomeStatus.PENDING
        assert coordinator.gate.pending_target.from_detail is True

    @pytest.mark.asyncio
    async def test_unknown_request(self, coordinator):
        with pytest.raises(TypeError):
            await coordinator.submit("delete app-a")
