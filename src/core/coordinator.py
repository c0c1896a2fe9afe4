"""
Action Coordinator: 앱 라이프사이클 액션 오케스트레이션.

규칙:
- 액션 상태: idle → loading → (success | failure) → idle (메모리 전용)
- 동일 (app_id, kind) 진행 중 재호출 → ignored (원격 호출 없음)
- 부수효과(캐시 무효화, flag, quota, 이동)는 원격 호출 완료 후,
  상태가 idle로 돌아가기 전에 적용
- 실패는 coordinator 밖으로 새지 않음 → feedback + ActionOutcome
- 자동 재시도 없음
- delete는 반드시 Confirmation Gate를 통과
"""

import logging
from collections import deque
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from src.client.base import ClientFailure, ClientResult, ResourceClient
from src.core.action_log import (
    complete_action_record,
    create_action_record,
    record_effect,
    save_action_record,
)
from src.core.events import CacheInvalidationPublisher, EventBus, QuotaRefreshTrigger
from src.core.flags import DurableFlagStore
from src.core.gate import ConfirmationGate, DeleteTarget
from src.core.loader import DetailCache, DetailLoader
from src.core.redirection import Navigator, list_root, resolve
from src.domain.constants import (
    ACTION_NOT_AVAILABLE_HINT,
    FEEDBACK_MESSAGES,
    NEED_REFRESH_APP_LIST_KEY,
    NOT_FOUND_HINT,
    SNAPSHOT_UNSUPPORTED_MODES,
    TRANSPORT_FAILURE_HINT,
)
from src.domain.errors import ErrorCodes, ErrorKind, LifecycleError
from src.domain.schemas import (
    ActionKind,
    ActionOutcome,
    ActionRecord,
    ActionRequest,
    ActionState,
    AppInfoPatch,
    Application,
    DeleteRequest,
    DuplicateParams,
    DuplicateRequest,
    EditRequest,
    ExportArtifact,
    ExportRequest,
    Feedback,
    FeedbackLevel,
    OutcomeStatus,
    SettingsUpdateRequest,
    SiteConfigParams,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Notifier = Callable[[Feedback], None]
StateListener = Callable[[str, ActionKind, ActionState], None]
ActionBody = Callable[[ActionRecord], Awaitable[ActionOutcome]]


class ActionCoordinator:
    """
    세션 단위 액션 coordinator.

    Detail Cache와 Confirmation State를 단독 소유.
    presentation은 entry point를 호출하고 ActionOutcome/feedback을 렌더링.

    Usage:
        coordinator = ActionCoordinator(client, flags=flags, navigator=router.push)
        outcome = await coordinator.request_edit("app-1", AppInfoPatch(name="New"))
        coordinator.request_delete("app-1", from_detail=True)
        outcome = await coordinator.confirm_delete()
    """

    # 메모리 history 최대 길이
    HISTORY_LIMIT = 200

    def __init__(
        self,
        client: ResourceClient,
        *,
        bus: EventBus | None = None,
        flags: DurableFlagStore | None = None,
        navigator: Navigator | None = None,
        notify: Notifier | None = None,
        is_manager: bool = True,
        logs_dir: Path | None = None,
        history_limit: int | None = None,
    ):
        """
        Args:
            client: Resource Client
            bus: 목록 무효화/quota 이벤트 채널 (없으면 새로 생성)
            flags: cross-view refresh flag 저장소 (None이면 flag 기록 생략)
            navigator: 화면 이동 콜백
            notify: feedback 콜백
            is_manager: 현재 사용자가 워크스페이스 관리자인지
            logs_dir: ActionRecord 저장 디렉터리 (None이면 메모리만)
            history_limit: 메모리에 유지할 ActionRecord 수 (None이면 HISTORY_LIMIT)
        """
        self.client = client
        self.bus = bus or EventBus()
        self.cache = DetailCache()
        self.loader = DetailLoader(client, self.cache)
        self.gate = ConfirmationGate()
        self.invalidation = CacheInvalidationPublisher(self.bus)
        self.quota = QuotaRefreshTrigger(self.bus)
        self.flags = flags
        self.navigator = navigator
        self.notify = notify
        self.is_manager = is_manager
        self.logs_dir = logs_dir

        # 최근 기록만 유지 (전체 기록은 logs_dir)
        self.history: deque[ActionRecord] = deque(
            maxlen=history_limit if history_limit is not None else self.HISTORY_LIMIT
        )
        self._states: dict[tuple[str, ActionKind], ActionState] = {}
        self._state_listeners: list[StateListener] = []

    # =========================================================================
    # State
    # =========================================================================

    def state_of(self, app_id: str, kind: ActionKind) -> ActionState:
        """액션 상태 조회 (기록 없으면 idle)."""
        if kind == ActionKind.DETAIL and self.loader.is_loading(app_id):
            return ActionState.LOADING
        return self._states.get((app_id, kind), ActionState.IDLE)

    def watch_state(self, listener: StateListener) -> Callable[[], None]:
        """
        상태 전이 구독.

        Returns:
            구독 해제 함수
        """
        self._state_listeners.append(listener)

        def unwatch() -> None:
            if listener in self._state_listeners:
                self._state_listeners.remove(listener)

        return unwatch

    @property
    def is_idle(self) -> bool:
        """진행 중 액션, 확인 대기, 상세 로드가 모두 없는지."""
        return (
            not self._states
            and not self.gate.is_pending
            and not self.loader.has_in_flight
        )

    def _set_state(self, app_id: str, kind: ActionKind, state: ActionState) -> None:
        key = (app_id, kind)
        if state == ActionState.IDLE:
            self._states.pop(key, None)
        else:
            self._states[key] = state

        for listener in list(self._state_listeners):
            try:
                listener(app_id, kind, state)
            except Exception as e:
                logger.error(f"State listener failed: {e}", exc_info=True)

    # =========================================================================
    # Entry Points
    # =========================================================================

    def available_actions(self, app: Application) -> list[ActionKind]:
        """앱 모드에 따라 제공되는 액션 목록."""
        actions = [ActionKind.EDIT, ActionKind.SETTINGS]
        if app.mode.value not in SNAPSHOT_UNSUPPORTED_MODES:
            actions += [ActionKind.DUPLICATE, ActionKind.EXPORT]
        actions.append(ActionKind.DELETE)
        return actions

    async def submit(self, request: ActionRequest) -> ActionOutcome:
        """tagged request → 해당 entry point."""
        if isinstance(request, EditRequest):
            return await self.request_edit(request.app_id, request.patch)
        if isinstance(request, SettingsUpdateRequest):
            return await self.request_settings_update(request.app_id, request.params)
        if isinstance(request, DuplicateRequest):
            return await self.request_duplicate(request.app_id, request.params)
        if isinstance(request, ExportRequest):
            return await self.request_export(request.app_id)
        if isinstance(request, DeleteRequest):
            return self.request_delete(request.app_id, from_detail=request.from_detail)
        raise TypeError(f"Unsupported action request: {request!r}")

    async def load_detail(self, app_id: str, refresh: bool = False) -> ActionOutcome:
        """
        상세 로드 (Detail Loader 경유).

        동시 호출은 같은 원격 요청을 기다림. 실패 시 상세 없음.
        """
        record = create_action_record(ActionKind.DETAIL, app_id)
        result = await self._call("fetch_detail", self.loader.load(app_id, refresh=refresh))

        if result.success and result.data is not None:
            outcome = ActionOutcome(
                status=OutcomeStatus.SUCCESS,
                kind=ActionKind.DETAIL,
                app_id=app_id,
                application=result.data,
            )
        else:
            outcome = self._failure(ActionKind.DETAIL, app_id, result.failure, record)

        self._finish(record, outcome)
        return outcome

    async def open_settings(self, app_id: str) -> ActionOutcome:
        """
        설정 화면 열기 전 전체 상세를 새로 로드.

        실패하면 설정 화면을 열지 않아야 함 (fail closed).
        """
        return await self.load_detail(app_id, refresh=True)

    def release_detail(self, app_id: str) -> None:
        """상세 화면을 떠남 → 캐시 무효화 (재사용 금지)."""
        if self.cache.invalidate(app_id):
            logger.debug(f"Released detail cache for {app_id}")

    async def request_edit(self, app_id: str, patch: AppInfoPatch) -> ActionOutcome:
        """이름/아이콘/설명 수정."""

        async def body(record: ActionRecord) -> ActionOutcome:
            result = await self._call("update_info", self.client.update_info(app_id, patch))
            if not result.success or result.data is None:
                # 실패 시 기존 상세 유지 (부분 덮어쓰기 금지)
                return self._failure(ActionKind.EDIT, app_id, result.failure, record)

            app = result.data
            self.cache.put(app)
            self._emit_success(
                ActionKind.EDIT, app_id, FEEDBACK_MESSAGES["edit.success"], record
            )
            self._invalidate(record, app_id, ActionKind.EDIT)
            return ActionOutcome(
                status=OutcomeStatus.SUCCESS,
                kind=ActionKind.EDIT,
                app_id=app_id,
                application=app,
            )

        return await self._run(ActionKind.EDIT, app_id, body)

    async def request_settings_update(
        self,
        app_id: str,
        params: SiteConfigParams,
    ) -> ActionOutcome:
        """사이트 설정 수정. 캐시된 핵심 메타데이터는 건드리지 않음."""

        async def body(record: ActionRecord) -> ActionOutcome:
            result = await self._call(
                "update_site_config", self.client.update_site_config(app_id, params)
            )
            if not result.success:
                return self._failure(ActionKind.SETTINGS, app_id, result.failure, record)

            self._emit_success(
                ActionKind.SETTINGS, app_id, FEEDBACK_MESSAGES["settings.success"], record
            )
            self._invalidate(record, app_id, ActionKind.SETTINGS)
            return ActionOutcome(
                status=OutcomeStatus.SUCCESS,
                kind=ActionKind.SETTINGS,
                app_id=app_id,
            )

        return await self._run(ActionKind.SETTINGS, app_id, body)

    async def request_duplicate(
        self,
        app_id: str,
        params: DuplicateParams,
    ) -> ActionOutcome:
        """
        앱 복제.

        성공 순서: feedback → refresh flag → 목록 무효화 → quota → 새 앱으로 이동
        실패: flag 없음, 이동 없음
        """

        async def body(record: ActionRecord) -> ActionOutcome:
            source, failed = await self._resolve_source(ActionKind.DUPLICATE, app_id, record)
            if failed is not None:
                return failed

            result = await self._call(
                "duplicate", self.client.duplicate(app_id, params, source.mode)
            )
            if not result.success or result.data is None:
                return self._failure(ActionKind.DUPLICATE, app_id, result.failure, record)

            created = result.data
            self._emit_success(
                ActionKind.DUPLICATE, app_id, FEEDBACK_MESSAGES["duplicate.success"], record
            )
            self._set_refresh_flag(record)
            self._invalidate(record, created.id, ActionKind.DUPLICATE)
            self.quota.fire(created.id, ActionKind.DUPLICATE)
            record_effect(record, "quota_refreshed")

            destination = resolve(self.is_manager, created)
            self._navigate(record, destination)
            return ActionOutcome(
                status=OutcomeStatus.SUCCESS,
                kind=ActionKind.DUPLICATE,
                app_id=app_id,
                application=created,
                destination=destination,
            )

        return await self._run(ActionKind.DUPLICATE, app_id, body)

    async def request_export(self, app_id: str) -> ActionOutcome:
        """설정 스냅샷 export. 읽기 전용 → 캐시 무효화 없음."""

        async def body(record: ActionRecord) -> ActionOutcome:
            source, failed = await self._resolve_source(ActionKind.EXPORT, app_id, record)
            if failed is not None:
                return failed

            result = await self._call("export", self.client.export(app_id))
            if not result.success or result.data is None:
                return self._failure(ActionKind.EXPORT, app_id, result.failure, record)

            artifact = ExportArtifact(
                filename=source.export_filename,
                content=result.data,
            )
            record_effect(record, f"artifact:{artifact.filename}")
            return ActionOutcome(
                status=OutcomeStatus.SUCCESS,
                kind=ActionKind.EXPORT,
                app_id=app_id,
                application=source,
                artifact=artifact,
            )

        return await self._run(ActionKind.EXPORT, app_id, body)

    def request_delete(self, app_id: str, *, from_detail: bool = False) -> ActionOutcome:
        """
        삭제 요청 → 확인 게이트 pending.

        원격 호출은 confirm_delete()에서만 발생.

        Args:
            app_id: 삭제 대상
            from_detail: 현재 열린 상세 화면에서 요청했는지 (성공 시 목록으로 이동)
        """
        replaced = self.gate.request(DeleteTarget(app_id=app_id, from_detail=from_detail))
        if replaced is not None and replaced.app_id != app_id:
            self._record_only(
                ActionKind.DELETE,
                replaced.app_id,
                ActionOutcome(
                    status=OutcomeStatus.CANCELLED,
                    kind=ActionKind.DELETE,
                    app_id=replaced.app_id,
                ),
            )
        return ActionOutcome(
            status=OutcomeStatus.PENDING,
            kind=ActionKind.DELETE,
            app_id=app_id,
        )

    def cancel_delete(self) -> ActionOutcome:
        """확인 게이트 취소. 원격 호출 없음."""
        target = self.gate.cancel()
        app_id = target.app_id if target else ""
        outcome = ActionOutcome(
            status=OutcomeStatus.CANCELLED if target else OutcomeStatus.IGNORED,
            kind=ActionKind.DELETE,
            app_id=app_id,
        )
        if target is not None:
            self._record_only(ActionKind.DELETE, app_id, outcome)
        return outcome

    def dismiss_delete(self) -> ActionOutcome:
        """확인 화면이 닫힘 → 취소와 동일."""
        return self.cancel_delete()

    async def confirm_delete(self) -> ActionOutcome:
        """
        확인 → 삭제 실행.

        게이트는 결과와 무관하게 닫힘.
        pending 대상이 없으면 ignored.
        """
        target = self.gate.confirm()
        if target is None:
            logger.info("confirm_delete called with no pending confirmation")
            return ActionOutcome(
                status=OutcomeStatus.IGNORED,
                kind=ActionKind.DELETE,
                app_id="",
            )

        app_id = target.app_id

        async def body(record: ActionRecord) -> ActionOutcome:
            result = await self._call("delete", self.client.delete(app_id))
            if not result.success:
                return self._failure(ActionKind.DELETE, app_id, result.failure, record)

            self._emit_success(
                ActionKind.DELETE, app_id, FEEDBACK_MESSAGES["delete.success"], record
            )
            if self.cache.invalidate(app_id):
                record_effect(record, "detail_purged")
            self._invalidate(record, app_id, ActionKind.DELETE)
            self.quota.fire(app_id, ActionKind.DELETE)
            record_effect(record, "quota_refreshed")

            destination = None
            if target.from_detail:
                destination = list_root()
                self._navigate(record, destination)
            return ActionOutcome(
                status=OutcomeStatus.SUCCESS,
                kind=ActionKind.DELETE,
                app_id=app_id,
                destination=destination,
            )

        return await self._run(ActionKind.DELETE, app_id, body)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _run(
        self,
        kind: ActionKind,
        app_id: str,
        body: ActionBody,
    ) -> ActionOutcome:
        """
        re-entrancy guard + 상태 전이 + 기록.

        동일 (app_id, kind)가 진행 중이면 ignored.
        """
        if (app_id, kind) in self._states:
            logger.info(f"{kind.value} already in flight for {app_id}; ignored")
            outcome = ActionOutcome(
                status=OutcomeStatus.IGNORED,
                kind=kind,
                app_id=app_id,
            )
            self._record_only(kind, app_id, outcome)
            return outcome

        self._set_state(app_id, kind, ActionState.LOADING)
        record = create_action_record(kind, app_id)
        try:
            outcome = await body(record)
        except Exception as e:
            logger.error(f"{kind.value} for {app_id} failed unexpectedly: {e}", exc_info=True)
            outcome = self._failure(kind, app_id, None, record)

        self._set_state(
            app_id,
            kind,
            ActionState.SUCCESS if outcome.ok else ActionState.FAILURE,
        )
        self._finish(record, outcome)
        self._set_state(app_id, kind, ActionState.IDLE)
        return outcome

    async def _call(
        self,
        operation: str,
        awaitable: Awaitable[ClientResult[T]],
    ) -> ClientResult[T]:
        """계약을 어긴 client 예외도 transport 실패로 변환."""
        try:
            return await awaitable
        except Exception as e:
            logger.error(f"Resource client {operation} raised: {e}", exc_info=True)
            return ClientResult.fail(ErrorKind.TRANSPORT)

    async def _resolve_source(
        self,
        kind: ActionKind,
        app_id: str,
        record: ActionRecord,
    ) -> tuple[Application, None] | tuple[None, ActionOutcome]:
        """
        원본 앱 확보 (캐시 → Detail Loader) + 모드별 제공 여부 확인.

        Returns:
            (앱, None) 또는 (None, 실패 outcome)
        """
        result = await self._call("fetch_detail", self.loader.load(app_id))
        if not result.success or result.data is None:
            return None, self._failure(
                kind, app_id, result.failure, record, code=ErrorCodes.DETAIL_UNAVAILABLE
            )

        source = result.data
        if kind not in self.available_actions(source):
            message = f"{FEEDBACK_MESSAGES[f'{kind.value}.failure']}: {ACTION_NOT_AVAILABLE_HINT}"
            self._emit(FeedbackLevel.ERROR, message, kind, app_id, record)
            return None, ActionOutcome(
                status=OutcomeStatus.FAILURE,
                kind=kind,
                app_id=app_id,
                message=message,
                error_kind=ErrorKind.VALIDATION,
                error_code=ErrorCodes.ACTION_NOT_AVAILABLE,
            )
        return source, None

    def _failure(
        self,
        kind: ActionKind,
        app_id: str,
        failure: ClientFailure | None,
        record: ActionRecord,
        code: str | None = None,
    ) -> ActionOutcome:
        """
        원격 실패 → 사용자 feedback + failure outcome.

        - validation: 원격 사유 그대로 노출
        - not_found: 로컬 상세 제거 + 목록 무효화
        - transport: 일반 재시도 안내 (세부 사항 노출 금지)
        """
        if failure is None:
            failure = ClientFailure(kind=ErrorKind.TRANSPORT, code=ErrorCodes.REMOTE_TRANSPORT)

        base = FEEDBACK_MESSAGES[f"{kind.value}.failure"]
        if failure.kind == ErrorKind.VALIDATION:
            message = f"{base}: {failure.message}" if failure.message else base
        elif failure.kind == ErrorKind.NOT_FOUND:
            message = f"{base}: {NOT_FOUND_HINT}"
            if self.cache.invalidate(app_id):
                record_effect(record, "detail_purged")
            self._invalidate(record, app_id, kind)
        else:
            message = f"{base}. {TRANSPORT_FAILURE_HINT}"

        self._emit(FeedbackLevel.ERROR, message, kind, app_id, record)
        return ActionOutcome(
            status=OutcomeStatus.FAILURE,
            kind=kind,
            app_id=app_id,
            message=message,
            error_kind=failure.kind,
            error_code=code or failure.code,
        )

    def _emit_success(
        self,
        kind: ActionKind,
        app_id: str,
        message: str,
        record: ActionRecord,
    ) -> None:
        self._emit(FeedbackLevel.SUCCESS, message, kind, app_id, record)

    def _emit(
        self,
        level: FeedbackLevel,
        message: str,
        kind: ActionKind,
        app_id: str,
        record: ActionRecord,
    ) -> None:
        feedback = Feedback(
            level=level,
            message=message,
            kind=kind,
            app_id=app_id,
            action_id=record.action_id,
        )
        logger.info(f"[{level.value}] {kind.value} {app_id}: {message}")
        if self.notify is None:
            return
        try:
            self.notify(feedback)
        except Exception as e:
            logger.error(f"Feedback notifier failed: {e}", exc_info=True)

    def _invalidate(self, record: ActionRecord, app_id: str, kind: ActionKind) -> None:
        self.invalidation.publish(app_id, kind)
        record_effect(record, "invalidated")

    def _set_refresh_flag(self, record: ActionRecord) -> None:
        """flag 기록 실패는 원격 결과를 되돌리지 않음 → 경고만."""
        if self.flags is None:
            return
        try:
            self.flags.set(NEED_REFRESH_APP_LIST_KEY)
            record_effect(record, "flag_set")
        except (LifecycleError, OSError) as e:
            logger.warning(f"Failed to set refresh flag: {e}")

    def _navigate(self, record: ActionRecord, destination: str) -> None:
        record_effect(record, f"navigated:{destination}")
        if self.navigator is None:
            return
        try:
            self.navigator(destination)
        except Exception as e:
            logger.error(f"Navigation to {destination} failed: {e}", exc_info=True)

    def _record_only(
        self,
        kind: ActionKind,
        app_id: str,
        outcome: ActionOutcome,
    ) -> None:
        """원격 호출 없이 끝난 액션(취소/무시) 기록."""
        self._finish(create_action_record(kind, app_id), outcome)

    def _finish(self, record: ActionRecord, outcome: ActionOutcome) -> None:
        complete_action_record(record, outcome)
        outcome.action_id = record.action_id
        self.history.append(record)
        if self.logs_dir is None:
            return
        try:
            save_action_record(record, self.logs_dir)
        except OSError as e:
            logger.warning(f"Failed to save action record {record.action_id}: {e}")
