"""
Apps Routes: 앱 라이프사이클 관리 API.

- GET  /api/apps/refresh-flag        → 목록 refresh flag 읽고 지움
- POST /api/apps/delete/confirm      → 삭제 확인 (원격 삭제 실행)
- POST /api/apps/delete/cancel       → 삭제 취소
- GET  /api/apps/<app_id>            → 상세
- GET  /api/apps/<app_id>/actions    → 제공되는 액션 목록
- GET  /api/apps/<app_id>/settings   → 설정 화면용 상세 (새로 로드)
- PUT  /api/apps/<app_id>            → 이름/아이콘/설명 수정
- POST /api/apps/<app_id>/site       → 사이트 설정 수정
- POST /api/apps/<app_id>/copy       → 복제
- GET  /api/apps/<app_id>/export     → {name}.yml 다운로드
- POST /api/apps/<app_id>/delete     → 삭제 요청 (확인 대기)

세션은 X-Session-Id 헤더로 구분. 렌더링은 호출 측 몫.
"""

import logging
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Form, Header, HTTPException, Request
from fastapi.responses import Response

from src.app.session import ManagementSession, SessionRegistry
from src.domain.constants import NEED_REFRESH_APP_LIST_KEY
from src.domain.errors import ErrorKind, LifecycleError
from src.domain.schemas import (
    ActionOutcome,
    AppInfoPatch,
    DuplicateParams,
    OutcomeStatus,
    SiteConfigParams,
)

logger = logging.getLogger(__name__)

api_router = APIRouter()  # API endpoints

FAILURE_STATUS_CODES = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TRANSPORT: 502,
}


def get_registry(request: Request) -> SessionRegistry:
    """Request에서 SessionRegistry 가져오기."""
    return request.app.state.sessions


def get_session(request: Request, session_id: str | None) -> ManagementSession:
    return get_registry(request).get(session_id)


def _respond(session: ManagementSession, outcome: ActionOutcome) -> dict[str, Any]:
    """
    ActionOutcome → 응답 dict.

    실패는 error_kind별 HTTP 상태로 변환 (feedback 포함).
    """
    if outcome.status == OutcomeStatus.FAILURE:
        status_code = FAILURE_STATUS_CODES.get(outcome.error_kind, 502)
        raise HTTPException(
            status_code=status_code,
            detail={
                "code": outcome.error_code,
                "message": outcome.message,
                **session.drain(outcome),
            },
        )
    return {"outcome": outcome.to_dict(), **session.drain(outcome)}


# =============================================================================
# Cross-View Refresh Flag
# =============================================================================

@api_router.get("/refresh-flag")
async def consume_refresh_flag(request: Request) -> dict[str, Any]:
    """목록 화면 mount/focus 시 호출. flag를 읽고 지움."""
    flags = request.app.state.flags
    try:
        need_refresh = flags.consume(NEED_REFRESH_APP_LIST_KEY)
    except LifecycleError as e:
        logger.error(f"Refresh flag unavailable: {e}")
        raise HTTPException(status_code=503, detail=e.to_dict()) from e
    return {"key": NEED_REFRESH_APP_LIST_KEY, "need_refresh": need_refresh}


# =============================================================================
# Delete Confirmation
# =============================================================================

@api_router.post("/delete/confirm")
async def confirm_delete(
    request: Request,
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """삭제 확인 → 원격 삭제."""
    session = get_session(request, x_session_id)
    outcome = await session.coordinator.confirm_delete()
    return _respond(session, outcome)


@api_router.post("/delete/cancel")
async def cancel_delete(
    request: Request,
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """삭제 취소. 원격 호출 없음."""
    session = get_session(request, x_session_id)
    outcome = session.coordinator.cancel_delete()
    return _respond(session, outcome)


# =============================================================================
# Per-App Routes
# =============================================================================

@api_router.get("/{app_id}")
async def get_app(
    request: Request,
    app_id: str,
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """앱 상세."""
    session = get_session(request, x_session_id)
    outcome = await session.coordinator.load_detail(app_id)
    return _respond(session, outcome)


@api_router.get("/{app_id}/actions")
async def get_available_actions(
    request: Request,
    app_id: str,
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """앱 모드에 따라 제공되는 액션 목록."""
    session = get_session(request, x_session_id)
    outcome = await session.coordinator.load_detail(app_id)
    if outcome.application is None:
        return _respond(session, outcome)
    actions = session.coordinator.available_actions(outcome.application)
    return {"app_id": app_id, "actions": [a.value for a in actions]}


@api_router.get("/{app_id}/settings")
async def open_settings(
    request: Request,
    app_id: str,
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """설정 화면용 상세. 실패하면 화면을 열지 않음."""
    session = get_session(request, x_session_id)
    outcome = await session.coordinator.open_settings(app_id)
    return _respond(session, outcome)


@api_router.put("/{app_id}")
async def edit_app(
    request: Request,
    app_id: str,
    name: str = Form(...),
    icon: str | None = Form(None),
    icon_background: str | None = Form(None),
    description: str | None = Form(None),
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """이름/아이콘/설명 수정."""
    session = get_session(request, x_session_id)
    patch = AppInfoPatch(
        name=name,
        icon=icon,
        icon_background=icon_background,
        description=description,
    )
    outcome = await session.coordinator.request_edit(app_id, patch)
    return _respond(session, outcome)


@api_router.post("/{app_id}/site")
async def update_site(
    request: Request,
    app_id: str,
    title: str | None = Form(None),
    description: str | None = Form(None),
    default_language: str | None = Form(None),
    copyright: str | None = Form(None),
    privacy_policy: str | None = Form(None),
    custom_disclaimer: str | None = Form(None),
    customize_domain: str | None = Form(None),
    prompt_public: bool | None = Form(None),
    icon: str | None = Form(None),
    icon_background: str | None = Form(None),
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """사이트 설정 수정."""
    session = get_session(request, x_session_id)
    params = SiteConfigParams(
        title=title,
        description=description,
        default_language=default_language,
        copyright=copyright,
        privacy_policy=privacy_policy,
        custom_disclaimer=custom_disclaimer,
        customize_domain=customize_domain,
        prompt_public=prompt_public,
        icon=icon,
        icon_background=icon_background,
    )
    outcome = await session.coordinator.request_settings_update(app_id, params)
    return _respond(session, outcome)


@api_router.post("/{app_id}/copy")
async def duplicate_app(
    request: Request,
    app_id: str,
    name: str = Form(...),
    icon: str | None = Form(None),
    icon_background: str | None = Form(None),
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """복제. 응답의 navigate_to로 새 앱 화면 이동."""
    session = get_session(request, x_session_id)
    params = DuplicateParams(name=name, icon=icon, icon_background=icon_background)
    outcome = await session.coordinator.request_duplicate(app_id, params)
    return _respond(session, outcome)


@api_router.get("/{app_id}/export")
async def export_app(
    request: Request,
    app_id: str,
    x_session_id: str | None = Header(None),
) -> Response:
    """설정 스냅샷 다운로드 ({name}.yml, application/yaml)."""
    session = get_session(request, x_session_id)
    outcome = await session.coordinator.request_export(app_id)
    if outcome.artifact is None:
        _respond(session, outcome)
        # 동일 앱 export 진행 중 (ignored)
        raise HTTPException(
            status_code=409,
            detail={"code": "ACTION_IN_FLIGHT", "message": "Export already in progress"},
        )

    artifact = outcome.artifact
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={
            "Content-Disposition": (
                f"attachment; filename*=UTF-8''{quote(artifact.filename)}"
            ),
        },
    )


@api_router.post("/{app_id}/delete")
async def request_delete(
    request: Request,
    app_id: str,
    from_detail: bool = Form(False),
    x_session_id: str | None = Header(None),
) -> dict[str, Any]:
    """삭제 요청 → 확인 대기 상태. /delete/confirm으로 실행."""
    session = get_session(request, x_session_id)
    outcome = session.coordinator.request_delete(app_id, from_detail=from_detail)
    return _respond(session, outcome)
