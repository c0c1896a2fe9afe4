"""
Redirection Policy: 생성/복제 후 이동할 목적지 결정.

- 비관리자 → 제한된 overview 화면
- 관리자 + workflow/advanced-chat → workflow 에디터
- 관리자 + 그 외 모드 → configuration 화면

순수 함수. 실제 이동은 coordinator가 Navigator로 수행.
"""

from collections.abc import Callable

from src.domain.constants import (
    APP_CONFIGURATION_ROUTE,
    APP_LIST_ROOT,
    APP_OVERVIEW_ROUTE,
    APP_WORKFLOW_ROUTE,
    WORKFLOW_EDITOR_MODES,
)
from src.domain.schemas import Application

# 목적지 경로를 받아 화면 이동을 수행하는 presentation 콜백
Navigator = Callable[[str], None]


def resolve(is_manager: bool, app: Application) -> str:
    """
    이동 목적지 계산.

    Args:
        is_manager: 현재 워크스페이스 관리자 여부
        app: 이동 대상 앱 (복제의 경우 새로 생성된 앱)

    Returns:
        목적지 경로
    """
    if not is_manager:
        return APP_OVERVIEW_ROUTE.format(app_id=app.id)
    if app.mode.value in WORKFLOW_EDITOR_MODES:
        return APP_WORKFLOW_ROUTE.format(app_id=app.id)
    return APP_CONFIGURATION_ROUTE.format(app_id=app.id)


def list_root() -> str:
    """삭제 후 돌아갈 목록 루트."""
    return APP_LIST_ROOT
