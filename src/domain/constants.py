"""
Domain Constants: 앱 라이프사이클 전역 상수.

모드, 라우트, durable flag 키, export 파일 정책 등
시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Application Modes (앱 모드)
# =============================================================================
# 모드는 생성 이후 불변. duplicate 시 원본 모드를 그대로 복사.

MODE_COMPLETION = "completion"
MODE_CHAT = "chat"
MODE_AGENT_CHAT = "agent-chat"
MODE_ADVANCED_CHAT = "advanced-chat"
MODE_WORKFLOW = "workflow"

# workflow 에디터로 진입하는 모드
WORKFLOW_EDITOR_MODES = (MODE_WORKFLOW, MODE_ADVANCED_CHAT)

# duplicate/export 메뉴가 제공되지 않는 모드
SNAPSHOT_UNSUPPORTED_MODES = (MODE_COMPLETION,)

# =============================================================================
# Routes (이동 경로)
# =============================================================================
# 라우팅 테이블 자체는 presentation 영역. 여기서는 목적지 문자열만 정의.

APP_LIST_ROOT = "/apps"
APP_OVERVIEW_ROUTE = "/app/{app_id}/overview"
APP_WORKFLOW_ROUTE = "/app/{app_id}/workflow"
APP_CONFIGURATION_ROUTE = "/app/{app_id}/configuration"

# =============================================================================
# Cross-View Refresh Flag
# =============================================================================
# duplicate 성공 시 "1" 기록, 목록 화면이 mount/focus 시 읽고 지움.

NEED_REFRESH_APP_LIST_KEY = "needRefreshAppList"
FLAG_SET_VALUE = "1"
FLAGS_FILENAME = "flags.json"

# =============================================================================
# Event Topics (pub/sub)
# =============================================================================

APPS_TOPIC = "apps"
QUOTA_TOPIC = "quota"

# =============================================================================
# Export Artifact
# =============================================================================

EXPORT_FILE_EXTENSION = ".yml"
EXPORT_MEDIA_TYPE = "application/yaml"

# =============================================================================
# ID Prefixes
# =============================================================================

ACTION_ID_PREFIX = "ACT-"
ACTION_LOG_PREFIX = "action_"

# =============================================================================
# Feedback Messages
# =============================================================================
# 번역 카탈로그는 범위 밖. 기본 문구만 두고 presentation이 교체할 수 있음.

FEEDBACK_MESSAGES = {
    "edit.success": "Application updated",
    "edit.failure": "Failed to update application",
    "settings.success": "Modified successfully",
    "settings.failure": "Modification failed",
    "duplicate.success": "Application created",
    "duplicate.failure": "Failed to create application",
    "export.failure": "Failed to export application",
    "delete.success": "Application deleted",
    "delete.failure": "Failed to delete application",
    "detail.failure": "Failed to load application detail",
}

TRANSPORT_FAILURE_HINT = "Network error. Please try again."
NOT_FOUND_HINT = "The application no longer exists."
ACTION_NOT_AVAILABLE_HINT = "This action is not available for this application."
