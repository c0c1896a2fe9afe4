"""
Data schemas for the application lifecycle.

규칙:
- 필드명 통일: 원격 API 키와 동일 (icon_background 등)
- mode는 생성 후 불변 → Application은 frozen
- to_dict()는 원격 payload/로그 직렬화에 그대로 사용
"""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from src.domain.constants import (
    EXPORT_FILE_EXTENSION,
    EXPORT_MEDIA_TYPE,
    MODE_ADVANCED_CHAT,
    MODE_AGENT_CHAT,
    MODE_CHAT,
    MODE_COMPLETION,
    MODE_WORKFLOW,
)
from src.domain.errors import ErrorKind

# =============================================================================
# Enums
# =============================================================================

class AppMode(str, Enum):
    """앱 모드 (closed set)."""
    COMPLETION = MODE_COMPLETION
    CHAT = MODE_CHAT
    AGENT_CHAT = MODE_AGENT_CHAT
    ADVANCED_CHAT = MODE_ADVANCED_CHAT
    WORKFLOW = MODE_WORKFLOW


class ActionKind(str, Enum):
    """Coordinator가 처리하는 액션 종류."""
    EDIT = "edit"
    SETTINGS = "settings"
    DUPLICATE = "duplicate"
    EXPORT = "export"
    DELETE = "delete"
    DETAIL = "detail"


class ActionState(str, Enum):
    """
    액션별 UI 상태.

    idle → loading → (success | failure) → idle
    프로세스 재시작 시 유지되지 않음 (메모리 전용).
    """
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


class OutcomeStatus(str, Enum):
    """액션 결과 상태."""
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"      # delete가 확인 게이트에서 대기 중
    CANCELLED = "cancelled"  # 게이트에서 취소/닫힘
    IGNORED = "ignored"      # 동일 id/kind 진행 중 재호출


class FeedbackLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


# =============================================================================
# Application
# =============================================================================

@dataclass
class SiteConfig:
    """사이트(표시/브랜딩) 설정. 핵심 메타데이터와 별도로 수정됨."""
    title: str = ""
    description: str | None = None
    default_language: str | None = None
    copyright: str | None = None
    privacy_policy: str | None = None
    custom_disclaimer: str | None = None
    customize_domain: str | None = None
    prompt_public: bool = False
    icon: str | None = None
    icon_background: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "default_language": self.default_language,
            "copyright": self.copyright,
            "privacy_policy": self.privacy_policy,
            "custom_disclaimer": self.custom_disclaimer,
            "customize_domain": self.customize_domain,
            "prompt_public": self.prompt_public,
            "icon": self.icon,
            "icon_background": self.icon_background,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SiteConfig":
        return cls(
            title=data.get("title") or "",
            description=data.get("description"),
            default_language=data.get("default_language"),
            copyright=data.get("copyright"),
            privacy_policy=data.get("privacy_policy"),
            custom_disclaimer=data.get("custom_disclaimer"),
            customize_domain=data.get("customize_domain"),
            prompt_public=bool(data.get("prompt_public", False)),
            icon=data.get("icon"),
            icon_background=data.get("icon_background"),
        )


@dataclass(frozen=True)
class Application:
    """
    관리 대상 앱.

    mode는 불변: 어떤 액션도 변경하지 않으며 duplicate는 그대로 복사.
    원격 응답의 알 수 없는 키는 extra에 보존.
    """
    id: str
    name: str
    mode: AppMode
    description: str | None = None
    icon: str | None = None
    icon_background: str | None = None
    site: SiteConfig | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    _KNOWN_KEYS: ClassVar[frozenset[str]] = frozenset({
        "id", "name", "mode", "description", "icon", "icon_background", "site",
    })

    @property
    def export_filename(self) -> str:
        """export 파일명: {name}.yml"""
        return f"{self.name}{EXPORT_FILE_EXTENSION}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "mode": self.mode.value,
            "description": self.description,
            "icon": self.icon,
            "icon_background": self.icon_background,
            "site": self.site.to_dict() if self.site else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Application":
        """
        원격 응답 dict → Application.

        Raises:
            KeyError: id/name/mode 누락
            ValueError: 알 수 없는 mode
        """
        site = data.get("site")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            mode=AppMode(data["mode"]),
            description=data.get("description"),
            icon=data.get("icon"),
            icon_background=data.get("icon_background"),
            site=SiteConfig.from_dict(site) if isinstance(site, dict) else None,
            extra={k: v for k, v in data.items() if k not in cls._KNOWN_KEYS},
        )


# =============================================================================
# Action Payloads
# =============================================================================

@dataclass
class AppInfoPatch:
    """update-info payload."""
    name: str
    icon: str | None = None
    icon_background: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "icon": self.icon,
            "icon_background": self.icon_background,
            "description": self.description,
        }


@dataclass
class SiteConfigParams:
    """
    update-site-config payload.

    설정된 필드만 전송 (None 제거).
    """
    title: str | None = None
    description: str | None = None
    default_language: str | None = None
    copyright: str | None = None
    privacy_policy: str | None = None
    custom_disclaimer: str | None = None
    customize_domain: str | None = None
    prompt_public: bool | None = None
    icon: str | None = None
    icon_background: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "title": self.title,
            "description": self.description,
            "default_language": self.default_language,
            "copyright": self.copyright,
            "privacy_policy": self.privacy_policy,
            "custom_disclaimer": self.custom_disclaimer,
            "customize_domain": self.customize_domain,
            "prompt_public": self.prompt_public,
            "icon": self.icon,
            "icon_background": self.icon_background,
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass
class DuplicateParams:
    """duplicate payload. mode는 원본에서 복사되므로 포함하지 않음."""
    name: str
    icon: str | None = None
    icon_background: str | None = None

    def to_dict(self, mode: AppMode) -> dict[str, Any]:
        return {
            "name": self.name,
            "icon": self.icon,
            "icon_background": self.icon_background,
            "mode": mode.value,
        }


# =============================================================================
# Action Requests (tagged union)
# =============================================================================

@dataclass(frozen=True)
class EditRequest:
    kind: ClassVar[ActionKind] = ActionKind.EDIT
    app_id: str
    patch: AppInfoPatch


@dataclass(frozen=True)
class SettingsUpdateRequest:
    kind: ClassVar[ActionKind] = ActionKind.SETTINGS
    app_id: str
    params: SiteConfigParams


@dataclass(frozen=True)
class DuplicateRequest:
    kind: ClassVar[ActionKind] = ActionKind.DUPLICATE
    app_id: str
    params: DuplicateParams


@dataclass(frozen=True)
class ExportRequest:
    kind: ClassVar[ActionKind] = ActionKind.EXPORT
    app_id: str


@dataclass(frozen=True)
class DeleteRequest:
    kind: ClassVar[ActionKind] = ActionKind.DELETE
    app_id: str
    from_detail: bool = False


ActionRequest = (
    EditRequest
    | SettingsUpdateRequest
    | DuplicateRequest
    | ExportRequest
    | DeleteRequest
)


# =============================================================================
# Outcomes / Artifacts / Feedback
# =============================================================================

@dataclass(frozen=True)
class ExportArtifact:
    """
    다운로드 가능한 export 결과.

    content는 원격이 돌려준 바이트 그대로 (클라이언트 재포맷 금지).
    """
    filename: str
    content: bytes
    media_type: str = EXPORT_MEDIA_TYPE

    @property
    def digest(self) -> str:
        """동일성 비교용 SHA-256."""
        return f"sha256:{hashlib.sha256(self.content).hexdigest()}"


@dataclass
class ActionOutcome:
    """
    Coordinator 액션 결과.

    Success: application / artifact / destination 중 해당 값
    Failure: message (사용자 노출용) + error_kind/error_code (내부용)
    """
    status: OutcomeStatus
    kind: ActionKind
    app_id: str
    application: Application | None = None
    artifact: ExportArtifact | None = None
    destination: str | None = None
    message: str | None = None
    error_kind: ErrorKind | None = None
    error_code: str | None = None
    # 기록된 ActionRecord id (feedback 매칭용)
    action_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        result = {
            "status": self.status.value,
            "kind": self.kind.value,
            "app_id": self.app_id,
            "application": self.application.to_dict() if self.application else None,
            "artifact": (
                {
                    "filename": self.artifact.filename,
                    "media_type": self.artifact.media_type,
                    "digest": self.artifact.digest,
                }
                if self.artifact
                else None
            ),
            "destination": self.destination,
            "message": self.message,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error_code": self.error_code,
            "action_id": self.action_id,
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass(frozen=True)
class Feedback:
    """사용자 feedback (toast 등)."""
    level: FeedbackLevel
    message: str
    kind: ActionKind
    app_id: str
    action_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level.value,
            "message": self.message,
            "kind": self.kind.value,
            "app_id": self.app_id,
            "action_id": self.action_id,
        }


# =============================================================================
# Events
# =============================================================================

@dataclass(frozen=True)
class InvalidationEvent:
    """목록 캐시 무효화 이벤트 (resource type 태그 단위)."""
    resource_type: str
    app_id: str
    action: ActionKind
    occurred_at: str  # ISO 8601


@dataclass(frozen=True)
class QuotaRefreshEvent:
    """plan/usage 카운터 갱신 요청."""
    app_id: str
    action: ActionKind
    occurred_at: str  # ISO 8601


# =============================================================================
# Action Record (로그)
# =============================================================================

@dataclass
class ActionRecord:
    """
    액션 실행 기록.

    action 단위 실행 결과 및 메타데이터.
    """
    action_id: str
    kind: str
    app_id: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failure, cancelled, ignored

    error_kind: str | None = None
    error_code: str | None = None
    message: str | None = None

    # 후속 효과 (invalidated, quota_refreshed, flag_set, navigated:/apps ...)
    effects: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action_id": self.action_id,
            "kind": self.kind,
            "app_id": self.app_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "error_kind": self.error_kind,
            "error_code": self.error_code,
            "message": self.message,
            "effects": list(self.effects),
        }
