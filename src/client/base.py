"""
Resource Client 추상 인터페이스.

규칙:
- 원격 호출 6종: fetch-detail, update-info, update-site-config,
  duplicate, export, delete
- 모든 호출은 ClientResult(성공/실패)로 끝남 → 원격 실패를 예외로 흘리지 않음
- 호출 간 상태 없음 (stateless request/response)
- timeout은 transport 계층 책임 → ErrorKind.TRANSPORT로 보고
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from src.domain.errors import ErrorCodes, ErrorKind
from src.domain.schemas import (
    AppInfoPatch,
    AppMode,
    Application,
    DuplicateParams,
    SiteConfigParams,
)

T = TypeVar("T")

# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass(frozen=True)
class ClientFailure:
    """
    원격 호출 실패.

    message: 원격이 돌려준 사람이 읽을 수 있는 사유 (있는 경우)
    status_code: HTTP 상태 (transport 실패면 None)
    """
    kind: ErrorKind
    message: str | None = None
    code: str | None = None
    status_code: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "code": self.code,
            "status_code": self.status_code,
        }


@dataclass(frozen=True)
class ClientResult(Generic[T]):
    """원격 호출 결과. success면 data, 아니면 failure."""
    success: bool
    data: T | None = None
    failure: ClientFailure | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "ClientResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        kind: ErrorKind,
        message: str | None = None,
        code: str | None = None,
        status_code: int | None = None,
    ) -> "ClientResult[T]":
        return cls(
            success=False,
            failure=ClientFailure(
                kind=kind,
                message=message,
                code=code or _default_code(kind),
                status_code=status_code,
            ),
        )


def _default_code(kind: ErrorKind) -> str:
    return {
        ErrorKind.VALIDATION: ErrorCodes.REMOTE_VALIDATION,
        ErrorKind.NOT_FOUND: ErrorCodes.REMOTE_NOT_FOUND,
        ErrorKind.TRANSPORT: ErrorCodes.REMOTE_TRANSPORT,
    }[kind]


# =============================================================================
# Abstract Client
# =============================================================================

class ResourceClient(ABC):
    """
    Application 원격 API 추상 인터페이스.

    구현체는 transport 세부사항(HTTP, 인증, timeout)을 책임짐.
    """

    @abstractmethod
    async def fetch_detail(self, app_id: str) -> ClientResult[Application]:
        """
        앱 상세 조회.

        Failure: not_found, transport
        """
        ...

    @abstractmethod
    async def update_info(
        self,
        app_id: str,
        patch: AppInfoPatch,
    ) -> ClientResult[Application]:
        """
        이름/아이콘/설명 수정. 수정된 Application 반환.

        Failure: validation, transport
        """
        ...

    @abstractmethod
    async def update_site_config(
        self,
        app_id: str,
        params: SiteConfigParams,
    ) -> ClientResult[None]:
        """
        사이트 설정 수정. 응답 본문 없음(ack).

        Failure: validation, transport
        """
        ...

    @abstractmethod
    async def duplicate(
        self,
        app_id: str,
        params: DuplicateParams,
        mode: AppMode,
    ) -> ClientResult[Application]:
        """
        앱 복제. 새로 생성된 Application 반환.

        Args:
            app_id: 원본 앱 ID
            params: 새 이름/아이콘
            mode: 원본 모드 (그대로 복사)

        Failure: validation, transport
        """
        ...

    @abstractmethod
    async def export(self, app_id: str) -> ClientResult[bytes]:
        """
        설정 스냅샷 export. 원격 바이트 그대로 반환.

        Failure: not_found, transport
        """
        ...

    @abstractmethod
    async def delete(self, app_id: str) -> ClientResult[None]:
        """
        앱 삭제.

        Failure: not_found, transport
        """
        ...

    async def aclose(self) -> None:
        """리소스 정리 (필요한 구현체만 override)."""
        return None
