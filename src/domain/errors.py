"""
Error definitions for the lifecycle coordinator.

규칙:
- 원격 실패는 ClientFailure 값으로 반환 (예외로 새지 않음)
- 로컬 저장소 문제(flag 락 timeout, 손상)만 LifecycleError로 명시적 실패
- 조용한 실패 금지 → 모든 실패는 로그 또는 feedback으로 드러남
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """
    원격 실패 분류.

    validation: 요청 payload 거부 → 사용자에게 원문 그대로 노출
    not_found: 대상이 더 이상 없음 → 노출 + 로컬 캐시 제거
    transport: 네트워크/timeout/알 수 없음 → 일반 재시도 안내만
    """
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"


class LifecycleError(Exception):
    """
    로컬 상태 관리 중 발생하는 에러.

    Usage:
        raise LifecycleError("FLAG_STORE_LOCK_TIMEOUT", path=str(path))
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Remote (ClientFailure.code) ===
    REMOTE_VALIDATION = "REMOTE_VALIDATION"
    REMOTE_NOT_FOUND = "REMOTE_NOT_FOUND"
    REMOTE_TRANSPORT = "REMOTE_TRANSPORT"
    REMOTE_BAD_RESPONSE = "REMOTE_BAD_RESPONSE"

    # === Coordinator ===
    ACTION_NOT_AVAILABLE = "ACTION_NOT_AVAILABLE"
    DETAIL_UNAVAILABLE = "DETAIL_UNAVAILABLE"

    # === Flag store ===
    FLAG_STORE_LOCK_TIMEOUT = "FLAG_STORE_LOCK_TIMEOUT"
    FLAG_STORE_CORRUPT = "FLAG_STORE_CORRUPT"

    # === Action log ===
    ACTION_LOG_CORRUPT = "ACTION_LOG_CORRUPT"
