"""
Action logging: 액션 실행 기록 스키마, 완료 처리, 저장.

규칙:
- 모든 액션(성공/실패/취소/무시)은 ActionRecord를 남김
- 기록 필수 컨텍스트: action_id, kind, app_id, result, error_kind, error_code
- 후속 효과(invalidate, quota, flag, navigate)는 effects에 순서대로 append
"""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.core.ids import generate_action_id
from src.core.storage import atomic_write_json, load_json
from src.domain.constants import ACTION_LOG_PREFIX
from src.domain.errors import ErrorCodes
from src.domain.schemas import ActionKind, ActionOutcome, ActionRecord

# =============================================================================
# Action Record Management
# =============================================================================


def create_action_record(kind: ActionKind, app_id: str) -> ActionRecord:
    """
    새 ActionRecord 생성.

    Args:
        kind: 액션 종류
        app_id: 대상 앱 ID

    Returns:
        초기화된 ActionRecord
    """
    return ActionRecord(
        action_id=generate_action_id(),
        kind=kind.value,
        app_id=app_id,
        started_at=datetime.now(UTC).isoformat(),
        result="pending",
    )


def record_effect(record: ActionRecord, effect: str) -> None:
    """후속 효과 기록 (예: "invalidated", "navigated:/apps")."""
    record.effects.append(effect)


def complete_action_record(record: ActionRecord, outcome: ActionOutcome) -> None:
    """
    ActionRecord 완료 처리.

    Args:
        record: ActionRecord 인스턴스
        outcome: 액션 결과
    """
    record.finished_at = datetime.now(UTC).isoformat()
    record.result = outcome.status.value
    record.message = outcome.message

    if outcome.error_kind is not None:
        record.error_kind = outcome.error_kind.value
        record.error_code = outcome.error_code


def save_action_record(record: ActionRecord, logs_dir: Path) -> Path:
    """
    ActionRecord를 파일로 저장.

    Args:
        record: ActionRecord 인스턴스
        logs_dir: 로그 디렉터리 경로

    Returns:
        저장된 파일 경로
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"{ACTION_LOG_PREFIX}{record.action_id}.json"
    atomic_write_json(log_path, record.to_dict())
    return log_path


def load_action_record(log_path: Path) -> dict[str, Any]:
    """
    ActionRecord 파일 로드.

    Raises:
        LifecycleError: ACTION_LOG_CORRUPT
    """
    return load_json(log_path, ErrorCodes.ACTION_LOG_CORRUPT)


def list_action_records(logs_dir: Path) -> list[Path]:
    """
    로그 디렉터리의 모든 action record 파일 목록.

    Returns:
        로그 파일 경로 목록 (최신순)
    """
    if not logs_dir.exists():
        return []

    logs = list(logs_dir.glob(f"{ACTION_LOG_PREFIX}*.json"))
    logs.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return logs
