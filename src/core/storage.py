"""
로컬 영속화 헬퍼: 원자적 JSON 쓰기/읽기.

규칙:
- 원자적 쓰기: temp → rename + fsync
- fsync 실패 시 경고 남기고 계속 진행
- 손상된 JSON → LifecycleError로 명시적 실패
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from src.domain.errors import LifecycleError

logger = logging.getLogger(__name__)


def _fsync_dir(dir_path: Path) -> None:
    """
    디렉토리 fsync (가능한 환경에서).

    rename 후 디렉토리 엔트리까지 내구성을 강화하려면 필요.
    """
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        # O_DIRECTORY 미지원, 권한 문제 등
        logger.warning(
            f"Directory fsync failed for {dir_path}: {e}. "
            f"Rename durability may not be guaranteed."
        )


def atomic_write_json(path: Path, data: dict) -> None:
    """
    원자적 JSON 쓰기.

    동작:
    - 중간 상태 없음: temp → rename
    - 파일 fsync + 디렉토리 fsync (실패 시 경고)
    - 실패 시 temp 파일 삭제, 기존 파일 보존

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(
                    f"File fsync failed for {path}: {e}. "
                    f"Data may not be durable on power loss."
                )

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def load_json(path: Path, corrupt_code: str) -> dict[str, Any]:
    """
    JSON 파일 로드. 파일이 없으면 빈 dict.

    Args:
        path: 파일 경로
        corrupt_code: 파싱 실패 시 사용할 에러 코드

    Raises:
        LifecycleError: corrupt_code (JSON 파싱 실패 또는 dict 아님)
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise LifecycleError(corrupt_code, path=str(path), error=str(e)) from e
    if not isinstance(data, dict):
        raise LifecycleError(corrupt_code, path=str(path), error="not an object")
    return data
