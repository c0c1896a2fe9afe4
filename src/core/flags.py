"""
Cross-View Refresh Flag: 프로세스 외부에 남는 key/value flag.

규칙:
- producer(duplicate 성공)는 set만, 지우지 않음
- consumer(목록 화면 mount/focus)가 읽으면서 지움 (read-and-clear)
- flags.json 하나에 key → value 저장, filelock으로 프로세스 간 보호
- 쓰기는 원자적 (temp → rename)
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from src.core.storage import atomic_write_json, load_json
from src.domain.constants import FLAG_SET_VALUE, FLAGS_FILENAME
from src.domain.errors import ErrorCodes, LifecycleError

logger = logging.getLogger(__name__)


class DurableFlagStore:
    """
    파일 기반 flag 저장소.

    구조:
    <state_dir>/
    ├── flags.json       # {"needRefreshAppList": "1"}
    └── flags.json.lock  # filelock
    """

    # 락 timeout (초)
    LOCK_TIMEOUT = 5.0

    def __init__(self, state_dir: Path, lock_timeout: float | None = None):
        """
        Args:
            state_dir: flag 파일을 둘 디렉터리
            lock_timeout: 락 timeout (None이면 LOCK_TIMEOUT)
        """
        self.state_dir = state_dir
        self.path = state_dir / FLAGS_FILENAME
        self.lock_timeout = lock_timeout if lock_timeout is not None else self.LOCK_TIMEOUT
        self._lock_path = state_dir / f"{FLAGS_FILENAME}.lock"

    @contextmanager
    def _locked(self) -> Generator[None, None, None]:
        """
        flags.json 락 획득.

        Raises:
            LifecycleError: FLAG_STORE_LOCK_TIMEOUT
        """
        self.state_dir.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self._lock_path, timeout=self.lock_timeout)

        try:
            lock.acquire()
        except Timeout as e:
            raise LifecycleError(
                ErrorCodes.FLAG_STORE_LOCK_TIMEOUT,
                path=str(self.path),
                timeout=self.lock_timeout,
            ) from e
        try:
            yield
        finally:
            lock.release()

    def _read(self) -> dict[str, str]:
        data = load_json(self.path, ErrorCodes.FLAG_STORE_CORRUPT)
        return {str(k): str(v) for k, v in data.items()}

    def set(self, key: str, value: str = FLAG_SET_VALUE) -> None:
        """flag 기록 (기본값 "1")."""
        with self._locked():
            flags = self._read()
            flags[key] = value
            atomic_write_json(self.path, flags)
        logger.debug(f"Flag set: {key}={value}")

    def get(self, key: str) -> str | None:
        """flag 조회 (지우지 않음)."""
        with self._locked():
            return self._read().get(key)

    def consume(self, key: str) -> bool:
        """
        flag 읽고 지움.

        Returns:
            flag가 "1"로 설정되어 있었으면 True
        """
        with self._locked():
            flags = self._read()
            value = flags.pop(key, None)
            if value is None:
                return False
            atomic_write_json(self.path, flags)

        logger.debug(f"Flag consumed: {key}={value}")
        return value == FLAG_SET_VALUE
