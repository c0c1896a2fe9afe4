"""
관리 화면 세션: 세션별 ActionCoordinator + feedback 기록.

- 사용자 세션 하나 = coordinator 하나 (Confirmation State, Detail Cache 분리)
- EventBus / DurableFlagStore / Resource Client는 세션 간 공유
- feedback은 action_id로 해당 응답에만 실어 보냄
- 세션 수는 max_sessions로 제한 (LRU, idle 세션만 제거)
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.client.base import ResourceClient
from src.core.coordinator import ActionCoordinator
from src.core.events import EventBus
from src.core.flags import DurableFlagStore
from src.domain.schemas import ActionOutcome, Feedback

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


@dataclass
class ManagementSession:
    """세션 상태."""
    session_id: str
    coordinator: ActionCoordinator
    feedback: list[Feedback] = field(default_factory=list)

    def drain(self, outcome: ActionOutcome) -> dict[str, Any]:
        """
        outcome에 해당하는 feedback/이동 목적지를 꺼냄.

        같은 세션에서 동시에 실행 중인 다른 액션의 feedback은 남겨둠.
        """
        mine = [f for f in self.feedback if f.action_id == outcome.action_id]
        self.feedback[:] = [f for f in self.feedback if f.action_id != outcome.action_id]
        return {
            "feedback": [f.to_dict() for f in mine],
            "navigate_to": outcome.destination,
        }


class SessionRegistry:
    """
    session_id → ManagementSession (LRU).

    Usage:
        registry = SessionRegistry(client, bus=bus, flags=flags, max_sessions=100)
        session = registry.get("abc")
    """

    # 기본 최대 세션 수
    MAX_SESSIONS = 1000

    def __init__(
        self,
        client: ResourceClient,
        *,
        bus: EventBus,
        flags: DurableFlagStore | None = None,
        is_manager: bool = True,
        logs_dir: Path | None = None,
        max_sessions: int | None = None,
        history_limit: int | None = None,
    ):
        """
        Args:
            client: Resource Client (공유)
            bus: 이벤트 채널 (공유)
            flags: refresh flag 저장소 (공유)
            is_manager: 세션 사용자가 관리자인지
            logs_dir: ActionRecord 저장 디렉터리
            max_sessions: 유지할 최대 세션 수 (None이면 MAX_SESSIONS)
            history_limit: 세션별 메모리 history 길이
        """
        self.client = client
        self.bus = bus
        self.flags = flags
        self.is_manager = is_manager
        self.logs_dir = logs_dir
        self.max_sessions = max_sessions if max_sessions is not None else self.MAX_SESSIONS
        self.history_limit = history_limit
        self._sessions: OrderedDict[str, ManagementSession] = OrderedDict()

    def get(self, session_id: str | None) -> ManagementSession:
        """세션 조회 (없으면 생성). 조회된 세션은 가장 최근으로 이동."""
        session_id = session_id or DEFAULT_SESSION_ID
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session

        session = self._create(session_id)
        self._sessions[session_id] = session
        self._evict()
        return session

    def _evict(self) -> None:
        """
        초과분을 오래된 순으로 제거.

        진행 중 액션이나 확인 대기가 있는 세션, 방금 만든 세션은 건너뜀.
        """
        excess = len(self._sessions) - self.max_sessions
        if excess <= 0:
            return

        for session_id in list(self._sessions)[:-1]:
            if excess <= 0:
                break
            session = self._sessions[session_id]
            if not session.coordinator.is_idle:
                continue
            del self._sessions[session_id]
            excess -= 1
            logger.debug(f"Evicted idle management session {session_id}")

        if excess > 0:
            logger.warning(
                f"Session registry over capacity: {len(self._sessions)} "
                f"> {self.max_sessions} (busy sessions kept)"
            )

    def _create(self, session_id: str) -> ManagementSession:
        feedback: list[Feedback] = []
        coordinator = ActionCoordinator(
            self.client,
            bus=self.bus,
            flags=self.flags,
            notify=feedback.append,
            is_manager=self.is_manager,
            logs_dir=self.logs_dir,
            history_limit=self.history_limit,
        )
        logger.debug(f"Created management session {session_id}")
        return ManagementSession(
            session_id=session_id,
            coordinator=coordinator,
            feedback=feedback,
        )

    def clear(self) -> None:
        self._sessions.clear()

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
