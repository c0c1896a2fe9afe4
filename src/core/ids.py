"""
ID 생성: action_id

- action_id는 매 액션마다 새로 발급 (재사용 금지)
"""

import uuid
from datetime import UTC, datetime

from src.domain.constants import ACTION_ID_PREFIX


def generate_action_id() -> str:
    """
    Action ID 생성.

    고유성 보장: UUID v4
    포맷: ACT-{timestamp}-{uuid[:8]}

    Returns:
        action_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"{ACTION_ID_PREFIX}{timestamp}-{unique}"
