"""
Core layer: 액션 오케스트레이션 핵심 모듈.

역할:
- Action Coordinator, Confirmation Gate, Detail Loader
- 목록 무효화/quota pub-sub, cross-view refresh flag, redirection
- action record 로그, 원자적 저장
"""

from .action_log import (
    complete_action_record,
    create_action_record,
    list_action_records,
    save_action_record,
)
from .coordinator import ActionCoordinator
from .events import CacheInvalidationPublisher, EventBus, QuotaRefreshTrigger
from .flags import DurableFlagStore
from .gate import ConfirmationGate, DeleteTarget, GateClosed, GatePending
from .ids import generate_action_id
from .loader import DetailCache, DetailLoader
from .redirection import list_root, resolve
from .storage import atomic_write_json, load_json

__all__ = [
    # coordinator
    "ActionCoordinator",
    # gate
    "ConfirmationGate",
    "DeleteTarget",
    "GateClosed",
    "GatePending",
    # loader
    "DetailCache",
    "DetailLoader",
    # events
    "EventBus",
    "CacheInvalidationPublisher",
    "QuotaRefreshTrigger",
    # flags
    "DurableFlagStore",
    # redirection
    "resolve",
    "list_root",
    # action_log
    "create_action_record",
    "complete_action_record",
    "save_action_record",
    "list_action_records",
    # ids
    "generate_action_id",
    # storage
    "atomic_write_json",
    "load_json",
]
