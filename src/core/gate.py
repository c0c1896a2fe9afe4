"""
Confirmation Gate: 파괴적 요청의 2단계 확인.

상태: closed → pending → {confirmed, cancelled} → closed

규칙:
- pending은 명시적 파괴 요청으로만 진입
- 종료는 confirm / cancel / dismiss(=cancel) 중 정확히 하나
- 자동 timeout 없음
- single-slot: pending 중 다른 요청이 오면 대상 교체 (queue 아님)
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteTarget:
    """확인 대기 중인 삭제 대상."""
    app_id: str
    # 상세 화면에서 시작된 삭제면 성공 후 목록 루트로 이동
    from_detail: bool = False


@dataclass(frozen=True)
class GateClosed:
    pass


@dataclass(frozen=True)
class GatePending:
    target: DeleteTarget


GateState = GateClosed | GatePending


class ConfirmationGate:
    """
    single-slot 확인 게이트.

    Usage:
        gate.request(DeleteTarget("app-1"))
        target = gate.confirm()   # DeleteTarget 또는 None
    """

    def __init__(self) -> None:
        self.state: GateState = GateClosed()

    @property
    def is_pending(self) -> bool:
        return isinstance(self.state, GatePending)

    @property
    def pending_target(self) -> DeleteTarget | None:
        if isinstance(self.state, GatePending):
            return self.state.target
        return None

    def request(self, target: DeleteTarget) -> DeleteTarget | None:
        """
        pending 진입.

        Returns:
            교체된 이전 대상 (없으면 None)
        """
        replaced = self.pending_target
        if replaced is not None and replaced != target:
            logger.info(
                f"Pending confirmation for {replaced.app_id} "
                f"replaced by {target.app_id}"
            )
        self.state = GatePending(target)
        return replaced

    def confirm(self) -> DeleteTarget | None:
        """
        확인 → 게이트 닫고 대상 반환.

        Returns:
            진행할 대상 (pending이 아니면 None)
        """
        target = self.pending_target
        self.state = GateClosed()
        return target

    def cancel(self) -> DeleteTarget | None:
        """취소 → 게이트 닫음. 원격 호출 없음."""
        target = self.pending_target
        self.state = GateClosed()
        return target

    def dismiss(self) -> DeleteTarget | None:
        """화면이 닫힘 → cancel과 동일."""
        return self.cancel()
