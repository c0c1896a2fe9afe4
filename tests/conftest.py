"""
Pytest fixtures for the lifecycle coordinator tests.

테스트 구성:
- 모드별 샘플 앱 (chat / workflow / completion)
- InMemoryResourceClient + tmp_path 기반 flag 저장소
- feedback/이동 기록을 수집하는 coordinator
"""

from pathlib import Path

import pytest
import yaml

from src.client.memory import InMemoryResourceClient
from src.core.coordinator import ActionCoordinator
from src.core.events import EventBus
from src.core.flags import DurableFlagStore
from src.domain.schemas import AppMode, Application, Feedback, SiteConfig

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """기본 설정 로드."""
    with open(project_root / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def chat_app() -> Application:
    """chat 모드 앱 (duplicate/export 제공)."""
    return Application(
        id="app-a",
        name="Support Bot",
        mode=AppMode.CHAT,
        description="고객 지원",
        icon="🤖",
        icon_background="#FFEAD5",
        site=SiteConfig(title="Support Bot", default_language="ko-KR"),
    )


@pytest.fixture
def workflow_app() -> Application:
    """workflow 모드 앱."""
    return Application(
        id="app-b",
        name="Invoice Flow",
        mode=AppMode.WORKFLOW,
        icon="🧾",
    )


@pytest.fixture
def completion_app() -> Application:
    """completion 모드 앱 (duplicate/export 미제공)."""
    return Application(
        id="app-c",
        name="Summarizer",
        mode=AppMode.COMPLETION,
    )


@pytest.fixture
def memory_client(
    chat_app: Application,
    workflow_app: Application,
    completion_app: Application,
) -> InMemoryResourceClient:
    """샘플 앱 3개가 들어있는 in-memory client."""
    return InMemoryResourceClient([chat_app, workflow_app, completion_app])


# =============================================================================
# Coordinator Fixtures
# =============================================================================

@pytest.fixture
def flags(tmp_path: Path) -> DurableFlagStore:
    """tmp_path 기반 flag 저장소."""
    return DurableFlagStore(tmp_path / "state")


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def feedback() -> list[Feedback]:
    """coordinator가 보낸 feedback 수집."""
    return []


@pytest.fixture
def navigations() -> list[str]:
    """coordinator가 요청한 이동 목적지 수집."""
    return []


@pytest.fixture
def coordinator(
    memory_client: InMemoryResourceClient,
    bus: EventBus,
    flags: DurableFlagStore,
    feedback: list[Feedback],
    navigations: list[str],
) -> ActionCoordinator:
    """관리자 세션 coordinator."""
    return ActionCoordinator(
        memory_client,
        bus=bus,
        flags=flags,
        navigator=navigations.append,
        notify=feedback.append,
        is_manager=True,
    )
