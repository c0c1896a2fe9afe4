"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI

from src.app.routes import apps
from src.app.session import SessionRegistry
from src.client.base import ResourceClient
from src.client.http import HttpResourceClient
from src.client.memory import InMemoryResourceClient
from src.core.events import EventBus
from src.core.flags import DurableFlagStore

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def resolve_path(value: str | None, default: str) -> Path:
    """config 경로 → 절대 경로 (상대 경로는 프로젝트 루트 기준)."""
    path = Path(value or default)
    return path if path.is_absolute() else PROJECT_ROOT / path


def build_client(config: dict) -> ResourceClient:
    """
    config의 client 섹션으로 Resource Client 생성.

    backend:
    - http: 원격 콘솔 API (base_url 필수)
    - memory: 로컬 개발용 in-memory
    """
    client_config = config.get("client", {})
    backend = client_config.get("backend", "memory")

    if backend == "http":
        return HttpResourceClient(
            base_url=client_config["base_url"],
            timeout=float(client_config.get("timeout", 10.0)),
            token_env=client_config.get("token_env", "CONSOLE_API_TOKEN"),
        )
    if backend == "memory":
        return InMemoryResourceClient()
    raise ValueError(f"Unknown client backend: {backend}")


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: .env/설정 로드, client/flag 저장소/세션 레지스트리 초기화
    종료 시: client 정리
    """
    # Startup
    load_dotenv()
    config = load_config()
    storage = config.get("storage", {})

    client = build_client(config)
    logger.info(f"Resource client: {type(client).__name__}")
    flags = DurableFlagStore(
        resolve_path(storage.get("state_dir"), ".state"),
        lock_timeout=storage.get("flag_lock_timeout"),
    )
    logs_dir = storage.get("action_logs_dir")

    app.state.config = config
    app.state.client = client
    app.state.bus = EventBus()
    app.state.flags = flags
    session_config = config.get("session", {})
    app.state.sessions = SessionRegistry(
        client,
        bus=app.state.bus,
        flags=flags,
        is_manager=session_config.get("is_manager", True),
        logs_dir=resolve_path(logs_dir, ".state/action_logs") if logs_dir else None,
        max_sessions=session_config.get("max_sessions"),
        history_limit=session_config.get("history_limit"),
    )

    yield

    # Shutdown
    await client.aclose()


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="App Lifecycle Console",
    description="앱 편집/복제/export/삭제 액션 오케스트레이션",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(apps.api_router, prefix="/api/apps", tags=["Apps API"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
