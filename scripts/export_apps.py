#!/usr/bin/env python3
"""
export_apps.py - 앱 설정 스냅샷 일괄 export 스크립트

default.yaml의 client 설정으로 원격 API에 접속해
앱마다 {name}.yml 파일을 출력 디렉터리에 저장.

- export 바이트는 원격이 돌려준 그대로 저장 (재포맷 없음)
- 동일 파일명 충돌 시 {name}-{app_id}.yml
- 경로 구분자는 "_"로 치환, 출력 디렉터리 밖으로는 쓰지 않음
- 실패한 앱은 건너뛰고 마지막에 요약

사용법:
    # 기본 실행 (dry-run)
    uv run python scripts/export_apps.py APP_ID [APP_ID ...]

    # 실제 저장
    uv run python scripts/export_apps.py APP_ID --out exports --execute
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.app.main import build_client, load_config  # noqa: E402
from src.core.coordinator import ActionCoordinator  # noqa: E402
from src.domain.constants import EXPORT_FILE_EXTENSION  # noqa: E402
from src.domain.schemas import ExportArtifact  # noqa: E402

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@dataclass
class ExportSummary:
    """일괄 export 결과."""
    exported: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def safe_stem(name: str, fallback: str) -> str:
    """
    파일명으로 쓸 수 있는 stem.

    경로 구분자는 '_'로 바꾸고 앞쪽 '.'은 제거 (출력 디렉터리 밖으로 나가지 않음).
    비어 있으면 fallback.
    """
    if name.endswith(EXPORT_FILE_EXTENSION):
        name = name[: -len(EXPORT_FILE_EXTENSION)]
    for sep in ("/", "\\", "\x00"):
        name = name.replace(sep, "_")
    name = name.strip().lstrip(".")
    return name or fallback


def artifact_path(out_dir: Path, artifact: ExportArtifact, app_id: str) -> Path:
    """
    출력 경로. 이미 있으면 app_id를 붙여 충돌 회피.

    Raises:
        ValueError: 경로가 out_dir 밖을 가리킴
    """
    stem = safe_stem(artifact.filename, safe_stem(app_id, "app"))
    path = out_dir / f"{stem}{EXPORT_FILE_EXTENSION}"
    if path.exists():
        path = out_dir / f"{stem}-{safe_stem(app_id, 'app')}{EXPORT_FILE_EXTENSION}"

    if not path.resolve().is_relative_to(out_dir.resolve()):
        raise ValueError(f"Export path escapes output directory: {path}")
    return path


async def export_apps(
    coordinator: ActionCoordinator,
    app_ids: list[str],
    out_dir: Path,
    execute: bool,
) -> ExportSummary:
    """
    앱 목록 export.

    Args:
        coordinator: ActionCoordinator
        app_ids: export할 앱 ID 목록
        out_dir: 출력 디렉터리
        execute: False면 파일을 쓰지 않음 (dry-run)

    Returns:
        ExportSummary
    """
    summary = ExportSummary()

    for app_id in app_ids:
        outcome = await coordinator.request_export(app_id)
        if outcome.artifact is None:
            summary.errors.append(f"{app_id}: {outcome.message or outcome.status.value}")
            continue

        try:
            path = artifact_path(out_dir, outcome.artifact, app_id)
        except ValueError as e:
            logger.error(f"{app_id}: {e}")
            summary.errors.append(f"{app_id}: {e}")
            continue

        if not execute:
            logger.info(f"[dry-run] {app_id} → {path} ({len(outcome.artifact.content)} bytes)")
            summary.skipped.append(app_id)
            continue

        # 한 앱의 저장 실패로 나머지를 멈추지 않음
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(outcome.artifact.content)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            summary.errors.append(f"{app_id}: {e}")
            continue

        logger.info(f"Exported {app_id} → {path}")
        summary.exported.append(path)

    return summary


async def run(args: argparse.Namespace) -> int:
    config = load_config(Path(args.config) if args.config else None)
    client = build_client(config)
    coordinator = ActionCoordinator(client)

    try:
        summary = await export_apps(
            coordinator,
            args.app_ids,
            out_dir=Path(args.out),
            execute=args.execute,
        )
    finally:
        await client.aclose()

    logger.info("=" * 50)
    logger.info("Export 결과:")
    logger.info(f"  저장: {len(summary.exported)}, dry-run: {len(summary.skipped)}")
    if summary.errors:
        logger.warning(f"  에러: {len(summary.errors)}개")
        for err in summary.errors[:5]:  # 최대 5개만 출력
            logger.warning(f"    - {err}")

    return 0 if not summary.errors else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="앱 설정 스냅샷 일괄 export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "app_ids",
        nargs="+",
        help="export할 앱 ID",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="exports",
        help="출력 디렉터리 (기본: exports)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="설정 파일 경로 (기본: default.yaml)",
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="실제 파일 저장 (기본: dry-run)",
    )

    args = parser.parse_args(argv)
    load_dotenv()

    if not args.execute:
        logger.info("=" * 50)
        logger.info("DRY-RUN 모드 (파일 저장 없음)")
        logger.info("실제 실행: --execute 옵션 추가")
        logger.info("=" * 50)

    return asyncio.run(run(args))


if __name__ == "__main__":
    exit(main())
