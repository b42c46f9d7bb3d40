"""이 파일은 .py 명령줄 모듈로 코어 서비스를 호출하고 결과를 출력합니다."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from zmctf_client.core.catalog import available_modules, planned_modules
from zmctf_client.core.config import HEALTH_POLL_INTERVAL_SECONDS
from zmctf_client.core.errors import ValidationError
from zmctf_client.core.logging import setup_logging
from zmctf_client.core.storage import SettingsStore
from zmctf_client.services.analysis import SAMPLE_TEXT, InputMode, SelectedFile
from zmctf_client.services.lifecycle import ActionKind, ActionOutcome
from zmctf_client.services.state import AppState, Connectivity
from zmctf_client.services.workbench import Workbench

CONNECTIVITY_LABELS = {
    Connectivity.ONLINE: "백엔드 온라인",
    Connectivity.OFFLINE: "백엔드 오프라인",
    Connectivity.UNKNOWN: "확인 중",
}


def load_selected_file(path: str) -> SelectedFile:
    # 파일 선택 화면 역할. 코어는 파일 시스템을 직접 읽지 않는다.
    file_path = Path(path)
    return SelectedFile(name=file_path.name, data=file_path.read_bytes())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="zmctf", description="ZMctf 분석 백엔드 클라이언트")
    parser.add_argument("--api-base-url", help="이번 실행에만 사용할 API Base URL")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="백엔드 상태 확인")

    analyze = sub.add_parser("analyze", help="Flag 탐지 요청")
    source = analyze.add_mutually_exclusive_group(required=True)
    source.add_argument("--text")
    source.add_argument("--file")
    source.add_argument("--sample", action="store_true", help="예시 텍스트로 분석")
    analyze.add_argument("--mode")

    config_cmd = sub.add_parser("config", help="백엔드 설정 조회/편집")
    config_cmd.add_argument("action", choices=["show", "default", "reload", "reset", "save", "format"])
    config_cmd.add_argument("path", nargs="?", help="save/format에 사용할 JSON 파일")

    endpoint = sub.add_parser("endpoint", help="저장된 API Base URL 조회/변경")
    endpoint.add_argument("url", nargs="?")

    sub.add_parser("modules", help="모듈 목록")

    watch = sub.add_parser("watch", help="연결 상태를 주기적으로 출력")
    watch.add_argument("--seconds", type=float, default=30.0)
    watch.add_argument("--interval", type=float, default=HEALTH_POLL_INTERVAL_SECONDS)
    return parser


def _print_failure(outcome: ActionOutcome) -> int:
    print(outcome.error or f"{outcome.kind.value}: {outcome.phase.value}", file=sys.stderr)
    return 1


async def _health(bench: Workbench) -> int:
    outcome = await bench.poller.probe()
    version = bench.state.version or "unknown"
    print(f"{CONNECTIVITY_LABELS[bench.state.connectivity]} v{version} ({bench.state.base_url})")
    return 0 if outcome.ok else 1


async def _analyze(bench: Workbench, args: argparse.Namespace) -> int:
    if args.file:
        try:
            selected = load_selected_file(args.file)
        except OSError as exc:
            # 읽을 수 없는 파일은 파일 미선택과 같은 검증 실패로 기록한다.
            outcome = bench.controller.fail(ActionKind.ANALYZE, ValidationError(f"파일을 읽을 수 없습니다: {exc}"))
            return _print_failure(outcome)
        outcome = await bench.detector.analyze(InputMode.FILE, file=selected, mode=args.mode)
    else:
        text = SAMPLE_TEXT if args.sample else args.text
        outcome = await bench.detector.analyze(InputMode.TEXT, text=text, mode=args.mode)
    if not outcome.ok:
        return _print_failure(outcome)

    result = outcome.value
    print(bench.detector.summary())
    if result.file_info is not None:
        info = result.file_info
        print(f"file: {info.name} · {info.size} bytes · {info.file_type}")
    for flag in result.flags:
        print(f"[{flag.confidence_bar:>4}] {flag.content}  confidence={flag.confidence:.3f} source={flag.source}")
    for entry in result.logs:
        print(f"{entry.timestamp} {entry.level:<5} {entry.module} {entry.action}")
    return 0


async def _config(bench: Workbench, args: argparse.Namespace) -> int:
    editor = bench.editor
    if args.action in ("save", "format"):
        if not args.path:
            print("JSON 파일 경로가 필요합니다.", file=sys.stderr)
            return 2
        try:
            editor.working_text = Path(args.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(f"설정 파일을 읽을 수 없습니다: {exc}", file=sys.stderr)
            return 1
        if args.action == "format":
            if not editor.format():
                print(editor.validation_error, file=sys.stderr)
                return 1
            print(editor.working_text)
            return 0
        outcome = await editor.save()
    elif args.action == "show":
        outcome = await editor.load()
    elif args.action == "default":
        outcome = await editor.load_default()
    elif args.action == "reload":
        outcome = await editor.reload()
    else:
        outcome = await editor.reset()

    if not outcome.ok:
        return _print_failure(outcome)
    if editor.config_path:
        print(f"# config_path: {editor.config_path}")
    if editor.info:
        print(f"# {editor.info}")
    print(editor.working_text)
    if args.action == "default" and editor.default_toml:
        print("# 기본 config.toml (읽기 전용)")
        print(editor.default_toml)
    return 0


async def _watch(bench: Workbench, seconds: float) -> int:
    bench.state.on_connectivity_change(
        lambda connectivity, version: print(f"{CONNECTIVITY_LABELS[connectivity]} v{version or 'unknown'}")
    )
    await bench.start()
    try:
        await asyncio.sleep(seconds)
    finally:
        await bench.close()
    return 0


async def _dispatch(args: argparse.Namespace, store: SettingsStore) -> int:
    state = AppState.from_store(store)
    if args.api_base_url:
        # 일회성 지정은 저장하지 않는다.
        state = AppState(args.api_base_url)
    interval = getattr(args, "interval", HEALTH_POLL_INTERVAL_SECONDS)
    bench = Workbench(state=state, poll_interval=interval)
    try:
        if args.command == "health":
            return await _health(bench)
        if args.command == "analyze":
            return await _analyze(bench, args)
        if args.command == "config":
            return await _config(bench, args)
        return await _watch(bench, args.seconds)
    finally:
        await bench.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    store = SettingsStore()

    if args.command == "endpoint":
        state = AppState.from_store(store)
        if args.url:
            state.set_base_url(args.url)
        print(state.base_url)
        return 0
    if args.command == "modules":
        for title, items in (("사용 가능", available_modules()), ("예정", planned_modules())):
            print(f"# {title}")
            for item in items:
                print(f"{item.id:<16} {item.state.value:<10} {item.name} - {item.description}")
        return 0
    return asyncio.run(_dispatch(args, store))


if __name__ == "__main__":
    raise SystemExit(main())
