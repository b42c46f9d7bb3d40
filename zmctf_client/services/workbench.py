"""이 파일은 .py 워크벤치 모듈로 코어 구성요소를 묶고 시작/종료 계약을 제공합니다."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from zmctf_client.adapters.http import APIClient
from zmctf_client.core.config import HEALTH_POLL_INTERVAL_SECONDS
from zmctf_client.core.storage import SettingsStore
from zmctf_client.services.analysis import FlagDetector, InputMode
from zmctf_client.services.config_editor import ConfigEditor
from zmctf_client.services.health import HealthPoller
from zmctf_client.services.lifecycle import ActionKind, ActionOutcome, ActionState, LifecycleController
from zmctf_client.services.state import AppState

logger = logging.getLogger(__name__)


class Workbench:
    """프로세스 단위로 엔드포인트, 연결 상태, 작업 상태를 소유하는 진입점.

    UI는 ``trigger(kind, **params)``/``cancel(kind)``로 작업을 요청하고
    ``view(kind)``로 ``{phase, busy, error, value}``를 읽는다. 헬스 폴러는
    ``start()``/``close()``와 함께 시작하고 멈춘다.
    """

    def __init__(
        self,
        state: Optional[AppState] = None,
        client: Optional[APIClient] = None,
        store: Optional[SettingsStore] = None,
        poll_interval: float = HEALTH_POLL_INTERVAL_SECONDS,
    ) -> None:
        if state is None:
            state = AppState.from_store(store or SettingsStore())
        self.state = state
        self.client = client or APIClient()
        self.controller = LifecycleController()
        self.detector = FlagDetector(self.state, self.client, self.controller)
        self.editor = ConfigEditor(self.state, self.client, self.controller)
        self.poller = HealthPoller(self.state, self.client, self.controller, poll_interval)
        self._tasks: Set[asyncio.Task] = set()

    async def __aenter__(self) -> "Workbench":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def start(self) -> None:
        self.poller.start()

    async def close(self) -> None:
        await self.poller.stop()
        self.controller.cancel_all()
        pending = [task for task in self._tasks if not task.done()]
        self._tasks.clear()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def view(self, kind: ActionKind) -> ActionState:
        return self.controller.state(kind)

    def trigger(self, kind: ActionKind, **params: Any) -> asyncio.Task:
        # 작업을 백그라운드 태스크로 시작한다. 결과는 view(kind)로 확인한다.
        handler = self._handler(kind, params)
        task = asyncio.create_task(handler())
        # 대체된 작업도 끝날 때까지 추적해 close()에서 함께 정리한다.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel(self, kind: ActionKind) -> bool:
        return self.controller.cancel(kind)

    def _handler(self, kind: ActionKind, params: Dict[str, Any]) -> Callable[[], Awaitable[ActionOutcome]]:
        if kind == ActionKind.ANALYZE:
            return lambda: self.detector.analyze(
                source=InputMode(params.get("source", InputMode.TEXT)),
                text=params.get("text", ""),
                file=params.get("file"),
                mode=params.get("mode"),
            )
        handlers: Dict[ActionKind, Callable[[], Awaitable[ActionOutcome]]] = {
            ActionKind.HEALTH: self.poller.probe,
            ActionKind.LOAD_CONFIG: self.editor.load,
            ActionKind.RELOAD_CONFIG: self.editor.reload,
            ActionKind.DEFAULT_CONFIG: self.editor.load_default,
            ActionKind.RESET_CONFIG: self.editor.reset,
            ActionKind.SAVE_CONFIG: self.editor.save,
        }
        if params:
            logger.warning("Ignoring parameters for %s: %s", kind.value, sorted(params))
        return handlers[kind]
