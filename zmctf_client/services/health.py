"""이 파일은 .py 헬스 폴러 모듈로 주기적인 백엔드 생존 확인을 수행합니다."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from zmctf_client.adapters.http import APIClient
from zmctf_client.core.config import HEALTH_POLL_INTERVAL_SECONDS
from zmctf_client.services.lifecycle import ActionKind, ActionOutcome, LifecycleController, Phase
from zmctf_client.services.state import AppState, Connectivity

logger = logging.getLogger(__name__)


class HealthPoller:
    def __init__(
        self,
        state: AppState,
        client: APIClient,
        controller: LifecycleController,
        interval: float = HEALTH_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.state = state
        self.client = client
        self.controller = controller
        self.interval = interval
        self._loop_task: Optional[asyncio.Task] = None
        self._probe_task: Optional[asyncio.Task] = None
        self._unsubscribe = None

    @property
    def running(self) -> bool:
        return self._loop_task is not None

    def start(self) -> None:
        if self._loop_task is not None:
            logger.warning("Health poller already running")
            return
        self._unsubscribe = self.state.on_endpoint_change(self._on_endpoint_change)
        self._loop_task = asyncio.create_task(self._loop())
        logger.info("Health poller started (interval=%.1fs)", self.interval)

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.controller.cancel(ActionKind.HEALTH)
        tasks = [task for task in (self._loop_task, self._probe_task) if task is not None]
        self._loop_task = None
        self._probe_task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if tasks:
            logger.info("Health poller stopped")

    def tick(self) -> Optional[asyncio.Task]:
        # 이전 확인이 끝나지 않았으면 이번 주기는 건너뛴다.
        if self._probe_task is not None and not self._probe_task.done():
            logger.debug("Skipping health tick: previous probe still pending")
            return None
        self._probe_task = asyncio.create_task(self.probe())
        return self._probe_task

    async def probe(self) -> ActionOutcome:
        # 호출 시작 시점의 엔드포인트를 값으로 고정한다.
        base_url = self.state.base_url
        outcome = await self.controller.run(
            ActionKind.HEALTH,
            lambda token: self.client.health(base_url, token),
        )
        if outcome.phase == Phase.SUCCEEDED:
            self.state.set_connectivity(Connectivity.ONLINE, outcome.value.version or None)
        elif outcome.phase == Phase.FAILED:
            self.state.set_connectivity(Connectivity.OFFLINE)
        return outcome

    async def _loop(self) -> None:
        while True:
            self.tick()
            await asyncio.sleep(self.interval)

    def _on_endpoint_change(self, base_url: str) -> None:
        # 진행 중인 확인을 버리고 unknown으로 되돌린 뒤 즉시 다시 확인한다.
        self.controller.cancel(ActionKind.HEALTH)
        self._probe_task = None
        self.state.set_connectivity(Connectivity.UNKNOWN)
        if self._loop_task is not None:
            self._loop_task.cancel()
            self._loop_task = asyncio.create_task(self._loop())
        logger.debug("Health poller restarted for %s", base_url)
