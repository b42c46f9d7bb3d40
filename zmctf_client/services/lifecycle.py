"""이 파일은 .py 요청 수명주기 모듈로 작업 종류별 진행/성공/실패 상태를 관리합니다.

작업 종류(ActionKind)마다 진행 중인 호출은 최대 하나다. 같은 종류의 새 호출이
시작되면 이전 호출의 토큰을 취소하고, 이전 호출의 결과는 늦게 도착해도 버린다.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from zmctf_client.core.cancellation import CancelToken
from zmctf_client.core.errors import Cancelled, ClientError

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    HEALTH = "health"
    ANALYZE = "analyze"
    LOAD_CONFIG = "load-config"
    RELOAD_CONFIG = "reload-config"
    DEFAULT_CONFIG = "default-config"
    RESET_CONFIG = "reset-config"
    SAVE_CONFIG = "save-config"


class Phase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SUPERSEDED = "superseded"
    CANCELLED = "cancelled"


# 사용자에게 보이는 오류 메시지 접두어.
ERROR_PREFIXES: Dict[ActionKind, str] = {
    ActionKind.HEALTH: "상태 확인 실패",
    ActionKind.ANALYZE: "분석 실패",
    ActionKind.LOAD_CONFIG: "불러오기 실패",
    ActionKind.RELOAD_CONFIG: "다시 불러오기 실패",
    ActionKind.DEFAULT_CONFIG: "기본 설정 조회 실패",
    ActionKind.RESET_CONFIG: "초기화 실패",
    ActionKind.SAVE_CONFIG: "저장 실패",
}


@dataclass
class ActionState:
    phase: Phase = Phase.IDLE
    busy: bool = False
    error: Optional[str] = None
    value: Any = None


@dataclass(frozen=True)
class ActionOutcome:
    kind: ActionKind
    phase: Phase
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.phase == Phase.SUCCEEDED


@dataclass
class _Inflight:
    generation: int
    token: CancelToken


Operation = Callable[[CancelToken], Awaitable[Any]]
Listener = Callable[[ActionKind, ActionState], None]


class LifecycleController:
    def __init__(self) -> None:
        self._states: Dict[ActionKind, ActionState] = {kind: ActionState() for kind in ActionKind}
        self._generations: Dict[ActionKind, int] = {kind: 0 for kind in ActionKind}
        self._inflight: Dict[ActionKind, _Inflight] = {}
        self._listeners: List[Listener] = []

    def state(self, kind: ActionKind) -> ActionState:
        # 외부에는 복사본만 넘겨 내부 상태가 바뀌지 않게 한다.
        return replace(self._states[kind])

    def is_busy(self, kind: ActionKind) -> bool:
        return self._states[kind].busy

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def run(self, kind: ActionKind, operation: Operation) -> ActionOutcome:
        inflight = self._begin(kind)
        try:
            value = await operation(inflight.token)
        except Cancelled:
            return self._discard(kind, inflight)
        except asyncio.CancelledError:
            # 대기 중인 태스크 자체가 취소되면 busy만 정리하고 다시 던진다.
            if self._is_current(kind, inflight):
                self._inflight.pop(kind, None)
                self._update(kind, phase=Phase.CANCELLED, busy=False)
            raise
        except ClientError as exc:
            if not self._is_current(kind, inflight):
                return self._discard(kind, inflight)
            return self._finish_failed(kind, inflight, str(exc))
        except Exception as exc:
            logger.exception("Unexpected error during %s", kind.value)
            if not self._is_current(kind, inflight):
                return self._discard(kind, inflight)
            return self._finish_failed(kind, inflight, f"예상치 못한 오류: {exc}")

        if not self._is_current(kind, inflight):
            return self._discard(kind, inflight)
        self._inflight.pop(kind, None)
        self._update(kind, phase=Phase.SUCCEEDED, busy=False, error=None, value=value)
        return ActionOutcome(kind, Phase.SUCCEEDED, value=value)

    def fail(self, kind: ActionKind, error: ClientError) -> ActionOutcome:
        # 네트워크 호출 전 검증 실패를 동기적으로 기록한다.
        self._supersede(kind)
        self._generations[kind] += 1
        message = self._format_error(kind, str(error))
        self._update(kind, phase=Phase.FAILED, busy=False, error=message)
        return ActionOutcome(kind, Phase.FAILED, error=message)

    def cancel(self, kind: ActionKind) -> bool:
        inflight = self._inflight.pop(kind, None)
        if inflight is None:
            return False
        inflight.token.cancel("cancelled")
        logger.debug("Cancelled %s (generation %d)", kind.value, inflight.generation)
        self._update(kind, phase=Phase.CANCELLED, busy=False)
        return True

    def cancel_all(self) -> None:
        for kind in list(self._inflight):
            self.cancel(kind)

    def _begin(self, kind: ActionKind) -> _Inflight:
        self._supersede(kind)
        self._generations[kind] += 1
        inflight = _Inflight(self._generations[kind], CancelToken())
        self._inflight[kind] = inflight
        self._update(kind, phase=Phase.PENDING, busy=True, error=None)
        return inflight

    def _supersede(self, kind: ActionKind) -> None:
        prior = self._inflight.pop(kind, None)
        if prior is not None:
            prior.token.cancel("superseded")
            logger.debug("Superseded %s (generation %d)", kind.value, prior.generation)

    def _is_current(self, kind: ActionKind, inflight: _Inflight) -> bool:
        return self._inflight.get(kind) is inflight

    def _discard(self, kind: ActionKind, inflight: _Inflight) -> ActionOutcome:
        # 버려지는 결과는 value/error/busy를 건드리지 않는다.
        if self._is_current(kind, inflight):
            # 토큰 없이 Cancelled가 올라온 경우에도 진행 상태를 정리한다.
            self._inflight.pop(kind, None)
            self._update(kind, phase=Phase.CANCELLED, busy=False)
            return ActionOutcome(kind, Phase.CANCELLED)
        if self._generations[kind] != inflight.generation:
            return ActionOutcome(kind, Phase.SUPERSEDED)
        return ActionOutcome(kind, Phase.CANCELLED)

    def _finish_failed(self, kind: ActionKind, inflight: _Inflight, cause: str) -> ActionOutcome:
        self._inflight.pop(kind, None)
        message = self._format_error(kind, cause)
        logger.info("%s", message)
        # 이전에 성공한 value는 지우지 않는다.
        self._update(kind, phase=Phase.FAILED, busy=False, error=message)
        return ActionOutcome(kind, Phase.FAILED, error=message)

    @staticmethod
    def _format_error(kind: ActionKind, cause: str) -> str:
        return f"{ERROR_PREFIXES[kind]}: {cause}"

    def _update(self, kind: ActionKind, **changes: Any) -> None:
        state = self._states[kind]
        for name, value in changes.items():
            setattr(state, name, value)
        snapshot = replace(state)
        for listener in list(self._listeners):
            listener(kind, snapshot)
