"""이 파일은 .py 취소 토큰 모듈로 협력적 취소 신호를 제공합니다."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from .errors import Cancelled

T = TypeVar("T")


class CancelToken:
    """호출 체인을 따라 전달되는 취소 신호.

    취소는 협력적이다. 대기 지점마다 토큰을 확인하고, 취소된 호출의
    늦은 결과는 버린다. 원격 백엔드의 작업 자체가 중단된다는 보장은 없다.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled(self.reason or "cancelled")

    async def wait(self) -> None:
        await self._event.wait()


async def run_cancellable(awaitable: Awaitable[T], token: Optional[CancelToken]) -> T:
    # 토큰이 먼저 발화하면 작업 결과를 기다리지 않고 Cancelled로 끝낸다.
    if token is None:
        return await awaitable
    if token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        token.raise_if_cancelled()

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()

    if token.cancelled:
        if task.done() and not task.cancelled():
            # 버려지는 결과의 예외도 회수해 경고 로그를 막는다.
            task.exception()
        raise Cancelled(token.reason or "cancelled")
    return task.result()
