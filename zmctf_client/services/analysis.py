"""이 파일은 .py Flag 탐지 서비스 모듈로 입력 검증, 파일 인코딩, 분석 요청을 담당합니다."""

from __future__ import annotations

import asyncio
import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from zmctf_client.adapters.http import APIClient
from zmctf_client.api.schemas import AnalyzeResult
from zmctf_client.core.cancellation import CancelToken, run_cancellable
from zmctf_client.core.errors import ValidationError
from zmctf_client.services.lifecycle import ActionKind, ActionOutcome, LifecycleController
from zmctf_client.services.state import AppState

SAMPLE_TEXT = """테스트 입력입니다:
flag{test123}
rot13 하나 더: synt{grfg123}"""


class InputMode(str, Enum):
    TEXT = "text"
    FILE = "file"


@dataclass(frozen=True)
class SelectedFile:
    # 파일 선택 화면이 넘겨주는 원본 바이트와 파일명.
    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class AnalysisSummary:
    flags: int
    logs: int

    def __str__(self) -> str:
        return f"flags: {self.flags}, logs: {self.logs}"


async def encode_file(selected: SelectedFile, token: Optional[CancelToken] = None) -> str:
    # 큰 파일도 이벤트 루프를 막지 않도록 워커 스레드에서 인코딩한다.
    encoded = await run_cancellable(asyncio.to_thread(base64.b64encode, selected.data), token)
    return encoded.decode("ascii")


class FlagDetector:
    def __init__(self, state: AppState, client: APIClient, controller: LifecycleController) -> None:
        self.state = state
        self.client = client
        self.controller = controller

    @property
    def busy(self) -> bool:
        return self.controller.is_busy(ActionKind.ANALYZE)

    @property
    def error(self) -> Optional[str]:
        return self.controller.state(ActionKind.ANALYZE).error

    @property
    def result(self) -> Optional[AnalyzeResult]:
        return self.controller.state(ActionKind.ANALYZE).value

    def summary(self) -> Optional[AnalysisSummary]:
        result = self.result
        if result is None:
            return None
        return AnalysisSummary(flags=len(result.flags), logs=len(result.logs))

    async def analyze(
        self,
        source: InputMode = InputMode.TEXT,
        text: str = "",
        file: Optional[SelectedFile] = None,
        mode: Optional[str] = None,
    ) -> ActionOutcome:
        base_url = self.state.base_url
        if source == InputMode.TEXT:
            content = text.strip()
            if not content:
                return self.controller.fail(ActionKind.ANALYZE, ValidationError("분석할 내용을 입력하세요."))

            async def operation(token: CancelToken) -> AnalyzeResult:
                return await self.client.analyze_text(base_url, content, mode, token)

        else:
            if file is None:
                return self.controller.fail(ActionKind.ANALYZE, ValidationError("분석할 파일을 선택하세요."))
            selected = file

            async def operation(token: CancelToken) -> AnalyzeResult:
                data_base64 = await encode_file(selected, token)
                return await self.client.analyze_bytes(base_url, data_base64, selected.name, mode, token)

        return await self.controller.run(ActionKind.ANALYZE, operation)
