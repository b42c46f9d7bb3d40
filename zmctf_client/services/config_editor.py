"""이 파일은 .py 설정 편집기 모듈로 백엔드 설정의 조회-편집-검증-저장 흐름을 관리합니다."""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple

from zmctf_client.adapters.http import APIClient
from zmctf_client.api.schemas import BackendConfig, DefaultConfig, format_document, parse_document
from zmctf_client.core.cancellation import CancelToken
from zmctf_client.core.errors import ValidationError
from zmctf_client.services.lifecycle import ActionKind, ActionOutcome, LifecycleController
from zmctf_client.services.state import AppState

logger = logging.getLogger(__name__)

CONFIG_KINDS = (
    ActionKind.LOAD_CONFIG,
    ActionKind.RELOAD_CONFIG,
    ActionKind.DEFAULT_CONFIG,
    ActionKind.RESET_CONFIG,
    ActionKind.SAVE_CONFIG,
)


class ConfigEditor:
    def __init__(self, state: AppState, client: APIClient, controller: LifecycleController) -> None:
        self.state = state
        self.client = client
        self.controller = controller
        # 사용자가 편집하는 직렬화 텍스트(작업 사본).
        self.working_text = ""
        # 백엔드가 마지막으로 확인해 준 설정.
        self.authoritative: Optional[BackendConfig] = None
        self.default_toml: Optional[str] = None
        self.validation_error: Optional[str] = None
        self.info: Optional[str] = None

    @property
    def config_path(self) -> Optional[str]:
        return self.authoritative.config_path if self.authoritative else None

    @property
    def busy(self) -> bool:
        return any(self.controller.is_busy(kind) for kind in CONFIG_KINDS)

    def error(self, kind: ActionKind) -> Optional[str]:
        return self.controller.state(kind).error

    async def load(self) -> ActionOutcome:
        outcome = await self._call(ActionKind.LOAD_CONFIG, self.client.get_config)
        if outcome.ok:
            self._apply_authoritative(outcome.value, "백엔드에서 현재 설정을 불러왔습니다.")
        return outcome

    async def reload(self) -> ActionOutcome:
        outcome = await self._call(ActionKind.RELOAD_CONFIG, self.client.reload_config)
        if outcome.ok:
            self._apply_authoritative(outcome.value, "디스크에서 설정을 다시 읽어 실행 상태에 적용했습니다.")
        return outcome

    async def reset(self) -> ActionOutcome:
        outcome = await self._call(ActionKind.RESET_CONFIG, self.client.reset_config)
        if outcome.ok:
            self._apply_authoritative(outcome.value, "기본 설정으로 초기화하고 백엔드에 저장했습니다.")
        return outcome

    async def load_default(self) -> ActionOutcome:
        outcome = await self._call(ActionKind.DEFAULT_CONFIG, self.client.get_default_config)
        if outcome.ok:
            default: DefaultConfig = outcome.value
            # 기본 설정은 아직 저장되지 않았으므로 authoritative는 그대로 둔다.
            self.working_text = format_document(default.config)
            self.default_toml = default.toml
            self.validation_error = None
            self.info = "기본 설정을 불러왔습니다(아직 백엔드에 저장되지 않음)."
        return outcome

    def format(self) -> bool:
        parsed, document = self._parse_working_text()
        if not parsed:
            return False
        self.working_text = format_document(document)
        return True

    async def save(self) -> ActionOutcome:
        # 제출 직전에 파싱하고, 파싱된 문서를 그대로 보낸다.
        parsed, document = self._parse_working_text()
        if not parsed:
            return self.controller.fail(ActionKind.SAVE_CONFIG, ValidationError(self.validation_error or ""))

        base_url = self.state.base_url

        async def operation(token: CancelToken) -> BackendConfig:
            return await self.client.put_config(base_url, document, token)

        self._cancel_other_config_actions(ActionKind.SAVE_CONFIG)
        self.info = None
        outcome = await self.controller.run(ActionKind.SAVE_CONFIG, operation)
        if outcome.ok:
            # 백엔드가 정규화한 결과(기본값 추가 등)로 작업 사본을 갱신한다.
            self._apply_authoritative(outcome.value, "설정을 저장하고 적용했습니다.")
        return outcome

    async def _call(
        self,
        kind: ActionKind,
        method: Callable[..., Awaitable[Any]],
    ) -> ActionOutcome:
        base_url = self.state.base_url
        self._cancel_other_config_actions(kind)
        self.info = None
        return await self.controller.run(kind, lambda token: method(base_url, token))

    def _cancel_other_config_actions(self, kind: ActionKind) -> None:
        # 모든 설정 작업이 같은 작업 사본에 쓰므로 가장 최근 작업만 결과를 반영한다.
        for other in CONFIG_KINDS:
            if other != kind and self.controller.cancel(other):
                logger.debug("Cancelled %s in favour of %s", other.value, kind.value)

    def _parse_working_text(self) -> Tuple[bool, Any]:
        try:
            document = parse_document(self.working_text)
        except json.JSONDecodeError as exc:
            self.validation_error = f"설정이 올바른 JSON이 아닙니다: {exc}"
            logger.debug("Config draft rejected: %s", exc)
            return False, None
        self.validation_error = None
        return True, document

    def _apply_authoritative(self, config: BackendConfig, info: str) -> None:
        self.authoritative = config
        self.working_text = format_document(config.config)
        self.validation_error = None
        self.info = info
