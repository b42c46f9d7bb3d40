"""이 파일은 .py HTTP 어댑터로 백엔드 작업별 호출과 취소를 제공합니다."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from zmctf_client.api.schemas import (
    AnalyzeResult,
    BackendConfig,
    DefaultConfig,
    HealthInfo,
    decode_analyze_response,
    decode_backend_config,
    decode_default_config,
    decode_health,
    encode_analyze_bytes_request,
    encode_analyze_request,
)
from zmctf_client.core import config
from zmctf_client.core.cancellation import CancelToken, run_cancellable
from zmctf_client.core.errors import MalformedResponse, RequestFailed, TransportError

logger = logging.getLogger(__name__)

# 본문이 없는 요청과 JSON null 본문을 구분하기 위한 표식.
_NO_BODY = object()


def normalize_base_url(base_url: str) -> str:
    # 앞뒤 공백과 끝의 슬래시를 모두 제거한다.
    return base_url.strip().rstrip("/")


def build_url(base_url: str, path: str) -> str:
    return f"{normalize_base_url(base_url)}{path}"


@dataclass
class APIClient:
    timeout: float = config.REQUEST_TIMEOUT_SECONDS

    async def health(self, base_url: str, token: Optional[CancelToken] = None) -> HealthInfo:
        data = await self._request("GET", base_url, config.HEALTH_PATH, token=token)
        return decode_health(data)

    async def analyze_text(
        self,
        base_url: str,
        content: str,
        mode: Optional[str] = None,
        token: Optional[CancelToken] = None,
    ) -> AnalyzeResult:
        payload = encode_analyze_request(content, mode)
        data = await self._request("POST", base_url, config.ANALYZE_PATH, payload, token)
        return decode_analyze_response(data)

    async def analyze_bytes(
        self,
        base_url: str,
        data_base64: str,
        file_name: Optional[str] = None,
        mode: Optional[str] = None,
        token: Optional[CancelToken] = None,
    ) -> AnalyzeResult:
        # 파일은 호출자가 base64로 넘긴다. 로컬 경로를 백엔드에 전달하지 않는다.
        payload = encode_analyze_bytes_request(data_base64, file_name, mode)
        data = await self._request("POST", base_url, config.ANALYZE_BYTES_PATH, payload, token)
        return decode_analyze_response(data)

    async def get_config(self, base_url: str, token: Optional[CancelToken] = None) -> BackendConfig:
        data = await self._request("GET", base_url, config.CONFIG_PATH, token=token)
        return decode_backend_config(data)

    async def get_default_config(
        self, base_url: str, token: Optional[CancelToken] = None
    ) -> DefaultConfig:
        data = await self._request("GET", base_url, config.CONFIG_DEFAULT_PATH, token=token)
        return decode_default_config(data)

    async def put_config(
        self, base_url: str, document: Any, token: Optional[CancelToken] = None
    ) -> BackendConfig:
        data = await self._request("PUT", base_url, config.CONFIG_PATH, document, token)
        return decode_backend_config(data)

    async def reload_config(self, base_url: str, token: Optional[CancelToken] = None) -> BackendConfig:
        data = await self._request("POST", base_url, config.CONFIG_RELOAD_PATH, token=token)
        return decode_backend_config(data)

    async def reset_config(self, base_url: str, token: Optional[CancelToken] = None) -> BackendConfig:
        data = await self._request("POST", base_url, config.CONFIG_RESET_PATH, token=token)
        return decode_backend_config(data)

    async def _request(
        self,
        method: str,
        base_url: str,
        path: str,
        payload: Any = _NO_BODY,
        token: Optional[CancelToken] = None,
    ) -> Any:
        # 공통 요청 래퍼. 블로킹 호출은 워커 스레드에서 실행한다.
        url = build_url(base_url, path)
        logger.debug("%s %s", method, url)
        response = await run_cancellable(
            asyncio.to_thread(self._send, method, url, payload),
            token,
        )

        if not 200 <= response.status_code < 300:
            raise RequestFailed(response.status_code, _safe_text(response))

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(f"응답이 올바른 JSON이 아닙니다: {exc}") from exc

    def _send(self, method: str, url: str, payload: Any) -> requests.Response:
        kwargs: dict = {"timeout": self.timeout}
        if payload is not _NO_BODY:
            kwargs["data"] = json.dumps(payload, ensure_ascii=False).encode("utf-8")
            kwargs["headers"] = {"Content-Type": "application/json"}
        try:
            return requests.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"API 연결 실패: {exc}") from exc


def _safe_text(response: requests.Response) -> str:
    # 진단용 본문은 읽을 수 있는 만큼만 읽는다.
    try:
        return response.text
    except (UnicodeDecodeError, LookupError):
        return ""
