"""이 파일은 .py 앱 상태 모듈로 엔드포인트와 연결 상태의 단일 소유자를 제공합니다."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional

from zmctf_client.core.config import API_BASE_URL_KEY, DEFAULT_API_BASE_URL
from zmctf_client.core.storage import SettingsStore

logger = logging.getLogger(__name__)


class Connectivity(str, Enum):
    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


EndpointListener = Callable[[str], None]
ConnectivityListener = Callable[[Connectivity, Optional[str]], None]


class AppState:
    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        store: Optional[SettingsStore] = None,
    ) -> None:
        self._base_url = base_url
        self._store = store
        self._connectivity = Connectivity.UNKNOWN
        self._version: Optional[str] = None
        self._endpoint_listeners: List[EndpointListener] = []
        self._connectivity_listeners: List[ConnectivityListener] = []

    @classmethod
    def from_store(cls, store: SettingsStore) -> "AppState":
        # 저장된 값이 없으면 기본 엔드포인트를 사용한다.
        base_url = store.read_string(API_BASE_URL_KEY, DEFAULT_API_BASE_URL)
        return cls(base_url, store)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def connectivity(self) -> Connectivity:
        return self._connectivity

    @property
    def version(self) -> Optional[str]:
        return self._version

    def set_base_url(self, base_url: str) -> None:
        if base_url == self._base_url:
            return
        self._base_url = base_url
        if self._store is not None:
            self._store.write_string(API_BASE_URL_KEY, base_url)
        logger.info("API base URL changed to %s", base_url)
        for listener in list(self._endpoint_listeners):
            listener(base_url)

    def set_connectivity(self, connectivity: Connectivity, version: Optional[str] = None) -> None:
        # 헬스 폴러만 호출한다. 분석/설정 호출은 연결 상태를 바꾸지 않는다.
        if connectivity == self._connectivity and version == self._version:
            return
        self._connectivity = connectivity
        self._version = version
        for listener in list(self._connectivity_listeners):
            listener(connectivity, version)

    def on_endpoint_change(self, listener: EndpointListener) -> Callable[[], None]:
        self._endpoint_listeners.append(listener)
        return lambda: _discard(self._endpoint_listeners, listener)

    def on_connectivity_change(self, listener: ConnectivityListener) -> Callable[[], None]:
        self._connectivity_listeners.append(listener)
        return lambda: _discard(self._connectivity_listeners, listener)


def _discard(listeners: list, listener: object) -> None:
    if listener in listeners:
        listeners.remove(listener)
