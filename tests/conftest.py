"""이 파일은 .py 테스트 설정 모듈로 경로와 가짜 백엔드 클라이언트를 제공합니다."""

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


class FakeClient:
    """APIClient와 같은 메서드를 가진 가짜 클라이언트.

    ``script(name, *responses)``로 호출별 응답을 순서대로 지정한다. 응답은 값,
    예외 인스턴스, 또는 토큰을 받는 코루틴 함수일 수 있다.
    """

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self._scripts: Dict[str, List[Any]] = {}

    def script(self, name: str, *responses: Any) -> None:
        self._scripts.setdefault(name, []).extend(responses)

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def _respond(self, name: str, token: Any, *args: Any) -> Any:
        self.calls.append((name,) + args)
        queue = self._scripts.get(name)
        if not queue:
            raise AssertionError(f"unexpected call: {name}")
        response = queue.pop(0)
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return await response(token)
        return response

    async def health(self, base_url, token=None):
        return await self._respond("health", token, base_url)

    async def analyze_text(self, base_url, content, mode=None, token=None):
        return await self._respond("analyze_text", token, base_url, content, mode)

    async def analyze_bytes(self, base_url, data_base64, file_name=None, mode=None, token=None):
        return await self._respond("analyze_bytes", token, base_url, data_base64, file_name, mode)

    async def get_config(self, base_url, token=None):
        return await self._respond("get_config", token, base_url)

    async def get_default_config(self, base_url, token=None):
        return await self._respond("get_default_config", token, base_url)

    async def put_config(self, base_url, document, token=None):
        return await self._respond("put_config", token, base_url, document)

    async def reload_config(self, base_url, token=None):
        return await self._respond("reload_config", token, base_url)

    async def reset_config(self, base_url, token=None):
        return await self._respond("reset_config", token, base_url)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()
