"""이 파일은 .py 설정 저장 모듈로 키-값 문자열 설정을 YAML 파일에 보관합니다."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

from .config import SETTINGS_FILE

logger = logging.getLogger(__name__)


class SettingsStore:
    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else SETTINGS_FILE

    def read_string(self, key: str, fallback: str) -> str:
        # 값이 없거나 파일을 읽을 수 없으면 fallback을 반환한다.
        value = self._load().get(key)
        if not isinstance(value, str):
            return fallback
        return value

    def write_string(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                yaml.safe_dump(data, allow_unicode=True, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as exc:
            # 저장 실패는 실행 중인 세션에 영향을 주지 않는다.
            logger.warning("Failed to write settings %s: %s", self.path, exc)

    def _load(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Ignoring unreadable settings %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings %s: top level is not a mapping", self.path)
            return {}
        return data
