"""이 파일은 .py 코어 패키지 초기화 모듈로 주요 심볼을 재노출합니다."""

from .cancellation import CancelToken, run_cancellable
from .catalog import MODULES, ModuleItem, ModuleState, get_module
from .errors import (
    Cancelled,
    ClientError,
    MalformedResponse,
    RequestFailed,
    TransportError,
    ValidationError,
)
from .logging import setup_logging
from .storage import SettingsStore

__all__ = [
    "CancelToken",
    "Cancelled",
    "ClientError",
    "MODULES",
    "MalformedResponse",
    "ModuleItem",
    "ModuleState",
    "RequestFailed",
    "SettingsStore",
    "TransportError",
    "ValidationError",
    "get_module",
    "run_cancellable",
    "setup_logging",
]
