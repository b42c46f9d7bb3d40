"""이 파일은 .py 와이어 스키마 모듈로 백엔드 JSON과 내부 모델을 상호 변환합니다.

필드는 두 종류로 선언한다.

- 필수 필드(StrictStr 등): 없거나 타입이 다르면 MalformedResponse로 실패한다.
- 관대한 필드(Lenient*): 없거나 타입이 다르면 선언된 기본값으로 대체한다.

flags/logs 배열은 요소 단위로 관대하게 변환할 뿐, 내용을 더 검증하지 않는다.
"""

from __future__ import annotations

import copy
import json
import logging
from enum import Enum
from typing import Any, Annotated, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictStr
from pydantic import ValidationError as SchemaError

from zmctf_client.core.errors import MalformedResponse

logger = logging.getLogger(__name__)


def _lenient(accept: Callable[[Any], bool], default: Any) -> BeforeValidator:
    # 허용 타입이 아니면 기본값으로 대체하는 검증기를 만든다.
    def coerce(value: Any) -> Any:
        return value if accept(value) else default

    return BeforeValidator(coerce)


def _is_int(value: Any) -> bool:
    # bool은 int의 하위 타입이므로 제외한다.
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


LenientStr = Annotated[str, _lenient(lambda v: isinstance(v, str), "")]
LenientInt = Annotated[int, _lenient(_is_int, 0)]
LenientFloat = Annotated[float, _lenient(_is_number, 0.0)]
LenientBool = Annotated[bool, _lenient(lambda v: isinstance(v, bool), False)]
LenientOptionalStr = Annotated[Optional[str], _lenient(lambda v: isinstance(v, str), None)]


def _objects_only(field_name: str) -> BeforeValidator:
    def coerce(value: Any) -> Any:
        if not isinstance(value, list):
            return []
        items = [item for item in value if isinstance(item, dict)]
        dropped = len(value) - len(items)
        if dropped:
            logger.warning("Skipped %d non-object %s entries", dropped, field_name)
        return items

    return BeforeValidator(coerce)


def _object_or_none(value: Any) -> Any:
    return value if isinstance(value, dict) else None


class WireModel(BaseModel):
    # 알 수 없는 필드는 무시하고, 디코딩된 결과는 불변으로 다룬다.
    model_config = ConfigDict(extra="ignore", frozen=True)


class LogLevel(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class Flag(WireModel):
    content: LenientStr = ""
    # 백엔드는 [0, 1] 범위를 보장하지 않는다. 값은 그대로 보존한다.
    confidence: LenientFloat = 0.0
    source: LenientStr = ""
    encoding: LenientOptionalStr = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.content, self.source)

    @property
    def display_confidence(self) -> float:
        # 표시 전용 클램프이며 데이터 보정이 아니다.
        return max(0.0, min(1.0, self.confidence))

    @property
    def confidence_bar(self) -> str:
        return f"{round(self.display_confidence * 100)}%"


class LogEntry(WireModel):
    # timestamp는 날짜로 해석하지 않는다.
    timestamp: LenientStr = ""
    level: LenientStr = ""
    module: LenientStr = ""
    action: LenientStr = ""

    @property
    def tone(self) -> str:
        # 알 수 없는 레벨도 렌더링이 깨지지 않도록 muted로 처리한다.
        level = self.level.lower()
        if level == LogLevel.ERROR.value:
            return "danger"
        if level in (LogLevel.WARN.value, "warning"):
            return "warn"
        return "muted"

    @property
    def key(self) -> Tuple[str, str, str, str]:
        return (self.timestamp, self.module, self.level, self.action)


class FileInfo(WireModel):
    name: LenientStr = ""
    size: LenientInt = 0
    file_type: LenientStr = ""


class AnalyzeResult(WireModel):
    success: LenientBool = False
    flags: Annotated[List[Flag], _objects_only("flags")] = Field(default_factory=list)
    file_info: Annotated[Optional[FileInfo], BeforeValidator(_object_or_none)] = None
    logs: Annotated[List[LogEntry], _objects_only("logs")] = Field(default_factory=list)


class BackendConfig(WireModel):
    config_path: StrictStr
    # 문서 구조는 백엔드가 정의하며 여기서는 해석하지 않는다.
    config: Any = None


class DefaultConfig(WireModel):
    config: Any = None
    toml: StrictStr


class HealthInfo(WireModel):
    status: LenientStr = ""
    version: LenientStr = ""


def _decode(model: type, raw: Any, label: str) -> Any:
    if not isinstance(raw, dict):
        raise MalformedResponse(f"{label} 응답이 객체가 아닙니다.")
    try:
        # 입력을 깊은 복사해 호출자 데이터와 결과가 공유되지 않게 한다.
        return model.model_validate(copy.deepcopy(raw))
    except SchemaError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
        raise MalformedResponse(f"{label} 응답의 필수 필드가 없거나 잘못되었습니다: {fields}") from exc


def decode_analyze_response(raw: Any) -> AnalyzeResult:
    return _decode(AnalyzeResult, raw, "analyze")


def decode_backend_config(raw: Any) -> BackendConfig:
    return _decode(BackendConfig, raw, "config")


def decode_default_config(raw: Any) -> DefaultConfig:
    return _decode(DefaultConfig, raw, "default config")


def decode_health(raw: Any) -> HealthInfo:
    return _decode(HealthInfo, raw, "health")


def encode_analyze_request(content: str, mode: Optional[str] = None) -> Dict[str, Any]:
    return {"content": content, "mode": mode}


def encode_analyze_bytes_request(
    data_base64: str,
    file_name: Optional[str] = None,
    mode: Optional[str] = None,
) -> Dict[str, Any]:
    return {"data_base64": data_base64, "file_name": file_name, "mode": mode}


def parse_document(text: str) -> Any:
    # 편집 중인 설정 텍스트를 구조화된 문서로 변환한다.
    return json.loads(text)


def format_document(value: Any) -> str:
    # 키 순서는 디코더가 돌려준 순서를 유지한다.
    return json.dumps(value, ensure_ascii=False, indent=2)
