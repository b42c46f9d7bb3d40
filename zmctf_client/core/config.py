"""이 파일은 .py 설정 모듈로 기본 엔드포인트, 주기, 저장 경로를 정의합니다."""

import os
from pathlib import Path

STORAGE_DIR = Path(os.getenv("ZMCTF_STORAGE_DIR", str(Path.home() / ".zmctf")))
SETTINGS_FILE = STORAGE_DIR / "settings.yml"

API_BASE_URL_KEY = "zmctf.api_base_url"
DEFAULT_API_BASE_URL = os.getenv("ZMCTF_API_BASE_URL", "http://127.0.0.1:8080")

# 워커 스레드가 무한정 남지 않도록 전송 계층 타임아웃만 둔다.
REQUEST_TIMEOUT_SECONDS = float(os.getenv("ZMCTF_REQUEST_TIMEOUT", "30"))
HEALTH_POLL_INTERVAL_SECONDS = float(os.getenv("ZMCTF_HEALTH_INTERVAL", "5"))

HEALTH_PATH = "/api/health"
ANALYZE_PATH = "/api/analyze"
ANALYZE_BYTES_PATH = "/api/analyze_bytes"
CONFIG_PATH = "/api/config"
CONFIG_DEFAULT_PATH = "/api/config/default"
CONFIG_RELOAD_PATH = "/api/config/reload"
CONFIG_RESET_PATH = "/api/config/reset"
