"""이 파일은 .py 어댑터 패키지 초기화 모듈로 백엔드 HTTP 클라이언트를 노출합니다."""

from .http import APIClient, build_url, normalize_base_url

__all__ = ["APIClient", "build_url", "normalize_base_url"]
