"""이 파일은 .py 공통 예외 모듈로 클라이언트 오류 유형을 표준화합니다."""

from __future__ import annotations


class ClientError(RuntimeError):
    """클라이언트 코어에서 발생하는 모든 오류의 기반 클래스입니다."""


class ValidationError(ClientError):
    """네트워크 호출 전에 입력 검증이 실패했을 때 사용합니다."""


class TransportError(ClientError):
    """호스트 연결 실패, DNS 오류, 타임아웃 등 전송 계층 오류입니다."""


class RequestFailed(ClientError):
    """백엔드가 2xx 이외의 상태 코드를 반환했을 때 사용합니다."""

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}")


class MalformedResponse(ClientError):
    """필수 필드가 없거나 응답 본문을 해석할 수 없을 때 사용합니다."""


class Cancelled(ClientError):
    """취소 토큰에 의해 중단된 호출입니다. 사용자에게 노출하지 않습니다."""
