"""이 파일은 .py 모듈 카탈로그로 분석 모듈 목록과 제공 상태를 정의합니다."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class ModuleState(str, Enum):
    AVAILABLE = "available"
    PLANNED = "planned"


@dataclass(frozen=True)
class ModuleItem:
    id: str
    name: str
    description: str
    state: ModuleState


# planned 모듈은 자리표시자이며 클라이언트 로직이 없다.
MODULES: Tuple[ModuleItem, ...] = (
    ModuleItem("overview", "개요", "프로젝트 상태, 모듈 목록, 빠른 진입", ModuleState.AVAILABLE),
    ModuleItem("flag-detector", "Flag Detector", "평문/일반 인코딩 Flag 텍스트 탐지", ModuleState.AVAILABLE),
    ModuleItem("usb", "USB 트래픽 복원", "USB 키보드/마우스 등 HID 궤적 복원", ModuleState.PLANNED),
    ModuleItem("wifi", "무선 트래픽 크래킹", "비밀번호 무차별 대입 후 자동 분석", ModuleState.PLANNED),
    ModuleItem("sql-blind", "SQL 블라인드 인젝션 트래픽 분석", "이분 탐색/불리언 블라인드, Flag 자동 식별", ModuleState.PLANNED),
    ModuleItem("icmp", "ICMP 트래픽 분석", "TTL / DATA.len / DATA / ICMP.code", ModuleState.PLANNED),
    ModuleItem("telnet", "Telnet 트래픽 분석", "세션 복원과 핵심 내용 추출", ModuleState.PLANNED),
    ModuleItem("ftp", "FTP/FTP-DATA 트래픽 분석", "제어 채널 + 데이터 채널 객체 식별", ModuleState.PLANNED),
    ModuleItem("smtp", "SMTP 트래픽 분석", "로그인에 성공한 계정과 비밀번호 식별", ModuleState.PLANNED),
    ModuleItem("cobaltstrike", "CS 통신 복호화 분석", ".cobaltstrike.beacon_keys 필요", ModuleState.PLANNED),
    ModuleItem("bluetooth", "블루투스 트래픽 분석", "블루투스 프로토콜 스택 내용 해석과 객체 추출", ModuleState.PLANNED),
    ModuleItem("ics", "산업 제어 트래픽 분석", "MMS / modbus / iec60870 / mqtt / s7com / OMRON", ModuleState.PLANNED),
    ModuleItem("tls-keylog", "TLS keylog 복호화 분석", "keylog_file로 트래픽을 자동 복호화 후 분석", ModuleState.PLANNED),
    ModuleItem("extract-files", "파일 일괄 분리", "객체 내보내기 실패 시 수동 내보내기 지원", ModuleState.PLANNED),
    ModuleItem("export-objects", "프로토콜 객체 일괄 내보내기", "dicom / ftp-data / http / imf / smb / tftp", ModuleState.PLANNED),
    ModuleItem("fix-pcap", "손상된 패킷 파일 복구", "비정상/손상 패킷 파일의 해석 가능성 복원", ModuleState.PLANNED),
    ModuleItem("port-scan", "포트 스캔 통계", "열린 포트와 스캔 특징 통계", ModuleState.PLANNED),
    ModuleItem("http-uri", "HTTP URI 통계", "URI 빈도, 경로 군집, 파라미터 특징 통계", ModuleState.PLANNED),
    ModuleItem("dns", "DNS 트래픽 분석", "도메인, 질의 유형, 의심 패턴 식별", ModuleState.PLANNED),
    ModuleItem("http-save", "HTTP 전송 파일 자동 저장", "HTTP 객체와 메타 정보 자동 저장", ModuleState.PLANNED),
    ModuleItem("webshell", "WebShell 트래픽 식별/복호화", "일반적인 WebShell 통신 식별 및 복호화", ModuleState.PLANNED),
    ModuleItem("etl-pcapng", "ETL → PCAPNG", "etl 파일을 pcapng로 변환", ModuleState.PLANNED),
    ModuleItem("udp", "UDP 프로토콜 데이터 분석", "일반 UDP 데이터 통계와 특징 추출", ModuleState.PLANNED),
    ModuleItem("http-cred", "전용: HTTP 로그인 계정", "로그인에 성공한 계정과 비밀번호 식별(트래픽 측)", ModuleState.PLANNED),
)


def get_module(module_id: str) -> ModuleItem:
    # 알 수 없는 ID는 첫 번째 모듈로 대체한다.
    for item in MODULES:
        if item.id == module_id:
            return item
    return MODULES[0]


def available_modules() -> List[ModuleItem]:
    return [item for item in MODULES if item.state == ModuleState.AVAILABLE]


def planned_modules() -> List[ModuleItem]:
    return [item for item in MODULES if item.state == ModuleState.PLANNED]
