"""ZMctf 데스크톱 클라이언트 코어 패키지."""

__version__ = "0.1.0"
