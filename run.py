"""이 파일은 .py 엔트리포인트로 클라이언트 CLI 실행을 제공합니다."""

from zmctf_client.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
