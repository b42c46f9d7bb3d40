"""이 파일은 .py 테스트 모듈로 명령줄 진입점의 로컬 명령을 검증합니다."""

import requests

from zmctf_client import cli
from zmctf_client.core.storage import SettingsStore


def test_endpoint_command_persists_url(tmp_path, monkeypatch, capsys) -> None:
    path = tmp_path / "settings.yml"
    monkeypatch.setattr(cli, "SettingsStore", lambda: SettingsStore(path))

    assert cli.main(["endpoint", "http://10.1.1.1:8080"]) == 0
    assert cli.main(["endpoint"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["http://10.1.1.1:8080", "http://10.1.1.1:8080"]


def test_modules_command_lists_catalog(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "SettingsStore", lambda: SettingsStore(tmp_path / "settings.yml"))

    assert cli.main(["modules"]) == 0

    out = capsys.readouterr().out
    assert "flag-detector" in out
    assert "# 사용 가능" in out
    assert out.index("flag-detector") < out.index("# 예정") < out.index("usb")


def test_load_selected_file_reads_bytes(tmp_path) -> None:
    target = tmp_path / "capture.bin"
    target.write_bytes(b"\x00flag{x}")

    selected = cli.load_selected_file(str(target))

    assert selected.name == "capture.bin"
    assert selected.data == b"\x00flag{x}"
    assert selected.size == 8


def test_analyze_with_unreadable_file_fails_cleanly(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "SettingsStore", lambda: SettingsStore(tmp_path / "settings.yml"))
    missing = tmp_path / "nope.bin"

    code = cli.main(["--api-base-url", "http://127.0.0.1:9", "analyze", "--file", str(missing)])

    assert code == 1
    assert "분석 실패: 파일을 읽을 수 없습니다" in capsys.readouterr().err


def test_config_commands_reject_unreadable_files(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "SettingsStore", lambda: SettingsStore(tmp_path / "settings.yml"))
    binary = tmp_path / "config.json"
    binary.write_bytes(b"\xff\xfe\x00bad")

    assert cli.main(["--api-base-url", "http://127.0.0.1:9", "config", "format", str(tmp_path / "nope.json")]) == 1
    assert cli.main(["--api-base-url", "http://127.0.0.1:9", "config", "save", str(binary)]) == 1
    assert capsys.readouterr().err.count("설정 파일을 읽을 수 없습니다") == 2


def test_config_format_prints_canonical_json(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "SettingsStore", lambda: SettingsStore(tmp_path / "settings.yml"))
    draft = tmp_path / "config.json"
    draft.write_text('{"a":1}', encoding="utf-8")

    assert cli.main(["config", "format", str(draft)]) == 0
    assert capsys.readouterr().out == '{\n  "a": 1\n}\n'


def test_config_show_prints_path_and_status(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "SettingsStore", lambda: SettingsStore(tmp_path / "settings.yml"))

    def reply(method, url, **kwargs):
        response = requests.Response()
        response.status_code = 200
        response._content = b'{"config_path": "/srv/config.toml", "config": {"a": 1}}'
        response.encoding = "utf-8"
        return response

    monkeypatch.setattr(requests, "request", reply)

    assert cli.main(["--api-base-url", "http://host:8080", "config", "show"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:2] == ["# config_path: /srv/config.toml", "# 백엔드에서 현재 설정을 불러왔습니다."]
    assert lines[2:] == ["{", '  "a": 1', "}"]
