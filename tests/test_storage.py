"""이 파일은 .py 테스트 모듈로 설정 저장소와 엔드포인트 영속화를 검증합니다."""

from zmctf_client.core.config import API_BASE_URL_KEY, DEFAULT_API_BASE_URL
from zmctf_client.core.storage import SettingsStore
from zmctf_client.services.state import AppState


def test_read_string_falls_back_when_missing(tmp_path) -> None:
    store = SettingsStore(tmp_path / "settings.yml")
    assert store.read_string(API_BASE_URL_KEY, "fallback") == "fallback"


def test_write_then_read(tmp_path) -> None:
    store = SettingsStore(tmp_path / "nested" / "settings.yml")
    store.write_string(API_BASE_URL_KEY, "http://10.0.0.5:8080")
    assert SettingsStore(store.path).read_string(API_BASE_URL_KEY, "x") == "http://10.0.0.5:8080"


def test_unreadable_settings_fall_back(tmp_path) -> None:
    path = tmp_path / "settings.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert SettingsStore(path).read_string(API_BASE_URL_KEY, "fallback") == "fallback"

    path.write_text("key: [unclosed", encoding="utf-8")
    assert SettingsStore(path).read_string(API_BASE_URL_KEY, "fallback") == "fallback"


def test_app_state_persists_endpoint_changes(tmp_path) -> None:
    store = SettingsStore(tmp_path / "settings.yml")
    state = AppState.from_store(store)
    assert state.base_url == DEFAULT_API_BASE_URL

    seen = []
    state.on_endpoint_change(seen.append)
    state.set_base_url("http://192.168.1.20:8080")
    state.set_base_url("http://192.168.1.20:8080")

    assert seen == ["http://192.168.1.20:8080"]
    assert AppState.from_store(store).base_url == "http://192.168.1.20:8080"
