from __future__ import annotations

import json
from pathlib import Path

from remote_client.config.settings import AppSettings
from remote_client.config.store import load_settings, save_settings, settings_path


def test_missing_file_gives_defaults(tmp_path: Path):
    settings = load_settings(tmp_path / "absent.json")
    assert settings == AppSettings()


def test_save_and_load(tmp_path: Path):
    settings = AppSettings()
    settings.server.url = "ws://10.0.0.5:9000"
    settings.voice.enabled = False
    settings.notifications.toast_ms = 1500
    path = save_settings(settings, tmp_path / "settings.json")

    loaded = load_settings(path)
    assert loaded.server.url == "ws://10.0.0.5:9000"
    assert loaded.voice.enabled is False
    assert loaded.notifications.toast_ms == 1500


def test_unknown_keys_are_ignored(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"server": {"url": "wss://a.test", "legacy": 1}, "theme": "dark"}),
        encoding="utf-8",
    )
    loaded = load_settings(path)
    assert loaded.server.url == "wss://a.test"
    assert loaded.server.reconnect_delay == 3.0


def test_byte_order_mark_is_tolerated(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text("\ufeff" + json.dumps({"logging": {"level": "DEBUG"}}), encoding="utf-8")
    assert load_settings(path).logging.level == "DEBUG"


def test_default_location_uses_app_home(_isolated_home: Path):
    path = save_settings(AppSettings())
    assert path == settings_path()
    assert path.is_relative_to(_isolated_home)
