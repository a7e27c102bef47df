"""Tests for the layered configuration service."""
import pytest

from metrix.core.config_service import (
    ConfigService,
    _coerce_env,
    _deep_merge,
    _get_nested,
    _read_toml,
    _set_nested,
    _write_toml,
    get_config_service,
    reset_config_service,
)
from metrix.errors import ConfigError


class TestHelpers:
    def test_deep_merge(self):
        base = {"ui": {"theme": "light", "plain_output": False}}
        merged = _deep_merge(base, {"ui": {"theme": "dark"}})
        assert merged == {"ui": {"theme": "dark", "plain_output": False}}
        assert base["ui"]["theme"] == "light"

    def test_get_nested(self):
        data = {"a": {"b": {"c": 1}}}
        assert _get_nested(data, "a.b.c") == 1
        assert _get_nested(data, "a.x.c", "d") == "d"
        assert _get_nested(data, "a.b.c.d", "d") == "d"

    def test_set_nested(self):
        data = {"a": "scalar"}
        _set_nested(data, "a.b", 2)
        assert data == {"a": {"b": 2}}

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("1", True), ("YES", True),
        ("false", False), ("0", False), ("dark", "dark"),
    ])
    def test_coerce_env(self, raw, expected):
        assert _coerce_env(raw) == expected

    def test_toml_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "config.toml"
        _write_toml({"ui": {"theme": "dark"}}, path)
        assert _read_toml(path) == {"ui": {"theme": "dark"}}

    def test_read_missing(self, tmp_path):
        assert _read_toml(tmp_path / "nope.toml") == {}

    def test_read_invalid(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("this is = = not toml")
        assert _read_toml(path) == {}


class TestResolve:
    def test_defaults(self):
        svc = ConfigService()
        assert svc.get("ui.theme") == "light"
        assert svc.get("ui.plain_output") is False
        assert svc.get_default_payload() is None

    def test_global_layer(self, metrix_config):
        _write_toml({"ui": {"theme": "dark"}}, metrix_config["global"])
        assert ConfigService().get_theme() == "dark"

    def test_project_overrides_global(self, metrix_config):
        _write_toml({"ui": {"theme": "dark"}}, metrix_config["global"])
        _write_toml({"ui": {"theme": "light"}}, metrix_config["project"])
        assert ConfigService().get_theme() == "light"

    def test_env_overrides_files(self, metrix_config, monkeypatch):
        _write_toml({"ui": {"theme": "light"}}, metrix_config["project"])
        monkeypatch.setenv("METRIX_THEME", "dark")
        monkeypatch.setenv("METRIX_PLAIN", "1")
        svc = ConfigService()
        assert svc.get_theme() == "dark"
        assert svc.get("ui.plain_output") is True

    def test_invalid_theme_reads_as_light(self, metrix_config):
        _write_toml({"ui": {"theme": "solarized"}}, metrix_config["global"])
        assert ConfigService().get_theme() == "light"

    def test_default_payload(self, metrix_config, tmp_path):
        target = tmp_path / "metrics.b64"
        _write_toml({"report": {"payload": str(target)}}, metrix_config["project"])
        assert ConfigService().get_default_payload() == target

    def test_resolve_is_cached(self, metrix_config):
        svc = ConfigService()
        first = svc.resolve()
        _write_toml({"ui": {"theme": "dark"}}, metrix_config["global"])
        assert svc.resolve() is first
        assert svc.resolve(force=True).get("ui.theme") == "dark"


class TestWrite:
    def test_set_theme_persists(self, metrix_config):
        svc = ConfigService()
        assert svc.set_theme("dark") == "dark"
        assert _read_toml(metrix_config["global"]) == {"ui": {"theme": "dark"}}
        assert svc.get_theme() == "dark"
        assert ConfigService().get_theme() == "dark"

    def test_set_theme_rejects_unknown(self, metrix_config):
        with pytest.raises(ConfigError) as exc_info:
            ConfigService().set_theme("neon")
        assert exc_info.value.context["theme"] == "neon"
        assert not metrix_config["global"].exists()

    def test_set_global_keeps_other_keys(self, metrix_config):
        _write_toml({"report": {"payload": "x.b64"}}, metrix_config["global"])
        ConfigService().set_global("ui.theme", "dark")
        assert _read_toml(metrix_config["global"]) == {
            "report": {"payload": "x.b64"},
            "ui": {"theme": "dark"},
        }

    def test_show_and_paths(self, metrix_config):
        svc = ConfigService()
        svc.set_theme("dark")
        shown = svc.show()
        assert shown["resolved"]["ui"]["theme"] == "dark"
        assert shown["sources"]["global_config"] == str(metrix_config["global"])
        assert shown["sources"]["project_config"] is None
        paths = svc.config_paths()
        assert paths["global_config"].endswith("(exists)")
        assert paths["project_config"].endswith("(not found)")


class TestSingleton:
    def test_singleton(self):
        assert get_config_service() is get_config_service()

    def test_reset(self):
        first = get_config_service()
        reset_config_service()
        assert get_config_service() is not first
