import json
import os

import pytest
import yaml

from template_pipeline.config import (
    RendererConfiguration,
    ensure_renderer_config,
    find_default_config,
    load_config,
    load_config_file,
    load_configuration_from_env,
    merge_configs,
)
from template_pipeline.error.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate every test from ambient settings and config files."""
    for key in list(os.environ):
        if key.startswith("TEMPLATE_PIPELINE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    config = RendererConfiguration()
    assert config.minify
    assert config.encoding == "utf-8"
    assert config.on_collision == "overwrite"
    assert not config.live_reload
    assert not config.production
    assert config.strict_undefined
    assert config.log_level == "INFO"


def test_validators_normalize_values():
    config = RendererConfiguration(
        on_collision="WARN",
        log_level="debug",
        extra_mime_types={"tmpl": "text/html", ".vue": "text/html"}
    )
    assert config.on_collision == "warn"
    assert config.log_level == "DEBUG"
    assert config.extra_mime_types == {".tmpl": "text/html", ".vue": "text/html"}


@pytest.mark.parametrize("settings", [
    {"on_collision": "ignore"},
    {"log_level": "LOUD"},
    {"extra_mime_types": {"": "text/html"}},
    {"unknown_setting": True},
    {"live_reload": True, "production": True},
])
def test_invalid_settings(settings):
    with pytest.raises(ConfigurationError):
        ensure_renderer_config(settings)


def test_assignment_is_validated():
    config = RendererConfiguration(production=True)
    with pytest.raises(ValueError):
        config.live_reload = True


def test_ensure_renderer_config_overrides():
    base = RendererConfiguration(encoding="latin-1")
    assert ensure_renderer_config(base) is base

    updated = ensure_renderer_config(base, minify=False)
    assert updated is not base
    assert updated.encoding == "latin-1"
    assert not updated.minify
    assert base.minify


def test_load_yaml_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump({"minify": False, "on_collision": "error"}))
    assert load_config_file(str(path)) == {"minify": False, "on_collision": "error"}


def test_load_json_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"encoding": "latin-1"}))
    assert load_config_file(str(path)) == {"encoding": "latin-1"}


@pytest.mark.parametrize("filename, content", [
    ("settings.yaml", "minify: [unclosed"),
    ("settings.json", "{nope"),
    ("settings.toml", "minify = false"),
    ("settings.yaml", "- just\n- a list\n"),
])
def test_load_bad_file(tmp_path, filename, content):
    path = tmp_path / filename
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        load_config_file(str(path))


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config_file(str(tmp_path / "missing.yaml"))


def test_env_values_are_typed(monkeypatch):
    monkeypatch.setenv("TEMPLATE_PIPELINE_MINIFY", "false")
    monkeypatch.setenv("TEMPLATE_PIPELINE_LOG_LEVEL", "warning")
    monkeypatch.setenv("TEMPLATE_PIPELINE_NOT_A_SETTING", "1")
    assert load_configuration_from_env() == {"minify": False, "log_level": "warning"}


def test_find_default_config(tmp_path):
    assert find_default_config() is None
    (tmp_path / "template_pipeline.yml").write_text("minify: false\n")
    assert find_default_config() == str(tmp_path / "template_pipeline.yml")


def test_merge_configs():
    base = {"a": 1, "nested": {"x": 1, "y": 2}}
    assert merge_configs(base, {"nested": {"y": 3}, "b": 2}) == {
        "a": 1, "b": 2, "nested": {"x": 1, "y": 3}
    }


def test_load_config_precedence(tmp_path, monkeypatch):
    (tmp_path / "template_pipeline.yaml").write_text(
        "minify: false\nencoding: latin-1\non_collision: warn\n"
    )
    monkeypatch.setenv("TEMPLATE_PIPELINE_ENCODING", "utf-16")
    config = load_config(on_collision="error")
    assert not config.minify
    assert config.encoding == "utf-16"
    assert config.on_collision == "error"


def test_load_config_explicit_path(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"strict_undefined": False}))
    assert not load_config(str(path)).strict_undefined


def test_load_config_refuses_live_reload_in_production(monkeypatch):
    monkeypatch.setenv("TEMPLATE_PIPELINE_PRODUCTION", "true")
    monkeypatch.setenv("TEMPLATE_PIPELINE_LIVE_RELOAD", "true")
    with pytest.raises(ConfigurationError):
        load_config()
