import json
import logging

import pytest

from template_pipeline.config.configuration import RendererConfiguration
from template_pipeline.logging.config import OWNED_HANDLER_ATTR, JsonFormatter, LogConfig
from template_pipeline.templates.renderer import Renderer
from template_pipeline.templates.sets import TemplateSetRenderer


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_json_records_carry_template_fields(template_dir, caplog):
    with caplog.at_level("DEBUG", logger="template_pipeline"):
        Renderer().load(template_dir)

    record = next(r for r in caplog.records if getattr(r, "template_name", None) == "button.css")
    payload = json.loads(JsonFormatter().format(record))
    assert payload["template_name"] == "button.css"
    assert payload["root"] == str(template_dir)
    assert payload["level"] == "DEBUG"
    assert payload["logger"] == "template_pipeline.templates.loader"


def test_json_records_carry_set_name(template_dir, caplog):
    with caplog.at_level("INFO", logger="template_pipeline"):
        TemplateSetRenderer(template_dir).load("assets", "*.css")

    record = next(r for r in caplog.records if hasattr(r, "set_name"))
    payload = json.loads(JsonFormatter().format(record))
    assert payload["set_name"] == "assets"
    assert "template_name" not in payload


def test_log_config_from_configuration(tmp_path):
    config = RendererConfiguration(log_level="warning", log_file=tmp_path / "logs" / "pipeline.log", json_logging=True)
    log_config = LogConfig.from_configuration(config)
    assert log_config.log_level == logging.WARNING
    assert log_config.json_logging


def test_configure_writes_json_log_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "pipeline.log"
    LogConfig(log_level="INFO", log_file=log_file, json_logging=True).configure()

    logging.getLogger("template_pipeline.test").info("loaded", extra={"root": "/srv/templates"})
    for handler in logging.getLogger().handlers:
        handler.flush()

    payload = json.loads(log_file.read_text().splitlines()[-1])
    assert payload["message"] == "loaded"
    assert payload["root"] == "/srv/templates"


def test_configure_replaces_only_its_own_handlers(restore_root_logger):
    root_logger = logging.getLogger()
    foreign = logging.NullHandler()
    root_logger.addHandler(foreign)

    LogConfig(log_level="DEBUG").configure()
    LogConfig(log_level="ERROR").configure()

    owned = [h for h in root_logger.handlers if getattr(h, OWNED_HANDLER_ATTR, False)]
    assert len(owned) == 1
    assert owned[0].level == logging.ERROR
    assert foreign in root_logger.handlers
    assert root_logger.level == logging.ERROR
