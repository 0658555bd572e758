import logging

from formengine.config import EngineConfig, load_config
from formengine.observability.logging_utils import configure_logging, redact_source


def test_defaults():
    assert load_config({}) == EngineConfig()
    config = load_config({})
    assert config.enable_cross_references is True
    assert config.loader_passes == 2
    assert config.max_render_passes == 25
    assert config.log_level == "WARNING"


def test_environment_overrides():
    config = load_config(
        {
            "FORMENGINE_CROSS_REFERENCES": "off",
            "FORMENGINE_LOADER_PASSES": "4",
            "FORMENGINE_WARN_MISSING": "0",
            "FORMENGINE_MAX_RENDER_PASSES": "5",
            "FORMENGINE_LOG_LEVEL": "debug",
        }
    )
    assert config.enable_cross_references is False
    assert config.loader_passes == 4
    assert config.warn_missing_names is False
    assert config.max_render_passes == 5
    assert config.log_level == "DEBUG"


def test_invalid_values_fall_back_to_defaults():
    config = load_config(
        {
            "FORMENGINE_CROSS_REFERENCES": "maybe",
            "FORMENGINE_LOADER_PASSES": "0",
            "FORMENGINE_MAX_RENDER_PASSES": "many",
        }
    )
    assert config.enable_cross_references is True
    assert config.loader_passes == 2
    assert config.max_render_passes == 25


def test_load_config_reads_process_environment(monkeypatch):
    monkeypatch.setenv("FORMENGINE_LOADER_PASSES", "3")
    assert load_config().loader_passes == 3


def test_redact_source_shortens_and_flattens():
    assert redact_source("") == ""
    assert redact_source(None) == ""
    assert redact_source("a\n   b") == "a b"
    long_text = "x" * 100
    assert redact_source(long_text) == "x" * 80 + "... [100 chars]"


def test_redact_source_can_be_disabled(monkeypatch):
    monkeypatch.setenv("FORMENGINE_LOG_REDACT_SOURCE", "false")
    assert redact_source("a\n   b") == "a\n   b"


def test_configure_logging_sets_package_level():
    configure_logging("debug")
    assert logging.getLogger("formengine").level == logging.DEBUG
    configure_logging("nonsense")
    assert logging.getLogger("formengine").level == logging.WARNING
