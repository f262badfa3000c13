"""
Tests for the logging module.

Tests verify:
- Service metadata and ECS field renaming processors
- configure_logging builds the JSON or console chain
- DEBUG is filtered at INFO level
- configure_from_settings follows RecordKitSettings
"""

import json
import logging

import pytest
import structlog

from recordkit import logging as rk_logging
from recordkit.logging import (
    _add_service_metadata,
    _elasticsearch_compatible,
    configure_from_settings,
    configure_logging,
    get_logger,
)
from recordkit.settings import RecordKitSettings


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    rk_logging._SERVICE_NAME = "recordkit"


def _render(event_dict: dict) -> object:
    """Run *event_dict* through the configured processor chain."""
    logger = logging.getLogger("recordkit.tests")
    result = event_dict
    for processor in structlog.get_config()["processors"]:
        result = processor(logger, "info", result)
    return result


class TestProcessors:
    def test_service_metadata_added(self):
        event = _add_service_metadata(None, "info", {"event": "x"})
        assert event["service.name"] == "recordkit"

    def test_service_metadata_not_overwritten(self):
        event = _add_service_metadata(None, "info", {"event": "x", "service.name": "other"})
        assert event["service.name"] == "other"

    def test_elasticsearch_renames(self):
        event = _elasticsearch_compatible(
            None, "info", {"event": "x", "timestamp": "t", "level": "info"}
        )
        assert event == {"event": "x", "@timestamp": "t", "log.level": "info"}

    def test_elasticsearch_leaves_missing_fields(self):
        assert _elasticsearch_compatible(None, "info", {"event": "x"}) == {"event": "x"}


class TestConfigureLogging:
    def test_json_chain(self):
        configure_logging(level="INFO", json_format=True, service="birthdays")
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[0], structlog.processors.TimeStamper)
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert _elasticsearch_compatible in processors
        assert not any(
            isinstance(p, structlog.processors.StackInfoRenderer) for p in processors
        )

    def test_json_output(self):
        configure_logging(level="INFO", json_format=True, service="birthdays")
        rendered = json.loads(_render({"event": "record_fetched", "collection": "birthdays"}))
        assert rendered["event"] == "record_fetched"
        assert rendered["service.name"] == "birthdays"
        assert rendered["log.level"] == "info"
        assert "@timestamp" in rendered
        assert rendered["logger"] == "recordkit.tests"

    def test_console_chain(self):
        configure_logging(level="INFO", json_format=False)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert _elasticsearch_compatible not in processors

    def test_without_timestamp(self):
        configure_logging(json_format=True, add_timestamp=False)
        processors = structlog.get_config()["processors"]
        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_level_filters_debug(self):
        configure_logging(level="INFO", json_format=True)
        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper.debug is not wrapper.info
        assert wrapper.debug(object(), "ignored") is None

    def test_debug_level(self):
        configure_logging(level="debug", json_format=True)
        assert structlog.get_config()["wrapper_class"] is structlog.make_filtering_bound_logger(
            logging.DEBUG
        )


class TestConfigureFromSettings:
    def test_console(self):
        configure_from_settings(RecordKitSettings(log_level="WARNING", log_format="console"))
        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)
        assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.WARNING)

    def test_json(self):
        configure_from_settings(RecordKitSettings(log_format="json"))
        assert isinstance(
            structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer
        )


class TestGetLogger:
    def test_returns_bindable_logger(self):
        logger = get_logger("recordkit.tests")
        bound = logger.bind(collection="birthdays")
        assert hasattr(bound, "debug")
        assert hasattr(bound, "info")

    def test_routes_to_stdlib_logger(self):
        logger = get_logger("recordkit.tests")
        assert isinstance(logger.bind()._logger, logging.Logger)
        assert logger.bind()._logger.name == "recordkit.tests"


class TestUnconfigured:
    def test_library_events_not_printed(self, capsys, caplog):
        structlog.reset_defaults()
        from recordkit import Database

        with caplog.at_level(logging.DEBUG, logger="recordkit"):
            with Database.open("sqlite://", echo=False):
                pass

        assert capsys.readouterr().out == ""
        assert "database_opened" in caplog.text

    def test_debug_hidden_without_configuration(self, capsys):
        structlog.reset_defaults()
        get_logger("recordkit.tests").debug("quiet_event")
        captured = capsys.readouterr()
        assert "quiet_event" not in captured.out
        assert "quiet_event" not in captured.err
