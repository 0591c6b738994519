"""Tests for LoggingConfig and YAML-backed LoggingSettings."""

import pytest

from looplog.errors import ConfigurationError
from looplog.importance import Importance
from looplog.runtime.config import LoggingConfig, LoggingSettings, load_settings
from looplog.runtime.faults import CrashOnError, ErrorPrinter, LoggerDisabler
from looplog.sinks import CachingSink, NullSink, RecordingSink


class TestLoggingConfig:
    def test_defaults(self):
        config = LoggingConfig()
        assert isinstance(config.sink, NullSink)
        assert config.minimum_importance == Importance.DEBUG
        assert isinstance(config.error_handler, ErrorPrinter)
        assert config.root == "Robot"

    def test_defaults_are_not_shared(self):
        assert LoggingConfig().sink is not LoggingConfig().sink


class TestImportanceParsing:
    @pytest.mark.parametrize("value", ["info", "INFO", " Info ", 2, Importance.INFO])
    def test_parse(self, value):
        assert Importance.parse(value) is Importance.INFO

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown importance"):
            Importance.parse("verbose")

    def test_ordering(self):
        assert Importance.NONE < Importance.DEBUG < Importance.INFO < Importance.CRITICAL


class TestLoggingSettings:
    def test_defaults(self):
        settings = LoggingSettings()
        assert settings.minimum_importance == Importance.DEBUG
        assert settings.error_handler == "print"
        assert settings.lazy is False

    def test_to_config(self):
        settings = LoggingSettings(minimum_importance="critical", error_handler="crash", root="/Arm/")
        sink = RecordingSink()
        config = settings.to_config(sink)
        assert config.sink is sink
        assert config.minimum_importance == Importance.CRITICAL
        assert isinstance(config.error_handler, CrashOnError)
        assert config.root == "Arm"

    def test_lazy_wraps_sink_in_cache(self):
        sink = RecordingSink()
        config = LoggingSettings(lazy=True).to_config(sink)
        assert isinstance(config.sink, CachingSink)
        assert config.sink.parent is sink

    def test_disable_uses_max_errors(self):
        config = LoggingSettings(error_handler="disable", max_errors=3).to_config()
        assert isinstance(config.error_handler, LoggerDisabler)
        assert config.error_handler.threshold == 3
        assert isinstance(config.sink, NullSink)

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValueError):
            LoggingSettings(sink="file")

    def test_rejects_negative_max_errors(self):
        with pytest.raises(ValueError):
            LoggingSettings(max_errors=-1)

    def test_rejects_empty_root(self):
        with pytest.raises(ValueError):
            LoggingSettings(root=" / ")


class TestLoadSettings:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "looplog.yaml"
        path.write_text(
            "minimum_importance: info\n"
            "root: Robot\n"
            "error_handler: disable\n"
            "max_errors: 5\n"
            "lazy: true\n",
            encoding="utf-8",
        )
        settings = load_settings(path)
        assert settings.minimum_importance == Importance.INFO
        assert settings.error_handler == "disable"
        assert settings.max_errors == 5
        assert settings.lazy is True

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == LoggingSettings()

    def test_invalid_values_raise_configuration_error(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("minimum_importance: loud\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="bad.yaml"):
            load_settings(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- info\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(path)
