"""
Tests for settings parsing and call-scoped logging context
"""

import logging

import pytest

from tripjournal.core.config import Settings
from tripjournal.core.exceptions import ConfigException
from tripjournal.core.logging import ContextualFormatter, logging_context, set_logging_context


def _stamp() -> str:
    record = logging.LogRecord("tripjournal.test", logging.INFO, __file__, 1, "msg", None, None)
    return ContextualFormatter("%(username)s %(operation)s").format(record)


class TestSettings:

    def test_numeric_values_are_parsed(self, monkeypatch):
        monkeypatch.setenv("JOURNAL_REQUEST_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("JOURNAL_CONNECTIVITY_PROBE_PORT", "8443")

        settings = Settings()

        assert settings.request_timeout_seconds == 12.5
        assert settings.connectivity_probe_port == 8443

    def test_probe_port_defaults_to_api_port(self, monkeypatch):
        monkeypatch.setenv("JOURNAL_API_BASE_URL", "https://journal.example.com")
        monkeypatch.delenv("JOURNAL_CONNECTIVITY_PROBE_PORT", raising=False)

        assert Settings().connectivity_probe_port == 443

    @pytest.mark.parametrize("name,value", [
        ("JOURNAL_REQUEST_TIMEOUT_SECONDS", "30s"),
        ("JOURNAL_CONNECTIVITY_PROBE_PORT", "http"),
        ("JOURNAL_CONNECTIVITY_PROBE_PORT", "80.5"),
        ("JOURNAL_CONNECTIVITY_INTERVAL_SECONDS", "often"),
        ("JOURNAL_CONNECTIVITY_TIMEOUT_SECONDS", "2 sec"),
    ])
    def test_malformed_number_raises_config_exception(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigException) as exc:
            Settings()
        assert name in str(exc.value)
        assert repr(value) in str(exc.value)


class TestLoggingContext:

    def test_context_is_rolled_back_on_exit(self):
        with logging_context(operation="log_in"):
            set_logging_context(username="sam")
            assert _stamp() == "sam log_in"

        assert _stamp() == "N/A N/A"

    def test_nested_operation_restores_outer(self):
        with logging_context(operation="get_trip"):
            with logging_context(operation="get_trips"):
                assert _stamp() == "N/A get_trips"
            assert _stamp() == "N/A get_trip"

    def test_context_is_rolled_back_on_error(self):
        with pytest.raises(RuntimeError):
            with logging_context(username="sam", operation="register"):
                raise RuntimeError("boom")

        assert _stamp() == "N/A N/A"
