"""
Tests for channel-aware logging configuration.
"""

import pytest

from hubgen.core.logging import (
    LogChannel,
    LogLevel,
    configure_logging,
    get_current_config,
    get_logger,
    get_pass_logger,
)


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure_logging(level="info", format="console", channels=None, force=True)


def test_level_from_string():
    assert LogLevel.from_string("VERBOSE") == LogLevel.VERBOSE
    assert LogLevel.from_string("warning") == LogLevel.INFO
    assert LogLevel.from_string("nonsense") == LogLevel.INFO


def test_channel_from_string():
    assert LogChannel.from_string("fake") == LogChannel.FAKE
    assert LogChannel.from_string("nope") is None


def test_configure_filters_channels():
    configure_logging(level="verbose", format="json", channels=["validate", "bogus", "fake"], force=True)

    assert get_current_config() == {
        "level": "VERBOSE",
        "format": "json",
        "channels": ["FAKE", "VALIDATE"],
    }
    assert get_logger(LogChannel.VALIDATE)._should_log(LogLevel.VERBOSE)
    assert not get_logger(LogChannel.RENDER)._should_log(LogLevel.INFO)


def test_configure_is_sticky_without_force():
    configure_logging(level="debug", force=True)
    configure_logging(level="silent")
    assert get_current_config()["level"] == "DEBUG"


def test_silent_suppresses_everything():
    configure_logging(level="silent", force=True)
    log = get_logger(LogChannel.SYSTEM)
    assert not log._should_log(LogLevel.INFO)
    log.error("ignored")


@pytest.mark.parametrize("pass_name,channel", [
    ("p00_check_marker", LogChannel.DISCOVERY),
    ("p30_validate", LogChannel.VALIDATE),
    ("p40_synthesize", LogChannel.SYNTHESIS),
    ("p50_render", LogChannel.RENDER),
    ("p99_custom", LogChannel.PIPELINE),
])
def test_pass_logger_channel(pass_name, channel):
    log = get_pass_logger(pass_name)
    assert log.channel == channel
    assert log.name == f"hubgen.{pass_name}"
