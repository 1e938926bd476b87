import logging

from audio_relay.logging_setup import configure_logging
from audio_relay.settings import LoggingSettings


def test_configure_logging_applies_level_and_format(mocker):
    basic_config = mocker.patch("logging.basicConfig")

    configure_logging(LoggingSettings(level="DEBUG", format="%(message)s"))

    basic_config.assert_called_once_with(level=logging.DEBUG, format="%(message)s")


def test_configure_logging_unknown_level_falls_back_to_info(mocker):
    basic_config = mocker.patch("logging.basicConfig")

    configure_logging(LoggingSettings(level="CHATTY", format="%(message)s"))

    assert basic_config.call_args.kwargs["level"] == logging.INFO
