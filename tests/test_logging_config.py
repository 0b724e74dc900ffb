"""
Unit tests for logging configuration and secret redaction.
"""

import logging

import pytest

from rotauth.logging_config import SecretRedactionFilter, get_logging_config, redact


@pytest.mark.parametrize(
    "text,expected",
    [
        ("cookie ct0=deadbeef123; lang=en", "cookie ct0=***; lang=en"),
        ('{"guest_token":"abc123","x":1}', '{"guest_token":"***","x":1}'),
        ("authorization: Bearer AAAAxyz", "authorization: Bearer ***"),
        ("rotated to credential 2/3", "rotated to credential 2/3"),
    ],
)
def test_redact(text, expected):
    """Test credential values are masked and other text is untouched."""
    assert redact(text) == expected


def test_filter_rewrites_formatted_message():
    """Test the filter masks values passed as log arguments."""
    record = logging.LogRecord("rotauth", logging.INFO, __file__, 1, "cookie: %s", ("ct0=abc;",), None)

    assert SecretRedactionFilter().filter(record) is True
    assert record.getMessage() == "cookie: ct0=***;"


def test_logging_config_applies_filter():
    """Test every handler carries the redaction filter."""
    config = get_logging_config("DEBUG")

    assert config["loggers"]["rotauth"]["level"] == "DEBUG"
    for handler in config["handlers"].values():
        assert "secret_filter" in handler["filters"]
