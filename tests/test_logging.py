# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for logging configuration and address redaction."""

import logging
from collections.abc import Iterator

import pytest

from mailnorm.logging import (
    AddressRedactionFilter,
    configure_logging,
    redact_addresses,
)


@pytest.fixture
def restore_root_logger() -> Iterator[logging.Logger]:
    """Restore root logger handlers and level after the test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _record(msg: str, args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )


def test_redact_addresses() -> None:
    """Local parts are masked, domains kept."""
    assert redact_addresses("Bob <bob.lee@co.com> wrote:") == (
        "Bob <[REDACTED]@co.com> wrote:"
    )
    assert redact_addresses("no address here") == "no address here"


class TestAddressRedactionFilter:
    """Tests for AddressRedactionFilter."""

    def test_redacts_message(self) -> None:
        """Addresses in the message are masked."""
        record = _record("From ann@x.io")
        assert AddressRedactionFilter().filter(record) is True
        assert record.getMessage() == "From [REDACTED]@x.io"

    def test_redacts_string_args(self) -> None:
        """String args are masked, other args are left alone."""
        record = _record("%s sent %d", ("ann@x.io", 3))
        AddressRedactionFilter().filter(record)
        assert record.args == ("[REDACTED]@x.io", 3)
        assert record.getMessage() == "[REDACTED]@x.io sent 3"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_installs_single_handler(
        self, restore_root_logger: logging.Logger
    ) -> None:
        """Existing handlers are replaced by one stream handler."""
        restore_root_logger.addHandler(logging.NullHandler())
        configure_logging(level=logging.DEBUG)
        assert len(restore_root_logger.handlers) == 1
        handler = restore_root_logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert restore_root_logger.level == logging.DEBUG
        assert any(
            isinstance(f, AddressRedactionFilter) for f in handler.filters
        )

    def test_without_redaction(
        self, restore_root_logger: logging.Logger
    ) -> None:
        """Redaction can be disabled."""
        configure_logging(redact=False, format_string="%(message)s")
        handler = restore_root_logger.handlers[0]
        assert handler.filters == []
        assert handler.formatter is not None
        assert handler.formatter._fmt == "%(message)s"
