# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Centralized logging configuration with e-mail address redaction.

Message bodies and attribution lines carry personal data, so log output
from entry points can mask e-mail addresses before they reach a handler.

Usage:
    # In entry points (scripts, services)
    from mailnorm.logging import configure_logging
    configure_logging(level=logging.INFO)

    # In library modules
    import logging
    logger = logging.getLogger(__name__)
    logger.debug("Parsed %d blocks", len(blocks))
"""

import logging
import re


_ADDRESS_RE = re.compile(
    r"\b[a-zA-Z0-9._%+\-]+@([a-zA-Z0-9.\-]+\.[a-zA-Z]{2,})\b"
)


def redact_addresses(text: str) -> str:
    """Replace the local part of every e-mail address in *text*.

    ``niko@rumilabs.io`` becomes ``[REDACTED]@rumilabs.io`` so logs still
    show which provider a message came from.
    """
    return _ADDRESS_RE.sub(r"[REDACTED]@\1", text)


class AddressRedactionFilter(logging.Filter):
    """Logging filter that masks e-mail addresses in log output.

    Example:
        handler.addFilter(AddressRedactionFilter())
        logger.info("Attribution: %s", "Bob <bob@co.com> wrote:")
        # Output: "Attribution: Bob <[REDACTED]@co.com> wrote:"
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact addresses in the record's message and string args.

        Args:
            record: The log record to filter.

        Returns:
            Always True (record is never suppressed, only modified).
        """
        record.msg = redact_addresses(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                redact_addresses(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


def configure_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
    redact: bool = True,
) -> None:
    """Configure logging for an application embedding the normalizer.

    Sets up the root logger with a standard format and optional address
    redaction filter.

    Args:
        level: The logging level (e.g., logging.INFO, logging.DEBUG).
        format_string: Custom format string. If None, uses default format.
        redact: Whether to add the AddressRedactionFilter.
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string))

    if redact:
        handler.addFilter(AddressRedactionFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    root_logger.addHandler(handler)
