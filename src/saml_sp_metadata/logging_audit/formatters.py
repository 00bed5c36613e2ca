"""Custom log formatters for the SAML SP metadata generator.

This module provides specialized formatters for logging, including redaction
of key material that may end up in log messages.
"""

import logging
import re
from typing import List, Tuple


class SecretRedactingFormatter(logging.Formatter):
    """Formatter that redacts private keys and certificate bodies from log messages.

    Attributes:
        redact_secrets: Whether to enable redaction
        patterns: List of (regex_pattern, replacement_text) tuples for redaction

    Example:
        >>> formatter = SecretRedactingFormatter(
        ...     fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        ...     redact_secrets=True
        ... )
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_secrets: bool = False,
    ) -> None:
        """Initialize the SecretRedactingFormatter.

        Args:
            fmt: Log message format string
            datefmt: Date format string (optional)
            redact_secrets: Whether to enable redaction
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_secrets = redact_secrets

        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # PEM private keys: PKCS8, RSA, EC and encrypted variants
            (
                re.compile(
                    r"-----BEGIN ([A-Z ]*)PRIVATE KEY-----.*?-----END \1PRIVATE KEY-----",
                    re.DOTALL,
                ),
                "[PRIVATE-KEY-REDACTED]",
            ),
            # PEM certificates
            (
                re.compile(
                    r"-----BEGIN CERTIFICATE-----.*?-----END CERTIFICATE-----",
                    re.DOTALL,
                ),
                "[CERTIFICATE-REDACTED]",
            ),
            # Key/password assignments: password=secret, private_key='...'
            (
                re.compile(r"(password|private_key)=[\"']?[^\"'\s,)]+[\"']?"),
                r"\1=[REDACTED]",
            ),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional secret redaction.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with secrets redacted if enabled
        """
        original = super().format(record)

        if self.redact_secrets:
            for pattern, replacement in self.patterns:
                original = pattern.sub(replacement, original)

        return original
