"""Certificate summary used when logging loaded credentials."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class CertificateInfo:
    """Display-safe view of an X.509 certificate.

    Attributes:
        subject: Subject DN in RFC 4514 form
        issuer: Issuer DN in RFC 4514 form
        not_before: Start of validity (UTC)
        not_after: End of validity (UTC)
        serial_number: Certificate serial number
        key_size: Public key size in bits, None for key types without one
    """

    subject: str
    issuer: str
    not_before: datetime
    not_after: datetime
    serial_number: int
    key_size: Optional[int]

    def describe(self) -> str:
        """One-line description for log messages."""
        key = f"{self.key_size}-bit" if self.key_size else "unknown size"
        return (
            f"{self.subject} (serial {self.serial_number:x}, {key}, "
            f"expires {self.not_after.strftime('%Y-%m-%d')})"
        )
