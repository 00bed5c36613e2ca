"""Certificate management for SP metadata generation.

This module provides the certificate formatter used when embedding
certificates in metadata (PEM envelope removal), plus loading of PEM
certificates and private keys from disk, expiration checks, and key/certificate
pairing checks for the CLI.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Union

from cryptography import x509
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from ..models.credentials import CertificateInfo
from ..models.metadata import MetadataConfig
from ..utils.exceptions import CertificateLoadError

logger = logging.getLogger(__name__)

_PEM_DELIMITER_PATTERN = re.compile(r"-+(?:BEGIN|END) CERTIFICATE-+")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_certificate(raw_certificate: Union[str, bytes]) -> str:
    """Strip PEM delimiters and whitespace from a certificate.

    The result is the bare base64 body suitable for embedding as the text of
    a ds:X509Certificate element. Idempotent on already-normalized input.

    Args:
        raw_certificate: PEM certificate or bare base64 body

    Returns:
        Base64 certificate body without delimiters or whitespace

    Example:
        >>> normalize_certificate("-----BEGIN CERTIFICATE-----\\nMIIB\\nAQAB\\n-----END CERTIFICATE-----\\n")
        'MIIBAQAB'
    """
    if isinstance(raw_certificate, bytes):
        raw_certificate = raw_certificate.decode("ascii")

    body = _PEM_DELIMITER_PATTERN.sub("", raw_certificate)
    return _WHITESPACE_PATTERN.sub("", body)


def get_certificate_info(cert: x509.Certificate) -> CertificateInfo:
    """Summarize a certificate for display without exposing key material."""
    public_key = cert.public_key()
    return CertificateInfo(
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        not_before=cert.not_valid_before_utc,
        not_after=cert.not_valid_after_utc,
        serial_number=cert.serial_number,
        key_size=getattr(public_key, "key_size", None),
    )


def check_expiration_warning(
    cert: x509.Certificate, warning_days: int = 30
) -> bool:
    """Log a warning for an expired or soon-to-expire certificate.

    IdPs commonly reject metadata advertising expired certificates. The
    check only warns; generation continues.

    Args:
        cert: Certificate about to be embedded in metadata
        warning_days: Warn when fewer than this many days remain

    Returns:
        True if a warning was logged
    """
    now = datetime.now(timezone.utc)
    not_after = cert.not_valid_after_utc
    expiry = not_after.strftime("%Y-%m-%d")
    subject = cert.subject.rfc4514_string()

    if not_after < now:
        logger.warning(f"Certificate {subject} expired on {expiry}")
        return True

    if not_after < now + timedelta(days=warning_days):
        days_remaining = (not_after - now).days
        logger.warning(
            f"Certificate {subject} expiring soon: {days_remaining} days "
            f"remaining (expires: {expiry})"
        )
        return True

    return False


def _read_pem_file(path: Path, kind: str) -> bytes:
    if not path.exists():
        raise CertificateLoadError(f"{kind} file not found: {path}")
    try:
        return path.read_bytes()
    except OSError as e:
        raise CertificateLoadError(f"Cannot read {kind.lower()} file {path}: {e}") from e


def load_pem_certificate(cert_path: Path) -> x509.Certificate:
    """Load an X.509 certificate from a PEM file.

    Expiry is checked on load and logged as a warning.

    Args:
        cert_path: PEM certificate file

    Returns:
        Parsed certificate

    Raises:
        CertificateLoadError: If the file is missing or is not a PEM certificate

    Example:
        >>> cert = load_pem_certificate(Path("certs/sp-signing.pem"))
        >>> cert.subject.rfc4514_string()
        'CN=sp.example.com'
    """
    cert_data = _read_pem_file(cert_path, "Certificate")
    try:
        cert = x509.load_pem_x509_certificate(cert_data, default_backend())
    except ValueError as e:
        raise CertificateLoadError(
            f"Failed to load PEM certificate from {cert_path}: {e}"
        ) from e

    logger.info(
        f"Loaded certificate from {cert_path.name}: "
        f"{get_certificate_info(cert).describe()}"
    )
    check_expiration_warning(cert)
    return cert


def load_pem_private_key(key_path: Path, password: Optional[bytes] = None):
    """Load a private key from a PEM file.

    Args:
        key_path: PEM private key file
        password: Password for an encrypted key

    Returns:
        Private key object

    Raises:
        CertificateLoadError: If the file is missing, malformed, or the
            password is wrong or missing
    """
    key_data = _read_pem_file(key_path, "Private key")
    try:
        private_key = serialization.load_pem_private_key(
            key_data, password=password, backend=default_backend()
        )
    except TypeError as e:
        # Raised for a missing password on an encrypted key and vice versa
        raise CertificateLoadError(
            f"Failed to load PEM private key from {key_path}: {e}. "
            f"Set the key password environment variable for encrypted keys."
        ) from e
    except ValueError as e:
        raise CertificateLoadError(
            f"Failed to load PEM private key from {key_path}: {e}"
        ) from e

    # Only the file name is logged, never key contents
    logger.info(f"Loaded private key from {key_path.name}")
    return private_key


def certificate_to_pem_text(cert: x509.Certificate) -> str:
    """Convert certificate to PEM text."""
    return cert.public_bytes(Encoding.PEM).decode("ascii")


def private_key_to_pem_bytes(private_key) -> bytes:
    """Convert private key to unencrypted PKCS8 PEM bytes."""
    return private_key.private_bytes(
        encoding=Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def private_key_matches_certificate(private_key, cert: x509.Certificate) -> bool:
    """Check whether a private key belongs to a certificate's public key.

    Args:
        private_key: Loaded private key
        cert: X.509 certificate

    Returns:
        True if the public halves are identical
    """
    key_public = private_key.public_key().public_bytes(
        Encoding.DER, PublicFormat.SubjectPublicKeyInfo
    )
    cert_public = cert.public_key().public_bytes(
        Encoding.DER, PublicFormat.SubjectPublicKeyInfo
    )
    return key_public == cert_public


def _warn_if_unpaired(
    private_key, certs: Sequence[x509.Certificate], purpose: str
) -> None:
    if not any(private_key_matches_certificate(private_key, cert) for cert in certs):
        logger.warning(
            f"{purpose.capitalize()} private key does not match any {purpose} "
            f"certificate. The IdP will be unable to use the advertised key."
        )


def load_metadata_credentials(
    issuer: str,
    callback_url: str,
    want_assertions_signed: bool = False,
    logout_callback_url: Optional[str] = None,
    identifier_format: Optional[str] = None,
    signing_cert_paths: Optional[Sequence[Path]] = None,
    private_key_path: Optional[Path] = None,
    decryption_cert_path: Optional[Path] = None,
    decryption_key_path: Optional[Path] = None,
    key_password: Optional[bytes] = None,
) -> MetadataConfig:
    """Build a MetadataConfig from certificate and key files.

    Certificates are parsed to verify they are well formed before being
    embedded. Private keys are loaded only to confirm they are usable and
    that they pair with one of the supplied certificates; the pairing check
    logs a warning rather than failing.

    Args:
        issuer: SP entity identifier
        callback_url: AssertionConsumerService location
        want_assertions_signed: Whether the SP requires signed assertions
        logout_callback_url: Optional SingleLogoutService location
        identifier_format: Optional NameID format URI
        signing_cert_paths: Signing certificate files, in rollover order
        private_key_path: Signing private key file
        decryption_cert_path: Encryption certificate file
        decryption_key_path: Decryption private key file
        key_password: Password for encrypted private keys

    Returns:
        MetadataConfig with PEM text for each certificate and key

    Raises:
        CertificateLoadError: If any file cannot be loaded
    """
    signing_certs: List[x509.Certificate] = [
        load_pem_certificate(path) for path in signing_cert_paths or []
    ]
    decryption_cert = (
        load_pem_certificate(decryption_cert_path) if decryption_cert_path else None
    )

    private_key_pem: Optional[bytes] = None
    if private_key_path:
        private_key = load_pem_private_key(private_key_path, key_password)
        if signing_certs:
            _warn_if_unpaired(private_key, signing_certs, "signing")
        private_key_pem = private_key_to_pem_bytes(private_key)

    decryption_key_pem: Optional[bytes] = None
    if decryption_key_path:
        decryption_key = load_pem_private_key(decryption_key_path, key_password)
        if decryption_cert is not None:
            _warn_if_unpaired(decryption_key, [decryption_cert], "decryption")
        decryption_key_pem = private_key_to_pem_bytes(decryption_key)

    return MetadataConfig(
        issuer=issuer,
        callback_url=callback_url,
        want_assertions_signed=want_assertions_signed,
        logout_callback_url=logout_callback_url,
        identifier_format=identifier_format,
        decryption_cert=(
            certificate_to_pem_text(decryption_cert) if decryption_cert else None
        ),
        decryption_private_key=decryption_key_pem,
        signing_certs=[certificate_to_pem_text(cert) for cert in signing_certs] or None,
        private_key=private_key_pem,
    )
