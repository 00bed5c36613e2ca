"""
Shared pytest configuration and fixtures.

This module provides fixtures used across all test suites (unit and
integration), including throwaway X.509 certificates and private keys
generated with the cryptography library.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID


@dataclass
class GeneratedCredential:
    """Certificate and private key generated for a test."""

    certificate: x509.Certificate
    private_key: rsa.RSAPrivateKey

    @property
    def cert_pem(self) -> str:
        return self.certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")

    @property
    def key_pem(self) -> bytes:
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def write(self, directory: Path, name: str) -> tuple[Path, Path]:
        """Write certificate and key PEM files, returning (cert_path, key_path)."""
        cert_path = directory / f"{name}_cert.pem"
        key_path = directory / f"{name}_key.pem"
        cert_path.write_text(self.cert_pem)
        key_path.write_bytes(self.key_pem)
        return cert_path, key_path


def _generate_credential(
    common_name: str, days_valid: int = 365, days_offset: int = -1
) -> GeneratedCredential:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "TestOrg"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    not_before = datetime.now(timezone.utc) + timedelta(days=days_offset)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_before + timedelta(days=days_valid))
        .sign(private_key, hashes.SHA256())
    )
    return GeneratedCredential(certificate=cert, private_key=private_key)


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def make_credential() -> Callable[..., GeneratedCredential]:
    """
    Return a factory producing self-signed certificates with RSA keys.

    Returns:
        Callable accepting common_name, days_valid and days_offset.
    """
    return _generate_credential


@pytest.fixture(scope="session")
def signing_credential() -> GeneratedCredential:
    """Primary SP signing certificate and key."""
    return _generate_credential("SP Signing")


@pytest.fixture(scope="session")
def rollover_credential() -> GeneratedCredential:
    """Second SP signing certificate used for key rollover."""
    return _generate_credential("SP Signing Next")


@pytest.fixture(scope="session")
def encryption_credential() -> GeneratedCredential:
    """SP encryption certificate and decryption key."""
    return _generate_credential("SP Encryption")


@pytest.fixture
def credential_files(
    tmp_path: Path,
    signing_credential: GeneratedCredential,
    rollover_credential: GeneratedCredential,
    encryption_credential: GeneratedCredential,
) -> dict[str, Path]:
    """
    Write all test credentials to PEM files.

    Returns:
        dict: Paths keyed by signing_cert, signing_key, rollover_cert,
        rollover_key, encryption_cert, encryption_key.
    """
    signing_cert, signing_key = signing_credential.write(tmp_path, "signing")
    rollover_cert, rollover_key = rollover_credential.write(tmp_path, "rollover")
    encryption_cert, encryption_key = encryption_credential.write(tmp_path, "encryption")
    return {
        "signing_cert": signing_cert,
        "signing_key": signing_key,
        "rollover_cert": rollover_cert,
        "rollover_key": rollover_key,
        "encryption_cert": encryption_cert,
        "encryption_key": encryption_key,
    }


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """
    Remove SP_METADATA_* environment variables for the duration of a test.

    Returns:
        The monkeypatch fixture, for further environment changes.
    """
    import os

    for name in list(os.environ):
        if name.startswith("SP_METADATA_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_logging_handlers():
    """
    Detach handlers installed by configure_logging after each test.

    CliRunner replaces stderr for the duration of an invocation; a console
    handler left on the root logger would keep writing to the closed stream.
    """
    yield
    from saml_sp_metadata.logging_audit import logger as logging_setup

    root_logger = logging.getLogger()
    while logging_setup._installed_handlers:
        handler = logging_setup._installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
