"""Data models for SP metadata generation.

This module defines the caller-facing metadata configuration, the tagged
variant describing signing certificates, and the resolved configuration
handed from the precondition validator to the document assembler.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple, Union

# Metadata document tree: attribute keys prefixed with "@", element text under
# "#text", lists for repeated sibling elements.
MetadataDocument = Dict[str, Any]

PrivateKeyMaterial = Union[str, bytes]


@dataclass(frozen=True)
class MetadataConfig:
    """Service Provider metadata configuration.

    Attributes:
        issuer: SP entity identifier (entityID)
        callback_url: HTTP-POST AssertionConsumerService location
        want_assertions_signed: Whether the SP requires signed assertions
        logout_callback_url: Optional HTTP-POST SingleLogoutService location
        identifier_format: Requested NameID format URI, None suppresses NameIDFormat
        decryption_cert: Certificate advertised for assertion encryption
        decryption_private_key: Private key enabling assertion decryption
        signing_certs: One certificate or an ordered sequence (key rollover)
        private_key: Private key enabling signed authentication requests

    Example:
        >>> config = MetadataConfig(
        ...     issuer="urn:example:sp",
        ...     callback_url="https://sp.example.com/acs",
        ...     want_assertions_signed=True,
        ... )
    """

    issuer: str
    callback_url: str
    want_assertions_signed: bool = False
    logout_callback_url: Optional[str] = None
    identifier_format: Optional[str] = None
    decryption_cert: Optional[str] = None
    decryption_private_key: Optional[PrivateKeyMaterial] = field(default=None, repr=False)
    signing_certs: Union[None, str, Sequence[str]] = None
    private_key: Optional[PrivateKeyMaterial] = field(default=None, repr=False)


@dataclass(frozen=True)
class NoSigning:
    """Signing capability disabled."""

    @property
    def certificates(self) -> Tuple[str, ...]:
        return ()


@dataclass(frozen=True)
class SingleCertificate:
    """Signing with exactly one certificate."""

    certificate: str

    @property
    def certificates(self) -> Tuple[str, ...]:
        return (self.certificate,)


@dataclass(frozen=True)
class MultipleCertificates:
    """Signing with an ordered set of certificates.

    Order is preserved from the caller; IdPs typically prefer the first
    certificate during key rollover.
    """

    certificates: Tuple[str, ...]


SigningCertificates = Union[NoSigning, SingleCertificate, MultipleCertificates]


@dataclass(frozen=True)
class ResolvedMetadataConfig:
    """Metadata configuration after precondition validation.

    Attributes:
        issuer: SP entity identifier
        callback_url: AssertionConsumerService location
        want_assertions_signed: Whether WantAssertionsSigned is declared
        logout_callback_url: SingleLogoutService location, if any
        identifier_format: NameID format, if any
        signing: Resolved signing certificates
        decryption_cert: Encryption certificate, None when decryption is disabled
    """

    issuer: str
    callback_url: str
    want_assertions_signed: bool
    logout_callback_url: Optional[str]
    identifier_format: Optional[str]
    signing: SigningCertificates
    decryption_cert: Optional[str]

    @property
    def has_key_material(self) -> bool:
        return bool(self.signing.certificates) or self.decryption_cert is not None
