"""Data models for SP metadata generation."""

from .credentials import CertificateInfo
from .metadata import (
    MetadataConfig,
    MetadataDocument,
    MultipleCertificates,
    NoSigning,
    ResolvedMetadataConfig,
    SigningCertificates,
    SingleCertificate,
)

__all__ = [
    "CertificateInfo",
    "MetadataConfig",
    "MetadataDocument",
    "MultipleCertificates",
    "NoSigning",
    "ResolvedMetadataConfig",
    "SigningCertificates",
    "SingleCertificate",
]
