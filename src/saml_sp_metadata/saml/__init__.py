"""SAML 2.0 Service Provider metadata generation module.

This module provides functionality for:
- Validating key/certificate preconditions of an SP configuration
- Assembling the SP metadata document (EntityDescriptor / SPSSODescriptor)
- Loading and normalizing X.509 certificates for embedding in metadata
"""

from saml_sp_metadata.saml.certificate_manager import (
    check_expiration_warning,
    get_certificate_info,
    load_metadata_credentials,
    load_pem_certificate,
    load_pem_private_key,
    normalize_certificate,
    private_key_matches_certificate,
)
from saml_sp_metadata.saml.metadata_generator import (
    ENCRYPTION_ALGORITHMS,
    ServiceProviderMetadataGenerator,
    build_metadata_document,
    generate_service_provider_metadata,
    generate_service_provider_metadata_document,
    sanitize_entity_id,
)
from saml_sp_metadata.saml.metadata_validator import resolve_metadata_config

__all__ = [
    # Certificate management
    "check_expiration_warning",
    "get_certificate_info",
    "load_metadata_credentials",
    "load_pem_certificate",
    "load_pem_private_key",
    "normalize_certificate",
    "private_key_matches_certificate",
    # Metadata generation
    "ENCRYPTION_ALGORITHMS",
    "ServiceProviderMetadataGenerator",
    "build_metadata_document",
    "generate_service_provider_metadata",
    "generate_service_provider_metadata_document",
    "resolve_metadata_config",
    "sanitize_entity_id",
]
