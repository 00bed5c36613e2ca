"""SAML 2.0 Service Provider metadata generator."""

from saml_sp_metadata.models.metadata import MetadataConfig
from saml_sp_metadata.saml.metadata_generator import (
    ServiceProviderMetadataGenerator,
    generate_service_provider_metadata,
    generate_service_provider_metadata_document,
)
from saml_sp_metadata.utils.exceptions import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "MetadataConfig",
    "ServiceProviderMetadataGenerator",
    "generate_service_provider_metadata",
    "generate_service_provider_metadata_document",
    "__version__",
]
