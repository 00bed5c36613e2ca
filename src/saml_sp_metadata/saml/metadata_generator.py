"""SAML 2.0 Service Provider metadata generation.

This module assembles the SP metadata document (EntityDescriptor with a single
SPSSODescriptor) from a validated configuration. The document is a nested
mapping tree following the xml_serializer convention and is built bottom-up:
every child structure is complete before its parent is composed.

Child element order inside SPSSODescriptor follows the SAML metadata schema
sequence: KeyDescriptor*, SingleLogoutService, NameIDFormat,
AssertionConsumerService.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from ..models.metadata import MetadataConfig, MetadataDocument, ResolvedMetadataConfig
from ..utils.xml_serializer import render
from .certificate_manager import normalize_certificate
from .metadata_validator import resolve_metadata_config

logger = logging.getLogger(__name__)

# Namespaces
METADATA_NS = "urn:oasis:names:tc:SAML:2.0:metadata"
DS_NS = "http://www.w3.org/2000/09/xmldsig#"

PROTOCOL_SUPPORT_ENUMERATION = "urn:oasis:names:tc:SAML:2.0:protocol"
HTTP_POST_BINDING = "urn:oasis:names:tc:SAML:2.0:bindings:HTTP-POST"

# Encryption algorithms advertised with the encryption KeyDescriptor. Must
# match what the SP's assertion decryption backend supports.
ENCRYPTION_ALGORITHMS = (
    "http://www.w3.org/2009/xmlenc11#aes256-gcm",
    "http://www.w3.org/2009/xmlenc11#aes128-gcm",
    "http://www.w3.org/2001/04/xmlenc#aes256-cbc",
    "http://www.w3.org/2001/04/xmlenc#aes128-cbc",
)

_NON_WORD_PATTERN = re.compile(r"[^A-Za-z0-9_]")


def sanitize_entity_id(issuer: str) -> str:
    """Derive the metadata ID attribute from an entity ID.

    Every character that is not an ASCII letter, digit or underscore becomes
    "_". Length and positions are preserved.

    Example:
        >>> sanitize_entity_id("urn:example:sp")
        'urn_example_sp'
    """
    return _NON_WORD_PATTERN.sub("_", issuer)


def _build_key_info(certificate: str) -> Dict[str, Any]:
    return {
        "ds:X509Data": {
            "ds:X509Certificate": {"#text": normalize_certificate(certificate)},
        },
    }


def _build_signing_key_descriptor(certificate: str) -> Dict[str, Any]:
    return {
        "@use": "signing",
        "ds:KeyInfo": _build_key_info(certificate),
    }


def _build_encryption_key_descriptor(certificate: str) -> Dict[str, Any]:
    return {
        "@use": "encryption",
        "ds:KeyInfo": _build_key_info(certificate),
        "EncryptionMethod": [
            {"@Algorithm": algorithm} for algorithm in ENCRYPTION_ALGORITHMS
        ],
    }


def _build_key_descriptors(resolved: ResolvedMetadataConfig) -> List[Dict[str, Any]]:
    """Build KeyDescriptor entries, signing entries before the encryption entry."""
    descriptors = [
        _build_signing_key_descriptor(certificate)
        for certificate in resolved.signing.certificates
    ]
    if resolved.decryption_cert is not None:
        descriptors.append(_build_encryption_key_descriptor(resolved.decryption_cert))
    return descriptors


def _build_endpoint(location: str) -> Dict[str, str]:
    return {"@Binding": HTTP_POST_BINDING, "@Location": location}


def _build_assertion_consumer_service(callback_url: str) -> Dict[str, str]:
    return {
        "@index": "1",
        "@isDefault": "true",
        **_build_endpoint(callback_url),
    }


def _build_sp_sso_descriptor(resolved: ResolvedMetadataConfig) -> Dict[str, Any]:
    """Build the SPSSODescriptor mapping.

    Attributes come first (protocolSupportEnumeration, AuthnRequestsSigned,
    WantAssertionsSigned), then child elements in schema order.
    """
    descriptor: Dict[str, Any] = {
        "@protocolSupportEnumeration": PROTOCOL_SUPPORT_ENUMERATION,
    }
    if resolved.signing.certificates:
        descriptor["@AuthnRequestsSigned"] = True
    if resolved.want_assertions_signed:
        descriptor["@WantAssertionsSigned"] = True

    if resolved.has_key_material:
        descriptor["KeyDescriptor"] = _build_key_descriptors(resolved)
    if resolved.logout_callback_url is not None:
        descriptor["SingleLogoutService"] = _build_endpoint(
            resolved.logout_callback_url
        )
    if resolved.identifier_format is not None:
        descriptor["NameIDFormat"] = resolved.identifier_format
    descriptor["AssertionConsumerService"] = _build_assertion_consumer_service(
        resolved.callback_url
    )

    return descriptor


def build_metadata_document(resolved: ResolvedMetadataConfig) -> MetadataDocument:
    """Assemble the metadata document from a resolved configuration.

    Pure and deterministic: identical input yields an identical tree, and a
    fresh tree is built on every call.

    Args:
        resolved: Configuration returned by resolve_metadata_config

    Returns:
        Metadata document mapping with a single EntityDescriptor root
    """
    sp_sso_descriptor = _build_sp_sso_descriptor(resolved)

    document = {
        "EntityDescriptor": {
            "@xmlns": METADATA_NS,
            "@xmlns:ds": DS_NS,
            "@entityID": resolved.issuer,
            "@ID": sanitize_entity_id(resolved.issuer),
            "SPSSODescriptor": sp_sso_descriptor,
        },
    }

    logger.debug(
        f"Assembled metadata document: entityID={resolved.issuer}, "
        f"key_descriptors={len(sp_sso_descriptor.get('KeyDescriptor', []))}"
    )
    return document


def generate_service_provider_metadata_document(
    config: MetadataConfig,
) -> MetadataDocument:
    """Validate the configuration and assemble the metadata document.

    Raises:
        ConfigurationError: If a private key is supplied without its certificate
    """
    resolved = resolve_metadata_config(config)
    return build_metadata_document(resolved)


def generate_service_provider_metadata(
    config: MetadataConfig, pretty_print: bool = True
) -> str:
    """Generate SP metadata XML text.

    Args:
        config: Service Provider metadata configuration
        pretty_print: Indent the XML output (default: True)

    Returns:
        UTF-8 XML metadata document as a string

    Raises:
        ConfigurationError: If a private key is supplied without its certificate

    Example:
        >>> xml = generate_service_provider_metadata(
        ...     MetadataConfig(issuer="sp1", callback_url="https://sp/acs")
        ... )
        >>> "EntityDescriptor" in xml
        True
    """
    document = generate_service_provider_metadata_document(config)
    return render(document, pretty_print=pretty_print)


class ServiceProviderMetadataGenerator:
    """Generate SAML 2.0 Service Provider metadata.

    Attributes:
        pretty_print: Whether generated XML is indented

    Example:
        >>> generator = ServiceProviderMetadataGenerator()
        >>> xml = generator.generate(
        ...     MetadataConfig(
        ...         issuer="https://sp.example.com/metadata",
        ...         callback_url="https://sp.example.com/acs",
        ...         want_assertions_signed=True,
        ...     )
        ... )
    """

    def __init__(self, pretty_print: bool = True) -> None:
        self.pretty_print = pretty_print
        logger.debug(
            f"ServiceProviderMetadataGenerator initialized (pretty_print={pretty_print})"
        )

    def build_document(self, config: MetadataConfig) -> MetadataDocument:
        """Validate the configuration and return the metadata document tree."""
        return generate_service_provider_metadata_document(config)

    def generate(
        self, config: MetadataConfig, pretty_print: Optional[bool] = None
    ) -> str:
        """Generate SP metadata XML text.

        Args:
            config: Service Provider metadata configuration
            pretty_print: Override the instance pretty_print setting

        Returns:
            XML metadata document as a string

        Raises:
            ConfigurationError: If a private key is supplied without its certificate
        """
        logger.info(f"Generating SP metadata: entityID={config.issuer}")
        document = self.build_document(config)
        xml = render(
            document,
            pretty_print=self.pretty_print if pretty_print is None else pretty_print,
        )
        logger.info(f"SP metadata generated successfully: entityID={config.issuer}")
        return xml
