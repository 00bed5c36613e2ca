"""Programmatic SP Metadata Generation Example.

This example demonstrates using the ServiceProviderMetadataGenerator class
to build SAML 2.0 Service Provider metadata from Python code.

Key features demonstrated:
- Minimal metadata with only an entity ID and ACS URL
- Signing key rollover with two advertised certificates
- Encryption certificate with advertised EncryptionMethod algorithms
- Key/certificate precondition errors
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from lxml import etree

# Add src to path for running as standalone script
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from saml_sp_metadata import (
    ConfigurationError,
    MetadataConfig,
    ServiceProviderMetadataGenerator,
)

MD_NS = "urn:oasis:names:tc:SAML:2.0:metadata"


def _self_signed(common_name):
    """Create a throwaway self-signed certificate and PKCS8 key (PEM)."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=365))
        .sign(key, hashes.SHA256())
    )
    cert_pem = cert.public_bytes(serialization.Encoding.PEM).decode("ascii")
    key_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return cert_pem, key_pem


def example_minimal_metadata():
    """Example 1: Minimal metadata with required parameters only."""
    print("\n" + "=" * 70)
    print("Example 1: Minimal SP Metadata")
    print("=" * 70)

    generator = ServiceProviderMetadataGenerator()
    xml = generator.generate(
        MetadataConfig(
            issuer="https://sp.example.com/metadata",
            callback_url="https://sp.example.com/saml/acs",
        )
    )

    print(f"\n✓ Metadata Generated:")
    print("-" * 70)
    print(xml)
    print("-" * 70)
    return xml


def example_signing_rollover():
    """Example 2: Two signing certificates during key rollover."""
    print("\n" + "=" * 70)
    print("Example 2: Signing Certificate Rollover")
    print("=" * 70)

    new_cert, new_key = _self_signed("sp-signing-2025")
    old_cert, _ = _self_signed("sp-signing-2024")

    generator = ServiceProviderMetadataGenerator()
    document = generator.build_document(
        MetadataConfig(
            issuer="https://sp.example.com/metadata",
            callback_url="https://sp.example.com/saml/acs",
            logout_callback_url="https://sp.example.com/saml/slo",
            want_assertions_signed=True,
            signing_certs=[new_cert, old_cert],
            private_key=new_key,
        )
    )

    descriptor = document["EntityDescriptor"]["SPSSODescriptor"]
    print(f"\n✓ Document Assembled:")
    print(f"  • AuthnRequestsSigned: {descriptor['@AuthnRequestsSigned']}")
    print(f"  • WantAssertionsSigned: {descriptor['@WantAssertionsSigned']}")
    print(f"  • Signing KeyDescriptors: {len(descriptor['KeyDescriptor'])}")
    return document


def example_encryption():
    """Example 3: Encryption certificate and supported algorithms."""
    print("\n" + "=" * 70)
    print("Example 3: Encryption Certificate")
    print("=" * 70)

    enc_cert, enc_key = _self_signed("sp-encryption")

    xml = ServiceProviderMetadataGenerator(pretty_print=False).generate(
        MetadataConfig(
            issuer="urn:example:sp",
            callback_url="https://sp.example.com/saml/acs",
            identifier_format="urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress",
            decryption_cert=enc_cert,
            decryption_private_key=enc_key,
        )
    )

    root = etree.fromstring(xml.encode("utf-8"))
    algorithms = root.xpath(
        "//md:KeyDescriptor[@use='encryption']/md:EncryptionMethod/@Algorithm",
        namespaces={"md": MD_NS},
    )
    print(f"\n✓ Advertised encryption algorithms:")
    for algorithm in algorithms:
        print(f"  • {algorithm}")
    return xml


def example_precondition_error():
    """Example 4: A private key without its certificate is rejected."""
    print("\n" + "=" * 70)
    print("Example 4: Precondition Error")
    print("=" * 70)

    _, key = _self_signed("orphan-key")
    try:
        ServiceProviderMetadataGenerator().generate(
            MetadataConfig(
                issuer="urn:example:sp",
                callback_url="https://sp.example.com/saml/acs",
                private_key=key,
            )
        )
    except ConfigurationError as e:
        print(f"\n✗ Rejected as expected: {e}")


def main():
    """Run all examples."""
    print("\n" + "=" * 70)
    print("SP METADATA GENERATION EXAMPLES")
    print("=" * 70)

    example_minimal_metadata()
    example_signing_rollover()
    example_encryption()
    example_precondition_error()

    print("\n" + "=" * 70)
    print("✓ All examples completed")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    main()
