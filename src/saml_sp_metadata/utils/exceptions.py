"""Custom exception classes for the SAML SP metadata generator.

All exceptions inherit from SPMetadataError to allow catching all custom exceptions.
"""


class SPMetadataError(Exception):
    """Base exception for all SAML SP metadata generator custom exceptions."""

    pass


class ConfigurationError(SPMetadataError):
    """Raised when metadata configuration is invalid.

    Examples:
        - Decryption private key supplied without a decryption certificate
        - Signing private key supplied without any signing certificate
        - Invalid configuration file format or value
    """

    pass


class SAMLError(SPMetadataError):
    """Raised when SAML credential handling fails.

    Examples:
        - Certificate loading failure
        - Private key loading failure
    """

    pass


class CertificateLoadError(SAMLError):
    """Raised when certificate or private key loading fails.

    Examples:
        - Certificate file not found
        - Invalid PEM format
        - Incorrect password for encrypted key
    """

    pass


class SerializationError(SPMetadataError):
    """Raised when a metadata document tree cannot be rendered to XML.

    Examples:
        - Document with zero or several root elements
        - Element name using an undeclared namespace prefix
    """

    pass
