"""Command-line interface for the SAML SP metadata generator."""
