"""Entry point for running saml_sp_metadata as a module.

This allows the package to be executed as:
    python -m saml_sp_metadata
"""

from saml_sp_metadata.cli.main import cli

if __name__ == "__main__":
    cli()
