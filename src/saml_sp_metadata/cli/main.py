"""Main CLI entry point for the SAML SP metadata generator.

This module provides the main Click command group for the sp-metadata CLI.
"""

from pathlib import Path
from typing import Optional

import click

from saml_sp_metadata import __version__
from saml_sp_metadata.cli.metadata_commands import metadata_group
from saml_sp_metadata.config import (
    get_certificates_config,
    get_logging_config,
    get_service_provider_settings,
    load_config,
)
from saml_sp_metadata.logging_audit import configure_logging
from saml_sp_metadata.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="sp-metadata")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-secrets",
    is_flag=True,
    help="Redact private keys and certificates from logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_secrets: bool,
) -> None:
    """SP Metadata - SAML 2.0 Service Provider metadata generator.

    Builds the metadata document an Identity Provider imports to configure
    a Service Provider: entity ID, assertion consumer and logout endpoints,
    signing and encryption certificates.

    Common usage:

        # Generate metadata from options
        sp-metadata metadata generate --issuer urn:example:sp \\
            --callback-url https://sp.example.com/acs

        # Use a configuration file
        sp-metadata --config config/sp.json metadata generate

        # Enable verbose logging for debugging
        sp-metadata --verbose metadata generate ...

    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)
    ctx.obj["config"] = config_obj

    ctx.obj["verbose"] = verbose
    ctx.obj["redact_secrets"] = redact_secrets
    ctx.obj["log_file"] = log_file

    # Precedence: CLI flags > config file > defaults
    logging_config = get_logging_config(config_obj)
    log_level = "DEBUG" if verbose else logging_config.level
    log_file_path = log_file if log_file else logging_config.log_file
    redact_setting = redact_secrets or logging_config.redact_secrets

    configure_logging(
        level=log_level, log_file=log_file_path, redact_secrets=redact_setting
    )


cli.add_command(metadata_group)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        sp-metadata config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")

    sp = get_service_provider_settings(config_obj)
    certs = get_certificates_config(config_obj)
    logging_config = get_logging_config(config_obj)

    click.echo("\nService Provider:")
    if sp:
        click.echo(f"  Entity ID:        {sp.issuer or 'Not configured'}")
        click.echo(f"  ACS URL:          {sp.callback_url or 'Not configured'}")
        click.echo(f"  SLO URL:          {sp.logout_callback_url or 'Not configured'}")
        click.echo(f"  NameID format:    {sp.identifier_format or 'Not configured'}")
        click.echo(f"  Want signed:      {sp.want_assertions_signed}")
    else:
        click.echo("  Not configured (supply --issuer and --callback-url)")

    signing = ", ".join(str(p) for p in certs.signing_cert_paths) or "Not configured"
    click.echo("\nCertificates:")
    click.echo(f"  Signing certs:    {signing}")
    click.echo(f"  Signing key:      {certs.private_key_path or 'Not configured'}")
    click.echo(f"  Decryption cert:  {certs.decryption_cert_path or 'Not configured'}")
    click.echo(f"  Decryption key:   {certs.decryption_key_path or 'Not configured'}")

    click.echo("\nLogging:")
    click.echo(f"  Level:            {logging_config.level}")
    click.echo(f"  Log file:         {logging_config.log_file}")
    click.echo(f"  Redact secrets:   {logging_config.redact_secrets}")


cli.add_command(config)


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"sp-metadata version {__version__}")


if __name__ == "__main__":
    cli()
