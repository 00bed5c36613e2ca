"""Metadata CLI commands.

This module provides CLI commands for SP metadata:
- metadata generate: Build SP metadata XML from options and/or a config file
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from saml_sp_metadata.config import (
    Config,
    ServiceProviderSettings,
    get_certificates_config,
    get_key_password,
    get_service_provider_settings,
)
from saml_sp_metadata.saml import (
    ServiceProviderMetadataGenerator,
    load_metadata_credentials,
)
from saml_sp_metadata.utils.exceptions import (
    CertificateLoadError,
    ConfigurationError,
)

logger = logging.getLogger(__name__)


@click.group(name="metadata")
def metadata_group() -> None:
    """SAML Service Provider metadata commands.

    Generates the metadata document an Identity Provider imports to learn the
    SP's endpoints, bindings and certificates.
    """
    pass


def _pick(cli_value, config_value):
    return cli_value if cli_value is not None else config_value


def _merge_service_provider(
    configured: ServiceProviderSettings, **cli_values
) -> ServiceProviderSettings:
    """Overlay command-line values on configured SP settings and validate.

    Raises:
        click.UsageError: If a merged value is invalid, or issuer or
            callback_url is still missing
    """
    merged = configured.model_dump()
    merged.update({k: v for k, v in cli_values.items() if v is not None})

    try:
        sp = ServiceProviderSettings(**merged)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise click.UsageError(f"Invalid service provider settings: {problems}") from e

    if not sp.issuer or not sp.callback_url:
        raise click.UsageError(
            "Metadata generation requires --issuer and --callback-url. "
            "Provide them as options, in the service_provider config section, "
            "or as SP_METADATA_ISSUER / SP_METADATA_CALLBACK_URL."
        )
    return sp


@metadata_group.command(name="generate")
@click.option("--issuer", type=str, help="SP entity ID")
@click.option("--callback-url", type=str, help="AssertionConsumerService URL (HTTP-POST)")
@click.option("--logout-url", type=str, help="SingleLogoutService URL (HTTP-POST)")
@click.option("--identifier-format", type=str, help="Requested NameID format URI")
@click.option(
    "--want-assertions-signed/--no-want-assertions-signed",
    default=None,
    help="Declare WantAssertionsSigned (default: from config, else off)",
)
@click.option(
    "--signing-cert",
    "signing_certs",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    help="Signing certificate (PEM). Repeat for key rollover; first is preferred.",
)
@click.option(
    "--private-key",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Signing private key (PEM)",
)
@click.option(
    "--decryption-cert",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Encryption certificate (PEM)",
)
@click.option(
    "--decryption-key",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Decryption private key (PEM)",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save metadata to file",
)
@click.option(
    "--format",
    type=click.Choice(["xml", "pretty"]),
    default=None,
    help="Output format (default: pretty)",
)
@click.pass_context
def generate(
    ctx: click.Context,
    issuer: Optional[str],
    callback_url: Optional[str],
    logout_url: Optional[str],
    identifier_format: Optional[str],
    want_assertions_signed: Optional[bool],
    signing_certs: Tuple[Path, ...],
    private_key: Optional[Path],
    decryption_cert: Optional[Path],
    decryption_key: Optional[Path],
    output: Optional[Path],
    format: Optional[str],
) -> None:
    """Generate SAML 2.0 Service Provider metadata.

    Command-line options override values from the configuration file.

    Examples:

        # Minimal metadata
        sp-metadata metadata generate \\
            --issuer https://sp.example.com/metadata \\
            --callback-url https://sp.example.com/saml/acs

        # Signing (with rollover) and encryption
        sp-metadata metadata generate \\
            --issuer https://sp.example.com/metadata \\
            --callback-url https://sp.example.com/saml/acs \\
            --signing-cert certs/new.pem --signing-cert certs/old.pem \\
            --private-key certs/new-key.pem \\
            --decryption-cert certs/enc.pem --decryption-key certs/enc-key.pem \\
            --output sp-metadata.xml
    """
    obj = ctx.obj or {}
    config: Config = obj.get("config") or Config()
    sp = get_service_provider_settings(config) or ServiceProviderSettings()
    certs = get_certificates_config(config)

    try:
        sp = _merge_service_provider(
            sp,
            issuer=issuer,
            callback_url=callback_url,
            logout_callback_url=logout_url,
            identifier_format=identifier_format,
            want_assertions_signed=want_assertions_signed,
        )

        metadata_config = load_metadata_credentials(
            issuer=sp.issuer,
            callback_url=sp.callback_url,
            want_assertions_signed=sp.want_assertions_signed,
            logout_callback_url=sp.logout_callback_url,
            identifier_format=sp.identifier_format,
            signing_cert_paths=list(signing_certs) or certs.signing_cert_paths,
            private_key_path=_pick(private_key, certs.private_key_path),
            decryption_cert_path=_pick(decryption_cert, certs.decryption_cert_path),
            decryption_key_path=_pick(decryption_key, certs.decryption_key_path),
            key_password=get_key_password(config),
        )

        pretty_print = (
            config.output.pretty_print if format is None else format == "pretty"
        )
        generator = ServiceProviderMetadataGenerator(pretty_print=pretty_print)
        metadata_xml = generator.generate(metadata_config)

        output = _pick(output, config.output.output_path)
        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(metadata_xml, encoding="utf-8")
            click.echo(
                click.style("✓", fg="green", bold=True)
                + f" SP metadata saved to: {output}"
            )
        else:
            click.echo(metadata_xml, nl=False)

        logger.info("SP metadata generation completed successfully")

    except click.UsageError:
        raise
    except ConfigurationError as e:
        click.echo(
            click.style("✗", fg="red", bold=True) + f" Configuration error: {e}",
            err=True,
        )
        logger.error(f"Configuration error during metadata generation: {e}")
        raise click.exceptions.Exit(1)
    except CertificateLoadError as e:
        click.echo(
            click.style("✗", fg="red", bold=True) + f" Certificate error: {e}",
            err=True,
        )
        logger.error(f"Certificate error during metadata generation: {e}")
        raise click.exceptions.Exit(1)
