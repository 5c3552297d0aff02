"""CLI interface for transit"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

import click
import requests
import yaml
from pydantic import ValidationError

from transit.domain.config.app import ClientConfig
from transit.domain.errors import CallAbortedError, InvalidPolicyError
from transit.infrastructure.config.config_manager import ConfigManager, ConfigurationError
from transit.infrastructure.http_client import create_http_client

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger().setLevel(level)
    # urllib3 is chatty at DEBUG; keep it at INFO unless explicitly configured
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_headers(values: Sequence[str]) -> Dict[str, str]:
    """Parse 'Name: value' header arguments

    Args:
        values: Raw header arguments

    Returns:
        Header dictionary

    Raises:
        click.BadParameter: If an argument has no colon or an empty name
    """
    headers: Dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got {raw!r}", param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


def _apply_cli_overrides(
    config: ClientConfig,
    timeout: Optional[float],
    max_attempts: Optional[int],
    retry_delay: Optional[float],
    retry_statuses: Sequence[int],
    ca_bundle: Optional[Path],
    insecure: bool,
) -> ClientConfig:
    """Return a new configuration with CLI overrides applied

    Raises:
        ValidationError: If an override is out of range
    """
    data = config.model_dump()
    if timeout is not None:
        data["timeout"] = timeout
    if max_attempts is not None:
        data["retry"]["max_attempts"] = max_attempts
    if retry_delay is not None:
        data["retry"]["retry_delay"] = retry_delay
    if retry_statuses:
        data["retry"]["retry_statuses"] = list(retry_statuses)
    if ca_bundle is not None:
        data["tls"]["ca_bundle"] = ca_bundle
        data["tls"]["ca_cert_pem"] = None
    if insecure:
        data["tls"]["verify"] = False
    return ClientConfig.model_validate(data)


def _output_response(response: requests.Response, include: bool) -> None:
    """Output response to console

    Args:
        response: Response to print
        include: Print status line and headers before the body
    """
    if include:
        click.echo(f"HTTP {response.status_code} {response.reason or ''}".rstrip())
        for name, value in response.headers.items():
            click.echo(f"{name}: {value}")
        click.echo("")
    click.echo(response.text)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .transit.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """transit - HTTP client with retry, timeout and TLS trust settings"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("method", type=str)
@click.argument("url", type=str)
@click.option("--header", "-H", "headers", multiple=True, help="Request header 'Name: value' (repeatable)")
@click.option("--data", "-d", type=str, help="Request body")
@click.option("--timeout", type=float, help="Overall deadline in seconds. Overrides config.")
@click.option("--max-attempts", type=int, help="Total attempts per call. Overrides config.")
@click.option("--retry-delay", type=float, help="Pause between attempts in seconds. Overrides config.")
@click.option(
    "--retry-status",
    "retry_statuses",
    type=int,
    multiple=True,
    help="Retryable status code (repeatable). Overrides config.",
)
@click.option("--ca-bundle", type=click.Path(exists=True, path_type=Path), help="CA bundle to trust")
@click.option("--insecure", "-k", is_flag=True, help="Disable TLS certificate verification")
@click.option("--include", "-i", is_flag=True, help="Print status line and headers")
@click.option("--fail", "-f", is_flag=True, help="Exit with an error on HTTP status >= 400")
@click.pass_context
def fetch(
    ctx,
    method: str,
    url: str,
    headers: Sequence[str],
    data: Optional[str],
    timeout: Optional[float],
    max_attempts: Optional[int],
    retry_delay: Optional[float],
    retry_statuses: Sequence[int],
    ca_bundle: Optional[Path],
    insecure: bool,
    include: bool,
    fail: bool,
):
    """Send one request and print the response.

    METHOD: HTTP method (GET, POST, ...)
    URL: Absolute URL
    """
    verbose = ctx.obj.get("verbose", False)
    request_headers = parse_headers(headers)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        config = _apply_cli_overrides(
            config_manager.config,
            timeout=timeout,
            max_attempts=max_attempts,
            retry_delay=retry_delay,
            retry_statuses=retry_statuses,
            ca_bundle=ca_bundle,
            insecure=insecure,
        )
    except (ConfigurationError, ValidationError) as e:
        _die(f"Invalid configuration: {e}", verbose=verbose, exc=e)

    logger.info(f"Sending {method.upper()} {url}")
    try:
        with create_http_client(config) as client:
            response = client.request(method, url, headers=request_headers, data=data)
    except (InvalidPolicyError, FileNotFoundError) as e:
        _die(str(e), verbose=verbose, exc=e)
    except CallAbortedError as e:
        _die(f"Request aborted: {e}", verbose=verbose, exc=e)
    except requests.exceptions.RequestException as e:
        _die(f"Request failed: {e}", verbose=verbose, exc=e)

    _output_response(response, include)
    if fail and response.status_code >= 400:
        _die(f"HTTP {response.status_code} from {url}", verbose=verbose)


@cli.command("show-config")
@click.pass_context
def show_config(ctx):
    """Print the resolved configuration as YAML."""
    verbose = ctx.obj.get("verbose", False)
    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)
    click.echo(yaml.safe_dump(config_manager.config.model_dump(mode="json"), sort_keys=False))


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
