import asyncio
import json
import logging
import sys

import click
from dotenv import load_dotenv

from rotauth.config.provider import EnvConfigProvider
from rotauth.exceptions import ExtractionError, RotauthError
from rotauth.logging_config import configure_logging, redact
from rotauth.modules.auth import AuthFactory
from rotauth.modules.extract import extract_value

load_dotenv()

logger = logging.getLogger("rotauth.cli")


def _mask(value, show_secrets: bool) -> str:
    if value is None:
        return "-"
    if show_secrets:
        return value
    return value[:4] + "***" if len(value) > 4 else "***"


async def _with_service(action):
    """Build the auth service, run one action against it, close it."""
    service = await AuthFactory.build(EnvConfigProvider())
    try:
        return await action(service)
    finally:
        await service.close()


@click.group()
@click.option("--log-level", "log_level", default=None, help="Override LOG_LEVEL")
def main(log_level):
    """Rotating platform credentials."""
    level = log_level or EnvConfigProvider().get_logging_config().level
    configure_logging(level.upper())


@main.command("next")
@click.option("--no-rotate", "no_rotate", is_flag=True, help="Show the current credential instead of rotating")
@click.option("--show-secrets", "show_secrets", is_flag=True, help="Print token values unmasked")
def next_credential(no_rotate: bool, show_secrets: bool):
    """Show the next pooled credential (or the current one with --no-rotate).

    Each invocation builds a fresh service, so rotation starts at the first
    pooled credential every run; rotation state lasts only for one process.
    """

    async def action(service):
        creds = await service.get_current_or_next_credential(rotate=not no_rotate)
        return creds, service.rotator.position, service.rotator.pool_size

    try:
        creds, position, pool_size = asyncio.run(_with_service(action))
    except RotauthError as e:
        raise click.ClickException(str(e))

    click.echo(f"csrf_token: {_mask(creds.csrf_token, show_secrets)}")
    cookie = creds.cookie or "-"
    click.echo(f"cookie: {cookie if show_secrets else redact(cookie)}")
    click.echo(f"next position: {position}/{pool_size}")


@main.command("guest")
@click.option("--refresh", "refresh", is_flag=True, help="Fetch a new guest token")
@click.option("--show-secrets", "show_secrets", is_flag=True, help="Print the token unmasked")
def guest(refresh: bool, show_secrets: bool):
    """Fetch a guest token."""

    async def action(service):
        return await service.get_guest_credential(force_refresh=refresh)

    try:
        creds = asyncio.run(_with_service(action))
    except RotauthError as e:
        raise click.ClickException(str(e))

    click.echo(f"guest_token: {_mask(creds.guest_token, show_secrets)}")


@main.command("store-cookie")
@click.argument("cookie_text")
def store_cookie(cookie_text: str):
    """Store a credential from observed cookie text."""

    async def action(service):
        return await service.store_observed_credential(cookie_text)

    try:
        stored = asyncio.run(_with_service(action))
    except RotauthError as e:
        raise click.ClickException(str(e))

    if not stored:
        click.echo("No ct0 token found in cookie text - nothing stored", err=True)
        sys.exit(1)
    click.echo("Credential stored")


@main.command("extract")
@click.argument("source", type=click.File("rb"))
@click.argument("key")
def extract(source, key: str):
    """Print the value bound to KEY in the JSON document SOURCE ('-' for stdin)."""
    try:
        value = extract_value(source.read(), key)
    except ExtractionError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(value, separators=(",", ":"), ensure_ascii=False))


if __name__ == "__main__":
    main()
