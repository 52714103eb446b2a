"""
Command-line interface for the license dashboard.
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from licdash.common.config import Config
from licdash.common.crypto import CryptoUtils
from licdash.server import start_server
from licdash.server.keygen import KeyGenerator


@click.group()
def cli() -> None:
    """License dashboard CLI"""


@cli.command()
@click.option(
    "--secret-file",
    default=None,
    help="File to save the token signing secret (default: ./licdash/server/secret.key)",
)
@click.option("--force", is_flag=True, help="Overwrite an existing secret")
def keygen(secret_file: str | None, force: bool) -> None:  # noqa: FBT001
    """Generate the token signing secret"""
    path = Path(secret_file) if secret_file else None
    generator = KeyGenerator(path)
    try:
        saved = generator.generate_secret(overwrite=force)
    except FileExistsError as exc:
        raise click.ClickException(f"{exc}. Use --force to replace it.") from exc
    click.echo(f"Secret generated and saved to {saved}")


@cli.command("hash-password")
@click.password_option(help="Operator password to hash")
def hash_password(password: str) -> None:
    """Print a password hash for LICDASH_ADMIN_PASSWORD_HASH"""
    click.echo(CryptoUtils.hash_password(password))


@cli.command()
@click.option(
    "--secret-file",
    default=None,
    help="File to load the signing secret from (default: ./licdash/server/secret.key)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind server to (default: from LICDASH_SERVER_HOST env or 127.0.0.1)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind server to (default: from LICDASH_SERVER_PORT env or 8989)",
)
@click.option(
    "--data-file",
    default=None,
    help="JSON dataset to serve (default: built-in sample data)",
)
@click.option(
    "--revoked-file",
    default=None,
    help="File where revocations are persisted",
)
def serve(  # noqa: PLR0913
    secret_file: str | None,
    host: str | None,
    port: int | None,
    data_file: str | None,
    revoked_file: str | None,
) -> None:
    """Start the dashboard server"""
    # Set environment variables before building the config
    if secret_file:
        os.environ["LICDASH_SECRET_KEY_FILE"] = secret_file
    if host:
        os.environ["LICDASH_SERVER_HOST"] = host
    if port:
        os.environ["LICDASH_SERVER_PORT"] = str(port)
    if data_file:
        os.environ["LICDASH_DATA_FILE"] = data_file
    if revoked_file:
        os.environ["LICDASH_REVOKED_FILE"] = revoked_file

    config = Config()
    try:
        config.get_secret_key()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    start_server(config)


if __name__ == "__main__":
    cli()
