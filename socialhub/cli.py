"""Command line interface for SocialHub."""

import asyncio
import sys
from typing import Optional

import click
from alembic import command

from socialhub.api.dependencies import get_password_service, get_token_service
from socialhub.core.auth.exceptions import UserAlreadyExistsException
from socialhub.core.auth.services import AuthenticationService
from socialhub.infrastructure.cache.redis_client import get_redis_client
from socialhub.infrastructure.database.init_db import (
    check_database_health,
    get_alembic_config,
    get_database_info,
    init_database,
)
from socialhub.infrastructure.database.repositories.account_repository import SqlAccountRepository
from socialhub.infrastructure.database.session import close_db_connections, get_session_maker
from socialhub.settings import get_settings
from socialhub.utils.logging import setup_logging


def mask_secret(value: Optional[str]) -> str:
    """Hide all but the last four characters of a secret."""
    if not value:
        return "<not set>"
    if len(value) <= 4:
        return "****"
    return "****" + value[-4:]


@click.group()
def cli():
    """SocialHub CLI."""
    setup_logging()


@cli.command()
@click.option("--migrations/--no-migrations", default=False, help="Run Alembic migrations instead of create_all")
def init_db(migrations: bool):
    """Initialize database tables."""
    click.echo("Initializing database...")

    async def run():
        try:
            await init_database(use_migrations=migrations)
        finally:
            await close_db_connections()

    asyncio.run(run())
    click.echo("Database initialized successfully!")


@cli.command()
def migrate():
    """Run database migrations to the latest version."""
    click.echo("Running database migrations...")
    command.upgrade(get_alembic_config(), "head")
    click.echo("Migrations completed successfully!")


@cli.command()
@click.option("--message", "-m", required=True, help="Migration message")
def create_migration(message: str):
    """Create a new migration file."""
    click.echo(f"Creating migration: {message}")
    command.revision(get_alembic_config(), message=message, autogenerate=True)
    click.echo("Migration created successfully!")


@cli.command()
def current():
    """Show current migration version."""
    command.current(get_alembic_config(), verbose=True)


@cli.command()
@click.option("--username", prompt=True, help="Admin username")
@click.option("--email", prompt=True, help="Admin email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Admin password")
@click.option("--name", default="Administrator", show_default=True, help="Display name")
def create_admin(username: str, email: str, password: str, name: str):
    """Create an admin account, or promote an existing account with this email."""

    async def run() -> int:
        try:
            session_maker = get_session_maker()
            async with session_maker() as session:
                repository = SqlAccountRepository(session)
                account = await repository.get_user_by_email(email)
                if account is None:
                    auth_service = AuthenticationService(
                        repository, get_password_service(), get_token_service(), get_settings()
                    )
                    try:
                        result = await auth_service.register_user(username, email, password, name)
                    except UserAlreadyExistsException as e:
                        click.echo(f"✗ {e.message}")
                        return 1
                    except ValueError as e:
                        click.echo(f"✗ {e}")
                        return 1
                    account = result.account
                    click.echo(f"✓ Account {account.username} created")

                await repository.set_admin(account.id, True)
                await session.commit()
                click.echo(f"✓ {account.username} is now an admin")
                return 0
        finally:
            await close_db_connections()

    sys.exit(asyncio.run(run()))


@cli.command()
def check_db():
    """Check database connectivity and health."""
    click.echo("Checking database health...")

    async def check() -> int:
        try:
            if not await check_database_health():
                click.echo("✗ Database connection failed")
                return 1

            click.echo("✓ Database connection is healthy")
            info = await get_database_info()
            click.echo("\nDatabase statistics:")
            for table, count in info.get("tables", {}).items():
                click.echo(f"  - {table}: {count} records")
            return 0
        finally:
            await close_db_connections()

    sys.exit(asyncio.run(check()))


@cli.command()
def test_redis():
    """Test Redis connectivity."""
    click.echo("Testing Redis connection...")

    async def test() -> int:
        redis_client = get_redis_client()
        try:
            await redis_client.connect()
            if not await redis_client.ping():
                click.echo("✗ Redis ping failed")
                return 1

            click.echo("✓ Redis connection is healthy")

            counted = await redis_client.increment_window("cli_test_counter", 5)
            if counted is None:
                click.echo("✗ Redis counter operations failed")
                return 1
            click.echo("✓ Redis counter operations work correctly")
            return 0
        finally:
            await redis_client.disconnect()

    sys.exit(asyncio.run(test()))


@cli.command()
def show_config():
    """Display current configuration settings."""
    settings = get_settings()

    click.echo("Current configuration:")
    click.echo(f"  Environment: {settings.environment}")
    click.echo(f"  Debug: {settings.debug}")
    click.echo(f"  Database URL: {settings.database_url}")
    click.echo(f"  Redis URL: {settings.redis_url}")
    click.echo(f"  JWT Algorithm: {settings.jwt_algorithm}")
    click.echo(f"  JWT access secret: {mask_secret(settings.jwt_access_secret)}")
    click.echo(f"  JWT refresh secret: {mask_secret(settings.jwt_refresh_secret)}")
    click.echo(f"  Access token expire: {settings.access_token_expire_minutes} minutes")
    click.echo(f"  Refresh token expire: {settings.refresh_token_expire_days} days")
    click.echo(f"  Password reset expire: {settings.password_reset_expire_minutes} minutes")
    click.echo(
        f"  Rate limit: {settings.rate_limit_enabled} "
        f"({settings.rate_limit_max_requests} per {settings.rate_limit_window_seconds}s)"
    )
    click.echo(f"  SMTP host: {settings.smtp_host or '<not set>'}")
    click.echo(f"  SMTP password: {mask_secret(settings.smtp_password)}")
    click.echo(f"  Allowed origins: {', '.join(settings.allowed_origins)}")


@cli.command()
@click.option("--host", default=None, help="Bind host (defaults to settings)")
@click.option("--port", default=None, type=int, help="Bind port (defaults to settings)")
@click.option("--reload/--no-reload", default=None, help="Auto-reload on code changes")
def runserver(host: Optional[str], port: Optional[int], reload: Optional[bool]):
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "socialhub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.debug if reload is None else reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
