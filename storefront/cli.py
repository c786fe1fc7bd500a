import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate
from werkzeug.security import generate_password_hash

from models import db
from models.user import Account, UserProfile
from storefront.services.catalog import seed_catalog
from storefront.utils.phone import normalize_phone


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("seed-catalog")
@with_appcontext
def seed_catalog_command():
    """Load the default candle catalogue."""
    added = seed_catalog()
    click.echo(f"Added {added} products.")


@click.command("create-admin")
@click.option("--email", required=True)
@click.option("--username", required=True)
@click.option("--phone", required=True)
@click.option("--full-name", default="Store Admin")
@click.password_option()
@with_appcontext
def create_admin(email, username, phone, full_name, password):
    """Create an admin account, or promote the account using EMAIL."""
    email = email.strip().lower()
    account = Account.query.filter_by(email=email).first()
    if account is None:
        account = Account(email=email, password_hash=generate_password_hash(password))
        db.session.add(account)
        db.session.flush()
    profile = db.session.get(UserProfile, account.uid)
    if profile is None:
        profile = UserProfile(
            uid=account.uid,
            email=email,
            username=username,
            full_name=full_name,
            phone_number=normalize_phone(phone),
            phone_verified=True,
            email_verified=True,
        )
        db.session.add(profile)
    profile.role = "admin"
    db.session.commit()
    click.echo(f"Admin ready: {account.uid}")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(seed_catalog_command)
    app.cli.add_command(create_admin)
