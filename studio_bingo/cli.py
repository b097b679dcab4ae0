"""Maintenance commands, available as ``flask <command>``."""

from __future__ import annotations

import click
from flask import Flask

from studio_bingo.models.base import Base
from studio_bingo.services.rate_limiter import RateLimiter


def register_cli(app: Flask) -> None:
    @click.command("init-db")
    def init_db_command():
        """Create all tables (no-op for tables that already exist)."""
        engine = app.extensions["engine"]
        Base.metadata.create_all(bind=engine)
        click.echo(f"Tables ready on {engine.url.render_as_string(hide_password=True)}")

    @click.command("purge-ratelimits")
    def purge_ratelimits_command():
        """Delete rate-limit counters whose window has ended."""
        session = app.extensions["session_factory"]()
        try:
            removed = RateLimiter().purge_expired(session)
        finally:
            session.close()
        click.echo(f"Removed {removed} expired rate-limit counters")

    app.cli.add_command(init_db_command)
    app.cli.add_command(purge_ratelimits_command)
