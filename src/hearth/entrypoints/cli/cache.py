"""Cache maintenance commands: ``hearth cache prune`` and ``hearth cache clear``.

Both commands act on the caches of the project's current environment
(``<CACHE_PATH>/<APP_ENV>``). Pruning only drops expired items and is safe to
run from cron; clearing drops everything and asks first unless ``--force`` is
given.
"""

from __future__ import annotations

import click

from hearth.bootstrap import build_cache_registry

from .app import load_settings
from .helpers import success, warn

CLEAR_WARNING = "This will remove every cached item of the {env} environment."


@click.group()
def cache() -> None:
    """Application cache commands."""


@cache.command()
@click.pass_context
def prune(ctx: click.Context) -> None:
    """Remove expired items from every cache."""
    settings = load_settings(ctx)
    registry = build_cache_registry(settings)
    try:
        for name, removed in registry.prune_all().items():
            success(f"Pruned {removed} expired item(s) from cache '{name}'")
    finally:
        registry.close()


@cache.command()
@click.option("--force", is_flag=True, help="Clear without confirmation.")
@click.pass_context
def clear(ctx: click.Context, force: bool) -> None:
    """Remove every item from every cache."""
    settings = load_settings(ctx)
    if not force:
        warn(CLEAR_WARNING.format(env=settings.app_env))
        click.secho(f"cache: {click.style(str(settings.cache_dir), underline=True)}")
        click.confirm("Are you sure you want to proceed?", abort=True)

    registry = build_cache_registry(settings)
    try:
        for name, handle in registry.items():
            handle.clear()
            success(f"Cleared cache '{name}'")
    finally:
        registry.close()
