"""Click CLI for lostfound-cache: inspect profiles and simulate workloads."""

from __future__ import annotations

import logging
import random
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lostfound_cache.cache.stats import CacheMetrics
from lostfound_cache.config.schema import RegistryConfig

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _load_config(config_path: str | None) -> RegistryConfig:
    if not config_path:
        return RegistryConfig()

    from lostfound_cache.config.loader import load_registry_yaml

    try:
        return load_registry_yaml(config_path)
    except Exception as e:
        error_console.print(f"[red]Invalid registry config:[/red] {e}")
        sys.exit(1)


@click.group()
@click.version_option(package_name="lostfound-cache")
def cli() -> None:
    """lostfound-cache: in-memory caching for lost-and-found data."""


@cli.command()
@click.option("--config", "config_path", type=click.Path(exists=True), help="Registry YAML.")
def profiles(config_path: str | None) -> None:
    """Show the budgets of each named cache."""
    from lostfound_cache.cache.sizing import format_bytes

    config = _load_config(config_path)

    table = Table(title="Cache Profiles", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("TTL (s)", justify="right")
    table.add_column("Max size", justify="right")
    table.add_column("Max entries", justify="right")
    table.add_column("Cleanup (s)", justify="right")
    table.add_column("Metrics")

    for name, options in config.profiles.items():
        table.add_row(
            name,
            f"{options.ttl:g}",
            format_bytes(options.max_size),
            str(options.max_entries),
            f"{options.cleanup_interval:g}",
            "on" if options.enable_metrics else "off",
        )

    console.print(table)


@cli.command()
@click.option("--cache", "cache_name", default="post", show_default=True, help="Cache to load.")
@click.option("--operations", type=click.IntRange(min=1), default=1000, show_default=True)
@click.option("--keys", "key_count", type=click.IntRange(min=1), default=300, show_default=True)
@click.option("--seed", type=int, default=0, show_default=True, help="Random seed.")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Registry YAML.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def simulate(
    cache_name: str,
    operations: int,
    key_count: int,
    seed: int,
    config_path: str | None,
    verbose: int,
) -> None:
    """Run a look-aside read workload against one cache and report metrics."""
    from lostfound_cache.cache.registry import CacheRegistry
    from lostfound_cache.errors.exceptions import UnknownCacheError

    _setup_logging(verbose)
    config = _load_config(config_path)

    with CacheRegistry(config) as registry:
        try:
            cache = registry.get(cache_name)
        except UnknownCacheError as e:
            error_console.print(f"[red]{e}[/red]")
            sys.exit(1)

        rng = random.Random(seed)
        fetches = 0
        for _ in range(operations):
            # Skewed towards low ids, like a feed where recent posts are hot
            key = f"{cache_name}_{int(rng.paretovariate(1.2)) % key_count}"
            if cache.get(key) is None:
                fetches += 1
                cache.set(key, {"id": key, "payload": "x" * rng.randint(16, 512)})

        metrics = cache.get_metrics()

    _print_metrics(cache_name, metrics, fetches)


def _print_metrics(name: str, metrics: CacheMetrics, fetches: int) -> None:
    from lostfound_cache.cache.sizing import format_bytes

    table = Table(title=f"Cache Metrics: {name}", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("Hits", str(metrics.hits))
    table.add_row("Misses", str(metrics.misses))
    table.add_row("Hit rate", f"{metrics.hit_rate:.1%}")
    table.add_row("Sets", str(metrics.sets))
    table.add_row("Evictions", str(metrics.evictions))
    table.add_row("Entries", str(metrics.entry_count))
    table.add_row("Size", format_bytes(metrics.total_size))
    table.add_row("Backing fetches", str(fetches))

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli()
