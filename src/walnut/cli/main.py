"""Command line interface: run suites and list methods."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from walnut.config import WalnutConfig, load_config
from walnut.core.metadata import Platform
from walnut.core.models import RunResult, StepInvocation
from walnut.core.registry import MethodRegistry, default_registry
from walnut.errors import WalnutError
from walnut.runner.formatter import ConsoleReporter
from walnut.runner.run import TestRun
from walnut.runner.suite import load_suite

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Route the ``walnut`` loggers through a rich handler."""
    root = logging.getLogger("walnut")
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def parse_var(value: str) -> tuple[str, Any]:
    """Split ``KEY=VALUE``; the value is read as YAML so ``3`` and ``true`` keep their types."""
    key, sep, raw = value.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param_hint="--var")
    return key, yaml.safe_load(raw) if raw else ""


def build_registry(paths: list[str]) -> MethodRegistry:
    registry = default_registry()
    for path in paths:
        loaded = registry.load_path(path)
        logger.debug(f"Loaded {len(loaded)} method(s) from {path}")
    return registry


def needs_browser(registry: MethodRegistry, steps: list[StepInvocation]) -> bool:
    for step in steps:
        plugin = registry.get(step.action_type)
        if plugin is not None and plugin.metadata.context is Platform.WEB:
            return True
    return False


async def execute_suite(
    registry: MethodRegistry,
    steps: list[StepInvocation],
    *,
    base_url: str,
    config: WalnutConfig,
    variables: dict[str, Any],
    headless: bool = True,
) -> RunResult:
    """Run ``steps``, launching a Playwright browser when a web method is among them."""
    if not needs_browser(registry, steps):
        run = TestRun(registry, base_url=base_url, config=config, variables=variables)
        return await run.execute(steps)

    try:
        from playwright.async_api import async_playwright
    except ImportError as e:
        raise click.ClickException(
            "Web methods need Playwright: pip install 'walnut-methods[web]'"
        ) from e

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            run = TestRun(registry, base_url=base_url, page=page, config=config, variables=variables)
            return await run.execute(steps)
        finally:
            await browser.close()


@click.group()
@click.version_option(package_name="walnut-methods", prog_name="walnut")
def cli() -> None:
    """Run Walnut custom methods outside the platform."""


@cli.command()
@click.argument("suite", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--base-url", "-u", help="Base URL of the application under test")
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="YAML config file")
@click.option(
    "--methods",
    "-m",
    "methods_paths",
    multiple=True,
    type=click.Path(exists=True, path_type=Path),
    help="Method file or directory to load (repeatable)",
)
@click.option("--var", "variables", multiple=True, help="Seed variable KEY=VALUE (repeatable)")
@click.option("--headed", is_flag=True, help="Show the browser window for web methods")
@click.option("--logs", "show_logs", is_flag=True, help="Show log/warn output of each step")
@click.option("--json", "output_json", is_flag=True, help="Print the run result as JSON")
def run(
    suite: Path,
    base_url: str | None,
    config_path: Path | None,
    methods_paths: tuple[Path, ...],
    variables: tuple[str, ...],
    headed: bool,
    show_logs: bool,
    output_json: bool,
) -> None:
    """Run the steps of a SUITE file."""
    try:
        config = load_config(config_path)
        setup_logging(config.log_level)
        spec = load_suite(suite)
        registry = build_registry([*config.methods_paths, *(str(p) for p in methods_paths)])
    except WalnutError as e:
        raise click.ClickException(e.report_line()) from e
    except (OSError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    seed = dict(spec.variables)
    seed.update(parse_var(v) for v in variables)
    target = base_url or spec.base_url or config.base_url

    result = asyncio.run(
        execute_suite(
            registry,
            spec.to_invocations(),
            base_url=target,
            config=config,
            variables=seed,
            headless=not headed,
        )
    )

    if output_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        ConsoleReporter(console, show_logs=show_logs).report(result)

    raise SystemExit(0 if result.success else 1)


@cli.command()
@click.option(
    "--methods",
    "-m",
    "methods_paths",
    multiple=True,
    type=click.Path(exists=True, path_type=Path),
    help="Method file or directory to load (repeatable)",
)
def methods(methods_paths: tuple[Path, ...]) -> None:
    """List the registered methods."""
    try:
        registry = build_registry([str(p) for p in methods_paths])
    except (OSError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    table = Table(title="Walnut methods")
    table.add_column("Action type", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Context")
    table.add_column("Category")
    table.add_column("Locator", justify="center")

    for plugin in registry:
        meta = plugin.metadata
        table.add_row(
            meta.action_type,
            meta.name,
            meta.context.value,
            meta.category,
            "yes" if meta.needs_locator else "",
        )
    console.print(table)
