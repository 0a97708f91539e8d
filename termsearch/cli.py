"""
Command line entry point for termsearch.

Invoked as::

    termsearch [OPTIONS] COMMAND [ARGS]...

Commands
--------
search      Open search terms (or the current selection) in the browser
url         Print the URL a term resolves to
list        List configured search engines
default     Show or set the default search engine
add         Add a search engine
remove      Remove search engines by name or id
show        Show one or all search engines
open        Open the catalog file
"""

import sys
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
import tomli_w
from loguru import logger
from rich.console import Console
from rich.syntax import Syntax

from termsearch.errors import EmptyCatalog, NotFound, PatternError, SearchError, StorageError
from termsearch.search.engine import Engine
from termsearch.services import store
from termsearch.services.catalog import Catalog
from termsearch.utils.helpers import (
    Settings,
    get_selected_text,
    load_settings,
    open_url,
    setup_logging,
)

console = Console()
err_console = Console(stderr=True)


@dataclass
class AppContext:
    """Per-invocation state shared by all commands."""
    settings: Settings
    _catalog: Optional[Catalog] = None

    @property
    def catalog(self) -> Catalog:
        """Load the catalog on first use, exiting if it cannot be loaded."""
        if self._catalog is None:
            try:
                self._catalog = store.load(self.settings.catalog_path)
            except SearchError as exc:
                logger.exception("There was an error loading the catalog")
                err_console.print(f"[red]Error:[/red] {exc}")
                sys.exit(1)
        return self._catalog

    def save(self) -> None:
        """Persist the catalog after a mutating command."""
        try:
            store.save(self.catalog)
        except StorageError as exc:
            logger.exception("Failed to save catalog")
            err_console.print(f"[red]Error:[/red] changes were not saved: {exc}")
            sys.exit(1)


pass_app = click.make_pass_decorator(AppContext)


def _engine_as_toml(engine: Engine) -> Syntax:
    return Syntax(tomli_w.dumps(engine.to_dict()), "toml")


def _select_engine(catalog: Catalog, name: Optional[str]) -> Engine:
    """Engine by name, falling back to the default; exits if neither exists."""
    if name is not None:
        try:
            engine = catalog.where_name(name)
            logger.info(f"Engine '{name}' found")
            return engine
        except NotFound:
            logger.warning(f"There is no engine named '{name}', using the default")

    engine = catalog.default()
    if engine is None:
        logger.error("There is no defined default search engine")
        err_console.print("[red]Error:[/red] no search engine specified and no default defined")
        sys.exit(1)
    return engine


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.version_option(package_name="termsearch")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (defaults to ~/.config/termsearch/settings.toml)",
)
@click.option(
    "--config",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Catalog file, overriding the settings",
)
@click.pass_context
def cli(ctx: click.Context, settings_path: Optional[Path], catalog_path: Optional[Path]) -> None:
    """Open a search term from the command line with your own search engines.

    Without a COMMAND the current selection is searched with the default engine.
    """
    settings = load_settings(settings_path)
    if catalog_path is not None:
        settings.catalog_path = catalog_path
    setup_logging(settings)
    ctx.obj = AppContext(settings=settings)

    if ctx.invoked_subcommand is None:
        ctx.invoke(search_command)


# ---------------------------------------------------------------------------
# search / url commands
# ---------------------------------------------------------------------------


@cli.command(name="search")
@click.argument("terms", nargs=-1)
@click.option("--engine", "-e", "engine_name", default=None, help="Search engine to use")
@pass_app
def search_command(app: AppContext, terms: tuple, engine_name: Optional[str]) -> None:
    """Open TERMS in the browser, one tab per term.

    Without TERMS the currently selected text is searched.
    """
    engine = _select_engine(app.catalog, engine_name)
    queries = list(terms) if terms else [get_selected_text()]

    failed = False
    for query in queries:
        try:
            url = engine.url(query)
        except PatternError as exc:
            err_console.print(f"[red]Unable to generate URL:[/red] {exc}")
            failed = True
            continue
        if not open_url(url, app.settings.browser_command):
            logger.error("Error opening browser")
            err_console.print(f"[red]Error:[/red] could not open {url}")
            failed = True

    if failed:
        sys.exit(1)


@cli.command(name="url")
@click.argument("term")
@click.option("--engine", "-e", "engine_name", default=None, help="Search engine to use")
@pass_app
def url_command(app: AppContext, term: str, engine_name: Optional[str]) -> None:
    """Print the URL TERM resolves to, without opening it."""
    engine = _select_engine(app.catalog, engine_name)
    try:
        click.echo(engine.url(term))
    except PatternError as exc:
        err_console.print(f"[red]Unable to generate URL:[/red] {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# catalog commands
# ---------------------------------------------------------------------------


@cli.command(name="list")
@pass_app
def list_command(app: AppContext) -> None:
    """List configured search engines."""
    for name in app.catalog.names():
        click.echo(f"- {name}")


@cli.command(name="default")
@click.argument("name", required=False)
@pass_app
def default_command(app: AppContext, name: Optional[str]) -> None:
    """Show the default search engine, or set it to NAME."""
    if name is None:
        engine = app.catalog.default()
        if engine is None:
            err_console.print("No default engine defined!")
        else:
            click.echo(f"- {engine.name}")
        return

    try:
        app.catalog.set_default(name)
    except NotFound as exc:
        logger.exception("Failed to update default engine")
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    app.save()


@cli.command(name="add")
@click.argument("name", required=False)
@click.argument("url_pattern", required=False)
@click.argument("pattern", required=False)
@click.argument("regex", required=False)
@click.argument("replacement", required=False)
@click.option("--force", "-f", is_flag=True, default=False, help="Add even if the name is already used")
@click.option("--interactive", "-i", is_flag=True, default=False, help="Prompt for each field")
@pass_app
def add_command(
    app: AppContext,
    name: Optional[str],
    url_pattern: Optional[str],
    pattern: Optional[str],
    regex: Optional[str],
    replacement: Optional[str],
    force: bool,
    interactive: bool,
) -> None:
    """Add a search engine.

    PATTERN is the placeholder inside URL_PATTERN; every match of REGEX in
    the search term is replaced with REPLACEMENT before it is inserted.
    """
    if interactive:
        name = click.prompt("What is the name of the search engine?")
        url_pattern = click.prompt("What is the engine URL pattern?")
        pattern = click.prompt("What pattern are you using?")
        regex = click.prompt("What regex should be applied to the search term?")
        replacement = click.prompt(
            "What should the regex be replaced with?", default="", show_default=False
        )

    fields = [name, url_pattern, pattern, regex, replacement]
    if any(value is None for value in fields):
        raise click.UsageError(
            "NAME, URL_PATTERN, PATTERN, REGEX and REPLACEMENT are required unless --interactive is used"
        )

    if not force and name in app.catalog.names():
        err_console.print(f"The catalog already contains a search engine named {name}")
        sys.exit(1)

    app.catalog.push(Engine.create(name, url_pattern, pattern, regex, replacement))
    app.save()
    console.print(f"[green]Added[/green] {name}")


def _engine_id(value: str) -> str:
    """Normalize an engine id given on the command line."""
    try:
        return str(uuid.UUID(value))
    except ValueError:
        logger.error(f"Unable to convert {value} to an engine id")
        raise click.BadParameter(f"{value!r} is not a valid engine id", param_hint="VALUE") from None


@cli.command(name="remove")
@click.argument("value")
@click.option("--id", "by_id", is_flag=True, default=False, help="Treat VALUE as an engine id")
@pass_app
def remove_command(app: AppContext, value: str, by_id: bool) -> None:
    """Remove every search engine named VALUE (or with id VALUE)."""
    try:
        if by_id:
            removed = app.catalog.remove_where_id(_engine_id(value))
        else:
            removed = app.catalog.remove_where_name(value)
    except EmptyCatalog as exc:
        logger.exception(f"Failed to remove {value} from the search engines list")
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    app.save()
    console.print(f"Removed {removed} engine(s)")


@cli.command(name="show")
@click.argument("value", required=False)
@click.option("--all", "-a", "show_all", is_flag=True, default=False, help="Show every engine")
@click.option("--id", "by_id", is_flag=True, default=False, help="Treat VALUE as an engine id")
@pass_app
def show_command(app: AppContext, value: Optional[str], show_all: bool, by_id: bool) -> None:
    """Show the search engine named VALUE (or with id VALUE), or all of them with --all."""
    if value is None and not show_all:
        raise click.UsageError("Give an engine NAME or --all")

    engine_id = _engine_id(value) if by_id and value is not None else None

    catalog = app.catalog
    if not catalog.engines:
        err_console.print("There are no engines defined")
        sys.exit(1)

    if show_all:
        for engine in catalog.engines:
            console.print(_engine_as_toml(engine))
        return

    try:
        engine = catalog.where_id(engine_id) if by_id else catalog.where_name(value)
    except NotFound as exc:
        logger.warning(str(exc))
        err_console.print(str(exc))
        sys.exit(1)
    console.print(_engine_as_toml(engine))


@cli.command(name="open")
@click.option("--terminal", "-t", is_flag=True, default=False, help="Edit the file in the terminal editor")
@pass_app
def open_command(app: AppContext, terminal: bool) -> None:
    """Open the catalog file."""
    path = app.catalog.path
    if terminal:
        click.edit(filename=str(path))
        logger.info("Catalog file edited in the terminal")
    elif not open_url(str(path), app.settings.browser_command):
        err_console.print(f"[red]Error:[/red] could not open {path}")
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
