"""
Command line interface for chatmodes.

Subcommands:
    list      Show every loaded chatmode
    show      Print one chatmode (rendered, or canonical text with --raw)
    validate  Parse files and report errors and warnings
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import ConfigManager, StoreConfig
from .constants import APP_DESCRIPTION, APP_NAME, APP_VERSION
from .errors import FormatError, NotFound
from .loader import ChatmodeLoader, build_store
from .parser import serialize_document
from .schema import ChatmodeDocument
from .store import LoadResult, load_all


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=APP_DESCRIPTION
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}"
    )

    parser.add_argument(
        "-C", "--cwd",
        type=Path,
        default=None,
        help="Directory to discover local chatmodes from (default: current directory)"
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file"
    )

    parser.add_argument(
        "--no-builtin",
        action="store_true",
        help="Do not load the bundled chatmodes"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="List available chatmodes")

    show = subparsers.add_parser("show", help="Show a chatmode")
    show.add_argument("identifier", help="Chatmode slug or path")
    show.add_argument(
        "--raw",
        action="store_true",
        help="Print the canonical document text instead of rendering it"
    )

    validate = subparsers.add_parser("validate", help="Validate chatmode files")
    validate.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Files to validate (default: all discovered chatmode files)"
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool, console: Console) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=verbose)],
        force=True,
    )


def _load_config(args: argparse.Namespace) -> StoreConfig:
    config = ConfigManager(args.config).config
    if args.no_builtin:
        config.include_builtin = False
    return config


def cmd_list(args: argparse.Namespace, console: Console) -> int:
    """List loaded chatmodes."""
    store = build_store(args.cwd, _load_config(args))
    documents = store.list_documents()

    if not documents:
        console.print("[dim]No chatmodes found[/dim]")
    else:
        table = Table(title="Chatmodes", border_style="cyan")
        table.add_column("Slug", style="bold")
        table.add_column("Description")
        table.add_column("Tools", style="magenta")
        table.add_column("Model")
        table.add_column("Source", style="dim")
        for doc in documents:
            table.add_row(
                doc.slug,
                escape(doc.description),
                escape(", ".join(doc.tools)) if doc.tools else "-",
                escape(doc.model or "-"),
                escape(doc.path),
            )
        console.print(table)

    for failure in store.failures():
        _print_error(console, failure.error)

    return 0


def _render_document(doc: ChatmodeDocument, console: Console) -> None:
    lines = [
        f"[bold]Description:[/bold] {escape(doc.description)}",
        f"[bold]Tools:[/bold] {escape(', '.join(doc.tools)) if doc.tools else 'none'}",
        f"[bold]Model:[/bold] {escape(doc.model or 'default')}",
    ]
    for key, value in doc.extra.items():
        lines.append(f"[bold]{escape(key)}:[/bold] {escape(value)}")

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold cyan]{escape(doc.slug)}[/bold cyan]",
        subtitle=escape(doc.path),
        border_style="cyan",
    ))
    console.print(Markdown(doc.body))


def cmd_show(args: argparse.Namespace, console: Console) -> int:
    """Show a single chatmode."""
    store = build_store(args.cwd, _load_config(args))

    try:
        doc = store.get(args.identifier)
    except NotFound as e:
        console.print(f"[bold red]✗[/bold red] {escape(str(e))}")
        if e.available:
            console.print(f"[dim]Available: {', '.join(e.available)}[/dim]")
        return 1
    except FormatError as e:
        _print_error(console, e)
        return 1

    if args.raw:
        console.print(serialize_document(doc), markup=False, highlight=False, end="")
    else:
        _render_document(doc, console)
    return 0


def _print_error(console: Console, error: Optional[FormatError]) -> None:
    if error is None:
        return
    console.print(f"[bold red]✗ {error.kind}[/bold red] {escape(str(error))}", highlight=False)


def _read_sources(paths: list[Path], console: Console) -> tuple[list[tuple[str, str]], int]:
    loader = ChatmodeLoader()
    sources = []
    unreadable = 0
    for path in paths:
        loaded = loader.load_file(path)
        if loaded is None:
            console.print(f"[bold red]✗[/bold red] Cannot read {escape(str(path))}")
            unreadable += 1
            continue
        sources.append(loaded.as_source())
    return sources, unreadable


def cmd_validate(args: argparse.Namespace, console: Console) -> int:
    """Validate chatmode files and report problems."""
    config = _load_config(args)

    if args.paths:
        sources, unreadable = _read_sources(args.paths, console)
    else:
        files = ChatmodeLoader(config).discover(args.cwd or Path.cwd())
        sources, unreadable = [f.as_source() for f in files], 0

    results: list[LoadResult] = list(load_all(sources, config.known_tools))
    failed = unreadable

    for result in results:
        if result.ok:
            console.print(f"[bold green]✓[/bold green] {escape(result.path)}", highlight=False)
            for warning in result.warnings:
                console.print(f"  [yellow]⚠ {escape(warning)}[/yellow]", highlight=False)
        else:
            failed += 1
            _print_error(console, result.error)

    total = len(results) + unreadable
    if total == 0:
        console.print("[dim]No chatmode files to validate[/dim]")
    else:
        console.print(f"\n{total - failed}/{total} valid")

    return 1 if failed else 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "validate": cmd_validate,
}


def main(argv: Optional[list[str]] = None, console: Optional[Console] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    console = console or Console()
    setup_logging(args.verbose, console)

    handler = COMMANDS.get(args.command or "list")
    try:
        return handler(args, console)
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
