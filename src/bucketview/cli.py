from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Callable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bucketview import __version__
from bucketview.config import get_settings
from bucketview.security.exceptions import InputInvalidError, PathGuardError
from bucketview.security.paths import safe_path
from bucketview.security.redact import friendly_redact, raw_redact
from bucketview.security.validators import (
    validate_bookmark_name,
    validate_bucket_name,
    validate_profile_name,
)
from bucketview.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

app = typer.Typer(
    name="bucketview",
    help="Browse and download objects from S3 buckets in the terminal",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


class IdentifierKind(str, Enum):
    bookmark = "bookmark"
    profile = "profile"
    bucket = "bucket"


VALIDATORS: dict[IdentifierKind, Callable[[str], str]] = {
    IdentifierKind.bookmark: validate_bookmark_name,
    IdentifierKind.profile: validate_profile_name,
    IdentifierKind.bucket: validate_bucket_name,
}


def version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]bucketview[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.command()
def check(
    kind: Annotated[IdentifierKind, typer.Argument(help="Identifier kind to validate")],
    value: Annotated[str, typer.Argument(help="Value to validate")],
) -> None:
    """Validate a bookmark name, profile name or bucket name."""
    try:
        VALIDATORS[kind](value)
    except InputInvalidError as e:
        console.print(f"[red]Invalid {kind.value}:[/red] {escape(e.reason)}")
        raise typer.Exit(1) from None
    console.print(f"[green]✓[/green] valid {kind.value}")


@app.command("safe-path")
def safe_path_command(
    base: Annotated[Path, typer.Argument(help="Download root the path must stay inside")],
    relative: Annotated[str, typer.Argument(help="Relative destination path (e.g. an object key)")],
) -> None:
    """Show where a relative path would be written, or why it is refused."""
    try:
        path = safe_path(base, relative)
    except PathGuardError as e:
        logger.info("Path refused", extra={"error_code": e.error_code})
        console.print(f"[red]Refused:[/red] {escape(e.message)}")
        raise typer.Exit(1) from None
    console.print(escape(str(path)), soft_wrap=True)


@app.command()
def redact(
    message: Annotated[str, typer.Argument(help="Error text to redact")],
    context: Annotated[
        str | None,
        typer.Option("-c", "--context", help="Action label; prints the friendly form"),
    ] = None,
) -> None:
    """Redact sensitive data from an error message."""
    if context:
        console.print(escape(friendly_redact(message, context)), soft_wrap=True)
    else:
        console.print(escape(raw_redact(message)), soft_wrap=True)


@app.command()
def config() -> None:
    """Show the current configuration."""
    settings = get_settings()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Download Directory", escape(raw_redact(str(settings.download_dir))))
    table.add_row("Config Directory", escape(raw_redact(str(settings.config_dir))))
    table.add_row("Profile", settings.profile or "(default)")
    table.add_row("Bucket", settings.bucket or "(prompt)")
    table.add_row("Region", escape(settings.region) or "(from profile)")
    table.add_row("Max Concurrent Downloads", str(settings.max_concurrent_downloads))
    table.add_row("Bookmarks", str(len(settings.bookmarks)))

    console.print(table)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    setup_logging()


if __name__ == "__main__":
    app()
