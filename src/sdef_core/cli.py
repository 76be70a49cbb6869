"""CLI for sdef-core (decode, show, export, preview, MCP server)."""

from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from sdef_core.config import DEFAULT_TITLE
from sdef_core.core.encoding.resolver import resolve
from sdef_core.core.parser.sdef_reader import parse
from sdef_core.core.tree.preview import summarize
from sdef_core.core.writer.sdef_writer import (
    render,
    render_class,
    render_command,
    render_suite,
)
from sdef_core.errors import DecodeError, ParseError
from sdef_core.logging_config import configure_logging
from sdef_core.models.dictionary import Document, find_by_name

app = typer.Typer(help="Read, inspect and rewrite AppleScript scripting definition files.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _read_bytes(path: Path) -> bytes:
    if not path.is_file():
        logger.error("File not found: {}", path)
        raise typer.Exit(1)
    return path.read_bytes()


def _load(path: Path) -> Document:
    """Read and parse an SDEF file, exiting with status 1 on failure."""
    data = _read_bytes(path)
    try:
        return parse(data)
    except ParseError as exc:
        logger.error("Cannot open {}: {}", path, exc)
        raise typer.Exit(1) from exc


@app.command()
def decode(
    path: Path = typer.Argument(..., help="SDEF or XML file"),
    show_encoding: bool = typer.Option(
        False, "--show-encoding", "-e", help="Print detected encoding to stderr"
    ),
) -> None:
    """Print the decoded text of a file."""
    data = _read_bytes(path)
    try:
        decoded = resolve(data)
    except DecodeError as exc:
        logger.error("Cannot decode {}: {}", path, exc)
        raise typer.Exit(1) from exc
    if show_encoding:
        typer.echo(f"{decoded.encoding} ({decoded.strategy})", err=True)
    typer.echo(decoded.text, nl=False)


@app.command()
def show(path: Path = typer.Argument(..., help="SDEF file")) -> None:
    """Print an outline of suites, classes and commands."""
    typer.echo(summarize(_load(path)))


@app.command()
def export(
    path: Path = typer.Argument(..., help="SDEF file to re-serialize"),
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: stdout)"),
    ] = None,
    title: str = typer.Option(DEFAULT_TITLE, "--title", "-t", help="Dictionary title"),
) -> None:
    """Rewrite a file as normalized UTF-8 SDEF."""
    data = render(_load(path), title)
    if output is None:
        typer.echo(data.decode("utf-8"), nl=False)
        return
    output.write_bytes(data)
    logger.info("Wrote {} bytes to {}", len(data), output)


@app.command()
def preview(
    path: Path = typer.Argument(..., help="SDEF file"),
    suite: str = typer.Option(..., "--suite", "-s", help="Suite name"),
    command: Annotated[
        str | None,
        typer.Option("--command", "-c", help="Command within the suite"),
    ] = None,
    class_name: Annotated[
        str | None,
        typer.Option("--class", "-k", help="Class within the suite"),
    ] = None,
) -> None:
    """Print the XML of one suite, command or class."""
    if command and class_name:
        typer.echo("Pass either --command or --class, not both.")
        raise typer.Exit(1)

    document = _load(path)
    found = find_by_name(document.suites, suite)
    if found is None:
        typer.echo(f"Suite '{suite}' not found.")
        raise typer.Exit(1)

    if command:
        cmd = find_by_name(found.commands, command)
        if cmd is None:
            typer.echo(f"Command '{command}' not found in suite '{found.name}'.")
            raise typer.Exit(1)
        typer.echo(render_command(cmd, found.name, found.code), nl=False)
    elif class_name:
        cls = find_by_name(found.classes, class_name)
        if cls is None:
            typer.echo(f"Class '{class_name}' not found in suite '{found.name}'.")
            raise typer.Exit(1)
        typer.echo(render_class(cls, found.name, found.code), nl=False)
    else:
        typer.echo(render_suite(found), nl=False)


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from sdef_core.mcp.server import run_mcp_server

    run_mcp_server()
