"""MCP server exposing read-only inspection of SDEF files."""

import threading
from collections import OrderedDict
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import FastMCP

from sdef_core import config
from sdef_core.core.parser.sdef_reader import parse
from sdef_core.core.tree.preview import describe
from sdef_core.core.writer.sdef_writer import render_class, render_command, render_suite
from sdef_core.errors import SdefError
from sdef_core.models.dictionary import (
    ClassDef,
    Command,
    Document,
    Suite,
    find_by_name,
    has_name,
)

# Parsed documents keyed by resolved path, invalidated by modification time.
# Most recently used last; trimmed to config.MAX_CACHED_DOCUMENTS.
_cache: OrderedDict[Path, tuple[float, Document]] = OrderedDict()
_cache_lock = threading.Lock()


def load_document(path: str | Path) -> Document:
    """Parse an SDEF file, reusing the previous result if the file is unchanged.

    Raises:
        OSError: The file cannot be read.
        SdefError: The file cannot be decoded or parsed.
    """
    resolved = Path(path).expanduser().resolve()
    mtime = resolved.stat().st_mtime
    with _cache_lock:
        cached = _cache.get(resolved)
        if cached and cached[0] == mtime:
            _cache.move_to_end(resolved)
            return cached[1]

    document = parse(resolved.read_bytes())
    logger.debug("Loaded {} ({} suites)", resolved, len(document.suites))
    with _cache_lock:
        _cache[resolved] = (mtime, document)
        _cache.move_to_end(resolved)
        while len(_cache) > config.MAX_CACHED_DOCUMENTS:
            evicted, _ = _cache.popitem(last=False)
            logger.debug("Evicted {} from the document cache", evicted)
    return document


def _command_dict(command: Command, suite: Suite) -> dict[str, Any]:
    return {
        "suite": suite.name,
        "name": command.name,
        "code": command.code,
        "parameters": [
            {"name": p.name, "code": p.code, "type": p.type, "optional": p.optional}
            for p in command.parameters
        ],
    }


def _class_dict(class_def: ClassDef, suite: Suite) -> dict[str, Any]:
    return {
        "suite": suite.name,
        "name": class_def.name,
        "code": class_def.code,
        "properties": [
            {"name": p.name, "code": p.code, "type": p.type} for p in class_def.properties
        ],
    }


def _suite_not_found(document: Document, suite: str) -> dict[str, Any]:
    available = ", ".join(s.name for s in document.suites)
    return {"error": f"Suite '{suite}' not found. Available: {available}"}


# --- Core functions (testable without MCP context) ---


def sdef_list_suites(path: str) -> dict[str, Any]:
    """List the suites of an SDEF file with command and class counts."""
    try:
        document = load_document(path)
    except (OSError, SdefError) as exc:
        return {"error": f"Cannot read '{path}': {exc}"}
    return {
        "suites": [
            {
                "name": s.name,
                "code": s.code,
                "commands": len(s.commands),
                "classes": len(s.classes),
            }
            for s in document.suites
        ],
        "count": len(document.suites),
    }


def sdef_get_suite(path: str, *, suite: str) -> dict[str, Any]:
    """Describe one suite: its code, commands and classes."""
    try:
        document = load_document(path)
    except (OSError, SdefError) as exc:
        return {"error": f"Cannot read '{path}': {exc}"}
    found = find_by_name(document.suites, suite)
    if found is None:
        return _suite_not_found(document, suite)
    detail = describe(found)
    return {
        "name": found.name,
        "code": found.code,
        "commands": [c.name for c in found.commands],
        "classes": [c.name for c in found.classes],
        "details": detail.details,
    }


def sdef_get_command(path: str, *, command: str) -> dict[str, Any]:
    """Find a command by name in every suite."""
    try:
        document = load_document(path)
    except (OSError, SdefError) as exc:
        return {"error": f"Cannot read '{path}': {exc}"}
    results = [
        _command_dict(c, s)
        for s in document.suites
        for c in s.commands
        if has_name(c, command)
    ]
    if not results:
        available = sorted({c.name for s in document.suites for c in s.commands})
        return {"error": f"Command '{command}' not found. Available: {', '.join(available)}"}
    return {"results": results, "count": len(results)}


def sdef_get_class(path: str, *, class_name: str) -> dict[str, Any]:
    """Find a class by name in every suite."""
    try:
        document = load_document(path)
    except (OSError, SdefError) as exc:
        return {"error": f"Cannot read '{path}': {exc}"}
    results = [
        _class_dict(c, s)
        for s in document.suites
        for c in s.classes
        if has_name(c, class_name)
    ]
    if not results:
        available = sorted({c.name for s in document.suites for c in s.classes})
        return {"error": f"Class '{class_name}' not found. Available: {', '.join(available)}"}
    return {"results": results, "count": len(results)}


def sdef_render_scope(
    path: str,
    *,
    suite: str,
    command: str | None = None,
    class_name: str | None = None,
) -> dict[str, Any]:
    """Render a suite, or one command or class of it, as standalone SDEF XML."""
    if command and class_name:
        return {"error": "Pass either command or class_name, not both."}
    try:
        document = load_document(path)
    except (OSError, SdefError) as exc:
        return {"error": f"Cannot read '{path}': {exc}"}
    found = find_by_name(document.suites, suite)
    if found is None:
        return _suite_not_found(document, suite)

    if command:
        cmd = find_by_name(found.commands, command)
        if cmd is None:
            return {"error": f"Command '{command}' not found in suite '{found.name}'."}
        return {"xml": render_command(cmd, found.name, found.code)}
    if class_name:
        cls = find_by_name(found.classes, class_name)
        if cls is None:
            return {"error": f"Class '{class_name}' not found in suite '{found.name}'."}
        return {"xml": render_class(cls, found.name, found.code)}
    return {"xml": render_suite(found)}


mcp_server = FastMCP(
    "sdef-core",
    instructions="""\
Inspect AppleScript scripting definition (.sdef) files on disk.

1. Call sdef_list_suites_tool with the file path for an overview.
2. Drill into a suite with sdef_get_suite_tool, or look up commands and
   classes by name across all suites.
3. Use sdef_render_scope_tool to get the XML for a single suite, command
   or class.
""",
)


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def sdef_list_suites_tool(path: str) -> dict[str, Any]:
    """List suites in an SDEF file with counts of commands and classes.

    Args:
        path: Path to the .sdef file.
    """
    return sdef_list_suites(path)


@mcp_server.tool()
async def sdef_get_suite_tool(path: str, suite: str) -> dict[str, Any]:
    """Get the commands and classes of one suite.

    Args:
        path: Path to the .sdef file.
        suite: Suite name (case-insensitive).
    """
    return sdef_get_suite(path, suite=suite)


@mcp_server.tool()
async def sdef_get_command_tool(path: str, command: str) -> dict[str, Any]:
    """Get a command's code and parameters. All suites are searched.

    Args:
        path: Path to the .sdef file.
        command: Command name (case-insensitive).
    """
    return sdef_get_command(path, command=command)


@mcp_server.tool()
async def sdef_get_class_tool(path: str, class_name: str) -> dict[str, Any]:
    """Get a class's code and properties. All suites are searched.

    Args:
        path: Path to the .sdef file.
        class_name: Class name (case-insensitive).
    """
    return sdef_get_class(path, class_name=class_name)


@mcp_server.tool()
async def sdef_render_scope_tool(
    path: str,
    suite: str,
    command: str | None = None,
    class_name: str | None = None,
) -> dict[str, Any]:
    """Render part of a dictionary as standalone SDEF XML.

    Args:
        path: Path to the .sdef file.
        suite: Suite name (case-insensitive).
        command: Optional command within the suite.
        class_name: Optional class within the suite.
    """
    return sdef_render_scope(path, suite=suite, command=command, class_name=class_name)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from sdef_core.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
