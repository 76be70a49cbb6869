"""Parse, edit and write AppleScript scripting definition (SDEF) files."""

from sdef_core.core.encoding.resolver import DecodedText, decode, resolve
from sdef_core.core.parser.sdef_reader import parse, parse_text
from sdef_core.core.tree.preview import NodeDetail, describe, summarize
from sdef_core.core.writer.sdef_writer import (
    escape_attribute,
    render,
    render_class,
    render_classes,
    render_command,
    render_commands,
    render_suite,
    render_text,
)
from sdef_core.errors import DecodeError, ParseError, SdefError
from sdef_core.models.dictionary import (
    ClassDef,
    Command,
    Document,
    Parameter,
    Property,
    Suite,
    add_suite,
    find_by_name,
)
from sdef_core.protocols import DocumentObserver
from sdef_core.session import DictionarySession

__all__ = [
    "ClassDef",
    "Command",
    "DecodeError",
    "DecodedText",
    "DictionarySession",
    "Document",
    "DocumentObserver",
    "NodeDetail",
    "Parameter",
    "ParseError",
    "Property",
    "SdefError",
    "Suite",
    "add_suite",
    "decode",
    "describe",
    "escape_attribute",
    "find_by_name",
    "parse",
    "parse_text",
    "render",
    "render_class",
    "render_classes",
    "render_command",
    "render_commands",
    "render_suite",
    "render_text",
    "resolve",
    "summarize",
]
