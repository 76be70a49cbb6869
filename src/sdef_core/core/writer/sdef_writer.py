"""Serialize dictionary models back into SDEF XML."""

from collections.abc import Iterable

from loguru import logger

from sdef_core.config import DEFAULT_TITLE, SDEF_DTD_SYSTEM_ID
from sdef_core.models.dictionary import ClassDef, Command, Document, Parameter, Property, Suite

_INDENT = "  "

# "&" must come first so later substitutions are not escaped twice.
_ATTRIBUTE_ESCAPES: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    # Parsers normalize raw whitespace in attribute values to spaces.
    ("\n", "&#10;"),
    ("\r", "&#13;"),
    ("\t", "&#9;"),
)


def escape_attribute(value: str) -> str:
    """Escape a string for use inside a double-quoted XML attribute."""
    for raw, entity in _ATTRIBUTE_ESCAPES:
        value = value.replace(raw, entity)
    return value


def _attrs(**values: str) -> str:
    return " ".join(f'{key}="{escape_attribute(value)}"' for key, value in values.items())


def _parameter_line(parameter: Parameter, depth: int) -> str:
    attrs = _attrs(
        name=parameter.name,
        code=parameter.code,
        type=parameter.type,
        optional="yes" if parameter.optional else "no",
    )
    return f"{_INDENT * depth}<parameter {attrs}/>"


def _property_line(prop: Property, depth: int) -> str:
    attrs = _attrs(name=prop.name, code=prop.code, type=prop.type)
    return f"{_INDENT * depth}<property {attrs}/>"


def _command_lines(command: Command, depth: int) -> list[str]:
    indent = _INDENT * depth
    lines = [f"{indent}<command {_attrs(name=command.name, code=command.code)}>"]
    lines.extend(_parameter_line(p, depth + 1) for p in command.parameters)
    lines.append(f"{indent}</command>")
    return lines


def _class_lines(class_def: ClassDef, depth: int) -> list[str]:
    indent = _INDENT * depth
    lines = [f"{indent}<class {_attrs(name=class_def.name, code=class_def.code)}>"]
    lines.extend(_property_line(p, depth + 1) for p in class_def.properties)
    lines.append(f"{indent}</class>")
    return lines


def _suite_lines(
    name: str,
    code: str,
    commands: Iterable[Command] = (),
    classes: Iterable[ClassDef] = (),
) -> list[str]:
    # Commands are always written before classes.
    lines = [f"{_INDENT}<suite {_attrs(name=name, code=code)}>"]
    for command in commands:
        lines.extend(_command_lines(command, 2))
    for class_def in classes:
        lines.extend(_class_lines(class_def, 2))
    lines.append(f"{_INDENT}</suite>")
    return lines


def _wrap(body: list[str], title: str | None = None) -> str:
    opening = "<dictionary>" if title is None else f"<dictionary {_attrs(title=title)}>"
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<!DOCTYPE dictionary SYSTEM "{SDEF_DTD_SYSTEM_ID}">',
        opening,
        *body,
        "</dictionary>",
    ]
    return "\n".join(lines) + "\n"


def render_text(document: Document, title: str | None = DEFAULT_TITLE) -> str:
    """Render a whole document as SDEF text.

    Args:
        document: The dictionary to serialize.
        title: Value of the dictionary's title attribute; None omits it.
    """
    body: list[str] = []
    for suite in document.suites:
        body.extend(_suite_lines(suite.name, suite.code, suite.commands, suite.classes))
    logger.debug("Rendered {} suites", len(document.suites))
    return _wrap(body, title)


def render(document: Document, title: str | None = DEFAULT_TITLE) -> bytes:
    """Render a whole document as UTF-8 encoded SDEF bytes."""
    return render_text(document, title).encode("utf-8")


def render_suite(suite: Suite) -> str:
    """Render a single suite as a standalone SDEF document."""
    return _wrap(_suite_lines(suite.name, suite.code, suite.commands, suite.classes))


def render_commands(commands: Iterable[Command], suite_name: str, suite_code: str) -> str:
    """Render a list of commands wrapped in their owning suite."""
    return _wrap(_suite_lines(suite_name, suite_code, commands=commands))


def render_classes(classes: Iterable[ClassDef], suite_name: str, suite_code: str) -> str:
    """Render a list of classes wrapped in their owning suite."""
    return _wrap(_suite_lines(suite_name, suite_code, classes=classes))


def render_command(command: Command, suite_name: str, suite_code: str) -> str:
    return render_commands((command,), suite_name, suite_code)


def render_class(class_def: ClassDef, suite_name: str, suite_code: str) -> str:
    return render_classes((class_def,), suite_name, suite_code)
