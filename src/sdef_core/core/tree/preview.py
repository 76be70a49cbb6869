"""Render dictionaries as plain-text outlines and node details."""

import io
from dataclasses import dataclass

from sdef_core.models.dictionary import ClassDef, Command, Document, Suite

_EMPTY_LIST = "—"


@dataclass(frozen=True)
class NodeDetail:
    """Title and body text describing one selected node."""

    title: str
    details: str


def summarize(document: Document) -> str:
    """Render every suite with its classes and commands as an indented outline.

    Returns:
        One block per suite separated by blank lines, or a placeholder line
        when the document has no suites.
    """
    if not document.suites:
        return "No suites in document."

    out = io.StringIO()
    for suite in document.suites:
        out.write(f"Suite: {suite.name}    Code: {suite.code}\n")

        if suite.classes:
            out.write(f"  Classes ({len(suite.classes)}):\n")
            for class_def in suite.classes:
                out.write(f"    • {class_def.name} [{class_def.code}]\n")
                for prop in class_def.properties:
                    out.write(f"       - {prop.name} : {prop.type} [{prop.code}]\n")
        else:
            out.write("  Classes: 0\n")

        if suite.commands:
            out.write(f"  Commands ({len(suite.commands)}):\n")
            for command in suite.commands:
                out.write(f"    • {command.name} [{command.code}]\n")
                for param in command.parameters:
                    optional = "yes" if param.optional else "no"
                    out.write(
                        f"       - {param.name} : {param.type} [{param.code}] "
                        f"optional={optional}\n"
                    )
        else:
            out.write("  Commands: 0\n")

        # blank line between suites
        out.write("\n")

    return out.getvalue().rstrip("\n")


def _bullets(lines: list[str]) -> str:
    return "\n".join(lines) if lines else _EMPTY_LIST


def describe(node: Suite | ClassDef | Command | None) -> NodeDetail:
    """Describe the selected node of an outline."""
    if node is None:
        return NodeDetail(title="No selection", details="Select an item on the left")

    if isinstance(node, Suite):
        classes = _bullets([f"• {c.name} ({c.code})" for c in node.classes])
        commands = _bullets([f"• {c.name} ({c.code})" for c in node.commands])
        return NodeDetail(
            title=node.name,
            details=(
                f"Code: {node.code}\n\n"
                f"Classes ({len(node.classes)}):\n{classes}\n\n"
                f"Commands ({len(node.commands)}):\n{commands}"
            ),
        )

    if isinstance(node, ClassDef):
        props = _bullets([f"• {p.name}: {p.type} ({p.code})" for p in node.properties])
        return NodeDetail(
            title=f"Class {node.name}",
            details=f"Code: {node.code}\n\nProperties ({len(node.properties)}):\n{props}",
        )

    params = _bullets(
        [
            f"• {p.name}: {p.type}{' (optional)' if p.optional else ''} ({p.code})"
            for p in node.parameters
        ]
    )
    return NodeDetail(
        title=f"Command {node.name}",
        details=f"Code: {node.code}\n\nParameters ({len(node.parameters)}):\n{params}",
    )
