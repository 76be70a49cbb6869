"""Domain models for an SDEF scripting dictionary."""

import random
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Protocol, TypeVar

from sdef_core.config import (
    DEFAULT_CODE,
    DEFAULT_TYPE,
    NEW_SUITE_CODE_ALPHABET,
    NEW_SUITE_NAME,
    SUITE_CODE_LENGTH,
)


@dataclass(frozen=True)
class Parameter:
    """A named argument of a command."""

    name: str
    code: str
    type: str = DEFAULT_TYPE
    optional: bool = False


@dataclass(frozen=True)
class Command:
    """An action exposed by the scripted application."""

    name: str
    code: str
    parameters: tuple[Parameter, ...] = ()


@dataclass(frozen=True)
class Property:
    """An attribute of a scriptable class."""

    name: str
    code: str
    type: str = DEFAULT_TYPE


@dataclass(frozen=True)
class ClassDef:
    """An object type exposed by the scripted application."""

    name: str
    code: str
    properties: tuple[Property, ...] = ()


@dataclass(frozen=True)
class Suite:
    """A group of related commands and classes."""

    name: str
    code: str = DEFAULT_CODE
    commands: tuple[Command, ...] = ()
    classes: tuple[ClassDef, ...] = ()


@dataclass(frozen=True)
class Document:
    """One scripting dictionary: an ordered list of suites."""

    suites: tuple[Suite, ...] = ()


def random_suite_code(rng: random.Random | None = None) -> str:
    """Generate a random alphanumeric four-character code."""
    chooser = rng or random
    return "".join(chooser.choice(NEW_SUITE_CODE_ALPHABET) for _ in range(SUITE_CODE_LENGTH))


def add_suite(document: Document, name: str = NEW_SUITE_NAME, code: str | None = None) -> Document:
    """Return a new document with an empty suite appended.

    Args:
        document: The document to extend. It is not modified.
        name: Name of the new suite.
        code: Four-character code; a random one is generated when None.

    Returns:
        A new Document whose last suite is the added one.
    """
    suite = Suite(name=name, code=code if code is not None else random_suite_code())
    return replace(document, suites=(*document.suites, suite))


class _Named(Protocol):
    @property
    def name(self) -> str: ...


_N = TypeVar("_N", bound=_Named)


def has_name(item: _Named, name: str) -> bool:
    """Compare an item's name case-insensitively."""
    return item.name.casefold() == name.casefold()


def find_by_name(items: Iterable[_N], name: str) -> _N | None:
    """Return the first item whose name matches, ignoring case."""
    return next((item for item in items if has_name(item, name)), None)
