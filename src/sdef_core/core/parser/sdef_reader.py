"""Parse SDEF XML into domain models using a streaming event parser."""

import re
from dataclasses import dataclass, field

from loguru import logger
from lxml import etree

from sdef_core.config import (
    DEFAULT_CLASS_NAME,
    DEFAULT_CODE,
    DEFAULT_COMMAND_NAME,
    DEFAULT_LEAF_CODE,
    DEFAULT_PARAMETER_NAME,
    DEFAULT_PROPERTY_NAME,
    DEFAULT_SUITE_NAME,
    DEFAULT_TYPE,
    SUITE_CODE_LENGTH,
)
from sdef_core.core.encoding.resolver import decode
from sdef_core.errors import DecodeError, ParseError
from sdef_core.models.dictionary import (
    ClassDef,
    Command,
    Document,
    Parameter,
    Property,
    Suite,
)

_FEED_CHUNK_SIZE = 64 * 1024

_TRUE_VALUES = frozenset({"yes", "true", "1"})

# The text is already decoded; a leftover encoding="..." would make libxml2
# try to switch encodings on the UTF-8 payload.
_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml\b[^>]*\?>")

_NCNAME = r"[A-Za-z_][\w.-]*"
_TAG_PREFIX_RE = re.compile(rf"</?\s*({_NCNAME}):{_NCNAME}")
_ATTR_PREFIX_RE = re.compile(rf"\s({_NCNAME}):{_NCNAME}\s*=")
_DECLARED_PREFIX_RE = re.compile(rf"\bxmlns:({_NCNAME})\s*=")
_RESERVED_PREFIXES = frozenset({"xml", "xmlns"})

# Comments, PIs and the doctype are skipped; the first "tag" match is the root.
_ROOT_TAG_RE = re.compile(
    r"<!--.*?-->|<\?.*?\?>|<!DOCTYPE[^\[>]*(?:\[.*?\])?\s*>|<(?P<tag>[^\s/>!?]+)",
    re.DOTALL,
)

UNDECLARED_NAMESPACE_URI = "urn:sdef-core:undeclared:{}"


@dataclass
class _CommandBuilder:
    name: str
    code: str
    parameters: list[Parameter] = field(default_factory=list)

    def build(self) -> Command:
        return Command(name=self.name, code=self.code, parameters=tuple(self.parameters))


@dataclass
class _ClassBuilder:
    name: str
    code: str
    properties: list[Property] = field(default_factory=list)

    def build(self) -> ClassDef:
        return ClassDef(name=self.name, code=self.code, properties=tuple(self.properties))


@dataclass
class _SuiteBuilder:
    name: str
    code: str
    commands: list[Command] = field(default_factory=list)
    classes: list[ClassDef] = field(default_factory=list)

    def build(self) -> Suite:
        return Suite(
            name=self.name,
            code=self.code,
            commands=tuple(self.commands),
            classes=tuple(self.classes),
        )


_Builder = _SuiteBuilder | _ClassBuilder | _CommandBuilder


def _local_name(qualified: str) -> str:
    """Strip a namespace from a tag or attribute name.

    Handles both lxml's "{uri}name" form and a literal "prefix:name".
    """
    if qualified.startswith("{"):
        return qualified.rpartition("}")[2]
    return qualified.rpartition(":")[2]


def _attributes(element: etree._Element) -> dict[str, str]:
    """Attributes keyed by local name; an unprefixed attribute wins over a prefixed one."""
    attrs: dict[str, str] = {}
    for key, value in element.attrib.items():
        local = _local_name(key)
        if local == key or local not in attrs:
            attrs[local] = value
    return attrs


def _name(attrs: dict[str, str], default: str) -> str:
    for key in ("name", "title"):
        value = attrs.get(key)
        if value is not None:
            return value
    return default


def _code(attrs: dict[str, str], default: str) -> str:
    return attrs.get("code") or attrs.get("code-id") or default


def parse_optional(value: str | None) -> bool:
    """Interpret an optional="..." attribute value."""
    return value is not None and value.strip().lower() in _TRUE_VALUES


def _suite_from(attrs: dict[str, str]) -> _SuiteBuilder:
    name = _name(attrs, "").strip() or DEFAULT_SUITE_NAME
    code = _code(attrs, "").strip() or DEFAULT_CODE
    return _SuiteBuilder(name=name, code=code[:SUITE_CODE_LENGTH])


def _parameter_from(attrs: dict[str, str]) -> Parameter:
    return Parameter(
        name=_name(attrs, DEFAULT_PARAMETER_NAME),
        code=_code(attrs, DEFAULT_LEAF_CODE),
        type=attrs.get("type", DEFAULT_TYPE),
        optional=parse_optional(attrs.get("optional")),
    )


def _property_from(attrs: dict[str, str]) -> Property:
    return Property(
        name=_name(attrs, DEFAULT_PROPERTY_NAME),
        code=_code(attrs, DEFAULT_LEAF_CODE),
        type=attrs.get("type", DEFAULT_TYPE),
    )


def _nearest(stack: list[_Builder | None], kind: type) -> _Builder | None:
    for builder in reversed(stack):
        if isinstance(builder, kind):
            return builder
    return None


class _DictionaryBuilder:
    """Turns start/end events into a Document."""

    def __init__(self) -> None:
        self.suites: list[Suite] = []
        # One entry per open suite/class/command element; None marks an
        # element that is ignored because it has no enclosing suite.
        self._stack: list[_Builder | None] = []

    def start(self, tag: str, attrs: dict[str, str]) -> None:
        if tag == "suite":
            self._stack.append(_suite_from(attrs))
        elif tag == "command":
            suite = _nearest(self._stack, _SuiteBuilder)
            self._stack.append(
                _CommandBuilder(
                    name=_name(attrs, DEFAULT_COMMAND_NAME),
                    code=_code(attrs, DEFAULT_CODE),
                )
                if suite is not None
                else None
            )
        elif tag == "class":
            suite = _nearest(self._stack, _SuiteBuilder)
            self._stack.append(
                _ClassBuilder(
                    name=_name(attrs, DEFAULT_CLASS_NAME),
                    code=_code(attrs, DEFAULT_CODE),
                )
                if suite is not None
                else None
            )
        elif tag == "parameter":
            command = _nearest(self._stack, _CommandBuilder)
            if isinstance(command, _CommandBuilder):
                command.parameters.append(_parameter_from(attrs))
        elif tag == "property":
            class_def = _nearest(self._stack, _ClassBuilder)
            if isinstance(class_def, _ClassBuilder):
                class_def.properties.append(_property_from(attrs))

    def end(self, tag: str) -> None:
        if tag not in ("suite", "command", "class"):
            return
        builder = self._stack.pop()
        if builder is None:
            return
        if isinstance(builder, _SuiteBuilder):
            self.suites.append(builder.build())
            return
        suite = _nearest(self._stack, _SuiteBuilder)
        if not isinstance(suite, _SuiteBuilder):
            return
        if isinstance(builder, _CommandBuilder):
            suite.commands.append(builder.build())
        elif isinstance(builder, _ClassBuilder):
            suite.classes.append(builder.build())

    def document(self) -> Document:
        return Document(suites=tuple(self.suites))


def bind_undeclared_prefixes(text: str) -> str:
    """Declare every namespace prefix the text uses but never binds.

    libxml2 rejects an unbound prefix such as <ns:suite ns:name="X">.
    Each one gets a placeholder URI on the root element so that elements
    and attributes can still be matched by local name.
    """
    used = {m.group(1) for m in _TAG_PREFIX_RE.finditer(text)}
    used |= {m.group(1) for m in _ATTR_PREFIX_RE.finditer(text)}
    missing = used - {m.group(1) for m in _DECLARED_PREFIX_RE.finditer(text)}
    missing -= _RESERVED_PREFIXES
    if not missing:
        return text

    root = next((m for m in _ROOT_TAG_RE.finditer(text) if m.group("tag")), None)
    if root is None:
        return text
    declarations = "".join(
        f' xmlns:{prefix}="{UNDECLARED_NAMESPACE_URI.format(prefix)}"'
        for prefix in sorted(missing)
    )
    logger.debug("Binding undeclared namespace prefixes: {}", ", ".join(sorted(missing)))
    end = root.end("tag")
    return text[:end] + declarations + text[end:]


def _make_pull_parser() -> etree.XMLPullParser:
    return etree.XMLPullParser(
        events=("start", "end"),
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
    )


def _syntax_error(exc: etree.XMLSyntaxError) -> ParseError:
    line, column = exc.position if exc.position else (None, None)
    return ParseError(f"Malformed SDEF XML: {exc.msg or exc}", line=line, column=column)


def parse_text(text: str) -> Document:
    """Parse decoded SDEF text into a Document.

    Raises:
        ParseError: The text is empty or not well-formed XML.
    """
    text = _XML_DECLARATION_RE.sub("", text.lstrip("\ufeff"), count=1)
    if not text.strip():
        msg = "Malformed SDEF XML: document is empty"
        raise ParseError(msg)

    payload = bind_undeclared_prefixes(text).encode("utf-8")
    parser = _make_pull_parser()
    builder = _DictionaryBuilder()

    def drain() -> None:
        for event, element in parser.read_events():
            if not isinstance(element.tag, str):
                continue
            tag = _local_name(element.tag)
            if event == "start":
                builder.start(tag, _attributes(element))
            else:
                builder.end(tag)
                if tag == "suite":
                    element.clear()

    try:
        for offset in range(0, len(payload), _FEED_CHUNK_SIZE):
            parser.feed(payload[offset : offset + _FEED_CHUNK_SIZE])
            drain()
        parser.close()
        drain()
    except etree.XMLSyntaxError as exc:
        raise _syntax_error(exc) from exc

    document = builder.document()
    logger.debug("Parsed {} suites", len(document.suites))
    return document


def parse(data: bytes) -> Document:
    """Decode and parse raw SDEF bytes into a Document.

    Raises:
        ParseError: The bytes cannot be decoded, or are not well-formed XML.
    """
    try:
        text = decode(data)
    except DecodeError as exc:
        raise ParseError(str(exc)) from exc
    return parse_text(text)
