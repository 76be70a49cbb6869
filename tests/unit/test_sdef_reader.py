"""Tests for the streaming SDEF parser."""

import codecs

import pytest

from sdef_core.core.parser import sdef_reader
from sdef_core.core.parser.sdef_reader import (
    bind_undeclared_prefixes,
    parse,
    parse_optional,
    parse_text,
)
from sdef_core.errors import DecodeError, ParseError
from sdef_core.models.dictionary import (
    ClassDef,
    Command,
    Document,
    Parameter,
    Property,
    Suite,
)


def test_parse_end_to_end_scenario() -> None:
    data = (
        b'<?xml version="1.0" encoding="UTF-8"?><dictionary>'
        b'<suite name="Core" code="Core"><command name="open" code="odoc">'
        b'<parameter name="file" code="file" type="alias" optional="yes"/>'
        b"</command></suite></dictionary>"
    )

    doc = parse(data)

    assert doc == Document(
        suites=(
            Suite(
                name="Core",
                code="Core",
                commands=(
                    Command(
                        name="open",
                        code="odoc",
                        parameters=(Parameter("file", "file", "alias", optional=True),),
                    ),
                ),
            ),
        )
    )


def test_parse_sample_preserves_order(sample_document: Document) -> None:
    assert [s.name for s in sample_document.suites] == ["Standard Suite", "Text Suite"]
    core = sample_document.suites[0]
    assert [c.name for c in core.commands] == ["open", "close"]
    assert core.commands[0].parameters == (
        Parameter("using", "usin", "application", optional=True),
    )
    assert core.classes == (
        ClassDef(
            name="document",
            code="docu",
            properties=(
                Property("name", "pnam", "text"),
                Property("modified", "imod", "boolean"),
            ),
        ),
    )
    assert sample_document.suites[1].classes == (ClassDef("paragraph", "cpar"),)


def test_parse_suite_without_attributes_uses_defaults() -> None:
    doc = parse_text("<dictionary><suite/></dictionary>")

    assert doc.suites == (Suite(name="Untitled Suite", code="XXXX"),)


def test_parse_leaves_without_attributes_use_defaults() -> None:
    doc = parse_text(
        "<dictionary><suite><command><parameter/></command>"
        "<class><property/></class></suite></dictionary>"
    )

    suite = doc.suites[0]
    assert suite.commands == (
        Command(
            name="Untitled Command",
            code="XXXX",
            parameters=(Parameter(name="param", code="pXXX", type="anything", optional=False),),
        ),
    )
    assert suite.classes == (
        ClassDef(
            name="Untitled Class",
            code="XXXX",
            properties=(Property(name="property", code="pXXX", type="anything"),),
        ),
    )


def test_parse_falls_back_to_title_and_code_id() -> None:
    doc = parse_text(
        '<dictionary><suite title="Legacy" code-id="lgcy">'
        '<command title="run" code-id="runn"/></suite></dictionary>'
    )

    suite = doc.suites[0]
    assert (suite.name, suite.code) == ("Legacy", "lgcy")
    assert (suite.commands[0].name, suite.commands[0].code) == ("run", "runn")


def test_parse_empty_code_uses_placeholder() -> None:
    doc = parse_text(
        '<dictionary><suite name="S" code=""><class name="c" code="">'
        '<property name="p" code=""/></class></suite></dictionary>'
    )

    class_def = doc.suites[0].classes[0]
    assert doc.suites[0].code == "XXXX"
    assert class_def.code == "XXXX"
    assert class_def.properties[0].code == "pXXX"


def test_parse_truncates_suite_code() -> None:
    doc = parse_text('<dictionary><suite name="Long" code="TOOLONGCODE"/></dictionary>')

    assert doc.suites[0].code == "TOOL"


def test_parse_trims_suite_name_and_code() -> None:
    doc = parse_text('<dictionary><suite name="  Core \n" code=" abc "/></dictionary>')

    assert (doc.suites[0].name, doc.suites[0].code) == ("Core", "abc")


def test_parse_blank_suite_name_uses_placeholder() -> None:
    doc = parse_text('<dictionary><suite name="   " code="abcd"/></dictionary>')

    assert doc.suites[0].name == "Untitled Suite"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("yes", True),
        ("YES", True),
        ("true", True),
        ("True", True),
        ("1", True),
        ("no", False),
        ("", False),
        ("maybe", False),
        (None, False),
    ],
)
def test_parse_optional(value: str | None, expected: bool) -> None:
    assert parse_optional(value) is expected


def test_parse_optional_attribute_on_parameter() -> None:
    doc = parse_text(
        '<dictionary><suite><command name="c">'
        '<parameter name="a" optional="YES"/>'
        '<parameter name="b" optional="no"/>'
        '<parameter name="c"/>'
        "</command></suite></dictionary>"
    )

    params = doc.suites[0].commands[0].parameters
    assert [p.optional for p in params] == [True, False, False]


def test_parse_ignores_namespace_prefixes() -> None:
    plain = parse_text(
        '<dictionary><suite name="X" code="Y">'
        '<class name="c" code="ccls"><property name="p" code="pprp" type="text"/></class>'
        "</suite></dictionary>"
    )
    prefixed = parse_text(
        '<ns:dictionary xmlns:ns="urn:example:sdef"><ns:suite ns:name="X" ns:code="Y">'
        '<ns:class ns:name="c" ns:code="ccls">'
        '<ns:property ns:name="p" ns:code="pprp" ns:type="text"/></ns:class>'
        "</ns:suite></ns:dictionary>"
    )
    default_ns = parse_text(
        '<dictionary xmlns="urn:example:sdef"><suite name="X" code="Y">'
        '<class name="c" code="ccls"><property name="p" code="pprp" type="text"/></class>'
        "</suite></dictionary>"
    )

    assert prefixed == plain
    assert default_ns == plain


def test_parse_tolerates_undeclared_prefixes() -> None:
    plain = parse_text('<dictionary><suite name="X" code="Y"/></dictionary>')

    attrs_too = parse_text(
        '<dictionary><ns:suite ns:name="X" ns:code="Y"></ns:suite></dictionary>'
    )
    elements_only = parse_text('<dictionary><ns:suite name="X" code="Y"/></dictionary>')

    assert attrs_too == plain
    assert elements_only == plain


def test_parse_tolerates_undeclared_prefix_on_root() -> None:
    doc = parse(
        b'<?xml version="1.0" encoding="UTF-8"?>\n'
        b'<!DOCTYPE dictionary SYSTEM "file:///System/Library/DTDs/sdef.dtd">\n'
        b"<!-- <not:root> -->\n"
        b'<sd:dictionary><sd:suite sd:name="Core" sd:code="Core">'
        b'<x:command x:name="open" x:code="odoc">'
        b'<x:parameter x:name="file" x:code="file" x:type="alias" x:optional="yes"/>'
        b"</x:command></sd:suite></sd:dictionary>"
    )

    assert doc == Document(
        suites=(
            Suite(
                name="Core",
                code="Core",
                commands=(
                    Command("open", "odoc", (Parameter("file", "file", "alias", optional=True),)),
                ),
            ),
        )
    )


def test_parse_undeclared_prefix_still_detects_malformed_input() -> None:
    with pytest.raises(ParseError):
        parse_text('<ns:dictionary><ns:suite ns:name="X"></ns:dictionary>')


def test_bind_undeclared_prefixes_leaves_declared_text_alone() -> None:
    text = '<a xmlns:ns="urn:x"><ns:b ns:c="d"/></a>'

    assert bind_undeclared_prefixes(text) == text
    assert 'xmlns:ns="' in bind_undeclared_prefixes("<a><ns:b/></a>")


def test_parse_unprefixed_attribute_wins() -> None:
    doc = parse_text(
        '<dictionary xmlns:ns="urn:example:sdef">'
        '<suite ns:name="prefixed" name="plain" code="abcd"/></dictionary>'
    )

    assert doc.suites[0].name == "plain"


def test_parse_ignores_unknown_elements() -> None:
    doc = parse_text(
        """<dictionary>
          <!-- comment -->
          <suite name="S" code="ssss" description="ignored">
            <documentation><html>text</html></documentation>
            <enumeration name="e" code="enum"><enumerator name="a" code="aaaa"/></enumeration>
            <record-type name="r" code="rrrr"><property name="x" code="xxxx"/></record-type>
            <class name="c" code="cccc">
              <cocoa class="Thing"/>
              <element type="item"/>
              <property name="p" code="pppp" type="text"><cocoa key="p"/></property>
            </class>
          </suite>
        </dictionary>"""
    )

    assert doc.suites == (
        Suite(
            name="S",
            code="ssss",
            classes=(ClassDef("c", "cccc", (Property("p", "pppp", "text"),)),),
        ),
    )


def test_parse_parameter_with_type_children() -> None:
    doc = parse_text(
        '<dictionary><suite><command name="make" code="corecrel">'
        '<parameter name="new" code="kocl"><type type="type"/></parameter>'
        "</command></suite></dictionary>"
    )

    assert doc.suites[0].commands[0].parameters == (Parameter("new", "kocl"),)


def test_parse_ignores_containers_outside_a_suite() -> None:
    doc = parse_text(
        '<dictionary><class name="loose"><property name="p"/></class>'
        '<command name="loose"/></dictionary>'
    )

    assert doc.suites == ()


def test_parse_text_ignores_declared_encoding() -> None:
    doc = parse_text(
        '<?xml version="1.0" encoding="UTF-16"?><dictionary><suite name="A" code="AAAA"/>'
        "</dictionary>"
    )

    assert doc.suites == (Suite(name="A", code="AAAA"),)


def test_parse_utf16_input_matches_utf8_input() -> None:
    body = '<dictionary><suite name="Café" code="cafe"/></dictionary>'
    utf16 = codecs.BOM_UTF16_LE + (
        '<?xml version="1.0" encoding="UTF-16"?>' + body
    ).encode("utf-16-le")
    utf8 = ('<?xml version="1.0" encoding="UTF-8"?>' + body).encode("utf-8")

    assert parse(utf16) == parse(utf8)
    assert parse(utf16).suites[0].name == "Café"


def test_parse_unescapes_entities() -> None:
    doc = parse_text(
        '<dictionary><suite name="A &amp; B &lt;&gt; &quot;q&quot; &apos;s&apos;"/>'
        "</dictionary>"
    )

    assert doc.suites[0].name == "A & B <> \"q\" 's'"


def test_parse_unclosed_suite_raises() -> None:
    with pytest.raises(ParseError, match="Malformed SDEF XML"):
        parse(b'<dictionary><suite name="Core" code="Core"><command name="x"/></dictionary>')


def test_parse_truncated_input_raises() -> None:
    with pytest.raises(ParseError):
        parse(b'<dictionary><suite name="Core" code="Core">')


def test_parse_empty_input_raises() -> None:
    with pytest.raises(ParseError, match="empty"):
        parse(b"")


def test_parse_non_xml_raises() -> None:
    with pytest.raises(ParseError):
        parse_text("this is not xml")


def test_parse_wraps_decode_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(_data: bytes) -> str:
        raise DecodeError("no encoding")

    monkeypatch.setattr(sdef_reader, "decode", _fail)

    with pytest.raises(ParseError) as exc_info:
        parse(b"<dictionary/>")
    assert isinstance(exc_info.value.__cause__, DecodeError)
