"""Shared test fixtures."""

from pathlib import Path

import pytest

from sdef_core.core.parser.sdef_reader import parse
from sdef_core.models.dictionary import Document

SAMPLE_SDEF = b"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE dictionary SYSTEM "file:///System/Library/DTDs/sdef.dtd">
<dictionary title="Sample">
  <suite name="Standard Suite" code="core">
    <command name="open" code="aevtodoc">
      <direct-parameter type="file"/>
      <parameter name="using" code="usin" type="application" optional="yes"/>
    </command>
    <command name="close" code="coreclos">
      <parameter name="saving" code="savo" type="save options"/>
    </command>
    <class name="document" code="docu">
      <property name="name" code="pnam" type="text"/>
      <property name="modified" code="imod" type="boolean"/>
    </class>
  </suite>
  <suite name="Text Suite" code="TEXT">
    <class name="paragraph" code="cpar"/>
  </suite>
</dictionary>
"""


@pytest.fixture
def sample_bytes() -> bytes:
    return SAMPLE_SDEF


@pytest.fixture
def sample_document() -> Document:
    return parse(SAMPLE_SDEF)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Write the sample dictionary to disk and return its path."""
    path = tmp_path / "Sample.sdef"
    path.write_bytes(SAMPLE_SDEF)
    return path
