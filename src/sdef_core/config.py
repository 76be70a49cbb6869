"""Configuration constants for sdef-core."""

import string

# SDEF output shell.
SDEF_DTD_SYSTEM_ID: str = "file:///System/Library/DTDs/sdef.dtd"
DEFAULT_TITLE: str = "Dictionary"

# Placeholders used when an attribute is missing or empty in the source.
DEFAULT_SUITE_NAME: str = "Untitled Suite"
DEFAULT_COMMAND_NAME: str = "Untitled Command"
DEFAULT_CLASS_NAME: str = "Untitled Class"
DEFAULT_PARAMETER_NAME: str = "param"
DEFAULT_PROPERTY_NAME: str = "property"
DEFAULT_CODE: str = "XXXX"
DEFAULT_LEAF_CODE: str = "pXXX"
DEFAULT_TYPE: str = "anything"

SUITE_CODE_LENGTH: int = 4

# Editing helper defaults.
NEW_SUITE_NAME: str = "New Suite"
NEW_SUITE_CODE_ALPHABET: str = string.ascii_letters + string.digits

# Only this many leading bytes are searched for <?xml ... encoding="..."?>.
XML_DECLARATION_SNIFF_BYTES: int = 1024

# Charset names seen in XML declarations, mapped to Python codec names.
# Names not listed here go through codecs.lookup().
ENCODING_ALIASES: dict[str, str] = {
    "utf-8": "utf-8",
    "utf8": "utf-8",
    "utf-16": "utf-16",
    "utf16": "utf-16",
    "utf-16le": "utf-16-le",
    "utf16le": "utf-16-le",
    "utf-16be": "utf-16-be",
    "utf16be": "utf-16-be",
    "utf-32": "utf-32",
    "utf32": "utf-32",
    "utf-32le": "utf-32-le",
    "utf32le": "utf-32-le",
    "utf-32be": "utf-32-be",
    "utf32be": "utf-32-be",
    "macintosh": "mac-roman",
    "mac-roman": "mac-roman",
    "macosroman": "mac-roman",
    "x-mac-roman": "mac-roman",
    "iso-8859-1": "latin-1",
    "iso8859-1": "latin-1",
    "latin1": "latin-1",
    "latin-1": "latin-1",
    "windows-1252": "cp1252",
    "windows1252": "cp1252",
    "cp1252": "cp1252",
}

# Tried in order once BOM, declaration and detection have all failed.
FALLBACK_ENCODINGS: tuple[str, ...] = (
    "utf-8",
    "utf-16",
    "utf-16-be",
    "utf-16-le",
    "mac-roman",
    "latin-1",
    "cp1252",
)

# Loguru output. The MCP server speaks on stdout, so logs never go there.
LOG_FORMAT: str = "{level.icon} {message}"
LOG_LEVEL: str = "INFO"
VERBOSE_LOG_LEVEL: str = "DEBUG"

# Parsed documents kept by the MCP server, least recently used evicted first.
MAX_CACHED_DOCUMENTS: int = 32
