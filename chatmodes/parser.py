"""
Front-matter parser for chatmode documents.

Parses the `---` delimited header and Markdown body of a chatmode file into
a ChatmodeDocument, and serializes documents back to the same format.

Format:
    ---
    description: <string>
    tools: ['name1', 'name2']
    model: <string>
    ---
    <body>
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    FRONT_MATTER_MARKER,
    KEY_DESCRIPTION,
    KEY_MODEL,
    KEY_TOOLS,
    RECOGNIZED_KEYS,
)
from .errors import (
    EmptyBody,
    InvalidHeaderLine,
    InvalidToolsList,
    MissingDescription,
    MissingHeader,
    UnterminatedHeader,
)
from .schema import ChatmodeDocument


DEFAULT_PATH = "<string>"

# A single- or double-quoted string; '' escapes a quote inside single quotes
_QUOTED = r"""'(?:[^']|'')*'|"[^"]*\""""

_QUOTED_RE = re.compile(_QUOTED)

_TOOLS_RE = re.compile(
    rf"^(\[\s*(?:(?:{_QUOTED})\s*(?:,\s*(?:{_QUOTED})\s*)*,?\s*)?\])(?:\s+#.*)?$"
)


@dataclass
class HeaderLine:
    """One `key: value` entry from the front matter."""
    key: str
    value: str
    line: int


@dataclass
class ParsedParts:
    """The raw pieces of a document before field extraction.

    Attributes:
        entries: Header entries in the order they appear.
        body: Everything after the closing marker, verbatim.
        body_line: 1-based line number where the body starts.
    """
    entries: list[HeaderLine] = field(default_factory=list)
    body: str = ""
    body_line: int = 1


def _is_marker(line: str) -> bool:
    return line.rstrip() == FRONT_MATTER_MARKER


def _iter_lines(text: str):
    """Yield (line_number, line, end_offset) for each line of text.

    The line excludes its newline; end_offset points just past it.
    """
    pos = 0
    lineno = 0
    length = len(text)
    while pos < length:
        lineno += 1
        newline = text.find("\n", pos)
        if newline == -1:
            yield lineno, text[pos:], length
            return
        yield lineno, text[pos:newline], newline + 1
        pos = newline + 1


def split_document(text: str, path: str = DEFAULT_PATH) -> ParsedParts:
    """Split raw text into header entries and body.

    Args:
        text: Raw document text.
        path: Document identifier used in error messages.

    Returns:
        ParsedParts with the header entries and the verbatim body.

    Raises:
        MissingHeader: If the first line is not a `---` marker.
        UnterminatedHeader: If no closing `---` marker follows.
        InvalidHeaderLine: If a header line is not `key: value`.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = _iter_lines(text)
    first = next(lines, None)
    if first is None or not _is_marker(first[1]):
        raise MissingHeader(
            f"Document must start with a '{FRONT_MATTER_MARKER}' line",
            path=path,
            line=1,
        )

    header: list[tuple[int, str]] = []
    parts = None
    for lineno, line, end in lines:
        if _is_marker(line):
            parts = ParsedParts(body=text[end:], body_line=lineno + 1)
            break
        header.append((lineno, line))

    # The closing marker is located before any header line is interpreted
    if parts is None:
        raise UnterminatedHeader(
            f"Front matter opened on line 1 is never closed with '{FRONT_MATTER_MARKER}'",
            path=path,
            line=1,
        )

    for lineno, line in header:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            raise InvalidHeaderLine(
                f"Expected 'key: value', got {stripped!r}",
                path=path,
                line=lineno,
            )
        parts.entries.append(HeaderLine(key=key, value=value.strip(), line=lineno))

    return parts


def unquote(value: str) -> str:
    """Strip one level of matching quotes from a scalar value."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        inner = value[1:-1]
        if value[0] == "'":
            inner = inner.replace("''", "'")
        return inner
    return value


def parse_tools(value: str, path: str = DEFAULT_PATH, line: Optional[int] = None) -> list[str]:
    """Parse a `tools` value such as `['codebase', 'search']`.

    Args:
        value: The raw value after `tools:`.
        path: Document identifier used in error messages.
        line: Line number of the `tools` entry.

    Returns:
        The tool names in declared order.

    Raises:
        InvalidToolsList: If the value is not a bracketed list of quoted strings.
    """
    match = _TOOLS_RE.match(value.strip())
    if not match:
        raise InvalidToolsList(
            f"'tools' must be a bracketed list of quoted strings, got {value!r}",
            path=path,
            line=line,
        )
    return [unquote(item) for item in _QUOTED_RE.findall(match.group(1))]


def parse_with_warnings(
    text: str,
    path: str = DEFAULT_PATH,
) -> tuple[ChatmodeDocument, list[str]]:
    """Parse a document and report header-level warnings alongside it.

    Warnings cover things the format tolerates, such as a key given twice
    (the last value wins).

    Raises:
        FormatError: Any of its subclasses, when the document is malformed.
    """
    parts = split_document(text, path)
    warnings: list[str] = []

    fields: dict[str, HeaderLine] = {}
    for entry in parts.entries:
        if entry.key in fields:
            warnings.append(
                f"Key '{entry.key}' repeated on line {entry.line}; "
                f"overrides line {fields[entry.key].line}"
            )
            del fields[entry.key]
        fields[entry.key] = entry

    tools: list[str] = []
    if KEY_TOOLS in fields:
        entry = fields[KEY_TOOLS]
        tools = parse_tools(entry.value, path=path, line=entry.line)

    if not parts.body.strip():
        raise EmptyBody(
            "Document body is empty",
            path=path,
            line=parts.body_line,
        )

    if KEY_DESCRIPTION not in fields:
        raise MissingDescription(
            f"Front matter has no '{KEY_DESCRIPTION}' key",
            path=path,
        )

    model = None
    if KEY_MODEL in fields:
        model = unquote(fields[KEY_MODEL].value)

    extra = {
        key: unquote(entry.value)
        for key, entry in fields.items()
        if key not in RECOGNIZED_KEYS
    }

    document = ChatmodeDocument(
        path=path,
        description=unquote(fields[KEY_DESCRIPTION].value),
        body=parts.body,
        tools=tools,
        model=model,
        extra=extra,
    )
    return document, warnings


def parse_document(text: str, path: str = DEFAULT_PATH) -> ChatmodeDocument:
    """Parse chatmode text into a ChatmodeDocument.

    Args:
        text: Raw document text.
        path: Identifier to attach to the document.

    Returns:
        The parsed document.

    Raises:
        FormatError: Any of its subclasses, when the document is malformed.

    Example:
        doc = parse_document("---\\ndescription: Test mode\\n---\\nDo the thing.")
        assert doc.description == "Test mode"
        assert doc.tools == []
    """
    document, _ = parse_with_warnings(text, path)
    return document


def format_scalar(value: str) -> str:
    """Render a scalar so that parsing it gives back exactly `value`.

    Raises:
        ValueError: If the value spans more than one line.
    """
    if "\n" in value:
        raise ValueError(f"Front-matter values must be single-line: {value!r}")
    needs_quotes = (
        not value
        or value != value.strip()
        or value[0] in ("'", '"')
    )
    if needs_quotes:
        return "'" + value.replace("'", "''") + "'"
    return value


def format_tools(tools: list[str]) -> str:
    """Render a tools list in bracketed, single-quoted form."""
    items = []
    for tool in tools:
        if "\n" in tool:
            raise ValueError(f"Tool names must be single-line: {tool!r}")
        items.append("'" + tool.replace("'", "''") + "'")
    return "[" + ", ".join(items) + "]"


def _check_key(key: str) -> None:
    if (
        not key
        or key != key.strip()
        or ":" in key
        or "\n" in key
        or key.startswith("#")
        or key == FRONT_MATTER_MARKER
    ):
        raise ValueError(f"Cannot serialize front-matter key {key!r}")


def serialize_document(document: ChatmodeDocument) -> str:
    """Serialize a document to its canonical front-matter text.

    `tools` is written only when non-empty and `model` only when set, so
    the output parses back to an equal document.

    Raises:
        ValueError: If a key or value cannot be represented on one line.
    """
    lines = [FRONT_MATTER_MARKER]
    lines.append(f"{KEY_DESCRIPTION}: {format_scalar(document.description)}")
    if document.tools:
        lines.append(f"{KEY_TOOLS}: {format_tools(document.tools)}")
    if document.model is not None:
        lines.append(f"{KEY_MODEL}: {format_scalar(document.model)}")
    for key, value in document.extra.items():
        if key in RECOGNIZED_KEYS:
            continue
        _check_key(key)
        lines.append(f"{key}: {format_scalar(value)}")
    lines.append(FRONT_MATTER_MARKER)
    return "\n".join(lines) + "\n" + document.body
