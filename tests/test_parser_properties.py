"""
Tests for the chatmode front-matter parser.

Covers the concrete document shapes the parser must accept or reject, plus
hypothesis properties for serialization and failure modes.
"""

import allure
import pytest
from hypothesis import given, settings, strategies as st

from chatmodes.constants import RECOGNIZED_KEYS
from chatmodes.errors import (
    EmptyBody,
    FormatError,
    InvalidHeaderLine,
    InvalidToolsList,
    MissingDescription,
    MissingHeader,
    UnterminatedHeader,
)
from chatmodes.parser import (
    parse_document,
    parse_tools,
    parse_with_warnings,
    serialize_document,
    format_scalar,
)
from chatmodes.schema import ChatmodeDocument, validate_document


# Strategies for generating test data

def single_line_text(min_size=0, max_size=60):
    """Text without newlines. Carriage returns are allowed."""
    return st.text(min_size=min_size, max_size=max_size).filter(lambda s: "\n" not in s)


def body_strategy():
    """Bodies with at least one non-whitespace character."""
    return st.text(min_size=1, max_size=300).filter(lambda s: s.strip())


def extra_key_strategy():
    """Keys that are not one of the recognized ones."""
    return st.from_regex(r"[a-z][a-z0-9_-]{0,15}", fullmatch=True).filter(
        lambda k: k not in RECOGNIZED_KEYS
    )


@st.composite
def chatmode_document_strategy(draw):
    """Generate well-formed ChatmodeDocument values."""
    return ChatmodeDocument(
        path=draw(st.sampled_from(["plan.chatmode.md", "a/b/research.chatmode.md", "<string>"])),
        description=draw(single_line_text()),
        body=draw(body_strategy()),
        tools=draw(st.lists(single_line_text(max_size=20), max_size=6)),
        model=draw(st.one_of(st.none(), single_line_text(max_size=30))),
        extra=draw(st.dictionaries(extra_key_strategy(), single_line_text(max_size=30), max_size=3)),
    )


def header_line_strategy():
    """Valid `key: value` header lines that are never marker lines."""
    return st.builds(
        lambda key, value: f"{key}: {value}",
        extra_key_strategy(),
        st.from_regex(r"[A-Za-z0-9 .,]{0,30}", fullmatch=True),
    )


def non_marker_line_strategy():
    return single_line_text(max_size=40).filter(lambda s: s.rstrip() != "---")


# Concrete scenarios

@allure.feature("Front-matter parser")
@allure.story("Minimal document")
def test_parse_minimal_document():
    doc = parse_document("---\ndescription: Test mode\n---\nDo the thing.")

    assert doc.description == "Test mode"
    assert doc.tools == []
    assert doc.model is None
    assert doc.body == "Do the thing."
    assert doc.extra == {}


@allure.feature("Front-matter parser")
@allure.story("Tools list")
def test_parse_tools_list_in_order():
    doc = parse_document("---\ndescription: X\ntools: ['codebase', 'search']\n---\nBody.")

    assert doc.tools == ["codebase", "search"]
    assert doc.body == "Body."


@allure.feature("Front-matter parser")
@allure.story("Empty body")
@pytest.mark.parametrize("body", ["", "   ", "\n\n", " \t\n  \n"])
def test_whitespace_body_is_empty_body(body):
    with pytest.raises(EmptyBody):
        parse_document("---\ndescription: X\n---\n" + body)


def test_closing_marker_at_end_of_input_is_empty_body():
    with pytest.raises(EmptyBody):
        parse_document("---\ndescription: X\n---")


def test_front_matter_mapping():
    doc = parse_document(
        "---\n"
        "description: Plan things\n"
        "tools: ['codebase']\n"
        "model: GPT-4.1\n"
        "mode: agent\n"
        "---\n"
        "Body\n",
        path="plan.chatmode.md",
    )

    assert doc.front_matter == {
        "description": "Plan things",
        "tools": ["codebase"],
        "model": "GPT-4.1",
        "mode": "agent",
    }
    assert doc.path == "plan.chatmode.md"
    assert doc.slug == "plan"


def test_unrecognized_keys_are_preserved_in_order():
    doc = parse_document("---\nzeta: 1\ndescription: X\nalpha: two words\n---\nBody")

    assert list(doc.extra.items()) == [("zeta", "1"), ("alpha", "two words")]


def test_quoted_scalars_are_unquoted():
    doc = parse_document(
        "---\n"
        "description: 'Generate an implementation plan'\n"
        'model: "Claude Sonnet 4"\n'
        "---\n"
        "Body\n"
    )

    assert doc.description == "Generate an implementation plan"
    assert doc.model == "Claude Sonnet 4"


def test_single_quote_escape_in_scalar():
    doc = parse_document("---\ndescription: 'It''s a plan'\n---\nBody")

    assert doc.description == "It's a plan"


def test_value_keeps_colons_after_the_first():
    doc = parse_document("---\ndescription: Step 1: plan. Step 2: build.\n---\nBody")

    assert doc.description == "Step 1: plan. Step 2: build."


def test_body_is_kept_verbatim():
    body = "# Heading\n\n---\n\nMore text with trailing newline\n"
    doc = parse_document("---\ndescription: X\n---\n" + body)

    assert doc.body == body


def test_blank_and_comment_lines_in_header_are_skipped():
    doc = parse_document("---\n\n# a comment\ndescription: X\n\n---\nBody")

    assert doc.description == "X"
    assert doc.extra == {}


def test_crlf_line_endings():
    doc = parse_document("---\r\ndescription: X\r\ntools: ['a']\r\n---\r\nBody\r\n")

    assert doc.description == "X"
    assert doc.tools == ["a"]
    assert doc.body == "Body\r\n"


def test_byte_order_mark_is_ignored():
    doc = parse_document("\ufeff---\ndescription: X\n---\nBody")

    assert doc.description == "X"


def test_empty_description_is_allowed_with_warning():
    doc, warnings = parse_with_warnings("---\ndescription:\n---\nBody")

    assert doc.description == ""
    assert warnings == []
    assert validate_document(doc) == ["Field 'description' is blank"]


def test_repeated_key_last_wins_with_warning():
    doc, warnings = parse_with_warnings("---\ndescription: first\ndescription: second\n---\nBody")

    assert doc.description == "second"
    assert len(warnings) == 1
    assert "repeated on line 3" in warnings[0]


# Failures

def test_missing_closing_marker():
    with pytest.raises(UnterminatedHeader) as exc_info:
        parse_document("---\ndescription: X\nBody without a header end")

    assert exc_info.value.line == 1
    assert exc_info.value.kind == "UnterminatedHeader"


def test_missing_opening_marker():
    with pytest.raises(MissingHeader) as exc_info:
        parse_document("description: X\n---\nBody")

    # A missing opening marker is also a header that never terminates
    assert isinstance(exc_info.value, UnterminatedHeader)


def test_empty_input():
    with pytest.raises(MissingHeader):
        parse_document("")


def test_missing_description():
    with pytest.raises(MissingDescription) as exc_info:
        parse_document("---\ntools: ['a']\n---\nBody", path="x.chatmode.md")

    assert exc_info.value.path == "x.chatmode.md"
    assert "x.chatmode.md" in str(exc_info.value)


def test_header_line_without_colon():
    with pytest.raises(InvalidHeaderLine) as exc_info:
        parse_document("---\ndescription: X\njust words\n---\nBody")

    assert exc_info.value.line == 3


@pytest.mark.parametrize("value", [
    "codebase",
    "codebase, search",
    "[codebase, search]",
    "['codebase', search]",
    "['codebase'",
    "'codebase'",
    "",
    "[,]",
    "['a' 'b']",
])
def test_invalid_tools_shapes(value):
    with pytest.raises(InvalidToolsList) as exc_info:
        parse_document(f"---\ndescription: X\ntools: {value}\n---\nBody")

    assert exc_info.value.line == 3


def test_yaml_block_list_is_invalid_tools():
    with pytest.raises(InvalidToolsList):
        parse_document("---\ndescription: X\ntools:\n---\nBody")


@pytest.mark.parametrize("value, expected", [
    ("[]", []),
    ("[ ]", []),
    ("['a']", ["a"]),
    ('["a", "b"]', ["a", "b"]),
    ("['a', \"b\", 'c',]", ["a", "b", "c"]),
    ("['a','b']", ["a", "b"]),
    ("['it''s']", ["it's"]),
    ("['a, b', 'c]']", ["a, b", "c]"]),
    ("['a']  # trailing comment", ["a"]),
])
def test_valid_tools_shapes(value, expected):
    assert parse_tools(value) == expected


def test_tools_error_precedes_body_error():
    with pytest.raises(InvalidToolsList):
        parse_document("---\ndescription: X\ntools: nope\n---\n   ")


def test_format_errors_share_base_class():
    for text in ["nope", "---\nx: y", "---\n---\nBody", "---\ndescription: X\n---\n"]:
        with pytest.raises(FormatError):
            parse_document(text)


# Properties

@allure.feature("Front-matter parser")
@allure.story("Serialization round-trip")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=200)
@given(document=chatmode_document_strategy())
def test_serialize_then_parse_round_trip(document: ChatmodeDocument):
    """Parsing the serialized form of a well-formed document gives it back."""
    text = serialize_document(document)
    restored = parse_document(text, path=document.path)

    assert restored == document


@settings(max_examples=100)
@given(
    header=st.lists(header_line_strategy(), max_size=5),
    rest=st.lists(non_marker_line_strategy(), max_size=5),
)
def test_unterminated_header_property(header, rest):
    """Without a closing marker the parse fails and returns nothing."""
    text = "\n".join(["---", "description: X", *header, *rest])

    with pytest.raises(UnterminatedHeader):
        parse_document(text)


@settings(max_examples=100)
@given(word=st.from_regex(r"[A-Za-z_][A-Za-z0-9_-]{0,20}", fullmatch=True))
def test_bare_word_tools_property(word):
    """A bare unquoted word is never a valid tools list."""
    with pytest.raises(InvalidToolsList):
        parse_document(f"---\ndescription: X\ntools: {word}\n---\nBody")


@settings(max_examples=100)
@given(value=single_line_text())
def test_format_scalar_is_reversible(value):
    text = f"---\ndescription: {format_scalar(value)}\n---\nBody"

    assert parse_document(text).description == value


def test_carriage_return_inside_values_round_trips():
    doc = parse_document("---\ndescription: a\rb\ntools: ['x\ry']\nnote: c\rd\n---\nBody")

    assert doc.description == "a\rb"
    assert doc.tools == ["x\ry"]
    assert doc.extra == {"note": "c\rd"}
    assert parse_document(serialize_document(doc)) == doc


@pytest.mark.parametrize("value", ["a\r", "\ra", "\r"])
def test_outer_carriage_return_is_quoted(value):
    doc = ChatmodeDocument(path="<string>", description=value, body="Body", model=value)

    text = serialize_document(doc)

    assert f"description: '{value}'\n" in text
    assert parse_document(text) == doc


def test_serialize_rejects_multiline_values():
    doc = ChatmodeDocument(path="x", description="two\nlines", body="Body")

    with pytest.raises(ValueError):
        serialize_document(doc)


def test_serialize_canonical_form():
    doc = ChatmodeDocument(
        path="x",
        description="Plan",
        body="Body\n",
        tools=["codebase", "search"],
        model="GPT-4.1",
        extra={"mode": "agent"},
    )

    assert serialize_document(doc) == (
        "---\n"
        "description: Plan\n"
        "tools: ['codebase', 'search']\n"
        "model: GPT-4.1\n"
        "mode: agent\n"
        "---\n"
        "Body\n"
    )


def test_serialize_omits_empty_optional_fields():
    doc = ChatmodeDocument(path="x", description="Plan", body="Body")

    text = serialize_document(doc)

    assert "tools" not in text
    assert "model" not in text
