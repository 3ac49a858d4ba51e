"""
chatmodes - parse, validate and look up assistant chatmode documents.

A chatmode is a Markdown instruction document with a small front-matter
header (description, tools, model) that configures how an AI coding
assistant behaves in a given mode.
"""
from .constants import APP_NAME, APP_VERSION, APP_DESCRIPTION
from .errors import (
    ChatmodeError,
    FormatError,
    UnterminatedHeader,
    MissingHeader,
    InvalidHeaderLine,
    InvalidToolsList,
    MissingDescription,
    EmptyBody,
    NotFound,
)
from .schema import ChatmodeDocument, validate_document
from .parser import parse_document, serialize_document
from .store import ChatmodeStore, LoadResult, load_all
from .loader import ChatmodeLoader, build_store

__version__ = APP_VERSION
__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    # Errors
    "ChatmodeError",
    "FormatError",
    "UnterminatedHeader",
    "MissingHeader",
    "InvalidHeaderLine",
    "InvalidToolsList",
    "MissingDescription",
    "EmptyBody",
    "NotFound",
    # Documents
    "ChatmodeDocument",
    "validate_document",
    "parse_document",
    "serialize_document",
    # Store
    "ChatmodeStore",
    "LoadResult",
    "load_all",
    "ChatmodeLoader",
    "build_store",
]
