"""
Chatmode document schema and validation.

Provides the ChatmodeDocument dataclass and the warning-level checks that
run on top of a successful parse.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .constants import (
    BUILTIN_PATH_PREFIX,
    CHATMODE_SUFFIX,
    KEY_DESCRIPTION,
    KEY_MODEL,
    KEY_TOOLS,
)


@dataclass
class ChatmodeDocument:
    """A parsed chatmode: front-matter metadata plus a Markdown body.

    Chatmodes configure how an assistant behaves in a particular mode
    (planning, research, front-end work, ...). The store only validates
    their shape; the host application interprets tools, model and body.

    Attributes:
        path: Identifier or location the document was loaded from.
        description: Free-text summary of the mode (required).
        body: Markdown instructions following the front matter.
        tools: Tool identifiers the mode asks for, in declared order.
        model: Target model name, or None when not specified.
        extra: Unrecognized front-matter keys, kept verbatim and in order.

    Example:
        doc = ChatmodeDocument(
            path="plan.chatmode.md",
            description="Generate an implementation plan",
            body="You are in planning mode...",
            tools=["codebase", "search"],
        )
    """
    path: str
    description: str
    body: str
    tools: list[str] = field(default_factory=list)
    model: Optional[str] = None
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def slug(self) -> str:
        """Short lookup name derived from the file name."""
        return slug_from_path(self.path)

    @property
    def front_matter(self) -> dict[str, Any]:
        """The header as a mapping; recognized keys first, then extras."""
        data: dict[str, Any] = {
            KEY_DESCRIPTION: self.description,
            KEY_TOOLS: list(self.tools),
            KEY_MODEL: self.model,
        }
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    def to_dict(self) -> dict[str, Any]:
        """Convert the document to a plain dictionary."""
        return {
            "path": self.path,
            "slug": self.slug,
            "front_matter": self.front_matter,
            "body": self.body,
        }


def slug_from_path(path: str) -> str:
    """Derive a chatmode slug from its path.

    `.github/chatmodes/plan.chatmode.md` and `builtin:plan.chatmode.md`
    both become `plan`.
    """
    name = path
    if name.startswith(BUILTIN_PATH_PREFIX):
        name = name[len(BUILTIN_PATH_PREFIX):]
    name = name.replace("\\", "/").rsplit("/", 1)[-1]

    lowered = name.lower()
    if lowered.endswith(CHATMODE_SUFFIX):
        return name[:-len(CHATMODE_SUFFIX)]
    if lowered.endswith(".md"):
        return name[:-3]
    return name


def find_duplicates(items: Iterable[str]) -> list[str]:
    """Return items that occur more than once, in first-repeat order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for item in items:
        if item in seen and item not in duplicates:
            duplicates.append(item)
        seen.add(item)
    return duplicates


def validate_document(
    document: ChatmodeDocument,
    known_tools: Optional[Iterable[str]] = None,
) -> list[str]:
    """Collect non-fatal problems with a parsed document.

    Nothing reported here prevents the document from loading. Tool names
    are opaque to the store, so unknown names are only flagged when the
    caller supplies the set of tools it actually has.

    Args:
        document: The document to check.
        known_tools: Optional set of tool names the host understands.

    Returns:
        A list of warning messages (empty if nothing looks off).
    """
    warnings: list[str] = []

    if not document.description.strip():
        warnings.append("Field 'description' is blank")

    duplicates = find_duplicates(document.tools)
    if duplicates:
        warnings.append(f"Duplicate tools: {', '.join(duplicates)}")

    if document.model is not None and not document.model.strip():
        warnings.append("Field 'model' is blank")

    if known_tools:
        known = set(known_tools)
        unknown = [tool for tool in document.tools if tool not in known]
        if unknown:
            warnings.append(f"Unknown tools: {', '.join(unknown)}")

    return warnings
