"""
Chatmode document store.

Turns raw (path, text) sources into validated ChatmodeDocument values and
looks them up by path or slug.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from .errors import ChatmodeError, FormatError, InvalidHeaderLine, NotFound
from .parser import parse_with_warnings, serialize_document
from .schema import ChatmodeDocument, slug_from_path, validate_document


logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of loading one source: a document or a format error.

    Attributes:
        path: The source path, present whether or not parsing succeeded.
        document: The parsed document, None on failure.
        error: The format error, None on success.
        warnings: Non-fatal problems found in a successful parse.
    """
    path: str
    document: Optional[ChatmodeDocument] = None
    error: Optional[FormatError] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Check if the source parsed successfully."""
        return self.error is None and self.document is not None

    @property
    def slug(self) -> str:
        """Lookup slug of the source."""
        return slug_from_path(self.path)

    def unwrap(self) -> ChatmodeDocument:
        """Return the document or raise the stored error."""
        if self.error is not None:
            raise self.error
        if self.document is None:
            raise ChatmodeError(f"No document loaded from {self.path}")
        return self.document


def load_one(
    path: str,
    text: str,
    known_tools: Optional[Iterable[str]] = None,
) -> LoadResult:
    """Parse and validate a single source without raising.

    Args:
        path: Source identifier.
        text: Raw document text.
        known_tools: Optional tool names to check `tools` entries against.

    Returns:
        A LoadResult holding either the document or the error.
    """
    try:
        document, warnings = parse_with_warnings(text, path)
    except FormatError as e:
        logger.debug(f"Failed to parse chatmode {path}: {e.kind}: {e.reason}")
        return LoadResult(path=path, error=e)

    warnings.extend(validate_document(document, known_tools))
    for warning in warnings:
        logger.warning(f"{path}: {warning}")
    return LoadResult(path=path, document=document, warnings=warnings)


def load_all(
    sources: Iterable[tuple[str, str]],
    known_tools: Optional[Iterable[str]] = None,
) -> Iterator[LoadResult]:
    """Lazily load a batch of sources.

    One result is yielded per source, in input order. A malformed source
    yields a failed result and loading carries on with the next one.

    Args:
        sources: (path, text) pairs.
        known_tools: Optional tool names to check `tools` entries against.

    Yields:
        A LoadResult per source.
    """
    known = frozenset(known_tools) if known_tools else None
    for path, text in sources:
        yield load_one(path, text, known)


class ChatmodeStore:
    """Holds loaded chatmodes and resolves identifiers to documents.

    Identifiers are either a source path or a slug (the file name without
    `.chatmode.md`). When two sources share a slug the later one wins, so
    local files override global ones and both override built-ins.

    Example:
        store = ChatmodeStore([
            ("plan.chatmode.md", "---\\ndescription: Plan\\n---\\nPlan first."),
        ])
        store.get("plan").description  # "Plan"
        store.get("missing")           # raises NotFound
    """

    def __init__(
        self,
        sources: Iterable[tuple[str, str]] = (),
        known_tools: Optional[Iterable[str]] = None,
    ) -> None:
        """Initialize the store.

        Args:
            sources: Initial (path, text) pairs to load.
            known_tools: Optional tool names used for validation warnings.
        """
        self._known_tools = frozenset(known_tools) if known_tools else None
        self._by_path: dict[str, LoadResult] = {}
        self._by_slug: dict[str, LoadResult] = {}

        for result in load_all(sources, self._known_tools):
            self._add_result(result)

    def _add_result(self, result: LoadResult) -> None:
        previous = self._by_slug.get(result.slug)
        if previous is not None and previous.path != result.path:
            logger.debug(f"Chatmode '{result.slug}' from {result.path} overrides {previous.path}")

        self._by_path[result.path] = result
        self._by_slug[result.slug] = result

    def add(self, path: str, text: str) -> LoadResult:
        """Load one more source into the store.

        Args:
            path: Source identifier.
            text: Raw document text.

        Returns:
            The LoadResult for the source (check `ok` for success).
        """
        result = load_one(path, text, self._known_tools)
        self._add_result(result)
        return result

    def extend(self, sources: Iterable[tuple[str, str]]) -> list[LoadResult]:
        """Load several sources, preserving their order."""
        results = []
        for result in load_all(sources, self._known_tools):
            self._add_result(result)
            results.append(result)
        return results

    def register(self, document: ChatmodeDocument) -> LoadResult:
        """Register an already-built document.

        The document goes through the same checks as loaded text, so one
        that could not have been parsed (a blank body, a multi-line value)
        is stored as a failed result.

        Args:
            document: The document to register.

        Returns:
            The LoadResult for the document (check `ok` for success).
        """
        try:
            text = serialize_document(document)
        except ValueError as e:
            result = LoadResult(
                path=document.path,
                error=InvalidHeaderLine(str(e), path=document.path),
            )
        else:
            result = load_one(document.path, text, self._known_tools)

        self._add_result(result)
        logger.debug(f"Registered chatmode: {document.slug}")
        return result

    def _lookup(self, identifier: str) -> Optional[LoadResult]:
        if identifier in self._by_path:
            return self._by_path[identifier]
        return self._by_slug.get(identifier)

    def get(self, identifier: str) -> ChatmodeDocument:
        """Get a chatmode by path or slug.

        Args:
            identifier: A source path or a slug.

        Returns:
            The matching document.

        Raises:
            NotFound: If no source has that identifier.
            FormatError: If the matching source failed to parse.
        """
        result = self._lookup(identifier)
        if result is None:
            raise NotFound(identifier, available=self.identifiers())
        return result.unwrap()

    def has(self, identifier: str) -> bool:
        """Check if a usable chatmode exists for the identifier."""
        result = self._lookup(identifier)
        return result is not None and result.ok

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.has(identifier)

    def __len__(self) -> int:
        return len(self.list_documents())

    def results(self) -> list[LoadResult]:
        """All current results (one per slug), sorted by slug."""
        return sorted(self._by_slug.values(), key=lambda r: r.slug)

    def list_documents(self) -> list[ChatmodeDocument]:
        """List all successfully loaded chatmodes, sorted by slug."""
        return [r.document for r in self.results() if r.ok]

    def failures(self) -> list[LoadResult]:
        """List the sources that failed to parse, sorted by slug."""
        return [r for r in self.results() if not r.ok]

    def identifiers(self) -> list[str]:
        """Slugs of all usable chatmodes."""
        return [r.slug for r in self.results() if r.ok]
