"""
Error taxonomy for chatmode documents.

Every error here is recoverable: a malformed document is reported and
skipped, it never takes the rest of a batch down with it.
"""
from typing import Optional


class ChatmodeError(Exception):
    """Base class for all chatmode errors."""


class FormatError(ChatmodeError):
    """Raised when a document does not match the front-matter format.
    
    Attributes:
        path: Identifier of the offending document.
        line: 1-based line number of the problem, when known.
        reason: The bare message, without location information.
    """
    
    def __init__(
        self,
        reason: str,
        path: str = "<string>",
        line: Optional[int] = None,
    ):
        self.reason = reason
        self.path = path
        self.line = line
        
        if line is not None:
            full_message = f"{path}:{line}: {reason}"
        else:
            full_message = f"{path}: {reason}"
        
        super().__init__(full_message)
    
    @property
    def kind(self) -> str:
        """Short name of the error kind (e.g. 'EmptyBody')."""
        return type(self).__name__


class UnterminatedHeader(FormatError):
    """The front-matter block has no closing marker line."""


class MissingHeader(UnterminatedHeader):
    """The document does not open with a front-matter marker line."""


class InvalidHeaderLine(FormatError):
    """A front-matter line is not in `key: value` form."""


class InvalidToolsList(FormatError):
    """The `tools` value is not a bracketed list of quoted strings."""


class MissingDescription(FormatError):
    """The front matter has no `description` key."""


class EmptyBody(FormatError):
    """Nothing but whitespace follows the front matter."""


class NotFound(ChatmodeError, KeyError):
    """Raised when no source matches the requested identifier."""
    
    def __init__(self, identifier: str, available: Optional[list[str]] = None):
        self.identifier = identifier
        self.available = available or []
        super().__init__(f"Chatmode '{identifier}' not found")
    
    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]
