"""Domain exceptions for revtree.

These exceptions represent failures of the revision tree engine and its
collaborators. They are caught at the application boundary (CLI, TUI) and
converted to user-facing messages.
"""


class RevtreeDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class LaunchError(RevtreeDomainError):
    """Raised when an external executable cannot be started."""

    pass


class RepositoryNotFoundError(RevtreeDomainError):
    """Raised when no Mercurial repository encloses the working directory."""

    pass


class UnsupportedActionError(RevtreeDomainError):
    """Raised when an action does not apply to the selected node kind."""

    pass


class NavigationError(RevtreeDomainError):
    """Base exception for tree navigation dead ends.

    Navigation errors are recoverable: the cursor stays where it was and the
    message is shown transiently.
    """

    pass


class NoParentError(NavigationError):
    """Raised when moving up from a top-level node."""

    pass


class NoChildError(NavigationError):
    """Raised when moving down from a node with no materialized child."""

    pass


class NoSiblingError(NavigationError):
    """Raised when fewer same-level rows exist than requested."""

    pass
