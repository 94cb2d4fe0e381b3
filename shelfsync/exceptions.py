# shelfsync/exceptions.py
from typing import Any


class ShelfSyncError(Exception):
    """Base class for every error raised by shelfsync."""

    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class AuthorNotFoundError(ShelfSyncError):
    """Raised when a local author id does not exist."""

    def __init__(self, author_id: int) -> None:
        super().__init__(f"Author with id {author_id} not found")
        self.author_id = author_id


class AuthorNotFoundUpstream(ShelfSyncError):
    """The metadata provider no longer resolves this foreign author id.

    Not necessarily an error: the author may have been merged into another
    record upstream.
    """

    def __init__(self, foreign_author_id: str) -> None:
        super().__init__(f"Author {foreign_author_id} was not found by the metadata provider")
        self.foreign_author_id = foreign_author_id


class ProviderTransportError(ShelfSyncError):
    """Any provider failure other than not found (network, HTTP status, bad payload)."""

    pass


class MergeIntegrityError(ShelfSyncError):
    """Books could not be moved to the surviving author; nothing was deleted."""

    def __init__(self, superseded_id: int, surviving_id: int, reason: str) -> None:
        super().__init__(
            f"Unable to merge author {superseded_id} into {surviving_id}: {reason}"
        )
        self.superseded_id = superseded_id
        self.surviving_id = surviving_id


class PersistenceError(ShelfSyncError):
    """A store write failed and its transaction was rolled back."""

    pass
