# shelfsync/resolvers/identity_resolver.py
import logging
from enum import Enum
from typing import NamedTuple, Optional
from shelfsync.sa.models import Author
from shelfsync.sa.repositories.author import AuthorRepository

class IdentityChange(str, Enum):
    UNCHANGED = "unchanged"      # Provider returned the id we asked for
    CHANGED = "changed"          # New id, no other local author has it
    COLLISION = "collision"      # New id already belongs to another local author

class IdentityResolution(NamedTuple):
    change: IdentityChange
    existing: Optional[Author] = None

class IdentityResolver:
    """Detects foreign id drift between a local author and a refreshed one.

    Foreign ids are opaque keys owned by the provider, so comparison is an
    exact string match with no normalisation.
    """

    def __init__(self, author_repository: AuthorRepository):
        self.author_repository = author_repository
        self.logger = logging.getLogger(self.__class__.__name__)

    def resolve(self, author: Author, foreign_author_id: str) -> IdentityResolution:
        if author.foreign_author_id == foreign_author_id:
            return IdentityResolution(IdentityChange.UNCHANGED)

        existing = self.author_repository.get_by_foreign_id(foreign_author_id)
        if existing is None or existing.id == author.id:
            self.logger.debug(
                f"Author {author.id} moved from {author.foreign_author_id} to {foreign_author_id}"
            )
            return IdentityResolution(IdentityChange.CHANGED)

        self.logger.debug(
            f"Author {author.id} moved to {foreign_author_id}, already held by author {existing.id}"
        )
        return IdentityResolution(IdentityChange.COLLISION, existing)
