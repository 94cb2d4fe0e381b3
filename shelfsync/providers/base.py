# shelfsync/providers/base.py
from abc import ABC, abstractmethod
from shelfsync.models.remote import RemoteAuthor

class AuthorInfoProvider(ABC):
    """Source of authoritative author and book metadata."""

    @abstractmethod
    def get_author_and_books(self, foreign_author_id: str) -> RemoteAuthor:
        """
        Resolve an author and its books by foreign id.
        Must be implemented by derived classes.
        
        Args:
            foreign_author_id: The provider's id for the author
            
        Returns:
            The author as the provider currently knows it. Its foreign id may
            differ from the requested one if the provider merged the author.
            
        Raises:
            AuthorNotFoundUpstream: If the id no longer resolves
            ProviderTransportError: For any other failure
        """
        pass
