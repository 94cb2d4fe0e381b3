# shelfsync/services/author_merger.py
import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from shelfsync.events import EventAggregator, AuthorDeletedEvent
from shelfsync.exceptions import MergeIntegrityError, PersistenceError
from shelfsync.models.remote import RemoteAuthor
from shelfsync.sa.database import atomic
from shelfsync.sa.models import Author
from shelfsync.sa.repositories.author import AuthorRepository
from shelfsync.sa.repositories.book import BookRepository
from shelfsync.sa.repositories.history import HistoryRepository

class AuthorMerger:
    """Folds a superseded author into the author that now owns its foreign id."""

    def __init__(self,
                 session: Session,
                 author_repository: AuthorRepository,
                 book_repository: BookRepository,
                 history_repository: HistoryRepository,
                 events: Optional[EventAggregator] = None):
        self.session = session
        self.author_repository = author_repository
        self.book_repository = book_repository
        self.history_repository = history_repository
        self.events = events
        self.logger = logging.getLogger(self.__class__.__name__)

    def merge(self, superseded: Author, surviving: Author, remote: RemoteAuthor) -> Author:
        """
        Move the superseded author's books and history to the surviving author,
        remove the superseded author, then refresh the survivor's metadata.

        Moving the books and deleting the superseded author commit together:
        if the batch re-point fails nothing is deleted and the books stay
        where they were.

        Args:
            superseded: The local author whose foreign id moved
            surviving: The local author already holding the new foreign id
            remote: Freshly fetched data for the new foreign id

        Returns:
            The persisted surviving author

        Raises:
            MergeIntegrityError: If the books could not be moved
        """
        books = self.book_repository.get_books_by_author(superseded.author_metadata_id)
        for book in books:
            book.author_metadata_id = surviving.author_metadata_id

        try:
            with atomic(self.session):
                self.book_repository.update_many(books, commit=False)
                moved_history = self.history_repository.reassign_author(
                    superseded.id, surviving.id, commit=False
                )
                self.author_repository.delete(
                    superseded.id, delete_files=False, delete_from_disk=False, commit=False
                )
        except PersistenceError as e:
            raise MergeIntegrityError(superseded.id, surviving.id, e.message) from e
        except SQLAlchemyError as e:
            raise MergeIntegrityError(superseded.id, surviving.id, str(e)) from e

        self.logger.info(
            f"Merged author {superseded.id} into {surviving.id}: "
            f"{len(books)} books and {moved_history} history items moved"
        )
        if self.events:
            self.events.publish(AuthorDeletedEvent(superseded, delete_files=False, delete_from_disk=False))

        surviving.metadata_record.apply_values(remote.metadata.column_values())
        return self.author_repository.update(surviving)
