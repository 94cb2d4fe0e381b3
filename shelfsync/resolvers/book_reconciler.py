# shelfsync/resolvers/book_reconciler.py
import logging
from datetime import datetime, UTC
from typing import List, Optional
from shelfsync.events import EventAggregator, BookInfoRefreshedEvent
from shelfsync.models.remote import RemoteBook
from shelfsync.sa.models import Author, Book, NewItemMonitorType
from shelfsync.sa.repositories.book import BookRepository
from shelfsync.sa.repositories.exclusion import ImportListExclusionRepository
from shelfsync.services.metadata_profile_service import MetadataProfileService

class BookReconciler:
    """Brings an author's local books in line with the provider's book list."""

    def __init__(self,
                 book_repository: BookRepository,
                 exclusion_repository: ImportListExclusionRepository,
                 metadata_profile_service: MetadataProfileService,
                 events: Optional[EventAggregator] = None):
        self.book_repository = book_repository
        self.exclusion_repository = exclusion_repository
        self.metadata_profile_service = metadata_profile_service
        self.events = events
        self.logger = logging.getLogger(self.__class__.__name__)

    def reconcile(self, author: Author, remote_books: List[RemoteBook]) -> None:
        """
        Insert books that are new upstream and update the ones that changed.

        Local books missing from the remote list are left alone: removal is
        an explicit user action, never a side effect of a partial response.
        Inserts and updates each go to storage as one batch.

        Args:
            author: The persisted author the books belong to
            remote_books: The provider's current book list for the author
        """
        remote = self._get_remote_books(author, remote_books)
        local = self.book_repository.get_books_for_refresh(
            author.author_metadata_id,
            [book.foreign_book_id for book in remote]
        )
        local_by_foreign_id = {book.foreign_book_id: book for book in local}

        to_add: List[Book] = []
        to_update: List[Book] = []
        now = datetime.now(UTC)

        for remote_book in remote:
            book = local_by_foreign_id.get(remote_book.foreign_book_id)
            if book is None:
                to_add.append(self._create_book_entity(author, remote_book, now))
                continue

            changed = book.apply_values(remote_book.column_values())
            if book.author_metadata_id != author.author_metadata_id:
                self.logger.debug(
                    f"Moving book {book.foreign_book_id} to author {author.foreign_author_id}"
                )
                book.author_metadata_id = author.author_metadata_id
                changed = True
            if changed:
                book.last_synced_at = now
                to_update.append(book)

        if to_add:
            self.book_repository.insert_many(to_add)
        if to_update:
            self.book_repository.update_many(to_update)

        self.logger.info(
            f"Books for {author.name}: {len(to_add)} added, {len(to_update)} updated, "
            f"{len(remote) - len(to_add) - len(to_update)} unchanged"
        )

        if self.events and (to_add or to_update):
            self.events.publish(BookInfoRefreshedEvent(author, added=to_add, updated=to_update))

    def _get_remote_books(self, author: Author, remote_books: List[RemoteBook]) -> List[RemoteBook]:
        """Profile-filtered, de-duplicated remote books minus import list exclusions"""
        filtered = self.metadata_profile_service.filter_books(author, remote_books)

        unique: List[RemoteBook] = []
        seen = set()
        for book in filtered:
            if book.foreign_book_id in seen:
                continue
            seen.add(book.foreign_book_id)
            unique.append(book)

        excluded = {
            exclusion.foreign_id
            for exclusion in self.exclusion_repository.find_by_foreign_ids(list(seen))
        }
        if excluded:
            self.logger.debug(f"Skipping {len(excluded)} books on the import list exclusion list")
        return [book for book in unique if book.foreign_book_id not in excluded]

    def _create_book_entity(self, author: Author, remote_book: RemoteBook, now: datetime) -> Book:
        """Creates a new book owned by the author, monitored per the author's new item policy"""
        book = Book(
            foreign_book_id=remote_book.foreign_book_id,
            author_metadata_id=author.author_metadata_id,
            monitored=author.monitored and author.monitor_new_items == NewItemMonitorType.ALL.value,
            any_edition_ok=True,
            added=now,
            last_synced_at=now
        )
        book.apply_values(remote_book.column_values())
        return book
