# shelfsync/services/refresh_author_service.py
import logging
from datetime import datetime, UTC
from enum import Enum
from typing import Dict, Iterable, Optional, Union
from sqlalchemy.orm import Session
from shelfsync.events import (
    EventAggregator, AuthorUpdatedEvent, AuthorRefreshCompleteEvent, AuthorDeletedEvent
)
from shelfsync.exceptions import (
    ShelfSyncError, AuthorNotFoundError, AuthorNotFoundUpstream, ProviderTransportError
)
from shelfsync.models.remote import RemoteAuthor
from shelfsync.providers.base import AuthorInfoProvider
from shelfsync.resolvers.book_reconciler import BookReconciler
from shelfsync.resolvers.identity_resolver import IdentityResolver, IdentityChange
from shelfsync.sa.models import Author, AuthorMetadata
from shelfsync.sa.repositories import (
    AuthorRepository, BookRepository, BookFileRepository, HistoryRepository,
    ImportListExclusionRepository, MetadataProfileRepository
)
from shelfsync.services.author_merger import AuthorMerger
from shelfsync.services.metadata_profile_service import MetadataProfileService
from shelfsync.utils.text import clean_name

class RefreshResult(str, Enum):
    UNCHANGED = "unchanged"    # Same id, same metadata
    UPDATED = "updated"        # Same id, metadata changed
    MOVED = "moved"            # New foreign id, no local clash
    MERGED = "merged"          # New foreign id, folded into the author that had it
    DELETED = "deleted"        # Gone upstream, no files, removed
    PRESERVED = "preserved"    # Gone upstream, kept because files reference it

class RefreshAuthorService:
    """Refreshes one local author against the metadata provider.

    Every step commits before the next one starts, so a crash part way
    through never leaves an author pointing at a foreign id whose books were
    not reconciled.
    """

    def __init__(self,
                 provider: AuthorInfoProvider,
                 author_repository: AuthorRepository,
                 book_file_repository: BookFileRepository,
                 identity_resolver: IdentityResolver,
                 author_merger: AuthorMerger,
                 book_reconciler: BookReconciler,
                 events: Optional[EventAggregator] = None):
        self.provider = provider
        self.author_repository = author_repository
        self.book_file_repository = book_file_repository
        self.identity_resolver = identity_resolver
        self.author_merger = author_merger
        self.book_reconciler = book_reconciler
        self.events = events or EventAggregator()
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_session(cls, session: Session, provider: AuthorInfoProvider,
                     events: Optional[EventAggregator] = None) -> 'RefreshAuthorService':
        """Wire the service and its collaborators onto SQLAlchemy repositories"""
        events = events or EventAggregator()
        author_repository = AuthorRepository(session)
        book_repository = BookRepository(session)
        book_file_repository = BookFileRepository(session)
        history_repository = HistoryRepository(session)
        profile_service = MetadataProfileService(
            MetadataProfileRepository(session), book_file_repository, history_repository
        )
        return cls(
            provider=provider,
            author_repository=author_repository,
            book_file_repository=book_file_repository,
            identity_resolver=IdentityResolver(author_repository),
            author_merger=AuthorMerger(
                session, author_repository, book_repository, history_repository, events
            ),
            book_reconciler=BookReconciler(
                book_repository, ImportListExclusionRepository(session), profile_service, events
            ),
            events=events
        )

    def refresh(self, author_id: int) -> RefreshResult:
        """
        Refresh an author and its books from the metadata provider.

        Args:
            author_id: Local id of the author

        Returns:
            Which of the terminal outcomes the refresh reached

        Raises:
            AuthorNotFoundError: If there is no local author with this id
            ProviderTransportError: If the provider failed for a reason other than not found
            MergeIntegrityError: If books could not be moved during a merge
            PersistenceError: If a store write failed
        """
        author = self.author_repository.get_by_id(author_id)
        if author is None:
            raise AuthorNotFoundError(author_id)

        self.logger.info(f"Updating info for {author.name}")
        try:
            remote = self.provider.get_author_and_books(author.foreign_author_id)
        except AuthorNotFoundUpstream:
            return self._handle_missing_upstream(author)
        except ProviderTransportError as e:
            self.logger.error(f"Unable to fetch info for author {author.name} [{author.foreign_author_id}]: {e}")
            raise

        resolution = self.identity_resolver.resolve(author, remote.foreign_author_id)
        if resolution.change is IdentityChange.UNCHANGED:
            return self._refresh_in_place(author, remote)
        if resolution.change is IdentityChange.CHANGED:
            return self._move_author(author, remote)
        return self._merge_author(author, resolution.existing, remote)

    def refresh_many(self, author_ids: Iterable[int]) -> Dict[int, Union[RefreshResult, ShelfSyncError]]:
        """Refresh several authors one after another.

        A ShelfSyncError for one author is recorded against its id and the
        remaining authors are still refreshed. Any other exception propagates.
        """
        results: Dict[int, Union[RefreshResult, ShelfSyncError]] = {}
        for author_id in author_ids:
            try:
                results[author_id] = self.refresh(author_id)
            except ProviderTransportError as e:
                # Already logged by refresh
                results[author_id] = e
            except ShelfSyncError as e:
                self.logger.error(f"Refresh failed for author {author_id}: {e}")
                results[author_id] = e
        return results

    def _handle_missing_upstream(self, author: Author) -> RefreshResult:
        self.logger.error(
            f"Author {author.name} [{author.foreign_author_id}] was not found upstream, "
            f"it may have been removed or merged"
        )
        files = self.book_file_repository.get_files_by_author(author.id)
        if files:
            self.logger.error(
                f"Author {author.name} [{author.foreign_author_id}] still has {len(files)} files "
                f"so it was kept, but it cannot be refreshed until it is linked to a valid foreign id"
            )
            return RefreshResult.PRESERVED

        deleted = self.author_repository.delete(author.id, delete_files=False, delete_from_disk=False)
        self.events.publish(AuthorDeletedEvent(deleted, delete_files=False, delete_from_disk=False))
        self.logger.warning(
            f"Author {author.name} [{author.foreign_author_id}] was removed because it no longer "
            f"exists upstream and has no files"
        )
        return RefreshResult.DELETED

    def _refresh_in_place(self, author: Author, remote: RemoteAuthor) -> RefreshResult:
        changed = author.metadata_record.apply_values(remote.metadata.column_values())
        if changed:
            author.clean_name = clean_name(remote.metadata.name)
            author = self.author_repository.update(author)
            self.events.publish(AuthorUpdatedEvent(author))

        self.book_reconciler.reconcile(author, remote.books)
        self.author_repository.mark_synced(author.id)

        self.logger.debug(f"Finished refreshing {author.name}")
        self.events.publish(AuthorRefreshCompleteEvent(author))
        return RefreshResult.UPDATED if changed else RefreshResult.UNCHANGED

    def _move_author(self, author: Author, remote: RemoteAuthor) -> RefreshResult:
        self.logger.info(
            f"Author {author.name} moved from [{author.foreign_author_id}] to [{remote.foreign_author_id}]"
        )
        # An orphaned metadata row may already carry the new id
        metadata = self.author_repository.find_metadata(remote.foreign_author_id) or AuthorMetadata()
        metadata.apply_values(remote.metadata.column_values())
        author.metadata_record = metadata
        author.clean_name = clean_name(remote.metadata.name)

        # Commit the new identity before touching any book
        author = self.author_repository.update(author)
        self.events.publish(AuthorUpdatedEvent(author))

        self.book_reconciler.reconcile(author, remote.books)

        author.last_synced_at = datetime.now(UTC)
        author = self.author_repository.update(author)

        self.events.publish(AuthorRefreshCompleteEvent(author))
        return RefreshResult.MOVED

    def _merge_author(self, superseded: Author, surviving: Author, remote: RemoteAuthor) -> RefreshResult:
        self.logger.warning(
            f"Author {superseded.name} [{superseded.foreign_author_id}] was replaced by "
            f"{surviving.name} [{remote.foreign_author_id}] upstream, merging into author {surviving.id}"
        )
        surviving = self.author_merger.merge(superseded, surviving, remote)
        self.events.publish(AuthorUpdatedEvent(surviving))

        self.book_reconciler.reconcile(surviving, remote.books)

        surviving.last_synced_at = datetime.now(UTC)
        surviving = self.author_repository.update(surviving)

        self.events.publish(AuthorRefreshCompleteEvent(surviving))
        return RefreshResult.MERGED
