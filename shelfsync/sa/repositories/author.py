# shelfsync/sa/repositories/author.py
from typing import Optional, List
from datetime import datetime, timedelta, UTC
from sqlalchemy import update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from shelfsync.exceptions import AuthorNotFoundError, PersistenceError
from ..models import Author, AuthorMetadata, Book, BookFile, History

class AuthorRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, author_id: int) -> Optional[Author]:
        """Get an author by its local id"""
        return self.session.get(Author, author_id)

    def get_by_foreign_id(self, foreign_author_id: str) -> Optional[Author]:
        """Get the author whose metadata carries this foreign id"""
        return (
            self.session.query(Author)
            .join(Author.metadata_record)
            .filter(AuthorMetadata.foreign_author_id == foreign_author_id)
            .first()
        )

    def find_metadata(self, foreign_author_id: str) -> Optional[AuthorMetadata]:
        """Get a metadata row by foreign id, whether or not an author still uses it"""
        return (
            self.session.query(AuthorMetadata)
            .filter(AuthorMetadata.foreign_author_id == foreign_author_id)
            .first()
        )

    def get_authors_to_refresh(self, days_old: int = 30) -> List[Author]:
        """Get authors not synced within the specified number of days, oldest first
        
        Args:
            days_old: Number of days since last sync
            
        Returns:
            List of Author objects that need refreshing, never-synced authors first
        """
        cutoff_date = datetime.now(UTC) - timedelta(days=days_old)
        return (
            self.session.query(Author)
            .filter(
                (Author.last_synced_at.is_(None)) |
                (Author.last_synced_at < cutoff_date)
            )
            .order_by(Author.last_synced_at.asc().nullsfirst(), Author.id)
            .all()
        )

    def insert(self, author: Author) -> Author:
        """Insert a new author together with its metadata"""
        try:
            self.session.add(author)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Unable to insert author {author.foreign_author_id}: {e}") from e
        return author

    def update(self, author: Author, commit: bool = True) -> Author:
        """Persist an author and its metadata.

        When the author has been attached to a different metadata row, books
        still owned by the previous row are moved to the new one so nothing is
        left behind under the old foreign id.
        
        Returns:
            The persisted author
        """
        previous_metadata_id = author.author_metadata_id
        try:
            self.session.add(author)
            self.session.flush()
            if previous_metadata_id is not None and previous_metadata_id != author.author_metadata_id:
                self.session.execute(
                    update(Book)
                    .where(Book.author_metadata_id == previous_metadata_id)
                    .values(author_metadata_id=author.author_metadata_id)
                )
            if commit:
                self.session.commit()
        except SQLAlchemyError as e:
            if commit:
                self.session.rollback()
            raise PersistenceError(f"Unable to update author {author.id}: {e}") from e
        return author

    def mark_synced(self, author_id: int, synced_at: Optional[datetime] = None) -> None:
        """Stamp last_synced_at without touching any other column"""
        try:
            self.session.execute(
                update(Author)
                .where(Author.id == author_id)
                .values(last_synced_at=synced_at or datetime.now(UTC))
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Unable to mark author {author_id} as synced: {e}") from e

    def delete(self, author_id: int, delete_files: bool = False, delete_from_disk: bool = False,
               commit: bool = True) -> Author:
        """Remove an author from the catalog.

        Only catalog rows are touched: the author, the books its metadata still
        owns and its history. ``delete_files`` removes the book file rows of
        those books; otherwise they are kept as unmapped files. ``delete_from_disk``
        is never acted on here, it is carried on the deletion event for whoever
        manages the file system.
        
        Returns:
            The deleted author
            
        Raises:
            AuthorNotFoundError: If no author has this id
            PersistenceError: If the delete fails
        """
        author = self.get_by_id(author_id)
        if author is None:
            raise AuthorNotFoundError(author_id)

        try:
            book_ids = [
                book_id for (book_id,) in self.session.query(Book.id)
                .filter(Book.author_metadata_id == author.author_metadata_id)
                .all()
            ]
            if book_ids:
                if delete_files:
                    self.session.execute(delete(BookFile).where(BookFile.book_id.in_(book_ids)))
                else:
                    self.session.execute(
                        update(BookFile)
                        .where(BookFile.book_id.in_(book_ids))
                        .values(book_id=None)
                    )
                self.session.execute(
                    update(History).where(History.book_id.in_(book_ids)).values(book_id=None)
                )
                self.session.execute(delete(Book).where(Book.id.in_(book_ids)))
            self.session.execute(delete(History).where(History.author_id == author_id))
            self.session.delete(author)
            self.session.flush()
            if commit:
                self.session.commit()
        except SQLAlchemyError as e:
            if commit:
                self.session.rollback()
            raise PersistenceError(f"Unable to delete author {author_id}: {e}") from e
        return author
