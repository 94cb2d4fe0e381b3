# shelfsync/sa/repositories/book.py
from typing import Optional, List, Iterable
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from shelfsync.exceptions import PersistenceError
from ..models import Book

class BookRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_foreign_id(self, foreign_book_id: str) -> Optional[Book]:
        """Get a book by its foreign id"""
        return self.session.query(Book).filter(Book.foreign_book_id == foreign_book_id).first()

    def get_books_by_author(self, author_metadata_id: int) -> List[Book]:
        """Get every book owned by an author's metadata row"""
        return (
            self.session.query(Book)
            .filter(Book.author_metadata_id == author_metadata_id)
            .order_by(Book.release_date.asc().nulls_last(), Book.title.asc())
            .all()
        )

    def get_books_for_refresh(self, author_metadata_id: int, foreign_book_ids: Iterable[str]) -> List[Book]:
        """Get the local books a refresh has to diff against.
        
        Args:
            author_metadata_id: Metadata id of the author being refreshed
            foreign_book_ids: Foreign ids present in the remote book list
            
        Returns:
            Books owned by the author plus any book, whoever owns it, whose
            foreign id appears in the remote list
        """
        foreign_book_ids = list(foreign_book_ids)
        criteria = [Book.author_metadata_id == author_metadata_id]
        if foreign_book_ids:
            criteria.append(Book.foreign_book_id.in_(foreign_book_ids))
        return self.session.query(Book).filter(or_(*criteria)).all()

    def insert_many(self, books: List[Book], commit: bool = True) -> None:
        """Insert a batch of books in one transaction"""
        try:
            self.session.add_all(books)
            self.session.flush()
            if commit:
                self.session.commit()
        except SQLAlchemyError as e:
            if commit:
                self.session.rollback()
            raise PersistenceError(f"Unable to insert {len(books)} books: {e}") from e

    def update_many(self, books: List[Book], commit: bool = True) -> None:
        """Persist changes to a batch of books in one transaction"""
        try:
            self.session.add_all(books)
            self.session.flush()
            if commit:
                self.session.commit()
        except SQLAlchemyError as e:
            if commit:
                self.session.rollback()
            raise PersistenceError(f"Unable to update {len(books)} books: {e}") from e
