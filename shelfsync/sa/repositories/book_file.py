# shelfsync/sa/repositories/book_file.py
from typing import List
from sqlalchemy.orm import Session
from ..models import Author, Book, BookFile

class BookFileRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_files_by_author(self, author_id: int) -> List[BookFile]:
        """Get the files attached to any book the author owns"""
        return (
            self.session.query(BookFile)
            .join(Book, BookFile.book_id == Book.id)
            .join(Author, Author.author_metadata_id == Book.author_metadata_id)
            .filter(Author.id == author_id)
            .all()
        )

    def get_unmapped(self) -> List[BookFile]:
        """Get files that no longer belong to a book"""
        return self.session.query(BookFile).filter(BookFile.book_id.is_(None)).all()
