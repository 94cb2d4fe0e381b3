# shelfsync/sa/models/history.py
from datetime import datetime, UTC
from enum import Enum
from sqlalchemy import String, Integer, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base

class HistoryEventType(str, Enum):
    GRABBED = "grabbed"
    BOOK_FILE_IMPORTED = "book_file_imported"
    DOWNLOAD_FAILED = "download_failed"
    BOOK_FILE_DELETED = "book_file_deleted"
    BOOK_FILE_RENAMED = "book_file_renamed"
    BOOK_FILE_RETAGGED = "book_file_retagged"
    BOOK_IMPORT_INCOMPLETE = "book_import_incomplete"
    DOWNLOAD_IGNORED = "download_ignored"

class History(Base):
    __tablename__ = 'history'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    author_id: Mapped[int | None] = mapped_column(ForeignKey('author.id'), nullable=True)
    book_id: Mapped[int | None] = mapped_column(ForeignKey('book.id'), nullable=True)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source_title: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    download_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    data: Mapped[dict] = mapped_column(JSON, default=dict)
    date: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    # Relationships
    author = relationship('Author', back_populates='history')
    book = relationship('Book', back_populates='history')

    __table_args__ = (
        Index('idx_history_author_id', 'author_id'),
        Index('idx_history_book_id', 'book_id'),
    )
