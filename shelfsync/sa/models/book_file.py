# shelfsync/sa/models/book_file.py
from datetime import datetime, UTC
from sqlalchemy import String, Integer, BigInteger, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class BookFile(Base, TimestampMixin):
    """Catalog entry for a file on disk. Unmapped files have no book."""
    __tablename__ = 'book_file'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int | None] = mapped_column(ForeignKey('book.id'), nullable=True)
    path: Mapped[str] = mapped_column(String(1024), unique=True, nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, default=0)
    date_added: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    # Relationships
    book = relationship('Book', back_populates='files')

    __table_args__ = (
        Index('idx_book_file_book_id', 'book_id'),
    )
