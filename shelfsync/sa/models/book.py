# shelfsync/sa/models/book.py
from datetime import datetime, date, UTC
from sqlalchemy import String, Integer, Float, Boolean, Date, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, LastSyncedMixin, RefreshableMixin

class Book(Base, TimestampMixin, LastSyncedMixin, RefreshableMixin):
    __tablename__ = 'book'
    __refreshed_fields__ = (
        'title', 'title_slug', 'clean_title', 'release_date', 'genres', 'links',
        'ratings_votes', 'ratings_value', 'ratings_popularity',
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    author_metadata_id: Mapped[int] = mapped_column(ForeignKey('author_metadata.id'), nullable=False)
    foreign_book_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    title_slug: Mapped[str | None] = mapped_column(String(500), nullable=True)
    clean_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    release_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    genres: Mapped[list] = mapped_column(JSON, default=list)
    links: Mapped[list] = mapped_column(JSON, default=list)
    ratings_votes: Mapped[int] = mapped_column(Integer, default=0)
    ratings_value: Mapped[float] = mapped_column(Float, default=0.0)
    ratings_popularity: Mapped[float] = mapped_column(Float, default=0.0)
    monitored: Mapped[bool] = mapped_column(Boolean, default=False)
    any_edition_ok: Mapped[bool] = mapped_column(Boolean, default=True)
    added: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    # Relationships
    author_metadata = relationship('AuthorMetadata', back_populates='books')
    files = relationship('BookFile', back_populates='book')
    history = relationship('History', back_populates='book')

    __table_args__ = (
        Index('idx_book_author_metadata_id', 'author_metadata_id'),
        Index('idx_book_title', 'title'),
    )

    def __repr__(self) -> str:
        return f"<Book {self.foreign_book_id} '{self.title}'>"
