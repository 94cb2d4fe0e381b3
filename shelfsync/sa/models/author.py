# shelfsync/sa/models/author.py
from datetime import datetime, date, UTC
from enum import Enum
from sqlalchemy import String, Integer, Float, Boolean, Date, DateTime, Text, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, LastSyncedMixin, RefreshableMixin

class NewItemMonitorType(str, Enum):
    ALL = "all"          # Monitor every book that shows up on refresh
    NONE = "none"        # New books are added unmonitored

class AuthorMetadata(Base, TimestampMixin, RefreshableMixin):
    """Descriptive data for an author, keyed by the provider's foreign id.

    Books are owned by the metadata row rather than the author row, so an
    author can be pointed at a different metadata row when its foreign id moves.
    """
    __tablename__ = 'author_metadata'
    __refreshed_fields__ = (
        'foreign_author_id', 'title_slug', 'name', 'sort_name', 'disambiguation',
        'overview', 'gender', 'hometown', 'born', 'died', 'status', 'images',
        'links', 'genres', 'aliases', 'ratings_votes', 'ratings_value', 'ratings_popularity',
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    foreign_author_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title_slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sort_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    disambiguation: Mapped[str | None] = mapped_column(String(255), nullable=True)
    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(50), nullable=True)
    hometown: Mapped[str | None] = mapped_column(String(255), nullable=True)
    born: Mapped[date | None] = mapped_column(Date, nullable=True)
    died: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    images: Mapped[list] = mapped_column(JSON, default=list)
    links: Mapped[list] = mapped_column(JSON, default=list)
    genres: Mapped[list] = mapped_column(JSON, default=list)
    aliases: Mapped[list] = mapped_column(JSON, default=list)
    ratings_votes: Mapped[int] = mapped_column(Integer, default=0)
    ratings_value: Mapped[float] = mapped_column(Float, default=0.0)
    ratings_popularity: Mapped[float] = mapped_column(Float, default=0.0)

    # Relationships
    authors = relationship('Author', back_populates='metadata_record')
    books = relationship('Book', back_populates='author_metadata')

    __table_args__ = (
        Index('idx_author_metadata_name', 'name'),
    )

    def __repr__(self) -> str:
        return f"<AuthorMetadata {self.foreign_author_id} '{self.name}'>"

class Author(Base, TimestampMixin, LastSyncedMixin):
    __tablename__ = 'author'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    author_metadata_id: Mapped[int] = mapped_column(ForeignKey('author_metadata.id'), unique=True, nullable=False)
    clean_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    monitored: Mapped[bool] = mapped_column(Boolean, default=True)
    monitor_new_items: Mapped[str] = mapped_column(String(20), default=NewItemMonitorType.ALL.value)
    path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    metadata_profile_id: Mapped[int | None] = mapped_column(ForeignKey('metadata_profile.id'), nullable=True)
    added: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    # Relationships
    metadata_record = relationship('AuthorMetadata', back_populates='authors', lazy='joined')
    metadata_profile = relationship('MetadataProfile')
    history = relationship('History', back_populates='author')

    __table_args__ = (
        # Sync tracking indexes
        Index('idx_author_last_synced_at', 'last_synced_at'),
    )

    # `metadata` is reserved on declarative classes, hence metadata_record
    @property
    def foreign_author_id(self) -> str | None:
        return self.metadata_record.foreign_author_id if self.metadata_record else None

    @property
    def name(self) -> str | None:
        return self.metadata_record.name if self.metadata_record else None

    def __repr__(self) -> str:
        return f"<Author {self.id} {self.foreign_author_id} '{self.name}'>"
