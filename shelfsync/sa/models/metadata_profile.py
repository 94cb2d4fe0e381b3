# shelfsync/sa/models/metadata_profile.py
from sqlalchemy import String, Integer, Float, Boolean, JSON
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin

class MetadataProfile(Base, TimestampMixin):
    """Rules deciding which remote books are worth adding for an author"""
    __tablename__ = 'metadata_profile'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    min_popularity: Mapped[float] = mapped_column(Float, default=0.0)       # Minimum ratings votes
    skip_missing_date: Mapped[bool] = mapped_column(Boolean, default=False)
    skip_parts_and_sets: Mapped[bool] = mapped_column(Boolean, default=False)
    ignored: Mapped[list] = mapped_column(JSON, default=list)              # Title terms to skip
