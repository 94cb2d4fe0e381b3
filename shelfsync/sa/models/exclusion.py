# shelfsync/sa/models/exclusion.py
from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin

class ImportListExclusion(Base, TimestampMixin):
    """An author or book foreign id the user never wants imported"""
    __tablename__ = 'import_list_exclusion'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    foreign_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(500), nullable=True)
