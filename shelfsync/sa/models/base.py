# shelfsync/sa/models/base.py
from datetime import datetime, UTC
from typing import Any, Mapping
from sqlalchemy.orm import DeclarativeBase, mapped_column, Mapped
from sqlalchemy import DateTime

class Base(DeclarativeBase):
    """Base class for all models"""
    pass

class TimestampMixin:
    """Mixin to add created_at and updated_at columns"""
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

class LastSyncedMixin:
    """Mixin to add the last_synced_at column used to pick stale records"""
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

class RefreshableMixin:
    """Field-wise comparison against values coming from the metadata provider.

    Subclasses list the columns that mirror remote data in ``__refreshed_fields__``.
    Synthetic ids and local state (monitored, paths, timestamps) are never listed.
    """
    __refreshed_fields__: tuple = ()

    def apply_values(self, values: Mapping[str, Any]) -> bool:
        """Copy the refreshed fields present in ``values``.

        Returns:
            True if at least one field differed from the stored value
        """
        changed = False
        for field in self.__refreshed_fields__:
            if field not in values:
                continue
            if getattr(self, field) != values[field]:
                setattr(self, field, values[field])
                changed = True
        return changed
