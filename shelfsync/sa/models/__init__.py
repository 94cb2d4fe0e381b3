# shelfsync/sa/models/__init__.py
from .base import Base, TimestampMixin, LastSyncedMixin, RefreshableMixin
from .author import Author, AuthorMetadata, NewItemMonitorType
from .book import Book
from .book_file import BookFile
from .history import History, HistoryEventType
from .exclusion import ImportListExclusion
from .metadata_profile import MetadataProfile

__all__ = [
    'Base',
    'TimestampMixin',
    'LastSyncedMixin',
    'RefreshableMixin',
    'Author',
    'AuthorMetadata',
    'NewItemMonitorType',
    'Book',
    'BookFile',
    'History',
    'HistoryEventType',
    'ImportListExclusion',
    'MetadataProfile'
]
