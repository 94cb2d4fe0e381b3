# shelfsync/sa/__init__.py
from .database import Database, atomic
from .models import (
    Base, Author, AuthorMetadata, Book, BookFile,
    History, ImportListExclusion, MetadataProfile
)

__all__ = [
    'Database',
    'atomic',
    'Base',
    'Author',
    'AuthorMetadata',
    'Book',
    'BookFile',
    'History',
    'ImportListExclusion',
    'MetadataProfile'
]
