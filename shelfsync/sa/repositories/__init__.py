# shelfsync/sa/repositories/__init__.py
from .author import AuthorRepository
from .book import BookRepository
from .book_file import BookFileRepository
from .history import HistoryRepository
from .exclusion import ImportListExclusionRepository
from .metadata_profile import MetadataProfileRepository

__all__ = [
    'AuthorRepository',
    'BookRepository',
    'BookFileRepository',
    'HistoryRepository',
    'ImportListExclusionRepository',
    'MetadataProfileRepository'
]
