# shelfsync/providers/__init__.py
from .base import AuthorInfoProvider
from .http import HttpAuthorInfoProvider

__all__ = ['AuthorInfoProvider', 'HttpAuthorInfoProvider']
