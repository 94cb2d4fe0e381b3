# shelfsync/services/metadata_profile_service.py
import logging
import re
from datetime import date
from typing import Callable, Iterable, List, Optional, Set
from shelfsync.models.remote import RemoteBook
from shelfsync.sa.models import Author, MetadataProfile
from shelfsync.sa.repositories.book_file import BookFileRepository
from shelfsync.sa.repositories.history import HistoryRepository
from shelfsync.sa.repositories.metadata_profile import MetadataProfileRepository

# Titles containing these (case insensitive) are bundles rather than books
PART_OR_SET_TERMS = [
    "boxed set",
    "box set",
    "boxset",
    "omnibus",
    "complete collection",
    "collection set",
    "book set",
    "books set",
    "novel collection",
    "sampler",
]

# Number ranges indicating several books in one: "Books 1-3", "#1 - 3", "Vol. 1-4", "Books I-III"
PART_OR_SET_PATTERNS = [
    r'#\d+\s*[-–]\s*\d+',
    r'books?\s*\d+\s*[-–]\s*\d+',
    r'books?\s+[ivx]+\s*[-–]\s*[ivx]+',
    r'vols?\.?\s*\d+\s*[-–]\s*\d+',
    r'volumes?\s+\d+\s*[-–]\s*\d+',
    r'series\s+\d+\s*[-–]\s*\d+',
    r'\d+\s*[-–]\s*book\s+collection',
    r'(?:one|two|three|four|five|six|seven|eight|nine|ten|\d+)\s+books?\s+collection',
]

COMBINED_TITLE = re.compile(r'^(?P<a>.+?)\s*(?:&|\band\b)\s*(?P<b>.+)$', re.IGNORECASE)

def _normalise(title: str) -> str:
    return title.strip().lower()

def is_part_or_set(book: RemoteBook, titles: Set[str]) -> bool:
    """Whether a remote book looks like a bundle of other books.

    Args:
        book: The remote book to check
        titles: Normalised titles of every remote book for the same author
    """
    if book.series_position and book.series_position.strip():
        try:
            float(book.series_position)
        except ValueError:
            # "1-3" style positions mark a box set within a series
            return True

    title_lower = book.title.lower()
    for term in PART_OR_SET_TERMS:
        if term in title_lower:
            return True
    for pattern in PART_OR_SET_PATTERNS:
        if re.search(pattern, title_lower):
            return True

    # "Title One / Title Two" when each part is a book in its own right
    parts = [part.strip() for part in book.title.split('/') if part.strip()]
    if len(parts) > 1 and all(_normalise(part) in titles for part in parts):
        return True

    match = COMBINED_TITLE.match(book.title)
    if match and _normalise(match.group('a')) in titles and _normalise(match.group('b')) in titles:
        return True

    return False

def contains_ignored_term(title: str, ignored: Iterable[str]) -> bool:
    title_lower = title.lower()
    return any(term and term.lower() in title_lower for term in ignored)

class MetadataProfileService:
    """Decides which remote books an author's metadata profile lets in.

    Books the user already holds (a file on disk, or any history for the
    author) are never filtered out, whatever the profile says.
    """

    def __init__(self,
                 profile_repository: MetadataProfileRepository,
                 book_file_repository: BookFileRepository,
                 history_repository: HistoryRepository):
        self.profile_repository = profile_repository
        self.book_file_repository = book_file_repository
        self.history_repository = history_repository
        self.logger = logging.getLogger(self.__class__.__name__)

    def filter_books(self, author: Author, remote_books: List[RemoteBook]) -> List[RemoteBook]:
        profile = self._get_profile(author)
        if profile is None:
            return list(remote_books)

        protected = self._protected_foreign_ids(author)
        titles = {_normalise(book.title) for book in remote_books}
        today = date.today()

        rules = [
            ("popularity",
             lambda b: b.ratings.votes >= profile.min_popularity
             or (b.release_date is not None and b.release_date > today)),
            ("missing release date",
             lambda b: not profile.skip_missing_date or b.release_date is not None),
            ("book is part of set",
             lambda b: not profile.skip_parts_and_sets or not is_part_or_set(b, titles)),
            ("contains ignored terms",
             lambda b: not contains_ignored_term(b.title, profile.ignored or [])),
        ]

        books = list(remote_books)
        for message, allowed in rules:
            books = self._filter_by_predicate(books, protected, allowed, message)
        return books

    def _get_profile(self, author: Author) -> Optional[MetadataProfile]:
        if author.metadata_profile_id is None:
            return None
        return self.profile_repository.get(author.metadata_profile_id)

    def _protected_foreign_ids(self, author: Author) -> Set[str]:
        protected = {
            book_file.book.foreign_book_id
            for book_file in self.book_file_repository.get_files_by_author(author.id)
            if book_file.book is not None
        }
        protected.update(
            history.book.foreign_book_id
            for history in self.history_repository.get_by_author(author.id)
            if history.book is not None
        )
        return protected

    def _filter_by_predicate(self,
                             books: List[RemoteBook],
                             protected: Set[str],
                             allowed: Callable[[RemoteBook], bool],
                             message: str) -> List[RemoteBook]:
        kept = [book for book in books if book.foreign_book_id in protected or allowed(book)]
        skipped = len(books) - len(kept)
        if skipped:
            self.logger.debug(f"Skipping {skipped} books because {message}")
        return kept
