# tests/conftest.py
import sys
import pytest
from pathlib import Path
from datetime import date

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy.orm import Session
from shelfsync.models.remote import RemoteAuthor, RemoteAuthorMetadata, RemoteBook, Ratings
from shelfsync.sa.database import Database
from shelfsync.sa.models import Author, AuthorMetadata, Book, BookFile, MetadataProfile
from shelfsync.utils.text import clean_name

@pytest.fixture
def database():
    """Create a fresh in-memory database for each test"""
    db = Database("sqlite://")
    db.init_db()
    yield db
    db.drop_db()
    db.engine.dispose()

@pytest.fixture
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def metadata_profile(db_session):
    """A profile that lets every book through"""
    profile = MetadataProfile(
        name="Everything",
        min_popularity=0,
        skip_missing_date=False,
        skip_parts_and_sets=False,
        ignored=[]
    )
    db_session.add(profile)
    db_session.commit()
    return profile

@pytest.fixture
def make_author(db_session, metadata_profile):
    """Factory creating a persisted author with its metadata"""
    def _make_author(foreign_author_id: str, name: str = None, **kwargs) -> Author:
        metadata = AuthorMetadata(
            foreign_author_id=foreign_author_id,
            name=name or f"Author {foreign_author_id}",
            overview="An author",
            images=[],
            links=[],
            genres=[],
            aliases=[],
            ratings_votes=10,
            ratings_value=4.0,
            ratings_popularity=40.0
        )
        kwargs.setdefault('monitored', True)
        kwargs.setdefault('monitor_new_items', 'all')
        kwargs.setdefault('metadata_profile_id', metadata_profile.id)
        author = Author(metadata_record=metadata, path=f"/books/{foreign_author_id}", **kwargs)
        db_session.add(author)
        db_session.commit()
        return author
    return _make_author

@pytest.fixture
def make_book(db_session):
    """Factory creating a persisted book owned by an author"""
    def _make_book(author: Author, foreign_book_id: str, title: str = None, **kwargs) -> Book:
        # Defaults mirror remote_book() so an untouched remote book is not a change
        title = title or f"Book {foreign_book_id}"
        kwargs.setdefault('release_date', date(2001, 1, 1))
        kwargs.setdefault('clean_title', clean_name(title))
        kwargs.setdefault('genres', [])
        kwargs.setdefault('links', [])
        kwargs.setdefault('ratings_votes', 100)
        kwargs.setdefault('ratings_value', 4.0)
        kwargs.setdefault('ratings_popularity', 400.0)
        book = Book(
            author_metadata_id=author.author_metadata_id,
            foreign_book_id=foreign_book_id,
            title=title,
            **kwargs
        )
        db_session.add(book)
        db_session.commit()
        return book
    return _make_book

@pytest.fixture
def make_book_file(db_session):
    def _make_book_file(book: Book, path: str = None) -> BookFile:
        book_file = BookFile(book_id=book.id, path=path or f"/books/{book.foreign_book_id}.epub", size=1024)
        db_session.add(book_file)
        db_session.commit()
        return book_file
    return _make_book_file

def remote_metadata_for(author: Author, **overrides) -> RemoteAuthorMetadata:
    """Remote metadata identical to what the author already stores"""
    metadata = author.metadata_record
    values = dict(
        foreign_author_id=metadata.foreign_author_id,
        name=metadata.name,
        title_slug=metadata.title_slug,
        sort_name=metadata.sort_name,
        disambiguation=metadata.disambiguation,
        overview=metadata.overview,
        gender=metadata.gender,
        hometown=metadata.hometown,
        born=metadata.born,
        died=metadata.died,
        status=metadata.status,
        images=metadata.images or [],
        links=metadata.links or [],
        genres=metadata.genres or [],
        aliases=metadata.aliases or [],
        ratings=Ratings(
            votes=metadata.ratings_votes or 0,
            value=metadata.ratings_value or 0.0,
            popularity=metadata.ratings_popularity or 0.0
        ),
    )
    values.update(overrides)
    return RemoteAuthorMetadata(**values)

def remote_book(foreign_book_id: str, title: str = None, **kwargs) -> RemoteBook:
    kwargs.setdefault('release_date', date(2001, 1, 1))
    kwargs.setdefault('ratings', Ratings(votes=100, value=4.0, popularity=400.0))
    return RemoteBook(foreign_book_id=foreign_book_id, title=title or f"Book {foreign_book_id}", **kwargs)

def remote_author_for(author: Author, books=None, **overrides) -> RemoteAuthor:
    return RemoteAuthor(metadata=remote_metadata_for(author, **overrides), books=books or [])

@pytest.fixture
def remote_builders():
    """Builders for provider payloads, exposed as a fixture for test modules"""
    class Builders:
        metadata_for = staticmethod(remote_metadata_for)
        book = staticmethod(remote_book)
        author_for = staticmethod(remote_author_for)
    return Builders
