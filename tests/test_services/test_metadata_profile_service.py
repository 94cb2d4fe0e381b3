import pytest
from datetime import date, timedelta
from unittest.mock import Mock
from shelfsync.models.remote import Ratings
from shelfsync.sa.models import Author, MetadataProfile
from shelfsync.sa.repositories import BookFileRepository, HistoryRepository, MetadataProfileRepository
from shelfsync.services.metadata_profile_service import (
    MetadataProfileService, is_part_or_set, contains_ignored_term
)

@pytest.fixture
def profile():
    return MetadataProfile(
        id=1,
        name="Strict",
        min_popularity=50,
        skip_missing_date=True,
        skip_parts_and_sets=True,
        ignored=["abridged"]
    )

@pytest.fixture
def profile_repo(profile):
    repo = Mock(spec=MetadataProfileRepository)
    repo.get.return_value = profile
    return repo

@pytest.fixture
def book_file_repo():
    repo = Mock(spec=BookFileRepository)
    repo.get_files_by_author.return_value = []
    return repo

@pytest.fixture
def history_repo():
    repo = Mock(spec=HistoryRepository)
    repo.get_by_author.return_value = []
    return repo

@pytest.fixture
def service(profile_repo, book_file_repo, history_repo):
    return MetadataProfileService(profile_repo, book_file_repo, history_repo)

@pytest.fixture
def author():
    return Author(id=1, metadata_profile_id=1)

def ids(books):
    return [b.foreign_book_id for b in books]

def test_filters_unpopular_books(service, author, remote_builders):
    books = [
        remote_builders.book("popular"),
        remote_builders.book("obscure", ratings=Ratings(votes=3)),
    ]

    assert ids(service.filter_books(author, books)) == ["popular"]

def test_keeps_unreleased_books_regardless_of_popularity(service, author, remote_builders):
    upcoming = remote_builders.book("upcoming", ratings=Ratings(votes=0),
                                    release_date=date.today() + timedelta(days=30))

    assert ids(service.filter_books(author, [upcoming])) == ["upcoming"]

def test_filters_books_without_release_date(service, author, remote_builders):
    books = [remote_builders.book("dated"), remote_builders.book("undated", release_date=None)]

    assert ids(service.filter_books(author, books)) == ["dated"]

def test_filters_parts_and_sets(service, author, remote_builders):
    books = [
        remote_builders.book("1", "Ancillary Justice"),
        remote_builders.book("2", "Ancillary Sword"),
        remote_builders.book("3", "Ancillary Justice & Ancillary Sword"),
        remote_builders.book("4", "The Imperial Radch Boxed Set"),
        remote_builders.book("5", "Imperial Radch, Books 1-3"),
        remote_builders.book("6", "Provenance", series_position="1-2"),
    ]

    assert ids(service.filter_books(author, books)) == ["1", "2"]

def test_filters_ignored_terms(service, author, remote_builders):
    books = [remote_builders.book("1", "Provenance"), remote_builders.book("2", "Provenance (Abridged)")]

    assert ids(service.filter_books(author, books)) == ["1"]

def test_books_with_files_or_history_are_never_filtered(service, author, remote_builders,
                                                        book_file_repo, history_repo):
    book_file_repo.get_files_by_author.return_value = [Mock(book=Mock(foreign_book_id="owned"))]
    history_repo.get_by_author.return_value = [
        Mock(book=Mock(foreign_book_id="grabbed")),
        Mock(book=None),
    ]
    books = [
        remote_builders.book("owned", "Owned Boxed Set", ratings=Ratings(votes=0)),
        remote_builders.book("grabbed", release_date=None),
        remote_builders.book("other", release_date=None),
    ]

    assert ids(service.filter_books(author, books)) == ["owned", "grabbed"]

def test_author_without_profile_keeps_everything(service, remote_builders, profile_repo):
    author = Author(id=2, metadata_profile_id=None)
    books = [remote_builders.book("1", ratings=Ratings(votes=0), release_date=None)]

    assert ids(service.filter_books(author, books)) == ["1"]
    profile_repo.get.assert_not_called()

def test_logs_skipped_books(service, author, remote_builders, caplog):
    books = [remote_builders.book("1", release_date=None), remote_builders.book("2", release_date=None)]

    with caplog.at_level('DEBUG'):
        service.filter_books(author, books)

    assert "Skipping 2 books because missing release date" in caplog.text

@pytest.mark.parametrize("title,expected", [
    ("The Complete Collection", True),
    ("Discworld Omnibus", True),
    ("Vol. 1-4", True),
    ("Books I-III", True),
    ("Three Books Collection", True),
    ("Leviathan Wakes", False),
    ("Caliban's War", False),
])
def test_is_part_or_set(remote_builders, title, expected):
    assert is_part_or_set(remote_builders.book("1", title), set()) is expected

def test_is_part_or_set_slash_titles_need_known_parts(remote_builders):
    book = remote_builders.book("3", "Dune / Dune Messiah")

    assert is_part_or_set(book, {"dune", "dune messiah"}) is True
    assert is_part_or_set(book, {"dune"}) is False

def test_numeric_series_position_is_not_a_set(remote_builders):
    assert is_part_or_set(remote_builders.book("1", "Dune", series_position="1.5"), set()) is False

def test_contains_ignored_term():
    assert contains_ignored_term("Dune (Unabridged)", ["UNABRIDGED"]) is True
    assert contains_ignored_term("Dune", ["", "abridged"]) is False
