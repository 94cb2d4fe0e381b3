import pytest
from datetime import date
from shelfsync.exceptions import PersistenceError
from shelfsync.sa.models import Book
from shelfsync.sa.repositories.book import BookRepository

@pytest.fixture
def book_repo(db_session):
    return BookRepository(db_session)

def test_get_books_by_author_orders_by_release_date(book_repo, make_author, make_book):
    author = make_author("100")
    later = make_book(author, "b2", "Later", release_date=date(2010, 1, 1))
    earlier = make_book(author, "b1", "Earlier", release_date=date(2000, 1, 1))
    undated = make_book(author, "b3", "Undated", release_date=None)
    make_book(make_author("200"), "b4")

    books = book_repo.get_books_by_author(author.author_metadata_id)

    assert [b.id for b in books] == [earlier.id, later.id, undated.id]

def test_get_books_for_refresh_includes_books_owned_elsewhere(book_repo, make_author, make_book):
    author = make_author("100")
    other = make_author("200")
    owned = make_book(author, "b1")
    elsewhere = make_book(other, "b2")
    unrelated = make_book(other, "b3")

    books = book_repo.get_books_for_refresh(author.author_metadata_id, ["b2", "b9"])

    ids = {b.id for b in books}
    assert ids == {owned.id, elsewhere.id}
    assert unrelated.id not in ids

def test_get_books_for_refresh_with_empty_remote_list(book_repo, make_author, make_book):
    author = make_author("100")
    owned = make_book(author, "b1")

    books = book_repo.get_books_for_refresh(author.author_metadata_id, [])

    assert [b.id for b in books] == [owned.id]

def test_insert_many(book_repo, make_author, db_session):
    author = make_author("100")
    books = [
        Book(author_metadata_id=author.author_metadata_id, foreign_book_id=f"b{i}", title=f"Book {i}")
        for i in range(3)
    ]

    book_repo.insert_many(books)

    assert all(book.id is not None for book in books)
    assert db_session.query(Book).count() == 3

def test_insert_many_rolls_back_whole_batch(book_repo, make_author, make_book, db_session):
    author = make_author("100")
    make_book(author, "b1")
    books = [
        Book(author_metadata_id=author.author_metadata_id, foreign_book_id="b2", title="New"),
        Book(author_metadata_id=author.author_metadata_id, foreign_book_id="b1", title="Duplicate"),
    ]

    with pytest.raises(PersistenceError):
        book_repo.insert_many(books)

    assert db_session.query(Book).count() == 1
    assert book_repo.get_by_foreign_id("b2") is None

def test_update_many(book_repo, make_author, make_book, db_session):
    author = make_author("100")
    first = make_book(author, "b1")
    second = make_book(author, "b2")
    first.title = "Renamed"
    second.monitored = True

    book_repo.update_many([first, second])
    db_session.expire_all()

    assert book_repo.get_by_foreign_id("b1").title == "Renamed"
    assert book_repo.get_by_foreign_id("b2").monitored is True
