import pytest
from click.testing import CliRunner
from unittest.mock import patch
from shelfsync.exceptions import AuthorNotFoundUpstream, ProviderTransportError
from shelfsync.models.remote import RemoteAuthor, RemoteAuthorMetadata
from shelfsync.sa.database import Database
from shelfsync.sa.models import Author, Book
from shelfsync.utils.rate_limit import RateLimiter
from shelfsync_cli.main import cli

@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'catalog.db'}"

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def initialised(runner, database_url):
    result = runner.invoke(cli, ['db', 'init', '--database-url', database_url])
    assert result.exit_code == 0
    return database_url

@pytest.fixture
def mock_provider():
    with patch('shelfsync_cli.commands.author.HttpAuthorInfoProvider') as provider_cls, \
         patch('shelfsync_cli.commands.author.setup_logging'):
        yield provider_cls.return_value

@pytest.fixture
def remote_author(remote_builders):
    return RemoteAuthor(
        metadata=RemoteAuthorMetadata(foreign_author_id="100", name="Ann Leckie"),
        books=[remote_builders.book("b1", "Ancillary Justice", release_date=None)]
    )

def count(database_url, model):
    with Database(database_url).get_db() as session:
        return session.query(model).count()

def test_db_init(runner, database_url):
    result = runner.invoke(cli, ['db', 'init', '--database-url', database_url])

    assert result.exit_code == 0
    assert "Database initialised" in result.output
    assert "Standard" in result.output

def test_add_author_imports_books(runner, initialised, mock_provider, remote_author, remote_builders):
    remote_author.books.append(remote_builders.book("b2", "Ancillary Sword"))
    mock_provider.get_author_and_books.return_value = remote_author

    result = runner.invoke(cli, ['author', 'add', '100', '--path', '/books/Ann Leckie',
                                 '--database-url', initialised])

    assert result.exit_code == 0
    assert "Added Ann Leckie" in result.output
    # The standard profile skips books without a release date
    assert "1 books" in result.output
    assert count(initialised, Author) == 1
    assert count(initialised, Book) == 1

def test_add_existing_author(runner, initialised, mock_provider, remote_author):
    mock_provider.get_author_and_books.return_value = remote_author
    runner.invoke(cli, ['author', 'add', '100', '--database-url', initialised])

    result = runner.invoke(cli, ['author', 'add', '100', '--database-url', initialised])

    assert result.exit_code == 0
    assert "already in the catalog" in result.output
    assert count(initialised, Author) == 1

def test_add_unknown_author(runner, initialised, mock_provider):
    mock_provider.get_author_and_books.side_effect = AuthorNotFoundUpstream("999")

    result = runner.invoke(cli, ['author', 'add', '999', '--database-url', initialised])

    assert result.exit_code == 1
    assert "No author found with ID: 999" in result.output
    assert count(initialised, Author) == 0

def test_add_provider_failure(runner, initialised, mock_provider):
    mock_provider.get_author_and_books.side_effect = ProviderTransportError("timed out")

    result = runner.invoke(cli, ['author', 'add', '100', '--database-url', initialised])

    assert result.exit_code == 1
    assert "Error adding author: timed out" in result.output

def test_refresh_stale_authors(runner, initialised, mock_provider, remote_author, remote_builders):
    mock_provider.get_author_and_books.return_value = remote_author
    runner.invoke(cli, ['author', 'add', '100', '--database-url', initialised])
    remote_author.books.append(remote_builders.book("b2", "Ancillary Sword"))

    # Synced by add, so nothing is stale yet
    result = runner.invoke(cli, ['author', 'refresh', '--database-url', initialised])
    assert result.exit_code == 0
    assert "Processed: 0 authors" in result.output

    result = runner.invoke(cli, ['author', 'refresh', '--id', '1', '--database-url', initialised])
    assert result.exit_code == 0
    assert "Processed: 1 authors" in result.output
    assert "Unchanged: 1" in result.output
    # b1 has no release date and stays filtered
    assert count(initialised, Book) == 1

def test_refresh_reports_failures(runner, initialised, mock_provider, remote_author):
    mock_provider.get_author_and_books.return_value = remote_author
    runner.invoke(cli, ['author', 'add', '100', '--database-url', initialised])
    mock_provider.get_author_and_books.side_effect = ProviderTransportError("server error")

    result = runner.invoke(cli, ['author', 'refresh', '--id', '1', '--id', '42',
                                 '--database-url', initialised, '--verbose'])

    assert result.exit_code == 0
    assert "Processed: 0 authors" in result.output
    assert "Reason: Error: server error" in result.output
    assert "Reason: Author no longer exists" in result.output

@pytest.mark.parametrize("flag,expects_limiter", [
    ('--delay', True),
    ('--no-delay', False),
])
def test_refresh_delay_option_controls_rate_limiter(runner, initialised, flag, expects_limiter):
    with patch('shelfsync_cli.commands.author.HttpAuthorInfoProvider') as provider_cls, \
         patch('shelfsync_cli.commands.author.setup_logging'):
        result = runner.invoke(cli, ['author', 'refresh', flag, '--database-url', initialised])

    assert result.exit_code == 0
    rate_limiter = provider_cls.call_args.kwargs['rate_limiter']
    assert isinstance(rate_limiter, RateLimiter) is expects_limiter
    if not expects_limiter:
        assert rate_limiter is None
