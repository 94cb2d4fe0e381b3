import click
from typing import Optional, Tuple
from shelfsync.events import EventAggregator, AuthorUpdatedEvent, AuthorDeletedEvent
from shelfsync.exceptions import ShelfSyncError, AuthorNotFoundError, AuthorNotFoundUpstream
from shelfsync.providers.http import HttpAuthorInfoProvider
from shelfsync.sa.database import Database
from shelfsync.sa.models import Author, AuthorMetadata, NewItemMonitorType
from shelfsync.sa.repositories.author import AuthorRepository
from shelfsync.sa.repositories.book import BookRepository
from shelfsync.sa.repositories.metadata_profile import MetadataProfileRepository
from shelfsync.services.refresh_author_service import RefreshAuthorService
from shelfsync.utils.rate_limit import RateLimiter
from shelfsync.utils.text import clean_name
from ..utils import ProgressTracker, create_progress_bar, setup_logging

@click.group()
def author():
    """Author management commands"""
    pass

@author.command()
@click.argument('foreign_id')
@click.option('--path', default=None, help='Folder the author\'s books live in')
@click.option('--profile-id', default=None, type=int, help='Metadata profile id (defaults to the standard profile)')
@click.option('--monitored/--unmonitored', default=True, help='Whether to monitor the author')
@click.option('--monitor-new/--no-monitor-new', default=True, help='Monitor books that appear on later refreshes')
@click.option('--database-url', envvar='DATABASE_URL', default=None, help='SQLAlchemy connection string')
@click.option('--base-url', envvar='METADATA_BASE_URL', default=None, help='Metadata provider base URL')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
@click.pass_context
def add(ctx, foreign_id: str, path: Optional[str], profile_id: Optional[int], monitored: bool,
        monitor_new: bool, database_url: Optional[str], base_url: Optional[str], verbose: bool):
    """Add an author by foreign id and import its books

    Example:
        shelfsync author add 1077326 --path /books/Ursula\\ K.\\ Le\\ Guin
    """
    setup_logging(verbose)
    database = Database(database_url)
    session = database.get_session()
    provider = HttpAuthorInfoProvider(base_url=base_url)

    try:
        author_repo = AuthorRepository(session)
        try:
            remote = provider.get_author_and_books(foreign_id)
        except AuthorNotFoundUpstream:
            click.echo(click.style(f"\nNo author found with ID: {foreign_id}", fg='red'), err=True)
            ctx.exit(1)

        existing = author_repo.get_by_foreign_id(remote.foreign_author_id)
        if existing:
            click.echo(click.style(f"\n{existing.name} is already in the catalog (id {existing.id})", fg='yellow'))
            return

        if profile_id is None:
            profile_id = MetadataProfileRepository(session).get_default().id

        metadata = author_repo.find_metadata(remote.foreign_author_id) or AuthorMetadata()
        metadata.apply_values(remote.metadata.column_values())
        new_author = author_repo.insert(Author(
            metadata_record=metadata,
            clean_name=clean_name(remote.metadata.name),
            monitored=monitored,
            monitor_new_items=(NewItemMonitorType.ALL if monitor_new else NewItemMonitorType.NONE).value,
            path=path,
            metadata_profile_id=profile_id
        ))

        service = RefreshAuthorService.from_session(session, provider)
        service.refresh(new_author.id)
        book_count = len(BookRepository(session).get_books_by_author(new_author.author_metadata_id))
        click.echo(click.style(f"\nAdded {new_author.name}", fg='green') +
                  click.style(f" (id {new_author.id}, {book_count} books)", fg='blue'))
    except ShelfSyncError as e:
        click.echo("\n" + click.style(f"Error adding author: {e}", fg='red'), err=True)
        ctx.exit(1)
    finally:
        session.close()

@author.command()
@click.option('--id', 'author_ids', multiple=True, type=int, help='Refresh a specific author by local id (repeatable)')
@click.option('--days', default=30, help='Refresh authors not synced in this many days')
@click.option('--limit', default=None, type=int, help='Limit number of authors to refresh')
@click.option('--delay/--no-delay', default=True, help='Space out requests to the metadata provider')
@click.option('--database-url', envvar='DATABASE_URL', default=None, help='SQLAlchemy connection string')
@click.option('--base-url', envvar='METADATA_BASE_URL', default=None, help='Metadata provider base URL')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def refresh(author_ids: Tuple[int, ...], days: int, limit: Optional[int], delay: bool,
            database_url: Optional[str], base_url: Optional[str], verbose: bool):
    """Refresh authors and their books from the metadata provider

    Example:
        shelfsync author refresh --days 7  # Refresh authors not synced in 7 days
        shelfsync author refresh --id 12 --id 40  # Refresh specific authors
    """
    setup_logging(verbose)
    database = Database(database_url)
    session = database.get_session()

    try:
        events = EventAggregator()
        if verbose:
            events.subscribe(AuthorUpdatedEvent, lambda e: click.echo(
                click.style(f"\nUpdated {e.author.name}", fg='cyan')))
            events.subscribe(AuthorDeletedEvent, lambda e: click.echo(
                click.style(f"\nRemoved {e.author.name}", fg='yellow')))

        provider = HttpAuthorInfoProvider(
            base_url=base_url,
            rate_limiter=RateLimiter() if delay else None
        )
        service = RefreshAuthorService.from_session(session, provider, events)
        author_repo = AuthorRepository(session)
        tracker = ProgressTracker(verbose)

        if author_ids:
            targets = [(author_id, str(author_id)) for author_id in author_ids]
        else:
            targets = [(a.id, a.name) for a in author_repo.get_authors_to_refresh(days)]
            if limit:
                targets = targets[:limit]
        names = dict(targets)

        if verbose:
            click.echo(click.style(f"\nFound {len(targets)} authors to refresh", fg='blue'))

        with create_progress_bar(targets, verbose, 'Refreshing authors',
                                 lambda t: t[1]) as target_iter:
            results = service.refresh_many(author_id for author_id, _ in target_iter)

        for author_id, result in results.items():
            if isinstance(result, AuthorNotFoundError):
                # Merged away earlier in this run
                tracker.add_skipped(names[author_id], str(author_id), "Author no longer exists", 'yellow')
            elif isinstance(result, ShelfSyncError):
                tracker.add_skipped(names[author_id], str(author_id), f"Error: {result}", 'red')
            else:
                tracker.add_outcome(result.value)

        tracker.print_results('authors')
    finally:
        session.close()

if __name__ == '__main__':
    author()
