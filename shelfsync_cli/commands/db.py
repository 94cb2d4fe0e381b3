import click
from shelfsync.sa.database import Database
from shelfsync.sa.repositories.metadata_profile import MetadataProfileRepository

@click.group()
def db():
    """Database management commands"""
    pass

@db.command()
@click.option('--database-url', envvar='DATABASE_URL', default=None, help='SQLAlchemy connection string')
def init(database_url: str):
    """Create the catalog tables and the default metadata profile"""
    database = Database(database_url)
    database.init_db()
    with database.get_db() as session:
        profile = MetadataProfileRepository(session).get_default()
        click.echo(click.style("Database initialised", fg='green') +
                  click.style(f" (default metadata profile: {profile.name})", fg='blue'))
