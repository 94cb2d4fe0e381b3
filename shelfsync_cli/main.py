# shelfsync_cli/main.py
import click
from .commands.db import db
from .commands.author import author

@click.group()
def cli():
    """Shelfsync author catalog CLI"""
    pass

cli.add_command(db)
cli.add_command(author)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
