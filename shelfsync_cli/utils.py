import click
import logging
from collections import Counter
from typing import List, Any, Callable, Optional, Dict

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr, DEBUG when verbose, INFO otherwise"""
    root = logging.getLogger()
    if not any(getattr(h, '_shelfsync', False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._shelfsync = True
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    # Engine chatter is only useful when debugging SQL
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

class ProgressTracker:
    """Tracks refresh outcomes and failed items during batch operations"""
    
    def __init__(self, verbose: bool = False):
        self.processed = 0
        self.outcomes: Counter = Counter()
        self.skipped: List[Dict[str, str]] = []
        self.verbose = verbose
        
    def add_skipped(self, name: str, id: str, reason: str, color: str = 'yellow'):
        """Add a skipped item to the tracking"""
        if self.verbose or color == 'red':  # Always track errors
            self.skipped.append({
                'name': name,
                'id': id,
                'reason': reason,
                'color': color
            })
    
    def add_outcome(self, outcome: str):
        """Count a finished item under its outcome"""
        self.processed += 1
        self.outcomes[outcome] += 1
    
    def print_results(self, item_type: str = 'items'):
        """Print the results of the operation"""
        click.echo("\n" + click.style("Results:", fg='blue'))
        click.echo(click.style("Processed: ", fg='blue') + 
                  click.style(str(self.processed), fg='cyan') + 
                  click.style(f" {item_type}", fg='blue'))
        for outcome, count in sorted(self.outcomes.items()):
            click.echo(click.style(f"{outcome.capitalize()}: ", fg='blue') +
                      click.style(str(count), fg='green'))
        
        if self.skipped and self.verbose:
            click.echo("\n" + click.style("Failed items:", fg='yellow'))
            for skip_info in self.skipped:
                click.echo("\n" + click.style(f"Name: {skip_info['name']}", fg=skip_info['color']))
                click.echo(click.style(f"ID: {skip_info['id']}", fg=skip_info['color']))
                click.echo(click.style(f"Reason: {skip_info['reason']}", fg=skip_info['color']))
        elif self.skipped:
            click.echo(click.style(f"\nFailed {len(self.skipped)} items. ", fg='yellow') + 
                      click.style("Use --verbose to see details.", fg='blue'))

def create_progress_bar(items: List[Any], verbose: bool = False, 
                       label: str = 'Processing', 
                       item_name_func: Optional[Callable[[Any], str]] = None) -> click.progressbar:
    """Create a standardized progress bar for batch operations"""
    return click.progressbar(
        items,
        label=click.style(label, fg='blue'),
        item_show_func=lambda x: click.style(item_name_func(x), fg='cyan') if x and verbose and item_name_func else None,
        show_eta=True,
        show_percent=True,
        width=50
    )
