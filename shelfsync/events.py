# shelfsync/events.py
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Type

@dataclass
class AuthorUpdatedEvent:
    author: Any

@dataclass
class AuthorRefreshCompleteEvent:
    author: Any

@dataclass
class AuthorDeletedEvent:
    """The author left the catalog. Whoever owns the file system acts on the flags."""
    author: Any
    delete_files: bool = False
    delete_from_disk: bool = False

@dataclass
class BookInfoRefreshedEvent:
    author: Any
    added: List[Any] = field(default_factory=list)
    updated: List[Any] = field(default_factory=list)

Handler = Callable[[Any], None]

class EventAggregator:
    """In-process, fire-and-forget notification bus.

    Handlers run synchronously in subscription order. A handler that raises
    is logged and skipped; publishers never see its error.
    """

    def __init__(self):
        self._handlers: Dict[Type, List[Handler]] = defaultdict(list)
        self.logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: Type, handler: Handler) -> None:
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    def publish(self, event: Any) -> None:
        handlers = self._handlers.get(type(event), [])
        self.logger.debug(f"Publishing {type(event).__name__} to {len(handlers)} handlers")
        for handler in list(handlers):
            try:
                handler(event)
            except Exception:
                self.logger.exception(f"Handler {handler!r} failed for {type(event).__name__}")
