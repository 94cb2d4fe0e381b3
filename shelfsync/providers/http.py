# shelfsync/providers/http.py
import os
import logging
from typing import Optional
from urllib.parse import quote
import requests
from shelfsync.exceptions import AuthorNotFoundUpstream, ProviderTransportError
from shelfsync.models.remote import RemoteAuthor
from shelfsync.utils.rate_limit import RateLimiter
from .base import AuthorInfoProvider

DEFAULT_METADATA_BASE_URL = "http://localhost:5000/v1"
DEFAULT_TIMEOUT = 30

class HttpAuthorInfoProvider(AuthorInfoProvider):
    """Resolves authors against a JSON metadata server.

    ``GET {base_url}/author/{foreign_author_id}`` returns the author metadata
    and its books. A 404 means the id no longer resolves. There is no retry:
    failures surface immediately and the caller decides whether to try again.
    """

    def __init__(self,
                 base_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 http_session: Optional[requests.Session] = None,
                 rate_limiter: Optional[RateLimiter] = None):
        self.base_url = (base_url or os.getenv("METADATA_BASE_URL", DEFAULT_METADATA_BASE_URL)).rstrip('/')
        self.timeout = timeout if timeout is not None else float(os.getenv("METADATA_TIMEOUT", DEFAULT_TIMEOUT))
        self.http_session = http_session or requests.Session()
        self.http_session.headers.update({'Accept': 'application/json'})
        self.rate_limiter = rate_limiter
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_url(self, foreign_author_id: str) -> str:
        return f"{self.base_url}/author/{quote(foreign_author_id, safe='')}"

    def get_author_and_books(self, foreign_author_id: str) -> RemoteAuthor:
        url = self.get_url(foreign_author_id)
        if self.rate_limiter:
            self.rate_limiter.delay()

        self.logger.debug(f"Fetching author info: {url}")
        try:
            response = self.http_session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderTransportError(f"Unable to reach metadata provider for {foreign_author_id}: {e}") from e

        if response.status_code == 404:
            raise AuthorNotFoundUpstream(foreign_author_id)

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise ProviderTransportError(
                f"Metadata provider returned {response.status_code} for {foreign_author_id}"
            ) from e

        try:
            # pydantic's ValidationError is a ValueError, as is a JSON decode error
            return RemoteAuthor.model_validate(response.json())
        except ValueError as e:
            raise ProviderTransportError(f"Invalid author payload for {foreign_author_id}: {e}") from e
