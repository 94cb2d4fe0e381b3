# shelfsync/models/remote.py

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import date
from typing import Optional, List, Dict, Any
from enum import Enum
from shelfsync.utils.text import clean_name

class CoverType(str, Enum):
    POSTER = "poster"
    COVER = "cover"
    HEADSHOT = "headshot"
    LOGO = "logo"
    FANART = "fanart"

class RemoteModel(BaseModel):
    """Accepts snake_case or camelCase keys from the provider"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Image(RemoteModel):
    url: str
    cover_type: CoverType = CoverType.POSTER

class Link(RemoteModel):
    url: str
    name: Optional[str] = None

class Ratings(RemoteModel):
    votes: int = 0
    value: float = 0.0
    popularity: float = 0.0

class RemoteBook(RemoteModel):
    """A book as returned by the metadata provider"""
    foreign_book_id: str
    title: str
    title_slug: Optional[str] = None
    release_date: Optional[date] = None
    genres: List[str] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)
    ratings: Ratings = Field(default_factory=Ratings)
    series_position: Optional[str] = None

    def column_values(self) -> Dict[str, Any]:
        """Values for the refreshed columns of a local Book"""
        return {
            'title': self.title,
            'title_slug': self.title_slug,
            'clean_title': clean_name(self.title),
            'release_date': self.release_date,
            'genres': list(self.genres),
            'links': [link.model_dump(mode='json') for link in self.links],
            'ratings_votes': self.ratings.votes,
            'ratings_value': self.ratings.value,
            'ratings_popularity': self.ratings.popularity,
        }

class RemoteAuthorMetadata(RemoteModel):
    foreign_author_id: str
    name: str
    title_slug: Optional[str] = None
    sort_name: Optional[str] = None
    disambiguation: Optional[str] = None
    overview: Optional[str] = None
    gender: Optional[str] = None
    hometown: Optional[str] = None
    born: Optional[date] = None
    died: Optional[date] = None
    status: Optional[str] = None
    images: List[Image] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    aliases: List[str] = Field(default_factory=list)
    ratings: Ratings = Field(default_factory=Ratings)

    def column_values(self) -> Dict[str, Any]:
        """Values for the refreshed columns of a local AuthorMetadata"""
        return {
            'foreign_author_id': self.foreign_author_id,
            'title_slug': self.title_slug,
            'name': self.name,
            'sort_name': self.sort_name,
            'disambiguation': self.disambiguation,
            'overview': self.overview,
            'gender': self.gender,
            'hometown': self.hometown,
            'born': self.born,
            'died': self.died,
            'status': self.status,
            'images': [image.model_dump(mode='json') for image in self.images],
            'links': [link.model_dump(mode='json') for link in self.links],
            'genres': list(self.genres),
            'aliases': list(self.aliases),
            'ratings_votes': self.ratings.votes,
            'ratings_value': self.ratings.value,
            'ratings_popularity': self.ratings.popularity,
        }

class RemoteAuthor(RemoteModel):
    """Author and books resolved from a single foreign id.

    The returned foreign id can differ from the one requested when the
    provider has merged or renumbered the author.
    """
    metadata: RemoteAuthorMetadata
    books: List[RemoteBook] = Field(default_factory=list)

    @property
    def foreign_author_id(self) -> str:
        return self.metadata.foreign_author_id
