# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests. Every store works inside a
# tmp_path sandbox, nothing touches the real user directories.
#
# ==============================================

from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from dvutility import config as dv_config
from dvutility.decoding import DynamicValueDecoder
from dvutility.persistence import ScopedFileStore, StaticDirectoryResolver


@dataclass
class Movie:
    """Sample caller model stored as a dataclass."""
    title: str
    year: int
    rating: float = 0.0
    genres: List[str] = field(default_factory=list)


class Watchlist:
    """Sample caller model using the to_dict / from_dict contract."""

    def __init__(self, owner: str, movie_ids: List[int]):
        self.owner = owner
        self.movie_ids = movie_ids

    def to_dict(self) -> dict:
        return {"owner": self.owner, "movie_ids": self.movie_ids}

    @classmethod
    def from_dict(cls, data: dict) -> "Watchlist":
        return cls(owner=data["owner"], movie_ids=list(data["movie_ids"]))

    def __eq__(self, other):
        return (
            isinstance(other, Watchlist)
            and self.owner == other.owner
            and self.movie_ids == other.movie_ids
        )


@dataclass
class CastMember:
    name: str
    character: str


@dataclass
class MovieDetails:
    """Nested caller model: dataclasses and a to_dict model inside a dataclass."""
    movie: Movie
    cast: List[CastMember] = field(default_factory=list)
    lead: Optional[CastMember] = None
    watchlist: Optional[Watchlist] = None


@pytest.fixture
def decoder():
    return DynamicValueDecoder()


@pytest.fixture
def resolver(tmp_path):
    return StaticDirectoryResolver.sandbox(tmp_path)


@pytest.fixture
def store(resolver):
    return ScopedFileStore(resolver=resolver)


@pytest.fixture
def sample_document():
    """Nested document mixing every JSON shape except null."""
    return {
        "id": 550,
        "title": "Fight Club",
        "vote_average": 8.4,
        "adult": False,
        "budget": 63000000,
        "genres": [
            {"id": 18, "name": "Drama"},
        ],
        "spoken_languages": ["en"],
        "belongs_to_collection": {},
        "production_countries": [],
        "popularity": 0.5,
    }


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Each test reads configuration from a clean environment."""
    for var in (
        "DVUTILITY_APP_NAME",
        "DVUTILITY_DURABLE_DIR",
        "DVUTILITY_CACHE_DIR",
        "DVUTILITY_JSON_INDENT",
        "LOG_LEVEL",
        "LOG_FILE_PATH",
    ):
        monkeypatch.delenv(var, raising=False)
    dv_config.reset_config()
    yield
    dv_config.reset_config()
