"""
Static catalog dataset.

Loads the JSON files shipped under data/ once at startup:
    data/artists.json     artist records; file order is the display order
    data/categories.json  category cards for the landing page
    data/options.json     closed vocabularies for every facet and form field

The loaded Dataset is read-only for the lifetime of the process. Artists
whose fee range or location is outside the vocabulary are rejected at load
time, so every record the filter sidebar can see is reachable from it.

Public API:
    Dataset.load(path)     → Dataset
    Dataset.get(artist_id) → Artist | None
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from catalog.models import Artist, Category, Vocabulary

log = logging.getLogger(__name__)

DATA_DIR        = Path(os.getenv("ARTIST_DATA_DIR", Path(__file__).parent.parent / "data"))
ARTISTS_FILE    = "artists.json"
CATEGORIES_FILE = "categories.json"
OPTIONS_FILE    = "options.json"


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"{path.name} not found at {path}. Check ARTIST_DATA_DIR.")
    return json.loads(path.read_text(encoding="utf-8"))


def _check_vocabulary(artists: list[Artist], vocabulary: Vocabulary) -> None:
    """Raise ValueError naming the first artist whose fee range or location is unknown."""
    for a in artists:
        if a.fee_range not in vocabulary.fee_ranges:
            raise ValueError(f"Artist {a.id} ({a.name}) has unknown fee range {a.fee_range!r}")
        if a.location not in vocabulary.locations:
            raise ValueError(f"Artist {a.id} ({a.name}) has unknown location {a.location!r}")


class Dataset:
    def __init__(
        self,
        artists: list[Artist],
        categories: list[Category],
        vocabulary: Vocabulary,
    ):
        _check_vocabulary(artists, vocabulary)
        self.artists    = tuple(artists)
        self.categories = tuple(categories)
        self.vocabulary = vocabulary
        self._by_id     = {a.id: a for a in self.artists}

    def get(self, artist_id: str) -> Artist | None:
        return self._by_id.get(artist_id)

    def __len__(self) -> int:
        return len(self.artists)

    @classmethod
    def load(cls, path: Path = DATA_DIR) -> "Dataset":
        path = Path(path)
        artists    = [Artist.model_validate(a) for a in _read_json(path / ARTISTS_FILE)]
        categories = [Category.model_validate(c) for c in _read_json(path / CATEGORIES_FILE)]
        vocabulary = Vocabulary.model_validate(_read_json(path / OPTIONS_FILE))
        log.info("Loaded %d artists, %d categories from %s", len(artists), len(categories), path)
        return cls(artists, categories, vocabulary)
