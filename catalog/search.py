"""
Artist search: free-text term plus three checkbox facets.

An artist is shown when every active condition holds:
    term      case-insensitive substring of name, bio or location,
              or of any one of the artist's categories
    category  artist has at least one selected category
    location  artist's location is selected
    fee range artist's fee range is selected

An empty term or an empty facet selection matches everything. Filtering is
stable: results keep the dataset's order. Sorting is a separate, optional
step applied after filtering.

Public API:
    FilterState(vocabulary)
    matches(artist, state)            → bool
    filter_artists(artists, state)    → list[Artist]
    sort_artists(artists, key)        → list[Artist]
    facet_options(vocabulary, state)  → dict[str, list[tuple[str, bool]]]
    results_label(count)              → str
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from catalog.models import Artist, Vocabulary

log = logging.getLogger(__name__)

# Facet name → vocabulary attribute, in sidebar order.
FACETS = ("categories", "locations", "fee_ranges")

FACET_TITLES = {
    "categories": "Category",
    "locations":  "Location",
    "fee_ranges": "Fee Range",
}


class FilterState:
    """Search term and selected facet values for one browsing session."""

    def __init__(self, vocabulary: Vocabulary, search: str = ""):
        self.vocabulary = vocabulary
        self.search = search
        self.categories: list[str] = []
        self.locations: list[str] = []
        self.fee_ranges: list[str] = []
        self._seeded = False

    def selected(self, facet: str) -> list[str]:
        if facet not in FACETS:
            raise KeyError(f"No facet named {facet!r}")
        return getattr(self, facet)

    def toggle(self, facet: str, value: str, checked: bool = True) -> None:
        """Check or uncheck one facet value. Unknown values raise UnknownFacetValue."""
        values = self.selected(facet)
        self.vocabulary.check(facet, value)
        if checked and value not in values:
            values.append(value)
        elif not checked and value in values:
            values.remove(value)

    def remove(self, value: str) -> bool:
        """Uncheck value from whichever facet holds it."""
        for facet in FACETS:
            values = self.selected(facet)
            if value in values:
                values.remove(value)
                return True
        return False

    def seed_category(self, value: str | None) -> bool:
        """
        Pre-select a category handed in from navigation (e.g. ?category=DJ).

        Applies at most once per state and only while no category is
        selected. Later calls, including after the user has unchecked the
        seeded value, change nothing. Returns True if a value was added.
        """
        if not value or self._seeded:
            return False
        self._seeded = True

        if self.categories:
            return False
        if value not in self.vocabulary.categories:
            log.warning("Ignoring unknown category from navigation: %r", value)
            return False

        self.categories.append(value)
        log.info("Seeded category filter with %r", value)
        return True

    def clear_all(self) -> None:
        self.search = ""
        self.categories = []
        self.locations = []
        self.fee_ranges = []

    @property
    def active_values(self) -> list[str]:
        return [*self.categories, *self.locations, *self.fee_ranges]

    @property
    def active_count(self) -> int:
        return len(self.categories) + len(self.locations) + len(self.fee_ranges)

    def as_dict(self) -> dict[str, Any]:
        return {
            "search":     self.search,
            "categories": list(self.categories),
            "locations":  list(self.locations),
            "fee_ranges": list(self.fee_ranges),
        }


# ---------------------------------------------------------------------------
# Predicate
# ---------------------------------------------------------------------------

def _matches_term(artist: Artist, term: str) -> bool:
    if not term:
        return True
    term = term.lower()
    return (
        term in artist.name.lower()
        or term in artist.bio.lower()
        or term in artist.location.lower()
        or any(term in c.lower() for c in artist.categories)
    )


def matches(artist: Artist, state: FilterState) -> bool:
    if not _matches_term(artist, state.search):
        return False
    if state.categories and not any(c in state.categories for c in artist.categories):
        return False
    if state.locations and artist.location not in state.locations:
        return False
    if state.fee_ranges and artist.fee_range not in state.fee_ranges:
        return False
    return True


def filter_artists(artists: Iterable[Artist], state: FilterState) -> list[Artist]:
    return [a for a in artists if matches(a, state)]


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

# key → (sort key, reverse). "featured" keeps dataset order.
SORT_KEYS: dict[str, tuple[Callable[[Artist], Any] | None, bool]] = {
    "featured": (None, False),
    "rating":   (lambda a: a.rating, True),
    "reviews":  (lambda a: a.review_count, True),
    "name":     (lambda a: a.name.lower(), False),
    "newest":   (lambda a: a.created_at, True),
}


def sort_artists(artists: Iterable[Artist], key: str = "featured") -> list[Artist]:
    """Stable sort by one of SORT_KEYS; ties keep their incoming order."""
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key {key!r}; expected one of {', '.join(SORT_KEYS)}")
    sort_key, reverse = SORT_KEYS[key]
    if sort_key is None:
        return list(artists)
    return sorted(artists, key=sort_key, reverse=reverse)


# ---------------------------------------------------------------------------
# Sidebar helpers
# ---------------------------------------------------------------------------

def facet_options(vocabulary: Vocabulary, state: FilterState) -> dict[str, list[tuple[str, bool]]]:
    """Every vocabulary value per facet, paired with whether it is checked."""
    return {
        facet: [(v, v in state.selected(facet)) for v in getattr(vocabulary, facet)]
        for facet in FACETS
    }


def results_label(count: int) -> str:
    return f"Showing {count} artist{'' if count == 1 else 's'}"
