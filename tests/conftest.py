import json
from pathlib import Path

import pytest

from catalog.models import Artist, Vocabulary

DATA_DIR = Path(__file__).parent.parent / "data"


def make_artist(id: str, name: str, categories: list[str], location: str, **overrides) -> Artist:
    fields = {
        "id": id,
        "name": name,
        "bio": f"{name} performs at weddings, festivals and corporate events.",
        "categories": categories,
        "languages": ["Hindi", "English"],
        "feeRange": "₹25,000 - ₹50,000",
        "location": location,
        "rating": 4.5,
        "reviewCount": 10,
        "isVerified": True,
        "createdAt": "2024-01-01T00:00:00Z",
    }
    fields.update(overrides)
    return Artist.model_validate(fields)


class RecordingNotifier:
    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))


@pytest.fixture
def vocabulary():
    """The vocabulary shipped in data/options.json."""
    return Vocabulary.model_validate(json.loads((DATA_DIR / "options.json").read_text(encoding="utf-8")))


@pytest.fixture
def five_artists():
    """Two DJs in Mumbai, one DJ in Delhi, and two non-DJs."""
    return [
        make_artist("a1", "Asha", ["Singer"], "Mumbai"),
        make_artist("a2", "DJ Nikhil", ["DJ"], "Mumbai"),
        make_artist("a3", "DJ Tara", ["DJ"], "Delhi"),
        make_artist("a4", "Ravi", ["Dancer"], "Mumbai"),
        make_artist("a5", "DJ Zoya", ["DJ", "Singer"], "Mumbai",
                    bio="Open-format DJ who closes every set with live jazz vocals and Bollywood hits."),
    ]


@pytest.fixture
def notifier():
    return RecordingNotifier()
