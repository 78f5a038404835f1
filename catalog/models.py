"""
Record types shared by the catalog, the dashboard, the onboarding form and
the API.

JSON on disk uses camelCase keys (feeRange, reviewCount, isVerified,
createdAt). Every model accepts either the camelCase alias or the
snake_case field name, and the API serialises with the aliases.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SubmissionStatus = Literal["pending", "approved", "rejected"]
STATUSES: tuple[SubmissionStatus, ...] = ("pending", "approved", "rejected")


class UnknownFacetValue(ValueError):
    """A facet or form value that is not in its closed vocabulary."""

    def __init__(self, facet: str, value: str):
        super().__init__(f"Unknown {facet} value: {value!r}")
        self.facet = facet
        self.value = value


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Artist(_Record):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    bio: str
    categories: list[str] = Field(min_length=1)
    languages: list[str] = Field(min_length=1)
    fee_range: str
    location: str
    image: str | None = None
    rating: float = Field(ge=0, le=5)
    review_count: int = Field(ge=0)
    is_verified: bool = False
    created_at: datetime


class Category(_Record):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    color: str


class Vocabulary(_Record):
    """Closed vocabularies, in display order."""

    model_config = ConfigDict(frozen=True)

    categories: list[str]
    languages: list[str]
    fee_ranges: list[str]
    locations: list[str]

    def check(self, facet: str, value: str) -> str:
        """Return value if it belongs to facet's vocabulary, else raise UnknownFacetValue."""
        allowed = getattr(self, facet, None)
        if allowed is None:
            raise KeyError(f"No vocabulary named {facet!r}")
        if value not in allowed:
            raise UnknownFacetValue(facet, value)
        return value


class Submission(Artist):
    status: SubmissionStatus
    submitted_at: datetime
    last_updated: datetime


class SubmissionStats(_Record):
    total: int
    pending: int
    approved: int
    rejected: int
    approval_rate: float    # percentage, 0.0 when there are no submissions


class StatusChange(_Record):
    submission_id: str
    previous: SubmissionStatus
    requested: SubmissionStatus
    persisted: bool = False


class OnboardingRecord(_Record):
    """The packaged output of the onboarding form's final step."""

    name: str = Field(min_length=2)
    bio: str = Field(min_length=50, max_length=500)
    categories: list[str] = Field(min_length=1)
    languages: list[str] = Field(min_length=1)
    fee_range: str = Field(min_length=1)
    location: str = Field(min_length=1)
    image: str | None = None    # file name only; nothing is uploaded
