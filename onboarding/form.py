"""
Four-step artist onboarding form.

    1  Personal Info        name (>= 2 chars), bio (50-500 chars)
    2  Skills & Categories  >= 1 category and >= 1 language
    3  Pricing & Location   fee range and location from the vocabulary
    4  Review & Submit      package the record and hand it to a sink

next_step() runs the current step's guard and moves forward by one only if
it passes; prev_step() always moves back by one. Both are clamped to 1..4.
A failed guard leaves the form untouched and returns the messages.

On a successful submit the form resets to step 1 with empty fields; on a
sink failure it keeps its state so the user can retry.
"""

import logging
from collections.abc import Mapping
from typing import Any, NamedTuple

from catalog.models import OnboardingRecord, Vocabulary
from onboarding.sinks import Notifier, SubmissionError, SubmissionSink

log = logging.getLogger(__name__)

NAME_MIN = 2
BIO_MIN  = 50
BIO_MAX  = 500

MSG_NAME        = "Name must be at least 2 characters"
MSG_BIO_SHORT   = "Bio must be at least 50 characters"
MSG_BIO_LONG    = "Bio must be less than 500 characters"
MSG_SELECTION   = "Please select at least one category and one language"
MSG_FEE_RANGE   = "Please select a fee range"
MSG_LOCATION    = "Please select a location"
MSG_INCOMPLETE  = "Please complete every step before submitting"
MSG_SUBMITTED   = (
    "Application submitted successfully! "
    "We'll review your profile and get back to you soon."
)


class Step(NamedTuple):
    id: int
    title: str
    description: str


STEPS = (
    Step(1, "Personal Info", "Tell us about yourself"),
    Step(2, "Skills & Categories", "What do you do?"),
    Step(3, "Pricing & Location", "Where and how much?"),
    Step(4, "Review & Submit", "Final details"),
)
FIRST_STEP = STEPS[0].id
LAST_STEP  = STEPS[-1].id


class StepResult(NamedTuple):
    step: int
    advanced: bool
    errors: dict[str, str]


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

def validate_personal(name: str, bio: str) -> dict[str, str]:
    errors = {}
    if len(name) < NAME_MIN:
        errors["name"] = MSG_NAME
    if len(bio) < BIO_MIN:
        errors["bio"] = MSG_BIO_SHORT
    elif len(bio) > BIO_MAX:
        errors["bio"] = MSG_BIO_LONG
    return errors


def validate_skills(categories: list[str], languages: list[str]) -> dict[str, str]:
    # One consolidated message rather than one per list.
    if not categories or not languages:
        return {"selection": MSG_SELECTION}
    return {}


def validate_pricing(fee_range: str, location: str, vocabulary: Vocabulary) -> dict[str, str]:
    errors = {}
    if fee_range not in vocabulary.fee_ranges:
        errors["fee_range"] = MSG_FEE_RANGE
    if location not in vocabulary.locations:
        errors["location"] = MSG_LOCATION
    return errors


def validate_step(step: int, fields: Mapping[str, Any], vocabulary: Vocabulary) -> dict[str, str]:
    """Run the guard for leaving `step`; step 4 runs all three."""
    name       = fields.get("name") or ""
    bio        = fields.get("bio") or ""
    categories = fields.get("categories") or []
    languages  = fields.get("languages") or []
    fee_range  = fields.get("fee_range") or ""
    location   = fields.get("location") or ""

    if step == 1:
        return validate_personal(name, bio)
    if step == 2:
        return validate_skills(categories, languages)
    if step == 3:
        return validate_pricing(fee_range, location, vocabulary)
    if step == 4:
        return {
            **validate_personal(name, bio),
            **validate_skills(categories, languages),
            **validate_pricing(fee_range, location, vocabulary),
        }
    raise ValueError(f"Step must be between {FIRST_STEP} and {LAST_STEP}, got {step}")


# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------

class OnboardingForm:
    def __init__(self, vocabulary: Vocabulary):
        self.vocabulary = vocabulary
        self.reset()

    def reset(self) -> None:
        self.step = FIRST_STEP
        self.name = ""
        self.bio = ""
        self.categories: list[str] = []
        self.languages: list[str] = []
        self.fee_range = ""
        self.location = ""
        self.image: str | None = None
        self.errors: dict[str, str] = {}

    @property
    def current(self) -> Step:
        return STEPS[self.step - 1]

    @property
    def bio_counter(self) -> str:
        return f"{len(self.bio)}/{BIO_MAX}"

    def fields(self) -> dict[str, Any]:
        return {
            "name":       self.name,
            "bio":        self.bio,
            "categories": list(self.categories),
            "languages":  list(self.languages),
            "fee_range":  self.fee_range,
            "location":   self.location,
            "image":      self.image,
        }

    # -- selections --------------------------------------------------------

    def toggle_category(self, value: str) -> None:
        self.vocabulary.check("categories", value)
        _toggle(self.categories, value)

    def toggle_language(self, value: str) -> None:
        self.vocabulary.check("languages", value)
        _toggle(self.languages, value)

    # -- navigation --------------------------------------------------------

    def next_step(self, notifier: Notifier | None = None) -> StepResult:
        if self.step == LAST_STEP:
            return StepResult(self.step, False, {})

        errors = validate_step(self.step, self.fields(), self.vocabulary)
        self.errors = errors
        if errors:
            log.debug("Step %d blocked: %s", self.step, errors)
            if notifier is not None and "selection" in errors:
                notifier.warning(errors["selection"])
            return StepResult(self.step, False, errors)

        self.step += 1
        return StepResult(self.step, True, {})

    def prev_step(self) -> int:
        self.errors = {}
        self.step = max(self.step - 1, FIRST_STEP)
        return self.step

    # -- review & submit ---------------------------------------------------

    def review(self) -> dict[str, Any]:
        return {
            "Name":       self.name,
            "Location":   self.location,
            "Fee Range":  self.fee_range,
            "Categories": list(self.categories),
            "Languages":  list(self.languages),
            "Bio":        self.bio,
        }

    def to_record(self) -> OnboardingRecord:
        return OnboardingRecord.model_validate(self.fields())

    def submit(self, sink: SubmissionSink, notifier: Notifier | None = None) -> bool:
        """Hand the record to sink. Returns True and resets the form on success."""
        errors = validate_step(LAST_STEP, self.fields(), self.vocabulary)
        if self.step != LAST_STEP or errors:
            self.errors = errors
            if notifier is not None:
                notifier.error(MSG_INCOMPLETE)
            return False

        record = self.to_record()
        try:
            sink.submit(record)
        except SubmissionError as exc:
            log.warning("Submission for %r failed: %s", record.name, exc)
            if notifier is not None:
                notifier.error(str(exc))
            return False

        log.info("Onboarding submitted for %r", record.name)
        if notifier is not None:
            notifier.success(MSG_SUBMITTED)
        self.reset()
        return True


def _toggle(values: list[str], value: str) -> None:
    if value in values:
        values.remove(value)
    else:
        values.append(value)
