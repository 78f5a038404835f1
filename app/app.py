"""
FastAPI application over the artist catalog.

Run as a script:
    python app/app.py

Or as a module:
    uvicorn app.app:app --reload

Data is loaded once at startup from data/ (override with ARTIST_DATA_DIR)
and never written. The dashboard universe is mock data generated from the
same artists.

Endpoints:
    GET  /health
    GET  /options                              closed vocabularies
    GET  /categories
    GET  /artists?q=&category=&location=&fee_range=&sort=
    GET  /artists/{artist_id}
    POST /onboarding/validate/{step}           run one step's guard
    POST /submissions                          onboarding record → logged, discarded
    GET  /dashboard/submissions?search=&status=&category=
    GET  /dashboard/stats
    POST /dashboard/submissions/{id}/status    validated, logged, not persisted

Logs each request and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups).
"""

import logging
import logging.handlers
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog.dashboard import (
    ALL,
    InvalidStatusTransition,
    build_submissions,
    compute_stats,
    filter_submissions,
    request_status_change,
)
from catalog.dataset import Dataset
from catalog.models import (
    Artist,
    Category,
    OnboardingRecord,
    StatusChange,
    Submission,
    SubmissionStats,
    SubmissionStatus,
    UnknownFacetValue,
    Vocabulary,
)
from catalog.search import SORT_KEYS, FilterState, filter_artists, sort_artists
from onboarding.form import FIRST_STEP, LAST_STEP, validate_step
from onboarding.sinks import LoggingSink

load_dotenv()

LOG_DIR  = Path(os.getenv("LOG_DIR", Path(__file__).parent.parent / "logs"))
LOG_FILE = LOG_DIR / "app.log"

def _setup_logging() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

_dataset: Dataset | None = None
_submissions: list[Submission] = []
_sink = LoggingSink()


@asynccontextmanager
async def lifespan(_: FastAPI):
    global _dataset, _submissions

    log.info("Loading artist dataset…")
    _dataset = Dataset.load()
    log.info("  %d artists, %d categories loaded.", len(_dataset), len(_dataset.categories))

    _submissions = build_submissions(_dataset.artists)
    log.info("  %d mock submissions ready.", len(_submissions))

    yield  # server runs here


app = FastAPI(title="Artist Booking Catalog", lifespan=lifespan)


def _data() -> Dataset:
    assert _dataset is not None, "Dataset not loaded"
    return _dataset


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class ArtistList(BaseModel):
    count: int
    artists: list[Artist]


class SubmissionList(BaseModel):
    count: int
    submissions: list[Submission]


class StepValidation(BaseModel):
    step: int
    valid: bool
    errors: dict[str, str]


class StepFields(BaseModel):
    # Same camelCase keys as /submissions (feeRange)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    bio: str = ""
    categories: list[str] = []
    languages: list[str] = []
    fee_range: str = ""
    location: str = ""


class StatusChangeRequest(BaseModel):
    status: SubmissionStatus


class Accepted(BaseModel):
    accepted: bool


# ---------------------------------------------------------------------------
# Catalog endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict[str, Any]:
    return {"status": "ok", "artists": len(_data())}


@app.get("/options", response_model=Vocabulary)
def options() -> Vocabulary:
    return _data().vocabulary


@app.get("/categories", response_model=list[Category])
def categories() -> list[Category]:
    return list(_data().categories)


@app.get("/artists", response_model=ArtistList)
def artists(
    q: str = "",
    category: list[str] = Query(default=[]),
    location: list[str] = Query(default=[]),
    fee_range: list[str] = Query(default=[]),
    sort: str = "featured",
) -> ArtistList:
    t0 = time.perf_counter()
    data = _data()

    if sort not in SORT_KEYS:
        raise HTTPException(status_code=400, detail=f"Unknown sort key: {sort}")

    state = FilterState(data.vocabulary, search=q)
    try:
        for facet, values in (("categories", category), ("locations", location), ("fee_ranges", fee_range)):
            for value in values:
                state.toggle(facet, value)
    except UnknownFacetValue as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    results = sort_artists(filter_artists(data.artists, state), sort)

    elapsed = time.perf_counter() - t0
    log.info("artists q=%r  filters=%s  sort=%s  hits=%d  %.3fs",
             q, state.active_values, sort, len(results), elapsed)
    return ArtistList(count=len(results), artists=results)


@app.get("/artists/{artist_id}", response_model=Artist)
def artist(artist_id: str) -> Artist:
    found = _data().get(artist_id)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Artist {artist_id} not found.")
    return found


# ---------------------------------------------------------------------------
# Onboarding endpoints
# ---------------------------------------------------------------------------

@app.post("/onboarding/validate/{step}", response_model=StepValidation)
def validate(step: int, fields: StepFields) -> StepValidation:
    if not FIRST_STEP <= step <= LAST_STEP:
        raise HTTPException(status_code=404, detail=f"No step {step}.")
    errors = validate_step(step, fields.model_dump(), _data().vocabulary)
    return StepValidation(step=step, valid=not errors, errors=errors)


@app.post("/submissions", response_model=Accepted, status_code=202)
def submit(record: OnboardingRecord) -> Accepted:
    vocabulary = _data().vocabulary
    try:
        for value in record.categories:
            vocabulary.check("categories", value)
        for value in record.languages:
            vocabulary.check("languages", value)
        vocabulary.check("fee_ranges", record.fee_range)
        vocabulary.check("locations", record.location)
    except UnknownFacetValue as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    _sink.submit(record)
    return Accepted(accepted=True)


# ---------------------------------------------------------------------------
# Dashboard endpoints
# ---------------------------------------------------------------------------

@app.get("/dashboard/submissions", response_model=SubmissionList)
def dashboard_submissions(
    search: str = "",
    status: str = ALL,
    category: str = ALL,
) -> SubmissionList:
    results = filter_submissions(_submissions, search=search, status=status, category=category)
    log.info("dashboard search=%r  status=%s  category=%s  hits=%d",
             search, status, category, len(results))
    return SubmissionList(count=len(results), submissions=results)


@app.get("/dashboard/stats", response_model=SubmissionStats)
def dashboard_stats() -> SubmissionStats:
    return compute_stats(_submissions)


@app.post("/dashboard/submissions/{submission_id}/status", response_model=StatusChange, status_code=202)
def change_status(submission_id: str, req: StatusChangeRequest) -> StatusChange:
    submission = next((s for s in _submissions if s.id == submission_id), None)
    if submission is None:
        raise HTTPException(status_code=404, detail=f"Submission {submission_id} not found.")
    try:
        return request_status_change(submission, req.status)
    except InvalidStatusTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    log.info("=== Artist Booking Catalog: serving on http://%s:%d ===", host, port)
    uvicorn.run(app, host=host, port=port, reload=False)
