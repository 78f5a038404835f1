"""
Where a finished onboarding record goes, and where user-facing messages go.

SubmissionSink.submit(record) either returns or raises SubmissionError.
Two sinks ship:
    LoggingSink  logs the record and discards it (used by the API)
    HttpSink     POSTs the record to the API's /submissions endpoint
                 (used by the Streamlit UI)

Notifier is fire-and-forget: success / warning / error messages for the
person filling in the form.
"""

import logging
import os
from typing import Protocol

import requests

from catalog.models import OnboardingRecord

log = logging.getLogger(__name__)

API_URL = os.getenv("ARTIST_API_URL", "http://localhost:8000")


class SubmissionError(RuntimeError):
    pass


class SubmissionSink(Protocol):
    def submit(self, record: OnboardingRecord) -> None: ...


class Notifier(Protocol):
    def success(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class LoggingSink:
    """Accepts every record, logs it, keeps nothing."""

    def submit(self, record: OnboardingRecord) -> None:
        log.info("Onboarding submission received (discarded): %s",
                 record.model_dump_json(by_alias=True))


class HttpSink:
    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = 10,
        session: requests.Session | None = None,
    ):
        self.url = base_url.rstrip("/") + "/submissions"
        self.timeout = timeout
        self.session = session or requests.Session()

    def submit(self, record: OnboardingRecord) -> None:
        try:
            resp = self.session.post(
                self.url,
                json=record.model_dump(mode="json", by_alias=True),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.exceptions.ConnectionError as exc:
            raise SubmissionError(f"Cannot reach the API at {self.url}") from exc
        except requests.RequestException as exc:
            raise SubmissionError(f"Submission failed: {exc}") from exc
        log.info("Submitted onboarding record for %r", record.name)
