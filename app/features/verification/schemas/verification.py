from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class VerificationRequest(BaseModel):
    """Scheduler payload describing one pending profile verification."""

    user_id: str
    property_type: str
    asserted_value: str
    verification_code: str
    attempt: int = Field(0, ge=0)
    last_run_at: int = Field(0, ge=0, description="Epoch seconds of the previous attempt")

    def next_attempt(self, now: int) -> "VerificationRequest":
        return self.model_copy(update={"attempt": self.attempt + 1, "last_run_at": now})


class JobOutcome(str, Enum):
    terminal = "terminal"
    rescheduled = "rescheduled"
    skipped = "skipped"


class JobResult(BaseModel):
    outcome: JobOutcome
    # the re-enqueued payload for rescheduled runs, the untouched one for skipped runs
    request: Optional[VerificationRequest] = None
