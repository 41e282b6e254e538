"""
Error taxonomy for the analysis pipeline.

Two families:

  PipelineError — a whole stage cannot proceed. Carries the stage name so
                  callers can tell a fetch failure from a modelling failure.
                    FetchError            (stage "fetch")
                    DegenerateModelError  (stage "classifier")

  RowError      — a single record is unusable. The stage that hits one drops
                  the record, records it in a RowErrorTally and carries on.
                    ParseError              unparseable OCCUR_DATE
                    BucketAssignmentError   time outside [0, 2400] or missing

Usage:

    tally = RowErrorTally()
    try:
        parse_occur_date(value)
    except ParseError as exc:
        tally.record(exc)
    ...
    logger.info("Row errors: %s", tally.as_dict())
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field


class PipelineError(Exception):
    """A stage-level failure."""

    stage = "pipeline"

    def __init__(self, message: str, stage: str | None = None) -> None:
        if stage is not None:
            self.stage = stage
        self.message = message
        super().__init__(f"[{self.stage}] {message}")


class FetchError(PipelineError):
    """The row source was unreachable or returned an unusable response."""

    stage = "fetch"


class DegenerateModelError(PipelineError):
    """The training subset has no variance in the target."""

    stage = "classifier"


class RowError(ValueError):
    """A single record failed a row-level conversion."""

    def __init__(self, column: str, value: object, message: str) -> None:
        self.column = column
        self.value = value
        super().__init__(f"{column}={value!r}: {message}")


class ParseError(RowError):
    """A date string did not match the expected format."""


class BucketAssignmentError(RowError):
    """A numeric time could not be placed in any time-of-day bucket."""


@dataclass
class RowErrorTally:
    """Per-run counts of dropped records, keyed by error class name."""

    counts: Counter = field(default_factory=Counter)

    def record(self, exc: RowError) -> None:
        self.counts[type(exc).__name__] += 1

    def count(self, error_type: type[RowError]) -> int:
        return self.counts[error_type.__name__]

    @property
    def parse_errors(self) -> int:
        return self.count(ParseError)

    @property
    def bucket_errors(self) -> int:
        return self.count(BucketAssignmentError)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def as_dict(self) -> dict[str, int]:
        return {
            ParseError.__name__: self.parse_errors,
            BucketAssignmentError.__name__: self.bucket_errors,
        }
