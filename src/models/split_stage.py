from __future__ import annotations

from enum import Enum

"""Pipeline stage enum and the base error for the split operation.

State transitions (one invocation, no state kept between calls):
    idle → decoding → parsing → grouping → encoding → archiving → done
Any failure moves directly to failed, carrying the originating error kind.
"""

__all__ = [
    "SplitStage",
    "SplitError",
]


class SplitStage(Enum):
    """Stage of a single split invocation."""
    IDLE = "idle"
    DECODING = "decoding"
    PARSING = "parsing"
    GROUPING = "grouping"
    ENCODING = "encoding"
    ARCHIVING = "archiving"
    DONE = "done"
    FAILED = "failed"


class SplitError(Exception):
    """Base class for all errors that abort a split invocation.

    Subclasses set ``default_stage`` so the stage is known even when the
    error is raised outside the pipeline (e.g. calling the codec directly).
    """

    default_stage = SplitStage.FAILED

    def __init__(self, message: str, *, stage: SplitStage | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def error_type(self) -> str:
        """UPPER_SNAKE form of the kind (DecodeError -> DECODE_ERROR)."""
        out = []
        for i, ch in enumerate(self.kind):
            if ch.isupper() and i > 0:
                out.append("_")
            out.append(ch.upper())
        return "".join(out)
