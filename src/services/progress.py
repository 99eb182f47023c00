from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.split_stage import SplitStage

"""Progress display service with tqdm (TTY only).

Shows the split pipeline stages (decode → parse → group → encode → archive)
as one progress bar. In non-TTY environments (CI, pipes) the bar is disabled
to avoid ANSI control sequence spam.
"""

__all__ = [
    "StageProgress",
    "is_tty_enabled",
    "PIPELINE_STAGES",
    "STAGE_MESSAGES",
]

PIPELINE_STAGES = (
    SplitStage.DECODING,
    SplitStage.PARSING,
    SplitStage.GROUPING,
    SplitStage.ENCODING,
    SplitStage.ARCHIVING,
)

STAGE_MESSAGES = {
    SplitStage.DECODING: "Decoding file...",
    SplitStage.PARSING: "Reading spreadsheet...",
    SplitStage.GROUPING: "Analyzing dates...",
    SplitStage.ENCODING: "Splitting into files...",
    SplitStage.ARCHIVING: "Zipping files...",
}


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class StageProgress:
    """Progress tracker over the pipeline stages.

    One tick per completed stage. The description shows the current stage
    message, e.g. "Splitting into 3 files...".
    """

    def __init__(self, *, description: str = "Splitting") -> None:
        self.description = description
        self.current_stage: SplitStage | None = None
        self.completed = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=len(PIPELINE_STAGES),
                desc=description,
                unit="step",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_stage(self, stage: SplitStage, message: str | None = None) -> None:
        """Mark a stage as started.

        Args:
            stage: Pipeline stage being entered
            message: Overrides the default stage message
        """
        self.current_stage = stage
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(message or STAGE_MESSAGES.get(stage, self.description))

    def finish_stage(self) -> None:
        self.completed += 1
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)

    def set_postfix(self, **kwargs: Any) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> StageProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
