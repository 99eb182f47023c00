"""Domain models for the Excel month splitter.

This package contains the domain model classes shared by the pipeline stages,
the CLI and the logging layer.
"""

from .config_models import SplitterConfig
from .group_bucket import GroupBucket, GroupingResult
from .row_data import RowData
from .split_result import BucketStat, SplitResult
from .split_stage import SplitError, SplitStage

__all__ = [
    # Configuration models
    "SplitterConfig",
    # Processing models
    "RowData",
    "GroupBucket",
    "GroupingResult",
    "BucketStat",
    "SplitResult",
    # Pipeline state
    "SplitStage",
    "SplitError",
]
