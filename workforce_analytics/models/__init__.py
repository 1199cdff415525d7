from .enums import (
    AssignmentStatus,
    CaseStatus,
    FilterMode,
    InsightCategory,
    ReadinessLevel,
    TrendDirection,
    UnavailableReason,
)
from .records import (
    AssignmentRecord,
    ReadinessResult,
    ReadinessSubmission,
    TeamLeaderProfile,
    UnavailableCase,
    Worker,
    parse_timestamp,
)

__all__ = [
    "AssignmentStatus",
    "CaseStatus",
    "FilterMode",
    "InsightCategory",
    "ReadinessLevel",
    "TrendDirection",
    "UnavailableReason",
    "AssignmentRecord",
    "ReadinessResult",
    "ReadinessSubmission",
    "TeamLeaderProfile",
    "UnavailableCase",
    "Worker",
    "parse_timestamp",
]
