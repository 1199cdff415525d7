from enum import Enum


class AssignmentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class ReadinessLevel(str, Enum):
    FIT = "fit"
    MINOR = "minor"
    NOT_FIT = "not_fit"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "ReadinessLevel":
        """Map a raw readiness string to a level; anything unrecognised is UNKNOWN."""
        if isinstance(value, ReadinessLevel):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class CaseStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class InsightCategory(str, Enum):
    ALERT = "alert"
    RECOMMENDATION = "recommendation"
    OPPORTUNITY = "opportunity"


class FilterMode(str, Enum):
    SINGLE_DATE = "single"
    DATE_RANGE = "range"


class UnavailableReason(str, Enum):
    SICK = "sick"
    ON_LEAVE_RDO = "on_leave_rdo"
    TRANSFERRED = "transferred"
    INJURED_MEDICAL = "injured_medical"
    NOT_ROSTERED = "not_rostered"
    CASE_ASSIGNMENT = "case_assignment"
    PAIN = "pain"
    OTHER = "other"

    @classmethod
    def parse(cls, value: object) -> "UnavailableReason":
        if isinstance(value, UnavailableReason):
            return value
        if not isinstance(value, str):
            return cls.OTHER
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHER
