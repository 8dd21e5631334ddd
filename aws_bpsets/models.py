"""Data models shared by best-practice sets."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class BPSetStatus(str, Enum):
    """Lifecycle state of the most recent check or fix run."""

    LOADED = "LOADED"
    CHECKING = "CHECKING"
    FINISHED = "FINISHED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class FixParameter:
    """A named value a fix needs from the caller."""

    name: str
    description: str = ""
    default: str = ""
    example: str = ""


@dataclass(frozen=True)
class ApiCallUsage:
    """An AWS API call made by a check or fix, with the reason for it."""

    name: str
    reason: str


@dataclass(frozen=True)
class BPSetMetadata:
    """Static description of a best-practice set used by reporting tools."""

    name: str
    description: str
    priority: int
    priority_reason: str
    aws_service: str
    aws_service_category: str
    best_practice_category: str
    required_parameters_for_fix: Tuple[FixParameter, ...] = ()
    is_fix_destructive: bool = False
    apis_used_in_check: Tuple[ApiCallUsage, ...] = ()
    apis_used_in_fix: Tuple[ApiCallUsage, ...] = ()
    advise_before_fix: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready representation of the metadata."""

        data = asdict(self)
        for key in ("required_parameters_for_fix", "apis_used_in_check", "apis_used_in_fix"):
            data[key] = list(data[key])
        return data


@dataclass
class ErrorRecord:
    """A failure recorded against a best-practice set run."""

    date: datetime
    message: str


@dataclass
class BPSetStats:
    """Status and results of the latest run of a best-practice set."""

    status: BPSetStatus = BPSetStatus.LOADED
    compliant_resources: List[str] = field(default_factory=list)
    non_compliant_resources: List[str] = field(default_factory=list)
    error_messages: List[ErrorRecord] = field(default_factory=list)

    def record_error(self, message: str) -> ErrorRecord:
        """Mark the run as failed and append *message* to the error log."""

        record = ErrorRecord(date=datetime.now(timezone.utc), message=message)
        self.status = BPSetStatus.ERROR
        self.error_messages.append(record)
        return record

    def clear(self) -> None:
        self.status = BPSetStatus.LOADED
        self.compliant_resources = []
        self.non_compliant_resources = []
        self.error_messages = []


@dataclass(frozen=True)
class RunResult:
    """Outcome of a check or fix call."""

    ok: bool
    error: Optional[str] = None


__all__ = [
    "ApiCallUsage",
    "BPSetMetadata",
    "BPSetStats",
    "BPSetStatus",
    "ErrorRecord",
    "FixParameter",
    "RunResult",
]
