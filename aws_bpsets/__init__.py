"""AWS best-practice compliance checks with optional remediation."""

from __future__ import annotations

from .bpsets import BPSET_CLASSES, BPSet, register_bpset
from .core import export_stats_to_excel, print_stats, stats_to_dict
from .errors import BPSetError
from .manager import BPSetManager, build_bpsets
from .memo import MemoizedClient
from .models import (
    ApiCallUsage,
    BPSetMetadata,
    BPSetStats,
    BPSetStatus,
    ErrorRecord,
    FixParameter,
    RunResult,
)

__all__ = [
    "ApiCallUsage",
    "BPSET_CLASSES",
    "BPSet",
    "BPSetError",
    "BPSetManager",
    "BPSetMetadata",
    "BPSetStats",
    "BPSetStatus",
    "ErrorRecord",
    "FixParameter",
    "MemoizedClient",
    "RunResult",
    "build_bpsets",
    "export_stats_to_excel",
    "print_stats",
    "register_bpset",
    "stats_to_dict",
]
