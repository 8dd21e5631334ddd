"""Reporting helpers for best-practice set results."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .bpsets import BPSet


def stats_to_dict(bpset: BPSet) -> Dict[str, Any]:
    """Return a JSON-ready summary of the latest run of *bpset*."""

    stats = bpset.get_stats()
    return {
        "name": bpset.name,
        "status": stats.status.value,
        "compliant_resources": list(stats.compliant_resources),
        "non_compliant_resources": list(stats.non_compliant_resources),
        "error_messages": [
            {"date": record.date.isoformat(), "message": record.message}
            for record in stats.error_messages
        ],
    }


def print_stats(bpsets: Iterable[BPSet]) -> None:
    """Pretty-print the status of each best-practice set to stdout."""

    bpsets = list(bpsets)
    if not bpsets:
        print("No BPSets loaded.")
        return

    header = f"{'BPSet':<32} {'Status':<9} {'Compliant':>9} {'Non-compliant':>13} Last error"
    print(header)
    print("-" * len(header))
    for bpset in bpsets:
        stats = bpset.get_stats()
        name = (bpset.name[:29] + "...") if len(bpset.name) > 32 else bpset.name
        last_error = stats.error_messages[-1].message if stats.error_messages else ""
        print(
            f"{name:<32} {stats.status.value:<9} {len(stats.compliant_resources):>9} "
            f"{len(stats.non_compliant_resources):>13} {last_error}"
        )


def export_stats_to_excel(bpsets: Iterable[BPSet], path: str) -> str:
    """Write one row per checked resource of *bpsets* to an Excel workbook."""

    headers = ("BPSet", "Resource", "Status")
    rows = []
    for bpset in bpsets:
        stats = bpset.get_stats()
        rows.extend((bpset.name, arn, "COMPLIANT") for arn in stats.compliant_resources)
        rows.extend((bpset.name, arn, "NON_COMPLIANT") for arn in stats.non_compliant_resources)
    return _export_rows_to_excel(rows, headers, path, sheet_title="Compliance")


def _export_rows_to_excel(
    rows: Iterable[Sequence[object]],
    headers: Sequence[str],
    path: str,
    *,
    sheet_title: str,
) -> str:
    """Write ``rows`` with ``headers`` to an Excel sheet using :mod:`openpyxl`."""

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title

    sheet.append(list(headers))
    column_widths = [len(header) for header in headers]

    for row in rows:
        values = list(row)
        sheet.append(values)
        for idx, value in enumerate(values):
            column_widths[idx] = max(column_widths[idx], len(str(value)))

    for idx, width in enumerate(column_widths, start=1):
        column_letter = get_column_letter(idx)
        sheet.column_dimensions[column_letter].width = min(width + 2, 60)

    workbook.save(path)
    return path


__all__ = ["export_stats_to_excel", "print_stats", "stats_to_dict"]
