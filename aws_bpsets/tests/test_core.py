"""Tests for stats reporting helpers."""

from __future__ import annotations

from unittest.mock import MagicMock

from openpyxl import load_workbook

from aws_bpsets.bpsets.s3 import S3BucketLoggingEnabled, S3BucketVersioningEnabled
from aws_bpsets.core import export_stats_to_excel, print_stats, stats_to_dict
from aws_bpsets.models import BPSetStatus


def _finished_bpset() -> S3BucketVersioningEnabled:
    bpset = S3BucketVersioningEnabled(MagicMock())
    stats = bpset.get_stats()
    stats.status = BPSetStatus.FINISHED
    stats.compliant_resources = ["arn:aws:s3:::good"]
    stats.non_compliant_resources = ["arn:aws:s3:::bad"]
    return bpset


def test_stats_to_dict_is_json_ready() -> None:
    bpset = S3BucketLoggingEnabled(MagicMock())
    bpset.fix([])

    data = stats_to_dict(bpset)

    assert data["name"] == "S3BucketLoggingEnabled"
    assert data["status"] == "ERROR"
    assert data["compliant_resources"] == []
    assert isinstance(data["error_messages"][0]["date"], str)
    assert "log-destination-bucket" in data["error_messages"][0]["message"]


def test_print_stats_lists_counts(capsys) -> None:
    print_stats([_finished_bpset()])

    out = capsys.readouterr().out
    assert "S3BucketVersioningEnabled" in out
    assert "FINISHED" in out


def test_print_stats_without_bpsets(capsys) -> None:
    print_stats([])

    assert capsys.readouterr().out.strip() == "No BPSets loaded."


def test_export_stats_to_excel_writes_one_row_per_resource(tmp_path) -> None:
    path = tmp_path / "report.xlsx"

    written = export_stats_to_excel([_finished_bpset()], str(path))

    assert written == str(path)
    sheet = load_workbook(path).active
    rows = list(sheet.iter_rows(values_only=True))
    assert sheet.title == "Compliance"
    assert rows == [
        ("BPSet", "Resource", "Status"),
        ("S3BucketVersioningEnabled", "arn:aws:s3:::good", "COMPLIANT"),
        ("S3BucketVersioningEnabled", "arn:aws:s3:::bad", "NON_COMPLIANT"),
    ]
