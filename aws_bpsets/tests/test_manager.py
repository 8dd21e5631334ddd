"""Tests for best-practice set discovery and orchestration."""

from __future__ import annotations

from unittest.mock import MagicMock

import boto3
import pytest

from aws_bpsets.bpsets import BPSET_CLASSES, BPSetRegistry
from aws_bpsets.bpsets.s3 import S3BucketLoggingEnabled, S3BucketVersioningEnabled
from aws_bpsets.manager import BPSetManager, build_bpsets
from aws_bpsets.memo import MemoizedClient
from aws_bpsets.models import BPSetStatus

from .conftest import create_bucket


def test_s3_bpsets_are_registered_on_import() -> None:
    assert BPSET_CLASSES["S3BucketVersioningEnabled"] is S3BucketVersioningEnabled
    assert BPSET_CLASSES["S3BucketLoggingEnabled"] is S3BucketLoggingEnabled


def test_registry_rejects_duplicate_names() -> None:
    registry = BPSetRegistry()
    registry.register(S3BucketVersioningEnabled)
    registry.register(S3BucketVersioningEnabled)

    duplicate = type(
        "Duplicate", (S3BucketLoggingEnabled,), {"metadata": S3BucketVersioningEnabled.metadata}
    )
    with pytest.raises(ValueError):
        registry.register(duplicate)


def test_build_bpsets_shares_one_memoized_client_per_service() -> None:
    session = boto3.Session(region_name="us-east-1")

    bpsets = build_bpsets(session)

    names = [bpset.name for bpset in bpsets]
    assert set(names) == {"S3BucketVersioningEnabled", "S3BucketLoggingEnabled"}
    clients = {id(bpset.client) for bpset in bpsets}
    assert len(clients) == 1
    assert isinstance(bpsets[0].client, MemoizedClient)


def test_build_bpsets_without_memoization_uses_plain_client() -> None:
    session = boto3.Session(region_name="us-east-1")

    (bpset,) = build_bpsets(session, ["S3BucketVersioningEnabled"], memoize=False)

    assert not isinstance(bpset.client, MemoizedClient)
    assert bpset.client.meta.service_model.service_name == "s3"


def test_build_bpsets_rejects_unknown_names() -> None:
    session = boto3.Session(region_name="us-east-1")

    with pytest.raises(ValueError, match="Unknown BPSet 'Nope'"):
        build_bpsets(session, ["Nope"])


def test_manager_runs_checks_and_fix_end_to_end(s3_client) -> None:
    create_bucket(s3_client, "bucket-b1", "Suspended")
    create_bucket(s3_client, "bucket-b2", "Enabled")
    manager = BPSetManager([S3BucketVersioningEnabled(s3_client)])
    finished = []

    results = manager.run_check_all(finished.append)

    assert finished == ["S3BucketVersioningEnabled"]
    assert results["S3BucketVersioningEnabled"].ok
    bpset = manager.get_bpset("S3BucketVersioningEnabled")
    assert bpset.get_stats().non_compliant_resources == ["arn:aws:s3:::bucket-b1"]

    assert manager.run_fix("S3BucketVersioningEnabled").ok
    assert manager.run_check_once("S3BucketVersioningEnabled").ok
    assert sorted(bpset.get_stats().compliant_resources) == [
        "arn:aws:s3:::bucket-b1",
        "arn:aws:s3:::bucket-b2",
    ]


def test_manager_passes_parameters_to_fix() -> None:
    client = MagicMock()
    bpset = S3BucketLoggingEnabled(client)
    bpset.get_stats().non_compliant_resources = ["arn:aws:s3:::bucket-b1"]
    manager = BPSetManager([bpset])

    result = manager.run_fix("S3BucketLoggingEnabled", {"log-destination-bucket": "logs"})

    assert result.ok
    client.put_bucket_logging.assert_called_once()


def test_manager_clear_all_stats() -> None:
    bpset = S3BucketLoggingEnabled(MagicMock())
    manager = BPSetManager([bpset])
    manager.run_fix("S3BucketLoggingEnabled")
    assert bpset.get_stats().status is BPSetStatus.ERROR

    manager.clear_all_stats()

    assert bpset.get_stats().status is BPSetStatus.LOADED
    assert bpset.get_stats().error_messages == []


def test_manager_lookup_errors() -> None:
    bpset = S3BucketVersioningEnabled(MagicMock())
    manager = BPSetManager([bpset])

    with pytest.raises(KeyError):
        manager.get_bpset("Missing")
    with pytest.raises(ValueError):
        BPSetManager([bpset, S3BucketVersioningEnabled(MagicMock())])
