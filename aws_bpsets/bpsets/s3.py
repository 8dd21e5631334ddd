"""Best-practice sets for Amazon S3 buckets."""
from __future__ import annotations

from typing import Any, Iterator, List, Mapping, Tuple

from ..models import ApiCallUsage, BPSetMetadata, FixParameter
from ..utils import bucket_arn, bucket_name_from_arn, safe_paginate
from . import BPSet, register_bpset

VERSIONING_ENABLED = "Enabled"


def _bucket_names(s3: Any) -> Iterator[str]:
    for bucket in safe_paginate(s3, "list_buckets", "Buckets"):
        yield bucket["Name"]


@register_bpset
class S3BucketVersioningEnabled(BPSet):
    """Buckets must have versioning enabled."""

    service_name = "s3"
    metadata = BPSetMetadata(
        name="S3BucketVersioningEnabled",
        description="Ensures that versioning is enabled on S3 buckets.",
        priority=3,
        priority_reason=(
            "Versioning keeps previous object versions so overwritten or deleted "
            "data can be recovered."
        ),
        aws_service="S3",
        aws_service_category="Storage",
        best_practice_category="Data Protection",
        required_parameters_for_fix=(),
        is_fix_destructive=False,
        apis_used_in_check=(
            ApiCallUsage("ListBuckets", "Retrieve all S3 buckets in the account."),
            ApiCallUsage("GetBucketVersioning", "Read the versioning status of each bucket."),
        ),
        apis_used_in_fix=(
            ApiCallUsage("PutBucketVersioning", "Enable versioning on non-compliant buckets."),
        ),
        advise_before_fix=(
            "Versioned buckets keep every object version; review lifecycle rules "
            "to control the added storage cost."
        ),
    )

    def _check(self) -> Tuple[List[str], List[str]]:
        compliant: List[str] = []
        non_compliant: List[str] = []
        for name in _bucket_names(self.client):
            response = self.client.get_bucket_versioning(Bucket=name)
            if response.get("Status") == VERSIONING_ENABLED:
                compliant.append(bucket_arn(name))
            else:
                non_compliant.append(bucket_arn(name))
        return compliant, non_compliant

    def _fix_resource(self, resource_id: str, parameters: Mapping[str, str]) -> None:
        self.client.put_bucket_versioning(
            Bucket=bucket_name_from_arn(resource_id),
            VersioningConfiguration={"Status": VERSIONING_ENABLED},
        )


@register_bpset
class S3BucketLoggingEnabled(BPSet):
    """Buckets must deliver server access logs to a destination bucket."""

    service_name = "s3"
    metadata = BPSetMetadata(
        name="S3BucketLoggingEnabled",
        description="Ensures that server access logging is enabled on S3 buckets.",
        priority=2,
        priority_reason="Access logs are needed to investigate requests made to a bucket.",
        aws_service="S3",
        aws_service_category="Storage",
        best_practice_category="Logging and Monitoring",
        required_parameters_for_fix=(
            FixParameter(
                name="log-destination-bucket",
                description="Bucket that receives the server access logs.",
                example="my-access-logs",
            ),
        ),
        is_fix_destructive=False,
        apis_used_in_check=(
            ApiCallUsage("ListBuckets", "Retrieve all S3 buckets in the account."),
            ApiCallUsage("GetBucketLogging", "Read the logging configuration of each bucket."),
        ),
        apis_used_in_fix=(
            ApiCallUsage("PutBucketLogging", "Enable server access logging on non-compliant buckets."),
        ),
        advise_before_fix=(
            "The destination bucket must allow the S3 logging service to write to it."
        ),
    )

    def _check(self) -> Tuple[List[str], List[str]]:
        compliant: List[str] = []
        non_compliant: List[str] = []
        for name in _bucket_names(self.client):
            response = self.client.get_bucket_logging(Bucket=name)
            if response.get("LoggingEnabled"):
                compliant.append(bucket_arn(name))
            else:
                non_compliant.append(bucket_arn(name))
        return compliant, non_compliant

    def _fix_resource(self, resource_id: str, parameters: Mapping[str, str]) -> None:
        name = bucket_name_from_arn(resource_id)
        self.client.put_bucket_logging(
            Bucket=name,
            BucketLoggingStatus={
                "LoggingEnabled": {
                    "TargetBucket": parameters["log-destination-bucket"],
                    "TargetPrefix": f"{name}/logs/",
                }
            },
        )


__all__ = ["S3BucketLoggingEnabled", "S3BucketVersioningEnabled"]
