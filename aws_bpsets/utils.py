"""Shared helpers for best-practice sets."""
from __future__ import annotations

from typing import Any, Iterator

import boto3
from botocore.config import Config
from botocore.exceptions import OperationNotPageableError

from .errors import BPSetError

BOTO_CONFIG = Config(retries={"mode": "standard", "max_attempts": 10})

S3_ARN_PREFIX = "arn:aws:s3:::"


def create_client(session: boto3.session.Session, service: str) -> Any:
    """Return a client for *service* using the shared retry configuration."""

    return session.client(service, config=BOTO_CONFIG)


def safe_paginate(client: Any, method_name: str, result_key: str, **kwargs) -> Iterator[dict]:
    """Iterate through paginated boto3 results while handling pagination gaps."""

    try:
        paginator = client.get_paginator(method_name)
    except OperationNotPageableError:
        response = getattr(client, method_name)(**kwargs)
        for item in response.get(result_key, []):
            yield item
        return

    for page in paginator.paginate(**kwargs):
        for item in page.get(result_key, []):
            yield item


def bucket_arn(name: str) -> str:
    """Return the ARN identifying the bucket called *name*."""

    return f"{S3_ARN_PREFIX}{name}"


def bucket_name_from_arn(arn: str) -> str:
    """Return the bucket name embedded in an S3 bucket ARN.

    Raises :class:`BPSetError` when *arn* is not of the form
    ``arn:aws:s3:::<bucket-name>``.
    """

    _, separator, name = arn.partition(":::")
    if not separator or not name:
        raise BPSetError(f"Not an S3 bucket ARN: {arn!r}")
    return name


def error_message(action: str, exc: Exception) -> str:
    """Format the log entry for an exception raised by ``action``."""

    action = action.rstrip(".")
    return f"{action}: {exc}"


__all__ = [
    "BOTO_CONFIG",
    "bucket_arn",
    "bucket_name_from_arn",
    "create_client",
    "error_message",
    "safe_paginate",
]
