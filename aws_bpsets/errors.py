"""Exceptions raised while running best-practice sets."""
from __future__ import annotations


class BPSetError(Exception):
    """A check or fix could not complete for a reason outside the AWS API."""


__all__ = ["BPSetError"]
