"""Command line driver: check every best-practice set, then fix what failed."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import boto3

from .core import print_stats
from .manager import BPSetManager, build_bpsets
from .models import BPSetStatus


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Return parsed command line arguments.

    The driver takes no options; AWS credentials, profile and region come from
    the standard AWS environment variables and shared configuration files.
    """

    parser = argparse.ArgumentParser(
        description="Check AWS resources against best-practice sets and remediate them."
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point used by ``python -m aws_bpsets``."""

    parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    session = boto3.Session()
    manager = BPSetManager(build_bpsets(session))

    manager.run_check_all()
    print_stats(manager.get_bpsets())

    for bpset in manager.get_bpsets():
        stats = bpset.get_stats()
        if stats.status is not BPSetStatus.FINISHED or not stats.non_compliant_resources:
            continue
        missing = bpset.missing_parameters()
        if missing:
            print(
                f"Skipping fix for {bpset.name}: requires parameter(s) {', '.join(missing)}",
                file=sys.stderr,
            )
            continue
        result = manager.run_fix(bpset.name)
        if result.ok:
            print(f"Fixed {len(stats.non_compliant_resources)} resource(s) for {bpset.name}")

    print()
    print_stats(manager.get_bpsets())

    failed = [
        bpset.name
        for bpset in manager.get_bpsets()
        if bpset.get_stats().status is BPSetStatus.ERROR
    ]
    if failed:
        print(f"Error: {', '.join(failed)} did not finish.", file=sys.stderr)
        return 1
    return 0


__all__ = ["main", "parse_args"]
