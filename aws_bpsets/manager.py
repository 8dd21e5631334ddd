"""Discovery and orchestration of best-practice sets."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import boto3

from .bpsets import BPSET_CLASSES, BPSet
from .memo import MemoizedClient
from .models import RunResult
from .utils import create_client

logger = logging.getLogger(__name__)


def build_bpsets(
    session: boto3.session.Session,
    names: Optional[Iterable[str]] = None,
    *,
    memoize: bool = True,
) -> List[BPSet]:
    """Instantiate the registered best-practice sets called *names*.

    All registered sets are built when *names* is omitted. Sets that talk to
    the same AWS service share one client, wrapped in a single
    :class:`MemoizedClient` when *memoize* is true.
    """

    selected: List[str] = []
    for name in names if names is not None else BPSET_CLASSES.keys():
        if name not in BPSET_CLASSES:
            valid = ", ".join(sorted(BPSET_CLASSES))
            raise ValueError(f"Unknown BPSet '{name}'. Valid BPSets: {valid}")
        selected.append(name)

    clients: Dict[str, Any] = {}
    bpsets: List[BPSet] = []
    for name in dict.fromkeys(selected):
        cls = BPSET_CLASSES[name]
        client = clients.get(cls.service_name)
        if client is None:
            client = create_client(session, cls.service_name)
            if memoize:
                client = MemoizedClient(client)
            clients[cls.service_name] = client
        bpsets.append(cls(client))
        logger.debug("BPSet %s loaded", name)
    return bpsets


class BPSetManager:
    """Run checks and fixes over a fixed collection of best-practice sets."""

    def __init__(self, bpsets: Iterable[BPSet]) -> None:
        self._bpsets: Dict[str, BPSet] = {}
        for bpset in bpsets:
            if bpset.name in self._bpsets:
                raise ValueError(f"BPSet '{bpset.name}' is already loaded")
            self._bpsets[bpset.name] = bpset

    def get_bpsets(self) -> List[BPSet]:
        return list(self._bpsets.values())

    def get_bpset(self, name: str) -> BPSet:
        try:
            return self._bpsets[name]
        except KeyError:
            raise KeyError(f"BPSet '{name}' is not loaded") from None

    def run_check_once(self, name: str) -> RunResult:
        return self.get_bpset(name).check()

    def run_check_all(
        self, finished: Optional[Callable[[str], None]] = None
    ) -> Dict[str, RunResult]:
        """Check every set in turn, calling *finished* with each name."""

        results: Dict[str, RunResult] = {}
        for name, bpset in self._bpsets.items():
            results[name] = bpset.check()
            if finished is not None:
                finished(name)
        return results

    def run_fix(self, name: str, parameters: Optional[Mapping[str, str]] = None) -> RunResult:
        """Fix the resources found non-compliant by the last check of *name*."""

        bpset = self.get_bpset(name)
        return bpset.fix(list(bpset.get_stats().non_compliant_resources), parameters)

    def clear_all_stats(self) -> None:
        for bpset in self._bpsets.values():
            bpset.clear_stats()


__all__ = ["BPSetManager", "build_bpsets"]
