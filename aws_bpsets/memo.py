"""Request memoization for boto3 clients."""
from __future__ import annotations

from collections import OrderedDict
import copy
import hashlib
import json
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

READ_PREFIXES = ("get_", "list_", "describe_", "head_")

# Client attributes that are not API operations and must never be cached.
PASSTHROUGH_ATTRIBUTES = frozenset(
    {"can_paginate", "close", "exceptions", "generate_presigned_post",
     "generate_presigned_url", "get_paginator", "get_waiter", "meta", "waiter_names"}
)


def request_key(operation_name: str, params: dict) -> str:
    """Return the cache key for calling *operation_name* with *params*."""

    serialized = json.dumps([operation_name, params], sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


class MemoizedClient:
    """Wrap a boto3 client so identical read requests hit the network once.

    Operations named ``get_*``, ``list_*``, ``describe_*`` or ``head_*`` are
    cached by operation name and parameters, evicting the least recently used
    entry once ``max_entries`` is exceeded. Callers get a copy of the cached
    response, so mutating it never changes later reads. Any other operation is
    treated as a write: it is sent straight to the client and empties the
    cache, so the next read sees the updated state.
    """

    def __init__(self, client: Any, max_entries: int = 256) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.client = client
        self.max_entries = max_entries
        self._cache: "OrderedDict[str, Any]" = OrderedDict()

    def __getattr__(self, name: str) -> Any:
        attribute = getattr(self.client, name)
        if name.startswith("_") or name in PASSTHROUGH_ATTRIBUTES or not callable(attribute):
            return attribute
        if name.startswith(READ_PREFIXES):
            return self._memoized(name, attribute)
        return self._write(name, attribute)

    def __len__(self) -> int:
        return len(self._cache)

    def reset(self) -> None:
        """Forget every cached response."""

        self._cache.clear()

    def _memoized(self, name: str, operation: Callable[..., Any]) -> Callable[..., Any]:
        def call(**params: Any) -> Any:
            key = request_key(name, params)
            if key in self._cache:
                self._cache.move_to_end(key)
                return copy.deepcopy(self._cache[key])

            logger.debug("%s executed.", name)
            response = operation(**params)
            self._cache[key] = response
            if len(self._cache) > self.max_entries:
                self._cache.popitem(last=False)
            return copy.deepcopy(response)

        return call

    def _write(self, name: str, operation: Callable[..., Any]) -> Callable[..., Any]:
        def call(**params: Any) -> Any:
            logger.debug("%s executed.", name)
            try:
                return operation(**params)
            finally:
                self.reset()

        return call


__all__ = ["MemoizedClient", "request_key"]
