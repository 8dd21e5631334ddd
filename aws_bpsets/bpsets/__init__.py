"""Best-practice set base class and registry helpers."""
from __future__ import annotations

from abc import ABC, abstractmethod
import importlib
import logging
import pkgutil
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Type

from ..errors import BPSetError
from ..models import BPSetMetadata, BPSetStats, BPSetStatus, RunResult
from ..utils import error_message

logger = logging.getLogger(__name__)


class BPSet(ABC):
    """A compliance check and remediation for one rule on one resource kind.

    Subclasses declare :attr:`metadata` and :attr:`service_name`, and implement
    :meth:`_check` and :meth:`_fix_resource`. The public :meth:`check` and
    :meth:`fix` wrappers own the status transitions: any failure is recorded
    in the stats and returned as a failed :class:`RunResult` rather than
    raised.
    """

    metadata: ClassVar[BPSetMetadata]
    service_name: ClassVar[str]

    def __init__(self, client: Any) -> None:
        self.client = client
        self.stats = BPSetStats()

    @property
    def name(self) -> str:
        return self.metadata.name

    def get_metadata(self) -> BPSetMetadata:
        return self.metadata

    def get_stats(self) -> BPSetStats:
        """Return the live stats of the latest run."""

        return self.stats

    def clear_stats(self) -> None:
        self.stats.clear()

    def check(self) -> RunResult:
        """Classify every resource as compliant or non-compliant."""

        self.stats.status = BPSetStatus.CHECKING
        logger.info("Checking %s", self.name)
        try:
            compliant, non_compliant = self._check()
        except Exception as exc:
            return self._failed(f"Check {self.name} failed", exc)

        self.stats.compliant_resources = compliant
        self.stats.non_compliant_resources = non_compliant
        self.stats.status = BPSetStatus.FINISHED
        logger.info(
            "%s: %d compliant, %d non-compliant",
            self.name,
            len(compliant),
            len(non_compliant),
        )
        return RunResult(ok=True)

    def fix(
        self,
        resource_ids: Sequence[str],
        parameters: Optional[Mapping[str, str]] = None,
    ) -> RunResult:
        """Remediate *resource_ids* one by one, stopping at the first failure."""

        self.stats.status = BPSetStatus.CHECKING
        logger.info("Fixing %d resource(s) for %s", len(resource_ids), self.name)
        try:
            resolved = self.resolve_parameters(parameters or {})
            for resource_id in resource_ids:
                self._fix_resource(resource_id, resolved)
        except Exception as exc:
            return self._failed(f"Fix {self.name} failed", exc)

        self.stats.status = BPSetStatus.FINISHED
        return RunResult(ok=True)

    def resolve_parameters(self, parameters: Mapping[str, str]) -> Dict[str, str]:
        """Return the required fix parameters, falling back to declared defaults."""

        resolved: Dict[str, str] = {}
        missing: List[str] = []
        for parameter in self.metadata.required_parameters_for_fix:
            value = parameters.get(parameter.name) or parameter.default
            if value:
                resolved[parameter.name] = value
            else:
                missing.append(parameter.name)
        if missing:
            raise BPSetError(f"Required parameter(s) missing: {', '.join(missing)}")
        return resolved

    def missing_parameters(self, parameters: Optional[Mapping[str, str]] = None) -> List[str]:
        """Return the names of required parameters with neither value nor default."""

        parameters = parameters or {}
        return [
            parameter.name
            for parameter in self.metadata.required_parameters_for_fix
            if not (parameters.get(parameter.name) or parameter.default)
        ]

    def _failed(self, action: str, exc: Exception) -> RunResult:
        message = error_message(action, exc)
        self.stats.record_error(message)
        logger.warning(message)
        return RunResult(ok=False, error=message)

    @abstractmethod
    def _check(self) -> Tuple[List[str], List[str]]:
        """Return ``(compliant, non_compliant)`` identifiers in discovery order."""

    @abstractmethod
    def _fix_resource(self, resource_id: str, parameters: Mapping[str, str]) -> None:
        """Apply the remediating change to a single resource."""


BPSetClass = Type[BPSet]


class BPSetRegistry:
    """Registry that stores available best-practice set classes."""

    def __init__(self) -> None:
        self._bpsets: Dict[str, BPSetClass] = {}

    def register(self, cls: BPSetClass) -> BPSetClass:
        """Class decorator registering *cls* under its metadata name."""

        name = cls.metadata.name
        if not name:
            raise ValueError("BPSet name must be a non-empty string")
        if name in self._bpsets and self._bpsets[name] is not cls:
            raise ValueError(f"BPSet '{name}' is already registered")
        self._bpsets[name] = cls
        return cls

    def __contains__(self, name: object) -> bool:
        return name in self._bpsets

    def __getitem__(self, name: str) -> BPSetClass:
        return self._bpsets[name]

    def keys(self) -> Iterator[str]:
        return iter(self._bpsets)

    def items(self) -> Iterator[tuple[str, BPSetClass]]:
        return iter(self._bpsets.items())

    def as_mapping(self) -> Mapping[str, BPSetClass]:
        return MappingProxyType(self._bpsets)


BPSET_REGISTRY = BPSetRegistry()
register_bpset: Callable[[BPSetClass], BPSetClass] = BPSET_REGISTRY.register


def get_bpset_classes() -> Mapping[str, BPSetClass]:
    """Return a read-only mapping of registered best-practice sets."""

    return BPSET_REGISTRY.as_mapping()


def _import_bpset_modules() -> None:
    """Import modules that register best-practice sets via decorators."""

    package_name = __name__
    package_paths = getattr(__spec__, "submodule_search_locations", None)
    if not package_paths:
        return

    for module_info in pkgutil.iter_modules(package_paths):
        module_name = module_info.name
        if module_name.startswith("_"):
            continue
        importlib.import_module(f"{package_name}.{module_name}")


_import_bpset_modules()

BPSET_CLASSES: Mapping[str, BPSetClass] = get_bpset_classes()

__all__ = [
    "BPSET_CLASSES",
    "BPSET_REGISTRY",
    "BPSet",
    "BPSetRegistry",
    "get_bpset_classes",
    "register_bpset",
]
