# debgraph/modules/registry.py

from __future__ import annotations
import threading
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from debgraph.modules.package import PackageRecord


class PackageRegistry:
    """
    Every package seen during a run, by name.

    A name is registered at most once; the membership check and the
    creation of its record happen under the same lock.
    """

    def __init__(self):
        self._records: Dict[str, PackageRecord] = {}
        self._lock = threading.Lock()

    def lookup_or_reserve(self, name: str, factory: Callable[[str], PackageRecord]) -> Tuple[PackageRecord, bool]:
        """
        Return ``(record, created)``. ``factory(name)`` only runs for an
        unseen name; if it raises, nothing is registered.
        """
        with self._lock:
            record = self._records.get(name)
            if record is not None:
                return record, False
            record = factory(name)
            self._records[name] = record
            return record, True

    def contains(self, name: str) -> bool:
        return name in self._records

    __contains__ = contains

    def get(self, name: str) -> Optional[PackageRecord]:
        return self._records.get(name)

    def names(self) -> List[str]:
        return list(self._records)

    def __iter__(self) -> Iterator[PackageRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)
