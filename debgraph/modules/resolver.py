# debgraph/modules/resolver.py
"""
Breadth-first discovery of the transitive dependency closure.

Seeding registers the requested packages, expanding pops records off a
FIFO queue and registers every dependency name not seen before. The
registry is the only thing that stops cycles: a name already present is
never queried or queued again.
"""

from __future__ import annotations
import enum
from collections import deque
from typing import Callable, Deque, Iterable, Optional

from debgraph import DebGraphError
from debgraph.modules.graph import GraphSink
from debgraph.modules.package import PackageRecord, build_record
from debgraph.modules.query import PackageQuerySource
from debgraph.modules.registry import PackageRegistry

ProgressCallback = Callable[[PackageRecord, int, int], None]


class BuilderStateError(DebGraphError):
    pass


class BuilderState(enum.Enum):
    SEEDING = "seeding"
    EXPANDING = "expanding"
    DONE = "done"


class GraphBuilder:
    def __init__(
        self,
        source: PackageQuerySource,
        sink: GraphSink,
        registry: Optional[PackageRegistry] = None,
        strict: bool = True,
        on_progress: Optional[ProgressCallback] = None,
        log=None,
    ):
        self.source = source
        self.sink = sink
        self.registry = registry if registry is not None else PackageRegistry()
        self.strict = strict
        self.on_progress = on_progress
        self.log = log
        self.state = BuilderState.SEEDING
        self.queue: Deque[PackageRecord] = deque()
        self.queries = 0
        self.dequeued = 0

    def _create(self, name: str) -> PackageRecord:
        self.queries += 1
        return build_record(name, self.source, self.sink, strict=self.strict, log=self.log)

    def _discover(self, name: str) -> Optional[PackageRecord]:
        if self.registry.contains(name):
            return None
        record, created = self.registry.lookup_or_reserve(name, self._create)
        if not created:
            return None
        if self.log:
            self.log.debug(f"Discovered {name} ({record.state.value})")
        self.queue.append(record)
        return record

    def seed(self, names: Iterable[str]) -> None:
        if self.state is not BuilderState.SEEDING:
            raise BuilderStateError(f"Cannot seed a builder in state '{self.state.value}'")
        for name in names:
            self._discover(name)
        self.state = BuilderState.EXPANDING

    def expand(self) -> None:
        if self.state is BuilderState.SEEDING:
            self.state = BuilderState.EXPANDING
        while self.queue:
            record = self.queue.popleft()
            self.dequeued += 1
            for dep in record.dependency_names:
                self._discover(dep)
            if self.on_progress:
                self.on_progress(record, self.dequeued, self.dequeued + len(self.queue))
        self.state = BuilderState.DONE

    def build(self, seeds: Iterable[str]) -> PackageRegistry:
        self.seed(seeds)
        self.expand()
        if self.log:
            self.log.info(f"Discovered {len(self.registry)} packages in {self.dequeued} steps")
        return self.registry
