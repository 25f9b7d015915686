# debgraph/modules/package.py
"""
PackageRecord and its construction from raw dpkg facts.

Each query kind maps to a pure parser ``(name, raw_text) -> field update``
through FIELD_PARSERS; build_record merges the updates, applies the
invalid-package rules and reports the node and its edges to the sink.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from debgraph.modules.depends import Groups, InvalidDependencyName, flatten, parse_depends
from debgraph.modules.graph import GraphSink, NodeClass
from debgraph.modules.query import PackageQuerySource, QueryError, QueryKind


class InstallationState(enum.Enum):
    NOT_INSTALLED = "not-installed"
    CONFIG_FILES = "config-files"
    HALF_INSTALLED = "half-installed"
    UNPACKED = "unpacked"
    HALF_CONFIGURED = "half-configured"
    TRIGGERS_AWAITED = "triggers-awaited"
    TRIGGERS_PENDING = "triggers-pending"
    INSTALLED = "installed"
    INVALID = "invalid"


KNOWN_STATES: Dict[str, InstallationState] = {
    state.value: state for state in InstallationState if state is not InstallationState.INVALID
}


@dataclass(frozen=True)
class PackageRecord:
    name: str
    state: InstallationState
    version: Optional[str] = None
    dependencies: Groups = ()
    error: Optional[InvalidDependencyName] = None

    @property
    def installed(self) -> bool:
        return self.state is InstallationState.INSTALLED

    @property
    def valid(self) -> bool:
        return self.state is not InstallationState.INVALID

    @property
    def dependency_names(self):
        return flatten(self.dependencies)

    @property
    def node_class(self) -> NodeClass:
        if self.installed:
            return NodeClass.INSTALLED
        if not self.valid:
            return NodeClass.INVALID
        return NodeClass.NOT_INSTALLED

    @property
    def label(self) -> str:
        return f"{self.name}\n{self.version or ''}"


def classify_status(text: str) -> InstallationState:
    """Last whitespace token of the status text, or INVALID."""
    tokens = (text or "").split()
    if not tokens:
        return InstallationState.INVALID
    return KNOWN_STATES.get(tokens[-1], InstallationState.INVALID)


def parse_status(name: str, raw: str) -> Dict[str, Any]:
    return {"state": classify_status(raw)}


def parse_version(name: str, raw: str) -> Dict[str, Any]:
    return {"version": (raw or "").rstrip("\n")}


def parse_dependencies(name: str, raw: str) -> Dict[str, Any]:
    try:
        return {"dependencies": parse_depends(raw)}
    except InvalidDependencyName as e:
        raise e.for_package(name) from e


FIELD_PARSERS: Dict[QueryKind, Callable[[str, str], Dict[str, Any]]] = {
    QueryKind.STATUS: parse_status,
    QueryKind.VERSION: parse_version,
    QueryKind.DEPENDS: parse_dependencies,
}


def _fetch(source: PackageQuerySource, kind: QueryKind, name: str, log=None) -> str:
    try:
        return source.query(kind, name) or ""
    except QueryError as e:
        if log:
            log.debug(f"{kind.value} query for {name} failed: {e}")
        return ""


def build_record(name: str, source: PackageQuerySource, sink: GraphSink, strict: bool = True, log=None) -> PackageRecord:
    """
    Query, classify and draw one package.

    In strict mode an unparsable dependency declaration raises
    InvalidDependencyName before anything reaches the sink. Otherwise the
    record keeps the error and no dependencies.
    """
    fields: Dict[str, Any] = {"name": name}
    for kind in (QueryKind.STATUS, QueryKind.VERSION):
        fields.update(FIELD_PARSERS[kind](name, _fetch(source, kind, name, log)))

    raw_depends = _fetch(source, QueryKind.DEPENDS, name, log)
    try:
        fields.update(FIELD_PARSERS[QueryKind.DEPENDS](name, raw_depends))
    except InvalidDependencyName as e:
        if strict:
            raise
        if log:
            log.warning(f"Ignoring dependencies of {name}: {e}")
        fields.update(dependencies=(), error=e)

    if fields["state"] is InstallationState.INVALID:
        fields["version"] = None

    record = PackageRecord(**fields)
    sink.add_node(record.name, record.label, record.node_class)
    for dep in record.dependency_names:
        sink.add_edge(record.name, dep)
    return record
