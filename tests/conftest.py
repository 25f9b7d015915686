from collections import Counter

import pytest

from debgraph.modules.graph import GraphSink
from debgraph.modules.query import PackageQuerySource, QueryKind


class FakeQuerySource(PackageQuerySource):
    """Answers from a dict of name -> (status, version, depends); unknown names get empty text."""

    def __init__(self, packages=None):
        self.packages = packages or {}
        self.calls = Counter()

    def query(self, kind, name):
        self.calls[(kind, name)] += 1
        status, version, depends = self.packages.get(name, ("", "", ""))
        return {
            QueryKind.STATUS: status,
            QueryKind.VERSION: version,
            QueryKind.DEPENDS: depends,
        }[kind]

    def queried(self, name):
        return self.calls[(QueryKind.STATUS, name)]

    @property
    def total_calls(self):
        return sum(self.calls.values())


class RecordingSink(GraphSink):
    def __init__(self):
        self.nodes = []
        self.edges = []

    def add_node(self, name, label, node_class):
        self.nodes.append((name, label, node_class))

    def add_edge(self, source, dest):
        self.edges.append((source, dest))


INSTALLED = "install ok installed"
NOT_INSTALLED = "unknown ok not-installed"


@pytest.fixture
def sink():
    return RecordingSink()
