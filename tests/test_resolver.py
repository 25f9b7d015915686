import pytest

from debgraph.modules.depends import InvalidDependencyName
from debgraph.modules.package import InstallationState, PackageRecord
from debgraph.modules.registry import PackageRegistry
from debgraph.modules.resolver import BuilderState, BuilderStateError, GraphBuilder

from tests.conftest import FakeQuerySource, INSTALLED, NOT_INSTALLED


def test_end_to_end_two_packages(sink):
    source = FakeQuerySource({
        "pkgA": ("install ok installed", "1.0", "pkgB"),
        "pkgB": ("install ok not-installed", "", ""),
    })
    builder = GraphBuilder(source, sink)
    registry = builder.build(["pkgA"])

    assert builder.state is BuilderState.DONE
    assert builder.dequeued == 2
    assert registry.names() == ["pkgA", "pkgB"]
    a, b = registry.get("pkgA"), registry.get("pkgB")
    assert a.state is InstallationState.INSTALLED and a.version == "1.0"
    assert b.state is InstallationState.NOT_INSTALLED
    assert sink.edges == [("pkgA", "pkgB")]
    assert [n[0] for n in sink.nodes] == ["pkgA", "pkgB"]


def test_cycle_terminates(sink):
    source = FakeQuerySource({
        "A": (INSTALLED, "1", "B"),
        "B": (INSTALLED, "1", "A"),
    })
    builder = GraphBuilder(source, sink)
    registry = builder.build(["A"])

    assert sorted(registry.names()) == ["A", "B"]
    assert sorted(sink.edges) == [("A", "B"), ("B", "A")]
    assert source.queried("A") == 1 and source.queried("B") == 1
    assert builder.dequeued == 2


def test_seeds_registered_and_queried_once(sink):
    source = FakeQuerySource({
        "a": (INSTALLED, "1", "c"),
        "b": (INSTALLED, "1", "c, a"),
        "c": (INSTALLED, "1", ""),
    })
    builder = GraphBuilder(source, sink)
    registry = builder.build(["a", "b", "a"])

    assert sorted(registry.names()) == ["a", "b", "c"]
    for name in ("a", "b", "c"):
        assert source.queried(name) == 1
    assert len(sink.nodes) == 3
    assert builder.queries == builder.dequeued == 3


def test_breadth_first_order(sink):
    source = FakeQuerySource({
        "root": (INSTALLED, "1", "left, right"),
        "left": (INSTALLED, "1", "leaf"),
        "right": (INSTALLED, "1", ""),
        "leaf": (INSTALLED, "1", ""),
    })
    order = []
    builder = GraphBuilder(source, sink, on_progress=lambda rec, done, total: order.append((rec.name, done, total)))
    builder.build(["root"])
    assert order == [("root", 1, 3), ("left", 2, 4), ("right", 3, 4), ("leaf", 4, 4)]


def test_unknown_dependencies_become_invalid_nodes(sink):
    source = FakeQuerySource({"app": (INSTALLED, "2", "libfoo | libbar")})
    registry = GraphBuilder(source, sink).build(["app"])
    assert registry.get("libfoo").state is InstallationState.INVALID
    assert registry.get("libbar").version is None
    assert sink.edges == [("app", "libfoo"), ("app", "libbar")]


def test_preseeded_registry_makes_no_queries(sink):
    registry = PackageRegistry()
    for record in (PackageRecord("a", InstallationState.INSTALLED, "1", (("b",),)),
                   PackageRecord("b", InstallationState.INSTALLED, "1")):
        registry.lookup_or_reserve(record.name, lambda name, record=record: record)
    source = FakeQuerySource({"a": (INSTALLED, "1", "b"), "b": (INSTALLED, "1", "")})

    builder = GraphBuilder(source, sink, registry=registry)
    assert builder.build(["a", "b"]) is registry
    assert source.total_calls == 0
    assert builder.dequeued == 0
    assert sink.nodes == []


def test_parse_error_aborts_run(sink):
    source = FakeQuerySource({
        "a": (INSTALLED, "1", "b"),
        "b": (INSTALLED, "1", "(>= 1.0)"),
    })
    builder = GraphBuilder(source, sink)
    with pytest.raises(InvalidDependencyName) as exc:
        builder.build(["a"])
    assert exc.value.package == "b"
    assert not builder.registry.contains("b")


def test_lenient_policy_continues(sink):
    source = FakeQuerySource({
        "a": (INSTALLED, "1", "b, c"),
        "b": (INSTALLED, "1", "(>= 1.0)"),
        "c": (NOT_INSTALLED, "", ""),
    })
    registry = GraphBuilder(source, sink, strict=False).build(["a"])
    assert sorted(registry.names()) == ["a", "b", "c"]
    assert registry.get("b").error is not None


def test_cannot_seed_after_done(sink):
    builder = GraphBuilder(FakeQuerySource(), sink)
    builder.build(["ghost"])
    with pytest.raises(BuilderStateError):
        builder.seed(["other"])
