# debgraph/modules/graph.py

from __future__ import annotations
import enum
from typing import Dict, List, Optional, Tuple

import graphviz

from debgraph import DebGraphError

# formats served straight from the DOT source without running Graphviz
SOURCE_FORMATS = ("dot", "gv")


class RenderError(DebGraphError):
    pass


class NodeClass(enum.Enum):
    """Three-way classification used to color a package node."""

    INSTALLED = "installed"
    NOT_INSTALLED = "not_installed"
    INVALID = "invalid"


class GraphSink:
    """
    Receives nodes and edges as packages are discovered.

    No deduplication happens here: the discovery loop guarantees one
    add_node per name, edges may repeat.
    """

    def add_node(self, name: str, label: str, node_class: NodeClass) -> None:
        raise NotImplementedError

    def add_edge(self, source: str, dest: str) -> None:
        raise NotImplementedError


class DependencyGraph(GraphSink):
    """
    Dependency graph between packages, backed by a graphviz Digraph.
    """

    def __init__(self, colors: Optional[Dict[str, str]] = None, name: str = "dependencies"):
        self.colors = colors or {}
        self.nodes: Dict[str, Tuple[str, NodeClass]] = {}
        self.edges: List[Tuple[str, str]] = []
        self.digraph = graphviz.Digraph(name=name)
        self.digraph.attr("node", style="filled")

    def add_node(self, name, label, node_class):
        self.nodes[name] = (label, node_class)
        attrs = {}
        color = self.colors.get(node_class.value)
        if color:
            attrs["fillcolor"] = color
        # DOT line break escape
        self.digraph.node(name, label=label.replace("\n", "\\n"), **attrs)

    def add_edge(self, source, dest):
        self.edges.append((source, dest))
        self.digraph.edge(source, dest)

    @property
    def source(self) -> str:
        return self.digraph.source

    def render(self, fmt: str = "dot") -> bytes:
        """Encode the graph; anything but DOT itself goes through Graphviz."""
        fmt = (fmt or "dot").lower()
        if fmt in SOURCE_FORMATS:
            return self.source.encode("utf-8")
        try:
            return self.digraph.pipe(format=fmt)
        except ValueError as e:
            raise RenderError(f"Unsupported output format '{fmt}': {e}") from e
        except graphviz.ExecutableNotFound as e:
            raise RenderError(f"Graphviz is not installed: {e}") from e
        except graphviz.CalledProcessError as e:
            raise RenderError(f"Graphviz failed to render '{fmt}': {e}") from e
