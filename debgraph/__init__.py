# debgraph/__init__.py
"""debgraph - dependency graphs of Debian packages, discovered through dpkg-query."""

__version__ = "0.1.0"


class DebGraphError(Exception):
    """Base class for every error raised by debgraph."""
