# debgraph/modules/depends.py
"""
Parser for Debian dependency declarations.

A declaration such as ``libc6 (>= 2.7), libssl1.0.0 | libssl0.9.8`` is a
comma separated list of groups (all required); each group is a ``|``
separated list of alternatives (any one suffices). Only the bare package
name of each alternative is kept, version relations, architecture
qualifiers and build profile restrictions are dropped.
"""

from __future__ import annotations
import re
from typing import Callable, Optional, Sequence, Tuple

from debgraph import DebGraphError

Groups = Tuple[Tuple[str, ...], ...]

# name token at the start of an alternative; stops at " (", ":amd64", " [" ...
NAME_RE = re.compile(r"\s*(\w[\w.+-]*)")


class InvalidDependencyName(DebGraphError, ValueError):
    """An alternative in a dependency declaration has no package name."""

    def __init__(self, text: str, fragment: str, package: Optional[str] = None):
        self.text = text
        self.fragment = fragment
        self.package = package
        where = f" of package '{package}'" if package else ""
        super().__init__(f"Invalid dependency name {fragment.strip()!r} in declaration{where}: {text!r}")

    def for_package(self, package: str) -> "InvalidDependencyName":
        return InvalidDependencyName(self.text, self.fragment, package=package)


def parse_name(fragment: str, text: str = "") -> str:
    match = NAME_RE.match(fragment)
    if not match:
        raise InvalidDependencyName(text or fragment, fragment)
    return match.group(1)


def parse_depends(text: str) -> Groups:
    """
    Parse a dependency declaration into groups of alternatives.

    Empty input yields an empty tuple. Any alternative without a name
    token aborts the whole declaration with InvalidDependencyName.
    """
    text = (text or "").strip()
    if not text:
        return ()
    groups = []
    for segment in text.split(","):
        groups.append(tuple(parse_name(alt, text) for alt in segment.split("|")))
    return tuple(groups)


def flatten(groups: Sequence[Sequence[str]]) -> Tuple[str, ...]:
    """Every alternative of every group, in declaration order."""
    return tuple(name for group in groups for name in group)


def first_alternatives(groups: Sequence[Sequence[str]], is_installed: Callable[[str], bool]) -> Tuple[str, ...]:
    """
    OR-aware reduction: one name per group, the first installed
    alternative or else the first listed one.
    """
    chosen = []
    for group in groups:
        if not group:
            continue
        chosen.append(next((name for name in group if is_installed(name)), group[0]))
    return tuple(chosen)
