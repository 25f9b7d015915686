# debgraph/modules/query.py
"""
Package facts from the dpkg database.

Every fact is fetched with its own ``dpkg-query -W -f=<template>`` call.
Failures never escape: a missing binary, a nonzero exit status (package
unknown to dpkg) or a timeout all come back as empty text, which later
classifies the package as invalid.
"""

from __future__ import annotations
import enum
import subprocess
from typing import Dict, Optional

from debgraph import DebGraphError


class QueryError(DebGraphError):
    pass


class QueryKind(enum.Enum):
    STATUS = "status"
    VERSION = "version"
    DEPENDS = "depends"


QUERY_TEMPLATES: Dict[QueryKind, str] = {
    QueryKind.STATUS: "${Status}\\n",
    QueryKind.VERSION: "${Version}\\n",
    QueryKind.DEPENDS: "${Depends}\\t${Pre-Depends}\\n",
}


class PackageQuerySource:
    """
    Supplies raw text facts about one package name.

    Implementations must tolerate unknown names and return empty text
    for them; QueryError is the only exception callers are prepared for.
    """

    def query(self, kind: QueryKind, name: str) -> str:
        raise NotImplementedError


class DpkgQuerySource(PackageQuerySource):
    def __init__(self, command: str = "dpkg-query", timeout: Optional[float] = None, log=None):
        self.command = command
        self.timeout = timeout
        self.log = log

    def _debug(self, message):
        if self.log:
            self.log.debug(message)

    def _run(self, template: str, name: str) -> str:
        cmd = [self.command, "-W", f"-f={template}", "--", name]
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            self._debug(f"{self.command} failed for {name}: {e}")
            return ""
        if proc.returncode != 0:
            self._debug(f"{self.command} exited {proc.returncode} for {name}: {proc.stderr.strip()}")
            return ""
        return proc.stdout

    def query(self, kind: QueryKind, name: str) -> str:
        output = self._run(QUERY_TEMPLATES[kind], name)
        # multi-arch packages print one line per installed architecture
        line = output.split("\n", 1)[0]
        if kind is QueryKind.DEPENDS:
            # joined with ", " rather than a plain space, which would merge the
            # last Depends group with the first Pre-Depends group
            parts = [part.strip() for part in line.split("\t")]
            return ", ".join(part for part in parts if part)
        return line
