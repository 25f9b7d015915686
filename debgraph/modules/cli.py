# debgraph/modules/cli.py
"""
Command line front-end for debgraph.
- Discovers the dependency closure of the given packages with dpkg-query.
- Renders it with Graphviz, DOT source by default.
- Uses rich on stderr for progress, errors and the summary; stdout only
  ever receives the rendered graph.

Usage examples:
  debgraph coreutils > coreutils.dot
  debgraph -f svg -o bash.svg bash
  debgraph --keep-going -f png -o desktop.png gnome-shell
"""

from __future__ import annotations
import argparse
import sys
from collections import Counter
from typing import List, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, MofNCompleteColumn, TimeElapsedColumn
from rich.table import Table

from debgraph import __version__
from debgraph.modules.config import ConfigError, DebGraphConfig, GraphOptions
from debgraph.modules.depends import InvalidDependencyName
from debgraph.modules.graph import DependencyGraph, NodeClass, RenderError
from debgraph.modules.logger import Logger
from debgraph.modules.query import DpkgQuerySource, PackageQuerySource
from debgraph.modules.registry import PackageRegistry
from debgraph.modules.resolver import GraphBuilder


class UsageParser(argparse.ArgumentParser):
    """Usage errors exit with status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def make_console(no_color: bool) -> Console:
    if no_color:
        return Console(stderr=True, color_system=None)
    return Console(stderr=True)


def build_argparser() -> argparse.ArgumentParser:
    ap = UsageParser(prog="debgraph", description="Draw the dependency graph of installed Debian packages")
    ap.add_argument("packages", nargs="+", metavar="PACKAGE", help="Package(s) to start from")
    ap.add_argument("-f", dest="format", metavar="FORMAT", help="Output format (dot, svg, png, pdf, ...); default dot")
    ap.add_argument("-o", dest="output", metavar="FILE", help="Output file; default standard output")
    ap.add_argument("-c", "--config", help="Path to debgraph.conf")
    ap.add_argument("--keep-going", action="store_true",
                    help="Skip unparsable dependency declarations instead of aborting")
    ap.add_argument("--no-progress", action="store_true", help="Do not show the progress bar")
    ap.add_argument("--no-color", action="store_true", help="Disable color output")
    ap.add_argument("-q", "--quiet", action="store_true", help="Only report errors")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log discovery details and print a summary table")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def summarize(registry: PackageRegistry) -> Counter:
    return Counter(record.node_class for record in registry)


def print_summary(console: Console, registry: PackageRegistry, verbose: bool = False):
    counts = summarize(registry)
    console.print(
        f"[bold]{len(registry)}[/bold] packages: "
        f"[green]{counts[NodeClass.INSTALLED]} installed[/green], "
        f"[yellow]{counts[NodeClass.NOT_INSTALLED]} not installed[/yellow], "
        f"[red]{counts[NodeClass.INVALID]} invalid[/red]"
    )
    if not verbose:
        return
    table = Table(title="Packages")
    table.add_column("Package", style="bold")
    table.add_column("State")
    table.add_column("Version")
    table.add_column("Dependencies", overflow="fold")
    for record in sorted(registry, key=lambda r: r.name):
        table.add_row(record.name, record.state.value, record.version or "-",
                      ", ".join(record.dependency_names) or "-")
    console.print(table)


def write_output(data: bytes, path: Optional[str]):
    if path:
        with open(path, "wb") as fh:
            fh.write(data)
        return
    stream = getattr(sys.stdout, "buffer", None)
    if stream is not None:
        stream.write(data)
        stream.flush()
    else:
        sys.stdout.write(data.decode("utf-8", errors="replace"))
        sys.stdout.flush()


def discover(options: GraphOptions, source: PackageQuerySource, graph: DependencyGraph,
             console: Console, log: Logger) -> PackageRegistry:
    if not options.progress:
        builder = GraphBuilder(source, graph, strict=options.strict, log=log)
        return builder.build(options.packages)

    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), BarColumn(),
                  MofNCompleteColumn(), TimeElapsedColumn(), console=console, transient=True) as progress:
        task = progress.add_task("resolving", total=len(options.packages))

        def on_progress(record, processed, discovered):
            progress.update(task, completed=processed, total=discovered, description=record.name)

        builder = GraphBuilder(source, graph, strict=options.strict, on_progress=on_progress, log=log)
        return builder.build(options.packages)


def run(options: GraphOptions, console: Console, log: Logger, source: Optional[PackageQuerySource] = None) -> int:
    if source is None:
        source = DpkgQuerySource(command=options.query_command, timeout=options.query_timeout, log=log)
    graph = DependencyGraph(colors=options.colors)

    try:
        registry = discover(options, source, graph, console, log)
    except InvalidDependencyName as e:
        log.error(f"Aborted: {e}")
        return 1

    try:
        data = graph.render(options.output_format)
    except RenderError as e:
        log.error(str(e))
        return 1

    try:
        write_output(data, options.output_path)
    except OSError as e:
        log.error(f"Could not write {options.output_path}: {e}")
        return 1
    log.success(f"Wrote {options.output_format} graph to {options.output_path or 'standard output'}")

    if log.min_level < Logger.LEVELS["error"]:
        print_summary(console, registry, verbose=log.min_level <= Logger.LEVELS["info"])
    return 0


def main(argv: Optional[List[str]] = None, source: Optional[PackageQuerySource] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = build_argparser()
    args = parser.parse_args(argv)

    console = make_console(args.no_color)
    try:
        config = DebGraphConfig(path=args.config)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    log = Logger("debgraph", config=config, console=console)
    if args.verbose:
        log.set_level("info")
    if args.quiet:
        log.set_level("error")

    options = GraphOptions.from_config(
        config,
        packages=args.packages,
        output_format=args.format,
        output_path=args.output,
        strict=False if args.keep_going else None,
        progress=False if (args.no_progress or args.quiet) else None,
    )
    log.debug(f"Configuration loaded from {config.loaded_from or 'built-in defaults'}")
    return run(options, console, log, source=source)


if __name__ == "__main__":
    raise SystemExit(main())
