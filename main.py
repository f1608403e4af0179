#!/usr/bin/env python3
"""Main Entry Point and CLI Integration.

Shows why one pod depends on another. If both source and target are given,
all dependency paths between them are printed. If the target is omitted, the
pods reachable from the source are printed: what it depends on, or with
--reverse, what depends on it.

Dependency records are read from a YAML snapshot (--cache), such as the one
produced by the CocoaPods ``query`` plugin.
"""

import argparse
import sys
import uuid
from pathlib import Path

import structlog

from podwhy.config import WhyConfig, load_config
from podwhy.errors import PodWhyError
from podwhy.log_config import (
    bind_context,
    bind_query_id,
    configure_logging,
    unbind_context,
    unbind_query_id,
)
from podwhy.output.formatter import render_graph, render_report, to_yaml
from podwhy.query import QueryResult, WhyQuery, run_query
from podwhy.sources.cache import load_records

logger = structlog.get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="pod-why",
        description="Shows why one pod depends on another",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # All dependency paths from A to G
  pod-why A G --cache deps.yaml

  # Everything that depends on G, directly or transitively
  pod-why G --reverse --cache deps.yaml

  # Direct dependencies of B, with a Graphviz file of the result
  pod-why B --direct --cache deps.yaml --to-dot b.dot
        """,
    )

    parser.add_argument("source", help="Pod to start from")
    parser.add_argument("target", nargs="?", default=None, help="Pod to find paths to")

    parser.add_argument(
        "--cache",
        type=Path,
        default=None,
        help="Load the dependency data from the given YAML file",
    )
    parser.add_argument(
        "--to-yaml",
        type=Path,
        default=None,
        help="Output the results in YAML format to the given file",
    )
    parser.add_argument(
        "--to-dot",
        type=Path,
        default=None,
        help="Output the result graph to the given file",
    )
    parser.add_argument(
        "--graph-format",
        choices=["dot", "mermaid"],
        default=None,
        help="Format of the --to-dot output (default: dot)",
    )
    parser.add_argument(
        "-r",
        "--reverse",
        action="store_true",
        help="List pods that depend on the source (ignored with a target)",
    )
    parser.add_argument(
        "--direct",
        action="store_true",
        help="Only list direct dependencies or dependents (ignored with a target)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to configuration YAML file (default: podwhy.yaml if present)",
    )
    parser.add_argument(
        "--no-cycle-check",
        action="store_true",
        help="Skip the cycle check before traversal",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Render logs as JSON",
    )

    return parser.parse_args(argv)


def apply_cli_overrides(config: WhyConfig, args: argparse.Namespace) -> WhyConfig:
    """Return a copy of config with command-line options applied on top."""
    source = config.source
    if args.cache is not None:
        source = source.model_copy(update={"cache": args.cache})

    output_updates = {}
    if args.to_yaml is not None:
        output_updates["to_yaml"] = args.to_yaml
    if args.to_dot is not None:
        output_updates["to_dot"] = args.to_dot
    if args.graph_format is not None:
        output_updates["graph_format"] = args.graph_format

    graph = config.graph
    if args.no_cycle_check:
        graph = graph.model_copy(update={"check_cycles": False})

    updates = {
        "source": source,
        "output": config.output.model_copy(update=output_updates),
        "graph": graph,
    }
    if args.log_level is not None:
        updates["logging_level"] = args.log_level
    if args.json_logs:
        updates["json_logs"] = True

    return config.model_copy(update=updates)


def write_outputs(result: QueryResult, config: WhyConfig) -> None:
    """Write the YAML snapshot and graph description files, if requested."""
    if config.output.to_yaml is not None:
        config.output.to_yaml.write_text(to_yaml(result), encoding="utf-8")
        logger.info("yaml_output_written", path=str(config.output.to_yaml))

    if config.output.to_dot is not None:
        document = render_graph(result.subgraph, config.output.graph_format)
        config.output.to_dot.write_text(document, encoding="utf-8")
        logger.info(
            "graph_output_written",
            path=str(config.output.to_dot),
            graph_format=config.output.graph_format,
        )


def run(args: argparse.Namespace) -> int:
    """Answer the query described by args.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = apply_cli_overrides(load_config(args.config), args)
    except (FileNotFoundError, ValueError) as e:
        print(f"[!] Configuration error: {e}", file=sys.stderr)
        return 1

    configure_logging(config.logging_level, config.json_logs)

    for warning in config.validate_config():
        logger.warning("configuration_warning", message=warning)

    if config.source.cache is None:
        print("[!] No dependency source given. Use --cache FILE.", file=sys.stderr)
        return 1

    query = WhyQuery(
        source=args.source,
        target=args.target,
        reverse=args.reverse,
        direct_only=args.direct,
    )

    bind_query_id(uuid.uuid4().hex[:12])
    bind_context(source=query.source, target=query.target)
    try:
        records = load_records(config.source.cache)
        result = run_query(
            records,
            query,
            separator=config.source.subspec_separator,
            duplicate_policy=config.source.duplicate_policy,
            check_cycles=config.graph.check_cycles,
        )
        for warning in result.warnings:
            print(f"[!] Warning: {warning}", file=sys.stderr)
        print(render_report(result))
        write_outputs(result, config)
    except PodWhyError as e:
        logger.error("query_failed", error=e.message)
        print(f"[!] {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.exception("output_write_failed", error=str(e))
        print(f"[!] {e}", file=sys.stderr)
        return 1
    finally:
        unbind_context("source", "target")
        unbind_query_id()

    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for pod-why."""
    args = parse_args(argv)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        sys.exit(1)


if __name__ == "__main__":
    main()
