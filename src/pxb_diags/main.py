"""CLI entrypoint for the px-backup diagnostics collector."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from pxb_diags import __version__
from pxb_diags.bundle import BundleLayout, resolve_bundle_root
from pxb_diags.cluster import KubernetesClusterReader, NamespaceResolver
from pxb_diags.collection import CollectionOrchestrator, print_result
from pxb_diags.config import DEFAULT_TAIL_LINES, Settings, get_settings
from pxb_diags.errors import CollectorError

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_UNEXPECTED = 2
EXIT_INTERRUPTED = 130


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pxb-diags",
        description="Gather specs, descriptions and logs of a px-backup deployment into a diagnostics bundle.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--namespace",
        "-n",
        default=None,
        help="px-backup namespace; when omitted, the px-backup service is looked up across all namespaces",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the pxb-diags-output bundle; use '.' for the current directory (default: /tmp)",
    )
    parser.add_argument(
        "--tail-lines",
        type=int,
        default=None,
        help=f"Number of lines to tail from the logs; -1 gets all the lines (default: {DEFAULT_TAIL_LINES})",
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="Path to kubeconfig (default: KUBECONFIG env)",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubernetes context to use",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Maximum number of artifacts collected at the same time",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    verbosity.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only log warnings and errors",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """CLI flags take precedence over environment settings."""
    overrides = {
        "kubeconfig": args.kubeconfig,
        "context": args.context,
        "namespace": args.namespace,
        "output_dir": args.output_dir,
        "tail_lines": args.tail_lines,
        "max_workers": args.max_workers,
    }
    update = {k: v for k, v in overrides.items() if v is not None}
    return Settings.model_validate({**settings.model_dump(), **update})


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for pxb-diags CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )
    logger = logging.getLogger("pxb_diags")
    if args.quiet:
        logger.setLevel(logging.WARNING)

    try:
        settings = _apply_overrides(get_settings(), args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FATAL

    try:
        reader = KubernetesClusterReader.from_settings(settings)
        orchestrator = CollectionOrchestrator(
            reader,
            BundleLayout(resolve_bundle_root(settings.output_dir)),
            resolver=NamespaceResolver(reader, settings.marker_service),
            tail_lines=settings.tail_lines,
            max_workers=settings.max_workers,
        )
        result = orchestrator.run(settings.namespace)
    except CollectorError as e:
        print(str(e), file=sys.stderr)
        return EXIT_FATAL
    except KeyboardInterrupt:
        print("Interrupted; the bundle is incomplete", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logging.exception("Collection failed")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_UNEXPECTED

    print_result(result, Console())
    return EXIT_OK


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
