"""CLI entrypoints for pkgcatalog commands."""

from __future__ import annotations

import argparse
import queue
import sys
import threading
from pathlib import Path
from typing import Optional

from .catalogers import CatalogerError, discover_catalogers
from .config import ConfigError, load_config
from .event import EventBus
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator
from .resolver import DirectoryResolver
from .ui import OUTPUT_FORMATS, ProgressObserver, catalog_report_handler


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pkgcatalog",
        description="Discover installed software packages in a filesystem tree.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Catalog the packages found below a directory.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    scan_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan (defaults to current directory).",
    )
    scan_parser.add_argument(
        "--config",
        default=None,
        help="Path to a .pkgcatalog.yml file (defaults to the one in the scanned directory).",
    )
    scan_parser.add_argument(
        "--cataloger",
        dest="catalogers",
        action="append",
        default=None,
        help="Run only the named cataloger; repeat to select several.",
    )
    scan_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of catalogers to run concurrently.",
    )
    scan_parser.add_argument(
        "-o",
        "--output",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Report format written to stdout.",
    )
    scan_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file.",
    )

    list_parser = subparsers.add_parser(
        "catalogers",
        help="List the available catalogers.",
    )
    _add_verbose_option(list_parser, suppress_default=True)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for pkgcatalog commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "scan":
        _run_scan(parser, args)
    elif args.command == "catalogers":
        configure_logging(verbose=bool(args.verbose))
        for cataloger in discover_catalogers():
            print(cataloger.name)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_scan(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    scan_path = Path(args.path)
    try:
        config = load_config(Path(args.config) if args.config else scan_path)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    log_file = Path(args.log_file) if args.log_file else config.log_file
    configure_logging(verbose=bool(args.verbose), log_file=log_file)
    logger = get_logger("cli")

    output = args.output or config.output
    workers = args.workers if args.workers is not None else config.workers
    try:
        catalogers = discover_catalogers(args.catalogers or config.catalogers.enabled)
        handler = catalog_report_handler(output)
        if workers < 1:
            raise ValueError("--workers must be >= 1")
    except (CatalogerError, TypeError, ValueError) as exc:
        parser.exit(1, f"{exc}\n")

    bus = EventBus()
    subscription = bus.subscribe()
    worker_errors: "queue.Queue[Optional[BaseException]]" = queue.Queue()

    def _worker() -> None:
        try:
            resolver = DirectoryResolver(scan_path, exclude_paths=config.exclude_paths)
            Orchestrator(catalogers, bus=bus, workers=workers).run(resolver)
        except Exception as exc:
            worker_errors.put(exc)
        finally:
            bus.close()

    thread = threading.Thread(target=_worker, name="pkgcatalog-worker", daemon=True)
    thread.start()
    try:
        ProgressObserver(handler).run(worker_errors, subscription)
    except Exception as exc:
        logger.debug("Scan of %s failed", scan_path, exc_info=exc)
        parser.exit(1, f"pkgcatalog scan failed: {exc}\nRun with --verbose for more details.\n")
    finally:
        thread.join()


if __name__ == "__main__":
    main(sys.argv[1:])
