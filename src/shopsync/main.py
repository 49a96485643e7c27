#!/usr/bin/env python3

from __future__ import annotations

import argparse
import sys
from logging import getLogger
from pathlib import Path
from signal import SIGINT, signal
from time import monotonic
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from shopsync.app import (
    GarbageKind,
    run_all,
    run_attribute_definitions,
    run_check,
    run_collections,
    run_definitions,
    run_files,
    run_gc,
    run_instances,
    run_menus,
    run_pages,
    run_product_attributes,
    run_products,
)
from shopsync.common.logging import configure_logging
from shopsync.config.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from shopsync.domain.reconciliation import SyncReport

log = getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="shopsync", description="Reconcile a target Shopify store with a source store"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging verbosity (default: %(default)s)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("files", help="Upload files missing at target")
    commands.add_parser("collections", help="Create collections missing at target")
    products = commands.add_parser("products", help="Sync the products named in the handles file")
    products.add_argument("--handles-file", type=Path, help="File with one product handle per line")
    commands.add_parser("pages", help="Sync pages and their attributes")
    commands.add_parser("menus", help="Sync navigation menus")
    definitions = commands.add_parser("definitions", help="Sync definitions and their instances")
    definitions.add_argument(
        "--skip-instances",
        action="store_true",
        help="Only sync the definitions themselves",
    )
    instances = commands.add_parser("instances", help="Sync the instances of one definition")
    instances.add_argument("type", help="Definition type")
    check = commands.add_parser("check", help="Report instances that differ without writing")
    check.add_argument("type", help="Definition type")
    commands.add_parser("attribute-definitions", help="Sync attribute definitions")
    product_attributes = commands.add_parser(
        "product-attributes", help="Sync the attributes of products and their variants"
    )
    product_attributes.add_argument(
        "--handles-file", type=Path, help="File with one product handle per line"
    )
    gc = commands.add_parser("gc", help="Delete target entities missing at source")
    gc.add_argument("kind", choices=[kind.value for kind in GarbageKind])
    gc.add_argument("--type", dest="definition_type", help="Definition type (for instances)")
    commands.add_parser("all", help="Sync every entity kind in dependency order")

    args = parser.parse_args(list(argv))
    if args.command == "gc" and args.kind == GarbageKind.INSTANCES and not args.definition_type:
        parser.error("gc instances requires --type")
    return args


def _dispatch(args: argparse.Namespace) -> list[SyncReport]:
    match args.command:
        case "files":
            return run_files()
        case "collections":
            return run_collections()
        case "products":
            return run_products(handles_file=args.handles_file)
        case "pages":
            return run_pages()
        case "menus":
            return run_menus()
        case "definitions":
            return run_definitions(include_instances=not args.skip_instances)
        case "instances":
            return run_instances(args.type)
        case "check":
            return run_check(args.type)
        case "attribute-definitions":
            return run_attribute_definitions()
        case "product-attributes":
            return run_product_attributes(handles_file=args.handles_file)
        case "gc":
            return run_gc(args.kind, definition_type=args.definition_type)
        case "all":
            return run_all()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=args.log_level)

    log.info("Starting %s sync", args.command)
    started = monotonic()
    try:
        reports = _dispatch(args)
    except ConfigurationError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    failed = sum(len(report.failed) for report in reports)
    for report in reports:
        log.info("%s", report.summary())
    log.info(
        "Finished %s sync with %d failed item(s). Time: %.2f seconds.",
        args.command,
        failed,
        monotonic() - started,
    )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.warning("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
