from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from packtrack.config.loader import ConfigError, load_config
from packtrack.logging.error_log import ErrorLogBuffer
from packtrack.logging.init import get_logger, log_summary, set_debug, setup_logging
from packtrack.models.config_models import TrackerConfig
from packtrack.models.order import OrderStatus
from packtrack.services.display import (
    SchemaMissingError,
    render_debug_info,
    render_stats,
    render_table,
)
from packtrack.services.export import NothingToExportError, export_orders
from packtrack.services.filtering import CATEGORY_FILTERS, STATUS_FILTERS, filter_orders
from packtrack.services.importer import import_sources
from packtrack.services.summary import render_import_message, render_summary_line
from packtrack.store.order_store import OrderStore
from packtrack.store.persistence import (
    JsonFileKeyValueStore,
    PersistenceError,
    load_store,
    remove_store,
    save_store,
)

"""CLI entrypoint.

Every command loads the persisted store first, runs one operation and saves
the store again when the operation changed it.

Exit codes:
    0  success
    1  fatal (config / persistence / missing header / nothing to export)
    2  partial failure (at least one import source failed)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="packtrack", description="CSV order packing tracker")
    p.add_argument("--config", type=Path, default=None, help="Path to YAML config (default: config/packtrack.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import one or more CSV files")
    imp.add_argument("files", nargs="+", type=Path)
    imp.add_argument("--no-progress", action="store_true", help="Disable the progress bar")

    ls = sub.add_parser("list", help="Show orders")
    ls.add_argument("--search", default="", help="Case-insensitive text contained in any column")
    ls.add_argument("--status", choices=STATUS_FILTERS, default="all")
    ls.add_argument("--category", choices=CATEGORY_FILTERS, default="all")
    ls.add_argument("--max-colwidth", type=int, default=40)

    for name, help_text in (
        ("pack", "Mark an order packed"),
        ("unpack", "Mark an order pending"),
        ("toggle", "Flip an order between pending and packed"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("id", type=int)

    note = sub.add_parser("note", help="Set the notes of an order")
    note.add_argument("id", type=int)
    note.add_argument("text")

    exp = sub.add_parser("export", help="Export packed orders as CSV")
    exp.add_argument("--output", type=Path, default=None)
    exp.add_argument("--all", dest="include_all", action="store_true", help="Export every order, not only packed ones")

    sub.add_parser("stats", help="Show order counts")
    sub.add_parser("debug", help="Show parsing diagnostics")

    clr = sub.add_parser("clear", help="Delete all orders and reset ids")
    clr.add_argument("--yes", action="store_true", help="Confirm deletion")
    return p.parse_args(argv)


def _cmd_import(args: argparse.Namespace, cfg: TrackerConfig, store: OrderStore, kv: JsonFileKeyValueStore) -> int:
    logger = get_logger()
    logger.info(f"已选择 {len(args.files)} 个文件")
    report = import_sources(
        args.files,
        store,
        cfg,
        error_log=ErrorLogBuffer(Path(cfg.logs_directory)),
        show_progress=not args.no_progress,
    )
    # one refresh after every source has settled
    if report.success_sources > 0:
        save_store(store, kv)

    print(render_import_message(report))
    # SUMMARY, then one ERROR line per failed source, closes the output
    summary_line = render_summary_line(report)
    log_summary(summary_line[len("SUMMARY "):])
    for failure in report.failures:
        logger.error(failure)
    return EXIT_PARTIAL_FAILURE if report.failed_sources else EXIT_SUCCESS


def _cmd_list(args: argparse.Namespace, store: OrderStore) -> int:
    orders = filter_orders(store.snapshot(), args.search, args.status, args.category)
    print(render_table(orders, store.header, max_colwidth=args.max_colwidth))
    print(render_stats(store))
    return EXIT_SUCCESS


def _cmd_status(args: argparse.Namespace, store: OrderStore, kv: JsonFileKeyValueStore) -> int:
    logger = get_logger()
    if args.command == "toggle":
        new_status = store.toggle_status(args.id)
        changed = new_status is not None
    else:
        new_status = OrderStatus.PACKED if args.command == "pack" else OrderStatus.PENDING
        changed = store.set_status(args.id, new_status)
    if not changed:
        logger.warning(f"order {args.id} not found")
        return EXIT_SUCCESS
    save_store(store, kv)
    print("✓ 已标记为打包" if new_status is OrderStatus.PACKED else "↩ 已撤销打包")
    return EXIT_SUCCESS


def _cmd_note(args: argparse.Namespace, store: OrderStore, kv: JsonFileKeyValueStore) -> int:
    if not store.set_notes(args.id, args.text):
        get_logger().warning(f"order {args.id} not found")
        return EXIT_SUCCESS
    save_store(store, kv)
    if args.text.strip():
        print("📝 备注已保存")
    return EXIT_SUCCESS


def _cmd_export(args: argparse.Namespace, cfg: TrackerConfig, store: OrderStore) -> int:
    try:
        path, count = export_orders(store, cfg, args.output, include_all=args.include_all)
    except NothingToExportError as e:
        get_logger().error(str(e))
        return EXIT_FATAL
    print(f"{path} ({count})")
    return EXIT_SUCCESS


def _cmd_clear(args: argparse.Namespace, store: OrderStore, kv: JsonFileKeyValueStore) -> int:
    if not args.yes:
        get_logger().error("clear: 此操作不可恢复, 请使用 --yes 确认")
        return EXIT_FATAL
    store.clear()
    remove_store(kv)
    get_logger().info("all orders cleared")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no explicit list is given (tests pass [])
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=False)

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    kv = JsonFileKeyValueStore(Path(cfg.state_directory))
    try:
        store = load_store(kv)
    except PersistenceError as e:
        logger.error(f"state: {e}")
        return EXIT_FATAL

    try:
        if args.command == "import":
            return _cmd_import(args, cfg, store, kv)
        if args.command == "list":
            return _cmd_list(args, store)
        if args.command in ("pack", "unpack", "toggle"):
            return _cmd_status(args, store, kv)
        if args.command == "note":
            return _cmd_note(args, store, kv)
        if args.command == "export":
            return _cmd_export(args, cfg, store)
        if args.command == "stats":
            print(render_stats(store))
            return EXIT_SUCCESS
        if args.command == "debug":
            print(render_debug_info(store))
            return EXIT_SUCCESS
        if args.command == "clear":
            return _cmd_clear(args, store, kv)
    except SchemaMissingError as e:
        logger.error(str(e))
        return EXIT_FATAL
    except OSError as e:
        logger.error(f"io: {e}")
        return EXIT_FATAL

    logger.error(f"unknown command: {args.command}")  # pragma: no cover
    return EXIT_FATAL  # pragma: no cover


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
