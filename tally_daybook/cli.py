# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Provides command-line interface to run the pipeline.
#   This is how users interact with the system.
#
# COMMANDS:
# ---------
# 1. Load an export into MySQL (table cleared first):
#    python -m tally_daybook.cli load path/to/daybook.xml
#    python -m tally_daybook.cli load --from-tally --from-date 2024-08-01 --to-date 2024-08-31
#
# 2. Write a SQL script instead of loading:
#    python -m tally_daybook.cli export daybook.xml -o daybook.sql --dialect postgres
#
# 3. Strip the BOM / stray leading character from a file in place:
#    python -m tally_daybook.cli clean daybook.xml
#
# 4. Show how a file would be parsed:
#    python -m tally_daybook.cli inspect daybook.xml
#
# Every command falls back to DAYBOOK_XML_PATH when no path is given.
# Exit status: 0 ok, 1 read / database / settings failure, 2 usage error.
#
# ==============================================

import argparse
import copy
import json
import logging
import sys
from typing import Optional, Sequence

import pymysql

from tally_daybook import __version__
from tally_daybook.config import AppConfig, get_config
from tally_daybook.decoding.decoder import Decoder
from tally_daybook.errors import DaybookReadError
from tally_daybook.pipeline import DaybookPipeline
from tally_daybook.storage.sql_exporter import DIALECTS
from tally_daybook.tally_client import TallyClient

logger = logging.getLogger("tally_daybook")


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tally-daybook",
        description="Convert Tally daybook XML exports into MySQL rows or SQL scripts.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Verbose per-record logging")
    parser.add_argument(
        "--min-categories",
        type=int,
        default=None,
        help="Categories (date, type, number, amount, description) a record needs to be kept",
    )
    parser.add_argument(
        "--repair",
        action="store_true",
        help="Drop a stray non-printable leading character when no BOM is present",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    load = subparsers.add_parser("load", help="Load an export into MySQL")
    load.add_argument("path", nargs="?", help="Export file (default: DAYBOOK_XML_PATH)")
    load.add_argument("--table", help="Target table (default: DB_TABLE)")
    load.add_argument("--no-clear", action="store_true", help="Keep existing rows")
    load.add_argument("--from-tally", action="store_true", help="Fetch the Day Book from the Tally server")
    load.add_argument("--tally-url", help="Tally server URL (default: TALLY_URL)")
    load.add_argument("--company", help="Tally company name (default: TALLY_COMPANY)")
    load.add_argument("--from-date", help="First day to fetch, YYYY-MM-DD or YYYYMMDD")
    load.add_argument("--to-date", help="Last day to fetch (default: --from-date)")

    export = subparsers.add_parser("export", help="Write a SQL script")
    export.add_argument("path", nargs="?", help="Export file (default: DAYBOOK_XML_PATH)")
    export.add_argument("-o", "--output", help="Output .sql file (default: SQL_OUTPUT_PATH)")
    export.add_argument("--dialect", choices=sorted(DIALECTS), help="SQL dialect (default: SQL_DIALECT)")
    export.add_argument("--table", help="Table name used in the script")
    export.add_argument("--no-create", action="store_true", help="Omit CREATE TABLE")
    export.add_argument("--no-indexes", action="store_true", help="Omit CREATE INDEX statements")
    export.add_argument("--no-transaction", action="store_true", help="Omit the transaction wrapper")

    clean = subparsers.add_parser("clean", help="Remove BOM / stray leading character in place")
    clean.add_argument("path", nargs="?", help="File to clean (default: DAYBOOK_XML_PATH)")
    clean.add_argument("--no-backup", action="store_true", help="Do not keep a .backup copy")

    inspect = subparsers.add_parser("inspect", help="Show how an export would be parsed")
    inspect.add_argument("path", nargs="?", help="Export file (default: DAYBOOK_XML_PATH)")
    inspect.add_argument("--samples", type=int, default=3, help="Sample records to show")

    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    config = copy.deepcopy(config)
    if args.debug:
        config.debug = True
    if args.min_categories is not None:
        config.extraction.min_valid_categories = args.min_categories
    if args.repair:
        config.extraction.repair_leading_char = True
    if getattr(args, "table", None):
        config.mysql.table = args.table
    if getattr(args, "tally_url", None):
        config.tally.url = args.tally_url
    if getattr(args, "company", None):
        config.tally.company = args.company
    return config


def run_load(pipeline: DaybookPipeline, args: argparse.Namespace) -> int:
    raw, container_tag = None, None
    if args.from_tally:
        print("🌐 Fetching Day Book from Tally...")
        raw = pipeline.fetch(args.from_date, args.to_date)
        container_tag = TallyClient.CONTAINER_TAG
    pipeline.load(path=args.path, raw=raw, clear=not args.no_clear, container_tag=container_tag)
    print("\n🎉 Conversion completed!")
    return 0


def run_export(pipeline: DaybookPipeline, args: argparse.Namespace) -> int:
    pipeline.export(
        path=args.path,
        output_path=args.output,
        dialect=args.dialect,
        table_name=args.table,
        create_table=not args.no_create,
        add_indexes=not args.no_indexes,
        use_transaction=not args.no_transaction,
    )
    return 0


def run_clean(config: AppConfig, args: argparse.Namespace) -> int:
    path = args.path or config.daybook_xml_path
    if not path:
        raise DaybookReadError("<unset>", "no input path given (set DAYBOOK_XML_PATH or pass a path)")

    print(f"🔍 Reading file: {path}")
    result = Decoder.clean_file(path, backup=not args.no_backup)
    if result.bom.name != "NONE":
        print(f"✅ Found {result.bom.name} BOM")
    else:
        print("ℹ️  No BOM detected")
    if result.dropped_leading_char:
        print("✅ Removed suspicious first character")
    if result.changed:
        if result.backup_path:
            print(f"💾 Backup created: {result.backup_path}")
        if result.bom.name != "NONE":
            print("✅ File rewritten as UTF-8 without BOM")
        else:
            print("✅ File rewritten without its first character")
    else:
        print("✓ File already clean, nothing to do")
    return 0


def run_inspect(pipeline: DaybookPipeline, args: argparse.Namespace) -> int:
    report = pipeline.inspect(path=args.path, sample_size=args.samples)
    samples = report.pop("samples")
    for key, value in report.items():
        print(f"   → {key}: {value}")
    for index, record in enumerate(samples, start=1):
        print(f"\n🔍 Record {index}:")
        print(json.dumps(record, indent=2, ensure_ascii=False))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = apply_overrides(get_config(), args)
    configure_logging(config.debug)

    pipeline = DaybookPipeline(config)
    try:
        if args.command == "load":
            return run_load(pipeline, args)
        if args.command == "export":
            return run_export(pipeline, args)
        if args.command == "clean":
            return run_clean(config, args)
        return run_inspect(pipeline, args)
    except DaybookReadError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        # Bad settings that argparse never saw, e.g. SQL_DIALECT from the environment
        print(f"❌ {e}", file=sys.stderr)
        logger.debug("Invalid setting", exc_info=True)
        return 1
    except pymysql.MySQLError as e:
        print(f"❌ Database error: {e}", file=sys.stderr)
        logger.debug("Database failure", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
