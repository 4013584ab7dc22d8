"""
==============================================
Daybook Conversion Pipeline
==============================================

Ties the three stages together and hands the result to a sink:

    raw bytes ──► Decoder ──► RecordExtractor ──► EntryNormalizer ──► sink
                 (decoding/)   (extraction/)      (normalization/)    (storage/)

USAGE EXAMPLES:

1. Load an export file into MySQL (truncate-then-load):
    from tally_daybook.pipeline import DaybookPipeline

    pipeline = DaybookPipeline()
    summary = pipeline.load("daybook.xml")
    print(summary.inserted, summary.failed)

2. Convert without touching a database:
    result = pipeline.convert(open("daybook.xml", "rb").read())
    for entry in result.entries:
        print(entry.DATE, entry.VCHTYPE, entry.DEBIT_AMOUNT)

3. Write a SQL script instead:
    pipeline.export("daybook.xml", "daybook_export.sql", dialect="postgres")
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tally_daybook.config import AppConfig, get_config
from tally_daybook.decoding.decoder import BomKind, Decoder, read_bytes
from tally_daybook.errors import DaybookReadError
from tally_daybook.extraction.record_extractor import ExtractionStats, RecordExtractor
from tally_daybook.extraction.validity import ValidityGate
from tally_daybook.normalization.entry_normalizer import EntryNormalizer
from tally_daybook.normalization.schema import NormalizedEntry
from tally_daybook.storage.mysql_client import MySQLClient
from tally_daybook.storage.sql_exporter import ExportResult, SqlExporter
from tally_daybook.tally_client import TallyClient

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Everything one decode → extract → normalize pass produced."""
    bom: BomKind
    characters: int
    extraction: ExtractionStats
    entries: List[NormalizedEntry] = field(default_factory=list)
    failed_coercions: Dict[str, int] = field(default_factory=dict)


@dataclass
class LoadSummary:
    """Outcome of loading one export into MySQL."""
    source: str
    records_found: int = 0
    inserted: int = 0
    failed: int = 0
    rows_cleared: int = 0
    rows_in_table: int = 0
    elapsed_seconds: float = 0.0
    statistics: dict = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)


class DaybookPipeline:
    """
    High-level wrapper around the decode / extract / normalize stages.
    Provides convenient methods for each way of consuming a daybook export.
    """

    def __init__(self, config: Optional[AppConfig] = None, mysql_client: Optional[MySQLClient] = None):
        """
        Args:
            config: Optional configuration. If None, loads from environment.
            mysql_client: Optional pre-built client (tests inject a fake one).
        """
        self._config = config or get_config()
        self._mysql_client = mysql_client

    # ---------- sources ----------

    def read_file(self, path: Optional[str] = None) -> bytes:
        path = path or self._config.daybook_xml_path
        if not path:
            raise DaybookReadError("<unset>", "no input path given (set DAYBOOK_XML_PATH or pass a path)")
        return read_bytes(path)

    def fetch(self, from_date=None, to_date=None) -> bytes:
        tally = self._config.tally
        client = TallyClient(tally.url, tally.company, tally.timeout_seconds)
        return client.fetch_daybook(from_date, to_date)

    # ---------- stages ----------

    def convert(self, raw: bytes, container_tag: Optional[str] = None) -> ConversionResult:
        """
        Decode, extract and normalize one export.

        Args:
            raw: Export bytes, any supported encoding
            container_tag: Preferred block tag (TallyClient.CONTAINER_TAG for fetched data)
        """
        bom = Decoder.detect_bom(raw)
        text = Decoder.decode(raw, repair=self._config.extraction.repair_leading_char)
        logger.debug("Decoded %d bytes (%s) into %d characters", len(raw), bom.name, len(text))

        extractor = RecordExtractor(ValidityGate(self._config.extraction.min_valid_categories), container_tag)
        normalizer = EntryNormalizer()
        entries = normalizer.normalize_batch(extractor.extract(text))

        return ConversionResult(
            bom=bom,
            characters=len(text),
            extraction=extractor.stats,
            entries=entries,
            failed_coercions=dict(normalizer.failed_coercions),
        )

    # ---------- sinks ----------

    def load(
        self,
        path: Optional[str] = None,
        raw: Optional[bytes] = None,
        clear: bool = True,
        container_tag: Optional[str] = None,
    ) -> LoadSummary:
        """
        Convert an export and load it into MySQL.

        The target table is created if missing and, unless clear=False,
        emptied first. A failing insert is counted and skipped; a
        connection failure propagates.

        Args:
            path: Export file; defaults to DAYBOOK_XML_PATH
            raw: Already-read export bytes (e.g. from fetch()); wins over path
            clear: Delete existing rows before loading
            container_tag: Preferred block tag, passed on to convert()

        Returns:
            LoadSummary with counts and table statistics
        """
        source = "tally" if raw is not None else (path or self._config.daybook_xml_path or "")
        start_time = time.time()

        if raw is None:
            raw = self.read_file(path)
        print(f"📁 Read {len(raw)} bytes from {source}")

        result = self.convert(raw, container_tag)
        self._print_conversion(result)

        summary = LoadSummary(source=source, records_found=len(result.entries))
        table = self._config.mysql.table
        client = self._mysql_client or self._build_mysql_client()

        print("🔌 Connecting to database...")
        client.connect()
        try:
            client.ensure_table(table)
            if clear:
                summary.rows_cleared = client.clear_table(table)
                print(f"🗑️  Cleared {summary.rows_cleared} existing rows from {table}")

            print(f"💾 Inserting {len(result.entries)} entries into {table}...")
            insert_result = client.insert_batch(table, result.entries)
            summary.inserted = insert_result.inserted
            summary.failed = insert_result.failed
            summary.errors = insert_result.errors

            summary.rows_in_table = client.count_rows(table)
            if summary.rows_in_table:
                summary.statistics = client.get_statistics(table)
        finally:
            client.disconnect()
            print("🔌 Database connection closed")

        summary.elapsed_seconds = round(time.time() - start_time, 2)
        self._print_load_summary(summary)
        return summary

    def export(
        self,
        path: Optional[str] = None,
        output_path: Optional[str] = None,
        raw: Optional[bytes] = None,
        dialect: Optional[str] = None,
        table_name: Optional[str] = None,
        create_table: bool = True,
        add_indexes: bool = True,
        use_transaction: bool = True,
    ) -> ExportResult:
        """Convert an export and write it as a SQL script."""
        exporter = SqlExporter(
            table_name=table_name or self._config.mysql.table,
            dialect=dialect or self._config.sql_dialect,
            create_table=create_table,
            use_transaction=use_transaction,
            add_indexes=add_indexes,
        )
        if raw is None:
            raw = self.read_file(path)

        result = self.convert(raw)
        self._print_conversion(result)

        export_result = exporter.write(result.entries, output_path or self._config.sql_output_path)
        print(f"✅ SQL file generated: {export_result.path}")
        print(f"   → Rows: {export_result.rows}")
        print(f"   → Size: {export_result.size_bytes / 1024:.2f} KB")
        return export_result

    def inspect(self, path: Optional[str] = None, raw: Optional[bytes] = None, sample_size: int = 3) -> dict:
        """
        Report how an export would be read, without writing anywhere.

        Returns:
            dict with bom, strategy, container tag, counts and a few sample records
        """
        if raw is None:
            raw = self.read_file(path)
        text = Decoder.decode(raw, repair=self._config.extraction.repair_leading_char)
        extractor = RecordExtractor(ValidityGate(self._config.extraction.min_valid_categories))

        samples = []
        for record in extractor.extract(text):
            if len(samples) < sample_size:
                samples.append(record)

        stats = extractor.stats
        return {
            "bytes": len(raw),
            "bom": Decoder.detect_bom(raw).name,
            "characters": len(text),
            "strategy": stats.strategy,
            "container_tag": stats.container_tag,
            "candidates": stats.candidates,
            "accepted": stats.accepted,
            "rejected": stats.rejected,
            "failed": stats.failed,
            "samples": samples,
        }

    # ---------- helpers ----------

    def _build_mysql_client(self) -> MySQLClient:
        mysql = self._config.mysql
        return MySQLClient(
            host=mysql.host,
            port=mysql.port,
            user=mysql.user,
            password=mysql.password,
            database=mysql.database
        )

    def _print_conversion(self, result: ConversionResult) -> None:
        stats = result.extraction
        print(f"🔍 Encoding: {result.bom.name}, {result.characters} characters")
        if stats.container_tag:
            print(f"📦 Found {stats.candidates} <{stats.container_tag}> blocks")
        else:
            print("⚠️  No standard blocks found, used line-by-line parsing")
        print(f"✅ Parsed {stats.accepted} valid records "
              f"(rejected: {stats.rejected}, failed: {stats.failed})")
        if result.failed_coercions:
            details = ", ".join(f"{name}={count}" for name, count in sorted(result.failed_coercions.items()))
            print(f"   → Unparsed values: {details}")

    def _print_load_summary(self, summary: LoadSummary) -> None:
        print("\n📊 Summary:")
        print(f"   → Records found: {summary.records_found}")
        print(f"   → Inserted: {summary.inserted}")
        print(f"   → Failed: {summary.failed}")
        print(f"   → Rows in table: {summary.rows_in_table}")
        print(f"   → Time elapsed: {summary.elapsed_seconds}s")
        if summary.statistics:
            stats = summary.statistics
            print(f"   💰 Total debit: {stats['total_debit']}")
            print(f"   💰 Total credit: {stats['total_credit']}")
            print(f"   📝 Voucher types: {stats['voucher_types']}")
            print(f"   📅 Unique dates: {stats['unique_dates']}")
