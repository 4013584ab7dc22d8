# ==============================================
# Tally Daybook ETL
# ==============================================
#
# Package Structure (3 stages + sinks + orchestrator):
#
# tally_daybook/
# ├── decoding/         # Stage 1: raw bytes -> canonical text
# ├── extraction/       # Stage 2: text -> extracted records
# ├── normalization/    # Stage 3: record -> fixed 51-column entry
# ├── storage/          # Sinks: MySQL (truncate-then-load), SQL file export
# ├── tally_client.py   # Optional source: Tally HTTP export
# ├── config.py         # Configuration management
# ├── pipeline.py       # Orchestrator class
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
