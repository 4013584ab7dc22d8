# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - MySQLConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 3306)
#     user: str          (default "root")
#     password: str      (default "")
#     database: str      (default "ps")
#     table: str         (default "DaybookStockData")
#
# - TallyConfig (dataclass)
#     url: str           (default "http://localhost:9000")
#     company: str       (default "")
#     timeout_seconds: float (default 60.0)
#
# - ExtractionConfig (dataclass)
#     min_valid_categories: int  (default 1)
#     repair_leading_char: bool  (default False)
#
# - AppConfig (dataclass)
#     mysql: MySQLConfig
#     tally: TallyConfig
#     extraction: ExtractionConfig
#     daybook_xml_path: str | None
#     debug: bool
#     sql_dialect: str           (default "mysql")
#     sql_output_path: str       (default "daybook_export.sql")
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Drop the singleton so the next get_config() reloads.
#
# USAGE:
# ------
#   from tally_daybook.config import get_config
#   config = get_config()
#   print(config.mysql.host)
#   print(config.daybook_xml_path)
#
# ==============================================

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class MySQLConfig:
    """MySQL sink configuration."""
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "ps"
    table: str = "DaybookStockData"


@dataclass
class TallyConfig:
    """Tally HTTP server configuration (used when fetching instead of reading a file)."""
    url: str = "http://localhost:9000"
    company: str = ""
    timeout_seconds: float = 60.0


@dataclass
class ExtractionConfig:
    """Knobs for the extraction stage."""
    min_valid_categories: int = 1
    repair_leading_char: bool = False


@dataclass
class AppConfig:
    """Main application configuration."""
    mysql: MySQLConfig
    tally: TallyConfig
    extraction: ExtractionConfig
    daybook_xml_path: Optional[str] = None
    debug: bool = False
    sql_dialect: str = "mysql"
    sql_output_path: str = "daybook_export.sql"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    # Build MySQL configuration
    mysql_config = MySQLConfig(
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", "3306")),
        user=os.getenv("DB_USER", "root"),
        password=os.getenv("DB_PASSWORD", ""),
        database=os.getenv("DB_NAME", "ps"),
        table=os.getenv("DB_TABLE", "DaybookStockData")
    )

    # Build Tally server configuration
    tally_config = TallyConfig(
        url=os.getenv("TALLY_URL", "http://localhost:9000"),
        company=os.getenv("TALLY_COMPANY", ""),
        timeout_seconds=float(os.getenv("TALLY_TIMEOUT", "60"))
    )

    # Build extraction configuration
    extraction_config = ExtractionConfig(
        min_valid_categories=int(os.getenv("MIN_VALID_CATEGORIES", "1")),
        repair_leading_char=_env_flag("REPAIR_LEADING_CHAR")
    )

    # Build main application configuration
    _config_instance = AppConfig(
        mysql=mysql_config,
        tally=tally_config,
        extraction=extraction_config,
        daybook_xml_path=os.getenv("DAYBOOK_XML_PATH") or None,
        debug=_env_flag("DEBUG"),
        sql_dialect=os.getenv("SQL_DIALECT", "mysql"),
        sql_output_path=os.getenv("SQL_OUTPUT_PATH", "daybook_export.sql")
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
