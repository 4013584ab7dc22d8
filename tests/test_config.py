# ==============================================
# Tests for Configuration
# ==============================================

import pytest

from tally_daybook import config as config_module
from tally_daybook.config import get_config, reset_config


ENV_KEYS = (
    "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_TABLE",
    "TALLY_URL", "TALLY_COMPANY", "TALLY_TIMEOUT",
    "MIN_VALID_CATEGORIES", "REPAIR_LEADING_CHAR",
    "DAYBOOK_XML_PATH", "DEBUG", "SQL_DIALECT", "SQL_OUTPUT_PATH",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without any of our variables and without a .env file."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config_module, "load_dotenv", lambda **kwargs: False)
    return monkeypatch


class TestGetConfig:
    def test_defaults(self, clean_env):
        config = get_config()

        assert config.mysql.host == "localhost"
        assert config.mysql.port == 3306
        assert config.mysql.database == "ps"
        assert config.mysql.table == "DaybookStockData"
        assert config.tally.url == "http://localhost:9000"
        assert config.extraction.min_valid_categories == 1
        assert config.extraction.repair_leading_char is False
        assert config.daybook_xml_path is None
        assert config.debug is False
        assert config.sql_dialect == "mysql"

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("DB_HOST", "db.internal")
        clean_env.setenv("DB_PORT", "3307")
        clean_env.setenv("DB_TABLE", "daybook_aug")
        clean_env.setenv("TALLY_URL", "http://192.168.0.189:9000")
        clean_env.setenv("TALLY_TIMEOUT", "5")
        clean_env.setenv("MIN_VALID_CATEGORIES", "3")
        clean_env.setenv("REPAIR_LEADING_CHAR", "True")
        clean_env.setenv("DAYBOOK_XML_PATH", "/data/DayBook.xml")
        clean_env.setenv("DEBUG", "true")

        config = get_config()

        assert config.mysql.host == "db.internal"
        assert config.mysql.port == 3307
        assert config.mysql.table == "daybook_aug"
        assert config.tally.url == "http://192.168.0.189:9000"
        assert config.tally.timeout_seconds == 5.0
        assert config.extraction.min_valid_categories == 3
        assert config.extraction.repair_leading_char is True
        assert config.daybook_xml_path == "/data/DayBook.xml"
        assert config.debug is True

    def test_singleton_until_reset(self, clean_env):
        first = get_config()
        clean_env.setenv("DB_HOST", "elsewhere")

        assert get_config() is first
        reset_config()
        assert get_config().mysql.host == "elsewhere"

    def test_empty_xml_path_means_unset(self, clean_env):
        clean_env.setenv("DAYBOOK_XML_PATH", "")
        assert get_config().daybook_xml_path is None
