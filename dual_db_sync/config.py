"""Configuration dataclasses and INI loader for Dual DB Sync."""

import configparser
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dual_db_sync.errors import ConfigError


PRIMARY_SECTION = "current_db"
REPLICA_SECTION = "replica_db"
LOGGING_SECTION = "logging"

REQUIRED_KEYS = ("ip", "user", "dbname", "password")


class Driver(Enum):
    """Database driver used for a connection."""
    POSTGRES = "postgres"
    SQLITE = "sqlite"


@dataclass
class DbInfo:
    """Connection settings for a single database instance.

    Attributes:
        ip: Host name or address
        user: Login role
        dbname: Database name (file path for the sqlite driver)
        password: Login password
        port: TCP port
        driver: Which driver opens the connection
        statement_timeout_ms: Per-statement deadline, 0 disables it
    """
    ip: str
    user: str
    dbname: str
    password: str
    port: int = 5432
    driver: Driver = Driver.POSTGRES
    statement_timeout_ms: int = 0

    def __post_init__(self):
        """Coerce string values read from INI files."""
        if isinstance(self.driver, str):
            self.driver = Driver(self.driver.lower())
        if isinstance(self.port, str):
            self.port = int(self.port)
        if isinstance(self.statement_timeout_ms, str):
            self.statement_timeout_ms = int(self.statement_timeout_ms)

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for psycopg2.connect().

        psycopg2 quotes each value, so empty passwords and values with
        spaces or quotes connect as given.
        """
        return {
            "host": self.ip,
            "user": self.user,
            "dbname": self.dbname,
            "password": self.password,
            "port": self.port,
        }

    def __repr__(self) -> str:
        return (
            f"DbInfo(ip={self.ip!r}, user={self.user!r}, dbname={self.dbname!r}, "
            f"password='***', port={self.port}, driver={self.driver.value!r})"
        )


@dataclass
class LoggingConfig:
    """Logging options.

    Attributes:
        level: Log level name
        json_output: Emit JSON lines instead of text
        log_file: Optional file to log to in addition to stderr
    """
    level: str = "INFO"
    json_output: bool = False
    log_file: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.log_file, str):
            self.log_file = Path(self.log_file) if self.log_file else None


@dataclass
class SyncConfig:
    """Top-level configuration: the primary and replica databases."""
    primary: DbInfo
    replica: DbInfo
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def read_db_info(parser: configparser.ConfigParser, section: str) -> DbInfo:
    """Read one database section.

    Args:
        parser: Loaded config parser
        section: Section name ("current_db" or "replica_db")

    Returns:
        DbInfo for the section

    Raises:
        ConfigError: If the section or a required key is missing
    """
    if not parser.has_section(section):
        raise ConfigError(f"{section} section not found in config")

    db_section = parser[section]
    for key in REQUIRED_KEYS:
        if key not in db_section:
            raise ConfigError(f"{key} not found in [{section}]")

    try:
        return DbInfo(
            ip=db_section["ip"],
            user=db_section["user"],
            dbname=db_section["dbname"],
            password=db_section["password"],
            port=db_section.get("port", "5432"),
            driver=db_section.get("driver", Driver.POSTGRES.value),
            statement_timeout_ms=db_section.get("statement_timeout_ms", "0"),
        )
    except ValueError as e:
        raise ConfigError(f"Invalid value in [{section}]: {e}") from e


def load_config(path: Union[str, Path]) -> SyncConfig:
    """Load a SyncConfig from an INI file.

    Args:
        path: Path to the config file

    Returns:
        Parsed SyncConfig

    Raises:
        ConfigError: If the file is unreadable or incomplete
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    logging_config = LoggingConfig()
    if parser.has_section(LOGGING_SECTION):
        section = parser[LOGGING_SECTION]
        try:
            logging_config = LoggingConfig(
                level=section.get("level", "INFO"),
                json_output=section.getboolean("json", fallback=False),
                log_file=section.get("file", ""),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid value in [{LOGGING_SECTION}]: {e}") from e

    return SyncConfig(
        primary=read_db_info(parser, PRIMARY_SECTION),
        replica=read_db_info(parser, REPLICA_SECTION),
        logging=logging_config,
    )
