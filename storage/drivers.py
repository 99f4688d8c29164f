# storage/drivers.py
from __future__ import annotations
import math
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine, URL, make_url
from sqlalchemy.pool import NullPool

from settings import InstallerSettings

DATA_DIRECTORY_TOKEN = "|DataDirectory|"


class DataStoreType(str, Enum):
    SQLITE = "sqlite"
    MYSQL = "mysql"
    POSTGRES = "postgres"
    SQLSERVER = "sqlserver"


DEFAULT_DATASTORE = DataStoreType.SQLITE


@dataclass(frozen=True)
class Driver:
    backend: str        # SQLAlchemy dialect name
    dbapi: str          # default DBAPI module for the dialect
    timeout_arg: str    # connect() keyword bounding the connect wait
    integer_timeout: bool = True


DRIVERS: Dict[DataStoreType, Driver] = {
    DataStoreType.SQLITE: Driver("sqlite", "pysqlite", "timeout", integer_timeout=False),
    DataStoreType.MYSQL: Driver("mysql", "pymysql", "connect_timeout"),
    DataStoreType.POSTGRES: Driver("postgresql", "psycopg2", "connect_timeout"),
    DataStoreType.SQLSERVER: Driver("mssql", "pyodbc", "timeout"),
}


def parse_store_type(value: Union[str, DataStoreType, None]) -> DataStoreType:
    """Empty selects the default store; unknown names raise ValueError."""
    if isinstance(value, DataStoreType):
        return value
    if value is None or not str(value).strip():
        return DEFAULT_DATASTORE
    return DataStoreType(str(value).strip().lower())


def _sqlite_path(connection_string: str, settings: InstallerSettings) -> str:
    raw = connection_string.strip()
    if raw.lower().startswith("sqlite:"):
        raw = make_url(raw).database or ""
    else:
        for part in raw.split(";"):
            key, sep, value = part.partition("=")
            if sep and key.strip().lower() == "data source":
                raw = value.strip()
                break
    if not raw:
        raise ValueError("The connection string does not name a database file.")
    if raw.startswith(DATA_DIRECTORY_TOKEN):
        raw = str(settings.data_directory) + "/" + raw[len(DATA_DIRECTORY_TOKEN):].lstrip("\\/")
    return str(settings.resolve(raw))


def build_url(
    store_type: Union[str, DataStoreType],
    connection_string: str,
    settings: InstallerSettings,
) -> URL:
    """
    Turn an operator connection string into a SQLAlchemy URL.

    SQLite databases are opened read-write without create, so a missing
    file is reported instead of silently created.
    """
    store = parse_store_type(store_type)
    driver = DRIVERS[store]
    if store is DataStoreType.SQLITE:
        path = _sqlite_path(connection_string, settings)
        return make_url(f"sqlite:///file:{path}?mode=rw&uri=true")

    url = make_url(connection_string.strip())
    if url.get_backend_name() != driver.backend:
        raise ValueError(
            f"Connection string is for '{url.get_backend_name()}', "
            f"expected '{driver.backend}' for {store.value}."
        )
    if "+" not in url.drivername:
        url = url.set(drivername=f"{driver.backend}+{driver.dbapi}")
    return url


def open_engine(
    store_type: Union[str, DataStoreType],
    connection_string: str,
    settings: InstallerSettings,
    timeout: float = None,
) -> Engine:
    store = parse_store_type(store_type)
    driver = DRIVERS[store]
    wait = settings.probe_timeout if timeout is None else timeout
    if driver.integer_timeout:
        wait = max(1, math.ceil(wait))
    url = build_url(store, connection_string, settings)
    return create_engine(url, poolclass=NullPool, connect_args={driver.timeout_arg: wait})


@contextmanager
def connect(
    store_type: Union[str, DataStoreType],
    connection_string: str,
    settings: InstallerSettings,
    timeout: float = None,
) -> Iterator[Connection]:
    """Yield a connection; the engine is disposed on every exit path."""
    engine = open_engine(store_type, connection_string, settings, timeout)
    try:
        with engine.connect() as conn:
            yield conn
    finally:
        engine.dispose()
