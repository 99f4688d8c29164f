# storage/__init__.py
"""Data store access, schema provisioning and the settings artifact."""

from .config_file import ConfigFile, ConfigFileError
from .drivers import DataStoreType, connect, parse_store_type

__all__ = [
    "ConfigFile",
    "ConfigFileError",
    "DataStoreType",
    "connect",
    "parse_store_type",
]
