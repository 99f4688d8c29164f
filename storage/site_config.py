# storage/site_config.py
from __future__ import annotations
from typing import Mapping

from sqlalchemy import delete, insert
from sqlalchemy.engine import Connection

from logger import log
from storage.schema import SiteConfiguration


def save_site_configuration(conn: Connection, values: Mapping[str, str]) -> None:
    """Replace the rows for the given keys; other keys are left alone."""
    keys = list(values)
    conn.execute(delete(SiteConfiguration).where(SiteConfiguration.key.in_(keys)))
    conn.execute(
        insert(SiteConfiguration),
        [{"key": key, "value": str(value)} for key, value in values.items()],
    )
    conn.commit()
    log.info("Stored site configuration: %s", ", ".join(keys))
