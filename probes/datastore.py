# probes/datastore.py
from __future__ import annotations
import asyncio
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from logger import log
from probes.result import ProbeResult
from settings import InstallerSettings
from storage.drivers import connect, parse_store_type

LABEL = "Data store connection"


def _round_trip(store_type, connection_string: str, settings: InstallerSettings,
                timeout: float) -> None:
    with connect(store_type, connection_string, settings, timeout) as conn:
        conn.execute(text("SELECT 1")).scalar()


def _driver_message(exc: Exception) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


async def test_datastore_connection(
    store_type,
    connection_string: str,
    settings: InstallerSettings,
    timeout: Optional[float] = None,
) -> ProbeResult:
    """
    Open a short-lived connection and run a no-op query.

    The connection is released on every path; an unreachable host is cut
    off after `timeout` seconds.
    """
    wait = settings.probe_timeout if timeout is None else timeout
    try:
        store = parse_store_type(store_type)
    except ValueError:
        return ProbeResult(LABEL, str(store_type), False,
                           f"'{store_type}' is not a supported data store.",
                           error="unknown_store")
    target = store.value
    if not connection_string or not connection_string.strip():
        return ProbeResult(LABEL, target, False,
                           "No connection string was entered.",
                           error="bad_connection_string")

    loop = asyncio.get_running_loop()
    try:
        await asyncio.wait_for(
            loop.run_in_executor(
                None, _round_trip, store, connection_string, settings, wait
            ),
            timeout=wait,
        )
    except asyncio.TimeoutError:
        log.warning("Data store probe TIMEOUT: %s after %ss", target, wait)
        return ProbeResult(LABEL, target, False,
                           f"No response from the data store within {wait:g}s.",
                           error="timeout")
    except (ArgumentError, ValueError) as e:
        log.warning("Data store probe FAIL: %s: bad connection string: %s", target, e)
        return ProbeResult(LABEL, target, False, str(e),
                           error="bad_connection_string")
    except ImportError as e:
        log.warning("Data store probe FAIL: %s: driver missing: %s", target, e)
        return ProbeResult(LABEL, target, False,
                           f"The driver for {target} is not installed: {e}",
                           error="driver_missing")
    except (SQLAlchemyError, OSError) as e:
        message = _driver_message(e)
        log.warning("Data store probe FAIL: %s: %s", target, message)
        return ProbeResult(LABEL, target, False, message, error="driver_error")
    log.info("Data store probe PASS: %s", target)
    return ProbeResult(LABEL, target, True, f"Connected to the {target} data store.")
