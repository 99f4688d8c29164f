# probes/__init__.py
"""On-demand checks of external resources. Probes never change wizard state."""

from .datastore import test_datastore_connection
from .filesystem import test_attachments_folder, test_config_writable
from .result import ProbeResult

__all__ = [
    "ProbeResult",
    "test_attachments_folder",
    "test_config_writable",
    "test_datastore_connection",
]
