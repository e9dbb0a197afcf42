"""
API connectivity pre-flight check and session-level global setup.
"""

from .api_connectivity import (
    ConnectivityResult,
    build_report,
    check_api_connectivity,
    global_setup,
    write_connectivity_report,
)

__all__ = [
    "ConnectivityResult",
    "build_report",
    "check_api_connectivity",
    "global_setup",
    "write_connectivity_report",
]
