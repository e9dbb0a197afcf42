"""
================================================================================
Autotest Tools
================================================================================

Command line utilities around the PanicGuard API suite.

Modules:
    - common: Shared loguru setup
    - connectivity: Pre-flight API connectivity check and global setup
    - credential_manager: Maintains test credentials and tokens in .env

Example:
    from autotest_tools.connectivity import check_api_connectivity

    result = check_api_connectivity("https://staging.example.com/api")
    if not result.accessible:
        print(result.reason)

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "connectivity",
    "credential_manager",
]
