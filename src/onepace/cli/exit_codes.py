"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, input)
    20-29: Lookup misses (no match, no image)
    40-49: Operation errors (catalog, download)
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for onepace CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    CONFIG_ERROR = 11
    INVALID_ARGUMENTS = 12

    # Lookup misses (20-29)
    NO_MATCH = 20
    NO_IMAGE = 21

    # Operation errors (40-49)
    CATALOG_UNAVAILABLE = 40
    DOWNLOAD_FAILED = 41
