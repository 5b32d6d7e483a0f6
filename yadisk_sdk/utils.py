"""
Utility functions for Yandex.Disk SDK.

This module provides small helpers shared by the models and the CLI.
"""

import math
from datetime import datetime
from typing import Optional, Union


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp as returned by the API.

    Args:
        value: Timestamp string such as "2017-02-26T09:04:44+00:00"

    Returns:
        Timezone-aware datetime, or None if the value is missing
    """
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_file_size(size_bytes: Union[int, None]) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    if not size_bytes:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB", "PB"]
    i = int(math.floor(math.log(size_bytes, 1024)))

    if i >= len(size_names):
        i = len(size_names) - 1

    p = math.pow(1024, i)
    size = round(size_bytes / p, 2)

    return f"{size} {size_names[i]}"
