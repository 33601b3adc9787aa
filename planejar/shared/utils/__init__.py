"""Shared utilities: datetime, filenames, retry."""

from planejar.shared.utils.datetime import timestamp_ms, utc_now, utc_now_iso
from planejar.shared.utils.filenames import clean_file_name
from planejar.shared.utils.retry import RetryPolicy, retry_async

__all__ = [
    "RetryPolicy",
    "clean_file_name",
    "retry_async",
    "timestamp_ms",
    "utc_now",
    "utc_now_iso",
]
