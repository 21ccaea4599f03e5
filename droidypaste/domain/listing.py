"""
In-memory helpers for the uploads list: sorting and display formatting.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional

from .models import SortDirection, SortField, UploadRecord
from .urls import join_path

_SIZE_UNITS = ("KB", "MB", "GB")


def sort_uploads(records: Iterable[UploadRecord], field: SortField = "name",
                 direction: SortDirection = "asc") -> List[UploadRecord]:
    """
    Return a sorted copy of `records`.

    For the expiration field, records that never expire always come last;
    the direction only reverses the order among records that do expire.
    """
    reverse = direction == "desc"
    items = list(records)

    if field == "name":
        return sorted(items, key=lambda r: r.file_name.casefold(), reverse=reverse)
    if field == "size":
        return sorted(items, key=lambda r: r.file_size, reverse=reverse)
    if field == "expiration":
        expiring = [r for r in items if r.expires_at_utc is not None]
        permanent = [r for r in items if r.expires_at_utc is None]
        expiring.sort(key=lambda r: r.expires_at_utc, reverse=reverse)
        return expiring + permanent

    raise ValueError(f"Unknown sort field: {field}")


def toggle_sort(current_field: SortField, current_direction: SortDirection,
                selected: SortField) -> tuple[SortField, SortDirection]:
    """Selecting the active field flips direction; a new field starts ascending."""
    if selected == current_field:
        return current_field, "desc" if current_direction == "asc" else "asc"
    return selected, "asc"


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in _SIZE_UNITS:
        value /= 1024
        if value < 1024 or unit == _SIZE_UNITS[-1]:
            return f"{value:.1f} {unit}"
    return f"{value:.1f} GB"


def format_expiry(expires_at: Optional[datetime]) -> str:
    if expires_at is None:
        return "Never"
    return expires_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def file_url(server_url: str, file_name: str) -> str:
    """Public URL of an uploaded file, as copied to the clipboard from the list."""
    return join_path(server_url, file_name)
