"""Formatting helpers for CLI output."""

from datetime import datetime

from sharebox.manager import FileCollectionManager
from sharebox.schemas import FileRecord

SHORT_ID_LENGTH = 8


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_created(created_at: datetime) -> str:
    """Creation date in the local timezone, e.g. '2024-01-31'."""
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone()
    return created_at.strftime('%Y-%m-%d')


def short_id(file_id: str) -> str:
    if len(file_id) <= SHORT_ID_LENGTH:
        return file_id
    return f"{file_id[:SHORT_ID_LENGTH]}..."


def format_record(record: FileRecord, manager: FileCollectionManager) -> str:
    """Render one file entry of the 'list' output."""
    badge = "Public" if record.is_public else "Private"
    lines = [
        f"  - {record.filename} [{badge}] (ID: {short_id(record.id)})",
        f"    Created: {format_created(record.created_at)}",
    ]
    share_url = manager.share.resolve(record)
    if share_url:
        lines.append(f"    Shareable link: {share_url}")
    if manager.is_busy(record.id):
        lines.append("    Processing...")
    return '\n'.join(lines)


def render_collection(manager: FileCollectionManager) -> str:
    """
    Render the held collection with busy markers and the error banner.

    Args:
        manager: Manager whose store is rendered

    Returns:
        Multi-line text for the terminal
    """
    output = []
    if manager.sink.error:
        output.append(f"Error: {manager.sink.error}")
    if manager.store.loading:
        output.append("Loading...")
        return '\n'.join(output)

    files = manager.files
    output.append(f"Your Files ({len(files)})")
    if not files:
        output.append("  No files uploaded yet")
    for record in files:
        output.append(format_record(record, manager))
    if manager.locks.upload_in_progress:
        output.append("Uploading...")
    return '\n'.join(output)
