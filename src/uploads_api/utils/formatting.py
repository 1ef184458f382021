SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: int) -> str:
    """Human readable size: `512 B`, `1.5 KB`, `10.0 MB`."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    size = float(num_bytes)
    for unit in SIZE_UNITS[1:]:
        size /= 1024
        if size < 1024 or unit == SIZE_UNITS[-1]:
            return f"{size:.1f} {unit}"
