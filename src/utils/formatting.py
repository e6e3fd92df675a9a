"""Human-readable formatting helpers for API responses."""

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size_bytes: int) -> str:
    """Format a byte count (e.g., "0 Bytes", "512 Bytes", "12.5 MB").

    Args:
        size_bytes: Size in bytes

    Returns:
        Size rounded to two decimals in the largest fitting unit
    """
    if size_bytes <= 0:
        return "0 Bytes"

    k = 1024
    index = 0
    value = float(size_bytes)
    while value >= k and index < len(_SIZE_UNITS) - 1:
        value /= k
        index += 1

    # Drop trailing zeros ("1.50" -> "1.5", "2.00" -> "2")
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def elapsed_ms(started: float, finished: float) -> int:
    """Milliseconds between two time.monotonic() readings."""
    return max(0, int(round((finished - started) * 1000)))
