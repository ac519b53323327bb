from datetime import datetime, timezone
from typing import Optional

from rich.console import Console


def get_rich_console() -> Console: return Console()


def format_ms(value: Optional[int]) -> str:
    """Renders an epoch-milliseconds value as an ISO timestamp (UTC)."""
    if value is None:
        return "-"
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat(timespec="seconds")
