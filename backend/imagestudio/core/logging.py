"""Operator log sink: one ``logs.txt`` file under the data directory.

Failed generations log the full raw provider response here, so the file is
bounded by line count and only served over HTTP when EXPOSE_LOGS is set.
"""

from __future__ import annotations

import logging

from imagestudio.core.paths import get_data_path

DATA_DIR = get_data_path()
DATA_DIR.mkdir(parents=True, exist_ok=True)

LOG_FILE = get_data_path("logs.txt")

MAX_LOG_LINES = 10000
TRUNCATE_THRESHOLD = 15000


def _read_lines() -> list[str]:
    with open(LOG_FILE, "r", encoding="utf-8", errors="replace") as f:
        return f.readlines()


def truncate_log_file() -> None:
    """Keep the last MAX_LOG_LINES once the file passes TRUNCATE_THRESHOLD."""
    if not LOG_FILE.exists():
        return

    try:
        lines = _read_lines()
        if len(lines) <= TRUNCATE_THRESHOLD:
            return

        kept = lines[-MAX_LOG_LINES:]
        temp_path = LOG_FILE.with_suffix(".txt.tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            f.writelines(kept)
        temp_path.replace(LOG_FILE)

        print(f"LOG_ROTATION: Truncated {len(lines)} lines to {len(kept)} lines")
    except OSError as e:
        print(f"LOG_ROTATION_ERROR: Failed to truncate log file: {e}")


def tail_log_file(lines: int) -> tuple[list[str], int]:
    """Return (last ``lines`` lines without newlines, total line count).

    Raises:
        OSError: If the log file exists but cannot be read
    """
    if not LOG_FILE.exists():
        return [], 0

    all_lines = _read_lines()
    return [line.rstrip("\n") for line in all_lines[-lines:]], len(all_lines)


truncate_log_file()

logging.basicConfig(
    filename=str(LOG_FILE),
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)

log = logging.getLogger("imagestudio")
