from __future__ import annotations

from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
LOG_DIR = PROJECT_ROOT / "logs"
CONFIG_DIR = PROJECT_ROOT / "config"
STYLE_GUIDES_PATH = CONFIG_DIR / "style_guides.json"

LOG_FILE_PREFIX = "validation"
LOG_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S_%f"

DOCUMENT_TYPES = ("assignment", "dissertation")
DEFAULT_DOCUMENT_TYPE = "assignment"
DEFAULT_STYLE_GUIDE_KEY = "saiacs"

WORDS_PER_PAGE = 250
LINE_SPACING_UNITS = 240
TWIPS_PER_INCH = 1440
CHARS_PER_LINE = 80
BLOCK_QUOTE_MIN_LINES = 4
RESERVED_FOOTNOTE_IDS = frozenset({"-1", "0"})

INHERITED_FONT_TOKEN = "_inherit_"
INHERITED_SIZE_TOKEN = 0


def ensure_base_dirs() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def build_log_path(ts: datetime | None = None) -> Path:
    if ts is None:
        ts = datetime.now()
    name = f"{LOG_FILE_PREFIX}_{ts.strftime(LOG_TIMESTAMP_FORMAT)}.log"
    return LOG_DIR / name


def cleanup_logs(retention_days: int = 5, now: datetime | None = None) -> int:
    if retention_days <= 0:
        return 0
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        return 0
    base_time = now or datetime.now()
    cutoff = base_time.timestamp() - retention_days * 86400
    removed = 0
    for path in LOG_DIR.glob(f"{LOG_FILE_PREFIX}_*.log"):
        try:
            if path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        except OSError:
            continue
    return removed
