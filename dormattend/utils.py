import os
import re
import json
from pathlib import Path
from typing import Any

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_DIR = BASE_DIR / "data"  # shipped with the package, read-only

STORAGE_KEY = "dorm-attendance-data"

_DATA_DIR_ENV = os.environ.get("DORM_ATTENDANCE_DATA_DIR")
APPDATA = os.environ.get("APPDATA")
if _DATA_DIR_ENV:
    USER_DATA_DIR = Path(_DATA_DIR_ENV)
elif APPDATA:
    USER_DATA_DIR = Path(APPDATA) / "DormAttendance" / "data"
else:
    USER_DATA_DIR = Path.home() / ".dorm-attendance" / "data"  # fallback

LOG_LEVEL = os.environ.get("DORM_ATTENDANCE_LOG_LEVEL", "INFO").upper()

def load_json(path: Path, default: Any):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return default

_NBSP_RE = re.compile(r"[\u00A0\u2007\u202F]")  # NBSP variants


def norm_text(s: Any) -> str:
    """
    Text normalization for header matching:
    - BOM / non-breaking spaces
    - outer quotes
    - lower case
    - underscores and dashes -> space
    - collapsed whitespace
    """
    if s is None:
        return ""

    s = str(s)

    # invisible characters that Excel/JSON exports like to carry
    s = s.replace("\ufeff", "")
    s = _NBSP_RE.sub(" ", s)
    s = s.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ('"', "'"):
        s = s[1:-1].strip()
    s = s.lower()
    s = re.sub(r"[_\-]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s

def clean_cell(v: Any) -> str:
    # pandas hands back NaN for empty cells
    if v is None:
        return ""
    if isinstance(v, float) and v != v:
        return ""
    return str(v).strip()

def rules_path() -> Path:
    return DEFAULT_DATA_DIR / "rules.json"

def storage_dir() -> Path:
    # created lazily on first save
    return USER_DATA_DIR
