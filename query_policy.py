from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path

METHOD_VERSION = "v1.1.0"

SITE_ROOT = os.getenv("QIYOU_SITE_ROOT", "http://m.qiyoujiage.com/")
DEFAULT_REGION = os.getenv("QIYOU_DEFAULT_REGION", "shanxi-3/xian")
REGION_STORE_KEY = "yj"

DATA_DIR = Path("data")
STORE_PATH = Path(os.getenv("QIYOU_STORE_PATH", str(DATA_DIR / "store.json")))

LOG_LEVEL = os.getenv("QIYOU_LOG_LEVEL", "WARNING").upper()

QUERY_POLICY: dict = {
    "timeout_seconds": float(os.getenv("QIYOU_TIMEOUT_SECONDS", "8")),
    "grade_markers": ["92", "95", "98", "0号"],
    "max_display_entries": 3,
    "price_unit": "元/升",
    "effective_time": "24:00",
    "not_found_marker": "404 Not Found",
}

DISPLAY: dict = {
    "title_ok": "今日油价信息",
    "icon_ok": "fuelpump.fill",
    "icon_color_ok": "#CA3A05",
    "icon_error": "exclamationmark.triangle.fill",
    "icon_color_error": "#D0021B",
}


def query_policy_payload() -> dict:
    return {
        "method_version": METHOD_VERSION,
        "site_root": SITE_ROOT,
        "default_region": DEFAULT_REGION,
        "region_store_key": REGION_STORE_KEY,
        **deepcopy(QUERY_POLICY),
    }
