"""HTML extraction for m.qiyoujiage.com detail pages.

Both passes are plain regular expressions tuned to this one vendor's markup:
price rows are ``<dt>label</dt> ... <dd>price</dd>`` pairs and the next
adjustment is announced inside ``<div class="tishi">``. They are brittle by
nature; when the site changes its templates, the price pass returns an empty
list and the caller reports a structure change.
"""
from __future__ import annotations

import html as html_lib
import re

from query_policy import QUERY_POLICY

from .types import AdjustmentNotice, PriceEntry, Trend

# Label is short tag-free text; the gap to <dd> may not cross another <dt>,
# and the price may sit behind symbols, inline tags or whole entities like &#165;.
_PRICE_ROW = re.compile(
    r"<dt[^>]*>\s*([^<]{1,40}?)\s*</dt>"
    r"(?:(?!<dt[\s>]).)*?"
    r"<dd[^>]*>(?:&#?\w+;|[^\d<]|<(?!/dd>)[^>]*>)*?(\d+(?:\.\d+)?)",
    re.DOTALL | re.IGNORECASE,
)

_TISHI_DATE = re.compile(r'<div\s+class="tishi"[^>]*>\s*<span[^>]*>(.*?)</span>', re.DOTALL | re.IGNORECASE)
_TISHI_INFO = re.compile(
    r'<div\s+class="tishi"[^>]*>(?:(?!</div>).)+?<br\s*/?>((?:(?!</div>).)+?)<br\s*/?>',
    re.DOTALL | re.IGNORECASE,
)

_TAG = re.compile(r"<[^>]+>")
_MONTH_DAY = re.compile(r"(\d{1,2})\s*月\s*(\d{1,2})\s*日")
_DATE_FILLER = re.compile(r"国内油价|预计|开启")
_AMOUNT_PER_UNIT = re.compile(r"(\d+(?:\.\d+)?)\s*元\s*/\s*(升|吨)")
_AMOUNT_RANGE = re.compile(r"(\d+(?:\.\d+)?)\s*[-~－—至]\s*(\d+(?:\.\d+)?)\s*元")

HELD_MARKERS = ("搁浅",)
DOWN_MARKERS = ("下调", "下跌", "下降")
UP_MARKERS = ("上调", "上涨")


def is_common_grade(label: str) -> bool:
    return any(marker in label for marker in QUERY_POLICY["grade_markers"])


def parse_prices(html: str) -> list[PriceEntry]:
    prices: list[PriceEntry] = []
    for match in _PRICE_ROW.finditer(html or ""):
        label = match.group(1).strip()
        value = match.group(2).strip()
        if is_common_grade(label):
            prices.append(PriceEntry(label=label, value=value))
    return prices


def clean_text(fragment: str) -> str:
    """Drop tags and entity leftovers such as ``&nbsp;``."""
    text = _TAG.sub("", fragment)
    text = html_lib.unescape(text).replace("\xa0", " ")
    return re.sub(r"\s+", " ", text).strip()


def classify_trend(text: str) -> Trend:
    if any(marker in text for marker in HELD_MARKERS):
        return Trend.HELD
    if any(marker in text for marker in DOWN_MARKERS):
        return Trend.DOWN
    if any(marker in text for marker in UP_MARKERS):
        return Trend.UP
    return Trend.FLAT


def extract_amount(text: str) -> str:
    per_unit = _AMOUNT_PER_UNIT.search(text)
    if per_unit:
        return f"{per_unit.group(1)}元/{per_unit.group(2)}"
    ranged = _AMOUNT_RANGE.search(text)
    if ranged:
        return f"{ranged.group(1)}-{ranged.group(2)}元"
    return text


def extract_date(text: str) -> str:
    month_day = _MONTH_DAY.search(text)
    if month_day:
        month, day = int(month_day.group(1)), int(month_day.group(2))
        return f"{month}月{day}日 {QUERY_POLICY['effective_time']}"
    return _DATE_FILLER.sub("", text).strip()


def parse_adjustment(html: str) -> AdjustmentNotice | None:
    date_match = _TISHI_DATE.search(html or "")
    info_match = _TISHI_INFO.search(html or "")
    if not date_match or not info_match:
        return None

    info = clean_text(info_match.group(1))
    if not info:
        return None
    return AdjustmentNotice(
        date=extract_date(clean_text(date_match.group(1))),
        trend=classify_trend(info),
        amount=extract_amount(info),
    )
