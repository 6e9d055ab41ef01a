from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    HELD = "held"
    FLAT = "flat"


TREND_GLYPHS = {
    Trend.UP: "📈 上涨",
    Trend.DOWN: "📉 下跌",
    Trend.HELD: "⏸️ 搁浅",
    Trend.FLAT: "平稳",
}


@dataclass(frozen=True)
class PriceEntry:
    label: str
    value: str


@dataclass(frozen=True)
class AdjustmentNotice:
    date: str
    trend: Trend
    amount: str

    @property
    def glyph(self) -> str:
        return TREND_GLYPHS[self.trend]


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str
    url: str = ""
