from __future__ import annotations

import logging
from dataclasses import dataclass, field

from models import ResultPayload
from query_policy import DEFAULT_REGION, DISPLAY, QUERY_POLICY, REGION_STORE_KEY

from .common import (
    DEFAULT_TIMEOUT_SECONDS,
    REQUEST_HEADERS,
    FetchError,
    HttpStatusError,
    NotFoundPage,
    build_query_url,
    check_response,
)
from .extract import parse_adjustment, parse_prices
from .host import CompletionSink, HttpFetcher, KeyValueStore
from .types import AdjustmentNotice, PriceEntry

logger = logging.getLogger(__name__)

KIND_OK = "ok"
KIND_TRANSPORT = "transport"
KIND_HTTP_STATUS = "http_status"
KIND_NOT_FOUND = "not_found"
KIND_CONFIG_HINT = "config_hint"
KIND_STRUCTURE_CHANGED = "structure_changed"
KIND_INTERNAL = "internal"

FAILURE_TITLES = {
    KIND_TRANSPORT: "油价查询失败",
    KIND_HTTP_STATUS: "油价查询失败",
    KIND_NOT_FOUND: "油价查询失败",
    KIND_CONFIG_HINT: "油价数据解析失败",
    KIND_STRUCTURE_CHANGED: "油价数据解析失败",
    KIND_INTERNAL: "油价查询异常",
}


@dataclass
class QueryOutcome:
    region: str
    url: str
    kind: str
    payload: ResultPayload
    prices: list[PriceEntry] = field(default_factory=list)
    notice: AdjustmentNotice | None = None

    @property
    def ok(self) -> bool:
        return self.kind == KIND_OK


def resolve_region(argument: str | None, store: KeyValueStore | None) -> str:
    if argument and argument.strip():
        return argument.strip()
    if store is not None:
        try:
            stored = store.read(REGION_STORE_KEY)
        except Exception as err:
            logger.warning("Could not read stored region: %s", err)
            stored = None
        if stored and stored.strip():
            return stored.strip()
    return DEFAULT_REGION


def is_city_level(region: str) -> bool:
    return "/" in region


def format_prices(prices: list[PriceEntry]) -> str:
    limit = QUERY_POLICY["max_display_entries"]
    unit = QUERY_POLICY["price_unit"]
    return "\n".join(f"{p.label}：{p.value} {unit}" for p in prices[:limit])


def format_notice(notice: AdjustmentNotice) -> str:
    return f"{notice.date} {notice.glyph} {notice.amount}"


def success_payload(prices: list[PriceEntry], notice: AdjustmentNotice | None) -> ResultPayload:
    content = format_prices(prices)
    if notice is not None:
        content = f"{content}\n\n{format_notice(notice)}"
    return ResultPayload(
        title=DISPLAY["title_ok"],
        content=content,
        icon=DISPLAY["icon_ok"],
        icon_color=DISPLAY["icon_color_ok"],
    )


def failure_payload(kind: str, region: str, err: Exception | None = None) -> ResultPayload:
    if kind == KIND_TRANSPORT:
        content = "网络请求失败，请检查网络连接后重试"
    elif kind == KIND_HTTP_STATUS:
        status = getattr(err, "status", None)
        content = f"服务器返回异常状态码 {status}，请稍后重试"
    elif kind == KIND_NOT_FOUND:
        content = f"页面不存在或为空，地区代码可能错误：{region}"
    elif kind == KIND_CONFIG_HINT:
        content = f"地区「{region}」只精确到省份，请使用 province/city 格式（如 sichuan/chengdu）"
    elif kind == KIND_STRUCTURE_CHANGED:
        content = f"未匹配到油价数据，网站结构可能已变化或地区代码有误：{region}"
    else:
        kind = KIND_INTERNAL
        content = f"脚本执行异常：{err}"
    return ResultPayload(
        title=FAILURE_TITLES[kind],
        content=content,
        icon=DISPLAY["icon_error"],
        icon_color=DISPLAY["icon_color_error"],
    )


def fetch_failure_kind(err: FetchError) -> str:
    if isinstance(err, HttpStatusError):
        return KIND_HTTP_STATUS
    if isinstance(err, NotFoundPage):
        return KIND_NOT_FOUND
    return KIND_TRANSPORT


def _run(fetcher: HttpFetcher, region: str, url: str) -> QueryOutcome:
    try:
        response = fetcher.get(url, dict(REQUEST_HEADERS), DEFAULT_TIMEOUT_SECONDS)
        body = check_response(response)
    except FetchError as err:
        kind = fetch_failure_kind(err)
        logger.warning("Fetch failed (%s) for %s: %s", kind, url, err)
        return QueryOutcome(region, url, kind, failure_payload(kind, region, err))

    prices = parse_prices(body)
    notice = parse_adjustment(body)
    if not prices:
        kind = KIND_STRUCTURE_CHANGED if is_city_level(region) else KIND_CONFIG_HINT
        logger.warning("No fuel prices matched at %s (%s)", url, kind)
        return QueryOutcome(region, url, kind, failure_payload(kind, region), notice=notice)

    logger.info("Parsed %d prices from %s, notice=%s", len(prices), url, notice is not None)
    return QueryOutcome(region, url, KIND_OK, success_payload(prices, notice), prices, notice)


def query_fuel_prices(
    fetcher: HttpFetcher,
    store: KeyValueStore | None,
    sink: CompletionSink,
    argument: str | None = None,
) -> QueryOutcome:
    """Run one query and deliver exactly one payload to ``sink``."""
    region = resolve_region(argument, store)
    url = build_query_url(region)
    try:
        outcome = _run(fetcher, region, url)
    except Exception as err:
        logger.exception("Fuel price query crashed for %s", url)
        outcome = QueryOutcome(region, url, KIND_INTERNAL, failure_payload(KIND_INTERNAL, region, err))
    sink.done(outcome.payload.to_host())
    return outcome
