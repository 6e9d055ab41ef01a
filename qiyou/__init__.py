from .common import FetchError, HttpStatusError, NotFoundPage, TransportError, build_query_url
from .extract import parse_adjustment, parse_prices
from .host import CollectingSink, JsonFileStore, StreamSink, UrllibFetcher
from .responder import QueryOutcome, query_fuel_prices, resolve_region
from .types import AdjustmentNotice, HttpResponse, PriceEntry, Trend

__all__ = [
    "AdjustmentNotice",
    "CollectingSink",
    "FetchError",
    "HttpResponse",
    "HttpStatusError",
    "JsonFileStore",
    "NotFoundPage",
    "PriceEntry",
    "QueryOutcome",
    "StreamSink",
    "TransportError",
    "Trend",
    "UrllibFetcher",
    "build_query_url",
    "parse_adjustment",
    "parse_prices",
    "query_fuel_prices",
    "resolve_region",
]
