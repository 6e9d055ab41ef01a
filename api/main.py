from __future__ import annotations

from fastapi import FastAPI

from models import QueryResponse
from qiyou import CollectingSink, JsonFileStore, UrllibFetcher, query_fuel_prices
from query_policy import METHOD_VERSION, query_policy_payload

app = FastAPI(title="Qiyou Fuel Price API", version=METHOD_VERSION.lstrip("v"))

fetcher = UrllibFetcher()
store = JsonFileStore()


def _respond(region: str | None) -> dict:
    sink = CollectingSink()
    outcome = query_fuel_prices(fetcher, store, sink, argument=region)
    validated = QueryResponse(
        kind=outcome.kind,
        region=outcome.region,
        url=outcome.url,
        payload=sink.last or {},
    )
    return validated.model_dump(mode="json")


@app.get("/v1/fuel")
def fuel_default() -> dict:
    return _respond(None)


@app.get("/v1/fuel/{region:path}")
def fuel_for_region(region: str) -> dict:
    return _respond(region)


@app.get("/v1/policy")
def policy() -> dict:
    return query_policy_payload()
