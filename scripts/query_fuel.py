from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from qiyou import JsonFileStore, StreamSink, UrllibFetcher, query_fuel_prices
from query_policy import LOG_LEVEL, REGION_STORE_KEY, STORE_PATH


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Look up today's fuel prices on m.qiyoujiage.com.")
    parser.add_argument("--region", default=None, help="Region code, e.g. sichuan/chengdu.")
    parser.add_argument("--remember", action="store_true", help="Store --region as the default for later runs.")
    parser.add_argument("--store", default=str(STORE_PATH), help="Path of the JSON settings store.")
    parser.add_argument("--json", action="store_true", help="Emit the host payload as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Log diagnostics to stderr.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = JsonFileStore(args.store)
    if args.remember:
        if not args.region or not args.region.strip():
            parser.error("--remember needs --region")
        store.write(REGION_STORE_KEY, args.region.strip())

    outcome = query_fuel_prices(UrllibFetcher(), store, StreamSink(as_json=args.json), argument=args.region)
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
