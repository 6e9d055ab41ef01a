"""Capabilities the pipeline needs from whatever hosts it.

The pipeline never touches the network, disk or output directly; it is handed
a fetcher, a key-value store and a completion sink. The defaults here back a
command line run; tests and the API pass their own.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Protocol

from query_policy import STORE_PATH

from .common import DEFAULT_TIMEOUT_SECONDS, fetch_page
from .types import HttpResponse

logger = logging.getLogger(__name__)


class HttpFetcher(Protocol):
    def get(self, url: str, headers: dict[str, str], timeout: float) -> HttpResponse:
        """Return the response or raise ``TransportError``."""
        ...


class KeyValueStore(Protocol):
    def read(self, key: str) -> str | None:
        ...


class CompletionSink(Protocol):
    def done(self, payload: dict) -> None:
        ...


class UrllibFetcher:
    def get(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> HttpResponse:
        return fetch_page(url, headers=headers, timeout=timeout)


class JsonFileStore:
    """String settings kept in a small JSON object on disk."""

    def __init__(self, path: Path | str = STORE_PATH) -> None:
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        return payload if isinstance(payload, dict) else {}

    def read(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> None:
        try:
            payload = self._load()
        except json.JSONDecodeError:
            logger.warning("Overwriting unreadable store at %s", self.path)
            payload = {}
        payload[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


class CollectingSink:
    def __init__(self) -> None:
        self.payloads: list[dict] = []

    def done(self, payload: dict) -> None:
        self.payloads.append(payload)

    @property
    def last(self) -> dict | None:
        return self.payloads[-1] if self.payloads else None


class StreamSink:
    def __init__(self, stream=None, as_json: bool = False) -> None:
        self.stream = stream or sys.stdout
        self.as_json = as_json

    def done(self, payload: dict) -> None:
        if self.as_json:
            print(json.dumps(payload, ensure_ascii=False, indent=2), file=self.stream)
            return
        if not payload:
            print("(no payload)", file=self.stream)
            return
        print(payload.get("title", ""), file=self.stream)
        print(payload.get("content", ""), file=self.stream)
