from __future__ import annotations

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

import api.main as api_main
from qiyou.common import TransportError
from qiyou.types import HttpResponse

SAMPLE_BODY = "<dt>92号汽油</dt><dd>7.85</dd><dt>95号汽油</dt><dd>8.35</dd>"


class _Fetcher:
    def __init__(self, body: str = SAMPLE_BODY, error: Exception | None = None) -> None:
        self.body = body
        self.error = error
        self.urls: list[str] = []

    def get(self, url: str, headers: dict[str, str], timeout: float) -> HttpResponse:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return HttpResponse(200, self.body, url)


class _Store:
    def __init__(self, region: str | None = None) -> None:
        self.region = region

    def read(self, key: str) -> str | None:
        return self.region


class ApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(api_main.app)

    def test_fuel_for_explicit_region(self) -> None:
        fetcher = _Fetcher()
        with patch.object(api_main, "fetcher", fetcher), patch.object(api_main, "store", _Store()):
            response = self.client.get("/v1/fuel/sichuan/chengdu")
        self.assertEqual(200, response.status_code)
        body = response.json()
        self.assertEqual("ok", body["kind"])
        self.assertEqual("sichuan/chengdu", body["region"])
        self.assertEqual("92号汽油：7.85 元/升\n95号汽油：8.35 元/升", body["payload"]["content"])
        self.assertEqual("#CA3A05", body["payload"]["icon-color"])
        self.assertEqual(["http://m.qiyoujiage.com/sichuan/chengdu.shtml"], fetcher.urls)

    def test_fuel_uses_stored_region(self) -> None:
        with patch.object(api_main, "fetcher", _Fetcher()), patch.object(api_main, "store", _Store("beijing/beijing")):
            body = self.client.get("/v1/fuel").json()
        self.assertEqual("beijing/beijing", body["region"])

    def test_failures_still_return_payload(self) -> None:
        fetcher = _Fetcher(error=TransportError("down"))
        with patch.object(api_main, "fetcher", fetcher), patch.object(api_main, "store", _Store()):
            response = self.client.get("/v1/fuel/sichuan")
        self.assertEqual(200, response.status_code)
        self.assertEqual("transport", response.json()["kind"])
        self.assertEqual("油价查询失败", response.json()["payload"]["title"])

    def test_policy(self) -> None:
        body = self.client.get("/v1/policy").json()
        self.assertEqual(["92", "95", "98", "0号"], body["grade_markers"])
        self.assertEqual("yj", body["region_store_key"])
        self.assertEqual(3, body["max_display_entries"])


if __name__ == "__main__":
    unittest.main()
