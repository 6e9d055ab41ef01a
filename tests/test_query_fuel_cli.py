from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from qiyou.types import HttpResponse
from scripts.query_fuel import main

SAMPLE_BODY = "<dt>92号汽油</dt><dd>7.85</dd><dt>95号汽油</dt><dd>8.35</dd>"


class _Fetcher:
    def __init__(self, body: str) -> None:
        self.body = body
        self.urls: list[str] = []

    def get(self, url: str, headers: dict[str, str], timeout: float) -> HttpResponse:
        self.urls.append(url)
        return HttpResponse(200, self.body, url)


class QueryFuelCliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store_path = Path(self._tmp.name) / "store.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _main(self, fetcher: _Fetcher, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with patch("scripts.query_fuel.UrllibFetcher", return_value=fetcher), redirect_stdout(out):
            code = main(["--store", str(self.store_path), *argv])
        return code, out.getvalue()

    def test_json_output(self) -> None:
        code, out = self._main(_Fetcher(SAMPLE_BODY), "--region", "sichuan/chengdu", "--json")
        self.assertEqual(0, code)
        self.assertEqual("今日油价信息", json.loads(out)["title"])

    def test_remember_persists_region_for_next_run(self) -> None:
        self._main(_Fetcher(SAMPLE_BODY), "--region", "beijing/beijing", "--remember")
        fetcher = _Fetcher(SAMPLE_BODY)
        code, out = self._main(fetcher)
        self.assertEqual(0, code)
        self.assertEqual(["http://m.qiyoujiage.com/beijing/beijing.shtml"], fetcher.urls)
        self.assertIn("92号汽油：7.85 元/升", out)

    def test_failure_exit_code(self) -> None:
        code, out = self._main(_Fetcher("<p>nothing</p>"), "--region", "sichuan")
        self.assertEqual(1, code)
        self.assertIn("province/city", out)


if __name__ == "__main__":
    unittest.main()
