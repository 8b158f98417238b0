import asyncio
import datetime as dt
import os
import unittest
from unittest import mock

import requests

import scraper.config as config_module
from scraper.config import BROWSER_USER_AGENT, SOURCE_PRESETS, load_config
from scraper.datasource.http_page import HttpResultDataSource, HttpResultDataSourceConfig
from scraper.fetcher import fetch_page
from scraper.parser import ResultParser
from scraper.types import FetchedPage, TransportError

PAGE = """
<div class="result-item">
  <span class="draw-date">10/29/2025</span>
  <span class="number">21</span><span class="number">33</span><span class="number">40</span>
  <span class="number">42</span><span class="number">50</span><span class="number star-ball">5</span>
  <span class="all-star-bonus">All Star Bonus: 2X</span>
</div>
"""


class FetchPageTests(unittest.TestCase):
    @mock.patch("scraper.fetcher.requests.get")
    def test_returns_body_and_status(self, mock_get) -> None:
        mock_get.return_value = mock.Mock(status_code=200, text=PAGE, headers={"Content-Type": "text/html"})

        page = fetch_page("http://example.test", timeout_seconds=10)

        self.assertEqual(page.body, PAGE)
        self.assertEqual(page.status_code, 200)
        self.assertEqual(page.content_type, "text/html")
        mock_get.assert_called_once_with(
            "http://example.test", timeout=10, headers={"User-Agent": BROWSER_USER_AGENT}
        )

    @mock.patch("scraper.fetcher.requests.get")
    def test_timeout_becomes_transport_error(self, mock_get) -> None:
        mock_get.side_effect = requests.Timeout("read timed out")

        with self.assertRaises(TransportError) as ctx:
            fetch_page("http://example.test")

        self.assertIsInstance(ctx.exception.__cause__, requests.Timeout)
        self.assertIsNone(ctx.exception.status_code)
        self.assertEqual(mock_get.call_count, 1)

    @mock.patch("scraper.fetcher.requests.get")
    def test_error_status_becomes_transport_error(self, mock_get) -> None:
        mock_get.return_value = mock.Mock(status_code=403, text="denied", headers={})

        with self.assertRaises(TransportError) as ctx:
            fetch_page("http://example.test")

        self.assertEqual(ctx.exception.status_code, 403)


class HttpResultDataSourceTests(unittest.TestCase):
    def _datasource(self, fetch) -> HttpResultDataSource:
        return HttpResultDataSource(
            HttpResultDataSourceConfig(url="http://example.test/la", timeout_seconds=10),
            parser=ResultParser(today=dt.date(2025, 11, 1)),
            fetch=fetch,
        )

    def test_fetch_latest_parses_page(self) -> None:
        calls = []

        def fake_fetch(url, timeout, user_agent):
            calls.append((url, timeout, user_agent))
            return FetchedPage(url=url, body=PAGE, status_code=200)

        outcome = asyncio.run(self._datasource(fake_fetch).fetch_latest())

        self.assertEqual(calls, [("http://example.test/la", 10, BROWSER_USER_AGENT)])
        self.assertEqual(len(outcome.results), 1)
        result = outcome.results[0]
        self.assertEqual(result.date, "Wednesday, October 29, 2025")
        self.assertEqual(result.star_ball, 5)
        self.assertEqual(result.all_star_bonus, 2)
        self.assertEqual(outcome.diagnostics.http_status, 200)
        self.assertEqual(outcome.diagnostics.source_url, "http://example.test/la")
        labels = [step.label for step in outcome.diagnostics.steps]
        self.assertEqual(labels[:2], ["start_scrape", "http_get"])

    def test_transport_errors_propagate(self) -> None:
        def failing_fetch(url, timeout, user_agent):
            raise TransportError("connection refused")

        with self.assertRaises(TransportError):
            asyncio.run(self._datasource(failing_fetch).fetch_latest())


class ScraperConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._saved = {k: os.environ.pop(k) for k in list(os.environ) if k.startswith("LOTTO_")}
        load_config.cache_clear()

    def tearDown(self) -> None:
        for key in [k for k in os.environ if k.startswith("LOTTO_")]:
            del os.environ[key]
        os.environ.update(self._saved)
        load_config.cache_clear()

    def test_defaults_to_lotteryusa(self) -> None:
        settings = config_module.load_from_environment()

        self.assertEqual(settings.source.name, "lotteryusa")
        self.assertEqual(settings.source.url, SOURCE_PRESETS["lotteryusa"])
        self.assertEqual(settings.source.timeout_seconds, 15)
        self.assertEqual(settings.cache_ttl_seconds, 3600)

    def test_url_override_wins(self) -> None:
        os.environ["LOTTO_SOURCE"] = "lottoamerica"
        os.environ["LOTTO_SOURCE_URL"] = "https://data.example.test/lotto.json"
        os.environ["LOTTO_TIMEOUT_SECONDS"] = "10"

        settings = config_module.load_from_environment()

        self.assertEqual(settings.source.url, "https://data.example.test/lotto.json")
        self.assertEqual(settings.source.timeout_seconds, 10)

    def test_unknown_preset_is_rejected(self) -> None:
        os.environ["LOTTO_SOURCE"] = "powerball"

        with self.assertRaises(RuntimeError):
            config_module.load_from_environment()


if __name__ == "__main__":
    unittest.main()
