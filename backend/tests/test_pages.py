import datetime as dt
import os
import unittest
from unittest import mock

import backend.config as config_module
import backend.routes.lotto as lotto_route_module
from backend.app import create_app
from backend.services.pages import IndexPage
from scraper.cache import ResultCache
from scraper.diagnostics import Diagnostics
from scraper.fallback import FALLBACK_RESULTS
from scraper.parser import ResultParser
from scraper.provider import LottoResultProvider
from scraper.types import TransportError


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now


class IndexPageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.renders = 0

    def _render(self) -> str:
        self.renders += 1
        return f"<p>render {self.renders}</p>"

    def test_first_get_renders(self) -> None:
        page = IndexPage(self._render, ttl_seconds=600, clock=self.clock)

        self.assertTrue(page.is_stale())
        self.assertEqual(page.get(), "<p>render 1</p>")
        self.assertEqual(page.generated_at, self.clock.now)

    def test_page_is_reused_until_ttl_expires(self) -> None:
        page = IndexPage(self._render, ttl_seconds=600, clock=self.clock)
        page.get()

        self.clock.now += 599
        self.assertEqual(page.get(), "<p>render 1</p>")
        self.clock.now += 1
        self.assertEqual(page.get(), "<p>render 2</p>")

    def test_regenerate_rebuilds_immediately(self) -> None:
        page = IndexPage(self._render, ttl_seconds=600, clock=self.clock)
        page.get()

        self.assertEqual(page.regenerate(), "<p>render 2</p>")
        self.assertEqual(page.get(), "<p>render 2</p>")

    def test_failed_render_keeps_previous_page(self) -> None:
        page = IndexPage(self._render, ttl_seconds=600, clock=self.clock)
        page.get()
        generated_at = page.generated_at
        self.clock.now += 5

        with mock.patch.object(page, "_render", side_effect=RuntimeError("boom")):
            with self.assertRaises(RuntimeError):
                page.regenerate()

        self.assertEqual(page.generated_at, generated_at)
        self.assertEqual(page.get(), "<p>render 1</p>")


class FailingDataSource:
    source_url = "http://example.test/lotto-america"

    async def fetch_latest(self):
        raise TransportError("connection refused")

    async def close(self) -> None:
        return None


class IndexRouteTests(unittest.TestCase):
    def setUp(self) -> None:
        config_module.load_settings.cache_clear()
        lotto_route_module.get_result_provider.cache_clear()
        self.provider = LottoResultProvider(FailingDataSource(), cache=ResultCache())
        patcher = mock.patch("backend.routes.lotto.build_provider", return_value=self.provider)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.app = create_app()
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        config_module.load_settings.cache_clear()
        lotto_route_module.get_result_provider.cache_clear()

    def test_index_renders_results(self) -> None:
        response = self.client.get("/")

        self.assertEqual(response.status_code, 200)
        html = response.get_data(as_text=True)
        self.assertIn("Lotto America Results", html)
        self.assertIn("Wednesday, October 29, 2025", html)
        self.assertIn("35,560", html)
        self.assertIn("Sample Data", html)

    def test_index_is_served_from_page_until_revalidated(self) -> None:
        first = self.client.get("/").get_data(as_text=True)
        with mock.patch.object(self.provider, "get_results", side_effect=RuntimeError("down")):
            second = self.client.get("/").get_data(as_text=True)

        self.assertEqual(first, second)

    def test_index_without_results_shows_notice(self) -> None:
        with mock.patch.object(self.provider, "get_results", side_effect=RuntimeError("down")):
            html = self.client.get("/").get_data(as_text=True)

        self.assertIn("No lottery results available", html)

    def test_rendered_page_parses_back_to_the_same_drawings(self) -> None:
        html = self.client.get("/").get_data(as_text=True)
        diagnostics = Diagnostics(source_url="http://localhost/")

        results = ResultParser(today=dt.date(2025, 11, 1)).parse(html, diagnostics)

        self.assertEqual(diagnostics.cards_found, len(FALLBACK_RESULTS))
        self.assertEqual(len(results), len(FALLBACK_RESULTS))
        for parsed, expected in zip(results, FALLBACK_RESULTS):
            self.assertEqual(parsed.date, expected.date)
            self.assertEqual(parsed.numbers, expected.numbers)
            self.assertEqual(parsed.star_ball, expected.star_ball)
            self.assertEqual(parsed.all_star_bonus, expected.all_star_bonus)
            self.assertEqual(parsed.winners, expected.winners)
            self.assertEqual(parsed.jackpot, expected.jackpot)


if __name__ == "__main__":
    unittest.main()
