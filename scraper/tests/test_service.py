import asyncio
import io
import json
import unittest
from contextlib import redirect_stdout
from unittest import mock

from scraper.config import ScraperSettings, SourceSettings
from scraper.datasource.http_page import HttpResultDataSource
from scraper.service import build_datasource, build_provider, parse_args, run
from scraper.types import TransportError


class ServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = ScraperSettings(
            source=SourceSettings(name="custom", url="http://example.test/la", timeout_seconds=5),
            cache_ttl_seconds=120,
            max_results=3,
        )

    def test_parse_args_defaults(self) -> None:
        args = parse_args([])

        self.assertIsNone(args.env_file)
        self.assertFalse(args.debug)
        self.assertFalse(args.verbose)

    def test_build_datasource_requires_url(self) -> None:
        settings = ScraperSettings(source=SourceSettings(name="custom", url=""))

        with self.assertRaises(RuntimeError):
            build_datasource(settings)

    def test_build_provider_wires_settings(self) -> None:
        provider = build_provider(self.settings)

        self.assertIsInstance(provider._datasource, HttpResultDataSource)
        self.assertEqual(provider.source_url, "http://example.test/la")
        self.assertEqual(provider.cache._ttl_ms, 120_000)

    def test_run_prints_fallback_when_source_is_down(self) -> None:
        provider = build_provider(self.settings)
        with mock.patch("scraper.service.load_config", return_value=self.settings), \
                mock.patch("scraper.service.build_provider", return_value=provider), \
                mock.patch("scraper.service.configure_logging"), \
                mock.patch.object(provider._datasource, "_fetch", side_effect=TransportError("refused")):
            out = io.StringIO()
            with redirect_stdout(out):
                response = asyncio.run(run(parse_args(["--debug"])))

        payload = json.loads(out.getvalue())
        self.assertEqual(len(response.results), 3)
        self.assertTrue(payload["diagnostics"]["usedFallback"])
        self.assertEqual(payload["diagnostics"]["steps"][0]["label"], "http_error")


if __name__ == "__main__":
    unittest.main()
