from .base import ResultDataSource, ScrapeOutcome
from .http_page import HttpResultDataSource

__all__ = [
    "ResultDataSource",
    "ScrapeOutcome",
    "HttpResultDataSource",
]
