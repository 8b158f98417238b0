"""Best-effort extraction of Lotto America drawings from a results page.

Vendor markup changes without notice, so parsing is a cascade of
progressively more permissive strategies. The first strategy that yields at
least one fully valid drawing wins; every decision is recorded in the
attempt's `Diagnostics` so a failed scrape can be explained afterwards.
"""
from __future__ import annotations

import datetime as dt
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from .diagnostics import Diagnostics
from .types import JACKPOT_NOT_AVAILABLE, DrawResult, ParseItemError, validate_draw

CONTAINER_TOKENS = ("result-item", "draw-result", "drawing-result", "result-card")
NUMBER_TOKENS = ("number", "ball")
NOT_A_NUMBER_TOKENS = ("star", "bonus", "multiplier", "jackpot", "winners", "date")

_WS_RE = re.compile(r"\s+")
_INT_RE = re.compile(r"\d+")
_SMALL_INT_RE = re.compile(r"\s*(\d{1,2})\s*")
_MONTH_DAY_RE = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?(?!\d)")
_MARKED_TOKEN_RE = re.compile(r">\s*(\d{1,2})\s*<|\[\s*(\d{1,2})\s*\]")
_BONUS_RE = re.compile(r"all\s*star\s*bonus\s*:?\s*x?\s*(\d+)", re.IGNORECASE)
_SIX_NUMBERS_RE = re.compile(r"(?<![\d/])" + r"[\s-]+".join([r"(\d{1,2})"] * 6) + r"(?![\d/])")

_DATE_FORMATS = (
    "%A, %B %d, %Y",
    "%a, %b %d, %Y",
    "%a, %B %d, %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y-%m-%d",
)

Strategy = Callable[["SourceDocument", Diagnostics], Optional[List[DrawResult]]]


@dataclass(frozen=True)
class SourceDocument:
    """A fetched body, decoded either as JSON or as an HTML tree."""

    body: str
    payload: Any = None
    soup: Optional[BeautifulSoup] = None

    @property
    def is_json(self) -> bool:
        return self.soup is None

    @classmethod
    def from_body(cls, body: str) -> "SourceDocument":
        stripped = body.lstrip()
        if stripped[:1] in ("[", "{"):
            try:
                return cls(body=body, payload=json.loads(stripped))
            except ValueError:
                pass
        return cls(body=body, soup=BeautifulSoup(body, "html.parser"))


def format_long_date(value: dt.date) -> str:
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def normalize_date(raw: str) -> str:
    """Render a source date in long form, or return it unchanged if unrecognised."""
    text = _WS_RE.sub(" ", raw).strip()
    for fmt in _DATE_FORMATS:
        try:
            return format_long_date(dt.datetime.strptime(text, fmt).date())
        except ValueError:
            continue
    return text


def _iso_date(raw: str) -> str:
    try:
        return format_long_date(dt.datetime.fromisoformat(raw.replace("Z", "+00:00")).date())
    except ValueError:
        pass
    try:
        return format_long_date(dt.date.fromisoformat(raw[:10]))
    except ValueError:
        return raw


def _first_int(text: str) -> Optional[int]:
    match = _INT_RE.search(text.replace(",", ""))
    return int(match.group()) if match else None


def _first_int_in(elements: Iterable[Tag]) -> Optional[int]:
    """First integer held by any of `elements`; labels without digits are skipped."""
    for el in elements:
        value = _first_int(_text(el))
        if value is not None:
            return value
    return None


def _class_tokens(tag: Tag) -> List[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return [c.lower() for c in classes]


def _has_token(tag: Tag, needles: Iterable[str], exclude: Iterable[str] = ()) -> bool:
    tokens = _class_tokens(tag)
    if not any(n in t for t in tokens for n in needles):
        return False
    return not any(x in t for t in tokens for x in exclude)


def _is_container(tag: Tag) -> bool:
    return _has_token(tag, CONTAINER_TOKENS)


def _is_number(tag: Tag) -> bool:
    return _has_token(tag, NUMBER_TOKENS, exclude=NOT_A_NUMBER_TOKENS)


def _is_star(tag: Tag) -> bool:
    return _has_token(tag, ("star",), exclude=("bonus",))


def _is_bonus(tag: Tag) -> bool:
    return _has_token(tag, ("bonus", "multiplier"))


def _text(tag: Optional[Tag]) -> str:
    if tag is None:
        return ""
    return _WS_RE.sub(" ", tag.get_text(" ")).strip()


class ResultParser:
    """Turn a raw results page into validated `DrawResult` records."""

    def __init__(
        self,
        today: Optional[dt.date] = None,
        max_results: int = 10,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._today = today
        self._max_results = max_results
        self._logger = logger or logging.getLogger("lottoamerica.parser")
        self.strategies: List[Tuple[str, Strategy]] = [
            ("structured_markup", self.structured_markup),
            ("tabular", self.tabular),
            ("text_scan", self.text_scan),
            ("structured_data", self.structured_data),
        ]

    @property
    def today(self) -> dt.date:
        return self._today or dt.date.today()

    def parse(self, body: str, diagnostics: Diagnostics) -> List[DrawResult]:
        document = SourceDocument.from_body(body or "")
        diagnostics.add_step(
            "document_loaded", bool(document.body.strip()), "json" if document.is_json else "html"
        )
        for name, strategy in self.strategies:
            results = strategy(document, diagnostics)
            if results:
                results = results[: self._max_results]
                diagnostics.complete_results = len(results)
                diagnostics.add_step("strategy_succeeded", True, f"{name}: {len(results)} results")
                return results
            if results is not None:
                diagnostics.add_step(f"{name}_empty", False, "no valid results")
        diagnostics.add_step("no_results", False, "all strategies exhausted")
        return []

    def _collect(
        self,
        label: str,
        candidates: Sequence[Any],
        build: Callable[[Any], DrawResult],
        diagnostics: Diagnostics,
    ) -> List[DrawResult]:
        results: List[DrawResult] = []
        for index, candidate in enumerate(candidates):
            try:
                result = build(candidate)
            except ParseItemError as exc:
                diagnostics.fail("item_rejected", f"{label}[{index}]: {exc}")
                continue
            except Exception as exc:
                self._logger.warning("Error processing %s candidate %s: %s", label, index, exc)
                diagnostics.fail("item_error", f"{label}[{index}]: {exc}")
                continue
            results.append(result)
            diagnostics.add_step("result_pushed", True, f"{label}[{index}] {result.date}")
        return results

    # structured markup

    def structured_markup(self, document: SourceDocument, diagnostics: Diagnostics) -> Optional[List[DrawResult]]:
        if document.soup is None:
            return None
        found = document.soup.find_all(_is_container)
        found_ids = {id(tag) for tag in found}
        cards = [tag for tag in found if not any(id(parent) in found_ids for parent in tag.parents)]
        diagnostics.cards_found = len(cards)
        diagnostics.add_step("primary_selectors", len(cards) > 0, f"{len(cards)} cards found")
        if not cards:
            return []
        return self._collect("card", cards, self._parse_card, diagnostics)

    def _parse_card(self, card: Tag) -> DrawResult:
        date_text = normalize_date(_text(card.find(lambda t: _has_token(t, ("date",)))))

        tokens: List[int] = []
        for el in card.find_all(_is_number):
            if el.find(_is_number):
                continue
            match = _SMALL_INT_RE.fullmatch(el.get_text())
            if match:
                tokens.append(int(match.group(1)))
        mains, extras = tokens[:5], tokens[5:]
        if not date_text or not mains:
            raise ParseItemError("card has no date or no main numbers")

        star_ball = _first_int_in(card.find_all(_is_star))
        if star_ball is None:
            star_ball = extras.pop(0) if extras else None

        bonus = _first_int_in(card.find_all(_is_bonus))
        if bonus is None:
            bonus = extras[0] if extras else 1

        winners = _first_int(_text(card.find(lambda t: _has_token(t, ("winners",))))) or 0
        jackpot = _text(card.find(lambda t: _has_token(t, ("jackpot",)))) or JACKPOT_NOT_AVAILABLE

        return validate_draw(date_text, mains, star_ball, bonus, winners, jackpot)

    # tabular

    def tabular(self, document: SourceDocument, diagnostics: Diagnostics) -> Optional[List[DrawResult]]:
        if document.soup is None:
            return None
        rows: List[List[str]] = []
        for table in document.soup.find_all("table"):
            for row in table.find_all("tr")[1:]:
                cells = [_text(cell) for cell in row.find_all(["td", "th"], recursive=False)]
                if sum(1 for c in cells if c.isdigit()) >= 6:
                    rows.append(cells)
        diagnostics.add_step("table_rows", bool(rows), f"{len(rows)} rows with 6+ numeric cells")
        return self._collect("row", rows, self._parse_row, diagnostics)

    def _parse_row(self, cells: List[str]) -> DrawResult:
        numeric = [int(c) for c in cells if c.isdigit()]
        bonus = numeric[6] if len(numeric) > 6 else 1
        return validate_draw(normalize_date(cells[0]), numeric[:5], numeric[5], bonus)

    # positional text scan

    def text_scan(self, document: SourceDocument, diagnostics: Diagnostics) -> Optional[List[DrawResult]]:
        if document.soup is None:
            return None
        raw = _WS_RE.sub(" ", document.body)
        text = _WS_RE.sub(" ", document.soup.get_text(" "))

        match = _BONUS_RE.search(text)
        bonus = int(match.group(1)) if match else 1
        diagnostics.add_step("all_star_bonus", match is not None, f"x{bonus}")

        found = self._windowed_scan(raw, diagnostics)
        if found is None:
            found = self._regex_scan(text, diagnostics)
        if found is None:
            return []
        if found[0].group(3) is None:
            diagnostics.add_step("year_assumed", True, str(self.today.year))
        return self._collect("text", [(found, bonus)], self._build_scanned, diagnostics)

    def _build_scanned(self, candidate: Tuple[Tuple[Any, List[int]], int]) -> DrawResult:
        (date_match, numbers), bonus = candidate
        return validate_draw(self._month_day(date_match), numbers[:5], numbers[5], bonus)

    def _windowed_scan(self, raw: str, diagnostics: Diagnostics) -> Optional[Tuple[Any, List[int]]]:
        lower = raw.lower()
        start = max(lower.find("winning numbers"), 0)
        date_at = lower.find("drawing date:", start)
        if date_at < 0:
            diagnostics.add_step("drawing_date_marker", False, "marker not found")
            return None
        end = lower.find("all star bonus", date_at)
        block = raw[date_at:end] if end >= 0 else raw[date_at:]

        date_match = _MONTH_DAY_RE.search(block)
        if date_match is None:
            diagnostics.add_step("drawing_date", False, "no MM/DD in block")
            return None
        numbers = [int(a or b) for a, b in _MARKED_TOKEN_RE.findall(block, date_match.end())][:6]
        diagnostics.add_step("marked_numbers", len(numbers) == 6, f"found {len(numbers)}")
        if len(numbers) < 6:
            return None
        return date_match, numbers

    def _regex_scan(self, text: str, diagnostics: Diagnostics) -> Optional[Tuple[Any, List[int]]]:
        marker = text.lower().find("winning numbers")
        scope = text[marker:] if marker >= 0 else text
        match = _SIX_NUMBERS_RE.search(scope)
        diagnostics.add_step("six_number_regex", match is not None, match.group(0) if match else None)
        if match is None:
            return None
        dated = text.lower().find("drawing date")
        date_match = _MONTH_DAY_RE.search(text, max(dated, 0)) or _MONTH_DAY_RE.search(text)
        if date_match is None:
            diagnostics.add_step("drawing_date", False, "no date near the numbers")
            return None
        return date_match, [int(g) for g in match.groups()]

    def _month_day(self, match: Any) -> str:
        month, day, year = match.group(1), match.group(2), match.group(3)
        if year is None:
            # TODO: roll back a year when MM/DD falls after today (late-December draws read in January).
            draw_year = self.today.year
        else:
            draw_year = int(year) + 2000 if len(year) == 2 else int(year)
        try:
            return format_long_date(dt.date(draw_year, int(month), int(day)))
        except ValueError as exc:
            raise ParseItemError(f"invalid drawing date {match.group(0)}") from exc

    # structured data (JSON feeds)

    def structured_data(self, document: SourceDocument, diagnostics: Diagnostics) -> Optional[List[DrawResult]]:
        if not document.is_json:
            return None
        payload = document.payload
        if isinstance(payload, dict):
            payload = [payload]
        records = [r for r in payload if isinstance(r, dict)] if isinstance(payload, list) else []
        records.sort(key=lambda r: str(r.get("draw_date") or ""), reverse=True)
        diagnostics.add_step("json_records", bool(records), f"{len(records)} records")
        return self._collect("record", records, self._parse_record, diagnostics)

    def _parse_record(self, record: dict) -> DrawResult:
        raw_date = str(record.get("draw_date") or "")
        tokens = str(record.get("winning_numbers") or "").split()
        try:
            numbers = [int(t) for t in tokens]
        except ValueError as exc:
            raise ParseItemError(f"non-numeric winning_numbers {tokens}") from exc
        if len(numbers) < 6:
            raise ParseItemError(f"expected 6 winning numbers, found {len(numbers)}")
        bonus = _first_int(str(record.get("multiplier") or "")) or 1
        return validate_draw(_iso_date(raw_date) if raw_date else "", numbers[:5], numbers[5], bonus)
