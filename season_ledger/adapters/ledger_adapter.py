"""Adapter for the plain-text season ledger format.

One season per line, drivers separated by commas:

    2023, Max Verstappen: 575 19, Sergio Perez: 285 2

Every line with the same season contributes to that season, in file order,
even when lines for other seasons come between them.
"""

import re
from decimal import Decimal, InvalidOperation

from .base import BaseAdapter
from season_ledger.core.errors import EmptyLedgerError, ParseError
from season_ledger.core.models import Entry, Ledger, SeasonRecord


_SEASON_RE = re.compile(r'^[+-]?\d+$', re.ASCII)
_WINS_RE = re.compile(r'^\+?\d+$', re.ASCII)


class LedgerAdapter(BaseAdapter):
    """Parse a season ledger text file."""

    def parse(self, data_path: str) -> Ledger:
        """Read the whole file and return the parsed Ledger."""
        with open(data_path, 'r', encoding='utf-8') as f:
            try:
                return parse_ledger_lines(f)
            except UnicodeDecodeError as e:
                raise ParseError(f"file is not valid UTF-8 ({e.reason} "
                                 f"at byte {e.start})") from e


def parse_ledger_text(text: str) -> Ledger:
    """Parse ledger content already held in memory."""
    return parse_ledger_lines(text.splitlines())


def parse_ledger_lines(lines) -> Ledger:
    """Fold an iterable of raw lines into a Ledger.

    A season that shows up again after another season has been opened is
    merged into its first block, so each season keeps one record placed
    where it first appeared.

    Raises:
        ParseError: on the first malformed line.
        EmptyLedgerError: when the input holds no season records.
    """
    blocks: dict[int, list] = {}
    for season, entries in _group_seasons(lines):
        blocks.setdefault(season, []).extend(entries)

    if not blocks:
        raise EmptyLedgerError("ledger contains no season records")
    return Ledger(records=tuple(SeasonRecord(season=season, entries=tuple(entries))
                                for season, entries in blocks.items()))


def _group_seasons(lines):
    """Yield (season, entries) per block of consecutive lines."""
    current_season = None
    current_entries = []

    for line_number, raw in enumerate(lines, start=1):
        if not raw.strip():
            continue
        season, entries = _parse_line(raw, line_number)

        if season != current_season:
            if current_season is not None:
                yield current_season, current_entries
            current_season = season
            current_entries = []
        current_entries.extend(entries)

    if current_season is not None:
        yield current_season, current_entries


def _parse_line(raw: str, line_number: int) -> tuple:
    """Split one line into its season and the entries it lists."""
    season_part, _, rest = raw.partition(',')
    season_part = season_part.strip()
    if not _SEASON_RE.match(season_part):
        raise ParseError('malformed season', line_number, raw)
    season = int(season_part)

    entries = []
    for driver_entry in rest.split(','):
        driver_entry = driver_entry.strip()
        if not driver_entry:
            continue
        entries.append(_parse_entry(driver_entry, raw, line_number))
    return season, entries


def _parse_entry(driver_entry: str, raw: str, line_number: int) -> Entry:
    """Parse 'Name: points wins' into an Entry."""
    name, sep, stats_part = driver_entry.partition(':')
    name = name.strip()
    if not sep:
        raise ParseError(f"missing ':' in driver entry {driver_entry!r}",
                         line_number, raw)
    if not name:
        raise ParseError(f"missing driver name in {driver_entry!r}",
                         line_number, raw)

    stats = stats_part.split()
    if len(stats) != 2:
        raise ParseError(
            f"expected '<points> <wins>' for {name!r}, got {stats_part.strip()!r}",
            line_number, raw)

    return Entry(name=name,
                 points=_parse_points(stats[0], name, raw, line_number),
                 wins=_parse_wins(stats[1], name, raw, line_number))


def _parse_points(token: str, name: str, raw: str, line_number: int) -> Decimal:
    try:
        points = Decimal(token)
    except InvalidOperation:
        raise ParseError(f"non-numeric points {token!r} for {name!r}",
                         line_number, raw) from None
    if not points.is_finite() or points < 0:
        raise ParseError(f"points must be a finite number >= 0 for {name!r}",
                         line_number, raw)
    return points


def _parse_wins(token: str, name: str, raw: str, line_number: int) -> int:
    if not _WINS_RE.match(token):
        raise ParseError(f"wins must be a whole number >= 0 for {name!r}, got {token!r}",
                         line_number, raw)
    return int(token)
