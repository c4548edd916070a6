"""Analytical queries over a parsed season ledger.

All functions are pure reads of the Ledger. Mappings come back in ledger
(file) order; callers sort for display.

Point arithmetic runs in a local decimal context sized to the operands, so
totals stay exact and quantizing to any number of digits cannot overflow
the default 28-digit precision.
"""

from decimal import (
    Decimal, ROUND_CEILING, ROUND_HALF_EVEN, ROUND_HALF_UP, getcontext, localcontext,
)

from .models import Entry, Ledger
from .name_normalizer import name_key


ROUNDING_MODES = {
    'half_up': ROUND_HALF_UP,
    'ceiling': ROUND_CEILING,
    'half_even': ROUND_HALF_EVEN,
}

ZERO = Decimal(0)


def _points_context(values, digits: int = 0):
    """Context wide enough to add `values` exactly and keep `digits` places.

    Guard digits grow with the number of values so a division by that count
    never rounds across a quantize boundary.
    """
    finite = [v for v in values if v.is_finite()]
    high = max((v.adjusted() for v in finite), default=0)
    low = min([v.as_tuple().exponent for v in finite] + [-digits])
    guard = len(str(len(finite))) + 6
    ctx = getcontext().copy()
    ctx.prec = max(ctx.prec, high - low + 1 + guard)
    return ctx


def _sum_points(points) -> Decimal:
    points = list(points)
    with localcontext(_points_context(points)):
        return sum(points, ZERO)


def round_points(value: Decimal, rounding: str = 'half_up', digits: int = 2) -> Decimal:
    """Quantize value to `digits` fractional digits with a named rounding mode."""
    if rounding not in ROUNDING_MODES:
        raise ValueError(f"Unknown rounding mode {rounding!r}; "
                         f"expected one of {', '.join(ROUNDING_MODES)}")
    if digits < 0:
        raise ValueError(f"digits must be >= 0, got {digits}")
    value = Decimal(value)
    with localcontext(_points_context([value], digits)):
        exponent = Decimal(1).scaleb(-digits)
        return value.quantize(exponent, rounding=ROUNDING_MODES[rounding])


def season_winners(ledger: Ledger) -> dict[int, Entry]:
    """Entry with the most points in each season.

    Ties go to the entry listed first. Seasons without entries have no winner
    and are left out.
    """
    winners = {}
    for record in ledger.records:
        best = None
        for entry in record.entries:
            if best is None or entry.points > best.points:
                best = entry
        if best is not None:
            winners[record.season] = best
    return winners


def total_wins_per_season(ledger: Ledger) -> dict[int, int]:
    return {record.season: sum(e.wins for e in record.entries)
            for record in ledger.records}


def total_points_per_season(ledger: Ledger) -> dict[int, Decimal]:
    return {record.season: _sum_points(e.points for e in record.entries)
            for record in ledger.records}


def average_points_per_season(ledger: Ledger, rounding: str = 'half_up',
                              digits: int = 2) -> dict[int, Decimal]:
    """Mean points per entry for each season, rounded.

    A season with no entries averages to exactly 0.
    """
    averages = {}
    for record in ledger.records:
        if not record.entries:
            averages[record.season] = ZERO
            continue
        points = [e.points for e in record.entries]
        total = _sum_points(points)
        with localcontext(_points_context(points + [total], digits)):
            mean = total / len(points)
        averages[record.season] = round_points(mean, rounding, digits)
    return averages


def seasons_by_total_points_ascending(ledger: Ledger) -> list[tuple[int, Decimal]]:
    """(season, total points) pairs, lowest total first.

    sorted() is stable, so equal totals keep ledger order.
    """
    totals = total_points_per_season(ledger)
    return sorted(totals.items(), key=lambda item: item[1])


def driver_career_points(ledger: Ledger, name: str) -> Decimal:
    """Total points across all seasons for every entry matching `name`.

    Matching ignores case and repeated whitespace. Unknown names total 0.
    """
    key = name_key(name)
    return _sum_points(e.points for record in ledger.records for e in record.entries
                       if name_key(e.name) == key)


def season_entries(ledger: Ledger, season: int) -> tuple:
    """Entries of one season. Raises KeyError for an unknown season."""
    return ledger.entries(season)
