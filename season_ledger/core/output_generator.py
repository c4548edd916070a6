"""Output generation for season ledger queries.

Produces:
  - Console lines for each menu query
  - Season summary rows (shared by the CSV and PDF exports)
  - Season summary CSV
"""

import csv

from .models import Ledger, LedgerConfig
from .queries import (
    average_points_per_season, driver_career_points, season_entries,
    season_winners, seasons_by_total_points_ascending,
    total_points_per_season, total_wins_per_season,
)


SUMMARY_FIELDS = ['season', 'winner', 'winner_points', 'winner_wins',
                  'total_wins', 'average_points', 'total_points']


def format_winners(ledger: Ledger) -> list[str]:
    winners = season_winners(ledger)
    lines = []
    for season in ledger.seasons():
        if season not in winners:
            lines.append(f'Season {season}: no entries')
            continue
        w = winners[season]
        lines.append(f'Season {season}: Winner: {w.name}, Points: {w.points}, Wins: {w.wins}')
    return lines


def format_season(ledger: Ledger, season: int) -> list[str]:
    lines = [f'Season: {season}:']
    for entry in season_entries(ledger, season):
        lines.append(f'Driver: {entry.name}, Points: {entry.points}, Wins: {entry.wins}')
    return lines


def format_total_wins(ledger: Ledger) -> list[str]:
    wins = total_wins_per_season(ledger)
    return [f'Season {season}: Total Wins: {wins[season]}' for season in ledger.seasons()]


def format_average_points(ledger: Ledger, config: LedgerConfig) -> list[str]:
    averages = average_points_per_season(ledger, config.rounding, config.digits)
    return [f'Season: {season}: Average Points: {averages[season]}'
            for season in ledger.seasons()]


def format_points_ascending(ledger: Ledger) -> list[str]:
    return [f'Season: {season}: Total Points: {total}'
            for season, total in seasons_by_total_points_ascending(ledger)]


def format_driver_points(ledger: Ledger, name: str) -> list[str]:
    return [f'Driver: {name} Total Points: {driver_career_points(ledger, name)}']


def season_summary_rows(ledger: Ledger, config: LedgerConfig) -> list[dict]:
    """One summary dict per season, ascending by season."""
    winners = season_winners(ledger)
    wins = total_wins_per_season(ledger)
    averages = average_points_per_season(ledger, config.rounding, config.digits)
    totals = total_points_per_season(ledger)

    rows = []
    for season in ledger.seasons():
        winner = winners.get(season)
        rows.append({
            'season': season,
            'winner': winner.name if winner else '',
            'winner_points': winner.points if winner else '',
            'winner_wins': winner.wins if winner else '',
            'total_wins': wins[season],
            'average_points': averages[season],
            'total_points': totals[season],
        })
    return rows


def generate_summary_csv(ledger: Ledger, config: LedgerConfig, output_path: str):
    """Write the season summary as CSV, one row per season."""
    rows = season_summary_rows(ledger, config)
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
