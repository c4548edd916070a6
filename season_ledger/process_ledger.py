#!/usr/bin/env python3
"""CLI entry point for querying a season results ledger.

Usage:
    python process_ledger.py --data data/seasons.txt
    python process_ledger.py --data data/seasons.txt --query winners
    python process_ledger.py --data data/seasons.txt --query driver \\
        --driver "max verstappen"
    python process_ledger.py --data data/seasons.txt \\
        --csv ./output/summary.csv --pdf ./output/summary.pdf
"""

import argparse
import os
import sys

# Add parent directory to path for imports (skip when frozen by PyInstaller)
if not getattr(sys, 'frozen', False):
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from season_ledger.core.models import LedgerConfig, NamePolicy
from season_ledger.core.errors import ParseError
from season_ledger.core.queries import ROUNDING_MODES
from season_ledger.core.name_normalizer import audit_names, print_name_report
from season_ledger.core.validator import InputValidator
from season_ledger.core.menu import run_menu
from season_ledger.core.output_generator import (
    format_average_points, format_driver_points, format_points_ascending,
    format_season, format_total_wins, format_winners, generate_summary_csv,
)
from season_ledger.core.pdf_generator import generate_summary_pdf
from season_ledger.adapters.ledger_adapter import LedgerAdapter


QUERIES = ['winners', 'season', 'wins', 'average', 'ascending', 'driver']


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Query a season results ledger')
    parser.add_argument('--data', default=os.path.join('data', 'seasons.txt'),
                        help='Ledger text file (default: data/seasons.txt)')
    parser.add_argument('--rounding', default='half_up', choices=list(ROUNDING_MODES),
                        help='Rounding mode for average points (default: half_up)')
    parser.add_argument('--digits', type=int, default=2,
                        help='Fractional digits for average points (default 2)')
    parser.add_argument('--strict-names', action='store_true',
                        help="Only accept driver names typed in 'First Last' capitalization")
    parser.add_argument('--two-part-names', action='store_true',
                        help='Only accept two-part driver names (first and last)')
    parser.add_argument('--query', default=None, choices=QUERIES,
                        help='Answer one query and exit instead of showing the menu')
    parser.add_argument('--season', default=None, help='Season for --query season')
    parser.add_argument('--driver', default=None, help='Driver name for --query driver')
    parser.add_argument('--csv', default=None, help='Write the season summary CSV here')
    parser.add_argument('--pdf', default=None, help='Write the season summary PDF here')
    parser.add_argument('--title', default='Season Summary', help='Season summary PDF title')
    return parser


def run_query(args, ledger, config) -> int:
    """Answer a single --query; returns the process exit status."""
    validator = InputValidator(ledger, config.name_policy)

    if args.query == 'winners':
        lines = format_winners(ledger)
    elif args.query == 'season':
        result = validator.validate_season(args.season or '')
        if not result.ok:
            print(result.error)
            return 1
        lines = format_season(ledger, result.value)
    elif args.query == 'wins':
        lines = format_total_wins(ledger)
    elif args.query == 'average':
        lines = format_average_points(ledger, config)
    elif args.query == 'ascending':
        lines = format_points_ascending(ledger)
    elif args.query == 'driver':
        result = validator.validate_name(args.driver or '')
        if not result.ok:
            print(result.error)
            return 1
        lines = format_driver_points(ledger, result.value)
    else:
        print(f"Unknown query: {args.query}")
        return 1

    print('\n'.join(lines))
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.digits < 0:
        print(f"--digits must be >= 0, got {args.digits}")
        sys.exit(1)

    config = LedgerConfig(
        data_path=args.data,
        rounding=args.rounding,
        digits=args.digits,
        name_policy=NamePolicy(accept_any_case=not args.strict_names,
                               two_part_only=args.two_part_names),
    )

    print(f"Parsing {config.data_path}...")
    try:
        ledger = LedgerAdapter().parse(config.data_path)
    except (ParseError, OSError) as e:
        print(f"Error reading ledger: {e}")
        sys.exit(1)
    entry_count = sum(len(r.entries) for r in ledger.records)
    print(f"Parsed {len(ledger)} seasons, {entry_count} entries")

    print_name_report(audit_names(ledger.all_driver_names()))

    exported = False
    if args.csv:
        os.makedirs(os.path.dirname(os.path.abspath(args.csv)), exist_ok=True)
        generate_summary_csv(ledger, config, args.csv)
        print(f"Generated {args.csv}")
        exported = True
    if args.pdf:
        os.makedirs(os.path.dirname(os.path.abspath(args.pdf)), exist_ok=True)
        generate_summary_pdf(ledger, config, args.pdf, title=args.title)
        print(f"Generated {args.pdf}")
        exported = True

    if args.query:
        sys.exit(run_query(args, ledger, config))
    if not exported:
        run_menu(ledger, config)


if __name__ == '__main__':
    main()
