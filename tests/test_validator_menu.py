"""Tests for input validation, the menu loop, report outputs and the CLI."""

import csv
import os
import sys

import fitz
import pytest

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from season_ledger.adapters.ledger_adapter import LedgerAdapter, parse_ledger_text
from season_ledger.core.menu import run_action, run_menu
from season_ledger.core.models import LedgerConfig, MenuAction, NamePolicy
from season_ledger.core.name_normalizer import (
    audit_names, canonical_name, name_key, names_match, print_name_report,
)
from season_ledger.core.output_generator import (
    format_average_points, format_driver_points, format_points_ascending,
    format_season, format_total_wins, format_winners, generate_summary_csv,
    season_summary_rows,
)
from season_ledger.core.pdf_generator import generate_summary_pdf
from season_ledger.core.validator import InputValidator
from season_ledger.process_ledger import main

REFERENCE_DIR = os.path.join(PROJECT_ROOT, 'tests', 'reference_data')
REFERENCE_LEDGER = os.path.join(REFERENCE_DIR, 'f1_seasons.txt')


@pytest.fixture(scope='module')
def ledger():
    return LedgerAdapter().parse(REFERENCE_LEDGER)


@pytest.fixture
def config():
    return LedgerConfig(data_path=REFERENCE_LEDGER)


@pytest.fixture
def validator(ledger):
    return InputValidator(ledger)


class ScriptedInput:
    """Feeds prepared tokens to read(); raises EOFError once exhausted."""

    def __init__(self, tokens):
        self.tokens = list(tokens)

    def __call__(self):
        if not self.tokens:
            raise EOFError
        return self.tokens.pop(0)


# ─── Name normalization ─────────────────────────────────────────────

class TestNameNormalizer:
    @pytest.mark.parametrize('raw, expected', [
        ('max verstappen', 'Max Verstappen'),
        ('  MAX    VERSTAPPEN ', 'Max Verstappen'),
        ('nyck de vries', 'Nyck De Vries'),
        ('', ''),
    ])
    def test_canonical_name(self, raw, expected):
        assert canonical_name(raw) == expected

    def test_name_key(self):
        assert name_key('  Max\t Verstappen ') == 'max verstappen'
        assert names_match('MAX VERSTAPPEN', 'max  verstappen')
        assert not names_match('Max Verstappen', 'Jos Verstappen')

    def test_audit_case_variants(self):
        report = audit_names(['Max Verstappen', 'max verstappen', 'Lewis Hamilton'])
        assert report['unique_drivers'] == ['Lewis Hamilton', 'Max Verstappen']
        assert report['case_variants'] == {
            'max verstappen': ['Max Verstappen', 'max verstappen'],
        }
        assert report['potential_duplicates'] == []

    def test_audit_near_duplicates(self):
        report = audit_names(['Carlos Sainz', 'Carlos Sainz Jr', 'Lewis Hamilton'])
        pairs = [(a, b) for a, b, _ in report['potential_duplicates']]
        assert pairs == [('Carlos Sainz', 'Carlos Sainz Jr')]

    def test_print_report(self, capsys):
        print_name_report(audit_names(['Max Verstappen', 'max verstappen']))
        out = capsys.readouterr().out
        assert '1 unique drivers' in out
        assert '"Max Verstappen", "max verstappen"' in out


# ─── Validator ──────────────────────────────────────────────────────

class TestMenuValidation:
    @pytest.mark.parametrize('token, expected', [('1', 1), (' 3 ', 3), ('7', 7)])
    def test_valid(self, validator, token, expected):
        result = validator.validate_menu_option(token)
        assert result.ok
        assert result.value == expected

    @pytest.mark.parametrize('token', ['0', '8', 'abc', '', '2.5'])
    def test_invalid(self, validator, token):
        result = validator.validate_menu_option(token)
        assert not result.ok
        assert 'between 1 and 7' in result.error
        assert f"'{token}'" in result.error

    def test_menu_size_follows_actions(self, validator):
        assert validator.menu_size == len(MenuAction) == 7


class TestSeasonValidation:
    def test_valid(self, validator):
        result = validator.validate_season('2021')
        assert result.ok and result.value == 2021

    def test_signed_and_padded(self, validator):
        assert validator.validate_season('+2021').value == 2021
        assert validator.validate_season(' 2022 ').value == 2022

    @pytest.mark.parametrize('token', ['1999', '2024', 'twenty', '', '2_023', '٢٠٢٣', '2023.0'])
    def test_invalid(self, validator, token):
        result = validator.validate_season(token)
        assert not result.ok
        assert 'between 2020 and 2023' in result.error


class TestNameValidation:
    def test_lowercase_accepted(self, validator):
        result = validator.validate_name('max verstappen')
        assert result.ok
        assert result.value == 'Max Verstappen'

    def test_messy_whitespace_accepted(self, validator):
        assert validator.validate_name('  LEWIS   hamilton ').value == 'Lewis Hamilton'

    def test_unknown_name(self, validator):
        result = validator.validate_name('Ayrton Senna')
        assert not result.ok
        assert 'Max Verstappen' in result.error

    @pytest.mark.parametrize('token', ['', '   ', None])
    def test_blank_name(self, validator, token):
        assert not validator.validate_name(token).ok

    def test_strict_case_policy(self, ledger):
        strict = InputValidator(ledger, NamePolicy(accept_any_case=False))
        assert strict.validate_name('Max Verstappen').value == 'Max Verstappen'
        assert strict.validate_name('  Max Verstappen  ').ok
        assert not strict.validate_name('max verstappen').ok
        assert not strict.validate_name('Max  Verstappen').ok

    def test_two_part_policy(self):
        led = parse_ledger_text('2023, Nyck De Vries: 0 0, Max Verstappen: 575 19')
        two_part = InputValidator(led, NamePolicy(two_part_only=True))
        assert two_part.validate_name('max verstappen').ok
        assert not two_part.validate_name('nyck de vries').ok
        assert InputValidator(led).validate_name('nyck de vries').ok

    def test_example_is_first_seen_name(self):
        led = parse_ledger_text('2020, Lewis Hamilton: 347 11\n2021, Max Verstappen: 395.5 10')
        result = InputValidator(led).validate_name('nobody')
        assert result.error.endswith('Lewis Hamilton')

    def test_error_shows_canonical_token(self, validator):
        result = validator.validate_name('ayrton   SENNA')
        assert "'Ayrton Senna'" in result.error

    def test_example_name_is_canonical(self):
        led = parse_ledger_text('2020, lewis hamilton: 1 0')
        result = InputValidator(led).validate_name('nobody')
        assert result.error.endswith('format: Lewis Hamilton')


# ─── Outputs ────────────────────────────────────────────────────────

class TestFormatting:
    def test_winners(self, ledger):
        lines = format_winners(ledger)
        assert lines[0] == 'Season 2020: Winner: Lewis Hamilton, Points: 347, Wins: 11'
        assert lines[-1] == 'Season 2023: Winner: Max Verstappen, Points: 575, Wins: 19'

    def test_winners_empty_season(self):
        assert format_winners(parse_ledger_text('2020,')) == ['Season 2020: no entries']

    def test_season(self, ledger):
        assert format_season(ledger, 2023) == [
            'Season: 2023:',
            'Driver: Max Verstappen, Points: 575, Wins: 19',
            'Driver: Sergio Perez, Points: 285, Wins: 2',
            'Driver: Lewis Hamilton, Points: 234, Wins: 1',
        ]

    def test_total_wins(self, ledger):
        assert format_total_wins(ledger)[-1] == 'Season 2023: Total Wins: 22'

    def test_average(self, ledger, config):
        assert format_average_points(ledger, config)[0] == 'Season: 2020: Average Points: 261.33'

    def test_points_ascending(self, ledger):
        assert format_points_ascending(ledger)[0] == 'Season: 2020: Total Points: 784'

    def test_driver_points(self, ledger):
        assert format_driver_points(ledger, 'Max Verstappen') == [
            'Driver: Max Verstappen Total Points: 1638.5',
        ]


class TestSummaryExports:
    def test_summary_rows(self, ledger, config):
        rows = season_summary_rows(ledger, config)
        assert [r['season'] for r in rows] == [2020, 2021, 2022, 2023]
        assert rows[-1]['winner'] == 'Max Verstappen'
        assert rows[-1]['total_wins'] == 22
        assert str(rows[-1]['average_points']) == '364.67'

    def test_csv(self, ledger, config, tmp_path):
        output = str(tmp_path / 'summary.csv')
        generate_summary_csv(ledger, config, output)
        with open(output, newline='') as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 4
        assert rows[0] == {
            'season': '2020', 'winner': 'Lewis Hamilton', 'winner_points': '347',
            'winner_wins': '11', 'total_wins': '15', 'average_points': '261.33',
            'total_points': '784',
        }

    def test_pdf(self, ledger, config, tmp_path):
        output = str(tmp_path / 'summary.pdf')
        generate_summary_pdf(ledger, config, output, title='F1 Seasons')
        doc = fitz.open(output)
        try:
            assert doc.page_count == 1
            text = doc[0].get_text()
        finally:
            doc.close()
        assert 'F1 SEASONS' in text
        assert 'Max Verstappen' in text

    @pytest.mark.parametrize('season_count, pages', [(59, 1), (80, 2)])
    def test_pdf_long_ledger_paginates(self, config, tmp_path, season_count, pages):
        led = parse_ledger_text('\n'.join(f'{1950 + i}, A B: {i} 0' for i in range(season_count)))
        output = str(tmp_path / 'long.pdf')
        generate_summary_pdf(led, config, output)
        doc = fitz.open(output)
        try:
            assert doc.page_count == pages
            last = doc[doc.page_count - 1].get_text()
        finally:
            doc.close()
        assert str(1950 + season_count - 1) in last


# ─── Menu ───────────────────────────────────────────────────────────

class TestMenu:
    def test_invalid_then_winners_then_quit(self, ledger, config):
        out = []
        run_menu(ledger, config, read=ScriptedInput(['9', '1', '7']), write=out.append)
        assert any('between 1 and 7' in line for line in out)
        assert 'Season 2023: Winner: Max Verstappen, Points: 575, Wins: 19' in out
        assert out[-1] == 'Quitting the application...'

    def test_season_prompt(self, ledger, config):
        out = []
        run_menu(ledger, config, read=ScriptedInput(['2', '1990', '2', '2022', '7']),
                 write=out.append)
        assert any('between 2020 and 2023' in line for line in out)
        assert 'Driver: Charles Leclerc, Points: 308, Wins: 3' in out

    def test_driver_prompt(self, ledger, config):
        out = []
        run_menu(ledger, config, read=ScriptedInput(['6', 'lewis hamilton', '7']),
                 write=out.append)
        assert 'Driver: Lewis Hamilton Total Points: 968.5' in out

    def test_end_of_input_stops_loop(self, ledger, config):
        out = []
        run_menu(ledger, config, read=ScriptedInput(['3']), write=out.append)
        assert 'Season 2020: Total Wins: 15' in out

    def test_quit_action_returns_false(self, ledger, config, validator):
        assert run_action(MenuAction.QUIT, ledger, config, validator,
                          read=ScriptedInput([]), write=lambda _: None) is False
        assert run_action(MenuAction.TOTAL_WINS, ledger, config, validator,
                          read=ScriptedInput([]), write=lambda _: None) is True


# ─── CLI ────────────────────────────────────────────────────────────

class TestCli:
    def test_query_winners(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--data', REFERENCE_LEDGER, '--query', 'winners'])
        assert exc.value.code == 0
        out = capsys.readouterr().out
        assert 'Parsed 4 seasons, 12 entries' in out
        assert 'Season 2023: Winner: Max Verstappen, Points: 575, Wins: 19' in out

    def test_query_driver(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--data', REFERENCE_LEDGER, '--query', 'driver', '--driver', 'MAX verstappen'])
        assert exc.value.code == 0
        assert 'Driver: Max Verstappen Total Points: 1638.5' in capsys.readouterr().out

    def test_query_average_ceiling(self, capsys):
        with pytest.raises(SystemExit):
            main(['--data', REFERENCE_LEDGER, '--query', 'average',
                  '--rounding', 'ceiling', '--digits', '0'])
        assert 'Season: 2023: Average Points: 365' in capsys.readouterr().out

    def test_strict_names_rejects_lowercase(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--data', REFERENCE_LEDGER, '--strict-names',
                  '--query', 'driver', '--driver', 'max verstappen'])
        assert exc.value.code == 1
        assert 'format: Max Verstappen' in capsys.readouterr().out

    def test_bad_season_argument(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--data', REFERENCE_LEDGER, '--query', 'season', '--season', '1990'])
        assert exc.value.code == 1

    def test_parse_failure_aborts(self, tmp_path, capsys):
        bad = tmp_path / 'bad.txt'
        bad.write_text('2023, Max Verstappen: 575\n')
        with pytest.raises(SystemExit) as exc:
            main(['--data', str(bad), '--query', 'winners'])
        assert exc.value.code == 1
        assert 'Error reading ledger: line 1' in capsys.readouterr().out

    def test_invalid_utf8_aborts(self, tmp_path, capsys):
        bad = tmp_path / 'latin1.txt'
        bad.write_bytes(b'2023, Max \xff\xfe: 1 0\n')
        with pytest.raises(SystemExit) as exc:
            main(['--data', str(bad), '--query', 'winners'])
        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert 'Error reading ledger' in out
        assert 'UTF-8' in out

    def test_query_average_many_digits(self, tmp_path, capsys):
        data = tmp_path / 'one.txt'
        data.write_text('2023, A B: 575 19\n')
        with pytest.raises(SystemExit):
            main(['--data', str(data), '--query', 'average', '--digits', '30'])
        assert '575.' + '0' * 30 in capsys.readouterr().out

    def test_missing_file_aborts(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(['--data', str(tmp_path / 'missing.txt')])
        assert exc.value.code == 1

    def test_exports(self, tmp_path, capsys):
        csv_path = tmp_path / 'out' / 'summary.csv'
        pdf_path = tmp_path / 'out' / 'summary.pdf'
        main(['--data', REFERENCE_LEDGER, '--csv', str(csv_path), '--pdf', str(pdf_path)])
        assert csv_path.exists()
        assert pdf_path.exists()
        assert f'Generated {csv_path}' in capsys.readouterr().out
